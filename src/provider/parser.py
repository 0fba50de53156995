"""Parsers for brew's line-oriented text output."""

import logging
import re
from typing import List, Optional, Pattern, Tuple

from .models import ChecksumMismatch, PackageRecord

logger = logging.getLogger(__name__)

_NAME_VERSION_RE = re.compile(r"^(\S+)\s+(.+)")
_CHECKSUM_RE = re.compile(r"sha256 checksum", re.IGNORECASE)
_ALREADY_DOWNLOADED_RE = re.compile(r"Already downloaded: (.*)")
NOT_INSTALLED_LINE = "Not installed"

# Tried in order against the text after "<name>: " in `brew info`; the first
# pattern that matches wins and group 1 is the version.
VERSION_MATCHERS: List[Tuple[str, Pattern[str]]] = [
    ("bottled", re.compile(r"stable (\d+[^\s]*)\s+\(bottled\)")),
    ("stable_head", re.compile(r"stable (\d+.*), HEAD")),
    ("stable", re.compile(r"stable (\d+.*)")),
    ("auto_updates", re.compile(r"(\d+.*)\s+\(auto_updates\)")),
    ("any", re.compile(r"(\d+.*)")),
]


def name_version_split(line: str) -> Optional[PackageRecord]:
    """Split a ``<name> <version...>`` listing line into a PackageRecord.

    Lines without a name and a version are logged and yield None.
    """
    text = line.rstrip()
    match = _NAME_VERSION_RE.match(text)
    if match is None:
        logger.warning("Could not match %r", line)
        return None
    return PackageRecord(name=match.group(1), version=match.group(2))


def parse_listing(text: str) -> List[PackageRecord]:
    records = []
    for line in text.splitlines():
        record = name_version_split(line)
        if record is not None:
            records.append(record)
    return records


def match_version(versions: str) -> Optional[str]:
    """Run VERSION_MATCHERS over the metadata text of a `brew info` line."""
    for label, pattern in VERSION_MATCHERS:
        m = pattern.search(versions)
        if m:
            logger.debug("Version %s matched by %s", m.group(1), label)
            return m.group(1)
    return None


def extract_latest_version(output: str, name: str) -> Optional[str]:
    """Find the latest version of ``name`` in `brew info` output.

    Only lines of the form ``<name>: <metadata>`` (case-insensitive) are
    considered; the first one whose metadata yields a version wins.
    """
    metadata_re = re.compile(rf"{re.escape(name)}:\s(.*)", re.IGNORECASE)
    for line in output.splitlines():
        line = line.rstrip("\r\n")
        if not line:
            continue
        m = metadata_re.search(line)
        if m is None:
            continue
        versions = m.group(1)
        logger.debug("  Latest versions for %s: %s", name, versions)
        version = match_version(versions)
        if version is not None:
            return version
    return None


def find_checksum_mismatch(output: str) -> Optional[ChecksumMismatch]:
    """Detect a sha256 mismatch report and collect the cached files it names."""
    if not output or not _CHECKSUM_RE.search(output):
        return None
    files = tuple(
        path.strip() for path in _ALREADY_DOWNLOADED_RE.findall(output) if path.strip()
    )
    return ChecksumMismatch(files=files)


def is_not_installed(output: str) -> bool:
    return any(line.strip() == NOT_INSTALLED_LINE for line in output.splitlines())
