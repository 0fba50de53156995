"""Homebrew package provider.

Maps the host's package lifecycle (query, latest, install, uninstall,
update) onto `brew` invocations and normalizes the results into
PackageRecord instances. Formulae and casks are both handled.
"""
from __future__ import annotations

import logging
import os
import sys
from typing import List, Optional

from constants import Constants

from . import parser
from .errors import ChecksumMismatchError, ExecutionFailure, ProviderError
from .models import ChecksumMismatch, Ensure, PackageRecord, ResourceSpec
from .resource import install_name, install_options, resource_name
from .runner import BrewRunner

logger = logging.getLogger(__name__)


class HomebrewProvider:
    """Package management using Homebrew (+ casks!) on macOS."""

    FEATURES = frozenset(
        {"installable", "uninstallable", "upgradeable", "versionable", "install_options"}
    )

    def __init__(self, resource: ResourceSpec, runner: Optional[BrewRunner] = None):
        self.resource = resource
        self.runner = runner or BrewRunner()
        self.properties: Optional[PackageRecord] = None

    # ---------- class-level helpers ----------

    @classmethod
    def suitable(cls, runner: Optional[BrewRunner] = None) -> bool:
        """True on a supported platform with an executable brew binary."""
        brew = (runner or BrewRunner()).brew_path
        if sys.platform not in Constants.SUPPORTED_PLATFORMS:
            logger.debug("Platform %s not supported by %s", sys.platform, Constants.PROVIDER_NAME)
            return False
        return os.path.isfile(brew) and os.access(brew, os.X_OK)

    @classmethod
    def instances(cls, runner: Optional[BrewRunner] = None) -> List["HomebrewProvider"]:
        """One provider per installed package, each carrying its record."""
        runner = runner or BrewRunner()
        providers = []
        for record in cls.package_list(runner):
            provider = cls(ResourceSpec(name=record.name, ensure=Ensure.PRESENT), runner)
            provider.properties = record
            providers.append(provider)
        return providers

    @staticmethod
    def package_list(runner: BrewRunner, justme: Optional[str] = None) -> List[PackageRecord]:
        """List installed packages, optionally only those starting with ``justme``."""
        logger.debug("Listing installed packages")
        brew = runner.brew_path
        try:
            if justme:
                result = runner.execute([brew, "list", "--versions", "--cask"])
                result += runner.execute([brew, "list", "--versions", "--formulae"])
                if justme in result:
                    logger.debug("Found package %s", justme)
                    lines = [ln for ln in result.split("\n") if ln.startswith(justme)]
                    result = "\n".join(lines)
                else:
                    logger.debug("Package %s not installed", justme)
                    return []
            else:
                result = runner.execute([brew, "list", "--versions"])
        except ExecutionFailure as exc:
            raise ProviderError(f"Could not list packages: {exc}") from exc
        return parser.parse_listing(result)

    # ---------- name resolution ----------

    @property
    def name(self) -> str:
        return self.resource.name

    @property
    def resource_name(self) -> str:
        return resource_name(self.resource)

    @property
    def install_name(self) -> str:
        return install_name(self.resource)

    @property
    def install_options(self) -> List[str]:
        return install_options(self.resource)

    def _brew(self, *args: str) -> List[str]:
        return [self.runner.brew_path, *args]

    # ---------- lifecycle ----------

    def query(self) -> Optional[PackageRecord]:
        """Current record for this package, or None when not installed."""
        name = self.resource_name
        records = self.package_list(self.runner, justme=name)
        if not records:
            return None
        for record in records:
            if record.name == name:
                return record
        return records[0]

    def latest(self) -> Optional[str]:
        """Latest version brew would install, or None when brew reports none."""
        name = self.resource_name
        logger.debug("Querying latest for %s package...", name)
        try:
            output = self.runner.execute(self._brew("info", name), fail_on_error=True)
        except ExecutionFailure as exc:
            raise ProviderError(f"Could not query latest version of package: {exc}") from exc
        return parser.extract_latest_version(output, self.resource.name)

    def install(self) -> None:
        logger.debug("Package %s found, installing...", self.install_name)
        self._run_with_checksum_recovery(
            "install", self._brew("install", self.install_name, *self.install_options)
        )

    def uninstall(self) -> None:
        logger.debug("Uninstalling %s", self.resource_name)
        try:
            self.runner.execute(self._brew("uninstall", self.resource_name), fail_on_error=True)
        except ExecutionFailure as exc:
            raise ProviderError(f"Could not uninstall package: {exc}") from exc

    def update(self) -> None:
        if not self.installed():
            self.install()
            return
        logger.debug("Package %s found, upgrading...", self.resource_name)
        self._run_with_checksum_recovery(
            "upgrade", self._brew("upgrade", self.install_name, *self.install_options)
        )

    def installed(self) -> bool:
        logger.debug("Check if %s package installed", self.resource_name)
        try:
            output = self.runner.execute(self._brew("info", self.install_name))
        except ExecutionFailure as exc:
            raise ProviderError(f"Could not get status of package: {exc}") from exc
        return not parser.is_not_installed(output)

    # ---------- checksum recovery ----------

    def _run_with_checksum_recovery(self, operation: str, argv: List[str]) -> None:
        try:
            output = self.runner.execute(argv, fail_on_error=True, combine=True)
        except ExecutionFailure as exc:
            if parser.find_checksum_mismatch(exc.output) is None:
                raise ProviderError(f"Could not {operation} package: {exc}") from exc
            output = exc.output
        mismatch = parser.find_checksum_mismatch(output)
        if mismatch is not None:
            self.fix_checksum(mismatch, operation)

    def fix_checksum(self, mismatch: ChecksumMismatch, operation: str = "install") -> None:
        """Delete cached downloads that failed verification, then fail.

        Always raises ChecksumMismatchError so the host retries on a later run.
        """
        logger.debug("Fixing checksum error...")
        for path in mismatch.files:
            try:
                os.remove(path)
            except OSError as exc:
                logger.warning("Could not remove mismatched checksum file %s: %s", path, exc)
        raise ChecksumMismatchError(self.name, operation, mismatch)
