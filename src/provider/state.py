"""Reconcile a desired ResourceSpec against what brew reports.

States are absent, present and outdated; install, uninstall and update are
the transitions between them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

import semantic_version

from .models import Ensure, PackageRecord, PackageState, ResourceSpec

if TYPE_CHECKING:
    from .homebrew import HomebrewProvider

logger = logging.getLogger(__name__)

INSTALL = "install"
UNINSTALL = "uninstall"
UPDATE = "update"


@dataclass
class ReconcileResult:
    """Outcome of one reconciliation pass for a package."""
    name: str
    before: PackageState
    action: Optional[str]
    after_ensure: Optional[str]


def _coerce(version: str) -> Optional[semantic_version.Version]:
    try:
        return semantic_version.Version.coerce(version)
    except ValueError:
        return None


def is_outdated(installed_versions: Iterable[str], latest: str) -> bool:
    """True when ``latest`` is newer than every installed version."""
    installed = [v for v in installed_versions if v]
    if not installed or latest in installed:
        return False
    latest_v = _coerce(latest)
    parsed = [_coerce(v) for v in installed]
    if latest_v is None or any(p is None for p in parsed):
        logger.debug("Falling back to string comparison for %s vs %s", installed, latest)
        return True
    return all(p < latest_v for p in parsed)


def classify(record: Optional[PackageRecord], latest: Optional[str] = None) -> PackageState:
    if record is None:
        return PackageState.ABSENT
    if latest and is_outdated(record.versions, latest):
        return PackageState.OUTDATED
    return PackageState.PRESENT


def plan_action(
    spec: ResourceSpec,
    record: Optional[PackageRecord],
    latest: Optional[str] = None,
) -> Optional[str]:
    """Operation needed to move from ``record`` to ``spec.ensure``, or None."""
    ensure = spec.ensure
    if ensure in (Ensure.ABSENT, Ensure.PURGED):
        return UNINSTALL if record is not None else None
    if record is None:
        return INSTALL
    if ensure in (Ensure.PRESENT, Ensure.INSTALLED, Ensure.HELD):
        return None
    if ensure is Ensure.LATEST:
        return UPDATE if classify(record, latest) is PackageState.OUTDATED else None
    wanted = str(ensure).lower()
    if wanted in (v.lower() for v in record.versions):
        return None
    return INSTALL


def reconcile(provider: "HomebrewProvider", dry_run: bool = False) -> ReconcileResult:
    """Bring one package to its desired state.

    ProviderError subclasses raised by the provider propagate unchanged.
    """
    spec = provider.resource
    record = provider.query()
    latest = provider.latest() if spec.ensure is Ensure.LATEST and record is not None else None
    before = classify(record, latest)
    action = plan_action(spec, record, latest)

    if action is None:
        logger.info("%s is in sync (%s)", provider.resource_name, before.value)
    elif dry_run:
        logger.info("Would %s %s", action, provider.resource_name)
    else:
        logger.info("Running %s for %s", action, provider.resource_name)
        getattr(provider, action)()

    after = None
    if action is None or dry_run:
        after = record.version if record is not None else None
    elif action != UNINSTALL:
        current = provider.query()
        after = current.version if current is not None else None
    return ReconcileResult(
        name=provider.resource_name, before=before, action=action, after_ensure=after
    )
