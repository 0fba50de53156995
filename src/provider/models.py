"""Data models for Homebrew package resources and listing records."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple, Union

from constants import Constants


class Ensure(Enum):
    """Generic desired-state markers; anything else is an explicit version."""
    PRESENT = "present"
    INSTALLED = "installed"
    ABSENT = "absent"
    PURGED = "purged"
    HELD = "held"
    LATEST = "latest"


class PackageState(Enum):
    """Observed state of a package on the host."""
    ABSENT = "absent"
    PRESENT = "present"
    OUTDATED = "outdated"


EnsureValue = Union[Ensure, str]


def normalize_ensure(value: Union[Ensure, str, bool]) -> EnsureValue:
    """Map booleans and marker strings onto Ensure; keep version strings as-is."""
    if isinstance(value, Ensure):
        return value
    if isinstance(value, bool):
        return Ensure.PRESENT if value else Ensure.ABSENT
    text = str(value).strip()
    try:
        return Ensure(text.lower())
    except ValueError:
        return text


@dataclass
class ResourceSpec:
    """Desired state for one package, as supplied by the host."""
    name: str
    ensure: EnsureValue = Ensure.PRESENT
    install_options: List[Any] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("ResourceSpec.name must be a non-empty str")
        self.ensure = normalize_ensure(self.ensure)
        if self.ensure == "":
            raise ValueError("ResourceSpec.ensure must not be empty")
        self.install_options = list(self.install_options or [])

    @property
    def is_marker(self) -> bool:
        return isinstance(self.ensure, Ensure)


@dataclass
class PackageRecord:
    """One installed package as reported by ``brew list --versions``."""
    name: str
    version: str
    provider: str = Constants.PROVIDER_NAME

    @property
    def versions(self) -> List[str]:
        """Individual installed versions (brew lists several side by side)."""
        return self.version.split()

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "ensure": self.version, "provider": self.provider}


@dataclass(frozen=True)
class ChecksumMismatch:
    """Cached download files that brew rejected for a bad sha256."""
    files: Tuple[str, ...] = ()
