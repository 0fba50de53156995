"""Exception hierarchy for the Homebrew provider."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from .models import ChecksumMismatch


class ProviderError(Exception):
    """An operation on a package failed."""


class ExecutionFailure(ProviderError):
    """A brew subprocess could not be spawned or exited non-zero."""

    def __init__(
        self,
        message: str,
        argv: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        output: str = "",
    ):
        super().__init__(message)
        self.argv = list(argv or [])
        self.returncode = returncode
        self.output = output


class BrewOwnershipError(ProviderError, PermissionError):
    """The brew executable is owned by root."""


class ChecksumMismatchError(ProviderError):
    """Cached downloads failed checksum verification and were removed.

    The install or upgrade has not happened; a later run may retry it.
    """

    def __init__(self, package: str, operation: str, mismatch: "ChecksumMismatch"):
        super().__init__(
            f"Could not {operation} package: checksum error for package "
            f"{package} in files {list(mismatch.files)}"
        )
        self.package = package
        self.operation = operation
        self.mismatch = mismatch
