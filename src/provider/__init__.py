"""Homebrew provider package.

This package manages Homebrew formulae and casks:
- context.py: brew binary ownership and subprocess identity
- runner.py: subprocess execution with a sanitized environment
- parser.py: parsing of `brew list` / `brew info` / install output
- resource.py: resource and install name resolution
- homebrew.py: lifecycle operations (query, latest, install, uninstall, update)
- state.py: desired-state reconciliation
"""

from .errors import (  # noqa: F401
    BrewOwnershipError,
    ChecksumMismatchError,
    ExecutionFailure,
    ProviderError,
)
from .homebrew import HomebrewProvider  # noqa: F401
from .models import Ensure, PackageRecord, PackageState, ResourceSpec  # noqa: F401
from .runner import BrewRunner  # noqa: F401
