"""Resolve who brew runs as.

Homebrew refuses to operate on a root-owned prefix, so every invocation runs
as the owner of the brew executable with HOME pointing at that owner's home.
The lookup is done once and the result passed to the runner.
"""
from __future__ import annotations

import logging
import os
import pwd
from dataclasses import dataclass
from typing import Dict, Optional

from .errors import BrewOwnershipError, ExecutionFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionContext:
    """Identity and environment for brew subprocesses."""
    brew_path: str
    owner_uid: int
    owner_gid: int
    home: str
    privileged: bool = False

    @property
    def uid(self) -> Optional[int]:
        """uid to switch to, only possible when running as root."""
        return self.owner_uid if self.privileged else None

    @property
    def gid(self) -> Optional[int]:
        return self.owner_gid if self.privileged else None

    @property
    def env(self) -> Dict[str, str]:
        return {"HOME": self.home}


def resolve_context(brew_path: str) -> ExecutionContext:
    """Stat the brew binary and build the ExecutionContext for it.

    Raises:
        BrewOwnershipError: brew is owned by root.
        ExecutionFailure: brew is missing or its owner has no passwd entry.
    """
    try:
        st = os.stat(brew_path)
    except OSError as exc:
        raise ExecutionFailure(
            f"Could not stat {brew_path}: {exc}", argv=[brew_path]
        ) from exc

    owner, group = st.st_uid, st.st_gid
    if owner == 0:
        raise BrewOwnershipError(
            'Homebrew does not support installations owned by the "root" user. '
            f"Please check the permissions of {brew_path}"
        )

    try:
        home = pwd.getpwuid(owner).pw_dir
    except KeyError as exc:
        raise ExecutionFailure(
            f"Could not find a home directory for uid {owner} owning {brew_path}",
            argv=[brew_path],
        ) from exc

    privileged = os.getuid() == 0
    logger.debug(
        "brew owner uid=%s gid=%s home=%s privileged=%s", owner, group, home, privileged
    )
    return ExecutionContext(
        brew_path=brew_path,
        owner_uid=owner,
        owner_gid=group,
        home=home,
        privileged=privileged,
    )
