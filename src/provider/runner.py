"""Run brew subprocesses with a sanitized identity and environment."""

from __future__ import annotations

import logging
import subprocess
from typing import Optional, Sequence

from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants

from .context import ExecutionContext, resolve_context
from .errors import ExecutionFailure

logger = logging.getLogger(__name__)


class BrewRunner:
    """Executes brew commands as the owner of the brew binary.

    The execution context is resolved on first use and cached for the life of
    the runner.
    """

    def __init__(
        self,
        brew_path: Optional[str] = None,
        context: Optional[ExecutionContext] = None,
    ):
        self.brew_path = brew_path or (context.brew_path if context else Constants.BREW_PATH)
        self._context = context

    @property
    def context(self) -> ExecutionContext:
        if self._context is None:
            self._context = resolve_context(self.brew_path)
        return self._context

    def execute(
        self,
        argv: Sequence[object],
        fail_on_error: bool = False,
        combine: bool = False,
    ) -> str:
        """Run ``argv`` and return its stdout (stdout and stderr when ``combine``).

        Raises:
            ExecutionFailure: the process could not be started, or it exited
                non-zero and ``fail_on_error`` is set.
        """
        ctx = self.context
        cmd = [str(a) for a in argv]
        cmd_text = " ".join(cmd)

        kwargs = {
            "stdout": subprocess.PIPE,
            "stderr": subprocess.STDOUT if combine else subprocess.PIPE,
            "env": ctx.env,
            "text": True,
            "encoding": "utf-8",
            "errors": "replace",
            "check": False,
        }
        if ctx.uid is not None:
            kwargs["user"] = ctx.uid
            kwargs["group"] = ctx.gid

        with Timer() as t:
            try:
                proc = subprocess.run(cmd, **kwargs)  # noqa: S603
            except OSError as exc:
                raise ExecutionFailure(
                    f"Could not execute '{cmd_text}': {exc}", argv=cmd
                ) from exc

        stdout = proc.stdout or ""
        stderr = "" if combine else (proc.stderr or "")
        if is_debug_enabled(logger):
            logger.debug(
                "Executed %s",
                cmd_text,
                extra=extra_context(
                    event="subprocess",
                    component="runner",
                    action=cmd[1] if len(cmd) > 1 else None,
                    status_code=proc.returncode,
                    duration_ms=t.duration_ms(),
                ),
            )

        if fail_on_error and proc.returncode != 0:
            detail = "\n".join(part for part in (stdout.strip(), stderr.strip()) if part)
            raise ExecutionFailure(
                f"Execution of '{cmd_text}' returned {proc.returncode}: {detail}",
                argv=cmd,
                returncode=proc.returncode,
                output=stdout + stderr,
            )
        return stdout
