"""The external test command, run as an async subprocess.

Argument template::

    <test_command> branch <branch> <tag> mode=<mode> milolibs=<milolibs>

stdout and stderr are the only failure channel. Exceeding the timeout
kills the process and the captured output gains a ``Timeout ... exceeded``
line so it classifies as a timeout like any other.
"""

import asyncio
import logging
import os
import shlex
import time
from pathlib import Path
from typing import Optional, Protocol

from nalagen.exceptions import TestCommandError
from nalagen.inputs import validate_branch, validate_mode, validate_run_argument, validate_tag
from nalagen.types import CommandOutput

logger = logging.getLogger(__name__)


class TestRunner(Protocol):
    __test__ = False

    async def run(self, tag: str, branch: str, mode: str, milolibs: str) -> CommandOutput:
        ...


class TestCommand:
    """Runs the project's test command in its root directory.

    Args:
        command: base command line, split with shlex
        cwd: project root the command runs in
        timeout: seconds before the process is killed
        env: extra environment variables for the child
    """
    __test__ = False

    def __init__(
        self,
        command: str = "npm run nala",
        cwd: Optional[Path] = None,
        timeout: float = 300.0,
        env: Optional[dict[str, str]] = None,
    ):
        self.command = command
        self.cwd = cwd
        self.timeout = timeout
        self.env = env

    def argv(self, tag: str, branch: str, mode: str, milolibs: str) -> list[str]:
        validate_branch(branch)
        validate_tag(tag)
        validate_mode(mode)
        validate_run_argument(milolibs, field="milolibs")
        return [*shlex.split(self.command), "branch", branch, tag, f"mode={mode}", f"milolibs={milolibs}"]

    async def run(self, tag: str, branch: str, mode: str, milolibs: str) -> CommandOutput:
        """Run once and capture output.

        Raises:
            TestCommandError: the command could not be started at all
        """
        cmd = self.argv(tag, branch, mode, milolibs)
        logger.info("Running: %s (cwd=%s)", " ".join(cmd), self.cwd or ".")
        started = time.monotonic()
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(self.cwd) if self.cwd else None,
                env=self._child_env(),
            )
        except OSError as exc:
            raise TestCommandError(f"Could not start test command: {exc}", command=cmd) from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            proc.kill()
            stdout, stderr = await proc.communicate()
            elapsed = int((time.monotonic() - started) * 1000)
            logger.warning("Test command timed out after %ss", self.timeout)
            return CommandOutput(
                exit_code=proc.returncode,
                stdout=stdout.decode("utf-8", errors="replace"),
                stderr=(
                    stderr.decode("utf-8", errors="replace")
                    + f"\nTimeout of {self.timeout}s exceeded"
                ),
                timed_out=True,
                duration_ms=elapsed,
            )

        return CommandOutput(
            exit_code=proc.returncode,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
            duration_ms=int((time.monotonic() - started) * 1000),
        )

    def _child_env(self) -> Optional[dict[str, str]]:
        if not self.env:
            return None
        return {**os.environ, **self.env}
