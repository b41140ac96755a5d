"""Run substitution commands through the platform shell."""

import contextlib
import logging
import os
import signal
import subprocess
import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeAlias

logger = logging.getLogger(__name__)

LAUNCH_FAILED = -1

# How long to drain output after killing a timed-out command
KILL_DRAIN_TIMEOUT = 0.5


@dataclass
class ShellResult:
    """Outcome of one shell command.

    returncode is LAUNCH_FAILED when the process never started; error then
    holds the cause. Any other returncode means the process ran to
    completion, whatever its exit status, and error is None.
    """

    returncode: int
    stdout: str = ""
    error: BaseException | None = None

    @property
    def launched(self) -> bool:
        return self.returncode != LAUNCH_FAILED


ShellRunner: TypeAlias = Callable[[float, str, str], ShellResult]


def run_in_shell(timeout: float, cwd: str, command: str) -> ShellResult:
    """Run command with the platform shell in cwd and capture its stdout.

    Raises subprocess.TimeoutExpired if the command outlives timeout; the
    child (and, on POSIX, its process group) is killed and reaped first.
    """
    logger.debug("running %r in %s (timeout=%ss)", command, cwd, timeout)
    try:
        proc = subprocess.Popen(
            command,
            shell=True,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
            start_new_session=sys.platform != "win32",
        )
    except OSError as e:
        return ShellResult(returncode=LAUNCH_FAILED, error=e)

    with proc:
        try:
            stdout, stderr = proc.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.debug("killing %r after %ss", command, timeout)
            _kill(proc)
            try:
                proc.communicate(timeout=KILL_DRAIN_TIMEOUT)
            except subprocess.TimeoutExpired:
                # something outside the killed group still holds the pipes
                logger.debug("abandoning output of %r", command)
            raise

    if stderr:
        logger.debug("stderr from %r: %s", command, stderr.rstrip())
    returncode = proc.returncode
    if returncode < 0:
        # Killed by a signal: report 128 + signum as shells do
        returncode = 128 - returncode
    return ShellResult(returncode=returncode, stdout=stdout)


def _kill(proc: subprocess.Popen) -> None:
    """Kill proc along with anything it spawned in its session."""
    if sys.platform == "win32":
        proc.kill()
        return
    with contextlib.suppress(ProcessLookupError):
        os.killpg(proc.pid, signal.SIGKILL)
