"""Environment variable and command substitution.

Replaces ${NAME} with the value of an environment variable and $(cmd)
with the captured stdout of running cmd in a shell. This is a single
left-to-right pass: the text inside a span is used verbatim, so
${$(pwd)} looks up a variable literally named "$(pwd)", and an inner
$(...) inside $(...) is left for the invoked shell to resolve.
"""

import logging
import os
import subprocess
from collections.abc import Mapping
from typing import NamedTuple, TypeAlias

from promptshell.brackets import NOT_FOUND, find_matching_bracket
from promptshell.errors import (
    CurlyBracketMismatchError,
    EnvVarNotFoundError,
    RoundBracketMismatchError,
    ShellLaunchError,
    SubstitutionTimeoutError,
    TokenizeError,
)
from promptshell.executor import ShellRunner, run_in_shell

logger = logging.getLogger(__name__)

EnvLookup: TypeAlias = Mapping[str, str]

VARIABLE = "variable"
COMMAND = "command"

# opening char after '$' -> (closing char, span kind, error when unterminated)
_SPAN_SYNTAX = {
    "{": ("}", VARIABLE, CurlyBracketMismatchError),
    "(": (")", COMMAND, RoundBracketMismatchError),
}


class SubstitutionSpan(NamedTuple):
    """A ${...} or $(...) region: command[start:end] including delimiters."""

    start: int
    end: int
    kind: str

    def body(self, command: str) -> str:
        """Text strictly between the brackets."""
        return command[self.start + 2 : self.end - 1]


def find_span(command: str, pos: int) -> SubstitutionSpan | None:
    """Return the substitution span starting at command[pos], if any.

    Returns None when command[pos] is not a '$' followed by '{' or '('.
    Raises CurlyBracketMismatchError or RoundBracketMismatchError when
    the span is never closed.
    """
    if command[pos] != "$" or pos + 1 >= len(command):
        return None
    syntax = _SPAN_SYNTAX.get(command[pos + 1])
    if syntax is None:
        return None

    close_char, kind, mismatch_error = syntax
    end = find_matching_bracket(command, pos + 1, command[pos + 1], close_char)
    if end == NOT_FOUND:
        raise TokenizeError()
    if end == len(command):
        raise mismatch_error()
    return SubstitutionSpan(pos, end + 1, kind)


def resolve_substitutions(
    timeout: float,
    command: str,
    cwd: str,
    *,
    env: EnvLookup | None = None,
    runner: ShellRunner | None = None,
) -> str:
    """Return command with every ${NAME} and $(cmd) span replaced.

    Values are inserted exactly as found: no trimming of trailing
    newlines and no escaping. A '$' not followed by '{' or '(' is
    kept literally.

    Raises a PromptCommandError subclass on the first malformed span,
    missing variable, launch failure or timeout.
    """
    if env is None:
        env = os.environ
    if runner is None:
        runner = run_in_shell

    result: list[str] = []
    i = 0

    while i < len(command):
        span = find_span(command, i)
        if span is None:
            result.append(command[i])
            i += 1
            continue

        match span.kind:
            case "variable":
                result.append(_lookup(span.body(command), env))
            case "command":
                result.append(_run(span.body(command), timeout, cwd, runner))
        i = span.end

    return "".join(result)


def _lookup(name: str, env: EnvLookup) -> str:
    value = env.get(name)
    if value is None:
        raise EnvVarNotFoundError(name)
    return value


def _run(sub_cmd: str, timeout: float, cwd: str, runner: ShellRunner) -> str:
    try:
        res = runner(timeout, cwd, sub_cmd)
    except subprocess.TimeoutExpired as e:
        raise SubstitutionTimeoutError(sub_cmd, timeout) from e

    if not res.launched:
        raise ShellLaunchError(sub_cmd, str(res.error or "")) from res.error

    # Commands exiting non-zero still contribute their output
    if res.returncode != 0:
        logger.debug("substitution command %r exited with status %d", sub_cmd, res.returncode)
    return res.stdout
