"""Turn a raw prompt line into the argument list to execute."""

import logging
import os

from promptshell.executor import ShellRunner
from promptshell.substitution import EnvLookup, resolve_substitutions
from promptshell.tokenizer import split_fields, tokenize

logger = logging.getLogger(__name__)

DEFAULT_SUBSTITUTION_TIMEOUT = 1.0
TIMEOUT_ENV_VAR = "PROMPTSHELL_SUBSTITUTION_TIMEOUT"


def substitution_timeout() -> float:
    """Seconds a $(...) command may run, from the environment or the default."""
    raw = os.environ.get(TIMEOUT_ENV_VAR)
    if raw is None:
        return DEFAULT_SUBSTITUTION_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        value = 0.0
    if not value > 0:
        logger.warning(
            "ignoring invalid %s=%r, using %ss", TIMEOUT_ENV_VAR, raw, DEFAULT_SUBSTITUTION_TIMEOUT
        )
        return DEFAULT_SUBSTITUTION_TIMEOUT
    return value


def tokenize_command(
    command: str,
    cwd: str,
    *,
    timeout: float | None = None,
    env: EnvLookup | None = None,
    runner: ShellRunner | None = None,
    quote_aware: bool = True,
) -> list[str]:
    """Resolve substitutions in command, then split it into tokens.

    1. Replace ${NAME} and $(cmd) spans (cmd runs in cwd)
    2. Tokenize with quote handling, or a plain whitespace split
       when quote_aware is False

    Substitution errors propagate before any tokenizing happens.
    """
    if timeout is None:
        timeout = substitution_timeout()
    resolved = resolve_substitutions(timeout, command, cwd, env=env, runner=runner)
    if quote_aware:
        return tokenize(resolved)
    return split_fields(resolved)
