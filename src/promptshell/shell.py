"""Interactive prompt: read a line, resolve and tokenize it, run it."""

import contextlib
import logging
import os
import readline
import subprocess
import sys

from promptshell.builtins import BUILTIN_REGISTRY
from promptshell.command import tokenize_command
from promptshell.errors import PromptCommandError

HISTORY_FILE = os.path.expanduser("~/.promptshell_history")
LOG_LEVEL_ENV_VAR = "PROMPTSHELL_LOG_LEVEL"


class Shell:
    """Prompt state and main loop."""

    def __init__(self) -> None:
        self.last_exit_code: int = 0

    def load_history(self) -> None:
        with contextlib.suppress(OSError):
            readline.read_history_file(HISTORY_FILE)

    def save_history(self) -> None:
        with contextlib.suppress(OSError):
            readline.write_history_file(HISTORY_FILE)

    def get_prompt(self) -> str:
        cwd = os.getcwd()
        home = os.path.expanduser("~")
        if cwd == home:
            display = "~"
        elif cwd.startswith(home + "/"):
            display = "~/" + cwd[len(home) + 1 :]
        else:
            display = cwd
        return f"{display} > "

    def run_command(self, line: str) -> None:
        """Resolve ${NAME} and $(cmd), tokenize, then run the first token."""
        try:
            tokens = tokenize_command(line, os.getcwd())
        except PromptCommandError as e:
            print(f"promptshell: {e}", file=sys.stderr)
            self.last_exit_code = 2
            return

        if not tokens:
            return

        handler = BUILTIN_REGISTRY.get(tokens[0])
        if handler is not None:
            self.last_exit_code = handler(tokens[1:], self)
            return

        self.last_exit_code = self._execute(tokens)

    @staticmethod
    def _execute(argv: list[str]) -> int:
        try:
            result = subprocess.run(argv)
        except FileNotFoundError:
            print(f"promptshell: command not found: {argv[0]}", file=sys.stderr)
            return 127
        except PermissionError:
            print(f"promptshell: permission denied: {argv[0]}", file=sys.stderr)
            return 126
        except OSError as e:
            print(f"promptshell: {argv[0]}: {e.strerror}", file=sys.stderr)
            return 126
        return result.returncode

    def run(self) -> None:
        """Main prompt loop."""
        self.load_history()
        readline.set_history_length(1000)

        while True:
            try:
                line = input(self.get_prompt())
            except (EOFError, KeyboardInterrupt):
                print()
                break

            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue

            self.run_command(line)

        self.save_history()


def main() -> None:
    """Entry point."""
    level = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
    if level not in logging.getLevelNamesMapping():
        level = "WARNING"
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    shell = Shell()
    shell.run()
