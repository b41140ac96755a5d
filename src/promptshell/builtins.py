"""Built-in prompt commands."""

import os
import sys
from collections.abc import Callable
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from promptshell.shell import Shell

BuiltinHandler: TypeAlias = Callable[[list[str], "Shell"], int]

BUILTINS_HELP: dict[str, str] = {
    "cd": "cd [dir]          - Change directory (default: $HOME)",
    "exit": "exit [code]       - Exit the prompt",
    "help": "help              - Show this help message",
    "pwd": "pwd               - Print working directory",
    "tokens": "tokens args...    - Print each argument on its own line",
}


def builtin_cd(args: list[str], shell: "Shell") -> int:
    target = args[0] if args else os.path.expanduser("~")
    target = os.path.expanduser(target)
    try:
        os.chdir(target)
    except FileNotFoundError:
        print(f"cd: no such file or directory: {target}", file=sys.stderr)
        return 1
    except NotADirectoryError:
        print(f"cd: not a directory: {target}", file=sys.stderr)
        return 1
    except PermissionError:
        print(f"cd: permission denied: {target}", file=sys.stderr)
        return 1
    return 0


def builtin_exit(args: list[str], shell: "Shell") -> int:
    try:
        code = int(args[0]) if args else 0
    except ValueError:
        print(f"exit: {args[0]}: numeric argument required", file=sys.stderr)
        code = 2
    shell.save_history()
    sys.exit(code)


def builtin_help(args: list[str], shell: "Shell") -> int:
    print("promptshell - built-in commands:\n")
    for line in BUILTINS_HELP.values():
        print(f"  {line}")
    print()
    print("  ${NAME} is replaced by an environment variable, $(cmd) by the output of cmd.")
    print()
    return 0


def builtin_pwd(args: list[str], shell: "Shell") -> int:
    print(os.getcwd())
    return 0


def builtin_tokens(args: list[str], shell: "Shell") -> int:
    for arg in args:
        print(repr(arg))
    return 0


BUILTIN_REGISTRY: dict[str, BuiltinHandler] = {
    "cd": builtin_cd,
    "exit": builtin_exit,
    "help": builtin_help,
    "pwd": builtin_pwd,
    "tokens": builtin_tokens,
}
