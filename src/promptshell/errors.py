"""Errors raised while turning a prompt line into tokens."""


class PromptCommandError(ValueError):
    """Base class for every tokenization failure.

    Subclasses ValueError so callers that handle shlex-style errors
    keep working.
    """

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class TokenizeError(PromptCommandError):
    def __init__(self, message: str = "unexpected error in tokenization") -> None:
        super().__init__(message)


class CurlyBracketMismatchError(PromptCommandError):
    def __init__(self) -> None:
        super().__init__("unexpected token '${': missing closing '}'")


class RoundBracketMismatchError(PromptCommandError):
    def __init__(self) -> None:
        super().__init__("unexpected token '$(': missing closing ')'")


class EnvVarNotFoundError(PromptCommandError):
    def __init__(self, var_name: str) -> None:
        super().__init__(var_name)
        self.var_name = var_name

    def __str__(self) -> str:
        return f"environment variable not found: {self.var_name}"


class ShellLaunchError(PromptCommandError):
    """The substitution command could not be started at all."""

    def __init__(self, command: str, reason: str = "") -> None:
        super().__init__(command, reason)
        self.command = command
        self.reason = reason

    def __str__(self) -> str:
        msg = f"could not execute shell substitution command: {self.command}"
        if self.reason:
            msg += f": {self.reason}"
        return msg


class SubstitutionTimeoutError(PromptCommandError):
    def __init__(self, command: str, timeout: float) -> None:
        super().__init__(command, timeout)
        self.command = command
        self.timeout = timeout

    def __str__(self) -> str:
        return f"shell substitution command timed out after {self.timeout:g}s: {self.command}"


class UnterminatedQuoteError(PromptCommandError):
    def __init__(self, quote: str) -> None:
        super().__init__(quote)
        self.quote = quote

    def __str__(self) -> str:
        return f"no closing quotation: missing {self.quote}"


class DanglingEscapeError(PromptCommandError):
    def __init__(self) -> None:
        super().__init__("no escaped character: input ends with '\\'")
