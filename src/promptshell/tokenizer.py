"""Split a resolved command line into argument tokens."""

from promptshell.errors import DanglingEscapeError, UnterminatedQuoteError

SINGLE_QUOTE = "'"
DOUBLE_QUOTE = '"'
BACKSLASH = "\\"

# Characters a backslash escapes inside double quotes. Anything else keeps
# its backslash: "hello\nworld" stays hello\nworld.
_DOUBLE_QUOTE_ESCAPES = (DOUBLE_QUOTE, BACKSLASH)


def tokenize(line: str) -> list[str]:
    """Tokenize a command line with quote and escape handling.

    Outside quotes, whitespace separates tokens and a backslash makes the
    next character literal. Inside single quotes only \\' is an escape;
    inside double quotes only \\" and \\\\ are. Every closing quote ends
    its token, so adjacent quoted runs are not joined:
    '"hello""world"' -> ['hello', 'world']. An empty pair of quotes
    yields an empty token.

    Raises UnterminatedQuoteError or DanglingEscapeError on malformed input.
    """
    tokens: list[str] = []
    current: list[str] = []
    in_token = False
    quote: str | None = None  # None, "'", or '"'
    i = 0

    while i < len(line):
        ch = line[i]
        nxt = line[i + 1] if i + 1 < len(line) else None

        match quote:
            case None:
                if ch.isspace():
                    if in_token:
                        tokens.append("".join(current))
                        current = []
                        in_token = False
                elif ch in (SINGLE_QUOTE, DOUBLE_QUOTE):
                    quote = ch
                    in_token = True
                elif ch == BACKSLASH:
                    if nxt is None:
                        raise DanglingEscapeError()
                    current.append(nxt)
                    in_token = True
                    i += 1
                else:
                    current.append(ch)
                    in_token = True

            case "'":
                if ch == BACKSLASH and nxt == SINGLE_QUOTE:
                    current.append(SINGLE_QUOTE)
                    i += 1
                elif ch == SINGLE_QUOTE:
                    tokens.append("".join(current))
                    current = []
                    in_token = False
                    quote = None
                else:
                    current.append(ch)

            case '"':
                if ch == BACKSLASH:
                    if nxt is None:
                        raise DanglingEscapeError()
                    if nxt not in _DOUBLE_QUOTE_ESCAPES:
                        current.append(ch)
                    current.append(nxt)
                    i += 1
                elif ch == DOUBLE_QUOTE:
                    tokens.append("".join(current))
                    current = []
                    in_token = False
                    quote = None
                else:
                    current.append(ch)

        i += 1

    if quote is not None:
        raise UnterminatedQuoteError(quote)
    if in_token:
        tokens.append("".join(current))
    return tokens


def split_fields(line: str) -> list[str]:
    """Split on runs of whitespace, ignoring quotes and escapes."""
    return line.split()
