"""Locate the bracket that closes a substitution span."""

NOT_FOUND = -1


def find_matching_bracket(chars: str, open_idx: int, open_char: str, close_char: str) -> int:
    """Return the index of the bracket closing the one at chars[open_idx].

    Nested occurrences of open_char are counted, so in "d(e{f})gh" the
    match for the outer '(' skips past the inner group.

    Returns NOT_FOUND (-1) if chars[open_idx] is not open_char, and
    len(chars) if the input ends before the bracket is closed.
    """
    if open_idx < 0 or open_idx >= len(chars) or chars[open_idx] != open_char:
        return NOT_FOUND

    depth = 1
    i = open_idx + 1
    while i < len(chars):
        ch = chars[i]
        if ch == open_char:
            depth += 1
        elif ch == close_char:
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return len(chars)
