"""Shell style ${VAR} and $VAR expansion."""

from typing import Callable, Tuple

_SPECIAL = frozenset("*#$@!?-0123456789")


def _is_name_char(c: str) -> bool:
    return c == "_" or ("0" <= c <= "9") or ("a" <= c <= "z") or ("A" <= c <= "Z")


def _shell_name(s: str) -> Tuple[str, int]:
    """Read the variable name following a "$".

    Returns the name and the number of characters consumed. An empty name
    with a non-zero width means the syntax was invalid and gets dropped.
    """
    if s[0] == "{":
        if len(s) > 2 and s[1] in _SPECIAL and s[2] == "}":
            return s[1], 3
        end = s.find("}", 1)
        if end == -1:
            return "", 1
        if end == 1:
            return "", 2
        return s[1:end], end + 1
    if s[0] in _SPECIAL:
        return s[0], 1
    i = 0
    while i < len(s) and _is_name_char(s[i]):
        i += 1
    return s[:i], i


def expand(value: str, mapping: Callable[[str], str]) -> str:
    """Replace ${var} or $var in value using mapping.

    A "$" not followed by a name is kept as is.
    """
    out = []
    start = 0
    j = 0
    while j < len(value):
        if value[j] == "$" and j + 1 < len(value):
            out.append(value[start:j])
            name, width = _shell_name(value[j + 1 :])
            if name:
                out.append(mapping(name))
            elif width == 0:
                out.append(value[j])
            j += width
            start = j + 1
        j += 1
    out.append(value[start:])
    return "".join(out)
