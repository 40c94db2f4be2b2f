"""Duration strings such as "300ms", "1.5h" or "2h45m".

Values map to datetime.timedelta. Parsing accepts a possibly signed sequence
of decimal numbers, each with an optional fraction and a mandatory unit
suffix. Valid units are "ns", "us" (or "µs"), "ms", "s", "m", "h".
"""

import re
from datetime import timedelta

NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

UNITS = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,  # U+00B5 micro sign
    "μs": MICROSECOND,  # U+03BC greek letter mu
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}

# durations are bounded by a signed 64-bit nanosecond count
_MAX_NANOSECONDS = (1 << 63) - 1

_COMPONENT = re.compile(r"(?P<int>[0-9]*)(?:\.(?P<frac>[0-9]*))?(?P<unit>[^0-9.]*)")


def parse_duration(text: str) -> timedelta:
    """Parse a duration string.

    Args:
        text: Duration string, e.g. "1h10m10.5s".

    Returns:
        Parsed duration. Precision below one microsecond is truncated.

    Raises:
        ValueError: If the string is not a valid duration.
        OverflowError: If the duration does not fit in 64-bit nanoseconds.
    """
    s = text
    negative = False
    if s and s[0] in "+-":
        negative = s[0] == "-"
        s = s[1:]

    if s == "0":
        return timedelta(0)
    if not s:
        raise ValueError(f"invalid duration {text!r}")

    total = 0
    pos = 0
    while pos < len(s):
        if not (s[pos] == "." or s[pos].isdigit()):
            raise ValueError(f"invalid duration {text!r}")

        match = _COMPONENT.match(s, pos)
        whole, frac, unit_name = match.group("int"), match.group("frac"), match.group("unit")
        if not whole and not frac:
            # no digits, e.g. ".s"
            raise ValueError(f"invalid duration {text!r}")
        if not unit_name:
            raise ValueError(f"missing unit in duration {text!r}")
        unit = UNITS.get(unit_name)
        if unit is None:
            raise ValueError(f"unknown unit {unit_name!r} in duration {text!r}")

        value = int(whole or "0") * unit
        if frac:
            value += int(frac) * unit // 10 ** len(frac)
        total += value
        if total > _MAX_NANOSECONDS + (1 if negative else 0):
            raise OverflowError(f"invalid duration {text!r}")
        pos = match.end()

    micros = total // MICROSECOND
    return timedelta(microseconds=-micros if negative else micros)


def _format_fraction(value: int, precision: int) -> str:
    """Format value / 10**precision, dropping trailing zeros of the fraction."""
    whole, frac = divmod(value, 10**precision)
    digits = str(frac).rjust(precision, "0").rstrip("0")
    return f"{whole}.{digits}" if digits else str(whole)


def format_duration(value: timedelta) -> str:
    """Format a duration in the form accepted by parse_duration.

    Leading zero units are omitted, so one and a half hours is "1h30m0s"
    and durations under one second use smaller units, e.g. "1.5ms".
    """
    ns = ((value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds) * MICROSECOND
    if ns == 0:
        return "0s"

    sign = "-" if ns < 0 else ""
    u = abs(ns)

    if u < SECOND:
        if u < MICROSECOND:
            return f"{sign}{u}ns"
        if u < MILLISECOND:
            return f"{sign}{_format_fraction(u, 3)}µs"
        return f"{sign}{_format_fraction(u, 6)}ms"

    text = f"{_format_fraction(u % MINUTE, 9)}s"
    if u >= MINUTE:
        text = f"{(u // MINUTE) % 60}m{text}"
    if u >= HOUR:
        text = f"{u // HOUR}h{text}"
    return sign + text
