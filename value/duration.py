"""Duration strings such as "1h30m" or "-1.5s", as timedelta values."""

import re
from datetime import timedelta

# nanoseconds per unit
_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

_COMPONENT = re.compile(r"(\d*)(?:\.(\d*))?([^\d.]*)")


def parse_duration(text: str) -> timedelta:
    """
    Parse a duration string.

    A duration is an optional sign followed by decimal numbers with an
    optional fraction and a unit suffix each, e.g. "300ms", "1h45m" or
    "-2.5s". Valid units are "ns", "us" (or "µs"), "ms", "s", "m" and "h".
    Sub-microsecond parts are truncated.

    Raises:
        ValueError: If text is not a valid duration.
    """
    orig = text
    negative = False
    if text[:1] in ("-", "+"):
        negative = text[0] == "-"
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration {orig!r}")

    total = 0
    pos = 0
    while pos < len(text):
        match = _COMPONENT.match(text, pos)
        whole, frac, unit = match.group(1), match.group(2), match.group(3)
        if not whole and not frac:
            raise ValueError(f"invalid duration {orig!r}")
        if not unit:
            raise ValueError(f"missing unit in duration {orig!r}")
        if unit not in _UNITS:
            raise ValueError(f"unknown unit {unit!r} in duration {orig!r}")
        scale = _UNITS[unit]
        total += int(whole or "0") * scale
        if frac:
            total += int(frac) * scale // 10 ** len(frac)
        pos = match.end()

    if negative:
        total = -total
    return timedelta(microseconds=total // 1_000 if total >= 0 else -(-total // 1_000))


def format_duration(value: timedelta) -> str:
    """
    Format a timedelta as a duration string, e.g. "1h2m3.5s".

    Durations under a second use the smallest unit that keeps an integer
    part, such as "1.5ms"; zero is formatted as "0s".
    """
    micros = (value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds
    if micros == 0:
        return "0s"
    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if micros < 1_000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        return f"{sign}{_decimal(micros, 1_000)}ms"

    hours, rest = divmod(micros, 3600 * 1_000_000)
    minutes, rest = divmod(rest, 60 * 1_000_000)
    text = _decimal(rest, 1_000_000) + "s"
    if hours or minutes:
        text = f"{minutes}m" + text
    if hours:
        text = f"{hours}h" + text
    return sign + text


def _decimal(value: int, scale: int) -> str:
    whole, frac = divmod(value, scale)
    if not frac:
        return str(whole)
    digits = str(frac).rjust(len(str(scale)) - 1, "0").rstrip("0")
    return f"{whole}.{digits}"
