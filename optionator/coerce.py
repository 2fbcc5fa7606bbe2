# optionator/coerce.py
"""
optionator.coerce
-----------------

Type-directed conversions:

- text to value, for default annotations (``coerce_default``), and
- value to value, for overrides (``convert_value``).

Durations are written like ``"30s"``, ``"1h30m"`` or ``"1.5ms"`` and land in
``datetime.timedelta`` fields.
"""

import functools
import re
import types
import typing
from datetime import timedelta
from typing import Any, Callable, Optional

from .exceptions import TypeMismatchError, UnsupportedTypeError
from .metadata import unwrap_optional

_INT_RE = re.compile(r"[+-]?[0-9]+")

_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

# Nanoseconds per duration unit.
_DURATION_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # micro sign
    "μs": 1_000,  # Greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_PART = re.compile(r"([0-9]*)(?:\.([0-9]*))?([^0-9.]*)")
_MAX_DURATION_NS = (1 << 63) - 1


# --- Text parsers ---

def parse_int(text: str) -> int:
    """Parse a base-10 integer with an optional sign. Whitespace and underscores are rejected."""
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer syntax: {text!r}")
    return int(text, 10)


def parse_float(text: str) -> float:
    """Parse a base-10 float (``inf`` and ``nan`` included). Surrounding whitespace is rejected."""
    if text != text.strip() or "_" in text:
        raise ValueError(f"invalid float syntax: {text!r}")
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"invalid float syntax: {text!r}") from None


def parse_bool(text: str) -> bool:
    """Parse a boolean from the vocabulary 1/t/T/TRUE/true/True and 0/f/F/FALSE/false/False."""
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise ValueError(f"invalid boolean syntax: {text!r}")


def parse_duration(text: str) -> int:
    """
    Parse a duration string into signed nanoseconds.

    A duration is an optionally signed sequence of decimal numbers, each with
    an optional fraction and a unit suffix, such as ``"300ms"``, ``"-1.5h"``
    or ``"2h45m"``. Valid units are ``ns``, ``us`` (or ``µs``), ``ms``, ``s``,
    ``m`` and ``h``. The bare string ``"0"`` needs no unit.

    Raises:
        ValueError: On bad syntax, unknown units or a value that does not fit
            in a signed 64-bit nanosecond count.
    """
    s = text
    negative = False
    if s and s[0] in "+-":
        negative = s[0] == "-"
        s = s[1:]
    if s == "0":
        return 0
    if not s:
        raise ValueError(f"invalid duration: {text!r}")

    total = 0
    limit = _MAX_DURATION_NS + (1 if negative else 0)
    pos = 0
    while pos < len(s):
        match = _DURATION_PART.match(s, pos)
        whole, frac, unit = match.groups()
        if not whole and not frac:
            raise ValueError(f"invalid duration: {text!r}")
        if not unit:
            raise ValueError(f"missing unit in duration: {text!r}")
        scale = _DURATION_UNITS.get(unit)
        if scale is None:
            raise ValueError(f"unknown unit {unit!r} in duration: {text!r}")
        total += int(whole or "0") * scale
        if frac:
            total += int(frac) * scale // 10 ** len(frac)
        if total > limit:
            raise ValueError(f"invalid duration (overflow): {text!r}")
        pos = match.end()
    return -total if negative else total


def to_timedelta(nanoseconds: int) -> timedelta:
    """
    Convert nanoseconds to a timedelta.

    Raises:
        ValueError: If the value is not a whole number of microseconds, the
            finest resolution a timedelta can hold.
    """
    if nanoseconds % 1_000:
        raise ValueError(f"duration of {nanoseconds}ns is finer than timedelta's microsecond resolution")
    magnitude = timedelta(microseconds=abs(nanoseconds) // 1_000)
    return -magnitude if nanoseconds < 0 else magnitude


def format_duration(value: timedelta) -> str:
    """Render a timedelta the way it would be written in an annotation (``1h30m0s``, ``250ms``)."""
    us = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    if us == 0:
        return "0s"
    sign = "-" if us < 0 else ""
    us = abs(us)
    if us < 1_000:
        return f"{sign}{us}µs"
    if us < 1_000_000:
        return f"{sign}{_decimal(us, 1_000, 3)}ms"
    hours, rem = divmod(us, 3_600_000_000)
    minutes, rem = divmod(rem, 60_000_000)
    out = sign
    if hours:
        out += f"{hours}h"
    if hours or minutes:
        out += f"{minutes}m"
    return out + f"{_decimal(rem, 1_000_000, 6)}s"


def _decimal(value: int, unit: int, digits: int) -> str:
    whole, frac = divmod(value, unit)
    if not frac:
        return str(whole)
    return f"{whole}.{frac:0{digits}d}".rstrip("0")


# --- Default coercion ---

def _parse_duration_value(text: str) -> timedelta:
    return to_timedelta(parse_duration(text))


def _parse_typed_int(int_type: type, text: str) -> int:
    return int_type(parse_int(text))


def _parse_typed_float(float_type: type, text: str) -> float:
    return float_type(parse_float(text))


def find_coercer(static_type: Any) -> Optional[Callable[[str], Any]]:
    """
    Return the text-to-value parser for a field's static type.

    ``Optional[X]`` resolves to the parser for ``X``. ``timedelta`` is matched
    exactly; ``bool`` is checked before ``int`` since it subclasses it.

    Returns:
        A one-argument callable, or None if the type has no coercion rule.
    """
    tp, _ = unwrap_optional(static_type)
    if tp is timedelta:
        return _parse_duration_value
    if not isinstance(tp, type):
        return None
    if tp is bool:
        return parse_bool
    if tp is int:
        return parse_int
    if issubclass(tp, int):
        # bounded ints check their range in the constructor
        return functools.partial(_parse_typed_int, tp)
    if tp is float:
        return parse_float
    if issubclass(tp, float):
        return functools.partial(_parse_typed_float, tp)
    if issubclass(tp, str):
        return tp
    return None


def coerce_default(text: str, static_type: Any, field_name: Optional[str] = None) -> Any:
    """
    Parse a default annotation's text into a value of `static_type`.

    Raises:
        UnsupportedTypeError: If the type has no coercion rule.
        ValueError, OverflowError: If the text does not parse or does not fit.
    """
    coercer = find_coercer(static_type)
    if coercer is None:
        raise UnsupportedTypeError(static_type, field_name)
    return coercer(text)


# --- Override conversion ---

def convert_value(value: Any, static_type: Any, field_name: Optional[str] = None) -> Any:
    """
    Convert an override value to a field's static type.

    Rules:
        - ``None`` only for ``Optional`` (or ``Any``) fields.
        - ``bool`` fields accept only bools.
        - Numeric fields (``int``, ``float``, bounded ints) accept any non-bool
          number; floats are truncated for integer fields and values that do
          not fit a bounded int are rejected.
        - Everything else must already be an instance of the field's type
          (``str`` only from ``str``, ``timedelta`` only from ``timedelta``).

    Raises:
        TypeMismatchError: If the value cannot be converted.
    """
    if static_type is Any:
        return value
    tp, optional = unwrap_optional(static_type)
    if value is None:
        if optional:
            return None
        raise TypeMismatchError(value, static_type, field_name)
    if tp is Any or tp is object:
        return value

    if not isinstance(tp, type):
        origin = typing.get_origin(tp)
        if origin is typing.Union or origin is types.UnionType:
            if any(isinstance(value, arg) for arg in typing.get_args(tp) if isinstance(arg, type)):
                return value
        elif isinstance(origin, type) and isinstance(value, origin):
            return value
        raise TypeMismatchError(value, static_type, field_name)

    if tp is bool:
        if isinstance(value, bool):
            return value
        raise TypeMismatchError(value, static_type, field_name)

    if issubclass(tp, (int, float)):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if type(value) is tp:
                return value
            try:
                return tp(value)
            except (ValueError, OverflowError) as e:
                raise TypeMismatchError(value, static_type, field_name) from e
        raise TypeMismatchError(value, static_type, field_name)

    if isinstance(value, tp):
        return value
    raise TypeMismatchError(value, static_type, field_name)
