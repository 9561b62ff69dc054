"""Leaf codecs converting parameter values to and from strings."""

import math
import re
from datetime import timedelta
from typing import Any, ClassVar, Dict, Optional, Protocol, runtime_checkable

from graph.model import Ref, unwrap_optional
from .duration import format_duration, parse_duration

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}
_LEGACY_OCTAL = re.compile(r"([+-]?)0([0-7_]+)")


@runtime_checkable
class Value(Protocol):
    """A value that can be retrieved or set in a string representation."""

    def get(self) -> Any:
        ...

    def set(self, text: str) -> None:
        ...

    def append_to(self, buf: str) -> str:
        ...


class SlotValue:
    """
    Base class of codecs bound to a slot.

    Subclasses implement parse() and format(); set() stores a parsed value
    and leaves the slot unchanged if parsing fails.
    """

    kind: ClassVar[type] = object
    is_bool_flag: ClassVar[bool] = False

    def __init__(self, ref: Ref):
        self._ref = ref

    @property
    def ref(self) -> Ref:
        return self._ref

    def parse(self, text: str) -> Any:
        raise NotImplementedError

    def format(self, value: Any) -> str:
        raise NotImplementedError

    def get(self) -> Any:
        return self._ref.get()

    def set(self, text: str) -> None:
        self._ref.set(self.parse(text))

    def append_to(self, buf: str) -> str:
        return buf + str(self)

    def __str__(self) -> str:
        return self.format(self.get())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


class BoolValue(SlotValue):
    kind = bool
    is_bool_flag = True

    def parse(self, text: str) -> bool:
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ValueError(f"invalid boolean {text!r}")

    def format(self, value: bool) -> str:
        return "true" if value else "false"


class IntValue(SlotValue):
    """
    Integers in decimal or with a 0x, 0o or 0b prefix.

    A leading zero also means octal, and underscores may separate digits.
    """

    kind = int

    def parse(self, text: str) -> int:
        text = text.strip()
        match = _LEGACY_OCTAL.fullmatch(text)
        if match:
            # "010" is octal
            text = f"{match.group(1)}0o{match.group(2)}"
        return int(text, 0)

    def format(self, value: int) -> str:
        return str(value)


class FloatValue(SlotValue):
    kind = float

    def parse(self, text: str) -> float:
        return float(text)

    def format(self, value: float) -> str:
        if math.isinf(value):
            return "+Inf" if value > 0 else "-Inf"
        if math.isnan(value):
            return "NaN"
        text = repr(float(value))
        if text.endswith(".0"):
            text = text[:-2]
        return text


class StringValue(SlotValue):
    kind = str

    def parse(self, text: str) -> str:
        return text

    def format(self, value: str) -> str:
        return value


class DurationValue(SlotValue):
    kind = timedelta

    def parse(self, text: str) -> timedelta:
        return parse_duration(text)

    def format(self, value: timedelta) -> str:
        return format_duration(value)


_CODECS: Dict[type, type] = {
    codec.kind: codec
    for codec in (BoolValue, IntValue, FloatValue, StringValue, DurationValue)
}


def value_of(ref: Optional[Ref], annotation: Any = None) -> Optional[Value]:
    """
    Get a codec for the slot referenced by ref.

    A slot already holding a Value is used as is. Otherwise the codec is
    chosen by the declared type of the slot if it is given, or else by the
    type of the value it holds: bool, int, float, str or timedelta. A slot
    holding None has no codec, whatever its declared type.

    Args:
        ref: Reference to the slot.
        annotation: Declared type of the slot, if known.

    Returns:
        A Value bound to the slot, or None if the slot cannot be converted.
    """
    if ref is None or ref.is_nil:
        return None
    current = ref.get()
    if current is None:
        return None
    if isinstance(current, Value) and not isinstance(current, type):
        return current
    kind = None
    if annotation is not None:
        kind = unwrap_optional(annotation)
    if kind not in _CODECS:
        kind = type(current)
    codec = _CODECS.get(kind)
    if codec is None:
        return None
    return codec(ref)
