"""Leaf codecs for parameter values."""

from .duration import format_duration, parse_duration
from .values import (
    BoolValue,
    DurationValue,
    FloatValue,
    IntValue,
    SlotValue,
    StringValue,
    Value,
    value_of,
)

__all__ = [
    "format_duration",
    "parse_duration",
    "BoolValue",
    "DurationValue",
    "FloatValue",
    "IntValue",
    "SlotValue",
    "StringValue",
    "Value",
    "value_of",
]
