"""Tests for leaf codecs and durations."""

import math
import pytest
from datetime import timedelta
from typing import Optional

from graph.model import Ref
from value import (
    BoolValue,
    DurationValue,
    FloatValue,
    IntValue,
    StringValue,
    Value,
    format_duration,
    parse_duration,
    value_of,
)


class Custom:
    """A user-defined value stored in a slot."""

    def __init__(self):
        self.text = "custom"

    def get(self):
        return self.text

    def set(self, text):
        self.text = text

    def append_to(self, buf):
        return buf + self.text


class TestValueOf:
    """Tests for choosing codecs."""

    def test_runtime_types(self):
        """Test codecs chosen from the held value."""
        assert isinstance(value_of(Ref.new(True)), BoolValue)
        assert isinstance(value_of(Ref.new(1)), IntValue)
        assert isinstance(value_of(Ref.new(1.5)), FloatValue)
        assert isinstance(value_of(Ref.new("x")), StringValue)
        assert isinstance(value_of(Ref.new(timedelta(seconds=1))), DurationValue)

    def test_declared_type(self):
        """Test that the declared type wins over the held value."""
        assert isinstance(value_of(Ref.new(0), Optional[int]), IntValue)
        assert isinstance(value_of(Ref.new(0), float), FloatValue)

    def test_declared_type_holding_none(self):
        """Test that a slot holding None has no codec."""
        assert value_of(Ref.new(None), Optional[int]) is None
        assert value_of(Ref.new(None), Optional[float]) is None
        assert value_of(Ref.new(None), Optional[timedelta]) is None
        assert value_of(Ref.new(None), Optional[bool]) is None

    def test_unsupported(self):
        """Test that other types have no codec."""
        assert value_of(Ref.new(b"bytes")) is None
        assert value_of(Ref.new([1])) is None
        assert value_of(Ref.new(None)) is None
        assert value_of(None) is None
        assert value_of(Ref.nil()) is None

    def test_existing_value(self):
        """Test that a slot holding a Value is used as is."""
        custom = Custom()

        assert isinstance(custom, Value)
        assert value_of(Ref.new(custom)) is custom

    def test_codecs_are_values(self):
        """Test that codecs implement the Value protocol."""
        assert isinstance(IntValue(Ref.new(1)), Value)


class TestCodecs:
    """Tests for parsing and formatting."""

    def test_bool(self):
        """Test boolean strings."""
        ref = Ref.new(False)
        codec = BoolValue(ref)

        for text in ("1", "t", "T", "true", "TRUE", "True"):
            codec.set(text)
            assert ref.get() is True
        codec.set("false")
        assert ref.get() is False
        assert str(codec) == "false"
        assert codec.is_bool_flag

        with pytest.raises(ValueError):
            codec.set("yes")

    def test_int(self):
        """Test integers with base prefixes."""
        codec = IntValue(Ref.new(0))

        assert codec.parse("42") == 42
        assert codec.parse("-7") == -7
        assert codec.parse("0x10") == 16
        assert codec.parse("0o17") == 15
        assert codec.parse("0b101") == 5
        assert codec.parse("010") == 8
        assert codec.parse("-010") == -8
        assert codec.parse("00") == 0
        assert codec.parse("1_000") == 1000
        assert not codec.is_bool_flag

        with pytest.raises(ValueError):
            codec.parse("1.5")
        with pytest.raises(ValueError):
            codec.parse("09")

    def test_float(self):
        """Test float formatting."""
        codec = FloatValue(Ref.new(0.0))

        assert codec.format(1.0) == "1"
        assert codec.format(0.25) == "0.25"
        assert codec.format(math.inf) == "+Inf"
        assert codec.format(-math.inf) == "-Inf"
        assert codec.format(math.nan) == "NaN"
        assert codec.parse("+Inf") == math.inf

    def test_string(self):
        """Test that strings are stored verbatim."""
        ref = Ref.new("")
        StringValue(ref).set(" padded ")

        assert ref.get() == " padded "

    def test_failed_set_keeps_value(self):
        """Test that invalid text leaves the slot unchanged."""
        ref = Ref.new(5)
        codec = IntValue(ref)

        with pytest.raises(ValueError):
            codec.set("five")

        assert ref.get() == 5
        assert str(codec) == "5"

    def test_append_to(self):
        """Test appending the string form to a buffer."""
        codec = IntValue(Ref.new(12))

        assert codec.append_to("port=") == "port=12"


class TestDuration:
    """Tests for duration strings."""

    def test_parse(self):
        """Test parsing valid durations."""
        assert parse_duration("1h30m") == timedelta(hours=1, minutes=30)
        assert parse_duration("250ms") == timedelta(milliseconds=250)
        assert parse_duration("-1.5s") == timedelta(seconds=-1.5)
        assert parse_duration("1.5h") == timedelta(minutes=90)
        assert parse_duration("+2m") == timedelta(minutes=2)
        assert parse_duration("10us") == timedelta(microseconds=10)
        assert parse_duration("10µs") == timedelta(microseconds=10)
        assert parse_duration("0") == timedelta(0)

    def test_parse_truncates_nanoseconds(self):
        """Test that sub-microsecond parts are dropped."""
        assert parse_duration("1500ns") == timedelta(microseconds=1)

    def test_parse_invalid(self):
        """Test rejecting invalid durations."""
        for text in ("", "-", "10", "3d", "h", "1.5.3s", "s1"):
            with pytest.raises(ValueError):
                parse_duration(text)

    def test_format(self):
        """Test formatting durations."""
        assert format_duration(timedelta(0)) == "0s"
        assert format_duration(timedelta(hours=1, minutes=30)) == "1h30m0s"
        assert format_duration(timedelta(milliseconds=250)) == "250ms"
        assert format_duration(timedelta(microseconds=1500)) == "1.5ms"
        assert format_duration(timedelta(microseconds=7)) == "7µs"
        assert format_duration(timedelta(seconds=-1.5)) == "-1.5s"
        assert format_duration(timedelta(minutes=2, seconds=3.5)) == "2m3.5s"

    def test_codec(self):
        """Test the duration codec."""
        ref = Ref.new(timedelta(seconds=30))
        codec = DurationValue(ref)

        assert str(codec) == "30s"
        codec.set("1m")
        assert ref.get() == timedelta(minutes=1)
