"""Tests for duration parsing and formatting."""

from datetime import timedelta

import pytest

from envbind.durations import format_duration, parse_duration


@pytest.mark.parametrize(
    "text,expected",
    [
        ("0", timedelta(0)),
        ("5s", timedelta(seconds=5)),
        ("30s", timedelta(seconds=30)),
        ("1478s", timedelta(seconds=1478)),
        ("-5s", timedelta(seconds=-5)),
        ("+5s", timedelta(seconds=5)),
        ("-0", timedelta(0)),
        ("5.0s", timedelta(seconds=5)),
        ("5.6s", timedelta(seconds=5, milliseconds=600)),
        ("5.s", timedelta(seconds=5)),
        (".5s", timedelta(milliseconds=500)),
        ("1.0s", timedelta(seconds=1)),
        ("1.004s", timedelta(seconds=1, milliseconds=4)),
        ("100.00100s", timedelta(seconds=100, milliseconds=1)),
        ("10ns", timedelta(0)),
        ("1500ns", timedelta(microseconds=1)),
        ("11us", timedelta(microseconds=11)),
        ("12µs", timedelta(microseconds=12)),
        ("12μs", timedelta(microseconds=12)),
        ("13ms", timedelta(milliseconds=13)),
        ("14s", timedelta(seconds=14)),
        ("15m", timedelta(minutes=15)),
        ("16h", timedelta(hours=16)),
        ("3h30m", timedelta(hours=3, minutes=30)),
        ("2h45m", timedelta(hours=2, minutes=45)),
        ("10.5s4m", timedelta(minutes=4, seconds=10, milliseconds=500)),
        ("-2m3.4s", -timedelta(minutes=2, seconds=3, milliseconds=400)),
        ("1h2m3s4ms5us6ns", timedelta(hours=1, minutes=2, seconds=3, milliseconds=4, microseconds=5)),
        ("39h9m14.425907223s", timedelta(hours=39, minutes=9, seconds=14, microseconds=425907)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "3", "-", "s", ".", "-.", ".s", "+.s", "1d", "1.5.5s", "1s ", " 1s"])
def test_parse_duration_invalid(text):
    with pytest.raises(ValueError):
        parse_duration(text)


def test_parse_duration_overflow():
    assert parse_duration("9223372036854775807ns") == timedelta(microseconds=9223372036854775)
    assert parse_duration("-9223372036854775808ns") == -timedelta(microseconds=9223372036854775)
    with pytest.raises(OverflowError):
        parse_duration("9223372036854775808ns")
    with pytest.raises(OverflowError):
        parse_duration("3000000h")


@pytest.mark.parametrize(
    "value,expected",
    [
        (timedelta(0), "0s"),
        (timedelta(microseconds=1), "1µs"),
        (timedelta(microseconds=1100), "1.1ms"),
        (timedelta(milliseconds=2200), "2.2s"),
        (timedelta(minutes=3, milliseconds=300), "3m0.3s"),
        (timedelta(hours=1), "1h0m0s"),
        (timedelta(hours=4, minutes=5, seconds=6, milliseconds=700), "4h5m6.7s"),
        (-timedelta(seconds=1), "-1s"),
        (timedelta(hours=2562047, minutes=47, seconds=16, microseconds=854775), "2562047h47m16.854775s"),
    ],
)
def test_format_duration(value, expected):
    assert format_duration(value) == expected


def test_format_parse_round_trip():
    for value in [timedelta(seconds=90), timedelta(microseconds=7), -timedelta(hours=26, microseconds=3)]:
        assert parse_duration(format_duration(value)) == value
