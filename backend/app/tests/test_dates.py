from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import BaseModel

from app import dates
from app.errors import ValidationError


@pytest.mark.parametrize("raw", ["2024-01-31", "1999-12-01", "2024-02-29"])
def test_date_only_round_trip(raw):
    assert dates.encode(dates.decode(raw)) == raw


@pytest.mark.parametrize("raw", [None, "", "undefined", "null", "   "])
def test_placeholders_decode_to_absent(raw):
    assert dates.decode(raw) is None


def test_absent_is_distinct_from_a_date():
    assert dates.decode("") != dates.decode("2024-01-01")


def test_timestamp_keeps_written_calendar_date():
    assert dates.decode("2024-03-05T23:30:00-05:00") == date(2024, 3, 5)
    assert dates.decode("2024-03-05T10:00:00Z") == date(2024, 3, 5)


def test_fractional_timestamp():
    assert dates.decode("2024-03-05T10:00:00.123456789Z") == date(2024, 3, 5)
    assert dates.decode("2024-03-05T10:00:00.5+02:00") == date(2024, 3, 5)


def test_date_only_wins_over_timestamp_parsers(monkeypatch):
    calls = []

    def spy(parser):
        def wrapped(raw):
            calls.append(parser.__name__)
            return parser(raw)
        return wrapped

    monkeypatch.setattr(dates, "PARSERS", tuple(spy(p) for p in dates.PARSERS))
    assert dates.decode("2024-01-02") == date(2024, 1, 2)
    assert calls == ["_parse_date_only"]


@pytest.mark.parametrize(
    "raw",
    [
        "31/01/2024",
        "2024-13-01",
        "2024-02-30",
        "tomorrow",
        "2024-01-01T25:00:00Z",
        "2024-01-01T10:00:00",
        "\u0662\u0660\u0662\u0664-\u0660\u0661-\u0661\u0665",
        "\uff12\uff10\uff12\uff14-\uff10\uff11-\uff11\uff15",
        "\uff12\uff10\uff12\uff14-01-15T10:00:00Z",
        "2024-01-15T10:00:00.\u0661\u0662Z",
    ],
)
def test_unparseable_values_raise(raw):
    with pytest.raises(dates.DateDecodeError) as excinfo:
        dates.decode(raw)
    assert raw in str(excinfo.value)
    assert isinstance(excinfo.value, ValidationError)


def test_encode_absent_and_fixed_point():
    assert dates.encode(None) is None
    once = dates.encode(dates.decode("2023-07-04"))
    assert dates.encode(dates.decode(once)) == once


def test_encode_drops_time_of_day():
    stamp = datetime(2024, 6, 1, 18, 45, tzinfo=timezone.utc)
    assert dates.encode(stamp) == "2024-06-01"


def test_aware_datetime_is_read_in_utc():
    stamp = datetime(2024, 6, 1, 0, 0, tzinfo=timezone.utc).astimezone(timezone(timedelta(hours=-5)))
    assert dates.decode(stamp) == date(2024, 6, 1)


def test_to_instant_is_midnight_utc():
    instant = dates.to_instant(date(2024, 6, 1))
    assert instant == datetime(2024, 6, 1, tzinfo=timezone.utc)


class _Payload(BaseModel):
    when: dates.WireDate = None


def test_wire_date_decodes_and_serializes():
    payload = _Payload(when="2024-04-01T08:00:00Z")
    assert payload.when == date(2024, 4, 1)
    assert payload.model_dump(mode="json") == {"when": "2024-04-01"}
    assert _Payload(when="undefined").model_dump(mode="json") == {"when": None}


def test_wire_date_rejects_garbage():
    with pytest.raises(Exception) as excinfo:
        _Payload(when="not-a-date")
    assert "invalid date format" in str(excinfo.value)
