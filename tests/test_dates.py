from __future__ import annotations

import datetime as dt

import pytest

from deprecation_gate import dates
from deprecation_gate.errors import DateFormatError


def test_parse_and_format_iso_date() -> None:
    value = dates.parse_date("2020-02-29")
    assert value == dt.date(2020, 2, 29)
    assert dates.format_date(value) == "2020-02-29"


@pytest.mark.parametrize("raw", ["2020-1-1", "20200101", "2020-13-01", "2019-02-29", "", "yesterday"])
def test_parse_date_rejects_malformed_values(raw: str) -> None:
    with pytest.raises(DateFormatError):
        dates.parse_date(raw)


def test_date_format_error_is_a_value_error() -> None:
    with pytest.raises(ValueError, match="YYYY-MM-DD"):
        dates.parse_date("01/02/2020")


def test_plus_days_crosses_month_and_year() -> None:
    assert dates.plus_days(dt.date(2020, 12, 31), 2) == dt.date(2021, 1, 2)
    assert dates.plus_days(dt.date(2020, 2, 28), 1) == dt.date(2020, 2, 29)


def test_today_can_be_pinned(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(dates.TODAY_ENV, "2021-06-01")
    assert dates.today() == dt.date(2021, 6, 1)

    monkeypatch.setenv(dates.TODAY_ENV, "junk")
    with pytest.raises(DateFormatError):
        dates.today()


def test_coerce_date_accepts_date_datetime_and_string(monkeypatch: pytest.MonkeyPatch) -> None:
    assert dates.coerce_date(dt.date(2020, 1, 2)) == dt.date(2020, 1, 2)
    assert dates.coerce_date(dt.datetime(2020, 1, 2, 23, 59)) == dt.date(2020, 1, 2)
    assert dates.coerce_date("2020-01-02") == dt.date(2020, 1, 2)

    monkeypatch.setenv(dates.TODAY_ENV, "2022-03-04")
    assert dates.coerce_date(None) == dt.date(2022, 3, 4)

    with pytest.raises(DateFormatError):
        dates.coerce_date(20200102)  # type: ignore[arg-type]
