"""Tests for the date-time component parser and the search query builder."""

from datetime import datetime

import pytest

from aggie.core.time_utils import date_from_iso8601, to_timestamp
from aggie.models.report_query import ReportQuery
from aggie.services.report_service import MAX_PAGE, parse_page, parse_query_data


def test_components_are_read_in_order():
    assert date_from_iso8601("2021-01-31T23:59:59") == datetime(2021, 1, 31, 23, 59, 59)


def test_month_is_one_based():
    assert date_from_iso8601("2021-02-01T00:00:00").month == 2


def test_fraction_and_zone_are_ignored():
    assert date_from_iso8601("2021-03-04T05:06:07.890Z") == datetime(2021, 3, 4, 5, 6, 7)


def test_missing_time_defaults_to_midnight():
    assert date_from_iso8601("2021-03-04") == datetime(2021, 3, 4)


@pytest.mark.parametrize("raw", ["", "yesterday", "2021-13-01", "2021-02"])
def test_bad_input_raises(raw):
    with pytest.raises(ValueError):
        date_from_iso8601(raw)


def test_to_timestamp_normalises():
    assert to_timestamp("2021-1-5T3:4:5") == "2021-01-05T03:04:05"


def test_parse_query_data_ignores_unknown_and_empty():
    assert parse_query_data({"page": "2", "foo": "bar", "keywords": ""}) is None
    assert parse_query_data({"status": "flagged", "page": "1"}) == {"status": "flagged"}
    assert parse_query_data(None) is None


@pytest.mark.parametrize(
    "raw,expected",
    [(None, 0), ("3", 3), ("-2", 0), ("abc", 0), ("99999999999999999999", MAX_PAGE)],
)
def test_parse_page(raw, expected):
    assert parse_page(raw) == expected


def test_query_sql_combines_filters():
    where, params = ReportQuery(keywords="fire Town", status="Flagged", media="twitter").to_sql()
    assert where.count("LIKE") == 4
    assert "flagged = 1" in where
    assert "media = ?" in where
    assert params == ["%fire%", "%fire%", "%town%", "%town%", "twitter"]


def test_unknown_status_is_ignored():
    where, params = ReportQuery(status="bogus").to_sql()
    assert where == "1 = 1"
    assert params == []


def test_like_wildcards_are_escaped():
    _, params = ReportQuery(keywords="100%").to_sql()
    assert params[0] == "%100\\%%"
