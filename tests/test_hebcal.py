"""Tests for the Hebcal API client."""

import asyncio
from datetime import date

import pytest
import responses

from shul_board.errors import TimeMarkerLookupFailed
from shul_board.hebcal import HebcalClient, format_clock

ZMANIM_URL = "https://www.hebcal.com/zmanim"
CONVERTER_URL = "https://www.hebcal.com/converter"
SHABBAT_URL = "https://www.hebcal.com/shabbat"

WEEKDAY = date(2026, 4, 1)
FRIDAY = date(2026, 4, 3)


def _zmanim_times(day: date) -> dict[str, str]:
    d = day.isoformat()
    return {
        "alotHaShachar": f"{d}T04:58:12+03:00",
        "misheyakir": f"{d}T05:26:40+03:00",
        "sunrise": f"{d}T06:12:05+03:00",
        "sofZmanShmaMGA": f"{d}T08:53:00+03:00",
        "sofZmanShma": f"{d}T09:29:00+03:00",
        "sofZmanTfilla": f"{d}T10:34:00+03:00",
        "chatzot": f"{d}T12:28:00+03:00",
        "minchaGedola": f"{d}T12:59:00+03:00",
        "minchaKetana": f"{d}T16:11:00+03:00",
        "plagHaMincha": f"{d}T17:30:00+03:00",
        "sunset": f"{d}T18:45:30+03:00",
        "tzeit7083deg": f"{d}T19:08:00+03:00",
    }


SHABBAT_ITEMS = [
    {
        "title": "הדלקת נרות: 18:23",
        "date": "2026-04-03T18:23:00+03:00",
        "category": "candles",
        "hebrew": "הדלקת נרות",
    },
    {
        "title": "פרשת צו",
        "date": "2026-04-04",
        "category": "parashat",
        "hebrew": "פרשת צו",
    },
    {
        "title": "הבדלה: 19:40",
        "date": "2026-04-04T19:40:00+03:00",
        "category": "havdalah",
        "hebrew": "הבדלה",
    },
]


def _add_responses(day: date, items=None, times=None, hebrew="י״ד ניסן תשפ״ו"):
    responses.add(
        responses.GET,
        ZMANIM_URL,
        json={"date": day.isoformat(), "times": times or _zmanim_times(day)},
        status=200,
    )
    responses.add(
        responses.GET,
        CONVERTER_URL,
        json={"gy": day.year, "hebrew": hebrew},
        status=200,
    )
    responses.add(
        responses.GET,
        SHABBAT_URL,
        json={"items": SHABBAT_ITEMS if items is None else items},
        status=200,
    )


@pytest.fixture
def client():
    return HebcalClient()


def test_format_clock():
    assert format_clock("2026-04-01T06:12:59+03:00") == "06:12"
    assert format_clock("2026-04-01T18:45:00-05:00") == "18:45"


@responses.activate
def test_get_daily_markers_weekday(client, jerusalem):
    _add_responses(WEEKDAY)
    markers = client.get_daily_markers(jerusalem, WEEKDAY)

    assert markers.date == "2026-04-01"
    assert markers.hebrew == "י״ד ניסן תשפ״ו"
    assert markers.parasha == "צו"
    assert markers.times.sunrise == "06:12"
    assert markers.times.sunset == "18:45"
    assert markers.times.sof_zman_shma_gra == "09:29"
    assert markers.times.tzeit_hakochavim == "19:08"
    assert markers.times.candle_lighting is None
    assert markers.times.havdalah is None


@responses.activate
def test_get_daily_markers_friday_has_candle_lighting(client, jerusalem):
    _add_responses(FRIDAY)
    markers = client.get_daily_markers(jerusalem, FRIDAY)

    assert markers.times.candle_lighting == "18:23"
    assert markers.times.havdalah is None


@responses.activate
def test_get_daily_markers_sends_location(client, jerusalem):
    _add_responses(WEEKDAY)
    client.get_daily_markers(jerusalem, WEEKDAY)

    zmanim_request = responses.calls[0].request
    assert "latitude=31.7683" in zmanim_request.url
    assert "longitude=35.2137" in zmanim_request.url
    assert "date=2026-04-01" in zmanim_request.url
    assert "tzid=Asia%2FJerusalem" in zmanim_request.url


@responses.activate
def test_get_daily_markers_holiday_week(client, jerusalem):
    items = [{"title": "פסח א׳", "date": "2026-04-02", "category": "holiday", "hebrew": "פסח א׳"}]
    _add_responses(WEEKDAY, items=items)
    markers = client.get_daily_markers(jerusalem, WEEKDAY)
    assert markers.parasha == "פסח א׳"


@responses.activate
def test_network_error(client, jerusalem):
    responses.add(responses.GET, ZMANIM_URL, status=500)
    with pytest.raises(TimeMarkerLookupFailed):
        client.get_daily_markers(jerusalem, WEEKDAY)


@responses.activate
def test_missing_time_marker(client, jerusalem):
    times = _zmanim_times(WEEKDAY)
    del times["sunset"]
    _add_responses(WEEKDAY, times=times)
    with pytest.raises(TimeMarkerLookupFailed, match="Malformed"):
        client.get_daily_markers(jerusalem, WEEKDAY)


@responses.activate
def test_missing_hebrew_date(client, jerusalem):
    _add_responses(WEEKDAY, hebrew="")
    with pytest.raises(TimeMarkerLookupFailed, match="Hebrew date"):
        client.get_daily_markers(jerusalem, WEEKDAY)


@responses.activate
def test_missing_parasha(client, jerusalem):
    _add_responses(WEEKDAY, items=[])
    with pytest.raises(TimeMarkerLookupFailed, match="parasha"):
        client.get_daily_markers(jerusalem, WEEKDAY)


@responses.activate
def test_non_json_response(client, jerusalem):
    responses.add(responses.GET, ZMANIM_URL, body="<html>oops</html>", status=200)
    with pytest.raises(TimeMarkerLookupFailed):
        client.get_daily_markers(jerusalem, WEEKDAY)


@responses.activate
def test_fetch_markers_async(client, jerusalem):
    _add_responses(WEEKDAY)
    markers = asyncio.run(client.fetch_markers(jerusalem, WEEKDAY))
    assert markers.parasha == "צו"
