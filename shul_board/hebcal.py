"""Hebcal API client for daily zmanim, Hebrew date and parasha."""

import asyncio
import logging
from datetime import date, datetime
from typing import Any

import requests

from .errors import TimeMarkerLookupFailed
from .models import Coordinate, DailyTimeMarkers, Zmanim

logger = logging.getLogger(__name__)

# Hebcal zmanim keys for each field of Zmanim
ZMANIM_KEYS = {
    "alot_hashachar": "alotHaShachar",
    "misheyakir": "misheyakir",
    "sunrise": "sunrise",
    "sof_zman_shma_mga": "sofZmanShmaMGA",
    "sof_zman_shma_gra": "sofZmanShma",
    "sof_zman_tfilla_gra": "sofZmanTfilla",
    "chatzot": "chatzot",
    "mincha_gedola": "minchaGedola",
    "mincha_ketana": "minchaKetana",
    "plag_hamincha": "plagHaMincha",
    "sunset": "sunset",
    "tzeit_hakochavim": "tzeit7083deg",
}

PARASHA_PREFIX = "פרשת "


def format_clock(timestamp: str) -> str:
    """Format an ISO timestamp as HH:MM in its own offset."""
    return datetime.fromisoformat(timestamp).strftime("%H:%M")


class HebcalClient:
    """Client for the Hebcal REST API."""

    BASE_URL = "https://www.hebcal.com"

    def __init__(
        self,
        timeout: float = 10,
        tzid: str = "Asia/Jerusalem",
        base_url: str | None = None,
    ):
        self.timeout = timeout
        self.tzid = tzid
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.session = requests.Session()
        self.session.headers.update(
            {
                "User-Agent": "ShulBoard/1.0",
                "Connection": "keep-alive",
            }
        )
        adapter = requests.adapters.HTTPAdapter(
            pool_connections=10,
            pool_maxsize=10,
            max_retries=1,
        )
        self.session.mount("https://", adapter)

    def _get_json(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}/{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            result = response.json()
        except (requests.RequestException, ValueError) as e:
            raise TimeMarkerLookupFailed(f"Failed to fetch {path}: {e}") from e
        if not isinstance(result, dict):
            raise TimeMarkerLookupFailed(f"Unexpected response from {path}")
        return result

    def get_zmanim(self, coord: Coordinate, for_date: date) -> dict[str, str]:
        """Fetch raw zmanim timestamps keyed by Hebcal name."""
        data = self._get_json(
            "zmanim",
            {
                "cfg": "json",
                "latitude": coord.latitude,
                "longitude": coord.longitude,
                "tzid": self.tzid,
                "date": for_date.isoformat(),
            },
        )
        times = data.get("times")
        if not isinstance(times, dict):
            raise TimeMarkerLookupFailed("Zmanim response has no times")
        return times

    def get_hebrew_date(self, for_date: date) -> str:
        """Fetch the Hebrew calendar date for a gregorian date."""
        data = self._get_json(
            "converter",
            {"cfg": "json", "date": for_date.isoformat(), "g2h": 1, "strict": 1},
        )
        hebrew = data.get("hebrew")
        if not isinstance(hebrew, str) or not hebrew:
            raise TimeMarkerLookupFailed("Converter response has no Hebrew date")
        return hebrew

    def get_shabbat_items(
        self, coord: Coordinate, for_date: date
    ) -> list[dict[str, Any]]:
        """Fetch the week's Shabbat items (parasha, candle lighting, havdalah)."""
        data = self._get_json(
            "shabbat",
            {
                "cfg": "json",
                "latitude": coord.latitude,
                "longitude": coord.longitude,
                "tzid": self.tzid,
                "gy": for_date.year,
                "gm": for_date.month,
                "gd": for_date.day,
                "M": "on",
                "lg": "he",
            },
        )
        items = data.get("items")
        if not isinstance(items, list):
            raise TimeMarkerLookupFailed("Shabbat response has no items")
        return [item for item in items if isinstance(item, dict)]

    def get_daily_markers(
        self, coord: Coordinate, for_date: date | None = None
    ) -> DailyTimeMarkers:
        """Fetch all time markers for a date and location.

        Raises TimeMarkerLookupFailed on any network error or malformed
        response; a partial result is never returned.
        """
        if for_date is None:
            for_date = date.today()

        raw_times = self.get_zmanim(coord, for_date)
        hebrew = self.get_hebrew_date(for_date)
        items = self.get_shabbat_items(coord, for_date)

        parasha = self._find_parasha(items)
        candle_lighting = self._find_time_on(items, "candles", for_date)
        havdalah = self._find_time_on(items, "havdalah", for_date)

        try:
            times = Zmanim(
                **{
                    field: format_clock(raw_times[key])
                    for field, key in ZMANIM_KEYS.items()
                },
                candle_lighting=candle_lighting,
                havdalah=havdalah,
            )
            markers = DailyTimeMarkers(
                date=for_date.isoformat(),
                hebrew=hebrew,
                parasha=parasha,
                times=times,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise TimeMarkerLookupFailed(f"Malformed zmanim response: {e}") from e

        logger.info(
            f"Fetched zmanim for {for_date} at "
            f"({coord.latitude:.4f}, {coord.longitude:.4f}): "
            f"{markers.hebrew}, פרשת {markers.parasha}"
        )
        return markers

    async def fetch_markers(
        self, coord: Coordinate, for_date: date | None = None
    ) -> DailyTimeMarkers:
        """Async wrapper running the blocking lookup in a worker thread."""
        return await asyncio.to_thread(self.get_daily_markers, coord, for_date)

    def _find_parasha(self, items: list[dict[str, Any]]) -> str:
        for item in items:
            if item.get("category") == "parashat":
                title = item.get("hebrew") or item.get("title") or ""
                return title.removeprefix(PARASHA_PREFIX).strip()
        # Holiday weeks have no parasha item
        for item in items:
            if item.get("category") == "holiday" and item.get("hebrew"):
                return item["hebrew"]
        raise TimeMarkerLookupFailed("Shabbat response has no parasha")

    def _find_time_on(
        self, items: list[dict[str, Any]], category: str, for_date: date
    ) -> str | None:
        for item in items:
            if item.get("category") != category:
                continue
            timestamp = item.get("date", "")
            try:
                if datetime.fromisoformat(timestamp).date() == for_date:
                    return format_clock(timestamp)
            except (TypeError, ValueError):
                logger.warning(f"Unparseable {category} time: {timestamp!r}")
        return None
