"""Pytest fixtures for Shul Board tests."""

import pytest

from shul_board.models import (
    Coordinate,
    DailyTimeMarkers,
    PrayerItem,
    ScheduleConfig,
    Zmanim,
)
from shul_board.store import JsonFileStorage, PersistedConfigStore


@pytest.fixture
def jerusalem() -> Coordinate:
    """Default board location."""
    return Coordinate(latitude=31.7683, longitude=35.2137)


@pytest.fixture
def sample_zmanim() -> Zmanim:
    """Weekday zmanim without Shabbat times."""
    return Zmanim(
        alot_hashachar="04:58",
        misheyakir="05:26",
        sunrise="06:12",
        sof_zman_shma_mga="08:53",
        sof_zman_shma_gra="09:29",
        sof_zman_tfilla_gra="10:34",
        chatzot="12:28",
        mincha_gedola="12:59",
        mincha_ketana="16:11",
        plag_hamincha="17:30",
        sunset="18:45",
        tzeit_hakochavim="19:08",
    )


@pytest.fixture
def sample_markers(sample_zmanim: Zmanim) -> DailyTimeMarkers:
    """Time markers for 14 Nisan, parashat Tzav."""
    return DailyTimeMarkers(
        date="2026-04-01",
        hebrew="י״ד ניסן",
        parasha="צו",
        times=sample_zmanim,
    )


@pytest.fixture
def sample_settings() -> ScheduleConfig:
    """A non-default schedule configuration."""
    return ScheduleConfig(
        announcements=("שבת שלום", "קידוש לאחר התפילה"),
        prayers=(
            PrayerItem(id="p1", name="ותיקין", time="05:45"),
            PrayerItem(id="p2", name="מנחה", time="13:30"),
        ),
        lessons=(PrayerItem(id="l1", name="שיעור גמרא", time="20:00"),),
    )


@pytest.fixture
def storage(tmp_path) -> JsonFileStorage:
    """Empty file-backed storage."""
    return JsonFileStorage(tmp_path / "settings.json")


@pytest.fixture
def store(storage: JsonFileStorage) -> PersistedConfigStore:
    """Config store over empty storage."""
    return PersistedConfigStore(storage)
