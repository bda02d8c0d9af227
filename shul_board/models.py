"""Data models for the synagogue display board."""

from dataclasses import dataclass, fields

INSIGHT_PLACEHOLDER = "טוען דבר תורה..."


@dataclass(frozen=True)
class Coordinate:
    """A geographic position in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if not -90 <= self.latitude <= 90:
            raise ValueError(f"Latitude out of range: {self.latitude}")
        if not -180 <= self.longitude <= 180:
            raise ValueError(f"Longitude out of range: {self.longitude}")


@dataclass(frozen=True)
class Zmanim:
    """Display times (HH:MM) of the daily halachic time markers."""

    alot_hashachar: str  # Dawn
    misheyakir: str  # Earliest tallit and tefillin
    sunrise: str
    sof_zman_shma_mga: str
    sof_zman_shma_gra: str
    sof_zman_tfilla_gra: str
    chatzot: str  # Midday
    mincha_gedola: str
    mincha_ketana: str
    plag_hamincha: str
    sunset: str
    tzeit_hakochavim: str  # Nightfall
    candle_lighting: str | None = None  # Only on the eve of Shabbat or a holiday
    havdalah: str | None = None  # Only when Shabbat or a holiday ends

    def __post_init__(self) -> None:
        """Validate that every required time is present."""
        for f in fields(self):
            if f.name in ("candle_lighting", "havdalah"):
                continue
            value = getattr(self, f.name)
            if not isinstance(value, str) or not value:
                raise ValueError(f"Missing time marker: {f.name}")


@dataclass(frozen=True)
class DailyTimeMarkers:
    """Time markers for one date and location, with calendar metadata."""

    date: str  # ISO gregorian date
    hebrew: str  # Hebrew calendar date
    parasha: str  # Weekly Torah portion
    times: Zmanim

    def __post_init__(self) -> None:
        """Validate calendar metadata."""
        if not self.hebrew:
            raise ValueError("Missing Hebrew date")
        if not self.parasha:
            raise ValueError("Missing parasha name")


@dataclass(frozen=True)
class PrayerItem:
    """A scheduled prayer or lesson."""

    id: str
    name: str
    time: str  # Display text, e.g. "06:30" or "15 דק׳ לפני השקיעה"


def _check_unique_ids(items: tuple[PrayerItem, ...], kind: str) -> None:
    seen: set[str] = set()
    for item in items:
        if item.id in seen:
            raise ValueError(f"Duplicate {kind} id: {item.id}")
        seen.add(item.id)


@dataclass(frozen=True)
class ScheduleConfig:
    """User-editable board configuration. Sequence order is display order."""

    announcements: tuple[str, ...] = ()
    prayers: tuple[PrayerItem, ...] = ()
    lessons: tuple[PrayerItem, ...] = ()

    def __post_init__(self) -> None:
        """Validate that ids are unique within each sequence."""
        _check_unique_ids(self.prayers, "prayer")
        _check_unique_ids(self.lessons, "lesson")

    def to_dict(self) -> dict:
        """Serialize to the persisted JSON shape."""
        return {
            "announcements": list(self.announcements),
            "prayers": [_item_to_dict(p) for p in self.prayers],
            "lessons": [_item_to_dict(lesson) for lesson in self.lessons],
        }


def _item_to_dict(item: PrayerItem) -> dict[str, str]:
    return {"id": item.id, "name": item.name, "time": item.time}


DEFAULT_SCHEDULE = ScheduleConfig(
    announcements=(
        "ברוכים הבאים לבית הכנסת!",
        "נא לשמור על קדושת המקום.",
        "הציבור מוזמן לשיעור דף היומי לאחר תפילת שחרית.",
        "נא לכבות טלפונים ניידים בכניסה.",
    ),
    prayers=(
        PrayerItem(id="p1", name="שחרית מנין א׳", time="06:30"),
        PrayerItem(id="p2", name="שחרית מנין ב׳", time="08:00"),
        PrayerItem(id="p3", name="מנחה וערבית", time="15 דק׳ לפני השקיעה"),
    ),
    lessons=(
        PrayerItem(id="l1", name="שיעור דף היומי", time="18:00"),
        PrayerItem(id="l2", name="שיעור הלכה", time="בין מנחה לערבית"),
    ),
)


@dataclass(frozen=True)
class Loading:
    """An orchestration run is in progress."""


@dataclass(frozen=True)
class Ready:
    """Time markers are available; the insight may still be the placeholder."""

    markers: DailyTimeMarkers
    insight: str = INSIGHT_PLACEHOLDER


@dataclass(frozen=True)
class Failed:
    """The time-marker lookup failed for the latest run."""

    reason: str = ""


OrchestrationState = Loading | Ready | Failed
