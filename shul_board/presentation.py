"""Derives what the board shows from orchestration state and settings."""

from dataclasses import dataclass

from .models import (
    Coordinate,
    OrchestrationState,
    PrayerItem,
    Ready,
    ScheduleConfig,
    Zmanim,
)

LOADING_MESSAGE = "מעדכן נתונים למיקומך..."
NOT_APPLICABLE_TODAY = "אין היום"
SHABBAT_NOTE = "זמני שבת יופיעו בימי שישי"

# (field, label, highlight) in display order
MORNING_ROWS = (
    ("alot_hashachar", "עלות השחר", False),
    ("misheyakir", "זמן טלית ותפילין", True),
    ("sunrise", "הנץ החמה", True),
    ("sof_zman_shma_mga", "סוף זמן קריאת שמע (מג״א)", False),
    ("sof_zman_shma_gra", "סוף זמן קריאת שמע (גר״א)", True),
    ("sof_zman_tfilla_gra", "סוף זמן תפילה (גר״א)", False),
)

AFTERNOON_ROWS = (
    ("chatzot", "חצות היום", False),
    ("mincha_gedola", "מנחה גדולה", False),
    ("mincha_ketana", "מנחה קטנה", False),
    ("plag_hamincha", "פלג המנחה", False),
    ("sunset", "שקיעת החמה", True),
    ("tzeit_hakochavim", "צאת הכוכבים", True),
)

SHABBAT_ROWS = (
    ("candle_lighting", "הדלקת נרות שבת"),
    ("havdalah", "הבדלה"),
)


@dataclass(frozen=True)
class ZmanRow:
    """One labelled time on the board."""

    label: str
    time: str
    highlight: bool = False
    applicable: bool = True


@dataclass(frozen=True)
class LoadingView:
    """Shown while loading, and after a failed time-marker lookup."""

    announcements: tuple[str, ...]
    message: str = LOADING_MESSAGE


@dataclass(frozen=True)
class ReadyView:
    """The full schedule board."""

    announcements: tuple[str, ...]
    date: str
    hebrew_date: str
    parasha: str
    insight: str
    morning: tuple[ZmanRow, ...]
    afternoon: tuple[ZmanRow, ...]
    shabbat: tuple[ZmanRow, ...]
    prayers: tuple[PrayerItem, ...]
    lessons: tuple[PrayerItem, ...]
    shabbat_note: str | None = None
    location: Coordinate | None = None


BoardView = LoadingView | ReadyView


def _rows(
    times: Zmanim, spec: tuple[tuple[str, str, bool], ...]
) -> tuple[ZmanRow, ...]:
    return tuple(
        ZmanRow(label=label, time=getattr(times, name), highlight=highlight)
        for name, label, highlight in spec
    )


def _shabbat_rows(times: Zmanim) -> tuple[ZmanRow, ...]:
    rows = []
    for name, label in SHABBAT_ROWS:
        value = getattr(times, name)
        if value:
            rows.append(ZmanRow(label=label, time=value, highlight=True))
        else:
            rows.append(
                ZmanRow(label=label, time=NOT_APPLICABLE_TODAY, applicable=False)
            )
    return tuple(rows)


def derive_view(
    state: OrchestrationState,
    settings: ScheduleConfig,
    location: Coordinate | None = None,
) -> BoardView:
    """Derive the board view. Loading and Failed both show the loading view."""
    if not isinstance(state, Ready):
        return LoadingView(announcements=settings.announcements)

    markers = state.markers
    times = markers.times
    shabbat = _shabbat_rows(times)
    has_shabbat_times = any(row.applicable for row in shabbat)

    return ReadyView(
        announcements=settings.announcements,
        date=markers.date,
        hebrew_date=markers.hebrew,
        parasha=markers.parasha,
        insight=state.insight,
        morning=_rows(times, MORNING_ROWS),
        afternoon=_rows(times, AFTERNOON_ROWS),
        shabbat=shabbat,
        prayers=settings.prayers,
        lessons=settings.lessons,
        shabbat_note=None if has_shabbat_times else SHABBAT_NOTE,
        location=location,
    )
