"""Plain-text rendering of the board for terminal preview."""

import json
from datetime import date

from .models import PrayerItem, ScheduleConfig
from .presentation import BoardView, LoadingView, ZmanRow

TITLE = "לוח בית הכנסת"
RULE = "─" * 40


def format_row(row: ZmanRow) -> str:
    """Format a labelled time, marking highlighted rows."""
    marker = "★" if row.highlight else " "
    return f"{marker} {row.label}: {row.time}"


def format_item(item: PrayerItem) -> str:
    """Format a prayer or lesson entry."""
    return f"  {item.name}: {item.time}"


def format_announcements(announcements: tuple[str, ...]) -> str:
    """Format the announcement banner."""
    if not announcements:
        return ""
    return "\n".join(f"📢 {a}" for a in announcements)


def format_section(title: str, lines: list[str]) -> str:
    """Format a titled section."""
    return f"<< {title} >>\n" + "\n".join(lines)


def format_board(view: BoardView) -> str:
    """Render a board view as plain text."""
    banner = format_announcements(view.announcements)

    if isinstance(view, LoadingView):
        parts = [banner, RULE, f"⏳ {view.message}"]
        return "\n".join(p for p in parts if p)

    header = f"{TITLE} | פרשת {view.parasha} | {view.hebrew_date}"
    parts = [
        banner,
        RULE,
        header,
        f'"{view.insight}"',
        RULE,
        format_section("זמני הבוקר", [format_row(r) for r in view.morning]),
        format_section("צהריים וערב", [format_row(r) for r in view.afternoon]),
        format_section("תפילות ושיעורים", [format_item(p) for p in view.prayers]),
        format_section("שיעורי תורה", [format_item(lesson) for lesson in view.lessons]),
        format_section("שבת", [format_row(r) for r in view.shabbat]),
    ]
    if view.shabbat_note:
        parts.append(view.shabbat_note)

    footer = f"{RULE}\n"
    if view.location is not None:
        footer += (
            f"הלוח מבוסס מיקום בזמן אמת "
            f"({view.location.latitude:.2f}, {view.location.longitude:.2f}) | "
        )
    footer += f"© {date.fromisoformat(view.date).year}"
    parts.append(footer)

    return "\n\n".join(p for p in parts if p)


def format_settings(config: ScheduleConfig) -> str:
    """Render a configuration as pretty JSON."""
    return json.dumps(config.to_dict(), ensure_ascii=False, indent=2)
