"""Durable storage for the board's schedule configuration."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from .models import DEFAULT_SCHEDULE, PrayerItem, ScheduleConfig

logger = logging.getLogger(__name__)

SETTINGS_KEY = "synagogue_settings"


class JsonFileStorage:
    """Key-value string storage backed by a single JSON object file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (
            OSError,
            json.JSONDecodeError,
            UnicodeDecodeError,
            RecursionError,
        ) as e:
            logger.warning(f"Failed to read storage file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Storage file {self.path} is not a JSON object")
            return {}
        return data

    def get(self, key: str) -> str | None:
        """Get the value stored under a key, or None."""
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing the file in one step."""
        data = self._read_all()
        data[key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise


def _parse_items(raw: Any) -> tuple[PrayerItem, ...]:
    if not isinstance(raw, list):
        raise TypeError("Expected a list of items")
    items = []
    for entry in raw:
        if not isinstance(entry, dict):
            raise TypeError("Expected an item object")
        values = (entry["id"], entry["name"], entry["time"])
        if not all(isinstance(v, str) for v in values):
            raise TypeError("Item fields must be strings")
        items.append(PrayerItem(id=values[0], name=values[1], time=values[2]))
    return tuple(items)


def parse_schedule_config(raw: str | None) -> ScheduleConfig | None:
    """Deserialize a stored configuration.

    Returns None when the payload is absent or not a structurally valid
    ScheduleConfig, instead of raising.
    """
    if raw is None:
        return None

    try:
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise TypeError("Expected a JSON object")

        announcements = data["announcements"]
        if not isinstance(announcements, list) or not all(
            isinstance(a, str) for a in announcements
        ):
            raise TypeError("Announcements must be a list of strings")

        return ScheduleConfig(
            announcements=tuple(announcements),
            prayers=_parse_items(data["prayers"]),
            lessons=_parse_items(data["lessons"]),
        )
    except (
        json.JSONDecodeError,
        KeyError,
        TypeError,
        ValueError,
        RecursionError,
    ) as e:
        logger.warning(f"Invalid stored configuration: {e}")
        return None


def serialize_schedule_config(config: ScheduleConfig) -> str:
    """Serialize a configuration to its stored JSON form."""
    return json.dumps(config.to_dict(), ensure_ascii=False)


class PersistedConfigStore:
    """Loads and saves the schedule configuration under a fixed key."""

    def __init__(self, storage: JsonFileStorage, key: str = SETTINGS_KEY):
        self.storage = storage
        self.key = key

    def load(self) -> ScheduleConfig:
        """Load the stored configuration, falling back to the built-in default."""
        raw = self.storage.get(self.key)
        if raw is None:
            logger.info("No stored configuration, using defaults")
            return DEFAULT_SCHEDULE

        config = parse_schedule_config(raw)
        if config is None:
            logger.warning("Stored configuration is invalid, using defaults")
            return DEFAULT_SCHEDULE

        logger.debug(
            f"Loaded configuration: {len(config.announcements)} announcements, "
            f"{len(config.prayers)} prayers, {len(config.lessons)} lessons"
        )
        return config

    def save(self, config: ScheduleConfig) -> None:
        """Persist the full configuration, replacing any previous value."""
        self.storage.set(self.key, serialize_schedule_config(config))
        logger.info(
            f"Saved configuration: {len(config.announcements)} announcements, "
            f"{len(config.prayers)} prayers, {len(config.lessons)} lessons"
        )
