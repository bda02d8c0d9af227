"""Configuration management for the synagogue display board."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


def get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


def get_data_dir() -> Path:
    """Get the data directory."""
    return get_project_root() / "data"


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None


@dataclass(frozen=True)
class Config:
    """Immutable application configuration."""

    log_level: str = "INFO"
    default_latitude: float = 31.7683  # Jerusalem
    default_longitude: float = 35.2137
    timezone: str = "Asia/Jerusalem"
    hebcal_base_url: str = "https://www.hebcal.com"
    request_timeout: float = 10
    # Geolocation (optional, falls back to the default coordinate)
    geolocation_enabled: bool = True
    geolocation_url: str = "http://ip-api.com/json/"
    geolocation_timeout: float = 5
    # Insight generation (optional, the placeholder text stays without a key)
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.5-flash"
    insight_timeout: float = 15
    settings_path: Path = get_data_dir() / "settings.json"

    def __post_init__(self) -> None:
        """Validate the default coordinate."""
        if not -90 <= self.default_latitude <= 90:
            raise ValueError("DEFAULT_LATITUDE must be between -90 and 90")
        if not -180 <= self.default_longitude <= 180:
            raise ValueError("DEFAULT_LONGITUDE must be between -180 and 180")

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        settings_path = os.getenv("SETTINGS_PATH")

        config = cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            default_latitude=_env_float("DEFAULT_LATITUDE", cls.default_latitude),
            default_longitude=_env_float("DEFAULT_LONGITUDE", cls.default_longitude),
            timezone=os.getenv("TIMEZONE", cls.timezone),
            hebcal_base_url=os.getenv("HEBCAL_BASE_URL", cls.hebcal_base_url),
            request_timeout=_env_float("REQUEST_TIMEOUT", cls.request_timeout),
            geolocation_enabled=os.getenv("GEOLOCATION_ENABLED", "true").lower()
            == "true",
            geolocation_url=os.getenv("GEOLOCATION_URL", cls.geolocation_url),
            geolocation_timeout=_env_float(
                "GEOLOCATION_TIMEOUT", cls.geolocation_timeout
            ),
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            gemini_model=os.getenv("GEMINI_MODEL", cls.gemini_model),
            insight_timeout=_env_float("INSIGHT_TIMEOUT", cls.insight_timeout),
            settings_path=Path(settings_path) if settings_path else cls.settings_path,
        )

        if config.gemini_api_key:
            logger.info(f"Daily insight: ENABLED (model {config.gemini_model})")
        else:
            logger.info(
                "Daily insight: DISABLED "
                "(set GEMINI_API_KEY to enable, placeholder text will be shown)"
            )

        if not config.geolocation_enabled:
            logger.info(
                f"Geolocation disabled, using default location "
                f"({config.default_latitude}, {config.default_longitude})"
            )

        return config

    def setup_logging(self) -> None:
        """Configure application logging."""
        logging.basicConfig(
            level=getattr(logging, self.log_level.upper()),
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
