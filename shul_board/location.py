"""Best-effort location resolution for the board."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

import requests

from .errors import LocationUnavailable
from .models import Coordinate

logger = logging.getLogger(__name__)

DEFAULT_COORDINATE = Coordinate(latitude=31.7683, longitude=35.2137)  # Jerusalem


class IpGeolocator:
    """Host location capability backed by an IP geolocation service."""

    URL = "http://ip-api.com/json/"

    def __init__(self, url: str | None = None, timeout: float = 5):
        self.url = url or self.URL
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": "ShulBoard/1.0"})

    def get_position(self) -> Coordinate:
        """Read the current position once."""
        try:
            response = self.session.get(
                self.url,
                params={"fields": "status,message,lat,lon"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise LocationUnavailable(f"Geolocation request failed: {e}") from e

        if not isinstance(data, dict) or data.get("status") != "success":
            message = data.get("message") if isinstance(data, dict) else None
            raise LocationUnavailable(f"Geolocation denied: {message or 'unknown'}")

        try:
            return Coordinate(latitude=float(data["lat"]), longitude=float(data["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            raise LocationUnavailable(f"Invalid geolocation response: {e}") from e

    async def locate(self) -> Coordinate:
        """Async wrapper running the blocking lookup in a worker thread."""
        return await asyncio.to_thread(self.get_position)


class LocationResolver:
    """Resolves the board's coordinate once per session.

    Prefers the device position and falls back to the default coordinate when
    the capability is missing, the reading fails, or it does not arrive in
    time. A reading that arrives after the timeout is handed to
    ``on_late_fix`` so the caller can start a fresh run with it.
    """

    def __init__(
        self,
        locate: Callable[[], Awaitable[Coordinate]] | None,
        default: Coordinate = DEFAULT_COORDINATE,
        timeout: float = 5,
    ):
        self._locate = locate
        self.default = default
        self.timeout = timeout
        self._resolved: Coordinate | None = None
        self._pending: asyncio.Task | None = None

    @property
    def pending(self) -> asyncio.Task | None:
        """The device reading still running after a timeout, if any."""
        return self._pending

    async def resolve(
        self, on_late_fix: Callable[[Coordinate], None] | None = None
    ) -> Coordinate:
        """Resolve the coordinate. Only the first call reads the device."""
        if self._resolved is not None:
            return self._resolved

        if self._locate is None:
            logger.info("Geolocation unavailable, using default location")
            self._resolved = self.default
            return self._resolved

        task = asyncio.ensure_future(self._locate())
        try:
            self._resolved = await asyncio.wait_for(
                asyncio.shield(task), self.timeout
            )
            logger.info(
                f"Resolved device location: "
                f"({self._resolved.latitude:.4f}, {self._resolved.longitude:.4f})"
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"Geolocation timed out after {self.timeout}s, using default location"
            )
            self._resolved = self.default
            self._pending = task
            task.add_done_callback(lambda t: self._deliver_late_fix(t, on_late_fix))
        except LocationUnavailable as e:
            logger.warning(f"{e}, using default location")
            self._resolved = self.default

        return self._resolved

    def _deliver_late_fix(
        self,
        task: asyncio.Task,
        on_late_fix: Callable[[Coordinate], None] | None,
    ) -> None:
        self._pending = None
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.info(f"Late geolocation reading failed: {error}")
            return
        coord = task.result()
        logger.info(
            f"Late device location arrived: "
            f"({coord.latitude:.4f}, {coord.longitude:.4f})"
        )
        self._resolved = coord
        if on_late_fix is not None:
            on_late_fix(coord)
