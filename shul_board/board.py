"""Display board: wires location, data orchestration and settings together."""

import asyncio
import logging
from collections.abc import Coroutine
from datetime import date, datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from .config import Config
from .hebcal import HebcalClient
from .insight import InsightClient
from .location import IpGeolocator, LocationResolver
from .models import Coordinate, DailyTimeMarkers, OrchestrationState, ScheduleConfig
from .orchestrator import ScheduleDataOrchestrator, StateListener
from .presentation import BoardView, derive_view
from .store import JsonFileStorage, PersistedConfigStore

logger = logging.getLogger(__name__)


def seconds_until_midnight(now: datetime) -> float:
    """Seconds from an aware datetime until the next local midnight."""
    tomorrow = (now + timedelta(days=1)).date()
    midnight = datetime.combine(tomorrow, datetime.min.time(), tzinfo=now.tzinfo)
    return max((midnight - now).total_seconds(), 0.0)


class DisplayBoard:
    """Process-wide board state for one running display."""

    def __init__(
        self,
        config: Config,
        *,
        store: PersistedConfigStore | None = None,
        resolver: LocationResolver | None = None,
        orchestrator: ScheduleDataOrchestrator | None = None,
        for_date: date | None = None,
    ):
        self.config = config
        self.for_date = for_date
        self.tz = ZoneInfo(config.timezone)
        self.default_location = Coordinate(
            latitude=config.default_latitude, longitude=config.default_longitude
        )

        self.store = store or PersistedConfigStore(
            JsonFileStorage(config.settings_path)
        )

        if resolver is None:
            locate = None
            if config.geolocation_enabled:
                geolocator = IpGeolocator(
                    url=config.geolocation_url, timeout=config.geolocation_timeout
                )
                locate = geolocator.locate
            resolver = LocationResolver(
                locate,
                default=self.default_location,
                timeout=config.geolocation_timeout,
            )
        self.resolver = resolver

        if orchestrator is None:
            self.hebcal = HebcalClient(
                timeout=config.request_timeout,
                tzid=config.timezone,
                base_url=config.hebcal_base_url,
            )
            insight = InsightClient(
                api_key=config.gemini_api_key,
                model=config.gemini_model,
                timeout=config.insight_timeout,
            )
            orchestrator = ScheduleDataOrchestrator(
                self._fetch_markers, insight.get_insight
            )
        self.orchestrator = orchestrator

        self.settings: ScheduleConfig = self.store.load()
        self.location: Coordinate = self.default_location
        self._tasks: set[asyncio.Task] = set()

    async def _fetch_markers(self, coord: Coordinate) -> DailyTimeMarkers:
        return await self.hebcal.fetch_markers(coord, self._lookup_date())

    def _lookup_date(self) -> date:
        if self.for_date is not None:
            return self.for_date
        return datetime.now(self.tz).date()

    @property
    def state(self) -> OrchestrationState:
        """Current orchestration state."""
        return self.orchestrator.state

    def subscribe(self, listener: StateListener) -> None:
        """Register a callback for board state changes."""
        self.orchestrator.subscribe(listener)

    def view(self) -> BoardView:
        """What the display should show right now."""
        return derive_view(self.orchestrator.state, self.settings, self.location)

    async def start(self) -> OrchestrationState:
        """Resolve the location and run the first orchestration."""
        coord = await self.resolver.resolve(on_late_fix=self._on_late_fix)
        return await self.refresh(coord)

    async def refresh(self, coord: Coordinate | None = None) -> OrchestrationState:
        """Start a new orchestration run for a coordinate (default: current)."""
        if coord is not None:
            self.location = coord
        return await self.orchestrator.run(self.location)

    def _on_late_fix(self, coord: Coordinate) -> None:
        logger.info("Restarting with corrected location")
        self._spawn(self.refresh(coord))

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def wait_idle(self) -> None:
        """Wait for a late location reading and the runs it starts to finish."""
        while self.resolver.pending is not None or self._tasks:
            pending = self.resolver.pending
            if pending is not None:
                await asyncio.wait([pending])
            if self._tasks:
                await asyncio.gather(*list(self._tasks))

    def save_settings(self, settings: ScheduleConfig) -> None:
        """Persist new settings and show them immediately."""
        self.store.save(settings)
        self.settings = settings

    def _seconds_until_rollover(self) -> float:
        # One second past midnight so the lookup lands on the new date
        return seconds_until_midnight(datetime.now(self.tz)) + 1

    async def serve(self) -> None:
        """Run until cancelled, starting a fresh run at each local midnight."""
        await self.start()
        while True:
            delay = self._seconds_until_rollover()
            logger.info(f"Next refresh in {delay / 3600:.1f}h")
            await asyncio.sleep(delay)
            logger.info("New day, refreshing zmanim")
            await self.refresh()
