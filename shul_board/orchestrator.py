"""Two-stage data orchestration: time markers first, then the daily insight."""

import logging
from collections.abc import Awaitable, Callable

from .errors import InsightLookupFailed, TimeMarkerLookupFailed
from .models import (
    INSIGHT_PLACEHOLDER,
    Coordinate,
    DailyTimeMarkers,
    Failed,
    Loading,
    OrchestrationState,
    Ready,
)

logger = logging.getLogger(__name__)

MarkersLookup = Callable[[Coordinate], Awaitable[DailyTimeMarkers]]
InsightLookup = Callable[[str, str], Awaitable[str]]
StateListener = Callable[[OrchestrationState], None]


class ScheduleDataOrchestrator:
    """Runs the time-marker and insight lookups for a coordinate.

    Every run takes a new, increasing run id. A run commits its result only
    while its id is the latest one started, so a slow earlier run can never
    overwrite the result of a later one.
    """

    def __init__(self, fetch_markers: MarkersLookup, fetch_insight: InsightLookup):
        self._fetch_markers = fetch_markers
        self._fetch_insight = fetch_insight
        self._state: OrchestrationState = Loading()
        self._latest_run = 0
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> OrchestrationState:
        """The state committed by the latest run."""
        return self._state

    @property
    def latest_run(self) -> int:
        """Id of the most recently started run (0 before the first run)."""
        return self._latest_run

    def subscribe(self, listener: StateListener) -> None:
        """Register a callback for committed state changes."""
        self._listeners.append(listener)

    async def run(self, coord: Coordinate) -> OrchestrationState:
        """Run both lookups for a coordinate.

        Returns this run's outcome. If a newer run started in the meantime the
        outcome is discarded and ``state`` keeps the newer run's value.
        """
        self._latest_run += 1
        run_id = self._latest_run
        self._commit(run_id, Loading())
        logger.info(
            f"Run {run_id}: fetching zmanim for "
            f"({coord.latitude:.4f}, {coord.longitude:.4f})"
        )

        try:
            markers = await self._fetch_markers(coord)
        except TimeMarkerLookupFailed as e:
            logger.error(f"Run {run_id}: time marker lookup failed: {e}")
            return self._commit(run_id, Failed(reason=str(e)))

        insight = INSIGHT_PLACEHOLDER
        try:
            insight = await self._fetch_insight(markers.parasha, markers.hebrew)
        except InsightLookupFailed as e:
            logger.warning(
                f"Run {run_id}: insight lookup failed, keeping placeholder: {e}"
            )
        if not insight:
            insight = INSIGHT_PLACEHOLDER

        return self._commit(run_id, Ready(markers=markers, insight=insight))

    def _commit(self, run_id: int, state: OrchestrationState) -> OrchestrationState:
        if run_id != self._latest_run:
            logger.info(
                f"Run {run_id}: discarding {type(state).__name__} result, "
                f"superseded by run {self._latest_run}"
            )
            return state

        self._state = state
        for listener in self._listeners:
            listener(state)
        return state
