"""
Viewport controller: turns map movement into a bounded stream of landmark searches.

The map widget reports "settled" events (movement stopped). Each one
replaces any pending search; only the last event of a burst survives the
quiet window and becomes a request. Every dispatched request takes a new
token, and a response is shown only if its token is still the latest, so a
slow superseded search can never overwrite fresher results.
"""

import asyncio
from typing import Optional, Protocol, Set, Tuple

import structlog

from landmarks.client.api_client import LandmarkApiClient
from landmarks.client.state import DetailState, ListState
from landmarks.core.exceptions import LandmarkError
from landmarks.models.dto import Landmark, SearchRequest
from landmarks.utils.geo import clamp, radius_for_zoom

logger = structlog.get_logger(__name__)

DEFAULT_CENTER = (40.7128, -74.0060)  # New York City
DEFAULT_ZOOM = 13
LOCATE_ZOOM = 14
SELECT_MIN_ZOOM = 15


class LocationUnavailable(Exception):
    """The device could not (or would not) report its position."""


class MapView(Protocol):
    """The interactive map widget, as far as the controller drives it."""
    def set_view(self, lat: float, lon: float, zoom: float) -> None: ...


class Geolocator(Protocol):
    async def current_position(self) -> Tuple[float, float]:
        """One-shot (lat, lon) query. Raises LocationUnavailable."""
        ...


def normalize_center(lat: float, lng: float) -> Tuple[float, float]:
    """Clamp latitude and wrap longitude into [-180, 180) after world-wrapping pans."""
    if lng < -180.0 or lng >= 180.0:
        lng = ((lng + 180.0) % 360.0) - 180.0
    return clamp(lat, -90.0, 90.0), lng


class ViewportController:
    def __init__(
        self,
        api: LandmarkApiClient,
        list_state: Optional[ListState] = None,
        detail_state: Optional[DetailState] = None,
        map_view: Optional[MapView] = None,
        geolocator: Optional[Geolocator] = None,
        debounce_seconds: float = 0.5,
    ):
        self.api = api
        self.list_state = list_state or ListState()
        self.detail_state = detail_state or DetailState()
        self.map_view = map_view
        self.geolocator = geolocator
        self.debounce_seconds = debounce_seconds

        self.center: Tuple[float, float] = DEFAULT_CENTER
        self.zoom: float = DEFAULT_ZOOM
        self.last_request: Optional[SearchRequest] = None

        self._pending: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()
        self._latest_token = 0

    @property
    def latest_token(self) -> int:
        return self._latest_token

    async def start(self) -> None:
        """Initial load: ask for the device position once."""
        await self.locate()

    async def close(self) -> None:
        """Cancel the pending debounce and wait for in-flight searches to settle."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)

    # --- viewport events ---

    def on_map_settled(self, lat: float, lng: float, zoom: float) -> None:
        """Record the new viewport and (re)start the quiet window."""
        self.center = normalize_center(lat, lng)
        self.zoom = zoom
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = asyncio.get_running_loop().create_task(
            self._debounced(self.center, zoom)
        )

    async def _debounced(self, center: Tuple[float, float], zoom: float) -> None:
        await asyncio.sleep(self.debounce_seconds)
        # Once dispatched the search is no longer cancellable by later moves;
        # its result is dropped instead if it turns out stale.
        self._spawn(self.search_for_viewport(center[0], center[1], zoom))

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def search_for_viewport(self, lat: float, lng: float, zoom: float) -> None:
        """Immediate search for a viewport, bypassing the debounce."""
        lat, lon = normalize_center(lat, lng)
        await self.search(SearchRequest(lat=lat, lon=lon, radius=radius_for_zoom(zoom)))

    async def search(self, request: SearchRequest) -> None:
        """Fetch landmarks for request and publish them unless a newer search started meanwhile."""
        self._latest_token += 1
        token = self._latest_token
        self.last_request = request
        self.list_state.loading()

        try:
            landmarks = await self.api.search(request)
        except LandmarkError as e:
            if token != self._latest_token:
                logger.info("stale_response_discarded", token=token, latest=self._latest_token, failed=True)
                return
            logger.warning("landmark_search_failed", error=e.message, error_type=type(e).__name__)
            self.list_state.failed(e)
            return

        if token != self._latest_token:
            logger.info("stale_response_discarded", token=token, latest=self._latest_token)
            return
        self.list_state.loaded(landmarks)

    async def retry(self) -> None:
        """Manual retry of the last search, immediately."""
        if self.last_request is not None:
            await self.search(self.last_request)

    # --- locate ---

    async def locate(self) -> Optional[Tuple[float, float]]:
        """
        One-shot device position query; recenters the map on success.

        Not debounced. The recentered map reports its own settle event, which
        then goes through the normal search path. Without a map widget the
        settle event is fed in directly.
        """
        if self.geolocator is None:
            return None
        try:
            lat, lon = await self.geolocator.current_position()
        except LocationUnavailable as e:
            logger.warning("locate_failed", error=str(e))
            return None

        self.center = normalize_center(lat, lon)
        self.zoom = LOCATE_ZOOM
        if self.map_view is not None:
            self.map_view.set_view(self.center[0], self.center[1], LOCATE_ZOOM)
        else:
            self.on_map_settled(self.center[0], self.center[1], LOCATE_ZOOM)
        return self.center

    # --- selection ---

    async def select(self, landmark: Landmark) -> None:
        """Open the detail panel for landmark and center the map on it."""
        if self.map_view is not None:
            self.map_view.set_view(landmark.lat, landmark.lon, max(self.zoom, SELECT_MIN_ZOOM))
        await self.load_detail(landmark.pageid)

    async def load_detail(self, pageid: int) -> None:
        self.detail_state.loading(pageid)
        try:
            detail = await self.api.detail(pageid)
        except LandmarkError as e:
            if self.detail_state.pageid == pageid:
                self.detail_state.failed(e)
            return
        # Selection may have moved on while this was loading
        if self.detail_state.pageid == pageid:
            self.detail_state.loaded(detail)

    async def retry_detail(self) -> None:
        if self.detail_state.pageid is not None:
            await self.load_detail(self.detail_state.pageid)

    def close_detail(self) -> None:
        self.detail_state.clear()
