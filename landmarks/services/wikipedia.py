# Upstream proxy for the MediaWiki action API (geosearch + page details).
# No retries here; the calling client owns retry policy.

from typing import Any, Dict, List

import httpx
import pydantic
import structlog

from landmarks.core.config import Settings, settings as default_settings
from landmarks.core.exceptions import NotFoundError, UpstreamError
from landmarks.models.dto import Landmark, LandmarkDetail, Thumbnail

logger = structlog.get_logger(__name__)

GEOSEARCH_FIELDS = ("pageid", "title", "lat", "lon", "dist", "primary")


def build_http_client(settings: Settings = default_settings, **kwargs) -> httpx.AsyncClient:
    """Pooled client shared by every upstream call for the lifetime of the app."""
    return httpx.AsyncClient(
        timeout=settings.WIKIPEDIA_TIMEOUT,
        headers={"User-Agent": settings.WIKIPEDIA_USER_AGENT},
        **kwargs,
    )


class WikipediaClient:
    """Translates landmark queries into MediaWiki API calls and reshapes the answers."""

    def __init__(self, http_client: httpx.AsyncClient, settings: Settings = default_settings):
        self.http_client = http_client
        self.settings = settings

    async def search(self, lat: float, lon: float, radius: float) -> List[Landmark]:
        """
        Pages near (lat, lon) within radius meters, in upstream order (nearest first).

        Fields the upstream leaves out stay absent on the Landmark.
        """
        params = {
            "action": "query",
            "list": "geosearch",
            "gscoord": f"{lat}|{lon}",
            "gsradius": str(int(round(radius))),
            "gslimit": str(self.settings.GEOSEARCH_LIMIT),
            "format": "json",
        }
        data = await self._query(params)
        hits = (data.get("query") or {}).get("geosearch") or []

        landmarks: List[Landmark] = []
        for item in hits[: self.settings.GEOSEARCH_LIMIT]:
            fields = {key: item[key] for key in GEOSEARCH_FIELDS if key in item}
            landmarks.append(self._validate(Landmark, fields))
        logger.info("geosearch_completed", lat=lat, lon=lon, radius=radius, count=len(landmarks))
        return landmarks

    async def detail(self, pageid: int) -> LandmarkDetail:
        """
        Introductory extract, thumbnail and canonical URL for one page.

        Raises:
            NotFoundError: when the upstream reports the page missing.
        """
        params = {
            "action": "query",
            "pageids": str(pageid),
            "prop": "extracts|pageimages|info|coordinates",
            "exintro": "1",
            "explaintext": "1",
            "piprop": "thumbnail",
            "pithumbsize": str(self.settings.THUMBNAIL_SIZE),
            "inprop": "url",
            "format": "json",
        }
        data = await self._query(params)
        pages = (data.get("query") or {}).get("pages") or {}
        page = pages.get(str(pageid))

        if not page or "missing" in page or "invalid" in page:
            logger.info("page_not_found", pageid=pageid)
            raise NotFoundError()

        fields: Dict[str, Any] = {"pageid": page.get("pageid", pageid), "title": page.get("title")}
        if page.get("extract") is not None:
            fields["extract"] = page["extract"]
        if page.get("fullurl"):
            fields["url"] = page["fullurl"]
        thumb = page.get("thumbnail")
        if thumb:
            fields["thumbnail"] = self._validate(
                Thumbnail,
                {"source": thumb.get("source"), "width": thumb.get("width"), "height": thumb.get("height")},
            )
        coords = page.get("coordinates") or []
        if coords:
            fields["lat"] = coords[0].get("lat")
            fields["lon"] = coords[0].get("lon")
        return self._validate(LandmarkDetail, fields)

    async def _query(self, params: Dict[str, str]) -> Dict[str, Any]:
        try:
            response = await self.http_client.get(self.settings.WIKIPEDIA_API_URL, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error("upstream_status_error", status_code=status_code, reason=e.response.reason_phrase)
            raise UpstreamError(
                f"Wikipedia API error: {status_code} {e.response.reason_phrase}",
                upstream_status=status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error("upstream_transport_error", error=str(e), error_type=type(e).__name__)
            raise UpstreamError(f"Wikipedia API unreachable: {type(e).__name__}") from e
        except ValueError as e:
            logger.error("upstream_invalid_json", error=str(e))
            raise UpstreamError("Wikipedia API returned invalid JSON") from e

        if not isinstance(data, dict):
            raise UpstreamError("Wikipedia API returned an unexpected payload")
        if "error" in data:
            err = data["error"] or {}
            logger.error("upstream_api_error", code=err.get("code"), info=err.get("info"))
            raise UpstreamError(f"Wikipedia API error: {err.get('info') or err.get('code') or 'unknown'}")
        return data

    @staticmethod
    def _validate(model: Any, fields: Dict[str, Any]) -> Any:
        try:
            return model.model_validate(fields)
        except pydantic.ValidationError as e:
            logger.error("upstream_payload_invalid", model=model.__name__, errors=e.error_count())
            raise UpstreamError(f"Wikipedia API returned a malformed {model.__name__}") from e
