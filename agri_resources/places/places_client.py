import asyncio
import logging
from typing import Optional

import aiohttp

from agri_resources.core.config import settings
from agri_resources.core.errors import UpstreamError
from agri_resources.models import Coordinate, PlaceCandidate

logger = logging.getLogger(__name__)

# ZERO_RESULTS is a successful search with an empty result list
SUCCESS_STATUSES = {"OK", "ZERO_RESULTS"}


class PlacesClient:
    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None):
        self._api_key = api_key
        self._timeout = timeout

    @property
    def api_key(self) -> str:
        if self._api_key is not None:
            return self._api_key
        return settings.GOOGLE_MAPS_API_KEY

    @property
    def timeout(self) -> float:
        if self._timeout is not None:
            return self._timeout
        return settings.PLACES_REQUEST_TIMEOUT_SECONDS

    @property
    def provider(self) -> str:
        return settings.PLACES_PROVIDER_NAME

    async def nearby_search(
        self, origin: Coordinate, radius_m: int, keyword: str, category: str
    ) -> list[PlaceCandidate]:
        """
        One keyword search around `origin`, in the provider's result order.
        Raises UpstreamError on any transport, status or payload problem.
        """
        params = {
            "location": f"{origin.lat},{origin.lon}",
            "radius": str(radius_m),
            "keyword": keyword,
            "key": self.api_key,
        }
        payload = await self._get_json(params, keyword)

        if not isinstance(payload, dict):
            raise UpstreamError(
                f"{self.provider} returned a malformed payload for keyword '{keyword}'"
            )

        status = payload.get("status")
        if status not in SUCCESS_STATUSES:
            message = payload.get("error_message") or "no error message"
            raise UpstreamError(
                f"{self.provider} search for keyword '{keyword}' failed "
                f"with status {status}: {message}"
            )

        results = payload.get("results", [])
        if not isinstance(results, list):
            raise UpstreamError(
                f"{self.provider} returned a malformed result list for keyword '{keyword}'"
            )

        candidates = []
        for item in results:
            if not isinstance(item, dict):
                raise UpstreamError(
                    f"{self.provider} returned a malformed place for keyword '{keyword}'"
                )
            candidates.append(self._parse_result(item, keyword, category))

        logger.debug(f"Keyword '{keyword}' returned {len(candidates)} places")
        return candidates

    async def _get_json(self, params: dict, keyword: str):
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(settings.PLACES_API_URL, params=params) as resp:
                    if resp.status != 200:
                        error_text = await resp.text()
                        logger.error(
                            f"Places Service Error: {resp.status} - {error_text[:200]}"
                        )
                        raise UpstreamError(
                            f"{self.provider} search for keyword '{keyword}' "
                            f"returned HTTP {resp.status}"
                        )
                    return await resp.json(content_type=None)
        except aiohttp.ClientError as e:
            logger.error(f"Failed to connect to Places Service: {e}")
            raise UpstreamError(
                f"{self.provider} search for keyword '{keyword}' failed: {e}"
            ) from e
        except asyncio.TimeoutError as e:
            logger.error(f"Places Service timed out for keyword '{keyword}'")
            raise UpstreamError(
                f"{self.provider} search for keyword '{keyword}' timed out "
                f"after {self.timeout:.0f}s"
            ) from e
        except ValueError as e:
            logger.error(f"Places Service returned invalid JSON: {e}")
            raise UpstreamError(
                f"{self.provider} returned invalid JSON for keyword '{keyword}'"
            ) from e

    def _parse_result(self, item: dict, keyword: str, category: str) -> PlaceCandidate:
        place_id = item.get("place_id")
        return PlaceCandidate(
            place_id=str(place_id) if place_id else None,
            name=str(item.get("name") or ""),
            location=self._parse_location(item),
            rating=self._parse_rating(item.get("rating")),
            keyword=keyword,
            category=category,
        )

    def _parse_location(self, item: dict) -> Optional[Coordinate]:
        geometry = item.get("geometry") or {}
        location = geometry.get("location") if isinstance(geometry, dict) else None
        if not isinstance(location, dict):
            return None
        try:
            return Coordinate(lat=float(location["lat"]), lon=float(location["lng"]))
        except (KeyError, TypeError, ValueError):
            return None

    def _parse_rating(self, rating) -> Optional[float]:
        if rating is None or isinstance(rating, bool):
            return None
        try:
            value = float(rating)
        except (TypeError, ValueError):
            return None
        if not 0.0 <= value <= 5.0:
            return None
        return value


places_client = PlacesClient()
