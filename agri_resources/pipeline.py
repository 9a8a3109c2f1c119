import logging
from typing import Optional

from agri_resources.core.config import settings
from agri_resources.core.errors import ConfigurationError, InputError
from agri_resources.geo.distance import is_valid_coordinate
from agri_resources.models import Coordinate, RankedResource
from agri_resources.places.places_client import PlacesClient, places_client
from agri_resources.ranking.ranker import ranker
from agri_resources.recall.dedup import dedupe_candidates
from agri_resources.recall.fanout import PlaceQueryFanout

logger = logging.getLogger(__name__)


def validate_origin(lat: Optional[float], lon: Optional[float]) -> Coordinate:
    if lat is None or lon is None:
        raise InputError("Both lat and lon query parameters are required")
    if not is_valid_coordinate(lat, lon):
        raise InputError(
            "lat must be within [-90, 90] and lon within [-180, 180], "
            f"got lat={lat}, lon={lon}"
        )
    # The UI sends 0,0 when the farm location was never set
    if lat == 0 and lon == 0:
        raise InputError("lat and lon must not both be zero; set the farm location")
    return Coordinate(lat=lat, lon=lon)


async def find_nearby_resources(
    lat: Optional[float],
    lon: Optional[float],
    client: Optional[PlacesClient] = None,
    keywords: Optional[list[tuple[str, str]]] = None,
    radius_m: Optional[int] = None,
) -> list[RankedResource]:
    """
    Nearby agri-supply stores around a farm, closest first.

    Input and configuration are checked before any provider call. The four
    stages (fanout, dedup, distance, sort) run fresh for every call.
    """
    origin = validate_origin(lat, lon)

    client = client or places_client
    if not client.api_key:
        raise ConfigurationError(
            "Places provider is not configured: GOOGLE_MAPS_API_KEY is missing"
        )

    if keywords is None:
        keywords = settings.RESOURCE_KEYWORDS
    if radius_m is None:
        radius_m = settings.RESOURCE_RADIUS_M

    # 1. Fanout
    candidates = await PlaceQueryFanout(client).search(origin, radius_m, keywords)

    # 2. Dedup
    unique = dedupe_candidates(candidates)

    # 3. Distance + sort
    results = ranker.rank(unique, origin)

    logger.info(
        f"Resource search at ({origin.lat:.4f}, {origin.lon:.4f}): "
        f"{len(candidates)} candidates, {len(unique)} unique, {len(results)} ranked"
    )
    return results
