import math
from typing import Optional

from geopy.distance import great_circle

from agri_resources.core.errors import DataError
from agri_resources.models import Coordinate, PlaceCandidate

EARTH_RADIUS_KM = 6371.0
DIRECTIONS_URL = "https://www.google.com/maps/dir/?api=1&destination={lat},{lon}"


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in km between two points given in degrees."""
    return great_circle((lat1, lon1), (lat2, lon2), radius=EARTH_RADIUS_KM).km


def is_valid_coordinate(lat: Optional[float], lon: Optional[float]) -> bool:
    if lat is None or lon is None:
        return False
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0


def candidate_location(candidate: PlaceCandidate) -> Coordinate:
    loc = candidate.location
    if loc is None or not is_valid_coordinate(loc.lat, loc.lon):
        raise DataError(
            f"Place {candidate.place_id or '<no id>'} ({candidate.name!r}) "
            f"from keyword '{candidate.keyword}' has no usable coordinate: {loc}"
        )
    return loc


def directions_url(location: Coordinate) -> str:
    return DIRECTIONS_URL.format(lat=f"{location.lat:.6f}", lon=f"{location.lon:.6f}")
