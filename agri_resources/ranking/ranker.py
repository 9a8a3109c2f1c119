import logging

from agri_resources.core.errors import DataError
from agri_resources.geo.distance import candidate_location, directions_url, haversine_km
from agri_resources.models import Coordinate, PlaceCandidate, RankedResource

logger = logging.getLogger(__name__)


class Ranker:
    def rank(
        self, candidates: dict[str, PlaceCandidate], origin: Coordinate
    ) -> list[RankedResource]:
        ranked_results = []

        for key, item in candidates.items():
            # 1. Usable location, otherwise skip
            try:
                location = candidate_location(item)
            except DataError as e:
                logger.warning(f"Dropping candidate: {e.detail}")
                continue

            # 2. Distance from this run's origin
            dist_km = haversine_km(origin.lat, origin.lon, location.lat, location.lon)

            ranked_results.append(
                RankedResource(
                    id=key,
                    name=item.name,
                    category=item.category,
                    distance_km=dist_km,
                    rating=item.rating,
                    directions_url=directions_url(location),
                )
            )

        # Sort asc; list.sort is stable so ties keep first-seen order
        ranked_results.sort(key=lambda r: r.distance_km)
        return ranked_results


ranker = Ranker()
