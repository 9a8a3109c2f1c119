import asyncio
import logging
from typing import Optional

from agri_resources.core.config import settings
from agri_resources.core.errors import ConfigurationError, UpstreamError
from agri_resources.models import Coordinate, PlaceCandidate
from agri_resources.places.places_client import PlacesClient, places_client

logger = logging.getLogger(__name__)


class PlaceQueryFanout:
    def __init__(
        self, client: Optional[PlacesClient] = None, timeout: Optional[float] = None
    ):
        self.client = client or places_client
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        if self._timeout is not None:
            return self._timeout
        return settings.RESOURCE_SEARCH_TIMEOUT_SECONDS

    async def search(
        self,
        origin: Coordinate,
        radius_m: int,
        keywords: list[tuple[str, str]],
    ) -> list[PlaceCandidate]:
        """
        Run one nearby search per (keyword, category) concurrently and
        concatenate the results in keyword order.

        Fails fast: the first failing keyword, or the overall deadline,
        aborts the run and cancels the searches still in flight.
        """
        if not keywords:
            raise ConfigurationError("No resource keywords are configured")

        tasks = [
            asyncio.create_task(
                self.client.nearby_search(origin, radius_m, keyword, category)
            )
            for keyword, category in keywords
        ]

        try:
            per_keyword = await asyncio.wait_for(
                asyncio.gather(*tasks), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            logger.error(
                f"Resource search fanout exceeded {self.timeout:.0f}s "
                f"across {len(tasks)} keywords"
            )
            raise UpstreamError(
                f"{self.client.provider} searches did not complete "
                f"within {self.timeout:.0f}s"
            ) from e
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            # Collect every outcome so late sibling failures are not left unretrieved
            await asyncio.gather(*tasks, return_exceptions=True)

        candidates = []
        for (keyword, _), results in zip(keywords, per_keyword):
            logger.debug(f"Fanout keyword '{keyword}': {len(results)} candidates")
            candidates.extend(results)
        return candidates


fanout = PlaceQueryFanout()
