import logging
from typing import Iterable

from agri_resources.models import PlaceCandidate

logger = logging.getLogger(__name__)

ANONYMOUS_KEY_PREFIX = "_anon:"


def _anonymous_key(position: int, real_ids: set[str]) -> str:
    key = f"{ANONYMOUS_KEY_PREFIX}{position}"
    suffix = 1
    # A provider id may already look like a synthetic key
    while key in real_ids:
        key = f"{ANONYMOUS_KEY_PREFIX}{position}.{suffix}"
        suffix += 1
    return key


def dedupe_candidates(candidates: Iterable[PlaceCandidate]) -> dict[str, PlaceCandidate]:
    """
    Keep the first candidate per place id, in first-seen order.

    Candidates without an id get their own synthetic key built from their
    position in the input, so they never collapse into each other.
    """
    candidates = list(candidates)
    real_ids = {c.place_id for c in candidates if c.place_id}
    merged: dict[str, PlaceCandidate] = {}
    dropped = 0

    for position, candidate in enumerate(candidates):
        key = candidate.place_id or _anonymous_key(position, real_ids)
        if key in merged:
            dropped += 1
            logger.debug(
                f"Duplicate place {key} from keyword '{candidate.keyword}' "
                f"ignored, kept the one from '{merged[key].keyword}'"
            )
            continue
        merged[key] = candidate

    if dropped:
        logger.debug(f"Dedup kept {len(merged)} places, dropped {dropped} duplicates")
    return merged
