import asyncio
import logging
import os
import sys

# Add the project root directory to the python path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from agri_resources.core.config import settings
from agri_resources.core.errors import ResourceSearchError
from agri_resources.models import Coordinate
from agri_resources.places.places_client import places_client
from agri_resources.ranking.ranker import ranker
from agri_resources.recall.dedup import dedupe_candidates
from agri_resources.recall.fanout import fanout


# Setup logging to file and console
class Tee(object):
    def __init__(self, *files):
        self.files = files

    def write(self, obj):
        for f in self.files:
            f.write(obj)
            f.flush()

    def flush(self):
        for f in self.files:
            f.flush()


LOG_FILE = settings.TRACE_LOG_PATH
os.makedirs(settings.LOG_DIR, exist_ok=True)
f = open(LOG_FILE, "a")
sys.stdout = Tee(sys.stdout, f)
logging.basicConfig(level=settings.LOG_LEVEL, stream=sys.stdout)


def _fmt_loc(c):
    if c.location is None:
        return "no location"
    return f"({c.location.lat:.5f}, {c.location.lon:.5f})"


async def trace_farm(label: str, lat: float, lon: float):
    origin = Coordinate(lat=lat, lon=lon)
    radius_m = settings.RESOURCE_RADIUS_M
    print(f"\n{'='*60}", flush=True)
    print(f"FARM: {label} ({lat}, {lon}) radius={radius_m}m", flush=True)
    print(f"{'='*60}", flush=True)

    # 1. Per-keyword searches, one at a time so each list can be printed
    print("\n--- [Phase 1] Keyword Searches ---", flush=True)
    for keyword, category in settings.RESOURCE_KEYWORDS:
        print(f"  > Keyword: {keyword} -> {category}", flush=True)
        try:
            results = await places_client.nearby_search(
                origin, radius_m, keyword, category
            )
        except ResourceSearchError as e:
            print(f"    FAILED: {e.detail}", flush=True)
            continue
        for j, c in enumerate(results[:5]):
            print(
                f"    [{j+1}] ID: {c.place_id} | {c.name} {_fmt_loc(c)} Rating: {c.rating}",
                flush=True,
            )

    # 2. Fanout + Dedup, as the service runs it
    print("\n--- [Phase 2] Fanout & Dedup ---", flush=True)
    try:
        candidates = await fanout.search(origin, radius_m, settings.RESOURCE_KEYWORDS)
    except ResourceSearchError as e:
        print(f"Fanout failed: {e.detail}", flush=True)
        return
    unique = dedupe_candidates(candidates)
    print(f"Total Candidates: {len(candidates)}, Unique: {len(unique)}", flush=True)
    for key, c in unique.items():
        print(f"  {key} | {c.name} (Keyword: {c.keyword})", flush=True)

    # 3. Ranking
    print("\n--- [Phase 3] Ranking ---", flush=True)
    for i, r in enumerate(ranker.rank(unique, origin)):
        print(f"#{i+1} ID: {r.id} | {r.name}", flush=True)
        print(f"    Category: {r.category}", flush=True)
        print(f"    Distance: {r.distance_km:.2f}km Rating: {r.rating}", flush=True)
        print(f"    Directions: {r.directions_url}", flush=True)


async def main():
    if not settings.GOOGLE_MAPS_API_KEY:
        print("GOOGLE_MAPS_API_KEY is not set; nothing to trace.", flush=True)
        return

    # Farm outside Mumbai
    await trace_farm("Mumbai outskirts", 19.0760, 72.8777)

    # Farm near Nashik
    await trace_farm("Nashik", 19.9975, 73.7898)


if __name__ == "__main__":
    asyncio.run(main())
