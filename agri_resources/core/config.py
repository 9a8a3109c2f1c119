import os
from dotenv import load_dotenv

load_dotenv()


def parse_keyword_categories(raw: str) -> list[tuple[str, str]]:
    """Parse "keyword:category,keyword:category" into ordered pairs.

    A pair without ":category" uses the keyword itself as its category.
    """
    pairs = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        keyword, _, category = chunk.partition(":")
        keyword = keyword.strip()
        if not keyword:
            continue
        pairs.append((keyword, category.strip() or keyword))
    return pairs


class Settings:
    # Logging
    LOG_DIR = os.getenv("LOG_DIR", "logs")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Places provider (Google Places Nearby Search)
    GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY", "")
    PLACES_API_URL = os.getenv(
        "PLACES_API_URL",
        "https://maps.googleapis.com/maps/api/place/nearbysearch/json",
    )
    PLACES_PROVIDER_NAME = os.getenv("PLACES_PROVIDER_NAME", "google-places")
    PLACES_REQUEST_TIMEOUT_SECONDS = float(
        os.getenv("PLACES_REQUEST_TIMEOUT_SECONDS", "10")
    )

    # Resource search
    RESOURCE_RADIUS_M = int(os.getenv("RESOURCE_RADIUS_M", "15000"))
    RESOURCE_KEYWORDS = parse_keyword_categories(
        os.getenv(
            "RESOURCE_KEYWORDS",
            "seed store:seed,fertilizer store:fertilizer,pesticide shop:agri-store",
        )
    )
    RESOURCE_SEARCH_TIMEOUT_SECONDS = float(
        os.getenv("RESOURCE_SEARCH_TIMEOUT_SECONDS", "20")
    )

    # Search Application
    APP_PORT = int(os.getenv("APP_PORT", "8000"))
    SERVICE_HOST = os.getenv("SERVICE_HOST", "127.0.0.1")

    # Tracing
    TRACE_LOG_FILENAME = os.getenv("TRACE_LOG_FILENAME", "resources_trace.log")
    TRACE_LOG_PATH = os.path.join(LOG_DIR, TRACE_LOG_FILENAME)


settings = Settings()
