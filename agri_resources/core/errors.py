class ResourceSearchError(Exception):
    """Base error for the nearby-resource search; maps onto an HTTP status."""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InputError(ResourceSearchError):
    """Origin coordinate missing or invalid. Raised before any provider call."""

    status_code = 400


class ConfigurationError(ResourceSearchError):
    """Provider credential or keyword set missing. Raised before any provider call."""

    status_code = 500


class UpstreamError(ResourceSearchError):
    """A keyword search failed or the fanout ran past its deadline."""

    status_code = 500


class DataError(ResourceSearchError):
    """A single candidate is unusable. Caught by the ranker, never reaches the caller."""
