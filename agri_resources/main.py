import logging
from typing import List, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from agri_resources.core.config import settings
from agri_resources.core.errors import ResourceSearchError
from agri_resources.models import ErrorResponse, RankedResource
from agri_resources.pipeline import find_nearby_resources

logger = logging.getLogger(__name__)

app = FastAPI(title="Agri Resource Search Service", version="1.0")


@app.exception_handler(ResourceSearchError)
async def resource_search_error_handler(request: Request, exc: ResourceSearchError):
    if exc.status_code >= 500:
        logger.error(f"{request.url.path} failed: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
    return JSONResponse(
        status_code=400,
        content={
            "detail": f"lat and lon must be numeric; invalid: {', '.join(fields)}"
        },
    )


@app.get(
    "/api/resources",
    response_model=List[RankedResource],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def nearby_resources(lat: Optional[float] = None, lon: Optional[float] = None):
    return await find_nearby_resources(lat, lon)


@app.get("/health")
async def health():
    return {"status": "ok", "places_configured": bool(settings.GOOGLE_MAPS_API_KEY)}


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    uvicorn.run(app, host=settings.SERVICE_HOST, port=settings.APP_PORT)
