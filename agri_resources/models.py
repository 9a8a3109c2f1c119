from pydantic import BaseModel
from typing import Optional


class Coordinate(BaseModel):
    lat: float
    lon: float


class PlaceCandidate(BaseModel):
    place_id: Optional[str] = None
    name: str
    location: Optional[Coordinate] = None
    rating: Optional[float] = None
    keyword: str
    category: str


class RankedResource(BaseModel):
    id: str
    name: str
    category: str
    distance_km: float
    rating: Optional[float] = None
    directions_url: str


class ErrorResponse(BaseModel):
    detail: str
