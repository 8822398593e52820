# backend/roadtrip/models/route_models.py

from typing import List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field


# ----------------------------------------------------------
# ROUTE (produced by the routing service, read-only)
# ----------------------------------------------------------
class Route(BaseModel):
    model_config = ConfigDict(frozen=True)

    vertices: Tuple[Tuple[float, float], ...]   # (lat, lon)
    total_distance_meters: float
    total_duration_seconds: float = 0.0


# ----------------------------------------------------------
# CANDIDATE POINT ALONG THE ROUTE
# ----------------------------------------------------------
class Candidate(BaseModel):
    lat: float
    lon: float
    distance_from_start: float
    source_segment_index: int = 0


# ----------------------------------------------------------
# PROVIDER RECORDS
# ----------------------------------------------------------
class LodgingOption(BaseModel):
    title: str
    lat: float
    lon: float
    distance_meters: float = 0.0
    category: str = "Accommodation"
    stars: Optional[str] = None
    phone: Optional[str] = None
    url: Optional[str] = None
    source: str = "overpass"


class PointOfInterest(BaseModel):
    title: str
    lat: float
    lon: float
    distance_meters: float = 0.0
    category: str = "Attraction"
    source: str = "overpass"
    url: Optional[str] = None


# ----------------------------------------------------------
# STOPS
# ----------------------------------------------------------
class Stop(Candidate):
    name: str
    full_address: Optional[str] = None
    type: str                              # overnight / roadside / basic
    accommodations: List[LodgingOption] = Field(default_factory=list)
    attractions: List[PointOfInterest] = Field(default_factory=list)
    accommodation_score: int = 0


class ScoredCandidate(BaseModel):
    """A sampled point annotated with the lodging found around it."""
    candidate: Candidate
    accommodations: List[LodgingOption] = Field(default_factory=list)
    accommodation_score: int = 0

    @property
    def distance_from_start(self) -> float:
        return self.candidate.distance_from_start


# ----------------------------------------------------------
# ITINERARY
# ----------------------------------------------------------
class DayPlan(BaseModel):
    day_index: int
    overnight_stop: Optional[Stop] = None
    roadside_stops: List[Stop] = Field(default_factory=list)
    food_options: List[PointOfInterest] = Field(default_factory=list)
    driving_distance_meters: float = 0.0
    total_activity_hours: float = 0.0


class Itinerary(BaseModel):
    days: List[DayPlan] = Field(default_factory=list)
    total_distance_meters: float = 0.0
    total_duration_seconds: float = 0.0
    overnight_stops: List[Stop] = Field(default_factory=list)
    roadside_stops: List[Stop] = Field(default_factory=list)
