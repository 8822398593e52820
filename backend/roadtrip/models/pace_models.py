# backend/roadtrip/models/pace_models.py

from typing import Dict
from pydantic import BaseModel, ConfigDict

from roadtrip.core.errors import InvalidPlanRequestError


class PaceConfig(BaseModel):
    """
    Named bundle of planning parameters.

    Radii are in meters, times in hours.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    max_daily_driving_hours: float
    max_roadside_stops: int
    min_activity_time: float
    prefer_overnight_stops: bool = True
    accommodation_radius: int
    poi_radius: int
    max_pois_per_stop: int


# ----------------------------------------------------------
# PRESETS
# ----------------------------------------------------------
PACE_PRESETS: Dict[str, PaceConfig] = {
    "fast": PaceConfig(
        name="fast",
        max_daily_driving_hours=8,
        max_roadside_stops=1,
        min_activity_time=1,
        prefer_overnight_stops=True,
        accommodation_radius=5000,
        poi_radius=15000,
        max_pois_per_stop=3,
    ),
    "balanced": PaceConfig(
        name="balanced",
        max_daily_driving_hours=6,
        max_roadside_stops=3,
        min_activity_time=1.5,
        prefer_overnight_stops=True,
        accommodation_radius=8000,
        poi_radius=25000,
        max_pois_per_stop=5,
    ),
    "explore": PaceConfig(
        name="explore",
        max_daily_driving_hours=4,
        max_roadside_stops=5,
        min_activity_time=2,
        prefer_overnight_stops=False,
        accommodation_radius=10000,
        poi_radius=30000,
        max_pois_per_stop=8,
    ),
}

DEFAULT_PACE = "balanced"


def get_pace(name: str) -> PaceConfig:
    pace = PACE_PRESETS.get((name or DEFAULT_PACE).lower().strip())
    if pace is None:
        raise InvalidPlanRequestError(
            f"Unknown pace '{name}'. Choose one of: {', '.join(PACE_PRESETS)}"
        )
    return pace
