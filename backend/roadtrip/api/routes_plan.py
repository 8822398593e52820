# backend/roadtrip/api/routes_plan.py

import asyncio
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from roadtrip.agents.planner_orchestrator import PlannerOrchestrator
from roadtrip.core.errors import InvalidPlanRequestError, LocationNotFoundError, NoRouteError
from roadtrip.core.logger import logger
from roadtrip.models.pace_models import DEFAULT_PACE, PACE_PRESETS, get_pace
from roadtrip.models.route_models import Itinerary, Stop
from roadtrip.services.nominatim_service import NominatimService
from roadtrip.services.osrm_service import OSRMService
from roadtrip.utils.categories import accommodation_icon, attraction_icon
from roadtrip.utils.format_utils import format_distance, format_duration

router = APIRouter(prefix="/plan", tags=["planner"])

geocoder = NominatimService()
router_service = OSRMService()
planner = PlannerOrchestrator(geocoder=geocoder)


# --------------------------
# Request model
# --------------------------
class PlanRequest(BaseModel):
    start: str
    end: str
    days: int = Field(..., description="Number of driving days")
    pace: str = DEFAULT_PACE
    preferences: List[str] = Field(default_factory=list)


# --------------------------
# Transform itinerary for the frontend
# --------------------------
def _stop_to_dict(stop: Optional[Stop]) -> Optional[Dict[str, Any]]:
    if stop is None:
        return None
    return {
        "name": stop.name,
        "fullAddress": stop.full_address,
        "type": stop.type,
        "lat": stop.lat,
        "lon": stop.lon,
        "distanceFromStart": stop.distance_from_start,
        "distanceFromStartText": format_distance(stop.distance_from_start),
        "accommodations": [
            {
                "title": a.title,
                "category": a.category,
                "icon": accommodation_icon(a.category),
                "lat": a.lat,
                "lon": a.lon,
                "distance": format_distance(a.distance_meters),
                "stars": a.stars,
                "phone": a.phone,
                "url": a.url,
                "source": a.source,
            }
            for a in stop.accommodations
        ],
        "attractions": [
            {
                "title": p.title,
                "category": p.category,
                "icon": attraction_icon(p.category),
                "lat": p.lat,
                "lon": p.lon,
                "distance": format_distance(p.distance_meters),
                "url": p.url,
                "source": p.source,
            }
            for p in stop.attractions
        ],
    }


def _transform_itinerary_for_frontend(itinerary: Itinerary, start: Dict[str, Any], end: Dict[str, Any], pace: str) -> dict:
    days = []
    for day in itinerary.days:
        days.append({
            "day": day.day_index,
            "drivingDistance": day.driving_distance_meters,
            "drivingDistanceText": format_distance(day.driving_distance_meters),
            "activityHours": day.total_activity_hours,
            "overnightStop": _stop_to_dict(day.overnight_stop),
            "roadsideStops": [_stop_to_dict(s) for s in day.roadside_stops],
            "foodOptions": [
                {
                    "title": f.title,
                    "icon": attraction_icon(f.category),
                    "lat": f.lat,
                    "lon": f.lon,
                    "distance": format_distance(f.distance_meters),
                    "url": f.url,
                }
                for f in day.food_options
            ],
        })

    return {
        "start": start,
        "end": end,
        "pace": pace,
        "totalDistance": itinerary.total_distance_meters,
        "totalDistanceText": format_distance(itinerary.total_distance_meters),
        "totalDuration": itinerary.total_duration_seconds,
        "totalDurationText": format_duration(itinerary.total_duration_seconds),
        "days": days,
    }


# --------------------------
# Plan a trip
# --------------------------
@router.post("", tags=["planner"])
async def plan_trip(data: PlanRequest):
    """
    Geocode both ends, fetch the driving route and build a day-by-day
    itinerary with overnight stops, roadside attractions and food options.
    """
    try:
        pace = get_pace(data.pace)
        start = await asyncio.to_thread(geocoder.geocode, data.start)
        end = await asyncio.to_thread(geocoder.geocode, data.end)
        route = await asyncio.to_thread(router_service.route, start, end)

        def on_progress(percent: float, message: str) -> None:
            logger.info(f"[{percent:>3.0f}%] {message}")

        itinerary = await planner.plan_itinerary(
            route,
            data.days,
            pace,
            on_progress=on_progress,
            preferences=data.preferences,
        )
    except InvalidPlanRequestError as e:
        raise HTTPException(400, str(e))
    except LocationNotFoundError as e:
        raise HTTPException(404, str(e))
    except NoRouteError as e:
        raise HTTPException(422, str(e))

    return _transform_itinerary_for_frontend(itinerary, start, end, pace.name)


# --------------------------
# Location autocomplete
# --------------------------
@router.get("/locations", tags=["planner"])
async def search_locations(q: str, limit: int = 5):
    return await asyncio.to_thread(geocoder.search_locations, q, limit)


# --------------------------
# Pace presets
# --------------------------
@router.get("/paces", tags=["planner"])
def list_paces():
    return {
        "default": DEFAULT_PACE,
        "paces": [p.model_dump() for p in PACE_PRESETS.values()],
    }
