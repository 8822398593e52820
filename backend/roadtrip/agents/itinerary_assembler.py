# backend/roadtrip/agents/itinerary_assembler.py

import asyncio
import math
from typing import List, Optional, Sequence

from roadtrip.agents.scout_agent import ScoutAgent
from roadtrip.core.config_loader import settings
from roadtrip.core.logger import logger
from roadtrip.models.pace_models import PaceConfig
from roadtrip.models.route_models import DayPlan, Itinerary, PointOfInterest, Route, Stop
from roadtrip.utils.categories import activity_hours, category_priority


ACTIVITY_BUDGET_RATIO = 0.6
TRUNCATED_STOPS_RATIO = 0.7


# ----------------------------------------------------------
# HELPERS
# ----------------------------------------------------------
def in_band(distance: float, low: float, high: float, last: bool) -> bool:
    """Day bands are half-open, except the last one which ends at the destination."""
    return low <= distance <= high if last else low <= distance < high


def stop_activity_hours(stop: Stop) -> float:
    return sum(activity_hours(a.category) for a in stop.attractions)


def stop_priority(stop: Stop) -> int:
    return max((category_priority(a.category) for a in stop.attractions), default=0)


def fit_activity_budget(stops: List[Stop], pace: PaceConfig) -> List[Stop]:
    """
    Keep the highest-priority stops when a day has more activity than the
    pace allows. Kept stops stay in route order.
    """
    max_activity_hours = pace.max_daily_driving_hours * ACTIVITY_BUDGET_RATIO
    total = sum(stop_activity_hours(s) for s in stops)
    if total <= max_activity_hours:
        return stops

    keep = math.floor(pace.max_roadside_stops * TRUNCATED_STOPS_RATIO)
    ranked = sorted(stops, key=lambda s: (-stop_priority(s), s.distance_from_start))
    kept = sorted(ranked[:keep], key=lambda s: s.distance_from_start)
    if len(kept) < len(stops):
        logger.debug(
            f"Activity hours {total:.1f}h over budget {max_activity_hours:.1f}h, "
            f"keeping {len(kept)} of {len(stops)} roadside stops"
        )
    else:
        logger.debug(
            f"Activity hours {total:.1f}h still over budget {max_activity_hours:.1f}h "
            f"with only {len(stops)} roadside stops, nothing to drop"
        )
    return kept


# ----------------------------------------------------------
# DAY FOLD
# ----------------------------------------------------------
def build_day(
    day: int,
    days: int,
    total_distance: float,
    overnight_stops: Sequence[Stop],
    roadside_stops: Sequence[Stop],
    pace: PaceConfig,
    used_overnight: Sequence[Stop] = (),
    previous_end: float = 0.0,
) -> DayPlan:
    """
    One day of the itinerary. ``used_overnight`` holds the stops already
    assigned to earlier days and ``previous_end`` is where the previous day
    finished (0 for day 1).
    """
    ideal = total_distance / days
    low, high = ideal * (day - 1), ideal * day
    last = day == days

    overnight: Optional[Stop] = None
    if not last:
        for stop in overnight_stops:
            if in_band(stop.distance_from_start, low, high, last) and not any(stop is u for u in used_overnight):
                overnight = stop
                break
        if overnight is None and day - 1 < len(overnight_stops):
            positional = overnight_stops[day - 1]
            if not any(positional is u for u in used_overnight):
                overnight = positional

    roadside = [s for s in roadside_stops if in_band(s.distance_from_start, low, high, last)]
    roadside = fit_activity_budget(roadside[: pace.max_roadside_stops], pace)

    if overnight is not None:
        driving = overnight.distance_from_start - previous_end
    elif last:
        driving = total_distance - previous_end
    else:
        driving = ideal

    return DayPlan(
        day_index=day,
        overnight_stop=overnight,
        roadside_stops=roadside,
        driving_distance_meters=driving,
        total_activity_hours=sum(stop_activity_hours(s) for s in roadside),
    )


def assemble_days(
    total_distance: float,
    days: int,
    overnight_stops: Sequence[Stop],
    roadside_stops: Sequence[Stop],
    pace: PaceConfig,
) -> List[DayPlan]:
    ideal = total_distance / days
    plans: List[DayPlan] = []
    used: List[Stop] = []
    previous_end = 0.0

    for day in range(1, days + 1):
        plan = build_day(day, days, total_distance, overnight_stops, roadside_stops, pace, used, previous_end)
        if plan.overnight_stop is not None:
            used.append(plan.overnight_stop)
            previous_end = plan.overnight_stop.distance_from_start
        else:
            previous_end = ideal * day
        plans.append(plan)

    return plans


# ----------------------------------------------------------
# ASSEMBLER
# ----------------------------------------------------------
class ItineraryAssembler:

    def __init__(self, food_radius: Optional[int] = None, max_food_options: Optional[int] = None):
        self.food_radius = food_radius or settings.food_search_radius_m
        self.max_food_options = max_food_options or settings.max_food_options

    async def food_near(self, scout: ScoutAgent, stop: Optional[Stop]) -> List[PointOfInterest]:
        if stop is None:
            return []
        return await scout.find_restaurants(stop.lat, stop.lon, self.food_radius, self.max_food_options)

    async def assemble(
        self,
        route: Route,
        days: int,
        overnight_stops: List[Stop],
        roadside_stops: List[Stop],
        pace: PaceConfig,
        scout: ScoutAgent,
    ) -> Itinerary:
        plans = assemble_days(route.total_distance_meters, days, overnight_stops, roadside_stops, pace)

        food = await asyncio.gather(*(self.food_near(scout, p.overnight_stop) for p in plans))
        plans = [p.model_copy(update={"food_options": f}) for p, f in zip(plans, food)]

        logger.info(
            f"Assembled {len(plans)} days: "
            + ", ".join(f"day {p.day_index} {p.driving_distance_meters / 1000:.0f}km" for p in plans)
        )

        return Itinerary(
            days=plans,
            total_distance_meters=route.total_distance_meters,
            total_duration_seconds=route.total_duration_seconds,
            overnight_stops=overnight_stops,
            roadside_stops=roadside_stops,
        )
