# backend/roadtrip/agents/roadside_agent.py

import asyncio
import math
from typing import Callable, List, Optional, Sequence, TypeVar

from roadtrip.agents.overnight_agent import overnight_sample_count
from roadtrip.agents.scout_agent import ScoutAgent
from roadtrip.core.config_loader import settings
from roadtrip.core.logger import logger
from roadtrip.models.pace_models import PaceConfig
from roadtrip.models.route_models import Candidate, PointOfInterest, Stop
from roadtrip.utils.categories import activity_hours
from roadtrip.utils.route_sampler import RouteSampler


ROADSIDE_STOP_MULTIPLIER = 3

ProgressFn = Callable[[float, str], None]

T = TypeVar("T")


def suitable_attractions(pois: List[PointOfInterest], pace: PaceConfig) -> List[PointOfInterest]:
    """Drop attractions too short to be worth stopping for at this pace."""
    return [p for p in pois if activity_hours(p.category) >= pace.min_activity_time]


def roadside_interval(total_distance: float) -> float:
    return max(settings.roadside_min_interval_m, total_distance / settings.roadside_samples_per_route)


def roadside_sample_count(total_distance: float, days: int) -> int:
    """
    Interior points searched for attractions: one per interval, never fewer
    than the overnight search uses plus one, and capped.
    """
    overnight = overnight_sample_count(days)
    by_interval = max(0, math.ceil(total_distance / roadside_interval(total_distance)) - 1)
    ceiling = max(settings.max_roadside_samples, overnight + 1)
    return min(ceiling, max(by_interval, overnight + 1))


def spread_evenly(items: Sequence[T], limit: int) -> List[T]:
    """
    At most ``limit`` items picked at even strides, always including the
    first and last one, so the selection covers the whole sequence.
    """
    n = len(items)
    if limit <= 0:
        return []
    if n <= limit:
        return list(items)
    if limit == 1:
        return [items[n // 2]]
    return [items[round(i * (n - 1) / (limit - 1))] for i in range(limit)]


class RoadsideAgent:
    """Daytime stops along the route, each with at least one worthwhile attraction."""

    async def find_roadside_stops(
        self,
        sampler: RouteSampler,
        scout: ScoutAgent,
        pace: PaceConfig,
        days: int,
        preferences: Optional[List[str]] = None,
        on_progress: Optional[ProgressFn] = None,
    ) -> List[Stop]:
        samples = sampler.sample_by_count(roadside_sample_count(sampler.total_distance, days))
        if not samples:
            return []

        logger.info(
            f"Searching attractions at {len(samples)} roadside points "
            f"(radius {pace.poi_radius / 1000:.0f}km)"
        )

        done = 0

        async def scout_point(candidate: Candidate) -> Optional[Stop]:
            nonlocal done
            pois = await scout.find_pois(candidate, pace.poi_radius, pace.max_pois_per_stop, preferences)
            done += 1
            if on_progress:
                on_progress(40 + (done / len(samples)) * 20, f"Finding attractions at point {done}/{len(samples)}...")

            attractions = suitable_attractions(pois, pace)
            if not attractions:
                return None
            return Stop(
                **candidate.model_dump(),
                name=f"Stop at {candidate.distance_from_start / 1000:.0f}km",
                type="roadside",
                attractions=attractions,
            )

        results = await asyncio.gather(*(scout_point(c) for c in samples))
        stops = sorted((s for s in results if s is not None), key=lambda s: s.distance_from_start)
        stops = spread_evenly(stops, pace.max_roadside_stops * ROADSIDE_STOP_MULTIPLIER)

        async def name_stop(stop: Stop) -> Stop:
            info = await scout.reverse_geocode(stop.lat, stop.lon)
            if not info:
                return stop
            return stop.model_copy(update={"name": info["name"], "full_address": info["full_address"]})

        stops = list(await asyncio.gather(*(name_stop(s) for s in stops)))
        logger.info(f"Found {len(stops)} roadside stops")
        return stops
