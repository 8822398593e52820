# backend/roadtrip/agents/overnight_agent.py

import asyncio
from typing import Callable, Dict, List, Optional

from roadtrip.agents.scout_agent import ScoutAgent
from roadtrip.core.config_loader import settings
from roadtrip.core.logger import logger
from roadtrip.models.pace_models import PaceConfig
from roadtrip.models.route_models import Candidate, ScoredCandidate, Stop
from roadtrip.utils.poi_ranking import count_real
from roadtrip.utils.route_sampler import RouteSampler


ProgressFn = Callable[[float, str], None]


def overnight_sample_count(days: int) -> int:
    return min(days * settings.overnight_samples_per_day, settings.max_overnight_samples)


class OvernightStopSelector:
    """
    Picks one overnight stop per day boundary (``days - 1`` boundaries).

    Tunables are fractions of the ideal daily distance:
        tolerance_factor: max deviation from the boundary for a regular match
        spacing_factor:   min gap between two selected stops
    """

    def __init__(
        self,
        tolerance_factor: Optional[float] = None,
        spacing_factor: Optional[float] = None,
        accommodation_weight: Optional[float] = None,
    ):
        self.tolerance_factor = settings.overnight_tolerance_factor if tolerance_factor is None else tolerance_factor
        self.spacing_factor = settings.overnight_spacing_factor if spacing_factor is None else spacing_factor
        self.accommodation_weight = (
            settings.accommodation_weight if accommodation_weight is None else accommodation_weight
        )

    def select_by_boundary(
        self,
        candidates: List[ScoredCandidate],
        ideal_daily_distance: float,
        days: int,
    ) -> Dict[int, ScoredCandidate]:
        """
        Map day boundary ``d`` (1..days-1) to the chosen candidate.
        Boundaries that could not be matched are absent.
        """
        pool = [c for c in candidates if c.accommodation_score > 0]
        if days <= 1 or not pool or ideal_daily_distance <= 0:
            return {}

        pool.sort(key=lambda c: (
            -c.accommodation_score,
            abs(c.distance_from_start - ideal_daily_distance),
        ))

        tolerance = ideal_daily_distance * self.tolerance_factor
        spacing = ideal_daily_distance * self.spacing_factor
        targets = {d: ideal_daily_distance * d for d in range(1, days)}

        chosen: Dict[int, ScoredCandidate] = {}

        def well_spaced(c: ScoredCandidate) -> bool:
            return all(
                abs(s.distance_from_start - c.distance_from_start) >= spacing
                for s in chosen.values()
            )

        for d, target in targets.items():
            free = [c for c in pool if not any(c is s for s in chosen.values()) and well_spaced(c)]

            best: Optional[ScoredCandidate] = None
            best_score = float("inf")
            for c in free:
                distance_from_target = abs(c.distance_from_start - target)
                if distance_from_target > tolerance:
                    continue
                score = (
                    distance_from_target / ideal_daily_distance
                    - c.accommodation_score * self.accommodation_weight
                )
                if score < best_score:
                    best_score = score
                    best = c

            if best is None:
                # nearest stop regardless of tolerance, kept clear of the other
                # boundaries so a basic stop can still be placed there later
                fallback = [
                    c for c in free
                    if all(abs(c.distance_from_start - t) >= spacing for k, t in targets.items() if k != d)
                ]
                if fallback:
                    best = min(fallback, key=lambda c: abs(c.distance_from_start - target))
                    logger.debug(
                        f"Boundary {d}: no stop within tolerance, falling back to "
                        f"{best.distance_from_start / 1000:.1f}km"
                    )

            if best is not None:
                chosen[d] = best

        return chosen

    def select(
        self,
        candidates: List[ScoredCandidate],
        ideal_daily_distance: float,
        days: int,
    ) -> List[ScoredCandidate]:
        """Selected candidates in route order; ``[]`` when none has lodging."""
        chosen = self.select_by_boundary(candidates, ideal_daily_distance, days)
        return sorted(chosen.values(), key=lambda c: c.distance_from_start)


class OvernightAgent:
    """Finds lodging along the route and turns it into overnight stops."""

    def __init__(self, selector: Optional[OvernightStopSelector] = None):
        self.selector = selector or OvernightStopSelector()

    async def score_candidates(
        self,
        sampler: RouteSampler,
        scout: ScoutAgent,
        days: int,
        pace: PaceConfig,
        on_progress: Optional[ProgressFn] = None,
    ) -> List[ScoredCandidate]:
        samples = sampler.sample_by_count(overnight_sample_count(days))
        logger.info(f"Looking for accommodations at {len(samples)} points along the route")

        done = 0

        async def scout_point(candidate: Candidate) -> ScoredCandidate:
            nonlocal done
            lodging = await scout.find_lodging(
                candidate,
                pace.accommodation_radius,
                settings.max_accommodations_per_stop,
            )
            done += 1
            if on_progress:
                on_progress(20 + (done / len(samples)) * 20, f"Finding accommodations at point {done}/{len(samples)}...")
            return ScoredCandidate(
                candidate=candidate,
                accommodations=lodging,
                accommodation_score=count_real(lodging),
            )

        scored = await asyncio.gather(*(scout_point(c) for c in samples))
        scored = sorted(scored, key=lambda s: s.distance_from_start)
        logger.info(f"{sum(1 for s in scored if s.accommodation_score > 0)} of {len(scored)} points have lodging")
        return scored

    async def plan_overnight_stops(
        self,
        sampler: RouteSampler,
        scout: ScoutAgent,
        days: int,
        pace: PaceConfig,
        on_progress: Optional[ProgressFn] = None,
    ) -> List[Stop]:
        """
        Exactly ``days - 1`` stops in route order. Boundaries without a
        suitable lodging candidate get a basic stop at the exact ideal
        position.
        """
        if days <= 1:
            return []

        ideal = sampler.total_distance / days
        scored = await self.score_candidates(sampler, scout, days, pace, on_progress)
        chosen = self.selector.select_by_boundary(scored, ideal, days)

        if not chosen:
            logger.warning("No overnight stops with accommodations found, creating basic route stops")

        async def build(d: int) -> Stop:
            picked = chosen.get(d)
            candidate = picked.candidate if picked else sampler.point_at(ideal * d)
            info = await scout.reverse_geocode(candidate.lat, candidate.lon)

            if picked is None:
                return Stop(
                    **candidate.model_dump(),
                    name=info["name"] if info else f"Stop {d}",
                    full_address=info["full_address"] if info else None,
                    type="basic",
                )
            return Stop(
                **candidate.model_dump(),
                name=info["name"] if info else f"Accommodation Stop {d}",
                full_address=info["full_address"] if info else None,
                type="overnight",
                accommodations=picked.accommodations,
                accommodation_score=picked.accommodation_score,
            )

        stops = await asyncio.gather(*(build(d) for d in range(1, days)))
        stops = sorted(stops, key=lambda s: s.distance_from_start)
        logger.info(
            f"Overnight stops: {sum(1 for s in stops if s.type == 'overnight')} with lodging, "
            f"{sum(1 for s in stops if s.type == 'basic')} basic"
        )
        return stops
