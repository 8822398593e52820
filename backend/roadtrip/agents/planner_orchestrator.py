# backend/roadtrip/agents/planner_orchestrator.py

from typing import Callable, Dict, List, Optional

from roadtrip.agents.itinerary_assembler import ItineraryAssembler
from roadtrip.agents.overnight_agent import OvernightAgent
from roadtrip.agents.roadside_agent import RoadsideAgent
from roadtrip.agents.scout_agent import ScoutAgent
from roadtrip.core.config_loader import settings
from roadtrip.core.errors import InvalidPlanRequestError
from roadtrip.core.logger import logger
from roadtrip.models.pace_models import PaceConfig
from roadtrip.models.route_models import Itinerary, Route
from roadtrip.services.nominatim_service import NominatimService
from roadtrip.services.overpass_service import OverpassService
from roadtrip.services.wikipedia_service import WikipediaService
from roadtrip.utils.rate_limiter import RateLimiter, default_rate_limiters
from roadtrip.utils.route_sampler import RouteSampler


ProgressFn = Callable[[float, str], None]


def safe_progress(on_progress: Optional[ProgressFn]) -> Optional[ProgressFn]:
    """Wrap a progress callback so it can never break the pipeline."""
    if on_progress is None:
        return None

    def report(percent: float, message: str) -> None:
        try:
            on_progress(round(percent), message)
        except Exception as e:
            logger.warning(f"Progress callback failed: {e}")

    return report


class PlannerOrchestrator:
    """
    Multi-day road trip planning pipeline:

        sample -> scout -> rank -> select -> assemble

    Services and rate limiters live as long as the orchestrator; a fresh
    scout (with its own concurrency limit) is built for every request.
    """

    def __init__(
        self,
        overpass: Optional[OverpassService] = None,
        wikipedia: Optional[WikipediaService] = None,
        geocoder: Optional[NominatimService] = None,
        rate_limiters: Optional[Dict[str, RateLimiter]] = None,
        overnight_agent: Optional[OvernightAgent] = None,
        roadside_agent: Optional[RoadsideAgent] = None,
        assembler: Optional[ItineraryAssembler] = None,
    ):
        # SERVICES
        self.overpass = overpass or OverpassService()
        self.wikipedia = wikipedia or WikipediaService()
        self.geocoder = geocoder or NominatimService()
        self.rate_limiters = rate_limiters if rate_limiters is not None else default_rate_limiters()

        # AGENTS
        self.overnight_agent = overnight_agent or OvernightAgent()
        self.roadside_agent = roadside_agent or RoadsideAgent()
        self.assembler = assembler or ItineraryAssembler()

    def _new_scout(self) -> ScoutAgent:
        return ScoutAgent(
            overpass=self.overpass,
            wikipedia=self.wikipedia,
            geocoder=self.geocoder,
            rate_limiters=self.rate_limiters,
        )

    # -----------------------------------------------------------
    # Input validation
    # -----------------------------------------------------------
    @staticmethod
    def validate(route: Route, days: int) -> None:
        if isinstance(days, bool) or not isinstance(days, int):
            raise InvalidPlanRequestError("Number of days must be a whole number")
        if days < 1:
            raise InvalidPlanRequestError("Number of days must be at least 1")
        if days > settings.max_days:
            raise InvalidPlanRequestError(f"Number of days cannot exceed {settings.max_days}")
        if len(route.vertices) < 2 or route.total_distance_meters <= 0:
            raise InvalidPlanRequestError("Route has no distance to plan over")

    # -----------------------------------------------------------
    # Core itinerary pipeline
    # -----------------------------------------------------------
    async def plan_itinerary(
        self,
        route: Route,
        days: int,
        pace: PaceConfig,
        on_progress: Optional[ProgressFn] = None,
        preferences: Optional[List[str]] = None,
    ) -> Itinerary:
        self.validate(route, days)
        progress = safe_progress(on_progress)

        def report(percent: float, message: str) -> None:
            if progress:
                progress(percent, message)

        logger.info(
            f"Planning {days}-day trip over {route.total_distance_meters / 1000:.1f}km "
            f"(pace={pace.name}, preferences={preferences or []})"
        )

        report(5, "Preparing route...")
        sampler = RouteSampler(route)
        scout = self._new_scout()

        # 1. Overnight stops (always days - 1, basic stops fill the gaps)
        report(10, "Finding overnight stops...")
        overnight_stops = await self.overnight_agent.plan_overnight_stops(
            sampler, scout, days, pace, progress
        )

        # 2. Roadside attractions
        report(40, "Finding roadside attractions...")
        roadside_stops = await self.roadside_agent.find_roadside_stops(
            sampler, scout, pace, days, preferences, progress
        )

        # 3. Day by day itinerary with food options
        report(60, "Building your itinerary...")
        report(70, "Finding food options...")
        itinerary = await self.assembler.assemble(
            route, days, overnight_stops, roadside_stops, pace, scout
        )

        report(100, "Itinerary ready!")
        logger.info(
            f"Itinerary ready: {len(itinerary.days)} days, "
            f"{len(overnight_stops)} overnight stops, {len(roadside_stops)} roadside stops"
        )
        return itinerary
