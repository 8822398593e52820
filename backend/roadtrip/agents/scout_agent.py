# backend/roadtrip/agents/scout_agent.py

import asyncio
from typing import Any, Callable, Dict, List, Optional

from roadtrip.core.config_loader import settings
from roadtrip.core.logger import logger
from roadtrip.models.route_models import Candidate, LodgingOption, PointOfInterest
from roadtrip.services.nominatim_service import NominatimService
from roadtrip.services.overpass_service import OverpassService
from roadtrip.services.wikipedia_service import WikipediaService
from roadtrip.utils.geo_utils import haversine_m
from roadtrip.utils.poi_ranking import SYNTHETIC_SOURCE, rank_by_distance, rank_pois
from roadtrip.utils.rate_limiter import RateLimiter, default_rate_limiters


RADIUS_ESCALATION = (1, 2, 3)

# (title, category, lat offset, lon offset)
GENERIC_POIS = [
    ("Local Park", "Park", 0.0, 0.0),
    ("Historic Site", "Historic Site", 0.009, 0.0),
    ("Local Restaurant", "Food & Drink", 0.0, 0.0045),
]

GENERIC_LODGING = [
    ("Local Hotel", "Hotel", 0.0, 0.0),
    ("Nearby Motel", "Motel", 0.01, 0.01),
    ("Budget Accommodation", "Hotel", -0.01, 0.01),
]


def generic_pois(lat: float, lon: float) -> List[PointOfInterest]:
    """Placeholder attractions used when every provider came back empty."""
    return [
        PointOfInterest(
            title=title,
            lat=lat + d_lat,
            lon=lon + d_lon,
            distance_meters=haversine_m(lat, lon, lat + d_lat, lon + d_lon),
            category=category,
            source=SYNTHETIC_SOURCE,
            url=f"https://www.google.com/maps?q={lat},{lon}",
        )
        for title, category, d_lat, d_lon in GENERIC_POIS
    ]


def generic_lodging(lat: float, lon: float) -> List[LodgingOption]:
    return [
        LodgingOption(
            title=title,
            lat=lat + d_lat,
            lon=lon + d_lon,
            distance_meters=haversine_m(lat, lon, lat + d_lat, lon + d_lon),
            category=category,
            url=f"https://www.google.com/maps/search/{category.lower()}s+near+{lat},{lon}",
            source=SYNTHETIC_SOURCE,
        )
        for title, category, d_lat, d_lon in GENERIC_LODGING
    ]


class ScoutAgent:
    """
    Fetches lodging, attractions and restaurants around candidate points.

    Every provider call is isolated: it waits for its provider's rate
    limiter, runs under the shared concurrency limit with its own timeout,
    and turns any failure into an empty result for that provider only.

    Create one scout per planning request; rate limiters may be shared.
    """

    def __init__(
        self,
        overpass: Optional[OverpassService] = None,
        wikipedia: Optional[WikipediaService] = None,
        geocoder: Optional[NominatimService] = None,
        rate_limiters: Optional[Dict[str, RateLimiter]] = None,
        max_concurrency: Optional[int] = None,
        call_timeout: Optional[float] = None,
    ):
        self.overpass = overpass or OverpassService()
        self.wikipedia = wikipedia or WikipediaService()
        self.geocoder = geocoder or NominatimService()
        self.rate_limiters = rate_limiters if rate_limiters is not None else default_rate_limiters()
        self.semaphore = asyncio.Semaphore(max_concurrency or settings.max_concurrent_requests)
        self.call_timeout = call_timeout or settings.provider_call_timeout

    # -------------------------------------------------------
    # ISOLATED PROVIDER CALL
    # -------------------------------------------------------
    async def _call(self, provider: str, fn: Callable[..., Any], *args, default: Any = None) -> Any:
        fallback = [] if default is None else default
        async with self.semaphore:
            limiter = self.rate_limiters.get(provider)
            if limiter is not None:
                await limiter.wait()
            try:
                result = await asyncio.wait_for(asyncio.to_thread(fn, *args), timeout=self.call_timeout)
            except asyncio.TimeoutError:
                logger.warning(f"{provider} call timed out after {self.call_timeout}s")
                return fallback
            except Exception as e:
                logger.error(f"{provider} call failed: {e}")
                return fallback
        return fallback if result is None else result

    # -------------------------------------------------------
    # POINTS OF INTEREST
    # -------------------------------------------------------
    async def find_pois(
        self,
        candidate: Candidate,
        radius_meters: int,
        limit: int,
        preferences: Optional[List[str]] = None,
    ) -> List[PointOfInterest]:
        """
        Attractions near a candidate, escalating the radius R -> 2R -> 3R
        until some provider returns results. Never returns an empty list.
        """
        lat, lon = candidate.lat, candidate.lon

        for multiplier in RADIUS_ESCALATION:
            radius = radius_meters * multiplier
            wiki_pois, osm_pois = await asyncio.gather(
                self._call("wikipedia", self.wikipedia.fetch_attractions, lat, lon, radius, limit),
                self._call("overpass", self.overpass.fetch_attractions, lat, lon, radius, limit),
            )
            merged = list(wiki_pois) + list(osm_pois)
            if merged:
                logger.debug(
                    f"{len(merged)} POIs within {radius / 1000:.1f}km of "
                    f"{lat:.4f},{lon:.4f} (wikipedia={len(wiki_pois)}, overpass={len(osm_pois)})"
                )
                return rank_pois(merged, preferences, limit)

        logger.info(f"No POIs found around {lat:.4f},{lon:.4f}, using generic attractions")
        return rank_pois(generic_pois(lat, lon), preferences, limit)

    # -------------------------------------------------------
    # LODGING
    # -------------------------------------------------------
    async def find_lodging(
        self,
        candidate: Candidate,
        radius_meters: int,
        limit: int,
    ) -> List[LodgingOption]:
        lat, lon = candidate.lat, candidate.lon

        for multiplier in RADIUS_ESCALATION:
            radius = radius_meters * multiplier
            options = await self._call("overpass", self.overpass.fetch_accommodations, lat, lon, radius, limit)
            if options:
                return rank_by_distance(options, limit)

        logger.info(f"No accommodations found around {lat:.4f},{lon:.4f}, using fallback")
        return rank_by_distance(generic_lodging(lat, lon), limit)

    # -------------------------------------------------------
    # FOOD
    # -------------------------------------------------------
    async def find_restaurants(
        self,
        lat: float,
        lon: float,
        radius_meters: int,
        limit: int,
    ) -> List[PointOfInterest]:
        restaurants = await self._call("overpass", self.overpass.fetch_restaurants, lat, lon, radius_meters, limit)
        return rank_by_distance(restaurants, limit)

    # -------------------------------------------------------
    # NAMES
    # -------------------------------------------------------
    async def reverse_geocode(self, lat: float, lon: float) -> Optional[Dict[str, str]]:
        result = await self._call("nominatim", self.geocoder.reverse_geocode, lat, lon, default={})
        return result or None
