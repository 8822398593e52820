# backend/roadtrip/services/wikipedia_service.py

import requests
from typing import List, Optional
from urllib.parse import quote

from roadtrip.core.config_loader import settings
from roadtrip.core.logger import logger
from roadtrip.models.route_models import PointOfInterest
from roadtrip.utils.categories import categorize_poi


# Geosearch refuses radii above 10 km
MAX_GEOSEARCH_RADIUS_M = 10000

EXCLUDE_TERMS = [
    "highway", "road", "street", "avenue", "boulevard", "lane", "drive",
    "airport", "station", "terminal", "platform", "stop", "bus", "train",
    "bridge", "tunnel", "intersection", "junction", "crossing",
]

INCLUDE_TERMS = [
    "museum", "park", "garden", "historic", "monument", "memorial",
    "restaurant", "cafe", "bar", "theater", "theatre", "cinema",
    "zoo", "aquarium", "beach", "lake", "river", "viewpoint",
    "church", "cathedral", "castle", "palace", "fort", "ruins",
]


def is_relevant_title(title: str) -> bool:
    """Keep articles that look like places to visit, not infrastructure."""
    t = (title or "").lower()
    if any(term in t for term in EXCLUDE_TERMS):
        return False
    return any(term in t for term in INCLUDE_TERMS)


class WikipediaService:
    """Wikipedia geosearch: articles located near a point."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = base_url or settings.wikipedia_base_url
        self.timeout = timeout or settings.wikipedia_timeout
        self.headers = {
            "User-Agent": settings.user_agent,
            "Accept": "application/json",
        }

    def fetch_attractions(
        self,
        lat: float,
        lon: float,
        radius_meters: int = 10000,
        limit: int = 10,
    ) -> List[PointOfInterest]:
        """
        Search geotagged articles around (lat, lon).

        Args:
            lat, lon: search center
            radius_meters: search radius, clamped to the API maximum
            limit: maximum number of POIs returned after filtering

        Returns:
            List of PointOfInterest with source "wikipedia"; [] on failure.
        """
        params = {
            "action": "query",
            "list": "geosearch",
            "gscoord": f"{lat}|{lon}",
            "gsradius": min(int(radius_meters), MAX_GEOSEARCH_RADIUS_M),
            # ask for extra rows since the title filter drops many
            "gslimit": min(limit * 2, 500),
            "format": "json",
        }

        try:
            resp = requests.get(self.base_url, params=params, headers=self.headers, timeout=self.timeout)
            resp.raise_for_status()
            items = resp.json().get("query", {}).get("geosearch", [])
        except requests.exceptions.RequestException as e:
            logger.error(f"Wikipedia search failed: {e}")
            return []
        except ValueError as e:
            logger.error(f"Wikipedia returned malformed JSON: {e}")
            return []

        pois: List[PointOfInterest] = []
        for item in items:
            title = item.get("title", "")
            if not is_relevant_title(title) or item.get("lat") is None or item.get("lon") is None:
                continue
            pois.append(PointOfInterest(
                title=title,
                lat=item["lat"],
                lon=item["lon"],
                distance_meters=float(item.get("dist", 0.0)),
                category=categorize_poi(title),
                source="wikipedia",
                url=f"https://en.wikipedia.org/wiki/{quote(title.replace(' ', '_'))}",
            ))

        return pois[:limit]
