# backend/roadtrip/services/osrm_service.py

import requests
from typing import Dict, Optional

from roadtrip.core.config_loader import settings
from roadtrip.core.errors import NoRouteError
from roadtrip.core.logger import logger
from roadtrip.models.route_models import Route


class OSRMService:
    """Driving routes from an OSRM server."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.osrm_base_url).rstrip("/")
        self.timeout = timeout or settings.osrm_timeout

    def route(self, start: Dict[str, float], end: Dict[str, float]) -> Route:
        """
        Fetch the driving route between two points.

        Args:
            start, end: {"lat": float, "lon": float}

        Returns:
            Route with (lat, lon) vertices.

        Raises:
            NoRouteError: the service failed or found no route.
        """
        coords = f"{start['lon']},{start['lat']};{end['lon']},{end['lat']}"
        url = f"{self.base_url}/route/v1/driving/{coords}"
        params = {"overview": "full", "geometries": "geojson", "steps": "false"}

        try:
            logger.debug(f"OSRM route request: {coords}")
            resp = requests.get(url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Route fetching failed: {e}")
            raise NoRouteError("Failed to find route") from e

        routes = data.get("routes") or []
        if data.get("code", "Ok") != "Ok" or not routes:
            logger.warning(f"OSRM returned no route (code={data.get('code')})")
            raise NoRouteError("No route found")

        best = routes[0]
        # GeoJSON coordinates are [lon, lat]
        vertices = tuple((lat, lon) for lon, lat in best["geometry"]["coordinates"])
        logger.info(f"Route found: {best['distance'] / 1000:.1f} km, {len(vertices)} vertices")

        return Route(
            vertices=vertices,
            total_distance_meters=float(best["distance"]),
            total_duration_seconds=float(best.get("duration", 0.0)),
        )
