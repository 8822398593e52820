# backend/roadtrip/services/nominatim_service.py

import requests
from typing import Any, Dict, List, Optional

from roadtrip.core.config_loader import settings
from roadtrip.core.errors import LocationNotFoundError
from roadtrip.core.logger import logger


def build_location_name(data: Dict[str, Any]) -> str:
    """
    Compose a short display name from a Nominatim reverse result:
    city/town/village + state/county, else county, else state, else the
    first two parts of the full address.
    """
    address = data.get("address") or {}
    locality = address.get("city") or address.get("town") or address.get("village")
    region = address.get("state") or address.get("county")

    if locality:
        return f"{locality}, {region}" if region else locality
    if address.get("county"):
        county = address["county"]
        return f"{county}, {address['state']}" if address.get("state") else county
    if address.get("state"):
        return address["state"]

    parts = (data.get("display_name") or "").split(",")
    return ", ".join(p.strip() for p in parts[:2]).strip() or "Unknown Location"


class NominatimService:
    """Forward and reverse geocoding via OpenStreetMap Nominatim."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.nominatim_base_url).rstrip("/")
        self.timeout = timeout or settings.nominatim_timeout
        self.headers = {
            "User-Agent": settings.user_agent,
            "Accept": "application/json",
        }

    def _get(self, path: str, params: Dict[str, Any]) -> Any:
        resp = requests.get(
            f"{self.base_url}/{path}",
            params=params,
            headers=self.headers,
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    # -------------------------------------------------------
    # GEOCODE
    # -------------------------------------------------------
    def geocode(self, text: str) -> Dict[str, Any]:
        """
        Resolve free text to coordinates.

        Returns:
            {"lat", "lon", "display_name", "name"}

        Raises:
            LocationNotFoundError: no match or the service failed.
        """
        try:
            data = self._get("search", {"format": "json", "q": text, "limit": 1})
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Geocoding failed for '{text}': {e}")
            raise LocationNotFoundError(text) from e

        if not data:
            logger.warning(f"No geocoding results for '{text}'")
            raise LocationNotFoundError(text)

        place = data[0]
        display_name = place.get("display_name", text)
        return {
            "lat": float(place["lat"]),
            "lon": float(place["lon"]),
            "display_name": display_name,
            "name": display_name.split(",")[0],
        }

    # -------------------------------------------------------
    # REVERSE GEOCODE
    # -------------------------------------------------------
    def reverse_geocode(self, lat: float, lon: float) -> Optional[Dict[str, str]]:
        """Return {"name", "full_address"} or None. Never raises."""
        try:
            data = self._get("reverse", {
                "format": "jsonv2",
                "lat": lat,
                "lon": lon,
                "zoom": 10,
                "addressdetails": 1,
            })
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Reverse geocoding failed for {lat:.4f},{lon:.4f}: {e}")
            return None

        if not data or not data.get("display_name"):
            return None

        return {
            "name": build_location_name(data),
            "full_address": data["display_name"],
        }

    # -------------------------------------------------------
    # AUTOCOMPLETE
    # -------------------------------------------------------
    def search_locations(self, query: str, limit: int = 5) -> List[Dict[str, Any]]:
        if len(query.strip()) < 3:
            return []

        try:
            data = self._get("search", {
                "format": "json",
                "q": query,
                "limit": limit,
                "addressdetails": 1,
            })
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Location search failed for '{query}': {e}")
            return []

        return [
            {
                "name": place.get("display_name", ""),
                "lat": float(place["lat"]),
                "lon": float(place["lon"]),
                "display_name": place.get("display_name", "").split(",")[0],
            }
            for place in data
            if "lat" in place and "lon" in place
        ]
