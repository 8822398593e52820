# backend/roadtrip/services/overpass_service.py

import requests
from typing import Any, Dict, List, Optional

from roadtrip.core.config_loader import settings
from roadtrip.core.logger import logger
from roadtrip.models.route_models import LodgingOption, PointOfInterest
from roadtrip.utils.categories import accommodation_category, categorize_poi
from roadtrip.utils.geo_utils import haversine_m


class OverpassService:
    """OpenStreetMap Overpass API: lodging, attractions and restaurants."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = base_url or settings.overpass_base_url
        self.timeout = timeout or settings.overpass_timeout
        self.headers = {
            "User-Agent": settings.user_agent,
            "Accept": "application/json",
        }

    # -------------------------------------------------------
    # RAW QUERY
    # -------------------------------------------------------
    def execute_query(self, query: str) -> List[Dict[str, Any]]:
        """
        Run an Overpass QL query and return its elements.
        Any failure (rate limit, timeout, malformed JSON) yields ``[]``.
        """
        try:
            resp = requests.post(
                self.base_url,
                data={"data": query},
                headers=self.headers,
                timeout=self.timeout,
            )
            if resp.status_code == 429:
                logger.warning("Overpass API rate limit hit, skipping this request")
                return []
            resp.raise_for_status()
            return resp.json().get("elements", []) or []
        except requests.exceptions.HTTPError as e:
            logger.error(f"Overpass HTTP error: {e}")
            return []
        except requests.exceptions.RequestException as e:
            logger.error(f"Overpass request error: {e}")
            return []
        except ValueError as e:
            logger.error(f"Overpass returned malformed JSON: {e}")
            return []

    @staticmethod
    def _coords(element: Dict[str, Any]) -> Optional[tuple]:
        if "lat" in element and "lon" in element:
            return element["lat"], element["lon"]
        center = element.get("center")
        if center and "lat" in center and "lon" in center:
            return center["lat"], center["lon"]
        return None

    @staticmethod
    def _node_url(element: Dict[str, Any]) -> str:
        return f"https://www.openstreetmap.org/{element.get('type', 'node')}/{element.get('id')}"

    # -------------------------------------------------------
    # ACCOMMODATIONS
    # -------------------------------------------------------
    def fetch_accommodations(
        self,
        lat: float,
        lon: float,
        radius_meters: int = 10000,
        limit: int = 5,
    ) -> List[LodgingOption]:
        around = f"(around:{int(radius_meters)},{lat},{lon})"
        query = f"""
            [out:json][timeout:25];
            (
              node["tourism"="hotel"]{around};
              node["tourism"="guest_house"]{around};
              node["tourism"="hostel"]{around};
              node["tourism"="motel"]{around};
              node["tourism"="bed_and_breakfast"]{around};
              node["tourism"="apartment"]{around};
              node["tourism"="resort"]{around};
              node["amenity"="hotel"]{around};
            );
            out center meta;
        """

        options: List[LodgingOption] = []
        for element in self.execute_query(query):
            coords = self._coords(element)
            if coords is None:
                continue
            tags = element.get("tags", {}) or {}
            osm_type = tags.get("tourism") or tags.get("amenity") or "hotel"
            options.append(LodgingOption(
                title=tags.get("name") or osm_type.replace("_", " ").capitalize(),
                lat=coords[0],
                lon=coords[1],
                distance_meters=haversine_m(lat, lon, coords[0], coords[1]),
                category=accommodation_category(osm_type),
                stars=tags.get("stars"),
                phone=tags.get("phone"),
                url=self._node_url(element),
                source="overpass",
            ))

        options.sort(key=lambda o: o.distance_meters)
        return options[:limit]

    # -------------------------------------------------------
    # ATTRACTIONS
    # -------------------------------------------------------
    def fetch_attractions(
        self,
        lat: float,
        lon: float,
        radius_meters: int = 15000,
        limit: int = 10,
    ) -> List[PointOfInterest]:
        around = f"(around:{int(radius_meters)},{lat},{lon})"
        query = f"""
            [out:json][timeout:25];
            (
              node["tourism"~"^(museum|gallery|artwork|attraction|theme_park|zoo|aquarium)$"]{around};
              node["amenity"~"^(museum|arts_centre|theatre|cinema|restaurant|cafe|bar)$"]{around};
              node["leisure"~"^(park|nature_reserve|beach_resort|golf_course|sports_centre|fitness_centre)$"]{around};
              node["historic"~"^(monument|memorial|tomb|ruins|castle|church|cathedral|tower)$"]{around};
              node["natural"~"^(beach|waterfall|cave|volcano|geyser|peak|cliff)$"]{around};
              node["tourism"~"^(viewpoint|camp_site|picnic_site)$"]{around};
            );
            out center meta;
        """

        pois: List[PointOfInterest] = []
        for element in self.execute_query(query):
            coords = self._coords(element)
            if coords is None:
                continue
            tags = element.get("tags", {}) or {}
            name = tags.get("name") or tags.get("tourism") or tags.get("amenity") or "Unnamed Location"
            pois.append(PointOfInterest(
                title=name,
                lat=coords[0],
                lon=coords[1],
                distance_meters=haversine_m(lat, lon, coords[0], coords[1]),
                category=categorize_poi(name),
                source="overpass",
                url=self._node_url(element),
            ))

        return pois[:limit]

    # -------------------------------------------------------
    # RESTAURANTS
    # -------------------------------------------------------
    def fetch_restaurants(
        self,
        lat: float,
        lon: float,
        radius_meters: int = 10000,
        limit: int = 5,
    ) -> List[PointOfInterest]:
        around = f"(around:{int(radius_meters)},{lat},{lon})"
        query = f"""
            [out:json][timeout:25];
            (
              node["amenity"~"^(restaurant|cafe|fast_food|food_court|ice_cream)$"]{around};
            );
            out center meta;
        """

        restaurants: List[PointOfInterest] = []
        for element in self.execute_query(query):
            coords = self._coords(element)
            if coords is None:
                continue
            name = (element.get("tags", {}) or {}).get("name", "")
            # unnamed or abbreviation-only entries are not useful to show
            if len(name.strip()) <= 2:
                continue
            restaurants.append(PointOfInterest(
                title=name,
                lat=coords[0],
                lon=coords[1],
                distance_meters=haversine_m(lat, lon, coords[0], coords[1]),
                category="Restaurant",
                source="overpass",
                url=self._node_url(element),
            ))

        restaurants.sort(key=lambda r: r.distance_meters)
        return restaurants[:limit]
