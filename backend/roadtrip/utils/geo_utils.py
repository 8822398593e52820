# backend/roadtrip/utils/geo_utils.py

import math
from bisect import bisect_right
from typing import List, Tuple

from roadtrip.models.route_models import Candidate, Route


EARTH_RADIUS_M = 6371000.0


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in meters."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


class CumulativeDistanceIndex:
    """
    Cumulative haversine distance from the start of a route, one entry per
    vertex (``cumulative[0] == 0``). Built once per route and shared by every
    distance-to-point lookup.
    """

    def __init__(self, vertices: Tuple[Tuple[float, float], ...], cumulative: Tuple[float, ...]):
        self._vertices = vertices
        self._cumulative = cumulative

    @classmethod
    def from_route(cls, route: Route) -> "CumulativeDistanceIndex":
        vertices = tuple(route.vertices)
        cumulative: List[float] = [0.0]
        for (lat1, lon1), (lat2, lon2) in zip(vertices, vertices[1:]):
            cumulative.append(cumulative[-1] + haversine_m(lat1, lon1, lat2, lon2))
        return cls(vertices, tuple(cumulative))

    @property
    def cumulative(self) -> Tuple[float, ...]:
        return self._cumulative

    @property
    def length(self) -> float:
        return self._cumulative[-1] if self._cumulative else 0.0

    def point_at(self, target: float) -> Candidate:
        """
        Interpolate the point located ``target`` meters along the route.

        ``distance_from_start`` is the requested target, clamped to
        ``[0, length]``.
        """
        vertices = self._vertices
        if not vertices:
            raise ValueError("route has no vertices")

        if target <= 0 or len(vertices) == 1:
            lat, lon = vertices[0]
            return Candidate(lat=lat, lon=lon, distance_from_start=max(0.0, target), source_segment_index=0)

        last = len(vertices) - 1
        if target >= self.length:
            lat, lon = vertices[last]
            return Candidate(
                lat=lat,
                lon=lon,
                distance_from_start=target,
                source_segment_index=max(0, last - 1),
            )

        # first vertex whose cumulative distance is beyond the target
        i = bisect_right(self._cumulative, target) - 1
        i = min(max(i, 0), last - 1)
        segment = self._cumulative[i + 1] - self._cumulative[i]

        lat1, lon1 = vertices[i]
        lat2, lon2 = vertices[i + 1]
        ratio = (target - self._cumulative[i]) / segment if segment > 0 else 0.0

        return Candidate(
            lat=lat1 + (lat2 - lat1) * ratio,
            lon=lon1 + (lon2 - lon1) * ratio,
            distance_from_start=target,
            source_segment_index=i,
        )
