# backend/roadtrip/utils/route_sampler.py

from typing import List, Optional

from roadtrip.core.errors import InvalidPlanRequestError
from roadtrip.models.route_models import Candidate, Route
from roadtrip.utils.geo_utils import CumulativeDistanceIndex


class RouteSampler:
    """
    Turns a route into evenly spaced candidate points.

    Targets are expressed in the route's reported distance
    (``route.total_distance_meters``) and mapped proportionally onto the
    polyline's own haversine length, so road distance and geometry agree at
    both ends of the route.
    """

    def __init__(self, route: Route, index: Optional[CumulativeDistanceIndex] = None):
        if len(route.vertices) < 2 or route.total_distance_meters <= 0:
            raise InvalidPlanRequestError("Route is degenerate (needs two vertices and a positive distance)")

        self.route = route
        self.index = index or CumulativeDistanceIndex.from_route(route)
        self.total_distance = route.total_distance_meters

        length = self.index.length
        self._scale = length / self.total_distance if length > 0 else 0.0

    # -------------------------------------------------------
    # SINGLE POINT
    # -------------------------------------------------------
    def point_at(self, target: float) -> Candidate:
        """Candidate ``target`` meters from the start (clamped to the route)."""
        target = min(max(target, 0.0), self.total_distance)
        if target >= self.total_distance:
            point = self.index.point_at(self.index.length)
        else:
            point = self.index.point_at(target * self._scale)
        return point.model_copy(update={"distance_from_start": target})

    # -------------------------------------------------------
    # SAMPLING
    # -------------------------------------------------------
    def sample_by_count(self, count: int) -> List[Candidate]:
        """
        ``count`` interior points splitting the route into ``count + 1``
        equal parts, ordered by distance from start.
        """
        if count <= 0:
            return []
        step = self.total_distance / (count + 1)
        return [self.point_at(step * i) for i in range(1, count + 1)]

    def sample_by_interval(self, interval: float, max_samples: int) -> List[Candidate]:
        """
        Points every ``interval`` meters, excluding both endpoints.

        When the route would need more than ``max_samples`` points the
        interval is stretched so the capped samples still cover the whole
        route instead of only its beginning.
        """
        if interval <= 0:
            raise ValueError("interval must be positive")

        count = int(self.total_distance // interval)
        if count * interval >= self.total_distance:
            count -= 1
        count = max(0, count)

        if count > max_samples:
            return self.sample_by_count(max_samples)
        return [self.point_at(interval * i) for i in range(1, count + 1)]
