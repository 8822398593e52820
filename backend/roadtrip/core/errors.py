# backend/roadtrip/core/errors.py


class RoadtripError(Exception):
    """Base class for planner errors surfaced to the caller."""


class InvalidPlanRequestError(RoadtripError):
    """Bad day count, degenerate route or unknown pace."""


class LocationNotFoundError(RoadtripError):
    def __init__(self, query: str):
        super().__init__(f"Failed to find location: {query}")
        self.query = query


class NoRouteError(RoadtripError):
    """The routing service could not connect the two points."""
