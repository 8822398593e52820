# backend/tests/test_services.py

import pytest
import requests

from roadtrip.core.errors import LocationNotFoundError, NoRouteError
from roadtrip.services import nominatim_service, osrm_service, overpass_service, wikipedia_service
from roadtrip.services.nominatim_service import NominatimService, build_location_name
from roadtrip.services.osrm_service import OSRMService
from roadtrip.services.overpass_service import OverpassService
from roadtrip.services.wikipedia_service import MAX_GEOSEARCH_RADIUS_M, WikipediaService, is_relevant_title
from roadtrip.utils.format_utils import format_distance, format_duration


class FakeResponse:

    def __init__(self, payload=None, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


def respond_with(monkeypatch, module, method, response, captured=None):
    def fake(url, **kwargs):
        if captured is not None:
            captured.append((url, kwargs))
        if isinstance(response, Exception):
            raise response
        return response
    monkeypatch.setattr(module.requests, method, fake)


# ----------------------------------------------------------
# OVERPASS
# ----------------------------------------------------------
def test_overpass_accommodations_parsed_and_sorted(monkeypatch):
    elements = [
        {"type": "node", "id": 1, "lat": 0.0, "lon": 0.05, "tags": {"tourism": "motel", "name": "Far Motel"}},
        {"type": "way", "id": 2, "center": {"lat": 0.0, "lon": 0.01}, "tags": {"tourism": "hotel", "name": "Near Hotel", "stars": "3"}},
        {"type": "node", "id": 3, "tags": {"tourism": "hotel"}},
    ]
    respond_with(monkeypatch, overpass_service, "post", FakeResponse({"elements": elements}))

    options = OverpassService().fetch_accommodations(0.0, 0.0, 8000, 5)

    assert [o.title for o in options] == ["Near Hotel", "Far Motel"]
    assert options[0].category == "Hotel"
    assert options[0].stars == "3"
    assert options[0].url == "https://www.openstreetmap.org/way/2"
    assert options[1].category == "Motel"


def test_overpass_rate_limit_is_empty(monkeypatch):
    respond_with(monkeypatch, overpass_service, "post", FakeResponse({}, status_code=429))
    assert OverpassService().fetch_attractions(0.0, 0.0) == []


@pytest.mark.parametrize("response", [
    requests.exceptions.Timeout("slow"),
    FakeResponse({}, status_code=504),
    FakeResponse(ValueError("not json")),
])
def test_overpass_failures_are_empty(monkeypatch, response):
    respond_with(monkeypatch, overpass_service, "post", response)
    assert OverpassService().fetch_accommodations(0.0, 0.0) == []


def test_overpass_restaurants_skip_short_names(monkeypatch):
    elements = [
        {"type": "node", "id": 1, "lat": 0.0, "lon": 0.02, "tags": {"amenity": "cafe", "name": "Corner Cafe"}},
        {"type": "node", "id": 2, "lat": 0.0, "lon": 0.01, "tags": {"amenity": "fast_food", "name": "KF"}},
        {"type": "node", "id": 3, "lat": 0.0, "lon": 0.01, "tags": {"amenity": "restaurant"}},
    ]
    respond_with(monkeypatch, overpass_service, "post", FakeResponse({"elements": elements}))

    restaurants = OverpassService().fetch_restaurants(0.0, 0.0)

    assert [r.title for r in restaurants] == ["Corner Cafe"]
    assert restaurants[0].category == "Restaurant"


# ----------------------------------------------------------
# WIKIPEDIA
# ----------------------------------------------------------
def test_wikipedia_title_filter():
    assert is_relevant_title("Springfield Art Museum")
    assert not is_relevant_title("Interstate Highway Museum")
    assert not is_relevant_title("John Smith")


def test_wikipedia_radius_clamped_and_results_filtered(monkeypatch):
    captured = []
    payload = {"query": {"geosearch": [
        {"title": "Lakeside Park", "lat": 1.0, "lon": 2.0, "dist": 1200.5},
        {"title": "Main Street Station", "lat": 1.0, "lon": 2.0, "dist": 300},
        {"title": "Old Castle", "dist": 50},
    ]}}
    respond_with(monkeypatch, wikipedia_service, "get", FakeResponse(payload), captured)

    pois = WikipediaService().fetch_attractions(1.0, 2.0, 48000, 10)

    assert captured[0][1]["params"]["gsradius"] == MAX_GEOSEARCH_RADIUS_M
    assert [p.title for p in pois] == ["Lakeside Park"]
    assert pois[0].distance_meters == 1200.5
    assert pois[0].source == "wikipedia"
    assert pois[0].url == "https://en.wikipedia.org/wiki/Lakeside_Park"


def test_wikipedia_failure_is_empty(monkeypatch):
    respond_with(monkeypatch, wikipedia_service, "get", requests.exceptions.ConnectionError("offline"))
    assert WikipediaService().fetch_attractions(0.0, 0.0) == []


# ----------------------------------------------------------
# NOMINATIM
# ----------------------------------------------------------
@pytest.mark.parametrize("data, expected", [
    ({"address": {"town": "Moab", "state": "Utah"}}, "Moab, Utah"),
    ({"address": {"village": "Tusayan", "county": "Coconino County"}}, "Tusayan, Coconino County"),
    ({"address": {"county": "Nye County", "state": "Nevada"}}, "Nye County, Nevada"),
    ({"address": {"state": "Wyoming"}}, "Wyoming"),
    ({"address": {}, "display_name": "Route 66, Somewhere, USA"}, "Route 66, Somewhere"),
    ({}, "Unknown Location"),
])
def test_build_location_name(data, expected):
    assert build_location_name(data) == expected


def test_geocode(monkeypatch):
    payload = [{"lat": "36.17", "lon": "-115.14", "display_name": "Las Vegas, Nevada, USA"}]
    respond_with(monkeypatch, nominatim_service, "get", FakeResponse(payload))

    place = NominatimService().geocode("Las Vegas")

    assert place == {"lat": 36.17, "lon": -115.14, "display_name": "Las Vegas, Nevada, USA", "name": "Las Vegas"}


def test_geocode_no_match(monkeypatch):
    respond_with(monkeypatch, nominatim_service, "get", FakeResponse([]))
    with pytest.raises(LocationNotFoundError) as exc:
        NominatimService().geocode("Atlantis")
    assert exc.value.query == "Atlantis"


def test_reverse_geocode_never_raises(monkeypatch):
    respond_with(monkeypatch, nominatim_service, "get", requests.exceptions.Timeout("slow"))
    assert NominatimService().reverse_geocode(0.0, 0.0) is None


def test_search_locations_needs_three_characters(monkeypatch):
    captured = []
    respond_with(monkeypatch, nominatim_service, "get", FakeResponse([]), captured)
    assert NominatimService().search_locations("LA") == []
    assert captured == []


# ----------------------------------------------------------
# OSRM
# ----------------------------------------------------------
def test_osrm_route_swaps_coordinates(monkeypatch):
    payload = {"code": "Ok", "routes": [{
        "distance": 1234.5,
        "duration": 99.0,
        "geometry": {"coordinates": [[-115.1, 36.1], [-115.0, 36.2]]},
    }]}
    respond_with(monkeypatch, osrm_service, "get", FakeResponse(payload))

    route = OSRMService().route({"lat": 36.1, "lon": -115.1}, {"lat": 36.2, "lon": -115.0})

    assert route.vertices == ((36.1, -115.1), (36.2, -115.0))
    assert route.total_distance_meters == 1234.5
    assert route.total_duration_seconds == 99.0


@pytest.mark.parametrize("response", [
    FakeResponse({"code": "NoRoute", "routes": []}),
    requests.exceptions.ConnectionError("offline"),
])
def test_osrm_no_route(monkeypatch, response):
    respond_with(monkeypatch, osrm_service, "get", response)
    with pytest.raises(NoRouteError):
        OSRMService().route({"lat": 0, "lon": 0}, {"lat": 1, "lon": 1})


# ----------------------------------------------------------
# FORMATTING
# ----------------------------------------------------------
def test_format_helpers():
    assert format_distance(850) == "850m"
    assert format_distance(1234) == "1.2km"
    assert format_duration(3 * 3600 + 25 * 60) == "3h 25m"
