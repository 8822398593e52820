# backend/tests/test_scout_agent.py

import asyncio
import time

from fakes import FakeGeocoder, FakeOverpass, FakeWikipedia, lon_at_km, make_scout
from roadtrip.agents.scout_agent import GENERIC_LODGING, GENERIC_POIS
from roadtrip.models.route_models import Candidate


def at_km(km):
    return Candidate(lat=0.0, lon=lon_at_km(km), distance_from_start=km * 1000)


def test_escalation_exhausted_returns_generic_pois():
    overpass, wikipedia = FakeOverpass(), FakeWikipedia()
    scout = make_scout(overpass, wikipedia)

    pois = asyncio.run(scout.find_pois(at_km(100), 16000, 10))

    assert wikipedia.calls == [16000, 32000, 48000]
    assert [r for _, r in overpass.calls] == [16000, 32000, 48000]
    assert pois
    assert {p.title for p in pois} == {title for title, *_ in GENERIC_POIS}
    assert all(p.source == "synthetic" for p in pois)


def test_escalation_stops_at_first_non_empty_radius():
    # 25 km away: outside 16 km, inside 32 km
    overpass = FakeOverpass(attractions=[(125, "Old Fort", "Historic Site")])
    wikipedia = FakeWikipedia()
    scout = make_scout(overpass, wikipedia)

    pois = asyncio.run(scout.find_pois(at_km(100), 16000, 10))

    assert [p.title for p in pois] == ["Old Fort"]
    assert wikipedia.calls == [16000, 32000]


def test_providers_merged_and_deduplicated():
    overpass = FakeOverpass(attractions=[(101, "City Museum", "Museum"), (102, "Green Park", "Park")])
    wikipedia = FakeWikipedia(attractions=[(101, "city museum", "Museum")])
    scout = make_scout(overpass, wikipedia)

    pois = asyncio.run(scout.find_pois(at_km(100), 16000, 10))

    assert [p.title for p in pois] == ["city museum", "Green Park"]
    assert pois[0].source == "wikipedia"


def test_failing_provider_does_not_hide_the_other():
    overpass = FakeOverpass(attractions=[(101, "City Museum", "Museum")])
    scout = make_scout(overpass, FakeWikipedia(fail=True))

    pois = asyncio.run(scout.find_pois(at_km(100), 16000, 10))

    assert [p.title for p in pois] == ["City Museum"]


class SlowWikipedia(FakeWikipedia):

    def fetch_attractions(self, lat, lon, radius_meters=10000, limit=10):
        time.sleep(0.3)
        return super().fetch_attractions(lat, lon, radius_meters, limit)


def test_timed_out_provider_counts_as_empty():
    overpass = FakeOverpass(attractions=[(100, "Green Park", "Park")])
    wikipedia = SlowWikipedia(attractions=[(100, "Slow Museum", "Museum")])
    scout = make_scout(overpass, wikipedia, call_timeout=0.05)

    pois = asyncio.run(scout.find_pois(at_km(100), 16000, 10))

    assert [p.title for p in pois] == ["Green Park"]


def test_lodging_falls_back_to_generic_set():
    scout = make_scout(FakeOverpass(fail=True))

    lodging = asyncio.run(scout.find_lodging(at_km(50), 8000, 5))

    assert {o.title for o in lodging} == {title for title, *_ in GENERIC_LODGING}
    assert all(o.source == "synthetic" for o in lodging)
    distances = [o.distance_meters for o in lodging]
    assert distances == sorted(distances)


def test_lodging_found_is_sorted_by_distance():
    overpass = FakeOverpass(lodging=[(53, "Far Inn", "Hotel"), (50.5, "Near Motel", "Motel")])
    scout = make_scout(overpass)

    lodging = asyncio.run(scout.find_lodging(at_km(50), 8000, 5))

    assert [o.title for o in lodging] == ["Near Motel", "Far Inn"]


def test_restaurants_have_no_fallback():
    scout = make_scout(FakeOverpass(fail=True))
    assert asyncio.run(scout.find_restaurants(0.0, lon_at_km(10), 10000, 5)) == []


def test_reverse_geocode_none_when_unavailable():
    scout = make_scout(geocoder=FakeGeocoder(reverse=False))
    assert asyncio.run(scout.reverse_geocode(0.0, 0.0)) is None

    scout = make_scout()
    assert asyncio.run(scout.reverse_geocode(0.0, lon_at_km(42)))["name"] == "Km 42"
