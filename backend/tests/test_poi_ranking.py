# backend/tests/test_poi_ranking.py

from roadtrip.models.route_models import LodgingOption, PointOfInterest
from roadtrip.utils.categories import activity_hours, categorize_poi, category_priority, matches_preferences
from roadtrip.utils.poi_ranking import count_real, dedupe_by_title, normalize_title, rank_by_distance, rank_pois


def poi(title, category="Attraction", distance=1000.0, source="overpass"):
    return PointOfInterest(title=title, lat=0, lon=0, distance_meters=distance, category=category, source=source)


def test_normalize_title():
    assert normalize_title("  City   Museum ") == "city museum"
    assert normalize_title("") == ""


def test_duplicate_titles_from_two_sources_kept_once():
    pois = [
        poi("City Museum", "Museum", 500, "wikipedia"),
        poi("city museum ", "Museum", 800, "overpass"),
    ]
    result = rank_pois(pois)
    assert len(result) == 1
    assert result[0].source == "wikipedia"


def test_dedupe_prefers_closer_then_source():
    closer = poi("Old Fort", distance=200, source="overpass")
    farther = poi("old fort", distance=900, source="wikipedia")
    assert dedupe_by_title([farther, closer]) == [closer]

    wiki = poi("Lake View", distance=300, source="wikipedia")
    osm = poi("LAKE VIEW", distance=300, source="overpass")
    assert dedupe_by_title([osm, wiki]) == [wiki]


def test_rank_by_category_then_distance():
    pois = [
        poi("Some Place", "Attraction", 100),
        poi("Green Park", "Park", 50),
        poi("Art Museum", "Museum", 3000),
        poi("History Museum", "Museum", 2000),
        poi("City Zoo", "Zoo/Aquarium", 10),
    ]
    titles = [p.title for p in rank_pois(pois)]
    assert titles == ["History Museum", "Art Museum", "City Zoo", "Green Park", "Some Place"]


def test_preference_filters_and_boosts():
    pois = [
        poi("Art Museum", "Museum", 100),
        poi("Green Park", "Park", 900),
        poi("River Walk", "Outdoor Activity", 500),
    ]
    titles = [p.title for p in rank_pois(pois, ["outdoor"])]
    assert titles == ["River Walk", "Green Park"]


def test_preference_filter_fails_open():
    pois = [
        poi("Art Museum", "Museum", 100),
        poi("Green Park", "Park", 900),
    ]
    assert rank_pois(pois, ["food"]) == rank_pois(pois)


def test_limit_applies_after_ranking():
    pois = [poi(f"Place {i}", "Attraction", 100 * i) for i in range(1, 6)]
    pois.append(poi("Far Museum", "Museum", 99_000))
    titles = [p.title for p in rank_pois(pois, limit=2)]
    assert titles == ["Far Museum", "Place 1"]


def test_rank_by_distance_for_lodging():
    options = [
        LodgingOption(title="Motel Nine", lat=0, lon=0, distance_meters=900),
        LodgingOption(title="Grand Hotel", lat=0, lon=0, distance_meters=100),
        LodgingOption(title="grand hotel", lat=0, lon=0, distance_meters=400),
    ]
    ranked = rank_by_distance(options, limit=5)
    assert [o.title for o in ranked] == ["Grand Hotel", "Motel Nine"]


def test_count_real_ignores_synthetic():
    items = [poi("A"), poi("B", source="synthetic"), poi("C", source="wikipedia")]
    assert count_real(items) == 2


def test_category_tables_have_explicit_defaults():
    assert activity_hours("Something New") == 1.5
    assert category_priority("Something New") == 1
    assert activity_hours("Museum") == 2.5
    assert categorize_poi("Riverside Botanical Garden") == "Park"
    assert categorize_poi("Mystery Spot") == "Attraction"


def test_unknown_preference_matches_everything():
    assert matches_preferences("Park", ["shopping"])
    assert not matches_preferences("Park", ["cultural"])
