# backend/roadtrip/utils/poi_ranking.py

import re
from typing import Dict, List, Optional, Sequence, TypeVar, Union

from roadtrip.models.route_models import LodgingOption, PointOfInterest
from roadtrip.utils.categories import category_priority, matches_preferences


SYNTHETIC_SOURCE = "synthetic"

# Lower index wins when two duplicates are equally close
SOURCE_PREFERENCE = ["wikipedia", "overpass", SYNTHETIC_SOURCE]

T = TypeVar("T", PointOfInterest, LodgingOption)


def normalize_title(title: str) -> str:
    """
    Normalize a title for deduplication.

    Example:
        "  City  Museum " -> "city museum"
    """
    if not title:
        return ""
    text = title.casefold().strip()
    return re.sub(r"\s+", " ", text)


def _source_rank(source: Optional[str]) -> int:
    try:
        return SOURCE_PREFERENCE.index(source)
    except ValueError:
        return len(SOURCE_PREFERENCE)


def dedupe_by_title(items: Sequence[T]) -> List[T]:
    """
    Keep one item per normalized title. Duplicates are dropped, not merged:
    the closer item survives, then the preferred source. Order of first
    appearance is preserved.
    """
    kept: Dict[str, T] = {}
    for item in items:
        key = normalize_title(item.title)
        current = kept.get(key)
        if current is None:
            kept[key] = item
            continue
        if (item.distance_meters, _source_rank(item.source)) < (
            current.distance_meters,
            _source_rank(current.source),
        ):
            kept[key] = item
    return list(kept.values())


def _poi_sort_key(poi: PointOfInterest, preferences: List[str]):
    preference_boost = 1 if preferences and matches_preferences(poi.category, preferences) else 0
    return (-preference_boost, -category_priority(poi.category), poi.distance_meters)


def rank_pois(
    pois: Sequence[PointOfInterest],
    preferences: Optional[List[str]] = None,
    limit: Optional[int] = None,
) -> List[PointOfInterest]:
    """
    Merge-ready ranking of POIs gathered from several providers.

    Order:
        1. preference match
        2. category priority
        3. distance (closer first)

    Preference filtering is fail-open: when no POI matches, the full ranked
    list is returned instead of an empty one. ``limit`` applies after ranking.
    """
    preferences = [p for p in (preferences or []) if p and p.strip()]
    unique = dedupe_by_title(pois)
    ranked = sorted(unique, key=lambda p: _poi_sort_key(p, preferences))

    if preferences:
        filtered = [p for p in ranked if matches_preferences(p.category, preferences)]
        if filtered:
            ranked = filtered

    return ranked[:limit] if limit is not None else ranked


def rank_by_distance(
    items: Sequence[T],
    limit: Optional[int] = None,
) -> List[T]:
    unique = dedupe_by_title(items)
    ranked = sorted(unique, key=lambda i: i.distance_meters)
    return ranked[:limit] if limit is not None else ranked


def count_real(items: Sequence[Union[PointOfInterest, LodgingOption]]) -> int:
    """Number of items that came from a real provider."""
    return sum(1 for i in items if i.source != SYNTHETIC_SOURCE)
