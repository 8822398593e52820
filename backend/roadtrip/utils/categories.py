# backend/roadtrip/utils/categories.py

from typing import Dict, List, Tuple


DEFAULT_ACTIVITY_HOURS = 1.5
DEFAULT_CATEGORY_PRIORITY = 1

# Estimated visit duration per category (hours)
ACTIVITY_TIME_ESTIMATES: Dict[str, float] = {
    "Museum": 2.5,
    "Zoo/Aquarium": 3,
    "Park": 1.5,
    "Historic Site": 1.5,
    "Restaurant": 1,
    "Scenic View": 0.5,
    "Entertainment": 2,
    "Outdoor Activity": 2,
    "Cultural Site": 2,
    "Food & Drink": 1,
    "Family Activity": 2,
    "Adventure": 3,
    "Attraction": 1.5,
}

# Higher ranks first
CATEGORY_PRIORITY: Dict[str, int] = {
    "Museum": 5,
    "Cultural Site": 5,
    "Zoo/Aquarium": 4,
    "Historic Site": 4,
    "Outdoor Activity": 4,
    "Family Activity": 4,
    "Entertainment": 3,
    "Nature": 3,
    "Food & Drink": 3,
    "Adventure": 3,
    "Scenic View": 2,
    "Park": 2,
    "Attraction": 1,
}

ATTRACTION_ICONS: Dict[str, str] = {
    "Museum": "🏛️",
    "Park": "🌳",
    "Historic Site": "🏛️",
    "Food & Drink": "🍽️",
    "Restaurant": "🍽️",
    "Zoo/Aquarium": "🐾",
    "Entertainment": "🎭",
    "Scenic View": "🌅",
    "Outdoor Activity": "🏃",
    "Cultural Site": "🎨",
    "Family Activity": "👨‍👩‍👧‍👦",
    "Adventure": "🧗",
    "Attraction": "📍",
}

ACCOMMODATION_ICONS: Dict[str, str] = {
    "Apartment": "🏠",
    "Resort": "🏖️",
}
DEFAULT_ACCOMMODATION_ICON = "🏨"

ACCOMMODATION_CATEGORIES: Dict[str, str] = {
    "hotel": "Hotel",
    "motel": "Motel",
    "hostel": "Hostel",
    "guest_house": "Guest House",
    "bed_and_breakfast": "Bed & Breakfast",
    "apartment": "Apartment",
    "resort": "Resort",
}

# Title keywords -> category, checked in order
TITLE_KEYWORDS: List[Tuple[Tuple[str, ...], str]] = [
    (("museum", "gallery"), "Museum"),
    (("park", "garden"), "Park"),
    (("historic", "monument", "memorial"), "Historic Site"),
    (("restaurant", "cafe", "bar"), "Food & Drink"),
    (("zoo", "aquarium"), "Zoo/Aquarium"),
    (("theater", "theatre", "cinema"), "Entertainment"),
    (("beach", "lake", "river"), "Scenic View"),
    (("church", "cathedral", "temple"), "Historic Site"),
    (("castle", "palace", "fort"), "Historic Site"),
    (("viewpoint", "overlook", "scenic"), "Scenic View"),
]

# User preference -> category fragments that satisfy it
PREFERENCE_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "outdoor": ("park", "nature", "outdoor"),
    "cultural": ("museum", "historic", "cultural"),
    "entertainment": ("entertainment", "theater"),
    "food": ("food", "restaurant"),
    "family": ("family", "zoo", "aquarium"),
    "adventure": ("adventure", "sports"),
}


def categorize_poi(title: str) -> str:
    """Guess a POI category from keywords in its title."""
    title_lower = (title or "").lower()
    for keywords, category in TITLE_KEYWORDS:
        if any(k in title_lower for k in keywords):
            return category
    return "Attraction"


def accommodation_category(osm_type: str) -> str:
    return ACCOMMODATION_CATEGORIES.get((osm_type or "").lower(), "Accommodation")


def activity_hours(category: str) -> float:
    return ACTIVITY_TIME_ESTIMATES.get(category, DEFAULT_ACTIVITY_HOURS)


def category_priority(category: str) -> int:
    return CATEGORY_PRIORITY.get(category, DEFAULT_CATEGORY_PRIORITY)


def attraction_icon(category: str) -> str:
    return ATTRACTION_ICONS.get(category, "📍")


def accommodation_icon(category: str) -> str:
    return ACCOMMODATION_ICONS.get(category, DEFAULT_ACCOMMODATION_ICON)


def matches_preferences(category: str, preferences: List[str]) -> bool:
    """
    True when the category satisfies at least one preference.
    Unknown preference names match everything.
    """
    category_lower = (category or "").lower()
    for pref in preferences:
        keywords = PREFERENCE_KEYWORDS.get(pref.lower().strip())
        if keywords is None:
            return True
        if any(k in category_lower for k in keywords):
            return True
    return False
