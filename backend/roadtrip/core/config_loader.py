# backend/roadtrip/core/config_loader.py

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # External services (OpenStreetMap family, no API keys required)
    nominatim_base_url: str = "https://nominatim.openstreetmap.org"
    osrm_base_url: str = "https://router.project-osrm.org"
    overpass_base_url: str = "https://overpass-api.de/api/interpreter"
    wikipedia_base_url: str = "https://en.wikipedia.org/w/api.php"
    user_agent: str = "RoadtripPlanner/1.0"

    # Per-request timeouts (seconds)
    nominatim_timeout: float = 10.0
    osrm_timeout: float = 15.0
    overpass_timeout: float = 25.0
    wikipedia_timeout: float = 10.0
    provider_call_timeout: float = 30.0

    # Rate-limit discipline (seconds between calls to the same service)
    overpass_min_interval: float = 2.0
    nominatim_min_interval: float = 1.0
    wikipedia_min_interval: float = 1.0
    max_concurrent_requests: int = 3

    # Sampling
    overnight_samples_per_day: int = 3
    max_overnight_samples: int = 12
    roadside_min_interval_m: float = 8000.0
    roadside_samples_per_route: int = 30
    max_roadside_samples: int = 24

    # Overnight selection tunables (fractions of the ideal daily distance)
    overnight_tolerance_factor: float = 0.5
    overnight_spacing_factor: float = 0.3
    accommodation_weight: float = 0.1
    max_accommodations_per_stop: int = 5

    # Food options
    food_search_radius_m: int = 10000
    max_food_options: int = 5

    max_days: int = 30
    log_level: str = "DEBUG"
    environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
