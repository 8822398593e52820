# backend/roadtrip/utils/format_utils.py


def format_distance(meters: float) -> str:
    if meters < 1000:
        return f"{round(meters)}m"
    return f"{meters / 1000:.1f}km"


def format_duration(seconds: float) -> str:
    hours = int(seconds // 3600)
    minutes = round((seconds % 3600) / 60)
    return f"{hours}h {minutes}m"
