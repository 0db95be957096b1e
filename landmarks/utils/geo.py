# Viewport geometry helpers

MIN_VIEWPORT_RADIUS = 1000.0  # meters
MAX_VIEWPORT_RADIUS = 10000.0  # upstream geosearch maximum
BASE_RADIUS = 50000.0  # radius at zoom 10, before clamping
BASE_ZOOM = 10


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def radius_for_zoom(zoom: float) -> float:
    """
    Search radius in meters for a map zoom level.

    Halves with every zoom step in, floored at 1 km so close-up views still
    find something and capped at the upstream maximum.
    """
    return clamp(BASE_RADIUS / (2 ** (zoom - BASE_ZOOM)), MIN_VIEWPORT_RADIUS, MAX_VIEWPORT_RADIUS)


def format_distance(meters: float) -> str:
    """'350m away' under a kilometer, '2.4km away' above."""
    if meters < 1000:
        return f"{round(meters)}m away"
    return f"{meters / 1000:.1f}km away"
