from __future__ import annotations

import math

from geo.units import Length, kilometers


EARTH_CIRCUMFERENCE = kilometers(40007.863)
EARTH_HALF_CIRCUMFERENCE = EARTH_CIRCUMFERENCE / 2.0

# Google-style maps: zoom 0 renders the whole world into one 256dp tile.
BASE_TILE_SIZE_DP = 256.0

# Empirically tuned stand-in for Mercator longitude compression. The forward and
# inverse padding transforms must use the same value or round trips drift.
LONGITUDE_CORRECTION_FACTOR = 1.35

LATITUDE_SPAN_DEGREES = 180.0
LONGITUDE_SPAN_DEGREES = 360.0

QUARTER_CIRCLE_RADIANS = math.pi / 2.0

DEFAULT_MIN_ZOOM = 1.0
DEFAULT_MAX_ZOOM = 21.0


def clip(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)


def lat_from_distance(distance: Length) -> float:
    return LATITUDE_SPAN_DEGREES * distance.meters / EARTH_HALF_CIRCUMFERENCE.meters


def long_from_distance(distance: Length) -> float:
    return (
        LONGITUDE_CORRECTION_FACTOR
        * LONGITUDE_SPAN_DEGREES
        * distance.meters
        / EARTH_CIRCUMFERENCE.meters
    )


def mercator_distortion(latitude: float) -> float:
    lat = clip(float(latitude), -90.0, 90.0)
    return math.cos(math.radians(lat))


def distance_offset_to_lat_lon(
    bearing: float, x_shift: Length, y_shift: Length
) -> tuple[float, float]:
    """
    Convert a screen-relative (x right, y down) distance shift into a
    (latitude, longitude) degree offset.

    The shift is rotated by -bearing so it is expressed map-relative rather
    than device-relative. Flat-earth approximation; fine for viewport-sized shifts.
    """
    rotation = -math.radians(float(bearing))

    lat_dist = x_shift * math.cos(rotation + QUARTER_CIRCLE_RADIANS) + y_shift * math.cos(
        rotation
    )
    long_dist = x_shift * math.sin(rotation + QUARTER_CIRCLE_RADIANS) + y_shift * math.sin(
        rotation
    )

    return lat_from_distance(lat_dist), -long_from_distance(long_dist)


def zoom_for_distance(
    latitude: float,
    screen_dp: float,
    distance: Length,
    *,
    base_tile_size_dp: float = BASE_TILE_SIZE_DP,
) -> float:
    """
    Zoom level at which `distance` spans `screen_dp` device-independent pixels.

    Unclamped. Non-positive distances map to +inf and unbounded ones to -inf so
    the caller's zoom clamp always has something sane to work with.
    """
    d = distance.meters
    if math.isnan(d) or d == math.inf:
        return -math.inf
    if d <= 0.0:
        return math.inf

    arg = (
        screen_dp
        * mercator_distortion(latitude)
        * EARTH_CIRCUMFERENCE.meters
        / (d * base_tile_size_dp)
    )
    if not arg > 0.0:
        return -math.inf
    if arg == math.inf:
        return math.inf
    return math.log2(arg)


def distance_for_zoom(
    latitude: float,
    screen_dp: float,
    zoom: float,
    *,
    base_tile_size_dp: float = BASE_TILE_SIZE_DP,
) -> Length:
    return (
        EARTH_CIRCUMFERENCE
        * float(screen_dp)
        * mercator_distortion(latitude)
        / (base_tile_size_dp * 2.0 ** float(zoom))
    )
