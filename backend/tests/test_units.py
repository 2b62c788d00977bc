from __future__ import annotations

import pytest

from geo.coordinates import GeoCoordinate
from geo.units import Length, LengthUnit, feet, kilometers, meters, miles


def test_length_conversions_between_units():
    assert kilometers(1.5).meters == 1500.0
    assert miles(1).meters == pytest.approx(1609.34)
    assert feet(10).meters == pytest.approx(3.048)
    assert meters(1609.34).miles == pytest.approx(1.0)
    assert Length(2, LengthUnit.KILOMETER).to(LengthUnit.METER) == 2000.0


def test_length_equality_and_hash_ignore_the_unit():
    assert kilometers(1) == meters(1000)
    assert hash(kilometers(1)) == hash(meters(1000))
    assert len({kilometers(1), meters(1000), meters(999)}) == 2


def test_length_arithmetic():
    assert (kilometers(2) - meters(500)).meters == 1500.0
    assert (kilometers(2) + meters(500)).meters == 2500.0
    assert (meters(3) * 2).meters == 6.0
    assert (2 * meters(3)).meters == 6.0
    assert (meters(10) / 4).meters == 2.5
    # Length / Length is a ratio, not a Length.
    assert kilometers(1) / meters(250) == 4.0
    assert (-meters(5)).meters == -5.0
    assert abs(meters(-5)) == meters(5)


def test_length_ordering():
    assert meters(999) < kilometers(1)
    assert miles(1) > kilometers(1)
    assert max([feet(1), meters(1), kilometers(0.0001)]) == meters(1)


def test_geo_coordinate_normalized_wraps_longitude_and_clamps_latitude():
    c = GeoCoordinate(latitude=95.0, longitude=190.0).normalized()
    assert c.latitude == 90.0
    assert c.longitude == pytest.approx(-170.0)

    prague = GeoCoordinate(latitude=50.0755, longitude=14.4378)
    assert prague.normalized().latitude == prague.latitude
    assert prague.normalized().longitude == pytest.approx(prague.longitude)


def test_geo_coordinate_distance_to_is_geodesic():
    # One degree of latitude at the equator is ~110.6 km on WGS84.
    d = GeoCoordinate(0.0, 0.0).distance_to(GeoCoordinate(1.0, 0.0))
    assert d.kilometers == pytest.approx(110.574, rel=1e-3)
    assert GeoCoordinate(50.0, 14.0).distance_to(GeoCoordinate(50.0, 14.0)).meters == 0.0
