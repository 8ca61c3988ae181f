import math

import pytest

from app.core.exceptions import (
    NoActiveSitesException,
    OutOfGeofenceException,
    SiteNotFoundException,
)
from app.services.geofence_service import (
    EARTH_RADIUS_M,
    GeofenceService,
    haversine_distance,
    round_half_up,
)


def north_of(lat, meters):
    """Latitude `meters` north of `lat` along a meridian"""
    return lat + math.degrees(meters / EARTH_RADIUS_M)


@pytest.fixture
def geofence():
    return GeofenceService()


def test_distance_to_self_is_zero():
    assert haversine_distance(-6.2, 106.8, -6.2, 106.8) == 0


def test_distance_is_symmetric():
    a = (-6.2088, 106.8456)
    b = (-6.1754, 106.8272)

    assert haversine_distance(*a, *b) == haversine_distance(*b, *a)


def test_distance_along_meridian():
    assert haversine_distance(0, 0, north_of(0, 250), 0) == pytest.approx(250, abs=1e-6)


def reference_distance(lat1, lon1, lat2, lon2):
    phi1 = (lat1 * math.pi) / 180
    phi2 = (lat2 * math.pi) / 180
    d_phi = ((lat2 - lat1) * math.pi) / 180
    d_lambda = ((lon2 - lon1) * math.pi) / 180
    a = (
        math.sin(d_phi / 2) * math.sin(d_phi / 2)
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) * math.sin(d_lambda / 2)
    )
    return 6371e3 * (2 * math.atan2(math.sqrt(a), math.sqrt(1 - a)))


@pytest.mark.parametrize("lat1, lon1, lat2, lon2", [
    (-6.2088, 106.8456, -6.1754, 106.8272),
    (-6.1754, 106.8272, -6.9025, 107.6187),
    (51.5007, -0.1246, 48.8584, 2.2945),
    (40.7484, -73.9857, 40.7488, -73.9850),
    (35.6586, 139.7454, -33.8568, 151.2153),
    (0.0001, 179.9999, -0.0001, -179.9999),
    (12.345678, 98.765432, 12.345701, 98.765489),
])
def test_distance_matches_degree_formula_exactly(lat1, lon1, lat2, lon2):
    assert haversine_distance(lat1, lon1, lat2, lon2) == reference_distance(lat1, lon1, lat2, lon2)


def test_known_city_distance():
    # Jakarta Monas to Bandung Gedung Sate, roughly 119 km
    distance = haversine_distance(-6.1754, 106.8272, -6.9025, 107.6187)

    assert 115_000 < distance < 123_000


def test_round_half_up():
    assert round_half_up(12.5) == 13
    assert round_half_up(12.49) == 12
    assert round_half_up(0.5) == 1


def test_nearest_site_is_selected(geofence, make_site):
    sites = [
        make_site("B", north_of(0, 200), 0, radius_m=100),
        make_site("A", north_of(0, 50), 0, radius_m=100),
    ]

    result = geofence.resolve(0, 0, sites)

    assert result.site_id == "A"
    assert result.within_radius is True
    assert result.rounded_distance_m == 50


def test_equidistant_sites_resolve_to_first_in_input_order(geofence, make_site):
    sites = [
        make_site("FIRST", north_of(0, 80), 0),
        make_site("SECOND", north_of(0, 80), 0),
    ]

    assert geofence.resolve(0, 0, sites).site_id == "FIRST"
    assert geofence.resolve(0, 0, list(reversed(sites))).site_id == "SECOND"


def test_nearest_site_out_of_range_still_reported(geofence, make_site):
    sites = [make_site("A", north_of(0, 150), 0, radius_m=100)]

    result = geofence.resolve(0, 0, sites)

    assert result.within_radius is False
    assert result.site_name == "Site A"
    assert result.rounded_distance_m == 150


def test_boundary_distance_is_inside(geofence, make_site):
    site = make_site("A", 0, 0, radius_m=100)

    result = geofence.resolve(north_of(0, 99.9), 0, [site])

    assert result.within_radius is True


def test_requested_site_overrides_nearest(geofence, make_site):
    sites = [
        make_site("NEAR", north_of(0, 10), 0),
        make_site("FAR", north_of(0, 500), 0, radius_m=1000),
    ]

    result = geofence.resolve(0, 0, sites, requested_site_id="FAR")

    assert result.site_id == "FAR"
    assert result.within_radius is True


def test_unknown_requested_site_raises(geofence, make_site):
    with pytest.raises(SiteNotFoundException) as exc_info:
        geofence.resolve(0, 0, [make_site("A", 0, 0)], requested_site_id="MISSING")

    assert exc_info.value.status_code == 404


def test_no_sites_is_distinct_failure(geofence):
    with pytest.raises(NoActiveSitesException) as exc_info:
        geofence.resolve(0, 0, [])

    assert exc_info.value.status_code == 422


def test_ensure_within_passes_result_through(geofence, make_site):
    result = geofence.resolve(0, 0, [make_site("A", north_of(0, 20), 0)])

    assert geofence.ensure_within(result) is result


def test_ensure_within_raises_with_distance_details(geofence, make_site):
    result = geofence.resolve(0, 0, [make_site("A", north_of(0, 150), 0, radius_m=100)])

    with pytest.raises(OutOfGeofenceException) as exc_info:
        geofence.ensure_within(result)

    exc = exc_info.value
    assert exc.status_code == 403
    assert exc.message == "You are 150m away from Site A. You must be within 100m to clock in."
    assert exc.details == {"distance": 150, "radius": 100, "site_name": "Site A"}


def test_check_location_sorts_by_distance_and_counts_in_range(geofence, make_site):
    sites = [
        make_site("FAR", north_of(0, 900), 0, radius_m=100),
        make_site("NEAR", north_of(0, 30), 0, radius_m=100),
        make_site("MID", north_of(0, 300), 0, radius_m=500),
    ]

    check = geofence.check_location(0, 0, sites)

    assert [s.site_id for s in check.sites] == ["NEAR", "MID", "FAR"]
    assert check.in_range_count == 2
    assert check.is_valid is True
    assert check.closest.site_id == "NEAR"
    assert check.sites[-1].status == "OUT_OF_RANGE"


def test_check_location_agrees_with_resolve_past_the_radius(geofence, make_site):
    site = make_site("A", 0, 0, radius_m=100)
    lat = north_of(0, 100.4)

    result = geofence.resolve(lat, 0, [site])
    check = geofence.check_location(lat, 0, [site])

    assert result.within_radius is False
    assert check.sites[0].distance_m == 100
    assert check.sites[0].in_range is False
    assert check.sites[0].status == "OUT_OF_RANGE"
    assert check.is_valid is False
    assert check.in_range_count == 0


def test_check_location_keeps_exact_radius_in_range(geofence, make_site):
    site = make_site("A", 0, 0, radius_m=100)

    check = geofence.check_location(north_of(0, 99.6), 0, [site])

    assert check.sites[0].distance_m == 100
    assert check.sites[0].in_range is True


def test_check_location_without_sites(geofence):
    check = geofence.check_location(0, 0, [])

    assert check.is_valid is False
    assert check.sites == []
    assert check.closest is None
