from __future__ import annotations

import math

import pytest

from veilmap.offset import (
    DEFAULT_OFFSET_RADIUS_M,
    METERS_PER_DEGREE_LAT,
    apply_offset,
    calculate_offset,
    fnv1a_32,
    scale_lng_offset,
    should_apply_offset,
)
from veilmap.utils.geospatial import haversine_distance


def _reference_offset(entity_id: str, radius_m: float):
    """Straight transcription of the formula: hash the concatenated strings."""
    def fnv(s: str) -> int:
        h = 2166136261
        for b in s.encode("utf-8"):
            h ^= b
            h = (h * 16777619) % (2 ** 32)
        return h

    angle = fnv(entity_id + "-lat") / 2 ** 32 * 2 * math.pi
    r = math.sqrt(fnv(entity_id + "-lng") / 2 ** 32) * radius_m
    return r * math.sin(angle) / 111320, r * math.cos(angle) / 111320


def _radius_fraction(off, radius_m: float) -> float:
    return math.hypot(off.lat_offset_deg, off.lng_offset_base_deg) * METERS_PER_DEGREE_LAT / radius_m


def test_fnv1a_known_vectors():
    assert fnv1a_32(b"") == 2166136261
    assert fnv1a_32(b"a") == 0xE40C292C
    assert fnv1a_32(b"foobar") == 0xBF9CF968


def test_fnv1a_seed_continues_running_hash():
    assert fnv1a_32(b"bar", fnv1a_32(b"foo")) == fnv1a_32(b"foobar")


def test_offset_matches_reference_formula_bit_for_bit():
    for entity_id in ["scene-1", "event-42", "ünïcödé-id", "", "x" * 64]:
        off = calculate_offset(entity_id, 250)
        assert (off.lat_offset_deg, off.lng_offset_base_deg) == _reference_offset(entity_id, 250)


def test_offset_is_deterministic():
    first = calculate_offset("deterministic-test")
    for _ in range(100):
        assert calculate_offset("deterministic-test") == first


def test_different_ids_get_different_offsets():
    a = calculate_offset("scene-123")
    b = calculate_offset("scene-456")
    assert a.lat_offset_deg != b.lat_offset_deg
    assert a.lng_offset_base_deg != b.lng_offset_base_deg


@pytest.mark.parametrize("radius", [50.0, 250.0, 1000.0])
def test_offset_stays_inside_disk(radius):
    for i in range(500):
        assert _radius_fraction(calculate_offset(f"scene-{i}", radius), radius) <= 1.0 + 1e-12


def test_radius_scales_magnitude_not_direction():
    small = calculate_offset("scene-radius-test", 100)
    large = calculate_offset("scene-radius-test", 200)
    assert large.lat_offset_deg == 2 * small.lat_offset_deg
    assert large.lng_offset_base_deg == 2 * small.lng_offset_base_deg


def test_zero_radius_means_no_offset():
    off = calculate_offset("scene-1", 0)
    assert off.lat_offset_deg == 0.0 and off.lng_offset_base_deg == 0.0


@pytest.mark.parametrize("radius", [-1.0, float("nan"), float("inf")])
def test_bad_radius_rejected(radius):
    with pytest.raises(ValueError):
        calculate_offset("scene-1", radius)


def test_samples_are_uniform_by_area_not_radius():
    radius = 250.0
    fractions = [_radius_fraction(calculate_offset(f"entity-{i}", radius), radius) for i in range(1000)]

    # Uniform by area puts ~75% of samples beyond half the radius.
    outer_by_radius = sum(1 for f in fractions if f > 0.5)
    assert outer_by_radius > 1000 - outer_by_radius

    # Splitting the disk into equal areas (at R / sqrt(2)) gives roughly even halves.
    outer_by_area = sum(1 for f in fractions if f > 1 / math.sqrt(2))
    assert 300 < outer_by_area < 700


def test_offsets_cover_all_quadrants():
    quadrants = {"++": 0, "+-": 0, "-+": 0, "--": 0}
    for i in range(100):
        off = calculate_offset(f"scene-{i}")
        key = ("+" if off.lat_offset_deg > 0 else "-") + ("+" if off.lng_offset_base_deg > 0 else "-")
        quadrants[key] += 1
    assert all(count > 10 for count in quadrants.values()), quadrants


@pytest.mark.parametrize("lat,lng", [(0.0, 0.0), (37.77, -122.42), (60.0, 10.0), (85.0, 0.0),
                                     (89.0, 0.0), (-87.0, 45.0), (90.0, 0.0), (0.0, 179.9999)])
def test_applied_offset_within_radius_great_circle(lat, lng):
    for i in range(200):
        p = apply_offset(lat, lng, f"scene-{i}", DEFAULT_OFFSET_RADIUS_M)
        assert haversine_distance(lat, lng, p.lat, p.lng) <= DEFAULT_OFFSET_RADIUS_M + 1


def test_longitude_offset_scales_with_latitude():
    base = calculate_offset("scene-scaling").lng_offset_base_deg
    assert scale_lng_offset(base, 0.0) == base
    assert scale_lng_offset(base, 60.0) == pytest.approx(2 * base, rel=1e-9)


def test_pole_latitude_is_clamped_for_scaling():
    at_90 = apply_offset(90.0, 0.0, "scene-clamp-test")
    at_85 = apply_offset(85.0, 0.0, "scene-clamp-test")
    assert math.isfinite(at_90.lat) and math.isfinite(at_90.lng)
    assert abs(at_85.lng - at_90.lng) < 1e-4
    assert math.isfinite(scale_lng_offset(1.0, 90.0))
    assert math.isfinite(scale_lng_offset(1.0, -90.0))


def test_offset_result_wraps_across_antimeridian():
    for i in range(200):
        p = apply_offset(0.0, 180.0, f"event-{i}")
        assert -180.0 <= p.lng <= 180.0
        assert haversine_distance(0.0, 180.0, p.lat, p.lng) <= DEFAULT_OFFSET_RADIUS_M + 1


def test_offset_result_clamped_at_pole():
    for i in range(200):
        p = apply_offset(89.9995, 0.0, f"scene-{i}")
        assert -90.0 <= p.lat <= 90.0


def test_should_apply_offset_only_without_consent():
    assert should_apply_offset(False) is True
    assert should_apply_offset(True) is False
