from itertools import combinations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from natalcore.aspects import (
    ASPECTS,
    angular_separation,
    classify_separation,
    detect_aspects,
)
from natalcore.models import AspectKind, BodyPosition, CelestialBody
from natalcore.positions import resolve_body_positions

longitudes = st.floats(min_value=0.0, max_value=360.0, exclude_max=True)


def _pos(body, lon):
    return BodyPosition(body=body, longitude=lon, retrograde=False)


def _sun_moon(sun, moon):
    positions = [_pos(CelestialBody.SUN, sun), _pos(CelestialBody.MOON, moon)]
    return detect_aspects(positions)


def test_ten_and_one_ninety_is_opposition():
    [record] = _sun_moon(10.0, 190.0)
    assert record.kind is AspectKind.OPPOSITION
    assert record.separation == 180.0
    assert record.within_orb
    assert record.deviation == 0.0


def test_opposition_orb_boundary_is_inclusive():
    [record] = _sun_moon(10.0, 182.0)
    assert record.kind is AspectKind.OPPOSITION
    assert record.separation == 172.0
    assert record.deviation == 8.0


def test_just_outside_opposition_orb_is_no_aspect():
    assert _sun_moon(10.0, 181.9) == []


@pytest.mark.parametrize(
    "separation, kind",
    [
        (0.0, AspectKind.CONJUNCTION),
        (8.0, AspectKind.CONJUNCTION),
        (54.0, AspectKind.SEXTILE),
        (66.0, AspectKind.SEXTILE),
        (82.0, AspectKind.SQUARE),
        (98.0, AspectKind.SQUARE),
        (112.0, AspectKind.TRINE),
        (128.0, AspectKind.TRINE),
        (172.0, AspectKind.OPPOSITION),
        (180.0, AspectKind.OPPOSITION),
    ],
)
def test_orb_edges(separation, kind):
    assert classify_separation(separation)[0] is kind


@pytest.mark.parametrize(
    "separation", [8.5, 30.0, 53.9, 66.1, 75.0, 105.0, 150.0, 171.5]
)
def test_gaps_between_orbs(separation):
    assert classify_separation(separation) is None


def test_orb_windows_never_overlap():
    for a, b in combinations(ASPECTS, 2):
        lo_a, hi_a = a.angle - a.orb, a.angle + a.orb
        lo_b, hi_b = b.angle - b.orb, b.angle + b.orb
        assert hi_a < lo_b or hi_b < lo_a, (a.kind, b.kind)


@given(st.floats(min_value=0.0, max_value=180.0))
def test_separation_matches_at_most_one_aspect(separation):
    matches = [a for a in ASPECTS if abs(separation - a.angle) <= a.orb]
    assert len(matches) <= 1


def test_separation_across_seam():
    assert angular_separation(355.0, 5.0) == pytest.approx(10.0)
    assert angular_separation(0.0, 180.0) == 180.0


@given(longitudes, longitudes)
def test_separation_symmetric_and_bounded(a, b):
    s = angular_separation(a, b)
    assert s == angular_separation(b, a)
    assert 0.0 <= s <= 180.0


@given(longitudes, longitudes)
def test_detect_aspects_symmetric_under_ordering(a, b):
    venus = _pos(CelestialBody.VENUS, a)
    mars = _pos(CelestialBody.MARS, b)
    forward = detect_aspects([venus, mars])
    backward = detect_aspects([mars, venus])
    assert [(r.kind, r.separation) for r in forward] == [
        (r.kind, r.separation) for r in backward
    ]


def test_each_unordered_pair_once(oracle, epoch):
    records = detect_aspects(resolve_body_positions(epoch, oracle))
    pairs = [frozenset((r.body_a, r.body_b)) for r in records]
    assert len(pairs) == len(set(pairs))
    assert all(r.body_a != r.body_b for r in records)
    kinds = {frozenset((r.body_a, r.body_b)): r.kind for r in records}
    sun = CelestialBody.SUN
    assert kinds[frozenset((sun, CelestialBody.MERCURY))] is AspectKind.CONJUNCTION
    assert kinds[frozenset((sun, CelestialBody.JUPITER))] is AspectKind.TRINE


def test_empty_and_single_inputs():
    assert detect_aspects([]) == []
    assert detect_aspects([_pos(CelestialBody.SUN, 0.0)]) == []
