"""Chart assembly — one call from moment and place to a fully computed chart."""

import logging

from timezonefinder import TimezoneFinder

from natalcore.aspects import detect_aspects
from natalcore.ephemeris import BodyVectorOracle
from natalcore.errors import InvalidMoment
from natalcore.houses import (
    build_house_cusps,
    compute_angular_houses,
    validate_coordinate,
)
from natalcore.models import GeoCoordinate, HouseSystem, Moment, NatalChart
from natalcore.positions import MotionMethod, resolve_body_positions

log = logging.getLogger(__name__)

_tf: TimezoneFinder | None = None


def _timezone_finder() -> TimezoneFinder:
    global _tf
    if _tf is None:
        _tf = TimezoneFinder()
    return _tf


def moment_at(when: str, geo: GeoCoordinate) -> Moment:
    """Interpret a wall-clock time at a location.

    Args:
        when: Local time string in "YYYY-MM-DD HH:MM" format.
        geo: Location whose time zone applies.

    Returns:
        Moment in the zone found at ``geo``.

    Raises:
        InvalidCoordinate: Location out of range.
        InvalidMoment: No zone at the location, or an ambiguous local time.
    """
    validate_coordinate(geo)
    tz_str = _timezone_finder().timezone_at(lat=geo.lat, lng=geo.lng)
    if tz_str is None:
        raise InvalidMoment(f"Timezone not found: lat={geo.lat}, lng={geo.lng}")
    return Moment.from_zone(when, tz_str)


def compute_natal_chart(
    moment: Moment,
    geo: GeoCoordinate,
    oracle: BodyVectorOracle,
    house_system: HouseSystem = HouseSystem.EQUAL,
    method: MotionMethod = MotionMethod.FINITE_DIFFERENCE,
) -> NatalChart:
    """Positions, angles, cusps and aspects for one moment and place.

    Aspects are computed over whichever bodies resolved; the rest are listed
    in ``unavailable``.

    Raises:
        InvalidCoordinate: Location out of range.
        DegenerateGeometry: Location at a pole.
        EphemerisUnavailable: No body at all could be resolved.
    """
    angles = compute_angular_houses(moment, geo)
    resolved = resolve_body_positions(moment, oracle, method=method)
    cusps = build_house_cusps(
        angles.ascendant, house_system, midheaven=angles.midheaven
    )
    aspects = detect_aspects(resolved.positions)
    log.debug(
        "Chart at %s: %d bodies, %d aspects",
        moment.utc.isoformat(),
        len(resolved),
        len(aspects),
    )
    return NatalChart(
        moment=moment,
        location=geo,
        house_system=house_system,
        positions=resolved.positions,
        unavailable=resolved.unavailable,
        angles=angles,
        cusps=cusps,
        aspects=tuple(aspects),
    )
