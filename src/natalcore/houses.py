"""Angular houses (Ascendant, Midheaven) and house cusp construction."""

import math

from natalcore.errors import DegenerateGeometry, InvalidCoordinate
from natalcore.frames import OBLIQUITY_DEG, local_sidereal_time, normalize_degrees
from natalcore.models import (
    AngularHouses,
    GeoCoordinate,
    HouseCusp,
    HouseSystem,
    Moment,
)

_EPS = math.radians(OBLIQUITY_DEG)


def validate_coordinate(geo: GeoCoordinate) -> None:
    """Raise InvalidCoordinate unless lat ∈ [-90, 90] and lng ∈ [-180, 180]."""
    if not (math.isfinite(geo.lat) and math.isfinite(geo.lng)):
        raise InvalidCoordinate(f"Non-finite coordinate: lat={geo.lat}, lng={geo.lng}")
    if not -90.0 <= geo.lat <= 90.0:
        raise InvalidCoordinate(f"Latitude out of range [-90, 90]: {geo.lat}")
    if not -180.0 <= geo.lng <= 180.0:
        raise InvalidCoordinate(f"Longitude out of range [-180, 180]: {geo.lng}")


def angular_houses_from_sidereal_time(lst_hours: float, lat: float) -> AngularHouses:
    """Ascendant and Midheaven for a local sidereal time and latitude.

    Args:
        lst_hours: Local sidereal time in hours.
        lat: Observer latitude in degrees, strictly inside (-90, 90).

    Raises:
        DegenerateGeometry: At the poles, where the horizon is undefined.
    """
    if abs(lat) >= 90.0:
        raise DegenerateGeometry(f"Ascendant undefined at latitude {lat}")

    ramc = math.radians(normalize_degrees(lst_hours * 15.0))
    phi = math.radians(lat)

    asc = math.atan2(
        math.cos(ramc),
        -(math.sin(ramc) * math.cos(_EPS) + math.tan(phi) * math.sin(_EPS)),
    )
    mc = math.atan2(math.sin(ramc), math.cos(ramc) * math.cos(_EPS))

    if not (math.isfinite(asc) and math.isfinite(mc)):
        raise DegenerateGeometry(f"Non-finite angles at lst={lst_hours}, lat={lat}")
    return AngularHouses(
        ascendant=normalize_degrees(math.degrees(asc)),
        midheaven=normalize_degrees(math.degrees(mc)),
    )


def compute_angular_houses(moment: Moment, geo: GeoCoordinate) -> AngularHouses:
    """Ascendant and Midheaven for a moment and observer location.

    Raises:
        InvalidCoordinate: Location out of range.
        DegenerateGeometry: Location at a pole.
    """
    validate_coordinate(geo)
    lst = local_sidereal_time(moment, geo.lng)
    return angular_houses_from_sidereal_time(lst, geo.lat)


def _equal_cusps(ascendant: float) -> list[float]:
    return [normalize_degrees(ascendant + 30.0 * i) for i in range(12)]


def _whole_sign_cusps(ascendant: float) -> list[float]:
    start = (normalize_degrees(ascendant) // 30.0) * 30.0
    return [normalize_degrees(start + 30.0 * i) for i in range(12)]


def _porphyry_cusps(ascendant: float, midheaven: float) -> list[float]:
    # Angles in house order: 1 (Asc), 4 (IC), 7 (Dsc), 10 (MC)
    angles = [
        normalize_degrees(ascendant),
        normalize_degrees(midheaven + 180.0),
        normalize_degrees(ascendant + 180.0),
        normalize_degrees(midheaven),
    ]
    cusps: list[float] = []
    for q, start in enumerate(angles):
        end = angles[(q + 1) % 4]
        arc = normalize_degrees(end - start)
        cusps.append(start)
        cusps.append(normalize_degrees(start + arc / 3.0))
        cusps.append(normalize_degrees(start + 2.0 * arc / 3.0))
    return cusps


def build_house_cusps(
    ascendant: float,
    system: HouseSystem = HouseSystem.EQUAL,
    midheaven: float | None = None,
) -> tuple[HouseCusp, ...]:
    """Twelve house cusps, house 1 first.

    ``EQUAL`` is the equal-house approximation: cusp n sits at
    ``ascendant + 30°(n-1)``. It is not a quadrant system and is never
    reported as one. ``PORPHYRY`` is the quadrant variant and needs the
    Midheaven.

    Raises:
        ValueError: ``PORPHYRY`` requested without ``midheaven``.
    """
    if system is HouseSystem.EQUAL:
        longitudes = _equal_cusps(ascendant)
    elif system is HouseSystem.WHOLE_SIGN:
        longitudes = _whole_sign_cusps(ascendant)
    elif system is HouseSystem.PORPHYRY:
        if midheaven is None:
            raise ValueError("Porphyry houses require the Midheaven")
        longitudes = _porphyry_cusps(ascendant, midheaven)
    else:
        raise ValueError(f"Unsupported house system: {system}")
    return tuple(
        HouseCusp(house=i + 1, longitude=lon) for i, lon in enumerate(longitudes)
    )
