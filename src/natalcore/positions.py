"""Body position resolver — ecliptic longitude, sign and retrograde flag per body."""

import logging
from enum import Enum
from typing import Iterable

from natalcore.ephemeris import BodyVectorOracle, LongitudeRateOracle
from natalcore.errors import EphemerisUnavailable
from natalcore.frames import longitude_delta, normalize_degrees
from natalcore.models import (
    ALL_BODIES,
    BodyPosition,
    CelestialBody,
    Moment,
    ResolvedPositions,
)

log = logging.getLogger(__name__)

RETROGRADE_STEP_HOURS = 6.0


class MotionMethod(str, Enum):
    """How apparent direction of motion is decided."""

    # Compare longitude at T and T+6h. Can misread a body within a few hours
    # of a station, where the true motion is below the sampling resolution.
    FINITE_DIFFERENCE = "finite_difference"
    # Sign of the oracle's analytic longitude rate; needs LongitudeRateOracle.
    ANGULAR_VELOCITY = "angular_velocity"


def is_retrograde(base_lon: float, forward_lon: float) -> bool:
    """True if the later sample lies behind the earlier one, seam-aware."""
    return longitude_delta(base_lon, forward_lon) < 0.0


def _retrograde(
    body: CelestialBody,
    moment: Moment,
    base_lon: float,
    oracle: BodyVectorOracle,
    method: MotionMethod,
) -> bool:
    if method is MotionMethod.ANGULAR_VELOCITY:
        if not isinstance(oracle, LongitudeRateOracle):
            raise EphemerisUnavailable(body, "oracle exposes no longitude rate")
        return oracle.get_longitude_rate(body, moment) < 0.0
    later = oracle.get_body_vector(body, moment.shifted(RETROGRADE_STEP_HOURS))
    return is_retrograde(base_lon, normalize_degrees(later.ecliptic_lon_deg))


def resolve_body_position(
    body: CelestialBody,
    moment: Moment,
    oracle: BodyVectorOracle,
    method: MotionMethod = MotionMethod.FINITE_DIFFERENCE,
) -> BodyPosition:
    """Resolve one body.

    Raises:
        EphemerisUnavailable: The oracle failed for either sample.
    """
    vector = oracle.get_body_vector(body, moment)
    longitude = normalize_degrees(vector.ecliptic_lon_deg)
    retrograde = _retrograde(body, moment, longitude, oracle, method)
    return BodyPosition(body=body, longitude=longitude, retrograde=retrograde)


def resolve_body_positions(
    moment: Moment,
    oracle: BodyVectorOracle,
    bodies: Iterable[CelestialBody] = ALL_BODIES,
    method: MotionMethod = MotionMethod.FINITE_DIFFERENCE,
) -> ResolvedPositions:
    """Resolve every requested body independently.

    A body the oracle cannot supply is listed in ``unavailable`` and does not
    affect the others. Callers decide whether a partial set is usable.

    Raises:
        EphemerisUnavailable: Not a single body resolved.
    """
    positions: list[BodyPosition] = []
    unavailable: list[CelestialBody] = []
    for body in bodies:
        try:
            positions.append(resolve_body_position(body, moment, oracle, method))
        except EphemerisUnavailable as e:
            log.warning("Skipping %s: %s", body.value, e.reason)
            unavailable.append(body)

    if not positions and unavailable:
        raise EphemerisUnavailable(None, "no body could be resolved")
    return ResolvedPositions(positions=tuple(positions), unavailable=tuple(unavailable))
