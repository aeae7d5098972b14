"""Astrocartography — meridian longitudes and horizon curves per body.

For a fixed moment each body culminates (MC) along one meridian, sits on the
lower meridian (IC) along the opposite one, and rises or sets along a curve
where its altitude is zero. The horizon curve is sampled at fixed longitude
steps and produced lazily.
"""

import logging
import math
from typing import Iterator

from natalcore.ephemeris import BodyVectorOracle
from natalcore.errors import EphemerisUnavailable
from natalcore.frames import normalize_180, sidereal_time
from natalcore.models import ALL_BODIES, AstroCartographyLine, BodyVector, Moment

log = logging.getLogger(__name__)

LONGITUDE_STEP_DEG = 2.0
# Beyond this latitude the curve runs along the pole and is of no use on a map
POLAR_LIMIT_DEG = 85.0


def meridian_longitudes(ra_deg: float, gst_hours: float) -> tuple[float, float]:
    """(MC, IC) terrestrial longitudes for a right ascension, both in (-180, 180]."""
    mc = normalize_180(ra_deg - gst_hours * 15.0)
    return mc, normalize_180(mc + 180.0)


def horizon_curve(
    mc_lng: float,
    dec_deg: float,
    step_deg: float = LONGITUDE_STEP_DEG,
    polar_limit_deg: float = POLAR_LIMIT_DEG,
) -> Iterator[tuple[float, float]]:
    """Yield (lat, lng) where the body is on the horizon, west to east.

    Longitudes run from -180 to 180 inclusive. Points are omitted, never
    emitted as NaN or infinity, when the latitude is undefined (declination
    exactly zero) or beyond ``polar_limit_deg``.
    """
    if step_deg <= 0.0:
        raise ValueError(f"step_deg must be positive: {step_deg}")
    tan_dec = math.tan(math.radians(dec_deg))
    if tan_dec == 0.0:
        return

    samples = int(math.floor(360.0 / step_deg + 1e-9))
    for i in range(samples + 1):
        lng = -180.0 + i * step_deg
        hour_angle = math.radians(lng - mc_lng)
        lat = math.degrees(math.atan(-math.cos(hour_angle) / tan_dec))
        if math.isfinite(lat) and abs(lat) <= polar_limit_deg:
            yield lat, lng


def line_for_vector(vector: BodyVector, gst_hours: float) -> AstroCartographyLine:
    mc_lng, ic_lng = meridian_longitudes(vector.ra_deg, gst_hours)
    return AstroCartographyLine(
        body=vector.body,
        mc_lng=mc_lng,
        ic_lng=ic_lng,
        horizon_curve=horizon_curve(mc_lng, vector.dec_deg),
    )


def generate_astrocartography_lines(
    moment: Moment, oracle: BodyVectorOracle
) -> list[AstroCartographyLine]:
    """One line per body the oracle can supply, in body order.

    Location-independent. Bodies the oracle cannot supply are skipped.
    """
    gst = sidereal_time(moment)
    lines: list[AstroCartographyLine] = []
    for body in ALL_BODIES:
        try:
            vector = oracle.get_body_vector(body, moment)
        except EphemerisUnavailable as e:
            log.warning("No map line for %s: %s", body.value, e.reason)
            continue
        lines.append(line_for_vector(vector, gst))
    return lines
