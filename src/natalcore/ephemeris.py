"""Ephemeris collaborator — the body-position oracle the core consumes.

The core only depends on :class:`BodyVectorOracle`. :class:`SkyfieldOracle`
is the shipped implementation backed by a JPL kernel loaded with skyfield.
"""

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from skyfield.api import Loader
from skyfield.errors import EphemerisRangeError
from skyfield.framelib import ecliptic_frame

from natalcore.errors import EphemerisUnavailable
from natalcore.frames import normalize_degrees
from natalcore.models import BodyVector, CelestialBody, Moment

log = logging.getLogger(__name__)

# Outer planets are only available as system barycenters in the DE4xx kernels.
_KERNEL_TARGETS: dict[CelestialBody, str] = {
    CelestialBody.SUN: "sun",
    CelestialBody.MOON: "moon",
    CelestialBody.MERCURY: "mercury",
    CelestialBody.VENUS: "venus",
    CelestialBody.MARS: "mars",
    CelestialBody.JUPITER: "jupiter barycenter",
    CelestialBody.SATURN: "saturn barycenter",
    CelestialBody.URANUS: "uranus barycenter",
    CelestialBody.NEPTUNE: "neptune barycenter",
    CelestialBody.PLUTO: "pluto barycenter",
}


class BodyVectorOracle(Protocol):
    """Supplies one body's geocentric position at one moment.

    Implementations raise :class:`EphemerisUnavailable` when they cannot.
    """

    def get_body_vector(self, body: CelestialBody, moment: Moment) -> BodyVector: ...


@runtime_checkable
class LongitudeRateOracle(Protocol):
    """Optional capability: analytic ecliptic longitude rate (degrees/day)."""

    def get_longitude_rate(self, body: CelestialBody, moment: Moment) -> float: ...


class SkyfieldOracle:
    """Apparent geocentric positions from a JPL kernel via skyfield.

    RA/Dec are referred to the true equator and equinox of date; ecliptic
    longitude to the ecliptic and equinox of date. The kernel is loaded once
    here and only read afterwards, so one instance can serve concurrent
    chart computations.
    """

    def __init__(self, directory: Path, kernel: str = "de421.bsp") -> None:
        self._loader = Loader(str(directory))
        self._ts = self._loader.timescale()
        self._eph = self._loader(kernel)
        self._earth = self._eph["earth"]
        self.kernel = kernel
        log.debug("Loaded ephemeris kernel %s from %s", kernel, directory)

    def _apparent(self, body: CelestialBody, moment: Moment):
        t = self._ts.from_datetime(moment.utc)
        try:
            target = self._eph[_KERNEL_TARGETS[body]]
            return self._earth.at(t).observe(target).apparent()
        except EphemerisRangeError as e:
            raise EphemerisUnavailable(
                body, f"{moment.utc.isoformat()} outside {self.kernel} coverage"
            ) from e
        except KeyError as e:
            raise EphemerisUnavailable(body, f"no segment in {self.kernel}") from e

    def get_body_vector(self, body: CelestialBody, moment: Moment) -> BodyVector:
        apparent = self._apparent(body, moment)
        ra, dec, _ = apparent.radec(epoch="date")
        _, lon, _ = apparent.frame_latlon(ecliptic_frame)
        return BodyVector(
            body=body,
            ra_deg=normalize_degrees(float(ra.hours) * 15.0),
            dec_deg=float(dec.degrees),
            ecliptic_lon_deg=normalize_degrees(float(lon.degrees)),
        )

    def get_longitude_rate(self, body: CelestialBody, moment: Moment) -> float:
        apparent = self._apparent(body, moment)
        _, _, _, _, lon_rate, _ = apparent.frame_latlon_and_rates(ecliptic_frame)
        return float(lon_rate.degrees.per_day)
