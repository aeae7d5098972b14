# tests/conftest.py
from __future__ import annotations

"""
Pytest configuration for the natalcore suite.

- Registers Hypothesis profiles for local dev and CI.
- Provides a deterministic in-memory ephemeris oracle, so no test touches
  the network or a JPL kernel.
"""

import math
import os
from datetime import datetime

import pytest
from hypothesis import HealthCheck, settings
from pytz import utc

from natalcore.errors import EphemerisUnavailable
from natalcore.frames import OBLIQUITY_DEG, normalize_degrees
from natalcore.models import BodyVector, CelestialBody, GeoCoordinate, Moment

# ──────────────────────────────────────────────────────────────────────────────
# Hypothesis profiles
# ──────────────────────────────────────────────────────────────────────────────
settings.register_profile(
    "dev",
    settings(
        deadline=None,
        max_examples=60,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)
settings.register_profile(
    "ci",
    settings(
        deadline=None,
        max_examples=200,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)

_profile = (
    "ci"
    if (os.getenv("CI") or os.getenv("GITHUB_ACTIONS"))
    else os.getenv("HYPOTHESIS_PROFILE", "dev")
)
settings.load_profile(_profile)


def pytest_report_header(config: pytest.Config) -> str:
    return f"Hypothesis profile: '{_profile}'"


# ──────────────────────────────────────────────────────────────────────────────
# Deterministic oracle
# ──────────────────────────────────────────────────────────────────────────────
EPOCH = Moment(datetime(2000, 1, 1, 12, 0, tzinfo=utc))

BASE_LON = {
    CelestialBody.SUN: 10.0,
    CelestialBody.MOON: 190.0,  # opposite the Sun
    CelestialBody.MERCURY: 15.0,  # conjunct the Sun
    CelestialBody.VENUS: 70.0,  # sextile the Sun
    CelestialBody.MARS: 100.0,  # square the Sun
    CelestialBody.JUPITER: 130.0,  # trine the Sun
    CelestialBody.SATURN: 250.0,
    CelestialBody.URANUS: 300.0,
    CelestialBody.NEPTUNE: 330.0,
    CelestialBody.PLUTO: 275.0,
}
SPEED = {  # deg/day; Mercury and Saturn move backwards
    CelestialBody.SUN: 0.9856,
    CelestialBody.MOON: 13.1764,
    CelestialBody.MERCURY: -0.8,
    CelestialBody.VENUS: 1.2,
    CelestialBody.MARS: 0.5,
    CelestialBody.JUPITER: 0.08,
    CelestialBody.SATURN: -0.03,
    CelestialBody.URANUS: 0.01,
    CelestialBody.NEPTUNE: 0.006,
    CelestialBody.PLUTO: 0.004,
}


def equatorial_from_ecliptic(lon_deg: float) -> tuple[float, float]:
    """(RA, Dec) in degrees for a point on the ecliptic."""
    lam = math.radians(lon_deg)
    eps = math.radians(OBLIQUITY_DEG)
    ra = math.degrees(math.atan2(math.sin(lam) * math.cos(eps), math.cos(lam)))
    dec = math.degrees(math.asin(math.sin(eps) * math.sin(lam)))
    return normalize_degrees(ra), dec


class FixtureOracle:
    """Bodies move uniformly along the ecliptic from EPOCH."""

    def __init__(self, base_lon=None, speed=None, fail=(), dec_override=None):
        self.base_lon = dict(BASE_LON if base_lon is None else base_lon)
        self.speed = dict(SPEED if speed is None else speed)
        self.fail = set(fail)
        self.dec_override = dict(dec_override or {})
        self.calls: list[tuple[CelestialBody, datetime]] = []

    def _longitude(self, body: CelestialBody, moment: Moment) -> float:
        days = (moment.utc - EPOCH.utc).total_seconds() / 86400.0
        return normalize_degrees(self.base_lon[body] + self.speed[body] * days)

    def get_body_vector(self, body: CelestialBody, moment: Moment) -> BodyVector:
        self.calls.append((body, moment.utc))
        if body in self.fail:
            raise EphemerisUnavailable(body, "fixture outage")
        lon = self._longitude(body, moment)
        ra, dec = equatorial_from_ecliptic(lon)
        dec = self.dec_override.get(body, dec)
        return BodyVector(body=body, ra_deg=ra, dec_deg=dec, ecliptic_lon_deg=lon)


class RateFixtureOracle(FixtureOracle):
    def get_longitude_rate(self, body: CelestialBody, moment: Moment) -> float:
        if body in self.fail:
            raise EphemerisUnavailable(body, "fixture outage")
        return self.speed[body]


@pytest.fixture
def oracle() -> FixtureOracle:
    return FixtureOracle()


@pytest.fixture
def epoch() -> Moment:
    return EPOCH


@pytest.fixture
def greenwich() -> GeoCoordinate:
    return GeoCoordinate(lat=51.4779, lng=-0.0015)


@pytest.fixture
def make_oracle():
    return FixtureOracle


@pytest.fixture
def make_rate_oracle():
    return RateFixtureOracle
