"""Frame and time utilities — sidereal time, obliquity, angle normalization.

Everything here is pure and total over finite input.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from skyfield.api import load

if TYPE_CHECKING:
    from natalcore.models import Moment

# Mean obliquity of the ecliptic (J2000), held fixed. Nutation and the secular
# drift (~47"/century) are ignored: the angles move by well under 0.1° across
# the supported date range, which is below the display precision of a chart.
OBLIQUITY_DEG = 23.43929

# Built-in UT1 and leap-second tables; nothing is downloaded or written
_ts = load.timescale()


def _wrap(x: float, period: float) -> float:
    # x % period can round up to period for tiny negative x
    r = x % period
    return 0.0 if r >= period else r


def normalize_degrees(x: float) -> float:
    """Map an angle to [0, 360)."""
    return _wrap(x, 360.0)


def normalize_180(x: float) -> float:
    """Map an angle to (-180, 180]."""
    r = normalize_degrees(x)
    return r - 360.0 if r > 180.0 else r


def normalize_hours(x: float) -> float:
    """Map an hour angle / time of day to [0, 24)."""
    return _wrap(x, 24.0)


def longitude_delta(base: float, forward: float) -> float:
    """Signed shortest arc from ``base`` to ``forward``, in (-180, 180].

    Positive means ``forward`` lies ahead (direct motion), so a step across
    the 0°/360° seam (359° → 1°) reads as +2°, not -358°.
    """
    return normalize_180(forward - base)


def sidereal_time(moment: Moment) -> float:
    """Greenwich apparent sidereal time in hours, [0, 24).

    UT1 comes from skyfield's built-in Delta T tables, so the result
    follows Earth's actual rotation rather than UTC.
    """
    t = _ts.from_datetime(moment.utc)
    return normalize_hours(float(t.gast))


def local_sidereal_time(moment: Moment, lng: float) -> float:
    """Local apparent sidereal time in hours at east longitude ``lng``."""
    return normalize_hours(sidereal_time(moment) + lng / 15.0)
