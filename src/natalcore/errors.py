"""Exception taxonomy for the natal computation core."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from natalcore.models import CelestialBody


class NatalCoreError(Exception):
    """Base exception for all natal core errors."""


class EphemerisUnavailable(NatalCoreError):
    """The ephemeris collaborator could not supply a body's position.

    Recoverable per body: other bodies of the same chart may still resolve.
    """

    def __init__(self, body: CelestialBody | None, reason: str) -> None:
        self.body = body
        self.reason = reason
        label = body.value if body is not None else "all bodies"
        super().__init__(f"{label}: {reason}")


class InvalidCoordinate(NatalCoreError, ValueError):
    """Latitude/longitude out of range or not finite. Caller error."""


class DegenerateGeometry(NatalCoreError, ArithmeticError):
    """Polar latitude or another singular configuration. Caller error."""


class InvalidMoment(NatalCoreError, ValueError):
    """Moment cannot be normalized to UTC (naive, unparseable, ambiguous)."""
