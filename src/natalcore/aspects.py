"""Aspect detection — pairwise angular separation against a fixed aspect table."""

from dataclasses import dataclass
from itertools import combinations
from typing import Iterable

from natalcore.frames import normalize_degrees
from natalcore.models import AspectKind, AspectRecord, BodyPosition


@dataclass(frozen=True)
class AspectDefinition:
    kind: AspectKind
    angle: float  # Exact aspect angle (degrees)
    orb: float  # Half-width tolerance (degrees), boundary inclusive


# Orb windows are pairwise disjoint, so a separation matches at most one entry.
ASPECTS: tuple[AspectDefinition, ...] = (
    AspectDefinition(AspectKind.CONJUNCTION, 0.0, 8.0),
    AspectDefinition(AspectKind.SEXTILE, 60.0, 6.0),
    AspectDefinition(AspectKind.SQUARE, 90.0, 8.0),
    AspectDefinition(AspectKind.TRINE, 120.0, 8.0),
    AspectDefinition(AspectKind.OPPOSITION, 180.0, 8.0),
)


def angular_separation(lon_a: float, lon_b: float) -> float:
    """Shortest arc between two longitudes, in [0, 180]. Symmetric."""
    d = abs(normalize_degrees(lon_a) - normalize_degrees(lon_b))
    return min(d, 360.0 - d)


def classify_separation(separation: float) -> tuple[AspectKind, float] | None:
    """Aspect kind and deviation from exact, or None outside every orb."""
    for aspect in ASPECTS:
        deviation = abs(separation - aspect.angle)
        if deviation <= aspect.orb:
            return aspect.kind, deviation
    return None


def detect_aspects(positions: Iterable[BodyPosition]) -> list[AspectRecord]:
    """Aspects between every unordered pair of positions (no self pairs).

    Pairs follow input order; pairs outside every orb produce no record.
    """
    records: list[AspectRecord] = []
    for a, b in combinations(list(positions), 2):
        if a.body == b.body:
            continue
        separation = angular_separation(a.longitude, b.longitude)
        match = classify_separation(separation)
        if match is None:
            continue
        kind, deviation = match
        records.append(
            AspectRecord(
                body_a=a.body,
                body_b=b.body,
                separation=separation,
                kind=kind,
                within_orb=True,
                deviation=deviation,
            )
        )
    return records
