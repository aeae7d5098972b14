"""Data model definitions: the boundary between input, compute, and output."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Iterator

from pytz import FixedOffset, UnknownTimeZoneError, timezone, utc
from pytz.exceptions import AmbiguousTimeError, NonExistentTimeError

from natalcore.errors import InvalidMoment
from natalcore.frames import normalize_degrees

WHEN_FORMAT = "%Y-%m-%d %H:%M"

SIGNS: tuple[str, ...] = (
    "Aries",
    "Taurus",
    "Gemini",
    "Cancer",
    "Leo",
    "Virgo",
    "Libra",
    "Scorpio",
    "Sagittarius",
    "Capricorn",
    "Aquarius",
    "Pisces",
)


def sign_of(longitude: float) -> str:
    """Zodiac sign name for an ecliptic longitude (any real value)."""
    return SIGNS[int(normalize_degrees(longitude) // 30.0)]


def degree_in_sign(longitude: float) -> float:
    """Degrees past the start of the sign, in [0, 30)."""
    return normalize_degrees(longitude) % 30.0


def _parse_when(when: str | datetime) -> datetime:
    if isinstance(when, datetime):
        return when
    try:
        return datetime.strptime(when, WHEN_FORMAT)
    except ValueError as e:
        raise InvalidMoment(f"Expected 'YYYY-MM-DD HH:MM', got {when!r}") from e


@dataclass(frozen=True)
class Moment:
    """A calendar instant carrying its UTC offset. Always aware."""

    when: datetime  # Aware datetime (any zone)

    def __post_init__(self) -> None:
        if self.when.tzinfo is None or self.when.utcoffset() is None:
            raise InvalidMoment(f"Moment requires an aware datetime: {self.when!r}")

    @property
    def utc(self) -> datetime:
        return self.when.astimezone(utc)

    def shifted(self, hours: float) -> "Moment":
        """Same clock, ``hours`` later (negative for earlier). Shifted in UTC."""
        return Moment(self.utc + timedelta(hours=hours))

    @classmethod
    def from_offset(cls, when: str | datetime, utc_offset_hours: float) -> "Moment":
        """Wall-clock time with a fixed numeric UTC offset (e.g. -5 for EST).

        Args:
            when: "YYYY-MM-DD HH:MM" string or naive datetime.
            utc_offset_hours: Offset east of Greenwich, in hours.

        Raises:
            InvalidMoment: Unparseable string, aware datetime or offset beyond ±14h.
        """
        if not -14.0 <= utc_offset_hours <= 14.0:
            raise InvalidMoment(f"UTC offset out of range: {utc_offset_hours}")
        local = _parse_when(when)
        if local.tzinfo is not None:
            raise InvalidMoment("from_offset expects a naive wall-clock time")
        tz = FixedOffset(round(utc_offset_hours * 60))
        return cls(tz.localize(local))

    @classmethod
    def from_decimal_hour(
        cls, birth_date: str | date, hour: float, utc_offset_hours: float
    ) -> "Moment":
        """Calendar date plus a decimal local hour (14.5 = 14:30) and offset."""
        if isinstance(birth_date, str):
            try:
                birth_date = datetime.strptime(birth_date, "%Y-%m-%d").date()
            except ValueError as e:
                raise InvalidMoment(f"Expected 'YYYY-MM-DD', got {birth_date!r}") from e
        if not 0.0 <= hour < 24.0:
            raise InvalidMoment(f"Hour must be in [0, 24): {hour}")
        midnight = datetime(birth_date.year, birth_date.month, birth_date.day)
        local = midnight + timedelta(seconds=round(hour * 3600))
        return cls.from_offset(local, utc_offset_hours)

    @classmethod
    def from_zone(cls, when: str | datetime, tz_name: str) -> "Moment":
        """Wall-clock time in an IANA zone.

        Ambiguous (DST fall-back) and non-existent (spring-forward) local
        times are rejected rather than guessed.
        """
        local = _parse_when(when)
        if local.tzinfo is not None:
            raise InvalidMoment("from_zone expects a naive wall-clock time")
        try:
            tz = timezone(tz_name)
        except UnknownTimeZoneError as e:
            raise InvalidMoment(f"Unknown time zone: {tz_name}") from e
        try:
            return cls(tz.localize(local, is_dst=None))
        except (AmbiguousTimeError, NonExistentTimeError) as e:
            raise InvalidMoment(f"{local} is not a unique time in {tz_name}") from e


@dataclass(frozen=True)
class GeoCoordinate:
    """Observer location. Not yet validated."""

    lat: float  # Latitude (decimal degrees, north positive)
    lng: float  # Longitude (decimal degrees, east positive)


class CelestialBody(str, Enum):
    """The ten bodies of a natal chart, in conventional order."""

    SUN = "Sun"
    MOON = "Moon"
    MERCURY = "Mercury"
    VENUS = "Venus"
    MARS = "Mars"
    JUPITER = "Jupiter"
    SATURN = "Saturn"
    URANUS = "Uranus"
    NEPTUNE = "Neptune"
    PLUTO = "Pluto"


ALL_BODIES: tuple[CelestialBody, ...] = tuple(CelestialBody)


@dataclass(frozen=True)
class BodyVector:
    """Raw geocentric position as supplied by the ephemeris collaborator."""

    body: CelestialBody
    ra_deg: float  # Right ascension of date (degrees)
    dec_deg: float  # Declination of date (degrees)
    ecliptic_lon_deg: float  # Ecliptic longitude of date (degrees)


@dataclass(frozen=True)
class BodyPosition:
    """Resolved ecliptic position of one body. Location-independent."""

    body: CelestialBody
    longitude: float  # Ecliptic longitude, [0, 360)
    retrograde: bool

    @property
    def sign(self) -> str:
        return sign_of(self.longitude)

    @property
    def degree(self) -> float:
        return degree_in_sign(self.longitude)


@dataclass(frozen=True)
class ResolvedPositions:
    """Bodies that resolved, plus the ones the ephemeris could not supply."""

    positions: tuple[BodyPosition, ...]
    unavailable: tuple[CelestialBody, ...] = ()

    def __iter__(self) -> Iterator[BodyPosition]:
        return iter(self.positions)

    def __len__(self) -> int:
        return len(self.positions)


@dataclass(frozen=True)
class AngularHouses:
    """Ascendant and Midheaven for one moment and place."""

    ascendant: float  # [0, 360)
    midheaven: float  # [0, 360)

    @property
    def descendant(self) -> float:
        return normalize_degrees(self.ascendant + 180.0)

    @property
    def imum_coeli(self) -> float:
        return normalize_degrees(self.midheaven + 180.0)


class HouseSystem(str, Enum):
    """House division strategies. Names say exactly what is computed."""

    EQUAL = "equal"  # 30° houses from the Ascendant
    PORPHYRY = "porphyry"  # Quadrant system, each quadrant trisected
    WHOLE_SIGN = "whole_sign"  # House 1 = whole sign of the Ascendant


@dataclass(frozen=True)
class HouseCusp:
    house: int  # 1..12
    longitude: float  # [0, 360)

    @property
    def sign(self) -> str:
        return sign_of(self.longitude)

    @property
    def degree(self) -> float:
        return degree_in_sign(self.longitude)


class AspectKind(str, Enum):
    CONJUNCTION = "conjunction"
    SEXTILE = "sextile"
    SQUARE = "square"
    TRINE = "trine"
    OPPOSITION = "opposition"


@dataclass(frozen=True)
class AspectRecord:
    """A named angular relationship between two bodies."""

    body_a: CelestialBody
    body_b: CelestialBody
    separation: float  # Shortest arc, [0, 180]
    kind: AspectKind
    within_orb: bool
    deviation: float  # |separation - exact aspect angle|


@dataclass(frozen=True)
class AstroCartographyLine:
    """Terrestrial loci where one body is angular at a fixed moment.

    ``horizon_curve`` is a single-pass iterator of (lat, lng) points; once
    consumed it is exhausted. Regenerate the line to walk it again.
    """

    body: CelestialBody
    mc_lng: float  # Longitude where the body culminates, (-180, 180]
    ic_lng: float  # Longitude where the body anti-culminates, (-180, 180]
    horizon_curve: Iterator[tuple[float, float]] = field(compare=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        """Serialize, consuming the horizon curve."""
        return {
            "body": self.body.value,
            "mc_lng": self.mc_lng,
            "ic_lng": self.ic_lng,
            "horizon_curve": [[lat, lng] for lat, lng in self.horizon_curve],
        }


@dataclass(frozen=True)
class NatalChart:
    """Fully computed chart. The sole output handed to the application shell."""

    moment: Moment
    location: GeoCoordinate
    house_system: HouseSystem
    positions: tuple[BodyPosition, ...]
    unavailable: tuple[CelestialBody, ...]
    angles: AngularHouses
    cusps: tuple[HouseCusp, ...]
    aspects: tuple[AspectRecord, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "moment": self.moment.utc.isoformat(),
            "location": {"lat": self.location.lat, "lng": self.location.lng},
            "house_system": self.house_system.value,
            "planets": [
                {
                    "name": p.body.value,
                    "longitude": p.longitude,
                    "sign": p.sign,
                    "degree": p.degree,
                    "retrograde": p.retrograde,
                }
                for p in self.positions
            ],
            "unavailable": [b.value for b in self.unavailable],
            "ascendant": self.angles.ascendant,
            "midheaven": self.angles.midheaven,
            "houses": [
                {
                    "house": c.house,
                    "longitude": c.longitude,
                    "sign": c.sign,
                    "degree": c.degree,
                }
                for c in self.cusps
            ],
            "aspects": [
                {
                    "a": a.body_a.value,
                    "b": a.body_b.value,
                    "kind": a.kind.value,
                    "separation": a.separation,
                    "deviation": a.deviation,
                }
                for a in self.aspects
            ],
        }
