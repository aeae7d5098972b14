"""Runtime settings read from the environment (optionally populated from .env)."""

import os
from dataclasses import dataclass
from pathlib import Path

from natalcore.models import HouseSystem

_ROOT = Path(__file__).parent.parent.parent


@dataclass(frozen=True)
class Settings:
    ephemeris_dir: Path  # Where skyfield keeps/downloads kernels
    ephemeris_kernel: str  # JPL kernel file name
    house_system: HouseSystem
    log_level: str

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from NATALCORE_* environment variables.

        Raises:
            ValueError: NATALCORE_HOUSE_SYSTEM is not a known house system.
        """
        return cls(
            ephemeris_dir=Path(
                os.environ.get("NATALCORE_EPHEMERIS_DIR", str(_ROOT / "resources"))
            ),
            ephemeris_kernel=os.environ.get("NATALCORE_EPHEMERIS_KERNEL", "de421.bsp"),
            house_system=HouseSystem(
                os.environ.get(
                    "NATALCORE_HOUSE_SYSTEM", HouseSystem.EQUAL.value
                ).lower()
            ),
            log_level=os.environ.get("NATALCORE_LOG_LEVEL", "WARNING").upper(),
        )
