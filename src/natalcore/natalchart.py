"""CLI entry point for natal chart generation.

Edit the where/when variables at the top, then run:
    uv run python src/natalcore/natalchart.py
"""

import json
import logging

from dotenv import load_dotenv

load_dotenv()

from natalcore.astrocartography import generate_astrocartography_lines  # noqa: E402
from natalcore.compute import compute_natal_chart, moment_at  # noqa: E402
from natalcore.config import Settings  # noqa: E402
from natalcore.ephemeris import SkyfieldOracle  # noqa: E402
from natalcore.models import GeoCoordinate  # noqa: E402

where = GeoCoordinate(lat=35.1531, lng=129.0403)  # Busan
when = "1995-01-15 00:00"

settings = Settings.from_env()
logging.basicConfig(
    level=settings.log_level, format="%(levelname)s %(name)s: %(message)s"
)

oracle = SkyfieldOracle(settings.ephemeris_dir, settings.ephemeris_kernel)
moment = moment_at(when, where)
chart = compute_natal_chart(moment, where, oracle, settings.house_system)
output = chart.to_dict()
lines = generate_astrocartography_lines(moment, oracle)
output["map_lines"] = [line.to_dict() for line in lines]
print(json.dumps(output, indent=2))
