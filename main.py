"""
Terra City Builder - score a city from the command line.

    python main.py house house tree solar --offline
    python main.py factory tree --url http://localhost:5000 --lat 30.04 --lon 31.23
"""

import argparse
import logging
import sys

from builder.catalog import ELEMENT_CATALOG, ElementType, parse_element_type
from builder.session import PlacementLimitError, create_session
from prediction.settings import PredictorSettings
from scoring.indicators import indicator_level

log = logging.getLogger("main")

BAR_WIDTH = 20
LEVEL_CHARS = {"high": "#", "medium": "%", "low": ":"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Score the environmental impact of a city layout.")
    parser.add_argument(
        "elements",
        nargs="*",
        metavar="ELEMENT",
        help="Elements to place: " + ", ".join(t.value for t in ElementType),
    )
    parser.add_argument("--offline", action="store_true", help="Skip the prediction service")
    parser.add_argument("--url", help="Prediction service base URL")
    parser.add_argument("--lat", type=float, help="City latitude")
    parser.add_argument("--lon", type=float, help="City longitude")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def layout_position(index: int):
    """Spread elements over a 10x10 grid of the build surface."""
    return 5 + (index % 10) * 10, 5 + (index // 10 % 10) * 10


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    for name in args.elements:
        try:
            parse_element_type(name)
        except ValueError as e:
            parser.error(str(e))

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    settings = PredictorSettings.from_env()
    if args.url:
        settings.base_url = args.url
    if args.lat is not None:
        settings.default_latitude = args.lat
    if args.lon is not None:
        settings.default_longitude = args.lon

    session = create_session(settings, online=not args.offline)
    try:
        for index, name in enumerate(args.elements):
            x, y = layout_position(index)
            try:
                session.add(name, x, y)
            except PlacementLimitError as e:
                log.warning(f"Skipping {name}: {e}")

        if session.elements and not args.offline:
            outcome = session.predict()
        else:
            outcome = session.recalculate_locally()

        print("\n=== TERRA CITY REPORT ===")
        placed = ", ".join(
            f"{ELEMENT_CATALOG[t].emoji} {ELEMENT_CATALOG[t].name} x{session.count(t)}"
            for t in ElementType
            if session.count(t)
        )
        print(f"City: {placed or 'empty'}\n")

        for key, value in outcome.indicators.as_dict().items():
            filled = int(round(value / 100 * BAR_WIDTH))
            bar = LEVEL_CHARS[indicator_level(value)] * filled + "." * (BAR_WIDTH - filled)
            print(f" {key:<12} {bar} {value:6.1f}")

        print(f"\nOverall: {outcome.label} (source: {outcome.source})")
        if outcome.error:
            print(f"Note: {outcome.error}")
    finally:
        session.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
