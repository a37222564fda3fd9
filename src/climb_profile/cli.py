import argparse
import logging
import sys

from climb_profile.charts import generate_profile_chart, save_profile_chart
from climb_profile.config import DEFAULTS, ProfileSettings, load_config
from climb_profile.errors import InvalidInputError
from climb_profile.gradient import classify, default_window_width
from climb_profile.parser import parse_gpx
from climb_profile.sequence import build_sequence

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(message)s", datefmt="%H:%M:%S")
    # matplotlib and PIL are chatty at DEBUG (font lookups, PNG chunks)
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.INFO)


def build_parser(config: dict | None = None) -> argparse.ArgumentParser:
    """Build argument parser with defaults from config file."""
    if config is None:
        config = {}

    def get_default(key: str):
        return config.get(key, DEFAULTS[key])

    parser = argparse.ArgumentParser(
        description="Render a GPX track as an elevation profile colored by gradient."
    )
    parser.add_argument("gpx_file", help="Path to GPX file")
    parser.add_argument(
        "--output", "-o",
        default=get_default("output"),
        help=f"Output PNG path (default: {DEFAULTS['output']})",
    )
    parser.add_argument(
        "--title",
        default=get_default("title"),
        help=f"Chart title (default: {DEFAULTS['title']!r})",
    )
    parser.add_argument(
        "--window",
        type=int,
        default=get_default("window_width"),
        help="Number of points averaged per gradient window (default: 5 per 100 track points)",
    )
    parser.add_argument(
        "--no-legend",
        action="store_true",
        help="Do not draw the gradient legend",
    )
    parser.add_argument(
        "--show-axes",
        action="store_true",
        default=get_default("show_axes"),
        help="Draw distance and elevation axes",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    config = load_config()
    parser = build_parser(config)
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = ProfileSettings.from_config(
            config,
            output=args.output,
            title=args.title,
            window_width=args.window,
            legend=False if args.no_legend else None,
            show_axes=args.show_axes,
        )
    except (TypeError, ValueError) as e:
        print(f"Error in configuration: {e}", file=sys.stderr)
        sys.exit(1)

    gpx_path = args.gpx_file
    try:
        points = parse_gpx(gpx_path)
    except FileNotFoundError:
        print(f"Error: File not found: {gpx_path}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error parsing GPX file: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        if len(points) < 2:
            raise InvalidInputError("GPX file contains fewer than 2 track points.")
        derived = build_sequence(points)
        window_width = settings.window_width or default_window_width(len(derived))
        assignments = classify(derived, window_width, settings.bands)
        png = generate_profile_chart(derived, assignments, settings)
        save_profile_chart(settings.output, png)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    total_km = derived[-1].distance / 1000
    print(f"Profile: {len(derived)} points, {total_km:.2f} km, window {window_width} -> {settings.output}")
