from __future__ import annotations

import argparse
import logging
import sys

import httpx

from .api import make_client
from .config import get_settings
from .league import LeagueNotFound, build_leaderboard
from .report_console import print_leaderboard
from .report_html import generate_html


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="FPL Live - Live gameweek standings for a classic mini-league"
    )
    parser.add_argument(
        "league",
        type=int,
        nargs="?",
        default=settings.default_league_id,
        help=f"Classic league ID (default: {settings.default_league_id})",
    )
    parser.add_argument(
        "--gw",
        type=int,
        default=0,
        help="Gameweek to score (default: current gameweek)",
    )
    parser.add_argument(
        "--phase",
        type=int,
        default=1,
        help="League phase (default: 1, the overall table)",
    )
    parser.add_argument(
        "--auto-subs",
        action="store_true",
        help="Project automatic substitutions into the scores",
    )
    parser.add_argument(
        "--transfers",
        action="store_true",
        help="Show this gameweek's transfers",
    )
    parser.add_argument(
        "--html",
        type=str,
        default=None,
        metavar="FILE",
        help="Write the leaderboard as HTML to FILE",
    )
    parser.add_argument(
        "--no-console",
        action="store_true",
        help="Suppress console output",
    )
    parser.add_argument(
        "--web",
        action="store_true",
        help="Launch the web API instead of CLI",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=5000,
        help="Port for the web server (default: 5000)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Debug logging",
    )

    args = parser.parse_args(argv)
    setup_logging("DEBUG" if args.verbose else settings.log_level)

    if args.web:
        from .web import app

        print(f"Starting FPL Live API on http://localhost:{args.port}")
        app.run(port=args.port)
        return

    if args.auto_subs:
        settings.auto_subs = True

    print("Fetching FPL data...")
    try:
        with make_client(settings) as client:
            data = build_leaderboard(client, args.league, gameweek=args.gw, phase=args.phase, settings=settings)
    except LeagueNotFound:
        print(f"League {args.league} not found", file=sys.stderr)
        sys.exit(1)
    except httpx.HTTPError as e:
        print(f"Error fetching data: {e}", file=sys.stderr)
        sys.exit(1)

    if not args.no_console:
        print_leaderboard(data, show_transfers=args.transfers)

    if args.html:
        generate_html(data, output_path=args.html)
        print(f"HTML report saved to {args.html}")


if __name__ == "__main__":
    main()
