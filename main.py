"""
RollCall - CLI Entry Point

Usage:
  # Serve the HTTP API (and the periodic roster sync, if configured)
  python main.py serve --port 8000

  # Run one directory scrape now (for cron)
  python main.py scrape

  # Add teachers from a CSV with a "name" column
  python main.py seed teachers.csv --school "Skyline High School"
"""

import argparse
import asyncio
import csv
import json
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("rollcall")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="RollCall: teacher reviews with moderation and roster sync"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Serve the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")

    scrape_parser = subparsers.add_parser("scrape", help="Scrape the staff directory once")
    scrape_parser.add_argument(
        "--no-pagination",
        action="store_true",
        help="Only read the first directory page",
    )

    seed_parser = subparsers.add_parser("seed", help="Add teachers from a CSV file")
    seed_parser.add_argument("file", help="Path to CSV file with a 'name' column")
    seed_parser.add_argument("--school", default=None, help="School label (default: DIRECTORY_SCHOOL)")

    return parser.parse_args(argv)


def _container():
    from rollcall.infrastructure.config import Config
    from rollcall.infrastructure.container import Container

    return Container(Config.from_env())


async def run_scrape(follow_pagination: bool = True) -> dict:
    container = _container()
    use_case = container.scrape_use_case
    use_case.follow_pagination = follow_pagination
    result = await use_case.execute()
    return result.to_dict()


async def seed_csv(filepath: str, school: str = None) -> dict:
    from rollcall.use_cases.reconcile_roster import ReconcileRosterRequest

    container = _container()
    school = school or container.config.directory_school

    with open(filepath, newline="", encoding="utf-8") as f:
        names = [row.get("name", "") for row in csv.DictReader(f)]

    summary = await container.reconcile_use_case.execute(
        ReconcileRosterRequest(names=names, school=school, source_url=f"file:{filepath}")
    )
    logger.info(f"Seed complete: {summary.created} new, {summary.rejected} rejected.")
    return summary.to_dict()


def serve(host: str, port: int) -> None:
    import uvicorn

    uvicorn.run("main_api:app", host=host, port=port)


def main(argv=None) -> int:
    args = parse_args(argv)

    if args.command == "serve":
        serve(args.host, args.port)
        return 0

    from rollcall.domain.errors import RollCallError

    try:
        if args.command == "scrape":
            result = asyncio.run(run_scrape(follow_pagination=not args.no_pagination))
        else:
            result = asyncio.run(seed_csv(args.file, args.school))
    except RollCallError as e:
        logger.error(f"{args.command} failed: {e.message}")
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
