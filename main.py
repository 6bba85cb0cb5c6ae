"""
AmCup Points Tracker main

Fetch events, print season standings and write exports from the command line.
"""
import asyncio
import sys
from pathlib import Path
from typing import List, Optional
from loguru import logger

from database.event_store import EventStore
from ranking import TIERS
from scraper import ScraperError
from scraper.config import server_config
from app.season import load_event, season_standings, select_events
from app.exports import EXPORT_TYPES, build_pdf, build_workbook
from app.views import REPORTS, ViewState, build_standings_view


# Logging
logger.remove()
logger.add(
    sys.stderr,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    level="INFO"
)
logger.add(
    "logs/standings_{time:YYYY-MM-DD}.log",
    rotation="1 day",
    retention="30 days",
    level="DEBUG"
)


class AmCupTracker:
    """Season standings over the cached events"""

    def __init__(self, store: Optional[EventStore] = None):
        self.store = store or EventStore()

    async def fetch(self, event_id: str, event_name: str, slot: Optional[str] = None, force: bool = False) -> dict:
        """Scrape (or load) one event"""
        event = await load_event(self.store, event_id, event_name, slot, force)
        logger.info(f"{event_name} ({event_id}): {len(event.get('results', []))} results")
        return event

    def season(self, slots: Optional[List[str]] = None) -> Optional[dict]:
        events = select_events(self.store.list_events(), slots)
        if not events:
            logger.warning("No cached events, fetch at least one event first")
            return None
        return season_standings(events)

    def export(self, output: str, export_type: str = "full", slots: Optional[List[str]] = None) -> Optional[Path]:
        """Write a PDF or xlsx export, the format follows the file suffix"""
        season = self.season(slots)
        if season is None:
            return None

        path = Path(output)
        if path.suffix.lower() == ".xlsx":
            content = build_workbook(season["standings"], season["combinations"], export_type)
        else:
            content = build_pdf(season["standings"], season["combinations"], export_type)

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        logger.info(f"Export written: {path} ({len(content)} bytes)")
        return path


def print_view(view: dict):
    print(f"\n=== {view['title']} ===")
    if view["empty"]:
        print("  (no standings)")
    for section in view["sections"]:
        print(f"\n  [{section['label']}]")
        for row in section["rows"]:
            print(f"  {row['rank']:>3}. {row['name']:<30} {row['category']:<12} {row['points']:>4}")


async def main():
    """Main"""
    import argparse

    parser = argparse.ArgumentParser(description="US Speedskating AmCup standings")
    parser.add_argument(
        "--mode",
        choices=["fetch", "standings", "export", "serve", "clear"],
        default="standings",
        help="run mode"
    )
    parser.add_argument("--event-id", help="speedskatingresults.com event id")
    parser.add_argument("--event-name", help='event label, e.g. "AmCup #1"')
    parser.add_argument("--slot", help="cache slot (default from event name)")
    parser.add_argument("--force", action="store_true", help="ignore the cache")
    parser.add_argument("--events", nargs="*", help="slots to include (default all cached)")
    parser.add_argument("--category", default="overall", choices=TIERS)
    parser.add_argument("--report", default="sprint", choices=REPORTS)
    parser.add_argument("--gender", default="all", choices=["all", "men", "women"])
    parser.add_argument("--export-type", default="full", choices=EXPORT_TYPES)
    parser.add_argument("--output", default="exports/amcup-standings.pdf", help=".pdf or .xlsx")

    args = parser.parse_args()

    tracker = AmCupTracker()

    if args.mode == "fetch":
        if not args.event_id or not args.event_name:
            parser.error("--event-id and --event-name are required for fetch")
        try:
            await tracker.fetch(args.event_id, args.event_name, args.slot, args.force)
        except ScraperError as e:
            logger.error(f"Fetch failed: {e}")
            sys.exit(1)

    elif args.mode == "standings":
        season = tracker.season(args.events)
        if season is None:
            sys.exit(1)
        state = ViewState(category=args.category, report=args.report, gender=args.gender)
        print_view(build_standings_view(season["standings"], season["combinations"], state))

    elif args.mode == "export":
        if tracker.export(args.output, args.export_type, args.events) is None:
            sys.exit(1)

    elif args.mode == "clear":
        removed = tracker.store.clear()
        print(f"Removed {removed} cached events")

    elif args.mode == "serve":
        import uvicorn

        config = uvicorn.Config("app.server:app", host=server_config.host, port=server_config.port, log_level="info")
        await uvicorn.Server(config).serve()


if __name__ == "__main__":
    asyncio.run(main())
