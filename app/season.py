"""
Event and season orchestration shared by the CLI and the web server
"""
import re
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from database.event_store import EventStore
from ranking import RaceResult, calculate_combination_standings, merge_standings, process_race_data
from scraper import SSRClient, ScraperError


def slot_for(event_name: str) -> str:
    """"AmCup #1" -> "amcup1\""""
    return re.sub(r"[^a-z0-9]+", "", event_name.lower()) or "event"


async def fetch_event_results(event_id: str) -> List[RaceResult]:
    """Scrape one event's target-country results"""
    async with SSRClient() as client:
        result = await client.scrape_event(event_id)
    if not result.success:
        raise ScraperError(f"Event {event_id}: every race page failed ({result.errors[0]})")
    return result.results


def build_event_payload(event_id: str, event_name: str, results: List[RaceResult]) -> Dict[str, Any]:
    """Per-event standings document (also the cache document)"""
    standings = process_race_data(results, event_name)
    return {
        "success": True,
        "eventId": event_id,
        "eventName": event_name,
        "results": [r.model_dump() for r in results],
        "standings": standings,
        "combinations": calculate_combination_standings(standings),
    }


async def load_event(
    store: EventStore,
    event_id: str,
    event_name: str,
    slot: Optional[str] = None,
    force_refresh: bool = False,
) -> Dict[str, Any]:
    """Cached event document, scraping and caching it on a miss"""
    slot = slot or slot_for(event_name)

    if not force_refresh:
        cached = store.get(slot, event_id)
        if cached:
            logger.info(f"Loaded {len(cached.get('results', []))} results from cache ({event_name})")
            return cached

    results = await fetch_event_results(event_id)
    payload = build_event_payload(event_id, event_name, results)
    return store.put(slot, event_id, payload)


def select_events(events: List[Dict[str, Any]], slots: Optional[Iterable[str]] = None) -> List[Dict[str, Any]]:
    if not slots:
        return events
    wanted = set(slots)
    return [e for e in events if e.get("slot") in wanted]


def season_standings(events: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Merged standings + combinations for cached event documents"""
    standings = merge_standings(event["standings"] for event in events)
    return {
        "standings": standings,
        "combinations": calculate_combination_standings(standings),
        "events": [
            {"slot": e.get("slot"), "eventId": e.get("eventId"), "eventName": e.get("eventName")}
            for e in events
        ],
    }
