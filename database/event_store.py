"""
Scraped event cache (JSON files)

One document per (slot, event id):
{eventId, eventName, slot, results, standings, combinations, scraped_at}
"""
import json
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

from scraper.config import store_config

KEY_PATTERN = re.compile(r"[^A-Za-z0-9_-]+")


class EventStore:
    """Key/value cache of scraped events"""

    def __init__(self, cache_dir: Optional[str] = None):
        self.cache_dir = Path(cache_dir or store_config.cache_dir)

    def _path(self, slot: str, event_id: str) -> Path:
        key = f"amcup_event_{slot}_{event_id}"
        return self.cache_dir / f"{KEY_PATTERN.sub('_', key)}.json"

    def get(self, slot: str, event_id: str) -> Optional[Dict[str, Any]]:
        """Cached event, None on miss or unreadable file"""
        path = self._path(slot, event_id)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to read cached event {path.name}, ignoring: {e}")
            return None

    def put(self, slot: str, event_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Store an event document (adds slot, eventId, scraped_at)"""
        document = dict(data)
        document.setdefault("eventId", str(event_id))
        document.setdefault("slot", slot)
        document.setdefault("scraped_at", datetime.now().isoformat())

        self.cache_dir.mkdir(parents=True, exist_ok=True)
        path = self._path(slot, event_id)
        # atomic replace
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            tmp_path.replace(path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

        logger.info(f"Cached {document.get('eventName', event_id)} -> {path}")
        return document

    def list_events(self) -> List[Dict[str, Any]]:
        """All cached events, ordered by slot"""
        if not self.cache_dir.exists():
            return []

        events = []
        for path in sorted(self.cache_dir.glob("amcup_event_*.json")):
            try:
                with open(path, "r", encoding="utf-8") as f:
                    events.append(json.load(f))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to read cached event {path.name}, ignoring: {e}")
        return sorted(events, key=lambda e: str(e.get("slot", "")))

    def delete(self, slot: str, event_id: str) -> bool:
        path = self._path(slot, event_id)
        if path.exists():
            path.unlink()
            return True
        return False

    def clear(self) -> int:
        """Remove every cached event, returns the count removed"""
        if not self.cache_dir.exists():
            return 0
        removed = 0
        for path in self.cache_dir.glob("amcup_event_*.json"):
            path.unlink()
            removed += 1
        logger.info(f"Event cache cleared: {removed} removed")
        return removed
