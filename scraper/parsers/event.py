"""
Event page parser
"""
from typing import List
from urllib.parse import parse_qs, urljoin, urlparse

from bs4 import BeautifulSoup

from ..models import RaceLink


class EventParser:
    """Race links on an event overview page"""

    @staticmethod
    def parse_race_links(html: str, event_id: str, base_url: str) -> List[RaceLink]:
        """Race page links for this event, de-duplicated in page order"""
        soup = BeautifulSoup(html, "lxml")
        links: List[RaceLink] = []
        seen = set()

        for anchor in soup.select('a[href*="p=3"]'):
            href = anchor.get("href", "")
            query = parse_qs(urlparse(href).query)
            if str(event_id) not in query.get("e", []) or not query.get("r"):
                continue

            url = EventParser._absolute_url(href, base_url)
            if url in seen:
                continue
            seen.add(url)
            links.append(RaceLink(url=url, race_id=EventParser._race_id(url)))

        return links

    @staticmethod
    def _absolute_url(href: str, base_url: str) -> str:
        if href.startswith("http"):
            return href
        return urljoin(base_url.rstrip("/") + "/", href.lstrip("/"))

    @staticmethod
    def _race_id(url: str) -> str:
        values = parse_qs(urlparse(url).query).get("r")
        return values[0] if values else None
