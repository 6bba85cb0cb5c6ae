"""
Race page parser
"""
import re
from typing import List, Optional

from bs4 import BeautifulSoup
from loguru import logger

from ranking.models import Distance, Gender, RaceResult
from ..models import RacePage


# Checked in order; 1500m must not be read as 500m
DISTANCE_PATTERNS = [
    (re.compile(r"\b5000m\b", re.IGNORECASE), Distance.D5000.value),
    (re.compile(r"\b3000m\b", re.IGNORECASE), Distance.D3000.value),
    (re.compile(r"\b1500m\b", re.IGNORECASE), Distance.D1500.value),
    (re.compile(r"\b1000m\b", re.IGNORECASE), Distance.D1000.value),
    (re.compile(r"\b500m\b", re.IGNORECASE), Distance.D500.value),
]

WOMEN_MARKERS = ("women", "ladies", " lad")

# Result table columns
COL_RANK, COL_NAME, COL_CATEGORY, COL_COUNTRY, COL_TIME = 0, 1, 2, 4, 5
MIN_CELLS = 6


class RaceParser:
    """Race results page parser"""

    @staticmethod
    def extract_distance(title: str) -> Optional[str]:
        """Distance from the page title, None if unrecognized"""
        for pattern, distance in DISTANCE_PATTERNS:
            if pattern.search(title):
                return distance
        if "mass" in title.lower():
            return Distance.MASS_START.value
        return None

    @staticmethod
    def extract_gender(title: str) -> str:
        """Gender from the page title"""
        title_lower = title.lower()
        if any(marker in title_lower for marker in WOMEN_MARKERS):
            return Gender.WOMEN.value
        return Gender.MEN.value

    @staticmethod
    def parse(html: str, url: str, country: str) -> RacePage:
        """Title, distance, gender and the rows for one country"""
        soup = BeautifulSoup(html, "lxml")
        title = soup.title.get_text(strip=True) if soup.title else ""

        page = RacePage(
            url=url,
            title=title,
            distance=RaceParser.extract_distance(title),
            gender=RaceParser.extract_gender(title),
        )
        if not page.distance:
            logger.debug(f"No distance in title, skipped: {title!r} ({url})")
            return page

        page.results = RaceParser._parse_rows(soup, page.distance, page.gender, country)
        return page

    @staticmethod
    def _parse_rows(soup: BeautifulSoup, distance: str, gender: str, country: str) -> List[RaceResult]:
        results = []

        for index, row in enumerate(soup.find_all("tr")):
            if index == 0:
                continue
            cells = row.find_all("td")
            if len(cells) < MIN_CELLS:
                continue

            rank = cells[COL_RANK].get_text(strip=True)
            name = cells[COL_NAME].get_text(strip=True)
            category = cells[COL_CATEGORY].get_text(strip=True)
            row_country = cells[COL_COUNTRY].get_text(strip=True)
            time = cells[COL_TIME].get_text(strip=True)

            if row_country != country or not rank or not name:
                continue

            results.append(RaceResult(
                rank=rank,
                name=name,
                category=category or "Unknown",
                country=row_country,
                time=time or "N/A",
                distance=distance,
                gender=gender,
            ))

        return results
