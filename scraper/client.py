"""
speedskatingresults.com HTTP client
"""
import aiohttp
import asyncio
from datetime import datetime
from typing import Optional, Dict, List
from loguru import logger

from .config import scraper_config, Endpoints
from .models import RaceLink, RacePage, ScrapeResult
from .parsers import EventParser, RaceParser


class ScraperError(Exception):
    """Raised when the results site cannot be scraped"""


class SSRClient:
    """speedskatingresults.com client"""

    def __init__(self, country: Optional[str] = None):
        self.base_url = scraper_config.base_url
        self.delay = scraper_config.scrape_delay
        self.max_retries = scraper_config.max_retries
        self.country = country or scraper_config.target_country
        self.timeout = aiohttp.ClientTimeout(total=scraper_config.request_timeout)
        self.headers = {
            "User-Agent": scraper_config.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        }
        self._session: Optional[aiohttp.ClientSession] = None
        self._semaphore = asyncio.Semaphore(scraper_config.max_concurrent_requests)

    async def __aenter__(self):
        self._session = aiohttp.ClientSession(
            timeout=self.timeout,
            headers=self.headers
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._session:
            await self._session.close()

    async def _get(self, url: str, params: Optional[Dict] = None, retry_count: int = 0) -> str:
        """GET with concurrency cap and exponential backoff"""
        async with self._semaphore:
            try:
                await asyncio.sleep(self.delay)
                async with self._session.get(url, params=params) as response:
                    response.raise_for_status()
                    return await response.text()
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                if retry_count >= self.max_retries:
                    raise ScraperError(f"Request failed: {url} ({e})") from e
                wait_time = (2 ** retry_count) * self.delay
                logger.warning(f"Request failed, retrying in {wait_time}s ({retry_count + 1}/{self.max_retries}): {e}")

        await asyncio.sleep(wait_time)
        return await self._get(url, params, retry_count + 1)

    # ==================== Event page ====================

    async def get_race_links(self, event_id: str) -> List[RaceLink]:
        """Race links for an event"""
        params = {"p": Endpoints.EVENT_PAGE, "e": event_id}
        html = await self._get(f"{self.base_url}{Endpoints.PAGE}", params)
        links = EventParser.parse_race_links(html, event_id, self.base_url)
        logger.info(f"Event {event_id}: {len(links)} races found")
        return links

    # ==================== Race pages ====================

    async def get_race(self, link: RaceLink) -> RacePage:
        """Parsed race page"""
        html = await self._get(link.url)
        return RaceParser.parse(html, link.url, self.country)

    # ==================== Full event ====================

    async def scrape_event(self, event_id: str) -> ScrapeResult:
        """
        All target-country results for one event

        Race pages are fetched concurrently; a failing race is logged and
        skipped, a failing event page raises ScraperError.
        """
        start_time = datetime.now()
        result = ScrapeResult(event_id=str(event_id))

        links = await self.get_race_links(event_id)
        result.races_found = len(links)

        pages = await asyncio.gather(*(self.get_race(link) for link in links), return_exceptions=True)

        for link, page in zip(links, pages):
            if isinstance(page, BaseException):
                if not isinstance(page, Exception):
                    raise page
                logger.error(f"Error scraping race {link.url}: {page}")
                result.errors.append(f"{link.url}: {page}")
                result.races_skipped += 1
                continue
            if not page.distance:
                result.races_skipped += 1
                continue
            result.races_scraped += 1
            result.results.extend(page.results)

        if links and len(result.errors) == len(links):
            result.success = False
            logger.error(f"Event {event_id}: all {len(links)} race pages failed")

        result.duration_seconds = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"Event {event_id}: {result.results_count} {self.country} results from "
            f"{result.races_scraped}/{result.races_found} races ({result.duration_seconds:.1f}s)"
        )
        return result
