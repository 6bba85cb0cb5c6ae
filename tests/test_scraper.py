"""
Unit tests for the results site scraper

Parsers run on canned HTML; the client is tested with a patched _get.
"""

import pytest
from unittest.mock import AsyncMock, patch

from scraper import SSRClient, ScraperError
from scraper.models import RaceLink
from scraper.parsers import EventParser, RaceParser

BASE_URL = "https://speedskatingresults.com"

EVENT_HTML = """
<html><body>
<table>
  <tr><td><a href="index.php?p=3&e=123&r=1">500m Men</a></td></tr>
  <tr><td><a href="index.php?p=3&e=123&r=2">500m Ladies</a></td></tr>
  <tr><td><a href="/index.php?p=3&e=123&r=2">500m Ladies (dup)</a></td></tr>
  <tr><td><a href="index.php?p=3&e=999&r=5">Other event</a></td></tr>
  <tr><td><a href="index.php?p=3&e=1234&r=6">Prefix event</a></td></tr>
  <tr><td><a href="index.php?p=2&e=123">Overview</a></td></tr>
  <tr><td><a href="https://speedskatingresults.com/index.php?p=3&e=123&r=7">Mass Start</a></td></tr>
</table>
</body></html>
"""


def race_html(title, rows):
    body = "".join(
        "<tr>" + "".join(f"<td>{cell}</td>" for cell in row) + "</tr>"
        for row in rows
    )
    return f"""
    <html><head><title>{title}</title></head><body>
    <table>
      <tr><th>Rank</th><th>Name</th><th>Cat</th><th>Club</th><th>Nat</th><th>Time</th></tr>
      {body}
    </table>
    </body></html>
    """


RACE_ROWS = [
    ["1", "Alice Able", "MA1", "Club A", "USA", "38,10"],
    ["2", "Pierre Petit", "M45", "Club B", "CAN", "38,50"],
    ["3", "Bob Brown", "", "Club C", "USA", "39,20"],
    ["", "Eli Evans", "MB1", "Club D", "USA", "DQ"],
    ["", "", "M40", "Club E", "USA", "40,00"],
    ["short", "row"],
]


class TestEventParser:
    """Tests for EventParser"""

    def test_race_links(self):
        links = EventParser.parse_race_links(EVENT_HTML, "123", BASE_URL)
        assert [link.race_id for link in links] == ["1", "2", "7"]
        assert links[0].url == "https://speedskatingresults.com/index.php?p=3&e=123&r=1"

    def test_other_events_ignored(self):
        links = EventParser.parse_race_links(EVENT_HTML, "999", BASE_URL)
        assert [link.race_id for link in links] == ["5"]

    def test_no_links(self):
        assert EventParser.parse_race_links("<html></html>", "123", BASE_URL) == []


class TestRaceParser:
    """Tests for RaceParser"""

    @pytest.mark.parametrize("title,expected", [
        ("AmCup 1 - 500m Men", "500m"),
        ("1500m Ladies", "1500m"),
        ("1000m Men", "1000m"),
        ("3000m Women", "3000m"),
        ("5000m Men", "5000m"),
        ("Mass Start Men", "Mass Start"),
        ("Team Pursuit", None),
    ])
    def test_extract_distance(self, title, expected):
        assert RaceParser.extract_distance(title) == expected

    @pytest.mark.parametrize("title,expected", [
        ("500m Men", "men"),
        ("500m Ladies", "women"),
        ("500m Women", "women"),
        ("500m Lad. A", "women"),
        ("500m", "men"),
    ])
    def test_extract_gender(self, title, expected):
        assert RaceParser.extract_gender(title) == expected

    def test_parse_filters_country(self):
        page = RaceParser.parse(race_html("500m Men", RACE_ROWS), "url", "USA")
        assert page.distance == "500m"
        assert page.gender == "men"
        assert [r.name for r in page.results] == ["Alice Able", "Bob Brown"]

    def test_parse_defaults(self):
        page = RaceParser.parse(race_html("500m Men", RACE_ROWS), "url", "USA")
        bob = page.results[1]
        assert bob.category == "Unknown"
        assert bob.status == "OK"
        assert bob.distance == "500m"

    def test_rows_without_rank_skipped(self):
        """The DQ row has no rank text and is not collected"""
        page = RaceParser.parse(race_html("500m Men", RACE_ROWS), "url", "USA")
        assert "Eli Evans" not in [r.name for r in page.results]

    def test_other_country(self):
        page = RaceParser.parse(race_html("500m Men", RACE_ROWS), "url", "CAN")
        assert [r.name for r in page.results] == ["Pierre Petit"]

    def test_unknown_distance_skipped(self):
        page = RaceParser.parse(race_html("Team Pursuit", RACE_ROWS), "url", "USA")
        assert page.distance is None
        assert page.results == []


@pytest.mark.asyncio
class TestSSRClient:
    """Tests for SSRClient.scrape_event"""

    async def test_scrape_event(self):
        pages = {
            "https://speedskatingresults.com/index.php?p=3&e=123&r=1": race_html("500m Men", RACE_ROWS),
            "https://speedskatingresults.com/index.php?p=3&e=123&r=2": race_html(
                "500m Ladies", [["1", "Gina Gray", "LA2", "Club", "USA", "44,50"]]
            ),
            "https://speedskatingresults.com/index.php?p=3&e=123&r=7": race_html("Team Pursuit", RACE_ROWS),
        }

        async def fake_get(url, params=None, retry_count=0):
            if params:
                assert params == {"p": "2", "e": "123"}
                return EVENT_HTML
            return pages[url]

        client = SSRClient(country="USA")
        with patch.object(client, "_get", side_effect=fake_get):
            result = await client.scrape_event("123")

        assert result.races_found == 3
        assert result.races_scraped == 2
        assert result.races_skipped == 1
        assert [r.name for r in result.results] == ["Alice Able", "Bob Brown", "Gina Gray"]
        assert result.results[2].gender == "women"

    async def test_failing_race_skipped(self):
        async def fake_get(url, params=None, retry_count=0):
            if params:
                return EVENT_HTML
            if url.endswith("r=1"):
                raise ScraperError("boom")
            return race_html("500m Men", RACE_ROWS)

        client = SSRClient(country="USA")
        with patch.object(client, "_get", side_effect=fake_get):
            result = await client.scrape_event("123")

        assert result.races_skipped == 1
        assert result.races_scraped == 2
        assert len(result.errors) == 1
        assert result.success is True

    async def test_every_race_failing(self):
        async def fake_get(url, params=None, retry_count=0):
            if params:
                return EVENT_HTML
            raise ScraperError("boom")

        client = SSRClient(country="USA")
        with patch.object(client, "_get", side_effect=fake_get):
            result = await client.scrape_event("123")

        assert result.success is False
        assert result.races_skipped == 3
        assert result.results == []

    async def test_event_without_races_succeeds(self):
        client = SSRClient(country="USA")
        with patch.object(client, "_get", AsyncMock(return_value="<html></html>")):
            result = await client.scrape_event("123")
        assert result.success is True
        assert result.races_found == 0

    async def test_event_page_failure_raises(self):
        client = SSRClient(country="USA")
        with patch.object(client, "_get", AsyncMock(side_effect=ScraperError("down"))):
            with pytest.raises(ScraperError):
                await client.scrape_event("123")

    async def test_get_race(self):
        client = SSRClient(country="USA")
        link = RaceLink(url="u", race_id="1")
        with patch.object(client, "_get", AsyncMock(return_value=race_html("1000m Men", RACE_ROWS))):
            page = await client.get_race(link)
        assert page.distance == "1000m"
        assert len(page.results) == 2
