"""
Scraper data models (Pydantic)
"""
from pydantic import BaseModel, Field
from typing import Optional, List

from ranking.models import RaceResult


class RaceLink(BaseModel):
    """Race page found on an event page"""
    url: str = Field(..., description="Absolute race page URL")
    race_id: Optional[str] = Field(None, description="r= query value")


class RacePage(BaseModel):
    """Parsed race page"""
    url: str = Field(..., description="Race page URL")
    title: str = Field(default="", description="Page title")
    distance: Optional[str] = Field(None, description="Distance, None if unrecognized")
    gender: str = Field(default="men", description="Race gender")
    results: List[RaceResult] = Field(default_factory=list)


class ScrapeResult(BaseModel):
    """Scrape result for one event"""
    success: bool = Field(default=True)
    event_id: str = Field(..., description="Event id")
    races_found: int = Field(default=0)
    races_scraped: int = Field(default=0)
    races_skipped: int = Field(default=0)
    results: List[RaceResult] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    duration_seconds: float = Field(default=0.0)

    @property
    def results_count(self) -> int:
        return len(self.results)
