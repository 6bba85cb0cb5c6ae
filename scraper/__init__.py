"""
speedskatingresults.com results scraper
"""
from .client import SSRClient, ScraperError
from .models import RaceLink, RacePage, ScrapeResult

__all__ = ['SSRClient', 'ScraperError', 'RaceLink', 'RacePage', 'ScrapeResult']
