"""
Scraper, cache and server settings
"""
from pydantic_settings import BaseSettings
from pydantic import Field
from dotenv import load_dotenv

load_dotenv()


class ScraperConfig(BaseSettings):
    """Results site scraper settings"""

    # speedskatingresults.com
    base_url: str = "https://speedskatingresults.com"

    # Request settings
    scrape_delay: float = Field(default=0.5, description="Delay before each request (s)")
    max_concurrent_requests: int = Field(default=4, description="Max concurrent race page requests")
    max_retries: int = Field(default=3, description="Max retries per request")
    request_timeout: int = Field(default=30, description="Request timeout (s)")

    # User-Agent
    user_agent: str = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"

    # Only rows from this country are scored
    target_country: str = Field(default="USA", description="Country filter")

    class Config:
        env_prefix = "SCRAPER_"
        case_sensitive = False


class StoreConfig(BaseSettings):
    """Scraped event cache settings"""

    cache_dir: str = Field(default="data/events", description="Event cache directory")

    class Config:
        env_prefix = "STORE_"
        case_sensitive = False


class ServerConfig(BaseSettings):
    """Web server settings"""

    host: str = "0.0.0.0"
    port: int = 3000
    season_title: str = Field(default="2025-2026 Season Standings", description="Export subtitle")

    class Config:
        env_prefix = "SERVER_"
        case_sensitive = False


# Global settings instances
scraper_config = ScraperConfig()
store_config = StoreConfig()
server_config = ServerConfig()


class Endpoints:
    """speedskatingresults.com page routes"""

    PAGE = "/index.php"

    # ?p=2&e=<event> : event overview with race links
    EVENT_PAGE = "2"
