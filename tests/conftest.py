"""
Pytest configuration and fixtures for AmCup standings tests
"""

import pytest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


def make_result(name, rank, category="M40", distance="500m", gender="men", time="41,23", country="USA"):
    """Raw result row as scraped"""
    return {
        "rank": str(rank),
        "name": name,
        "category": category,
        "country": country,
        "time": time,
        "distance": distance,
        "gender": gender,
    }


@pytest.fixture
def result_factory():
    return make_result


@pytest.fixture(scope="function")
def sample_results():
    """One event: men's and women's 500m / 1000m / long distance"""
    return [
        # Men 500m: overall 1..4, one DQ
        make_result("Alice Able", 1, "MA1", "500m", "men", "38,10"),
        make_result("Bob Brown", 2, "M45", "500m", "men", "39,20"),
        make_result("Carl Cole", 3, "MN", "500m", "men", "40,00"),
        make_result("Dan Dean", 4, "M50", "500m", "men", "41,00"),
        make_result("Eli Evans", "", "MB1", "500m", "men", "DQ"),
        # Men 1000m
        make_result("Bob Brown", 1, "M45", "1000m", "men", "1.20,10"),
        make_result("Alice Able", 2, "MA1", "1000m", "men", "1.21,10"),
        # Men 5000m and 1500m
        make_result("Dan Dean", 1, "M50", "5000m", "men", "7.40,00"),
        make_result("Dan Dean", 1, "M50", "1500m", "men", "2.10,00"),
        # Women 500m
        make_result("Gina Gray", 1, "LA2", "500m", "women", "44,50"),
        make_result("Hana Hill", 2, "L35", "500m", "women", "45,50"),
        # Women 3000m and Mass Start
        make_result("Hana Hill", 1, "L35", "3000m", "women", "5.10,00"),
        make_result("Gina Gray", 1, "LA2", "Mass Start", "women", "8.00,00"),
    ]


@pytest.fixture
def event_standings(sample_results):
    from ranking import process_race_data
    return process_race_data(sample_results, "AmCup #1")


@pytest.fixture
def season(sample_results):
    """Two-event season (merged standings + combinations)"""
    from ranking import calculate_combination_standings, merge_standings, process_race_data

    first = process_race_data(sample_results, "AmCup #1")
    second = process_race_data(sample_results[:5], "AmCup #2")
    standings = merge_standings([first, second])
    return {"standings": standings, "combinations": calculate_combination_standings(standings)}
