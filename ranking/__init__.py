"""
AmCup standings engine

Season points for speed skating from per-race results
"""
from .calculator import (
    POINT_SCALE,
    JUNIOR_CATEGORIES,
    MASTER_AGE_CODES,
    SLOWEST_TIME,
    calculate_points,
    classify_skater,
    infer_gender,
    parse_time,
)
from .combinations import calculate_combination_standings, calculate_tier_combinations
from .models import (
    DISTANCES,
    TIERS,
    Distance,
    Gender,
    InvalidRaceResultError,
    RaceResult,
    ResultStatus,
    Tier,
)
from .standings import (
    distance_standings,
    empty_standings,
    merge_standings,
    process_race_data,
)

__all__ = [
    "POINT_SCALE",
    "JUNIOR_CATEGORIES",
    "MASTER_AGE_CODES",
    "SLOWEST_TIME",
    "calculate_points",
    "classify_skater",
    "infer_gender",
    "parse_time",
    "calculate_combination_standings",
    "calculate_tier_combinations",
    "DISTANCES",
    "TIERS",
    "Distance",
    "Gender",
    "InvalidRaceResultError",
    "RaceResult",
    "ResultStatus",
    "Tier",
    "distance_standings",
    "empty_standings",
    "merge_standings",
    "process_race_data",
]
