"""
AmCup points calculation module

Fixed lookup tables and the per-result scoring rules:
- Point scale by finishing rank
- Junior / master category classification
- Race clock parsing (tie-break only)
- DQ/DNF scored as last finisher + 1
"""
import math
import re
from typing import Any, Dict, Optional

from .models import Gender, ResultStatus


# =====================================================
# Constants
# =====================================================

# Points by finishing rank (index = rank - 1)
POINT_SCALE = [
    60, 54, 48, 43, 40, 37, 34, 32, 30, 28,
    27, 26, 25, 24, 23, 22, 21, 20, 19, 18,
    17, 16, 15, 14, 13, 12, 11, 10, 9, 8,
    7, 6, 5, 4, 3, 2, 1, 1, 1, 1,
]

MIN_POINTS = 1

# Exact junior category codes (men M*, ladies L*)
JUNIOR_CATEGORIES = [
    "MC1", "MC2", "MB1", "MB2", "MA1", "MA2",
    "LC1", "LC2", "LB1", "LB2", "LA1", "LA2",
]

# Master age prefixes (matched with startswith)
MASTER_AGE_CODES = [
    "M30", "M35", "M40", "M45", "M50", "M55", "M60", "M65", "M70", "M75", "M80",
    "L30", "L35", "L40", "L45", "L50", "L55", "L60", "L65", "L70", "L75", "L80",
]

# Reserved prefix, never a master category
EXCLUDED_MASTER_PREFIX = "MN"

# Slower than any real time; tie-break only
SLOWEST_TIME = 999.0

# Sort value for non-numeric ranks
UNRANKED = 999

TIME_PATTERN = re.compile(r"(?:(\d+)[.:])?(\d+),(\d+)(?:\((\d+)\))?")
RANK_PATTERN = re.compile(r"\s*[+-]?(\d+)")


# =====================================================
# Parsing
# =====================================================

def parse_time(time_str: Optional[str]) -> float:
    """Race clock text to seconds: "41,23(4)" -> 41.234, "1.15,23" -> 75.23"""
    if not time_str:
        return SLOWEST_TIME

    match = TIME_PATTERN.search(time_str)
    if match:
        minutes = int(match.group(1)) if match.group(1) else 0
        seconds = int(match.group(2))
        hundredths = int(match.group(3))
        thousandths = int(match.group(4)) if match.group(4) else 0
        return minutes * 60 + seconds + hundredths / 100 + thousandths / 1000

    try:
        value = float(time_str.strip().replace(",", ".", 1))
    except ValueError:
        return SLOWEST_TIME
    if not math.isfinite(value) or value == 0:
        return SLOWEST_TIME
    return value


def parse_rank(rank: Any) -> Optional[int]:
    """Leading integer of a rank cell ("12", "3.", "12 (f)"), else None"""
    if rank is None:
        return None
    if isinstance(rank, int):
        return rank
    match = RANK_PATTERN.match(str(rank))
    if not match:
        return None
    return int(match.group(0))


def sort_rank(rank: Any) -> int:
    """Rank used for ordering; missing, zero or non-numeric ranks sort last"""
    value = parse_rank(rank)
    return value if value else UNRANKED


# =====================================================
# Classification
# =====================================================

def classify_skater(category: Optional[str]) -> Dict[str, bool]:
    """Tiers a category code belongs to"""
    category = category or ""
    tiers = {"overall": True, "junior": False, "master": False}

    if category in JUNIOR_CATEGORIES:
        tiers["junior"] = True

    if (
        any(category.startswith(code) for code in MASTER_AGE_CODES)
        and not category.startswith(EXCLUDED_MASTER_PREFIX)
    ):
        tiers["master"] = True

    return tiers


def infer_gender(category: Optional[str]) -> str:
    """
    Gender from a category code

    M... -> men; L... / W... or text containing WOMEN / LADIES -> women; default men
    """
    code = (category or "").strip().upper()
    if code.startswith("M"):
        return Gender.MEN.value
    if code.startswith("L") or code.startswith("W"):
        return Gender.WOMEN.value
    if "WOMEN" in code or "LADIES" in code:
        return Gender.WOMEN.value
    return Gender.MEN.value


# =====================================================
# Points
# =====================================================

def points_for_rank(rank: int) -> int:
    """Point scale lookup with the out-of-range rules"""
    if rank < 1:
        return 0
    if rank > len(POINT_SCALE):
        return MIN_POINTS
    return POINT_SCALE[rank - 1]


def calculate_points(rank: Any, total_finishers: int, status: str) -> int:
    """
    Points for one result

    DQ/DNF is scored as rank total_finishers + 1. Otherwise the rank is
    looked up in the point scale; unparseable or < 1 earns 0, > 40 earns 1.
    """
    if status == ResultStatus.DQ_DNF.value:
        return points_for_rank(total_finishers + 1) or MIN_POINTS

    numeric_rank = parse_rank(rank)
    if numeric_rank is None:
        return 0
    return points_for_rank(numeric_rank)
