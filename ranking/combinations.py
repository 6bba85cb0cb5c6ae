"""
Combination standings (Sprint, Long Distance)

Sprint        = 500m + 1000m
Long Distance = 1500m + Mass Start + 3000m (women) / 5000m (men)
"""
from typing import Any, Dict, List

from .calculator import infer_gender
from .models import GENDERS, Distance, Gender
from .standings import Standings, TierStandings, sum_points

SPRINT_DISTANCES = [Distance.D500.value, Distance.D1000.value]
LONG_DISTANCE_BASE = [Distance.D1500.value, Distance.MASS_START.value]
LONG_DISTANCE_BY_GENDER = {
    Gender.WOMEN.value: Distance.D3000.value,
    Gender.MEN.value: Distance.D5000.value,
}

COMBINATIONS = ["sprint", "longDistance"]


def _combination_entry(skater: Dict[str, Any], distances: List[str]) -> Dict[str, Any]:
    details = {d: dict(skater["distances"].get(d, {})) for d in distances}
    return {
        "name": skater["name"],
        "category": skater["category"],
        "points": sum(sum_points(events) for events in details.values()),
        "details": details,
    }


def long_distance_set(gender: str) -> List[str]:
    return LONG_DISTANCE_BASE + [LONG_DISTANCE_BY_GENDER[gender]]


def calculate_tier_combinations(tier_standings: TierStandings) -> Dict[str, Dict[str, List[Dict[str, Any]]]]:
    """Sprint and Long Distance rankings for one tier, split by gender"""
    result = {name: {gender: [] for gender in GENDERS} for name in COMBINATIONS}

    for skater in tier_standings.values():
        gender = infer_gender(skater.get("category"))

        sprint = _combination_entry(skater, SPRINT_DISTANCES)
        if sprint["points"] > 0:
            result["sprint"][gender].append(sprint)

        long_distance = _combination_entry(skater, long_distance_set(gender))
        if long_distance["points"] > 0:
            result["longDistance"][gender].append(long_distance)

    # stable: ties keep encounter order
    for name in COMBINATIONS:
        for gender in GENDERS:
            result[name][gender].sort(key=lambda e: -e["points"])

    return result


def calculate_combination_standings(standings: Standings) -> Dict[str, Dict[str, Dict[str, List[Dict[str, Any]]]]]:
    """Combination rankings for every tier present in the standings"""
    return {tier: calculate_tier_combinations(tier_standings) for tier, tier_standings in standings.items()}
