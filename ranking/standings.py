"""
Standings engine

Per event:
- group results by (distance, gender)
- order each group by rank, then race clock
- re-rank each tier independently and award points
- fold the awards into a per-tier ledger

Across events the same ledger shape is merged by summing leaves.
"""
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

from loguru import logger

from .calculator import calculate_points, classify_skater, infer_gender, parse_time, sort_rank
from .models import DISTANCES, GENDERS, TIERS, RaceResult, ResultStatus, coerce_results


# Type aliases (plain JSON-ready structures)
SkaterEntry = Dict[str, Any]          # {name, category, distances, totalPoints}
TierStandings = Dict[str, SkaterEntry]
Standings = Dict[str, TierStandings]  # tier -> name -> entry


def empty_standings() -> Standings:
    """New standings with every tier present"""
    return {tier: {} for tier in TIERS}


def _group_key(key: Tuple[str, str]) -> Tuple[int, int]:
    distance, gender = key
    return DISTANCES.index(distance), GENDERS.index(gender)


def group_results(results: Iterable[RaceResult]) -> Dict[Tuple[str, str], List[RaceResult]]:
    """Partition results by (distance, gender) in canonical order"""
    groups: Dict[Tuple[str, str], List[RaceResult]] = defaultdict(list)
    for result in results:
        groups[(result.distance, result.gender)].append(result)
    return {key: groups[key] for key in sorted(groups, key=_group_key)}


def sort_group(group: Iterable[RaceResult]) -> List[RaceResult]:
    """Canonical order: numeric rank ascending, then parsed time ascending"""
    return sorted(group, key=lambda r: (sort_rank(r.rank), parse_time(r.time)))


def count_finishers(group: Iterable[RaceResult]) -> int:
    return sum(1 for r in group if r.status == ResultStatus.OK.value)


def rank_tier(sorted_group: List[RaceResult], tier: str) -> List[Tuple[RaceResult, int, int]]:
    """
    Independent re-ranking of one tier's members

    Returns (result, tier_rank, points). The tier's own finisher count
    places DQ/DNF members at last + 1.
    """
    members = [r for r in sorted_group if classify_skater(r.category)[tier]]
    finishers = count_finishers(members)

    ranked = []
    for index, result in enumerate(members):
        tier_rank = index + 1
        points = calculate_points(tier_rank, finishers, result.status)
        ranked.append((result, tier_rank, points))
    return ranked


def add_points(
    tier_standings: TierStandings,
    name: str,
    category: str,
    distance: str,
    event_name: str,
    points: int,
) -> None:
    """Ledger insert; repeated keys are summed"""
    entry = tier_standings.get(name)
    if entry is None:
        entry = {"name": name, "category": category, "distances": {}, "totalPoints": 0}
        tier_standings[name] = entry

    events = entry["distances"].setdefault(distance, {})
    events[event_name] = events.get(event_name, 0) + points
    entry["totalPoints"] += points


def process_race_data(
    race_results: Iterable[Union[RaceResult, Mapping[str, Any]]],
    event_name: str,
) -> Standings:
    """Standings for one event from all of its race results"""
    if not event_name or not str(event_name).strip():
        raise ValueError("event_name is required")

    results = coerce_results(race_results)
    standings = empty_standings()

    for (distance, gender), group in group_results(results).items():
        sorted_group = sort_group(group)

        for tier in TIERS:
            ranked = rank_tier(sorted_group, tier)
            for result, _, points in ranked:
                add_points(standings[tier], result.name, result.category, distance, event_name, points)

            if ranked:
                logger.debug(f"{event_name} {distance} {gender} [{tier}]: {len(ranked)} scored")

    logger.info(
        f"{event_name}: {len(results)} results -> "
        + ", ".join(f"{tier} {len(standings[tier])}" for tier in TIERS)
    )
    return standings


def merge_standings(standings_list: Iterable[Standings]) -> Standings:
    """
    Merge per-event standings into one season standings

    Inputs are not modified. Event keys are unioned (same key sums),
    category comes from the first source listing the competitor and
    totalPoints is recomputed from the merged leaves.
    """
    merged = empty_standings()

    for standings in standings_list:
        for tier, tier_standings in standings.items():
            target = merged.setdefault(tier, {})
            for name, data in tier_standings.items():
                entry = target.get(name)
                if entry is None:
                    entry = {
                        "name": data.get("name", name),
                        "category": data.get("category", "Unknown"),
                        "distances": {},
                        "totalPoints": 0,
                    }
                    target[name] = entry

                for distance, event_points in data.get("distances", {}).items():
                    events = entry["distances"].setdefault(distance, {})
                    for event, points in event_points.items():
                        events[event] = events.get(event, 0) + points

    for tier_standings in merged.values():
        for entry in tier_standings.values():
            entry["totalPoints"] = sum(
                sum(event_points.values()) for event_points in entry["distances"].values()
            )

    return merged


def sum_points(event_points: Mapping[str, int]) -> int:
    return sum(event_points.values())


def distance_standings(tier_standings: TierStandings, distance: str) -> Dict[str, List[Dict[str, Any]]]:
    """Per-distance ranking split by gender, points descending"""
    entries = []
    for skater in tier_standings.values():
        event_points = skater["distances"].get(distance)
        if not event_points:
            continue
        points = sum_points(event_points)
        if points > 0:
            entries.append({
                "name": skater["name"],
                "category": skater["category"],
                "points": points,
                "details": {distance: dict(event_points)},
            })

    entries.sort(key=lambda e: -e["points"])

    split: Dict[str, List[Dict[str, Any]]] = {gender: [] for gender in GENDERS}
    for entry in entries:
        split[infer_gender(entry["category"])].append(entry)
    return split
