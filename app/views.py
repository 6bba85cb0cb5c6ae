"""
Standings view models

ViewState is an immutable UI selection; build_standings_view turns
standings + combinations + state into plain table data for the
HTML template and the exporters.
"""
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

from ranking.models import GENDERS, TIERS, Distance
from ranking.standings import distance_standings

# report key -> combination key
COMBINATION_REPORTS = {"sprint": "sprint", "long-distance": "longDistance"}

# report key -> distance
DISTANCE_REPORTS = {
    "500m": Distance.D500.value,
    "1000m": Distance.D1000.value,
    "1500m": Distance.D1500.value,
    "3000m": Distance.D3000.value,
    "5000m": Distance.D5000.value,
    "mass-start": Distance.MASS_START.value,
}

REPORTS = list(COMBINATION_REPORTS) + list(DISTANCE_REPORTS)
GENDER_FILTERS = ["all"] + GENDERS

COMBINATION_TITLES = {"sprint": "Overall Sprint", "longDistance": "Overall Long Distance"}
GENDER_LABELS = {"men": "Men", "women": "Women"}

PODIUM = {1: "podium-1", 2: "podium-2", 3: "podium-3"}


@dataclass(frozen=True)
class ViewState:
    """Current standings selection"""
    category: str = "overall"
    report: str = "sprint"
    gender: str = "all"

    def __post_init__(self):
        if self.category not in TIERS:
            raise ValueError(f"Unknown category: {self.category}")
        if self.report not in REPORTS:
            raise ValueError(f"Unknown report: {self.report}")
        if self.gender not in GENDER_FILTERS:
            raise ValueError(f"Unknown gender filter: {self.gender}")
        # Sprint and Long Distance are overall-only
        if self.report in COMBINATION_REPORTS and self.category != "overall":
            object.__setattr__(self, "category", "overall")

    @property
    def is_combination(self) -> bool:
        return self.report in COMBINATION_REPORTS

    def with_changes(self, **changes) -> "ViewState":
        return replace(self, **changes)

    def shows(self, gender: str) -> bool:
        return self.gender in ("all", gender)


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def short_event_label(event_name: str) -> str:
    """"AmCup #1" -> "#1" for compact headers"""
    return event_name.replace("AmCup ", "#").replace("##", "#")


def detail_columns(entries: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Union of (distance, event) detail keys in encounter order"""
    columns: List[Dict[str, str]] = []
    seen = set()
    for entry in entries:
        for distance, events in (entry.get("details") or {}).items():
            for event_name in events:
                key = (distance, event_name)
                if key in seen:
                    continue
                seen.add(key)
                columns.append({
                    "distance": distance,
                    "event": event_name,
                    "label": f"{distance} {short_event_label(event_name)}",
                })
    return columns


def build_section(title: str, gender: str, entries: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Ranked table for one gender"""
    columns = detail_columns(entries)
    rows = []
    for index, entry in enumerate(entries):
        rank = index + 1
        details = entry.get("details") or {}
        rows.append({
            "rank": rank,
            "name": entry["name"],
            "category": entry["category"],
            "cells": [details.get(c["distance"], {}).get(c["event"], "-") for c in columns],
            "points": entry["points"],
            "podium": PODIUM.get(rank, ""),
        })
    return {
        "title": title,
        "gender": gender,
        "label": GENDER_LABELS[gender],
        "columns": columns,
        "rows": rows,
    }


def report_entries(
    standings: Dict[str, Any],
    combinations: Dict[str, Any],
    category: str,
    report: str,
) -> Dict[str, List[Dict[str, Any]]]:
    """gender -> ranked entries for one tier and report"""
    if report in COMBINATION_REPORTS:
        tier_combinations = (combinations or {}).get(category) or {}
        data = tier_combinations.get(COMBINATION_REPORTS[report]) or {}
        return {gender: list(data.get(gender) or []) for gender in GENDERS}

    return distance_standings((standings or {}).get(category) or {}, DISTANCE_REPORTS[report])


def report_title(category: str, report: str) -> str:
    if report in COMBINATION_REPORTS:
        base = COMBINATION_TITLES[COMBINATION_REPORTS[report]]
    else:
        base = DISTANCE_REPORTS[report]
    return f"{base} - {capitalize_first(category)}"


def build_standings_view(
    standings: Optional[Dict[str, Any]],
    combinations: Optional[Dict[str, Any]],
    state: ViewState,
) -> Dict[str, Any]:
    """Pure render model for the current selection"""
    title = report_title(state.category, state.report)
    view = {
        "title": title,
        "state": state,
        "sections": [],
        "empty": True,
    }
    if not standings:
        return view

    by_gender = report_entries(standings, combinations, state.category, state.report)
    for gender in GENDERS:
        entries = by_gender.get(gender) or []
        if state.shows(gender) and entries:
            view["sections"].append(build_section(title, gender, entries))

    view["empty"] = not view["sections"]
    return view


__all__ = [
    "ViewState",
    "REPORTS",
    "DISTANCE_REPORTS",
    "COMBINATION_REPORTS",
    "build_section",
    "build_standings_view",
    "report_entries",
    "report_title",
    "short_event_label",
]
