"""Office team groups and their week-by-week head-to-head records.

Members of the default league are split into small teams; each gameweek the
team with the highest combined official score wins and the lowest loses.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

import httpx

from .api import load_bootstrap, load_entry_history
from .config import Settings, get_settings

logger = logging.getLogger(__name__)


def team_for_entry(entry_id: int, groups: dict[str, list[int]]) -> str | None:
    for name, ids in groups.items():
        if entry_id in ids:
            return name
    return None


def week_results(team_points: dict[str, int]) -> dict[str, str]:
    """Label each team ``win``, ``loss`` or ``mid`` for one gameweek."""
    if not team_points:
        return {}
    best = max(team_points.values())
    worst = min(team_points.values())
    results = {}
    for name, points in team_points.items():
        if best == worst:
            results[name] = "mid"
        elif points == best:
            results[name] = "win"
        elif points == worst:
            results[name] = "loss"
        else:
            results[name] = "mid"
    return results


def compute_team_weekly(
    histories: dict[int, list[dict]],
    groups: dict[str, list[int]],
    current_gw: int,
    start_gw: int = 2,
) -> dict:
    points_by_entry = {
        entry_id: {row.get("event"): row.get("points", 0) for row in rows}
        for entry_id, rows in histories.items()
    }
    records = {name: {"wins": 0, "losses": 0, "mid": 0} for name in groups}
    weekly = []

    for gw in range(start_gw, current_gw + 1):
        teams = []
        for name, ids in groups.items():
            # Official points already include auto-subs, bonus and transfer hits
            members = [
                {"entryId": entry_id, "points": points_by_entry.get(entry_id, {}).get(gw, 0)}
                for entry_id in ids
            ]
            teams.append({"name": name, "points": sum(m["points"] for m in members), "members": members})

        results = week_results({t["name"]: t["points"] for t in teams})
        for team in teams:
            team["result"] = results[team["name"]]
            key = {"win": "wins", "loss": "losses"}.get(team["result"], "mid")
            records[team["name"]][key] += 1

        teams.sort(key=lambda t: t["points"], reverse=True)
        weekly.append({"gw": gw, "teams": teams})

    return {"teamRecords": records, "weeklyResults": weekly, "totalGW": current_gw}


def build_team_weekly(client: httpx.Client, settings: Settings | None = None) -> dict:
    settings = settings or get_settings()
    groups = settings.team_groups
    entry_ids = [entry_id for ids in groups.values() for entry_id in ids]

    current_gw = load_bootstrap(client).current_event
    with ThreadPoolExecutor(max_workers=settings.max_workers) as executor:
        rows = list(executor.map(lambda entry_id: load_entry_history(client, entry_id), entry_ids))
    histories = dict(zip(entry_ids, rows))

    logger.debug("Team weekly records for %d entries up to GW%d", len(entry_ids), current_gw)
    return compute_team_weekly(histories, groups, current_gw, settings.team_weekly_start_gw)
