from __future__ import annotations

import httpx
import pytest

from fpl_live.api import bootstrap_cache
from fpl_live.models import (
    EnrichedPick,
    ExplainEntry,
    ExplainStat,
    Fixture,
    FixtureStat,
    LiveElement,
    Pick,
    StatValue,
)

BASE_URL = "https://fpl.test/api"


def _make_live(element: int, minutes: int = 90, points: int = 2, fixture: int = 10, bonus: int | None = None) -> LiveElement:
    """Live element whose explain for ``fixture`` is worth ``points`` (plus confirmed bonus)."""
    stats = [ExplainStat("minutes", points=points, value=minutes)]
    if bonus is not None:
        stats.append(ExplainStat("bonus", points=bonus, value=bonus))
    return LiveElement(
        id=element,
        stats={"minutes": minutes, "total_points": points + (bonus or 0)},
        explain=[ExplainEntry(fixture=fixture, stats=stats)],
    )


def _make_picks(captain: int = 11, vice: int = 10, bench_multiplier: int = 0, captain_multiplier: int = 2) -> list[Pick]:
    picks = []
    for position in range(1, 16):
        if position == captain:
            multiplier = captain_multiplier
        elif position <= 11:
            multiplier = 1
        else:
            multiplier = bench_multiplier
        picks.append(Pick(
            element=position,
            position=position,
            multiplier=multiplier,
            is_captain=position == captain,
            is_vice_captain=position == vice,
        ))
    return picks


def _enrich(picks: list[Pick], live: dict[int, LiveElement]) -> list[EnrichedPick]:
    return [EnrichedPick(pick=p, live=live.get(p.element)) for p in picks]


def _make_fixture(id: int = 10, bps: list[tuple[int, int]] | None = None, away_bps: list[tuple[int, int]] | None = None,
                  minutes: int = 90, finished_provisional: bool = True, team_h: int = 1, team_a: int = 2) -> Fixture:
    stats = {}
    if bps is not None or away_bps is not None:
        stats["bps"] = FixtureStat(
            identifier="bps",
            home=[StatValue(element=e, value=v) for e, v in bps or []],
            away=[StatValue(element=e, value=v) for e, v in away_bps or []],
        )
    return Fixture(
        id=id, event=2, team_h=team_h, team_a=team_a,
        finished_provisional=finished_provisional, minutes=minutes, stats=stats,
    )


@pytest.fixture
def make_live():
    return _make_live


@pytest.fixture
def make_picks():
    return _make_picks


@pytest.fixture
def enrich():
    return _enrich


@pytest.fixture
def make_fixture():
    return _make_fixture


@pytest.fixture(autouse=True)
def clear_bootstrap_cache():
    bootstrap_cache.clear()
    yield
    bootstrap_cache.clear()


# ---------------------------------------------------------------------------
# Upstream API payloads
# ---------------------------------------------------------------------------

def _element(id: int, team: int, element_type: int) -> dict:
    return {"id": id, "web_name": f"P{id}", "team": team, "element_type": element_type, "code": 1000 + id}


@pytest.fixture
def upstream_payloads() -> dict:
    """Payloads for a two-manager league in GW2.

    Elements 1-15 each played 90 minutes for 2 points in fixture 10. BPS leaders:
    11 (40), 5 (30), 13 (20), so provisional bonus is 3/2/1.
    """
    # 2 GK, 5 DEF, 5 MID, 3 FWD in squad order
    types = [1, 2, 2, 2, 3, 3, 3, 3, 4, 4, 4, 1, 2, 3, 4]
    elements = [_element(i, 1 if i % 2 else 2, t) for i, t in enumerate(types, 1)]

    def picks(captain: int, vice: int, chip: str | None, cost: int, transfers: int) -> dict:
        bench_multiplier = 1 if chip == "bboost" else 0
        return {
            "active_chip": chip,
            "automatic_subs": [],
            "entry_history": {
                "event": 2, "points": 0, "total_points": 0, "bank": 5, "value": 1000,
                "event_transfers": transfers, "event_transfers_cost": cost, "points_on_bench": 0,
            },
            "picks": [
                {
                    "element": i, "position": i,
                    "multiplier": (2 if i == captain else 1) if i <= 11 else bench_multiplier,
                    "is_captain": i == captain, "is_vice_captain": i == vice,
                }
                for i in range(1, 16)
            ],
        }

    return {
        "/bootstrap-static/": {
            "events": [
                {"id": 1, "name": "Gameweek 1", "finished": True, "is_current": False, "is_next": False},
                {"id": 2, "name": "Gameweek 2", "finished": False, "is_current": True, "is_next": False},
            ],
            "teams": [
                {"id": 1, "name": "Arsenal", "short_name": "ARS"},
                {"id": 2, "name": "Chelsea", "short_name": "CHE"},
            ],
            "elements": elements,
        },
        "/fixtures/": [
            {
                "id": 10, "event": 2, "team_h": 1, "team_a": 2, "started": True,
                "finished": False, "finished_provisional": True, "minutes": 90,
                "stats": [
                    {"identifier": "goals_scored", "h": [{"value": 1, "element": 11}], "a": []},
                    {
                        "identifier": "bps",
                        "h": [{"value": 40, "element": 11}, {"value": 20, "element": 13}],
                        "a": [{"value": 30, "element": 5}, {"value": 10, "element": 2}],
                    },
                ],
            },
        ],
        "/event/2/live/": {
            "elements": [
                {
                    "id": i,
                    "stats": {"minutes": 90, "total_points": 2, "bonus": 0},
                    "explain": [{"fixture": 10, "stats": [{"identifier": "minutes", "points": 2, "value": 90}]}],
                }
                for i in range(1, 16)
            ],
        },
        "/leagues-classic/314/standings/": {
            "league": {"name": "Office League"},
            "standings": {
                "has_next": False,
                "results": [
                    {"entry": 101, "rank": 1, "player_name": "Alice", "entry_name": "Alice XI", "total": 500},
                    {"entry": 102, "rank": 2, "player_name": "Bob", "entry_name": "Bob FC", "total": 480},
                ],
            },
        },
        "/entry/101/event/2/picks/": picks(captain=11, vice=10, chip=None, cost=4, transfers=1),
        "/entry/102/event/2/picks/": picks(captain=1, vice=2, chip="bboost", cost=0, transfers=0),
        "/entry/101/transfers/": [
            {"element_in": 11, "element_out": 99, "event": 2},
            {"element_in": 3, "element_out": 4, "event": 1},
        ],
    }


@pytest.fixture
def make_upstream(upstream_payloads):
    """Factory for httpx clients served from ``upstream_payloads``.

    Paths mapped to an int answer with that status code; unknown paths are 404.
    """
    def _make(overrides: dict | None = None, calls: list | None = None) -> httpx.Client:
        routes = dict(upstream_payloads)
        routes.update(overrides or {})

        def handler(request: httpx.Request) -> httpx.Response:
            path = request.url.path.removeprefix("/api")
            if calls is not None:
                calls.append(path)
            payload = routes.get(path)
            if payload is None:
                return httpx.Response(404, json={"detail": "Not found."})
            if isinstance(payload, int):
                return httpx.Response(payload, json={"detail": "error"})
            return httpx.Response(200, json=payload)

        return httpx.Client(transport=httpx.MockTransport(handler), base_url=BASE_URL)

    return _make
