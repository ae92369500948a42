from __future__ import annotations

import logging

import httpx

from .cache import TTLCache
from .config import Settings, get_settings
from .models import (
    Bootstrap,
    Chip,
    EntryHistory,
    ExplainEntry,
    ExplainStat,
    Fixture,
    FixtureStat,
    Gameweek,
    LeagueStandings,
    LiveElement,
    Pick,
    PicksData,
    Player,
    StandingsRow,
    StatValue,
    Team,
    Transfer,
)

logger = logging.getLogger(__name__)

# Bootstrap is large and changes rarely; shared by every request in the process
bootstrap_cache = TTLCache(get_settings().bootstrap_cache_ttl)


def make_client(settings: Settings | None = None, **kwargs) -> httpx.Client:
    settings = settings or get_settings()
    return httpx.Client(
        base_url=settings.fpl_api_base_url,
        timeout=settings.request_timeout,
        headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
        **kwargs,
    )


# ---------------------------------------------------------------------------
# Raw fetchers
# ---------------------------------------------------------------------------

def fetch_bootstrap(client: httpx.Client) -> dict:
    resp = client.get("/bootstrap-static/")
    resp.raise_for_status()
    return resp.json()


def fetch_fixtures(client: httpx.Client, event: int) -> list[dict]:
    resp = client.get("/fixtures/", params={"event": event})
    resp.raise_for_status()
    return resp.json()


def fetch_live_gameweek(client: httpx.Client, event: int) -> dict:
    resp = client.get(f"/event/{event}/live/")
    resp.raise_for_status()
    return resp.json()


def fetch_league_standings(client: httpx.Client, league_id: int, page: int = 1, phase: int = 1) -> dict:
    resp = client.get(
        f"/leagues-classic/{league_id}/standings/",
        params={"page_standings": page, "phase": phase},
    )
    resp.raise_for_status()
    return resp.json()


def fetch_picks(client: httpx.Client, entry_id: int, event: int) -> dict:
    """Returns the full picks response including active_chip and entry_history."""
    resp = client.get(f"/entry/{entry_id}/event/{event}/picks/")
    resp.raise_for_status()
    return resp.json()


def fetch_transfers(client: httpx.Client, entry_id: int) -> list[dict]:
    resp = client.get(f"/entry/{entry_id}/transfers/")
    resp.raise_for_status()
    return resp.json()


def fetch_entry_history(client: httpx.Client, entry_id: int) -> dict:
    resp = client.get(f"/entry/{entry_id}/history/")
    resp.raise_for_status()
    return resp.json()


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------

def parse_teams(data: dict) -> dict[int, Team]:
    teams = {}
    for t in data.get("teams", []):
        teams[t["id"]] = Team(id=t["id"], name=t["name"])
    return teams


def parse_gameweeks(data: dict) -> list[Gameweek]:
    return [
        Gameweek(
            id=gw["id"],
            name=gw.get("name", f"Gameweek {gw['id']}"),
            finished=gw.get("finished", False),
            is_current=gw.get("is_current", False),
            is_next=gw.get("is_next", False),
        )
        for gw in data.get("events", [])
    ]


def parse_players(data: dict) -> dict[int, Player]:
    players = {}
    for e in data.get("elements", []):
        players[e["id"]] = Player(
            id=e["id"],
            name=e.get("web_name", "Unknown"),
            team=e.get("team", 0),
            element_type=e.get("element_type", 0),
            code=e.get("code", 0),
        )
    return players


def parse_bootstrap(data: dict) -> Bootstrap:
    return Bootstrap(
        events=parse_gameweeks(data),
        players=parse_players(data),
        teams=parse_teams(data),
    )


def _parse_stat_values(raw: list[dict]) -> list[StatValue]:
    return [StatValue(element=v["element"], value=v.get("value", 0)) for v in raw]


def parse_fixtures(raw: list[dict]) -> list[Fixture]:
    fixtures = []
    for f in raw:
        stats = {}
        for s in f.get("stats") or []:
            stats[s["identifier"]] = FixtureStat(
                identifier=s["identifier"],
                home=_parse_stat_values(s.get("h", [])),
                away=_parse_stat_values(s.get("a", [])),
            )
        fixtures.append(Fixture(
            id=f["id"],
            event=f.get("event"),
            team_h=f.get("team_h", 0),
            team_a=f.get("team_a", 0),
            finished_provisional=bool(f.get("finished_provisional")),
            minutes=f.get("minutes", 0) or 0,
            stats=stats,
        ))
    return fixtures


def parse_explain(raw: list[dict]) -> list[ExplainEntry]:
    return [
        ExplainEntry(
            fixture=e["fixture"],
            stats=[
                ExplainStat(
                    identifier=s["identifier"],
                    points=s.get("points", 0) or 0,
                    value=s.get("value", 0) or 0,
                    points_modification=s.get("points_modification", 0) or 0,
                )
                for s in e.get("stats", [])
            ],
        )
        for e in raw
    ]


def parse_live(data: dict) -> dict[int, LiveElement]:
    live = {}
    for e in data.get("elements", []):
        live[e["id"]] = LiveElement(
            id=e["id"],
            stats=dict(e.get("stats") or {}),
            explain=parse_explain(e.get("explain") or []),
        )
    return live


def parse_picks(data: dict) -> PicksData:
    history = data.get("entry_history") or {}
    return PicksData(
        active_chip=Chip.from_api(data.get("active_chip")),
        entry_history=EntryHistory(
            event=history.get("event", 0),
            points=history.get("points", 0),
            total_points=history.get("total_points", 0),
            bank=history.get("bank", 0),
            value=history.get("value", 0),
            event_transfers=history.get("event_transfers", 0),
            event_transfers_cost=history.get("event_transfers_cost", 0),
            points_on_bench=history.get("points_on_bench", 0),
        ),
        picks=[
            Pick(
                element=p["element"],
                position=p["position"],
                multiplier=p.get("multiplier", 0),
                is_captain=p.get("is_captain", False),
                is_vice_captain=p.get("is_vice_captain", False),
            )
            for p in data.get("picks", [])
        ],
    )


def parse_transfers(raw: list[dict]) -> list[Transfer]:
    return [
        Transfer(element_in=t["element_in"], element_out=t["element_out"], event=t.get("event", 0))
        for t in raw
    ]


def parse_standings(data: dict) -> LeagueStandings:
    standings = data.get("standings") or {}
    return LeagueStandings(
        name=(data.get("league") or {}).get("name") or "Unknown League",
        results=[
            StandingsRow(
                entry=s["entry"],
                rank=s.get("rank", 0),
                player_name=s.get("player_name", ""),
                entry_name=s.get("entry_name", ""),
                total=s.get("total", 0),
            )
            for s in standings.get("results", [])
        ],
        has_next=standings.get("has_next", False),
    )


# ---------------------------------------------------------------------------
# Loaders that degrade to a safe default when the upstream is unavailable
# ---------------------------------------------------------------------------

def load_bootstrap(client: httpx.Client, cache: TTLCache | None = None) -> Bootstrap:
    """Bootstrap snapshot through the shared cache; empty snapshot (GW1) on failure."""
    cache = cache or bootstrap_cache
    try:
        return cache.get_or_fetch("bootstrap", lambda: parse_bootstrap(fetch_bootstrap(client)))
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Bootstrap fetch failed, falling back to gameweek 1: %s", e)
        return Bootstrap()


def load_live(client: httpx.Client, event: int) -> dict[int, LiveElement] | None:
    try:
        return parse_live(fetch_live_gameweek(client, event))
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Live data for GW%s unavailable: %s", event, e)
        return None


def load_fixtures(client: httpx.Client, event: int) -> list[Fixture]:
    try:
        return parse_fixtures(fetch_fixtures(client, event))
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Fixtures for GW%s unavailable: %s", event, e)
        return []


def load_transfers(client: httpx.Client, entry_id: int) -> list[Transfer]:
    try:
        raw = fetch_transfers(client, entry_id)
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Transfers for entry %s unavailable: %s", entry_id, e)
        return []
    return parse_transfers(raw) if isinstance(raw, list) else []


def load_entry_history(client: httpx.Client, entry_id: int) -> list[dict]:
    """Per-gameweek rows of an entry's season history; empty on failure."""
    try:
        data = fetch_entry_history(client, entry_id)
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("History for entry %s unavailable: %s", entry_id, e)
        return []
    return list(data.get("current") or [])
