"""Live classic-league leaderboard.

Fetches one standings page, scores every manager's gameweek from live data
with provisional bonus, and re-ranks the league by that score.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import httpx

from .api import (
    fetch_league_standings,
    fetch_picks,
    load_bootstrap,
    load_fixtures,
    load_live,
    load_transfers,
    parse_picks,
    parse_standings,
)
from .autosubs import apply_auto_subs
from .bonus import allocate_fixture_bonus, merge_explain
from .config import Settings, get_settings
from .models import Bootstrap, Chip, EnrichedPick, Fixture, LeagueEntry, LiveElement, PicksData, StandingsRow
from .scoring import count_played, gameweek_points, player_bonus, player_points, rank_entries
from .teams import team_for_entry

logger = logging.getLogger(__name__)

# Transfers made under these chips are free and not shown
UNCOUNTED_TRANSFER_CHIPS = (Chip.WILDCARD, Chip.FREE_HIT)


class LeagueNotFound(LookupError):
    """The upstream has no classic league with the requested id."""


@dataclass
class GameweekContext:
    """Everything shared by the managers of one request, indexed by id."""
    event: int
    bootstrap: Bootstrap
    live: dict[int, LiveElement] | None
    fixtures: list[Fixture]
    fixtures_by_id: dict[int, Fixture]
    fixture_bonus: dict[int, dict[int, int]]


def load_context(client: httpx.Client, gameweek: int = 0) -> GameweekContext:
    bootstrap = load_bootstrap(client)
    event = gameweek if gameweek > 0 else bootstrap.current_event
    live = load_live(client, event)
    fixtures = load_fixtures(client, event)
    return GameweekContext(
        event=event,
        bootstrap=bootstrap,
        live=live,
        fixtures=fixtures,
        fixtures_by_id={f.id: f for f in fixtures},
        fixture_bonus=allocate_fixture_bonus(fixtures),
    )


def enrich_picks(picks_data: PicksData, ctx: GameweekContext) -> list[EnrichedPick]:
    enriched = []
    for pick in picks_data.picks:
        player = ctx.bootstrap.player(pick.element)
        team = ctx.bootstrap.team(player.team) if player else None
        live = ctx.live.get(pick.element) if ctx.live else None
        if live is not None:
            live = LiveElement(
                id=live.id,
                stats=dict(live.stats),
                explain=merge_explain(live.explain, ctx.fixture_bonus, live.id, ctx.fixtures_by_id),
            )
        enriched.append(EnrichedPick(
            pick=pick,
            element_name=player.name if player else None,
            avatar=player.avatar if player else None,
            club_name=team.name if team else None,
            live=live,
            points=player_points(live.explain) if live else 0,
            bonus=player_bonus(live.explain) if live else 0,
        ))
    return enriched


def gameweek_transfers(client: httpx.Client, entry_id: int, picks_data: PicksData, ctx: GameweekContext) -> list[dict]:
    if picks_data.active_chip in UNCOUNTED_TRANSFER_CHIPS or picks_data.entry_history.event_transfers <= 0:
        return []

    def name(element_id: int) -> str | None:
        player = ctx.bootstrap.player(element_id)
        return player.name if player else None

    return [
        {"element_in_name": name(t.element_in), "element_out_name": name(t.element_out)}
        for t in load_transfers(client, entry_id)
        if t.event == ctx.event
    ]


def score_entry(
    client: httpx.Client,
    row: StandingsRow,
    ctx: GameweekContext,
    settings: Settings,
) -> LeagueEntry:
    picks_data = parse_picks(fetch_picks(client, row.entry, ctx.event))
    chip = picks_data.active_chip
    picks = enrich_picks(picks_data, ctx)

    auto_subs: list[tuple[int, int]] = []
    if settings.auto_subs:
        picks, auto_subs = apply_auto_subs(picks, ctx.bootstrap, ctx.fixtures, chip)

    return LeagueEntry(
        rank=row.rank,
        manager=row.player_name,
        team_name=row.entry_name,
        total_point=row.total,
        entry=row.entry,
        gw_point=gameweek_points(picks, picks_data.entry_history.event_transfers_cost, chip),
        team=team_for_entry(row.entry, settings.team_groups),
        # Played counts reflect the squad as picked, before any projected subs
        played_info=count_played(picks_data.picks, ctx.live, chip),
        transfers=gameweek_transfers(client, row.entry, picks_data, ctx),
        active_chip=chip,
        entry_history=picks_data.entry_history,
        picks=picks,
        auto_subs=auto_subs,
    )


def build_leaderboard(
    client: httpx.Client,
    league_id: int,
    gameweek: int = 0,
    phase: int = 1,
    settings: Settings | None = None,
) -> dict:
    """Score and rank the first standings page of a classic league.

    Missing bootstrap, live or fixture data degrades to empty values; a failed
    standings or picks fetch fails the whole request.
    """
    settings = settings or get_settings()
    ctx = load_context(client, gameweek)
    try:
        raw_standings = fetch_league_standings(client, league_id, page=1, phase=phase)
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 404:
            raise LeagueNotFound(league_id) from e
        raise
    standings = parse_standings(raw_standings)
    logger.info("Scoring %d managers of league %s for GW%d", len(standings.results), league_id, ctx.event)

    with ThreadPoolExecutor(max_workers=settings.max_workers) as executor:
        entries = list(executor.map(lambda row: score_entry(client, row, ctx, settings), standings.results))

    return {
        "entries": [e.to_dict() for e in rank_entries(entries)],
        "leagueName": standings.name,
        "currentGW": ctx.bootstrap.current_event,
    }
