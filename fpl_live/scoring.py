from __future__ import annotations

from .models import Chip, EnrichedPick, ExplainEntry, LeagueEntry, LiveElement, Pick, PlayedInfo


def player_points(explain: list[ExplainEntry]) -> int:
    return sum(s.points or 0 for entry in explain for s in entry.stats)


def player_bonus(explain: list[ExplainEntry]) -> int:
    return sum(s.points or 0 for entry in explain for s in entry.stats if s.identifier == "bonus")


def _pick(p: Pick | EnrichedPick) -> Pick:
    return p.pick if isinstance(p, EnrichedPick) else p


def scoring_picks(picks: list, active_chip: Chip | None) -> list:
    """Picks whose points count: the whole squad under bench boost, else the XI."""
    if active_chip == Chip.BENCH_BOOST:
        return list(picks)
    return [p for p in picks if _pick(p).is_starter]


def gameweek_points(picks: list[EnrichedPick], transfer_cost: int, active_chip: Chip | None) -> int:
    """Squad score for the gameweek after multipliers and the transfer hit.

    The result may be negative when the hit outweighs the points scored.
    """
    total = sum(player_points(p.explain) * p.pick.multiplier for p in scoring_picks(picks, active_chip))
    return total - transfer_cost


def count_played(
    picks: list[Pick],
    live_by_id: dict[int, LiveElement] | None,
    active_chip: Chip | None,
) -> PlayedInfo:
    """How many weighted squad slots have a player who took the field.

    The captain counts for its multiplier's extra weight; if the captain did not
    play but the vice-captain did, the vice-captain earns that weight instead.
    """
    live_by_id = live_by_id or {}
    triple = active_chip == Chip.TRIPLE_CAPTAIN

    def minutes(pick: Pick | None) -> int:
        if pick is None:
            return 0
        live = live_by_id.get(pick.element)
        return live.minutes if live else 0

    played = 0
    for pick in scoring_picks(picks, active_chip):
        if minutes(pick) > 0:
            played += 1
            if pick.is_captain:
                played += 2 if triple else 1

    captain = next((p for p in picks if p.is_captain), None)
    vice = next((p for p in picks if p.is_vice_captain), None)
    if captain is not None and minutes(captain) == 0 and minutes(vice) > 0:
        played += 3 if triple else 2

    if active_chip == Chip.BENCH_BOOST:
        total = 16
    elif triple:
        total = 13
    else:
        total = 12
    return PlayedInfo(played=played, total=total)


def rank_entries(entries: list[LeagueEntry]) -> list[LeagueEntry]:
    """Sort by gameweek points and renumber ranks; ties keep their input order."""
    ranked = sorted(entries, key=lambda e: e.gw_point, reverse=True)
    for i, entry in enumerate(ranked, 1):
        entry.rank = i
    return ranked
