"""Provisional bonus points and per-fixture match status.

FPL awards 3/2/1 bonus points to the top three BPS scores of a match, but only
confirms them some time after the final whistle. Until then the live explain
data carries no ``bonus`` stat, so it is derived here from the fixture's BPS
table and folded into each player's explain breakdown.
"""

from __future__ import annotations

from dataclasses import replace

from .models import ExplainEntry, ExplainStat, Fixture, MatchStatus

BONUS_BY_RANK = {1: 3, 2: 2, 3: 1}


def allocate_bonus(fixture: Fixture) -> dict[int, int]:
    """Map player id -> provisional bonus for one fixture.

    Tied BPS values share their rank's award and push the next group down by
    the size of the tie, so two players tied first both get 3 and the next
    score is ranked third.
    """
    bps = fixture.stats.get("bps")
    if bps is None:
        return {}

    ranked = sorted(bps.home + bps.away, key=lambda v: v.value, reverse=True)
    bonus: dict[int, int] = {}
    rank = 1
    i = 0
    while i < len(ranked) and rank <= 3:
        group = [v for v in ranked[i:] if v.value == ranked[i].value]
        for v in group:
            bonus[v.element] = bonus.get(v.element, 0) + BONUS_BY_RANK[rank]
        i += len(group)
        rank += len(group)
    return bonus


def allocate_fixture_bonus(fixtures: list[Fixture]) -> dict[int, dict[int, int]]:
    return {f.id: allocate_bonus(f) for f in fixtures}


def classify_match_status(entry: ExplainEntry, fixture: Fixture | None) -> MatchStatus:
    if fixture is None:
        return MatchStatus.UNKNOWN
    played = entry.minutes > 0
    if not fixture.finished_provisional:
        if fixture.minutes == 0:
            return MatchStatus.NOT_STARTED
        if fixture.minutes < 90:
            return MatchStatus.PLAYING if played else MatchStatus.SUBSTITUTE
        return MatchStatus.UNKNOWN
    return MatchStatus.PLAYED if played else MatchStatus.SUBSTITUTE


def merge_explain(
    explain: list[ExplainEntry],
    fixture_bonus: dict[int, dict[int, int]],
    element_id: int,
    fixtures: dict[int, Fixture],
) -> list[ExplainEntry]:
    """Return a copy of ``explain`` with match status and provisional bonus added.

    A fixture that already reports a ``bonus`` stat is left as it is.
    """
    merged = []
    for entry in explain:
        stats = list(entry.stats)
        awarded = fixture_bonus.get(entry.fixture, {}).get(element_id, 0)
        if awarded and entry.stat("bonus") is None:
            stats.append(ExplainStat(identifier="bonus", points=awarded, value=awarded, points_modification=0))
        merged_entry = replace(entry, stats=stats)
        merged_entry.match_status = classify_match_status(merged_entry, fixtures.get(entry.fixture))
        merged.append(merged_entry)
    return merged
