"""Projected automatic substitutions.

Applies FPL's end-of-gameweek rules to live data so the leaderboard can show
what the score will be once substitutions are processed:

- if the captain did not play, the vice-captain takes the captain's multiplier;
- a starter with no minutes whose matches are all over is replaced by the first
  bench player, in bench order, who played and keeps a legal formation.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import replace

from .models import Bootstrap, Chip, EnrichedPick, Fixture

logger = logging.getLogger(__name__)

GOALKEEPER = 1
MIN_PER_POSITION = {1: 1, 2: 3, 3: 2, 4: 1}


def _fixtures_done(element_id: int, bootstrap: Bootstrap, fixtures: list[Fixture]) -> bool:
    player = bootstrap.player(element_id)
    if player is None:
        return False
    team_fixtures = [f for f in fixtures if player.team in (f.team_h, f.team_a)]
    # Blank gameweek: nothing left to play
    return all(f.finished_provisional for f in team_fixtures)


def _valid_formation(starters: list[EnrichedPick], out: EnrichedPick, sub: EnrichedPick, bootstrap: Bootstrap) -> bool:
    def element_type(p: EnrichedPick) -> int:
        player = bootstrap.player(p.pick.element)
        return player.element_type if player else 0

    counts = Counter(element_type(p) for p in starters if p is not out)
    counts[element_type(sub)] += 1
    if counts[GOALKEEPER] != 1:
        return False
    return all(counts[pos] >= n for pos, n in MIN_PER_POSITION.items())


def apply_auto_subs(
    picks: list[EnrichedPick],
    bootstrap: Bootstrap,
    fixtures: list[Fixture],
    active_chip: Chip | None,
) -> tuple[list[EnrichedPick], list[tuple[int, int]]]:
    """Return (adjusted picks, [(element_out, element_in), ...]); inputs are not modified."""
    picks = [replace(p, pick=replace(p.pick)) for p in picks]

    captain = next((p for p in picks if p.pick.is_captain), None)
    vice = next((p for p in picks if p.pick.is_vice_captain), None)
    if (
        captain is not None
        and vice is not None
        and captain.minutes == 0
        and _fixtures_done(captain.pick.element, bootstrap, fixtures)
        and vice.minutes > 0
    ):
        vice.pick.multiplier = captain.pick.multiplier
        captain.pick.multiplier = 1

    if active_chip == Chip.BENCH_BOOST:
        return picks, []

    subs: list[tuple[int, int]] = []
    bench = sorted((p for p in picks if not p.pick.is_starter), key=lambda p: p.pick.position)
    starters = sorted((p for p in picks if p.pick.is_starter), key=lambda p: p.pick.position)
    for out in list(starters):
        if out.minutes > 0 or not _fixtures_done(out.pick.element, bootstrap, fixtures):
            continue
        out_player = bootstrap.player(out.pick.element)
        is_gk = out_player is not None and out_player.element_type == GOALKEEPER
        for sub in bench:
            sub_player = bootstrap.player(sub.pick.element)
            if sub.minutes == 0 or sub_player is None:
                continue
            if (sub_player.element_type == GOALKEEPER) != is_gk:
                continue
            if not _valid_formation(starters, out, sub, bootstrap):
                continue

            out.pick.position, sub.pick.position = sub.pick.position, out.pick.position
            sub.pick.multiplier = 1
            out.pick.multiplier = 0
            starters[starters.index(out)] = sub
            bench.remove(sub)
            subs.append((out.pick.element, sub.pick.element))
            logger.info("Auto-sub: %s out, %s in", out.element_name or out.pick.element,
                        sub.element_name or sub.pick.element)
            break

    picks.sort(key=lambda p: p.pick.position)
    return picks, subs
