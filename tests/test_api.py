from __future__ import annotations

import httpx
import pytest

from fpl_live.api import (
    fetch_league_standings,
    load_bootstrap,
    load_entry_history,
    load_fixtures,
    load_live,
    load_transfers,
    parse_bootstrap,
    parse_fixtures,
    parse_live,
    parse_picks,
    parse_standings,
)
from fpl_live.cache import TTLCache
from fpl_live.models import Chip


# =============================================================================
# Parsers
# =============================================================================

def test_parse_bootstrap(upstream_payloads):
    bootstrap = parse_bootstrap(upstream_payloads["/bootstrap-static/"])
    assert bootstrap.current_event == 2
    assert bootstrap.player(11).name == "P11"
    assert bootstrap.player(11).avatar == "1011.png"
    assert bootstrap.player(1).element_type == 1
    assert bootstrap.team(2).name == "Chelsea"
    assert bootstrap.player(999) is None


def test_current_event_defaults_to_one():
    assert parse_bootstrap({"events": [{"id": 1, "is_current": False}]}).current_event == 1
    assert parse_bootstrap({}).current_event == 1


def test_parse_fixtures_splits_home_and_away(upstream_payloads):
    (fixture,) = parse_fixtures(upstream_payloads["/fixtures/"])
    assert fixture.finished_provisional
    assert fixture.minutes == 90
    bps = fixture.stats["bps"]
    assert [(v.element, v.value) for v in bps.home] == [(11, 40), (13, 20)]
    assert [(v.element, v.value) for v in bps.away] == [(5, 30), (2, 10)]


def test_parse_fixture_without_stats():
    (fixture,) = parse_fixtures([{"id": 3, "event": 2, "stats": None, "minutes": None}])
    assert fixture.stats == {}
    assert fixture.minutes == 0
    assert not fixture.finished_provisional


def test_parse_live(upstream_payloads):
    live = parse_live(upstream_payloads["/event/2/live/"])
    assert set(live) == set(range(1, 16))
    assert live[7].minutes == 90
    assert live[7].explain[0].fixture == 10
    assert live[7].explain[0].stat("minutes").points == 2


def test_parse_picks(upstream_payloads):
    data = parse_picks(upstream_payloads["/entry/102/event/2/picks/"])
    assert data.active_chip == Chip.BENCH_BOOST
    assert data.entry_history.value == 1000
    assert len(data.picks) == 15
    assert data.picks[0].is_captain and data.picks[0].multiplier == 2
    assert all(p.multiplier == 1 for p in data.picks[11:])


def test_unknown_chip_is_ignored():
    assert Chip.from_api("mystery") is None
    assert Chip.from_api(None) is None
    assert Chip.from_api("3xc") == Chip.TRIPLE_CAPTAIN


def test_parse_standings(upstream_payloads):
    standings = parse_standings(upstream_payloads["/leagues-classic/314/standings/"])
    assert standings.name == "Office League"
    assert [r.entry for r in standings.results] == [101, 102]
    assert standings.results[1].player_name == "Bob"


def test_standings_without_league_name():
    assert parse_standings({"standings": {"results": []}}).name == "Unknown League"


# =============================================================================
# Fetchers and degrading loaders
# =============================================================================

def test_standings_request_params():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        return httpx.Response(200, json={})

    client = httpx.Client(transport=httpx.MockTransport(handler), base_url="https://fpl.test/api")
    fetch_league_standings(client, 314, page=1, phase=3)
    assert seen[0].path == "/api/leagues-classic/314/standings/"
    assert seen[0].params["page_standings"] == "1"
    assert seen[0].params["phase"] == "3"


def test_standings_error_propagates(make_upstream):
    client = make_upstream({"/leagues-classic/314/standings/": 500})
    with pytest.raises(httpx.HTTPStatusError):
        fetch_league_standings(client, 314)


def test_bootstrap_is_cached(make_upstream):
    calls = []
    client = make_upstream(calls=calls)
    cache = TTLCache(ttl=60)
    load_bootstrap(client, cache)
    load_bootstrap(client, cache)
    assert calls.count("/bootstrap-static/") == 1


def test_bootstrap_failure_falls_back_to_gameweek_one(make_upstream):
    client = make_upstream({"/bootstrap-static/": 503})
    cache = TTLCache(ttl=60)
    bootstrap = load_bootstrap(client, cache)
    assert bootstrap.current_event == 1
    assert bootstrap.players == {}
    # Failures are retried on the next call
    assert cache.age("bootstrap") is None


def test_live_failure_returns_none(make_upstream):
    assert load_live(make_upstream({"/event/2/live/": 500}), 2) is None


def test_fixtures_failure_returns_empty(make_upstream):
    assert load_fixtures(make_upstream({"/fixtures/": 500}), 2) == []


def test_transfers_failure_returns_empty(make_upstream):
    assert load_transfers(make_upstream(), 555) == []


def test_transfers_non_list_payload_returns_empty(make_upstream):
    client = make_upstream({"/entry/101/transfers/": {"detail": "odd"}})
    assert load_transfers(client, 101) == []


def test_entry_history_rows(make_upstream):
    client = make_upstream({"/entry/7/history/": {"current": [{"event": 1, "points": 50}]}})
    assert load_entry_history(client, 7) == [{"event": 1, "points": 50}]
    assert load_entry_history(client, 8) == []
