from __future__ import annotations

import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from .api import bootstrap_cache, make_client
from .config import get_settings
from .league import LeagueNotFound, build_leaderboard
from .teams import build_team_weekly

logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app, send_wildcard=True)


class BadRequest(ValueError):
    pass


def _int_arg(name: str, default: int, minimum: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise BadRequest(f"{name} must be an integer") from None
    if value < minimum:
        raise BadRequest(f"{name} must be at least {minimum}")
    return value


@app.route("/api/cache-status")
def api_cache_status():
    """Return bootstrap cache age for the frontend freshness indicator."""
    age = bootstrap_cache.age("bootstrap")
    return jsonify({"age": int(age) if age is not None else -1, "ttl": bootstrap_cache.ttl})


@app.route("/api/leaderboard")
def api_leaderboard():
    """Live league table ranked by computed gameweek points."""
    settings = get_settings()
    try:
        league_id = _int_arg("leagueId", settings.default_league_id, 1)
        gameweek = _int_arg("gw", 0, 0)
        phase = _int_arg("phase", 1, 1)
    except BadRequest as e:
        return jsonify({"error": str(e)}), 400

    try:
        with make_client(settings) as client:
            data = build_leaderboard(client, league_id, gameweek=gameweek, phase=phase, settings=settings)
        return jsonify(data)
    except LeagueNotFound:
        return jsonify({"error": "League not found"}), 404
    except Exception:
        logger.exception("Error building leaderboard for league %s", league_id)
        return jsonify({"error": "Failed to fetch leaderboard data"}), 500


@app.route("/api/team-weekly")
def api_team_weekly():
    """Week-by-week win/loss records of the office team groups."""
    settings = get_settings()
    try:
        with make_client(settings) as client:
            return jsonify(build_team_weekly(client, settings))
    except Exception:
        logger.exception("Error calculating team weekly results")
        return jsonify({"error": "Failed to calculate team weekly results"}), 500
