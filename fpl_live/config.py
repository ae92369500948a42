"""Runtime settings, read from environment variables with sensible defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

# Office team groups of the default league: label -> entry ids
DEFAULT_TEAM_GROUPS = "87:2195023,6293111,6291846;89:4565469,4550400,5005626;3T:6400474,3024127,6425684"


def parse_team_groups(raw: str) -> dict[str, list[int]]:
    """Parse ``"label:id,id;label:id"`` into a label -> entry ids mapping."""
    groups: dict[str, list[int]] = {}
    for chunk in raw.split(";"):
        chunk = chunk.strip()
        if not chunk:
            continue
        label, sep, ids = chunk.partition(":")
        if not sep or not label.strip():
            raise ValueError(f"Invalid team group {chunk!r}, expected 'label:id,id'")
        groups[label.strip()] = [int(s) for s in ids.split(",") if s.strip()]
    return groups


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    fpl_api_base_url: str = os.getenv("FPL_API_BASE_URL", "https://fantasy.premierleague.com/api")
    user_agent: str = os.getenv(
        "FPL_USER_AGENT", "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
    )
    request_timeout: float = float(os.getenv("FPL_REQUEST_TIMEOUT", "30"))

    bootstrap_cache_ttl: int = int(os.getenv("BOOTSTRAP_CACHE_TTL", "300"))  # 5 minutes
    # Per-manager fetches run in parallel with this many threads
    max_workers: int = int(os.getenv("FPL_MAX_WORKERS", "10"))

    default_league_id: int = int(os.getenv("FPL_DEFAULT_LEAGUE_ID", "314"))
    auto_subs: bool = _env_flag("FPL_LIVE_AUTO_SUBS")

    team_groups: dict[str, list[int]] = field(
        default_factory=lambda: parse_team_groups(os.getenv("FPL_TEAM_GROUPS", DEFAULT_TEAM_GROUPS))
    )
    # GW1 is a practice week for the office league
    team_weekly_start_gw: int = int(os.getenv("TEAM_WEEKLY_START_GW", "2"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def validate(self) -> bool:
        errors = []
        if self.max_workers < 1:
            errors.append("FPL_MAX_WORKERS must be at least 1")
        if self.bootstrap_cache_ttl < 0:
            errors.append("BOOTSTRAP_CACHE_TTL must not be negative")
        if self.request_timeout <= 0:
            errors.append("FPL_REQUEST_TIMEOUT must be positive")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")
        return True

    def __post_init__(self):
        self.validate()


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
