from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class Chip(str, Enum):
    BENCH_BOOST = "bboost"
    TRIPLE_CAPTAIN = "3xc"
    WILDCARD = "wildcard"
    FREE_HIT = "freehit"
    ASSISTANT_MANAGER = "manager"

    @classmethod
    def from_api(cls, raw: str | None) -> Chip | None:
        if not raw:
            return None
        try:
            return cls(raw)
        except ValueError:
            logger.warning("Unknown chip %r, scoring without it", raw)
            return None


class MatchStatus(str, Enum):
    NOT_STARTED = "not_started"
    PLAYING = "playing"
    SUBSTITUTE = "substitute"
    PLAYED = "played"
    UNKNOWN = "unknown"


@dataclass
class Team:
    id: int
    name: str


@dataclass
class Player:
    id: int
    name: str
    team: int
    element_type: int  # 1=GK, 2=DEF, 3=MID, 4=FWD
    code: int = 0

    @property
    def avatar(self) -> str:
        return f"{self.code}.png"


@dataclass
class Gameweek:
    id: int
    name: str
    finished: bool
    is_current: bool
    is_next: bool


@dataclass
class Bootstrap:
    events: list[Gameweek] = field(default_factory=list)
    players: dict[int, Player] = field(default_factory=dict)
    teams: dict[int, Team] = field(default_factory=dict)

    @property
    def current_event(self) -> int:
        current = next((gw for gw in self.events if gw.is_current), None)
        return current.id if current else 1

    def player(self, player_id: int) -> Player | None:
        return self.players.get(player_id)

    def team(self, team_id: int) -> Team | None:
        return self.teams.get(team_id)


@dataclass
class StatValue:
    element: int
    value: int


@dataclass
class FixtureStat:
    identifier: str
    home: list[StatValue] = field(default_factory=list)
    away: list[StatValue] = field(default_factory=list)


@dataclass
class Fixture:
    id: int
    event: int | None
    team_h: int
    team_a: int
    finished_provisional: bool = False
    minutes: int = 0
    stats: dict[str, FixtureStat] = field(default_factory=dict)


@dataclass
class ExplainStat:
    identifier: str
    points: int = 0
    value: int = 0
    points_modification: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ExplainEntry:
    fixture: int
    stats: list[ExplainStat] = field(default_factory=list)
    match_status: MatchStatus | None = None

    def stat(self, identifier: str) -> ExplainStat | None:
        return next((s for s in self.stats if s.identifier == identifier), None)

    @property
    def minutes(self) -> int:
        stat = self.stat("minutes")
        return stat.value if stat else 0

    def to_dict(self) -> dict:
        return {
            "fixture": self.fixture,
            "match_status": self.match_status.value if self.match_status else None,
            "stats": [s.to_dict() for s in self.stats],
        }


@dataclass
class LiveElement:
    id: int
    stats: dict = field(default_factory=dict)
    explain: list[ExplainEntry] = field(default_factory=list)

    @property
    def minutes(self) -> int:
        return self.stats.get("minutes", 0) or 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "stats": dict(self.stats),
            "explain": [e.to_dict() for e in self.explain],
        }


@dataclass
class Pick:
    element: int
    position: int  # 1-11 starting XI, 12-15 bench in priority order
    multiplier: int
    is_captain: bool = False
    is_vice_captain: bool = False

    @property
    def is_starter(self) -> bool:
        return self.position <= 11


@dataclass
class EntryHistory:
    event: int = 0
    points: int = 0
    total_points: int = 0
    bank: int = 0
    value: int = 0
    event_transfers: int = 0
    event_transfers_cost: int = 0
    points_on_bench: int = 0


@dataclass
class PicksData:
    active_chip: Chip | None
    entry_history: EntryHistory
    picks: list[Pick]


@dataclass
class Transfer:
    element_in: int
    element_out: int
    event: int


@dataclass
class StandingsRow:
    entry: int
    rank: int
    player_name: str
    entry_name: str
    total: int


@dataclass
class LeagueStandings:
    name: str
    results: list[StandingsRow] = field(default_factory=list)
    has_next: bool = False


@dataclass
class PlayedInfo:
    played: int
    total: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class EnrichedPick:
    pick: Pick
    element_name: str | None = None
    avatar: str | None = None
    club_name: str | None = None
    live: LiveElement | None = None
    points: int = 0
    bonus: int = 0

    @property
    def explain(self) -> list[ExplainEntry]:
        return self.live.explain if self.live else []

    @property
    def minutes(self) -> int:
        return self.live.minutes if self.live else 0

    def to_dict(self) -> dict:
        return {
            "element": self.pick.element,
            "position": self.pick.position,
            "multiplier": self.pick.multiplier,
            "is_captain": self.pick.is_captain,
            "is_vice_captain": self.pick.is_vice_captain,
            "elementName": self.element_name,
            "avatar": self.avatar,
            "clubName": self.club_name,
            "points": self.points,
            "bonus": self.bonus,
            "liveData": self.live.to_dict() if self.live else None,
        }


@dataclass
class LeagueEntry:
    rank: int
    manager: str
    team_name: str
    total_point: int
    entry: int
    gw_point: int = 0
    team: str | None = None
    played_info: PlayedInfo = field(default_factory=lambda: PlayedInfo(0, 12))
    transfers: list[dict] = field(default_factory=list)
    active_chip: Chip | None = None
    entry_history: EntryHistory = field(default_factory=EntryHistory)
    picks: list[EnrichedPick] = field(default_factory=list)
    auto_subs: list[tuple[int, int]] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "rank": self.rank,
            "manager": self.manager,
            "teamName": self.team_name,
            "totalPoint": self.total_point,
            "entry": self.entry,
            "gwPoint": self.gw_point,
            "team": self.team,
            "playedInfo": self.played_info.to_dict(),
            "transfers": list(self.transfers),
            "activeChip": self.active_chip.value if self.active_chip else None,
            "entryHistory": {
                "transferCost": self.entry_history.event_transfers_cost,
                "bank": self.entry_history.bank,
                "value": self.entry_history.value,
            },
            "picks": [p.to_dict() for p in self.picks],
            "autoSubs": [{"element_out": o, "element_in": i} for o, i in self.auto_subs],
        }
