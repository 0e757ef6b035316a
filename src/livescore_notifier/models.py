import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any, Set

logger = logging.getLogger(__name__)


class MatchStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    TIMED = "TIMED"
    IN_PLAY = "IN_PLAY"
    PAUSED = "PAUSED"
    EXTRA_TIME = "EXTRA_TIME"
    PENALTY_SHOOTOUT = "PENALTY_SHOOTOUT"
    FINISHED = "FINISHED"
    SUSPENDED = "SUSPENDED"
    POSTPONED = "POSTPONED"
    CANCELED = "CANCELED"
    CANCELLED = "CANCELLED" # v4 spelling
    AWARDED = "AWARDED"
    UNKNOWN = "UNKNOWN" # anything not listed above, raw value kept on Match.status_text

    @classmethod
    def parse(cls, value: str) -> "MatchStatus":
        try:
            return cls(value)
        except ValueError:
            logger.warning(f"Unknown match status {value!r}")
            return cls.UNKNOWN


class Duration(str, Enum):
    REGULAR = "REGULAR"
    EXTRA_TIME = "EXTRA_TIME"
    PENALTY_SHOOTOUT = "PENALTY_SHOOTOUT"


# Events that happen while a match is live
TRANSITION_KEYS = (
    "kickoff",
    "end_of_first",
    "start_of_second",
    "start_of_et1",
    "end_of_et1",
    "start_of_et2",
    "end_of_et2",
    "start_of_pk",
)

# A match leaving the live set is recorded under its status, e.g. "finished"
STATUS_LEDGER_KEYS: Dict[MatchStatus, str] = {
    MatchStatus.SCHEDULED: "scheduled",
    MatchStatus.TIMED: "timed",
    MatchStatus.IN_PLAY: "in_play",
    MatchStatus.PAUSED: "paused",
    MatchStatus.EXTRA_TIME: "extra_time",
    MatchStatus.PENALTY_SHOOTOUT: "penalty_shootout",
    MatchStatus.FINISHED: "finished",
    MatchStatus.SUSPENDED: "suspended",
    MatchStatus.POSTPONED: "postponed",
    MatchStatus.CANCELED: "canceled",
    MatchStatus.CANCELLED: "cancelled",
    MatchStatus.AWARDED: "awarded",
}

# Status keys for statuses we do not know are derived from the raw value
LEDGER_KEY_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_]*$")


@dataclass(frozen=True)
class Goals:
    home: Optional[int] = None
    away: Optional[int] = None

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> Optional["Goals"]:
        if data is None:
            return None
        return cls(home=data.get("home"), away=data.get("away"))

    def to_dict(self) -> Dict[str, Any]:
        return {"home": self.home, "away": self.away}


@dataclass(frozen=True)
class Score:
    duration: Duration = Duration.REGULAR
    winner: Optional[str] = None
    full_time: Goals = field(default_factory=Goals)
    half_time: Goals = field(default_factory=Goals)
    penalties: Optional[Goals] = None

    @property
    def has_penalties(self) -> bool:
        # 0 is a valid count once the shootout has started
        return self.penalties is not None and self.penalties.home is not None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Score":
        return cls(
            duration=Duration(data.get("duration") or Duration.REGULAR.value),
            winner=data.get("winner"),
            full_time=Goals.from_api(data.get("fullTime")) or Goals(),
            half_time=Goals.from_api(data.get("halfTime")) or Goals(),
            penalties=Goals.from_api(data.get("penalties")),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "winner": self.winner,
            "duration": self.duration.value,
            "fullTime": self.full_time.to_dict(),
            "halfTime": self.half_time.to_dict(),
        }
        if self.penalties is not None:
            data["penalties"] = self.penalties.to_dict()
        return data


@dataclass(frozen=True)
class Match:
    id: int
    status: MatchStatus
    home_team: str
    away_team: str
    score: Score = field(default_factory=Score)
    stage: Optional[str] = None
    group: Optional[str] = None
    matchday: Optional[int] = None
    status_text: Optional[str] = None

    @property
    def status_name(self) -> str:
        return self.status_text or self.status.value

    @property
    def ledger_key(self) -> str:
        """Ledger flag recorded when the match leaves the live set."""
        if self.status in STATUS_LEDGER_KEYS:
            return STATUS_LEDGER_KEYS[self.status]
        return re.sub(r"[^a-z0-9]+", "_", self.status_name.lower()).strip("_") or "unknown"

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Match":
        """
        Parse a match object as returned by football-data.org.
        Raises KeyError / ValueError / TypeError on a malformed record.
        """
        return cls(
            id=int(data["id"]),
            status=MatchStatus.parse(data["status"]),
            home_team=(data.get("homeTeam") or {}).get("name") or "",
            away_team=(data.get("awayTeam") or {}).get("name") or "",
            score=Score.from_api(data.get("score") or {}),
            stage=data.get("stage"),
            group=data.get("group"),
            matchday=data.get("matchday"),
            status_text=str(data["status"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "status": self.status_name,
            "stage": self.stage,
            "group": self.group,
            "matchday": self.matchday,
            "homeTeam": {"name": self.home_team},
            "awayTeam": {"name": self.away_team},
            "score": self.score.to_dict(),
        }


class LedgerEntry:
    """
    Events already scheduled for one match. Flags are only ever added,
    so each (match, event) pair is posted at most once.
    """

    def __init__(self, flags: Optional[Set[str]] = None):
        self._flags: Set[str] = set()
        for key in flags or ():
            self.mark(key)

    def is_set(self, key: str) -> bool:
        return key in self._flags

    def mark(self, key: str):
        if not isinstance(key, str) or not LEDGER_KEY_PATTERN.match(key):
            raise ValueError(f"Invalid ledger key: {key!r}")
        self._flags.add(key)

    @property
    def flags(self) -> Set[str]:
        return set(self._flags)

    def copy(self) -> "LedgerEntry":
        return LedgerEntry(self._flags)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LedgerEntry":
        return cls({key for key, value in data.items() if value})

    def to_dict(self) -> Dict[str, int]:
        return {key: 1 for key in sorted(self._flags)}

    def __eq__(self, other):
        if not isinstance(other, LedgerEntry):
            return NotImplemented
        return self._flags == other._flags

    def __repr__(self):
        return f"LedgerEntry({sorted(self._flags)})"


Ledger = Dict[int, LedgerEntry]


@dataclass
class Job:
    post_on_or_after: int # epoch seconds
    title: str
    subtitle: str
    posted: bool = False # only used while flushing, never persisted

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Job":
        return cls(
            post_on_or_after=int(data["post_on_or_after"]),
            title=data["title"],
            subtitle=data.get("subtitle") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "post_on_or_after": self.post_on_or_after,
            "title": self.title,
            "subtitle": self.subtitle,
        }


@dataclass
class Document:
    latest: List[Match] = field(default_factory=list)
    scheduled: Ledger = field(default_factory=dict)
    queue: List[Job] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Document":
        return cls(
            latest=[Match.from_api(m) for m in data.get("latest") or []],
            scheduled={
                int(match_id): LedgerEntry.from_dict(flags)
                for match_id, flags in (data.get("scheduled") or {}).items()
            },
            queue=[Job.from_dict(j) for j in data.get("queue") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "latest": [m.to_dict() for m in self.latest],
            "scheduled": {str(match_id): entry.to_dict() for match_id, entry in self.scheduled.items()},
            "queue": [j.to_dict() for j in self.queue],
        }
