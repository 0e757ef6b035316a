from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .flags import flag_for
from .models import Match, Goals


class ChangeKind(Enum):
    GOAL = "goal"
    DISALLOWED = "disallowed"
    # Both sides moved, or one side jumped by more than one between polls
    INDETERMINATE = "indeterminate"


@dataclass(frozen=True)
class ScoreChange:
    kind: ChangeKind
    team: Optional[str] = None


INDETERMINATE = ScoreChange(ChangeKind.INDETERMINATE)


def _count(value: Optional[int]) -> str:
    return "" if value is None else str(value)


def make_title(match: Match, hide_score: bool = False) -> str:
    home_flag = flag_for(match.home_team)
    away_flag = flag_for(match.away_team)

    full_time = match.score.full_time
    if hide_score:
        score = "-"
    elif match.score.has_penalties:
        penalties = match.score.penalties
        score = (
            f"{_count(full_time.home)} ({_count(penalties.home)}) - "
            f"({_count(penalties.away)}) {_count(full_time.away)}"
        )
    else:
        score = f"{_count(full_time.home)} - {_count(full_time.away)}"

    return f"{home_flag} {match.home_team} {score} {match.away_team} {away_flag}"


def make_kickoff_subtitle(match: Match) -> str:
    if match.group and match.matchday:
        return f"Kickoff - {match.group} Matchday {match.matchday}"
    stage = (match.stage or "").replace("_", " ").lower().capitalize()
    return f"Kickoff - {stage}"


def _side_change(live: int, stored: int, team: str) -> Optional[ScoreChange]:
    if live == stored + 1:
        return ScoreChange(ChangeKind.GOAL, team)
    if live == stored - 1:
        return ScoreChange(ChangeKind.DISALLOWED, team)
    return None


def diff_score(live_match: Match, db_match: Match) -> ScoreChange:
    """
    Work out which side's count moved between two snapshots of the same match.

    During a shootout the penalty counts are compared, otherwise full time
    goals. Only a single side moving by exactly one is attributed; anything
    else is INDETERMINATE.
    """
    if live_match.score.has_penalties:
        live = live_match.score.penalties
        # The stored snapshot may predate the first kick
        stored = db_match.score.penalties or Goals()
    else:
        live = live_match.score.full_time
        stored = db_match.score.full_time

    live_home, live_away = live.home or 0, live.away or 0
    db_home, db_away = stored.home or 0, stored.away or 0

    change = None
    if live_home == db_home:
        change = _side_change(live_away, db_away, live_match.away_team)
    elif live_away == db_away:
        change = _side_change(live_home, db_home, live_match.home_team)
    return change or INDETERMINATE


def render_change(change: ScoreChange) -> str:
    if change.kind is ChangeKind.GOAL:
        return f":soccer: {change.team} scored!"
    if change.kind is ChangeKind.DISALLOWED:
        return f":x: {change.team} goal disallowed!!"
    return ""


def make_subtitle(live_match: Match, db_match: Match) -> str:
    return render_change(diff_score(live_match, db_match))


def format_slack_text(title: str, subtitle: str) -> str:
    text = f"*{title}*"
    if subtitle:
        text += f"\n> {subtitle}"
    return text
