import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .formatting import make_title, make_subtitle, make_kickoff_subtitle
from .models import (
    Document,
    Duration,
    Job,
    Ledger,
    LedgerEntry,
    Match,
    MatchStatus,
)
from .scheduler import schedule_job

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransitionRule:
    flag: str
    subtitle: str
    applies: Callable[[Match, LedgerEntry], bool]


def _paused(match: Match) -> bool:
    return match.status is MatchStatus.PAUSED


def _in_play(match: Match, duration: Duration) -> bool:
    if match.status is MatchStatus.IN_PLAY:
        return match.score.duration is duration
    # v4 may report the phase as the status itself
    return match.status.value == duration.value


# Order matters: the first rule that applies and whose flag is unset wins.
# "In play" covers IN_PLAY with score.duration set, and the EXTRA_TIME /
# PENALTY_SHOOTOUT statuses some feeds report instead.
TRANSITION_RULES: Tuple[TransitionRule, ...] = (
    TransitionRule(
        "end_of_first",
        "End of first half",
        lambda m, e: _paused(m),
    ),
    TransitionRule(
        "end_of_et1",
        "End of first period of extra time",
        lambda m, e: _paused(m) and e.is_set("start_of_et1") and not e.is_set("start_of_et2"),
    ),
    TransitionRule(
        "end_of_et2",
        "End of second period of extra time",
        lambda m, e: _paused(m) and e.is_set("start_of_et2"),
    ),
    TransitionRule(
        "start_of_second",
        "Second half begins",
        lambda m, e: _in_play(m, Duration.REGULAR),
    ),
    TransitionRule(
        "start_of_et1",
        "First period of extra time begins",
        lambda m, e: _in_play(m, Duration.EXTRA_TIME),
    ),
    TransitionRule(
        "start_of_et2",
        "Second period of extra time begins",
        lambda m, e: _in_play(m, Duration.EXTRA_TIME) and e.is_set("start_of_et1"),
    ),
    TransitionRule(
        "start_of_pk",
        "Penalty shootout begins",
        lambda m, e: _in_play(m, Duration.PENALTY_SHOOTOUT),
    ),
)


def match_transition(match: Match, entry: LedgerEntry) -> Optional[TransitionRule]:
    """Return the first rule that fires for a match whose status changed, if any."""
    for rule in TRANSITION_RULES:
        if not entry.is_set(rule.flag) and rule.applies(match, entry):
            return rule
    return None


@dataclass
class Reconciliation:
    ledger: Ledger
    jobs: List[Job] = field(default_factory=list)


def find_departed(live: Iterable[Match], document: Document) -> List[int]:
    """Ids of stored matches that are no longer in the live set."""
    live_ids = {m.id for m in live}
    return [m.id for m in document.latest if m.id not in live_ids]


def reconcile(
    live: List[Match],
    document: Document,
    departed: Iterable[Match] = (),
    *,
    now: int,
    delay_minutes: int,
) -> Reconciliation:
    """
    Compare a fresh live snapshot against the stored document.

    `departed` holds the individually fetched details of matches that left
    the live set. The document is left untouched; the returned ledger is a
    copy with the newly scheduled events marked.
    """
    ledger: Ledger = {match_id: entry.copy() for match_id, entry in document.scheduled.items()}
    stored_by_id: Dict[int, Match] = {m.id: m for m in document.latest}
    jobs: List[Job] = []

    def entry_for(match_id: int) -> LedgerEntry:
        return ledger.get(match_id, LedgerEntry())

    def mark(match_id: int, entry: LedgerEntry, key: str):
        entry.mark(key)
        ledger[match_id] = entry

    def schedule(title: str, subtitle: str):
        nonlocal jobs
        logger.info(f"Scheduling: {title} | {subtitle}")
        jobs = schedule_job(jobs, title, subtitle, delay_minutes, now)

    for live_match in live:
        db_match = stored_by_id.get(live_match.id)
        entry = entry_for(live_match.id)

        if db_match is None:
            # Just started
            if not entry.is_set("kickoff"):
                schedule(make_title(live_match, hide_score=True), make_kickoff_subtitle(live_match))
                mark(live_match.id, entry, "kickoff")
            continue

        if live_match.status_name != db_match.status_name:
            rule = match_transition(live_match, entry)
            if rule:
                schedule(make_title(live_match), rule.subtitle)
                mark(live_match.id, entry, rule.flag)
            else:
                logger.debug(
                    f"Match {live_match.id}: {db_match.status_name} -> {live_match.status_name}, nothing to post"
                )
            continue

        if live_match.score != db_match.score:
            schedule(make_title(live_match), make_subtitle(live_match, db_match))

    for finished_match in departed:
        key = finished_match.ledger_key
        entry = entry_for(finished_match.id)
        if not entry.is_set(key):
            schedule(make_title(finished_match), f"Game {key}")
            mark(finished_match.id, entry, key)

    return Reconciliation(ledger=ledger, jobs=jobs)
