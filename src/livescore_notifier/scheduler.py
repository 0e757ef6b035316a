import logging
from dataclasses import replace
from typing import Callable, List

from .models import Job

logger = logging.getLogger(__name__)

Sink = Callable[[str, str], None]


def make_job(title: str, subtitle: str, delay_minutes: int, now: int) -> Job:
    # -1 so a zero delay is already due on this run's flush
    return Job(post_on_or_after=now + 60 * delay_minutes - 1, title=title, subtitle=subtitle)


def schedule_job(queue: List[Job], title: str, subtitle: str, delay_minutes: int, now: int) -> List[Job]:
    """Return a new queue with the job appended."""
    return queue + [make_job(title, subtitle, delay_minutes, now)]


def due_jobs(queue: List[Job], now: int) -> List[Job]:
    return [job for job in queue if job.post_on_or_after <= now]


def flush(queue: List[Job], now: int, sink: Sink) -> List[Job]:
    """
    Deliver every job that is due and return the jobs still pending.

    The caller persists the returned queue only after the whole run
    succeeded, so a crash between delivery and save re-sends on the next run.
    """
    flushed = []
    for job in queue:
        if job.post_on_or_after <= now:
            sink(job.title, job.subtitle)
            job = replace(job, posted=True)
        flushed.append(job)

    posted = sum(1 for job in flushed if job.posted)
    if posted:
        logger.info(f"Posted {posted} notification(s), {len(flushed) - posted} still queued.")
    return [job for job in flushed if not job.posted]
