import json
import logging
from datetime import datetime
from typing import Callable, Optional

import pytz

from .client import FootballDataClient
from .config import Settings
from .engine import find_departed, reconcile
from .models import Document
from .notifications import ConsoleSink, SlackWebhookSink
from .scheduler import Sink, flush
from .storage import Storage

logger = logging.getLogger(__name__)


def utc_now() -> int:
    return int(datetime.now(pytz.utc).timestamp())


class Monitor:
    """One polling pass: load, fetch, diff, flush, save."""

    def __init__(
        self,
        settings: Settings,
        client: Optional[FootballDataClient] = None,
        storage: Optional[Storage] = None,
        sink: Optional[Sink] = None,
        clock: Callable[[], int] = utc_now,
    ):
        self.settings = settings
        self.client = client or FootballDataClient(
            token=settings.token,
            politeness_delay=settings.politeness_delay,
            base_url=settings.base_url,
            competition_id=settings.competition_id,
        )
        self.storage = storage or Storage(settings.db_path)
        if sink is None:
            sink = ConsoleSink() if settings.dry_run else SlackWebhookSink(settings.slack_urls)
        self.sink = sink
        self.clock = clock

    def run(self) -> Document:
        document = self.storage.load()

        live = self.client.get_live_matches()

        departed_ids = find_departed(live, document)
        # Finished, postponed or canceled: ask for the final state one by one
        departed = [self.client.get_match(match_id) for match_id in departed_ids]

        now = self.clock()
        result = reconcile(
            live,
            document,
            departed,
            now=now,
            delay_minutes=self.settings.delay_minutes,
        )

        queue = document.queue + result.jobs
        remaining = flush(queue, self.clock(), self.sink)

        new_document = Document(latest=live, scheduled=result.ledger, queue=remaining)

        summary = (
            f"{len(live)} live, {len(departed)} departed, {len(result.jobs)} new job(s), "
            f"{len(queue) - len(remaining)} posted, {len(remaining)} pending."
        )
        # Quiet runs stay silent
        if queue:
            logger.info(summary)
        else:
            logger.debug(summary)

        if self.settings.dry_run:
            print(json.dumps(new_document.to_dict(), indent=2, ensure_ascii=False))
            print()
        else:
            self.storage.save(new_document)

        return new_document
