import logging
from typing import List, Optional, Tuple

import requests

from .formatting import format_slack_text

logger = logging.getLogger(__name__)


class SlackWebhookSink:
    """
    Posts notifications to one or more Slack incoming webhooks.

    Each destination gets a single attempt. A failing destination is logged
    and recorded in `failures`; the others are still posted to.
    """

    def __init__(self, urls: List[str], session: Optional[requests.Session] = None):
        self.urls = list(urls)
        self.session = session or requests.Session()
        self.failures: List[Tuple[str, str]] = []

    def __call__(self, title: str, subtitle: str):
        payload = {"text": format_slack_text(title, subtitle)}
        for url in self.urls:
            try:
                response = self.session.post(url, json=payload)
            except requests.RequestException as e:
                self._failed(url, str(e))
                continue

            if not response.ok:
                self._failed(url, f"HTTP {response.status_code}: {response.text}")

    def _failed(self, url: str, reason: str):
        # Webhook URLs are secrets, log the host only
        host = url.split("//")[-1].split("/")[0]
        logger.error(f"Failed to post to Slack webhook on {host}: {reason}")
        self.failures.append((url, reason))


class ConsoleSink:
    """Dry-run destination: prints instead of posting."""

    def __call__(self, title: str, subtitle: str):
        print("-" * 30)
        print(title)
        print(subtitle)
