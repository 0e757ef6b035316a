import logging
import time
from typing import Any, Dict, List, Optional

import requests

from .config import FOOTBALL_DATA_BASE_URL, DEFAULT_COMPETITION_ID
from .exceptions import ProviderError
from .models import Match

logger = logging.getLogger(__name__)


class FootballDataClient:
    def __init__(
        self,
        token: str = "",
        politeness_delay: float = 2,
        base_url: str = FOOTBALL_DATA_BASE_URL,
        competition_id: int = DEFAULT_COMPETITION_ID,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.competition_id = competition_id
        self.politeness_delay = politeness_delay
        self.headers = {"Accept": "application/json"}
        if token:
            self.headers["X-Auth-Token"] = token

        self.session = session or requests.Session()
        self.session.headers.update(self.headers)

    def fetch(self, endpoint: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """
        GET an endpoint once and decode the JSON body.

        Any failure is fatal for the run: no retry, no timeout.
        """
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.get(url, params=params)
        except requests.RequestException as e:
            raise ProviderError(f"Error encountered when downloading {endpoint}: {e}") from e

        if not response.ok:
            raise ProviderError(f"Error encountered when downloading {endpoint}: HTTP {response.status_code}")

        # Stay under the free tier rate limit
        time.sleep(self.politeness_delay)

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f"Error encountered when parsing response from {endpoint}") from e

    def get_live_matches(self) -> List[Match]:
        data = self.fetch(f"/competitions/{self.competition_id}/matches", params={"status": "LIVE"})
        if not isinstance(data, dict):
            raise ProviderError("Unexpected live matches payload")
        # Empty list when nothing is being played
        matches = data.get("matches") or []
        logger.debug(f"{len(matches)} live match(es) in competition {self.competition_id}")
        return [self._parse(m) for m in matches]

    def get_match(self, match_id: int) -> Match:
        data = self.fetch(f"/matches/{match_id}")
        if isinstance(data, dict) and "match" in data:
            data = data["match"]
        return self._parse(data)

    @staticmethod
    def _parse(data: Any) -> Match:
        try:
            return Match.from_api(data)
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise ProviderError(f"Could not parse match from response: {e}") from e
