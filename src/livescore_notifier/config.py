import os
from dataclasses import dataclass, field
from typing import List
from dotenv import load_dotenv

from .exceptions import ConfigError

load_dotenv()

# API Configuration
FOOTBALL_DATA_BASE_URL = "https://api.football-data.org/v4"
# See all competitions at https://api.football-data.org/v4/competitions
DEFAULT_COMPETITION_ID = 2018 # EURO 2020
COMPETITION_ID = os.getenv("COMPETITION_ID", str(DEFAULT_COMPETITION_ID)) # Validated in Settings.from_args

# Credentials / Destinations
FOOTBALL_DATA_TOKEN = os.getenv("FOOTBALL_DATA_TOKEN", "")
SLACK_WEBHOOK_URLS = [u.strip() for u in os.getenv("SLACK_WEBHOOK_URLS", "").split(",") if u.strip()]

# Timing
POLITENESS_DELAY_SECONDS = os.getenv("POLITENESS_DELAY_SECONDS", "2") # Held after every API call
NOTIFICATION_DELAY_MINUTES = os.getenv("NOTIFICATION_DELAY_MINUTES", "3") # 0 posts on the same run

# Persistence
DB_PATH = os.getenv("DB_PATH", "./db.json")

# Output Configuration
DRY_RUN = os.getenv("DRY_RUN", "False").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


@dataclass
class Settings:
    token: str = ""
    slack_urls: List[str] = field(default_factory=list)
    politeness_delay: float = 2.0
    delay_minutes: int = 3
    db_path: str = "./db.json"
    dry_run: bool = False
    competition_id: int = DEFAULT_COMPETITION_ID
    base_url: str = FOOTBALL_DATA_BASE_URL

    @classmethod
    def from_args(cls, args) -> "Settings":
        """Build settings from parsed CLI arguments, validating before any network call."""
        politeness_delay = _parse_number(args.sleep, float, "--sleep")
        delay_minutes = _parse_number(args.delay, int, "--delay")
        competition_id = _parse_number(args.competition, int, "--competition")

        settings = cls(
            token=args.token or "",
            slack_urls=list(args.slack or []),
            politeness_delay=politeness_delay,
            delay_minutes=delay_minutes,
            db_path=args.dbjson,
            dry_run=bool(args.dry),
            competition_id=competition_id,
        )
        settings.validate()
        return settings

    def validate(self):
        if not self.dry_run and not self.token:
            raise ConfigError("You have to specify your football-data.org API token via --token")
        if not self.dry_run and not self.slack_urls:
            raise ConfigError("You have to specify at least one slack address via --slack")
        if self.delay_minutes < 0:
            raise ConfigError("Delay has to be a non-negative integer")
        if self.politeness_delay < 0:
            raise ConfigError("Sleep has to be a non-negative number")
        if not self.db_path:
            raise ConfigError("--dbjson can not be empty")


def _parse_number(value, kind, option: str):
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid value for {option}: {value!r}")
