import argparse
import logging
import sys
from typing import List, Optional

from . import config
from .config import Settings
from .exceptions import ConfigError, NotifierError
from .monitor import Monitor

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="livescore-notifier",
        description="Download live game status from football-data.org and post it to Slack.",
    )
    parser.add_argument(
        "--token",
        default=config.FOOTBALL_DATA_TOKEN,
        help="football-data.org API token (or set FOOTBALL_DATA_TOKEN)",
    )
    parser.add_argument(
        "--slack",
        action="append",
        help="Slack incoming webhook URL, repeat to post to several workspaces (or set SLACK_WEBHOOK_URLS)",
    )
    parser.add_argument(
        "--sleep",
        default=config.POLITENESS_DELAY_SECONDS,
        help="Seconds to wait after every API call (default: 2)",
    )
    parser.add_argument(
        "--delay",
        default=config.NOTIFICATION_DELAY_MINUTES,
        help="Minutes to hold a notification before posting it, 0 for no delay (default: 3)",
    )
    parser.add_argument(
        "--dbjson",
        default=config.DB_PATH,
        help="State file, use one per running instance (default: ./db.json)",
    )
    parser.add_argument(
        "--competition",
        default=config.COMPETITION_ID,
        help="football-data.org competition id (default: 2018, EURO 2020)",
    )
    parser.add_argument(
        "--dry",
        action="store_true",
        default=config.DRY_RUN,
        help="Don't post to Slack, don't write the state file; print everything instead",
    )
    parser.add_argument(
        "--log-level",
        default=config.LOG_LEVEL,
        help="Logging level (default: INFO)",
    )
    return parser


def configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if not args.slack:
        args.slack = config.SLACK_WEBHOOK_URLS
    configure_logging(args.log_level)

    try:
        settings = Settings.from_args(args)
    except ConfigError as e:
        logger.error(str(e))
        return 2

    try:
        Monitor(settings).run()
    except NotifierError as e:
        logger.error(f"Fatal error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
