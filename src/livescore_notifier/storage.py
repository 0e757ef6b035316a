import json
import logging
import os
import tempfile
from pathlib import Path

from .exceptions import StorageError
from .models import Document

logger = logging.getLogger(__name__)


class Storage:
    """
    The whole state lives in one JSON document:

        {
          "latest":    [ ... ],                    # matches from the previous run
          "scheduled": {"1234": {"kickoff": 1}},   # events already queued, per match id
          "queue":     [{"post_on_or_after": 1623650171, "title": "...", "subtitle": "..."}]
        }

    One process owns a document at a time; run concurrent instances with
    different paths.
    """

    def __init__(self, db_path: str = "./db.json"):
        self.db_path = Path(db_path)

    def load(self) -> Document:
        if not self.db_path.exists():
            logger.debug(f"No state at {self.db_path}, starting fresh.")
            return Document()

        try:
            data = json.loads(self.db_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageError(f"Could not decode existing {self.db_path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageError(f"Could not decode existing {self.db_path}: expected an object")

        try:
            return Document.from_dict(data)
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise StorageError(f"Malformed document in {self.db_path}: {e}") from e

    def save(self, document: Document):
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        # Write next to the target and rename so a crash never leaves half a file
        fd, tmp_path = tempfile.mkstemp(dir=self.db_path.parent, prefix=".db-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document.to_dict(), f)
            os.replace(tmp_path, self.db_path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageError(f"Could not write {self.db_path}: {e}") from e
        logger.debug(f"Saved state to {self.db_path}")
