import pytest

from livescore_notifier.models import Match, Document


def api_match(
    match_id=42,
    status="IN_PLAY",
    home="France",
    away="Germany",
    home_goals=0,
    away_goals=0,
    duration="REGULAR",
    penalties=None,
    group="GROUP_A",
    matchday=1,
    stage="GROUP_STAGE",
):
    """Build a match payload shaped like football-data.org's."""
    score = {
        "winner": None,
        "duration": duration,
        "fullTime": {"home": home_goals, "away": away_goals},
        "halfTime": {"home": None, "away": None},
    }
    if penalties is not None:
        score["penalties"] = {"home": penalties[0], "away": penalties[1]}
    return {
        "id": match_id,
        "status": status,
        "stage": stage,
        "group": group,
        "matchday": matchday,
        "homeTeam": {"id": 1, "name": home},
        "awayTeam": {"id": 2, "name": away},
        "score": score,
    }


@pytest.fixture
def make_match():
    def _make(**kwargs):
        return Match.from_api(api_match(**kwargs))
    return _make


@pytest.fixture
def empty_document():
    return Document()


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "data" / "db.json")
