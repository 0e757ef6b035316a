import json
from unittest.mock import MagicMock

import pytest

from livescore_notifier.config import Settings
from livescore_notifier.exceptions import ProviderError
from livescore_notifier.models import Document, Job, LedgerEntry
from livescore_notifier.monitor import Monitor
from livescore_notifier.storage import Storage

T = 1623650000


@pytest.fixture
def mock_client():
    return MagicMock()


@pytest.fixture
def sink():
    return MagicMock()


def make_monitor(settings, client, sink, db_path, now=T):
    return Monitor(settings, client=client, storage=Storage(db_path), sink=sink, clock=lambda: now)


def test_kickoff_is_queued_then_posted(make_match, mock_client, sink, db_path):
    settings = Settings(token="t", slack_urls=["https://hooks.example/x"], delay_minutes=3, db_path=db_path)
    mock_client.get_live_matches.return_value = [make_match(match_id=42, group="A", matchday=1)]

    make_monitor(settings, mock_client, sink, db_path, now=T).run()

    sink.assert_not_called()
    saved = Storage(db_path).load()
    assert [m.id for m in saved.latest] == [42]
    assert saved.scheduled[42].is_set("kickoff")
    assert len(saved.queue) == 1

    # Three minutes later, same snapshot: nothing new, kickoff goes out
    make_monitor(settings, mock_client, sink, db_path, now=T + 180).run()

    sink.assert_called_once_with(":flag-fr: France - Germany :flag-de:", "Kickoff - A Matchday 1")
    assert Storage(db_path).load().queue == []


def test_zero_delay_posts_on_same_run(make_match, mock_client, sink, db_path):
    settings = Settings(token="t", slack_urls=["https://hooks.example/x"], delay_minutes=0, db_path=db_path)
    mock_client.get_live_matches.return_value = [make_match(match_id=42)]

    make_monitor(settings, mock_client, sink, db_path).run()

    sink.assert_called_once()
    assert Storage(db_path).load().queue == []


def test_departed_match_is_fetched_and_reported(make_match, mock_client, sink, db_path):
    Storage(db_path).save(Document(latest=[make_match(match_id=9)], scheduled={9: LedgerEntry({"kickoff"})}))
    settings = Settings(token="t", slack_urls=["https://hooks.example/x"], delay_minutes=0, db_path=db_path)
    mock_client.get_live_matches.return_value = []
    mock_client.get_match.return_value = make_match(match_id=9, status="FINISHED", home_goals=1)

    document = make_monitor(settings, mock_client, sink, db_path).run()

    mock_client.get_match.assert_called_once_with(9)
    sink.assert_called_once_with(":flag-fr: France 1 - 0 Germany :flag-de:", "Game finished")
    assert document.latest == []
    assert document.scheduled[9].is_set("finished")


def test_provider_failure_leaves_state_untouched(make_match, mock_client, sink, db_path):
    original = Document(latest=[make_match(match_id=9)], queue=[Job(post_on_or_after=T - 1, title="t", subtitle="s")])
    Storage(db_path).save(original)
    with open(db_path, encoding="utf-8") as f:
        before = f.read()
    settings = Settings(token="t", slack_urls=["https://hooks.example/x"], db_path=db_path)
    mock_client.get_live_matches.return_value = []
    mock_client.get_match.side_effect = ProviderError("HTTP 500")

    with pytest.raises(ProviderError):
        make_monitor(settings, mock_client, sink, db_path).run()

    sink.assert_not_called()
    with open(db_path, encoding="utf-8") as f:
        assert f.read() == before


def test_dry_run_does_not_save_or_post(make_match, mock_client, db_path, capsys):
    settings = Settings(dry_run=True, delay_minutes=0, db_path=db_path)
    mock_client.get_live_matches.return_value = [make_match(match_id=42)]
    storage = MagicMock()
    storage.load.return_value = Document()

    monitor = Monitor(settings, client=mock_client, storage=storage, clock=lambda: T)
    monitor.run()

    storage.save.assert_not_called()
    out = capsys.readouterr().out
    assert ":flag-fr: France - Germany :flag-de:" in out
    printed = json.loads(out[out.index("{"):])
    assert printed["scheduled"] == {"42": {"kickoff": 1}}


def test_dry_run_uses_console_sink(db_path):
    from livescore_notifier.notifications import ConsoleSink, SlackWebhookSink

    assert isinstance(Monitor(Settings(dry_run=True, db_path=db_path)).sink, ConsoleSink)
    assert isinstance(Monitor(Settings(token="t", slack_urls=["https://x"], db_path=db_path)).sink, SlackWebhookSink)


def test_unlisted_status_does_not_block_other_matches(sink, db_path):
    """A status the feed adds later must not stop posts for the other matches."""
    from unittest.mock import patch

    from livescore_notifier.client import FootballDataClient

    from conftest import api_match

    session = MagicMock()
    session.headers = {}
    response = MagicMock(ok=True, status_code=200)
    response.json.return_value = {"matches": [api_match(match_id=1), api_match(match_id=2, status="LIVE")]}
    session.get.return_value = response
    client = FootballDataClient(token="t", session=session)
    settings = Settings(token="t", slack_urls=["https://hooks.example/x"], delay_minutes=0, db_path=db_path)

    with patch("livescore_notifier.client.time.sleep"):
        make_monitor(settings, client, sink, db_path).run()

    assert sink.call_count == 2
    saved = Storage(db_path).load()
    assert [m.status_name for m in saved.latest] == ["IN_PLAY", "LIVE"]
    assert saved.scheduled[1].is_set("kickoff")
    assert saved.scheduled[2].is_set("kickoff")
