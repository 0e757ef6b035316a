from unittest.mock import MagicMock

import requests

from livescore_notifier.notifications import ConsoleSink, SlackWebhookSink


def _response(ok=True, status_code=200, text="ok"):
    response = MagicMock()
    response.ok = ok
    response.status_code = status_code
    response.text = text
    return response


def test_posts_to_every_destination():
    session = MagicMock()
    session.post.return_value = _response()
    sink = SlackWebhookSink(["https://hooks.slack.com/services/A", "https://hooks.slack.com/services/B"], session=session)

    sink(":flag-fr: France 1 - 0 Germany :flag-de:", ":soccer: France scored!")

    assert session.post.call_count == 2
    url, = session.post.call_args_list[0].args
    assert url == "https://hooks.slack.com/services/A"
    assert session.post.call_args_list[0].kwargs["json"] == {
        "text": "*:flag-fr: France 1 - 0 Germany :flag-de:*\n> :soccer: France scored!"
    }
    assert sink.failures == []


def test_empty_subtitle_is_omitted():
    session = MagicMock()
    session.post.return_value = _response()
    sink = SlackWebhookSink(["https://hooks.slack.com/services/A"], session=session)

    sink("title", "")

    assert session.post.call_args.kwargs["json"] == {"text": "*title*"}


def test_failed_destination_does_not_stop_the_others():
    session = MagicMock()
    session.post.side_effect = [
        requests.ConnectionError("boom"),
        _response(ok=False, status_code=404, text="no_service"),
        _response(),
    ]
    urls = ["https://a.example/1", "https://b.example/2", "https://c.example/3"]
    sink = SlackWebhookSink(urls, session=session)

    sink("title", "subtitle")

    assert session.post.call_count == 3
    assert [url for url, _ in sink.failures] == urls[:2]
    assert "404" in sink.failures[1][1]


def test_console_sink(capsys):
    ConsoleSink()("title", "subtitle")

    out = capsys.readouterr().out
    assert out == "-" * 30 + "\ntitle\nsubtitle\n"
