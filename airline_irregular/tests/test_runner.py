import json

import pytest

from airline_irregular.ana import AnaSource
from airline_irregular.config import Settings
from airline_irregular.http_client import FetchError
from airline_irregular.models import Snapshot
from airline_irregular.notifier import NotifyError
from airline_irregular.policy import Action
from airline_irregular.runner import get_source, run_all, run_check
from airline_irregular.state_store import StateStore

IRREGULAR_HTML = """
<p class="hinichi">2024年9月1日 10:00現在</p>
<table>
  <tr><td class="area">北海道</td><td></td></tr>
  <tr><td>・新千歳</td><td>9月1日～9月2日</td></tr>
  <tr><td class="area">九州</td><td></td></tr>
  <tr><td>・福岡</td><td>9月1日</td></tr>
</table>
"""

NORMAL_HTML = (
    "<p>現在、台風などの大幅な気象の乱れにより、"
    "今後運航への影響が予測される空港はありません。</p>"
)


def make_settings(tmp_path) -> Settings:
    return Settings(
        SLACK_TOKEN="xoxb-test",
        SLACK_CHANNEL="#flights",
        STORAGE_DIR=str(tmp_path),
    )


class FakeSlack:
    def __init__(self, error=None):
        self.sent = []
        self.error = error

    def __call__(self, message, options):
        if self.error:
            raise self.error
        self.sent.append((message, options))


def serve(html):
    def fetch(url, timeout):
        return html

    return fetch


def test_first_irregular_run_notifies_and_persists(tmp_path):
    settings = make_settings(tmp_path)
    slack = FakeSlack()

    decision = run_check(
        AnaSource(), settings=settings, fetch=serve(IRREGULAR_HTML), post=slack
    )

    assert decision.action is Action.NOTIFY_IRREGULAR
    message, options = slack.sent[0]
    assert "@channel" in message.text
    assert options.channel == "#flights"
    assert options.username == "ANA運航情報"
    assert options.icon == ":ana:"

    saved = json.loads((tmp_path / "ana.json").read_text(encoding="utf-8"))
    assert [i["region"] for i in saved["flightInfos"]] == ["北海道", "九州"]


def test_second_identical_run_is_suppressed(tmp_path):
    settings = make_settings(tmp_path)
    slack = FakeSlack()
    run_check(AnaSource(), settings=settings, fetch=serve(IRREGULAR_HTML), post=slack)
    before = (tmp_path / "ana.json").read_text(encoding="utf-8")

    decision = run_check(
        AnaSource(), settings=settings, fetch=serve(IRREGULAR_HTML), post=slack
    )

    assert decision.action is Action.SUPPRESS
    assert len(slack.sent) == 1
    assert (tmp_path / "ana.json").read_text(encoding="utf-8") == before


def test_clearing_posts_back_to_normal(tmp_path):
    settings = make_settings(tmp_path)
    slack = FakeSlack()
    run_check(AnaSource(), settings=settings, fetch=serve(IRREGULAR_HTML), post=slack)

    decision = run_check(
        AnaSource(),
        settings=settings,
        fetch=serve(NORMAL_HTML),
        post=slack,
        icon=":airplane:",
        username="bot",
    )

    assert decision.action is Action.NOTIFY_NORMAL
    message, options = slack.sent[-1]
    assert "@channel" not in message.text
    assert options.icon == ":airplane:"
    assert options.username == "bot"
    assert StateStore(tmp_path).load("ana").is_empty


def test_failed_send_does_not_persist(tmp_path):
    settings = make_settings(tmp_path)
    slack = FakeSlack(error=NotifyError("Failed to post to Slack: invalid_auth"))

    with pytest.raises(NotifyError):
        run_check(
            AnaSource(), settings=settings, fetch=serve(IRREGULAR_HTML), post=slack
        )
    assert not (tmp_path / "ana.json").exists()


def test_fetch_failure_aborts(tmp_path):
    settings = make_settings(tmp_path)

    def broken(url, timeout):
        raise FetchError("Failed to fetch: 500")

    with pytest.raises(FetchError):
        run_check(AnaSource(), settings=settings, fetch=broken, post=FakeSlack())
    assert not (tmp_path / "ana.json").exists()


def test_normal_without_prior_state_records_empty(tmp_path):
    settings = make_settings(tmp_path)
    slack = FakeSlack()

    decision = run_check(
        AnaSource(), settings=settings, fetch=serve(NORMAL_HTML), post=slack
    )

    assert decision.action is Action.SUPPRESS
    assert slack.sent == []
    assert StateStore(tmp_path).load("ana").is_empty


def test_get_source_unknown():
    assert get_source("jal").key == "jal"
    with pytest.raises(ValueError):
        get_source("skymark")


def test_run_all_reports_failures(tmp_path, monkeypatch):
    settings = make_settings(tmp_path)

    def fake_run_check(source, *, settings, force=False):
        if source.key == "jal":
            raise FetchError("down")

    monkeypatch.setattr("airline_irregular.runner.run_check", fake_run_check)
    assert run_all(settings) == {"ana": True, "jal": False}


EMPTY_PERIODS_HTML = """
<table>
  <tr><td class="area">北海道</td><td></td></tr>
  <tr><td>・新千歳</td><td>&nbsp;</td></tr>
</table>
"""


def test_empty_periods_after_empty_state_is_suppressed(tmp_path):
    settings = make_settings(tmp_path)
    store = StateStore(tmp_path)
    store.save("ana", Snapshot("2024-08-31T12:00:00+00:00", []))
    slack = FakeSlack()

    decision = run_check(
        AnaSource(),
        settings=settings,
        store=store,
        fetch=serve(EMPTY_PERIODS_HTML),
        post=slack,
    )

    assert decision.action is Action.SUPPRESS
    assert slack.sent == []
    assert store.load("ana").last_check == "2024-08-31T12:00:00+00:00"


def test_empty_periods_without_state_notifies(tmp_path):
    settings = make_settings(tmp_path)
    slack = FakeSlack()

    decision = run_check(
        AnaSource(), settings=settings, fetch=serve(EMPTY_PERIODS_HTML), post=slack
    )

    assert decision.action is Action.NOTIFY_IRREGULAR
    assert decision.flight_infos == []
    assert len(slack.sent) == 1
    assert StateStore(tmp_path).load("ana").is_empty
