from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Type

from .ana import AnaSource
from .config import Settings
from .http_client import fetch_html
from .jal import JalSource
from .notifier import SlackMessage, SlackPostOptions, post_to_slack
from .policy import NotificationDecision, decide
from .source import AirlineSource
from .state_store import StateStore

logger = logging.getLogger(__name__)

SOURCES: Dict[str, Type[AirlineSource]] = {
    AnaSource.key: AnaSource,
    JalSource.key: JalSource,
}


def get_source(key: str) -> AirlineSource:
    try:
        return SOURCES[key]()
    except KeyError:
        raise ValueError(f"Unknown source: {key}") from None


# ────────────────────────────────────────────────────────────────
# Check cycle
# ────────────────────────────────────────────────────────────────


def run_check(
    source: AirlineSource,
    *,
    settings: Settings,
    store: Optional[StateStore] = None,
    force: bool = False,
    icon: Optional[str] = None,
    username: Optional[str] = None,
    fetch: Callable[..., str] = fetch_html,
    post: Callable[[SlackMessage, SlackPostOptions], None] = post_to_slack,
) -> NotificationDecision:
    """Run one fetch → decide → notify → persist cycle for *source*.

    Any error propagates before the new state is written, so a failed
    delivery is retried by the next run instead of being recorded as seen.
    """
    store = store or StateStore(settings.storage_dir)

    html = fetch(source.url, timeout=settings.http_timeout_s)
    page = source.parse(html)
    logger.info(
        "[%s] irregular=%s regions=%d update_time=%s",
        source.key,
        page.has_irregularity,
        len(page.flight_infos),
        page.update_time,
    )

    prior = store.load(source.key)
    decision = decide(
        page.has_irregularity,
        force,
        prior,
        page.flight_infos,
        page.update_time,
    )

    if decision.should_notify:
        message = source.format_message(
            decision.flight_infos, decision.update_time, decision.with_mention
        )
        options = SlackPostOptions(
            token=settings.slack_token,
            channel=settings.slack_channel,
            username=username or source.default_username,
            icon=icon or source.default_icon,
        )
        post(message, options)
        logger.info("[%s] Posted to Slack: %s", source.key, decision.reason)
    else:
        logger.info("[%s] Not posting: %s", source.key, decision.reason)

    if decision.state_to_persist is not None:
        store.save(source.key, decision.state_to_persist)

    return decision


def run_all(settings: Settings, *, force: bool = False) -> Dict[str, bool]:
    """Check every source in turn; a failing source does not stop the rest."""
    results: Dict[str, bool] = {}
    for key in SOURCES:
        try:
            run_check(get_source(key), settings=settings, force=force)
        except Exception:
            logger.exception("[%s] check failed", key)
            results[key] = False
        else:
            results[key] = True
    return results


__all__ = ["SOURCES", "get_source", "run_check", "run_all"]
