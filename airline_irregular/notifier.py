from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

import requests

logger = logging.getLogger(__name__)

SLACK_POST_URL = "https://slack.com/api/chat.postMessage"


class NotifyError(RuntimeError):
    """Slack rejected the message or could not be reached."""


@dataclass(slots=True)
class SlackMessage:
    text: str
    blocks: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class SlackPostOptions:
    token: str
    channel: str
    username: str
    icon: str


def post_to_slack(
    message: SlackMessage, options: SlackPostOptions, *, timeout: float = 10.0
) -> None:
    """Post *message* to the channel given in *options*."""
    payload = {
        "channel": options.channel,
        "text": message.text,
        "blocks": message.blocks,
        "mrkdwn": True,
        "link_names": True,
        "username": options.username,
        "icon_emoji": options.icon,
    }
    logger.info("Posting to Slack channel %s as %s", options.channel, options.username)
    try:
        resp = requests.post(
            SLACK_POST_URL,
            json=payload,
            headers={"Authorization": f"Bearer {options.token}"},
            timeout=timeout,
        )
    except requests.RequestException as exc:
        raise NotifyError(f"Failed to post to Slack: {exc}") from exc

    if resp.status_code != 200:
        raise NotifyError(
            f"Failed to post to Slack: HTTP {resp.status_code} – {resp.text[:120]}"
        )
    try:
        data = resp.json()
    except ValueError as exc:
        raise NotifyError(f"Failed to post to Slack: {exc}") from exc
    if not data.get("ok"):
        raise NotifyError(f"Failed to post to Slack: {data.get('error')}")


__all__ = [
    "NotifyError",
    "SLACK_POST_URL",
    "SlackMessage",
    "SlackPostOptions",
    "post_to_slack",
]
