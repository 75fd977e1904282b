"""Decide whether a check warrants a Slack message and what to persist.

Rules, first match wins:

* no irregularity, forced                  -> "back to normal", mention off
* no irregularity, no prior state          -> suppress, record empty snapshot
* no irregularity, prior state empty       -> suppress, record empty snapshot
* no irregularity, prior state non-empty   -> "back to normal", mention off
* irregularity, unchanged and not forced   -> suppress, keep prior state file
* irregularity otherwise                   -> notify with mention, record it
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from .models import FlightInfo, Snapshot
from .snapshot import has_changed


class Action(enum.Enum):
    SUPPRESS = "suppress"
    NOTIFY_NORMAL = "notify_normal"
    NOTIFY_IRREGULAR = "notify_irregular"


@dataclass(slots=True, frozen=True)
class NotificationDecision:
    action: Action
    update_time: str
    state_to_persist: Optional[Snapshot]
    flight_infos: List[FlightInfo] = field(default_factory=list)
    with_mention: bool = False
    reason: str = ""

    @property
    def should_notify(self) -> bool:
        return self.action is not Action.SUPPRESS


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def decide(
    has_irregularity: bool,
    force: bool,
    prior_state: Optional[Snapshot],
    new_flight_infos: Sequence[FlightInfo],
    update_time: str,
    *,
    now: Callable[[], datetime] = _utc_now,
) -> NotificationDecision:
    """Apply the notification rules to one freshly parsed page."""

    def snapshot(infos: Sequence[FlightInfo]) -> Snapshot:
        return Snapshot(last_check=now().isoformat(), flight_infos=list(infos))

    if not has_irregularity:
        if force:
            return NotificationDecision(
                Action.NOTIFY_NORMAL,
                update_time,
                snapshot([]),
                reason="normal operation (forced)",
            )
        if prior_state is None:
            return NotificationDecision(
                Action.SUPPRESS,
                update_time,
                snapshot([]),
                reason="no irregular flights and no previous state",
            )
        if prior_state.is_empty:
            return NotificationDecision(
                Action.SUPPRESS,
                update_time,
                snapshot([]),
                reason="no irregular flights, previous state also empty",
            )
        return NotificationDecision(
            Action.NOTIFY_NORMAL,
            update_time,
            snapshot([]),
            reason="irregular flights cleared",
        )

    if not has_changed(prior_state, new_flight_infos) and not force:
        return NotificationDecision(
            Action.SUPPRESS,
            update_time,
            None,
            reason="no changes since last check",
        )

    return NotificationDecision(
        Action.NOTIFY_IRREGULAR,
        update_time,
        snapshot(new_flight_infos),
        flight_infos=list(new_flight_infos),
        with_mention=True,
        reason="irregular flights (forced)" if force else "irregular flights changed",
    )


__all__ = ["Action", "NotificationDecision", "decide"]
