"""Per-airline page parsing and message copy.

Each airline publishes its notices in its own hand-made layout, so every
source implements the extraction and the airport line; everything else
(irregularity check, update time fallback, Slack blocks) is shared here.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List
from zoneinfo import ZoneInfo

from bs4 import BeautifulSoup

from .models import AirportEntry, FlightInfo
from .notifier import SlackMessage

JST_NAME = "Asia/Tokyo"


class ParseError(RuntimeError):
    """Page does not have the expected structure."""


@dataclass(slots=True)
class ParsedPage:
    has_irregularity: bool
    update_time: str
    flight_infos: List[FlightInfo] = field(default_factory=list)


def jst_timestamp(now: datetime | None = None) -> str:
    """Current Tokyo time in the ``2025/3/14 9:05:07`` form the sites use."""
    jst = ZoneInfo(JST_NAME)
    now = (now or datetime.now(jst)).astimezone(jst)
    return (
        f"{now.year}/{now.month}/{now.day} "
        f"{now.hour}:{now.minute:02d}:{now.second:02d}"
    )


def _mrkdwn(text: str) -> Dict[str, Any]:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


class AirlineSource(abc.ABC):
    key: str
    name: str
    url: str
    title: str
    normal_message: str
    default_icon: str
    default_username: str

    # ── page ───────────────────────────────────────────────────

    def soup(self, html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "html.parser")

    def has_irregular_flights(self, html: str) -> bool:
        """``False`` when the page shows the normal-operation sentence."""
        return not any(
            self.normal_message in p.get_text() for p in self.soup(html).find_all("p")
        )

    @abc.abstractmethod
    def parse_irregular_flights(self, html: str) -> List[FlightInfo]:
        """Extract the per-region airport notices from *html*."""

    @abc.abstractmethod
    def has_notice_table(self, soup: BeautifulSoup) -> bool:
        """``True`` when the layout the parser reads from is on the page."""

    @abc.abstractmethod
    def _update_time_text(self, soup: BeautifulSoup) -> str:
        """Timestamp printed on the page, or an empty string."""

    def get_update_time(self, html: str) -> str:
        return self._update_time_text(self.soup(html)) or jst_timestamp()

    def parse(self, html: str) -> ParsedPage:
        has_irregularity = self.has_irregular_flights(html)
        update_time = self.get_update_time(html)
        if not has_irregularity:
            return ParsedPage(False, update_time)

        if not self.has_notice_table(self.soup(html)):
            raise ParseError(
                f"{self.name}: no normal-operation notice and no notice "
                "table found, page layout may have changed"
            )
        flight_infos = self.parse_irregular_flights(html)
        return ParsedPage(True, update_time, flight_infos)

    # ── message ────────────────────────────────────────────────

    @abc.abstractmethod
    def format_airport(self, airport: AirportEntry) -> str:
        """One message line for *airport*."""

    def format_message(
        self,
        flight_infos: List[FlightInfo],
        update_time: str,
        with_mention: bool = True,
    ) -> SlackMessage:
        mention = " @channel" if with_mention else ""
        header = f"*{self.title} / <{self.url}|{self.name}>*{mention}\n"
        blocks: List[Dict[str, Any]] = [_mrkdwn(header)]

        if not flight_infos:
            blocks.append(_mrkdwn(self.normal_message))
        for info in flight_infos:
            blocks.append(_mrkdwn(f"*{info.region}*"))
            blocks.append(
                _mrkdwn("\n".join(self.format_airport(a) for a in info.airports))
            )

        blocks.append({"type": "divider", "block_id": "divider"})
        blocks.append(
            {
                "type": "context",
                "elements": [{"type": "mrkdwn", "text": update_time}],
            }
        )
        return SlackMessage(text=header, blocks=blocks)


__all__ = ["AirlineSource", "JST_NAME", "ParseError", "ParsedPage", "jst_timestamp"]
