from __future__ import annotations

import re
from typing import Dict, List

from bs4 import BeautifulSoup

from .models import AirportEntry, FlightInfo
from .source import AirlineSource

ANA_URL = "https://www.ana.co.jp/asw/ncf_info"

_WS_RE = re.compile(r"\s+")


class AnaSource(AirlineSource):
    """ANA "special handling" page: one table, region rows then airport rows."""

    key = "ana"
    name = "ANA"
    url = ANA_URL
    title = "特別な取り扱いの一覧"
    normal_message = (
        "現在、台風などの大幅な気象の乱れにより、"
        "今後運航への影響が予測される空港はありません。"
    )
    default_icon = ":ana:"
    default_username = "ANA運航情報"

    def parse_irregular_flights(self, html: str) -> List[FlightInfo]:
        regions: Dict[str, List[AirportEntry]] = {}
        current_region = ""

        for row in self.soup(html).select("table tr"):
            cells = row.find_all("td")
            if len(cells) != 2:
                continue
            first, second = cells

            if "area" in (first.get("class") or []):
                current_region = first.get_text().strip()
                continue

            label = first.get_text()
            if "・" not in label:
                continue
            period = second.get_text().strip()
            if not period:
                continue
            airport = label.strip().replace("・", "", 1).strip()
            regions.setdefault(current_region, []).append(
                AirportEntry(airport, {"period": period})
            )

        return [FlightInfo(region, airports) for region, airports in regions.items()]

    def has_notice_table(self, soup: BeautifulSoup) -> bool:
        return any(len(row.find_all("td")) == 2 for row in soup.select("table tr"))

    def _update_time_text(self, soup: BeautifulSoup) -> str:
        return "".join(el.get_text() for el in soup.select(".hinichi")).strip()

    def format_airport(self, airport: AirportEntry) -> str:
        period = _WS_RE.sub(" ", airport.attributes.get("period", "")).strip()
        return f"{airport.name}: {period}"


__all__ = ["ANA_URL", "AnaSource"]
