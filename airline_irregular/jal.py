from __future__ import annotations

from typing import List

from bs4 import BeautifulSoup

from .models import AirportEntry, FlightInfo
from .source import AirlineSource

JAL_URL = "https://www.jal.co.jp/cms/other/ja/info.html"


class JalSource(AirlineSource):
    """JAL info page: one table per region, English copy under ``#en``."""

    key = "jal"
    name = "JAL"
    url = JAL_URL
    title = "特別な取り扱い対象空港の一覧"
    normal_message = "現在、対象空港はございません"
    default_icon = ":jal:"
    default_username = "JAL運航情報"

    def parse_irregular_flights(self, html: str) -> List[FlightInfo]:
        flight_infos: List[FlightInfo] = []

        for table in self.soup(html).select(".table_typeB_01 table"):
            if table.find_parent(id="en") is not None:
                continue

            header = table.select_one("thead th")
            region = header.get_text().strip() if header else ""

            airports: List[AirportEntry] = []
            for row in table.select("tbody tr"):
                cells = row.find_all("td")
                if len(cells) != 3:
                    continue
                name, date, content = (c.get_text().strip() for c in cells)
                airports.append(AirportEntry(name, {"date": date, "content": content}))

            if airports:
                flight_infos.append(FlightInfo(region, airports))

        return flight_infos

    def has_notice_table(self, soup: BeautifulSoup) -> bool:
        return any(
            table.find_parent(id="en") is None
            for table in soup.select(".table_typeB_01 table")
        )

    def _update_time_text(self, soup: BeautifulSoup) -> str:
        first = soup.select_one(".alR")
        return first.get_text().strip() if first else ""

    def format_airport(self, airport: AirportEntry) -> str:
        attrs = airport.attributes
        return f"{airport.name}: {attrs.get('date', '')} - {attrs.get('content', '')}"


__all__ = ["JAL_URL", "JalSource"]
