"""Data models used throughout the project."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping


@dataclass(slots=True, frozen=True)
class AirportEntry:
    name: str
    attributes: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, **self.attributes}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AirportEntry":
        attrs = {k: v for k, v in data.items() if k != "name"}
        return cls(name=str(data["name"]), attributes=attrs)


@dataclass(slots=True, frozen=True)
class FlightInfo:
    region: str
    airports: List[AirportEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "region": self.region,
            "airports": [a.to_dict() for a in self.airports],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FlightInfo":
        return cls(
            region=str(data["region"]),
            airports=[AirportEntry.from_dict(a) for a in data["airports"]],
        )


@dataclass(slots=True, frozen=True)
class Snapshot:
    """Irregularities published by one source at ``last_check``.

    This is also the persisted form (``StoredState``) of the last check.
    """

    last_check: str
    flight_infos: List[FlightInfo] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.flight_infos

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lastCheck": self.last_check,
            "flightInfos": [info.to_dict() for info in self.flight_infos],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Snapshot":
        return cls(
            last_check=str(data["lastCheck"]),
            flight_infos=[FlightInfo.from_dict(i) for i in data["flightInfos"]],
        )


__all__ = ["AirportEntry", "FlightInfo", "Snapshot"]
