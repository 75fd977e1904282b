"""Canonical form of flight-info lists and change detection between checks.

Airports are compared regardless of the order the page lists them in, but
regions are not: two snapshots listing the same regions in a different order
are reported as changed.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .models import FlightInfo, Snapshot

FlightInfos = Sequence[Union[FlightInfo, Mapping[str, Any]]]


def _as_dicts(flight_infos: Union[str, FlightInfos]) -> List[Dict[str, Any]]:
    if isinstance(flight_infos, str):
        return json.loads(flight_infos)
    return [
        info.to_dict() if isinstance(info, FlightInfo) else dict(info)
        for info in flight_infos
    ]


def normalize(flight_infos: Union[str, FlightInfos]) -> str:
    """Return the canonical JSON form of *flight_infos*.

    Each region's airports are sorted by name (stable), region order is kept
    as given. A canonical string is accepted as input too, so
    ``normalize(normalize(x)) == normalize(x)``.
    """
    canonical = []
    for info in _as_dicts(flight_infos):
        airports = sorted(info.get("airports", []), key=lambda a: a["name"])
        canonical.append({**info, "airports": airports})
    return json.dumps(
        canonical, sort_keys=True, ensure_ascii=False, separators=(",", ":")
    )


def has_changed(
    old_state: Optional[Snapshot], new_flight_infos: FlightInfos
) -> bool:
    """``True`` when *new_flight_infos* differs from *old_state*.

    Without a prior state there is nothing to compare against, which counts
    as a change.
    """
    if old_state is None:
        return True
    return normalize(old_state.flight_infos) != normalize(new_flight_infos)


__all__ = ["normalize", "has_changed"]
