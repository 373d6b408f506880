from __future__ import annotations

from collections.abc import Hashable
from typing import Any, Iterable

from heatsheet.models import Grouping, NormalizedRow


def _group_key(value: Any) -> Hashable:
    try:
        hash(value)
    except TypeError:
        return str(value)
    return value


def group_by_race_and_heat(rows: Iterable[NormalizedRow]) -> Grouping:
    """Fold normalized rows into race -> heat -> swimmers, keeping first-seen order.

    Missing race or heat names are kept as literal keys (usually ``None``);
    unhashable names are keyed by their string form.
    """
    grouped: Grouping = {}
    for race, heat, swimmer in rows:
        grouped.setdefault(_group_key(race), {}).setdefault(_group_key(heat), []).append(swimmer)
    return grouped


def count_swimmers(grouping: Grouping) -> int:
    return sum(len(swimmers) for heats in grouping.values() for swimmers in heats.values())
