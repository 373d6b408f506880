from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NamedTuple, Optional


class FieldId:
    RACE = "RACE"
    HEAT = "HEAT"
    LANE = "LANE"
    NAME = "NAME"
    AGEGROUP = "AGEGROUP"
    ACADEMY = "ACADEMY"


# Fixed order of the values in a pre-split "dimension" row.
DIMENSION_ORDER = (
    FieldId.RACE,
    FieldId.HEAT,
    FieldId.LANE,
    FieldId.NAME,
    FieldId.AGEGROUP,
    FieldId.ACADEMY,
)


@dataclass(frozen=True, slots=True)
class SwimmerRecord:
    lane: Any = None
    name: Any = None
    age_group: Any = None
    academy: Any = None

    def cells(self) -> tuple[Any, Any, Any, Any]:
        return (self.lane, self.name, self.age_group, self.academy)


class NormalizedRow(NamedTuple):
    race: Optional[Any]
    heat: Optional[Any]
    swimmer: SwimmerRecord


Grouping = dict[Any, dict[Any, list[SwimmerRecord]]]
