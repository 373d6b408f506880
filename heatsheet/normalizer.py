from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any, Iterable

from heatsheet.models import DIMENSION_ORDER, FieldId, NormalizedRow, SwimmerRecord

FieldMap = Mapping[str, int]


def _field_id(descriptor: object) -> object:
    if isinstance(descriptor, Mapping):
        return descriptor.get("id")
    return getattr(descriptor, "id", None)


def build_field_map(fields: Iterable[object] | None) -> FieldMap:
    """Map each logical field id to its position in a flat row.

    Descriptors without a recognised id are skipped; the result is read-only.
    """
    mapping: dict[str, int] = {}
    for idx, descriptor in enumerate(fields or ()):
        field_id = _field_id(descriptor)
        if field_id in DIMENSION_ORDER:
            mapping[field_id] = idx
    return MappingProxyType(mapping)


def _cell(row: object, field_map: FieldMap, field_id: str) -> Any:
    idx = field_map.get(field_id)
    if isinstance(row, Mapping):
        if idx is not None and idx in row:
            return row[idx]
        return row.get(field_id.lower())
    if idx is None or not isinstance(row, Sequence) or idx >= len(row):
        return None
    return row[idx]


def _make_row(values: dict[str, Any]) -> NormalizedRow:
    return NormalizedRow(
        race=values.get(FieldId.RACE),
        heat=values.get(FieldId.HEAT),
        swimmer=SwimmerRecord(
            lane=values.get(FieldId.LANE),
            name=values.get(FieldId.NAME),
            age_group=values.get(FieldId.AGEGROUP),
            academy=values.get(FieldId.ACADEMY),
        ),
    )


def normalize_flat_rows(rows: Iterable[object], fields: Iterable[object] | None) -> list[NormalizedRow]:
    field_map = build_field_map(fields)
    return [
        _make_row({field_id: _cell(row, field_map, field_id) for field_id in DIMENSION_ORDER})
        for row in rows
    ]


def _dimension(row: object) -> Sequence[Any]:
    if isinstance(row, Mapping):
        values = row.get("dimension")
    else:
        values = getattr(row, "dimension", None)
    return values or ()


def normalize_dimension_rows(rows: Iterable[object]) -> list[NormalizedRow]:
    result: list[NormalizedRow] = []
    for row in rows:
        values = list(_dimension(row))[: len(DIMENSION_ORDER)]
        result.append(_make_row(dict(zip(DIMENSION_ORDER, values))))
    return result


def is_dimension_row(row: object) -> bool:
    if isinstance(row, Mapping):
        return "dimension" in row
    return hasattr(row, "dimension")


def is_keyed_row(row: object) -> bool:
    """True for a mapping row that carries any lower-case logical field name."""
    return isinstance(row, Mapping) and any(field_id.lower() in row for field_id in DIMENSION_ORDER)


def normalize_rows(rows: Sequence[object], fields: Iterable[object] | None = None) -> list[NormalizedRow]:
    """Pick the adapter from the shape of the first row."""
    if not rows:
        return []
    if is_dimension_row(rows[0]):
        return normalize_dimension_rows(rows)
    return normalize_flat_rows(rows, fields)
