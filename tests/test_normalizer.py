from types import SimpleNamespace

from heatsheet.models import DIMENSION_ORDER, NormalizedRow, SwimmerRecord
from heatsheet.normalizer import (
    build_field_map,
    is_keyed_row,
    normalize_dimension_rows,
    normalize_flat_rows,
    normalize_rows,
)

FIELDS = [{"id": field_id} for field_id in DIMENSION_ORDER]


def test_build_field_map_uses_descriptor_positions():
    fields = [{"id": "NAME"}, SimpleNamespace(id="RACE"), {"id": "UNKNOWN"}, {"id": "HEAT"}]

    field_map = build_field_map(fields)

    assert dict(field_map) == {"NAME": 0, "RACE": 1, "HEAT": 3}


def test_flat_rows_follow_field_order():
    fields = [{"id": "ACADEMY"}, {"id": "NAME"}, {"id": "LANE"}, {"id": "HEAT"}, {"id": "RACE"}, {"id": "AGEGROUP"}]
    rows = [["Delta", "A. Smith", 1, "Heat 1", "100m Freestyle", "U12"]]

    out = normalize_flat_rows(rows, fields)

    assert out == [
        NormalizedRow("100m Freestyle", "Heat 1", SwimmerRecord(lane=1, name="A. Smith", age_group="U12", academy="Delta"))
    ]


def test_missing_field_id_yields_none_instead_of_error():
    fields = [{"id": field_id} for field_id in DIMENSION_ORDER if field_id != "ACADEMY"]
    rows = [["100m", "Heat 1", 4, "A", "U12"]]

    out = normalize_flat_rows(rows, fields)

    assert out[0].swimmer.academy is None
    assert out[0].swimmer.name == "A"


def test_short_rows_are_padded_with_none():
    out = normalize_flat_rows([["100m", "Heat 1"]], FIELDS)

    assert out[0].race == "100m"
    assert out[0].swimmer == SwimmerRecord()


def test_keyed_rows_read_by_logical_name():
    rows = [{"race": "50m", "heat": "Heat 2", "lane": 3, "name": "B", "agegroup": "U10", "academy": "Echo"}]

    out = normalize_flat_rows(rows, None)

    assert out[0] == NormalizedRow("50m", "Heat 2", SwimmerRecord(3, "B", "U10", "Echo"))


def test_dimension_rows_use_fixed_order():
    rows = [
        {"dimension": ["100m", "Heat 1", 1, "A", "U12", "Delta"]},
        SimpleNamespace(dimension=["100m", "Heat 1", 2, "B"]),
    ]

    out = normalize_dimension_rows(rows)

    assert out[0].swimmer.academy == "Delta"
    assert out[1].swimmer == SwimmerRecord(lane=2, name="B")


def test_normalize_rows_detects_shape():
    dimension = normalize_rows([{"dimension": ["100m", "Heat 1", 1, "A", "U12", "Delta"]}])
    flat = normalize_rows([["100m", "Heat 1", 1, "A", "U12", "Delta"]], FIELDS)

    assert dimension == flat
    assert normalize_rows([], FIELDS) == []


def test_is_keyed_row_needs_a_logical_name():
    assert is_keyed_row({"race": "100m"})
    assert not is_keyed_row({"other": 1})
    assert not is_keyed_row(["100m"])
