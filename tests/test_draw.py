import logging

import pytest

from heatsheet.config import EMPTY_MESSAGE, ERROR_PREFIX
from heatsheet.container import Container
from heatsheet.draw import DrawEvents, DrawState, build_tree, draw, extract_payload, subscribe
from heatsheet.models import DIMENSION_ORDER

FIELDS = [{"id": field_id} for field_id in DIMENSION_ORDER]

MEET_ROWS = [
    ["100m Freestyle", "Heat 1", 1, "A. Smith", "U12", "Delta"],
    ["100m Freestyle", "Heat 1", 2, "B. Jones", "U12", "Echo"],
    ["100m Freestyle", "Heat 2", 1, "C. Lee", "U14", "Delta"],
]


def flat_message(rows, fields=FIELDS):
    return {"data": {"tables": {"DEFAULT": rows}, "fields": {"DEFAULT": fields}}}


def test_extract_payload_supports_both_shapes():
    rows, fields = extract_payload(flat_message(MEET_ROWS))
    assert rows == MEET_ROWS and fields == FIELDS

    rows, fields = extract_payload({"tables": {"DEFAULT": [{"dimension": MEET_ROWS[0]}]}})
    assert rows == [{"dimension": MEET_ROWS[0]}]
    assert fields is None


def test_draw_groups_heats_within_race():
    container = Container()

    state = draw(flat_message(MEET_ROWS), container)

    assert state == DrawState.POPULATED
    tree = container.root
    assert [n.text for n in tree.find_all("h2")] == ["100m Freestyle"]
    heats = tree.find_all("div", "heat-container")
    assert [h.children[0].text for h in heats] == ["Heat 1", "Heat 2"]
    names = [[tr.children[1].text for tr in h.find_all("tbody")[0].children] for h in heats]
    assert names == [["A. Smith", "B. Jones"], ["C. Lee"]]


def test_race_order_follows_input_order():
    swapped = [["200m", "Heat 1", 1, "Z", "U10", "X"]] + MEET_ROWS

    tree = build_tree(swapped, FIELDS)

    assert [n.text for n in tree.find_all("h2")] == ["200m", "100m Freestyle"]


def test_redraw_is_deterministic_and_replaces_content():
    container = Container()
    draw(flat_message(MEET_ROWS), container)
    first = container.to_html()
    draw(flat_message(MEET_ROWS), container)

    assert container.to_html() == first
    assert container.mount_count == 2


@pytest.mark.parametrize(
    "message",
    [
        flat_message([]),
        flat_message(MEET_ROWS, fields=[]),
        {"tables": {"DEFAULT": []}},
        {},
    ],
)
def test_empty_input_renders_no_data(message):
    container = Container()

    assert draw(message, container) == DrawState.EMPTY
    assert container.root.text == EMPTY_MESSAGE
    assert container.root.find_all("div") == []


def test_missing_academy_renders_blank_cell():
    rows = [["100m", "Heat 1", 1, "A", "U12", None], ["100m", "Heat 1", 2, "B", "U12"]]
    container = Container()

    draw(flat_message(rows), container)

    body = container.root.find_all("tbody")[0]
    cells = [[td.text for td in tr.children] for tr in body.children]
    assert cells == [["1", "A", "U12", ""], ["2", "B", "U12", ""]]


def test_dimension_rows_draw_like_flat_rows():
    container = Container()

    draw({"tables": {"DEFAULT": [{"dimension": r} for r in MEET_ROWS]}}, container)

    flat = Container()
    draw(flat_message(MEET_ROWS), flat)

    assert container.to_html() == flat.to_html()


def test_builder_error_mounts_error_node(caplog):
    def broken(rows, fields):
        raise RuntimeError("bad payload")

    container = Container()
    with caplog.at_level(logging.ERROR, logger="heatsheet.draw"):
        state = draw(flat_message(MEET_ROWS), container, build=broken)

    assert state == DrawState.ERROR
    assert container.root.text == f"{ERROR_PREFIX}bad payload"
    assert "Error drawing visualization" in caplog.text


def test_mount_failure_falls_back_to_error_node():
    class FlakyContainer(Container):
        def replace(self, node):
            if "error" not in node.classes:
                raise OSError("surface gone")
            super().replace(node)

    container = FlakyContainer()

    assert draw(flat_message(MEET_ROWS), container) == DrawState.ERROR
    assert "surface gone" in container.root.text


def test_malformed_message_is_not_raised():
    container = Container()

    assert draw({"data": "nope"}, container) == DrawState.ERROR
    assert container.root.classes == ("error",)


def test_subscribe_registers_single_handler():
    events = DrawEvents()
    first, second = Container(), Container()
    subscribe(events, first)
    subscribe(events, second)

    state = events.dispatch(flat_message(MEET_ROWS))

    assert state == DrawState.POPULATED
    assert first.root is None
    assert second.root is not None


def test_dispatch_without_handler_is_a_no_op():
    assert DrawEvents().dispatch(flat_message(MEET_ROWS)) is None


def test_keyed_rows_without_fields_draw_populated():
    keyed = [
        {"race": "100m Freestyle", "heat": "Heat 1", "lane": 1, "name": "A. Smith", "agegroup": "U12", "academy": "Delta"},
        {"race": "100m Freestyle", "heat": "Heat 1", "lane": 2, "name": "B. Jones", "agegroup": "U12", "academy": "Echo"},
        {"race": "100m Freestyle", "heat": "Heat 2", "lane": 1, "name": "C. Lee", "agegroup": "U14", "academy": "Delta"},
    ]
    container = Container()

    state = draw({"data": {"tables": {"DEFAULT": keyed}}}, container)

    assert state == DrawState.POPULATED
    assert [n.text for n in container.root.find_all("h2")] == ["100m Freestyle"]
    assert [n.text for n in container.root.find_all("h3")] == ["Heat 1", "Heat 2"]
    flat = Container()
    draw(flat_message(MEET_ROWS), flat)
    assert container.to_html() == flat.to_html()


def test_builder_returning_non_node_mounts_error_node():
    container = Container()

    state = draw(flat_message(MEET_ROWS), container, build=lambda rows, fields: None)

    assert state == DrawState.ERROR
    assert container.root.classes == ("error",)
