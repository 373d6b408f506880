from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator
from xml.sax.saxutils import escape

from heatsheet.config import COLUMN_HEADERS, EMPTY_MESSAGE, ERROR_PREFIX
from heatsheet.models import Grouping, SwimmerRecord


@dataclass(slots=True)
class Node:
    tag: str
    text: str = ""
    classes: tuple[str, ...] = ()
    children: list[Node] = field(default_factory=list)

    def append(self, child: Node) -> Node:
        self.children.append(child)
        return child

    def iter(self, tag: str | None = None) -> Iterator[Node]:
        """Depth-first walk over this node and its descendants."""
        if tag is None or self.tag == tag:
            yield self
        for child in self.children:
            yield from child.iter(tag)

    def find_all(self, tag: str, css_class: str | None = None) -> list[Node]:
        return [n for n in self.iter(tag) if css_class is None or css_class in n.classes]


def format_cell(value: Any) -> str:
    return "" if value is None else str(value)


def render_empty() -> Node:
    return Node("p", EMPTY_MESSAGE, ("no-data",))


def render_error(message: str) -> Node:
    return Node("p", f"{ERROR_PREFIX}{message}", ("error",))


def _header_row() -> Node:
    row = Node("tr")
    for label in COLUMN_HEADERS:
        row.append(Node("th", label))
    return row


def _swimmer_row(index: int, swimmer: SwimmerRecord) -> Node:
    row = Node("tr", classes=("row-even" if index % 2 == 0 else "row-odd",))
    for value in swimmer.cells():
        row.append(Node("td", format_cell(value)))
    return row


def _heat_section(heat_name: Any, swimmers: list[SwimmerRecord]) -> Node:
    section = Node("div", classes=("heat-container",))
    section.append(Node("h3", format_cell(heat_name), ("heat-title",)))
    table = section.append(Node("table", classes=("data-table",)))
    table.append(Node("thead", children=[_header_row()]))
    body = table.append(Node("tbody"))
    for index, swimmer in enumerate(swimmers):
        body.append(_swimmer_row(index, swimmer))
    return section


def render_grouping(grouping: Grouping) -> Node:
    if not grouping:
        return render_empty()
    root = Node("div", classes=("results",))
    for race_name, heats in grouping.items():
        race = root.append(Node("div", classes=("race-container",)))
        race.append(Node("h2", format_cell(race_name), ("race-title",)))
        for heat_name, swimmers in heats.items():
            race.append(_heat_section(heat_name, swimmers))
    return root


def to_html(node: Node) -> str:
    attrs = f' class="{" ".join(node.classes)}"' if node.classes else ""
    inner = escape(node.text) + "".join(to_html(child) for child in node.children)
    return f"<{node.tag}{attrs}>{inner}</{node.tag}>"
