from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Optional

from heatsheet.config import DEFAULT_TABLE
from heatsheet.container import MountTarget
from heatsheet.grouping import count_swimmers, group_by_race_and_heat
from heatsheet.normalizer import is_dimension_row, is_keyed_row, normalize_rows
from heatsheet.render import Node, render_empty, render_error, render_grouping

logger = logging.getLogger(__name__)

TreeBuilder = Callable[[list, Optional[list]], Node]
DrawHandler = Callable[[Mapping], "DrawState"]


class DrawState(str, Enum):
    POPULATED = "populated"
    EMPTY = "empty"
    ERROR = "error"


def extract_payload(message: Mapping, table: str = DEFAULT_TABLE) -> tuple[list, Optional[list]]:
    """Return ``(rows, fields)`` from either host message shape.

    ``{"data": {"tables": ..., "fields": ...}}`` carries flat rows and field
    descriptors; ``{"tables": ...}`` carries dimension rows and no fields.
    """
    data = message.get("data", message)
    rows = (data.get("tables") or {}).get(table) or []
    fields = (data.get("fields") or {}).get(table)
    return list(rows), (list(fields) if fields is not None else None)


def has_data(rows: list, fields: Optional[list]) -> bool:
    if not rows:
        return False
    if is_dimension_row(rows[0]) or is_keyed_row(rows[0]):
        return True
    return bool(fields)


def build_tree(rows: list, fields: Optional[list] = None) -> Node:
    if not has_data(rows, fields):
        return render_empty()
    grouping = group_by_race_and_heat(normalize_rows(rows, fields))
    logger.debug("Grouped %d swimmers into %d races", count_swimmers(grouping), len(grouping))
    return render_grouping(grouping)


def draw(message: Mapping, container: MountTarget, build: TreeBuilder = build_tree) -> DrawState:
    """Rebuild the whole display tree for ``message`` and mount it.

    Exactly one of the populated tree, the empty state or the error node ends
    up mounted; errors are never raised to the caller.
    """
    try:
        rows, fields = extract_payload(message)
        tree = build(rows, fields)
        container.replace(tree)
        state = DrawState.EMPTY if "no-data" in tree.classes else DrawState.POPULATED
    except Exception as exc:
        logger.exception("Error drawing visualization")
        try:
            container.replace(render_error(str(exc)))
        except Exception:
            logger.exception("Could not mount error message")
        return DrawState.ERROR
    return state


def make_draw_handler(container: MountTarget, build: TreeBuilder = build_tree) -> DrawHandler:
    def handler(message: Mapping) -> DrawState:
        return draw(message, container, build)

    return handler


class DrawEvents:
    """Host event source that delivers draw messages to a single handler."""

    def __init__(self) -> None:
        self._handler: Optional[DrawHandler] = None

    def subscribe_to_data(self, handler: DrawHandler) -> None:
        if self._handler is not None:
            logger.debug("Replacing existing draw handler")
        self._handler = handler

    def dispatch(self, message: Mapping) -> Any:
        if self._handler is None:
            logger.warning("Draw message dropped: no handler subscribed")
            return None
        return self._handler(message)


def subscribe(events: DrawEvents, container: MountTarget, build: TreeBuilder = build_tree) -> DrawHandler:
    handler = make_draw_handler(container, build)
    events.subscribe_to_data(handler)
    return handler
