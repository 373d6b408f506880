from __future__ import annotations

from typing import Optional, Protocol

from heatsheet.render import Node, to_html


class MountTarget(Protocol):
    def replace(self, node: Node) -> None:
        """Drop whatever is mounted and mount ``node`` in its place."""
        ...


class Container:
    """In-memory mount point holding at most one display tree."""

    def __init__(self) -> None:
        self.root: Optional[Node] = None
        self.mount_count = 0

    def replace(self, node: Node) -> None:
        self.root = node
        self.mount_count += 1

    def to_html(self) -> str:
        if self.root is None:
            return ""
        return to_html(self.root)
