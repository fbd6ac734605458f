"""
borderd Response Documents

One ResponseDocument is built per RPC call. It is an append-only tree
of scalars, arrays and named tables that renders to the reply object.

Reply shapes:
- Flat table of scalar fields (most get/set commands)
- Array of tables (neighbor list, joiner list, address list)
- Table of tables (leader data, diagnostic fan-out)

Insertion order is preserved on the wire. Every reply ends with a
numeric "Error" field written exactly once by finish().
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from ..errors import ErrorCode


ERROR_KEY = "Error"


class DocumentError(Exception):
    """Misuse of a response document (bad nesting, add after finish)."""


class NodeKind(Enum):
    SCALAR = "scalar"
    TABLE = "table"
    ARRAY = "array"


@dataclass
class Node:
    """
    One node of a response document.

    Containers keep their children in insertion order. Children of an
    array may carry names; they are dropped when rendering.
    """
    kind: NodeKind
    name: Optional[str] = None
    value: Any = None
    children: List["Node"] = field(default_factory=list)

    def render(self) -> Any:
        if self.kind == NodeKind.TABLE:
            return {child.name: child.render() for child in self.children}
        if self.kind == NodeKind.ARRAY:
            return [child.render() for child in self.children]
        return self.value


def _check_scalar(value: Any) -> None:
    if not isinstance(value, (str, int, float)) and value is not None:
        raise DocumentError(f"unsupported value type {type(value).__name__}")


class ResponseDocument:
    """
    Ordered, nestable reply builder.

    Usage:
        doc = ResponseDocument()
        with doc.array("neighbor_list"):
            with doc.table():
                doc.add("Role", "R")
                doc.add("Rloc16", "0x0400")
        doc.finish(ErrorCode.NONE)

        doc.to_dict()
        # {"neighbor_list": [{"Role": "R", "Rloc16": "0x0400"}], "Error": 0}
    """

    def __init__(self):
        self._root = Node(NodeKind.TABLE)
        self._open: List[Node] = [self._root]
        self._finished = False

    # === Building ===

    @property
    def current(self) -> Node:
        """Innermost open container."""
        return self._open[-1]

    @property
    def depth(self) -> int:
        """Number of open containers below the root."""
        return len(self._open) - 1

    @property
    def finished(self) -> bool:
        return self._finished

    def _append(self, node: Node) -> None:
        if self._finished:
            raise DocumentError("document already finished")
        parent = self.current
        if parent.kind == NodeKind.TABLE and node.name is None:
            raise DocumentError("table entries need a name")
        parent.children.append(node)

    def add(self, name: Optional[str], value: Any) -> None:
        """
        Append a scalar to the innermost open container.

        Args:
            name: Field name (ignored inside arrays)
            value: str, int or float

        Raises:
            DocumentError: On unsupported value or finished document
        """
        _check_scalar(value)
        self._append(Node(NodeKind.SCALAR, name, value))

    def open_table(self, name: Optional[str] = None) -> Node:
        """Open a nested table and return its handle."""
        node = Node(NodeKind.TABLE, name)
        self._append(node)
        self._open.append(node)
        return node

    def open_array(self, name: Optional[str] = None) -> Node:
        """Open a nested array and return its handle."""
        node = Node(NodeKind.ARRAY, name)
        self._append(node)
        self._open.append(node)
        return node

    def close(self, handle: Node) -> None:
        """
        Close a container opened by open_table() / open_array().

        Raises:
            DocumentError: If handle is not the innermost open container
        """
        if len(self._open) < 2 or self._open[-1] is not handle:
            raise DocumentError("can only close the innermost open container")
        self._open.pop()

    def close_all(self) -> None:
        """Close every open container (used when a handler bails out)."""
        del self._open[1:]

    @contextmanager
    def table(self, name: Optional[str] = None) -> Iterator[Node]:
        handle = self.open_table(name)
        try:
            yield handle
        finally:
            if self._open[-1] is handle:
                self.close(handle)

    @contextmanager
    def array(self, name: Optional[str] = None) -> Iterator[Node]:
        handle = self.open_array(name)
        try:
            yield handle
        finally:
            if self._open[-1] is handle:
                self.close(handle)

    def extend(self, data: Dict[str, Any]) -> None:
        """
        Append a rendered mapping, nested dicts and lists included.

        Used to copy a cached snapshot into a fresh reply.
        """
        for name, value in data.items():
            self._extend_value(name, value)

    def _extend_value(self, name: Optional[str], value: Any) -> None:
        if isinstance(value, dict):
            with self.table(name):
                for key, item in value.items():
                    self._extend_value(key, item)
        elif isinstance(value, list):
            with self.array(name):
                for item in value:
                    self._extend_value(None, item)
        else:
            self.add(name, value)

    def finish(self, error: ErrorCode) -> Dict[str, Any]:
        """
        Append the "Error" field and seal the document.

        Returns:
            The rendered reply

        Raises:
            DocumentError: If already finished or containers are still open
        """
        if self._finished:
            raise DocumentError("document already finished")
        if self.depth:
            raise DocumentError(f"{self.depth} container(s) still open")
        self._root.children.append(Node(NodeKind.SCALAR, ERROR_KEY, int(error)))
        self._finished = True
        return self.to_dict()

    # === Rendering ===

    def to_dict(self) -> Dict[str, Any]:
        """Render the document; containers still open are rendered as-is."""
        return self._root.render()

    def __len__(self) -> int:
        return len(self._root.children)
