"""Topological ordering of nodes along their hierarchical references."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Optional

from .logger import Logger, LogLevel
from .nodeid import NodeId
from .nodes import Node, Reference, is_instance_node

HAS_COMPONENT_ID = NodeId.numeric(0, 47)


class CycleError(Exception):
    """Raised when the hierarchical references of the nodes form a loop."""


@dataclass(eq=False)
class _Vertex:
    id: NodeId
    edges: list[_Vertex] = field(default_factory=list)
    in_degree: int = 0
    data: Optional[Node] = None
    done: bool = False


class SortContext:
    """Collects nodes and hands them out parents first."""

    def __init__(self, logger: Optional[Logger] = None) -> None:
        self._logger = logger
        self._vertices: dict[NodeId, _Vertex] = {}

    def _vertex(self, node_id: NodeId) -> _Vertex:
        vertex = self._vertices.get(node_id)
        if vertex is None:
            vertex = _Vertex(node_id)
            self._vertices[node_id] = vertex
        return vertex

    @staticmethod
    def _relate(source: _Vertex, dest: _Vertex) -> None:
        if source.id == dest.id:
            return
        dest.in_degree += 1
        source.edges.append(dest)

    def add_node(self, node: Node) -> None:
        """Register a node and the ordering its hierarchical references imply."""
        vertex = self._vertex(node.id)
        vertex.data = node
        for ref in node.hierarchical_refs:
            other = self._vertex(ref.target)
            if ref.is_forward:
                self._relate(vertex, other)
            else:
                self._relate(other, vertex)
        if node.hierarchical_refs or not is_instance_node(node):
            return

        parent_id = node.parent_node_id
        if parent_id.is_null():
            return
        parent = self._vertex(parent_id)
        if parent.data is not None:
            for ref in parent.data.hierarchical_refs:
                if ref.target == node.id:
                    node.hierarchical_refs.insert(
                        0,
                        Reference(
                            is_forward=not ref.is_forward,
                            ref_type=ref.ref_type,
                            target=parent.data.id,
                        ),
                    )
                    return
        node.hierarchical_refs.insert(
            0, Reference(is_forward=False, ref_type=HAS_COMPONENT_ID, target=parent_id)
        )

    def start(self, callback: Callable[[Node], None]) -> None:
        """Call ``callback`` for every added node, each after its parents.

        Raises CycleError if some nodes cannot be ordered.
        """
        pending = sorted(
            (v for v in self._vertices.values() if not v.done),
            key=lambda v: v.id.sort_key(),
        )
        remaining = len(pending)
        queue = deque(v for v in pending if v.in_degree == 0)
        while queue:
            vertex = queue.popleft()
            if vertex.data is not None:
                callback(vertex.data)
            vertex.done = True
            remaining -= 1
            for dest in reversed(vertex.edges):
                dest.in_degree -= 1
                if dest.in_degree == 0:
                    queue.append(dest)
        if remaining:
            message = "graph contains a loop, abort"
            if self._logger is not None:
                self._logger.log(LogLevel.ERROR, message)
            raise CycleError(message)