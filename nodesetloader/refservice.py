"""Classification of reference types as hierarchical or not."""

from __future__ import annotations

import abc

from .nodeid import NodeId
from .nodes import BrowseName, NodeContainer, Reference, ReferenceTypeNode

HAS_TYPE_DEFINITION_ID = NodeId.numeric(0, 40)

_BUILTIN_HIERARCHICAL = (
    (35, "Organizes"),
    (36, "HasEventSource"),
    (48, "HasNotifier"),
    (44, "Aggregates"),
    (45, "HasSubtype"),
    (47, "HasComponent"),
    (46, "HasProperty"),
    (38, "HasEncoding"),
    (33, "HierarchicalReferences"),
)


class ReferenceService(abc.ABC):
    """Decides how references are treated while loading."""

    @abc.abstractmethod
    def add_new_reference_type(self, node: ReferenceTypeNode) -> None:
        """Make a reference type defined by the nodeset known."""

    @abc.abstractmethod
    def is_hierarchical_ref(self, ref: Reference) -> bool:
        """True if the reference's type is hierarchical."""

    @abc.abstractmethod
    def is_non_hierarchical_ref(self, ref: Reference) -> bool:
        """True if the reference's type is known to be non-hierarchical."""

    @abc.abstractmethod
    def is_has_type_def_ref(self, ref: Reference) -> bool:
        """True if the reference is a HasTypeDefinition reference."""


def _builtin_types() -> list[ReferenceTypeNode]:
    return [
        ReferenceTypeNode(id=NodeId.numeric(0, number), browse_name=BrowseName(0, name))
        for number, name in _BUILTIN_HIERARCHICAL
    ]


class InternalReferenceService(ReferenceService):
    """Default service knowing the standard hierarchical reference types."""

    def __init__(self) -> None:
        self._hierarchical: list[ReferenceTypeNode] = _builtin_types()
        self._non_hierarchical = NodeContainer()

    @property
    def hierarchical_types(self) -> tuple[ReferenceTypeNode, ...]:
        return tuple(self._hierarchical)

    @property
    def non_hierarchical_types(self) -> tuple[ReferenceTypeNode, ...]:
        return tuple(self._non_hierarchical)

    def add_new_reference_type(self, node: ReferenceTypeNode) -> None:
        is_hierarchical = False
        for ref in node.hierarchical_refs:
            if ref.is_forward:
                continue
            if any(known.id == ref.target for known in self._hierarchical):
                self._hierarchical.append(node)
                is_hierarchical = True
        if not is_hierarchical:
            self._non_hierarchical.add(node)

    def is_hierarchical_ref(self, ref: Reference) -> bool:
        return any(known.id == ref.ref_type for known in self._hierarchical)

    def is_non_hierarchical_ref(self, ref: Reference) -> bool:
        # Every reference type of namespace 0 is taken as known.
        if ref.ref_type.namespace_index == 0:
            return True
        return any(known.id == ref.ref_type for known in self._non_hierarchical)

    def is_has_type_def_ref(self, ref: Reference) -> bool:
        return ref.ref_type == HAS_TYPE_DEFINITION_ID