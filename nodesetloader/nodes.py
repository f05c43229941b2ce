"""Node model of a nodeset: node classes, references and containers."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterator, Optional

from .nodeid import NULL_NODE_ID, NodeId


class NodeClass(enum.IntEnum):
    """The node classes a nodeset may hold."""

    OBJECT = 0
    OBJECTTYPE = 1
    VARIABLE = 2
    DATATYPE = 3
    METHOD = 4
    REFERENCETYPE = 5
    VARIABLETYPE = 6
    VIEW = 7

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    NodeClass.OBJECT: "Object",
    NodeClass.OBJECTTYPE: "ObjectType",
    NodeClass.VARIABLE: "Variable",
    NodeClass.DATATYPE: "DataType",
    NodeClass.METHOD: "Method",
    NodeClass.REFERENCETYPE: "ReferenceType",
    NodeClass.VARIABLETYPE: "VariableType",
    NodeClass.VIEW: "View",
}


@dataclass
class BrowseName:
    ns_index: int = 0
    name: Optional[str] = None


@dataclass
class LocalizedText:
    locale: Optional[str] = None
    text: Optional[str] = None


@dataclass
class Reference:
    is_forward: bool = False
    ref_type: NodeId = NULL_NODE_ID
    target: NodeId = NULL_NODE_ID


@dataclass
class BiDirectionalReference:
    source: NodeId = NULL_NODE_ID
    target: NodeId = NULL_NODE_ID
    ref_type: NodeId = NULL_NODE_ID


@dataclass
class DataTypeDefinitionField:
    name: Optional[str] = None
    data_type: NodeId = NULL_NODE_ID
    value_rank: int = 0
    value: int = 0
    is_optional: bool = False


@dataclass
class DataTypeDefinition:
    fields: list[DataTypeDefinitionField] = field(default_factory=list)
    is_enum: bool = False
    is_union: bool = False
    is_option_set: bool = False

    def add_field(self) -> DataTypeDefinitionField:
        """Append an empty field and return it."""
        new_field = DataTypeDefinitionField()
        self.fields.append(new_field)
        return new_field


@dataclass(eq=False)
class Node:
    """Attributes and references shared by every node class."""

    node_class: ClassVar[NodeClass]

    id: NodeId = NULL_NODE_ID
    browse_name: BrowseName = field(default_factory=BrowseName)
    display_name: LocalizedText = field(default_factory=LocalizedText)
    description: LocalizedText = field(default_factory=LocalizedText)
    hierarchical_refs: list[Reference] = field(default_factory=list)
    non_hierarchical_refs: list[Reference] = field(default_factory=list)
    unknown_refs: list[Reference] = field(default_factory=list)
    extension: Any = None


@dataclass(eq=False)
class ObjectNode(Node):
    node_class: ClassVar[NodeClass] = NodeClass.OBJECT
    parent_node_id: NodeId = NULL_NODE_ID
    event_notifier: Optional[str] = None
    ref_to_type_def: Optional[Reference] = None


@dataclass(eq=False)
class ObjectTypeNode(Node):
    node_class: ClassVar[NodeClass] = NodeClass.OBJECTTYPE
    is_abstract: Optional[str] = None


@dataclass(eq=False)
class VariableNode(Node):
    node_class: ClassVar[NodeClass] = NodeClass.VARIABLE
    parent_node_id: NodeId = NULL_NODE_ID
    datatype: NodeId = NULL_NODE_ID
    value_rank: Optional[str] = None
    array_dimensions: Optional[str] = None
    access_level: Optional[str] = None
    user_access_level: Optional[str] = None
    historizing: Optional[str] = None
    ref_to_type_def: Optional[Reference] = None
    value: Any = None


@dataclass(eq=False)
class VariableTypeNode(Node):
    node_class: ClassVar[NodeClass] = NodeClass.VARIABLETYPE
    datatype: NodeId = NULL_NODE_ID
    value_rank: Optional[str] = None
    array_dimensions: Optional[str] = None
    is_abstract: Optional[str] = None


@dataclass(eq=False)
class DataTypeNode(Node):
    node_class: ClassVar[NodeClass] = NodeClass.DATATYPE
    is_abstract: Optional[str] = None
    definition: Optional[DataTypeDefinition] = None

    def new_definition(self) -> DataTypeDefinition:
        """Give the node a fresh, empty definition and return it."""
        self.definition = DataTypeDefinition()
        return self.definition


@dataclass(eq=False)
class MethodNode(Node):
    node_class: ClassVar[NodeClass] = NodeClass.METHOD
    parent_node_id: NodeId = NULL_NODE_ID
    executable: Optional[str] = None
    user_executable: Optional[str] = None


@dataclass(eq=False)
class ReferenceTypeNode(Node):
    node_class: ClassVar[NodeClass] = NodeClass.REFERENCETYPE
    symmetric: Optional[str] = None
    inverse_name: LocalizedText = field(default_factory=LocalizedText)


@dataclass(eq=False)
class ViewNode(Node):
    node_class: ClassVar[NodeClass] = NodeClass.VIEW
    parent_node_id: NodeId = NULL_NODE_ID
    contains_no_loops: Optional[str] = None
    event_notifier: Optional[str] = None


_NODE_TYPES: dict[NodeClass, type[Node]] = {
    NodeClass.OBJECT: ObjectNode,
    NodeClass.OBJECTTYPE: ObjectTypeNode,
    NodeClass.VARIABLE: VariableNode,
    NodeClass.DATATYPE: DataTypeNode,
    NodeClass.METHOD: MethodNode,
    NodeClass.REFERENCETYPE: ReferenceTypeNode,
    NodeClass.VARIABLETYPE: VariableTypeNode,
    NodeClass.VIEW: ViewNode,
}

_INSTANCE_CLASSES = frozenset(
    {NodeClass.VARIABLE, NodeClass.OBJECT, NodeClass.METHOD, NodeClass.VIEW}
)


def new_node(node_class: NodeClass) -> Node:
    """Create an empty node of the given class."""
    return _NODE_TYPES[NodeClass(node_class)]()


def is_instance_node(node: Node) -> bool:
    """True for variables, objects, methods and views."""
    return node.node_class in _INSTANCE_CLASSES


class NodeContainer:
    """An ordered, growable collection of nodes."""

    def __init__(self) -> None:
        self._nodes: list[Node] = []

    def add(self, node: Node) -> None:
        self._nodes.append(node)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __getitem__(self, index: int) -> Node:
        return self._nodes[index]