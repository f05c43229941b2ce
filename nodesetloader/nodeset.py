"""The nodes, aliases and namespaces of the nodesets being loaded."""

from __future__ import annotations

import re
from typing import Any, Callable, Mapping, Optional

from .aliases import Alias, AliasList
from .attributes import (
    ACCESS_LEVEL,
    ALIAS,
    ARRAY_DIMENSIONS,
    BROWSE_NAME,
    CONTAINS_NO_LOOPS,
    DATA_TYPE,
    DEFINITION_IS_OPTION_SET,
    DEFINITION_IS_UNION,
    EVENT_NOTIFIER,
    EXECUTABLE,
    FIELD_DATA_TYPE,
    FIELD_IS_OPTIONAL,
    FIELD_NAME,
    FIELD_VALUE,
    HISTORIZING,
    IS_ABSTRACT,
    IS_FORWARD,
    LOCALE,
    NODE_ID,
    PARENT_NODE_ID,
    REFERENCE_TYPE,
    SYMMETRIC,
    USER_ACCESS_LEVEL,
    USER_EXECUTABLE,
    VALUE_RANK,
    NodeAttribute,
    extract_browse_name,
    extract_node_id,
    get_attribute_value,
)
from .logger import Logger, LogLevel
from .namespaces import AddNamespaceCallback, Namespace, NamespaceList
from .nodeid import NodeId
from .nodes import (
    BiDirectionalReference,
    DataTypeNode,
    MethodNode,
    Node,
    NodeClass,
    NodeContainer,
    ObjectNode,
    ObjectTypeNode,
    Reference,
    ReferenceTypeNode,
    VariableNode,
    VariableTypeNode,
    ViewNode,
    new_node,
)
from .refservice import InternalReferenceService, ReferenceService
from .sort import SortContext

HAS_ENCODING_ID = NodeId.numeric(0, 38)
DEFAULT_BINARY = "Default Binary"

Attributes = Mapping[str, str]

_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")


def _leading_int(text: Optional[str]) -> int:
    """Leading decimal integer of ``text``, 0 if there is none."""
    if text is None:
        return 0
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


class UnresolvedReferenceError(Exception):
    """Raised when a node keeps references whose type cannot be classified."""

    def __init__(self, node_id: NodeId) -> None:
        self.node_id = node_id
        super().__init__(f"node with unresolved reference(s): NodeId({node_id})")


class Nodeset:
    """Collects nodes while a nodeset is read and orders them afterwards."""

    def __init__(
        self,
        add_namespace: AddNamespaceCallback,
        logger: Optional[Logger] = None,
        ref_service: Optional[ReferenceService] = None,
    ) -> None:
        self.aliases = AliasList()
        self.namespaces = NamespaceList(add_namespace)
        self.logger = logger
        self.ref_service: ReferenceService = (
            ref_service if ref_service is not None else InternalReferenceService()
        )
        self._nodes = {node_class: NodeContainer() for node_class in NodeClass}
        self._nodes_with_unknown_refs = NodeContainer()
        self._ref_types_with_unknown_refs = NodeContainer()
        self._sort_ctx = SortContext(logger)
        self._has_encoding_refs: list[BiDirectionalReference] = []

    def _node_id(self, attributes: Attributes, attr: NodeAttribute) -> NodeId:
        return extract_node_id(self.namespaces, get_attribute_value(attributes, attr))

    def _alias_to_id(self, name: Optional[str]) -> NodeId:
        alias = self.aliases.get_node_id(name)
        if alias is None:
            return extract_node_id(self.namespaces, name)
        return alias

    def new_node(self, node_class: NodeClass, attributes: Attributes) -> Node:
        """Create a node of ``node_class`` from the attributes of its element."""
        node = new_node(node_class)
        get = lambda attr: get_attribute_value(attributes, attr)  # noqa: E731
        node.id = self._node_id(attributes, NODE_ID)
        node.browse_name = extract_browse_name(self.namespaces, get(BROWSE_NAME))
        if isinstance(node, ObjectTypeNode):
            node.is_abstract = get(IS_ABSTRACT)
        elif isinstance(node, ObjectNode):
            node.parent_node_id = self._node_id(attributes, PARENT_NODE_ID)
            node.event_notifier = get(EVENT_NOTIFIER)
        elif isinstance(node, VariableNode):
            node.parent_node_id = self._node_id(attributes, PARENT_NODE_ID)
            node.datatype = self._alias_to_id(get(DATA_TYPE))
            node.value_rank = get(VALUE_RANK)
            node.array_dimensions = get(ARRAY_DIMENSIONS)
            node.access_level = get(ACCESS_LEVEL)
            node.user_access_level = get(USER_ACCESS_LEVEL)
            node.historizing = get(HISTORIZING)
        elif isinstance(node, VariableTypeNode):
            node.value_rank = get(VALUE_RANK)
            node.datatype = self._alias_to_id(get(DATA_TYPE))
            node.array_dimensions = get(ARRAY_DIMENSIONS)
            node.is_abstract = get(IS_ABSTRACT)
        elif isinstance(node, DataTypeNode):
            node.is_abstract = get(IS_ABSTRACT)
        elif isinstance(node, MethodNode):
            node.parent_node_id = self._node_id(attributes, PARENT_NODE_ID)
            node.executable = get(EXECUTABLE)
            node.user_executable = get(USER_EXECUTABLE)
        elif isinstance(node, ReferenceTypeNode):
            node.symmetric = get(SYMMETRIC)
        elif isinstance(node, ViewNode):
            node.parent_node_id = self._node_id(attributes, PARENT_NODE_ID)
            node.contains_no_loops = get(CONTAINS_NO_LOOPS)
            node.event_notifier = get(EVENT_NOTIFIER)
        return node

    def new_node_finish(self, node: Node) -> None:
        """Hand a completely read node over for sorting."""
        if not node.unknown_refs:
            self._sort_ctx.add_node(node)
            if isinstance(node, ReferenceTypeNode):
                self.ref_service.add_new_reference_type(node)
        elif isinstance(node, ReferenceTypeNode):
            self._ref_types_with_unknown_refs.add(node)
        else:
            self._nodes_with_unknown_refs.add(node)

    def new_reference(self, node: Node, attributes: Attributes) -> Reference:
        """Create a reference of ``node`` and file it by its kind."""
        ref = Reference(
            is_forward=get_attribute_value(attributes, IS_FORWARD) == "true",
            ref_type=self._alias_to_id(get_attribute_value(attributes, REFERENCE_TYPE)),
        )
        service = self.ref_service
        if isinstance(node, (VariableNode, ObjectNode)) and service.is_has_type_def_ref(ref):
            node.ref_to_type_def = ref
        elif service.is_hierarchical_ref(ref):
            node.hierarchical_refs.insert(0, ref)
        elif service.is_non_hierarchical_ref(ref):
            node.non_hierarchical_refs.insert(0, ref)
        else:
            node.unknown_refs.insert(0, ref)
        return ref

    def new_reference_finish(
        self, ref: Reference, node: Node, target_id: Optional[str]
    ) -> None:
        """Set the reference's target; inverse encodings are also recorded."""
        ref.target = self._alias_to_id(target_id)
        if (
            ref.ref_type == HAS_ENCODING_ID
            and node.browse_name.name == DEFAULT_BINARY
            and not ref.is_forward
        ):
            self._has_encoding_refs.insert(
                0,
                BiDirectionalReference(
                    source=ref.target, target=node.id, ref_type=ref.ref_type
                ),
            )

    def new_alias(self, attributes: Attributes) -> Alias:
        return self.aliases.new_alias(get_attribute_value(attributes, ALIAS))

    def new_alias_finish(self, alias: Alias, id_string: Optional[str]) -> None:
        alias.id = extract_node_id(self.namespaces, id_string)

    def new_namespace_finish(self, user_context: Any, uri: str) -> Namespace:
        return self.namespaces.new_namespace(user_context, uri)

    def add_datatype_definition(self, node: Node, attributes: Attributes) -> None:
        """Start the definition of a data type node; other nodes are ignored."""
        if not isinstance(node, DataTypeNode):
            return
        definition = node.new_definition()
        definition.is_union = get_attribute_value(attributes, DEFINITION_IS_UNION) == "true"
        definition.is_option_set = (
            get_attribute_value(attributes, DEFINITION_IS_OPTION_SET) == "true"
        )

    def add_datatype_field(self, node: Node, attributes: Attributes) -> None:
        """Add a field to a data type's definition; option sets keep none."""
        if not isinstance(node, DataTypeNode) or node.definition is None:
            return
        definition = node.definition
        if definition.is_option_set:
            return
        new_field = definition.add_field()
        new_field.name = get_attribute_value(attributes, FIELD_NAME)
        value = get_attribute_value(attributes, FIELD_VALUE)
        if value is not None:
            new_field.value = _leading_int(value)
            definition.is_enum = not definition.is_option_set
        else:
            new_field.data_type = self._alias_to_id(
                get_attribute_value(attributes, FIELD_DATA_TYPE)
            )
            new_field.value_rank = _leading_int(get_attribute_value(attributes, VALUE_RANK))
            new_field.is_optional = (
                get_attribute_value(attributes, FIELD_IS_OPTIONAL) == "true"
            )

    def set_display_name(self, node: Node, attributes: Attributes) -> None:
        node.display_name.locale = get_attribute_value(attributes, LOCALE)

    def display_name_finish(self, node: Node, text: Optional[str]) -> None:
        node.display_name.text = text

    def set_description(self, node: Node, attributes: Attributes) -> None:
        node.description.locale = get_attribute_value(attributes, LOCALE)

    def description_finish(self, node: Node, text: Optional[str]) -> None:
        node.description.text = text

    def set_inverse_name(self, node: Node, attributes: Attributes) -> None:
        if isinstance(node, ReferenceTypeNode):
            node.inverse_name.locale = get_attribute_value(attributes, LOCALE)

    def inverse_name_finish(self, node: Node, text: Optional[str]) -> None:
        if isinstance(node, ReferenceTypeNode):
            node.inverse_name.text = text

    def _lookup_unknown_references(self, node: Node) -> bool:
        service = self.ref_service
        while node.unknown_refs:
            ref = node.unknown_refs[0]
            if service.is_hierarchical_ref(ref):
                node.hierarchical_refs.insert(0, ref)
            elif service.is_non_hierarchical_ref(ref):
                node.non_hierarchical_refs.insert(0, ref)
            else:
                return False
            node.unknown_refs.pop(0)
        return True

    def _fail_unresolved(self, node: Node) -> None:
        error = UnresolvedReferenceError(node.id)
        if self.logger is not None:
            self.logger.log(LogLevel.ERROR, str(error))
        raise error

    def _lookup_reference_types(self) -> None:
        known = True
        last: Optional[Node] = None
        for node in self._ref_types_with_unknown_refs:
            known = self._lookup_unknown_references(node)
            last = node
        if not known and last is not None:
            self._fail_unresolved(last)
        for node in self._ref_types_with_unknown_refs:
            self._sort_ctx.add_node(node)

    def _add_sorted(self, node: Node) -> None:
        self._nodes[node.node_class].add(node)

    def sort(self) -> None:
        """Order every node so that each comes after its parents.

        Raises UnresolvedReferenceError or CycleError when that is impossible.
        """
        self._lookup_reference_types()
        for node in self._nodes_with_unknown_refs:
            if not self._lookup_unknown_references(node):
                self._fail_unresolved(node)
            self._sort_ctx.add_node(node)
        self._sort_ctx.start(self._add_sorted)

    def bidirectional_refs(self) -> list[BiDirectionalReference]:
        """HasEncoding references recorded from the encoding side, newest first."""
        return list(self._has_encoding_refs)

    def for_each_node(self, node_class: NodeClass, fn: Callable[[Node], Any]) -> int:
        """Call ``fn`` for each sorted node of a class; return their number."""
        container = self._nodes[NodeClass(node_class)]
        for node in container:
            fn(node)
        return len(container)