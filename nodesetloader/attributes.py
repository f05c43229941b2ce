"""XML attributes of nodeset elements, their defaults and conversions."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Mapping, Optional

from .namespaces import NamespaceList
from .nodeid import NULL_NODE_ID, NodeId, parse_node_id
from .nodes import BrowseName

_C_WHITESPACE = " \t\n\v\f\r"


@dataclass(frozen=True)
class NodeAttribute:
    """An attribute name and the value used when it is absent."""

    name: str
    default: Optional[str] = None


NODE_ID = NodeAttribute("NodeId")
BROWSE_NAME = NodeAttribute("BrowseName")
PARENT_NODE_ID = NodeAttribute("ParentNodeId")
EVENT_NOTIFIER = NodeAttribute("EventNotifier", "0")
DATA_TYPE = NodeAttribute("DataType", "i=24")
VALUE_RANK = NodeAttribute("ValueRank", "-1")
ARRAY_DIMENSIONS = NodeAttribute("ArrayDimensions", "")
IS_ABSTRACT = NodeAttribute("IsAbstract", "false")
IS_FORWARD = NodeAttribute("IsForward", "true")
REFERENCE_TYPE = NodeAttribute("ReferenceType")
ALIAS = NodeAttribute("Alias")
EXECUTABLE = NodeAttribute("Executable", "true")
USER_EXECUTABLE = NodeAttribute("UserExecutable", "true")
ACCESS_LEVEL = NodeAttribute("AccessLevel", "1")
USER_ACCESS_LEVEL = NodeAttribute("UserAccessLevel", "1")
SYMMETRIC = NodeAttribute("Symmetric", "false")
DEFINITION_IS_UNION = NodeAttribute("IsUnion", "false")
DEFINITION_IS_OPTION_SET = NodeAttribute("IsOptionSet", "false")
FIELD_NAME = NodeAttribute("Name")
FIELD_DATA_TYPE = NodeAttribute("DataType", "i=24")
FIELD_VALUE = NodeAttribute("Value")
FIELD_IS_OPTIONAL = NodeAttribute("IsOptional", "false")
LOCALE = NodeAttribute("Locale")
HISTORIZING = NodeAttribute("Historizing", "false")
CONTAINS_NO_LOOPS = NodeAttribute("ContainsNoLoops", "false")


def get_attribute_value(
    attributes: Mapping[str, str], attr: NodeAttribute
) -> Optional[str]:
    """Value of ``attr`` among the element's attributes, else its default."""
    return attributes.get(attr.name, attr.default)


def _atoi(text: str) -> int:
    """Leading decimal integer of ``text``, 0 if there is none."""
    s = text.lstrip(_C_WHITESPACE)
    sign = 1
    if s[:1] in ("+", "-"):
        sign = -1 if s[0] == "-" else 1
        s = s[1:]
    digits = ""
    for ch in s:
        if not ("0" <= ch <= "9"):
            break
        digits += ch
    return sign * int(digits) if digits else 0


def _translate_node_id(namespaces: NamespaceList, node_id: NodeId) -> NodeId:
    if node_id.namespace_index == 0:
        return node_id
    ns = namespaces.get_namespace(node_id.namespace_index)
    if ns is None:
        return node_id
    return replace(node_id, namespace_index=ns.idx)


def extract_node_id(namespaces: NamespaceList, text: Optional[str]) -> NodeId:
    """Parse a node id and map its namespace to the global index.

    Missing or unparsable text gives the null node id.
    """
    if text is None:
        return NULL_NODE_ID
    try:
        node_id = parse_node_id(text)
    except ValueError:
        return NULL_NODE_ID
    return _translate_node_id(namespaces, node_id)


def extract_browse_name(namespaces: NamespaceList, text: Optional[str]) -> BrowseName:
    """Split ``ns:name`` and map the namespace to the global index."""
    if text is None:
        return BrowseName(0, None)
    prefix, sep, name = text.partition(":")
    if not sep:
        return BrowseName(0, text)
    ns_index = _atoi(text) & 0xFFFF
    if ns_index > 0:
        ns = namespaces.get_namespace(ns_index)
        if ns is not None:
            ns_index = ns.idx
    return BrowseName(ns_index, name)