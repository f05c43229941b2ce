"""Node identifiers: parsing, printing and ordering."""

from __future__ import annotations

import base64
import binascii
import enum
import uuid
from dataclasses import dataclass
from typing import Union

_MAX_NAMESPACE = 0xFFFF
_MAX_NUMERIC = 0xFFFFFFFF

Identifier = Union[int, str, uuid.UUID, bytes]


class NodeIdType(enum.IntEnum):
    """Kind of identifier a node id carries."""

    NUMERIC = 0
    STRING = 3
    GUID = 4
    BYTESTRING = 5


_PREFIXES = {
    "i": NodeIdType.NUMERIC,
    "s": NodeIdType.STRING,
    "g": NodeIdType.GUID,
    "b": NodeIdType.BYTESTRING,
}
_PREFIX_OF = {kind: prefix for prefix, kind in _PREFIXES.items()}
_PYTHON_TYPE = {
    NodeIdType.NUMERIC: int,
    NodeIdType.STRING: str,
    NodeIdType.GUID: uuid.UUID,
    NodeIdType.BYTESTRING: bytes,
}


@dataclass(frozen=True)
class NodeId:
    """A node identifier made of a namespace index and an identifier."""

    namespace_index: int = 0
    identifier_type: NodeIdType = NodeIdType.NUMERIC
    identifier: Identifier = 0

    def __post_init__(self) -> None:
        if not 0 <= self.namespace_index <= _MAX_NAMESPACE:
            raise ValueError(f"namespace index out of range: {self.namespace_index}")
        expected = _PYTHON_TYPE[NodeIdType(self.identifier_type)]
        if not isinstance(self.identifier, expected) or (
            expected is int and isinstance(self.identifier, bool)
        ):
            raise TypeError(
                f"identifier of a {NodeIdType(self.identifier_type).name} node id "
                f"must be {expected.__name__}"
            )
        if expected is int and not 0 <= self.identifier <= _MAX_NUMERIC:
            raise ValueError(f"numeric identifier out of range: {self.identifier}")

    @classmethod
    def numeric(cls, namespace_index: int, value: int) -> NodeId:
        return cls(namespace_index, NodeIdType.NUMERIC, value)

    @classmethod
    def string(cls, namespace_index: int, value: str) -> NodeId:
        return cls(namespace_index, NodeIdType.STRING, value)

    def is_null(self) -> bool:
        """True for the null id: namespace 0 and an empty or zero identifier."""
        if self.namespace_index != 0:
            return False
        if self.identifier_type is NodeIdType.NUMERIC:
            return self.identifier == 0
        if self.identifier_type is NodeIdType.GUID:
            return self.identifier.int == 0
        return len(self.identifier) == 0

    def sort_key(self) -> tuple:
        """Key giving the total order over node ids used for sorting."""
        ident = self.identifier
        if self.identifier_type is NodeIdType.STRING:
            raw = ident.encode("utf-8")
            key = (len(raw), raw)
        elif self.identifier_type is NodeIdType.BYTESTRING:
            key = (len(ident), ident)
        elif self.identifier_type is NodeIdType.GUID:
            key = ident.bytes
        else:
            key = ident
        return (self.namespace_index, int(self.identifier_type), key)

    def __str__(self) -> str:
        prefix = f"ns={self.namespace_index};" if self.namespace_index else ""
        if self.identifier_type is NodeIdType.BYTESTRING:
            body = base64.b64encode(self.identifier).decode("ascii")
        else:
            body = str(self.identifier)
        return f"{prefix}{_PREFIX_OF[self.identifier_type]}={body}"


NULL_NODE_ID = NodeId()


def _parse_unsigned(text: str, limit: int, what: str) -> int:
    if not text or not text.isascii() or not text.isdigit():
        raise ValueError(f"invalid {what}: {text!r}")
    value = int(text)
    if value > limit:
        raise ValueError(f"{what} out of range: {text}")
    return value


def parse_node_id(text: str) -> NodeId:
    """Parse the textual form such as ``i=24`` or ``ns=1;s=name``."""
    namespace_index = 0
    rest = text
    if rest.startswith("ns="):
        ns_text, sep, rest = rest[3:].partition(";")
        if not sep:
            raise ValueError(f"missing identifier in node id: {text!r}")
        namespace_index = _parse_unsigned(ns_text, _MAX_NAMESPACE, "namespace index")
    if len(rest) < 2 or rest[1] != "=" or rest[0] not in _PREFIXES:
        raise ValueError(f"invalid node id: {text!r}")
    kind = _PREFIXES[rest[0]]
    body = rest[2:]
    if kind is NodeIdType.NUMERIC:
        identifier: Identifier = _parse_unsigned(body, _MAX_NUMERIC, "numeric identifier")
    elif kind is NodeIdType.STRING:
        identifier = body
    elif kind is NodeIdType.GUID:
        if len(body) != 36:
            raise ValueError(f"invalid guid: {body!r}")
        try:
            identifier = uuid.UUID(body)
        except ValueError as exc:
            raise ValueError(f"invalid guid: {body!r}") from exc
    else:
        try:
            identifier = base64.b64decode(body, validate=True)
        except binascii.Error as exc:
            raise ValueError(f"invalid byte string: {body!r}") from exc
    return NodeId(namespace_index, kind, identifier)