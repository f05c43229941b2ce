"""Aliases: short names that stand for node ids within a nodeset."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from .nodeid import NULL_NODE_ID, NodeId

MAX_ALIASES = 300


class AliasLimitError(Exception):
    """Raised when more aliases are declared than a list can hold."""


@dataclass(eq=False)
class Alias:
    """A name and the node id it resolves to."""

    name: Optional[str]
    id: NodeId = NULL_NODE_ID


class AliasList:
    """Aliases in declaration order, looked up by name."""

    def __init__(self, capacity: int = MAX_ALIASES) -> None:
        self._capacity = capacity
        self._aliases: list[Alias] = []

    def new_alias(self, name: Optional[str]) -> Alias:
        """Append an alias with a null id and return it."""
        if len(self._aliases) >= self._capacity:
            raise AliasLimitError(f"more than {self._capacity} aliases")
        alias = Alias(name)
        self._aliases.append(alias)
        return alias

    def get_node_id(self, name: Optional[str]) -> Optional[NodeId]:
        """Id of the first alias called ``name``, or None."""
        if name is None:
            return None
        return next((a.id for a in self._aliases if a.name == name), None)

    def __len__(self) -> int:
        return len(self._aliases)

    def __iter__(self) -> Iterator[Alias]:
        return iter(self._aliases)