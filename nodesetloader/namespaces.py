"""Mapping of a nodeset's local namespace indexes to global ones."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional

NS0_URI = "http://opcfoundation.org/UA/"

AddNamespaceCallback = Callable[[Any, str], int]


@dataclass(frozen=True)
class Namespace:
    """A namespace uri with the global index it was given."""

    idx: int
    name: str


class NamespaceList:
    """Namespaces of one nodeset, indexed by their position in the file."""

    def __init__(self, callback: AddNamespaceCallback) -> None:
        self._callback = callback
        self._namespaces: list[Namespace] = [Namespace(0, NS0_URI)]

    def new_namespace(self, user_context: Any, uri: str) -> Namespace:
        """Ask the callback for the uri's global index and record it."""
        global_idx = self._callback(user_context, uri)
        namespace = Namespace(global_idx, uri)
        self._namespaces.append(namespace)
        return namespace

    def get_namespace(self, relative_index: int) -> Optional[Namespace]:
        """Namespace at the nodeset-local index, or None if there is none."""
        if not 0 <= relative_index < len(self._namespaces):
            return None
        return self._namespaces[relative_index]

    def __len__(self) -> int:
        return len(self._namespaces)

    def __iter__(self) -> Iterator[Namespace]:
        return iter(self._namespaces)