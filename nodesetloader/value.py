"""Assembles the value of a variable from the elements inside ``<Value>``."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional

_C_WHITESPACE = " \t\n\v\f\r"


class DataKind(enum.Enum):
    """Whether a data element holds text or child elements."""

    PRIMITIVE = "primitive"
    COMPLEX = "complex"


@dataclass(eq=False)
class Data:
    """One element of a value: a text leaf or a group of members."""

    name: str
    kind: DataKind = DataKind.PRIMITIVE
    value: Optional[str] = None
    members: list[Data] = field(default_factory=list)
    parent: Optional[Data] = field(default=None, repr=False)

    def add_member(self, name: str) -> Data:
        """Turn this element into a complex one and append a primitive child."""
        self.kind = DataKind.COMPLEX
        member = Data(name, DataKind.PRIMITIVE, parent=self)
        self.members.append(member)
        return member


class _State(enum.Enum):
    INIT = enum.auto()
    LISTOF = enum.auto()
    EXTENSIONOBJECT = enum.auto()
    EXTENSIONOBJECT_TYPEID = enum.auto()
    EXTENSIONOBJECT_BODY = enum.auto()
    DATA = enum.auto()
    FINISHED = enum.auto()


def _meaningful(text: Optional[str]) -> Optional[str]:
    if text is None or text.strip(_C_WHITESPACE) == "":
        return None
    return text


class Value:
    """A value built incrementally from start and end element events."""

    def __init__(self) -> None:
        self.is_array = False
        self.is_extension_object = False
        self.type: Optional[str] = None
        self.data: Optional[Data] = None
        self._state = _State.INIT
        self._current: Optional[Data] = None

    def _new_root(self, name: str, kind: DataKind) -> None:
        self.data = Data(name, kind)
        self._current = self.data

    def _add_child(self, name: str, root_kind: DataKind) -> None:
        if self._current is None:
            self._new_root(name, root_kind)
        else:
            self._current = self._current.add_member(name)

    def start(self, name: str) -> None:
        """Handle the opening of an element named ``name``."""
        state = self._state
        if state is _State.INIT:
            if name.startswith("ListOf"):
                self._state = _State.LISTOF
                self.is_array = True
                self._new_root(name, DataKind.COMPLEX)
            elif name == "ExtensionObject":
                self._state = _State.EXTENSIONOBJECT
                self.is_extension_object = True
            else:
                self.type = name
                self._new_root(name, DataKind.PRIMITIVE)
                self._state = _State.DATA
        elif state is _State.LISTOF:
            if name == "ExtensionObject":
                self._state = _State.EXTENSIONOBJECT
                self.is_extension_object = True
                return
            self._state = _State.DATA
            self.type = name
            self._add_child(name, DataKind.PRIMITIVE)
        elif state is _State.EXTENSIONOBJECT:
            if name == "TypeId":
                self._state = _State.EXTENSIONOBJECT_TYPEID
            elif name == "Body":
                self._state = _State.EXTENSIONOBJECT_BODY
        elif state is _State.EXTENSIONOBJECT_BODY:
            self._state = _State.DATA
            self._add_child(name, DataKind.COMPLEX)
        elif state is _State.DATA:
            self._add_child(name, DataKind.PRIMITIVE)

    def end(self, name: str, text: Optional[str]) -> None:
        """Handle the closing of an element with the text it enclosed."""
        state = self._state
        if state is _State.INIT:
            self._state = _State.FINISHED
        elif state is _State.EXTENSIONOBJECT_TYPEID:
            if name == "Identifier":
                self.type = text
            if name == "TypeId":
                self._state = _State.EXTENSIONOBJECT
        elif state is _State.EXTENSIONOBJECT:
            if name == "ExtensionObject":
                self._state = _State.INIT
        elif state is _State.DATA:
            self._end_data(name, text)
        elif state is _State.EXTENSIONOBJECT_BODY:
            self._state = _State.EXTENSIONOBJECT

    def _end_data(self, name: str, text: Optional[str]) -> None:
        current = self._current
        if current is None or name != current.name:
            return
        if current.kind is DataKind.PRIMITIVE:
            current.value = _meaningful(text)
        current = current.parent
        self._current = current
        if not self.is_extension_object and current is None:
            self._state = _State.INIT
        if self.is_extension_object and not self.is_array and current is None:
            self._state = _State.EXTENSIONOBJECT_BODY
        if (
            self.is_extension_object
            and self.is_array
            and current is not None
            and current.parent is None
        ):
            self._state = _State.EXTENSIONOBJECT_BODY