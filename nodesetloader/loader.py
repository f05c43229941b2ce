"""Reads nodeset XML files and hands their nodes out in dependency order."""

from __future__ import annotations

import abc
import enum
import os
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

from .aliases import Alias
from .logger import Logger, LogLevel, PrintLogger
from .namespaces import AddNamespaceCallback
from .nodes import BiDirectionalReference, Node, NodeClass, Reference, VariableNode
from .nodeset import Nodeset
from .parser import XmlParseError, XmlParser
from .refservice import InternalReferenceService, ReferenceService
from .value import Value

_NODE_ELEMENTS = {
    "UAVariable": NodeClass.VARIABLE,
    "UAObject": NodeClass.OBJECT,
    "UAObjectType": NodeClass.OBJECTTYPE,
    "UADataType": NodeClass.DATATYPE,
    "UAMethod": NodeClass.METHOD,
    "UAReferenceType": NodeClass.REFERENCETYPE,
    "UAVariableType": NodeClass.VARIABLETYPE,
    "UAView": NodeClass.VIEW,
}
_TRANSPARENT_ELEMENTS = frozenset({"UANodeSet", "Aliases", "Extensions"})


class LoaderError(Exception):
    """Raised when a nodeset file cannot be imported."""


class ExtensionInterface(abc.ABC):
    """Receives the content of ``<Extension>`` elements of nodes."""

    @abc.abstractmethod
    def new_extension(self) -> Any:
        """Create the object that collects one extension."""

    @abc.abstractmethod
    def start(self, extension: Any, name: str, attributes: Mapping[str, str]) -> None:
        """An element inside the extension was opened."""

    @abc.abstractmethod
    def end(self, extension: Any, name: str, text: Optional[str]) -> None:
        """An element inside the extension was closed with its text."""

    @abc.abstractmethod
    def finish(self, extension: Any) -> None:
        """The extension is complete."""


@dataclass
class FileContext:
    """A file to import and how its namespaces and extensions are handled."""

    file: Union[str, "os.PathLike[str]"]
    add_namespace: Optional[AddNamespaceCallback]
    user_context: Any = None
    extension_handling: Optional[ExtensionInterface] = None


class _State(enum.Enum):
    INIT = enum.auto()
    NODE = enum.auto()
    DISPLAYNAME = enum.auto()
    REFERENCES = enum.auto()
    REFERENCE = enum.auto()
    DESCRIPTION = enum.auto()
    INVERSENAME = enum.auto()
    ALIAS = enum.auto()
    UNKNOWN = enum.auto()
    NAMESPACEURIS = enum.auto()
    URI = enum.auto()
    VALUE = enum.auto()
    EXTENSION = enum.auto()
    EXTENSIONS = enum.auto()
    DATATYPE_DEFINITION = enum.auto()
    DATATYPE_DEFINITION_FIELD = enum.auto()


# States in which any child element is skipped.
_LEAF_STATES = frozenset(
    {
        _State.URI,
        _State.DATATYPE_DEFINITION_FIELD,
        _State.DESCRIPTION,
        _State.ALIAS,
        _State.DISPLAYNAME,
        _State.REFERENCE,
        _State.INVERSENAME,
    }
)


class _DocumentHandler:
    """Turns the element events of one nodeset document into nodeset calls."""

    def __init__(
        self,
        nodeset: Nodeset,
        user_context: Any,
        extension_handling: Optional[ExtensionInterface],
    ) -> None:
        self._nodeset = nodeset
        self._user_context = user_context
        self._ext = extension_handling
        self._state = _State.INIT
        self._prev_state = _State.INIT
        self._depth = 0
        self._node: Optional[Node] = None
        self._alias: Optional[Alias] = None
        self._ref: Optional[Reference] = None
        self._value: Optional[Value] = None
        self._extension_data: Any = None
        self._text: Optional[list[str]] = None

    def _enter_unknown(self) -> None:
        self._prev_state = self._state
        self._state = _State.UNKNOWN
        self._depth = 1

    def _take_text(self) -> Optional[str]:
        text = None if self._text is None else "".join(self._text)
        self._text = None
        return text

    def on_characters(self, text: str) -> None:
        if self._text is None:
            self._text = []
        self._text.append(text)

    def on_start(self, name: str, attributes: Mapping[str, str]) -> None:
        self._start(name, attributes)
        self._text = None

    def on_end(self, name: str) -> None:
        self._end(name, self._take_text())

    def _start(self, name: str, attributes: Mapping[str, str]) -> None:
        state = self._state
        nodeset = self._nodeset
        if state is _State.INIT:
            if name in _NODE_ELEMENTS:
                self._node = nodeset.new_node(_NODE_ELEMENTS[name], attributes)
                self._state = _State.NODE
            elif name == "NamespaceUris":
                self._state = _State.NAMESPACEURIS
            elif name == "Alias":
                self._node = None
                self._alias = nodeset.new_alias(attributes)
                self._state = _State.ALIAS
            elif name not in _TRANSPARENT_ELEMENTS:
                self._enter_unknown()
        elif state is _State.NAMESPACEURIS:
            if name == "Uri":
                self._state = _State.URI
            else:
                self._enter_unknown()
        elif state is _State.NODE:
            self._start_in_node(name, attributes)
        elif state is _State.DATATYPE_DEFINITION:
            if name == "Field":
                nodeset.add_datatype_field(self._node, attributes)
                self._state = _State.DATATYPE_DEFINITION_FIELD
            else:
                self._enter_unknown()
        elif state is _State.VALUE:
            self._value.start(name)
            self._depth += 1
        elif state is _State.EXTENSIONS:
            if name == "Extension":
                if self._ext is not None:
                    self._extension_data = self._ext.new_extension()
                self._state = _State.EXTENSION
            else:
                self._enter_unknown()
        elif state is _State.EXTENSION:
            if self._ext is not None:
                self._ext.start(self._extension_data, name, attributes)
        elif state is _State.REFERENCES:
            if name == "Reference":
                self._state = _State.REFERENCE
                self._ref = nodeset.new_reference(self._node, attributes)
            else:
                self._enter_unknown()
        elif state in _LEAF_STATES:
            self._enter_unknown()
        elif state is _State.UNKNOWN:
            self._depth += 1

    def _start_in_node(self, name: str, attributes: Mapping[str, str]) -> None:
        nodeset = self._nodeset
        node = self._node
        if name == "DisplayName":
            nodeset.set_display_name(node, attributes)
            self._state = _State.DISPLAYNAME
        elif name == "References":
            self._state = _State.REFERENCES
        elif name == "Description":
            self._state = _State.DESCRIPTION
            nodeset.set_description(node, attributes)
        elif name == "Value":
            self._value = Value()
            self._state = _State.VALUE
        elif name == "Extensions":
            self._state = _State.EXTENSIONS
        elif name == "Definition":
            nodeset.add_datatype_definition(node, attributes)
            self._state = _State.DATATYPE_DEFINITION
        elif name == "InverseName":
            self._state = _State.INVERSENAME
            nodeset.set_inverse_name(node, attributes)
        else:
            self._enter_unknown()

    def _end(self, name: str, text: Optional[str]) -> None:
        state = self._state
        nodeset = self._nodeset
        if state is _State.ALIAS:
            nodeset.new_alias_finish(self._alias, text)
            self._state = _State.INIT
        elif state is _State.URI:
            nodeset.new_namespace_finish(self._user_context, text)
            self._state = _State.NAMESPACEURIS
        elif state is _State.NAMESPACEURIS:
            self._state = _State.INIT
        elif state is _State.NODE:
            nodeset.new_node_finish(self._node)
            self._state = _State.INIT
        elif state is _State.DISPLAYNAME:
            nodeset.display_name_finish(self._node, text)
            self._state = _State.NODE
        elif state is _State.REFERENCES:
            self._state = _State.NODE
        elif state is _State.REFERENCE:
            nodeset.new_reference_finish(self._ref, self._node, text)
            self._state = _State.REFERENCES
        elif state is _State.VALUE:
            if name == "Value" and self._depth == 0:
                if isinstance(self._node, VariableNode):
                    self._node.value = self._value
                self._state = _State.NODE
            else:
                self._value.end(name, text)
                self._depth -= 1
        elif state is _State.EXTENSION:
            if name == "Extension":
                if self._ext is not None:
                    self._ext.finish(self._extension_data)
                    self._node.extension = self._extension_data
                self._state = _State.EXTENSIONS
            elif self._ext is not None:
                self._ext.end(self._extension_data, name, text)
        elif state is _State.EXTENSIONS:
            self._state = _State.NODE
        elif state is _State.DESCRIPTION:
            nodeset.description_finish(self._node, text)
            self._state = _State.NODE
        elif state is _State.INVERSENAME:
            nodeset.inverse_name_finish(self._node, text)
            self._state = _State.NODE
        elif state is _State.DATATYPE_DEFINITION:
            self._state = _State.NODE
        elif state is _State.DATATYPE_DEFINITION_FIELD:
            self._state = _State.DATATYPE_DEFINITION
        elif state is _State.UNKNOWN:
            self._depth -= 1
            if self._depth == 0:
                self._state = self._prev_state


class NodesetLoader:
    """Imports nodeset files into one nodeset and sorts its nodes."""

    def __init__(
        self,
        logger: Optional[Logger] = None,
        ref_service: Optional[ReferenceService] = None,
    ) -> None:
        self.logger: Logger = logger if logger is not None else PrintLogger()
        self.ref_service: ReferenceService = (
            ref_service if ref_service is not None else InternalReferenceService()
        )
        self.nodeset: Optional[Nodeset] = None

    def _fail(self, message: str) -> LoaderError:
        self.logger.log(LogLevel.ERROR, message)
        return LoaderError(message)

    def _require_nodeset(self) -> Nodeset:
        if self.nodeset is None:
            raise LoaderError("no nodeset has been imported")
        return self.nodeset

    def import_file(self, file_context: Optional[FileContext]) -> None:
        """Read the nodes of one file; raises LoaderError if that fails."""
        if file_context is None:
            raise self._fail("NodesetLoader: no filehandler - abort")
        if file_context.add_namespace is None:
            raise self._fail("NodesetLoader: fileHandler->addNamespace missing")
        if self.nodeset is None:
            self.nodeset = Nodeset(
                file_context.add_namespace, self.logger, self.ref_service
            )
        try:
            stream = open(file_context.file, "rb")
        except (OSError, TypeError) as exc:
            raise self._fail("NodesetLoader: file open error") from exc
        handler = _DocumentHandler(
            self.nodeset, file_context.user_context, file_context.extension_handling
        )
        with stream:
            try:
                XmlParser().run(
                    stream, handler.on_start, handler.on_end, handler.on_characters
                )
            except XmlParseError as exc:
                raise self._fail("xml parsing error") from exc

    def sort(self) -> None:
        """Order the imported nodes; raises if references are unresolved or loop."""
        self._require_nodeset().sort()

    def bidirectional_refs(self) -> list[BiDirectionalReference]:
        """HasEncoding references recorded from the encoding side."""
        return self._require_nodeset().bidirectional_refs()

    def for_each_node(self, node_class: NodeClass, fn: Callable[[Node], Any]) -> int:
        """Call ``fn`` for each sorted node of a class; return their number."""
        return self._require_nodeset().for_each_node(node_class, fn)