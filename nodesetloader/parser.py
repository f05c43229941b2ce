"""Streaming XML reader that reports elements and text to callbacks."""

from __future__ import annotations

from typing import BinaryIO, Callable, Optional, TextIO, Union
from xml.parsers import expat

StartCallback = Callable[[str, dict], None]
EndCallback = Callable[[str], None]
CharactersCallback = Callable[[str], None]

_SEPARATOR = " "


class XmlParseError(Exception):
    """Raised when a document cannot be read as XML."""


def _local(name: str) -> str:
    return name.rsplit(_SEPARATOR, 1)[-1]


class XmlParser:
    """Feeds a stream to an XML parser in chunks, with namespaces stripped."""

    def __init__(self, chunk_size: int = 1024) -> None:
        if chunk_size < 1:
            raise ValueError("chunk size must be positive")
        self._chunk_size = chunk_size

    @staticmethod
    def _read(stream: Union[BinaryIO, TextIO], size: int) -> bytes:
        data = stream.read(size)
        if isinstance(data, str):
            return data.encode("utf-8")
        return data or b""

    def run(
        self,
        stream: Union[BinaryIO, TextIO],
        on_start: StartCallback,
        on_end: EndCallback,
        on_characters: CharactersCallback,
    ) -> None:
        """Parse ``stream``, calling back with local element and attribute names."""
        head = self._read(stream, 4)
        if not head:
            raise XmlParseError("empty document")

        parser = expat.ParserCreate(namespace_separator=_SEPARATOR)
        parser.buffer_text = True

        def start(name: str, attrs: dict) -> None:
            on_start(_local(name), {_local(key): value for key, value in attrs.items()})

        def end(name: str) -> None:
            on_end(_local(name))

        parser.StartElementHandler = start
        parser.EndElementHandler = end
        parser.CharacterDataHandler = on_characters

        chunk: Optional[bytes] = head
        while chunk:
            try:
                parser.Parse(chunk, False)
            except expat.ExpatError as exc:
                raise XmlParseError(str(exc)) from exc
            chunk = self._read(stream, self._chunk_size)
        try:
            parser.Parse(b"", True)
        except expat.ExpatError:
            # Errors found only when the document is closed are not reported.
            pass