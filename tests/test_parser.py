import io

import pytest

from nodesetloader.parser import XmlParseError, XmlParser


def _events(data, chunk_size=1024):
    events = []

    def on_chars(text):
        if events and events[-1][0] == "chars":
            events[-1] = ("chars", events[-1][1] + text)
        else:
            events.append(("chars", text))

    XmlParser(chunk_size).run(
        data,
        lambda name, attrs: events.append(("start", name, attrs)),
        lambda name: events.append(("end", name)),
        on_chars,
    )
    return events


def test_event_order():
    events = _events(io.BytesIO(b'<a x="1"><b>hi</b></a>'))
    assert events == [
        ("start", "a", {"x": "1"}),
        ("start", "b", {}),
        ("chars", "hi"),
        ("end", "b"),
        ("end", "a"),
    ]


def test_namespaces_are_stripped():
    doc = (
        b'<u:UANodeSet xmlns:u="urn:example" xmlns:x="urn:other">'
        b'<u:UAObject NodeId="i=1" x:Extra="yes"/></u:UANodeSet>'
    )
    events = _events(io.BytesIO(doc))
    assert events[0] == ("start", "UANodeSet", {})
    assert events[1] == ("start", "UAObject", {"NodeId": "i=1", "Extra": "yes"})
    assert events[-1] == ("end", "UANodeSet")


def test_text_stream_and_small_chunks():
    doc = "<root>" + "".join(f"<item>{i}</item>" for i in range(50)) + "</root>"
    events = _events(io.StringIO(doc), chunk_size=7)
    texts = [e[1] for e in events if e[0] == "chars"]
    assert texts == [str(i) for i in range(50)]
    assert sum(1 for e in events if e[0] == "start") == 51


def test_empty_stream_raises():
    with pytest.raises(XmlParseError):
        _events(io.BytesIO(b""))


def test_mismatched_tags_raise():
    with pytest.raises(XmlParseError):
        _events(io.BytesIO(b"<a><b></a></b>"))


def test_invalid_chunk_size():
    with pytest.raises(ValueError):
        XmlParser(0)