from nodesetloader.attributes import (
    DATA_TYPE,
    NODE_ID,
    NodeAttribute,
    extract_browse_name,
    extract_node_id,
    get_attribute_value,
)
from nodesetloader.namespaces import NamespaceList
from nodesetloader.nodeid import NodeId
from nodesetloader.nodes import BrowseName


def _namespaces(global_idx):
    nsl = NamespaceList(lambda ctx, uri: global_idx)
    nsl.new_namespace(None, "urn:example:test")
    return nsl


def test_attribute_present():
    assert get_attribute_value({"NodeId": "ns=1;i=5"}, NODE_ID) == "ns=1;i=5"


def test_attribute_default_used():
    assert get_attribute_value({"Other": "x"}, DATA_TYPE) == "i=24"


def test_attribute_missing_without_default():
    assert get_attribute_value({}, NodeAttribute("Name")) is None


def test_node_id_none_is_null():
    assert extract_node_id(_namespaces(7), None).is_null()


def test_node_id_invalid_is_null():
    assert extract_node_id(_namespaces(7), "garbage").is_null()


def test_node_id_ns0_unchanged():
    assert extract_node_id(_namespaces(7), "i=24") == NodeId.numeric(0, 24)


def test_node_id_namespace_translated():
    assert extract_node_id(_namespaces(7), "ns=1;i=6002") == NodeId.numeric(7, 6002)


def test_node_id_unknown_namespace_kept():
    assert extract_node_id(_namespaces(7), "ns=4;s=x") == NodeId.string(4, "x")


def test_browse_name_without_namespace():
    assert extract_browse_name(_namespaces(7), "Objects") == BrowseName(0, "Objects")


def test_browse_name_translated():
    assert extract_browse_name(_namespaces(7), "1:Point") == BrowseName(7, "Point")


def test_browse_name_unknown_namespace_kept():
    assert extract_browse_name(_namespaces(7), "3:Point") == BrowseName(3, "Point")


def test_browse_name_non_numeric_prefix():
    assert extract_browse_name(_namespaces(7), "Foo:Bar") == BrowseName(0, "Bar")


def test_browse_name_only_first_colon_splits():
    assert extract_browse_name(_namespaces(7), "1:a:b") == BrowseName(7, "a:b")


def test_browse_name_none():
    assert extract_browse_name(_namespaces(7), None).name is None