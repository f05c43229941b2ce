import pytest

from nodesetloader.logger import Logger
from nodesetloader.nodeid import NodeId, parse_node_id
from nodesetloader.nodes import NodeClass
from nodesetloader.nodeset import Nodeset, UnresolvedReferenceError
from nodesetloader.sort import CycleError


@pytest.fixture
def nodeset():
    return Nodeset(lambda ctx, uri: 5)


def _add_ref(ns, node, ref_type, target, forward=None):
    attrs = {"ReferenceType": ref_type}
    if forward is not None:
        attrs["IsForward"] = forward
    ref = ns.new_reference(node, attrs)
    ns.new_reference_finish(ref, node, target)
    return ref


def _collect(ns, node_class):
    seen = []
    count = ns.for_each_node(node_class, lambda n: seen.append(n.id))
    return count, seen


def test_variable_defaults(nodeset):
    node = nodeset.new_node(NodeClass.VARIABLE, {"NodeId": "i=6001", "BrowseName": "Temp"})
    assert node.id == NodeId.numeric(0, 6001)
    assert node.browse_name.name == "Temp"
    assert node.browse_name.ns_index == 0
    assert node.datatype == parse_node_id("i=24")
    assert node.value_rank == "-1"
    assert node.access_level == "1"
    assert node.historizing == "false"
    assert node.parent_node_id.is_null()


def test_namespace_translation(nodeset):
    ns = nodeset.new_namespace_finish(None, "urn:example")
    assert ns.idx == 5
    node = nodeset.new_node(NodeClass.OBJECT, {"NodeId": "ns=1;i=100", "BrowseName": "1:Foo"})
    assert node.id == NodeId.numeric(5, 100)
    assert node.browse_name.ns_index == 5
    assert node.browse_name.name == "Foo"
    assert node.event_notifier == "0"


def test_alias_resolves_datatype(nodeset):
    alias = nodeset.new_alias({"Alias": "Boolean"})
    nodeset.new_alias_finish(alias, "i=1")
    node = nodeset.new_node(NodeClass.VARIABLE, {"NodeId": "i=6001", "DataType": "Boolean"})
    assert node.datatype == NodeId.numeric(0, 1)


def test_references_are_filed_by_kind(nodeset):
    node = nodeset.new_node(NodeClass.OBJECT, {"NodeId": "i=5001"})
    typedef = _add_ref(nodeset, node, "i=40", "i=61")
    hier = _add_ref(nodeset, node, "i=47", "i=85", "false")
    non_hier = _add_ref(nodeset, node, "i=37", "i=78")
    unknown = _add_ref(nodeset, node, "ns=1;i=7000", "i=85")
    assert node.ref_to_type_def is typedef
    assert node.hierarchical_refs == [hier]
    assert node.non_hierarchical_refs == [non_hier]
    assert node.unknown_refs == [unknown]
    assert typedef.is_forward is True
    assert hier.is_forward is False
    assert hier.target == NodeId.numeric(0, 85)


def test_has_encoding_bidirectional(nodeset):
    node = nodeset.new_node(
        NodeClass.OBJECT, {"NodeId": "i=5001", "BrowseName": "Default Binary"}
    )
    _add_ref(nodeset, node, "i=38", "i=500", "false")
    refs = nodeset.bidirectional_refs()
    assert len(refs) == 1
    assert refs[0].source == NodeId.numeric(0, 500)
    assert refs[0].target == node.id
    assert refs[0].ref_type == parse_node_id("i=38")


def test_forward_encoding_not_recorded(nodeset):
    node = nodeset.new_node(
        NodeClass.OBJECT, {"NodeId": "i=5001", "BrowseName": "Default Binary"}
    )
    _add_ref(nodeset, node, "i=38", "i=500", "true")
    assert nodeset.bidirectional_refs() == []


def test_sort_parent_before_child(nodeset):
    child = nodeset.new_node(NodeClass.OBJECT, {"NodeId": "i=5002", "ParentNodeId": "i=5001"})
    nodeset.new_node_finish(child)
    parent = nodeset.new_node(NodeClass.OBJECT, {"NodeId": "i=5001"})
    nodeset.new_node_finish(parent)
    nodeset.sort()
    count, seen = _collect(nodeset, NodeClass.OBJECT)
    assert count == 2
    assert seen == [parent.id, child.id]


def test_sort_detects_cycle(nodeset):
    a = nodeset.new_node(NodeClass.OBJECT, {"NodeId": "i=5001"})
    _add_ref(nodeset, a, "i=47", "i=5002", "false")
    b = nodeset.new_node(NodeClass.OBJECT, {"NodeId": "i=5002"})
    _add_ref(nodeset, b, "i=47", "i=5001", "false")
    nodeset.new_node_finish(a)
    nodeset.new_node_finish(b)
    with pytest.raises(CycleError):
        nodeset.sort()


def test_unresolved_reference_raises_and_logs():
    messages = []
    ns = Nodeset(lambda ctx, uri: 5, Logger(lambda level, msg: messages.append(msg)))
    node = ns.new_node(NodeClass.OBJECT, {"NodeId": "i=5001"})
    _add_ref(ns, node, "ns=1;i=7000", "i=85")
    ns.new_node_finish(node)
    with pytest.raises(UnresolvedReferenceError) as info:
        ns.sort()
    assert info.value.node_id == node.id
    assert messages == [str(info.value)]
    assert str(node.id) in messages[0]


def test_new_hierarchical_reference_type(nodeset):
    ref_type = nodeset.new_node(NodeClass.REFERENCETYPE, {"NodeId": "ns=1;i=4003"})
    _add_ref(nodeset, ref_type, "i=45", "i=33", "false")
    nodeset.new_node_finish(ref_type)
    obj = nodeset.new_node(NodeClass.OBJECT, {"NodeId": "i=5001"})
    ref = _add_ref(nodeset, obj, "ns=1;i=4003", "i=85", "false")
    assert obj.hierarchical_refs == [ref]
    assert obj.unknown_refs == []


def test_reference_type_with_unknown_refs_resolved_on_sort(nodeset):
    a = nodeset.new_node(NodeClass.REFERENCETYPE, {"NodeId": "ns=1;i=4001"})
    pending = _add_ref(nodeset, a, "ns=1;i=4002", "i=32", "false")
    nodeset.new_node_finish(a)
    assert a.unknown_refs == [pending]
    b = nodeset.new_node(NodeClass.REFERENCETYPE, {"NodeId": "ns=1;i=4002"})
    _add_ref(nodeset, b, "i=45", "i=32", "false")
    nodeset.new_node_finish(b)
    nodeset.sort()
    assert a.unknown_refs == []
    assert a.non_hierarchical_refs == [pending]
    count, seen = _collect(nodeset, NodeClass.REFERENCETYPE)
    assert count == 2
    assert set(seen) == {a.id, b.id}


def test_datatype_definition_fields(nodeset):
    node = nodeset.new_node(NodeClass.DATATYPE, {"NodeId": "i=3001"})
    assert node.is_abstract == "false"
    nodeset.add_datatype_definition(node, {})
    nodeset.add_datatype_field(node, {"Name": "Speed"})
    nodeset.add_datatype_field(node, {"Name": "Mode", "Value": "3", "IsOptional": "true"})
    definition = node.definition
    assert definition.is_union is False
    assert definition.is_enum is True
    speed, mode = definition.fields
    assert speed.name == "Speed"
    assert speed.data_type == parse_node_id("i=24")
    assert speed.value_rank == -1
    assert speed.is_optional is False
    assert mode.value == 3


def test_option_set_ignores_fields(nodeset):
    node = nodeset.new_node(NodeClass.DATATYPE, {"NodeId": "i=3001"})
    nodeset.add_datatype_definition(node, {"IsOptionSet": "true", "IsUnion": "true"})
    nodeset.add_datatype_field(node, {"Name": "Bit0", "Value": "0"})
    assert node.definition.is_option_set is True
    assert node.definition.is_union is True
    assert node.definition.fields == []


def test_texts(nodeset):
    node = nodeset.new_node(NodeClass.REFERENCETYPE, {"NodeId": "ns=1;i=4001"})
    nodeset.set_display_name(node, {"Locale": "en"})
    nodeset.display_name_finish(node, "Feeds")
    nodeset.set_description(node, {})
    nodeset.description_finish(node, "feeds things")
    nodeset.set_inverse_name(node, {"Locale": "de"})
    nodeset.inverse_name_finish(node, "FedBy")
    assert (node.display_name.locale, node.display_name.text) == ("en", "Feeds")
    assert node.description.locale is None
    assert node.description.text == "feeds things"
    assert (node.inverse_name.locale, node.inverse_name.text) == ("de", "FedBy")
    assert node.symmetric == "false"