import pytest

from nodesetloader.aliases import MAX_ALIASES, AliasLimitError, AliasList
from nodesetloader.nodeid import NULL_NODE_ID, NodeId


def test_new_alias_starts_with_null_id():
    aliases = AliasList()
    alias = aliases.new_alias("Boolean")
    assert alias.name == "Boolean"
    assert alias.id == NULL_NODE_ID
    assert len(aliases) == 1


def test_lookup_returns_assigned_id():
    aliases = AliasList()
    alias = aliases.new_alias("HasSubtype")
    alias.id = NodeId.numeric(0, 45)
    assert aliases.get_node_id("HasSubtype") == NodeId.numeric(0, 45)


def test_unknown_name_gives_none():
    aliases = AliasList()
    aliases.new_alias("Int32")
    assert aliases.get_node_id("Double") is None


def test_none_name_gives_none():
    aliases = AliasList()
    aliases.new_alias("Int32")
    assert aliases.get_node_id(None) is None


def test_first_declaration_wins():
    aliases = AliasList()
    first = aliases.new_alias("X")
    first.id = NodeId.numeric(0, 1)
    second = aliases.new_alias("X")
    second.id = NodeId.numeric(0, 2)
    assert aliases.get_node_id("X") == first.id


def test_limit_is_enforced():
    aliases = AliasList()
    for n in range(MAX_ALIASES):
        aliases.new_alias(f"a{n}")
    with pytest.raises(AliasLimitError):
        aliases.new_alias("overflow")
    assert len(aliases) == MAX_ALIASES


def test_iteration_keeps_order():
    aliases = AliasList()
    names = ["One", "Two", "Three"]
    for name in names:
        aliases.new_alias(name)
    assert [a.name for a in aliases] == names