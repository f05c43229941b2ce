from nodesetloader.namespaces import NS0_URI, Namespace, NamespaceList


def test_namespace_zero_is_predefined():
    namespaces = NamespaceList(lambda ctx, uri: 0)
    ns0 = namespaces.get_namespace(0)
    assert ns0 == Namespace(0, "http://opcfoundation.org/UA/")
    assert ns0.name == NS0_URI
    assert len(namespaces) == 1


def test_new_namespace_uses_callback_index():
    calls = []

    def callback(ctx, uri):
        calls.append((ctx, uri))
        return 7

    namespaces = NamespaceList(callback)
    context = object()
    ns = namespaces.new_namespace(context, "urn:test:one")
    assert calls == [(context, "urn:test:one")]
    assert ns.idx == 7
    assert ns.name == "urn:test:one"
    assert namespaces.get_namespace(1) is ns


def test_namespaces_keep_file_order():
    counter = iter(range(10, 20))
    namespaces = NamespaceList(lambda ctx, uri: next(counter))
    uris = ["urn:a", "urn:b", "urn:c"]
    for uri in uris:
        namespaces.new_namespace(None, uri)
    assert [ns.name for ns in namespaces][1:] == uris
    assert [namespaces.get_namespace(i).idx for i in range(1, 4)] == [10, 11, 12]


def test_out_of_range_index_gives_none():
    namespaces = NamespaceList(lambda ctx, uri: 1)
    namespaces.new_namespace(None, "urn:a")
    assert namespaces.get_namespace(2) is None
    assert namespaces.get_namespace(-1) is None