# nodesetloader

`nodesetloader` reads OPC UA nodeset XML files, for example `Opc.Ua.NodeSet2.xml` or a
companion specification. Each `UAObject`, `UAVariable`, `UAMethod`, `UAObjectType`,
`UAVariableType`, `UADataType`, `UAReferenceType` and `UAView` element becomes a
typed Python node object. The nodes are then sorted so that each one comes after the
nodes it hangs from in the hierarchy, and are handed out in that order.

While a file is loaded, the package:

- resolves aliases, and maps the namespace indices of the file to global indices
  that your callback supplies
- sorts references into hierarchical, non-hierarchical and HasTypeDefinition
  references. Reference types defined in the nodeset are learned as they are read.
- adds a parent reference to instance nodes (objects, variables, methods, views)
  that carry only a `ParentNodeId`
- parses `<Value>` content of variables into a `Value` with a tree of `Data` items.
  This covers scalars, `ListOf…` arrays and `ExtensionObject`s.
- collects data type definitions, both structure fields and enum values
- records inverse `HasEncoding` references of "Default Binary" nodes as
  `BiDirectionalReference`s
- hands `<Extensions>` content to an extension interface that you supply

Attributes such as `ValueRank`, `AccessLevel` or `IsAbstract` are stored as the text
found in the file, or as the attribute's default when the file does not give one.

## Installation

```
pip install nodesetloader
```

You need Python 3.10 or later. The package uses only the standard library.

## Usage

```python
from nodesetloader.loader import FileContext, NodesetLoader
from nodesetloader.nodes import NodeClass

def add_namespace(user_context, uri):
    # Return the global namespace index your application gives this URI.
    return 2

loader = NodesetLoader()
loader.import_file(FileContext(file="MyModel.NodeSet2.xml", add_namespace=add_namespace))
loader.sort()

for node_class in NodeClass:
    count = loader.for_each_node(node_class, lambda node: print(node.node_class, node.id))

for ref in loader.bidirectional_refs():
    print(ref.source, ref.ref_type, ref.target)
```

You can import several files into one loader before you call `sort`. The namespace
callback of the first file is the one that is used.

### Errors

- `import_file` raises `LoaderError` in these cases: no `FileContext` is given, it has
  no `add_namespace` callback, the file cannot be opened, the file is empty, or an XML
  error is found while the file is read. An error that shows up only when the
  document is closed is not reported.
- `sort` raises `UnresolvedReferenceError` when a node keeps a reference whose type
  cannot be classified. It raises `CycleError` (from `nodesetloader.sort`) when the
  hierarchy contains a loop.
- `sort`, `for_each_node` and `bidirectional_refs` raise `LoaderError` if no file has
  been imported yet.

### Logging

Errors are also sent to a `Logger` from `nodesetloader.logger`. The default
`PrintLogger` writes lines like this one to standard output, or to a stream that you
pass to it:

```
NODESETLOADER: Error : graph contains a loop, abort
```

To send messages somewhere else, pass `Logger(sink)` to `NodesetLoader`. Here
`sink(level, message)` is any callable you choose.

### Reference classification

`InternalReferenceService` is the default. It knows the hierarchical reference types
of namespace 0 and treats every other namespace-0 reference type as
non-hierarchical. A reference type read from the nodeset counts as hierarchical when
it has an inverse reference to a known hierarchical type. Otherwise it counts as
non-hierarchical. To use other rules, subclass `ReferenceService` from
`nodesetloader.refservice` and pass an instance to `NodesetLoader`.

### Extensions

To process vendor `<Extensions>`, subclass `ExtensionInterface` and implement
`new_extension`, `start`, `end` and `finish`. Then pass the instance as
`FileContext.extension_handling`. The object that `new_extension` returns is stored
on the node as `node.extension`.

## Building blocks

You can also use these modules on their own:

| Module | What it provides |
| --- | --- |
| `nodesetloader.nodeid` | `NodeId` and `parse_node_id`, for strings such as `"ns=1;i=42"` |
| `nodesetloader.nodes` | `NodeClass`, the node dataclasses, `Reference`, `NodeContainer` |
| `nodesetloader.value` | `Value`, built from the start and end events of `<Value>` content |
| `nodesetloader.sort` | `SortContext`, a topological sort over hierarchical references |
| `nodesetloader.parser` | `XmlParser`, a streaming XML reader that reports local names |
| `nodesetloader.nodeset` | `Nodeset`, the node store that the loader fills |
| `nodesetloader.aliases`, `nodesetloader.namespaces` | alias and namespace tables |

## What it does not do

The package only reads and orders nodes. It does not create them in an OPC UA server
and does not convert values into typed OPC UA data. It has no command-line tool.

## Running the tests

```
pip install -e .[test]
pytest
```