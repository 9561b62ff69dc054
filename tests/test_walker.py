"""Tests for the unique walker."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from graph.model import Ref
from graph.walker import walk_unique


@dataclass
class Leaf:
    Count: int = 3
    Label: str = "leaf"


@dataclass
class Tree:
    a: int = 1
    b: List[int] = field(default_factory=lambda: [1, 2])
    c: Leaf = field(default_factory=Leaf)


@dataclass
class Node:
    Value: int = 0
    Next: Optional[Ref["Node"]] = None


@dataclass
class Loop:
    Self: Any = None


@dataclass
class Aliases:
    x: List[int] = field(default_factory=list)
    y: List[int] = field(default_factory=list)


@dataclass
class Registry:
    entries: Dict[str, Ref] = field(default_factory=dict)
    owner: Any = None


@dataclass
class Keys:
    M: Dict[str, int] = field(default_factory=dict)


def count_steps(walker):
    steps = 0
    while walker.next():
        steps += 1
    return steps


class TestWalkUnique:
    """Tests for walk_unique."""

    def test_invalid_roots(self):
        """Test that only non-nil refs can be walked."""
        assert walk_unique(None) is None
        assert walk_unique(Ref.nil()) is None
        assert walk_unique(Tree()) is None

    def test_acyclic(self):
        """Test that every node of a tree is visited once."""
        walker = walk_unique(Ref.new(Tree()))

        # root, a, b, b/0, b/1, c, c/Count, c/Label
        assert count_steps(walker) == 7

    def test_paths(self):
        """Test iterating over the full paths of all nodes."""
        walker = walk_unique(Ref.new(Tree()))

        assert list(walker) == [
            "/a", "/b", "/b/0", "/b/1", "/c", "/c/Count", "/c/Label",
        ]

    def test_root_path(self):
        """Test that the walker starts at the root."""
        walker = walk_unique(Ref.new(Tree()))

        assert walker.path() == "/"
        assert walker.depth == 0
        assert walker.type_name().endswith("Tree")

    def test_exhausted(self):
        """Test that next keeps failing once the walk is done."""
        walker = walk_unique(Ref.new(Leaf()))
        count_steps(walker)

        assert not walker.next()

    def test_scalar_root(self):
        """Test walking a root without children."""
        assert count_steps(walk_unique(Ref.new(5))) == 0


class TestCycles:
    """Tests for graphs with loops and shared nodes."""

    def test_self_pointer(self):
        """Test that a record pointing to itself terminates."""
        node = Node(Value=1)
        node.Next = Ref.new(node)
        walker = walk_unique(Ref.new(node))

        assert list(walker) == ["/Value", "/Next"]

    def test_pointer_chain(self):
        """Test that a chain of distinct records is walked completely."""
        last = Node(Value=2)
        first = Node(Value=1, Next=Ref.new(last))
        walker = walk_unique(Ref.new(first))

        assert list(walker) == ["/Value", "/Next", "/Next/", "/Next//Value", "/Next//Next"]

    def test_dynamic_self_reference(self):
        """Test that a dynamic field holding its owner terminates."""
        loop = Loop()
        loop.Self = loop

        assert count_steps(walk_unique(Ref.new(loop))) == 1

    def test_list_containing_itself(self):
        """Test that a list holding itself terminates."""
        items = []
        items.append(items)

        assert count_steps(walk_unique(Ref.new(items))) == 0

    def test_shared_list(self):
        """Test that a list referenced twice is visited once."""
        shared = [1, 2]
        walker = walk_unique(Ref.new(Aliases(x=shared, y=shared)))

        assert list(walker) == ["/x", "/x/0", "/x/1"]

    def test_map_keys_outside_the_key_type(self):
        """Test that every entry of a dict is visited, whatever its key type."""
        walker = walk_unique(Ref.new(Keys(M={"a": 1, 2: 3, "c": 4})))

        assert list(walker) == ["/M", "/M/a", "/M/2", "/M/c"]

    def test_refs_in_map(self):
        """Test refs held by a dict and a dynamic field pointing back to the root."""
        registry = Registry()
        registry.owner = registry
        registry.entries["self"] = Ref(registry, "owner")

        walker = walk_unique(Ref.new(registry))

        # both references lead back to the root, which is never entered again
        assert list(walker) == ["/entries", "/entries/self", "/owner"]


class TestAccessors:
    """Tests for reading the current node."""

    def test_reference(self):
        """Test writing through the reference of the current node."""
        tree = Tree()
        walker = walk_unique(Ref.new(tree))
        walker.next()

        walker.reference().set(42)

        assert tree.a == 42

    def test_type_name(self):
        """Test the declared type of visited nodes."""
        walker = walk_unique(Ref.new(Tree()))
        names = {}
        while walker.next():
            names[walker.path()] = walker.type_name()

        assert names["/a"] == "int"
        assert names["/b"] == "List[int]"
        assert names["/b/0"] == "int"
        assert names["/c"].endswith("Leaf")

    def test_document(self):
        """Test walking parsed document data."""
        data = {"server": {"host": "localhost", "ports": [80, 443]}}
        walker = walk_unique(Ref.new(data))
        types = {}
        while walker.next():
            types[walker.path()] = walker.type_name()

        assert types == {
            "/server": "dict",
            "/server/host": "str",
            "/server/ports": "list",
            "/server/ports/0": "int",
            "/server/ports/1": "int",
        }
