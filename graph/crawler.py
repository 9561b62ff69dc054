"""Crawler: a cursor over a graph of Python values rooted at a Ref."""

from typing import Any, Hashable, List, Optional, Tuple

from .keys import FieldKey, MapKey, escape_segment, field_by_name, field_key, fields_of
from .model import (
    ELEM,
    ORDERED_SHAPES,
    REFERENCE_SHAPES,
    Ref,
    Shape,
    classify,
    is_atom,
    is_ref_type,
    slot_writable,
    type_args,
    type_name,
    unwrap_optional,
)

Key = Hashable


class DepthError(IndexError):
    """A depth outside of the crawled path was used; the caller lost track of its position."""


class IntoError(LookupError):
    """
    Raised when Crawler.into cannot follow a path.

    Attributes:
        index: Index of the key that could not be entered.
        entered: Number of nodes entered before failing, including
            dereferenced pointers and dynamic references.
    """

    def __init__(self, index: int, entered: int):
        super().__init__(
            f"error following path, invalid key at index {index}, "
            f"failed after {entered} nodes"
        )
        self.index = index
        self.entered = entered


class _Node:
    """A value at a slot, with everything needed to leave and identify it."""

    __slots__ = (
        "value", "annotation", "shape", "owner", "slot",
        "addressable", "accessible", "size",
    )

    def __init__(
        self,
        value: Any,
        annotation: Any,
        owner: Any,
        slot: Hashable,
        addressable: bool,
        accessible: bool = True,
    ):
        self.value = value
        self.annotation = annotation
        self.shape = classify(value, annotation)
        self.owner = owner
        self.slot = slot
        self.addressable = addressable
        self.accessible = accessible
        self.size = self._size()

    def _size(self) -> int:
        if not self.accessible:
            return 0
        shape = self.shape
        if shape is Shape.RECORD:
            return len(fields_of(type(self.value)))
        if shape in (Shape.ARRAY, Shape.SEQUENCE, Shape.MAP):
            return len(self.value)
        if shape is Shape.POINTER:
            return 0 if _is_nil(self.value) else 1
        if shape is Shape.DYNAMIC:
            return 0 if self.value is None else 1
        return 0

    def identity(self) -> Tuple[Any, ...]:
        # references, atoms and tuples live in their slot, everything else is an object
        if self.shape in REFERENCE_SHAPES or is_atom(self.value) or isinstance(self.value, tuple):
            return ("slot", id(self.owner), self.slot)
        return ("object", id(self.value))

    def declared(self) -> Any:
        if self.annotation is not None:
            return self.annotation
        return type(self.value)


def _is_nil(value: Any) -> bool:
    return value is None or (isinstance(value, Ref) and value.is_nil)


def _read(ref: Ref) -> Tuple[bool, Any]:
    try:
        return True, ref.get()
    except (AttributeError, IndexError, KeyError, TypeError):
        return False, None


class _Edge:
    __slots__ = ("src", "key")

    def __init__(self, src: _Node, key: Key):
        self.src = src
        self.key = key


class Crawler:
    """
    Visits a data graph starting at the target of a Ref.

    It can descend into record fields, elements of tuples, lists and dicts
    and into values referenced by a Ref or held by a dynamically typed field.

    If data is changed while it is crawled, the crawler becomes invalid
    unless the changed node is left and entered again.
    """

    def __init__(self, root: _Node):
        self._path: List[_Edge] = []
        self._node = root

    @property
    def size(self) -> int:
        """Number of enterable edges at the current node."""
        return self._node.size

    @property
    def depth(self) -> int:
        """Number of nodes entered and not yet left."""
        return len(self._path)

    @property
    def ordered(self) -> bool:
        """Whether ints in [0, size) can be used as keys in enter()."""
        return self._node.shape in ORDERED_SHAPES

    @property
    def shape(self) -> Shape:
        return self._node.shape

    @property
    def value(self) -> Any:
        return self._node.value

    @property
    def annotation(self) -> Any:
        """Declared type of the current node, None if only its runtime type is known."""
        return self._node.annotation

    @property
    def accessible(self) -> bool:
        return self._node.accessible

    def identity(self) -> Tuple[Any, ...]:
        """Identity of the current node; equal identities denote the same storage."""
        return self._node.identity()

    def enter(self, key: Key) -> bool:
        """Descend into a child node and report whether it succeeded."""
        node = self._node
        if not node.accessible:
            return False
        shape = node.shape
        child = None

        if isinstance(key, int) and not isinstance(key, bool) and shape is not Shape.MAP:
            if key < 0 or key >= node.size:
                return False
            if shape in (Shape.ARRAY, Shape.SEQUENCE):
                child = self._element(key)
            elif shape is Shape.RECORD:
                key = field_key(type(node.value), key)
                child = self._field(key)
        elif isinstance(key, str) and shape is Shape.RECORD:
            fk = field_by_name(type(node.value), key)
            if fk is None:
                return False
            key, child = fk, self._field(fk)
            if child is None:
                # nil embedded record along the way
                return False
        elif isinstance(key, FieldKey) and shape is Shape.RECORD:
            child = self._field(key)
            if child is None:
                return False

        if child is None:
            if shape in REFERENCE_SHAPES:
                key, child = ELEM, self._deref()
            elif shape is Shape.MAP:
                key, child = self._entry(key)
            if child is None:
                # absent key, nil pointer or nil dynamic reference
                return False

        self._path.append(_Edge(node, key))
        self._node = child
        return True

    def _element(self, index: int) -> Optional[_Node]:
        node = self._node
        try:
            value = node.value[index]
        except IndexError:
            return None
        annotation = None
        args = type_args(node.annotation)
        if node.shape is Shape.SEQUENCE and len(args) == 1:
            annotation = args[0]
        elif node.shape is Shape.ARRAY and args:
            if len(args) == 2 and args[1] is Ellipsis:
                annotation = args[0]
            elif len(args) == len(node.value):
                annotation = args[index]
        return _Node(
            value, annotation, node.value, index,
            addressable=node.shape is Shape.SEQUENCE,
        )

    def _field(self, key: FieldKey) -> Optional[_Node]:
        node = self._node
        owner = node.value
        accessible = node.accessible
        for name in key.chain[:-1]:
            # walk through embedded records to the promoted field
            inner = getattr(owner, name, None)
            while isinstance(inner, Ref) and not inner.is_nil:
                ok, inner = _read(inner)
                if not ok:
                    return None
            if not _is_record(inner):
                return None
            owner = inner
            accessible = accessible and not name.startswith("_")
        try:
            value = getattr(owner, key.name)
        except AttributeError:
            return None
        return _Node(
            value, key.annotation, owner, key.name,
            addressable=slot_writable(owner),
            accessible=accessible and not key.name.startswith("_"),
        )

    def _deref(self) -> Optional[_Node]:
        node = self._node
        if node.shape is Shape.DYNAMIC:
            if node.value is None:
                return None
            # the held value has no slot of its own
            return _Node(
                node.value, None, node.owner, (node.slot, ELEM),
                addressable=False, accessible=node.accessible,
            )
        ref = node.value
        if _is_nil(ref):
            return None
        ok, value = _read(ref)
        if not ok:
            return None
        annotation = None
        if is_ref_type(node.annotation):
            args = type_args(node.annotation)
            if args:
                annotation = args[0]
        return _Node(
            value, annotation, ref.owner, ref.key,
            addressable=ref.writable, accessible=node.accessible,
        )

    def _entry(self, key: Key) -> Tuple[Key, Optional[_Node]]:
        node = self._node
        args = type_args(node.annotation)
        if isinstance(key, MapKey):
            # taken from the dict itself
            wrapped = key
        else:
            wrapped = MapKey(key)
            if len(args) == 2:
                key_type = unwrap_optional(args[0])
                if isinstance(key_type, type) and not isinstance(key, key_type):
                    # wrong key type for map
                    return key, None
        k = wrapped.key
        try:
            if k not in node.value:
                return key, None
        except TypeError:
            # unhashable key
            return key, None
        annotation = args[1] if len(args) == 2 else None
        return wrapped, _Node(node.value[k], annotation, node.value, k, addressable=False)

    def leave(self) -> None:
        """Revert the last successful enter()."""
        if self._path:
            self._node = self._path.pop().src

    def return_to(self, depth: int) -> None:
        """
        Return to the node at the given depth.

        Raises:
            DepthError: If depth is negative or deeper than the current node.
        """
        current = self.depth
        if depth < 0 or depth > current:
            raise DepthError(f"bad depth: {depth}")
        for _ in range(current - depth):
            self.leave()

    def follow(self) -> bool:
        """
        Dereference pointers and dynamic references until a value is reached.

        Use return_to() with the prior depth to undo, also after a failure.
        """
        while self._node.shape in REFERENCE_SHAPES:
            if not self.enter(ELEM):
                return False
        return True

    def into(self, *keys: Key) -> None:
        """
        Follow a path of keys.

        Pointers and dynamic references leading to each key are entered
        automatically and must not be part of the path.

        Raises:
            IntoError: If a key cannot be entered; the crawler is back at
                the node it started from.
        """
        start = self.depth
        for i, key in enumerate(keys):
            if not self.follow() or not self.enter(key):
                entered = self.depth - start
                self.return_to(start)
                raise IntoError(i, entered)

    def reference(self) -> Optional[Ref]:
        """Get a Ref to the current node, None if it is read-only or inaccessible."""
        node = self._node
        if node.addressable and node.accessible:
            return Ref(node.owner, node.slot)
        return None

    def tag(self, key: str = "") -> str:
        """
        Get the tag of the current record field.

        The full tag is returned when key is empty.
        """
        if not self._path:
            return ""
        edge_key = self._path[-1].key
        if not isinstance(edge_key, FieldKey):
            return ""
        if key:
            return edge_key.tag.get(key)
        return str(edge_key.tag)

    def key(self, depth: int) -> Key:
        """
        Get the key that was entered to leave the node at the given depth.

        Raises:
            DepthError: If no edge exists at that depth.
        """
        if depth < 0 or depth >= len(self._path):
            raise DepthError(f"no key at depth {depth}")
        key = self._path[depth].key
        if isinstance(key, MapKey):
            return key.key
        return key

    def type_name(self, depth: int) -> str:
        """
        Get the type of the node at the given depth.

        Raises:
            DepthError: If no node exists at that depth.
        """
        if depth < 0 or depth > len(self._path):
            raise DepthError(f"no node at depth {depth}")
        if depth == len(self._path):
            return type_name(self._node.declared())
        return type_name(self._path[depth].src.declared())

    def append_path(self, dest: str = "", full: bool = False) -> str:
        """
        Append the path from the root to the current node.

        Segments are delimited by "/"; "\\" and "/" are escaped as "\\\\" and
        "\\/". Dereferences are delimited but add no text.

        A full path names every embedded field along the way to a promoted
        field, regardless of how it was entered.
        """
        parts = [dest]
        for i in range(len(self._path)):
            if i > 0:
                parts.append("/")
            key = self.key(i)
            if key is ELEM:
                continue
            if isinstance(key, FieldKey):
                parts.append("/".join(key.chain) if full else key.name)
            elif isinstance(key, int) and not isinstance(key, bool):
                parts.append(str(key))
            else:
                parts.append(escape_segment(str(key)))
        return "".join(parts)


def _is_record(value: Any) -> bool:
    return classify(value) is Shape.RECORD


def new_crawler(ptr: Any) -> Optional[Crawler]:
    """
    Create a crawler for the target of ptr.

    Returns:
        A Crawler, or None if ptr is not a Ref or is nil.
    """
    if not isinstance(ptr, Ref) or ptr.is_nil:
        return None
    ok, value = _read(ptr)
    if not ok:
        return None
    return Crawler(_Node(value, None, ptr.owner, ptr.key, addressable=ptr.writable))
