"""Node model for crawling object graphs: shapes, pointers and identities."""

import dataclasses
import datetime
import decimal
import enum
import types
import typing
from pathlib import PurePath
from typing import Any, Generic, Hashable, Optional, Tuple, TypeVar, Union

T = TypeVar("T")

_UNION_TYPES: Tuple[Any, ...] = (Union,)
if hasattr(types, "UnionType"):
    _UNION_TYPES += (types.UnionType,)

# Immutable values are identified by the slot holding them, since equal
# atoms may share one object (small ints, interned strings).
ATOM_TYPES = (
    type(None), bool, int, float, complex, str, bytes,
    decimal.Decimal, enum.Enum, PurePath,
    datetime.date, datetime.time, datetime.timedelta,
)


class Shape(enum.Enum):
    """Shape of a node in a data graph."""

    SCALAR = "scalar"
    RECORD = "record"
    ARRAY = "array"
    SEQUENCE = "sequence"
    MAP = "map"
    POINTER = "pointer"
    DYNAMIC = "dynamic"


ORDERED_SHAPES = frozenset({
    Shape.RECORD, Shape.ARRAY, Shape.SEQUENCE, Shape.POINTER, Shape.DYNAMIC,
})
REFERENCE_SHAPES = frozenset({Shape.POINTER, Shape.DYNAMIC})
COMPOSITE_SHAPES = frozenset({Shape.RECORD, Shape.ARRAY, Shape.SEQUENCE})


class _Elem:
    """Key of the value referenced by a pointer or a dynamic reference."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ELEM"


ELEM = _Elem()


class _Cell:
    """Anonymous storage allocated by Ref.new."""

    __slots__ = ("value",)

    def __init__(self, value: Any):
        self.value = value

    def __repr__(self) -> str:
        return f"_Cell({self.value!r})"


class Ref(Generic[T]):
    """
    A pointer to a slot: an attribute of an object or an item of a container.

    Two refs are equal when they address the same slot of the same owner.
    A ref without an owner is nil.
    """

    __slots__ = ("owner", "key")

    def __init__(self, owner: Any = None, key: Hashable = None):
        self.owner = owner
        self.key = key

    @classmethod
    def new(cls, value: Any) -> "Ref":
        """Allocate a fresh slot holding value and point to it."""
        return cls(_Cell(value), "value")

    @classmethod
    def nil(cls) -> "Ref":
        return cls()

    @property
    def is_nil(self) -> bool:
        return self.owner is None

    @property
    def writable(self) -> bool:
        """Check whether set() can store into the slot."""
        return slot_writable(self.owner)

    def get(self) -> Any:
        if self.owner is None:
            raise ValueError("dereference of nil Ref")
        if isinstance(self.owner, (list, tuple, dict)):
            return self.owner[self.key]
        return getattr(self.owner, self.key)

    def set(self, value: Any) -> None:
        if self.owner is None:
            raise ValueError("assignment through nil Ref")
        if isinstance(self.owner, (list, dict)):
            self.owner[self.key] = value
        else:
            setattr(self.owner, self.key, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ref):
            return NotImplemented
        return self.owner is other.owner and self.key == other.key

    def __hash__(self) -> int:
        return hash((id(self.owner), self.key))

    def __repr__(self) -> str:
        if self.owner is None:
            return "Ref(nil)"
        return f"Ref({type(self.owner).__name__}@{id(self.owner):#x}, {self.key!r})"


def slot_writable(owner: Any) -> bool:
    """Report whether slots of owner can be assigned."""
    if owner is None or isinstance(owner, (tuple, dict)):
        return False
    if isinstance(owner, (list, _Cell)):
        return True
    if dataclasses.is_dataclass(owner) and not isinstance(owner, type):
        return not type(owner).__dataclass_params__.frozen
    return False


def is_atom(value: Any) -> bool:
    return isinstance(value, ATOM_TYPES)


def unwrap_optional(annotation: Any) -> Any:
    """Strip None from Optional[X]; other annotations are returned unchanged."""
    if typing.get_origin(annotation) in _UNION_TYPES:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def is_dynamic(annotation: Any) -> bool:
    """
    Check whether a declared type admits values of arbitrary type.

    Any, object, type variables and unions of several types are dynamic;
    Optional[X] is as dynamic as X.
    """
    annotation = unwrap_optional(annotation)
    if annotation is Any or annotation is object:
        return True
    if isinstance(annotation, TypeVar):
        return True
    return typing.get_origin(annotation) in _UNION_TYPES


def is_ref_type(annotation: Any) -> bool:
    annotation = unwrap_optional(annotation)
    return annotation is Ref or typing.get_origin(annotation) is Ref


def type_args(annotation: Any) -> Tuple[Any, ...]:
    return typing.get_args(unwrap_optional(annotation))


def classify(value: Any, annotation: Any = None) -> Shape:
    """
    Determine the shape of a value held in a slot of the declared type.

    Args:
        value: The value stored in the slot.
        annotation: The declared type of the slot, or None if unknown.

    Returns:
        The node shape.
    """
    if annotation is not None:
        if is_dynamic(annotation):
            return Shape.DYNAMIC
        if value is None and is_ref_type(annotation):
            return Shape.POINTER
    if isinstance(value, Ref):
        return Shape.POINTER
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return Shape.RECORD
    if isinstance(value, list):
        return Shape.SEQUENCE
    if isinstance(value, tuple):
        return Shape.ARRAY
    if isinstance(value, dict):
        return Shape.MAP
    return Shape.SCALAR


def type_name(annotation: Any) -> str:
    """Render a type or an annotation for display."""
    if isinstance(annotation, type) and not typing.get_args(annotation):
        if annotation.__module__ == "builtins":
            return annotation.__qualname__
        return f"{annotation.__module__}.{annotation.__qualname__}"
    if annotation is Any:
        return "Any"
    return repr(annotation).replace("typing.", "")
