"""Edge keys, field tags and record field tables."""

import ast
import dataclasses
import typing
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .model import Ref, type_args, unwrap_optional


class FieldTag(str):
    """
    Raw tag string of a record field.

    Tags follow the conventional `key:"value"` notation, with several
    space-separated pairs, e.g. `env:"PORT" flag:"port"`.
    """

    def lookup(self, key: str) -> Optional[str]:
        """
        Find the value associated with key.

        Returns:
            The unquoted value, or None if the tag has no such key or is
            malformed before reaching it.
        """
        tag = str(self)
        while tag:
            tag = tag.lstrip(" ")
            i = 0
            while i < len(tag) and tag[i] > " " and tag[i] not in ':"\x7f':
                i += 1
            if i == 0 or i + 1 >= len(tag) or tag[i] != ":" or tag[i + 1] != '"':
                break
            name = tag[:i]
            tag = tag[i + 1:]

            # scan the quoted value, honouring backslash escapes
            i = 1
            while i < len(tag) and tag[i] != '"':
                if tag[i] == "\\":
                    i += 1
                i += 1
            if i >= len(tag):
                break
            quoted = tag[:i + 1]
            tag = tag[i + 1:]

            if name == key:
                try:
                    return ast.literal_eval(quoted)
                except (ValueError, SyntaxError):
                    return None
        return None

    def get(self, key: str, default: str = "") -> str:
        value = self.lookup(key)
        return default if value is None else value


@dataclass(frozen=True)
class FieldInfo:
    """A declared record field."""

    name: str
    tag: FieldTag
    annotation: Any
    embedded: bool = False


@dataclass(frozen=True)
class FieldKey:
    """
    Key of a record field.

    For a field promoted from embedded records, index and chain hold the
    positions and names of every field along the embedding path; name is
    the last one.
    """

    name: str
    tag: FieldTag
    index: Tuple[int, ...]
    chain: Tuple[str, ...]
    annotation: Any = dataclasses.field(default=None, compare=False, hash=False)

    @property
    def promoted(self) -> bool:
        return len(self.index) > 1

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class MapKey:
    """Wrapped map key, produced by map iterators."""

    key: Any


def tagged(tag: str = "", *, embedded: bool = False, **kwargs: Any) -> Any:
    """
    Declare a dataclass field carrying a tag.

    Args:
        tag: Raw tag string, e.g. `env:"PORT"`.
        embedded: Promote the fields of this record field into its owner.
        **kwargs: Passed on to dataclasses.field.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    if tag:
        metadata["tag"] = tag
    if embedded:
        metadata["embedded"] = True
    return dataclasses.field(metadata=metadata, **kwargs)


def fields_of(cls: type) -> Tuple[FieldInfo, ...]:
    """Build the field table of a dataclass type."""
    try:
        hints = typing.get_type_hints(cls)
    except (NameError, TypeError, AttributeError):
        hints = {}

    table = []
    for f in dataclasses.fields(cls):
        annotation = hints.get(f.name, f.type)
        if isinstance(annotation, str):
            # unresolvable forward reference
            annotation = None
        table.append(FieldInfo(
            name=f.name,
            tag=FieldTag(f.metadata.get("tag", "")),
            annotation=annotation,
            embedded=bool(f.metadata.get("embedded", False)),
        ))
    return tuple(table)


def record_type(annotation: Any) -> Optional[type]:
    """Get the dataclass type behind an annotation of an embedded field."""
    annotation = unwrap_optional(annotation)
    if annotation is Ref or typing.get_origin(annotation) is Ref:
        args = type_args(annotation)
        if not args:
            return None
        annotation = unwrap_optional(args[0])
    if isinstance(annotation, type) and dataclasses.is_dataclass(annotation):
        return annotation
    return None


def field_key(cls: type, position: int) -> FieldKey:
    info = fields_of(cls)[position]
    return FieldKey(info.name, info.tag, (position,), (info.name,), info.annotation)


def field_by_name(cls: type, name: str) -> Optional[FieldKey]:
    """
    Look up a field by name, searching embedded records breadth first.

    A name found more than once at the shallowest depth is ambiguous and
    is not found.
    """
    level = [((), (), cls)]
    seen = set()
    while level:
        found = []
        deeper = []
        for index, chain, rec in level:
            if rec in seen:
                continue
            seen.add(rec)
            for i, info in enumerate(fields_of(rec)):
                if info.name == name:
                    found.append(FieldKey(
                        info.name, info.tag, index + (i,), chain + (info.name,),
                        info.annotation,
                    ))
                elif info.embedded:
                    sub = record_type(info.annotation)
                    if sub is not None:
                        deeper.append((index + (i,), chain + (info.name,), sub))
        if len(found) == 1:
            return found[0]
        if found:
            return None
        level = deeper
    return None


def escape_segment(text: str) -> str:
    """Escape "\\" as "\\\\" and "/" as "\\/"."""
    return text.replace("\\", "\\\\").replace("/", "\\/")
