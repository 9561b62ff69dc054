"""Parameter tree produced by a scan."""

from typing import Any, Iterator, List, Optional, Sequence, Tuple

from graph.keys import FieldTag
from value import Value


class Field:
    """A named entry of the parameter tree."""

    def __init__(self, name: str, tag: str = ""):
        self._name = name
        self._tag = FieldTag(tag)

    @property
    def name(self) -> str:
        return self._name

    def tag(self, key: str = "") -> str:
        """Get a tag value by key, or the full tag if key is empty."""
        if not key:
            return str(self._tag)
        return self._tag.get(key)


class Parameter(Field):
    """A configurable leaf value."""

    def __init__(self, name: str, tag: str, value: Value):
        super().__init__(name, tag)
        self._value = value

    @property
    def value(self) -> Value:
        return self._value

    @property
    def is_bool_flag(self) -> bool:
        return bool(getattr(self._value, "is_bool_flag", False))

    def get(self) -> Any:
        return self._value.get()

    def set(self, text: str) -> None:
        """
        Parse text and store it.

        Raises:
            ValueError: If text cannot be converted; the value is unchanged.
        """
        self._value.set(text)

    def __str__(self) -> str:
        return str(self._value)

    def __repr__(self) -> str:
        return f"Parameter({self.name!r}, {str(self)!r})"


class Module(Field):
    """
    A collection of modules and parameters, in the order they were found.

    The root module of a scan has an empty name.
    """

    def __init__(
        self,
        name: str = "",
        tag: str = "",
        modules: Sequence["Module"] = (),
        parameters: Sequence[Parameter] = (),
    ):
        super().__init__(name, tag)
        self._modules: Tuple[Module, ...] = tuple(modules)
        self._parameters: Tuple[Parameter, ...] = tuple(parameters)

    def modules(self) -> List["Module"]:
        return list(self._modules)

    def parameters(self) -> List[Parameter]:
        return list(self._parameters)

    def module(self, name: str) -> Optional["Module"]:
        """Get the first child module with the given name."""
        for mod in self._modules:
            if mod.name == name:
                return mod
        return None

    def parameter(self, name: str) -> Optional[Parameter]:
        """Get the first parameter with the given name."""
        for param in self._parameters:
            if param.name == name:
                return param
        return None

    def iter_parameters(self, prefix: str = "") -> Iterator[Tuple[str, Parameter]]:
        """
        Iterate over all parameters of the tree as (path, parameter) tuples.

        Paths join module and parameter names with "/"; parameters of a
        module come before those of its child modules.
        """
        for param in self._parameters:
            yield prefix + param.name, param
        for mod in self._modules:
            yield from mod.iter_parameters(prefix + mod.name + "/")

    def __str__(self) -> str:
        lines: List[str] = []
        self._append_indented(lines, "")
        return "\n".join(lines)

    def _append_indented(self, lines: List[str], path: str) -> None:
        path = path + self.name + "/"
        lines.append(path)
        for mod in self._modules:
            mod._append_indented(lines, path)
        for param in self._parameters:
            lines.append(path + param.name)

    def __repr__(self) -> str:
        return (
            f"Module({self.name!r}, modules={len(self._modules)}, "
            f"parameters={len(self._parameters)})"
        )
