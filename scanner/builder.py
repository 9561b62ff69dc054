"""Scan records for parameters and build the parameter tree."""

import logging
from typing import Any, Hashable, List, Optional, Protocol, Set, Tuple

from graph.crawler import Crawler, new_crawler
from graph.keys import FieldKey
from graph.model import COMPOSITE_SHAPES, ELEM, REFERENCE_SHAPES, Ref, Shape
from value import value_of
from .errors import NilRootError, RootTypeError
from .model import Module, Parameter
from .trace import ScanWarnings, Tracer

logger = logging.getLogger(__name__)


class ScanStrategy(Protocol):
    """Bookkeeping of a scan."""

    def enter(self, name: str) -> None:
        """Called when a field is scanned; always followed by leave()."""

    def leave(self, name: str) -> None:
        """Called when scanning a field is done."""

    def register(self, identity: Hashable) -> bool:
        """Register storage found at the current field and report whether it was known."""

    def skip(self) -> None:
        """Called when the current field is not part of the tree."""


class Guard:
    """Registers identities to keep duplicates out of the tree, nothing else."""

    def __init__(self):
        self._known: Set[Hashable] = set()

    def enter(self, name: str) -> None:
        pass

    def leave(self, name: str) -> None:
        pass

    def register(self, identity: Hashable) -> bool:
        if identity in self._known:
            return True
        self._known.add(identity)
        return False

    def skip(self) -> None:
        pass


def scan(ptr: Any) -> Module:
    """
    Scan a record for parameters.

    Fields, elements of lists and tuples, Refs and dynamically typed fields
    are traversed recursively to find every value that can be converted to
    and from a string. Storage reachable more than once is only part of the
    tree at its first occurrence.

    Args:
        ptr: A Ref to a dataclass instance.

    Returns:
        The root Module.

    Raises:
        NilRootError: If ptr is None.
        RootTypeError: If ptr is not a Ref to a record.
    """
    return _scan_root(Guard(), ptr)


def scan_warn(ptr: Any) -> Tuple[Module, Optional[ScanWarnings]]:
    """
    Scan a record like scan() and report duplicate and skipped fields.

    Returns:
        The root Module and a ScanWarnings, or None if no field was
        duplicated or skipped.
    """
    tracer = Tracer()
    module = _scan_root(tracer, ptr)
    return module, tracer.warning()


def _scan_root(strategy: ScanStrategy, ptr: Any) -> Module:
    if ptr is None:
        raise NilRootError("root is None")
    if not isinstance(ptr, Ref):
        raise RootTypeError(f"root must be a Ref to a record, not {type(ptr).__name__}")
    crawler = new_crawler(ptr)
    if crawler is None or crawler.shape is not Shape.RECORD:
        raise RootTypeError("root does not reference a record")

    # register the root to stop loops back to it
    strategy.register(crawler.identity())
    builder = _ModuleBuilder(strategy, crawler)
    modules, params = builder.children()
    root = Module("", "", modules, params)
    logger.debug(
        "scanned %s: %d modules, %d parameters",
        type(crawler.value).__name__, len(modules), len(params),
    )
    return root


class _ModuleBuilder:
    """Collects the modules and parameters below the current crawler node."""

    def __init__(self, strategy: ScanStrategy, crawler: Crawler):
        self._strategy = strategy
        self._crawler = crawler

    def children(self) -> Tuple[List[Module], List[Parameter]]:
        """Scan every field of a record or element of a sequence."""
        crawler = self._crawler
        modules: List[Module] = []
        params: List[Parameter] = []
        depth = crawler.depth
        for i in range(crawler.size):
            if not crawler.enter(i):
                continue
            key = crawler.key(depth)
            if isinstance(key, FieldKey):
                name, tag = key.name, str(key.tag)
            else:
                name, tag = str(i), ""
            self._strategy.enter(name)
            if not self._value(name, tag, modules, params):
                self._strategy.skip()
            self._strategy.leave(name)
            crawler.return_to(depth)
        return modules, params

    def _value(
        self,
        name: str,
        tag: str,
        modules: List[Module],
        params: List[Parameter],
    ) -> bool:
        """Add the value at the crawler as a parameter or a module."""
        crawler = self._crawler

        # find the innermost storage
        registered = False
        while crawler.shape in REFERENCE_SHAPES:
            pointer = crawler.shape is Shape.POINTER
            if not crawler.enter(ELEM):
                # nil pointer or dynamic reference
                return False
            if pointer:
                if self._strategy.register(crawler.identity()):
                    return False
                registered = True

        if not crawler.accessible:
            return False
        ref = crawler.reference()
        composite = crawler.shape in COMPOSITE_SHAPES
        if ref is None and not composite:
            return False
        if not registered and self._strategy.register(crawler.identity()):
            return False

        if ref is not None:
            val = value_of(ref, crawler.annotation)
            if val is not None:
                params.append(Parameter(name, tag, val))
                return True
        if composite:
            sub_modules, sub_params = self.children()
            modules.append(Module(name, tag, sub_modules, sub_params))
            return True
        # unsupported type
        return False
