"""Iterators that enter every child of a crawler node in turn."""

from typing import List

from .crawler import Crawler, Key
from .keys import MapKey
from .model import Shape


class Iterator:
    """
    Knows all keys of a crawler node and enters them one after another.

    An iterator is only valid while the crawler is at the node it was
    created for.
    """

    def has_next(self) -> bool:
        return False

    def enter_next(self) -> bool:
        return False

    def leave(self) -> None:
        pass

    def reset(self) -> None:
        pass


class EmptyIterator(Iterator):
    """Iterator of a node without children."""


class SequenceIterator(Iterator):
    """Iterates records, tuples, lists, pointers and dynamic references by position."""

    def __init__(self, crawler: Crawler):
        self._crawler = crawler
        self._i = 0

    def has_next(self) -> bool:
        return self._i < self._crawler.size

    def enter_next(self) -> bool:
        if self._i >= self._crawler.size:
            return False
        if not self._crawler.enter(self._i):
            return False
        self._i += 1
        return True

    def leave(self) -> None:
        self._crawler.leave()

    def reset(self) -> None:
        self._i = 0


class MapIterator(Iterator):
    """Iterates the keys a dict had when the iterator was created."""

    def __init__(self, crawler: Crawler):
        self._crawler = crawler
        self._keys: List[Key] = [MapKey(k) for k in crawler.value]
        self._i = 0

    def has_next(self) -> bool:
        return self._i < len(self._keys)

    def enter_next(self) -> bool:
        if self._i >= len(self._keys):
            return False
        if not self._crawler.enter(self._keys[self._i]):
            return False
        self._i += 1
        return True

    def leave(self) -> None:
        self._crawler.leave()

    def reset(self) -> None:
        self._i = 0


def node_iterator(crawler: Crawler) -> Iterator:
    """Get an iterator for the current node of crawler."""
    if crawler.size > 0:
        if crawler.ordered:
            return SequenceIterator(crawler)
        if crawler.shape is Shape.MAP:
            return MapIterator(crawler)
    return EmptyIterator()
