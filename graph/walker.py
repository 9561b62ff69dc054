"""Depth-first walker that visits every node of a data graph once."""

from typing import Any, Iterator as TypingIterator, List, NamedTuple, Optional, Set, Tuple

from .crawler import Crawler, new_crawler
from .iterator import Iterator, node_iterator
from .model import Ref


class _Frame(NamedTuple):
    iterator: Iterator
    depth: int


class UniqueWalker:
    """
    Walks the nodes reachable from a root depth first, each node once.

    A node already visited is not entered again, so loops in the graph are
    cut where they reach back to a known node.

    After next() returned True the walker stays at the reported node until
    next() is called again.
    """

    def __init__(self, crawler: Crawler):
        self._crawler = crawler
        self._frames: List[_Frame] = [_Frame(node_iterator(crawler), 0)]
        self._seen: Set[Tuple[Any, ...]] = {crawler.identity()}

    def next(self) -> bool:
        """Enter the next node not visited yet and report whether there was one."""
        crawler = self._crawler
        while self._frames:
            it = self._frames[-1].iterator
            if not it.has_next() or not it.enter_next():
                self._frames.pop()
                if self._frames:
                    crawler.return_to(self._frames[-1].depth)
                continue
            identity = crawler.identity()
            if identity in self._seen:
                crawler.leave()
                continue
            self._seen.add(identity)
            self._frames.append(_Frame(node_iterator(crawler), crawler.depth))
            return True
        return False

    def __iter__(self) -> TypingIterator[str]:
        """Yield the full path of every node after the root."""
        while self.next():
            yield self.path()

    @property
    def depth(self) -> int:
        """Length of the path to the root node."""
        return self._crawler.depth

    def tag(self, key: str = "") -> str:
        return self._crawler.tag(key)

    def reference(self) -> Optional[Ref]:
        return self._crawler.reference()

    def type_name(self) -> str:
        """Declared type of the current node."""
        return self._crawler.type_name(self._crawler.depth)

    def path(self) -> str:
        """Full slash-delimited path of the current node, "/" for the root."""
        return self._crawler.append_path("/", full=True)


def walk_unique(ptr: Any) -> Optional[UniqueWalker]:
    """
    Create a walker visiting each node reachable from ptr once.

    Returns:
        A UniqueWalker, or None if ptr is not a non-nil Ref.
    """
    crawler = new_crawler(ptr)
    if crawler is None:
        return None
    return UniqueWalker(crawler)
