"""Crawling, iterating and walking graphs of Python values."""

from .model import ELEM, Ref, Shape
from .keys import FieldKey, FieldTag, MapKey, tagged
from .crawler import Crawler, DepthError, IntoError, new_crawler
from .iterator import Iterator, node_iterator
from .walker import UniqueWalker, walk_unique

__all__ = [
    "ELEM",
    "Ref",
    "Shape",
    "FieldKey",
    "FieldTag",
    "MapKey",
    "tagged",
    "Crawler",
    "DepthError",
    "IntoError",
    "new_crawler",
    "Iterator",
    "node_iterator",
    "UniqueWalker",
    "walk_unique",
]
