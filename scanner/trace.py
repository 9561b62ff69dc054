"""Scan strategy recording duplicate and skipped fields."""

import logging
from typing import Dict, Hashable, List, Optional, Sequence

from graph.keys import escape_segment

logger = logging.getLogger(__name__)


class ScanWarnings(UserWarning):
    """
    Problems found while scanning, as paths to the fields concerned.

    A path contains the names of the record fields and the indices of the
    sequence elements from the root to a field, separated by "/".

    Attributes:
        duplicates: Groups of paths leading to the same storage, in the
            order they were found. Only the first path of each group is
            part of the scanned tree.
        skipped: Paths of fields that are not part of the tree: duplicates,
            inaccessible fields, nil references and values that are
            neither convertible nor scannable.
    """

    def __init__(
        self,
        duplicates: Optional[Sequence[Sequence[str]]] = None,
        skipped: Optional[Sequence[str]] = None,
    ):
        super().__init__()
        self.duplicates: List[List[str]] = [list(group) for group in duplicates or ()]
        self.skipped: List[str] = list(skipped or ())

    def __str__(self) -> str:
        parts = []
        if self.duplicates:
            groups = "), (".join(", ".join(group) for group in self.duplicates)
            parts.append(f"found duplicates ({groups})")
        if self.skipped:
            parts.append("skipped " + ", ".join(self.skipped))
        return " and ".join(parts)

    def __repr__(self) -> str:
        return f"ScanWarnings(duplicates={self.duplicates!r}, skipped={self.skipped!r})"


class Tracer:
    """Registers identities together with every path they were found at."""

    def __init__(self):
        self._segments: List[str] = []
        self._paths: Dict[Hashable, List[str]] = {}
        self._skipped: List[str] = []
        self._duplicates = 0

    @property
    def path(self) -> str:
        return "/".join(self._segments)

    def enter(self, name: str) -> None:
        self._segments.append(escape_segment(name))

    def leave(self, name: str) -> None:
        # names always come in enter/leave pairs
        self._segments.pop()

    def register(self, identity: Hashable) -> bool:
        paths = self._paths.get(identity)
        if paths is None:
            self._paths[identity] = [self.path]
            return False
        if len(paths) == 1:
            self._duplicates += 1
        paths.append(self.path)
        return True

    def skip(self) -> None:
        self._skipped.append(self.path)

    def warning(self) -> Optional[ScanWarnings]:
        """Summarize the scan, None if nothing was duplicated or skipped."""
        if not self._duplicates and not self._skipped:
            return None
        duplicates = [paths for paths in self._paths.values() if len(paths) > 1]
        logger.debug(
            "scan found %d duplicate groups and %d skipped fields",
            len(duplicates), len(self._skipped),
        )
        return ScanWarnings(duplicates, self._skipped)
