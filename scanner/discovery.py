"""Discovery of configuration documents for the walk command."""

import fnmatch
import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional, Set

logger = logging.getLogger(__name__)

# Documents the walk command can load
DEFAULT_EXTENSIONS = {".yaml", ".yml", ".json", ".toml"}

# Directory names or glob patterns never searched
DEFAULT_EXCLUDE_DIRS = {
    ".git", ".hg", ".svn",
    "node_modules", "__pycache__", ".tox", ".nox",
    "venv", ".venv", "env", ".env",
    ".idea", ".vscode",
    "build", "dist", ".eggs", "*.egg-info",
}


def is_excluded(name: str, exclude_dirs: Set[str]) -> bool:
    """Check a directory name against names and glob patterns."""
    return any(fnmatch.fnmatchcase(name, pattern) for pattern in exclude_dirs)


def iter_files(
    root: Path,
    include_ext: Optional[Set[str]] = None,
    exclude_dirs: Optional[Set[str]] = None,
    max_depth: Optional[int] = None,
) -> Iterator[Path]:
    """
    Find documents below a directory, depth first in sorted order.

    Args:
        root: Directory to search.
        include_ext: Lowercase extensions to accept, e.g. {'.yaml'}.
                    Defaults to DEFAULT_EXTENSIONS.
        exclude_dirs: Directory names or glob patterns to prune.
                     Defaults to DEFAULT_EXCLUDE_DIRS.
        max_depth: Deepest directory level searched below root, None for
                  no limit.

    Yields:
        Paths of matching files.
    """
    extensions = DEFAULT_EXTENSIONS if include_ext is None else include_ext
    excluded = DEFAULT_EXCLUDE_DIRS if exclude_dirs is None else exclude_dirs

    def _search(directory: Path, depth: int) -> Iterator[Path]:
        try:
            entries = sorted(directory.iterdir())
        except PermissionError:
            logger.debug("cannot list %s", directory)
            return

        for entry in entries:
            if entry.is_file():
                if entry.suffix.lower() in extensions:
                    yield entry
            elif entry.is_dir() and not is_excluded(entry.name, excluded):
                if max_depth is None or depth < max_depth:
                    yield from _search(entry, depth + 1)

    yield from _search(root, 0)


def expand_paths(
    paths: Iterable[Path],
    include_ext: Optional[Set[str]] = None,
) -> Iterator[Path]:
    """
    Expand command line paths into documents.

    Files are yielded as given, whatever their extension; directories are
    searched with iter_files().
    """
    for path in paths:
        if path.is_dir():
            yield from iter_files(path, include_ext=include_ext)
        else:
            yield path
