"""Declarative detection predicates for analysis modules.

Each builder returns a pure predicate over the full file list. Predicates only
look at paths, content text and aggregate counts; none of them parse code.
"""

import re
from collections.abc import Iterable, Sequence

from codeguard.models.files import FileRecord
from codeguard.models.profile import DetectFn


def path_matches(pattern: str) -> DetectFn:
    """Match when any file path matches the regex (case-insensitive)."""
    regex = re.compile(pattern, re.IGNORECASE)

    def detect(files: Sequence[FileRecord]) -> bool:
        return any(regex.search(f.path) for f in files)

    return detect


def extension_in(extensions: Iterable[str]) -> DetectFn:
    """Match when any file has one of the given extensions (with dot)."""
    wanted = frozenset(e.lower() for e in extensions)

    def detect(files: Sequence[FileRecord]) -> bool:
        return any(f.extension in wanted for f in files)

    return detect


def content_matches(pattern: str, extensions: Iterable[str] | None = None) -> DetectFn:
    """Match when any file content matches the regex.

    Args:
        pattern: Regular expression searched in file content (multiline)
        extensions: Restrict the search to these extensions (all files if None)
    """
    regex = re.compile(pattern, re.MULTILINE)
    wanted = frozenset(e.lower() for e in extensions) if extensions else None

    def detect(files: Sequence[FileRecord]) -> bool:
        for f in files:
            if wanted is not None and f.extension not in wanted:
                continue
            if regex.search(f.content):
                return True
        return False

    return detect


def file_count_above(threshold: int) -> DetectFn:
    """Match when the project has more than threshold files."""

    def detect(files: Sequence[FileRecord]) -> bool:
        return len(files) > threshold

    return detect


def any_of(*predicates: DetectFn) -> DetectFn:
    """Match when at least one of the predicates matches."""

    def detect(files: Sequence[FileRecord]) -> bool:
        return any(p(files) for p in predicates)

    return detect


def never(files: Sequence[FileRecord]) -> bool:
    """Predicate that never matches (used by the fallback module)."""
    return False
