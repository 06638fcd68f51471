"""Directory ingestion.

Walks a project directory and produces the FileRecords consumed by the
analysis core. Only text source files with a supported extension are kept;
build output, dependency folders and undecodable files are skipped.
"""

import logging
import os
from pathlib import Path

from codeguard.models.files import FileRecord

logger = logging.getLogger(__name__)

# Extensions (without dot) analyzed as source text
SUPPORTED_EXTENSIONS = frozenset(
    {
        "ts", "tsx", "js", "jsx", "json",
        "py", "rb", "php", "java", "c", "cpp", "h", "hpp",
        "go", "rs", "swift", "kt", "kts", "css", "scss", "html", "sql", "sh", "yaml", "yml",
        "tf", "vue", "svelte", "prisma", "cs",
    }
)  # fmt: skip

# File names analyzed regardless of extension
SUPPORTED_FILENAMES = frozenset({"Dockerfile"})

# Directory names never descended into
IGNORED_DIRS = frozenset(
    {
        "node_modules",
        "dist",
        "build",
        ".git",
        ".next",
        "coverage",
        "venv",
        ".venv",
        "__pycache__",
        "bin",
        "obj",
        "target",
    }
)


def is_supported(path: Path) -> bool:
    """Check whether a file should be analyzed."""
    if path.name in SUPPORTED_FILENAMES:
        return True
    return path.suffix.lower().lstrip(".") in SUPPORTED_EXTENSIONS


def load_directory(root: Path, max_file_bytes: int | None = 1_000_000) -> list[FileRecord]:
    """Load supported source files below a directory.

    Args:
        root: Project root directory
        max_file_bytes: Skip files larger than this (no limit if None)

    Returns:
        FileRecords sorted by relative path

    Raises:
        NotADirectoryError: If root is not a directory
    """
    root = Path(root)
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    records: list[FileRecord] = []
    skipped = 0

    for dirpath, dirnames, filenames in os.walk(root):
        # Prune ignored directories in place so os.walk skips them
        dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_DIRS)

        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if not is_supported(path) or not path.is_file():
                continue

            if max_file_bytes is not None and path.stat().st_size > max_file_bytes:
                logger.debug("Skipping large file: %s", path)
                skipped += 1
                continue

            try:
                content = path.read_text(encoding="utf-8")
            except (UnicodeDecodeError, OSError) as e:
                logger.debug("Skipping unreadable file %s: %s", path, e)
                skipped += 1
                continue

            relative = path.relative_to(root).as_posix()
            records.append(FileRecord.from_text(relative, content))

    records.sort(key=lambda r: r.path)
    logger.info("Loaded %d files from %s (%d skipped)", len(records), root, skipped)
    return records
