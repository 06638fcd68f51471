"""Test fixtures for CodeGuard.

This package provides sample projects and FileRecord helpers for unit and
integration tests.

Sample Projects:
- sample_repos/shop_api: A FastAPI service with SQLAlchemy models and a Dockerfile
"""

from pathlib import Path

from codeguard.models import FileRecord

# Path to fixtures directory
FIXTURES_DIR = Path(__file__).parent

# Path to sample projects
SAMPLE_REPOS_DIR = FIXTURES_DIR / "sample_repos"

SHOP_API_PATH = SAMPLE_REPOS_DIR / "shop_api"


def make_files(entries: dict[str, str]) -> list[FileRecord]:
    """Build FileRecords from a {path: content} mapping."""
    return [FileRecord.from_text(path, content) for path, content in entries.items()]


def make_sized_files(count: int, size: int = 10, prefix: str = "src/file") -> list[FileRecord]:
    """Build count plain-text files of the given size."""
    return [FileRecord.from_text(f"{prefix}{i:03d}.txt", "x" * size) for i in range(count)]
