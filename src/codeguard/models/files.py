"""Source file entity consumed by the analysis core.

File records are produced by an ingestion collaborator (directory walk,
archive extraction, upload) and are only ever read by the core.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FileRecord:
    """A single decoded source file.

    Attributes:
        path: Slash-separated path relative to the project root
        content: Decoded text content
        size: Content length, in the same units used for budget checks
    """

    path: str
    content: str
    size: int

    def __post_init__(self) -> None:
        """Validate the record after initialization."""
        if self.size < 0:
            raise ValueError(f"size must be non-negative. Got: {self.size}")

    @classmethod
    def from_text(cls, path: str, content: str) -> "FileRecord":
        """Create a record whose size is the content length."""
        return cls(path=path.replace("\\", "/"), content=content, size=len(content))

    @property
    def extension(self) -> str:
        """Lowercase file extension including the dot, or empty string."""
        name = self.path.rsplit("/", 1)[-1]
        if "." not in name:
            return ""
        return "." + name.rsplit(".", 1)[-1].lower()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization (content omitted)."""
        return {"path": self.path, "size": self.size}
