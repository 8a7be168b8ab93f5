"""Request-scoped data carried between the web layer and the operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List


@dataclass
class UploadedFile:
    """An upload saved into the request workspace."""

    original_name: str
    mime_type: str
    path: Path
    size_bytes: int

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


@dataclass(frozen=True)
class SkippedFile:
    """An input left out of a multi-file document, with the reason why."""

    name: str
    reason: str


@dataclass
class PdfArtifact:
    """A PDF written into the request workspace, ready to be sent."""

    path: Path
    page_count: int


@dataclass
class ImagesToPdfOutput:
    """Result from assembling uploaded images into one PDF."""

    artifact: PdfArtifact
    skipped: List[SkippedFile] = field(default_factory=list)

    @property
    def processed_count(self) -> int:
        return self.artifact.page_count

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def skipped_files(self) -> List[str]:
        return [item.name for item in self.skipped]
