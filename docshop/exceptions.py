"""Error taxonomy shared by the operations and the web layer."""

from __future__ import annotations

from dataclasses import dataclass


class DocShopError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(DocShopError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class ValidationError(DocShopError):
    """Malformed, missing or out-of-range input. Safe to show to the caller."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class CodecError(DocShopError):
    """Raised when an image cannot be decoded or encoded."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class AssemblyError(DocShopError):
    """Raised when a PDF document cannot be read, built or serialized."""

    message: str

    def __str__(self) -> str:
        return self.message
