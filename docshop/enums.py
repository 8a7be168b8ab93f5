"""Project enums."""

from __future__ import annotations

from enum import StrEnum

from docshop.exceptions import ValidationError


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from a user-supplied string.

        Args:
            value: Raw string value.

        Raises:
            ValidationError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value.strip().lower())
        except (AttributeError, ValueError) as exc:
            supported = ", ".join(member.value for member in cls)
            raise ValidationError(
                message=f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}",
            ) from exc

    def to_str(self) -> str:
        return self.value


class ImageFormat(_EnumMixin):
    """Raster formats the image endpoints can produce."""

    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"

    @classmethod
    def _missing_(cls, value: object) -> ImageFormat | None:
        if value == "jpg":
            return cls.JPEG
        return None

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"


class Orientation(_EnumMixin):
    """Page orientation for assembled documents."""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"
