"""Image compression and format conversion on in-memory buffers."""

from __future__ import annotations

import io
from typing import Callable, Dict, Optional

from PIL import Image

from docshop.enums import ImageFormat
from docshop.exceptions import CodecError, ValidationError
from docshop.logging import get_logger

logger = get_logger(__name__)

MIN_QUALITY = 10
MAX_QUALITY = 100

# Quality used by convert_image, which does not expose a quality knob.
CONVERT_JPEG_QUALITY = 95

Encoder = Callable[[Image.Image, Optional[int]], bytes]


def format_for_filename(filename: str) -> ImageFormat:
    """Pick the compression format from the upload's extension."""
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if ext == "png":
        return ImageFormat.PNG
    if ext == "webp":
        return ImageFormat.WEBP
    return ImageFormat.JPEG


def validate_quality(quality: object) -> int:
    """Return *quality* as an int in ``[10, 100]`` or raise ValidationError."""
    try:
        value = int(str(quality).strip())
    except (TypeError, ValueError) as exc:
        raise ValidationError(message="Invalid quality value (10-100)") from exc
    if not MIN_QUALITY <= value <= MAX_QUALITY:
        raise ValidationError(message="Invalid quality value (10-100)")
    return value


def _has_alpha(image: Image.Image) -> bool:
    return image.mode in ("RGBA", "LA", "PA") or (image.mode == "P" and "transparency" in image.info)


def flatten_to_rgb(image: Image.Image) -> Image.Image:
    """Drop transparency by compositing onto white; JPEG and PDF have no alpha."""
    if _has_alpha(image):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if image.mode in ("RGB", "L"):
        return image
    return image.convert("RGB")


def _encode_jpeg(image: Image.Image, quality: Optional[int]) -> bytes:
    buffer = io.BytesIO()
    flatten_to_rgb(image).save(
        buffer,
        format="JPEG",
        quality=quality if quality is not None else CONVERT_JPEG_QUALITY,
        optimize=True,
    )
    return buffer.getvalue()


def _encode_png(image: Image.Image, quality: Optional[int]) -> bytes:
    # PNG is lossless; a quality below 100 trades colours for size.
    if image.mode not in ("RGB", "RGBA", "L", "LA", "P", "1"):
        image = image.convert("RGBA" if _has_alpha(image) else "RGB")
    if quality is not None and quality < MAX_QUALITY:
        colors = max(2, round(256 * quality / 100))
        source = image.convert("RGBA" if _has_alpha(image) else "RGB")
        image = source.quantize(colors=colors, method=Image.Quantize.FASTOCTREE)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG", optimize=True)
    return buffer.getvalue()


def _encode_webp(image: Image.Image, quality: Optional[int]) -> bytes:
    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA" if _has_alpha(image) else "RGB")
    buffer = io.BytesIO()
    if quality is None:
        image.save(buffer, format="WEBP", lossless=True)
    else:
        image.save(buffer, format="WEBP", quality=quality)
    return buffer.getvalue()


ENCODERS: Dict[ImageFormat, Encoder] = {
    ImageFormat.JPEG: _encode_jpeg,
    ImageFormat.PNG: _encode_png,
    ImageFormat.WEBP: _encode_webp,
}


def decode_image(data: bytes) -> Image.Image:
    """Fully decode *data* with Pillow, mapping failures to CodecError."""
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
        raise CodecError(message=f"Could not decode image: {exc}") from exc
    return image


def _encode(image: Image.Image, image_format: ImageFormat, quality: Optional[int]) -> bytes:
    try:
        return ENCODERS[image_format](image, quality)
    except (OSError, ValueError) as exc:
        raise CodecError(message=f"Could not encode image as {image_format.value}: {exc}") from exc


def compress_image(data: bytes, image_format: ImageFormat, quality: int) -> bytes:
    """Re-encode *data* in *image_format* at *quality* (10-100).

    Raises:
        ValidationError: On empty input or out-of-range quality.
        CodecError: If the image cannot be decoded or encoded.
    """
    quality = validate_quality(quality)
    if not data:
        raise ValidationError(message="No image uploaded")

    image = decode_image(data)
    encoded = _encode(image, image_format, quality)
    logger.info(
        "Image compressed",
        image_format=image_format.value,
        quality=quality,
        input_bytes=len(data),
        output_bytes=len(encoded),
    )
    return encoded


def convert_image(data: bytes, target: ImageFormat | str) -> bytes:
    """Re-encode *data* in *target*, as losslessly as the format allows."""
    if not data:
        raise ValidationError(message="Invalid file or format")
    if not isinstance(target, ImageFormat):
        try:
            target = ImageFormat.from_str(target)
        except ValidationError as exc:
            raise ValidationError(message="Invalid file or format") from exc

    image = decode_image(data)
    encoded = _encode(image, target, None)
    logger.info(
        "Image converted",
        source_format=image.format,
        image_format=target.value,
        output_bytes=len(encoded),
    )
    return encoded
