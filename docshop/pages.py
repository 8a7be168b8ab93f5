"""Page-spec parsing, paper sizes and fit-scale geometry."""

from __future__ import annotations

from typing import Dict, List, NamedTuple, Tuple

from docshop.enums import Orientation
from docshop.exceptions import ValidationError

# Portrait dimensions in PDF points; landscape swaps them.
PAPER_SIZES: Dict[str, Tuple[float, float]] = {
    "A3": (841.89, 1190.55),
    "A4": (595.28, 841.89),
    "A5": (419.53, 595.28),
    "Letter": (612.0, 792.0),
    "Legal": (612.0, 1008.0),
}

A4_PORTRAIT: Tuple[float, float] = PAPER_SIZES["A4"]


class Placement(NamedTuple):
    """Where a scaled box lands on a page."""

    scale: float
    x: float
    y: float
    width: float
    height: float


def resolve_paper_size(name: str, orientation: str) -> Tuple[float, float]:
    """Return ``(width, height)`` in points for a named paper size.

    Names match case-insensitively (``a4`` is ``A4``).
    """
    canonical = {key.lower(): key for key in PAPER_SIZES}.get((name or "").strip().lower())
    if canonical is None:
        raise ValidationError(message="Invalid paper size or orientation")
    try:
        parsed = Orientation.from_str(orientation)
    except ValidationError as exc:
        raise ValidationError(message="Invalid paper size or orientation") from exc

    width, height = PAPER_SIZES[canonical]
    if parsed is Orientation.LANDSCAPE:
        return height, width
    return width, height


def fit_box(content_width: float, content_height: float, page_width: float, page_height: float) -> Placement:
    """Scale content uniformly to fit inside the page and center it."""
    if content_width <= 0 or content_height <= 0:
        raise ValueError("content dimensions must be positive")

    scale = min(page_width / content_width, page_height / content_height)
    width = content_width * scale
    height = content_height * scale
    return Placement(
        scale=scale,
        x=(page_width - width) / 2,
        y=(page_height - height) / 2,
        width=width,
        height=height,
    )


def _parse_page_number(raw: str, spec: str) -> int:
    text = raw.strip()
    # isdigit() alone admits characters such as "²" that int() rejects.
    if not (text.isascii() and text.isdigit()):
        raise ValidationError(message=f"Invalid page spec '{spec}': '{text}' is not a page number")
    number = int(text)
    if number < 1:
        raise ValidationError(message=f"Invalid page spec '{spec}': pages are numbered from 1")
    return number


def _check_in_document(number: int, page_count: int) -> None:
    if number > page_count:
        raise ValidationError(
            message=f"Page {number} is out of range; the document has {page_count} page(s)",
        )


def parse_page_spec(spec: str, page_count: int) -> List[int]:
    """Convert a 1-based page spec such as ``"1,3-5"`` into 0-based indices.

    Order and repeats are preserved. Each page number, and each range's end,
    is checked against ``page_count`` as soon as it is parsed, so a range is
    only expanded once it is known to lie inside the document.

    Raises:
        ValidationError: If the spec is empty, malformed or names a page
            outside the document.
    """
    if not spec or not spec.strip():
        raise ValidationError(message="Please provide page numbers")

    indices: List[int] = []
    for part in spec.split(","):
        if "-" in part:
            start_raw, _, end_raw = part.partition("-")
            start = _parse_page_number(start_raw, spec)
            end = _parse_page_number(end_raw, spec)
            if start > end:
                raise ValidationError(message=f"Invalid page range '{part.strip()}': start is after end")
            _check_in_document(end, page_count)
            indices.extend(range(start - 1, end))
        else:
            number = _parse_page_number(part, spec)
            _check_in_document(number, page_count)
            indices.append(number - 1)
    return indices
