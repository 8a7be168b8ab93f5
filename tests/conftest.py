"""Shared fixtures and directory-based pytest markers."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Callable, Sequence

import pytest
from PIL import Image
from PyPDF2 import PdfReader, PdfWriter
from PyPDF2.generic import ContentStream

from docshop.models import UploadedFile
from docshop.settings import Settings
from webapp import create_app


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    """Mark collected tests located under tests/<marker>/."""
    target_dir = (Path(config.rootpath) / "tests" / marker).resolve()

    for item in items:
        path = Path(str(item.fspath)).resolve()
        if path == target_dir or target_dir in path.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Apply directory-based markers to test items."""
    _mark_tests_by_directory(config, items, "unit")
    _mark_tests_by_directory(config, items, "integration")


def make_image(fmt: str = "PNG", size: tuple[int, int] = (40, 20), mode: str = "RGB") -> bytes:
    """Encode a solid-colour image with Pillow."""
    color = (200, 30, 30, 128) if mode == "RGBA" else (200, 30, 30)
    if mode == "L":
        color = 128
    image = Image.new(mode, size, color)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


def make_pdf(
    sizes: Sequence[tuple[int, int]],
    password: str | None = None,
    rotate: int = 0,
) -> bytes:
    """Build a PDF with one image page per size; each page is exactly ``size`` points."""
    images = [Image.new("RGB", size, (10 * i % 255, 80, 160)) for i, size in enumerate(sizes)]
    buffer = io.BytesIO()
    first, *rest = images
    first.save(buffer, format="PDF", save_all=True, append_images=rest, resolution=72.0)
    if password is None and not rotate:
        return buffer.getvalue()

    buffer.seek(0)
    writer = PdfWriter()
    for page in PdfReader(buffer).pages:
        added = writer.add_page(page)
        if rotate:
            added.rotate(rotate)
    if password is not None:
        writer.encrypt(password)
    rewritten = io.BytesIO()
    writer.write(rewritten)
    return rewritten.getvalue()


def image_size_on_page(page) -> tuple[int, int]:
    """Return pixel size of the single image drawn on *page*."""
    xobjects = page["/Resources"]["/XObject"]
    image = next(iter(xobjects.values())).get_object()
    return int(image["/Width"]), int(image["/Height"])


def first_cm(page) -> list[float]:
    """Return the operands of the first ``cm`` operator in the page content."""
    contents = ContentStream(page.get_contents(), page.pdf)
    for operands, operator in contents.operations:
        if operator == b"cm":
            return [float(value) for value in operands]
    raise AssertionError("page has no cm operator")


@pytest.fixture
def upload_factory(tmp_path: Path) -> Callable[..., UploadedFile]:
    """Write bytes to disk and wrap them as an UploadedFile."""
    counter = {"n": 0}

    def _make(data: bytes, name: str = "file.bin", mime_type: str = "application/octet-stream") -> UploadedFile:
        counter["n"] += 1
        path = tmp_path / "uploads" / f"{counter['n']}-{name}"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return UploadedFile(original_name=name, mime_type=mime_type, path=path, size_bytes=len(data))

    return _make


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    return tmp_path / "work"


@pytest.fixture
def settings(work_dir: Path) -> Settings:
    return Settings(
        temp_dir=str(work_dir),
        log_json=False,
        log_level="WARNING",
        cors_origins="http://allowed.example",
    )


@pytest.fixture
def app(settings: Settings):
    app = create_app(settings)
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def leftover_files(root: Path) -> list[Path]:
    """List files still present under a workspace root."""
    if not root.exists():
        return []
    return [path for path in root.iterdir() if path.is_file()]
