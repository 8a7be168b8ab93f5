"""Web routes for the image and PDF tools."""

from __future__ import annotations

import io

from flask import Blueprint, Response, request, send_file

from docshop import core
from docshop.enums import ImageFormat
from docshop.exceptions import ValidationError
from docshop.images import compress_image, convert_image, format_for_filename, validate_quality
from docshop.pages import resolve_paper_size
from docshop.workspace import Workspace

from .lifecycle import pdf_response, scoped_workspace

bp = Blueprint("routes", __name__)
image_bp = Blueprint("image", __name__, url_prefix="/image")
pdf_bp = Blueprint("pdf", __name__, url_prefix="/pdf")

CONVERT_FORMATS = ("jpeg", "jpg", "png", "webp")


@bp.get("/health")
def health() -> dict[str, str]:
    """Liveness check."""

    return {"status": "ok"}


def _uploads(field: str) -> list:
    return [storage for storage in request.files.getlist(field) if storage.filename]


@image_bp.post("/compress")
def compress() -> Response:
    """Re-encode an uploaded image at the requested quality."""

    storage = request.files.get("image")
    if storage is None or not storage.filename:
        raise ValidationError(message="No image uploaded")

    quality = validate_quality(request.form.get("quality"))
    image_format = format_for_filename(storage.filename)
    encoded = compress_image(storage.read(), image_format, quality)

    return send_file(
        io.BytesIO(encoded),
        mimetype=image_format.mime_type,
        as_attachment=True,
        download_name=f"compressed.{image_format.value}",
    )


@image_bp.post("/convert")
def convert() -> Response:
    """Convert an uploaded image to another format."""

    storage = request.files.get("image")
    requested = (request.form.get("format") or "").strip().lower()
    if storage is None or not storage.filename or requested not in CONVERT_FORMATS:
        raise ValidationError(message="Invalid file or format")

    target = ImageFormat.from_str(requested)
    encoded = convert_image(storage.read(), target)

    return send_file(
        io.BytesIO(encoded),
        mimetype=target.mime_type,
        as_attachment=True,
        download_name=f"converted.{requested}",
    )


@pdf_bp.post("/imgtopdf")
@scoped_workspace
def images_to_pdf(workspace: Workspace) -> Response:
    """Accept uploaded images and return them as one PDF, one page each."""

    uploaded_images = _uploads("images")
    if not uploaded_images:
        raise ValidationError(message="No images uploaded")

    paper_size = resolve_paper_size(
        request.form.get("paperSize") or "A4",
        request.form.get("orientation") or "portrait",
    )

    image_inputs = [workspace.save_upload(storage, prefix="image") for storage in uploaded_images]
    result = core.images_to_pdf(image_inputs, paper_size, workspace)

    response = pdf_response(result.artifact)
    response.headers["X-Images-Processed"] = str(result.processed_count)
    if result.skipped_files:
        response.headers["X-Images-Skipped"] = ",".join(result.skipped_files)
        response.headers["X-Images-Skipped-Count"] = str(result.skipped_count)
    return response


@pdf_bp.post("/split-pdf")
@scoped_workspace
def split_pdf(workspace: Workspace) -> Response:
    """Extract the requested pages of an uploaded PDF."""

    pages = request.form.get("pages") or ""
    if not pages.strip():
        raise ValidationError(message="Please provide page numbers")

    storage = request.files.get("pdf")
    if storage is None or not storage.filename:
        raise ValidationError(message="No PDF uploaded")

    source = workspace.save_upload(storage, prefix="upload")
    artifact = core.split_pdf(source, pages, workspace, password=request.form.get("password") or None)
    return pdf_response(artifact)


@pdf_bp.post("/merge-pdfs")
@scoped_workspace
def merge_pdfs(workspace: Workspace) -> Response:
    """Merge uploaded PDFs onto A4 pages, in upload order."""

    uploaded_files = _uploads("pdfs")
    if not uploaded_files:
        raise ValidationError(message="No PDF files uploaded")

    sources = [workspace.save_upload(storage, prefix="upload") for storage in uploaded_files]
    artifact = core.merge_pdfs(sources, workspace, password=request.form.get("password") or None)
    return pdf_response(artifact)
