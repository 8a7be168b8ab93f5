"""PDF assembly operations shared by the web app and the tests."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from PIL import Image
from PyPDF2 import PageObject, PdfReader, PdfWriter, Transformation
from PyPDF2.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    EncodedStreamObject,
    NameObject,
    NumberObject,
    RectangleObject,
    StreamObject,
)

from docshop.exceptions import AssemblyError, CodecError, ValidationError
from docshop.images import decode_image, flatten_to_rgb
from docshop.logging import get_logger
from docshop.models import ImagesToPdfOutput, PdfArtifact, SkippedFile, UploadedFile
from docshop.pages import A4_PORTRAIT, fit_box, parse_page_spec
from docshop.workspace import Workspace

logger = get_logger(__name__)

JPEG_MIME_TYPES = ("image/jpeg", "image/jpg")
PNG_MIME_TYPES = ("image/png",)
JPEG_SIGNATURE = b"\xff\xd8"
# Pillow JPEG modes that map straight onto a PDF colour space.
JPEG_COLOR_SPACES = {"L": "/DeviceGray", "RGB": "/DeviceRGB", "CMYK": "/DeviceCMYK"}


def try_decrypt(reader: PdfReader, password: str) -> bool:
    """Attempt to decrypt *reader* with *password*."""

    try:
        result = reader.decrypt(password)
    except Exception:  # noqa: BLE001 - any decrypt failure means "not unlocked"
        return False
    try:
        return bool(int(result))
    except (TypeError, ValueError):
        return False


def _passwords_to_try(password: Optional[str]) -> List[str]:
    passwords = [""]
    if password:
        passwords.append(password)
    return passwords


def open_pdf(source: Union[Path, UploadedFile], password: Optional[str] = None) -> Tuple[PdfReader, int]:
    """Load a PDF from disk, unlocking it if needed, and count its pages.

    Raises:
        ValidationError: If the document is encrypted and cannot be unlocked.
        AssemblyError: If the document cannot be parsed.
    """
    if isinstance(source, UploadedFile):
        path, name = source.path, source.original_name
    else:
        path, name = Path(source), Path(source).name

    try:
        reader = PdfReader(str(path))
        encrypted = bool(getattr(reader, "is_encrypted", False))
    except Exception as exc:  # noqa: BLE001 - PyPDF2 raises a wide range of parse errors
        raise AssemblyError(message=f"Could not read PDF '{name}': {exc}") from exc

    if encrypted and not any(try_decrypt(reader, candidate) for candidate in _passwords_to_try(password)):
        raise ValidationError(message=f"{name} is encrypted; a valid password is required")

    try:
        page_count = len(reader.pages)
    except Exception as exc:  # noqa: BLE001
        raise AssemblyError(message=f"Could not read pages of '{name}': {exc}") from exc
    return reader, page_count


def place_on_page(page: PageObject, page_width: float, page_height: float) -> PageObject:
    """Fit-scale *page* into a ``page_width`` x ``page_height`` box and center it.

    A ``/Rotate`` entry is baked into the content first, so the result is
    always an upright page of the requested size.
    """

    if page.rotation:
        page.transfer_rotation_to_content()
    if "/Rotate" in page:
        del page["/Rotate"]

    box = page.mediabox
    placement = fit_box(float(box.width), float(box.height), page_width, page_height)
    page.add_transformation(
        Transformation()
        .translate(-float(box.left), -float(box.bottom))
        .scale(placement.scale)
        .translate(placement.x, placement.y),
    )
    target = RectangleObject([0, 0, page_width, page_height])
    page.mediabox = target
    page.cropbox = target
    for stale_box in ("/BleedBox", "/TrimBox", "/ArtBox"):
        if stale_box in page:
            del page[stale_box]
    return page


def _write(writer: PdfWriter, path: Path) -> None:
    try:
        with open(path, "wb") as out_file:
            writer.write(out_file)
    except Exception as exc:  # noqa: BLE001
        raise AssemblyError(message=f"Failed to write PDF: {exc}") from exc


def _image_xobject(data: bytes, image: Image.Image) -> StreamObject:
    """Wrap a decoded upload as a PDF image XObject without lossy re-encoding.

    JPEG data is embedded byte for byte under ``/DCTDecode``. Anything else is
    flattened onto white and its raw samples stored with ``/FlateDecode``.
    """

    if image.format == "JPEG" and image.mode in JPEG_COLOR_SPACES:
        xobject: StreamObject = EncodedStreamObject()
        xobject._data = data
        xobject[NameObject("/Filter")] = NameObject("/DCTDecode")
        xobject[NameObject("/ColorSpace")] = NameObject(JPEG_COLOR_SPACES[image.mode])
        if image.mode == "CMYK" and "adobe" in image.info:
            # Adobe CMYK JPEGs store inverted samples.
            xobject[NameObject("/Decode")] = ArrayObject([NumberObject(v) for v in (1, 0) * 4])
    else:
        flat = flatten_to_rgb(image)
        samples = DecodedStreamObject()
        samples.set_data(flat.tobytes())
        xobject = samples.flate_encode()
        xobject[NameObject("/ColorSpace")] = NameObject("/DeviceGray" if flat.mode == "L" else "/DeviceRGB")

    width, height = image.size
    xobject[NameObject("/Type")] = NameObject("/XObject")
    xobject[NameObject("/Subtype")] = NameObject("/Image")
    xobject[NameObject("/Width")] = NumberObject(width)
    xobject[NameObject("/Height")] = NumberObject(height)
    xobject[NameObject("/BitsPerComponent")] = NumberObject(8)
    return xobject


def _image_page(upload: UploadedFile) -> Union[PageObject, SkippedFile]:
    """Turn one upload into a single page sized in points, one point per pixel, or say why not."""

    data = upload.read_bytes() if upload.size_bytes else b""
    if not data:
        return SkippedFile(upload.original_name, "empty file")

    if upload.mime_type in JPEG_MIME_TYPES:
        if not data.startswith(JPEG_SIGNATURE):
            return SkippedFile(upload.original_name, "invalid JPEG signature")
    elif upload.mime_type not in PNG_MIME_TYPES:
        return SkippedFile(upload.original_name, "unsupported format")

    try:
        image = decode_image(data)
        xobject = _image_xobject(data, image)
        width, height = image.size
        page = PageObject.create_blank_page(width=width, height=height)
        page[NameObject("/Resources")] = DictionaryObject(
            {NameObject("/XObject"): DictionaryObject({NameObject("/Im0"): xobject})},
        )
        content = DecodedStreamObject()
        content.set_data(f"q {width} 0 0 {height} 0 0 cm /Im0 Do Q".encode("ascii"))
        page[NameObject("/Contents")] = content
        return page
    except CodecError:
        return SkippedFile(upload.original_name, "could not decode image")
    except Exception as exc:  # noqa: BLE001
        logger.warning("Image embedding failed", file=upload.original_name, error=str(exc))
        return SkippedFile(upload.original_name, "could not embed image")


def images_to_pdf(
    images: Sequence[UploadedFile],
    paper_size: Tuple[float, float],
    workspace: Workspace,
) -> ImagesToPdfOutput:
    """Lay out each image on its own page of *paper_size*, in input order.

    Bad inputs are skipped and reported rather than failing the batch.

    Raises:
        ValidationError: If no images were given or none could be used.
        AssemblyError: If the document cannot be written.
    """

    if not images:
        raise ValidationError(message="No images uploaded")

    page_width, page_height = paper_size
    writer = PdfWriter()
    page_count = 0
    skipped: List[SkippedFile] = []

    for upload in images:
        outcome = _image_page(upload)
        if isinstance(outcome, SkippedFile):
            logger.warning("Skipped image", file=outcome.name, reason=outcome.reason)
            skipped.append(outcome)
            continue
        writer.add_page(place_on_page(outcome, page_width, page_height))
        page_count += 1

    if page_count == 0:
        names = ", ".join(item.name for item in skipped)
        raise ValidationError(message=f"Unable to convert the provided images to PDF. Skipped: {names}.")

    output_path = workspace.new_path("converted", ".pdf")
    _write(writer, output_path)
    logger.info("Images converted to PDF", pages=page_count, skipped=len(skipped))
    return ImagesToPdfOutput(artifact=PdfArtifact(path=output_path, page_count=page_count), skipped=skipped)


def split_pdf(
    source: Union[Path, UploadedFile],
    page_spec: str,
    workspace: Workspace,
    password: Optional[str] = None,
) -> PdfArtifact:
    """Copy the pages named by *page_spec* into a new document.

    Indices are validated against the source before any page is copied.
    """

    if not page_spec or not page_spec.strip():
        raise ValidationError(message="Please provide page numbers")

    reader, page_count = open_pdf(source, password)
    indices = parse_page_spec(page_spec, page_count)

    writer = PdfWriter()
    try:
        for index in indices:
            writer.add_page(reader.pages[index])
    except Exception as exc:  # noqa: BLE001
        raise AssemblyError(message=f"Failed to copy pages: {exc}") from exc

    output_path = workspace.new_path("split", ".pdf")
    _write(writer, output_path)
    logger.info("PDF split", source_pages=page_count, pages=len(indices))
    return PdfArtifact(path=output_path, page_count=len(indices))


def merge_pdfs(
    sources: Iterable[Union[Path, UploadedFile]],
    workspace: Workspace,
    password: Optional[str] = None,
) -> PdfArtifact:
    """Append every page of every source onto A4 pages, rescaled to fit.

    A single unreadable source fails the whole merge.
    """

    sources = list(sources)
    if not sources:
        raise ValidationError(message="No PDF files uploaded")

    page_width, page_height = A4_PORTRAIT
    writer = PdfWriter()
    page_count = 0

    for source in sources:
        reader, _ = open_pdf(source, password)
        try:
            for page in reader.pages:
                writer.add_page(place_on_page(page, page_width, page_height))
                page_count += 1
        except Exception as exc:  # noqa: BLE001
            raise AssemblyError(message=f"Failed to merge pages: {exc}") from exc

    output_path = workspace.new_path("merged", ".pdf")
    _write(writer, output_path)
    logger.info("PDFs merged", sources=len(sources), pages=page_count)
    return PdfArtifact(path=output_path, page_count=page_count)
