"""Image and PDF transformation operations behind the docshop web service."""

from .core import images_to_pdf, merge_pdfs, split_pdf, try_decrypt
from .enums import ImageFormat, Orientation
from .exceptions import AssemblyError, CodecError, DocShopError, SettingsError, ValidationError
from .images import compress_image, convert_image, format_for_filename
from .models import ImagesToPdfOutput, PdfArtifact, SkippedFile, UploadedFile
from .pages import PAPER_SIZES, fit_box, parse_page_spec, resolve_paper_size
from .workspace import Workspace

__version__ = "0.1.0"

__all__ = [
    "AssemblyError",
    "CodecError",
    "DocShopError",
    "ImageFormat",
    "ImagesToPdfOutput",
    "Orientation",
    "PAPER_SIZES",
    "PdfArtifact",
    "SettingsError",
    "SkippedFile",
    "UploadedFile",
    "ValidationError",
    "Workspace",
    "__version__",
    "compress_image",
    "convert_image",
    "fit_box",
    "format_for_filename",
    "images_to_pdf",
    "merge_pdfs",
    "parse_page_spec",
    "resolve_paper_size",
    "split_pdf",
    "try_decrypt",
]
