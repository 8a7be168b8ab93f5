"""Translate operation failures into JSON error responses."""

from __future__ import annotations

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from docshop.exceptions import AssemblyError, CodecError, ValidationError
from docshop.logging import get_logger

logger = get_logger(__name__)

GENERIC_FAILURE = "Internal server error"

# Per-endpoint messages for 500s; internals stay in the server log.
FAILURE_MESSAGES = {
    "image.compress": "Internal server error during compression",
    "image.convert": "Internal server error during conversion",
    "pdf.images_to_pdf": "Server error while creating PDF",
    "pdf.split_pdf": "Failed to split PDF",
    "pdf.merge_pdfs": "Failed to merge PDFs",
}


def _failure_message() -> str:
    return FAILURE_MESSAGES.get(request.endpoint or "", GENERIC_FAILURE)


def register_error_handlers(app: Flask) -> None:
    """Attach the JSON error handlers to *app*."""

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        logger.info("Rejected request", endpoint=request.endpoint, error=exc.message)
        return jsonify(error=exc.message), 400

    @app.errorhandler(CodecError)
    @app.errorhandler(AssemblyError)
    def handle_processing_error(exc: CodecError | AssemblyError):
        logger.error("Processing failed", endpoint=request.endpoint, error=str(exc))
        return jsonify(error=_failure_message()), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify(error=exc.description), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        logger.exception("Unhandled error", endpoint=request.endpoint)
        return jsonify(error=_failure_message()), 500
