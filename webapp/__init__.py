from __future__ import annotations

import uuid

from flask import Flask, request
from flask_cors import CORS

from docshop.logging import bind_request_context, clear_request_context, configure_logging
from docshop.settings import Settings, get_settings

from .errors import register_error_handlers
from .routes import bp as routes_bp
from .routes import image_bp, pdf_bp

CORS_METHODS = ["GET", "POST", "PUT", "DELETE"]


def create_app(settings: Settings | None = None) -> Flask:
    """Application factory for the docshop web service."""

    config = settings or get_settings()
    configure_logging(config)

    app = Flask(__name__)
    app.config.update(
        MAX_CONTENT_LENGTH=config.max_content_length,
        DOCSHOP_TEMP_ROOT=config.temp_root,
    )

    CORS(
        app,
        origins=config.cors_origin_list,
        methods=CORS_METHODS,
        supports_credentials=True,
    )

    @app.before_request
    def _bind_log_context() -> None:
        bind_request_context(request_id=uuid.uuid4().hex, method=request.method, path=request.path)

    @app.teardown_request
    def _clear_log_context(exc: BaseException | None) -> None:  # noqa: ARG001
        clear_request_context()

    app.register_blueprint(routes_bp)
    app.register_blueprint(image_bp)
    app.register_blueprint(pdf_bp)
    register_error_handlers(app)

    return app
