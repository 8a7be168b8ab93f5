"""Tie a request's workspace to the lifetime of its response."""

from __future__ import annotations

import functools
import typing as t
from pathlib import Path

from flask import Response, current_app, make_response

from docshop.models import PdfArtifact
from docshop.workspace import Workspace

CHUNK_SIZE = 64 * 1024


def scoped_workspace(view: t.Callable[..., t.Any]) -> t.Callable[..., Response]:
    """Run *view* with a fresh :class:`Workspace` as its first argument.

    If the view raises, the workspace is emptied before the error propagates.
    Otherwise deletion waits for the response to be closed, which happens
    after the body is sent or when the client goes away.
    """

    @functools.wraps(view)
    def wrapper(*args: t.Any, **kwargs: t.Any) -> Response:
        workspace = Workspace(current_app.config["DOCSHOP_TEMP_ROOT"])
        try:
            response = make_response(view(workspace, *args, **kwargs))
        except BaseException:
            workspace.cleanup_all()
            raise
        response.call_on_close(workspace.cleanup_all)
        return response

    return wrapper


def _iter_file(path: Path) -> t.Iterator[bytes]:
    with open(path, "rb") as handle:
        while True:
            chunk = handle.read(CHUNK_SIZE)
            if not chunk:
                break
            yield chunk


def pdf_response(artifact: PdfArtifact) -> Response:
    """Stream a workspace PDF as a download."""

    response = Response(_iter_file(artifact.path), mimetype="application/pdf")
    response.headers.set("Content-Disposition", "attachment", filename=artifact.path.name)
    response.headers["Content-Length"] = str(artifact.path.stat().st_size)
    response.headers["X-Pages"] = str(artifact.page_count)
    return response
