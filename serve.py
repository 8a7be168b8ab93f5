#!/usr/bin/env python3
"""
serve.py
--------------------------------
Run the docshop image/PDF web service.

Endpoints:
- POST /image/compress    re-encode an image at a given quality
- POST /image/convert     convert an image to jpeg/png/webp
- POST /pdf/imgtopdf      assemble images into a PDF
- POST /pdf/split-pdf     extract pages from a PDF
- POST /pdf/merge-pdfs    merge PDFs onto A4 pages

Usage (common cases):
  python serve.py
  python serve.py --port 8080
  python serve.py --host 127.0.0.1 --debug

Host and port default to the HOST and PORT settings (0.0.0.0:5000).
"""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from docshop import __version__
from docshop.logging import get_logger
from docshop.settings import get_settings
from webapp import create_app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docshop", description="Serve the image and PDF transformation API.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--host", help="Bind address (default: HOST setting)")
    parser.add_argument("--port", type=int, help="Listen port (default: PORT setting)")
    parser.add_argument("--debug", action="store_true", help="Run Flask in debug mode")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    settings = get_settings()
    app = create_app(settings)

    host = args.host or settings.host
    port = args.port or settings.port
    get_logger("docshop.serve").info("Server starting", host=host, port=port)
    app.run(host=host, port=port, debug=args.debug)


if __name__ == "__main__":
    main()
