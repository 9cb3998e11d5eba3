from __future__ import annotations

import logging
from pathlib import Path

from .utils import read_text

logger = logging.getLogger(__name__)

MARGIN_PT = 36  # 0.5 inch


def render_pdf(html_path: str | Path, pdf_path: str | Path, *, paper: str = "letter") -> Path:
    """Print a finished HTML card set to PDF.

    The HTML file's folder is used as the resource archive, so image paths
    written relative to the output folder resolve. Remote stylesheets are not
    fetched.
    """
    try:
        import fitz  # PyMuPDF
    except Exception as e:  # pragma: no cover
        raise RuntimeError("PyMuPDF is required for PDF output. Install pymupdf.") from e

    html_path = Path(html_path)
    pdf_path = Path(pdf_path)
    pdf_path.parent.mkdir(parents=True, exist_ok=True)

    archive = fitz.Archive(str(html_path.resolve().parent))
    story = fitz.Story(html=read_text(html_path), archive=archive)

    mediabox = fitz.paper_rect(paper)
    where = mediabox + (MARGIN_PT, MARGIN_PT, -MARGIN_PT, -MARGIN_PT)

    writer = fitz.DocumentWriter(str(pdf_path))
    pages = 0
    more = 1
    while more:
        device = writer.begin_page(mediabox)
        more, _ = story.place(where)
        story.draw(device)
        writer.end_page()
        pages += 1
    writer.close()

    logger.info("PDF written to %s (%d pages)", pdf_path, pages)
    return pdf_path
