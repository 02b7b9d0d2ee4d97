"""
PDF reading utilities.

Helper functions:
    page_sizes: MediaBox sizes of every page, in points.
    read_document: Build a Document whose pages reference the PDF bytes.
"""

from dataclasses import dataclass
from io import BytesIO
from typing import List, Tuple

from PyPDF2 import PdfReader

from pagesnap.contexts.compilation.document import Document, Page


@dataclass(frozen=True)
class PdfPage:
    """Renderable content of a Page: the PDF it lives in and its 0-based index."""

    pdf_bytes: bytes
    index: int


def page_sizes(pdf_bytes: bytes) -> List[Tuple[float, float]]:
    """
    Width and height of each page in points.

    Uses the MediaBox and honours /Rotate so sizes match what a rasterizer draws.
    """
    reader = PdfReader(BytesIO(pdf_bytes))
    sizes = []
    for page in reader.pages:
        width = float(page.mediabox.width)
        height = float(page.mediabox.height)
        rotation = int(page.get("/Rotate", 0)) % 180
        sizes.append((height, width) if rotation else (width, height))
    return sizes


def read_document(pdf_bytes: bytes) -> Document:
    """Build a Document from PDF bytes; pages carry PdfPage content."""
    pages = tuple(
        Page(width_pt=width, height_pt=height, content=PdfPage(pdf_bytes=pdf_bytes, index=i))
        for i, (width, height) in enumerate(page_sizes(pdf_bytes))
    )
    return Document(pages=pages)
