"""
Rasterization and PNG encoding.

Classes:
    PixelBuffer: RGBA8 pixels with known width and height.
    PdfiumRasterizer: Renders a PDF-backed Page with pypdfium2.
    PngEncoder: Encodes a PixelBuffer as PNG with Pillow.

Helper functions:
    parse_color: "#rgb", "#rrggbb" or "#rrggbbaa" to an RGBA tuple.
"""

import re
import threading
from dataclasses import dataclass
from io import BytesIO
from typing import Tuple

import pypdfium2 as pdfium
from PIL import Image

from pagesnap.contexts.compilation.document import Page
from pagesnap.utils.pdf_processing import PdfPage

Color = Tuple[int, int, int, int]

WHITE: Color = (255, 255, 255, 255)

# PDFium is not thread-safe; all pdfium calls in this process go through this lock
PDFIUM_LOCK = threading.Lock()

HEX_COLOR = re.compile(r"^#?(?P<hex>[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


def parse_color(value: str) -> Color:
    """
    Parse a hex color string to (r, g, b, a).

    Examples:
        >>> parse_color("#fff")
        (255, 255, 255, 255)
        >>> parse_color("#11223380")
        (17, 34, 51, 128)
    """
    match = HEX_COLOR.match(value.strip())
    if match is None:
        raise ValueError(f"Invalid color: {value!r} (expected #rgb, #rrggbb or #rrggbbaa)")

    digits = match.group("hex")
    if len(digits) == 3:
        digits = "".join(d * 2 for d in digits)
    if len(digits) == 6:
        digits += "ff"
    return tuple(int(digits[i : i + 2], 16) for i in range(0, 8, 2))


@dataclass(frozen=True)
class PixelBuffer:
    """Row-major RGBA8 pixels."""

    width: int
    height: int
    pixels: bytes

    def __post_init__(self):
        expected = self.width * self.height * 4
        if len(self.pixels) != expected:
            raise ValueError(
                f"PixelBuffer of {self.width}x{self.height} needs {expected} bytes, "
                f"got {len(self.pixels)}"
            )


class PdfiumRasterizer:
    """Rasterizer capability for pages read from PDF bytes."""

    def rasterize(self, page: Page, scale: float, fill_color: Color) -> PixelBuffer:
        if not isinstance(page.content, PdfPage):
            raise TypeError(f"PdfiumRasterizer cannot render {type(page.content).__name__} pages")

        with PDFIUM_LOCK:
            pdf = pdfium.PdfDocument(page.content.pdf_bytes)
            try:
                bitmap = pdf[page.content.index].render(scale=scale, fill_color=tuple(fill_color))
                image = bitmap.to_pil().convert("RGBA")
            finally:
                pdf.close()

        return PixelBuffer(width=image.width, height=image.height, pixels=image.tobytes())


class PngEncoder:
    """Encoder capability producing 8-bit RGBA PNG bytes."""

    def encode(self, buffer: PixelBuffer) -> bytes:
        image = Image.frombytes("RGBA", (buffer.width, buffer.height), buffer.pixels)
        out = BytesIO()
        image.save(out, format="PNG")
        return out.getvalue()
