"""
Render errors.

RenderError is a closed family: every failed render raises exactly one of
SourceDiagnosticsError, TooBigError or NoPagesError, each with its own payload.
"""

import math
import struct
from decimal import Decimal
from enum import Enum
from typing import List

from pagesnap.contexts.compilation.document import Diagnostic, SourceText
from pagesnap.contexts.diagnostics.report import TAB_WIDTH, format_report


class Axis(Enum):
    X = "X"
    Y = "Y"


def _display_f32(value: float) -> str:
    """Shortest plain decimal that reads back as the same 32-bit float (no exponent)."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"

    for precision in range(1, 10):
        text = f"{value:.{precision}g}"
        if struct.unpack("f", struct.pack("f", float(text)))[0] == value:
            break
    return format(Decimal(text), "f")


class RenderError(Exception):
    """Base class for recoverable render failures."""


class SourceDiagnosticsError(RenderError):
    """
    The source did not compile.

    str() renders the diagnostics report against the source. If a diagnostic cannot
    be placed, str() raises ReportFormatError instead of returning partial text.

    Attributes:
        source: The source text the diagnostics point into
        diagnostics: Compile errors in encounter order
    """

    def __init__(
        self, source: SourceText, diagnostics: List[Diagnostic], tab_width: int = TAB_WIDTH
    ):
        self.source = source
        self.diagnostics = list(diagnostics)
        self.tab_width = tab_width
        super().__init__(source, self.diagnostics)

    def __str__(self) -> str:
        return format_report(self.source, self.diagnostics, tab_width=self.tab_width)


class TooBigError(RenderError):
    """A page dimension exceeds the maximum size."""

    def __init__(self, axis: Axis, size: float, max_size: float):
        self.axis = axis
        self.size = size
        self.max_size = max_size
        super().__init__(
            f"rendered output was too big: the {axis.value} axis was {_display_f32(size)} pt "
            f"but the maximum is {_display_f32(max_size)}"
        )


class NoPagesError(RenderError):
    """The compiled document has no pages."""

    def __init__(self):
        super().__init__("no pages in rendered output")
