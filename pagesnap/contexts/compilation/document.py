"""
Data structures exchanged with the compiler.

A compiler turns a SourceText into a Document of Pages, or fails with a list of
Diagnostics whose spans are byte ranges into the source's UTF-8 encoding.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Tuple


@dataclass(frozen=True)
class SourceText:
    """Source string plus the logical file identifier it is reported under."""

    text: str
    file_id: str

    def byte_len(self) -> int:
        return len(self.text.encode("utf-8"))


class PositionKind(Enum):
    """Which part of a diagnostic's span should be highlighted."""

    FULL = "full"
    START = "start"
    END = "end"


@dataclass(frozen=True)
class Diagnostic:
    """
    A single compile error.

    Attributes:
        message: Human-readable error text
        span: (start, end) byte offsets into the UTF-8 encoded source
        pos: Which part of the span to highlight
        hints: Extra engine output lines (logged, not reported)
    """

    message: str
    span: Tuple[int, int]
    pos: PositionKind = PositionKind.FULL
    hints: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Page:
    """A compiled page: physical size in points plus opaque renderable content."""

    width_pt: float
    height_pt: float
    content: Any = field(default=None, compare=False, repr=False)

    @property
    def size(self) -> Tuple[float, float]:
        return (self.width_pt, self.height_pt)


@dataclass(frozen=True)
class Document:
    """Ordered, immutable sequence of pages."""

    pages: Tuple[Page, ...] = ()

    def __len__(self) -> int:
        return len(self.pages)


class CompileFailure(Exception):
    """Raised by a compiler when the source does not compile."""

    def __init__(self, diagnostics: List[Diagnostic]):
        self.diagnostics = list(diagnostics)
        super().__init__(f"compilation failed with {len(self.diagnostics)} error(s)")
