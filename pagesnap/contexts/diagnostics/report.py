"""
Plain-text diagnostic reports.

Renders compile diagnostics as report blocks anchored to character positions in the
source, e.g.:

    Error: Undefined control sequence.
       ╭─[main.tex:3:13]
       │
     3 │ This has an \\undefinedcommand{test}.
       │             ┬
    ───╯

Output never contains color escape codes, so it is safe for any terminal or log sink.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from pagesnap.contexts.compilation.document import Diagnostic, PositionKind, SourceText
from pagesnap.contexts.diagnostics.spans import CharSpan, byte_span_to_char_span

TAB_WIDTH = 2
SEVERITY = "Error"


class ReportFormatError(Exception):
    """Raised when a diagnostic span cannot be mapped onto the source."""

    def __init__(self, diagnostic: Diagnostic, source: SourceText):
        self.diagnostic = diagnostic
        self.source = source
        super().__init__(
            f"cannot place diagnostic {diagnostic.message!r} at bytes {diagnostic.span} "
            f"in {source.file_id} ({source.byte_len()} bytes)"
        )


@dataclass(frozen=True)
class _Line:
    number: int  # 1-based
    start: int  # char offset of first character
    text: str  # without the trailing newline


def _split_lines(text: str) -> List[_Line]:
    lines = []
    offset = 0
    for number, line_text in enumerate(text.split("\n"), 1):
        lines.append(_Line(number=number, start=offset, text=line_text))
        offset += len(line_text) + 1
    return lines


def _line_of(lines: List[_Line], char_offset: int) -> _Line:
    for line in reversed(lines):
        if line.start <= char_offset:
            return line
    return lines[0]


def _display_column(text: str, char_column: int, tab_width: int) -> int:
    """Screen column of text[char_column] with tabs expanded to tab_width."""
    column = 0
    for char in text[:char_column]:
        column += tab_width if char == "\t" else 1
    return column


def adjust_span(diagnostic: Diagnostic) -> Tuple[int, int]:
    """Byte span to highlight: the full span, or a zero-width span at its start or end."""
    start, end = diagnostic.span
    if diagnostic.pos is PositionKind.START:
        return (start, start)
    if diagnostic.pos is PositionKind.END:
        return (end, end)
    return (start, end)


def _underline(line: _Line, span: CharSpan, tab_width: int) -> str:
    """Marker row for one source line covered (at least partly) by span."""
    line_end = line.start + len(line.text)
    first = max(span.start, line.start) - line.start
    last = min(span.end, line_end) - line.start

    left = _display_column(line.text, first, tab_width)
    right = _display_column(line.text, last, tab_width)
    width = max(right - left, 1)

    if span.start >= line.start:
        # Label starts here
        marker = "┬" if width == 1 else "┬" + "─" * (width - 1)
    else:
        marker = "─" * width
    return " " * left + marker


def format_diagnostic(
    source: SourceText, diagnostic: Diagnostic, tab_width: int = TAB_WIDTH
) -> str:
    """
    Render one diagnostic as a report block.

    Raises:
        ReportFormatError: The diagnostic's span does not map onto the source
    """
    span = byte_span_to_char_span(source.text, adjust_span(diagnostic))
    if span is None:
        raise ReportFormatError(diagnostic, source)

    lines = _split_lines(source.text)
    first_line = _line_of(lines, span.start)
    last_line = _line_of(lines, max(span.end - 1, span.start))
    shown = lines[first_line.number - 1 : last_line.number]

    column = _display_column(first_line.text, span.start - first_line.start, tab_width) + 1
    gutter = len(str(last_line.number)) + 2
    blank = " " * gutter

    out = [
        f"{SEVERITY}: {diagnostic.message}",
        f"{blank}╭─[{source.file_id}:{first_line.number}:{column}]",
        f"{blank}│",
    ]
    for line in shown:
        text = _expand(line.text, tab_width)
        out.append(f"{str(line.number).rjust(gutter - 1)} │ {text}".rstrip())
        out.append(f"{blank}│ {_underline(line, span, tab_width)}")
    out.append(f"{'─' * gutter}╯")

    return "\n".join(out) + "\n"


def _expand(text: str, tab_width: int) -> str:
    # Fixed-width tabs, matching _display_column (not tab stops)
    return text.replace("\t", " " * tab_width)


def format_report(
    source: SourceText, diagnostics: Sequence[Diagnostic], tab_width: int = TAB_WIDTH
) -> str:
    """
    Render all diagnostics, in order, as one report.

    Either every diagnostic is rendered or ReportFormatError is raised; no partial
    report is returned.
    """
    return "".join(format_diagnostic(source, diagnostic, tab_width) for diagnostic in diagnostics)
