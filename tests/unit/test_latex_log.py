"""Unit tests for LaTeX engine log parsing."""

import pytest

from pagesnap.contexts.compilation.compiler import LatexCompiler, parse_latex_log
from pagesnap.contexts.compilation.document import Diagnostic, PositionKind, SourceText
from pagesnap.contexts.compilation.sandbox import Sandbox
from pagesnap.contexts.rendering.errors import SourceDiagnosticsError

SOURCE = SourceText(
    text=(
        "\\documentclass{article}\n"
        "\\begin{document}\n"
        "This has an \\undefinedcommand{test} that should fail.\n"
        "\\end{document}\n"
    ),
    file_id="main.tex",
)

UNDEFINED_LOG = r"""This is pdfTeX, Version 3.141592653-2.6-1.40.25 (TeX Live 2023) (preloaded format=pdflatex)
(./main.tex
LaTeX2e <2023-11-01>
./main.tex:3: Undefined control sequence.
l.3 This has an \undefinedcommand
                                  {test} that should fail.
The control sequence at the end of the top line
of your error message was never \def'ed.

[1] (./main.aux) )
Output written on main.pdf (1 page, 12345 bytes).
"""


@pytest.mark.unit
class TestParseLatexLog:
    def test_error_points_at_stopping_position(self):
        diagnostics = parse_latex_log(UNDEFINED_LOG, SOURCE)

        assert len(diagnostics) == 1
        diagnostic = diagnostics[0]
        assert diagnostic.message == "Undefined control sequence."
        # Line 3 starts at byte 41; TeX stopped 29 bytes in
        assert diagnostic.span == (41, 70)
        assert diagnostic.pos is PositionKind.END

    def test_help_lines_become_hints(self):
        diagnostic = parse_latex_log(UNDEFINED_LOG, SOURCE)[0]
        assert diagnostic.hints == (
            "The control sequence at the end of the top line",
            "of your error message was never \\def'ed.",
        )

    def test_unmatched_context_anchors_line_start(self):
        log = "./main.tex:3: Missing $ inserted.\nl.3 something else\n\n"
        diagnostic = parse_latex_log(log, SOURCE)[0]
        assert diagnostic.span == (41, 41)
        assert diagnostic.pos is PositionKind.START

    def test_line_beyond_source(self):
        log = "./main.tex:99: Emergency stop.\n"
        assert parse_latex_log(log, SOURCE)[0].span == (0, 0)

    def test_error_in_other_file(self):
        log = "./mystyle.sty:12: Missing number, treated as zero.\n"
        diagnostic = parse_latex_log(log, SOURCE)[0]

        assert diagnostic.message == "Missing number, treated as zero. (in ./mystyle.sty:12)"
        assert diagnostic.span == (0, 0)
        assert diagnostic.pos is PositionKind.START

    def test_bang_error_without_location(self):
        log = "! Emergency stop.\n<*> main.tex\n\n! ==> Fatal error occurred, no output PDF file produced!\n"
        diagnostics = parse_latex_log(log, SOURCE)

        assert diagnostics == [Diagnostic("Emergency stop.", (0, 0), PositionKind.START)]

    def test_duplicates_are_dropped(self):
        log = "! Emergency stop.\n\n! Emergency stop.\n"
        assert len(parse_latex_log(log, SOURCE)) == 1

    def test_main_file_name(self):
        source = SourceText(text="a\n\\bad\n", file_id="main")
        log = "./main.tex:2: Undefined control sequence.\nl.2 \\bad\n\n"

        assert parse_latex_log(log, source)[0].span == (0, 0)
        assert parse_latex_log(log, source, main_file="main.tex")[0].span == (2, 6)

    def test_error_on_last_line_without_newline(self):
        """TeX stopping at the end of the text anchors at the line start instead."""
        source = SourceText(text="\\documentclass{article}\n\\bad", file_id="main.tex")
        log = "./main.tex:2: Undefined control sequence.\nl.2 \\bad\n\n"

        diagnostics = parse_latex_log(log, source)
        assert diagnostics[0].span == (24, 24)
        assert diagnostics[0].pos is PositionKind.START

        report = str(SourceDiagnosticsError(source, diagnostics))
        assert "╭─[main.tex:2:1]" in report
        assert " 2 │ \\bad\n   │ ┬\n" in report

    def test_error_on_empty_last_line(self):
        source = SourceText(text="\\bad\n", file_id="main.tex")
        log = "./main.tex:2: Emergency stop.\n"

        diagnostic = parse_latex_log(log, source)[0]
        assert diagnostic.span == (0, 0)
        assert diagnostic.pos is PositionKind.START

    def test_clean_log(self):
        assert parse_latex_log("Output written on main.pdf (1 page).\n", SOURCE) == []

    def test_multibyte_source_report(self):
        """Byte spans from the log land on the right character in the report."""
        source = SourceText(text="é\n\\bad\n", file_id="main.tex")
        log = "./main.tex:2: Undefined control sequence.\nl.2 \\bad\n\n"

        diagnostics = parse_latex_log(log, source)
        assert diagnostics[0].span == (3, 7)

        report = str(SourceDiagnosticsError(source, diagnostics))
        assert "[main.tex:2:5]" in report
        assert " 2 │ \\bad\n   │     ┬\n" in report


@pytest.mark.unit
def test_missing_engine_raises_file_not_found():
    world = Sandbox(compiler="pagesnap-no-such-latex-engine").with_source("x")
    with pytest.raises(FileNotFoundError):
        LatexCompiler().compile(world)
