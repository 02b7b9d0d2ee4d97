"""
LaTeX Compilation Module

Compiles a source string to a Document using a LaTeX engine (pdflatex, xelatex, ...)
and converts engine errors into byte-span Diagnostics against the source.
"""

import re
import subprocess
import tempfile
import time
from pathlib import Path
from typing import List, Optional, Tuple

from pagesnap.contexts.compilation.document import (
    CompileFailure,
    Diagnostic,
    Document,
    PositionKind,
    SourceText,
)
from pagesnap.contexts.compilation.logger import (
    _log_debug,
    log_compilation_result,
    log_compilation_start,
)
from pagesnap.contexts.compilation.sandbox import World
from pagesnap.utils.pdf_processing import read_document

# "-file-line-error" format: "./main.tex:12: Undefined control sequence."
FILE_LINE_ERROR = re.compile(r"^(?P<file>[^:\n]+):(?P<line>\d+): (?P<message>.+)$")
# Errors without a location: "! Emergency stop." (not the "! ==> Fatal error" summary)
BANG_ERROR = re.compile(r"^! (?!==>)(?P<message>.+)$")
# Context line showing where TeX stopped: "l.12 This has an \undefinedcommand"
CONTEXT_LINE = re.compile(r"^l\.(?P<line>\d+) (?P<before>.*)$")

# How far past an error line to look for its l.<n> context
CONTEXT_LOOKAHEAD = 12


def _line_starts(source_bytes: bytes) -> List[int]:
    """Byte offset at which each (1-based) source line begins."""
    starts = [0]
    for match in re.finditer(b"\n", source_bytes):
        starts.append(match.end())
    return starts


def _locate(
    source: SourceText, line_number: int, before: Optional[str]
) -> Tuple[Tuple[int, int], PositionKind]:
    """
    Byte span and position kind for an error on a source line.

    When TeX's context text is a prefix of the source line the span runs from the
    line start to where TeX stopped and the end is highlighted. Otherwise, or when
    TeX stopped at the very end of the text, the start of the line is highlighted.
    Every anchor returned lies on a character of the source.
    """
    source_bytes = source.text.encode("utf-8")
    starts = _line_starts(source_bytes)
    if line_number < 1 or line_number > len(starts):
        return (0, 0), PositionKind.START

    line_start = starts[line_number - 1]
    if line_start >= len(source_bytes):
        # Empty last line after a trailing newline
        return (0, 0), PositionKind.START
    line_end = starts[line_number] - 1 if line_number < len(starts) else len(source_bytes)
    line_bytes = source_bytes[line_start:line_end]

    if before:
        before_bytes = before.encode("utf-8")
        stop = line_start + len(before_bytes)
        # End of text has no character to point at
        if line_bytes.startswith(before_bytes) and stop < len(source_bytes):
            return (line_start, stop), PositionKind.END

    return (line_start, line_start), PositionKind.START


def _context_after(log_lines: List[str], index: int) -> Tuple[Optional[str], Tuple[str, ...]]:
    """
    Find the l.<n> context for the error at log_lines[index].

    Returns the text before the stopping point and any help lines that follow the
    context until the next blank line.
    """
    window = log_lines[index + 1 : index + 1 + CONTEXT_LOOKAHEAD]
    for offset, line in enumerate(window):
        match = CONTEXT_LINE.match(line)
        if match is None:
            continue

        # The line after l.<n> holds the rest of the source line, then help text
        hints = []
        for help_line in log_lines[index + offset + 3 :]:
            if not help_line.strip():
                break
            hints.append(help_line.strip())
        return match.group("before"), tuple(hints)

    return None, ()


def parse_latex_log(
    log_content: str, source: SourceText, main_file: Optional[str] = None
) -> List[Diagnostic]:
    """
    Parse an engine log for errors and map them onto the source.

    Args:
        log_content: Content of the .log file (written with -file-line-error)
        source: The compiled source; errors in other files anchor at its start
        main_file: File name the engine compiled (defaults to the source file id)

    Returns:
        Diagnostics in log order, without duplicates
    """
    main_file = main_file or source.file_id
    log_lines = log_content.splitlines()
    diagnostics: List[Diagnostic] = []

    for index, line in enumerate(log_lines):
        file_line = FILE_LINE_ERROR.match(line)
        bang = BANG_ERROR.match(line) if file_line is None else None
        if file_line is None and bang is None:
            continue

        before, hints = _context_after(log_lines, index)

        if file_line and Path(file_line.group("file")).name == main_file:
            span, pos = _locate(source, int(file_line.group("line")), before)
            message = file_line.group("message").strip()
        else:
            span, pos = (0, 0), PositionKind.START
            message = (file_line or bang).group("message").strip()
            if file_line:
                message = f"{message} (in {file_line.group('file')}:{file_line.group('line')})"

        diagnostic = Diagnostic(message=message, span=span, pos=pos, hints=hints)
        if diagnostic not in diagnostics:
            diagnostics.append(diagnostic)

    return diagnostics


class LatexCompiler:
    """
    Compiler capability backed by a LaTeX engine.

    Each call compiles in its own temporary directory, so one instance can serve
    concurrent renders.
    """

    def compile(self, world: World) -> Document:
        """
        Compile the world's source to a Document.

        Raises:
            CompileFailure: The engine reported errors or produced no PDF
            FileNotFoundError: The engine executable does not exist
        """
        sandbox = world.sandbox
        source = world.source

        with tempfile.TemporaryDirectory(prefix="pagesnap_") as compile_dir:
            tex_file = Path(compile_dir) / source.file_id
            tex_file = tex_file.with_suffix(".tex")
            tex_file.write_text(source.text, encoding="utf-8")

            log_compilation_start(sandbox.compiler, tex_file, sandbox.num_passes)
            start_time = time.time()

            all_stdout = []
            # Multiple passes needed for cross-references and page numbers
            for _ in range(sandbox.num_passes):
                cmd = [
                    sandbox.compiler,
                    "-interaction=nonstopmode",
                    "-file-line-error",
                    tex_file.name,
                ]
                result = subprocess.run(
                    cmd,
                    cwd=compile_dir,
                    env=sandbox.environment(),
                    capture_output=True,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                )
                all_stdout.append(result.stdout)
                if result.returncode != 0:
                    break

            log_file = tex_file.with_suffix(".log")
            diagnostics = []
            if log_file.exists():
                log_content = log_file.read_text(encoding="utf-8", errors="replace")
                diagnostics = parse_latex_log(log_content, source, main_file=tex_file.name)

            pdf_file = tex_file.with_suffix(".pdf")
            pdf_bytes = pdf_file.read_bytes() if pdf_file.exists() else None
            if pdf_bytes is None and not diagnostics:
                diagnostics.append(
                    Diagnostic(
                        message="PDF file was not generated", span=(0, 0), pos=PositionKind.START
                    )
                )

            success = pdf_bytes is not None and not diagnostics
            log_compilation_result(
                success=success,
                diagnostics=diagnostics,
                elapsed_time=time.time() - start_time,
                stdout="\n".join(all_stdout),
            )

        if not success:
            raise CompileFailure(diagnostics)

        document = read_document(pdf_bytes)
        _log_debug(f"  PDF pages: {len(document)}")
        return document
