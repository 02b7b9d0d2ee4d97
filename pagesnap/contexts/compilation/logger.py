"""
Compilation context logger.

Provides logging interface for the compilation context with automatic [compile] prefix.
All compilation modules should import from this module, not from loguru directly.
"""

from pathlib import Path
from typing import List

from loguru import logger

from pagesnap.contexts.compilation.document import Diagnostic

CONTEXT_PREFIX = "[compile]"


def _log_info(message: str) -> None:
    """Log info message with [compile] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [compile] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [compile] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_compilation_start(compiler: str, source_file: Path, num_passes: int) -> None:
    """Log start of compilation with context."""
    _log_info(f"Compiling {source_file.name} with {compiler}")
    _log_debug(f"  Working directory: {source_file.parent}")
    _log_debug(f"  Passes: {num_passes}")


def log_compilation_result(
    success: bool,
    diagnostics: List[Diagnostic],
    elapsed_time: float,
    stdout: str = "",
) -> None:
    """
    Log compilation result with diagnostics.

    Args:
        success: Whether a PDF was produced without errors
        diagnostics: Parsed engine errors
        elapsed_time: Time taken to compile
        stdout: Combined engine output, dumped raw on failure
    """
    if success:
        _log_info(f"Compilation succeeded ({elapsed_time:.2f}s)")
        return

    _log_error(f"Compilation failed: {len(diagnostics)} errors ({elapsed_time:.2f}s)")
    for i, diagnostic in enumerate(diagnostics[:5], 1):
        _log_error(f"  Error {i}: {diagnostic.message}")
        for hint in diagnostic.hints:
            _log_debug(f"    {hint}")
    if len(diagnostics) > 5:
        _log_error(f"  ... and {len(diagnostics) - 5} more errors")

    # Raw output bypasses the format template to keep multi-line engine output intact
    if stdout:
        logger.opt(raw=True).debug(f"\n{'=' * 80}\nENGINE STDOUT:\n{'=' * 80}\n{stdout}\n")
