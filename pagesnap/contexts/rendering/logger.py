"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from loguru directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from pagesnap.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(
    log_dir: Optional[Path] = None, compiler: Optional[str] = None, verbose: bool = False
) -> Optional[Path]:
    """
    Setup logger for rendering context.

    Args:
        log_dir: Directory for this rendering session (None = console only)
        compiler: LaTeX engine, recorded in the provenance header
        verbose: Show DEBUG output on the console

    Returns:
        Path to log file, or None when logging to console only
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={"LaTeX compiler": compiler} if compiler else None,
        console_level="DEBUG" if verbose else "INFO",
    )


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_render_start(file_id: str, source_bytes: int, fill_color) -> None:
    """Log start of a render with context."""
    _log_info(f"Rendering {file_id}")
    _log_debug(f"  Source: {source_bytes} bytes")
    _log_debug(f"  Fill: {fill_color}")


def log_page_selected(width_pt: float, height_pt: float, scale: float, more_pages) -> None:
    """Log the first page's geometry and chosen scale."""
    _log_debug(f"  Page 1: {width_pt:g} x {height_pt:g} pt")
    _log_debug(f"  Scale: {scale:.4f} px/pt")
    if more_pages:
        _log_info(f"Rendering first page only ({more_pages} more not rendered)")


def log_render_result(
    output=None, error: Optional[Exception] = None, elapsed_time: float = 0.0
) -> None:
    """
    Log render result.

    Args:
        output: Output of a successful render
        error: RenderError of a failed render
        elapsed_time: Time taken to render
    """
    if error is None:
        _log_success(f"Render succeeded: {len(output.image)} bytes PNG ({elapsed_time:.2f}s)")
    else:
        # Diagnostics are reported by the caller; only the failure kind is logged here
        _log_error(f"Render failed: {type(error).__name__} ({elapsed_time:.2f}s)")
