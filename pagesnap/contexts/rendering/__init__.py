"""
Rendering Context

Responsibilities:
- Chooses a rendering scale for the first page
- Rasterizes and encodes the page as PNG
- Orchestrates compile -> scale -> rasterize -> encode

Owns: Render pipeline, render errors
Never: Modifies source content
"""

from pagesnap.contexts.rendering.errors import (
    Axis,
    NoPagesError,
    RenderError,
    SourceDiagnosticsError,
    TooBigError,
)
from pagesnap.contexts.rendering.pipeline import Output, render

__all__ = [
    "Axis",
    "NoPagesError",
    "Output",
    "RenderError",
    "SourceDiagnosticsError",
    "TooBigError",
    "render",
]
