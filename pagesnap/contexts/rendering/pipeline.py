"""
Render pipeline.

compile -> (diagnostics | first page) -> scale -> rasterize -> encode

Every failure raises exactly one RenderError subclass and produces no image bytes.
Calls are synchronous and self-contained; concurrent renders may share a Sandbox.
"""

import time
from dataclasses import dataclass
from typing import Optional, Protocol

from pagesnap.contexts.compilation.compiler import LatexCompiler
from pagesnap.contexts.compilation.document import CompileFailure, Document, Page
from pagesnap.contexts.compilation.sandbox import Sandbox, World
from pagesnap.contexts.diagnostics.report import TAB_WIDTH
from pagesnap.contexts.rendering.errors import (
    NoPagesError,
    RenderError,
    SourceDiagnosticsError,
)
from pagesnap.contexts.rendering.logger import (
    log_page_selected,
    log_render_result,
    log_render_start,
)
from pagesnap.contexts.rendering.rasterizer import (
    Color,
    PdfiumRasterizer,
    PixelBuffer,
    PngEncoder,
)
from pagesnap.contexts.rendering.resolution import DEFAULT_POLICY, ResolutionPolicy


class Compiler(Protocol):
    def compile(self, world: World) -> Document:
        """Return the compiled Document or raise CompileFailure."""


class Rasterizer(Protocol):
    def rasterize(self, page: Page, scale: float, fill_color: Color) -> PixelBuffer:
        ...


class Encoder(Protocol):
    def encode(self, buffer: PixelBuffer) -> bytes:
        ...


@dataclass
class Output:
    """
    Result of a successful render.

    Attributes:
        image: PNG bytes of the first page
        more_pages: Pages after the first that were not rendered (None = single page)
    """

    image: bytes
    more_pages: Optional[int] = None


def render(
    sandbox: Sandbox,
    fill_color: Color,
    source: str,
    *,
    compiler: Optional[Compiler] = None,
    rasterizer: Optional[Rasterizer] = None,
    encoder: Optional[Encoder] = None,
    policy: ResolutionPolicy = DEFAULT_POLICY,
    tab_width: int = TAB_WIDTH,
) -> Output:
    """
    Compile source and render its first page to PNG.

    Args:
        sandbox: Shared, read-only compilation environment
        fill_color: RGBA background for the rasterized page
        source: LaTeX source text
        compiler: Compiler capability (default: LatexCompiler)
        rasterizer: Rasterizer capability (default: PdfiumRasterizer)
        encoder: Encoder capability (default: PngEncoder)
        policy: Scale policy for the first page
        tab_width: Tab width for the diagnostics report of a failed compile

    Returns:
        Output with the PNG bytes and the count of unrendered pages

    Raises:
        SourceDiagnosticsError: The source did not compile
        NoPagesError: The document has no pages
        TooBigError: The first page exceeds the policy's maximum size

    Example:
        >>> output = render(Sandbox(), WHITE, r"\\documentclass{article}...")
        >>> Path("page.png").write_bytes(output.image)
    """
    compiler = compiler or LatexCompiler()
    rasterizer = rasterizer or PdfiumRasterizer()
    encoder = encoder or PngEncoder()

    world = sandbox.with_source(source)
    log_render_start(world.source.file_id, world.source.byte_len(), fill_color)
    start_time = time.time()

    try:
        output = _render_world(world, fill_color, compiler, rasterizer, encoder, policy, tab_width)
    except RenderError as e:
        log_render_result(error=e, elapsed_time=time.time() - start_time)
        raise

    log_render_result(output=output, elapsed_time=time.time() - start_time)
    return output


def _render_world(
    world: World,
    fill_color: Color,
    compiler: Compiler,
    rasterizer: Rasterizer,
    encoder: Encoder,
    policy: ResolutionPolicy,
    tab_width: int,
) -> Output:
    try:
        document = compiler.compile(world)
    except CompileFailure as failure:
        raise SourceDiagnosticsError(world.into_source(), failure.diagnostics, tab_width) from None

    if not document.pages:
        raise NoPagesError()
    page = document.pages[0]

    total_pages = len(document.pages)
    more_pages = total_pages - 1 if total_pages > 1 else None

    scale = policy.scale_for(page.size)
    log_page_selected(page.width_pt, page.height_pt, scale, more_pages)

    pixmap = rasterizer.rasterize(page, scale, fill_color)
    image = encoder.encode(pixmap)

    return Output(image=image, more_pages=more_pages)
