"""
Rendering scale selection.

The scale (pixels per point) is chosen so that scale^2 * area stays at
DESIRED_RESOLUTION^2 pixels whatever the page's aspect ratio. Pages larger than
MAX_SIZE points on either axis are rejected, so a near-zero dimension cannot blow up
the other one.

All arithmetic is carried out at 32-bit float precision, which keeps scales
identical across platforms for the same page size.
"""

import math
import struct
from dataclasses import dataclass
from typing import Tuple

from pagesnap.contexts.rendering.errors import Axis, TooBigError

DESIRED_RESOLUTION = 1000.0
MAX_SIZE = 1000.0


def _f32(value: float) -> float:
    """Round a float to the nearest 32-bit float; out-of-range values become infinite."""
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


@dataclass(frozen=True)
class ResolutionPolicy:
    """
    Derives a rendering scale from a page's physical size.

    Attributes:
        desired_resolution: Linear pixel budget; total pixels ~ desired_resolution^2
        max_size: Largest accepted width or height in points (inclusive)
    """

    desired_resolution: float = DESIRED_RESOLUTION
    max_size: float = MAX_SIZE

    def scale_for(self, size: Tuple[float, float]) -> float:
        """
        Pixels per point for a (width_pt, height_pt) page.

        Raises:
            TooBigError: Width (checked first) or height exceeds max_size
            ValueError: The page has zero area
        """
        x = _f32(size[0])
        y = _f32(size[1])
        max_size = _f32(self.max_size)

        if x > max_size:
            raise TooBigError(axis=Axis.X, size=x, max_size=max_size)
        if y > max_size:
            raise TooBigError(axis=Axis.Y, size=y, max_size=max_size)

        area = _f32(x * y)
        if area <= 0:
            raise ValueError(f"page has no area: {x} x {y} pt")
        return _f32(_f32(self.desired_resolution) / _f32(math.sqrt(area)))


DEFAULT_POLICY = ResolutionPolicy()