"""
Grayscale canvas that chords are drawn onto.
"""

import numpy as np
from numba import njit  # type: ignore[import-untyped]


@njit(cache=True)
def overlay_pixel(pixel, coverage, alpha):
    """
    Multiplicative darkening of one sample, rounded half up.

    The factor 1 - coverage * alpha lies in [0, 1], so the result never
    exceeds the input.
    """
    return int(pixel * (1.0 - coverage * alpha) + 0.5)


@njit(cache=True)
def _blend_line(pixels, xs, ys, coverage, alpha):
    for i in range(xs.shape[0]):
        x = xs[i]
        y = ys[i]
        pixels[y, x] = overlay_pixel(pixels[y, x], coverage[i], alpha)


class Canvas:
    """
    Square uint8 buffer, initially white, indexed [y, x].

    blend() and blend_line() are the only mutators; every pixel value is
    non-increasing over the life of the canvas.
    """

    def __init__(self, diameter):
        self.diameter = diameter
        self._pixels = np.full((diameter, diameter), 255, dtype=np.uint8)

    @property
    def pixels(self):
        """Read-only view of the buffer for display."""
        view = self._pixels.view()
        view.flags.writeable = False
        return view

    def read(self, x, y):
        return int(self._pixels[y, x])

    def blend(self, x, y, coverage, alpha):
        self._pixels[y, x] = overlay_pixel(int(self._pixels[y, x]), float(coverage), float(alpha))

    def blend_line(self, xs, ys, coverage, alpha):
        """Blend every visit of a rasterized line."""
        _blend_line(self._pixels, xs, ys, coverage, float(alpha))

    def copy(self):
        """Snapshot of the current contents."""
        return self._pixels.copy()

    def trace_summary(self):
        return f"Canvas({self.diameter}x{self.diameter},mean={float(self._pixels.mean()):.1f})"
