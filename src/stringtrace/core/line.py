"""
Anti-aliased line traversal (Xiaolin Wu's algorithm).

The traversal is JIT compiled with numba so the chord scoring kernels can
call it directly; traverse() wraps it in the callback form.
"""

import math

import numpy as np
from numba import njit  # type: ignore[import-untyped]


@njit(cache=True)
def wu_line(ax, ay, bx, by):
    """
    Walk a line from a to b along its dominant axis.

    Returns (xs, ys, coverage) arrays with one or two visits per step. Lines
    steeper than 45 degrees are walked along y. Endpoints are ordered along
    the walking axis first, so wu_line(a, b) and wu_line(b, a) are identical.
    """
    steep = abs(by - ay) > abs(bx - ax)
    if steep:
        ax, ay = ay, ax
        bx, by = by, bx

    if ax > bx:
        ax, bx = bx, ax
        ay, by = by, ay

    dx = bx - ax
    gradient = 1.0 if dx == 0.0 else (by - ay) / dx

    x = int(ax)
    x_end = int(bx)
    capacity = 2 * max(x_end - x + 1, 0)

    xs = np.empty(capacity, dtype=np.int64)
    ys = np.empty(capacity, dtype=np.int64)
    coverage = np.empty(capacity, dtype=np.float64)

    n = 0
    y = ay
    while x <= x_end:
        # A node on the canvas edge can leave y a rounding error below 0.
        y_fract = y - math.floor(y)
        y_int = int(y) if y > 0.0 else 0

        if steep:
            xs[n] = y_int
            ys[n] = x
        else:
            xs[n] = x
            ys[n] = y_int
        coverage[n] = 1.0 - y_fract
        n += 1

        if y_fract > 0.0:
            if steep:
                xs[n] = y_int + 1
                ys[n] = x
            else:
                xs[n] = x
                ys[n] = y_int + 1
            coverage[n] = y_fract
            n += 1

        x += 1
        y += gradient

    return xs[:n], ys[:n], coverage[:n]


def rasterize_line(point_a, point_b):
    """Visit sequence of the line a-b as (xs, ys, coverage) numpy arrays."""
    return wu_line(float(point_a[0]), float(point_a[1]),
                   float(point_b[0]), float(point_b[1]))


def traverse(point_a, point_b, visit):
    """
    Call visit((x, y), coverage) for every pixel the line a-b touches.

    Rounding error below 0 is clamped to 0. Node positions keep every visit
    inside the canvas.
    """
    xs, ys, coverage = rasterize_line(point_a, point_b)
    for i in range(xs.shape[0]):
        visit((int(xs[i]), int(ys[i])), float(coverage[i]))
