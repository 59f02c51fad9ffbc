"""
Color distance between a target sample and a canvas sample.
"""

from numba import njit  # type: ignore[import-untyped]

from stringtrace.models import DistanceMetric

# Integer codes for the compiled kernels, which cannot take enums.
METRIC_CODES = {
    DistanceMetric.ABSOLUTE: 0,
    DistanceMetric.SQUARED: 1,
}


@njit(cache=True)
def distance_kernel(target, sample, metric_code):
    r = int(target) - int(sample)
    if metric_code == 0:
        return abs(r)
    return r * r


def metric_code(metric):
    """Kernel code for a DistanceMetric or its string value."""
    return METRIC_CODES[DistanceMetric(metric)]


def color_distance(target, sample, metric=DistanceMetric.SQUARED):
    """
    Distance between two 8-bit intensities.

    absolute: |target - sample|, squared: (target - sample)^2. Only used to
    rank candidate chords, so no normalization is applied.
    """
    return int(distance_kernel(int(target), int(sample), metric_code(metric)))
