"""
Target image preparation for stringtrace.

Turns an arbitrary loaded image into the square grayscale buffer the trace
core expects: grayscale, resized to fill the circle's bounding square,
optionally contrast-stretched, then darkened.
"""

import cv2
import numpy as np

from stringtrace.tracer import get_tracer, trace


@trace(label="prepare_target")
def prepare_target(image, diameter, darken=0, stretch_contrast=False, contrast=0.5):
    """
    Prepare a target buffer of shape (diameter, diameter), dtype uint8.

    darken is subtracted from every sample (saturating at 0). With
    stretch_contrast the range [darken, upper] is first stretched onto
    [0, 255]; contrast in [0, 1] narrows that range.
    """
    tracer = get_tracer()

    if not 0 <= darken <= 254:
        raise ValueError(f"darken must be within 0..254, got {darken}")
    if not 0.0 <= contrast <= 1.0:
        raise ValueError(f"contrast must be within 0..1, got {contrast}")

    gray = to_grayscale(image)
    resized = resize_to_fill(gray, diameter)

    if stretch_contrast:
        upper = darken + 1 + int((254 - darken) * (1.0 - contrast))
        resized = stretch_range(resized, darken, upper)
        tracer.event(f"Stretched contrast to [{darken}, {upper}]")

    target = darken_image(resized, darken)

    tracer.event(f"Prepared target: {diameter}x{diameter}, mean={float(target.mean()):.1f}")

    return np.ascontiguousarray(target)


def to_grayscale(image):
    """Convert a 2D, RGB or RGBA array to a single uint8 channel."""
    if image.ndim == 2:
        gray = image
    elif image.ndim == 3 and image.shape[2] == 3:
        gray = cv2.cvtColor(image, cv2.COLOR_RGB2GRAY)
    elif image.ndim == 3 and image.shape[2] == 4:
        gray = cv2.cvtColor(image, cv2.COLOR_RGBA2GRAY)
    elif image.ndim == 3 and image.shape[2] == 1:
        gray = image[:, :, 0]
    else:
        raise ValueError(f"Unsupported image shape: {image.shape}")

    if gray.dtype != np.uint8:
        gray = np.clip(gray, 0, 255).astype(np.uint8)
    return gray


def resize_to_fill(gray, diameter):
    """
    Scale so the image covers a diameter x diameter square, then center crop.
    """
    height, width = gray.shape[:2]
    scale = max(diameter / width, diameter / height)
    new_w = max(diameter, int(round(width * scale)))
    new_h = max(diameter, int(round(height * scale)))

    interpolation = cv2.INTER_AREA if scale < 1.0 else cv2.INTER_LINEAR
    resized = cv2.resize(gray, (new_w, new_h), interpolation=interpolation)

    left = (new_w - diameter) // 2
    top = (new_h - diameter) // 2
    return resized[top:top + diameter, left:left + diameter]


def stretch_range(gray, lower, upper):
    """Map [lower, upper] linearly onto [0, 255], clamping values outside."""
    if upper <= lower:
        raise ValueError(f"Empty contrast range [{lower}, {upper}]")
    values = (gray.astype(np.float64) - lower) * (255.0 / (upper - lower))
    return np.clip(values, 0, 255).astype(np.uint8)


def darken_image(gray, amount):
    """Subtract amount from every sample, saturating at 0."""
    return np.clip(gray.astype(np.int16) - int(amount), 0, 255).astype(np.uint8)
