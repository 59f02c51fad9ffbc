"""
Image loading utilities for stringtrace.
"""

import os

import cv2

from stringtrace.tracer import get_tracer, trace

SUPPORTED_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp", ".tiff", ".tif", ".bmp")


@trace(label="load_image")
def load_image(path):
    """
    Load an image from disk as a single-channel uint8 array.

    Raises FileNotFoundError if path does not exist.
    Raises ValueError if the image cannot be decoded.
    """
    tracer = get_tracer()

    if not os.path.exists(path):
        raise FileNotFoundError(f"Image not found: {path}")

    gray = cv2.imread(path, cv2.IMREAD_GRAYSCALE)

    if gray is None:
        raise ValueError(f"Failed to load image: {path}")

    height, width = gray.shape[:2]
    tracer.event(f"Loaded image: {width}x{height}")

    return gray


def validate_image_input(path):
    """
    Check that path exists and is a readable image.

    Returns a list of error messages (empty if valid).
    """
    if not os.path.exists(path):
        return [f"File not found: {path}"]

    ext = os.path.splitext(path)[1].lower()
    if ext not in SUPPORTED_EXTENSIONS:
        return [f"Unsupported image format: {path}"]

    if cv2.imread(path, cv2.IMREAD_GRAYSCALE) is None:
        return [f"Cannot read image: {path}"]

    return []
