"""
Artifact saving utilities for stringtrace.

Handles writing images, JSON files and debug overlays.
"""

import json
import os

import cv2
import numpy as np

from stringtrace.tracer import get_tracer


def ensure_dir(path):
    """Create directory if it does not exist."""
    if path:
        os.makedirs(path, exist_ok=True)


def save_image(img, path, max_edge=None):
    """
    Save an image to disk.

    Optionally downscales to max_edge. Three-channel images are taken as RGB.
    """
    tracer = get_tracer()

    if max_edge and max(img.shape[:2]) > max_edge:
        scale = max_edge / max(img.shape[:2])
        new_size = (int(img.shape[1] * scale), int(img.shape[0] * scale))
        img = cv2.resize(img, new_size, interpolation=cv2.INTER_AREA)

    if img.ndim == 3 and img.shape[2] == 3:
        img = cv2.cvtColor(img, cv2.COLOR_RGB2BGR)

    ensure_dir(os.path.dirname(path))
    cv2.imwrite(path, img)
    tracer.event(f"Saved image: {path}")


def save_json(data, path, indent=2):
    """Save a dictionary or Pydantic model to JSON."""
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))

    if hasattr(data, "model_dump"):
        data = data.model_dump(mode="json")

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, default=str)

    tracer.event(f"Saved JSON: {path}")


def draw_node_overlay(base_img, positions, radius=2, color=(255, 0, 0), label_every=0):
    """
    Draw node markers over a grayscale image.

    Returns an RGB copy. With label_every > 0 every n-th node gets its index.
    """
    overlay = cv2.cvtColor(base_img, cv2.COLOR_GRAY2RGB)

    for idx, (x, y) in enumerate(np.asarray(positions)):
        center = (int(round(x)), int(round(y)))
        cv2.circle(overlay, center, radius, color, -1)
        if label_every and idx % label_every == 0:
            cv2.putText(overlay, str(idx), center, cv2.FONT_HERSHEY_SIMPLEX,
                        0.35, (0, 0, 255), 1)

    return overlay


class DebugArtifactWriter:
    """
    Writes debug artifacts under <out_dir>/debug/<stage>/.

    Every method is a no-op when disabled.
    """

    def __init__(self, out_dir, enabled=True, max_edge=1600):
        self.out_dir = out_dir
        self.enabled = enabled
        self.max_edge = max_edge

    def get_stage_dir(self, stage_name):
        stage_dir = os.path.join(self.out_dir, "debug", stage_name)
        ensure_dir(stage_dir)
        return stage_dir

    def save_image(self, img, stage_name, filename):
        if not self.enabled:
            return
        save_image(img, os.path.join(self.get_stage_dir(stage_name), filename),
                   max_edge=self.max_edge)

    def save_json(self, data, stage_name, filename):
        if not self.enabled:
            return
        save_json(data, os.path.join(self.get_stage_dir(stage_name), filename))
