"""Pytest fixtures for stringtrace tests."""

import os
import tempfile

import cv2
import numpy as np
import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def square_settings():
    """Four nodes at the extreme points of a 10px circle."""
    from stringtrace.models import Settings
    return Settings(
        diameter=10,
        node_count=4,
        node_offset=0.0,
        string_alpha=0.5,
        max_chords=10,
        distance_metric="squared",
    )


@pytest.fixture
def small_settings():
    """A small but non-trivial layout for path tests."""
    from stringtrace.models import Settings
    return Settings(
        diameter=64,
        node_count=36,
        node_offset=1.0,
        string_alpha=0.3,
        max_chords=40,
    )


@pytest.fixture
def disc_target():
    """A 64x64 white image with a dark disc and a dark diagonal bar."""
    img = np.full((64, 64), 255, dtype=np.uint8)
    cv2.circle(img, (24, 28), 12, 40, -1)
    cv2.line(img, (8, 56), (56, 8), 0, 3)
    return img


@pytest.fixture
def gradient_rgb_image():
    """A non-square RGB image with a horizontal gradient and a black square."""
    img = np.zeros((90, 120, 3), dtype=np.uint8)
    img[:, :, :] = np.linspace(0, 255, 120, dtype=np.uint8)[None, :, None]
    cv2.rectangle(img, (40, 30), (80, 60), (0, 0, 0), -1)
    return img


@pytest.fixture
def default_config():
    """Create default pipeline configuration."""
    from stringtrace.config import PipelineConfig
    return PipelineConfig()


@pytest.fixture
def small_config():
    """Pipeline configuration that traces quickly."""
    from stringtrace.config import PipelineConfig
    config = PipelineConfig()
    config.image.diameter = 48
    config.image.darken = 20
    config.strings.node_count = 24
    config.strings.max_chords = 30
    config.run.steps_per_batch = 7
    return config


@pytest.fixture
def synthetic_input_file(temp_dir, gradient_rgb_image):
    """Write a synthetic input image for integration tests."""
    path = os.path.join(temp_dir, "test_input.png")
    cv2.imwrite(path, cv2.cvtColor(gradient_rgb_image, cv2.COLOR_RGB2BGR))
    return path
