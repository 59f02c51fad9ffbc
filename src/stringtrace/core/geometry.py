"""
Node layout on the string art circle.
"""

import math

import numpy as np


def node_position(node_index, settings):
    """
    Position of a node on the layout circle.

    Nodes are spread evenly over the circle, then each angle is shifted by
    cos(node_index) * angle_step * node_offset so that chord patterns are not
    perfectly periodic. node_offset = 0 gives a regular polygon.

    The circle has radius (diameter - 2) / 2 and is centered on (r, r), so
    every position lies inside the canvas.
    """
    angle_step = 2.0 * math.pi / settings.node_count

    angle = angle_step * node_index
    angle += math.cos(node_index) * angle_step * settings.node_offset

    r = (settings.diameter - 2) / 2.0
    return (r + r * math.cos(angle), r + r * math.sin(angle))


def node_positions(settings):
    """All node positions as a (node_count, 2) float64 array of (x, y)."""
    positions = np.empty((settings.node_count, 2), dtype=np.float64)
    for i in range(settings.node_count):
        positions[i] = node_position(i, settings)
    return positions
