"""
Set of drawn chords, keyed by unordered node pairs.
"""

import numpy as np


class ChordSet:
    """
    Membership over unordered pairs {a, b} of distinct node indices.

    Pairs are normalized to (min, max) and stored in the upper triangle of a
    node_count x node_count boolean matrix, so every index the configuration
    allows has its own cell.
    """

    def __init__(self, node_count):
        self.node_count = node_count
        self._marked = np.zeros((node_count, node_count), dtype=np.bool_)
        self._size = 0

    def normalize(self, a, b):
        a = int(a)
        b = int(b)
        if a == b:
            raise ValueError(f"A chord needs two distinct nodes, got {a} twice")
        if not (0 <= a < self.node_count and 0 <= b < self.node_count):
            raise ValueError(f"Node index out of range 0..{self.node_count - 1}: ({a}, {b})")
        return (a, b) if a < b else (b, a)

    def mark(self, a, b):
        lo, hi = self.normalize(a, b)
        if not self._marked[lo, hi]:
            self._marked[lo, hi] = True
            self._size += 1

    def contains(self, a, b):
        lo, hi = self.normalize(a, b)
        return bool(self._marked[lo, hi])

    def __contains__(self, pair):
        return self.contains(*pair)

    def __len__(self):
        return self._size

    @property
    def matrix(self):
        """Upper-triangular membership matrix for the scoring kernels."""
        return self._marked
