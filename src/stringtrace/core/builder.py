"""
Greedy string path construction.

Each step scores every legal next node from the current one against a
snapshot of the canvas, draws the best chord and records it. Scoring is a
data-parallel map compiled with numba; the reduction and all mutation happen
afterwards on the calling thread.
"""

import numpy as np
from numba import njit, prange  # type: ignore[import-untyped]
from pydantic import ValidationError

from stringtrace.core.canvas import Canvas, overlay_pixel
from stringtrace.core.chords import ChordSet
from stringtrace.core.distance import distance_kernel, metric_code
from stringtrace.core.geometry import node_positions
from stringtrace.core.line import rasterize_line, wu_line
from stringtrace.models import (
    ConfigurationError, SessionState, Settings, StepOutcome,
)
from stringtrace.tracer import get_tracer

# Score of a candidate that was skipped or would not improve the canvas.
REJECTED = -1


@njit(cache=True)
def _score_candidate(current, candidate, positions, canvas, target, marked,
                     check_marked, alpha, metric):
    if candidate == current:
        return REJECTED

    if check_marked:
        lo = min(current, candidate)
        hi = max(current, candidate)
        if marked[lo, hi]:
            return REJECTED

    xs, ys, coverage = wu_line(positions[current, 0], positions[current, 1],
                               positions[candidate, 0], positions[candidate, 1])

    performance = 0
    # Starts at 1, which slightly favors shorter chords.
    count = 1
    for i in range(xs.shape[0]):
        x = xs[i]
        y = ys[i]
        goal = target[y, x]
        pixel = canvas[y, x]
        new_pixel = overlay_pixel(pixel, coverage[i], alpha)

        performance += distance_kernel(goal, pixel, metric) - distance_kernel(goal, new_pixel, metric)
        count += 1

    if performance <= 0:
        return REJECTED
    return performance // count


@njit(cache=True, parallel=True)
def _score_all_parallel(current, positions, canvas, target, marked, check_marked, alpha, metric):
    n = positions.shape[0]
    scores = np.empty(n, dtype=np.int64)
    for candidate in prange(n):
        scores[candidate] = _score_candidate(current, np.int64(candidate), positions, canvas, target,
                                             marked, check_marked, alpha, metric)
    return scores


@njit(cache=True)
def _score_all_serial(current, positions, canvas, target, marked, check_marked, alpha, metric):
    n = positions.shape[0]
    scores = np.empty(n, dtype=np.int64)
    for candidate in range(n):
        scores[candidate] = _score_candidate(current, candidate, positions, canvas, target,
                                             marked, check_marked, alpha, metric)
    return scores


def select_best(scores):
    """
    Index of the best surviving candidate, or None if none survived.

    Among equal scores the lowest index wins.
    """
    if scores.size == 0:
        return None
    best = int(np.argmax(scores))
    if scores[best] < 0:
        return None
    return best


class TraceSession:
    """
    State of one greedy trace: canvas, drawn chords and the node path.

    The path starts at node 0. Use new_session() to build one with full
    configuration checks.
    """

    def __init__(self, settings, target, parallel=True):
        self.settings = settings
        self.parallel = parallel
        self.target = target
        self.canvas = Canvas(settings.diameter)
        self.chords = ChordSet(settings.node_count)
        self.positions = node_positions(settings)
        self.state = SessionState.IN_PROGRESS
        self._traced_nodes = [0]
        self._metric = metric_code(settings.distance_metric)

    @property
    def traced_nodes(self):
        return tuple(self._traced_nodes)

    @property
    def current_node(self):
        return self._traced_nodes[-1]

    @property
    def chord_count(self):
        return len(self._traced_nodes) - 1

    @property
    def is_done(self):
        return self.state == SessionState.DONE

    def score_candidates(self):
        """
        Score every node as the next one from the current node.

        Returns an int64 array indexed by node; REJECTED marks the current
        node, chords already drawn (unless repeats are allowed) and chords
        that would not bring the canvas closer to the target.
        """
        kernel = _score_all_parallel if self.parallel else _score_all_serial
        return kernel(
            self.current_node,
            self.positions,
            self.canvas.pixels,
            self.target,
            self.chords.matrix,
            not self.settings.allow_repeat_chords,
            float(self.settings.string_alpha),
            self._metric,
        )

    def step(self):
        """Draw the next best chord, or finish when none improves the canvas."""
        if self.is_done:
            return StepOutcome.finished()

        tracer = get_tracer()
        current = self.current_node

        winner = select_best(self.score_candidates())
        if winner is None:
            self.state = SessionState.DONE
            tracer.event(f"No improving chord left after {self.chord_count} chords")
            return StepOutcome.finished()

        xs, ys, coverage = rasterize_line(self.positions[current], self.positions[winner])
        self.canvas.blend_line(xs, ys, coverage, self.settings.string_alpha)

        if not self.settings.allow_repeat_chords:
            self.chords.mark(current, winner)

        self._traced_nodes.append(winner)
        tracer.event(f"chord {current}->{winner}", level="DEBUG")

        if self.chord_count >= self.settings.max_chords:
            self.state = SessionState.DONE
            tracer.event(f"Chord budget reached: {self.chord_count} chords")

        return StepOutcome.advanced(current, winner)

    def trace_summary(self):
        return f"TraceSession(nodes={self.settings.node_count},chords={self.chord_count},state={self.state.value})"


def new_session(settings, target_image, parallel=True):
    """
    Start a trace for a prepared target image.

    settings may be a Settings or a mapping of its fields. The target must be
    a 2D uint8 array of shape (diameter, diameter). Raises ConfigurationError
    otherwise; no session is returned in that case.
    """
    if not isinstance(settings, Settings):
        try:
            settings = Settings.model_validate(dict(settings))
        except (ValidationError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid trace settings: {e}") from e

    # Settings built with model_construct() skip validation
    if settings.node_count < 2:
        raise ConfigurationError(f"node_count must be at least 2, got {settings.node_count}")
    if settings.max_chords < 1:
        raise ConfigurationError(f"max_chords must be at least 1, got {settings.max_chords}")

    target = np.asarray(target_image)
    if target.dtype != np.uint8:
        raise ConfigurationError(f"Target image must be uint8, got {target.dtype}")
    expected = (settings.diameter, settings.diameter)
    if target.shape != expected:
        raise ConfigurationError(
            f"Target image shape {target.shape} does not match diameter {settings.diameter}"
        )

    target = np.ascontiguousarray(target).copy()
    target.flags.writeable = False

    return TraceSession(settings, target, parallel=parallel)


def step(session):
    """Advance a session by one greedy step."""
    return session.step()


def run_steps(session, max_steps):
    """
    Run up to max_steps steps, stopping early once the session finishes.

    Returns the outcomes in order; the last one is FINISHED if the session
    ended within this call.
    """
    outcomes = []
    for _ in range(max_steps):
        outcome = session.step()
        outcomes.append(outcome)
        if outcome.is_finished:
            break
    return outcomes
