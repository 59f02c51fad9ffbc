"""
Pydantic data models for stringtrace.

Settings are validated once and frozen for the lifetime of a trace.
Step outcomes and run reports flow through these models as well.
"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


# The chord set is a dense node_count x node_count matrix.
MAX_NODE_COUNT = 4096


class ConfigurationError(ValueError):
    """Raised when a trace cannot be set up from the given settings or image."""


class DistanceMetric(str, Enum):
    """Scalar metric between a target sample and a canvas sample."""
    ABSOLUTE = "absolute"
    SQUARED = "squared"


class SessionState(str, Enum):
    """Lifecycle of a trace session."""
    IN_PROGRESS = "in_progress"
    DONE = "done"


class OutcomeKind(str, Enum):
    """Result kind of a single greedy step."""
    ADVANCED = "advanced"
    FINISHED = "finished"


class Settings(BaseModel):
    """Immutable parameters of one trace."""
    diameter: int = Field(default=500, ge=3)
    node_count: int = Field(default=200, ge=2, le=MAX_NODE_COUNT)
    node_offset: float = Field(default=1.0, ge=0.0, le=1.0)
    string_alpha: float = Field(default=0.3, ge=0.0, le=1.0)
    max_chords: int = Field(default=6000, ge=1)
    allow_repeat_chords: bool = False
    distance_metric: DistanceMetric = DistanceMetric.SQUARED

    model_config = ConfigDict(frozen=True, extra="forbid")


class StepOutcome(BaseModel):
    """What a call to step() did."""
    kind: OutcomeKind
    chord: Optional[Tuple[int, int]] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def advanced(cls, from_node, to_node):
        return cls(kind=OutcomeKind.ADVANCED, chord=(from_node, to_node))

    @classmethod
    def finished(cls):
        return cls(kind=OutcomeKind.FINISHED)

    @property
    def is_finished(self):
        return self.kind == OutcomeKind.FINISHED


class TraceReport(BaseModel):
    """Summary statistics of a finished (or interrupted) trace."""
    settings: Settings
    state: SessionState
    chords_drawn: int = Field(..., ge=0)
    budget_exhausted: bool = False
    mean_abs_error: float = Field(..., ge=0.0)
    rmse: float = Field(..., ge=0.0)
    mean_canvas: float = Field(..., ge=0.0, le=255.0)
    mean_target: float = Field(..., ge=0.0, le=255.0)
    elapsed_s: float = Field(default=0.0, ge=0.0)

    model_config = ConfigDict(extra="forbid")
