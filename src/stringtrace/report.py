"""
Run report generation for stringtrace.

Summarizes how close the canvas came to the target. The node path is not
written out.
"""

import os

import numpy as np

from stringtrace.io.save_artifacts import ensure_dir, save_json
from stringtrace.models import SessionState, TraceReport
from stringtrace.tracer import get_tracer, trace


def build_report(session, elapsed_s=0.0):
    """Collect error and progress statistics for a session."""
    canvas = session.canvas.pixels.astype(np.float64)
    target = session.target.astype(np.float64)
    diff = canvas - target

    return TraceReport(
        settings=session.settings,
        state=session.state,
        chords_drawn=session.chord_count,
        budget_exhausted=session.chord_count >= session.settings.max_chords,
        mean_abs_error=float(np.mean(np.abs(diff))),
        rmse=float(np.sqrt(np.mean(diff * diff))),
        mean_canvas=float(canvas.mean()),
        mean_target=float(target.mean()),
        elapsed_s=float(elapsed_s),
    )


@trace(label="save_report")
def save_report(report, out_dir):
    """
    Write report.json and a human-readable report.txt.

    Returns the two paths.
    """
    tracer = get_tracer()

    json_path = os.path.join(out_dir, "report.json")
    save_json(report, json_path)

    text_path = os.path.join(out_dir, "report.txt")
    ensure_dir(out_dir)
    with open(text_path, "w", encoding="utf-8") as f:
        f.write(format_report(report) + "\n")

    tracer.event(f"Report saved: {report.chords_drawn} chords, mae={report.mean_abs_error:.2f}")

    return json_path, text_path


def format_report(report):
    settings = report.settings
    reason = "chord budget reached" if report.budget_exhausted else "no improving chord left"
    if report.state != SessionState.DONE:
        reason = "interrupted"

    lines = [
        "stringtrace report",
        "=" * 40,
        "",
        f"Diameter: {settings.diameter}",
        f"Nodes: {settings.node_count} (offset {settings.node_offset:g})",
        f"String alpha: {settings.string_alpha:g}",
        f"Distance metric: {settings.distance_metric.value}",
        f"Repeat chords: {'yes' if settings.allow_repeat_chords else 'no'}",
        "",
        f"Chords drawn: {report.chords_drawn} / {settings.max_chords} ({reason})",
        f"Mean absolute error: {report.mean_abs_error:.2f}",
        f"RMSE: {report.rmse:.2f}",
        f"Mean intensity: canvas {report.mean_canvas:.1f}, target {report.mean_target:.1f}",
        f"Elapsed: {report.elapsed_s:.2f}s",
    ]
    return "\n".join(lines)
