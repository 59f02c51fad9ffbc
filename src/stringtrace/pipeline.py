"""
Main pipeline orchestrator for stringtrace.

Loads and prepares the target, drives a trace session in batches until it
finishes, and writes the canvas, target and report.
"""

import os
import time
from dataclasses import dataclass

from stringtrace.config import build_settings, load_config
from stringtrace.core.builder import TraceSession, new_session, run_steps
from stringtrace.io.load_image import load_image, validate_image_input
from stringtrace.io.save_artifacts import (
    DebugArtifactWriter, draw_node_overlay, ensure_dir, save_image,
)
from stringtrace.models import TraceReport
from stringtrace.preprocess.target import prepare_target
from stringtrace.report import build_report, save_report
from stringtrace.tracer import get_tracer, trace


@dataclass
class TraceResult:
    """Finished session plus its report."""
    session: TraceSession
    report: TraceReport


@trace(label="run_trace")
def run_trace(input_path, out_dir, config=None, config_path=None, debug=False):
    """
    Run a full trace for one input image.

    Args:
        input_path: input image file path
        out_dir: output directory
        config: PipelineConfig object (optional)
        config_path: path to YAML config file (optional)
        debug: enable debug artifact generation

    Returns:
        TraceResult with the finished session and its report
    """
    tracer = get_tracer()

    if config is None:
        config = load_config(config_path)

    if debug:
        config.debug.enabled = True

    errors = validate_image_input(input_path)
    if errors:
        for error in errors:
            tracer.event(error, level="ERROR")
        raise ValueError(f"Input validation failed: {errors}")

    settings = build_settings(config)

    ensure_dir(out_dir)

    debug_writer = DebugArtifactWriter(
        out_dir,
        enabled=config.debug.enabled,
        max_edge=config.debug.max_edge_scale,
    ) if config.debug.enabled else None

    with tracer.span("prepare", module="pipeline"):
        image = load_image(input_path)
        target = prepare_target(
            image,
            settings.diameter,
            darken=config.image.darken,
            stretch_contrast=config.image.stretch_contrast,
            contrast=config.image.contrast,
        )

    session = new_session(settings, target, parallel=config.run.parallel)

    if debug_writer:
        debug_writer.save_image(target, "prepare", "01_target.png")
        debug_writer.save_image(
            draw_node_overlay(target, session.positions, label_every=10),
            "prepare", "02_nodes_overlay.png",
        )

    start = time.perf_counter()
    with tracer.span("trace", module="pipeline", nodes=settings.node_count,
                     max_chords=settings.max_chords):
        batch_log = drive_session(session, config, out_dir)
    elapsed = time.perf_counter() - start

    report = build_report(session, elapsed_s=elapsed)

    save_image(target, os.path.join(out_dir, "target.png"))
    save_image(session.canvas.copy(), os.path.join(out_dir, "canvas.png"))
    save_report(report, out_dir)

    if debug_writer:
        debug_writer.save_json({"batches": batch_log}, "trace", "batches.json")

    tracer.event(f"Trace complete: {session.chord_count} chords in {elapsed:.2f}s")

    return TraceResult(session=session, report=report)


def drive_session(session, config, out_dir):
    """
    Step the session in batches of run.steps_per_batch until it is done.

    Saves a canvas snapshot every run.snapshot_every batches when enabled.
    Returns one log entry per batch.
    """
    tracer = get_tracer()
    steps_per_batch = max(1, int(config.run.steps_per_batch))
    snapshot_every = int(config.run.snapshot_every)

    batch_log = []
    batch = 0
    while not session.is_done:
        batch_start = time.perf_counter()
        outcomes = run_steps(session, steps_per_batch)
        dt = time.perf_counter() - batch_start

        advanced = sum(1 for o in outcomes if not o.is_finished)
        batch_log.append({
            "batch": batch,
            "advanced": advanced,
            "chords": session.chord_count,
            "seconds": round(dt, 4),
        })
        tracer.event(f"batch {batch}: +{advanced} chords, total={session.chord_count}, dt={dt * 1000:.0f}ms")

        if snapshot_every > 0 and batch % snapshot_every == 0:
            path = os.path.join(out_dir, "debug", "snapshots", f"canvas_{session.chord_count:06d}.png")
            save_image(session.canvas.copy(), path)

        batch += 1

    return batch_log
