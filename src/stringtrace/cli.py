"""
Command-line interface for stringtrace.

Provides commands for tracing an image and writing a default config.
"""

import argparse
import sys

from stringtrace.config import load_config, save_default_config
from stringtrace.tracer import configure_tracer, get_tracer


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="stringtrace: turn a grayscale image into a string art chord sequence",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Trace an image")
    run_parser.add_argument(
        "--input", "-i",
        required=True,
        help="Input image file",
    )
    run_parser.add_argument(
        "--out", "-o",
        required=True,
        help="Output directory",
    )
    run_parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    run_parser.add_argument(
        "--diameter",
        type=int,
        default=None,
        help="Canvas side length in pixels (overrides config)",
    )
    run_parser.add_argument(
        "--nodes",
        type=int,
        default=None,
        help="Number of nodes on the circle (overrides config)",
    )
    run_parser.add_argument(
        "--max-chords",
        type=int,
        default=None,
        help="Maximum number of chords to draw (overrides config)",
    )
    run_parser.add_argument(
        "--serial",
        action="store_true",
        help="Score candidates on a single thread",
    )
    run_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug artifact generation",
    )
    run_parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable runtime tracing",
    )
    run_parser.add_argument(
        "--trace-level",
        default="INFO",
        choices=["ERROR", "WARN", "INFO", "DEBUG"],
        help="Trace log level",
    )
    run_parser.add_argument(
        "--trace-file",
        default=None,
        help="Path to write trace logs",
    )
    run_parser.add_argument(
        "--trace-json",
        action="store_true",
        help="Enable JSON trace output",
    )

    # Init config command
    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument(
        "--out", "-o",
        default="stringtrace_config.yaml",
        help="Output path for config file",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "run":
        return handle_run(args)
    elif args.command == "init-config":
        return handle_init_config(args)

    return 0


def handle_run(args):
    """Handle the run command."""
    config = load_config(args.config)

    configure_tracer(
        enabled=args.trace or config.tracing.enabled,
        level=args.trace_level if args.trace else config.tracing.level,
        file_path=args.trace_file or config.tracing.file_path,
        json_output=args.trace_json or config.tracing.json_output,
    )

    tracer = get_tracer()

    if args.diameter is not None:
        config.image.diameter = args.diameter
    if args.nodes is not None:
        config.strings.node_count = args.nodes
    if args.max_chords is not None:
        config.strings.max_chords = args.max_chords
    if args.serial:
        config.run.parallel = False

    try:
        from stringtrace.pipeline import run_trace

        with tracer.span("cli_run", module="cli"):
            result = run_trace(
                input_path=args.input,
                out_dir=args.out,
                config=config,
                debug=args.debug,
            )

        report = result.report
        print("\nTrace completed.")
        print(f"  Chords drawn: {report.chords_drawn}")
        print(f"  Nodes: {report.settings.node_count}")
        print(f"  Mean absolute error: {report.mean_abs_error:.2f}")
        print(f"  Elapsed: {report.elapsed_s:.2f}s")
        print(f"\nOutputs saved to: {args.out}/")
        print("  - canvas.png")
        print("  - target.png")
        print("  - report.json")
        print("  - report.txt")

        return 0

    except Exception as e:
        tracer.event(f"Trace failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1

    finally:
        tracer.config.close()


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
