"""
Station Monitor CLI
Main entry point for running the stream overlay.

Supports a Terraform-like workflow:
  --validate  Check configuration validity
  --edit      Adjust templates over a still image
"""

import argparse
import asyncio
import json
import logging
import signal
import sys
import time

import cv2
import yaml

from . import __version__
from .config import (
    Config,
    ConfigValidationError,
    ValidationResult,
    check_config,
    load_raw_config,
    print_validation_result,
    validate_config_full,
)
from .editor import TemplateEditor
from .inputs import load_task_snapshot, load_templates
from .models import Detector, template_to_dict
from .output import SnapshotSink, WindowSink
from .render import (
    AspectRatioContainer,
    AsyncioFrameScheduler,
    Canvas,
    FrameComposer,
    ResizeNotifier,
    StreamRenderer,
    make_source_factory,
)
from .utils.snapshot_server import start_snapshot_server, stop_snapshot_server

logger = logging.getLogger(__name__)


def setup_logging(quiet: bool = False) -> None:
    """
    Setup logging configuration.

    Args:
        quiet: If True, only show warnings and errors
    """
    level = logging.WARNING if quiet else logging.INFO

    # Custom formatter with shorter module names
    class ShortNameFormatter(logging.Formatter):
        def format(self, record):
            record.name = record.name.replace("station_monitor.", "sm.")
            return super().format(record)

    handler = logging.StreamHandler()
    handler.setFormatter(
        ShortNameFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s", datefmt="%H:%M:%S"
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(level)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Station Monitor - Live detector stream with task and template overlays",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m station_monitor 30               # Run for 30 minutes
  python -m station_monitor 5 --window       # Show in a window for 5 minutes
  python -m station_monitor --task task.json --templates templates.json

Terraform-like Commands:
  python -m station_monitor --validate       # Check config validity
  python -m station_monitor --edit frame.jpg # Edit templates over an image

Environment Variables:
  BACKEND_URL - Override backend base URL from config
  DETECTOR_ID - Override detector id from config
        """,
    )

    parser.add_argument(
        "duration",
        type=float,
        nargs="?",
        help="Duration in minutes (default: from config.yaml)",
    )

    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Quiet mode - only show warnings and errors",
    )

    parser.add_argument(
        "-c",
        "--config",
        default="config.yaml",
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate configuration and show derived settings",
    )

    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--window", action="store_true", help="Show frames in an OpenCV window"
    )
    output.add_argument(
        "--snapshot", action="store_true", help="Write frames to latest.jpg"
    )

    parser.add_argument(
        "--edit",
        metavar="IMAGE",
        help="Open the template editor over IMAGE and print the result as JSON",
    )

    parser.add_argument("--task", metavar="SOURCE", help="Task snapshot path or URL")
    parser.add_argument("--templates", metavar="FILE", help="Template list JSON/YAML")

    return parser.parse_args(argv)


def apply_cli_overrides(raw: dict, args: argparse.Namespace) -> dict:
    """Fold command line overrides into the raw config mapping."""
    if args.task:
        raw.setdefault("overlay", {})["task_source"] = args.task
    if args.templates:
        raw.setdefault("overlay", {})["templates_file"] = args.templates
    if args.window:
        raw.setdefault("output", {})["mode"] = "window"
    elif args.snapshot:
        raw.setdefault("output", {})["mode"] = "snapshot"
    return raw


def parse_duration(duration_arg: float | None, config: Config) -> float:
    """
    Resolve the run duration in minutes.

    Raises:
        SystemExit: If duration is invalid
    """
    if duration_arg is not None:
        if duration_arg <= 0:
            logger.error(f"Invalid duration '{duration_arg}' - must be positive")
            logger.error("Usage: python -m station_monitor [minutes]")
            sys.exit(1)
        return duration_arg
    return config.runtime.default_duration_minutes


def print_banner(config: Config, duration_minutes: float, source: str) -> None:
    """Print startup banner."""
    print("\n" + "=" * 70)
    print(f"STATION MONITOR v{__version__}")
    print("=" * 70)

    print(f"\nSource: {source}")
    print(f"Task overlay: {config.overlay.task_source or 'none'}")
    print(f"Templates: {config.overlay.templates_file or 'none'}")

    print("\nRuntime:")
    print(f"  Duration: {duration_minutes:g} minute(s)")
    print(f"  Refresh: {config.render.refresh_rate:g} Hz")
    print(f"  Output: {config.output.mode}")
    print("  Press Ctrl+C to stop early")
    print("=" * 70)
    print()


def print_final_status(reason: str, elapsed: float, config: Config) -> None:
    """Print final status."""
    print(f"\n{'=' * 70}")

    if reason == "duration":
        print(f"Duration reached - stopped after {elapsed / 60:.1f} minutes")
    elif reason == "signal":
        print("Shutdown signal received (SIGTERM/SIGINT)")
    elif reason == "quit":
        print("Window closed by user")

    print("=" * 70)
    print("STATION MONITOR STOPPED")
    print("=" * 70)

    if config.output.mode == "snapshot":
        print("\nLast frame:")
        print(f"  {config.output.snapshot_dir}/latest.jpg")
    print(f"{'=' * 70}\n")


def _install_signal_handlers(loop: asyncio.AbstractEventLoop, on_signal) -> None:
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, on_signal, sig)
        except NotImplementedError:
            # Event loops without signal support (Windows)
            signal.signal(
                sig, lambda signum, _frame: loop.call_soon_threadsafe(on_signal, signum)
            )


async def run_monitor(config: Config, duration_minutes: float) -> str:
    """
    Run the render loop until the duration elapses or a stop is requested.

    Returns:
        Reason for stopping ('duration', 'signal', 'quit')
    """
    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()
    reason = "duration"

    def request_stop(why: str) -> None:
        nonlocal reason
        if not stop_event.is_set():
            reason = why
            stop_event.set()

    def on_signal(signum) -> None:
        # Note: print keeps the message visible in quiet mode
        print(f"\nReceived {signal.Signals(signum).name}, initiating graceful shutdown...")
        request_stop("signal")

    _install_signal_handlers(loop, on_signal)

    render = config.render
    notifier = ResizeNotifier()
    container = AspectRatioContainer(
        render.container_width, (render.aspect_width, render.aspect_height)
    )
    unsubscribe = container.attach(notifier)

    output = config.output
    snapshot_server = None
    if output.mode == "window":
        sink = WindowSink(
            container, notifier, output.window_name, on_quit=lambda: request_stop("quit")
        )
    else:
        sink = SnapshotSink(container, output.snapshot_dir, output.snapshot_interval)
        if output.serve_snapshots:
            snapshot_url, snapshot_server = start_snapshot_server(
                output.snapshot_dir, output.snapshot_port
            )
            print(f"Snapshot server: {snapshot_url}")
            print()

    stream = config.stream
    renderer = StreamRenderer(
        Canvas(),
        AsyncioFrameScheduler(render.refresh_rate, loop),
        composer=FrameComposer(draw_labels=render.draw_labels, show_fps=render.show_fps),
        source_factory=make_source_factory(
            config.backend.base_url,
            (stream.placeholder_width, stream.placeholder_height),
            stream.reconnect_delay,
            stream.open_timeout,
            stream.read_timeout,
        ),
        on_frame=sink.present,
    )

    try:
        if stream.detector_id is not None:
            renderer.set_detector(Detector(stream.detector_id, stream.detector_name))
        renderer.set_task(load_task_snapshot(config.overlay.task_source))
        renderer.set_templates(load_templates(config.overlay.templates_file))

        if stream.playing:
            renderer.set_playing(True)
        else:
            renderer.render_once()

        try:
            await asyncio.wait_for(stop_event.wait(), timeout=duration_minutes * 60)
        except asyncio.TimeoutError:
            reason = "duration"
    finally:
        logger.info("Shutting down...")
        renderer.close()
        unsubscribe()
        sink.close()
        stop_snapshot_server(snapshot_server)

    return reason


def run_validate(args: argparse.Namespace) -> None:
    """Run validation mode."""
    raw = apply_cli_overrides(load_raw_config(args.config), args)
    result = validate_config_full(raw)
    print_validation_result(result)
    sys.exit(0 if result.valid else 1)


def run_editor(image_path: str, config: Config) -> None:
    """Run the template editor and print the edited templates."""
    image = cv2.imread(image_path)
    if image is None:
        logger.error(f"Could not read image: {image_path}")
        sys.exit(1)

    templates = load_templates(config.overlay.templates_file)
    editor = TemplateEditor(image, templates, draw_labels=config.render.draw_labels)
    edited = editor.run()

    print(json.dumps({"templates": [template_to_dict(t) for t in edited]}, indent=2))


def load_validated_config(args: argparse.Namespace) -> ValidationResult:
    """
    Load config with CLI overrides and validate it.

    Returns:
        The valid ValidationResult (parsed config plus derived settings)

    Raises:
        ConfigValidationError: If validation fails
    """
    return check_config(apply_cli_overrides(load_raw_config(args.config), args))


def main(argv: list[str] | None = None) -> None:
    """Main orchestrator function."""
    args = parse_args(argv)

    is_terraform_mode = args.validate or args.edit
    setup_logging(quiet=args.quiet or bool(is_terraform_mode))

    try:
        if args.validate:
            run_validate(args)
            return

        result = load_validated_config(args)
        config = result.config

        if args.edit:
            run_editor(args.edit, config)
            return

        duration_minutes = parse_duration(args.duration, config)
        print_banner(config, duration_minutes, result.derived.get("source", ""))

        start_time = time.time()
        reason = asyncio.run(run_monitor(config, duration_minutes))
        elapsed = time.time() - start_time

        print_final_status(reason, elapsed, config)

    except ConfigValidationError as e:
        print_validation_result(e.result)
        sys.exit(1)
    except FileNotFoundError as e:
        logger.error(str(e))
        sys.exit(1)
    except yaml.YAMLError as e:
        logger.error(f"Invalid YAML in {args.config}: {e}")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Invalid overlay input: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
