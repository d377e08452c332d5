"""Command line entry point for the sphere-traced ASCII cube."""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
import time
from dataclasses import dataclass
from typing import Optional, Sequence, TextIO

from .logging_config import setup_logging
from .renderer.animation import AnimationClock
from .renderer.config import AnimationSettings, RendererOptions, SceneConstants
from .renderer.engine import RenderEngine
from .renderer.terminal import SurfaceUnavailableError, TerminalController, measure_cell_size

logger = logging.getLogger(__name__)

QUIT_KEYS = ("q", "Q")


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sphere-traced rotating ASCII cube for your terminal")
    parser.add_argument("--fps", type=float, default=30.0, help="Target frames per second (default: 30)")
    parser.add_argument(
        "--speed",
        type=float,
        default=1.0,
        help="Multiplier for the rotation speed",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=0,
        help="Run for a fixed number of frames (0 = infinite)",
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=None,
        help="Sphere tracing step limit per ray (default: 48)",
    )
    parser.add_argument(
        "--frame-interval",
        type=float,
        default=None,
        help="Minimum seconds between rendered frames; ticks in between are skipped",
    )
    parser.add_argument(
        "--reduced-motion",
        action="store_true",
        help="Keep the cube from spinning (also set by ASCIICUBE_REDUCED_MOTION=1)",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Print a single frame to stdout and exit",
    )
    parser.add_argument(
        "--time",
        type=float,
        default=0.0,
        help="Animation time in seconds for the --once frame (default: 0)",
    )
    parser.add_argument("--cols", type=int, default=None, help="Override the number of columns for --once")
    parser.add_argument("--rows", type=int, default=None, help="Override the number of rows for --once")
    parser.add_argument("--log-file", type=str, default=None, help="Write diagnostic logs to this file")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for --log-file (default: WARNING)",
    )
    return parser.parse_args(argv)


@dataclass
class RuntimeConfig:
    scene: SceneConstants
    options: RendererOptions
    animation: AnimationSettings
    frame_duration: float
    warnings: list[str]


def _setup_runtime(args: argparse.Namespace) -> RuntimeConfig:
    warnings: list[str] = []

    try:
        env_options = RendererOptions.from_environment()
    except ValueError as exc:
        warnings.append(f"Ignoring malformed ASCIICUBE_* environment setting: {exc}")
        env_options = RendererOptions()

    max_steps = env_options.max_steps if args.max_steps is None else args.max_steps
    if max_steps < 1:
        warnings.append(f"--max-steps {max_steps} is too small; using 1")
        max_steps = 1

    frame_interval = env_options.target_frame_interval if args.frame_interval is None else args.frame_interval
    frame_interval = max(0.0, frame_interval)

    options = RendererOptions(
        max_steps=max_steps,
        target_frame_interval=frame_interval,
        respect_reduced_motion=args.reduced_motion or env_options.respect_reduced_motion,
    )

    defaults = AnimationSettings()
    animation = AnimationSettings(rotation_speed=defaults.rotation_speed * args.speed)

    fps = max(1.0, args.fps)
    return RuntimeConfig(
        scene=SceneConstants(),
        options=options,
        animation=animation,
        frame_duration=1.0 / fps,
        warnings=warnings,
    )


def _emit_warnings(warnings: Sequence[str]) -> None:
    if not warnings:
        return
    for warning in warnings:
        logger.warning(warning)
        sys.stderr.write(f"[asciicube] {warning}\n")
    sys.stderr.flush()


def render_once(args: argparse.Namespace, config: RuntimeConfig, stream: TextIO) -> None:
    size = shutil.get_terminal_size(fallback=(80, 24))
    cols = args.cols if args.cols is not None else size.columns
    rows = args.rows if args.rows is not None else max(1, size.lines - 1)
    cell_width, cell_height = measure_cell_size()

    engine = RenderEngine(config.scene, config.options)
    engine.resize(cols * cell_width, rows * cell_height, cell_width, cell_height)

    pose = AnimationClock(config.animation, config.options).pose_at(max(0.0, args.time))
    frame = engine.render(pose.rotation, pose.z_offset)
    stream.write((frame if frame is not None else engine.buffer) + "\n")
    stream.flush()


def _run_loop(args: argparse.Namespace, config: RuntimeConfig) -> None:
    engine = RenderEngine(config.scene, config.options)
    clock = AnimationClock(config.animation, config.options)

    with TerminalController() as terminal:
        frame_counter = 0
        warned_narrow = False
        try:
            while True:
                frame_start = time.perf_counter()

                for key in terminal.poll_keys():
                    if key in QUIT_KEYS:
                        return

                if engine.resize(*terminal.surface_pixels()):
                    # A smaller grid would leave stale characters behind.
                    terminal.clear()
                    if engine.cols > terminal.size_tuple()[0] and not warned_narrow:
                        logger.warning(
                            "Terminal is narrower than the %d column minimum; cropping frames",
                            config.scene.min_cols,
                        )
                        warned_narrow = True

                frame = clock.tick(frame_start)
                if frame is not None:
                    text = engine.render(frame.rotation, frame.z_offset)
                    if text is not None:
                        terminal.draw(text)

                    frame_counter += 1
                    if args.frames and frame_counter >= args.frames:
                        break

                frame_time = time.perf_counter() - frame_start
                sleep_time = config.frame_duration - frame_time
                if sleep_time > 0:
                    time.sleep(sleep_time)
        except KeyboardInterrupt:  # pragma: no cover - interactive loop
            terminal.restore()
            sys.stdout.write("Interrupted. Bye!\n")
            sys.stdout.flush()


def run(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_arguments(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)
    config = _setup_runtime(args)
    _emit_warnings(config.warnings)
    logger.info(
        "Starting with max_steps=%d frame_interval=%.3f reduced_motion=%s",
        config.options.max_steps,
        config.options.target_frame_interval,
        config.options.respect_reduced_motion,
    )

    if args.once:
        render_once(args, config, sys.stdout)
        return 0

    try:
        _run_loop(args, config)
    except SurfaceUnavailableError as exc:
        logger.error("Cannot start renderer: %s", exc)
        sys.stderr.write(f"[asciicube] {exc}\n")
        sys.stderr.flush()
        return 1
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
