#!/usr/bin/env python3
"""Render an animation of one of the preset scenes.

This script renders a preset scene frame by frame with supersampling and
time-jittered motion blur, and writes the frames either as numbered PNG
files or as a single looping animated GIF.

Usage:
    python -m examples.render_animation [options]

Options:
    --scene NAME        Preset scene: default or twin_spheres (default: default)
    --width WIDTH       Image width in pixels (default: 320)
    --height HEIGHT     Image height in pixels (default: 240)
    --grid GRID         Supersampling grid size per axis (default: 2)
    --length SECONDS    Animation length in seconds (default: 10)
    --fps FPS           Frames per second (default: 10)
    --output OUTPUT     Output .gif file or directory for PNG frames
                        (default: animation.gif)
    --cpu               Force the CPU backend
    --quiet             Suppress progress output

Example:
    python -m examples.render_animation --scene twin_spheres --length 2 --output frames
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

import taichi as ti

if TYPE_CHECKING:
    from src.blurtrace.core.animation import RenderSettings


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render an animation of a preset scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        type=str,
        default="default",
        help="Preset scene name (default: default)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=320,
        help="Image width in pixels (default: 320)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=240,
        help="Image height in pixels (default: 240)",
    )
    parser.add_argument(
        "--grid",
        type=int,
        default=2,
        help="Supersampling grid size per axis (default: 2)",
    )
    parser.add_argument(
        "--length",
        type=int,
        default=10,
        help="Animation length in seconds (default: 10)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=10,
        help="Frames per second (default: 10)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="animation.gif",
        help="Output .gif file or directory for PNG frames (default: animation.gif)",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_animation(
    scene_name: str,
    settings: RenderSettings,
    output_path: str = "animation.gif",
    quiet: bool = False,
) -> Path:
    """Render a preset scene animation and write the frames.

    Args:
        scene_name: Name of the preset scene.
        settings: RenderSettings with size, grid, length and fps.
        output_path: A .gif file path, or a directory for numbered PNG frames.
        quiet: If True, suppress progress output.

    Returns:
        Path to the GIF file or the frame directory.
    """
    # Lazy imports to allow Taichi initialization first
    from src.blurtrace.core.animation import AnimationRenderer
    from src.blurtrace.preview.export import AnimatedGifSink, PngSequenceSink
    from src.blurtrace.scene.presets import create_preset_scene

    if not quiet:
        print(f"Creating {scene_name} scene ({settings.width}x{settings.height})...")

    create_preset_scene(scene_name)
    renderer = AnimationRenderer(settings.width, settings.height, settings.grid)

    output = Path(output_path)
    gif_sink = None
    if output.suffix.lower() == ".gif":
        gif_sink = AnimatedGifSink(output, fps=settings.fps)
        sink = gif_sink
    else:
        sink = PngSequenceSink(output)

    total_frames = settings.frame_count
    if not quiet:
        print(
            f"Rendering {total_frames} frames with {settings.grid}x{settings.grid} "
            "samples per pixel..."
        )

    start_time = time.time()
    frames_done = 0

    def frame_sink(frame_index: int, image) -> None:
        nonlocal frames_done
        sink(frame_index, image)
        frames_done = frame_index + 1

    def progress_callback(rows_done: int, total_rows: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            print(
                f"\r  Frame {frames_done + 1}/{total_frames}: "
                f"row {rows_done}/{total_rows} - {elapsed:.1f}s elapsed",
                end="",
                flush=True,
            )

    renderer.render_animation(
        settings.length,
        settings.fps,
        frame_sink,
        callback=progress_callback,
    )

    if not quiet:
        print()  # Newline after progress

    if gif_sink is not None:
        gif_sink.save()

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Intersection distances rely on IEEE infinities
    if args.cpu:
        ti.init(arch=ti.cpu, fast_math=False)
    else:
        ti.init(arch=ti.gpu, fast_math=False)

    from src.blurtrace.core.animation import RenderSettings

    settings = RenderSettings(
        width=args.width,
        height=args.height,
        grid=args.grid,
        length=args.length,
        fps=args.fps,
    )

    try:
        render_animation(
            scene_name=args.scene,
            settings=settings,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except (ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
