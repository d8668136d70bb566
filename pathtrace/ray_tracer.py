import argparse
import time
from typing import List, Sequence

from pathtrace.renderer import render, save_image
from pathtrace.scene_settings import RenderSettings
from pathtrace.scenes import SCENES

PROGRESS_STEPS: int = 10 # progress lines per render


def build_parser() -> argparse.ArgumentParser:
    defaults = RenderSettings()
    parser = argparse.ArgumentParser(description='Python Path Tracer')
    parser.add_argument('output_image', type=str, help='Name of the output image file')
    parser.add_argument('--scene', choices=sorted(SCENES), default='simple_primitives', help='Built-in scene to render')
    parser.add_argument('--width', type=int, default=defaults.width, help='Image width')
    parser.add_argument('--height', type=int, default=defaults.height, help='Image height')
    parser.add_argument(
        '--samples-level',
        type=int,
        default=defaults.samples_level,
        help='Multi-jitter grid size; every pixel gets samples-level^2 samples',
    )
    parser.add_argument('--max-depth', type=int, default=defaults.max_depth, help='Maximum bounces per path')
    parser.add_argument('--workers', type=int, default=defaults.workers, help='Worker processes (1 renders in-process)')
    parser.add_argument('--seed', type=int, default=defaults.seed, help='Seed for reproducible renders')
    parser.add_argument(
        '--leaf-size',
        type=int,
        default=defaults.max_leaf_size,
        help='Maximum primitives per BVH leaf',
    )
    parser.add_argument('--gamma', type=float, default=defaults.gamma, help='Display gamma for the saved image')
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    settings = RenderSettings(
        width=args.width,
        height=args.height,
        samples_level=args.samples_level,
        max_depth=args.max_depth,
        workers=args.workers,
        seed=args.seed,
        max_leaf_size=args.leaf_size,
        gamma=args.gamma,
    )
    settings.validate()

    def log_phase(label: str, seconds: float) -> None:
        print(f"[phase] {label}: {seconds:.2f}s")

    reported: List[int] = [0]

    def log_progress(done_rows: int, total_rows: int) -> None:
        step = done_rows * PROGRESS_STEPS // total_rows
        if step > reported[0] or done_rows == total_rows:
            reported[0] = step
            print(f"[progress] {done_rows}/{total_rows} rows ({100.0 * done_rows / total_rows:.0f}%)")

    build_start = time.perf_counter()
    scene = SCENES[args.scene](settings.width, settings.height, settings.max_leaf_size)
    log_phase("build_scene", time.perf_counter() - build_start)

    print(
        f"[render] scene={args.scene} size={settings.width}x{settings.height} "
        f"spp={settings.samples_per_pixel} max_depth={settings.max_depth} workers={settings.workers}"
    )
    render_start = time.perf_counter()
    image_array = render(scene, settings, progress=log_progress)
    log_phase("render", time.perf_counter() - render_start)

    save_start = time.perf_counter()
    save_image(image_array, args.output_image, settings.gamma)
    log_phase("save_image", time.perf_counter() - save_start)


def run() -> None:
    program_start = time.time()
    readable_start = time.strftime('%Y-%m-%d %H:%M:%S', time.localtime(program_start))
    print(f"[timer] Program started at {readable_start}")
    try:
        main()
    finally:
        program_end = time.time()
        readable_end = time.strftime('%Y-%m-%d %H:%M:%S', time.localtime(program_end))
        elapsed = program_end - program_start
        print(f"[timer] Program ended at {readable_end} (elapsed {elapsed:.2f}s)")


if __name__ == '__main__':
    run()
