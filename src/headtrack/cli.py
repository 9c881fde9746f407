"""CLI for headtrack: ``headtrack run`` and ``headtrack info``."""

import argparse
import json
import logging
import sys

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="headtrack",
        description="Monocular head tracker",
    )
    sub = parser.add_subparsers(dest="command")

    # headtrack run
    run_p = sub.add_parser("run", help="Track a head in a video or camera stream")
    run_p.add_argument(
        "--input", "-i",
        default="0",
        help="Input source: file path or camera index (int)",
    )
    run_p.add_argument(
        "--model",
        choices=["standard", "efficient"],
        default=None,
        help="Landmark model family (overrides --config)",
    )
    run_p.add_argument(
        "--config", "-c",
        default=None,
        help="YAML tracker configuration",
    )
    run_p.add_argument(
        "--max-frames",
        type=int,
        default=None,
        help="Stop after N frames",
    )
    run_p.add_argument(
        "--filter",
        choices=["none", "ma", "ea"],
        default="none",
        help="Landmark filter (default: none)",
    )
    run_p.add_argument(
        "--fov",
        type=float,
        default=56.0,
        help="Horizontal camera field of view in degrees",
    )
    run_p.add_argument(
        "--calibrate-at",
        type=int,
        default=None,
        help="Calibrate head scale on the first tracked frame at or after N",
    )
    run_p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )

    # headtrack info
    info_p = sub.add_parser("info", help="Print the resolved configuration")
    info_p.add_argument("--config", "-c", default=None, help="YAML tracker configuration")
    info_p.add_argument(
        "--model",
        choices=["standard", "efficient"],
        default=None,
        help="Landmark model family (overrides --config)",
    )

    return parser


def _resolve_input(input_str: str):
    """Resolve --input to a source path or camera index."""
    try:
        return int(input_str)
    except ValueError:
        return input_str


def _load_config(args: argparse.Namespace):
    from dataclasses import replace

    from headtrack.config import TrackerConfig, TrackerModel

    config = TrackerConfig.from_yaml(args.config) if args.config else TrackerConfig()
    if args.model:
        config = replace(config, model=TrackerModel.from_string(args.model))
    return config


def _make_filter(name: str):
    from headtrack.filters import EAFilter, MAFilter

    if name == "ma":
        return MAFilter()
    if name == "ea":
        return EAFilter()
    return None


def _cmd_info(args: argparse.Namespace) -> None:
    """Handle ``headtrack info``."""
    from headtrack.paths import get_models_dir

    config = _load_config(args)
    data = config.to_dict()
    data["models_dir"] = str(get_models_dir())
    print(json.dumps(data, indent=2))


def _capture_size(cap):
    """Return (width, height, first_frame) for an opened capture.

    Some sources report 0 for the size properties. The size then comes from
    the first frame, which is returned so the caller can still track it.
    """
    import cv2

    width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
    height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
    if width > 0 and height > 0:
        return width, height, None

    ok, frame = cap.read()
    if not ok:
        return 0, 0, None
    height, width = frame.shape[:2]
    logger.debug("Capture reports no frame size, using first frame %dx%d", width, height)
    return width, height, frame


def _cmd_run(args: argparse.Namespace) -> None:
    """Handle ``headtrack run``."""
    import cv2

    from headtrack.factory import create_tracker
    from headtrack.solver import PnPPositionSolver
    from headtrack.types import FaceResult

    config = _load_config(args)
    source = _resolve_input(args.input)

    cap = cv2.VideoCapture(source)
    if not cap.isOpened():
        print(f"Error: cannot open input {args.input}", file=sys.stderr)
        sys.exit(1)

    width, height, pending = _capture_size(cap)
    if width <= 0 or height <= 0:
        cap.release()
        print(f"Error: cannot determine frame size of {args.input}", file=sys.stderr)
        sys.exit(1)
    solver = PnPPositionSolver(width, height, fov=args.fov, row_major=config.row_major)
    landmark_filter = _make_filter(args.filter)

    try:
        tracker = create_tracker(config, solver)
    except (FileNotFoundError, ValueError) as e:
        cap.release()
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    result = FaceResult()
    frame_count = 0
    calibrated = args.calibrate_at is None
    try:
        with tracker:
            while args.max_frames is None or frame_count < args.max_frames:
                if pending is not None:
                    image, pending = pending, None
                else:
                    ok, image = cap.read()
                    if not ok:
                        break
                tracker.predict(image, result, landmark_filter)

                if result.detected and not calibrated and frame_count >= args.calibrate_at:
                    tracker.calibrate(result)
                    calibrated = True

                if result.detected:
                    yaw, pitch, roll = result.rotation
                    x, y, z = result.translation
                    print(
                        f"  frame={frame_count} yaw={yaw:.1f} pitch={pitch:.1f} roll={roll:.1f} "
                        f"x={x:.1f} y={y:.1f} z={z:.1f}"
                    )
                else:
                    print(f"  frame={frame_count} no face")
                frame_count += 1
    finally:
        cap.release()

    meta = tracker.get_metadata()
    print(f"\nDone: {frame_count} frames, head_width_scale={meta.head_width_scale:.3f}")


def main():
    """Entry point for ``headtrack`` CLI."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if getattr(args, "verbose", False):
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO)

    if args.command == "run":
        _cmd_run(args)
    elif args.command == "info":
        _cmd_info(args)


if __name__ == "__main__":
    main()
