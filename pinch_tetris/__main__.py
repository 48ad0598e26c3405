import argparse
import logging

from pinch_tetris.config import VIEWPORT_WIDTH, VIEWPORT_HEIGHT


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pinch-tetris",
        description="Falling-block puzzle played with pinch gestures in front of a webcam.",
    )
    parser.add_argument("--camera-index", type=int, default=0)
    parser.add_argument("--no-hand", action="store_true", help="Keyboard only; do not open the camera.")
    parser.add_argument("--no-preview", action="store_true", help="Hide the camera preview panel.")
    parser.add_argument("--draw-landmarks", action="store_true", help="Draw MediaPipe landmarks on the preview.")
    parser.add_argument("--width", type=int, default=VIEWPORT_WIDTH)
    parser.add_argument("--height", type=int, default=VIEWPORT_HEIGHT)
    parser.add_argument("-v", "--verbose", action="store_true", help="Log game events at DEBUG level.")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # pygame prints a banner on import; keep it out of --help
    from pinch_tetris.gui.pygame_frontend import run
    run(
        use_hand=not args.no_hand,
        camera=args.camera_index,
        hand_draw_preview=args.draw_landmarks,
        show_camera=not args.no_preview,
        size=(args.width, args.height),
    )


if __name__ == "__main__":
    main()
