import argparse
import sys
from pathlib import Path

from termgreet.config import Config
from termgreet.display import Display
from termgreet.errors import TermgreetError
from termgreet.layout import Layout
from termgreet.logging_conf import setup_logging


def parse_info(value: str) -> tuple[str, str]:
    label, sep, text = value.partition("=")
    if not sep or not label:
        raise argparse.ArgumentTypeError(f"expected LABEL=VALUE, got {value!r}")
    # Allow literal "\n" for multi-line values from the shell
    return label, text.replace("\\n", "\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="termgreet", description="Show an image beside system information")
    parser.add_argument("-c", "--config", type=Path, default=None, help="Path to config file")
    parser.add_argument("-m", "--motd", action="store_true", default=False, help="Show the message of the day only")
    parser.add_argument("--no-image", action="store_true", default=False, help="Disable image display")
    parser.add_argument("--image", type=Path, default=None, help="Image to show (overrides the config)")
    parser.add_argument(
        "--layout",
        choices=[layout.value for layout in Layout],
        default=None,
        help="Arrangement of image and text (default: from config)",
    )
    parser.add_argument(
        "-i",
        "--info",
        type=parse_info,
        action="append",
        default=[],
        metavar="LABEL=VALUE",
        help="Info line to show; repeat for more lines, in order",
    )
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Log debug output to stderr")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = Config.load(args.config)
    except TermgreetError as e:
        print(f"termgreet: {e}", file=sys.stderr)
        return 1
    setup_logging(config, verbose=args.verbose)

    layout = Layout(args.layout) if args.layout else None
    display = Display(config, show_images=not args.no_image, image_path=args.image, layout=layout)
    try:
        if args.motd:
            display.show_motd()
        else:
            display.show(args.info)
    except TermgreetError as e:
        print(f"termgreet: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
