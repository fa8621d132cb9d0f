import argparse
import logging
import sys
from pathlib import Path

from inlinemark.config import find_config_file, load_config
from inlinemark.html_converter import HTMLToMarkup
from inlinemark.log import configure_logging
from inlinemark.markup_converter import MarkerRenderer

logger = logging.getLogger(__name__)


def load_config_or_exit(args):
    """Load the renderer config named on the command line (or found in cwd)."""
    path = Path(args.config) if args.config else find_config_file()
    try:
        return load_config(path)
    except (OSError, ValueError) as e:
        logger.error(f"Invalid config {path}: {e}")
        raise SystemExit(1)


def read_units(args):
    """Yield the text units to convert: the argument, a file, or stdin."""
    if args.text is not None:
        yield args.text
        return
    if args.file:
        try:
            lines = Path(args.file).read_text(encoding="utf-8").splitlines()
        except OSError as e:
            logger.error(f"Cannot read {args.file}: {e}")
            raise SystemExit(1)
        logger.debug(f"Read {len(lines)} line(s) from {args.file}")
        yield from lines
        return
    for line in sys.stdin:
        yield line.rstrip("\n")


def run_render(args):
    """Markup -> HTML."""
    renderer = MarkerRenderer.from_config(load_config_or_exit(args))
    for unit in read_units(args):
        print(renderer.render(unit))


def run_to_markup(args):
    """HTML -> markup."""
    converter = HTMLToMarkup.from_config(load_config_or_exit(args))
    for unit in read_units(args):
        print(converter.convert(unit))


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="inlinemark – Render inline markup to HTML.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--config",
        "-c",
        help="Config file (default: ./.inlinemark if present)",
    )

    subparsers = parser.add_subparsers(dest="command", required=False)

    render_parser = subparsers.add_parser(
        "render",
        help="Markup -> HTML",
    )
    render_parser.add_argument(
        "text",
        nargs="?",
        help="Text to render (default: read lines from --file or stdin)",
    )
    render_parser.add_argument(
        "--file",
        "-f",
        help="Render every line of this file",
    )
    render_parser.set_defaults(handler=run_render)

    markup_parser = subparsers.add_parser(
        "to-markup",
        help="HTML -> markup",
    )
    markup_parser.add_argument(
        "text",
        nargs="?",
        help="HTML to convert (default: read lines from --file or stdin)",
    )
    markup_parser.add_argument(
        "--file",
        "-f",
        help="Convert every line of this file",
    )
    markup_parser.set_defaults(handler=run_to_markup)

    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.debug else logging.INFO
    configure_logging(stream_level=log_level, ignore_libs=["bs4"])

    if hasattr(args, "handler"):
        args.handler(args)
    else:
        print("=" * 60)
        print("inlinemark – Render inline markup to HTML")
        print("=" * 60)
        print()
        print("Available commands:")
        print("  render     Convert markup to HTML")
        print("  to-markup  Convert rendered HTML back to markup")
        print()
        print("Usage examples:")
        print("  inlinemark render '_This_ is emphasized'")
        print("  inlinemark render -f notes.txt")
        print("  inlinemark to-markup '<p> <em>This</em> is emphasized </p>'")
        print()
        print("For more information:")
        print("  inlinemark --help             # Show general help")
        print("  inlinemark <command> --help   # Show help for a specific command")
        print("=" * 60)


if __name__ == "__main__":
    main()
