"""Configuration for inline markup to HTML rendering."""

from __future__ import annotations

import configparser
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import NamedTuple

logger = logging.getLogger(__name__)

CONFIG_FILE = ".inlinemark"

ESCAPE_STRING = "\\"

PARAGRAPH_TAGS = ("<p>", "</p>")

HEADER_MARKER = "#"
HEADER_TAGS = ("<h1>", "</h1>")


class Marker(NamedTuple):
    symbol: str
    open_tag: str
    close_tag: str


# Order matters: each symbol gets its own pass over the tokens, and earlier
# passes claim ambiguous characters first.
MARKERS = [
    Marker("_", "<em>", "</em>"),
    Marker("__", "<strong>", "</strong>"),
    Marker("'", "<code>", "</code>"),
]

# symbol -> symbols that get escaped while a span of that symbol is open
ESCAPE_TABLE: dict[str, list[str]] = {
    "_": ["__"],
}


@dataclass(frozen=True)
class RendererConfig:
    """Everything a MarkerRenderer needs, in one immutable bundle."""

    markers: tuple[Marker, ...]
    escape_string: str = ESCAPE_STRING
    escape_table: dict[str, tuple[str, ...]] = field(default_factory=dict)
    paragraph_tags: tuple[str, str] = PARAGRAPH_TAGS
    header: tuple[str, str, str] | None = (HEADER_MARKER, *HEADER_TAGS)

    @staticmethod
    def default() -> RendererConfig:
        return RendererConfig(
            markers=tuple(MARKERS),
            escape_table={k: tuple(v) for k, v in ESCAPE_TABLE.items()},
        )


def find_config_file(start: Path | None = None) -> Path | None:
    """Return the config file in *start* (default: cwd), if there is one."""
    candidate = (start or Path.cwd()) / CONFIG_FILE
    return candidate if candidate.is_file() else None


def _parse_tag_pair(value: str, where: str) -> tuple[str, str]:
    parts = value.split()
    if len(parts) != 2:
        raise ValueError(
            f"{where}: expected an open and a close tag separated by "
            f"whitespace, got '{value}'"
        )
    return parts[0], parts[1]


def _read_config(path: Path) -> configparser.ConfigParser:
    """Read and return the parsed config file (keys keep their case)."""
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    try:
        with path.open(encoding="utf-8") as f:
            parser.read_file(f)
    except configparser.Error as e:
        raise ValueError(f"{path}: {e.message}") from e
    return parser


def load_config(path: Path | None) -> RendererConfig:
    """Build a RendererConfig from an INI file, falling back to the defaults.

    Sections that are missing keep the built-in values. Raises ValueError
    when the file describes an inconsistent dialect.
    """
    default = RendererConfig.default()
    if path is None:
        return default

    parser = _read_config(path)
    logger.info(f"Using renderer config from {path}")

    if parser.has_section("markers"):
        markers = tuple(
            Marker(symbol, *_parse_tag_pair(value, f"[markers] {symbol}"))
            for symbol, value in parser.items("markers")
        )
    else:
        markers = default.markers
    if not markers:
        raise ValueError(f"{path}: [markers] must define at least one marker")
    symbols = {m.symbol for m in markers}

    escape_string = parser.get("inlinemark", "escape", fallback=ESCAPE_STRING)
    if not escape_string:
        raise ValueError(f"{path}: escape string must not be empty")

    if parser.has_section("escapes"):
        escape_table = {
            symbol: tuple(value.split()) for symbol, value in parser.items("escapes")
        }
    else:
        escape_table = {
            k: tuple(s for s in v if s in symbols)
            for k, v in default.escape_table.items()
            if k in symbols
        }
    for symbol, colliding in escape_table.items():
        unknown = [s for s in (symbol, *colliding) if s not in symbols]
        if unknown:
            raise ValueError(
                f"{path}: [escapes] {symbol} references unknown marker(s) {unknown}"
            )

    paragraph_tags = _parse_tag_pair(
        parser.get("inlinemark", "paragraph", fallback=" ".join(PARAGRAPH_TAGS)),
        "[inlinemark] paragraph",
    )

    header_marker = parser.get("inlinemark", "header", fallback=HEADER_MARKER)
    header: tuple[str, str, str] | None = None
    if header_marker:
        header = (
            header_marker,
            *_parse_tag_pair(
                parser.get("inlinemark", "header_tags", fallback=" ".join(HEADER_TAGS)),
                "[inlinemark] header_tags",
            ),
        )

    return RendererConfig(
        markers=markers,
        escape_string=escape_string,
        escape_table=escape_table,
        paragraph_tags=paragraph_tags,
        header=header,
    )
