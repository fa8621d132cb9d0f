"""HTML to inline markup converter."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping

from bs4 import BeautifulSoup, NavigableString, Tag

from inlinemark.config import (
    ESCAPE_STRING,
    ESCAPE_TABLE,
    HEADER_MARKER,
    HEADER_TAGS,
    MARKERS,
    Marker,
    RendererConfig,
)

logger = logging.getLogger(__name__)

_TAG_NAME_RE = re.compile(r"<\s*([A-Za-z][A-Za-z0-9]*)")


def _tag_name(tag: str) -> str | None:
    match = _TAG_NAME_RE.match(tag)
    return match.group(1).lower() if match else None


class HTMLToMarkup:
    """Convert rendered HTML back into inline markup.

    Only understands what MarkerRenderer produces: one block element holding
    text and marker tags. Spans that cross each other come back best-effort.
    """

    def __init__(
        self,
        markers: Iterable[Marker | tuple[str, str, str]] = MARKERS,
        escape_string: str = ESCAPE_STRING,
        header: tuple[str, str, str] | None = (HEADER_MARKER, *HEADER_TAGS),
        escape_table: Mapping[str, Iterable[str]] = ESCAPE_TABLE,
    ):
        marker_list = [Marker(*m) for m in markers]
        self._symbol_by_tag: dict[str, str] = {}
        for marker in marker_list:
            name = _tag_name(marker.open_tag)
            if name:
                self._symbol_by_tag[name] = marker.symbol
        # longest first so "__" wins over "_" when escaping word edges
        self._symbols = sorted((m.symbol for m in marker_list), key=len, reverse=True)
        self._escape = escape_string
        self._escape_table = {
            symbol: frozenset(others) for symbol, others in escape_table.items()
        }
        self._header_marker = header[0] if header else None
        self._header_tag = _tag_name(header[1]) if header else None

    @classmethod
    def from_config(cls, config: RendererConfig) -> HTMLToMarkup:
        return cls(
            markers=config.markers,
            escape_string=config.escape_string,
            header=config.header,
            escape_table=config.escape_table,
        )

    def convert(self, html: str) -> str:
        """Convert HTML to markup."""
        if not html or not html.strip():
            return ""

        soup = BeautifulSoup(html, "html.parser")
        parts = []
        for node in soup.children:
            if isinstance(node, Tag) and node.name == self._header_tag:
                parts.append(f"{self._header_marker} {self._inline(node).strip()}")
            elif isinstance(node, Tag) and node.name not in self._symbol_by_tag:
                # block wrapper (<p> or anything unknown): keep its contents
                parts.append(self._inline(node))
            else:
                parts.append(self._node(node))
        return "".join(parts).strip()

    def _inline(self, tag: Tag, guarded: frozenset[str] = frozenset()) -> str:
        return "".join(self._node(child, guarded) for child in tag.children)

    def _node(self, node, guarded: frozenset[str] = frozenset()) -> str:
        """Render one node; *guarded* holds symbols an enclosing span escapes."""
        if isinstance(node, NavigableString):
            return self._escape_text(str(node), guarded)
        if not isinstance(node, Tag):
            return ""
        symbol = self._symbol_by_tag.get(node.name)
        if symbol is None:
            logger.debug(f"Dropping unknown tag <{node.name}>, keeping its text")
            return self._inline(node, guarded)
        inner = guarded | self._escape_table.get(symbol, frozenset())
        return symbol + self._inline(node, inner) + symbol

    def _escape_text(self, text: str, guarded: frozenset[str] = frozenset()) -> str:
        """Escape markers sitting on word edges so they stay literal."""
        return " ".join(self._escape_word(word, guarded) for word in text.split(" "))

    def _escape_word(self, word: str, guarded: frozenset[str] = frozenset()) -> str:
        head = next((s for s in self._symbols if word.startswith(s)), None)
        tail = next((s for s in self._symbols if word.endswith(s)), None)
        # the renderer escapes these itself while the enclosing span is open
        if head in guarded:
            head = None
        if tail in guarded:
            tail = None
        if head and len(word) <= len(head):
            # a bare marker is both edges at once; escape it only once
            tail = None
        if tail:
            cut = len(word) - len(tail)
            word = word[:cut] + self._escape + word[cut:]
        if head:
            word = self._escape + word
        return word
