"""Inline markup to HTML renderer.

The dialect is word based: a text unit is split on single spaces and a
marker only counts when it sits at the very start or end of a word. Each
marker symbol gets its own left-to-right pass with a stack of open words,
so spans of the same symbol nest innermost-first while spans of different
symbols may cross.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType

from inlinemark.config import (
    ESCAPE_STRING,
    ESCAPE_TABLE,
    HEADER_MARKER,
    HEADER_TAGS,
    MARKERS,
    PARAGRAPH_TAGS,
    Marker,
    RendererConfig,
)

logger = logging.getLogger(__name__)


class MarkerRenderer:
    """Render one unit of inline markup to HTML.

    Instances only hold the dialect description; every call to
    :meth:`render` works on its own token list, so a renderer can be shared
    freely.
    """

    def __init__(
        self,
        markers: Iterable[Marker | tuple[str, str, str]] = MARKERS,
        escape_string: str = ESCAPE_STRING,
        escape_table: Mapping[str, Iterable[str]] = ESCAPE_TABLE,
        paragraph_tags: tuple[str, str] = PARAGRAPH_TAGS,
        header: tuple[str, str, str] | None = (HEADER_MARKER, *HEADER_TAGS),
    ):
        self._markers = tuple(Marker(*m) for m in markers)
        self._symbols = tuple(m.symbol for m in self._markers)
        self._tags = MappingProxyType(
            {m.symbol: (m.open_tag, m.close_tag) for m in self._markers}
        )
        self._escape = escape_string
        self._escape_table = MappingProxyType(
            {symbol: tuple(others) for symbol, others in escape_table.items()}
        )
        self._paragraph_tags = tuple(paragraph_tags)
        self._header = tuple(header) if header else None

    @classmethod
    def from_config(cls, config: RendererConfig) -> MarkerRenderer:
        return cls(
            markers=config.markers,
            escape_string=config.escape_string,
            escape_table=config.escape_table,
            paragraph_tags=config.paragraph_tags,
            header=config.header,
        )

    @property
    def symbols(self) -> tuple[str, ...]:
        return self._symbols

    def render(self, text: str) -> str:
        """Convert a text unit to HTML. Never raises for string input."""
        words = text.split(" ")
        for symbol in self._symbols:
            unmatched = self._render_symbol(words, symbol)
            if unmatched:
                logger.debug(f"{unmatched} unmatched '{symbol}' marker(s) left as text")
        self._wrap_block(words)
        return " ".join(words)

    # ------------------------------------------------------------------
    # Per-symbol pass
    # ------------------------------------------------------------------

    def _render_symbol(self, words: list[str], symbol: str) -> int:
        """Run one pass for *symbol*; return how many opens stayed unmatched."""
        escaped = self._escape + symbol
        guarded = self._escape_table.get(symbol)
        stack: list[int] = []

        for i in range(len(words)):
            if stack and guarded:
                self._escape_collisions(words, i, guarded)

            if self._starts_only_with(words[i], escaped):
                words[i] = words[i][len(self._escape) :]
            elif self._starts_only_with(words[i], symbol):
                stack.append(i)

            if self._ends_only_with(words[i], escaped):
                word = words[i]
                words[i] = word[: len(word) - len(escaped)] + symbol
            elif stack and self._ends_only_with(words[i], symbol):
                self._render_pair(words, stack.pop(), i, symbol)

        return len(stack)

    def _escape_collisions(
        self, words: list[str], index: int, colliding: Sequence[str]
    ) -> None:
        """Escape longer markers at the word edges while a span is open."""
        for other in colliding:
            if self._starts_only_with(words[index], other):
                words[index] = self._escape + words[index]
            if self._ends_only_with(words[index], other):
                word = words[index]
                cut = len(word) - len(other)
                words[index] = word[:cut] + self._escape + word[cut:]

    def _render_pair(self, words: list[str], start: int, end: int, symbol: str) -> None:
        open_tag, close_tag = self._tags[symbol]
        words[start] = open_tag + words[start][len(symbol) :]
        # start may equal end, so re-read the word after the open replacement
        word = words[end]
        words[end] = word[: len(word) - len(symbol)] + close_tag

    # ------------------------------------------------------------------
    # Edge predicates
    # ------------------------------------------------------------------

    def _starts_only_with(self, word: str, prefix: str) -> bool:
        """True if *word* starts with *prefix* and with no unrelated marker.

        Markers that are substrings of *prefix* don't count against it, so
        ``__`` still matches a word starting with ``__`` even though ``_``
        is a marker too, but ``_`` does not.
        """
        if not word.startswith(prefix):
            return False
        return not any(
            word.startswith(key) for key in self._symbols if key not in prefix
        )

    def _ends_only_with(self, word: str, suffix: str) -> bool:
        if not word.endswith(suffix):
            return False
        return not any(
            word.endswith(key) for key in self._symbols if key not in suffix
        )

    # ------------------------------------------------------------------
    # Block wrapper
    # ------------------------------------------------------------------

    def _wrap_block(self, words: list[str]) -> None:
        if self._header and words[0] == self._header[0]:
            words[0] = self._header[1]
            words.append(self._header[2])
            return
        words.insert(0, self._paragraph_tags[0])
        words.append(self._paragraph_tags[1])
