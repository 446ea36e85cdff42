"""Splitting book text into pages and pages into display lines."""

from __future__ import annotations

import math

from .book_content import TextSettings

HEADER_FOOTER_HEIGHT = 75
AVERAGE_WORD_LENGTH = 5
ESTIMATED_CHAR_WIDTH = 8
PAGE_FILL_RATIO = 0.6
BREAK_WINDOW_RATIO = 0.7
MAX_PAGES = 500
TEXT_TOP = 45
TEXT_BOTTOM_MARGIN = 30
MEASURE_THRESHOLD = 0.8

_BREAK_CHARS = frozenset(" \n.!?")
_PAGE_GAP_CHARS = frozenset(" \n")


def words_per_page(settings: TextSettings, width: int, height: int) -> int:
    """Estimate how many words fit on one page, at five characters a word."""
    text_width = max(0, width - 2 * settings.margin)
    text_height = max(0, height - HEADER_FOOTER_HEIGHT)
    chars_per_line = text_width // settings.font.char_width
    lines_per_page = text_height // settings.line_height
    return chars_per_line * lines_per_page // AVERAGE_WORD_LENGTH


def _chars_per_page(settings: TextSettings, width: int, height: int) -> int:
    lines_per_page = max(0, height - HEADER_FOOTER_HEIGHT) // settings.line_height
    chars_per_line = max(0, width - 2 * settings.margin) // ESTIMATED_CHAR_WIDTH
    return int(lines_per_page * chars_per_line * PAGE_FILL_RATIO)


def paginate(text: str, settings: TextSettings, width: int, height: int) -> list[str]:
    """Cut ``text`` into pages sized for a display of ``width`` x ``height``.

    Pages end at a space, newline or sentence mark near the size limit where
    one is found. Pages are stripped of surrounding whitespace and empty pages
    are dropped. Raises ValueError if the display cannot hold any text.
    """
    if not text:
        return []

    per_page = _chars_per_page(settings, width, height)
    if per_page <= 0:
        raise ValueError("the page area is too small to hold any text")

    pages: list[str] = []
    length = len(text)
    pos = 0
    while pos < length:
        end = min(pos + per_page, length)
        if end < length:
            lowest = math.floor(pos + per_page * BREAK_WINDOW_RATIO)
            end = next(
                (j for j in range(end, lowest, -1) if text[j] in _BREAK_CHARS),
                end,
            )

        page = text[pos:end].strip()
        if page:
            pages.append(page)
        pos = end

        if len(pages) > MAX_PAGES:
            break

        while pos < length and text[pos] in _PAGE_GAP_CHARS:
            pos += 1
    return pages


def wrap_page(text: str, settings: TextSettings, width: int, height: int) -> list[str]:
    """Break one page of text into the lines drawn on the display.

    Lines stop once the bottom of the text area is reached.
    """
    max_line_width = width - 2 * settings.margin
    max_y = height - TEXT_BOTTOM_MARGIN
    approx_chars = max_line_width // ESTIMATED_CHAR_WIDTH

    lines: list[str] = []
    current = ""
    y = TEXT_TOP
    length = len(text)
    i = 0
    while i < length and y <= max_y:
        start = i
        while i < length and text[i] not in _PAGE_GAP_CHARS:
            i += 1
        word = text[start:i]
        is_newline = i < length and text[i] == "\n"

        candidate = f"{current} {word}" if current else word
        need_break = is_newline or len(candidate) > approx_chars
        if need_break and len(candidate) > approx_chars * MEASURE_THRESHOLD:
            pixel_width = len(candidate) * settings.font.char_width
            need_break = pixel_width > max_line_width or is_newline

        if need_break:
            if current:
                lines.append(current)
                y += settings.line_height
                current = ""
            if not is_newline and y <= max_y:
                current = word
        else:
            current = candidate

        if i < length:
            i += 1

    if current and y <= max_y:
        lines.append(current)
    return lines