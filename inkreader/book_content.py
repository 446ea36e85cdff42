"""Book metadata, text settings and loading of book files."""

from __future__ import annotations

import dataclasses
import enum
import os
from dataclasses import dataclass

CHUNK_SIZE = 128
MAX_BOOK_BYTES = 200_000


class BookFormat(enum.Enum):
    """File formats the reader understands."""

    TXT = "txt"
    EPUB = "epub"
    UNKNOWN = "unknown"


@dataclass
class BookInfo:
    """Description of a book file."""

    filename: str = ""
    title: str = ""
    author: str = ""
    format: BookFormat = BookFormat.UNKNOWN
    file_size: int = 0
    is_valid: bool = False


class FontSize(enum.Enum):
    """The three monospace font sizes, valued by point size."""

    SMALL = 9
    MEDIUM = 12
    LARGE = 18

    @property
    def line_height(self) -> int:
        """Line height used when switching to this size."""
        return {FontSize.SMALL: 14, FontSize.MEDIUM: 18, FontSize.LARGE: 24}[self]

    @property
    def char_width(self) -> int:
        """Approximate width of one character in pixels."""
        return {FontSize.SMALL: 6, FontSize.MEDIUM: 8, FontSize.LARGE: 12}[self]


_LARGER = {FontSize.SMALL: FontSize.MEDIUM, FontSize.MEDIUM: FontSize.LARGE}
_SMALLER = {FontSize.LARGE: FontSize.MEDIUM, FontSize.MEDIUM: FontSize.SMALL}


@dataclass(frozen=True)
class TextSettings:
    """How book text is laid out on the page."""

    font: FontSize = FontSize.MEDIUM
    line_height: int = 18
    margin: int = 10

    @property
    def font_size(self) -> int:
        return self.font.value

    def _switch(self, table: dict[FontSize, FontSize]) -> TextSettings:
        target = table.get(self.font)
        if target is None:
            return self
        return dataclasses.replace(self, font=target, line_height=target.line_height)

    def larger(self) -> TextSettings:
        """Settings one font size up; unchanged at the largest size."""
        return self._switch(_LARGER)

    def smaller(self) -> TextSettings:
        """Settings one font size down; unchanged at the smallest size."""
        return self._switch(_SMALLER)

    def with_font(self, font: FontSize) -> TextSettings:
        """Settings with another font, keeping the current line height."""
        return dataclasses.replace(self, font=font)


def detect_book_format(filename: str) -> BookFormat:
    """Tell the book format from the file extension, ignoring case."""
    lower = filename.lower()
    if lower.endswith(".txt"):
        return BookFormat.TXT
    if lower.endswith(".epub"):
        return BookFormat.EPUB
    return BookFormat.UNKNOWN


def title_from_path(path: str) -> str:
    """Take the file name without extension as title, or the whole path."""
    last_slash = path.rfind("/")
    last_dot = path.rfind(".")
    if last_slash >= 0 and last_dot > last_slash:
        return path[last_slash + 1 : last_dot]
    return path


def read_book_file(path: str | os.PathLike[str]) -> str:
    """Read a book's text in small chunks, stopping once past the size limit.

    Each chunk ends at its first NUL byte. Raises ValueError if nothing
    was read.
    """
    pieces: list[bytes] = []
    total = 0
    with open(path, "rb") as handle:
        while chunk := handle.read(CHUNK_SIZE):
            pieces.append(chunk.split(b"\0", 1)[0])
            total += len(chunk)
            if total > MAX_BOOK_BYTES:
                break
    text = b"".join(pieces).decode("utf-8", errors="replace")
    if not text:
        raise ValueError(f"no text could be read from {os.fspath(path)}")
    return text


_MARKUP_REPLACEMENTS = (
    ("<p>", "\n\n"),
    ("</p>", ""),
    ("<br>", "\n"),
    ("<br/>", "\n"),
    ("<br />", "\n"),
)


def strip_epub_markup(text: str) -> str:
    """Turn paragraph and break tags into newlines and drop all other tags."""
    for old, new in _MARKUP_REPLACEMENTS:
        text = text.replace(old, new)

    kept: list[str] = []
    pos = 0
    while (start := text.find("<", pos)) >= 0:
        end = text.find(">", start)
        if end < 0:
            break
        kept.append(text[pos:start])
        pos = end + 1
    kept.append(text[pos:])
    return "".join(kept)