"""The book list, reader and reading menu screen."""

from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .book_content import (
    BookFormat,
    BookInfo,
    FontSize,
    TextSettings,
    detect_book_format,
    read_book_file,
    strip_epub_markup,
    title_from_path,
)
from .formatting import ellipsize, format_file_size
from .pagination import paginate, words_per_page, wrap_page

log = logging.getLogger(__name__)

BOOKS_PER_PAGE = 5
LIST_TOP = 80
LIST_BOTTOM_MARGIN = 40
LIST_LINE_HEIGHT = 25

INCREASE_FONT = "Increase Font"
DECREASE_FONT = "Decrease Font"
RETURN_TO_READING = "Return to Reading"
CLOSE_BOOK = "Close Book"
MENU_OPTIONS = (INCREASE_FONT, DECREASE_FONT, RETURN_TO_READING, CLOSE_BOOK)
MENU_TITLE = "Reading Menu"


class ScreenMode(enum.Enum):
    """Which view of the book screen is showing."""

    BOOK_LIST = "list"
    BOOK_READER = "reader"
    BOOK_MENU = "menu"


@dataclass
class PageInfo:
    """Position within the open book."""

    current_page: int = 0
    total_pages: int = 0


class BookScreen:
    """State and button handling for browsing and reading books."""

    def __init__(self, books_dir: str | os.PathLike[str], width: int = 400, height: int = 300) -> None:
        self.books_dir = Path(books_dir)
        self.width = width
        self.height = height

        self.mode = ScreenMode.BOOK_LIST
        self.selected_book_index = 0
        self.current_book_page = 0
        self.books_per_page = BOOKS_PER_PAGE
        self.total_book_pages = 0
        self.available_books: list[BookInfo] = []

        self.text_settings = TextSettings()
        self.book_info = BookInfo()
        self.page_info = PageInfo()
        self.pages: list[str] = []
        self.book_loaded = False
        self.last_error: str | None = None

        self.menu_visible = False
        self.menu_selected = 0
        self.menu_options = MENU_OPTIONS

        self._content = ""
        self._initialized = False

    @property
    def words_per_page(self) -> int:
        """Estimated words per page for the current text settings."""
        return words_per_page(self.text_settings, self.width, self.height)

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            self._initialized = True
            self.refresh_book_list()

    # Book list

    def scan_books_directory(self) -> list[BookInfo]:
        """Collect the books on the current list page and update list paging."""
        if not self.books_dir.is_dir():
            log.warning("books directory not found: %s", self.books_dir)
            return []

        all_books: list[BookInfo] = []
        for entry in sorted(os.scandir(self.books_dir), key=lambda e: e.name):
            if entry.is_dir():
                continue
            book_format = detect_book_format(entry.name)
            if book_format is BookFormat.UNKNOWN:
                continue
            dot = entry.name.rfind(".")
            all_books.append(
                BookInfo(
                    filename=entry.path,
                    title=entry.name[:dot] if dot > 0 else entry.name,
                    format=book_format,
                    file_size=entry.stat().st_size,
                    is_valid=True,
                )
            )

        per_page = self.books_per_page
        self.total_book_pages = max(1, (len(all_books) + per_page - 1) // per_page)
        self.current_book_page = min(max(self.current_book_page, 0), self.total_book_pages - 1)

        start = self.current_book_page * per_page
        books = all_books[start : start + per_page]
        log.info(
            "page %d/%d, showing %d of %d books",
            self.current_book_page + 1,
            self.total_book_pages,
            len(books),
            len(all_books),
        )
        return books

    def refresh_book_list(self) -> None:
        """Rescan the books directory and keep the selection in range."""
        self.available_books = self.scan_books_directory()
        if not self.available_books:
            self.selected_book_index = 0
        else:
            self.selected_book_index = min(
                max(self.selected_book_index, 0), len(self.available_books) - 1
            )

    def select_book(self, index: int) -> None:
        """Select a book on the current list page; out-of-range indexes are ignored."""
        if 0 <= index < len(self.available_books):
            self.selected_book_index = index

    def next_book_page(self) -> None:
        """Show the next page of the book list."""
        if self.current_book_page < self.total_book_pages - 1:
            self.current_book_page += 1
            self.selected_book_index = 0
            self.refresh_book_list()

    def previous_book_page(self) -> None:
        """Show the previous page of the book list."""
        if self.current_book_page > 0:
            self.current_book_page -= 1
            self.selected_book_index = 0
            self.refresh_book_list()

    # Book management

    def load_book(self, path: str | os.PathLike[str]) -> None:
        """Open a book and split it into pages.

        Raises FileNotFoundError for a missing file and ValueError for an
        unsupported format or a file with no text.
        """
        path_str = os.fspath(path)
        if not os.path.isfile(path_str):
            raise FileNotFoundError(f"book file not found: {path_str}")

        book_format = detect_book_format(path_str)
        if book_format is BookFormat.UNKNOWN:
            raise ValueError(f"unsupported book format: {path_str}")

        text = read_book_file(path_str)
        if book_format is BookFormat.EPUB:
            text = strip_epub_markup(text)

        self._content = text
        self.book_info = BookInfo(
            filename=path_str,
            title=title_from_path(Path(path_str).as_posix()),
            format=book_format,
            file_size=os.path.getsize(path_str),
            is_valid=True,
        )
        self.book_loaded = True
        self.page_info.current_page = 0
        self._paginate()
        log.info("loaded %s with %d pages", self.book_info.title, self.page_info.total_pages)

    def _paginate(self) -> None:
        if not self._content:
            return
        self.pages = paginate(self._content, self.text_settings, self.width, self.height)
        self.page_info.total_pages = len(self.pages)
        if self.pages:
            self.page_info.current_page = 0

    def close_book(self) -> None:
        """Forget the open book."""
        self.book_loaded = False
        self._content = ""
        self.pages = []
        self.page_info = PageInfo()
        self.book_info = BookInfo()

    def next_page(self) -> bool:
        """Turn forward one page; False if there is none."""
        if not self.book_loaded or self.page_info.current_page >= self.page_info.total_pages - 1:
            return False
        self.page_info.current_page += 1
        return True

    def previous_page(self) -> bool:
        """Turn back one page; False if there is none."""
        if not self.book_loaded or self.page_info.current_page <= 0:
            return False
        self.page_info.current_page -= 1
        return True

    def go_to_page(self, page_number: int) -> None:
        """Jump to a page; raises IndexError if it does not exist."""
        if not self.book_loaded or not 0 <= page_number < self.page_info.total_pages:
            raise IndexError(f"no page {page_number}")
        self.page_info.current_page = page_number

    def current_page_text(self) -> str:
        """Text of the page being read, or an empty string."""
        if not self.book_loaded or not 0 <= self.page_info.current_page < len(self.pages):
            return ""
        return self.pages[self.page_info.current_page]

    # Text settings

    def _apply_settings(self, settings: TextSettings) -> None:
        self.text_settings = settings
        if self.book_loaded:
            self._paginate()

    def increase_font_size(self) -> None:
        """Step the font up one size and repaginate."""
        self._apply_settings(self.text_settings.larger())

    def decrease_font_size(self) -> None:
        """Step the font down one size and repaginate."""
        self._apply_settings(self.text_settings.smaller())

    def set_font(self, font: FontSize) -> None:
        """Use another font and repaginate."""
        self._apply_settings(self.text_settings.with_font(font))

    # Menu

    def show_book_menu(self) -> None:
        """Open the reading menu."""
        self.menu_visible = True
        self.menu_selected = 0
        self.mode = ScreenMode.BOOK_MENU

    def hide_book_menu(self) -> None:
        """Close the reading menu and return to the text."""
        self.menu_visible = False
        self.mode = ScreenMode.BOOK_READER

    def handle_book_menu_select(self) -> None:
        """Carry out the highlighted menu option."""
        if not 0 <= self.menu_selected < len(self.menu_options):
            return
        option = self.menu_options[self.menu_selected]
        if option == INCREASE_FONT:
            self.increase_font_size()
        elif option == DECREASE_FONT:
            self.decrease_font_size()
        elif option == RETURN_TO_READING:
            self.hide_book_menu()
        elif option == CLOSE_BOOK:
            self.handle_back()

    # Buttons

    def handle_select(self) -> None:
        """Open the selected book, open the menu, or run a menu option."""
        self._ensure_initialized()
        if self.mode is ScreenMode.BOOK_LIST:
            if not self.available_books or self.selected_book_index >= len(self.available_books):
                return
            book = self.available_books[self.selected_book_index]
            try:
                self.load_book(book.filename)
            except (OSError, ValueError) as exc:
                self.last_error = str(exc)
                log.error("failed to load book: %s", exc)
                return
            self.last_error = None
            self.mode = ScreenMode.BOOK_READER
        elif self.mode is ScreenMode.BOOK_READER:
            self.show_book_menu()
        else:
            self.handle_book_menu_select()

    def handle_down(self) -> None:
        """Move down the list, turn the page, or move down the menu."""
        self._ensure_initialized()
        if self.mode is ScreenMode.BOOK_LIST:
            if not self.available_books:
                return
            if self.selected_book_index < len(self.available_books) - 1:
                self.selected_book_index += 1
            elif self.current_book_page < self.total_book_pages - 1:
                self.next_book_page()
        elif self.mode is ScreenMode.BOOK_READER:
            self.next_page()
        elif self.menu_options:
            self.menu_selected = (self.menu_selected + 1) % len(self.menu_options)

    def handle_up(self) -> None:
        """Move up the list, turn back a page, or move up or close the menu."""
        self._ensure_initialized()
        if self.mode is ScreenMode.BOOK_LIST:
            if not self.available_books:
                return
            if self.selected_book_index > 0:
                self.selected_book_index -= 1
            elif self.current_book_page > 0:
                self.previous_book_page()
                self.selected_book_index = len(self.available_books) - 1
        elif self.mode is ScreenMode.BOOK_READER:
            self.previous_page()
        elif self.menu_selected > 0:
            self.menu_selected -= 1
        else:
            self.hide_book_menu()

    def handle_back(self) -> None:
        """Close the book and return to the list."""
        if self.mode in (ScreenMode.BOOK_READER, ScreenMode.BOOK_MENU):
            self.close_book()
            self.menu_visible = False
            self.mode = ScreenMode.BOOK_LIST

    # Rendering

    def render(self) -> list[str]:
        """Lines of text describing what the screen shows."""
        self._ensure_initialized()
        if self.mode is ScreenMode.BOOK_LIST:
            return self._header() + self._list_lines()
        if self.mode is ScreenMode.BOOK_READER:
            return self._reader_lines()
        return self._header() + self._menu_lines()

    def _header(self) -> list[str]:
        if self.mode is ScreenMode.BOOK_LIST:
            if self.total_book_pages > 1:
                return [f"Books ({self.current_book_page + 1}/{self.total_book_pages})"]
            return ["Books"]
        if self.mode is ScreenMode.BOOK_MENU:
            return [MENU_TITLE]
        return []

    def _list_lines(self) -> list[str]:
        if not self.available_books:
            return ["No books found", "Place .txt or .epub files", f"in {self.books_dir}"]

        max_visible = max(0, (self.height - LIST_TOP - LIST_BOTTOM_MARGIN) // LIST_LINE_HEIGHT)
        scroll = max(0, self.selected_book_index - max_visible + 1)
        count = min(len(self.available_books), max_visible)

        lines = []
        for index, book in enumerate(self.available_books[scroll : scroll + count], start=scroll):
            marker = ">" if index == self.selected_book_index else " "
            title = ellipsize(book.title, 25, 22)
            lines.append(f"{marker} {title}  {format_file_size(book.file_size)}")

        if self.total_book_pages > 1:
            lines.append(f"Page {self.current_book_page + 1} of {self.total_book_pages}")
            lines.append("Double-click UP/DOWN to change pages")
        return lines

    def _reader_lines(self) -> list[str]:
        if not self.book_loaded or not self.pages:
            return ["No book loaded"]
        title = ellipsize(self.book_info.title, 20, 17)
        position = f"{self.page_info.current_page + 1}/{self.page_info.total_pages}"
        body = wrap_page(self.current_page_text(), self.text_settings, self.width, self.height)
        return [f"{title}  {position}", *body]

    def _menu_lines(self) -> list[str]:
        return [
            f"{'>' if index == self.menu_selected else ' '} {option}"
            for index, option in enumerate(self.menu_options)
        ]