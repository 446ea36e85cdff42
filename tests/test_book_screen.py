from pathlib import Path

import pytest

from inkreader.book_content import BookFormat, FontSize
from inkreader.book_screen import (
    BOOKS_PER_PAGE,
    CLOSE_BOOK,
    DECREASE_FONT,
    MENU_OPTIONS,
    BookScreen,
    ScreenMode,
)

LONG_TEXT = "word " * 2000


def _make_library(root: Path, count: int) -> Path:
    books = root / "books"
    books.mkdir()
    for index in range(count):
        (books / f"book{index}.txt").write_text(LONG_TEXT)
    (books / "manual.pdf").write_text("not a book")
    (books / "nested").mkdir()
    return books


@pytest.fixture
def screen(tmp_path):
    return BookScreen(_make_library(tmp_path, 7))


@pytest.fixture
def reading(screen):
    screen.handle_select()
    return screen


def test_list_is_paged(screen):
    screen.refresh_book_list()
    assert len(screen.available_books) == BOOKS_PER_PAGE
    assert screen.total_book_pages == 2
    screen.next_book_page()
    assert len(screen.available_books) == 7 - BOOKS_PER_PAGE
    assert screen.current_book_page == 1


def test_scan_skips_other_files_and_strips_extension(screen):
    screen.books_per_page = 10
    books = screen.scan_books_directory()
    assert [b.title for b in books] == [f"book{i}" for i in range(7)]
    assert all(b.format is BookFormat.TXT for b in books)
    assert all(b.file_size == len(LONG_TEXT) for b in books)


def test_missing_directory_shows_no_books(tmp_path):
    screen = BookScreen(tmp_path / "absent")
    lines = screen.render()
    assert screen.available_books == []
    assert "No books found" in lines


def test_list_header_shows_page(screen):
    assert screen.render()[0] == "Books (1/2)"


def test_down_past_last_book_moves_to_next_page(screen):
    screen.refresh_book_list()
    screen.select_book(BOOKS_PER_PAGE - 1)
    screen.handle_down()
    assert screen.current_book_page == 1
    assert screen.selected_book_index == 0


def test_up_from_top_selects_last_on_previous_page(screen):
    screen.refresh_book_list()
    screen.next_book_page()
    screen.handle_up()
    assert screen.current_book_page == 0
    assert screen.selected_book_index == len(screen.available_books) - 1


def test_select_book_ignores_out_of_range(screen):
    screen.refresh_book_list()
    screen.select_book(2)
    screen.select_book(99)
    assert screen.selected_book_index == 2


def test_select_opens_book(reading):
    assert reading.mode is ScreenMode.BOOK_READER
    assert reading.book_loaded
    assert reading.book_info.title == "book0"
    assert reading.page_info.total_pages == len(reading.pages) > 1
    assert reading.current_page_text() == reading.pages[0]


def test_reader_render_shows_position(reading):
    lines = reading.render()
    assert lines[0].endswith(f"1/{reading.page_info.total_pages}")
    assert len(lines) > 1


def test_page_turning(reading):
    assert reading.previous_page() is False
    reading.handle_down()
    assert reading.page_info.current_page == 1
    reading.handle_up()
    assert reading.page_info.current_page == 0
    last = reading.page_info.total_pages - 1
    reading.go_to_page(last)
    assert reading.next_page() is False
    assert reading.page_info.current_page == last


def test_go_to_missing_page_raises(reading):
    with pytest.raises(IndexError):
        reading.go_to_page(reading.page_info.total_pages)
    with pytest.raises(IndexError):
        reading.go_to_page(-1)


def test_go_to_page_without_book_raises(screen):
    with pytest.raises(IndexError):
        screen.go_to_page(0)
    assert screen.next_page() is False


def test_load_missing_file_raises(screen, tmp_path):
    with pytest.raises(FileNotFoundError):
        screen.load_book(tmp_path / "nothing.txt")


def test_load_unknown_format_raises(screen, tmp_path):
    path = tmp_path / "notes.doc"
    path.write_text("text")
    with pytest.raises(ValueError):
        screen.load_book(path)


def test_epub_markup_is_removed(screen, tmp_path):
    path = tmp_path / "story.epub"
    path.write_text("<html><body><p>Once upon a time</p><br/>the end</body></html>")
    screen.load_book(path)
    assert screen.book_info.format is BookFormat.EPUB
    text = screen.current_page_text()
    assert "<" not in text
    assert "Once upon a time" in text


def test_failed_load_stays_on_list(tmp_path):
    books = tmp_path / "books"
    books.mkdir()
    (books / "empty.txt").write_text("")
    screen = BookScreen(books)
    screen.handle_select()
    assert screen.mode is ScreenMode.BOOK_LIST
    assert not screen.book_loaded
    assert screen.last_error


def test_menu_opens_and_changes_font(reading):
    reading.handle_select()
    assert reading.mode is ScreenMode.BOOK_MENU
    reading.handle_down()
    assert reading.menu_options[reading.menu_selected] == DECREASE_FONT
    reading.handle_select()
    assert reading.text_settings.font is FontSize.SMALL
    assert reading.mode is ScreenMode.BOOK_MENU


def test_menu_down_wraps(reading):
    reading.show_book_menu()
    for _ in MENU_OPTIONS:
        reading.handle_down()
    assert reading.menu_selected == 0


def test_menu_up_at_top_closes_menu(reading):
    reading.show_book_menu()
    reading.handle_up()
    assert reading.mode is ScreenMode.BOOK_READER
    assert not reading.menu_visible


def test_menu_close_book_returns_to_list(reading):
    reading.show_book_menu()
    reading.menu_selected = MENU_OPTIONS.index(CLOSE_BOOK)
    reading.handle_select()
    assert reading.mode is ScreenMode.BOOK_LIST
    assert not reading.book_loaded
    assert reading.pages == []


def test_larger_font_repaginates(reading):
    before_pages = reading.page_info.total_pages
    before_words = reading.words_per_page
    reading.go_to_page(1)
    reading.increase_font_size()
    assert reading.page_info.total_pages > before_pages
    assert reading.words_per_page < before_words
    assert reading.page_info.current_page == 0


def test_set_font_keeps_line_height(reading):
    line_height = reading.text_settings.line_height
    reading.set_font(FontSize.LARGE)
    assert reading.text_settings.font is FontSize.LARGE
    assert reading.text_settings.line_height == line_height


def test_back_closes_book(reading):
    reading.handle_back()
    assert reading.mode is ScreenMode.BOOK_LIST
    assert reading.current_page_text() == ""
    assert reading.page_info.total_pages == 0