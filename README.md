# inkreader

This package holds the screen logic for a small e-paper reader. It does not
depend on any display or radio hardware. Every screen keeps its own state and
reacts to the buttons through `handle_select`, `handle_down` and `handle_up`.
Each screen also has a `render()` method that returns the screen's contents as
a list of text lines.

## Books

`inkreader.book_screen.BookScreen(books_dir, width=400, height=300)` works with
the `.txt` and `.epub` files in `books_dir`:

- It lists them five per page. `next_book_page()` and `previous_book_page()`
  move between list pages.
- `load_book(path)` reads a book of up to about 200 KB and removes EPUB tags.
  It then splits the text into pages sized for the display. A missing file
  raises `FileNotFoundError`. An unsupported format or an empty file raises
  `ValueError`.
- `next_page()` and `previous_page()` turn pages. `go_to_page(n)` jumps to a
  page and raises `IndexError` if that page does not exist.
  `current_page_text()` returns the text being read.
- The reading menu offers Increase Font, Decrease Font, Return to Reading and
  Close Book. `increase_font_size()`, `decrease_font_size()` and
  `set_font(FontSize...)` change the font and split the pages again.
- `handle_back()` closes the book and goes back to the list.

The helpers behind it:

- `inkreader.book_content` has `BookFormat`, `BookInfo`, `FontSize`,
  `TextSettings`, `detect_book_format`, `title_from_path`, `read_book_file`
  and `strip_epub_markup`.
- `inkreader.pagination` has `paginate`, `wrap_page` and `words_per_page`.
- `inkreader.formatting` has `format_file_size` and `ellipsize`.

```python
from inkreader.book_screen import BookScreen

screen = BookScreen("books", 400, 300)
screen.refresh_book_list()
screen.handle_select()          # open the selected book
print(screen.current_page_text())
screen.handle_down()            # next page
print("\n".join(screen.render()))
```

## Files

`inkreader.files_screen.FilesScreen(root)` browses the tree below `root`. Paths
inside the tree are shown as absolute paths that start with `/`.

- Directories are listed before files, and each group is sorted by name.
  Folders named config, log, logs, temp, tmp and System Volume Information are
  hidden.
- Selecting a folder enters it. Pressing up at the top of the list returns to
  the previous folder.
- `handle_quick_down(steps)` and `handle_quick_up(steps)` jump several entries
  at once.
- The context menu (`show_global_menu()`) offers options that depend on what
  is selected: open or delete a folder, show a file's size, delete a file,
  refresh, go to root, back to main menu, or cancel. Choosing "Back to Main
  Menu" sets `exit_requested`.

`inkreader.file_listing` has `FileItem`, `list_directory`, `file_icon`,
`display_name` and `is_valid_path`.

## Wi-Fi

- `inkreader.wifi_config.WiFiConfig(path)` keeps saved networks in a JSON file
  and sorts them by priority, highest first. Its methods are `load`, `save`,
  `to_json`, `remember`, `remove`, `toggle_auto_connect`, `change_priority` and
  `first_auto_connect`.
- `inkreader.wifi_network.WiFiBackend` is the radio. The class keeps its
  networks and passwords in memory. To drive real hardware, subclass it and
  override `scan`, `connect`, `disconnect`, `start_access_point` and
  `stop_access_point`.
- `inkreader.wifi_screen.WiFiScreen(backend, config)` does the following:
  - It loads the configuration and joins the first saved network that has
    auto-connect on.
  - It scans for networks and joins networks. A network that joins
    successfully is remembered.
  - `start_hotspot()` starts the setup access point with its web portal.
    `update()` serves one pending portal request and leaves setup mode once
    new credentials have been posted.
- `inkreader.setup_portal.SetupPortal(config, backend, upload_dir)` answers
  these requests:
  - `GET /` returns the setup page.
  - `GET /scan` returns the scan results as JSON.
  - `POST /configure` saves credentials.
  - `POST /upload` stores multipart file uploads in `upload_dir`.

  Use `handle(method, path, body, content_type)` to answer a single request.
  Use `build_server(host, port)` to get an `http.server.HTTPServer`.

```python
from inkreader.wifi_config import WiFiConfig
from inkreader.wifi_network import AuthMode, WiFiBackend, WiFiNetwork
from inkreader.wifi_screen import WiFiScreen

password = "password"
backend = WiFiBackend(
    [WiFiNetwork("HomeNet", -50, AuthMode.WPA2_PSK)],
    credentials={"HomeNet": password},
)
config = WiFiConfig("config/wifi_networks.json")
screen = WiFiScreen(backend, config)
screen.connect_to_network("HomeNet", password)   # True; HomeNet is now saved
print("\n".join(screen.render()))
```

## What this package does not do

- It draws nothing on a display. `render()` returns text lines, and turning
  those lines into pixels is up to you.
- It does not control a radio. The bundled `WiFiBackend` only simulates
  networks in memory.
- It has no command-line program and no main loop. You create the screens and
  call their button handlers yourself. With `WiFiScreen` you also call
  `update()`.

## Installing

```
pip install .
```

The package has no runtime dependencies. To run the tests:

```
pip install ".[test]"
pytest
```