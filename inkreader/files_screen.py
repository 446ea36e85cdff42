"""The file browser screen."""

from __future__ import annotations

import dataclasses
import logging
import os
import posixpath
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from .file_listing import FileItem, display_name, file_icon, is_valid_path, list_directory
from .formatting import format_file_size

log = logging.getLogger(__name__)

ROOT_PATH = "/"
DISPLAY_HEIGHT = 300
LIST_TOP = 100
LIST_BOTTOM_MARGIN = 20
LIST_LINE_HEIGHT = 18
MAX_PATH_DISPLAY = 30
PATH_TAIL = 27

DIRECTORY_NOT_FOUND = "Directory Not Found"

FILES_MENU = "Files Menu"
FOLDER_OPTIONS = "Folder Options"
FILE_OPTIONS = "File Options"

OPEN_FOLDER = "Open Folder"
DELETE_FOLDER = "Delete Folder"
VIEW_FILE_INFO = "View File Info"
DELETE_FILE = "Delete File"
REFRESH = "Refresh"
GO_TO_ROOT = "Go to Root"
BACK_TO_MAIN_MENU = "Back to Main Menu"
CANCEL = "Cancel"


@dataclass
class MenuDialog:
    """The context menu shown over the file list."""

    visible: bool = False
    selected: int = 0
    options: list[str] = field(default_factory=list)
    title: str = FILES_MENU


class FilesScreen:
    """State and button handling for browsing files below ``root``.

    Paths shown and navigated are relative to ``root`` and start with "/".
    """

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self.root = Path(root)
        self.height = DISPLAY_HEIGHT
        self.current_path = ROOT_PATH
        self.history: list[str] = []
        self.items: list[FileItem] = []
        self.selected_index = 0
        self.menu = MenuDialog()
        self.exit_requested = False
        self.message = ""
        self.last_error: str | None = None
        self._initialized = False

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            self.refresh()

    def _real_path(self, path: str) -> Path:
        relative = posixpath.normpath(path).lstrip("/")
        return self.root / relative if relative else self.root

    def _selected_item(self) -> FileItem | None:
        if 0 <= self.selected_index < len(self.items):
            return self.items[self.selected_index]
        return None

    def _ensure_valid_selection(self) -> None:
        if not self.items:
            self.selected_index = 0
        else:
            self.selected_index = min(max(self.selected_index, 0), len(self.items) - 1)

    # File operations

    def load_directory(self, path: str) -> None:
        """Read the entries of ``path`` into the list.

        A missing directory shows a single placeholder entry; a path that is
        a file shows an empty list.
        """
        self._initialized = True
        try:
            listing = list_directory(self._real_path(path))
        except FileNotFoundError:
            log.warning("failed to open directory: %s", path)
            self.items = [FileItem(name=DIRECTORY_NOT_FOUND)]
            return
        except NotADirectoryError:
            log.warning("path is not a directory: %s", path)
            self.items = []
            return

        prefix = path if path.endswith("/") else path + "/"
        self.items = [dataclasses.replace(item, full_path=prefix + item.name) for item in listing]
        self._ensure_valid_selection()

    def navigate_to_directory(self, path: str) -> None:
        """Enter ``path``, remembering where we came from.

        Raises ValueError for a path that is empty or not absolute.
        """
        if not is_valid_path(path):
            raise ValueError(f"invalid path: {path!r}")
        self.history.append(self.current_path)
        self.current_path = path
        self.selected_index = 0
        self.load_directory(path)

    def navigate_back(self) -> None:
        """Return to the previously visited directory, if any."""
        if not self.history:
            return
        self.current_path = self.history.pop()
        self.selected_index = 0
        self.load_directory(self.current_path)

    def delete_selected(self) -> bool:
        """Delete the selected file or folder and reload the list.

        Returns False when nothing real is selected; OSError is raised when
        the deletion fails.
        """
        self._ensure_initialized()
        item = self._selected_item()
        if item is None or item.is_placeholder:
            return False
        target = self._real_path(item.full_path)
        if item.is_directory:
            shutil.rmtree(target)
        else:
            os.remove(target)
        log.info("deleted %s", item.full_path)
        self.refresh()
        return True

    def refresh(self) -> None:
        """Reload the current directory."""
        self.load_directory(self.current_path)

    def is_at_root(self) -> bool:
        return self.current_path in (ROOT_PATH, "")

    # Menu

    def show_global_menu(self) -> None:
        """Open the context menu with options fitting the selection."""
        self._ensure_initialized()
        self.menu.visible = True
        self.menu.selected = 0
        self.message = ""
        item = self._selected_item()
        if item is not None and item.is_directory:
            self.menu.title = FOLDER_OPTIONS
            options = [OPEN_FOLDER, DELETE_FOLDER]
        elif item is not None:
            self.menu.title = FILE_OPTIONS
            options = [VIEW_FILE_INFO, DELETE_FILE]
        else:
            self.menu.title = FILES_MENU
            options = [REFRESH, GO_TO_ROOT]
        self.menu.options = [*options, BACK_TO_MAIN_MENU, CANCEL]

    def hide_global_menu(self) -> None:
        self.menu.visible = False

    def handle_global_menu_select(self) -> None:
        """Carry out the highlighted menu option."""
        if not 0 <= self.menu.selected < len(self.menu.options):
            return
        option = self.menu.options[self.menu.selected]
        self.hide_global_menu()
        if option == OPEN_FOLDER:
            item = self._selected_item()
            if item is not None:
                self.navigate_to_directory(item.full_path)
        elif option in (DELETE_FOLDER, DELETE_FILE):
            try:
                self.delete_selected()
            except OSError as exc:
                self.last_error = str(exc)
                log.error("failed to delete: %s", exc)
        elif option == VIEW_FILE_INFO:
            item = self._selected_item()
            if item is not None:
                self.message = f"{item.name}: {format_file_size(item.size)}"
        elif option == REFRESH:
            self.refresh()
        elif option == GO_TO_ROOT:
            self.history.clear()
            self.navigate_to_directory(ROOT_PATH)
        elif option == BACK_TO_MAIN_MENU:
            self.exit_requested = True

    # Buttons

    def handle_select(self) -> None:
        """Enter a folder, or open the menu for a file or an empty list."""
        self._ensure_initialized()
        if self.menu.visible:
            self.handle_global_menu_select()
            return
        item = self._selected_item()
        if not self.items or item is None:
            if not self.items:
                self.show_global_menu()
            return
        if item.is_placeholder or not item.is_directory:
            self.show_global_menu()
        else:
            self.navigate_to_directory(item.full_path)

    def handle_down(self) -> None:
        """Move down the menu or the list, wrapping at the end."""
        self._ensure_initialized()
        if self.menu.visible:
            if self.menu.options:
                self.menu.selected = (self.menu.selected + 1) % len(self.menu.options)
            return
        if self.items:
            self.selected_index = (self.selected_index + 1) % len(self.items)

    def handle_up(self) -> None:
        """Move up, close the menu at its top, or leave the folder at the list top."""
        self._ensure_initialized()
        if self.menu.visible:
            if self.menu.selected > 0:
                self.menu.selected -= 1
            else:
                self.hide_global_menu()
            return
        if self.items and self.selected_index > 0:
            self.selected_index -= 1
        elif not self.is_at_root():
            self.navigate_back()

    def handle_quick_down(self, steps: int = 5) -> None:
        """Jump several entries down the list, wrapping around."""
        self._ensure_initialized()
        if self.menu.visible or not self.items:
            return
        self.selected_index = (self.selected_index + steps) % len(self.items)

    def handle_quick_up(self, steps: int = 5) -> None:
        """Jump several entries up the list, wrapping around."""
        self._ensure_initialized()
        if self.menu.visible or not self.items:
            return
        self.selected_index = (self.selected_index - steps) % len(self.items)

    # Rendering

    def render(self) -> list[str]:
        """Lines of text describing what the screen shows."""
        self._ensure_initialized()
        path = self.current_path
        if len(path) > MAX_PATH_DISPLAY:
            path = "..." + path[-PATH_TAIL:]
        lines = ["Files", f"Path: {path}", *self._list_lines()]
        if self.menu.visible:
            lines.append(self.menu.title)
            lines.extend(
                f"{'>' if index == self.menu.selected else ' '} {option}"
                for index, option in enumerate(self.menu.options)
            )
        if self.message:
            lines.append(self.message)
        return lines

    def _list_lines(self) -> list[str]:
        max_visible = max(0, (self.height - LIST_TOP - LIST_BOTTOM_MARGIN) // LIST_LINE_HEIGHT)
        scroll = max(0, self.selected_index - max_visible + 1)
        count = min(len(self.items), max_visible)
        lines = []
        for index, item in enumerate(self.items[scroll : scroll + count], start=scroll):
            marker = ">" if index == self.selected_index else " "
            line = f"{marker} {file_icon(item)} {display_name(item.name)}"
            if not item.is_directory:
                line += f"  {format_file_size(item.size)}"
            lines.append(line)
        return lines