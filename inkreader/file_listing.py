"""Directory listings for the file browser."""

from __future__ import annotations

import os
from dataclasses import dataclass

MAX_DISPLAY_NAME = 13
_ELLIPSIS_ROOM = 3

HIDDEN_DIRECTORIES = frozenset(
    name.lower()
    for name in ("config", "log", "logs", "temp", "tmp", ".", "System Volume Information")
)

_ICONS_BY_EXTENSION = (
    ((".txt", ".log"), "[TXT]"),
    ((".json",), "[JSON]"),
    ((".pdf",), "[PDF]"),
    ((".jpg", ".png", ".bmp"), "[IMG]"),
)


@dataclass
class FileItem:
    """One entry of a directory listing."""

    name: str
    full_path: str = ""
    is_directory: bool = False
    size: int = 0
    last_modified: str = ""

    @property
    def is_placeholder(self) -> bool:
        """True for an entry that only carries a message and no real path."""
        return not self.full_path


def file_icon(item: FileItem) -> str:
    """Short tag shown in front of an entry, chosen by kind and extension."""
    if item.is_directory:
        return "[DIR]"
    lower = item.name.lower()
    for extensions, icon in _ICONS_BY_EXTENSION:
        if lower.endswith(extensions):
            return icon
    return "[FILE]"


def display_name(name: str) -> str:
    """Shorten a name to fit the list, keeping its extension where possible."""
    if len(name) <= MAX_DISPLAY_NAME:
        return name
    last_dot = name.rfind(".")
    if 0 < last_dot < len(name) - 1:
        extension = name[last_dot:]
        max_base = MAX_DISPLAY_NAME - len(extension) - _ELLIPSIS_ROOM
        if max_base > 0:
            return name[:max_base] + extension
    return name[:MAX_DISPLAY_NAME]


def is_valid_path(path: str) -> bool:
    """A path the browser may enter: non-empty and starting with a slash."""
    return bool(path) and path.startswith("/")


def _is_hidden(entry: os.DirEntry[str]) -> bool:
    return entry.is_dir() and entry.name.lower() in HIDDEN_DIRECTORIES


def list_directory(path: str | os.PathLike[str]) -> list[FileItem]:
    """List a directory, directories first, each group sorted by name.

    Configuration, log and temporary folders are left out. Raises
    FileNotFoundError for a missing path and NotADirectoryError for a file.
    """
    path_str = os.fspath(path)
    if not os.path.exists(path_str):
        raise FileNotFoundError(f"directory not found: {path_str}")
    if not os.path.isdir(path_str):
        raise NotADirectoryError(f"not a directory: {path_str}")

    prefix = path_str if path_str.endswith("/") else path_str + "/"
    with os.scandir(path_str) as entries:
        items = [
            FileItem(
                name=entry.name,
                full_path=prefix + entry.name,
                is_directory=entry.is_dir(),
                size=0 if entry.is_dir() else entry.stat().st_size,
            )
            for entry in entries
            if not _is_hidden(entry)
        ]
    items.sort(key=lambda item: (not item.is_directory, item.name))
    return items