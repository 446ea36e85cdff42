import pytest

from inkreader.file_listing import (
    FileItem,
    display_name,
    file_icon,
    is_valid_path,
    list_directory,
)


@pytest.mark.parametrize(
    ("name", "icon"),
    [
        ("notes.TXT", "[TXT]"),
        ("boot.log", "[TXT]"),
        ("data.json", "[JSON]"),
        ("manual.pdf", "[PDF]"),
        ("photo.jpg", "[IMG]"),
        ("photo.png", "[IMG]"),
        ("photo.BMP", "[IMG]"),
        ("archive.zip", "[FILE]"),
        ("README", "[FILE]"),
    ],
)
def test_file_icon_by_extension(name, icon):
    assert file_icon(FileItem(name=name, full_path="/" + name)) == icon


def test_file_icon_directory_wins_over_extension():
    assert file_icon(FileItem(name="old.txt", full_path="/old.txt", is_directory=True)) == "[DIR]"


def test_placeholder_item():
    assert FileItem(name="Directory Not Found").is_placeholder
    assert not FileItem(name="a", full_path="/a").is_placeholder


@pytest.mark.parametrize("name", ["", "a.txt", "thirteenchars"])
def test_display_name_short_names_unchanged(name):
    assert display_name(name) == name


def test_display_name_keeps_extension():
    name = "a_really_long_book_title.txt"
    result = display_name(name)
    assert result.endswith(".txt")
    assert len(result) <= 13
    assert name.startswith(result[: -len(".txt")])
    assert len(result) < len(name)


def test_display_name_without_extension_cuts_to_limit():
    name = "averyveryverylongname"
    result = display_name(name)
    assert len(result) == 13
    assert name.startswith(result)


def test_display_name_long_extension_cuts_plainly():
    name = "x.averyverylongextension"
    result = display_name(name)
    assert result == name[:13]


def test_display_name_trailing_dot_cuts_plainly():
    name = "averyverylongname."
    assert display_name(name) == name[:13]


@pytest.mark.parametrize(
    ("path", "valid"),
    [("/", True), ("/books", True), ("", False), ("books", False)],
)
def test_is_valid_path(path, valid):
    assert is_valid_path(path) is valid


def test_list_directory_sorts_directories_first(tmp_path):
    (tmp_path / "zeta").mkdir()
    (tmp_path / "alpha").mkdir()
    (tmp_path / "b.txt").write_text("hello")
    (tmp_path / "a.pdf").write_bytes(b"12345678")

    items = list_directory(tmp_path)

    assert [item.name for item in items] == ["alpha", "zeta", "a.pdf", "b.txt"]
    assert [item.is_directory for item in items] == [True, True, False, False]
    sizes = {item.name: item.size for item in items}
    assert sizes["a.pdf"] == len(b"12345678")
    assert sizes["b.txt"] == len("hello")


def test_list_directory_skips_hidden_folders_only(tmp_path):
    for folder in ("Config", "logs", "TMP", "System Volume Information", "books"):
        (tmp_path / folder).mkdir()
    (tmp_path / "config").with_name("temp.txt").write_text("x")

    names = [item.name for item in list_directory(tmp_path)]

    assert names == ["books", "temp.txt"]


def test_list_directory_file_named_like_hidden_folder_is_kept(tmp_path):
    (tmp_path / "log").write_text("entries")
    assert [item.name for item in list_directory(tmp_path)] == ["log"]


def test_list_directory_full_paths(tmp_path):
    (tmp_path / "book.txt").write_text("x")
    base = str(tmp_path)

    plain = list_directory(base)
    slashed = list_directory(base + "/")

    assert plain[0].full_path == base + "/book.txt"
    assert slashed[0].full_path == base + "/book.txt"


def test_list_directory_empty(tmp_path):
    assert list_directory(tmp_path) == []


def test_list_directory_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        list_directory(tmp_path / "missing")


def test_list_directory_on_file(tmp_path):
    target = tmp_path / "book.txt"
    target.write_text("x")
    with pytest.raises(NotADirectoryError):
        list_directory(target)