import pytest

from drive_mirror.pipeline.resolver import resolve_folder_path, split_path
from drive_mirror.utils.errors import FolderNotFoundError

from conftest import FakeDrive


@pytest.fixture
def drive():
    d = FakeDrive()
    d.add_folder("root", "a", "Alpha")
    d.add_folder("a", "b", "Beta")
    d.add_file("a", "f", "Gamma")
    return d


@pytest.mark.parametrize("path", ["", "/", "root", " root/ "])
def test_root_aliases(drive, path):
    assert resolve_folder_path(drive, path) == "root"
    assert drive.calls == []


def test_nested_path(drive):
    assert resolve_folder_path(drive, "Alpha/Beta") == "b"
    assert drive.calls == [("find", "Alpha", "root"), ("find", "Beta", "a")]


def test_leading_root_and_empty_segments(drive):
    assert resolve_folder_path(drive, "root//Alpha/") == "a"


def test_files_do_not_match(drive):
    with pytest.raises(FolderNotFoundError, match="/Alpha/Gamma"):
        resolve_folder_path(drive, "Alpha/Gamma")


def test_split_path():
    assert split_path("/a//b/") == ["a", "b"]
