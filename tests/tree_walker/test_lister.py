"""Unit tests for the DirectoryLister class."""

import hashlib
import os
import socket

import pytest

from treefixture.exceptions import FilesystemError
from treefixture.exclusion_rules.git_rules import GitIgnoreExclusionRules
from treefixture.tree_walker.listed_entry import ListedEntry
from treefixture.tree_walker.lister import DirectoryLister, list_dir_all
from treefixture.types import FileType


@pytest.fixture
def temp_directory(tmp_path):
    # Create a temporary directory structure
    (tmp_path / "dir1").mkdir()
    (tmp_path / "dir1" / "file1.txt").write_bytes(b"one")
    (tmp_path / "dir2").mkdir()
    (tmp_path / "dir2" / "file2.py").write_bytes(b"two")
    (tmp_path / "dir2" / "file2.pyc").write_bytes(b"\x00\xff")
    os.symlink("dir1/file1.txt", tmp_path / "link")
    for path in [tmp_path / "dir1", tmp_path / "dir2"]:
        os.chmod(path, 0o755)
    for path in [tmp_path / "dir1" / "file1.txt", tmp_path / "dir2" / "file2.py", tmp_path / "dir2" / "file2.pyc"]:
        os.chmod(path, 0o644)
    return tmp_path


def test_lister_initialization(temp_directory):
    lister = DirectoryLister(str(temp_directory))
    assert lister.root_path == temp_directory
    assert lister.exclusion_rules is None
    assert lister.include_permissions
    assert lister.digest is None


def test_list_dir_all(temp_directory):
    assert list_dir_all(temp_directory) == [
        ListedEntry("dir1", FileType.DIRECTORY, 0o755),
        ListedEntry("dir1/file1.txt", FileType.FILE, 0o644, content=b"one"),
        ListedEntry("dir2", FileType.DIRECTORY, 0o755),
        ListedEntry("dir2/file2.py", FileType.FILE, 0o644, content=b"two"),
        ListedEntry("dir2/file2.pyc", FileType.FILE, 0o644, content=b"\x00\xff"),
        ListedEntry("link", FileType.SYMLINK, target="dir1/file1.txt"),
    ]


def test_root_not_listed(temp_directory):
    assert all(entry.relative_path for entry in list_dir_all(temp_directory))


def test_empty_directory(tmp_path):
    assert list_dir_all(tmp_path) == []


def test_without_permissions(temp_directory):
    assert all(entry.permissions is None for entry in list_dir_all(temp_directory, include_permissions=False))


def test_digest(temp_directory):
    listing = list_dir_all(temp_directory, digest="sha256")
    file_entry = next(entry for entry in listing if entry.relative_path == "dir1/file1.txt")
    assert file_entry.content is None
    assert file_entry.digest == hashlib.sha256(b"one").hexdigest()


def test_unknown_digest():
    with pytest.raises(ValueError, match="Unknown digest"):
        DirectoryLister(".", digest="not-a-hash")


def test_exclusion_rules(temp_directory):
    rules = GitIgnoreExclusionRules(["*.pyc", "dir1/"])
    paths = [entry.relative_path for entry in list_dir_all(temp_directory, exclusion_rules=rules)]
    assert paths == ["dir2", "dir2/file2.py", "link"]


def test_exclusion_rules_from_file_and_added_rule(tmp_path):
    (tmp_path / "root").mkdir()
    root = tmp_path / "root"
    (root / "keep").write_bytes(b"k")
    (root / "drop.lock").write_bytes(b"d")
    (root / "old.bak").write_bytes(b"b")
    rules_file = tmp_path / "ignore"
    rules_file.write_text("*.lock\n")

    rules = GitIgnoreExclusionRules(rules_files=rules_file)
    assert [entry.relative_path for entry in list_dir_all(root, exclusion_rules=rules)] == ["keep", "old.bak"]

    rules.add_rule("*.bak")
    assert [entry.relative_path for entry in list_dir_all(root, exclusion_rules=rules)] == ["keep"]


def test_symlinks_not_followed(tmp_path):
    (tmp_path / "real").mkdir()
    (tmp_path / "real" / "inside").write_bytes(b"x")
    os.symlink("real", tmp_path / "alias")
    os.symlink(".", tmp_path / "real" / "loop")

    paths = [entry.relative_path for entry in list_dir_all(tmp_path)]
    assert paths == ["alias", "real", "real/inside", "real/loop"]


def test_dangling_symlink(tmp_path):
    os.symlink("does/not/exist", tmp_path / "dangling")
    assert list_dir_all(tmp_path) == [ListedEntry("dangling", FileType.SYMLINK, target="does/not/exist")]


def test_symlink_to_directory_root_is_resolved(temp_directory, tmp_path_factory):
    link = tmp_path_factory.mktemp("links") / "root_link"
    os.symlink(temp_directory, link)
    assert list_dir_all(link) == list_dir_all(temp_directory)


def test_file_root_lists_nothing(temp_directory):
    assert list_dir_all(temp_directory / "dir1" / "file1.txt") == []


def test_missing_root(tmp_path):
    with pytest.raises(FilesystemError) as exc_info:
        list_dir_all(tmp_path / "missing")
    assert exc_info.value.path == str(tmp_path / "missing")


def test_unix_socket_listed_as_other(tmp_path):
    if not hasattr(socket, "AF_UNIX"):
        pytest.skip("no unix sockets")
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM)
    try:
        sock.bind(str(tmp_path / "sock"))
        (entry,) = list_dir_all(tmp_path)
    finally:
        sock.close()
    assert entry.kind is FileType.OTHER
    assert entry.content is None


def test_fifo_listed_as_other(tmp_path):
    if not hasattr(os, "mkfifo"):
        pytest.skip("no fifos")
    os.mkfifo(tmp_path / "fifo", 0o600)
    assert list_dir_all(tmp_path) == [ListedEntry("fifo", FileType.OTHER, 0o600)]


def test_unreadable_file_fails_whole_listing(temp_directory, non_root):
    target = temp_directory / "dir2" / "file2.py"
    os.chmod(target, 0o000)
    try:
        with pytest.raises(FilesystemError) as exc_info:
            list_dir_all(temp_directory)
        assert exc_info.value.path == str(target)
    finally:
        os.chmod(target, 0o644)


def test_unreadable_directory_fails_whole_listing(temp_directory, non_root):
    target = temp_directory / "dir1"
    os.chmod(target, 0o000)
    try:
        with pytest.raises(FilesystemError, match="Cannot read directory"):
            list_dir_all(temp_directory)
    finally:
        os.chmod(target, 0o755)


def test_native_order_does_not_matter(tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    names = ["b", "a", "c", "a-b", "B"]
    for root, order in [(first, names), (second, list(reversed(names)))]:
        root.mkdir()
        for name in order:
            (root / name).write_bytes(name.encode())
            os.chmod(root / name, 0o644)
    assert list_dir_all(first) == list_dir_all(second)


def test_iter_entries_matches_list(temp_directory):
    lister = DirectoryLister(temp_directory)
    assert sorted(lister.iter_entries(), key=ListedEntry.sort_key) == lister.list()
