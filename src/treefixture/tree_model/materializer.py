"""Writing generated trees to disk."""

import logging
import os
import shutil
import stat
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from treefixture.exceptions import FilesystemError
from treefixture.tree_model.entry import Entry
from treefixture.types import FileType, PathType

logger = logging.getLogger(__name__)


@contextmanager
def _os_errors(path: Path, message: str) -> Iterator[None]:
    try:
        yield
    except OSError as e:
        raise FilesystemError(str(path), message, e) from e


def _prepare_destination(destination: Path) -> None:
    with _os_errors(destination, "Cannot inspect destination"):
        exists = os.path.lexists(destination)
        if exists:
            if destination.is_symlink() or not destination.is_dir():
                raise FilesystemError(str(destination), "Destination is not a directory")
            if os.listdir(destination):
                raise FilesystemError(str(destination), "Destination is not empty")
            return
    with _os_errors(destination, "Cannot create directory"):
        os.mkdir(destination, 0o700)


def _write_entry(entry: Entry, path: Path) -> None:
    if entry.kind is FileType.DIRECTORY:
        with _os_errors(path, "Cannot create directory"):
            os.mkdir(path, 0o700)
        _write_children(entry, path)
    elif entry.kind is FileType.FILE:
        with _os_errors(path, "Cannot write file"):
            with open(path, "xb") as f:
                f.write(entry.content)
            os.chmod(path, entry.permissions)
    else:
        with _os_errors(path, "Cannot create symlink"):
            os.symlink(entry.target, path)


def _write_children(directory: Entry, path: Path) -> None:
    for child in directory.children:
        _write_entry(child, path / child.name)
    # Applied last so a restrictive mode cannot block creating the children.
    with _os_errors(path, "Cannot set permissions"):
        os.chmod(path, directory.permissions)


def materialize(entry: Entry, destination: PathType) -> None:
    """Write a tree under destination.

    Files get their exact content and permissions and symlinks their literal
    target. Permissions are set explicitly, so the process umask has no effect.
    The root's own permissions are applied to destination. A directory's
    permissions are applied only after all of its children exist.

    Nothing is created outside destination. On failure the partially written
    tree is left in place; removing it is up to the caller.

    Args:
        entry: Root of the tree; must be a directory.
        destination: A path that does not exist yet (its parent must) or an
            empty directory.

    Raises:
        ValueError: If entry is not a directory.
        FilesystemError: If any filesystem operation fails, or destination is
            not an empty directory.

    Example:
        >>> import tempfile, os
        >>> root = Entry.directory("", 0o755)
        >>> _ = Entry.file("hello.txt", b"hi", 0o644, parent=root)
        >>> with tempfile.TemporaryDirectory() as tmp:
        ...     materialize(root, os.path.join(tmp, "tree"))
        ...     sorted(os.listdir(os.path.join(tmp, "tree")))
        ['hello.txt']
    """
    if entry.kind is not FileType.DIRECTORY:
        raise ValueError(f"Only a directory can be materialized, got a {entry.kind.value}")

    destination = Path(destination)
    logger.debug("Materializing %d entries under %s", entry.count(), destination)
    _prepare_destination(destination)
    _write_children(entry, destination)


def _make_removable(path: Path) -> None:
    os.chmod(path, stat.S_IRWXU)
    for dirpath, dirnames, _ in os.walk(path):
        for dirname in dirnames:
            child = os.path.join(dirpath, dirname)
            if not os.path.islink(child):
                os.chmod(child, stat.S_IRWXU)


@contextmanager
def materialized(entry: Entry, parent: Optional[PathType] = None) -> Iterator[Path]:
    """Materialize a tree into a fresh temporary directory for the duration of a block.

    The tree is removed on every exit path, including a failed materialize().

    Args:
        entry: Root of the tree; must be a directory.
        parent: Directory in which to create the temporary directory. Defaults
            to the system temporary directory.

    Yields:
        Path of the materialized root.

    Example:
        >>> root = Entry.directory("", 0o700)
        >>> _ = Entry.symlink("dangling", "does/not/exist", parent=root)
        >>> with materialized(root) as path:
        ...     os.readlink(path / "dangling")
        'does/not/exist'
        >>> path.exists()
        False
    """
    workdir = Path(tempfile.mkdtemp(prefix="treefixture-", dir=parent))
    try:
        root = workdir / "root"
        materialize(entry, root)
        yield root
    finally:
        _make_removable(workdir)
        shutil.rmtree(workdir)
