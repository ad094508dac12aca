"""Comparable projection of one on-disk entry."""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from treefixture.types import FileType


def canonical_key(relative_path: str) -> Tuple[str, ...]:
    """Sort key placing paths in canonical order.

    Paths are compared component by component, so a directory always sorts
    immediately before its own descendants.

    Example:
        >>> sorted(["a-b", "a/b", "a"], key=canonical_key)
        ['a', 'a/b', 'a-b']
    """
    return tuple(relative_path.split("/"))


@dataclass(frozen=True)
class ListedEntry:
    """An entry of a tree listing.

    Ownership and timestamps are deliberately absent: they are not expected
    to survive a round trip through the code under test.

    Attributes:
        relative_path: POSIX path relative to the listed root.
        kind: Kind of the entry. Symlinks are never dereferenced.
        permissions: Permission bits of files and directories, or None for
            symlinks and when permissions were not collected.
        content: Full content of a regular file when no digest was requested.
        target: Literal target of a symlink.
        digest: Hex digest of a regular file's content when a digest was requested.

    Example:
        >>> entry = ListedEntry("a/b", FileType.FILE, 0o644, content=b"\\x01\\x02")
        >>> entry.size
        2
        >>> entry.name
        'b'
    """

    relative_path: str
    kind: FileType
    permissions: Optional[int] = None
    content: Optional[bytes] = None
    target: Optional[str] = None
    digest: Optional[str] = None

    @property
    def name(self) -> str:
        """The last component of relative_path."""
        return self.relative_path.rsplit("/", 1)[-1]

    @property
    def size(self) -> Optional[int]:
        """Content length of a file listed with its content, else None."""
        return len(self.content) if self.content is not None else None

    def sort_key(self) -> Tuple[str, ...]:
        return canonical_key(self.relative_path)


def sort_listing(entries: Iterable[ListedEntry]) -> List[ListedEntry]:
    """Return entries in canonical order."""
    return sorted(entries, key=ListedEntry.sort_key)
