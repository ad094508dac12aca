"""Node representation of a generated directory tree."""

import hashlib
from typing import Any, Dict, Iterator, List, Mapping, Optional

from anytree import ContStyle, Node, PreOrderIter, RenderTree

from treefixture.tree_model.names import is_legal_name
from treefixture.tree_walker.listed_entry import ListedEntry, canonical_key
from treefixture.types import FileType


class Entry(Node):  # type: ignore
    """Node representing a file, directory, or symlink of an in-memory tree.

    Extends anytree.Node with the metadata and content that get written to disk
    by materialize(). Only directories may have children, and the names of the
    children of a directory are unique. The root of a tree is a directory whose
    own name is not used when the tree is written or listed.

    Attributes:
        name (str): Path segment of the entry.
        kind (FileType): FILE, DIRECTORY or SYMLINK.
        permissions (Optional[int]): Permission bits; None for symlinks.
        content (Optional[bytes]): Content of a regular file.
        target (Optional[str]): Literal target of a symlink.
        parent (Optional[Entry]): The containing directory.
        children (tuple[Entry]): Entries of a directory (inherited from anytree.Node).

    Example:
        >>> root = Entry.directory("", 0o755)
        >>> a = Entry.directory("a", 0o755, parent=root)
        >>> b = Entry.file("b", b"\\x01\\x02", 0o644, parent=a)
        >>> c = Entry.symlink("c", "a/b", parent=root)
        >>> b.relative_path
        'a/b'
        >>> [entry.relative_path for entry in root.iter_entries()]
        ['a', 'a/b', 'c']
    """

    def __init__(
        self,
        name: str,
        kind: FileType,
        permissions: Optional[int] = None,
        content: Optional[bytes] = None,
        target: Optional[str] = None,
        parent: Optional["Entry"] = None,
        **kwargs: Any,
    ) -> None:
        """Initialize an Entry.

        Prefer the directory(), file() and symlink() constructors, which fill in
        the fields that belong to each kind.

        Raises:
            ValueError: If the fields do not match the kind, the name is not a
                legal path segment, or a sibling already has the same name.
        """
        if kind is FileType.FILE and content is None:
            raise ValueError("A regular file needs content")
        if kind is not FileType.FILE and content is not None:
            raise ValueError(f"A {kind.value} cannot have content")
        if kind is FileType.SYMLINK and not target:
            raise ValueError("A symlink needs a non-empty target")
        if kind is not FileType.SYMLINK and target is not None:
            raise ValueError(f"A {kind.value} cannot have a target")
        if kind is FileType.SYMLINK and "\x00" in target:  # type: ignore[operator]
            raise ValueError("A symlink target cannot contain NUL")
        if kind is FileType.OTHER:
            raise ValueError("Entries can only be files, directories or symlinks")

        self.kind = kind
        self.permissions = permissions
        self.content = content
        self.target = target
        super().__init__(name, parent, **kwargs)

    @classmethod
    def directory(cls, name: str, permissions: int = 0o755, parent: Optional["Entry"] = None) -> "Entry":
        return cls(name, FileType.DIRECTORY, permissions=permissions, parent=parent)

    @classmethod
    def file(cls, name: str, content: bytes, permissions: int = 0o644, parent: Optional["Entry"] = None) -> "Entry":
        return cls(name, FileType.FILE, permissions=permissions, content=bytes(content), parent=parent)

    @classmethod
    def symlink(cls, name: str, target: str, parent: Optional["Entry"] = None) -> "Entry":
        return cls(name, FileType.SYMLINK, target=target, parent=parent)

    def _pre_attach(self, parent: "Entry") -> None:
        # anytree hook, called before this node is added to parent.children
        if parent.kind is not FileType.DIRECTORY:
            raise ValueError(f"Cannot add {self.name!r} to {parent.kind.value} {parent.relative_path!r}")
        if not is_legal_name(self.name):
            raise ValueError(f"Illegal entry name: {self.name!r}")
        if any(sibling.name == self.name for sibling in parent.children):
            raise ValueError(f"Duplicate entry name {self.name!r} in {parent.relative_path!r}")

    @property
    def is_dir(self) -> bool:
        return self.kind is FileType.DIRECTORY

    @property
    def children_by_name(self) -> Mapping[str, "Entry"]:
        """Children of this directory keyed by name."""
        children: Dict[str, Entry] = {child.name: child for child in self.children}
        return children

    def child(self, name: str) -> "Entry":
        """Return the child called name.

        Raises:
            KeyError: If there is no such child.
        """
        return self.children_by_name[name]

    @property
    def relative_path(self) -> str:
        """POSIX path of this entry relative to the tree root; '' for the root."""
        return "/".join(node.name for node in self.path[1:])

    def iter_entries(self) -> Iterator["Entry"]:
        """Iterate over all descendants in canonical order, excluding this entry."""
        for child in sorted(self.children, key=lambda node: canonical_key(node.name)):
            yield child
            yield from child.iter_entries()

    def count(self) -> int:
        """Number of descendants."""
        return sum(1 for _ in PreOrderIter(self)) - 1

    def depth_below(self) -> int:
        """Height of the subtree rooted at this entry; 0 when it has no children."""
        return int(self.height)

    def to_listed_entry(self, include_permissions: bool = True, digest: Optional[str] = None) -> ListedEntry:
        """Project this entry the way the lister reports it once written to disk."""
        content = self.content
        content_digest = None
        if content is not None and digest is not None:
            content_digest = hashlib.new(digest, content).hexdigest()
            content = None
        return ListedEntry(
            relative_path=self.relative_path,
            kind=self.kind,
            permissions=self.permissions if include_permissions else None,
            content=content,
            target=self.target,
            digest=content_digest,
        )

    def expected_listing(self, include_permissions: bool = True, digest: Optional[str] = None) -> List[ListedEntry]:
        """The listing list_dir_all() produces for this tree after materialize().

        Args:
            include_permissions: Whether to fill in permissions.
            digest: Name of a hashlib algorithm to replace content by its hex digest.
        """
        return [entry.to_listed_entry(include_permissions, digest) for entry in self.iter_entries()]

    def render(self) -> str:
        """Render the tree as text, one entry per line, for diagnostics.

        Example:
            >>> root = Entry.directory("", 0o700)
            >>> _ = Entry.file("f", b"abc", 0o600, parent=root)
            >>> _ = Entry.symlink("l", "f", parent=root)
            >>> print(root.render())
            ./ [700]
            ├── f [600, 3 bytes]
            └── l -> f
        """
        lines = []
        for prefix, _, node in RenderTree(self, style=ContStyle(), childiter=_sorted_children):
            lines.append(f"{prefix}{_describe(node, is_root=node is self)}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Entry({self.relative_path!r}, {self.kind.value})"


def _sorted_children(children: List[Entry]) -> List[Entry]:
    return sorted(children, key=lambda node: canonical_key(node.name))


def _display_name(name: str) -> str:
    return name if name.isprintable() else ascii(name)[1:-1]


def _describe(node: Entry, is_root: bool) -> str:
    name = "." if is_root else _display_name(node.name)
    if node.kind is FileType.DIRECTORY:
        return f"{name}/ [{node.permissions:o}]"
    if node.kind is FileType.SYMLINK:
        return f"{name} -> {_display_name(node.target)}"
    size = len(node.content)
    return f"{name} [{node.permissions:o}, {size} byte{'' if size == 1 else 's'}]"
