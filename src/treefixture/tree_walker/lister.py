"""Canonical listing of directory trees.

This module provides the DirectoryLister class and the list_dir_all() function,
which walk a directory tree and describe every entry in a form that can be
compared with the listing of another tree.
"""

import hashlib
import logging
import os
import stat
from pathlib import Path
from typing import Iterator, List, Optional

from treefixture.exceptions import FilesystemError
from treefixture.exclusion_rules.base_rules import BaseExclusionRules
from treefixture.tree_walker.listed_entry import ListedEntry, sort_listing
from treefixture.types import FileType, PathType

logger = logging.getLogger(__name__)


class DirectoryLister:
    """Recursive lister producing an order-independent view of a directory tree.

    Every entry below the root is reported with its path relative to the root,
    its kind, its permission bits, and the content of regular files or the
    literal target of symlinks. The root itself is not reported, so two trees
    rooted at different places list identically when their contents match.

    Symbolic Link Behavior:
        Symlinks are never followed. Each symlink is a leaf carrying the string
        returned by readlink, so cycles and dangling links need no special care.
        Only the root path itself is resolved if it is a symlink.

    Error Handling:
        Listing is all-or-nothing. Any OSError during traversal (permission
        denied, an entry vanishing, an unreadable file) raises FilesystemError
        with the offending path; no partial listing is returned.

    Attributes:
        root_path (Path): The directory to list.
        exclusion_rules (Optional[BaseExclusionRules]): Rules for leaving entries out.
            Excluded directories are not descended into.
        include_permissions (bool): Whether to record permission bits.
        digest (Optional[str]): Name of a hashlib algorithm; when set, file
            content is replaced by its hex digest.

    Example:
        >>> import tempfile, os
        >>> with tempfile.TemporaryDirectory() as tmp:
        ...     os.mkdir(os.path.join(tmp, "a"))
        ...     os.symlink("a/missing", os.path.join(tmp, "link"))
        ...     [entry.relative_path for entry in DirectoryLister(tmp).list()]
        ['a', 'link']
    """

    def __init__(
        self,
        root_path: PathType,
        exclusion_rules: Optional[BaseExclusionRules] = None,
        include_permissions: bool = True,
        digest: Optional[str] = None,
    ) -> None:
        """Initialize a DirectoryLister.

        Raises:
            ValueError: If digest is not an algorithm known to hashlib.
        """
        if digest is not None and digest not in hashlib.algorithms_available:
            raise ValueError(f"Unknown digest algorithm: {digest}")
        self.root_path = Path(root_path)
        self.exclusion_rules = exclusion_rules
        self.include_permissions = include_permissions
        self.digest = digest

    def list(self) -> List[ListedEntry]:
        """Return all entries below the root in canonical order.

        Raises:
            FilesystemError: If the root does not exist or any entry cannot be read.
        """
        entries = sort_listing(self.iter_entries())
        logger.debug("Listed %d entries under %s", len(entries), self.root_path)
        return entries

    def iter_entries(self) -> Iterator[ListedEntry]:
        """Iterate over the entries below the root, directory by directory.

        Siblings are visited in sorted name order, but the overall order is only
        canonical after sorting; use list() for comparisons.
        """
        try:
            root_stat = os.stat(self.root_path)
        except OSError as e:
            raise FilesystemError(str(self.root_path), "Cannot list", e) from e

        if not stat.S_ISDIR(root_stat.st_mode):
            return
        yield from self._walk(self.root_path, "")

    def _walk(self, path: Path, relative_path: str) -> Iterator[ListedEntry]:
        try:
            names = sorted(os.listdir(path))
        except OSError as e:
            raise FilesystemError(str(path), "Cannot read directory", e) from e

        for name in names:
            child_path = path / name
            child_relative_path = f"{relative_path}/{name}" if relative_path else name
            try:
                st = os.lstat(child_path)
            except OSError as e:
                raise FilesystemError(str(child_path), "Cannot stat", e) from e

            is_dir = stat.S_ISDIR(st.st_mode)
            if self._excluded(child_relative_path, is_dir):
                continue
            yield self._describe(child_path, child_relative_path, st)
            if is_dir:
                yield from self._walk(child_path, child_relative_path)

    def _excluded(self, relative_path: str, is_dir: bool) -> bool:
        if self.exclusion_rules is None:
            return False
        if self.exclusion_rules.exclude(relative_path):
            return True
        # Patterns like "build/" only match paths carrying a trailing slash
        return is_dir and self.exclusion_rules.exclude(relative_path + "/")

    def _describe(self, path: Path, relative_path: str, st: os.stat_result) -> ListedEntry:
        permissions = stat.S_IMODE(st.st_mode) if self.include_permissions else None

        if stat.S_ISLNK(st.st_mode):
            try:
                target = os.readlink(path)
            except OSError as e:
                raise FilesystemError(str(path), "Cannot read symlink", e) from e
            return ListedEntry(relative_path, FileType.SYMLINK, target=target)

        if stat.S_ISDIR(st.st_mode):
            return ListedEntry(relative_path, FileType.DIRECTORY, permissions)

        if stat.S_ISREG(st.st_mode):
            try:
                with open(path, "rb") as f:
                    content = f.read()
            except OSError as e:
                raise FilesystemError(str(path), "Cannot read file", e) from e
            if self.digest is not None:
                return ListedEntry(
                    relative_path,
                    FileType.FILE,
                    permissions,
                    digest=hashlib.new(self.digest, content).hexdigest(),
                )
            return ListedEntry(relative_path, FileType.FILE, permissions, content=content)

        return ListedEntry(relative_path, FileType.OTHER, permissions)


def list_dir_all(
    root_path: PathType,
    exclusion_rules: Optional[BaseExclusionRules] = None,
    include_permissions: bool = True,
    digest: Optional[str] = None,
) -> List[ListedEntry]:
    """List every entry below root_path in canonical order.

    See DirectoryLister for the meaning of the arguments.

    Raises:
        FilesystemError: If the root does not exist or any entry cannot be read.
    """
    return DirectoryLister(root_path, exclusion_rules, include_permissions, digest).list()
