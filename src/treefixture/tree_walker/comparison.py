"""Equality of tree listings with a report of the first difference."""

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from treefixture.exceptions import ListingMismatchError
from treefixture.sizes import describe_size
from treefixture.tree_walker.listed_entry import ListedEntry, sort_listing

DEFAULT_PERMISSION_MASK = 0o7777


@dataclass(frozen=True)
class ListingComparison:
    """Result of comparing two listings.

    Truthy when the listings are equal. When they differ, first_difference is
    the smallest relative path (in canonical order) at which they disagree, and
    left/right hold the entries found there (None when the path is missing on
    that side).
    """

    equal: bool
    first_difference: Optional[str] = None
    left: Optional[ListedEntry] = None
    right: Optional[ListedEntry] = None
    reason: str = ""

    def __bool__(self) -> bool:
        return self.equal

    def describe(self) -> str:
        """Human-readable summary of the comparison."""
        if self.equal:
            return "Listings are equal"
        return f"Listings differ at {self.first_difference!r}: {self.reason}"


def _masked(permissions: Optional[int], mask: int) -> Optional[int]:
    return permissions & mask if permissions is not None else None


def _difference(left: ListedEntry, right: ListedEntry, permission_mask: int, compare_permissions: bool) -> str:
    """Describe how two entries at the same path differ, or return '' if they match."""
    if left.kind is not right.kind:
        return f"kind {left.kind.value} != {right.kind.value}"
    if compare_permissions:
        left_mode = _masked(left.permissions, permission_mask)
        right_mode = _masked(right.permissions, permission_mask)
        if left_mode != right_mode:
            return f"permissions {_format_mode(left_mode)} != {_format_mode(right_mode)}"
    if left.target != right.target:
        return f"symlink target {left.target!r} != {right.target!r}"
    if left.content != right.content:
        if left.content is not None and right.content is not None and len(left.content) != len(right.content):
            return f"content size {describe_size(len(left.content))} != {describe_size(len(right.content))}"
        return "content differs"
    if left.digest != right.digest:
        return f"content digest {left.digest} != {right.digest}"
    return ""


def _format_mode(mode: Optional[int]) -> str:
    return "none" if mode is None else oct(mode)


def compare_listings(
    left: Sequence[ListedEntry],
    right: Sequence[ListedEntry],
    permission_mask: int = DEFAULT_PERMISSION_MASK,
    compare_permissions: bool = True,
) -> ListingComparison:
    """Compare two listings entry by entry in canonical order.

    Entries are matched on relative path, then compared on kind, permission
    bits selected by permission_mask, and content (or digest) or symlink
    target. The comparison is symmetric: swapping the arguments reports the
    same first differing path.

    Args:
        left: First listing.
        right: Second listing.
        permission_mask: Permission bits taken into account, e.g. 0o700 to
            compare only the owner's bits.
        compare_permissions: Set to False to ignore permissions entirely.

    Returns:
        The comparison result.

    Example:
        >>> from treefixture.types import FileType
        >>> a = [ListedEntry("x", FileType.FILE, 0o644, content=b"1")]
        >>> b = [ListedEntry("x", FileType.FILE, 0o600, content=b"1")]
        >>> compare_listings(a, b).describe()
        "Listings differ at 'x': permissions 0o644 != 0o600"
        >>> bool(compare_listings(a, b, permission_mask=0o700))
        True
    """
    left_sorted = sort_listing(left)
    right_sorted = sort_listing(right)

    i = j = 0
    while i < len(left_sorted) or j < len(right_sorted):
        left_entry = left_sorted[i] if i < len(left_sorted) else None
        right_entry = right_sorted[j] if j < len(right_sorted) else None

        if left_entry is not None and (right_entry is None or left_entry.sort_key() < right_entry.sort_key()):
            return ListingComparison(False, left_entry.relative_path, left_entry, None, "missing on the right")
        if right_entry is not None and (left_entry is None or right_entry.sort_key() < left_entry.sort_key()):
            return ListingComparison(False, right_entry.relative_path, None, right_entry, "missing on the left")
        assert left_entry is not None and right_entry is not None

        reason = _difference(left_entry, right_entry, permission_mask, compare_permissions)
        if reason:
            return ListingComparison(False, left_entry.relative_path, left_entry, right_entry, reason)
        i += 1
        j += 1

    return ListingComparison(True)


def assert_listings_equal(left: Sequence[ListedEntry], right: Sequence[ListedEntry], **options: Any) -> None:
    """Raise ListingMismatchError if the listings differ.

    Accepts the keyword arguments of compare_listings().

    Raises:
        ListingMismatchError: If the listings are not equal.
    """
    comparison = compare_listings(left, right, **options)
    if not comparison:
        raise ListingMismatchError(comparison)
