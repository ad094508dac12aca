from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from treefixture.tree_walker.comparison import ListingComparison


class GenerationExhaustion(Exception):
    """
    Exception raised when a randomness source runs out of values.

    The generator consumes values until the tree is complete. A source with a
    finite supply (a fixed byte buffer, or a seeded source with a draw budget)
    raises this exception when asked for more than it can give. The exception is
    never retried by this package: producing another tree needs a fresh source.

    Attributes:
        draws (int): Number of values successfully drawn before exhaustion.

    Example:
        >>> error = GenerationExhaustion(12)
        >>> str(error)
        'Randomness source exhausted after 12 draws'
    """

    def __init__(self, draws: int) -> None:
        """
        Initialize the exception with the number of completed draws.

        Args:
            draws (int): Number of values drawn before the source ran dry.
        """
        self.draws = draws
        super().__init__(f"Randomness source exhausted after {draws} draws")


class FilesystemError(Exception):
    """
    Exception raised when a filesystem operation fails while materializing or listing a tree.

    Every OS-level failure (permission denied, path too long, disk full, a path
    disappearing mid-traversal) is wrapped in this exception with the offending
    path attached. The original OSError is chained as ``__cause__``. Failures are
    never retried and never swallowed.

    Attributes:
        path (str): Path on which the operation failed.
        errno (Optional[int]): The errno of the underlying OSError, if any.

    Example:
        >>> error = FilesystemError("/tmp/root/a", "Cannot create directory", FileExistsError(17, "File exists"))
        >>> str(error)
        'Cannot create directory: /tmp/root/a (File exists)'
        >>> error.errno
        17
    """

    def __init__(self, path: str, message: str, cause: Optional[OSError] = None) -> None:
        """
        Initialize the exception with the failing path.

        Args:
            path (str): Path on which the operation failed.
            message (str): Short description of the failed operation.
            cause (Optional[OSError]): The underlying OS error, used to fill in errno.
        """
        self.path = str(path)
        self.errno = cause.errno if cause is not None else None
        detail = f" ({cause.strerror or cause})" if cause is not None else ""
        super().__init__(f"{message}: {self.path}{detail}")


class ListingMismatchError(AssertionError):
    """
    Exception raised by assert_listings_equal when two tree listings differ.

    Attributes:
        comparison (ListingComparison): The comparison result describing the first difference.
    """

    def __init__(self, comparison: "ListingComparison") -> None:
        self.comparison = comparison
        super().__init__(comparison.describe())
