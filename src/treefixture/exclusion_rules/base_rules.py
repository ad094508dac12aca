from abc import ABC, abstractmethod


class BaseExclusionRules(ABC):
    """
    Abstract base class for rules that leave paths out of a tree listing.

    Some entries legitimately differ between an original tree and its
    reconstruction (lock files written by the code under test, platform
    metadata such as .DS_Store). Exclusion rules let the lister skip them on
    both sides of a comparison.

    Example:
        >>> class SkipHidden(BaseExclusionRules):
        ...     def exclude(self, path: str) -> bool:
        ...         return path.rsplit("/", 1)[-1].startswith(".")
        >>> rules = SkipHidden()
        >>> rules.exclude("a/.DS_Store")
        True
        >>> rules.exclude("a/b")
        False
    """

    @abstractmethod
    def exclude(self, path: str) -> bool:
        """
        Determine if a path should be left out of the listing.

        Args:
            path (str): POSIX path relative to the listed root. Directories are
                checked both without and with a trailing slash.

        Returns:
            bool: True if the path should be excluded, False otherwise.
        """
        pass
