"""Exclusion rules using .gitignore pattern syntax."""

from os import PathLike
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from pathspec import PathSpec
from pathspec.patterns import GitWildMatchPattern  # type: ignore

from treefixture.types import PathType

from .base_rules import BaseExclusionRules


class GitIgnoreExclusionRules(BaseExclusionRules):
    """Exclusion rules written as .gitignore patterns.

    Patterns are matched with the pathspec library exactly the way Git matches
    them: globs, directory-only patterns ending in '/', negation with '!',
    '**' and comments are all supported. Later patterns override earlier ones.

    Attributes:
        spec (PathSpec): Compiled pattern matcher from the pathspec library.

    Example:
        >>> rules = GitIgnoreExclusionRules(["*.lock", "cache/"])
        >>> rules.exclude("deep/dir/archive.lock")
        True
        >>> rules.exclude("cache/")
        True
        >>> rules.exclude("cache")
        False
        >>> rules.add_rule("!keep.lock")
        >>> rules.exclude("keep.lock")
        False
    """

    def __init__(
        self,
        patterns: Optional[Iterable[str]] = None,
        rules_files: Optional[Union[PathType, Sequence[PathType]]] = None,
    ) -> None:
        """Initialize the rules.

        Args:
            patterns: Individual .gitignore patterns.
            rules_files: Path(s) of files containing .gitignore patterns, loaded
                after patterns.

        Raises:
            FileNotFoundError: If any rules file does not exist.
        """
        self._lines: List[str] = []
        self._extend(patterns or [])
        if rules_files is not None:
            self.load_rules(rules_files)

    def exclude(self, path: str) -> bool:
        return bool(self.spec.match_file(path))

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """Append the patterns found in one or more .gitignore-style files.

        Raises:
            FileNotFoundError: If any rules file does not exist.
        """
        if isinstance(rules_files, (str, PathLike)):
            rules_files = [rules_files]

        for rules_file in rules_files:
            path = Path(rules_file)
            if not path.exists():
                raise FileNotFoundError(f"Rules file not found: {path}")
            with open(path, "r") as f:
                self._extend(f.read().splitlines())

    def add_rule(self, rule: str) -> None:
        """Append a single .gitignore pattern."""
        self._extend([rule])

    def _extend(self, lines: Iterable[str]) -> None:
        # PathSpec compiles its patterns on construction
        self._lines.extend(lines)
        self.spec = PathSpec.from_lines(GitWildMatchPattern, self._lines)
