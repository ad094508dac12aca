"""Bounds and biases that shape generated trees."""

import sys
from dataclasses import dataclass
from typing import Tuple, Union

from treefixture.sizes import parse_byte_size
from treefixture.types import GENERATED_FILE_TYPES, FileType

NAME_MAX_BYTES = 255

# Room left for the destination prefix under a typical PATH_MAX of 4096.
PATH_BUDGET_BYTES = 3072

# Longest UTF-8 encoding of a single character.
MAX_CHAR_BYTES = 4

_ON_MACOS = sys.platform == "darwin"


@dataclass(frozen=True)
class GeneratorSettings:
    """Configuration of the tree generator.

    All limits are inclusive. The defaults produce small trees that are quick
    to write and compare. On macOS names default to a printable ASCII alphabet
    compared case-insensitively, because the default filesystem there folds case
    and normalizes Unicode.

    Attributes:
        max_depth: Directory nesting budget below the root. Directories at this
            depth only receive files and symlinks.
        max_fan_out: Maximum number of children drawn for one directory.
        max_name_length: Maximum number of characters in an entry name.
        max_content_size: Maximum regular file size, as bytes or a human-readable
            string such as '4KiB'.
        max_target_length: Maximum number of characters in a random symlink target.
        printable_names: Draw names from [a-z0-9._-] instead of arbitrary Unicode.
        file_types: Kinds of entries to generate.
        file_weight: Relative weight of regular files when drawing a kind.
        directory_weight: Relative weight of directories when drawing a kind.
        symlink_weight: Relative weight of symlinks when drawing a kind.
        name_attempts: Draws allowed for a fresh sibling name before the child is dropped.
        case_insensitive_names: Treat names differing only in case as colliding.
        directory_mode_floor: Permission bits always set on directories.
        file_mode_floor: Permission bits always set on regular files.

    Example:
        >>> settings = GeneratorSettings(max_depth=1, max_content_size="1KiB")
        >>> settings.max_content_bytes
        1024
        >>> GeneratorSettings(max_fan_out=-1)
        Traceback (most recent call last):
            ...
        ValueError: max_fan_out cannot be negative
    """

    max_depth: int = 3
    max_fan_out: int = 6
    max_name_length: int = 16
    max_content_size: Union[str, int] = "4KiB"
    max_target_length: int = 64
    printable_names: bool = _ON_MACOS
    file_types: Tuple[FileType, ...] = GENERATED_FILE_TYPES
    file_weight: int = 4
    directory_weight: int = 3
    symlink_weight: int = 1
    name_attempts: int = 8
    case_insensitive_names: bool = _ON_MACOS
    directory_mode_floor: int = 0o700
    file_mode_floor: int = 0o400

    def __post_init__(self) -> None:
        for field_name in ("max_depth", "max_fan_out", "file_weight", "directory_weight", "symlink_weight"):
            if getattr(self, field_name) < 0:
                raise ValueError(f"{field_name} cannot be negative")
        for field_name in ("max_name_length", "max_target_length", "name_attempts"):
            if getattr(self, field_name) < 1:
                raise ValueError(f"{field_name} must be at least 1")

        object.__setattr__(self, "file_types", tuple(self.file_types))
        unsupported = [kind for kind in self.file_types if kind not in GENERATED_FILE_TYPES]
        if unsupported:
            raise ValueError(f"Cannot generate entries of type {unsupported[0]!r}")

        for field_name in ("directory_mode_floor", "file_mode_floor"):
            if not 0 <= getattr(self, field_name) <= 0o777:
                raise ValueError(f"{field_name} must be a permission value between 0 and 0o777")
        # The lister and the caller's cleanup both need to enter and empty directories.
        if self.directory_mode_floor & 0o700 != 0o700:
            raise ValueError("directory_mode_floor must keep owner read, write and execute bits")
        if self.file_mode_floor & 0o400 != 0o400:
            raise ValueError("file_mode_floor must keep the owner read bit")

        if self.max_name_bytes > NAME_MAX_BYTES:
            raise ValueError(f"max_name_length allows names longer than {NAME_MAX_BYTES} bytes")
        if (self.max_depth + 1) * (self.max_name_bytes + 1) > PATH_BUDGET_BYTES:
            raise ValueError("max_depth and max_name_length allow paths that are too long")

        # Parse eagerly so an invalid size fails at construction time.
        parse_byte_size(self.max_content_size)

    @property
    def max_content_bytes(self) -> int:
        """The content size limit in bytes."""
        return parse_byte_size(self.max_content_size)

    @property
    def max_name_bytes(self) -> int:
        """Worst-case encoded length of a generated name."""
        if self.printable_names:
            return self.max_name_length
        return self.max_name_length * MAX_CHAR_BYTES

    def kind_weights(self, allow_directories: bool) -> Tuple[Tuple[FileType, int], ...]:
        """Return the (kind, weight) pairs that may be drawn at a node."""
        weights = {
            FileType.FILE: self.file_weight,
            FileType.DIRECTORY: self.directory_weight if allow_directories else 0,
            FileType.SYMLINK: self.symlink_weight,
        }
        return tuple((kind, weights[kind]) for kind in GENERATED_FILE_TYPES if kind in self.file_types)
