"""Permission drawing and clamping for generated entries."""

from typing import Optional

from treefixture.random_source import RandomSource
from treefixture.tree_model.settings import GeneratorSettings
from treefixture.types import FileType

PERMISSION_BITS = 0o777


def clamp_permissions(kind: FileType, mode: int, settings: GeneratorSettings) -> Optional[int]:
    """Restrict a raw mode to the legal range for an entry kind.

    Setuid, setgid and sticky bits are dropped, and the kind's floor is applied
    so the owner can always read files and enter and empty directories.
    Symlinks carry no permissions.

    Example:
        >>> settings = GeneratorSettings()
        >>> oct(clamp_permissions(FileType.DIRECTORY, 0o4055, settings))
        '0o755'
        >>> oct(clamp_permissions(FileType.FILE, 0o044, settings))
        '0o444'
        >>> clamp_permissions(FileType.SYMLINK, 0o777, settings) is None
        True
    """
    if kind is FileType.DIRECTORY:
        return (mode & PERMISSION_BITS) | settings.directory_mode_floor
    if kind is FileType.FILE:
        return (mode & PERMISSION_BITS) | settings.file_mode_floor
    return None


def draw_permissions(source: RandomSource, kind: FileType, settings: GeneratorSettings) -> Optional[int]:
    """Draw a mode for an entry of the given kind. Symlinks draw nothing."""
    if kind is FileType.SYMLINK:
        return None
    return clamp_permissions(kind, source.int_in_range(0, PERMISSION_BITS), settings)
