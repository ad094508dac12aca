"""Drawing of entry names and symlink targets."""

import posixpath
import string
from typing import Collection, Optional, Sequence

from treefixture.random_source import RandomSource
from treefixture.tree_model.settings import GeneratorSettings

PRINTABLE_NAME_ALPHABET = string.ascii_lowercase + string.digits + "._-"

RESERVED_NAMES = frozenset({"", ".", ".."})

# Code points excluded from arbitrary names: NUL, the path separator and surrogates.
_SURROGATES = range(0xD800, 0xE000)
_MAX_CODE_POINT = 0x10FFFF


def is_legal_name(name: str) -> bool:
    """Check whether name can be used as a single path segment.

    Example:
        >>> is_legal_name("notes.txt")
        True
        >>> [is_legal_name(name) for name in ("", ".", "..", "a/b", "nul\\x00")]
        [False, False, False, False, False]
    """
    if name in RESERVED_NAMES or "/" in name or "\x00" in name:
        return False
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def name_key(name: str, settings: GeneratorSettings) -> str:
    """Return the key under which sibling names collide."""
    return name.casefold() if settings.case_insensitive_names else name


def _draw_char(source: RandomSource) -> str:
    # Mostly ASCII so that trees stay readable, with arbitrary Unicode mixed in.
    if source.weighted_choice(((True, 3), (False, 1))):
        code_point = source.int_in_range(0x01, 0x7F)
    else:
        code_point = source.int_in_range(0x80, _MAX_CODE_POINT - len(_SURROGATES))
        if code_point >= _SURROGATES.start:
            code_point += len(_SURROGATES)
    if code_point == ord("/"):
        return "_"
    return chr(code_point)


def draw_name(source: RandomSource, settings: GeneratorSettings) -> str:
    """Draw a candidate name. The result may still be reserved or collide with a sibling."""
    if settings.printable_names:
        return source.text(PRINTABLE_NAME_ALPHABET, 1, settings.max_name_length)
    length = source.int_in_range(1, settings.max_name_length)
    return "".join(_draw_char(source) for _ in range(length))


def draw_unique_name(source: RandomSource, settings: GeneratorSettings, taken: Collection[str]) -> Optional[str]:
    """Draw a legal name whose collision key is not in taken.

    Returns:
        The name, or None if every attempt produced a reserved or colliding name.
    """
    for _ in range(settings.name_attempts):
        name = draw_name(source, settings)
        if is_legal_name(name) and name_key(name, settings) not in taken:
            return name
    return None


def _only_dot_segments(target: str) -> bool:
    return all(segment in RESERVED_NAMES for segment in target.split("/"))


def draw_random_target(source: RandomSource, settings: GeneratorSettings) -> str:
    """Draw a non-empty symlink target that need not point anywhere.

    Targets are slash-separated runs of name characters, so they may be
    absolute, relative, contain '.' and '..' segments, or be dangling.
    Targets made only of '.', '..' and slashes would name a directory
    enclosing the link; their last character is replaced by '_'.
    """
    if settings.printable_names:
        alphabet = PRINTABLE_NAME_ALPHABET + "/"
        target = source.text(alphabet, 1, settings.max_target_length)
    else:
        length = source.int_in_range(1, settings.max_target_length)
        chars = []
        for _ in range(length):
            if source.weighted_choice(((True, 1), (False, 5))):
                chars.append("/")
            else:
                chars.append(_draw_char(source))
        target = "".join(chars)

    if _only_dot_segments(target):
        target = target[:-1] + "_"
    return target


def relative_target(target_path: str, link_parent_path: str) -> str:
    """Express a root-relative target path relative to the directory holding the link.

    Example:
        >>> relative_target("a/b", "")
        'a/b'
        >>> relative_target("a/b", "c/d")
        '../../a/b'
    """
    return posixpath.relpath(target_path, link_parent_path or ".")


def draw_target(
    source: RandomSource,
    settings: GeneratorSettings,
    existing_paths: Sequence[str],
    link_parent_path: str,
) -> str:
    """Draw a symlink target for a link placed in link_parent_path.

    Half of the time (when there is anything to point at) the link points at an
    entry generated earlier, expressed relative to the link's directory.
    Directories that contain the link are never chosen, so following links
    would not loop back into the tree. Otherwise a random target is drawn.
    """
    candidates = [
        path
        for path in existing_paths
        if link_parent_path != path and not link_parent_path.startswith(path + "/")
    ]
    if candidates and source.boolean():
        return relative_target(source.choose(candidates), link_parent_path)
    return draw_random_target(source, settings)
