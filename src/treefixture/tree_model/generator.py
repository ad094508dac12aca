"""Randomized generation of directory trees.

This module provides the TreeGenerator class, which turns the values handed out
by a RandomSource into an Entry tree. Generation is pure: nothing touches the
filesystem until the tree is passed to materialize().
"""

import logging
from typing import List, Optional, Set

from treefixture.random_source import RandomSource
from treefixture.tree_model.entry import Entry
from treefixture.tree_model.names import draw_target, draw_unique_name, name_key
from treefixture.tree_model.permissions import draw_permissions
from treefixture.tree_model.settings import GeneratorSettings
from treefixture.types import FileType

logger = logging.getLogger(__name__)


class TreeGenerator:
    """Generator of bounded, randomized directory trees.

    Each directory draws how many children it gets (at most max_fan_out), then
    for each child a kind, a name, permissions and content or a symlink target.
    Directories are only drawn while the depth budget lasts, so generation
    always terminates. Names that are reserved or collide with a sibling are
    redrawn a bounded number of times; a child whose attempts all fail is
    dropped.

    The resulting tree depends only on the sequence of values drawn from the
    source. GenerationExhaustion raised by the source propagates unchanged.

    Attributes:
        settings (GeneratorSettings): Bounds and biases of generated trees.

    Example:
        >>> from treefixture.random_source import SeededRandomSource
        >>> generator = TreeGenerator(GeneratorSettings(max_depth=2, max_fan_out=4))
        >>> tree = generator.generate(SeededRandomSource(1))
        >>> tree.kind
        <FileType.DIRECTORY: 'directory'>
        >>> all(len(entry.children) <= 4 for entry in tree.iter_entries())
        True
    """

    def __init__(self, settings: Optional[GeneratorSettings] = None) -> None:
        self.settings = settings if settings is not None else GeneratorSettings()

    def generate(self, source: RandomSource) -> Entry:
        """Generate a tree.

        Args:
            source: Supplier of every random decision.

        Returns:
            The root directory of the generated tree.

        Raises:
            GenerationExhaustion: If the source runs out of values.
        """
        root_permissions = draw_permissions(source, FileType.DIRECTORY, self.settings)
        root = Entry.directory("", root_permissions)  # type: ignore[arg-type]
        generated: List[str] = []
        self._fill_directory(root, source, self.settings.max_depth, generated)
        logger.debug("Generated tree with %d entries", len(generated))
        return root

    def _fill_directory(self, directory: Entry, source: RandomSource, depth_budget: int, generated: List[str]) -> None:
        kind_weights = self.settings.kind_weights(allow_directories=depth_budget > 0)
        if not any(weight > 0 for _, weight in kind_weights):
            return

        taken: Set[str] = set()
        num_children = source.int_in_range(0, self.settings.max_fan_out)
        for _ in range(num_children):
            kind = source.weighted_choice(kind_weights)
            name = draw_unique_name(source, self.settings, taken)
            if name is None:
                continue
            taken.add(name_key(name, self.settings))

            if kind is FileType.DIRECTORY:
                child = Entry.directory(
                    name,
                    draw_permissions(source, kind, self.settings),  # type: ignore[arg-type]
                    parent=directory,
                )
                generated.append(child.relative_path)
                self._fill_directory(child, source, depth_budget - 1, generated)
            elif kind is FileType.FILE:
                permissions = draw_permissions(source, kind, self.settings)
                content = source.byte_string(self.settings.max_content_bytes)
                child = Entry.file(name, content, permissions, parent=directory)  # type: ignore[arg-type]
                generated.append(child.relative_path)
            else:
                target = draw_target(source, self.settings, generated, directory.relative_path)
                child = Entry.symlink(name, target, parent=directory)
                generated.append(child.relative_path)


def generate(source: RandomSource, settings: Optional[GeneratorSettings] = None) -> Entry:
    """Generate a tree from source with the given (or default) settings.

    Example:
        >>> from treefixture.random_source import SeededRandomSource
        >>> first = generate(SeededRandomSource(3))
        >>> second = generate(SeededRandomSource(3))
        >>> first.expected_listing() == second.expected_listing()
        True
    """
    return TreeGenerator(settings).generate(source)
