"""Randomized directory-tree fixtures and canonical tree listings.

This package generates synthetic directory trees, writes them to disk and
produces comparable listings of directory trees, for testing code that must
round-trip a filesystem subtree (archivers, serializers, sync tools).
"""

from importlib.metadata import PackageNotFoundError, version

from treefixture.exceptions import FilesystemError, GenerationExhaustion, ListingMismatchError
from treefixture.random_source import BufferRandomSource, RandomSource, SeededRandomSource
from treefixture.tree_model.entry import Entry
from treefixture.tree_model.generator import TreeGenerator, generate
from treefixture.tree_model.materializer import materialize, materialized
from treefixture.tree_model.settings import GeneratorSettings
from treefixture.tree_walker.comparison import ListingComparison, assert_listings_equal, compare_listings
from treefixture.tree_walker.listed_entry import ListedEntry
from treefixture.tree_walker.lister import DirectoryLister, list_dir_all
from treefixture.types import FileType

# Expose the version for programmatic use
try:
    __version__ = version("treefixture")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = [
    "BufferRandomSource",
    "DirectoryLister",
    "Entry",
    "FileType",
    "FilesystemError",
    "GenerationExhaustion",
    "GeneratorSettings",
    "ListedEntry",
    "ListingComparison",
    "ListingMismatchError",
    "RandomSource",
    "SeededRandomSource",
    "TreeGenerator",
    "assert_listings_equal",
    "compare_listings",
    "generate",
    "list_dir_all",
    "materialize",
    "materialized",
]
