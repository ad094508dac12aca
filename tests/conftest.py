"""Test configuration and fixtures for treefixture."""

import os

import pytest

from treefixture.tree_model.entry import Entry


def pytest_addoption(parser):
    """Add custom command-line options for tests."""
    parser.addoption(
        "--seeds", action="store", type=int, default=20, help="Number of seeds for randomized tree tests"
    )


def pytest_generate_tests(metafunc):
    """Parametrize tests taking a 'seed' argument over --seeds seeds."""
    if "seed" in metafunc.fixturenames:
        metafunc.parametrize("seed", range(metafunc.config.getoption("--seeds")))


@pytest.fixture
def non_root():
    """Skip tests that rely on permission checks, which root bypasses."""
    if hasattr(os, "geteuid") and os.geteuid() == 0:
        pytest.skip("root bypasses permission checks")


@pytest.fixture
def sample_tree():
    """Root with directory 'a' holding file 'b' (bytes 01 02, mode 644) and symlink 'c' -> 'a/b'."""
    root = Entry.directory("", 0o755)
    a = Entry.directory("a", 0o755, parent=root)
    Entry.file("b", b"\x01\x02", 0o644, parent=a)
    Entry.symlink("c", "a/b", parent=root)
    return root
