"""Unit tests for GeneratorSettings."""

import pytest

from treefixture.tree_model.settings import GeneratorSettings
from treefixture.types import FileType


def test_defaults_are_valid():
    settings = GeneratorSettings()
    assert settings.max_content_bytes == 4096
    assert set(settings.file_types) == {FileType.FILE, FileType.DIRECTORY, FileType.SYMLINK}


def test_integer_content_size():
    assert GeneratorSettings(max_content_size=0).max_content_bytes == 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_depth": -1},
        {"max_fan_out": -1},
        {"symlink_weight": -1},
        {"max_name_length": 0},
        {"max_target_length": 0},
        {"name_attempts": 0},
        {"max_content_size": "lots"},
        {"directory_mode_floor": 0o500},
        {"file_mode_floor": 0o200},
        {"file_mode_floor": 0o1777},
        {"file_types": (FileType.OTHER,)},
    ],
)
def test_invalid_settings(overrides):
    with pytest.raises(ValueError):
        GeneratorSettings(**overrides)


def test_name_length_bounded_by_name_max():
    GeneratorSettings(printable_names=True, max_name_length=255)
    with pytest.raises(ValueError, match="255 bytes"):
        GeneratorSettings(printable_names=False, max_name_length=64)


def test_path_length_bounded():
    with pytest.raises(ValueError, match="too long"):
        GeneratorSettings(printable_names=True, max_name_length=200, max_depth=20)


def test_file_types_become_tuple():
    settings = GeneratorSettings(file_types=[FileType.FILE])
    assert settings.file_types == (FileType.FILE,)


def test_kind_weights():
    settings = GeneratorSettings(file_weight=2, directory_weight=5, symlink_weight=1)
    assert settings.kind_weights(allow_directories=True) == (
        (FileType.FILE, 2),
        (FileType.DIRECTORY, 5),
        (FileType.SYMLINK, 1),
    )
    assert dict(settings.kind_weights(allow_directories=False))[FileType.DIRECTORY] == 0


def test_kind_weights_respect_file_types():
    settings = GeneratorSettings(file_types=(FileType.SYMLINK,))
    assert settings.kind_weights(allow_directories=True) == ((FileType.SYMLINK, 1),)
