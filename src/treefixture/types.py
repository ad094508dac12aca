from enum import Enum
from os import PathLike
from typing import Union

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]


class FileType(Enum):
    """Enumeration of the kinds of entries a tree can hold.

    The generator only produces FILE, DIRECTORY and SYMLINK entries. OTHER is
    reported by the lister for FIFOs, sockets and device nodes it finds on disk.

    Attributes:
        FILE: Regular file
        DIRECTORY: Directory
        SYMLINK: Symbolic link
        OTHER: Any other file type (FIFO, socket, block or character device)
    """

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"


GENERATED_FILE_TYPES = (FileType.FILE, FileType.DIRECTORY, FileType.SYMLINK)
