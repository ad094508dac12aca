"""Human-readable size handling for generator limits and mismatch reports."""

from typing import Union

from humanfriendly import format_size, parse_size


def parse_byte_size(size: Union[str, int]) -> int:
    """Parse a size limit to bytes.

    Args:
        size: Size as an integer number of bytes or a human-readable string
            like '4KiB', '1MB', '512'.

    Returns:
        Size in bytes

    Raises:
        ValueError: If size is negative or not a valid size format

    Example:
        >>> parse_byte_size('4KiB')
        4096
        >>> parse_byte_size(10)
        10
    """
    if isinstance(size, bool):
        raise ValueError(f"size must be string or int, got {type(size)}")
    if isinstance(size, int):
        if size < 0:
            raise ValueError("Size cannot be negative")
        return size
    if not isinstance(size, str):
        raise ValueError(f"size must be string or int, got {type(size)}")

    try:
        return int(parse_size(size))
    except Exception as e:
        raise ValueError(f"Invalid size format '{size}': {e}") from e


def describe_size(num_bytes: int) -> str:
    """Format a byte count for diagnostics, e.g. '2 bytes' or '4 KiB'."""
    return str(format_size(num_bytes, binary=True))
