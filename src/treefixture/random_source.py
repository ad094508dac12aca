"""Randomness sources that feed the tree generator.

The generator never creates randomness of its own. It asks a RandomSource for
every decision it makes, so a tree is fully determined by the sequence of
values the source hands out. Replaying the same seed (or the same byte buffer)
reproduces the same tree.
"""

import random
from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple, TypeVar

from treefixture.exceptions import GenerationExhaustion

T = TypeVar("T")


class RandomSource(ABC):
    """
    Abstract base class for sources of arbitrary structured values.

    Subclasses implement a single primitive, int_in_range(); every other query
    is derived from it. This keeps the draw sequence of a tree identical across
    implementations and makes exhaustion handling uniform.

    Example:
        >>> source = SeededRandomSource(7)
        >>> value = source.int_in_range(1, 6)
        >>> 1 <= value <= 6
        True
        >>> source.choose(["only"])
        'only'
    """

    @abstractmethod
    def int_in_range(self, low: int, high: int) -> int:
        """
        Draw an integer from the inclusive range [low, high].

        Args:
            low (int): Smallest value that may be returned.
            high (int): Largest value that may be returned.

        Returns:
            int: A value in [low, high].

        Raises:
            ValueError: If low > high.
            GenerationExhaustion: If the source has no values left.
        """
        pass

    def boolean(self) -> bool:
        """Draw a boolean."""
        return self.int_in_range(0, 1) == 1

    def choose(self, items: Sequence[T]) -> T:
        """
        Pick one element of a non-empty sequence, uniformly.

        Raises:
            ValueError: If items is empty.
        """
        if not items:
            raise ValueError("Cannot choose from an empty sequence")
        return items[self.int_in_range(0, len(items) - 1)]

    def weighted_choice(self, weighted: Sequence[Tuple[T, int]]) -> T:
        """
        Pick one value from (value, weight) pairs, proportionally to weight.

        Pairs with a zero weight are never picked.

        Raises:
            ValueError: If no pair has a positive weight, or a weight is negative.
        """
        if any(weight < 0 for _, weight in weighted):
            raise ValueError("Weights cannot be negative")
        total = sum(weight for _, weight in weighted)
        if total <= 0:
            raise ValueError("At least one weight must be positive")

        point = self.int_in_range(0, total - 1)
        for value, weight in weighted:
            if point < weight:
                return value
            point -= weight
        raise AssertionError("unreachable")

    def byte_string(self, max_length: int) -> bytes:
        """Draw a byte string whose length is in [0, max_length]."""
        length = self.int_in_range(0, max_length)
        return bytes(self.int_in_range(0, 255) for _ in range(length))

    def text(self, alphabet: Sequence[str], min_length: int, max_length: int) -> str:
        """Draw a string of characters from alphabet with a length in [min_length, max_length]."""
        length = self.int_in_range(min_length, max_length)
        return "".join(self.choose(alphabet) for _ in range(length))


class SeededRandomSource(RandomSource):
    """
    Randomness source backed by a seeded random.Random instance.

    The seed is kept so that a failing test can report it and be replayed. An
    optional draw budget turns runaway generation into GenerationExhaustion.

    Attributes:
        seed: The seed the underlying generator was initialized with.
        max_draws (Optional[int]): Number of draws allowed, or None for unlimited.
        draws (int): Number of draws made so far.

    Example:
        >>> a = SeededRandomSource(42)
        >>> b = SeededRandomSource(42)
        >>> [a.int_in_range(0, 100) for _ in range(5)] == [b.int_in_range(0, 100) for _ in range(5)]
        True
    """

    def __init__(self, seed: Optional[int] = None, max_draws: Optional[int] = None) -> None:
        """
        Initialize the source.

        Args:
            seed: Seed for the generator. When None, a seed is drawn from the
                system and recorded in the seed attribute.
            max_draws: Maximum number of draws before GenerationExhaustion is raised.

        Raises:
            ValueError: If max_draws is negative.
        """
        if max_draws is not None and max_draws < 0:
            raise ValueError("max_draws cannot be negative")
        if seed is None:
            seed = random.SystemRandom().getrandbits(64)
        self.seed = seed
        self.max_draws = max_draws
        self.draws = 0
        self._random = random.Random(seed)

    def int_in_range(self, low: int, high: int) -> int:
        if low > high:
            raise ValueError(f"Empty range [{low}, {high}]")
        if self.max_draws is not None and self.draws >= self.max_draws:
            raise GenerationExhaustion(self.draws)
        self.draws += 1
        return self._random.randint(low, high)

    def __repr__(self) -> str:
        return f"SeededRandomSource(seed={self.seed!r}, max_draws={self.max_draws!r})"


class BufferRandomSource(RandomSource):
    """
    Randomness source that consumes a fixed byte buffer.

    Each draw takes just enough big-endian bytes to cover the width of the
    requested range and reduces them into it. Degenerate ranges (low == high)
    consume nothing. This is the shape fuzzers expect: any byte string is a valid
    input, and a shorter input describes a smaller tree.

    Attributes:
        draws (int): Number of draws made so far.

    Example:
        >>> source = BufferRandomSource(bytes([3, 250]))
        >>> source.int_in_range(0, 9)
        3
        >>> source.int_in_range(0, 255)
        250
        >>> source.remaining
        0
    """

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._offset = 0
        self.draws = 0

    @property
    def remaining(self) -> int:
        """Number of unconsumed bytes."""
        return len(self._data) - self._offset

    def int_in_range(self, low: int, high: int) -> int:
        if low > high:
            raise ValueError(f"Empty range [{low}, {high}]")
        width = high - low
        if width == 0:
            return low

        num_bytes = (width.bit_length() + 7) // 8
        if self.remaining < num_bytes:
            raise GenerationExhaustion(self.draws)
        chunk = self._data[self._offset : self._offset + num_bytes]  # noqa: E203
        self._offset += num_bytes
        self.draws += 1
        return low + int.from_bytes(chunk, "big") % (width + 1)
