"""Unit tests for the randomness sources."""

import pytest

from treefixture.exceptions import GenerationExhaustion
from treefixture.random_source import BufferRandomSource, RandomSource, SeededRandomSource


class CountingSource(RandomSource):
    """Source returning low every time, recording the ranges asked for."""

    def __init__(self):
        self.requests = []

    def int_in_range(self, low, high):
        self.requests.append((low, high))
        return low


class TestSeededRandomSource:
    def test_same_seed_same_draws(self):
        a = SeededRandomSource(99)
        b = SeededRandomSource(99)
        assert [a.int_in_range(0, 1000) for _ in range(50)] == [b.int_in_range(0, 1000) for _ in range(50)]

    def test_values_within_bounds(self):
        source = SeededRandomSource(5)
        for _ in range(200):
            assert 3 <= source.int_in_range(3, 7) <= 7

    def test_seed_recorded_when_not_given(self):
        source = SeededRandomSource()
        assert isinstance(source.seed, int)
        replay = SeededRandomSource(source.seed)
        assert source.int_in_range(0, 10**9) == replay.int_in_range(0, 10**9)

    def test_draw_budget(self):
        source = SeededRandomSource(1, max_draws=3)
        for _ in range(3):
            source.boolean()
        with pytest.raises(GenerationExhaustion) as exc_info:
            source.boolean()
        assert exc_info.value.draws == 3

    def test_negative_budget_rejected(self):
        with pytest.raises(ValueError):
            SeededRandomSource(1, max_draws=-1)

    def test_empty_range_rejected(self):
        with pytest.raises(ValueError, match="Empty range"):
            SeededRandomSource(1).int_in_range(5, 4)


class TestBufferRandomSource:
    def test_consumes_one_byte_for_small_ranges(self):
        source = BufferRandomSource(bytes([7, 12]))
        assert source.int_in_range(0, 9) == 7
        assert source.int_in_range(0, 9) == 2
        assert source.remaining == 0

    def test_consumes_several_bytes_for_wide_ranges(self):
        source = BufferRandomSource(bytes([0x01, 0x02]))
        assert source.int_in_range(0, 0xFFFF) == 0x0102
        assert source.remaining == 0

    def test_degenerate_range_consumes_nothing(self):
        source = BufferRandomSource(b"")
        assert source.int_in_range(4, 4) == 4
        assert source.draws == 0

    def test_exhaustion(self):
        source = BufferRandomSource(bytes([1]))
        source.int_in_range(0, 10)
        with pytest.raises(GenerationExhaustion) as exc_info:
            source.int_in_range(0, 10)
        assert exc_info.value.draws == 1

    def test_offset_by_low(self):
        assert BufferRandomSource(bytes([3])).int_in_range(10, 20) == 13


class TestDerivedQueries:
    def test_boolean(self):
        assert BufferRandomSource(bytes([1])).boolean() is True
        assert BufferRandomSource(bytes([0])).boolean() is False

    def test_choose(self):
        assert BufferRandomSource(bytes([2])).choose("abcd") == "c"

    def test_choose_empty(self):
        with pytest.raises(ValueError, match="empty"):
            CountingSource().choose([])

    def test_weighted_choice_skips_zero_weights(self):
        source = CountingSource()
        assert source.weighted_choice([("never", 0), ("always", 2)]) == "always"
        assert source.requests == [(0, 1)]

    def test_weighted_choice_proportions(self):
        # point 0..3 -> "a" (weight 4), 4 -> "b" (weight 1)
        picks = [BufferRandomSource(bytes([i])).weighted_choice([("a", 4), ("b", 1)]) for i in range(5)]
        assert picks == ["a", "a", "a", "a", "b"]

    @pytest.mark.parametrize("weights", [[], [("a", 0)], [("a", -1), ("b", 3)]])
    def test_weighted_choice_invalid(self, weights):
        with pytest.raises(ValueError):
            CountingSource().weighted_choice(weights)

    def test_byte_string(self):
        source = BufferRandomSource(bytes([3, 0xFF, 0x00, 0x80]))
        assert source.byte_string(8) == b"\xff\x00\x80"

    def test_byte_string_may_be_empty(self):
        assert CountingSource().byte_string(10) == b""

    def test_text(self):
        source = BufferRandomSource(bytes([1, 0, 2]))
        assert source.text("xyz", 1, 3) == "xz"
