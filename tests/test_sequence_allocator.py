import pytest

from adnamer.models.naming import Multiplier
from adnamer.services.sequence_allocator import (
    SequenceAllocator,
    allocate_sequence,
    format_sequence,
    parse_sequence,
)


def test_allocates_one_past_highest_existing():
    existing = ["100007.TTS.0.BestDeal.30sec.mp4", "100009.TTS.0.WinBronco.15sec.mp4"]
    assert allocate_sequence("1000", existing, starting_sequence=1) == 10


def test_no_match_returns_starting_sequence():
    assert allocate_sequence("3000", [], starting_sequence=1) == 1
    assert allocate_sequence("3000", ["100004.TTS.0.Ad.5sec.mp4", "notes.txt"], starting_sequence=7) == 7


def test_starting_sequence_wins_when_higher():
    assert allocate_sequence("2000", ["200003.TTS.0.Ad.5sec.mp4"], starting_sequence=20) == 20


def test_multipliers_do_not_share_sequences():
    existing = ["100005.TTS.0.Ad.5sec.mp4", "000112.0.Ad.5sec.mp4"]
    assert allocate_sequence(Multiplier.END_OF_SWEEPS, existing) == 13
    assert allocate_sequence(Multiplier.EVERGREEN, existing) == 6
    assert allocate_sequence(Multiplier.TRIPLE, existing) == 1


def test_accumulating_allocator_never_repeats_within_batch():
    allocator = SequenceAllocator(["100007.TTS.0.Ad.5sec.mp4"], starting_sequence=1)
    first = allocator.allocate("1000")
    second = allocator.allocate("1000")
    other = allocator.allocate("3000")
    assert (first, second, other) == (8, 9, 1)


def test_accumulating_allocator_many_items():
    allocator = SequenceAllocator([], starting_sequence=3)
    allocated = [allocator.allocate(Multiplier.DOUBLE) for _ in range(12)]
    assert allocated == list(range(3, 15))


def test_format_sequence_pads_without_truncating():
    assert format_sequence(5) == "05"
    assert format_sequence(5, width=4) == "0005"
    assert format_sequence(123, width=2) == "123"
    with pytest.raises(ValueError):
        format_sequence(-1)


def test_parse_sequence():
    assert parse_sequence("3000", "300012.TTS.9.Ad.20sec.mp4") == 12
    assert parse_sequence("3000", "200012.TTS.9.Ad.20sec.mp4") is None
    assert parse_sequence("3000", "") is None
