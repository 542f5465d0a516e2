"""Tests for the sorted segment store."""

from __future__ import annotations

import copy
import random

import pytest

from retrofile.errors import OverlappingSegmentError
from retrofile.image import Range, Segment, SegmentStore


def assert_well_formed(store: SegmentStore) -> None:
    ranges = store.ranges
    for current in ranges:
        assert len(current) > 0
    for current, following in zip(ranges, ranges[1:]):
        assert current.end + 1 < following.address, f"{current!r} touches {following!r}"


def test_first_segment_opens_a_range() -> None:
    store = SegmentStore()

    store.insert(Segment(0x0200, b"\x01\x02\x03"))

    assert store.ranges == (Range(0x0200, bytearray(b"\x01\x02\x03"), 1),)
    assert store.data_bytes == 3
    assert store.segment_count == 1


def test_zero_length_segment_is_ignored() -> None:
    store = SegmentStore()

    store.insert(Segment(0x0200, b""))

    assert len(store) == 0
    assert store.data_bytes == 0
    assert store.segment_count == 0


def test_segment_before_range_is_prepended() -> None:
    store = SegmentStore()
    store.insert(Segment(0x0003, b"\x04\x05\x06"))

    store.insert(Segment(0x0000, b"\x01\x02\x03"))

    (only,) = store.ranges
    assert only.address == 0x0000
    assert bytes(only.data) == b"\x01\x02\x03\x04\x05\x06"
    assert only.segments == 2


def test_segment_after_range_is_appended() -> None:
    store = SegmentStore()
    store.insert(Segment(0x0000, b"\x01\x02\x03"))

    store.insert(Segment(0x0003, b"\x04\x05\x06"))

    (only,) = store.ranges
    assert only.address == 0x0000
    assert only.end == 0x0005
    assert only.segments == 2


def test_segment_filling_a_gap_joins_both_neighbours() -> None:
    store = SegmentStore()
    store.insert(Segment(0x0000, b"\xAA\xAA"))
    store.insert(Segment(0x0004, b"\xCC\xCC"))

    store.insert(Segment(0x0002, b"\xBB\xBB"))

    (only,) = store.ranges
    assert bytes(only.data) == b"\xAA\xAA\xBB\xBB\xCC\xCC"
    assert only.segments == 3


def test_new_ranges_are_kept_in_address_order() -> None:
    store = SegmentStore()
    for address in (0x0300, 0x0010, 0x0100, 0x0000, 0x0500):
        store.insert(Segment(address, b"\xEA"))

    assert [r.address for r in store] == [0x0000, 0x0010, 0x0100, 0x0300, 0x0500]


@pytest.mark.parametrize(
    "address, payload",
    [
        (0x0100, b"\x00"),
        (0x00FF, b"\x00\x00"),
        (0x0103, b"\x00\x00"),
        (0x0101, b"\x00"),
        (0x00F0, b"\x00" * 0x20),
    ],
    ids=["same-start", "tail-overlap", "head-overlap", "inside", "covers-range"],
)
def test_overlapping_segment_is_rejected(address: int, payload: bytes) -> None:
    store = SegmentStore()
    store.insert(Segment(0x0100, b"\x01\x02\x03\x04"))
    before = copy.deepcopy(store.ranges)

    with pytest.raises(OverlappingSegmentError):
        store.insert(Segment(address, payload))

    assert store.ranges == before
    assert store.data_bytes == 4


def test_overlap_is_checked_before_merging_with_a_neighbour() -> None:
    store = SegmentStore()
    store.insert(Segment(0x0000, b"\x01\x02\x03"))
    store.insert(Segment(0x0005, b"\x05\x06\x07"))
    before = copy.deepcopy(store.ranges)

    with pytest.raises(OverlappingSegmentError, match="0x0005"):
        store.insert(Segment(0x0003, b"\x00\x00\x00\x00"))

    assert store.ranges == before


def test_coalesce_merges_adjacent_ranges() -> None:
    store = SegmentStore()
    store._ranges.extend(
        [
            Range(0x0000, bytearray(b"\x01\x02"), 1),
            Range(0x0002, bytearray(b"\x03"), 1),
            Range(0x0003, bytearray(b"\x04\x05"), 2),
            Range(0x0010, bytearray(b"\x06"), 1),
        ]
    )

    merges = store.coalesce()

    assert merges == 2
    assert store.ranges == (
        Range(0x0000, bytearray(b"\x01\x02\x03\x04\x05"), 4),
        Range(0x0010, bytearray(b"\x06"), 1),
    )
    assert_well_formed(store)


def test_coalesce_without_adjacent_ranges_is_a_no_op() -> None:
    store = SegmentStore()
    store.insert(Segment(0x0000, b"\x01"))
    store.insert(Segment(0x0002, b"\x02"))

    assert store.coalesce() == 0
    assert len(store) == 2


def test_coalesce_on_empty_store() -> None:
    assert SegmentStore().coalesce() == 0


def test_invariants_hold_after_every_insert() -> None:
    segments = [Segment(address, bytes([address & 0xFF] * 4)) for address in range(0x0000, 0x0100, 4)]
    random.Random(1234).shuffle(segments)
    store = SegmentStore()

    for segment in segments:
        store.insert(segment)
        assert_well_formed(store)

    store.coalesce()
    (only,) = store.ranges
    assert only.address == 0x0000
    assert len(only) == 0x100
    assert only.segments == len(segments)
    assert store.read(0x0041) == 0x40


def test_read_outside_the_image() -> None:
    store = SegmentStore()
    store.insert(Segment(0x0010, b"\x01"))

    with pytest.raises(KeyError):
        store.read(0x0011)
    with pytest.raises(KeyError):
        store.read(0x0000)


def test_entry_address_defaults_to_none() -> None:
    assert SegmentStore().entry_address is None
