"""Sorted store of non-overlapping memory ranges.

Every decoded segment is handed to :class:`SegmentStore`, which either grows an
existing range or opens a new one while keeping the ranges ordered by address.
Ranges never overlap; a segment that would claim an address already present is
rejected without touching the store. Adjacent ranges are merged as soon as the
store notices them, and :meth:`SegmentStore.coalesce` sweeps the whole list
after each input source has been loaded.

``insert`` and ``coalesce`` rewrite the range list in place and must not be
interleaved with other calls on the same store.
"""

from __future__ import annotations

from typing import Iterator, Optional

from retrofile.errors import OverlappingSegmentError
from retrofile.utils import debug_log

from .segments import Range, Segment


class SegmentStore:
    """Ascending, non-overlapping, non-adjacent collection of :class:`Range`."""

    def __init__(self) -> None:
        self._ranges: list[Range] = []
        self._data_bytes = 0
        self._segment_count = 0
        self.entry_address: Optional[int] = None

    def __iter__(self) -> Iterator[Range]:
        return iter(self._ranges)

    def __len__(self) -> int:
        return len(self._ranges)

    @property
    def ranges(self) -> tuple[Range, ...]:
        return tuple(self._ranges)

    @property
    def data_bytes(self) -> int:
        """Total number of data bytes accepted so far."""

        return self._data_bytes

    @property
    def segment_count(self) -> int:
        return self._segment_count

    def read(self, address: int) -> int:
        """Return the byte stored at ``address``."""

        for current in self._ranges:
            if current.includes(address):
                return current.data[address - current.address]
            if current.address > address:
                break
        raise KeyError(f"address {address:#06x} is not part of the image")

    def insert(self, segment: Segment) -> None:
        if not segment.data:
            return

        start = segment.address
        end = segment.end

        for current in self._ranges:
            if current.overlaps(start, end):
                raise OverlappingSegmentError(
                    f"segment 0x{start:04X}-0x{end:04X} overlaps range "
                    f"0x{current.address:04X}-0x{current.end:04X}"
                )

        for index, current in enumerate(self._ranges):
            if end + 1 == current.address:
                current.prepend(segment)
                debug_log("store", "prepend 0x%04X (+%d) -> %r", start, len(segment), current)
                break
            if current.end + 1 == start:
                current.append(segment)
                debug_log("store", "append 0x%04X (+%d) -> %r", start, len(segment), current)
                self._merge_following(index)
                break
        else:
            self._insert_range(Range.from_segment(segment))

        self._data_bytes += len(segment)
        self._segment_count += 1

    def coalesce(self) -> int:
        """Merge every pair of ranges that became adjacent; return the merge count."""

        merges = 0
        index = 0
        while index < len(self._ranges) - 1:
            if self._merge_following(index):
                merges += 1
            else:
                index += 1
        return merges

    def _merge_following(self, index: int) -> bool:
        current = self._ranges[index]
        if index + 1 >= len(self._ranges):
            return False
        following = self._ranges[index + 1]
        if current.address + len(current) != following.address:
            return False
        current.absorb(following)
        del self._ranges[index + 1]
        debug_log("store", "merged -> %r", current)
        return True

    def _insert_range(self, new_range: Range) -> None:
        position = 0
        while position < len(self._ranges) and self._ranges[position].address < new_range.address:
            position += 1
        self._ranges.insert(position, new_range)
        debug_log("store", "new %r at index %d", new_range, position)
