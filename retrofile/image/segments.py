"""Segment and range records making up an assembled memory image."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Segment:
    """Contiguous bytes decoded from a single data record."""

    address: int
    data: bytes

    def __len__(self) -> int:
        return len(self.data)

    @property
    def end(self) -> int:
        """Inclusive last address covered by the segment."""

        return self.address + len(self.data) - 1


@dataclass
class Range:
    """Maximal contiguous run of memory built from one or more segments."""

    address: int
    data: bytearray = field(default_factory=bytearray)
    segments: int = 0

    @classmethod
    def from_segment(cls, segment: Segment) -> "Range":
        return cls(segment.address, bytearray(segment.data), 1)

    def __len__(self) -> int:
        return len(self.data)

    @property
    def end(self) -> int:
        """Inclusive last address covered by the range."""

        return self.address + len(self.data) - 1

    def overlaps(self, start: int, end: int) -> bool:
        return self.address <= end and start <= self.end

    def includes(self, address: int) -> bool:
        return self.address <= address <= self.end

    def prepend(self, segment: Segment) -> None:
        self.data[0:0] = segment.data
        self.address = segment.address
        self.segments += 1

    def append(self, segment: Segment) -> None:
        self.data.extend(segment.data)
        self.segments += 1

    def absorb(self, other: "Range") -> None:
        """Append an adjacent following range to this one."""

        self.data.extend(other.data)
        self.segments += other.segments

    def __repr__(self) -> str:
        return "Range(0x%04X -> 0x%04X, %d bytes)" % (self.address, self.end, len(self.data))
