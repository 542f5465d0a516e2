"""Tests for the paper tape writer."""

from __future__ import annotations

import io

import pytest

from retrofile.errors import ExitCode, OutputIoError
from retrofile.image import Segment, SegmentStore
from retrofile.writer import PAP_RECORD_LENGTH, PapEncoder, encode_end_record, encode_record, write_pap

PAD = b"\r\n" + b"\x00" * 6


def store_with(*segments: Segment) -> SegmentStore:
    store = SegmentStore()
    for segment in segments:
        store.insert(segment)
    store.coalesce()
    return store


def test_data_record_layout_and_checksum() -> None:
    assert encode_record(0x0000, b"\x11\x22\x33") == b";0300001122330069" + PAD


def test_end_record_repeats_the_record_count() -> None:
    assert encode_end_record(1) == b";0000010001" + PAD
    assert encode_end_record(0x1234) == b";0012341234" + PAD


def test_checksum_is_a_full_sixteen_bit_sum() -> None:
    payload = b"\xFF" * PAP_RECORD_LENGTH
    checksum = PAP_RECORD_LENGTH + 0xFF + 0xE0 + 0xFF * PAP_RECORD_LENGTH

    record = encode_record(0xFFE0, payload)

    assert checksum == 0x19DF
    assert record == b";18FFE0" + b"FF" * PAP_RECORD_LENGTH + b"19DF" + PAD


def test_record_longer_than_limit_is_refused() -> None:
    with pytest.raises(ValueError):
        encode_record(0x0000, bytes(PAP_RECORD_LENGTH + 1))


def test_single_range_tape() -> None:
    store = store_with(Segment(0x0000, b"\x11\x22\x33"))
    stream = io.BytesIO()

    records = write_pap(stream, store)

    assert records == 1
    assert stream.getvalue() == b";0300001122330069" + PAD + b";0000010001" + PAD


def test_ranges_are_split_into_records_of_at_most_24_bytes() -> None:
    payload = bytes(range(50))
    store = store_with(Segment(0x0200, payload))
    stream = io.BytesIO()

    records = PapEncoder(stream).encode(store)

    lines = stream.getvalue().split(PAD)
    assert records == 3
    assert lines[-1] == b""
    assert [line[:7] for line in lines[:-1]] == [b";180200", b";180218", b";020230", b";000003"]
    assert lines[2] == encode_record(0x0230, payload[48:])[: -len(PAD)]
    assert lines[3] == b";0000030003"


def test_ranges_are_written_in_address_order() -> None:
    store = store_with(Segment(0x1000, b"\xBB"), Segment(0x0010, b"\xAA"))
    stream = io.BytesIO()

    write_pap(stream, store)

    assert stream.getvalue() == (
        encode_record(0x0010, b"\xAA") + encode_record(0x1000, b"\xBB") + encode_end_record(2)
    )


def test_address_field_keeps_the_low_sixteen_bits() -> None:
    store = store_with(Segment(0x00010010, b"\x01"))
    stream = io.BytesIO()

    write_pap(stream, store)

    assert stream.getvalue().startswith(b";01001001")


def test_empty_image_writes_only_the_end_record() -> None:
    stream = io.BytesIO()

    assert write_pap(stream, SegmentStore()) == 0
    assert stream.getvalue() == b";0000000000" + PAD


def test_encoding_does_not_consume_the_image() -> None:
    store = store_with(Segment(0x0000, bytes(30)))

    first = io.BytesIO()
    second = io.BytesIO()
    write_pap(first, store)
    write_pap(second, store)

    assert first.getvalue() == second.getvalue()
    assert len(store.ranges[0]) == 30


class _BrokenStream(io.RawIOBase):
    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        raise OSError("disk full")


def test_write_failure_raises_io_error() -> None:
    store = store_with(Segment(0x0000, b"\x01"))

    with pytest.raises(OutputIoError, match="disk full") as excinfo:
        write_pap(_BrokenStream(), store)
    assert excinfo.value.exit_code == ExitCode.IO_ERROR
