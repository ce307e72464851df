#!/usr/bin/env python3
"""MAX! Cube - Test the bounds-checked byte reader."""

import pytest

from maxcube_tx import ByteReader, exceptions as exc


def test_reader_reads_in_order() -> None:
    reader = ByteReader(bytes([0x05, 0x0B, 0x97, 0x92, 0x41, 0x42, 0xFF]))

    assert reader.read_byte() == 5
    assert reader.read_rf_address() == 759698
    assert reader.position == 4
    assert reader.read_str(2) == "AB"
    assert reader.remaining == 1
    assert reader.read_bytes(1) == b"\xff"
    assert reader.remaining == 0


def test_reader_rf_address() -> None:
    assert ByteReader(bytes([11, 0x97, 0x92])).read_rf_address() == 759698
    assert ByteReader(bytes([0x0F, 0xDA, 0xED])).read_rf_address() == 1039085


def test_reader_utf8_names() -> None:
    reader = ByteReader("Küche".encode())
    assert reader.read_str(6) == "Küche"

    reader = ByteReader(b"K\xfcche")  # not UTF-8, but never fails to decode
    assert reader.read_str(5) == "K�che"


def test_reader_truncated() -> None:
    reader = ByteReader(b"\x01\x02")

    with pytest.raises(exc.PayloadTruncated):
        reader.read_rf_address()
    assert reader.position == 0  # a failed read doesn't advance

    reader.skip(2)
    with pytest.raises(exc.PayloadTruncated):
        reader.read_byte()
    with pytest.raises(exc.PayloadTruncated):
        reader.skip(1)


def test_reader_truncated_is_packet_invalid() -> None:
    with pytest.raises(exc.PacketInvalid):
        ByteReader(b"").read_byte()


def test_sub_reader() -> None:
    reader = ByteReader(b"\x03abcd")

    sub_reader = reader.sub_reader(reader.read_byte())
    assert reader.remaining == 1
    assert sub_reader.read_str(3) == "abc"

    with pytest.raises(exc.PayloadTruncated):
        sub_reader.read_byte()  # can't read beyond its own end

    with pytest.raises(exc.PayloadTruncated):
        reader.sub_reader(2)


def test_skip_rest() -> None:
    reader = ByteReader(b"\x00" * 10, offset=4)

    assert reader.remaining == 6
    reader.skip_rest()
    assert reader.remaining == 0
