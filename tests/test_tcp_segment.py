import pytest

from spongetcp.ipv4_header import internet_checksum
from spongetcp.tcp_header import ParseError, ParseResult, TCPHeader
from spongetcp.tcp_segment import TCPSegment


def _segment(payload=b"hello, world"):
    header = TCPHeader(sport=1000, dport=2000, seqno=77, ackno=88, ack=True, win=4096)
    return TCPSegment(header=header, payload=payload)


def test_round_trip():
    seg = _segment()
    parsed = TCPSegment.parse(seg.serialize())
    assert parsed.header == seg.header
    assert parsed.header.sport == seg.header.sport
    assert parsed.payload == seg.payload


def test_round_trip_odd_payload_with_pseudo_checksum():
    seg = _segment(b"abc")
    raw = seg.serialize(0x1F2E3)
    parsed = TCPSegment.parse(raw, 0x1F2E3)
    assert parsed.payload == b"abc"


def test_serialized_checksum_verifies():
    raw = _segment().serialize(1234)
    assert internet_checksum(raw, 1234) == 0


def test_serialize_leaves_original_checksum_alone():
    seg = _segment()
    seg.serialize()
    assert seg.header.cksum == 0


def test_corruption_is_detected():
    raw = bytearray(_segment().serialize())
    raw[-1] ^= 0x01
    with pytest.raises(ParseError) as info:
        TCPSegment.parse(bytes(raw))
    assert info.value.result is ParseResult.BAD_CHECKSUM


def test_wrong_pseudo_checksum_is_detected():
    raw = _segment().serialize(500)
    with pytest.raises(ParseError) as info:
        TCPSegment.parse(raw, 501)
    assert info.value.result is ParseResult.BAD_CHECKSUM


def test_short_data_with_valid_checksum():
    with pytest.raises(ParseError) as info:
        TCPSegment.parse(b"\xff\xff")
    assert info.value.result is ParseResult.PACKET_TOO_SHORT


def test_length_in_sequence_space_counts_syn_and_fin():
    seg = TCPSegment(header=TCPHeader(syn=True, fin=True), payload=b"abc")
    assert seg.length_in_sequence_space() == 5
    assert TCPSegment().length_in_sequence_space() == 0


def test_serialized_length():
    seg = _segment(b"xyz")
    assert len(seg.serialize()) == TCPHeader.LENGTH + 3