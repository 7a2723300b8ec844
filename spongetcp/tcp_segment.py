"""TCP segments: a header plus payload."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from spongetcp.ipv4_header import internet_checksum
from spongetcp.tcp_header import ParseError, ParseResult, TCPHeader


@dataclass
class TCPSegment:
    """A TCP header and its payload bytes."""

    header: TCPHeader = field(default_factory=TCPHeader)
    payload: bytes = b""

    @classmethod
    def parse(cls, data: bytes, datagram_layer_checksum: int = 0) -> "TCPSegment":
        """Parse a segment, checking its checksum against the lower-layer pseudo-checksum."""
        data = bytes(data)
        if internet_checksum(data, datagram_layer_checksum):
            raise ParseError(ParseResult.BAD_CHECKSUM)
        header = TCPHeader.parse(data)
        return cls(header=header, payload=data[4 * header.doff :])

    def serialize(self, datagram_layer_checksum: int = 0) -> bytes:
        """Encode the segment with a freshly computed checksum."""
        header_out = replace(self.header, cksum=0)
        payload = bytes(self.payload)
        header_out.cksum = internet_checksum(header_out.serialize() + payload, datagram_layer_checksum)
        return header_out.serialize() + payload

    def length_in_sequence_space(self) -> int:
        """Payload length plus one for SYN and one for FIN."""
        return len(self.payload) + int(self.header.syn) + int(self.header.fin)