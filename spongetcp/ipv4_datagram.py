"""IPv4 datagrams: a header plus payload."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from spongetcp.ipv4_header import IPv4Header, internet_checksum
from spongetcp.tcp_header import ParseError, ParseResult


@dataclass
class IPv4Datagram:
    """An IPv4 header and its payload bytes."""

    header: IPv4Header = field(default_factory=IPv4Header)
    payload: bytes = b""

    @classmethod
    def parse(cls, data: bytes) -> "IPv4Datagram":
        """Parse and validate a complete datagram."""
        data = bytes(data)
        header = IPv4Header.parse(data)
        payload = data[4 * header.hlen :]
        if len(payload) != header.payload_length():
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        return cls(header=header, payload=payload)

    def serialize(self) -> bytes:
        """Encode the datagram with a freshly computed header checksum."""
        payload = bytes(self.payload)
        if len(payload) != self.header.payload_length():
            raise ValueError("IPv4Datagram.serialize: payload is wrong size")
        header_out = replace(self.header, cksum=0)
        header_out.cksum = internet_checksum(header_out.serialize())
        return header_out.serialize() + payload


InternetDatagram = IPv4Datagram