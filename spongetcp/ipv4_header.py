"""IPv4 header handling and the Internet checksum."""

from __future__ import annotations

import ipaddress
import struct
from dataclasses import dataclass

from spongetcp.tcp_header import ParseError, ParseResult

_IPV4_FORMAT = struct.Struct(">BBHHHBBHII")


def internet_checksum(data: bytes, initial: int = 0) -> int:
    """One's-complement Internet checksum of ``data``, seeded with ``initial``.

    A result of zero over data that carries its own checksum means it is valid.
    """
    data = bytes(data)
    if len(data) % 2:
        data += b"\0"
    total = initial + sum(word for (word,) in struct.iter_unpack(">H", data))
    while total >> 16:
        total = (total & 0xFFFF) + (total >> 16)
    return ~total & 0xFFFF


@dataclass
class IPv4Header:
    """An IPv4 header without options support."""

    LENGTH = 20
    DEFAULT_TTL = 128
    PROTO_TCP = 6

    ver: int = 4
    hlen: int = LENGTH // 4
    tos: int = 0
    len: int = 0
    id: int = 0
    df: bool = True
    mf: bool = False
    offset: int = 0
    ttl: int = DEFAULT_TTL
    proto: int = PROTO_TCP
    cksum: int = 0
    src: int = 0
    dst: int = 0

    @classmethod
    def parse(cls, data: bytes) -> "IPv4Header":
        """Parse and validate the header of a complete datagram.

        Raises ParseError for short data, a wrong version, a short header,
        a length mismatch or a bad checksum.
        """
        data = bytes(data)
        if len(data) < cls.LENGTH:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        first, tos, length, ident, fo_val, ttl, proto, cksum, src, dst = _IPV4_FORMAT.unpack_from(data)
        header = cls(
            ver=first >> 4,
            hlen=first & 0x0F,
            tos=tos,
            len=length,
            id=ident,
            df=bool(fo_val & 0x4000),
            mf=bool(fo_val & 0x2000),
            offset=fo_val & 0x1FFF,
            ttl=ttl,
            proto=proto,
            cksum=cksum,
            src=src,
            dst=dst,
        )
        if len(data) < 4 * header.hlen:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        if header.ver != 4:
            raise ParseError(ParseResult.WRONG_IP_VERSION)
        if header.hlen < 5:
            raise ParseError(ParseResult.HEADER_TOO_SHORT)
        if len(data) != header.len:
            raise ParseError(ParseResult.TRUNCATED_PACKET)
        if internet_checksum(data[: 4 * header.hlen]):
            raise ParseError(ParseResult.BAD_CHECKSUM)
        return header

    def serialize(self) -> bytes:
        """Encode the header (the checksum field is written as stored)."""
        if self.ver != 4:
            raise ValueError("wrong IP version")
        if 4 * self.hlen < self.LENGTH:
            raise ValueError("IP header too short")
        fo_val = (0x4000 if self.df else 0) | (0x2000 if self.mf else 0) | (self.offset & 0x1FFF)
        packed = _IPV4_FORMAT.pack(
            ((self.ver << 4) | (self.hlen & 0x0F)) & 0xFF,
            self.tos & 0xFF,
            self.len & 0xFFFF,
            self.id & 0xFFFF,
            fo_val,
            self.ttl & 0xFF,
            self.proto & 0xFF,
            self.cksum & 0xFFFF,
            self.src & 0xFFFFFFFF,
            self.dst & 0xFFFFFFFF,
        )
        return packed.ljust(4 * self.hlen, b"\0")

    def payload_length(self) -> int:
        """Length of the datagram's payload in bytes."""
        return (self.len - 4 * self.hlen) & 0xFFFF

    def pseudo_cksum(self) -> int:
        """The pseudo-header's contribution to an encapsulated TCP checksum."""
        total = (self.src >> 16) + (self.src & 0xFFFF)
        total += (self.dst >> 16) + (self.dst & 0xFFFF)
        total += self.proto
        total += self.payload_length()
        return total & 0xFFFFFFFF

    def to_string(self) -> str:
        """Every field on its own line, numbers in hexadecimal."""
        return (
            f"IP version: {self.ver:x}\n"
            f"IP hdr len: {self.hlen:x}\n"
            f"IP tos: {self.tos:x}\n"
            f"IP dgram len: {self.len:x}\n"
            f"IP id: {self.id:x}\n"
            f"Flags: df: {'true' if self.df else 'false'} mf: {'true' if self.mf else 'false'}\n"
            f"Offset: {self.offset:x}\n"
            f"TTL: {self.ttl:x}\n"
            f"Protocol: {self.proto:x}\n"
            f"Checksum: {self.cksum:x}\n"
            f"Src addr: {self.src:x}\n"
            f"Dst addr: {self.dst:x}\n"
        )

    def summary(self) -> str:
        """A one-line summary with dotted-quad addresses."""
        ttl_part = "" if self.ttl >= 10 else f"ttl={self.ttl}, "
        src = ipaddress.IPv4Address(self.src & 0xFFFFFFFF)
        dst = ipaddress.IPv4Address(self.dst & 0xFFFFFFFF)
        return (
            f"IPv{self.ver:x}, len={self.len:x}, protocol={self.proto:x}, "
            f"{ttl_part}src={src}, dst={dst}"
        )