"""TCP segment header: parsing, serialization and display."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass

_TCP_FORMAT = struct.Struct(">HHIIBBHHH")

_URG = 0b0010_0000
_ACK = 0b0001_0000
_PSH = 0b0000_1000
_RST = 0b0000_0100
_SYN = 0b0000_0010
_FIN = 0b0000_0001


class ParseResult(enum.Enum):
    """Reasons a wire-format parse can fail."""

    NO_ERROR = 0
    BAD_CHECKSUM = 1
    PACKET_TOO_SHORT = 2
    WRONG_IP_VERSION = 3
    HEADER_TOO_SHORT = 4
    TRUNCATED_PACKET = 5
    UNSUPPORTED = 6


class ParseError(ValueError):
    """Raised when bytes cannot be parsed; ``result`` names the reason."""

    def __init__(self, result: ParseResult, message: str | None = None) -> None:
        super().__init__(message or result.name)
        self.result = result


@dataclass(eq=False)
class TCPHeader:
    """A TCP header without options."""

    LENGTH = 20

    sport: int = 0
    dport: int = 0
    seqno: int = 0
    ackno: int = 0
    doff: int = LENGTH // 4
    urg: bool = False
    ack: bool = False
    psh: bool = False
    rst: bool = False
    syn: bool = False
    fin: bool = False
    win: int = 0
    cksum: int = 0
    uptr: int = 0

    @classmethod
    def parse(cls, data: bytes) -> "TCPHeader":
        """Parse a header from the front of ``data``.

        The header occupies the first ``4 * doff`` bytes; any options are skipped.
        Raises ParseError if the data is too short or the header is malformed.
        """
        data = bytes(data)
        if len(data) < cls.LENGTH:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        sport, dport, seqno, ackno, doff_byte, flags, win, cksum, uptr = _TCP_FORMAT.unpack_from(data)
        header = cls(
            sport=sport,
            dport=dport,
            seqno=seqno,
            ackno=ackno,
            doff=doff_byte >> 4,
            urg=bool(flags & _URG),
            ack=bool(flags & _ACK),
            psh=bool(flags & _PSH),
            rst=bool(flags & _RST),
            syn=bool(flags & _SYN),
            fin=bool(flags & _FIN),
            win=win,
            cksum=cksum,
            uptr=uptr,
        )
        if header.doff < 5:
            raise ParseError(ParseResult.HEADER_TOO_SHORT)
        if len(data) < 4 * header.doff:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        return header

    def serialize(self) -> bytes:
        """Encode the header (the checksum field is written as stored)."""
        if self.doff < 5:
            raise ValueError("TCP header too short")
        flags = (
            (_URG if self.urg else 0)
            | (_ACK if self.ack else 0)
            | (_PSH if self.psh else 0)
            | (_RST if self.rst else 0)
            | (_SYN if self.syn else 0)
            | (_FIN if self.fin else 0)
        )
        packed = _TCP_FORMAT.pack(
            self.sport & 0xFFFF,
            self.dport & 0xFFFF,
            self.seqno & 0xFFFFFFFF,
            self.ackno & 0xFFFFFFFF,
            (self.doff << 4) & 0xFF,
            flags,
            self.win & 0xFFFF,
            self.cksum & 0xFFFF,
            self.uptr & 0xFFFF,
        )
        return packed.ljust(4 * self.doff, b"\0")

    def to_string(self) -> str:
        """Every field on its own line, numbers in hexadecimal."""
        flag_items = (
            ("urg", self.urg),
            ("ack", self.ack),
            ("psh", self.psh),
            ("rst", self.rst),
            ("syn", self.syn),
            ("fin", self.fin),
        )
        flags_line = " ".join(f"{name}: {str(value).lower()}" for name, value in flag_items)
        return (
            f"TCP source port: {self.sport:x}\n"
            f"TCP dest port: {self.dport:x}\n"
            f"TCP seqno: {self.seqno:x}\n"
            f"TCP ackno: {self.ackno:x}\n"
            f"TCP doff: {self.doff:x}\n"
            f"Flags: {flags_line}\n"
            f"TCP winsize: {self.win:x}\n"
            f"TCP cksum: {self.cksum:x}\n"
            f"TCP uptr: {self.uptr:x}\n"
        )

    def summary(self) -> str:
        """A one-line summary of flags, sequence numbers and window."""
        flags = (
            ("S" if self.syn else "")
            + ("A" if self.ack else "")
            + ("R" if self.rst else "")
            + ("F" if self.fin else "")
        )
        return f"Header(flags={flags},seqno={self.seqno},ack={self.ackno},win={self.win})"

    def __eq__(self, other: object) -> bool:
        # Ports and checksum are deliberately not compared.
        if not isinstance(other, TCPHeader):
            return NotImplemented
        return (
            self.seqno == other.seqno
            and self.ackno == other.ackno
            and self.doff == other.doff
            and self.urg == other.urg
            and self.ack == other.ack
            and self.psh == other.psh
            and self.rst == other.rst
            and self.syn == other.syn
            and self.fin == other.fin
            and self.win == other.win
            and self.uptr == other.uptr
        )

    __hash__ = None  # type: ignore[assignment]