"""Adapters that carry TCP segments inside UDP payloads or IPv4 datagrams."""

from __future__ import annotations

import ipaddress
from typing import Optional, Protocol

from spongetcp.ipv4_datagram import IPv4Datagram
from spongetcp.ipv4_header import IPv4Header
from spongetcp.tcp_config import Endpoint, FdAdapterConfig
from spongetcp.tcp_header import ParseError
from spongetcp.tcp_segment import TCPSegment

_MAX_DATAGRAM = 65536


class DatagramSocket(Protocol):
    def recvfrom(self, bufsize: int) -> tuple[bytes, tuple]: ...

    def sendto(self, data: bytes, address: tuple) -> int: ...


class FdAdapterBase:
    """Configuration and listening state shared by segment adapters."""

    def __init__(self) -> None:
        self.config = FdAdapterConfig()
        self.listening = False
        self.elapsed_ms = 0

    def tick(self, ms_since_last_tick: int) -> None:
        """Record the passage of time, in milliseconds."""
        self.elapsed_ms += ms_since_last_tick


class TCPOverUDPSocketAdapter(FdAdapterBase):
    """Reads and writes TCP segments carried in UDP payloads."""

    def __init__(self, sock: DatagramSocket) -> None:
        super().__init__()
        self.sock = sock

    def read(self) -> Optional[TCPSegment]:
        """Receive one datagram and return its segment if it belongs to this connection."""
        payload, source = self.sock.recvfrom(_MAX_DATAGRAM)
        sender = Endpoint(source[0], source[1])

        if not self.listening and sender != self.config.destination:
            return None

        try:
            seg = TCPSegment.parse(payload, 0)
        except ParseError:
            return None

        if self.listening:
            if seg.header.syn and not seg.header.rst:
                self.config.destination = sender
                self.listening = False
            else:
                return None
        return seg

    def write(self, seg: TCPSegment) -> None:
        """Set the ports of ``seg`` and send it to the destination."""
        seg.header.sport = self.config.source.port
        seg.header.dport = self.config.destination.port
        dest = self.config.destination
        self.sock.sendto(seg.serialize(0), (dest.host, dest.port))


class TCPOverIPv4Adapter(FdAdapterBase):
    """Converts between TCP segments and IPv4 datagrams."""

    def unwrap_tcp_in_ip(self, ip_dgram: IPv4Datagram) -> Optional[TCPSegment]:
        """Return the datagram's TCP segment if it belongs to this connection."""
        header = ip_dgram.header
        cfg = self.config

        if not self.listening and header.dst != cfg.source.ipv4_numeric():
            return None
        if not self.listening and header.src != cfg.destination.ipv4_numeric():
            return None
        if header.proto != IPv4Header.PROTO_TCP:
            return None

        try:
            seg = TCPSegment.parse(ip_dgram.payload, header.pseudo_cksum())
        except ParseError:
            return None

        if seg.header.dport != cfg.source.port:
            return None

        if self.listening:
            if seg.header.syn and not seg.header.rst:
                cfg.source = Endpoint(str(ipaddress.IPv4Address(header.dst)), cfg.source.port)
                cfg.destination = Endpoint(str(ipaddress.IPv4Address(header.src)), seg.header.sport)
                self.listening = False
            else:
                return None

        if seg.header.sport != cfg.destination.port:
            return None
        return seg

    def wrap_tcp_in_ip(self, seg: TCPSegment) -> IPv4Datagram:
        """Set the ports of ``seg`` and wrap it in an IPv4 datagram."""
        cfg = self.config
        seg.header.sport = cfg.source.port
        seg.header.dport = cfg.destination.port

        dgram = IPv4Datagram()
        dgram.header.src = cfg.source.ipv4_numeric()
        dgram.header.dst = cfg.destination.ipv4_numeric()
        dgram.header.len = dgram.header.hlen * 4 + seg.header.doff * 4 + len(seg.payload)
        dgram.payload = seg.serialize(dgram.header.pseudo_cksum())
        return dgram