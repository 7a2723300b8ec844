"""Byte streams, stream reassembly, TCP/IPv4 headers, segments and segment adapters."""

__version__ = "0.1.0"