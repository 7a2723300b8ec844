"""Fetch a URL path over HTTP and print everything the server sends back."""

from __future__ import annotations

import socket
import sys
from typing import BinaryIO, Optional, Sequence

HTTP_PORT = 80


def get_url(host: str, path: str, out: Optional[BinaryIO] = None, port: int = HTTP_PORT) -> None:
    """Request ``path`` from ``host`` and copy the whole reply to ``out``."""
    if out is None:
        out = sys.stdout.buffer
    request = (
        f"GET {path} HTTP/1.1\r\n"
        f"Host: {host} \r\n"
        "Connection: close\r\n\r\n"
    ).encode()
    with socket.create_connection((host, port)) as conn:
        conn.sendall(request)
        while chunk := conn.recv(65536):
            out.write(chunk)
    out.flush()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command-line entry point: ``webget HOST PATH``."""
    args = list(sys.argv[1:] if argv is None else argv)
    prog = "webget"
    if len(args) != 2:
        print(f"Usage: {prog} HOST PATH", file=sys.stderr)
        print(f"\tExample: {prog} example.com /index.html", file=sys.stderr)
        return 1
    host, path = args
    try:
        get_url(host, path)
    except OSError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())