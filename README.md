# spongetcp

Building blocks for a user-space TCP implementation, in plain Python with no
third-party dependencies.

## What is inside

- `spongetcp.byte_stream.ByteStream`: a bounded, in-order byte stream. The
  writer calls `write`, which accepts as many bytes as fit and returns how
  many it took, and `end_input`. The reader uses `peek_output`,
  `pop_output` and `read`. `eof()` is true once the input has ended and the
  stream is drained; `set_error()` marks the stream as failed.
- `spongetcp.stream_reassembler.StreamReassembler`: takes substrings with
  `push_substring(data, index, eof)` that may arrive out of order or
  overlap, and writes them into its `stream_out` byte stream once they are
  contiguous. Bytes beyond its capacity are discarded. `unassembled_bytes()`
  counts the distinct bytes still waiting.
- `spongetcp.tcp_header.TCPHeader` and `spongetcp.ipv4_header.IPv4Header`:
  parse and serialize TCP and IPv4 headers, and render them with
  `to_string()` and `summary()`. Malformed input raises
  `spongetcp.tcp_header.ParseError`, whose `result` is a `ParseResult`.
- `spongetcp.ipv4_header.internet_checksum`: the one's-complement Internet
  checksum.
- `spongetcp.tcp_segment.TCPSegment` and
  `spongetcp.ipv4_datagram.IPv4Datagram`: whole segments and datagrams. The
  checksum is computed by `serialize` and checked by `parse`.
- `spongetcp.tcp_state`: `TCPState` summarises a sender and a receiver
  together with the connection's active and linger bits, and
  `TCPState.from_state` gives the summary for each official state in
  `State`. `sender_summary` and `receiver_summary` describe objects that
  provide the sender and receiver interfaces.
- `spongetcp.adapters`: `TCPOverUDPSocketAdapter` reads and writes TCP
  segments in UDP payloads through any socket with `recvfrom` and `sendto`;
  `TCPOverIPv4Adapter` wraps segments in IPv4 datagrams and unwraps them,
  filtering out segments that do not belong to the configured connection.
- `spongetcp.lossy_adapter.LossyAdapter`: wraps an adapter and drops reads
  and writes at random, at the 16-bit loss rates set in `FdAdapterConfig`.
- `spongetcp.tcp_config`: `TCPConfig`, `FdAdapterConfig` and `Endpoint`.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from spongetcp.stream_reassembler import StreamReassembler

r = StreamReassembler(8)
r.push_substring(b"cd", 2, False)
r.push_substring(b"ab", 0, False)
assert r.stream_out.read(4) == b"abcd"
```

## Fetching a web page

The `spongetcp-webget` command sends an HTTP/1.1 GET request for a path on
a host, then writes everything the server sends back to standard output
until the server closes the connection:

```
spongetcp-webget example.com /index.html
```

This command uses the operating system's own TCP connection, not the pieces
in this package.

## What it does not do

The package has no TCP sender, receiver or connection state machine, and
no socket that runs a TCP connection over these pieces. It does not open
TUN devices or capture packets: `TCPOverIPv4Adapter` only converts between
segments and datagrams, and the caller moves the bytes.