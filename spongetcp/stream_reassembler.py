"""Reassembly of possibly out-of-order, overlapping substrings into a byte stream."""

from __future__ import annotations

from spongetcp.byte_stream import ByteStream


class StreamReassembler:
    """Assembles indexed substrings of a stream into an in-order ByteStream.

    ``capacity`` bounds both the reassembled-but-unread bytes and the bytes
    still waiting to be reassembled; anything beyond it is discarded.
    """

    def __init__(self, capacity: int) -> None:
        self._output = ByteStream(capacity)
        self._capacity = capacity
        self._expected = 0
        self._eof_index: int | None = None
        self._pending: dict[int, bytes] = {}
        self._pending_size = 0

    @property
    def stream_out(self) -> ByteStream:
        """The reassembled, in-order output stream."""
        return self._output

    def push_substring(self, data: bytes, index: int, eof: bool) -> None:
        """Accept a substring starting at ``index`` and emit any newly contiguous bytes.

        ``eof`` means the last byte of ``data`` is the last byte of the stream.
        """
        if index < 0:
            raise ValueError("index must be non-negative")
        data = bytes(data)
        window_last = self._capacity + self._expected - self._output.buffer_size() - 1

        if not data:
            self._note_eof(index, eof)
            self._maybe_finish(index)
            return

        last = index + len(data) - 1
        if index > window_last or last < self._expected:
            return

        if last > window_last:
            data = data[: window_last - index + 1]
        else:
            self._note_eof(last, eof)

        self._pending[index] = data
        self._flush()
        self._coalesce()

    def unassembled_bytes(self) -> int:
        """Number of distinct bytes stored but not yet reassembled."""
        return self._pending_size

    def empty(self) -> bool:
        """True if no substrings are waiting to be assembled."""
        return self.unassembled_bytes() == 0

    def _note_eof(self, index: int, eof: bool) -> None:
        if eof:
            self._eof_index = index

    def _maybe_finish(self, index: int) -> None:
        if self._eof_index is not None and index == self._eof_index:
            self._output.end_input()

    def _flush(self) -> None:
        """Write every pending chunk that reaches the next expected index."""
        for start in sorted(self._pending):
            if start > self._expected:
                break
            chunk = self._pending.pop(start)
            end = start + len(chunk)
            if end > self._expected:
                self._output.write(chunk[self._expected - start :])
                self._maybe_finish(end - 1)
                self._expected = end

    def _coalesce(self) -> None:
        """Merge overlapping pending chunks and recount the pending bytes."""
        merged: dict[int, bytes] = {}
        total = 0
        run_start: int | None = None
        run_last = -1
        for start in sorted(self._pending):
            chunk = self._pending[start]
            last = start + len(chunk) - 1
            if run_start is None or start > run_last:
                run_start, run_last = start, last
                merged[start] = chunk
                total += len(chunk)
            elif last > run_last:
                merged[run_start] += chunk[run_last - start + 1 :]
                total += last - run_last
                run_last = last
        self._pending = merged
        self._pending_size = total