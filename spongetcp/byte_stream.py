"""A flow-controlled, in-order, in-memory byte stream."""

from __future__ import annotations


class ByteStream:
    """Finite byte stream written on one side and read on the other.

    The stream holds at most ``capacity`` unread bytes. The writer may end
    the input, after which the stream reaches EOF once it has been drained.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must be non-negative")
        self._capacity = capacity
        self._buffer = bytearray()
        self._total_written = 0
        self._total_read = 0
        self._input_ended = False
        self._error = False

    # Writer interface

    def write(self, data: bytes) -> int:
        """Write as much of ``data`` as fits; return the number of bytes accepted."""
        accepted = min(len(data), self.remaining_capacity())
        self._buffer += bytes(data[:accepted])
        self._total_written += accepted
        return accepted

    def remaining_capacity(self) -> int:
        """Number of additional bytes the stream has room for."""
        return self._capacity - len(self._buffer)

    def end_input(self) -> None:
        """Signal that the writer has reached the end of the stream."""
        self._input_ended = True

    def set_error(self) -> None:
        """Mark the stream as having suffered an error."""
        self._error = True

    # Reader interface

    def peek_output(self, length: int) -> bytes:
        """Return up to ``length`` bytes from the front without removing them."""
        if length < 0:
            raise ValueError("length must be non-negative")
        return bytes(self._buffer[:length])

    def pop_output(self, length: int) -> None:
        """Remove up to ``length`` bytes from the front of the stream."""
        if length < 0:
            raise ValueError("length must be non-negative")
        removed = min(length, len(self._buffer))
        del self._buffer[:removed]
        self._total_read += removed

    def read(self, length: int) -> bytes:
        """Remove and return up to ``length`` bytes from the front."""
        data = self.peek_output(length)
        self.pop_output(len(data))
        return data

    def input_ended(self) -> bool:
        return self._input_ended

    def error(self) -> bool:
        return self._error

    def buffer_size(self) -> int:
        """Number of bytes that can currently be read."""
        return len(self._buffer)

    def buffer_empty(self) -> bool:
        return not self._buffer

    def eof(self) -> bool:
        """True once the input has ended and every byte has been read."""
        return self._input_ended and not self._buffer

    # Accounting

    def bytes_written(self) -> int:
        return self._total_written

    def bytes_read(self) -> int:
        return self._total_read