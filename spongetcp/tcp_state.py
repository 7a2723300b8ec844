"""Summaries of a TCP connection's state, compared against the official TCP states."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Protocol

from spongetcp.byte_stream import ByteStream


class State(enum.Enum):
    """Official state names from the TCP specification."""

    LISTEN = 0
    SYN_RCVD = 1
    SYN_SENT = 2
    ESTABLISHED = 3
    CLOSE_WAIT = 4
    LAST_ACK = 5
    FIN_WAIT_1 = 6
    FIN_WAIT_2 = 7
    CLOSING = 8
    TIME_WAIT = 9
    CLOSED = 10
    RESET = 11


class ReceiverSummary(str, enum.Enum):
    """Descriptions of the receiver's state."""

    ERROR = "error (connection was reset)"
    LISTEN = "waiting for SYN: ackno is empty"
    SYN_RECV = "SYN received (ackno exists), and input to stream hasn't ended"
    FIN_RECV = "input to stream has ended"


class SenderSummary(str, enum.Enum):
    """Descriptions of the sender's state."""

    ERROR = "error (connection was reset)"
    CLOSED = "waiting for stream to begin (no SYN sent)"
    SYN_SENT = "stream started but nothing acknowledged"
    SYN_ACKED = "stream ongoing"
    FIN_SENT = "stream finished (FIN sent) but not fully acknowledged"
    FIN_ACKED = "stream finished and fully acknowledged"


class ReceiverLike(Protocol):
    stream_out: ByteStream

    def ackno(self) -> Optional[int]: ...


class SenderLike(Protocol):
    stream_in: ByteStream

    def next_seqno_absolute(self) -> int: ...

    def bytes_in_flight(self) -> int: ...


def receiver_summary(receiver: ReceiverLike) -> str:
    """Describe the state of a receiver."""
    stream = receiver.stream_out
    if stream.error():
        return ReceiverSummary.ERROR.value
    if receiver.ackno() is None:
        return ReceiverSummary.LISTEN.value
    if stream.input_ended():
        return ReceiverSummary.FIN_RECV.value
    return ReceiverSummary.SYN_RECV.value


def sender_summary(sender: SenderLike) -> str:
    """Describe the state of a sender."""
    stream = sender.stream_in
    next_seqno = sender.next_seqno_absolute()
    in_flight = sender.bytes_in_flight()
    if stream.error():
        return SenderSummary.ERROR.value
    if next_seqno == 0:
        return SenderSummary.CLOSED.value
    if next_seqno == in_flight:
        return SenderSummary.SYN_SENT.value
    if not stream.eof():
        return SenderSummary.SYN_ACKED.value
    if next_seqno < stream.bytes_written() + 2:
        return SenderSummary.SYN_ACKED.value
    if in_flight:
        return SenderSummary.FIN_SENT.value
    return SenderSummary.FIN_ACKED.value


_OFFICIAL: dict[State, tuple[ReceiverSummary, SenderSummary, bool, bool]] = {
    State.LISTEN: (ReceiverSummary.LISTEN, SenderSummary.CLOSED, True, True),
    State.SYN_RCVD: (ReceiverSummary.SYN_RECV, SenderSummary.SYN_SENT, True, True),
    State.SYN_SENT: (ReceiverSummary.LISTEN, SenderSummary.SYN_SENT, True, True),
    State.ESTABLISHED: (ReceiverSummary.SYN_RECV, SenderSummary.SYN_ACKED, True, True),
    State.CLOSE_WAIT: (ReceiverSummary.FIN_RECV, SenderSummary.SYN_ACKED, True, False),
    State.LAST_ACK: (ReceiverSummary.FIN_RECV, SenderSummary.FIN_SENT, True, False),
    State.CLOSING: (ReceiverSummary.FIN_RECV, SenderSummary.FIN_SENT, True, True),
    State.FIN_WAIT_1: (ReceiverSummary.SYN_RECV, SenderSummary.FIN_SENT, True, True),
    State.FIN_WAIT_2: (ReceiverSummary.SYN_RECV, SenderSummary.FIN_ACKED, True, True),
    State.TIME_WAIT: (ReceiverSummary.FIN_RECV, SenderSummary.FIN_ACKED, True, True),
    State.RESET: (ReceiverSummary.ERROR, SenderSummary.ERROR, False, False),
    State.CLOSED: (ReceiverSummary.FIN_RECV, SenderSummary.FIN_ACKED, False, False),
}


@dataclass(frozen=True)
class TCPState:
    """A connection's sender and receiver summaries plus its active and linger bits."""

    sender: str
    receiver: str
    active: bool = True
    linger_after_streams_finish: bool = True

    @classmethod
    def from_state(cls, state: State) -> "TCPState":
        """The summary corresponding to one of the official TCP states."""
        receiver, sender, active, linger = _OFFICIAL[state]
        return cls(sender.value, receiver.value, active, linger)

    @classmethod
    def from_parts(cls, sender: SenderLike, receiver: ReceiverLike, active: bool, linger: bool) -> "TCPState":
        """Summarize a sender, a receiver and the connection's active and linger bits."""
        return cls(
            sender_summary(sender),
            receiver_summary(receiver),
            active,
            linger if active else False,
        )

    def name(self) -> str:
        """The whole state as one line of text."""
        return (
            f"sender=`{self.sender}`, receiver=`{self.receiver}`, "
            f"active={int(self.active)}, "
            f"linger_after_streams_finish={int(self.linger_after_streams_finish)}"
        )