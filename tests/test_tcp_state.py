from dataclasses import dataclass, field
from typing import Optional

import pytest

from spongetcp.byte_stream import ByteStream
from spongetcp.tcp_state import (
    ReceiverSummary,
    SenderSummary,
    State,
    TCPState,
    receiver_summary,
    sender_summary,
)


@dataclass
class FakeReceiver:
    ack: Optional[int] = None
    stream_out: ByteStream = field(default_factory=lambda: ByteStream(100))

    def ackno(self):
        return self.ack


@dataclass
class FakeSender:
    next_abs: int = 0
    in_flight: int = 0
    stream_in: ByteStream = field(default_factory=lambda: ByteStream(100))

    def next_seqno_absolute(self):
        return self.next_abs

    def bytes_in_flight(self):
        return self.in_flight


def test_fresh_endpoints_are_listen():
    state = TCPState.from_parts(FakeSender(), FakeReceiver(), True, True)
    assert state == TCPState.from_state(State.LISTEN)


def test_syn_sent():
    state = TCPState.from_parts(FakeSender(next_abs=1, in_flight=1), FakeReceiver(), True, True)
    assert state == TCPState.from_state(State.SYN_SENT)


def test_established():
    sender = FakeSender(next_abs=5, in_flight=2)
    state = TCPState.from_parts(sender, FakeReceiver(ack=1), True, True)
    assert state == TCPState.from_state(State.ESTABLISHED)


def test_reset_when_streams_errored():
    sender = FakeSender(next_abs=5)
    receiver = FakeReceiver(ack=1)
    sender.stream_in.set_error()
    receiver.stream_out.set_error()
    state = TCPState.from_parts(sender, receiver, False, True)
    assert state == TCPState.from_state(State.RESET)


def test_inactive_forces_no_linger():
    state = TCPState.from_parts(FakeSender(), FakeReceiver(), False, True)
    assert state.linger_after_streams_finish is False


def test_sender_finish_states():
    sender = FakeSender()
    sender.stream_in.write(b"abc")
    sender.stream_in.read(3)
    sender.stream_in.end_input()
    sender.next_abs = 4
    assert sender_summary(sender) == SenderSummary.SYN_ACKED
    sender.next_abs = 5
    sender.in_flight = 1
    assert sender_summary(sender) == SenderSummary.FIN_SENT
    sender.in_flight = 0
    assert sender_summary(sender) == SenderSummary.FIN_ACKED


def test_receiver_summaries():
    receiver = FakeReceiver()
    assert receiver_summary(receiver) == ReceiverSummary.LISTEN
    receiver.ack = 7
    assert receiver_summary(receiver) == ReceiverSummary.SYN_RECV
    receiver.stream_out.end_input()
    assert receiver_summary(receiver) == ReceiverSummary.FIN_RECV


def test_time_wait_and_closed_from_parts():
    sender = FakeSender(next_abs=2)
    sender.stream_in.end_input()
    receiver = FakeReceiver(ack=2)
    receiver.stream_out.end_input()
    assert TCPState.from_parts(sender, receiver, True, True) == TCPState.from_state(State.TIME_WAIT)
    assert TCPState.from_parts(sender, receiver, False, True) == TCPState.from_state(State.CLOSED)


def test_official_states_are_distinct():
    states = {TCPState.from_state(s) for s in State}
    assert len(states) == len(State)


def test_name_of_listen():
    assert TCPState.from_state(State.LISTEN).name() == (
        "sender=`waiting for stream to begin (no SYN sent)`, "
        "receiver=`waiting for SYN: ackno is empty`, active=1, "
        "linger_after_streams_finish=1"
    )


@pytest.mark.parametrize("state", [State.CLOSE_WAIT, State.LAST_ACK])
def test_half_closed_states_do_not_linger(state):
    official = TCPState.from_state(state)
    assert official.active is True
    assert official.linger_after_streams_finish is False