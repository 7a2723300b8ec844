from spongetcp.lossy_adapter import LossyAdapter
from spongetcp.tcp_config import FdAdapterConfig
from spongetcp.tcp_segment import TCPSegment


class FakeAdapter:
    def __init__(self):
        self.config = FdAdapterConfig()
        self.listening = False
        self.reads = 0
        self.written = []
        self.ticks = []

    def read(self):
        self.reads += 1
        return TCPSegment(payload=b"in")

    def write(self, seg):
        self.written.append(seg)

    def tick(self, ms):
        self.ticks.append(ms)


class FixedRng:
    def __init__(self, value):
        self.value = value

    def getrandbits(self, k):
        return self.value


def test_no_loss_passes_through():
    inner = FakeAdapter()
    lossy = LossyAdapter(inner, FixedRng(0))
    assert lossy.read().payload == b"in"
    seg = TCPSegment(payload=b"out")
    lossy.write(seg)
    assert inner.written == [seg]


def test_read_dropped_still_consumes():
    inner = FakeAdapter()
    inner.config.loss_rate_dn = 100
    lossy = LossyAdapter(inner, FixedRng(10))
    assert lossy.read() is None
    assert inner.reads == 1


def test_write_dropped():
    inner = FakeAdapter()
    inner.config.loss_rate_up = 100
    lossy = LossyAdapter(inner, FixedRng(10))
    lossy.write(TCPSegment())
    assert inner.written == []


def test_rates_are_directional():
    inner = FakeAdapter()
    inner.config.loss_rate_up = 5
    inner.config.loss_rate_dn = 100
    lossy = LossyAdapter(inner, FixedRng(10))
    lossy.write(TCPSegment())
    assert len(inner.written) == 1
    assert lossy.read() is None


def test_passthroughs():
    inner = FakeAdapter()
    lossy = LossyAdapter(inner)
    lossy.set_listening(True)
    assert inner.listening is True
    assert lossy.config is inner.config
    replacement = FdAdapterConfig(loss_rate_up=7)
    lossy.config = replacement
    assert inner.config is replacement
    lossy.tick(25)
    assert inner.ticks == [25]