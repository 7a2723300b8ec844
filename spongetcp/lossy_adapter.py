"""An adapter wrapper that drops segments at random."""

from __future__ import annotations

import random
from typing import Optional, Protocol

from spongetcp.tcp_config import FdAdapterConfig
from spongetcp.tcp_segment import TCPSegment


class SegmentAdapter(Protocol):
    config: FdAdapterConfig
    listening: bool

    def read(self) -> Optional[TCPSegment]: ...

    def write(self, seg: TCPSegment) -> None: ...

    def tick(self, ms_since_last_tick: int) -> None: ...


class LossyAdapter:
    """Wraps an adapter, dropping reads and writes with the configured loss rates.

    Loss rates are 16-bit fractions: a rate ``r`` drops roughly ``r / 65536`` of traffic.
    """

    def __init__(self, adapter: SegmentAdapter, rng: Optional[random.Random] = None) -> None:
        self.adapter = adapter
        self._rng = rng if rng is not None else random.Random()

    def _should_drop(self, uplink: bool) -> bool:
        cfg = self.adapter.config
        loss = cfg.loss_rate_up if uplink else cfg.loss_rate_dn
        return loss != 0 and self._rng.getrandbits(16) < loss

    def read(self) -> Optional[TCPSegment]:
        """Read from the wrapped adapter, possibly discarding what was read."""
        seg = self.adapter.read()
        if self._should_drop(False):
            return None
        return seg

    def write(self, seg: TCPSegment) -> None:
        """Write through the wrapped adapter unless the segment is dropped."""
        if self._should_drop(True):
            return
        self.adapter.write(seg)

    def set_listening(self, listening: bool) -> None:
        self.adapter.listening = listening

    @property
    def config(self) -> FdAdapterConfig:
        return self.adapter.config

    @config.setter
    def config(self, value: FdAdapterConfig) -> None:
        self.adapter.config = value

    def tick(self, ms_since_last_tick: int) -> None:
        self.adapter.tick(ms_since_last_tick)