import contextlib
from typing import List, Optional


class TraceOrderError(RuntimeError):
    pass


class TraceRecorder:
    """Waveform capture for one harness run.

    The VCD itself is written by ``Simulator.write_vcd``, which samples every
    signal as simulated time advances. ``dump`` marks the timestamps the
    harness samples at and enforces that they strictly increase. With
    ``vcd_path=None`` only the bookkeeping is kept.
    """

    def __init__(self, vcd_path: Optional[str], gtkw_path: Optional[str] = None, traces=()):
        self.vcd_path = vcd_path
        self.gtkw_path = gtkw_path
        self.traces = traces
        self.timestamps: List[int] = []
        self.is_open = False
        self.closed = False

    @property
    def last_timestamp(self) -> Optional[int]:
        return self.timestamps[-1] if self.timestamps else None

    @contextlib.contextmanager
    def recording(self, simulator):
        if self.is_open or self.closed:
            raise RuntimeError("Trace recorder can only be opened once")

        if self.vcd_path:
            writer = simulator.write_vcd(self.vcd_path, self.gtkw_path, traces=self.traces)
        else:
            writer = contextlib.nullcontext()

        with writer:
            self.is_open = True
            try:
                yield self
            finally:
                self.close()

    def dump(self, timestamp: int) -> None:
        if not self.is_open:
            raise RuntimeError("Trace recorder is not open")
        last = self.last_timestamp
        if last is not None and timestamp <= last:
            raise TraceOrderError(
                f"Trace timestamp {timestamp} does not advance past {last}"
            )
        self.timestamps.append(timestamp)

    def close(self) -> None:
        self.is_open = False
        self.closed = True
