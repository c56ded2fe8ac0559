from counter_tb.core.counter import Counter


class CounterHandle:
    """Harness-side handle on a simulated Counter.

    Inputs are written through the testbench context, which settles the
    design before returning; ``count`` therefore always reflects the last
    edge driven on ``clk``.
    """

    def __init__(self, ctx, dut: Counter):
        self._ctx = ctx
        self._dut = dut

    def initialize(self) -> None:
        self.clk = True
        self.rst = True
        self.en = False

    @property
    def clk(self) -> bool:
        return bool(self._ctx.get(self._dut.clk))

    @clk.setter
    def clk(self, value: bool) -> None:
        self._ctx.set(self._dut.clk, int(value))

    @property
    def rst(self) -> bool:
        return bool(self._ctx.get(self._dut.rst))

    @rst.setter
    def rst(self, value: bool) -> None:
        self._ctx.set(self._dut.rst, int(value))

    @property
    def en(self) -> bool:
        return bool(self._ctx.get(self._dut.en))

    @en.setter
    def en(self, value: bool) -> None:
        self._ctx.set(self._dut.en, int(value))

    @property
    def count(self) -> int:
        return self._ctx.get(self._dut.count)


class SimulationEngine:
    """Time keeping and stop-request queries on top of the amaranth simulator.

    ``now`` is simulated time in half-periods, which is also the trace
    timestamp. Logic evaluation happens inside every ``ctx.set``, so the
    engine only has to move time forward.
    """

    def __init__(self, ctx, dut: Counter, half_period: float):
        self._ctx = ctx
        self._dut = dut
        self.half_period = half_period
        self.now = 0

    async def advance_to(self, timestamp: int) -> None:
        if timestamp < self.now:
            raise ValueError(f"Cannot move simulated time back from {self.now} to {timestamp}")
        if timestamp > self.now:
            await self._ctx.delay((timestamp - self.now) * self.half_period)
            self.now = timestamp

    def finished(self) -> bool:
        return bool(self._ctx.get(self._dut.finish))
