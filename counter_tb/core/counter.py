from typing import Optional

from amaranth import *
from amaranth.lib import wiring
from amaranth.lib.wiring import In, Out


class Counter(wiring.Component):
    """Up-counter with synchronous reset and count enable.

    The counter owns its ``sync`` domain and clocks it from the ``clk`` port,
    so a testbench can drive the clock edge by edge instead of relying on
    ``Simulator.add_clock``.

    ``finish_at`` models a module-internal stop request: the ``finish`` output
    latches high on the first rising edge that sees ``count == finish_at``.
    """

    def __init__(self, width: int = 4, finish_at: Optional[int] = None):
        if width < 1:
            raise ValueError(f"Counter width must be positive, got {width}")
        if finish_at is not None and not 0 <= finish_at < (1 << width):
            raise ValueError(f"finish_at={finish_at} does not fit in {width} bits")
        self.width = width
        self.finish_at = finish_at

        super().__init__({
            "clk": In(1, init=1),
            "rst": In(1, init=1),
            "en": In(1),
            "count": Out(width),
            "finish": Out(1),
        })

    def elaborate(self, platform):
        m = Module()

        m.domains.sync = cd_sync = ClockDomain("sync", reset_less=True)
        m.d.comb += cd_sync.clk.eq(self.clk)

        with m.If(self.rst):
            m.d.sync += self.count.eq(0)
        with m.Elif(self.en):
            m.d.sync += self.count.eq(self.count + 1)

        # finish is sticky and ignores rst, like $finish
        if self.finish_at is not None:
            with m.If(self.count == self.finish_at):
                m.d.sync += self.finish.eq(1)

        return m


if __name__ == "__main__":
    from amaranth.sim import Simulator

    dut = Counter(width=4, finish_at=5)

    async def bench(ctx):
        async def edge():
            ctx.set(dut.clk, 0)
            await ctx.delay(1e-9)
            ctx.set(dut.clk, 1)
            await ctx.delay(1e-9)

        await edge()
        assert ctx.get(dut.count) == 0

        ctx.set(dut.rst, 0)
        ctx.set(dut.en, 1)
        for expected in range(1, 7):
            await edge()
            assert ctx.get(dut.count) == expected, f"expected {expected}, got {ctx.get(dut.count)}"
        assert ctx.get(dut.finish)
        print("✓ Counter counts and latches finish")

    sim = Simulator(dut)
    sim.add_testbench(bench)
    with sim.write_vcd("counter_unit.vcd"):
        sim.run()
