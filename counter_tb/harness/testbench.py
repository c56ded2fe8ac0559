from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from amaranth.sim import Simulator

from counter_tb.core.counter import Counter
from counter_tb.harness.config import COUNTER_WIDTH, DEFAULT_VCD_PATH, HarnessConfig
from counter_tb.harness.device import CounterHandle, SimulationEngine
from counter_tb.harness.driver import ClockResetDriver
from counter_tb.harness.sequencer import SequencerState, StimulusSequencer
from counter_tb.harness.trace import TraceRecorder


@dataclass
class CycleSample:
    """Inputs and observed state at the end of one cycle."""

    cycle: int
    count: int
    rst: bool
    en: bool
    state: SequencerState
    freeze_counter: int


@dataclass
class HarnessResult:
    cycles_run: int = 0
    finished_early: bool = False
    finish_cycle: Optional[int] = None
    timestamps: List[int] = field(default_factory=list)
    clock_samples: List[Tuple[int, bool]] = field(default_factory=list)
    samples: List[CycleSample] = field(default_factory=list)
    transitions: List[Tuple[int, SequencerState, SequencerState]] = field(default_factory=list)
    vcd_path: Optional[str] = None


class CounterTestbench:
    """Cycle loop driving a Counter: clock/reset, enable sequencing, finish polling."""

    def __init__(
        self,
        dut: Counter,
        config: HarnessConfig = HarnessConfig(),
        recorder: Optional[TraceRecorder] = None,
    ):
        self.dut = dut
        self.config = config
        self.recorder = recorder if recorder is not None else TraceRecorder(None)
        self.sequencer = StimulusSequencer(
            settle_cycles=config.settle_cycles,
            count_threshold=config.count_threshold,
            freeze_cycles=config.freeze_cycles,
        )
        self.result = HarnessResult(
            timestamps=self.recorder.timestamps,
            transitions=self.sequencer.transitions,
            vcd_path=self.recorder.vcd_path,
        )

    async def bench(self, ctx):
        device = CounterHandle(ctx, self.dut)
        engine = SimulationEngine(ctx, self.dut, self.config.half_period)
        driver = ClockResetDriver(device, engine, self.recorder, self.config.reset_cycles)
        driver.clock_samples = self.result.clock_samples

        device.initialize()

        for cycle in range(self.config.num_cycles):
            await driver.run_cycle(cycle)

            count = device.count
            rst = driver.update_reset(cycle)
            en = self.sequencer.step(cycle, count)
            device.en = en

            self.result.cycles_run = cycle + 1
            self.result.samples.append(CycleSample(
                cycle=cycle,
                count=count,
                rst=rst,
                en=en,
                state=self.sequencer.state,
                freeze_counter=self.sequencer.freeze_counter,
            ))

            if engine.finished():
                self.result.finished_early = True
                self.result.finish_cycle = cycle
                return

    def run(self) -> HarnessResult:
        sim = Simulator(self.dut)
        sim.add_testbench(self.bench)
        # leaving the bench early ends the simulation; the trace is closed either way
        with self.recorder.recording(sim):
            sim.run()
        return self.result


def run_counter_tb(
    vcd_path: Optional[str] = DEFAULT_VCD_PATH,
    gtkw_path: Optional[str] = None,
    finish_at: Optional[int] = None,
    config: HarnessConfig = HarnessConfig(),
    width: int = COUNTER_WIDTH,
) -> HarnessResult:
    dut = Counter(width=width, finish_at=finish_at)
    traces = [dut.clk, dut.rst, dut.en, dut.count, dut.finish] if gtkw_path else ()
    recorder = TraceRecorder(vcd_path, gtkw_path, traces=traces)
    return CounterTestbench(dut, config, recorder).run()
