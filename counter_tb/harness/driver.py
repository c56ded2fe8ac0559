from typing import AbstractSet, List, Tuple

from counter_tb.harness.config import RESET_CYCLES
from counter_tb.harness.device import CounterHandle, SimulationEngine
from counter_tb.harness.trace import TraceRecorder


def reset_asserted(cycle: int, reset_cycles: AbstractSet[int] = RESET_CYCLES) -> bool:
    return cycle in reset_cycles


class ClockResetDriver:
    """Toggles ``clk`` twice per cycle and applies the reset schedule.

    ``clock_samples`` keeps ``(timestamp, clk)`` for every half-cycle step,
    with ``clk`` read back from the design after the toggle.
    """

    def __init__(
        self,
        device: CounterHandle,
        engine: SimulationEngine,
        recorder: TraceRecorder,
        reset_cycles: AbstractSet[int] = RESET_CYCLES,
    ):
        self.device = device
        self.engine = engine
        self.recorder = recorder
        self.reset_cycles = reset_cycles
        self.clock_samples: List[Tuple[int, bool]] = []

    async def half_cycle(self, cycle: int, phase: int) -> None:
        timestamp = 2 * cycle + phase
        # time only moves at the start of a step, so a run ends at its last dump
        await self.engine.advance_to(timestamp)
        self.recorder.dump(timestamp)
        # setting clk settles the design, which is the evaluation step
        self.device.clk = not self.device.clk
        self.clock_samples.append((timestamp, self.device.clk))

    async def run_cycle(self, cycle: int) -> None:
        for phase in range(2):
            await self.half_cycle(cycle, phase)

    def update_reset(self, cycle: int) -> bool:
        rst = reset_asserted(cycle, self.reset_cycles)
        self.device.rst = rst
        return rst
