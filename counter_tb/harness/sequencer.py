from enum import IntEnum
from typing import List, Tuple

from counter_tb.harness.config import COUNT_THRESHOLD, FREEZE_CYCLES, SETTLE_CYCLES


class SequencerState(IntEnum):
    COUNTING = 0
    FREEZING = 1


class StimulusSequencer:
    """Decides the enable input for the next cycle from the observed count.

    ``en`` defaults to the settle rule (high once the cycle index is past the
    settle delay). The state machine may override that default to low, never
    the reverse: seeing the threshold count in COUNTING drops ``en`` at once
    and enters FREEZING, which holds ``en`` low until ``freeze_counter`` runs
    out. The state survives resets of the module under test.
    """

    def __init__(
        self,
        *,
        settle_cycles: int = SETTLE_CYCLES,
        count_threshold: int = COUNT_THRESHOLD,
        freeze_cycles: int = FREEZE_CYCLES,
    ):
        self.settle_cycles = settle_cycles
        self.count_threshold = count_threshold
        self.freeze_cycles = freeze_cycles

        self.state = SequencerState.COUNTING
        self.freeze_counter = 0
        self.transitions: List[Tuple[int, SequencerState, SequencerState]] = []

    def settle_enable(self, cycle: int) -> bool:
        return cycle > self.settle_cycles

    def _enter(self, cycle: int, state: SequencerState) -> None:
        self.transitions.append((cycle, self.state, state))
        self.state = state

    def step(self, cycle: int, count: int) -> bool:
        """Advance one cycle and return the enable value to drive."""
        enable = self.settle_enable(cycle)

        if self.state == SequencerState.COUNTING:
            if count == self.count_threshold:
                self._enter(cycle, SequencerState.FREEZING)
                self.freeze_counter = self.freeze_cycles
                enable = False
        else:
            enable = False
            self.freeze_counter -= 1
            if self.freeze_counter == 0:
                self._enter(cycle, SequencerState.COUNTING)

        return enable
