from dataclasses import dataclass, field
from typing import FrozenSet

NUM_CYCLES = 300
RESET_CYCLES = frozenset({0, 1, 15})
SETTLE_CYCLES = 4
COUNT_THRESHOLD = 9
FREEZE_CYCLES = 3
COUNTER_WIDTH = 4
HALF_PERIOD = 1e-9
DEFAULT_VCD_PATH = "counter.vcd"
SAVE_VCD_ENV = "COUNTER_SIM_SAVE_VCD"


@dataclass(frozen=True)
class HarnessConfig:
    """Fixed stimulus schedule of the counter harness.

    ``reset_cycles`` lists the cycle indices after which ``rst`` is asserted,
    ``settle_cycles`` is the last cycle index that keeps ``en`` low, and a
    ``count`` equal to ``count_threshold`` freezes ``en`` for
    ``freeze_cycles`` cycles.
    """

    num_cycles: int = NUM_CYCLES
    reset_cycles: FrozenSet[int] = field(default=RESET_CYCLES)
    settle_cycles: int = SETTLE_CYCLES
    count_threshold: int = COUNT_THRESHOLD
    freeze_cycles: int = FREEZE_CYCLES
    half_period: float = HALF_PERIOD

    def __post_init__(self):
        if self.num_cycles < 0:
            raise ValueError(f"num_cycles must be non-negative, got {self.num_cycles}")
        if self.freeze_cycles < 1:
            raise ValueError(f"freeze_cycles must be at least 1, got {self.freeze_cycles}")
        if self.half_period <= 0:
            raise ValueError(f"half_period must be positive, got {self.half_period}")
