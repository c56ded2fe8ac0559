from __future__ import annotations

import contextlib
import io
import os
import sys
import textwrap
import time
import traceback
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Optional

from amaranth import Elaboratable
from amaranth.sim import Simulator

from counter_tb.harness.config import SAVE_VCD_ENV
from counter_tb.harness.trace import TraceRecorder

BenchCoroutine = Callable[..., Awaitable[None]]


def save_vcd_enabled() -> bool:
    return bool(os.environ.get(SAVE_VCD_ENV, ""))


@dataclass
class SimulationSpec:
    """Container describing how to build and run a single simulation bench.

    ``clock_period=None`` leaves the clock to the bench. A ``recorder`` owns
    waveform capture for the run; without one, ``vcd_path`` is honoured when
    waveform saving is enabled through the environment. ``check`` runs after
    the simulation completes.
    """

    dut: Elaboratable
    bench: BenchCoroutine
    clock_period: Optional[float] = 1e-6
    vcd_path: Optional[str] = None
    recorder: Optional[TraceRecorder] = None
    check: Optional[Callable[[], None]] = None


@dataclass
class SimulationTest:
    """Metadata + factory for a simulation-driven regression test."""

    key: str
    name: str
    description: str
    build: Callable[[], SimulationSpec]
    tags: tuple[str, ...] = ()

    def run(self, *, capture: bool = True) -> "TestResult":
        """Execute the simulation and return a structured result."""
        log_buffer: Optional[io.StringIO] = io.StringIO() if capture else None
        stdout_cm = (
            contextlib.redirect_stdout(log_buffer)
            if log_buffer is not None
            else contextlib.nullcontext()
        )

        start = time.perf_counter()
        error: Optional[BaseException] = None

        try:
            spec = self.build()
            simulator = Simulator(spec.dut)
            if spec.clock_period is not None:
                simulator.add_clock(spec.clock_period)
            simulator.add_testbench(spec.bench)

            with stdout_cm:
                if spec.recorder is not None:
                    trace_cm = spec.recorder.recording(simulator)
                elif spec.vcd_path and save_vcd_enabled():
                    trace_cm = simulator.write_vcd(spec.vcd_path)
                else:
                    trace_cm = contextlib.nullcontext()
                with trace_cm:
                    simulator.run()
                if spec.check is not None:
                    spec.check()
        except BaseException as exc:  # noqa: BLE001 - need to capture everything
            error = exc

        duration = time.perf_counter() - start
        output = log_buffer.getvalue() if log_buffer is not None else ""
        return TestResult(
            test=self,
            passed=error is None,
            output=output,
            duration=duration,
            error=error,
        )


@dataclass
class TestResult:
    __test__ = False

    test: SimulationTest
    passed: bool
    output: str
    duration: float
    error: Optional[BaseException] = None

    def short_status(self) -> str:
        return "PASS" if self.passed else "FAIL"


def run_tests_cli(tests: Iterable[SimulationTest]) -> int:
    """Fallback CLI runner for individual test modules."""
    tests = list(tests)
    if not tests:
        print("No tests registered.")
        return 0

    print("=" * 72)
    print("Counter Harness Simulation Tests")
    print("=" * 72)

    exit_code = 0
    for idx, test in enumerate(tests, start=1):
        print(f"\n[{idx}/{len(tests)}] {test.name}")
        print(textwrap.fill(test.description, width=70))
        result = test.run()

        print(f"  Result : {result.short_status()} ({result.duration:.2f}s)")
        if result.output.strip():
            print("  Output :")
            for line in result.output.strip().splitlines():
                print(f"    {line}")
        if not result.passed:
            exit_code = 1
            if result.error:
                print("  Error  :")
                traceback.print_exception(result.error, file=sys.stdout)

    return exit_code
