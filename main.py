#!/usr/bin/env python3

import argparse
import sys
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from counter_tb.harness.config import DEFAULT_VCD_PATH
from counter_tb.harness.sequencer import SequencerState
from counter_tb.harness.testbench import HarnessResult, run_counter_tb

console = Console()


def build_cycle_table(result: HarnessResult) -> Table:
    table = Table(title="Counter stimulus", header_style="bold grey70")
    table.add_column("cycle", justify="right")
    table.add_column("rst", justify="center")
    table.add_column("en", justify="center")
    table.add_column("count", justify="right")
    table.add_column("state")
    table.add_column("freeze", justify="right")

    for sample in result.samples:
        freezing = sample.state == SequencerState.FREEZING
        table.add_row(
            str(sample.cycle),
            "1" if sample.rst else "0",
            "1" if sample.en else "0",
            str(sample.count),
            sample.state.name,
            str(sample.freeze_counter) if freezing else "-",
            style="cyan" if freezing else None,
        )
    return table


def print_summary(result: HarnessResult) -> None:
    if result.finished_early:
        print(f"Simulation requested finish after cycle {result.finish_cycle}.")
    else:
        print(f"Simulated {result.cycles_run} cycles.")

    if result.timestamps:
        print(f"Trace timestamps: {result.timestamps[0]}..{result.timestamps[-1]}")

    freezes = [cycle for cycle, _, to in result.transitions if to == SequencerState.FREEZING]
    if freezes:
        print(f"Enable frozen {len(freezes)} time(s), starting at cycles: "
              + ", ".join(str(c) for c in freezes))
    else:
        print("Count threshold never reached; enable was never frozen.")

    if result.vcd_path:
        print(f"Waveform written to {result.vcd_path}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Drive the counter through its fixed stimulus schedule")
    parser.add_argument("--vcd", type=str, default=DEFAULT_VCD_PATH, help="Path for the waveform dump")
    parser.add_argument("--no-vcd", action="store_true", help="Do not write a waveform dump")
    parser.add_argument("--gtkw", type=str, default=None, help="Optional GTKWave save file")
    parser.add_argument(
        "--finish-at",
        type=int,
        default=None,
        help="Make the counter request a finish once it reaches this value.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Print the per-cycle stimulus table")
    args = parser.parse_args(argv)

    vcd_path = None if args.no_vcd else args.vcd
    gtkw_path = args.gtkw if vcd_path else None

    try:
        result = run_counter_tb(vcd_path=vcd_path, gtkw_path=gtkw_path, finish_at=args.finish_at)
    except RuntimeError as exc:
        print(f"[ERROR] {exc}")
        return 1

    if args.verbose:
        console.print(build_cycle_table(result))
    print_summary(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
