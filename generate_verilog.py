"""
Convert the Counter module to Verilog.

The generated file can be dropped into any Verilog simulator flow that
expects a ``counter`` top level with ``clk``/``rst``/``en``/``count`` ports.
"""

from pathlib import Path
import sys
import re
import argparse

PROJECT_ROOT = Path(__file__).resolve().parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from amaranth.back import verilog
from counter_tb.core.counter import Counter
from counter_tb.harness.config import COUNTER_WIDTH


def process_verilog_paths(verilog_text: str, strip_paths: bool = False) -> str:
    """Drop ``(* src = ... *)`` attributes or make their paths repo-relative."""
    if strip_paths:
        return re.sub(r'\(\* src = "[^"]*" \*\)\n', '', verilog_text)

    def replace_path(match):
        full_path, _, location = match.group(1).partition(":")
        try:
            rel_path = Path(full_path).relative_to(PROJECT_ROOT)
        except ValueError:
            return match.group(0)
        suffix = f":{location}" if location else ""
        return f'(* src = "{rel_path.as_posix()}{suffix}" *)'

    return re.sub(r'\(\* src = "([^"]*)" \*\)', replace_path, verilog_text)


def generate_counter_verilog(output_dir="build/verilog", width=COUNTER_WIDTH, strip_paths=False):
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    print(f"Generating counter Verilog (width={width})...")
    counter = Counter(width=width)
    verilog_text = verilog.convert(counter, name="counter")
    verilog_text = process_verilog_paths(verilog_text, strip_paths)

    output_file = output_path / "counter.v"
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(verilog_text)

    print(f"✓ Counter Verilog written: {output_file}")
    return output_file


def main():
    parser = argparse.ArgumentParser(description="Convert the Counter module to Verilog")
    parser.add_argument("-o", "--output", default="build/verilog", help="Output directory (default: build/verilog)")
    parser.add_argument("--width", type=int, default=COUNTER_WIDTH, help="Counter width in bits")
    parser.add_argument(
        "--strip-paths",
        action="store_true",
        help="Remove source location attributes from the generated Verilog",
    )
    args = parser.parse_args()

    try:
        generate_counter_verilog(args.output, args.width, args.strip_paths)
    except Exception as e:
        print(f"\n✗ Error: {e}")
        import traceback
        traceback.print_exc()
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
