#!/usr/bin/env python3
"""
Render the allocation chart for a sample input.

Usage:
    python scripts/demo_chart.py --input data/input-normal.json --config data/config.json
"""

import argparse
import json
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from discount_allocator.chart import render_chart
from discount_allocator.config import load_config
from discount_allocator.engine import allocate

DATA_DIR = Path(__file__).parent.parent / "data"


def main():
    parser = argparse.ArgumentParser(description="Render the allocation bar chart for a sample input")
    parser.add_argument("--input", type=Path, default=DATA_DIR / "input-normal.json", help="Input JSON file")
    parser.add_argument("--config", type=Path, default=DATA_DIR / "config.json", help="Config JSON file")
    parser.add_argument("--width", type=int, default=50, help="Maximum bar length in characters")
    args = parser.parse_args()

    with open(args.input, encoding="utf-8") as f:
        data = json.load(f)
    config = load_config(args.config)

    result = allocate(data, config)

    print("=== ALLOCATION CHART ===")
    print("Horizontal bar chart showing allocation distribution:")
    print(render_chart(result.allocations, width=args.width))

    print("\n=== SUMMARY ===")
    for key, value in result.summary.to_dict().items():
        print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
