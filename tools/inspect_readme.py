#!/usr/bin/env python3
"""
Dump every byte-by-byte description block of an ADC ReadMe.

Example:
    python tools/inspect_readme.py --readme cat/xhip.readme --json layout.json
"""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import List, Tuple

from zestarcat.adc_parser import BYTE_BY_BYTE_MARKER, ColumnDescriptor, parse_adc_column_definition
from zestarcat.catalog_io import read_catalog_text


def inspect(readme: Path) -> List[Tuple[int, Tuple[ColumnDescriptor, ...]]]:
    text = read_catalog_text(readme)
    blocks = []
    for position in range(text.count(BYTE_BY_BYTE_MARKER)):
        columns = parse_adc_column_definition(text, position)
        blocks.append((position, columns))
        logging.info("block %d: %d column(s)", position, len(columns))
    return blocks


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="List the column layouts described by an ADC ReadMe.")
    parser.add_argument("--readme", type=Path, required=True, help="Path to the ReadMe file (.gz/.bz2 accepted)")
    parser.add_argument("--json", type=Path, help="Optional path for a JSON dump of the layouts")
    parser.add_argument("--log-level", default="INFO", help="Logging verbosity (default: %(default)s)")
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.INFO))

    blocks = inspect(args.readme)
    for position, columns in blocks:
        print(f"# block {position}")
        for column in columns:
            print(f"  [{column.begin_index:>4}, {column.end_index:>4})  {column.name:<12} {column.unit:<7} {column.format}")
    if args.json:
        payload = {str(position): [asdict(column) for column in columns] for position, columns in blocks}
        args.json.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logging.info("layout written to %s", args.json)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
