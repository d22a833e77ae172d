"""
Load the symbol table used by /search and /symbols.

The CSV needs a header row with name,description,exchange,type.

Usage:
    python -m datafeed.bootstrap.load_symbols symbols.csv
    python -m datafeed.bootstrap.load_symbols symbols.csv --db data/symbols.db
"""

import argparse
import asyncio
import csv
import sys
from pathlib import Path

from datafeed.config import get_settings
from datafeed.storage.symbols import SymbolRow, SymbolStore


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Load symbols into the datafeed symbol table")
    parser.add_argument("csv_path", help="CSV file with name,description,exchange,type columns")
    parser.add_argument(
        "--db",
        default=get_settings().symbols_db_path,
        help="SQLite database path (default: symbols_db_path setting)"
    )
    return parser.parse_args(argv)


def read_symbols(path: Path) -> list[SymbolRow]:
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        return [
            SymbolRow(
                name=row["name"].strip(),
                description=(row.get("description") or "").strip(),
                exchange=row["exchange"].strip(),
                type=row["type"].strip(),
            )
            for row in reader
            if (row.get("name") or "").strip()
        ]


async def load(csv_path: Path, db_path: str) -> int:
    store = SymbolStore(db_path)
    await store.init()
    return await store.upsert_symbols(read_symbols(csv_path))


def main(argv=None):
    args = parse_args(argv)
    csv_path = Path(args.csv_path)
    if not csv_path.exists():
        print(f"✗ File not found: {csv_path}")
        sys.exit(1)

    count = asyncio.run(load(csv_path, args.db))
    print(f"✓ Loaded {count} symbols into {args.db}")


if __name__ == "__main__":
    main()
