from __future__ import annotations

import argparse
from typing import Optional, Tuple

import pandas as pd
from sqlalchemy import create_engine

from charger_engine.ingestion.models import create_tables
from charger_engine.ingestion.storage import StationStore


def fetch_db_stats(db_url: str, town: Optional[str] = None) -> Tuple[int, pd.DataFrame]:
    """Return total station count and per-town station counts.

    When `town` is given, only that town's row is kept in the stats table.
    """
    engine = create_engine(db_url, future=True)
    create_tables(engine)
    try:
        store = StationStore(engine)
        total = store.count()
        counts = store.town_counts()
    finally:
        engine.dispose()

    df = pd.DataFrame(list(counts.items()), columns=["town", "stations"])
    if town is not None:
        df = df[df["town"] == town].reset_index(drop=True)
    return total, df


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Verify charger DB coverage (stations per town)")
    p.add_argument("--db-url", required=True, help="SQLAlchemy URL, e.g., sqlite:///chargers.db")
    p.add_argument("--town", default=None, help="Optional normalized town name to inspect")
    return p.parse_args()


def main() -> None:
    args = _parse_args()
    total, stats = fetch_db_stats(args.db_url, args.town)

    print(f"Total stations: {total}")
    if stats.empty:
        print("No stations found.")
        return

    with pd.option_context("display.max_rows", None, "display.width", 120):
        print(stats.to_string(index=False))


if __name__ == "__main__":
    main()
