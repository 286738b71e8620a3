#!/usr/bin/env python
"""Run the monthly ranking update end to end.

Imports any new chefs from scripts/data, recalculates every score, publishes
the snapshot for the current month and writes a Markdown leaderboard.
"""

import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from chef_rankings.core.config import RankingsConfig
from chef_rankings.core.period import current_month
from chef_rankings.pipeline import open_pipeline
from chef_rankings.services.importer import load_import_file

load_dotenv()

DATA_DIR = Path(__file__).resolve().parent / "data"
IMPORT_FILE = DATA_DIR / "chefs-sample.json"


async def main() -> None:
    month = sys.argv[1] if len(sys.argv) > 1 else current_month()
    config = RankingsConfig(
        database_url=os.environ.get("CHEF_RANKINGS_DATABASE_URL"),
        export_dir="./exports",
    )
    pipeline = open_pipeline(config)

    try:
        if IMPORT_FILE.exists():
            result = await pipeline.import_chefs(load_import_file(IMPORT_FILE))
            print(f"Imported {result.imported} chefs, skipped {result.skipped}")

        published = await pipeline.publish_snapshot(month)
        print(published.summary)
        for chef in published.top_chefs:
            print(f"  {chef.rank}. {chef.name} ({chef.total_score:.1f})")

        path = await pipeline.export("md")
        print(f"\nLeaderboard written to {path}")
    finally:
        await pipeline.store.close()


if __name__ == "__main__":
    asyncio.run(main())
