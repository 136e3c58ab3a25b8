"""
SQL Query Check Script
Runs every metric routine against the snapshot and prints a summary

Usage:
    aw-check-queries --db data/database/adventureworks.db --output-dir results/
"""

import argparse
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

import pandas as pd

from adventureworks_bi import config
from adventureworks_bi.exceptions import AnalyticsError
from adventureworks_bi.metrics import METRICS
from adventureworks_bi.utils.database_connector import DatabaseConnector

logger = logging.getLogger(__name__)


def check_queries(db: DatabaseConnector,
                  output_dir: Optional[Union[str, Path]] = None) -> pd.DataFrame:
    """
    Run each registered metric and collect its outcome.

    Args:
        db: Snapshot connector
        output_dir: When set, each successful result is written to <name>.csv

    Returns:
        Summary with one row per metric: Query, Status, Rows, Columns
    """
    if output_dir is not None:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

    results: List[Dict] = []
    for i, (name, metric) in enumerate(METRICS.items(), 1):
        logger.info("[%d/%d] Testing: %s...", i, len(METRICS), metric.title)

        try:
            result = metric.func(db)
        except AnalyticsError as e:
            logger.error("  Failed: %s", e)
            results.append({"Query": name, "Status": "FAIL", "Rows": 0, "Columns": 0, "Error": str(e)[:80]})
            continue

        logger.info("  Success! Returned %d rows, %d columns", len(result), len(result.columns))
        if output_dir is not None:
            result.to_csv(output_dir / f"{name}.csv", index=False)

        results.append({
            "Query": name,
            "Status": "PASS",
            "Rows": len(result),
            "Columns": len(result.columns),
            "Error": "",
        })

    return pd.DataFrame(results, columns=["Query", "Status", "Rows", "Columns", "Error"])


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Run all AdventureWorks metric queries")
    parser.add_argument("--db", default=str(config.DATABASE_PATH), help="SQLite snapshot to query")
    parser.add_argument("--output-dir", default=None, help="Write each result to <metric>.csv here")
    args = parser.parse_args(argv)

    config.setup_logging()

    try:
        db = DatabaseConnector(args.db)
    except AnalyticsError as e:
        logger.error("%s", e)
        return 1

    with db:
        summary = check_queries(db, args.output_dir)

    passed = int((summary["Status"] == "PASS").sum())
    logger.info("QUERY TEST SUMMARY\n%s", summary.drop(columns="Error").to_string(index=False))
    logger.info("RESULT: %d/%d queries passed", passed, len(summary))
    return 0 if passed == len(summary) else 1


if __name__ == "__main__":
    raise SystemExit(main())
