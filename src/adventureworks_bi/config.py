"""
Configuration for AdventureWorks BI
Paths, default business parameters and logging setup
"""

import logging
import os
from pathlib import Path

# ============================================
# PATHS
# ============================================

# src/adventureworks_bi/config.py -> project root is three levels up
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

DATA_DIR = Path(os.environ.get("AW_DATA_DIR", PROJECT_ROOT / "data"))
CSV_DIR = DATA_DIR / "snapshot"
DATABASE_PATH = Path(os.environ.get("AW_DB_PATH", DATA_DIR / "database" / "adventureworks.db"))

# ============================================
# BUSINESS PARAMETERS
# ============================================

DEFAULT_ROLLING_MONTHS = 12
DEFAULT_TOP_N = 3

DEFAULT_COHORT_YEAR = 2014
DEFAULT_COHORT_STATUS = 5  # shipped

DEFAULT_STOCK_YEAR = 2011

DEFAULT_PURCHASE_YEAR = 2014
DEFAULT_PENDING_STATUS = 1  # pending

SEASONAL_OFFER_TYPE = "Seasonal Discount"

# ============================================
# LOGGING
# ============================================

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
LOG_LEVEL = os.environ.get("AW_LOG_LEVEL", "INFO")


def setup_logging(level: str = None, log_file: str = None) -> None:
    """
    Configure root logging for scripts and the dashboard

    Args:
        level: Log level name, defaults to AW_LOG_LEVEL / INFO
        log_file: Optional file to mirror log output into
    """
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )
