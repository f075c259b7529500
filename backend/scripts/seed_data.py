#!/usr/bin/env python3
"""
Data Seeding Script for Genium

Loads the unit catalogue from CSV, embeds the units and upserts them
into Qdrant. The broker list is validated here and loaded by the API on
startup.

Usage:
    python -m scripts.seed_data --data-path ./data

Options:
    --data-path: Directory holding units.csv and brokers.csv (default: DATA_PATH)
    --batch-size: Units embedded and upserted per batch (default: 50)
    --verify: Run cheapest-unit lookups after seeding
"""

import sys
import argparse
import logging
from pathlib import Path
from typing import List, Dict

import pandas as pd
from tqdm import tqdm

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from genium.config import get_settings
from genium.models.records import Unit
from genium.services import (
    UnitIndexer,
    get_unit_service,
    read_brokers_csv,
    read_units_csv,
)
from genium.utils.helpers import format_price

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def index_in_batches(units: List[Unit], batch_size: int = 50) -> Dict[str, int]:
    """
    Embed and upsert units batch by batch.

    Args:
        units: Units read from the catalogue file
        batch_size: Units per batch

    Returns:
        Summed indexer counts
    """
    indexer = UnitIndexer()
    totals = {"indexed": 0, "embedded": 0, "failed": 0}

    for i in tqdm(range(0, len(units), batch_size), desc="Indexing"):
        result = indexer.index_units(units[i:i + batch_size])
        for key in totals:
            totals[key] += result[key]

    return totals


def describe_catalogue(units: List[Unit]):
    """Log a short summary of the catalogue being seeded."""
    df = pd.DataFrame([u.to_payload() for u in units])
    if df.empty:
        logger.info("Catalogue is empty")
        return

    logger.info(f"Projects: {df['project_name'].nunique()}")
    logger.info(f"Units by status: {df['status'].value_counts().to_dict()}")
    logger.info(f"Price range: ${df['price'].min():,.0f} - ${df['price'].max():,.0f}")


def verify_seed():
    """Verify the seed by running the deterministic lookups."""
    units = get_unit_service()
    logger.info(f"Unit stats: {units.get_stats()}")

    cheapest = units.cheapest_available()
    if cheapest:
        logger.info(f"Cheapest available: {cheapest.unit_type} at ${format_price(cheapest.price)}")

    for bedrooms in (0, 1, 2, 3):
        unit = units.cheapest_available(bedrooms=bedrooms)
        price = f"${format_price(unit.price)}" if unit else "none"
        logger.info(f"Cheapest {bedrooms}-bedroom: {price}")


def main():
    """Main entry point."""
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="Seed the Genium unit catalogue and broker list"
    )
    parser.add_argument(
        "--data-path",
        type=str,
        default=settings.DATA_PATH,
        help="Directory holding the seed CSV files"
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=50,
        help="Batch size for indexing (default: 50)"
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Run verification after seeding"
    )

    args = parser.parse_args()

    data_path = Path(args.data_path)
    units_file = data_path / settings.UNITS_FILENAME
    brokers_file = data_path / settings.BROKERS_FILENAME

    if not units_file.exists():
        logger.error(f"Data file not found: {units_file}")
        sys.exit(1)

    units = read_units_csv(units_file)
    describe_catalogue(units)
    totals = index_in_batches(units, args.batch_size)

    # The broker registry lives in the API process; it loads this file on startup
    brokers_found = 0
    if brokers_file.exists():
        brokers_found = len(read_brokers_csv(brokers_file))
    else:
        logger.warning(f"Broker file not found: {brokers_file}")

    if args.verify and totals["indexed"] > 0:
        verify_seed()

    print("\nSeed summary:")
    print(f"  Units indexed: {totals['indexed']}")
    print(f"  Units embedded: {totals['embedded']}")
    print(f"  Units failed: {totals['failed']}")
    print(f"  Brokers in seed file: {brokers_found}")

    if totals["failed"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
