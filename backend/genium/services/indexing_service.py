"""
Catalogue indexing: embeds units and loads seed data from CSV.

CSV columns:
- units.csv: project_name, unit_type, bedrooms, bathrooms, sqft, price, floor, status, description
- brokers.csv: phone_number, name, email, authorized
"""

import logging
from pathlib import Path
from typing import List, Dict, Any, Optional, Union

import pandas as pd

from ..exceptions import UpstreamServiceError
from ..models.records import Unit, UnitStatus
from ..utils.helpers import format_number, string_to_uuid
from .llm_service import LLMService, get_llm_service
from .unit_service import UnitService, get_unit_service

logger = logging.getLogger(__name__)


def build_unit_text(unit: Unit) -> str:
    """
    Create the text that is embedded for a unit.

    Args:
        unit: Unit to describe

    Returns:
        Single-line description covering type, rooms, area, price and description
    """
    return (
        f"{unit.unit_type} unit with {format_number(unit.bedrooms)} bedrooms, "
        f"{format_number(unit.bathrooms)} bathrooms, {format_number(unit.sqft)} sqft. "
        f"Price: ${format_number(unit.price)}. {unit.description}"
    ).strip()


class UnitIndexer:
    """
    Generates embeddings for units that lack one and stores them
    in the unit registry.
    """

    def __init__(self, llm: Optional[LLMService] = None, units: Optional[UnitService] = None):
        self._llm = llm
        self._units = units

    @property
    def llm(self) -> LLMService:
        return self._llm if self._llm is not None else get_llm_service()

    @property
    def units(self) -> UnitService:
        return self._units if self._units is not None else get_unit_service()

    def index_units(self, units: List[Unit]) -> Dict[str, int]:
        """
        Embed and upsert units.

        Units that already carry an embedding are stored as-is. A unit whose
        embedding call fails is logged and skipped.

        Args:
            units: Units to index

        Returns:
            Counts of indexed, embedded and failed units
        """
        ready = []
        embedded = 0
        failed = 0

        for unit in units:
            if not unit.embedding:
                try:
                    unit.embedding = self.llm.embed(build_unit_text(unit))
                    embedded += 1
                except UpstreamServiceError as e:
                    logger.error(f"Error generating embedding for unit {unit.id}: {e}")
                    failed += 1
                    continue
            ready.append(unit)

        indexed = self.units.upsert_units(ready)
        logger.info(f"Indexed {indexed} units ({embedded} newly embedded, {failed} failed)")

        return {"indexed": indexed, "embedded": embedded, "failed": failed}


def _clean(value: Any, default: Any = None) -> Any:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return default
    return value


def read_units_csv(path: Union[str, Path]) -> List[Unit]:
    """
    Load units from a CSV file.

    Unit ids are derived from project, type, floor and price so that
    re-seeding the same file updates the same points.

    Args:
        path: CSV file path

    Returns:
        List of units without embeddings
    """
    df = pd.read_csv(path)
    units = []

    for row in df.to_dict(orient="records"):
        floor = _clean(row.get("floor"))
        unit = Unit(
            project_name=str(row["project_name"]),
            unit_type=str(row["unit_type"]),
            bedrooms=int(row["bedrooms"]),
            bathrooms=float(row["bathrooms"]),
            sqft=float(row["sqft"]),
            price=float(row["price"]),
            floor=int(floor) if floor is not None else None,
            status=str(_clean(row.get("status"), UnitStatus.AVAILABLE.value)),
            description=str(_clean(row.get("description"), "")),
        )
        unit.id = string_to_uuid(f"{unit.project_name}|{unit.unit_type}|{unit.floor}|{unit.price}")
        units.append(unit)

    logger.info(f"Loaded {len(units)} units from {path}")
    return units


def read_brokers_csv(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Load broker records from a CSV file.

    Phone numbers are read as text so leading '+' and zeros survive.

    Args:
        path: CSV file path

    Returns:
        List of broker dicts
    """
    df = pd.read_csv(path, dtype={"phone_number": str})
    records = []

    for row in df.to_dict(orient="records"):
        authorized = _clean(row.get("authorized"), True)
        if isinstance(authorized, str):
            authorized = authorized.strip().lower() in ("1", "true", "yes")
        records.append({
            "phone_number": str(row["phone_number"]).strip(),
            "name": str(row["name"]),
            "email": _clean(row.get("email")),
            "authorized": bool(authorized),
        })

    logger.info(f"Loaded {len(records)} brokers from {path}")
    return records
