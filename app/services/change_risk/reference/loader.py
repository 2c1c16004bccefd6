"""
Reference data loading utilities.

The bundled YAML file (or the one named by settings.REFERENCE_DATA_PATH) holds
three sections: historical_changes, scheduled_changes and maintenance_windows.
It is parsed once into an immutable ReferenceData bundle that implements all
three provider interfaces and is shared by every assessment session.
"""

from datetime import datetime
from functools import lru_cache
from typing import Any, Dict, Tuple
import os

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.core.logging import get_logger
from app.schemas.change_request import ChangeType
from app.schemas.reference_data import (
    HistoricalChange,
    MaintenanceWindow,
    ScheduledChange,
)
from app.services.change_risk.errors import ReferenceDataError
from app.services.change_risk.scheduling import intervals_overlap

logger = get_logger(__name__)

DEFAULT_REFERENCE_DATA_PATH = os.path.join(
    os.path.dirname(__file__), "reference_data.yaml"
)


class ReferenceData(BaseModel):
    """In-memory, read-only reference data."""

    model_config = ConfigDict(frozen=True)

    historical_changes: Tuple[HistoricalChange, ...] = Field(default=())
    scheduled_changes: Tuple[ScheduledChange, ...] = Field(default=())
    maintenance_windows: Tuple[MaintenanceWindow, ...] = Field(default=())

    def query_similar_changes(
        self, business_application_group: str, change_type: ChangeType
    ) -> Tuple[HistoricalChange, ...]:
        return tuple(
            change
            for change in self.historical_changes
            if change.business_application_group == business_application_group
            and change.type == change_type
        )

    def query_overlapping_changes(
        self, start: datetime, end: datetime
    ) -> Tuple[ScheduledChange, ...]:
        return tuple(
            change
            for change in self.scheduled_changes
            if intervals_overlap(start, end, change.start, change.end)
        )

    def query_maintenance_windows(self) -> Tuple[MaintenanceWindow, ...]:
        return self.maintenance_windows


def parse_reference_data(raw: Dict[str, Any]) -> ReferenceData:
    """
    Build a ReferenceData bundle from a parsed YAML/JSON mapping.

    Raises:
        ReferenceDataError: If a record fails validation.
    """
    try:
        return ReferenceData.model_validate(
            {
                "historical_changes": raw.get("historical_changes") or [],
                "scheduled_changes": raw.get("scheduled_changes") or [],
                "maintenance_windows": raw.get("maintenance_windows") or [],
            }
        )
    except ValidationError as e:
        raise ReferenceDataError(f"Invalid reference data: {e}") from e


@lru_cache(maxsize=4)
def load_reference_data(path: str = DEFAULT_REFERENCE_DATA_PATH) -> ReferenceData:
    """
    Load reference data from a YAML file.

    Cached per path, so every caller shares one immutable bundle.

    Args:
        path: Path to the reference data YAML file.

    Returns:
        The parsed ReferenceData.

    Raises:
        ReferenceDataError: If the file is missing, unparsable or invalid.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (FileNotFoundError, yaml.YAMLError) as e:
        logger.error("Failed to load reference data from %s: %s", path, e)
        raise ReferenceDataError(f"Cannot load reference data from {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ReferenceDataError(f"Reference data in {path} must be a mapping")

    data = parse_reference_data(raw)
    logger.info(
        "Loaded reference data from %s: %d historical, %d scheduled, %d windows",
        path,
        len(data.historical_changes),
        len(data.scheduled_changes),
        len(data.maintenance_windows),
    )
    return data
