# healthmate_sleep/utils/data_validation.py

import logging
from typing import Any, Dict, Iterable, List, Tuple, Type

import pandas as pd
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class RecordValidator:
    """Utility class for validating stored records against a Pydantic model"""

    @staticmethod
    def clean_row(row: Dict[str, Any]) -> Dict[str, Any]:
        """Drop blank strings, None and NaN so the model defaults apply"""
        cleaned = {}
        for key, value in row.items():
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            if not isinstance(value, (str, dict, list)) and pd.isna(value):
                continue
            cleaned[key] = value
        return cleaned

    @staticmethod
    def filter_records(records: Iterable[Dict[str, Any]], model_class: Type[BaseModel], source: str = 'records'):
        """
        Validate records, keeping the valid ones and quarantining the rest

        Args:
            records: Raw dictionaries (e.g. CSV rows or decoded JSON items)
            model_class: Pydantic model class to validate against
            source: Name used in log messages

        Returns:
            Tuple of (valid model instances, list of (index, error message) for skipped records)
        """
        valid: List[BaseModel] = []
        skipped: List[Tuple[int, str]] = []

        for i, record in enumerate(records):
            try:
                valid.append(model_class(**RecordValidator.clean_row(dict(record))))
            except (ValidationError, TypeError, ValueError) as e:
                skipped.append((i, str(e)))

        if skipped:
            logger.warning(f"Skipped {len(skipped)} invalid record(s) in {source}")
            for i, error in skipped:
                logger.warning(f"  - Record {i}: {error}")

        return valid, skipped

    @staticmethod
    def filter_dataframe(df: pd.DataFrame, model_class: Type[BaseModel], source: str = 'records'):
        """Validate every row of a DataFrame; see filter_records"""
        return RecordValidator.filter_records(
            (row.to_dict() for _, row in df.iterrows()),
            model_class,
            source=source,
        )
