"""
Data Loader

Loads the credit dataset (CSV or parquet) into an in-memory DataFrame.
The table is read once and treated as read-only by every later stage.
"""

from pathlib import Path
from typing import List, Optional
import logging

import pandas as pd

from credit_mutate.core.exceptions import DataReaderError, DataValidationError


logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".csv", ".parquet")


def load_dataset(
    input_path: str,
    target_column: str = 'Amount',
    drop_columns: Optional[List[str]] = None,
) -> pd.DataFrame:
    """
    Load the credit dataset.

    Args:
        input_path: Path to a .csv or .parquet file.
        target_column: Name of the numeric target column.
        drop_columns: Columns removed right after loading (row ids, leaks).

    Returns:
        DataFrame with a fresh RangeIndex and string columns as category.

    Raises:
        DataReaderError: If the file is missing, unsupported or unreadable.
        DataValidationError: If the table is empty or the target is unusable.
    """
    path = Path(input_path)
    if not path.exists():
        raise DataReaderError("Dataset file not found", source=str(path))
    if path.suffix not in SUPPORTED_SUFFIXES:
        raise DataReaderError(
            f"Unsupported dataset format '{path.suffix}'",
            source=str(path),
            details={"supported": list(SUPPORTED_SUFFIXES)},
        )

    logger.info(f"LOAD | Reading {path}")
    try:
        if path.suffix == ".csv":
            df = pd.read_csv(path)
        else:
            df = pd.read_parquet(path)
    except (OSError, ValueError) as e:
        raise DataReaderError("Failed to read dataset", source=str(path), cause=e)

    if drop_columns:
        present = [c for c in drop_columns if c in df.columns]
        missing = sorted(set(drop_columns) - set(present))
        if missing:
            logger.warning(f"LOAD | drop_columns not in data: {missing}")
        df = df.drop(columns=present)

    return prepare_dataset(df, target_column)


def prepare_dataset(df: pd.DataFrame, target_column: str = 'Amount') -> pd.DataFrame:
    """
    Validate and normalize an in-memory table.

    Returns a copy: object and string columns become ``category`` and the
    index is reset to 0..N-1 so row positions double as row ids.
    """
    if len(df) == 0:
        raise DataValidationError("Dataset is empty")

    if target_column not in df.columns:
        raise DataValidationError(
            f"Target column '{target_column}' not found in data",
            validation_errors=[{"column": target_column, "error": "missing"}],
        )

    if not pd.api.types.is_numeric_dtype(df[target_column]):
        raise DataValidationError(
            f"Target column '{target_column}' must be numeric",
            validation_errors=[
                {"column": target_column, "dtype": str(df[target_column].dtype)}
            ],
        )

    df = df.reset_index(drop=True).copy()
    for col in df.columns:
        if pd.api.types.is_object_dtype(df[col]) or pd.api.types.is_string_dtype(df[col]):
            df[col] = df[col].astype("category")

    n_categorical = sum(
        isinstance(df[c].dtype, pd.CategoricalDtype) for c in df.columns
    )
    logger.info(
        f"LOAD | {len(df):,} rows, {len(df.columns)} columns "
        f"({n_categorical} categorical), target={target_column}"
    )
    logger.info(
        f"LOAD | {target_column}: mean={df[target_column].mean():,.2f}, "
        f"sd={df[target_column].std():,.2f}"
    )
    return df
