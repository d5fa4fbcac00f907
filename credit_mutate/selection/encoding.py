"""
Candidate encoding for predictor exploration.

One-hot encodes categorical candidates and remembers which source field
each encoded column came from, so model scores can be rolled back up to
field level.
"""

from typing import Dict, List, Optional, Tuple

import pandas as pd

from credit_mutate.core.exceptions import FeatureSelectionError


def candidate_fields(
    dataset: pd.DataFrame,
    target: str,
    candidates: Optional[List[str]] = None,
) -> List[str]:
    """Explicit candidates, or every non-target column."""
    if candidates:
        absent = [c for c in candidates if c not in dataset.columns]
        if absent:
            raise FeatureSelectionError(
                "Selection candidates absent from the dataset",
                details={"absent": absent},
            )
        fields = [c for c in candidates if c != target]
    else:
        fields = [c for c in dataset.columns if c != target]

    if not fields:
        raise FeatureSelectionError("No candidate predictors to explore")
    return fields


def encode_candidates(
    dataset: pd.DataFrame,
    fields: List[str],
    drop_first: bool = False,
) -> Tuple[pd.DataFrame, Dict[str, str]]:
    """
    Numeric matrix of candidates plus an encoded-column -> field map.

    Rows with missing candidate values are not dropped here; callers
    decide (trees and LASSO both need complete rows).
    """
    blocks = []
    source: Dict[str, str] = {}
    for field in fields:
        series = dataset[field]
        if pd.api.types.is_numeric_dtype(series) or pd.api.types.is_bool_dtype(series):
            blocks.append(series.astype(float).to_frame(field))
            source[field] = field
        else:
            dummies = pd.get_dummies(
                series, prefix=field, prefix_sep='=', drop_first=drop_first, dtype=float
            )
            blocks.append(dummies)
            for col in dummies.columns:
                source[col] = field

    encoded = pd.concat(blocks, axis=1)
    return encoded, source


def complete_rows(dataset: pd.DataFrame, columns: List[str]) -> pd.DataFrame:
    """Rows without missing values in the given columns."""
    return dataset.dropna(subset=columns)
