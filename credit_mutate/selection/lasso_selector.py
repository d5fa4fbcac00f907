"""
LASSO Exploration

Cross-validated LASSO of the target on standardized candidates. A field
survives when any of its encoded columns keeps a non-zero coefficient at
the CV-optimal penalty.
"""

from dataclasses import dataclass
from typing import List, Optional
import logging

import numpy as np
import pandas as pd
from sklearn.linear_model import LassoCV
from sklearn.model_selection import KFold
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler

from credit_mutate.selection.encoding import (
    candidate_fields,
    complete_rows,
    encode_candidates,
)


logger = logging.getLogger(__name__)


@dataclass
class LassoExploration:
    """Field-level LASSO coefficients at the CV-optimal alpha."""
    coefficient_df: pd.DataFrame
    alpha: float
    r2_in_sample: float

    @property
    def selected_fields(self) -> List[str]:
        kept = self.coefficient_df[self.coefficient_df['Selected']]
        return list(kept['Feature'])


def explore_lasso(
    dataset: pd.DataFrame,
    target: str,
    candidates: Optional[List[str]] = None,
    cv: int = 10,
    max_iter: int = 10000,
    random_state: int = 42,
) -> LassoExploration:
    """
    Fit LassoCV on standardized one-hot candidates.

    Coefficients are on the standardized scale; a field's score is the
    largest absolute coefficient among its encoded columns.

    Returns:
        LassoExploration sorted by absolute coefficient, descending.
    """
    fields = candidate_fields(dataset, target, candidates)
    data = complete_rows(dataset, fields + [target])
    X, source = encode_candidates(data, fields, drop_first=True)
    y = data[target].astype(float)

    folds = KFold(n_splits=cv, shuffle=True, random_state=random_state)
    pipeline = Pipeline([
        ('scaler', StandardScaler()),
        ('lasso', LassoCV(
            cv=folds,
            max_iter=max_iter,
            random_state=random_state,
        )),
    ])
    pipeline.fit(X, y)
    lasso = pipeline.named_steps['lasso']

    column_coef = pd.Series(lasso.coef_, index=X.columns)
    abs_by_field = column_coef.abs().groupby([source[c] for c in X.columns]).max()

    coefficient_df = (
        abs_by_field.rename('Abs_Coefficient')
        .rename_axis('Feature')
        .reset_index()
        .sort_values(['Abs_Coefficient', 'Feature'], ascending=[False, True])
        .reset_index(drop=True)
    )
    coefficient_df['Selected'] = coefficient_df['Abs_Coefficient'] > 0
    coefficient_df['Rank'] = range(1, len(coefficient_df) + 1)

    r2 = float(pipeline.score(X, y))
    result = LassoExploration(
        coefficient_df=coefficient_df,
        alpha=float(lasso.alpha_),
        r2_in_sample=r2,
    )
    logger.info(
        f"SELECT | LASSO: alpha={result.alpha:.4g}, in-sample R2={r2:.4f}, "
        f"{len(result.selected_fields)}/{len(fields)} fields kept"
    )
    dropped = coefficient_df.loc[~coefficient_df['Selected'], 'Feature'].tolist()
    if dropped:
        logger.debug(f"SELECT | LASSO dropped: {dropped}")
    if np.isclose(result.alpha, lasso.alphas_.max()):
        logger.warning("SELECT | LASSO chose the largest alpha on the path")
    return result
