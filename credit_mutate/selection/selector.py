"""
Predictor Selection

Combines the tree and LASSO explorations into one ordered predictor list:
fields LASSO keeps, ordered by tree importance (LASSO rank breaks ties),
capped at max_predictors.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import logging

import pandas as pd

from credit_mutate.config.schema import SelectionConfig
from credit_mutate.core.exceptions import FeatureSelectionError
from credit_mutate.selection.lasso_selector import LassoExploration, explore_lasso
from credit_mutate.selection.tree_selector import TreeExploration, explore_tree


logger = logging.getLogger(__name__)


@dataclass
class PredictorSelection:
    """Outcome of the selection step."""
    tree: TreeExploration
    lasso: LassoExploration
    selected: List[str] = field(default_factory=list)

    def to_frame(self) -> pd.DataFrame:
        """Per-field tree importance, LASSO coefficient and final choice."""
        merged = self.tree.importance_df[['Feature', 'Importance']].merge(
            self.lasso.coefficient_df[['Feature', 'Abs_Coefficient', 'Selected']],
            on='Feature',
            how='outer',
        ).rename(columns={'Selected': 'Lasso_Selected'})
        merged['Chosen'] = merged['Feature'].isin(self.selected)
        return merged.sort_values(
            ['Chosen', 'Importance'], ascending=[False, False]
        ).reset_index(drop=True)


def select_predictors(
    tree: TreeExploration,
    lasso: LassoExploration,
    max_predictors: int = 4,
) -> List[str]:
    """
    Ordered predictor list from both explorations.

    Raises:
        FeatureSelectionError: If LASSO keeps no field.
    """
    kept = lasso.selected_fields
    if not kept:
        raise FeatureSelectionError(
            "LASSO kept no predictor",
            details={"alpha": lasso.alpha},
        )

    importance = tree.importance_df.set_index('Feature')['Importance']
    lasso_rank = lasso.coefficient_df.set_index('Feature')['Rank']
    ordered = sorted(
        kept,
        key=lambda f: (-float(importance.get(f, 0.0)), int(lasso_rank[f])),
    )
    selected = ordered[:max_predictors]
    logger.info(f"SELECT | Predictors: {selected}")
    return selected


def run_selection(
    dataset: pd.DataFrame,
    target: str,
    config: Optional[SelectionConfig] = None,
) -> PredictorSelection:
    """Run both explorations and choose predictors."""
    config = config or SelectionConfig()
    candidates = list(config.candidates) or None

    tree = explore_tree(
        dataset,
        target,
        candidates=candidates,
        max_depth=config.tree.max_depth,
        min_samples_leaf=config.tree.min_samples_leaf,
        random_state=config.random_state,
    )
    lasso = explore_lasso(
        dataset,
        target,
        candidates=candidates,
        cv=config.lasso.cv,
        max_iter=config.lasso.max_iter,
        random_state=config.random_state,
    )
    selected = select_predictors(tree, lasso, config.max_predictors)
    return PredictorSelection(tree=tree, lasso=lasso, selected=selected)
