"""
Selection Module

Exploratory predictor selection with a decision tree and LASSO.
"""

from credit_mutate.selection.tree_selector import TreeExploration, explore_tree
from credit_mutate.selection.lasso_selector import LassoExploration, explore_lasso
from credit_mutate.selection.selector import (
    PredictorSelection,
    select_predictors,
    run_selection,
)

__all__ = [
    "TreeExploration",
    "explore_tree",
    "LassoExploration",
    "explore_lasso",
    "PredictorSelection",
    "select_predictors",
    "run_selection",
]
