"""
Resampling Module

MUTATE (Multiple Train and Test) evaluation of a fixed OLS model:
model specification, per-iteration fitting, result table, summary and
comparison against the full-data fit.
"""

from credit_mutate.resampling.model_spec import ModelSpec, Design, resolve_design, validate_spec
from credit_mutate.resampling.ols import FullDataFit, fit_ols, fit_full_data, squared_correlation
from credit_mutate.resampling.evaluator import (
    MutateEvaluator,
    IterationRecord,
    ResultTable,
    Partition,
    partition_rows,
    training_size,
    default_seed_fn,
    make_seed_fn,
    run,
)
from credit_mutate.resampling.summary import SummaryStats, summarize, compare_with_full_fit

__all__ = [
    "ModelSpec",
    "Design",
    "resolve_design",
    "validate_spec",
    "FullDataFit",
    "fit_ols",
    "fit_full_data",
    "squared_correlation",
    "MutateEvaluator",
    "IterationRecord",
    "ResultTable",
    "Partition",
    "partition_rows",
    "training_size",
    "default_seed_fn",
    "make_seed_fn",
    "run",
    "SummaryStats",
    "summarize",
    "compare_with_full_fit",
]
