"""
Pytest Configuration and Shared Fixtures

Provides common fixtures for all test modules including:
- Sample configurations (Pydantic-based)
- Tiny hand-built regression tables with known properties
- A synthetic credit table shaped like the German credit data
"""

import sys
from pathlib import Path
from typing import Any, Dict

import numpy as np
import pandas as pd
import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from scripts.generate_sample_data import generate_credit_data


# ===================================================================
# CONFIGURATION FIXTURES
# ===================================================================

@pytest.fixture
def sample_config_dict(tmp_path) -> Dict[str, Any]:
    """Minimal valid config dict that can be loaded into PipelineConfig."""
    return {
        "data": {
            "input_path": str(tmp_path / "credit.csv"),
            "drop_columns": [],
        },
        "model": {
            "target": "Amount",
            "predictors": ["Duration", "InstallmentRatePercentage", "Age", "Telephone"],
        },
        "resampling": {
            "split_ratio": 0.90,
            "iterations": 20,
            "seed_offset": 0,
            "n_jobs": 1,
        },
        "selection": {
            "enabled": True,
            "candidates": [],
            "max_predictors": 4,
            "random_state": 42,
            "tree": {"max_depth": 3, "min_samples_leaf": 10},
            "lasso": {"cv": 5, "max_iter": 10000},
        },
        "output": {
            "base_dir": str(tmp_path / "outputs"),
            "save_iterations": True,
            "save_selection": True,
            "save_plots": True,
        },
        "reproducibility": {
            "save_config": True,
            "save_metadata": True,
            "log_level": "DEBUG",
        },
    }


@pytest.fixture
def sample_config(sample_config_dict):
    """Create a PipelineConfig from the sample dict."""
    from credit_mutate.config.schema import PipelineConfig

    return PipelineConfig(**sample_config_dict)


# ===================================================================
# DATA FIXTURES
# ===================================================================

@pytest.fixture
def linear_data() -> pd.DataFrame:
    """10 rows, x = 1..10, y = 2x + small fixed noise.

    Noise stays below 0.5 in absolute value, so y is strictly increasing
    and any two holdout rows have distinct actual and predicted values.
    """
    x = np.arange(1, 11, dtype=float)
    noise = np.array([0.30, -0.20, 0.10, -0.40, 0.25, -0.10, 0.05, 0.35, -0.30, 0.15])
    return pd.DataFrame({"x": x, "y": 2.0 * x + noise})


@pytest.fixture
def collinear_data() -> pd.DataFrame:
    """4 rows where x2 is exactly twice x1."""
    x1 = np.array([1.0, 2.0, 3.0, 4.0])
    return pd.DataFrame({
        "x1": x1,
        "x2": 2.0 * x1,
        "y": np.array([3.1, 5.9, 9.2, 11.8]),
    })


@pytest.fixture
def regression_data() -> pd.DataFrame:
    """200 rows, two numeric predictors and a three-level categorical."""
    rng = np.random.RandomState(42)
    n = 200
    x1 = rng.normal(10.0, 2.0, size=n)
    x2 = rng.uniform(0.0, 5.0, size=n)
    grp = rng.choice(["a", "b", "c"], size=n)
    effect = pd.Series(grp).map({"a": 0.0, "b": 1.5, "c": -1.0}).to_numpy()
    y = 3.0 + 1.2 * x1 - 0.8 * x2 + effect + rng.normal(0.0, 1.0, size=n)
    return pd.DataFrame({
        "x1": x1,
        "x2": x2,
        "grp": pd.Categorical(grp),
        "y": y,
    })


@pytest.fixture
def credit_data() -> pd.DataFrame:
    """Synthetic German-credit-style table, 300 rows."""
    return generate_credit_data(n=300, seed=7)


@pytest.fixture
def credit_csv(tmp_path, credit_data) -> str:
    path = tmp_path / "credit.csv"
    credit_data.to_csv(path, index=False)
    return str(path)
