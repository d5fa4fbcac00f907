"""
Config Module

Pydantic-based configuration for the MUTATE study.
"""

from credit_mutate.config.schema import (
    PipelineConfig,
    DataConfig,
    ModelSpecConfig,
    ResamplingConfig,
    SelectionConfig,
    TreeSelectionConfig,
    LassoSelectionConfig,
    OutputConfig,
    ReproducibilityConfig,
)
from credit_mutate.config.loader import load_config, save_config

__all__ = [
    "PipelineConfig",
    "DataConfig",
    "ModelSpecConfig",
    "ResamplingConfig",
    "SelectionConfig",
    "TreeSelectionConfig",
    "LassoSelectionConfig",
    "OutputConfig",
    "ReproducibilityConfig",
    "load_config",
    "save_config",
]
