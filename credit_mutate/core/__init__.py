"""
Credit MUTATE Study - Core Package

Core infrastructure shared by every stage of the study:
- Logging utilities
- Custom exceptions
"""

from credit_mutate.core.logger import get_logger, setup_logging, PipelineLogger
from credit_mutate.core.exceptions import (
    PipelineException,
    ConfigurationError,
    InvalidSpecError,
    DataValidationError,
    DataReaderError,
    FeatureSelectionError,
    ModelTrainingError,
    FitError,
    EvaluationError,
    DegenerateHoldoutError,
    ArtifactError,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "PipelineLogger",
    # Exceptions
    "PipelineException",
    "ConfigurationError",
    "InvalidSpecError",
    "DataValidationError",
    "DataReaderError",
    "FeatureSelectionError",
    "ModelTrainingError",
    "FitError",
    "EvaluationError",
    "DegenerateHoldoutError",
    "ArtifactError",
]
