"""
Custom Exceptions for the Study

Provides a hierarchy of exceptions for different error types,
enabling precise error handling throughout the study.
"""

from typing import Any, Dict, List, Optional


class PipelineException(Exception):
    """
    Base exception for all study errors.

    All custom exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """
        Initialize the exception.

        Args:
            message: Error message
            details: Additional error details
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        result = self.message
        if self.details:
            result += f" | Details: {self.details}"
        if self.cause:
            result += f" | Caused by: {self.cause}"
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None
        }


class ConfigurationError(PipelineException):
    """
    Raised when there's a configuration error.

    Examples:
    - Invalid YAML
    - Invalid configuration values
    """
    pass


class InvalidSpecError(ConfigurationError):
    """
    Raised when a model specification cannot be run against a dataset.

    Examples:
    - Target or predictor field absent from the dataset
    - Missing values in a referenced field
    - Split ratio outside (0, 1) or non-positive iteration count
    - Split leaving the training or holdout partition empty
    """

    def __init__(
        self,
        message: str,
        fields: Optional[List[str]] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.fields = fields or []

    def __str__(self) -> str:
        result = super().__str__()
        if self.fields:
            result += f" | Fields: {self.fields}"
        return result


class DataValidationError(PipelineException):
    """
    Raised when data validation fails.

    Examples:
    - Empty dataset
    - Missing target column
    """

    def __init__(
        self,
        message: str,
        validation_errors: Optional[List[Dict[str, Any]]] = None,
        **kwargs
    ):
        """
        Initialize the data validation error.

        Args:
            message: Error message
            validation_errors: List of validation error details
            **kwargs: Additional arguments for parent class
        """
        super().__init__(message, **kwargs)
        self.validation_errors = validation_errors or []

    def __str__(self) -> str:
        result = super().__str__()
        if self.validation_errors:
            error_count = len(self.validation_errors)
            result += f" | {error_count} validation error(s)"
        return result


class DataReaderError(PipelineException):
    """
    Raised when reading the dataset fails.

    Examples:
    - File not found
    - Unsupported file format
    - Unparseable content
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.source = source

    def __str__(self) -> str:
        result = super().__str__()
        if self.source:
            result += f" | Source: {self.source}"
        return result


class FeatureSelectionError(PipelineException):
    """
    Raised when predictor selection fails.

    Examples:
    - No candidate predictors
    - No predictor survives the LASSO
    """
    pass


class ModelTrainingError(PipelineException):
    """
    Raised when model fitting fails.
    """

    def __init__(
        self,
        message: str,
        model_name: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.model_name = model_name

    def __str__(self) -> str:
        result = super().__str__()
        if self.model_name:
            result += f" | Model: {self.model_name}"
        return result


class FitError(ModelTrainingError):
    """
    Raised when an OLS training design is rank-deficient.

    Carries the resampling iteration that produced the singular design,
    or None for the single full-data fit.
    """

    def __init__(
        self,
        message: str,
        iteration: Optional[int] = None,
        **kwargs
    ):
        kwargs.setdefault("model_name", "OLS")
        super().__init__(message, **kwargs)
        self.iteration = iteration

    def __str__(self) -> str:
        result = super().__str__()
        if self.iteration is not None:
            result += f" | Iteration: {self.iteration}"
        return result


class EvaluationError(PipelineException):
    """
    Raised when model evaluation fails.
    """

    def __init__(
        self,
        message: str,
        metric_name: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.metric_name = metric_name


class DegenerateHoldoutError(EvaluationError):
    """
    Raised when holdout R-squared is undefined.

    The squared correlation needs variance in both the actual and the
    predicted holdout target values.
    """

    def __init__(
        self,
        message: str,
        iteration: Optional[int] = None,
        **kwargs
    ):
        kwargs.setdefault("metric_name", "r2_holdout")
        super().__init__(message, **kwargs)
        self.iteration = iteration

    def __str__(self) -> str:
        result = super().__str__()
        if self.iteration is not None:
            result += f" | Iteration: {self.iteration}"
        return result


class ArtifactError(PipelineException):
    """
    Raised when saving a run artifact fails.
    """

    def __init__(
        self,
        message: str,
        artifact_path: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.artifact_path = artifact_path
