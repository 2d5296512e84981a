# pharmashe/core/exceptions.py

"""Custom exception hierarchy for PharmaShe.

This module defines the specific error types used throughout the application
to differentiate between configuration, input, and upstream service errors.
"""


class PharmaSheError(Exception):
    """Base exception for all application-specific errors."""

    pass


class ConfigurationError(PharmaSheError):
    """Raised when configuration loading or validation fails."""

    pass


class InitializationError(PharmaSheError):
    """Raised when a service client or external resource fails to initialize."""

    pass


class ValidationError(PharmaSheError):
    """Raised when input validation fails (e.g., an empty drug list)."""

    pass


class UpstreamServiceError(PharmaSheError):
    """Raised when openFDA or the dictionary service returns an unusable response."""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code


class AnalysisError(PharmaSheError):
    """Raised when the LLM fails to produce an analysis."""

    pass
