"""Exception hierarchy for the extraction engine."""

from typing import Any, Optional


class AppError(Exception):
    """Base exception for application errors."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error

class APIClientError(AppError):
    """Raised when an external API call fails."""
    pass

class APITimeoutError(APIClientError):
    """Raised when an external API call times out."""
    pass

class ConfigurationError(AppError):
    """Raised when configuration is invalid or missing."""
    pass

class NoDocumentsError(AppError):
    """Raised when a run has no documents to process at all."""
    pass

class MissingRequirementError(AppError):
    """Raised when a required document kind is absent and configured as a blocker."""
    def __init__(self, message: str, requirement: str):
        super().__init__(message)
        self.requirement = requirement

class EvidenceCoverageError(AppError):
    """Raised under the abort coverage policy when benefits fail evidence validation."""
    def __init__(self, message: str, result: Optional[Any] = None):
        super().__init__(message)
        self.result = result
