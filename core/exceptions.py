"""
Exception Definitions - Custom exceptions for MediAI Pro
========================================================

This module defines all custom exceptions used throughout the application.
Each exception carries the HTTP status the web layer reports it with.
"""


class MediAIError(Exception):
    """
    Base exception for all MediAI errors.

    All custom exceptions in this application inherit from this base class,
    allowing for easy catching of all application-specific errors.

    Attributes:
        message (str): Human-readable error description
        details (dict): Additional error details for debugging
        status_code (int): HTTP status used when surfaced by the web API
    """

    status_code = 500

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            details: Optional dictionary with additional error context
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return formatted error message with details if present."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigError(MediAIError):
    """
    Configuration-related errors.

    Raised when there are issues with:
    - Invalid configuration values
    - Configuration parsing errors
    - Unreadable rules files
    """
    pass


class ValidationError(MediAIError):
    """
    Caller input errors.

    Raised when a request is missing required input, such as an
    empty chat message or a patient without a name.
    """

    status_code = 400


class NotFoundError(MediAIError):
    """Raised when a patient or recording id is unknown."""

    status_code = 404


class RuleError(MediAIError):
    """
    Rule definition errors.

    Raised when a rule has no patterns, no template, or an
    unknown match type.
    """
    pass
