"""
Custom exception classes for the form schema builder.

Lookup misses during edits are never raised; these exceptions cover
programming errors (unknown kinds or types) and configuration failures.
"""

import logging
from typing import Optional, Dict, Any, List, Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


class FormBuilderError(Exception):
    """
    Base exception for form builder errors.

    Attributes:
        message: Error message
        context: Additional context information
        recovery_suggestions: List of suggested recovery actions
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None,
                 recovery_suggestions: Optional[List[str]] = None):
        self.message = message
        self.context = context or {}
        self.recovery_suggestions = recovery_suggestions or []
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def get_full_details(self) -> Dict[str, Any]:
        """Get complete error details including context and suggestions."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'context': self.context,
            'recovery_suggestions': self.recovery_suggestions
        }


class _UnsupportedValueError(FormBuilderError):
    """Shared shape for 'value not in allowed set' errors."""

    value_name = "value"

    def __init__(self, value: Any, allowed: Iterable[str], message: Optional[str] = None):
        self.value = value
        self.allowed = sorted(allowed)

        if message is None:
            message = f"Unsupported {self.value_name} '{value}'. Expected one of: {', '.join(self.allowed)}"

        context = {
            self.value_name.replace(' ', '_'): value,
            'allowed': self.allowed
        }

        recovery_suggestions = [
            f"Choose a {self.value_name} from: {', '.join(self.allowed)}"
        ]

        super().__init__(message, context, recovery_suggestions)


class InvalidFormKindError(_UnsupportedValueError):
    """Exception raised when a form is created or updated with an unknown kind."""

    value_name = "form kind"


class InvalidValueTypeError(_UnsupportedValueError):
    """Exception raised when an element is created with an unknown value type."""

    value_name = "value type"


class InvalidOrientationError(_UnsupportedValueError):
    """Exception raised when an array form is given an unknown orientation."""

    value_name = "orientation"


class ConfigurationLoadError(FormBuilderError):
    """
    Exception raised when configuration file loading fails.

    This includes YAML parsing errors, file not found, permission issues, etc.
    """

    def __init__(self, config_path: Path, original_error: Exception,
                 message: Optional[str] = None):
        self.config_path = config_path
        self.original_error = original_error

        if message is None:
            message = f"Failed to load configuration from {config_path}: {str(original_error)}"

        context = {
            'config_path': str(config_path),
            'original_error_type': type(original_error).__name__,
            'original_error_message': str(original_error)
        }

        recovery_suggestions = [
            "Check if config.yaml exists and is readable",
            "Verify YAML syntax is correct",
            "Application will use default configuration as fallback"
        ]

        super().__init__(message, context, recovery_suggestions)
