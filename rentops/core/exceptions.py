"""
Base exception classes shared by all maintenance scripts.
"""
from typing import Any, Dict, List, Optional


class MaintenanceError(Exception):
    """Base exception for maintenance script failures."""

    def __init__(
        self,
        message: str,
        original_exception: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.original_exception = original_exception
        self.context = context or {}

    def __str__(self) -> str:
        base = self.message
        if self.context:
            base += f" | Context: {self.context}"
        if self.original_exception:
            base += f" | Original: {str(self.original_exception)}"
        return base


class ConfigurationError(MaintenanceError):
    """Raised when required settings are missing or invalid."""

    def __init__(
        self,
        missing: List[str],
        message: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        self.missing = list(missing)
        super().__init__(
            message or f"Missing required environment variables: {', '.join(self.missing)}",
            original_exception=original_exception,
            context={"missing": self.missing},
        )
