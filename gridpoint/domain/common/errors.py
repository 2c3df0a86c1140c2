#gridpoint/domain/common/errors.py

"""
Error values carried by failed Results.

Nothing in the click engine is fatal. A failure is either a rejected input
(the current selection stays pending) or a reported condition after which the
session carries on, so errors are plain values rather than exceptions.
"""
from enum import Enum
from typing import Optional, Dict, Any


class ErrorCategory(Enum):
    """Which part of the engine produced the error."""
    CONFIGURATION = "Configuration"
    GEOMETRY = "Geometry"
    INJECTION = "Injection"
    RESOURCE = "Resource"
    UI = "UI"
    UNKNOWN = "Unknown"


class ErrorSeverity(Enum):
    """How loudly the error is reported."""
    INFO = "Info"
    WARNING = "Warning"
    ERROR = "Error"
    CRITICAL = "Critical"


class DomainError:
    """
    Structured error: message plus category, severity, an optional
    machine-readable code and free-form details for the log line.

    Subclasses only fix the category and default severity.
    """
    category = ErrorCategory.UNKNOWN
    severity = ErrorSeverity.ERROR

    def __init__(self,
                 message: str,
                 code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None,
                 inner_error: Optional[Exception] = None,
                 category: Optional[ErrorCategory] = None,
                 severity: Optional[ErrorSeverity] = None):
        """
        Args:
            message: Human-readable error message
            code: Short identifier tests and callers can match on
            details: Values that explain the failure (index, path, command)
            inner_error: Exception that caused the failure, if any
            category: Overrides the class category
            severity: Overrides the class severity
        """
        self.message = message
        self.code = code
        self.details = details or {}
        self.inner_error = inner_error
        if category is not None:
            self.category = category
        if severity is not None:
            self.severity = severity

    @staticmethod
    def from_exception(ex: Exception) -> 'DomainError':
        return DomainError(message=str(ex), inner_error=ex)

    def __str__(self) -> str:
        label = f"{self.category.value} Error"
        if self.code:
            label += f" [{self.code}]"
        return f"{label}: {self.message}"


class GeometryError(DomainError):
    """
    Invalid geometric input: an out-of-range display or cell index, a point
    outside the display or viewport, or a grid too dense for its display.
    The input is rejected and the current state is kept.
    """
    category = ErrorCategory.GEOMETRY
    severity = ErrorSeverity.WARNING


class ConfigurationError(DomainError):
    """A setting could not be read or validated; its fallback value is used."""
    category = ErrorCategory.CONFIGURATION


class InjectionError(DomainError):
    """The external pointer move or click request failed. Never retried."""
    category = ErrorCategory.INJECTION


class ResourceError(DomainError):
    """Display enumeration, screen capture or worker thread failure."""
    category = ErrorCategory.RESOURCE


class UIError(DomainError):
    category = ErrorCategory.UI
    severity = ErrorSeverity.WARNING
