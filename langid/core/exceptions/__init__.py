"""
Service exception system.

Usage:
    from langid.core.exceptions import NotReadyError, exception_factory

    raise NotReadyError("Detector not ready yet.")

    QuotaError = exception_factory("QuotaError", code="QUOTA", http_status=429)
"""
from langid.core.exceptions.base import ProjectError, exception_factory
from langid.core.exceptions.errors import (
    ConfigurationError,
    DetectionFailedError,
    EmptyInputError,
    NotReadyError,
    ValidationError,
)

__all__ = [
    "ProjectError",
    "exception_factory",
    "ConfigurationError",
    "ValidationError",
    "EmptyInputError",
    "NotReadyError",
    "DetectionFailedError",
]
