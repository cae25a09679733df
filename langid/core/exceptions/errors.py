"""
Built-in exception types. Add new ones here or via exception_factory().
"""
from __future__ import annotations

from langid.core.exceptions.base import ProjectError


class ConfigurationError(ProjectError):
    """Invalid or missing configuration."""

    default_code = "CONFIGURATION_ERROR"
    default_http_status = 500


class ValidationError(ProjectError):
    """Request or input validation failed."""

    default_code = "VALIDATION_ERROR"
    default_http_status = 400


class EmptyInputError(ValidationError):
    """Text is empty after trimming and truncation."""

    default_code = "EMPTY_INPUT"
    default_http_status = 400


class NotReadyError(ProjectError):
    """Detector has not finished initializing (or failed to)."""

    default_code = "NOT_READY"
    default_http_status = 503


class DetectionFailedError(ProjectError):
    """The language detector raised while classifying."""

    default_code = "DETECTION_FAILED"
    default_http_status = 500

