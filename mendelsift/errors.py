"""
Exception classes for inheritance analysis.

Only structural problems are raised as exceptions. Per-variant problems
(malformed genotype calls, ungenotyped parents, incomplete trios) are
reported as diagnostics on the analysis results instead.
"""

from typing import Dict, Optional


class InheritanceError(Exception):
    """Base exception for all mendelsift errors."""

    def __init__(self, message: str, details: Optional[Dict] = None):
        """Initialize inheritance error.

        Parameters
        ----------
        message : str
            Error message
        details : dict, optional
            Additional error details
        """
        super().__init__(message)
        self.details = details or {}


class PedigreeCycleError(InheritanceError):
    """Raised when an individual is listed as its own ancestor."""

    def __init__(self, sample_id: str, path: Optional[list] = None):
        """Initialize pedigree cycle error."""
        path = path or [sample_id]
        message = (
            f"Pedigree record '{sample_id}' is invalid: individual is its own ancestor "
            f"({' -> '.join(path)})"
        )
        super().__init__(message, {"sample_id": sample_id, "path": list(path)})
        self.sample_id = sample_id


class ConfigError(InheritanceError, ValueError):
    """Raised when the configuration contains unusable values."""
