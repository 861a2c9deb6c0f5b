from __future__ import annotations


class QLConfigError(ValueError):
    """Raised when a configuration, search space or policy cannot be built."""


class ModelUnavailableError(RuntimeError):
    """Raised when prediction is requested but training produced no model."""
