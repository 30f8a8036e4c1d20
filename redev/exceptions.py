"""Exception hierarchy for the entity store and financial engine."""


class RedevError(Exception):
    """Base exception for all redev errors."""


class ConfigurationError(RedevError):
    """Raised when the store backend configuration is invalid or missing."""


class FinancialValidationError(RedevError, ValueError):
    """Raised when financial inputs are rejected before computation."""


class StoreError(RedevError):
    """Raised when a backing resource cannot be read or written."""
