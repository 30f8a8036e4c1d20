"""
Storage module for entity persistence.

This module provides a generic entity store contract, a JSON file backend and
a factory that selects the configured backend.
"""

from .backends import (
    FileBackend,
    MongoBackend,
    PostgresBackend,
    StoreBackend,
    resolve_backend,
)
from .base import EntityStore, Page
from .factory import StoreFactory, get_store_factory
from .file import (
    DocumentStore,
    FileEntityStore,
    InvestmentStore,
    InvestorStore,
    LoanStore,
    ProjectStore,
    TransactionStore,
    UserStore,
)

__all__ = [
    "EntityStore",
    "Page",
    "FileEntityStore",
    "ProjectStore",
    "UserStore",
    "DocumentStore",
    "LoanStore",
    "InvestorStore",
    "InvestmentStore",
    "TransactionStore",
    "StoreBackend",
    "FileBackend",
    "MongoBackend",
    "PostgresBackend",
    "resolve_backend",
    "StoreFactory",
    "get_store_factory",
]
