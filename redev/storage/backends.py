"""
Store backend variants.

Each backend is a ``StoreBackend`` subclass exposing the same seven store
constructors. ``resolve_backend`` maps a ``DatabaseConfig`` onto exactly one
variant, so adding a backend means adding a class here and an entry in
``BACKENDS``.
"""

from abc import ABC, abstractmethod
from typing import Dict, Type

from redev.config import DatabaseConfig, DatabaseType
from redev.exceptions import ConfigurationError

from .base import EntityStore
from .file import (
    DocumentStore,
    InvestmentStore,
    InvestorStore,
    LoanStore,
    ProjectStore,
    TransactionStore,
    UserStore,
)


class StoreBackend(ABC):
    """A storage backend able to construct one store per entity kind."""

    @abstractmethod
    def project_store(self) -> EntityStore:
        """Store for projects."""

    @abstractmethod
    def user_store(self) -> EntityStore:
        """Store for users."""

    @abstractmethod
    def document_store(self) -> EntityStore:
        """Store for documents."""

    @abstractmethod
    def loan_store(self) -> EntityStore:
        """Store for loans."""

    @abstractmethod
    def investor_store(self) -> EntityStore:
        """Store for investors."""

    @abstractmethod
    def investment_store(self) -> EntityStore:
        """Store for investments."""

    @abstractmethod
    def transaction_store(self) -> EntityStore:
        """Store for transactions."""


class FileBackend(StoreBackend):
    """JSON files, one per entity kind, under ``file_path``."""

    def __init__(self, config: DatabaseConfig):
        if not config.file_path:
            raise ConfigurationError("File path not configured for file-based storage")
        self.file_path = config.file_path

    def project_store(self) -> ProjectStore:
        return ProjectStore(self.file_path)

    def user_store(self) -> UserStore:
        return UserStore(self.file_path)

    def document_store(self) -> DocumentStore:
        return DocumentStore(self.file_path)

    def loan_store(self) -> LoanStore:
        return LoanStore(self.file_path)

    def investor_store(self) -> InvestorStore:
        return InvestorStore(self.file_path)

    def investment_store(self) -> InvestmentStore:
        return InvestmentStore(self.file_path)

    def transaction_store(self) -> TransactionStore:
        return TransactionStore(self.file_path)


class UnavailableBackend(StoreBackend):
    """A recognized network backend whose stores are not implemented."""

    label = "Database"
    url_variable = "DATABASE_URL"

    def __init__(self, config: DatabaseConfig):
        if not config.url:
            raise ConfigurationError(
                f"{self.url_variable} must be set when using {self.label}"
            )
        self.url = config.url

    def _unavailable(self) -> EntityStore:
        raise ConfigurationError(f"{self.label} implementation not available yet")

    def project_store(self) -> EntityStore:
        return self._unavailable()

    def user_store(self) -> EntityStore:
        return self._unavailable()

    def document_store(self) -> EntityStore:
        return self._unavailable()

    def loan_store(self) -> EntityStore:
        return self._unavailable()

    def investor_store(self) -> EntityStore:
        return self._unavailable()

    def investment_store(self) -> EntityStore:
        return self._unavailable()

    def transaction_store(self) -> EntityStore:
        return self._unavailable()


class MongoBackend(UnavailableBackend):
    label = "MongoDB"
    url_variable = "MONGODB_URL"


class PostgresBackend(UnavailableBackend):
    label = "PostgreSQL"
    url_variable = "POSTGRES_URL"


BACKENDS: Dict[DatabaseType, Type[StoreBackend]] = {
    DatabaseType.FILE: FileBackend,
    DatabaseType.MONGODB: MongoBackend,
    DatabaseType.POSTGRES: PostgresBackend,
}


def resolve_backend(config: DatabaseConfig) -> StoreBackend:
    """
    Create the backend selected by ``config``.

    Raises:
        ConfigurationError: If the backend is unsupported or its location is missing
    """
    backend_cls = BACKENDS.get(config.type)
    if backend_cls is None:
        raise ConfigurationError(f"Unsupported database type: {config.type}")
    return backend_cls(config)
