"""
Store factory for creating entity stores based on configuration.

A ``StoreFactory`` can be constructed directly and passed to whatever needs
stores. For the request layer there is also one process-wide instance,
established by ``StoreFactory.initialize`` and fetched with
``StoreFactory.get_instance``.
"""

import logging
import threading
from typing import ClassVar, Optional

from redev.config import DatabaseConfig
from redev.exceptions import ConfigurationError

from .backends import StoreBackend, resolve_backend
from .base import EntityStore

logger = logging.getLogger(__name__)


class StoreFactory:
    """Turns a backend configuration into one store per entity kind."""

    _instance: ClassVar[Optional["StoreFactory"]] = None
    _instance_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, config: DatabaseConfig):
        """
        Args:
            config: Backend selection and location
        """
        self.config = config

    @classmethod
    def initialize(cls, config: DatabaseConfig) -> "StoreFactory":
        """
        Establish the process-wide factory.

        Only the first call takes effect; later calls return the existing
        instance unchanged.

        Args:
            config: Backend configuration for the first initialization

        Returns:
            StoreFactory: The process-wide instance
        """
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls(config)
                logger.info(f"Store factory initialized with {config.type.value} backend")
            elif cls._instance.config != config:
                logger.warning(
                    "Store factory already initialized; ignoring new configuration"
                )
            return cls._instance

    @classmethod
    def get_instance(cls) -> "StoreFactory":
        """
        Get the process-wide factory.

        Raises:
            ConfigurationError: If ``initialize`` was never called
        """
        if cls._instance is None:
            raise ConfigurationError(
                "StoreFactory not initialized. Call initialize() first."
            )
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the process-wide instance (useful for testing)."""
        with cls._instance_lock:
            cls._instance = None

    def _backend(self) -> StoreBackend:
        return resolve_backend(self.config)

    def create_project_repository(self) -> EntityStore:
        return self._backend().project_store()

    def create_user_repository(self) -> EntityStore:
        return self._backend().user_store()

    def create_document_repository(self) -> EntityStore:
        return self._backend().document_store()

    def create_loan_repository(self) -> EntityStore:
        return self._backend().loan_store()

    def create_investor_repository(self) -> EntityStore:
        return self._backend().investor_store()

    def create_investment_repository(self) -> EntityStore:
        return self._backend().investment_store()

    def create_transaction_repository(self) -> EntityStore:
        return self._backend().transaction_store()


def get_store_factory() -> StoreFactory:
    """
    Get the process-wide factory, initializing it from global settings.

    Returns:
        StoreFactory: The process-wide instance
    """
    from redev.config import load_database_config

    try:
        return StoreFactory.get_instance()
    except ConfigurationError:
        return StoreFactory.initialize(load_database_config())
