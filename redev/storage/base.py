"""
Base entity store interface.

This module defines the abstract contract that every store backend must
follow, along with the paging result type.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel

from redev.models.entities import STORE_MANAGED_FIELDS, Entity

T = TypeVar("T", bound=Entity)


class Page(BaseModel, Generic[T]):
    """A slice of a collection plus the unfiltered collection size."""

    data: List[T]
    total: int


def normalize_fields(
    model: Type[BaseModel], data: Union[Mapping[str, Any], BaseModel]
) -> Dict[str, Any]:
    """
    Map caller-supplied keys onto model field names.

    Keys may be field names or their camelCase aliases. Unknown keys are
    kept and left for the model to ignore.

    Args:
        model: Entity model class
        data: Mapping or model instance holding the fields

    Returns:
        Dict keyed by field name
    """
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=True)

    by_alias = {
        info.alias: name for name, info in model.model_fields.items() if info.alias
    }
    return {by_alias.get(key, key): value for key, value in data.items()}


def strip_managed_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Drop id and timestamps, which only the store may set."""
    return {k: v for k, v in fields.items() if k not in STORE_MANAGED_FIELDS}


class EntityStore(ABC, Generic[T]):
    """
    Abstract base class for entity stores.

    A store manages one homogeneous collection of entities. Missing ids are
    reported as ``None``/``False``, never as errors.
    """

    model: Type[T]

    @abstractmethod
    def find_by_id(self, entity_id: str) -> Optional[T]:
        """
        Look up an entity.

        Args:
            entity_id: The entity id

        Returns:
            The entity, or None if no entity has that id
        """

    @abstractmethod
    def find_all(
        self, page: Optional[int] = None, limit: Optional[int] = None
    ) -> Page[T]:
        """
        List entities, optionally one page at a time.

        Paging applies only when both ``page`` and ``limit`` are given. Pages
        are 1-based; a page past the end yields an empty slice.

        Args:
            page: 1-based page number
            limit: Page size

        Returns:
            Page holding the slice and the total collection size
        """

    @abstractmethod
    def create(self, data: Union[Mapping[str, Any], T]) -> T:
        """
        Store a new entity.

        Args:
            data: Entity fields; any id or timestamps are replaced

        Returns:
            The stored entity with its generated id and timestamps

        Raises:
            pydantic.ValidationError: If the fields do not form a valid entity
            StoreError: If the backing resource cannot be written
        """

    @abstractmethod
    def update(self, entity_id: str, data: Union[Mapping[str, Any], T]) -> Optional[T]:
        """
        Merge partial fields into an existing entity.

        Args:
            entity_id: The entity id
            data: Fields to change; unspecified fields keep their values

        Returns:
            The updated entity, or None if no entity has that id

        Raises:
            pydantic.ValidationError: If the merged fields are invalid
            StoreError: If the backing resource cannot be written
        """

    @abstractmethod
    def delete(self, entity_id: str) -> bool:
        """
        Remove an entity.

        Args:
            entity_id: The entity id

        Returns:
            bool: True if the entity was removed, False if it didn't exist
        """

    def count(self) -> int:
        """Number of entities in the collection."""
        return self.find_all().total
