"""
JSON file entity store implementation.

Each entity kind lives in one ``<kind>.json`` file under a root directory,
holding an array of records. The file is loaded lazily into an in-memory
cache and rewritten in full after every mutation. It's suitable for
development and single-instance deployments.
"""

import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Type, Union
from uuid import uuid4

from pydantic import ValidationError

from redev.exceptions import FinancialValidationError, StoreError
from redev.finance.amortization import (
    apply_schedule,
    record_payment,
    schedule_inputs_changed,
)
from redev.models.entities import (
    ENTITY_MODELS,
    Distribution,
    Document,
    Investment,
    Investor,
    Loan,
    Project,
    Transaction,
    User,
)

from .base import EntityStore, Page, T, normalize_fields, strip_managed_fields

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FileEntityStore(EntityStore[T]):
    """
    Entity store backed by a single JSON file.

    Loads and mutations are serialized by a per-store lock; the file is
    replaced atomically (write to a temporary file, then rename).
    """

    kind: str
    # Fields the store derives itself; caller-supplied values are dropped
    derived_fields: FrozenSet[str] = frozenset()
    # Fields the model recomputes on validation; not carried over on update
    recomputed_fields: FrozenSet[str] = frozenset()

    def __init__(
        self,
        base_path: Union[str, Path],
        kind: Optional[str] = None,
        model: Optional[Type[T]] = None,
    ):
        """
        Initialize the file store.

        Args:
            base_path: Root directory holding one file per entity kind
            kind: Collection name, used as the file stem
            model: Entity model class (looked up from ``kind`` if omitted)
        """
        if kind is not None:
            self.kind = kind
        if model is not None:
            self.model = model
        elif not hasattr(self, "model"):
            self.model = ENTITY_MODELS[self.kind]

        self.base_path = Path(base_path)
        self.file_path = self.base_path / f"{self.kind}.json"
        self._records: Dict[str, T] = {}
        self._loaded = False
        self._lock = threading.RLock()

    def _load(self) -> None:
        """Hydrate the cache from disk, creating an empty file if missing."""
        if self._loaded:
            return

        try:
            raw = self.file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info(f"Initializing empty {self.kind} store at {self.file_path}")
            self._write([])
            self._loaded = True
            return
        except OSError as e:
            raise StoreError(f"Failed to read {self.file_path}: {e}") from e

        try:
            items = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StoreError(f"Corrupt {self.kind} file {self.file_path}: {e}") from e

        if not isinstance(items, list):
            raise StoreError(
                f"Expected a JSON array in {self.file_path}, got {type(items).__name__}"
            )

        records: Dict[str, T] = {}
        for item in items:
            try:
                record = self.model.model_validate(item)
            except ValidationError as e:
                raise StoreError(f"Invalid {self.kind} record in {self.file_path}: {e}") from e
            records[record.id] = record

        self._records = records
        self._loaded = True
        logger.debug(f"Loaded {len(records)} {self.kind} from {self.file_path}")

    def _write(self, items: List[Dict[str, Any]]) -> None:
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.base_path, prefix=f".{self.kind}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(items, f, indent=2)
                os.replace(tmp_path, self.file_path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise StoreError(f"Failed to write {self.file_path}: {e}") from e

    def _save(self) -> None:
        items = [
            record.model_dump(mode="json", by_alias=True)
            for record in self._records.values()
        ]
        self._write(items)
        logger.debug(f"Saved {len(items)} {self.kind} to {self.file_path}")

    def _before_create(self, record: T) -> T:
        """Hook for kind-specific derived fields on create."""
        return record

    def _before_update(self, existing: T, record: T) -> T:
        """Hook for kind-specific derived fields on update."""
        return record

    def _caller_fields(self, data: Union[Mapping[str, Any], T]) -> Dict[str, Any]:
        """Caller-supplied fields, minus store-managed and derived ones."""
        fields = strip_managed_fields(normalize_fields(self.model, data))
        ignored = self.derived_fields.intersection(fields)
        if ignored:
            logger.info(f"Ignoring derived {self.kind} fields: {', '.join(sorted(ignored))}")
        return {k: v for k, v in fields.items() if k not in self.derived_fields}

    def _replace(self, existing: T, record: T) -> T:
        """Swap ``record`` in for ``existing`` and persist. Caller holds the lock."""
        self._records[record.id] = record
        try:
            self._save()
        except StoreError:
            self._records[record.id] = existing
            raise
        return record.model_copy(deep=True)

    def find_by_id(self, entity_id: str) -> Optional[T]:
        with self._lock:
            self._load()
            record = self._records.get(entity_id)
            return record.model_copy(deep=True) if record is not None else None

    def find_all(
        self, page: Optional[int] = None, limit: Optional[int] = None
    ) -> Page[T]:
        with self._lock:
            self._load()
            items = [r.model_copy(deep=True) for r in self._records.values()]

        total = len(items)
        if page is not None and limit is not None:
            if page < 1 or limit < 1:
                items = []
            else:
                start = (page - 1) * limit
                items = items[start : start + limit]

        return Page(data=items, total=total)

    def create(self, data: Union[Mapping[str, Any], T]) -> T:
        fields = self._caller_fields(data)
        now = _utcnow()
        fields.update(id=uuid4().hex, created_at=now, updated_at=now)
        record = self._before_create(self.model.model_validate(fields))

        with self._lock:
            self._load()
            self._records[record.id] = record
            try:
                self._save()
            except StoreError:
                del self._records[record.id]
                raise

        logger.debug(f"Created {self.kind} {record.id}")
        return record.model_copy(deep=True)

    def update(self, entity_id: str, data: Union[Mapping[str, Any], T]) -> Optional[T]:
        changes = self._caller_fields(data)

        with self._lock:
            self._load()
            existing = self._records.get(entity_id)
            if existing is None:
                return None

            merged = existing.model_dump(exclude=set(self.recomputed_fields))
            merged.update(changes)
            merged["updated_at"] = _utcnow()
            record = self._before_update(existing, self.model.model_validate(merged))
            updated = self._replace(existing, record)

        logger.debug(f"Updated {self.kind} {entity_id}")
        return updated

    def delete(self, entity_id: str) -> bool:
        with self._lock:
            self._load()
            removed = self._records.pop(entity_id, None)
            if removed is None:
                return False
            try:
                self._save()
            except StoreError:
                self._records[entity_id] = removed
                raise

        logger.debug(f"Deleted {self.kind} {entity_id}")
        return True


class ProjectScopedFileStore(FileEntityStore[T]):
    """File store for entities owned by a project."""

    def find_by_project(self, project_id: str) -> List[T]:
        """All entities whose ``project_id`` matches, in stored order."""
        return [r for r in self.find_all().data if r.project_id == project_id]


class ProjectStore(FileEntityStore[Project]):
    kind = "projects"
    model = Project
    recomputed_fields = frozenset({"total_budget"})


class UserStore(FileEntityStore[User]):
    kind = "users"
    model = User

    def find_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup by email address."""
        email = email.lower()
        for user in self.find_all().data:
            if user.email.lower() == email:
                return user
        return None


class DocumentStore(ProjectScopedFileStore[Document]):
    kind = "documents"
    model = Document


class LoanStore(ProjectScopedFileStore[Loan]):
    """Loan store that keeps each repayment schedule in step with its terms."""

    kind = "loans"
    model = Loan
    derived_fields = frozenset(
        {
            "repayment_schedule",
            "payment_amount",
            "remaining_balance",
            "end_date",
            "next_payment_date",
            "total_interest_paid",
            "total_principal_paid",
        }
    )

    def _before_create(self, record: Loan) -> Loan:
        return apply_schedule(record)

    def _before_update(self, existing: Loan, record: Loan) -> Loan:
        if schedule_inputs_changed(existing, record):
            logger.info(f"Loan {record.id} terms changed, regenerating schedule")
            return apply_schedule(record)
        return record

    def apply_payment(self, loan_id: str, index: int) -> Optional[Loan]:
        """
        Mark a scheduled payment as paid and persist the loan.

        Args:
            loan_id: The loan id
            index: 0-based position in the repayment schedule

        Returns:
            The updated loan, or None if no loan has that id

        Raises:
            FinancialValidationError: If the entry is unknown or already paid
        """
        with self._lock:
            self._load()
            existing = self._records.get(loan_id)
            if existing is None:
                return None
            paid = record_payment(existing, index).model_copy(
                update={"updated_at": _utcnow()}
            )
            updated = self._replace(existing, paid)

        logger.debug(f"Recorded payment {index} on loan {loan_id}")
        return updated


class InvestorStore(FileEntityStore[Investor]):
    kind = "investors"
    model = Investor


class InvestmentStore(ProjectScopedFileStore[Investment]):
    """Investment store whose distribution history only ever grows."""

    kind = "investments"
    model = Investment

    def _check_appended(
        self, previous: List[Distribution], record: Investment
    ) -> Investment:
        count = len(previous)
        if record.distributions[:count] != previous:
            raise FinancialValidationError(
                f"Distributions of investment {record.id} can only be appended"
            )
        checked = record.model_copy(update={"distributions": list(previous)})
        for distribution in record.distributions[count:]:
            checked = checked.add_distribution(distribution)
        return record

    def _before_create(self, record: Investment) -> Investment:
        return self._check_appended([], record)

    def _before_update(self, existing: Investment, record: Investment) -> Investment:
        return self._check_appended(existing.distributions, record)

    def add_distribution(
        self,
        investment_id: str,
        distribution: Union[Mapping[str, Any], Distribution],
    ) -> Optional[Investment]:
        """
        Append a distribution to an investment and persist it.

        Args:
            investment_id: The investment id
            distribution: The distribution, as a model or mapping

        Returns:
            The updated investment, or None if no investment has that id

        Raises:
            FinancialValidationError: If the distribution predates the last one
        """
        if not isinstance(distribution, Distribution):
            distribution = Distribution.model_validate(distribution)

        with self._lock:
            self._load()
            existing = self._records.get(investment_id)
            if existing is None:
                return None
            record = existing.add_distribution(distribution).model_copy(
                update={"updated_at": _utcnow()}
            )
            updated = self._replace(existing, record)

        logger.debug(f"Added distribution to investment {investment_id}")
        return updated

    def find_by_investor(self, investor_id: str) -> List[Investment]:
        return [r for r in self.find_all().data if r.investor_id == investor_id]


class TransactionStore(ProjectScopedFileStore[Transaction]):
    kind = "transactions"
    model = Transaction

    def find_related(self, entity_id: str) -> List[Transaction]:
        """Transactions whose weak reference points at ``entity_id``."""
        return [r for r in self.find_all().data if r.related_entity_id == entity_id]
