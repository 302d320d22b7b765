"""Base repository holding one resource collection snapshot."""

import asyncio
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Generic, Iterable, List, Tuple, TypeVar

from pydantic import TypeAdapter

from anchor_client.models import BulkResult, OperationResult, ResourceModel
from anchor_client.utils import get_logger
from anchor_client.utils.api_client import ControlPlaneClient
from anchor_client.utils.audit_logger import AuditEventType, get_audit_logger
from anchor_client.utils.metrics_collector import get_metrics_collector

T = TypeVar("T", bound=ResourceModel)

Observer = Callable[["ResourceRepository[Any]"], None]

logger = get_logger(__name__)


class ResourceRepository(Generic[T]):
    """Repository owning one resource collection.

    The collection is an immutable snapshot replaced wholesale by every
    successful fetch; a failed fetch keeps the previous snapshot. Mutations
    never predict the resulting state: each successful one is followed by a
    refetch.
    """

    # Set by subclasses
    resource: str = ""
    key_field: str = "id"

    def __init__(self, client: ControlPlaneClient, model: type[T]) -> None:
        """
        Initialize repository.

        Args:
            client: Control-plane client
            model: Pydantic model of the collection records
        """
        self.client = client
        self.model = model
        self._adapter = TypeAdapter(List[model])
        self._items: Tuple[T, ...] = ()
        self._version = 0
        self._last_updated: datetime | None = None
        self._in_flight = 0
        self._last_error: str | None = None
        self._observers: List[Observer] = []
        self.metrics = get_metrics_collector()
        self.audit = get_audit_logger()

    # Observable state

    @property
    def items(self) -> Tuple[T, ...]:
        """Current snapshot."""
        return self._items

    @property
    def version(self) -> int:
        """Incremented on every snapshot replacement."""
        return self._version

    @property
    def last_updated(self) -> datetime | None:
        return self._last_updated

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @property
    def last_error(self) -> str | None:
        return self._last_error

    def clear_error(self) -> None:
        if self._last_error is not None:
            self._last_error = None
            self._notify()

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Register an observer called after every state change.

        Args:
            observer: Callable receiving this repository

        Returns:
            Callable that unsubscribes the observer
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        for observer in list(self._observers):
            try:
                observer(self)
            except Exception as e:
                logger.error(
                    "Repository observer failed",
                    extra={"resource": self.resource, "error": str(e)},
                )

    def _set_error(self, message: str) -> None:
        self._last_error = message
        self._notify()

    def find(self, key: str) -> T | None:
        """Find a record of the current snapshot by its key."""
        for item in self._items:
            if getattr(item, self.key_field) == key:
                return item
        return None

    def __len__(self) -> int:
        return len(self._items)

    # Fetching

    async def _load(self) -> Any:
        """Fetch the raw collection from the control plane."""
        raise NotImplementedError

    def _parse(self, data: Any) -> Tuple[T, ...]:
        """Validate records and drop duplicate keys, last occurrence wins."""
        records = self._adapter.validate_python(data or [])
        unique: dict[str, T] = {}
        for record in records:
            key = getattr(record, self.key_field)
            unique.pop(key, None)
            unique[key] = record
        return tuple(unique.values())

    async def fetch_all(self) -> OperationResult:
        """
        Fetch the collection and replace the snapshot.

        Returns:
            OperationResult with the new snapshot as data, or the error
        """
        error: Exception | None = None
        self._in_flight += 1
        try:
            items = self._parse(await self._load())
        except Exception as e:
            error = e
        finally:
            self._in_flight -= 1

        if error is not None:
            self.metrics.record_fetch(self.resource, False)
            logger.error(
                f"Failed to fetch {self.resource}",
                extra={"resource": self.resource, "error": str(error)},
            )
            self._set_error(str(error))
            return OperationResult.fail(str(error))

        self._items = items
        self._version += 1
        self._last_updated = datetime.now(timezone.utc)
        self._last_error = None
        self.metrics.record_fetch(self.resource, True)
        self.metrics.set_collection_size(self.resource, len(items))
        logger.debug(
            "Collection refreshed",
            extra={"resource": self.resource, "count": len(items), "version": self._version},
        )
        self._notify()
        return OperationResult.ok(list(items))

    # Mutations

    async def _mutate(
        self,
        operation: str,
        key: str,
        call: Callable[[], Awaitable[Any]],
        event_type: AuditEventType | None = None,
        details: dict[str, Any] | None = None,
        resync: bool = True,
    ) -> OperationResult:
        """
        Run a mutating call and resynchronize the collection on success.

        Args:
            operation: Human-readable action (``start container``)
            key: ID or name of the affected record
            call: Coroutine factory issuing the request
            event_type: Audit event to record
            details: Extra audit details
            resync: Refetch the collection after success

        Returns:
            OperationResult; failures are recorded as ``last_error``
        """
        verb = operation.split()[0]
        try:
            data = await call()
        except Exception as e:
            message = f"Failed to {operation}: {e}"
            logger.error(message, extra={"resource": self.resource, "key": key})
            self.metrics.record_mutation(self.resource, verb, False)
            if event_type is not None:
                self.audit.log_event(
                    event_type, resource_id=key, success=False, details=details
                )
            self._set_error(message)
            return OperationResult.fail(message)

        self.metrics.record_mutation(self.resource, verb, True)
        if event_type is not None:
            self.audit.log_event(event_type, resource_id=key, success=True, details=details)
        logger.info(
            f"Completed {operation}",
            extra={"resource": self.resource, "key": key},
        )
        if resync:
            await self.fetch_all()
        return OperationResult.ok(data)

    async def _query(self, operation: str, call: Callable[[], Awaitable[Any]]) -> OperationResult:
        """Run a read-only call that does not touch the collection."""
        try:
            return OperationResult.ok(await call())
        except Exception as e:
            message = f"Failed to {operation}: {e}"
            logger.error(message, extra={"resource": self.resource})
            self._set_error(message)
            return OperationResult.fail(message)

    @staticmethod
    async def _run_bulk(
        keys: Iterable[str],
        action: Callable[[str], Awaitable[OperationResult]],
    ) -> List[bool]:
        """
        Run an action for every key concurrently, never failing fast.

        Returns:
            Per-key success flags in input order
        """
        results = await asyncio.gather(*(action(key) for key in keys), return_exceptions=True)
        return [isinstance(result, OperationResult) and result.success for result in results]

    async def _bulk(
        self,
        keys: Iterable[str],
        action: Callable[[str], Awaitable[OperationResult]],
    ) -> BulkResult:
        outcomes = await self._run_bulk(list(keys), action)
        result = BulkResult.from_outcomes(outcomes)
        logger.info(
            "Bulk operation completed",
            extra={"resource": self.resource, **result.model_dump()},
        )
        return result
