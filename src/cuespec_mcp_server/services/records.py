"""Record service for component specifications.

Wraps the configured store with validation, timestamps, duplication,
search and sort. When the cloud store cannot be reached, reads and writes
go to the local store instead and the result says so.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, TypeVar, Union

from ..config import get_config, ServerConfig
from ..exceptions import (
    ConnectionError as StoreConnectionError,
    TimeoutError as StoreTimeoutError,
    InvalidParameterError,
)
from ..logging import LogContext, get_logger
from ..models.machining import MachiningStep
from ..models.records import BaseSpec, RecordType, parse_record
from .local_store import LocalStore, new_record_id
from .storage import StorageProvider, get_storage_provider

logger = get_logger(__name__)

T = TypeVar("T")

SORT_KEYS = ("name", "manufacture", "recent")
SORT_ORDERS = ("asc", "desc")

# Record fields matched by search, when the record type has them
SEARCH_FIELDS = (
    "name",
    "manufacture",
    "material",
    "diameter",
    "length",
    "category",
    "difficulty",
    "description",
    "exposed_length",
    "assembly_notes",
)
STEP_SEARCH_FIELDS = ("process", "size", "thread_size", "depth", "final_diameter")


@dataclass
class StoreResult:
    """A service result plus where it came from."""
    value: Any
    source: str
    fallback: bool = False


def resolve_record_type(value: Union[str, RecordType]) -> RecordType:
    """Parse a record type name.

    Raises:
        InvalidParameterError: Not a known record type
    """
    try:
        return RecordType(value)
    except ValueError:
        raise InvalidParameterError(
            "record_type", value, valid_values=[t.value for t in RecordType]
        )


def _text(value: Any) -> str:
    if value is None:
        return ""
    if hasattr(value, "value"):
        value = value.value
    return str(value)


def matches_search(spec: BaseSpec, term: str) -> bool:
    """Case-insensitive substring match over a record and its steps."""
    needle = term.strip().lower()
    if not needle:
        return True
    haystack = [_text(getattr(spec, field, None)) for field in SEARCH_FIELDS]
    for step in spec.machining_steps:
        haystack.extend(_text(getattr(step, field, None)) for field in STEP_SEARCH_FIELDS)
    return any(needle in text.lower() for text in haystack)


def _created_timestamp(spec: BaseSpec) -> float:
    if spec.created_at is None:
        return 0.0
    created = spec.created_at
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created.timestamp()


def search_records(
    records: Iterable[BaseSpec],
    term: Optional[str] = None,
    sort_by: str = "name",
    order: str = "asc",
) -> List[BaseSpec]:
    """Filter and sort records.

    Args:
        records: Records to search
        term: Substring to look for (all records when blank)
        sort_by: ``name``, ``manufacture`` or ``recent``
        order: ``asc`` or ``desc``

    Returns:
        Matching records in the requested order

    Raises:
        InvalidParameterError: Unknown sort key or order
    """
    if sort_by not in SORT_KEYS:
        raise InvalidParameterError("sort_by", sort_by, valid_values=list(SORT_KEYS))
    if order not in SORT_ORDERS:
        raise InvalidParameterError("order", order, valid_values=list(SORT_ORDERS))

    found = [spec for spec in records if matches_search(spec, term or "")]

    if sort_by == "recent":
        key: Callable[[BaseSpec], Any] = lambda s: (_created_timestamp(s), s.id or "")
    else:
        key = lambda s: (_text(getattr(s, sort_by)).lower(), s.id or "")
    return sorted(found, key=key, reverse=(order == "desc"))


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RecordService:
    """Record operations over the configured store with local fallback.

    Usage:
        async with RecordService() as service:
            result = await service.list_specs(RecordType.PIN, search="radial")
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        store: Optional[StorageProvider] = None,
        local: Optional[LocalStore] = None,
    ) -> None:
        """Initialize the service.

        Args:
            config: Server configuration (uses global config if not provided)
            store: Primary store (chosen from config if not provided)
            local: Fallback store (a LocalStore if not provided)
        """
        self.config = config or get_config()
        self.store = store or get_storage_provider(self.config)
        if local is not None:
            self.local: Optional[LocalStore] = local
        elif isinstance(self.store, LocalStore):
            self.local = None
        else:
            self.local = LocalStore(self.config)

    async def __aenter__(self) -> "RecordService":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def close(self) -> None:
        await self.store.close()
        if self.local is not None:
            await self.local.close()

    async def _with_fallback(
        self,
        operation: str,
        record_type: RecordType,
        call: Callable[[StorageProvider], Awaitable[T]],
        local_call: Optional[Callable[[LocalStore], Awaitable[T]]] = None,
    ) -> StoreResult:
        # store and client logs inside the block carry operation and record_type
        with LogContext(operation=operation, record_type=RecordType(record_type).value):
            try:
                return StoreResult(await call(self.store), self.store.name)
            except (StoreConnectionError, StoreTimeoutError) as e:
                if self.local is None:
                    raise
                logger.warning("Cloud store unavailable, using local store", error=e.message)
                value = await (local_call or call)(self.local)
                return StoreResult(value, self.local.name, fallback=True)

    # --- Reads ---

    async def list_specs(
        self,
        record_type: RecordType,
        search: Optional[str] = None,
        sort_by: str = "name",
        order: str = "asc",
    ) -> StoreResult:
        """List records of a type, filtered and sorted."""
        record_type = RecordType(record_type)
        result = await self._with_fallback(
            "list", record_type, lambda store: store.list_records(record_type)
        )
        specs = [parse_record(record_type, doc) for doc in result.value]
        result.value = search_records(specs, search, sort_by, order)
        return result

    async def get_spec(self, record_type: RecordType, record_id: str) -> StoreResult:
        """Get one record."""
        record_type = RecordType(record_type)
        result = await self._with_fallback(
            "get", record_type, lambda store: store.get_record(record_type, record_id)
        )
        result.value = parse_record(record_type, result.value)
        return result

    # --- Writes ---

    def _validate(self, record_type: RecordType, spec: Union[BaseSpec, Dict[str, Any]]) -> BaseSpec:
        if isinstance(spec, dict):
            spec = parse_record(record_type, spec)
        else:
            spec = parse_record(record_type, spec.model_dump())
        if not spec.name.strip():
            raise InvalidParameterError("name", spec.name, reason="a record name is required")
        return spec

    async def create_spec(
        self,
        record_type: RecordType,
        spec: Union[BaseSpec, Dict[str, Any]],
    ) -> StoreResult:
        """Validate, stamp and store a new record.

        Raises:
            InvalidParameterError: The record has no name
        """
        record_type = RecordType(record_type)
        spec = self._validate(record_type, spec)
        now = _now()
        spec = spec.model_copy(update={"id": None, "created_at": now, "updated_at": now})
        document = spec.to_document()

        result = await self._with_fallback(
            "create", record_type, lambda store: store.create_record(record_type, document)
        )
        result.value = parse_record(record_type, result.value)
        logger.info(
            "Record created",
            record_type=record_type.value,
            record_id=result.value.id,
            source=result.source,
        )
        return result

    async def update_spec(
        self,
        record_type: RecordType,
        record_id: str,
        spec: Union[BaseSpec, Dict[str, Any]],
    ) -> StoreResult:
        """Validate, stamp and replace an existing record.

        When the cloud store is unreachable the record is written to the
        local store under the same id, even if only the cloud had it.

        Raises:
            InvalidParameterError: The record has no name
            RecordNotFoundError: No record has that id
        """
        record_type = RecordType(record_type)
        spec = self._validate(record_type, spec)
        spec = spec.model_copy(update={"id": record_id, "updated_at": _now()})
        document = spec.to_document()

        result = await self._with_fallback(
            "update", record_type,
            lambda store: store.update_record(record_type, record_id, document),
            lambda local: local.put_record(record_type, record_id, document),
        )
        result.value = parse_record(record_type, result.value)
        return result

    async def delete_spec(self, record_type: RecordType, record_id: str) -> StoreResult:
        """Delete a record. Never falls back: the error propagates."""
        record_type = RecordType(record_type)
        await self.store.delete_record(record_type, record_id)
        logger.info("Record deleted", record_type=record_type.value, record_id=record_id)
        return StoreResult(record_id, self.store.name)

    async def duplicate_spec(self, record_type: RecordType, record_id: str) -> StoreResult:
        """Copy a record under the name ``"<name> (Copy)"``.

        The copy gets a new id and its steps get fresh ids.
        """
        record_type = RecordType(record_type)
        original = (await self.get_spec(record_type, record_id)).value
        steps = [step.model_copy(update={"id": new_record_id()}) for step in original.machining_steps]
        copy = original.model_copy(update={
            "id": None,
            "name": f"{original.name} (Copy)",
            "machining_steps": steps,
            "created_at": None,
            "updated_at": None,
        })
        return await self.create_spec(record_type, copy)

    # --- Machining steps ---

    async def add_step(
        self,
        record_type: RecordType,
        record_id: str,
        step: Union[MachiningStep, Dict[str, Any]],
    ) -> StoreResult:
        """Append a machining step to a record.

        The step gets a fresh id unless it brings one.
        """
        record_type = RecordType(record_type)
        spec = (await self.get_spec(record_type, record_id)).value
        if isinstance(step, dict):
            step = MachiningStep.model_validate(step)
        if not step.id:
            step = step.model_copy(update={"id": new_record_id()})
        spec = spec.model_copy(update={"machining_steps": [*spec.machining_steps, step]})
        return await self.update_spec(record_type, record_id, spec)

    async def remove_step(self, record_type: RecordType, record_id: str, step_index: int) -> StoreResult:
        """Remove the machining step at ``step_index``.

        Raises:
            InvalidParameterError: No step at that index
        """
        record_type = RecordType(record_type)
        spec = (await self.get_spec(record_type, record_id)).value
        steps = list(spec.machining_steps)
        if not 0 <= step_index < len(steps):
            raise InvalidParameterError(
                "step_index", step_index,
                reason=f"record has {len(steps)} machining steps",
            )
        del steps[step_index]
        spec = spec.model_copy(update={"machining_steps": steps})
        return await self.update_spec(record_type, record_id, spec)

    async def health_check(self) -> Dict[str, Any]:
        """Health of the primary store."""
        return await self.store.health_check()
