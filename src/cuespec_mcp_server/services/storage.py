"""Storage provider interface for component records.

Providers move plain documents: camelCase dicts as produced by
``BaseSpec.to_document()``, plus an ``id`` key on the way out. Validation and
timestamps belong to the record service.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..config import ServerConfig, get_config
from ..logging import get_logger
from ..models.records import RecordType

logger = get_logger(__name__)

Document = Dict[str, Any]


class StorageProvider(ABC):
    """Async CRUD over one collection per record type.

    Usage:
        async with LocalStore() as store:
            docs = await store.list_records(RecordType.PIN)
    """

    name: str = "storage"

    async def __aenter__(self) -> "StorageProvider":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    @abstractmethod
    async def list_records(self, record_type: RecordType) -> List[Document]:
        """All documents of a record type."""

    @abstractmethod
    async def get_record(self, record_type: RecordType, record_id: str) -> Document:
        """One document by id.

        Raises:
            RecordNotFoundError: No document has that id
        """

    @abstractmethod
    async def create_record(self, record_type: RecordType, document: Document) -> Document:
        """Store a new document and return it with its assigned id."""

    @abstractmethod
    async def update_record(
        self,
        record_type: RecordType,
        record_id: str,
        document: Document,
    ) -> Document:
        """Replace an existing document.

        Raises:
            RecordNotFoundError: No document has that id
        """

    @abstractmethod
    async def delete_record(self, record_type: RecordType, record_id: str) -> None:
        """Remove a document."""

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """Report whether the backend is usable."""

    async def close(self) -> None:
        """Release any open resources."""


def get_storage_provider(config: Optional[ServerConfig] = None) -> StorageProvider:
    """Pick the record store for a configuration.

    ``local`` always uses the JSON store. ``firestore`` always uses the
    cloud store. ``auto`` uses the cloud store only when real Firestore
    credentials are configured.
    """
    from .firestore_client import FirestoreStore
    from .local_store import LocalStore

    config = config or get_config()
    backend = config.storage_backend.lower()

    if backend == "firestore" or (backend == "auto" and config.firestore_configured):
        logger.debug("Using Firestore record store", project=config.firestore_project_id)
        return FirestoreStore(config)

    if backend not in ("local", "auto"):
        logger.warning("Unknown storage backend, using local store", storage_backend=backend)
    logger.debug("Using local record store", directory=config.local_data_dir)
    return LocalStore(config)
