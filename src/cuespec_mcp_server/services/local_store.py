"""Local JSON record store.

Keeps one JSON file per collection under ``local_data_dir``, mapping record
ids to documents. Serves as the offline fallback for the cloud store.
"""

import json
import os
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import ServerConfig, get_config
from ..exceptions import RecordNotFoundError, StorageError
from ..logging import get_logger
from ..models.records import RecordType
from .storage import Document, StorageProvider

logger = get_logger(__name__)


def new_record_id() -> str:
    """Generate a record id."""
    return uuid.uuid4().hex


class LocalStore(StorageProvider):
    """Synchronous file storage behind the async provider interface."""

    name = "local"

    def __init__(self, config: Optional[ServerConfig] = None) -> None:
        self.config = config or get_config()
        self.directory = Path(self.config.local_data_dir)

    def _path(self, record_type: RecordType) -> Path:
        return self.directory / f"{RecordType(record_type).value}.json"

    def _load(self, record_type: RecordType) -> Dict[str, Document]:
        path = self._path(record_type)
        if not path.exists():
            return {}
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError("read", f"{path}: {e}")
        if not isinstance(data, dict):
            raise StorageError("read", f"{path}: expected an object of records")
        return data

    def _save(self, record_type: RecordType, records: Dict[str, Document]) -> None:
        path = self._path(record_type)
        tmp = path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(records, f, indent=2)
            os.replace(tmp, path)
        except OSError as e:
            raise StorageError("write", f"{path}: {e}")

    async def list_records(self, record_type: RecordType) -> List[Document]:
        records = self._load(record_type)
        return [{**doc, "id": record_id} for record_id, doc in records.items()]

    async def get_record(self, record_type: RecordType, record_id: str) -> Document:
        records = self._load(record_type)
        if record_id not in records:
            raise RecordNotFoundError(RecordType(record_type).label, record_id)
        return {**records[record_id], "id": record_id}

    async def create_record(self, record_type: RecordType, document: Document) -> Document:
        records = self._load(record_type)
        record_id = new_record_id()
        records[record_id] = {k: v for k, v in document.items() if k != "id"}
        self._save(record_type, records)
        logger.debug("Local record created", record_type=RecordType(record_type).value, record_id=record_id)
        return {**records[record_id], "id": record_id}

    async def update_record(
        self,
        record_type: RecordType,
        record_id: str,
        document: Document,
    ) -> Document:
        records = self._load(record_type)
        if record_id not in records:
            raise RecordNotFoundError(RecordType(record_type).label, record_id)
        records[record_id] = {k: v for k, v in document.items() if k != "id"}
        self._save(record_type, records)
        return {**records[record_id], "id": record_id}

    async def put_record(
        self,
        record_type: RecordType,
        record_id: str,
        document: Document,
    ) -> Document:
        """Store a document under ``record_id``, replacing any existing one.

        Used for offline edits of cloud records the local file has never seen.
        """
        records = self._load(record_type)
        records[record_id] = {k: v for k, v in document.items() if k != "id"}
        self._save(record_type, records)
        logger.debug("Local record stored", record_type=RecordType(record_type).value, record_id=record_id)
        return {**records[record_id], "id": record_id}

    async def delete_record(self, record_type: RecordType, record_id: str) -> None:
        records = self._load(record_type)
        if record_id not in records:
            raise RecordNotFoundError(RecordType(record_type).label, record_id)
        del records[record_id]
        self._save(record_type, records)

    async def health_check(self) -> Dict[str, Any]:
        writable = os.access(self.directory, os.W_OK) if self.directory.exists() else True
        return {
            "healthy": writable,
            "backend": self.name,
            "directory": str(self.directory),
            "message": "Local store ready" if writable else "Local data directory is not writable",
        }
