"""Record storage services for CueSpec MCP Server."""

from .storage import StorageProvider, get_storage_provider
from .local_store import LocalStore
from .firestore_client import FirestoreStore
from .records import RecordService, StoreResult, search_records, matches_search

__all__ = [
    "StorageProvider",
    "get_storage_provider",
    "LocalStore",
    "FirestoreStore",
    "RecordService",
    "StoreResult",
    "search_records",
    "matches_search",
]
