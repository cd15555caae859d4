"""Async HTTP client for the Firestore REST API.

Stores each record type in a Firestore collection of the same name, with
retry logic for connection failures and timeouts.
"""

import asyncio
from typing import Optional, Dict, Any, List, Tuple
import httpx

from ..config import get_config, ServerConfig
from ..exceptions import (
    ConnectionError as StoreConnectionError,
    TimeoutError as StoreTimeoutError,
    CueSpecError,
    RecordNotFoundError,
    StorageError,
)
from ..logging import get_logger
from ..models.records import RecordType
from .firestore_codec import decode_document, encode_document
from .storage import Document, StorageProvider


logger = get_logger(__name__)

PAGE_SIZE = 300


class FirestoreStore(StorageProvider):
    """Record store backed by Cloud Firestore.

    Usage:
        async with FirestoreStore() as store:
            pins = await store.list_records(RecordType.PIN)

    Or without context manager:
        store = FirestoreStore()
        await store.connect()
        try:
            pins = await store.list_records(RecordType.PIN)
        finally:
            await store.close()
    """

    name = "firestore"

    def __init__(self, config: Optional[ServerConfig] = None) -> None:
        """Initialize the store with optional config.

        Args:
            config: Server configuration (uses global config if not provided)
        """
        self.config = config or get_config()
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "FirestoreStore":
        """Async context manager entry - creates HTTP client."""
        await self.connect()
        return self

    async def connect(self) -> None:
        """Create the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.firestore_documents_url,
                timeout=httpx.Timeout(self.config.request_timeout),
            )
            logger.debug(
                "FirestoreStore connected",
                base_url=self.config.firestore_documents_url,
            )

    async def close(self) -> None:
        """Close the async HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.debug("FirestoreStore disconnected")

    async def _ensure_connected(self) -> None:
        """Ensure client is connected."""
        if self._client is None:
            await self.connect()

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
        record: Optional[Tuple[RecordType, str]] = None,
    ) -> Dict[str, Any]:
        """Make HTTP request with retry logic.

        Args:
            method: HTTP method
            path: Path relative to the documents root
            operation: Operation name for error messages
            params: Extra query parameters (the API key is always added)
            body: Optional JSON body
            record: Record type and id, for not-found errors

        Returns:
            Decoded JSON response (empty dict for empty bodies)

        Raises:
            StoreConnectionError: Cannot reach Firestore
            StoreTimeoutError: Request timed out
            RecordNotFoundError: Firestore answered 404
            StorageError: Any other error status
        """
        await self._ensure_connected()

        query = {"key": self.config.firestore_api_key}
        if params:
            query.update(params)

        last_error: Optional[Exception] = None

        for attempt in range(self.config.max_retries):
            try:
                response = await self._client.request(method, path, params=query, json=body)
                logger.debug(
                    "Firestore request completed",
                    operation=operation,
                    status=response.status_code,
                    attempt=attempt + 1,
                )
                self._check_response(response, operation, record)
                return response.json() if response.content else {}

            except httpx.ConnectError as e:
                last_error = e
                logger.warning(
                    "Connection error, retrying",
                    operation=operation,
                    attempt=attempt + 1,
                    max_retries=self.config.max_retries,
                )
                if attempt < self.config.max_retries - 1:
                    await asyncio.sleep(self.config.retry_delay)

            except httpx.TimeoutException as e:
                last_error = e
                logger.warning(
                    "Timeout error, retrying",
                    operation=operation,
                    attempt=attempt + 1,
                    max_retries=self.config.max_retries,
                )
                if attempt < self.config.max_retries - 1:
                    await asyncio.sleep(self.config.retry_delay)

        # All retries exhausted
        if isinstance(last_error, httpx.TimeoutException):
            raise StoreTimeoutError(operation, self.config.request_timeout)
        raise StoreConnectionError(
            "Firestore",
            self.config.firestore_documents_url,
            reason=str(last_error) if last_error else None,
        )

    def _check_response(
        self,
        response: httpx.Response,
        operation: str,
        record: Optional[Tuple[RecordType, str]],
    ) -> None:
        """Map error statuses to exceptions.

        Raises:
            RecordNotFoundError: 404 for a known record
            StorageError: Any other 4xx/5xx status
        """
        if response.status_code < 400:
            return

        if response.status_code == 404 and record is not None:
            record_type, record_id = record
            raise RecordNotFoundError(RecordType(record_type).label, record_id)

        try:
            error = response.json().get("error", {})
            reason = error.get("message") or response.reason_phrase
        except ValueError:
            reason = response.text or response.reason_phrase
        raise StorageError(operation, reason, status_code=response.status_code)

    # --- Record Methods ---

    async def list_records(self, record_type: RecordType) -> List[Document]:
        """Get all documents in a collection, ordered by name.

        Args:
            record_type: Collection to read

        Returns:
            List of flattened documents with ids
        """
        collection = RecordType(record_type).value
        documents: List[Document] = []
        page_token: Optional[str] = None

        while True:
            params: Dict[str, Any] = {"orderBy": "name", "pageSize": PAGE_SIZE}
            if page_token:
                params["pageToken"] = page_token
            result = await self._request("GET", f"/{collection}", "list", params=params)
            documents.extend(decode_document(doc) for doc in result.get("documents", []))
            page_token = result.get("nextPageToken")
            if not page_token:
                return documents

    async def get_record(self, record_type: RecordType, record_id: str) -> Document:
        """Get a document by id."""
        collection = RecordType(record_type).value
        result = await self._request(
            "GET", f"/{collection}/{record_id}", "get",
            record=(record_type, record_id),
        )
        return decode_document(result)

    async def create_record(self, record_type: RecordType, document: Document) -> Document:
        """Create a document; Firestore assigns the id."""
        collection = RecordType(record_type).value
        result = await self._request(
            "POST", f"/{collection}", "create",
            body=encode_document(document),
        )
        return decode_document(result)

    async def update_record(
        self,
        record_type: RecordType,
        record_id: str,
        document: Document,
    ) -> Document:
        """Replace an existing document.

        The ``currentDocument.exists`` precondition makes Firestore answer
        404 instead of creating a new document.
        """
        collection = RecordType(record_type).value
        result = await self._request(
            "PATCH", f"/{collection}/{record_id}", "update",
            params={"currentDocument.exists": "true"},
            body=encode_document(document),
            record=(record_type, record_id),
        )
        return decode_document(result)

    async def delete_record(self, record_type: RecordType, record_id: str) -> None:
        """Delete a document."""
        collection = RecordType(record_type).value
        await self._request(
            "DELETE", f"/{collection}/{record_id}", "delete",
            record=(record_type, record_id),
        )

    # --- Health Check ---

    async def health_check(self) -> Dict[str, Any]:
        """Check that Firestore answers a minimal list request.

        Returns:
            Dict with healthy flag, backend name and message
        """
        try:
            await self._request(
                "GET", f"/{RecordType.PIN.value}", "health_check",
                params={"pageSize": 1},
            )
            return {"healthy": True, "backend": self.name, "message": "Firestore reachable"}
        except CueSpecError as e:
            return {"healthy": False, "backend": self.name, "message": e.message}
