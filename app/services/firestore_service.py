"""
DocStore API — Firestore Service (Data-Access Layer)
=====================================================

What:  Passthroughs from route handlers to the async Firestore client.
How:   Each method makes exactly one SDK call and shapes snapshots into
       plain dicts of the form {"id": <doc id>, **fields}.
Who:   Called by route handlers through the get_firestore_service dependency.
When:  Client is bound once at startup (initialize); methods run per request.

Error Translation:
    google.api_core NotFound on update → NotFoundError   (404)
    ValueError from query/update args  → ValidationError (400)
    anything else from the SDK         → DatabaseError   (500)
    DocStoreError subclasses           → propagate unchanged
"""

import logging
from typing import Any, Dict, List, Optional

from google.api_core import exceptions as google_exceptions
from google.cloud.firestore import AsyncClient
from google.cloud.firestore_v1.base_query import FieldFilter

from app.exceptions import DatabaseError, DocStoreError, NotFoundError, ValidationError
from app.firebase import create_firestore_client, init_firebase_app

logger = logging.getLogger(__name__)

Document = Dict[str, Any]

# Web/Node spellings → Python SDK operator strings
OPERATOR_ALIASES = {
    "array-contains": "array_contains",
    "array-contains-any": "array_contains_any",
}


def snapshot_to_dict(snapshot) -> Document:
    """Merge a snapshot's ID with its fields; stored fields win on key clashes."""
    return {"id": snapshot.id, **(snapshot.to_dict() or {})}


class FirestoreService:
    """
    Thin async wrapper over a Firestore client.

    The client is either injected (tests, scripts) or bound by initialize()
    during application startup. No method validates or transforms document
    contents.
    """

    def __init__(self, client: Optional[AsyncClient] = None):
        self._client = client
        self.credential_strategy: Optional[str] = None

    def initialize(self) -> str:
        """
        Initialize the Firebase app and bind the async Firestore client.

        Returns:
            The credential strategy that was used.

        Raises:
            CredentialsError: A configured service-account key is unusable.
        """
        strategy, firebase_app = init_firebase_app()
        self._client = create_firestore_client(firebase_app)
        self.credential_strategy = strategy
        return strategy

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> AsyncClient:
        if self._client is None:
            raise DatabaseError(
                message="The database client is not available. Please try again later.",
                context={"reason": "firestore client not initialized"},
            )
        return self._client

    def close(self) -> None:
        """Drop the bound client; the Firebase app is deleted separately."""
        self._client = None
        self.credential_strategy = None

    # ── Reads ─────────────────────────────────────────────────────────────

    async def get_collection(self, collection_name: str) -> List[Document]:
        """Every document in the collection, in Firestore's default order."""
        try:
            snapshots = await self.client.collection(collection_name).get()
        except DocStoreError:
            raise
        except Exception as e:
            raise self._wrap("get_collection", e, collection=collection_name)
        return [snapshot_to_dict(snapshot) for snapshot in snapshots]

    async def get_document(self, collection_name: str, doc_id: str) -> Optional[Document]:
        """
        Fetch one document.

        Returns:
            The document dict, or None when no document has this ID.
        """
        try:
            snapshot = await self.client.collection(collection_name).document(doc_id).get()
        except DocStoreError:
            raise
        except Exception as e:
            raise self._wrap("get_document", e, collection=collection_name, doc_id=doc_id)

        if not snapshot.exists:
            return None
        return snapshot_to_dict(snapshot)

    def build_query(self, collection_name: str, field: str, operator: str, value: Any):
        """
        Single-filter query over the collection, not yet executed.

        Operators: ==, !=, <, <=, >, >=, in, not-in, array-contains,
        array-contains-any. The hyphenated array spellings are the ones the
        web SDKs use; array_contains and array_contains_any are accepted too.

        Raises:
            ValidationError: The SDK rejected the operator or field path.
        """
        sdk_operator = OPERATOR_ALIASES.get(operator, operator)
        try:
            return self.client.collection(collection_name).where(
                filter=FieldFilter(field, sdk_operator, value)
            )
        except DocStoreError:
            raise
        except ValueError as e:
            raise ValidationError(
                message=f"Invalid query: {e}",
                field=field,
                context={"operator": operator},
            ) from e

    async def query_collection(
        self,
        collection_name: str,
        field: str,
        operator: str,
        value: Any,
    ) -> List[Document]:
        """
        Documents where `field <operator> value`.

        See build_query for the accepted operators.
        """
        query = self.build_query(collection_name, field, operator, value)
        try:
            snapshots = await query.get()
        except Exception as e:
            raise self._wrap("query_collection", e, collection=collection_name, field=field)
        return [snapshot_to_dict(snapshot) for snapshot in snapshots]

    # ── Writes ────────────────────────────────────────────────────────────

    async def create_document(self, collection_name: str, data: Document) -> str:
        """Add a document and return the ID Firestore assigned to it."""
        try:
            _update_time, doc_ref = await self.client.collection(collection_name).add(data)
        except DocStoreError:
            raise
        except Exception as e:
            raise self._wrap("create_document", e, collection=collection_name)

        logger.info("Created document %s/%s", collection_name, doc_ref.id)
        return doc_ref.id

    async def update_document(self, collection_name: str, doc_id: str, data: Document) -> None:
        """
        Merge `data` into an existing document.

        Raises:
            NotFoundError: No document has this ID (Firestore update never creates).
            ValidationError: The SDK rejected the update, e.g. an empty body.
        """
        try:
            await self.client.collection(collection_name).document(doc_id).update(data)
        except DocStoreError:
            raise
        except google_exceptions.NotFound as e:
            raise NotFoundError(resource="document", resource_id=doc_id) from e
        except ValueError as e:
            raise ValidationError(
                message=f"Invalid update: {e}",
                context={"document_id": doc_id},
            ) from e
        except Exception as e:
            raise self._wrap("update_document", e, collection=collection_name, doc_id=doc_id)

        logger.info("Updated document %s/%s", collection_name, doc_id)

    async def delete_document(self, collection_name: str, doc_id: str) -> None:
        """Delete a document. Deleting an ID that does not exist is not an error."""
        try:
            await self.client.collection(collection_name).document(doc_id).delete()
        except DocStoreError:
            raise
        except Exception as e:
            raise self._wrap("delete_document", e, collection=collection_name, doc_id=doc_id)

        logger.info("Deleted document %s/%s", collection_name, doc_id)

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    def _wrap(operation: str, error: Exception, **context: Any) -> DatabaseError:
        logger.error(
            "Firestore %s failed: %s | Context: %s",
            operation,
            str(error),
            context,
            exc_info=not isinstance(error, google_exceptions.GoogleAPICallError),
        )
        return DatabaseError(
            message="Could not complete the database operation. Please try again.",
            context={"operation": operation, "error_type": type(error).__name__, **context},
        )


# ── Singleton Instance ────────────────────────────────────────────────────
# Bound to a client by the application lifespan
firestore_service = FirestoreService()


def get_firestore_service() -> FirestoreService:
    """FastAPI dependency returning the process-wide FirestoreService."""
    return firestore_service
