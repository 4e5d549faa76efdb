"""
Firestore helper layer used by the dashboards.

Classes
-------
FirestoreStore(client)
    Thin document-store facade over ``google.cloud.firestore.Client``.
    Documents go in and come out as plain dicts; the storage id travels
    under the ``"id"`` key.

Functions
---------
get_client()
    Build a Firestore client with Application Default Credentials (ADC).
    Works both locally and on Cloud Run.

Every ``GoogleAPIError`` raised by the SDK (call failures and exhausted
retries alike) surfaces as ``StorageError``.
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Tuple

from google.api_core import exceptions as core_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from clinic.errors import NotFoundError, StorageError

logger = logging.getLogger(__name__)

Filter = Tuple[str, str, Any]


def get_client() -> firestore.Client:
    return firestore.Client()                 # project ID inferred from ADC


def to_document(snapshot) -> Dict[str, Any]:
    return {"id": snapshot.id, **(snapshot.to_dict() or {})}


@contextmanager
def _firestore_errors(action: str):
    try:
        yield
    except core_exceptions.GoogleAPIError as err:     # network / perms / retries
        logger.error("Firestore %s failed: %s", action, err)
        raise StorageError(f"Firestore error: {err}") from err


class FirestoreStore:
    def __init__(self, client: firestore.Client):
        self._db = client

    def get_one(self, collection: str, doc_id: str) -> Dict[str, Any]:
        """
        Fetch a single document.

        Raises
        ------
        NotFoundError
            When no document ``collection/doc_id`` exists.
        StorageError
            When the read itself fails.
        """
        with _firestore_errors("read"):
            snapshot = self._db.collection(collection).document(doc_id).get()
        if not snapshot.exists:
            raise NotFoundError(f"{collection}/{doc_id}")
        return to_document(snapshot)

    def upsert_merge(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        """Create the document or overlay *fields*, leaving the others untouched."""
        with _firestore_errors("write"):
            self._db.collection(collection).document(doc_id).set(fields, merge=True)

    def insert(self, collection: str, fields: Dict[str, Any]) -> str:
        """Add a document with a storage-generated id and return that id."""
        with _firestore_errors("insert"):
            _, ref = self._db.collection(collection).add(fields)
        return ref.id

    def get_all(self, collection: str) -> List[Dict[str, Any]]:
        with _firestore_errors("read"):
            return [to_document(doc) for doc in self._db.collection(collection).stream()]

    def subscribe_query(
        self,
        collection: str,
        where: Filter,
        on_change: Callable[[List[Dict[str, Any]]], None],
    ) -> Callable[[], None]:
        """
        Watch ``collection`` filtered by ``where`` = (field, op, value).

        ``on_change`` receives the full matching result set every time it
        changes, starting with the initial snapshot.  The returned callable
        stops the watch.
        """
        field, op, value = where
        query = self._db.collection(collection).where(filter=FieldFilter(field, op, value))

        def _on_snapshot(docs, changes, read_time):
            on_change([to_document(doc) for doc in docs])

        with _firestore_errors("listen"):
            watch = query.on_snapshot(_on_snapshot)
        logger.debug("Watching %s where %s %s %r", collection, field, op, value)
        return watch.unsubscribe
