"""Record store client scoped to the session's principal"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Optional, Tuple
from sqlalchemy.exc import SQLAlchemyError
from business_manager.domain.exceptions import AuthenticationRequired, RecordNotFound, RemoteUnavailable
from business_manager.domain.models import Principal, RecordKind
from business_manager.infrastructure.observability.metrics import store_failure_counter
from business_manager.infrastructure.store.codec import Record, StoredDocument, decode_record
from business_manager.infrastructure.store.documents import DocumentStore
from business_manager.sync.session import SessionState


@dataclass(frozen=True)
class Ordering:
    """Sort snapshots by a document field"""

    field: str
    descending: bool = False

    def apply(self, documents: Tuple[StoredDocument, ...]) -> Tuple[StoredDocument, ...]:
        # Documents without the field are left out, like an ordered store query
        present = [d for d in documents if d.data.get(self.field) is not None]
        # sorted() is stable for reverse=True too, so ties keep creation order
        try:
            return tuple(sorted(present, key=lambda d: d.data[self.field], reverse=self.descending))
        except TypeError as e:
            raise RemoteUnavailable(f"Cannot order documents by {self.field}: {e}") from e


COLLECTIONS_BY_DATE = Ordering("date", descending=True)


class RecordStoreClient:
    """Create/update/delete/subscribe over the two record kinds of one principal"""

    def __init__(self, store: DocumentStore, session: SessionState):
        self.store = store
        self.session = session

    def _require_principal(self) -> Principal:
        if self.session.principal is None:
            raise AuthenticationRequired()
        return self.session.principal

    async def _call(self, operation: str, fn, *args):
        """Run a blocking store call off the event loop, mapping failures to RemoteUnavailable"""
        try:
            return await asyncio.to_thread(fn, *args)
        except SQLAlchemyError as e:
            store_failure_counter.labels(operation=operation).inc()
            raise RemoteUnavailable(f"Record store {operation} failed: {e}") from e

    async def _publish(self, principal_id: str, kind: RecordKind) -> None:
        """Push the namespace's full snapshot to live subscribers"""
        hub = self.store.hub
        if not hub.subscriber_count(principal_id, kind.value):
            return
        # Taken after the write commits: the read under the lock sees it
        async with hub.lock(principal_id, kind.value):
            try:
                snapshot = await self._call("subscribe", self.store.read_all, principal_id, kind.value)
            except RemoteUnavailable as e:
                # Write already committed; subscribers catch up on the next change
                logging.warning(f"Snapshot publish failed: {e}", extra={"kind": kind.value})
                return
            hub.publish(principal_id, kind.value, snapshot)

    async def create(self, kind: RecordKind, fields: Dict[str, Any]) -> str:
        """
        Store a new record and return its store-assigned identifier.

        Raises:
            AuthenticationRequired: No signed-in principal
            RemoteUnavailable: Store write failed
        """
        principal = self._require_principal()
        record_id = await self._call("create", self.store.insert, principal.uid, kind.value, fields)
        logging.info("Record created", extra={"kind": kind.value, "record_id": record_id})
        await self._publish(principal.uid, kind)
        return record_id

    async def update(self, kind: RecordKind, record_id: str, partial: Dict[str, Any]) -> bool:
        """
        Merge fields into an existing record.

        Raises:
            AuthenticationRequired: No signed-in principal
            RecordNotFound: No record with this identifier
            RemoteUnavailable: Store write failed
        """
        principal = self._require_principal()
        found = await self._call("update", self.store.merge, principal.uid, kind.value, record_id, partial)
        if not found:
            store_failure_counter.labels(operation="update").inc()
            raise RecordNotFound(f"No {kind.value} record {record_id}")
        await self._publish(principal.uid, kind)
        return True

    async def delete(self, kind: RecordKind, record_id: str) -> bool:
        """Delete a record; deleting an unknown identifier succeeds without effect"""
        principal = self._require_principal()
        removed = await self._call("delete", self.store.remove, principal.uid, kind.value, record_id)
        if removed:
            await self._publish(principal.uid, kind)
        return True

    async def snapshot(self, kind: RecordKind, ordering: Optional[Ordering] = None) -> Tuple[Record, ...]:
        """One-off read of the current full set"""
        principal = self._require_principal()
        documents = await self._call("subscribe", self.store.read_all, principal.uid, kind.value)
        return self._decode(kind, documents, ordering)

    async def subscribe(self, kind: RecordKind, ordering: Optional[Ordering] = None) -> AsyncIterator[Tuple[Record, ...]]:
        """
        Live feed of full snapshots: the current state first, then one per change.

        The iterator never ends on its own and cannot be restarted; closing it
        unregisters the subscriber.

        Raises:
            AuthenticationRequired: No signed-in principal
            RemoteUnavailable: Initial read failed or a document is malformed
        """
        principal = self._require_principal()
        # Register before the initial read so no change in between is missed
        hub = self.store.hub
        queue = hub.register(principal.uid, kind.value)
        try:
            async with hub.lock(principal.uid, kind.value):
                documents = await self._call("subscribe", self.store.read_all, principal.uid, kind.value)
                # Anything already queued was read before this
                hub.discard_pending(queue)
            yield self._decode(kind, documents, ordering)
            while True:
                documents = await queue.get()
                yield self._decode(kind, documents, ordering)
        finally:
            hub.unregister(principal.uid, kind.value, queue)

    async def put_profile(self, name: str, email: str) -> None:
        principal = self._require_principal()
        await self._call("profile", self.store.save_profile, principal.uid, name, email)

    @staticmethod
    def _decode(kind: RecordKind, documents: Tuple[StoredDocument, ...], ordering: Optional[Ordering]) -> Tuple[Record, ...]:
        if ordering is not None:
            documents = ordering.apply(documents)
        return tuple(decode_record(kind, d) for d in documents)
