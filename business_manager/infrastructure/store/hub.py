"""In-process fan-out of full snapshots to live subscribers"""

import asyncio
from collections import defaultdict
from typing import Dict, List, Tuple
from business_manager.infrastructure.store.codec import StoredDocument

Snapshot = Tuple[StoredDocument, ...]


class SnapshotHub:
    """
    Per (principal, kind) subscriber queues.

    Each queue holds at most one pending snapshot: publishing replaces an
    unread snapshot, so slow consumers only ever see the latest state.
    Snapshot reads and deliveries of a namespace happen under its lock, so
    a snapshot read earlier is never delivered after one read later.
    Must be used from the event loop thread.
    """

    def __init__(self):
        self._subscribers: Dict[Tuple[str, str], List[asyncio.Queue]] = defaultdict(list)
        self._locks: Dict[Tuple[str, str], asyncio.Lock] = {}

    def lock(self, principal_id: str, kind: str) -> asyncio.Lock:
        """Held while a namespace is read and its snapshot delivered"""
        key = (principal_id, kind)
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    def register(self, principal_id: str, kind: str) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        self._subscribers[(principal_id, kind)].append(queue)
        return queue

    def unregister(self, principal_id: str, kind: str, queue: asyncio.Queue) -> None:
        key = (principal_id, kind)
        queues = self._subscribers.get(key)
        if queues and queue in queues:
            queues.remove(queue)
            if not queues:
                del self._subscribers[key]

    def subscriber_count(self, principal_id: str, kind: str) -> int:
        return len(self._subscribers.get((principal_id, kind), ()))

    @staticmethod
    def discard_pending(queue: asyncio.Queue) -> None:
        """Drop a snapshot superseded by a newer direct read"""
        while not queue.empty():
            queue.get_nowait()

    def publish(self, principal_id: str, kind: str, snapshot: Snapshot) -> int:
        """Deliver a snapshot to every subscriber of the namespace; returns the number reached"""
        queues = list(self._subscribers.get((principal_id, kind), ()))
        for queue in queues:
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(snapshot)
        return len(queues)
