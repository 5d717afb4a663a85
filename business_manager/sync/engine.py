"""Live sync engine - mirrors store snapshots into the session and recomputes aggregates"""

import asyncio
import logging
from datetime import date
from typing import Callable, Dict, Optional, Sequence
from business_manager.domain.aggregation import compute_dashboard
from business_manager.domain.exceptions import DomainException
from business_manager.domain.models import DashboardAggregates, RecordKind, Severity
from business_manager.infrastructure.observability.metrics import (
    recompute_histogram,
    snapshot_counter,
    subscription_failure_counter,
)
from business_manager.infrastructure.store.client import COLLECTIONS_BY_DATE, RecordStoreClient
from business_manager.presentation.adapter import PresentationAdapter
from business_manager.sync.session import SessionState


class LiveSyncEngine:
    """
    Keeps the session's two record lists equal to the latest store snapshots.

    Flow per snapshot:
    1. Replace the whole list of that kind (single assignment, no merge)
    2. Render the list
    3. Recompute aggregates from both current lists and render them

    The two subscriptions are independent; a recompute may briefly pair a
    fresh list of one kind with an older list of the other until the next
    snapshot arrives.
    """

    def __init__(
        self,
        client: RecordStoreClient,
        session: SessionState,
        presenter: PresentationAdapter,
        clock: Callable[[], date] = date.today,
    ):
        self.client = client
        self.session = session
        self.presenter = presenter
        self.clock = clock
        self._tasks: Dict[RecordKind, asyncio.Task] = {}
        self._synced: Dict[RecordKind, asyncio.Event] = {}

    @property
    def running(self) -> bool:
        return any(not t.done() for t in self._tasks.values())

    def start(self) -> None:
        """Subscribe once per kind for the rest of the session"""
        if self._tasks:
            return
        for kind in RecordKind:
            self._synced[kind] = asyncio.Event()
            self._tasks[kind] = asyncio.create_task(self._consume(kind), name=f"sync-{kind.value}")

    async def wait_synced(self, timeout: float | None = None) -> None:
        """Wait until both kinds delivered their first snapshot"""
        await asyncio.wait_for(
            asyncio.gather(*(event.wait() for event in self._synced.values())),
            timeout=timeout,
        )

    async def stop(self) -> None:
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        self._synced.clear()

    async def _consume(self, kind: RecordKind) -> None:
        ordering = COLLECTIONS_BY_DATE if kind is RecordKind.COLLECTIONS else None
        feed = self.client.subscribe(kind, ordering)
        try:
            async for snapshot in feed:
                self.apply_snapshot(kind, snapshot)
                self._synced[kind].set()
        except DomainException as e:
            # No retry: the subscription stays down until the next sign-in
            subscription_failure_counter.labels(kind=kind.value).inc()
            logging.error(f"Subscription to {kind.value} failed: {e}")
            self.presenter.notify(f"Failed to load {kind.value}", Severity.ERROR)
        finally:
            await feed.aclose()

    def apply_snapshot(self, kind: RecordKind, snapshot: Sequence) -> Optional[DashboardAggregates]:
        """Swap in a full snapshot and propagate it; ignored once the session has ended"""
        if not self.session.is_active:
            return None

        snapshot_counter.labels(kind=kind.value).inc()
        if kind is RecordKind.COLLECTIONS:
            self.session.collections = tuple(snapshot)
            self.presenter.render_collections(self.session.collections)
        else:
            self.session.emis = tuple(snapshot)
            self.presenter.render_emis(self.session.emis)
        return self.refresh()

    def refresh(self) -> DashboardAggregates:
        """Recompute and render derived values from the current lists"""
        with recompute_histogram.time():
            aggregates = compute_dashboard(self.session.collections, self.session.emis, self.clock())
        self.presenter.render_dashboard(aggregates)
        self.presenter.render_charts(aggregates.collections_vs_emi, aggregates.profit_split)
        return aggregates
