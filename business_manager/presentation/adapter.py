"""Boundary between the core and whatever renders it"""

from collections import deque
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Deque, List, Optional, Protocol, Sequence
from business_manager.config import settings
from business_manager.domain.aggregation import compute_dashboard
from business_manager.domain.models import (
    ChartSeries,
    CollectionRecord,
    DashboardAggregates,
    EMIRecord,
    Severity,
)


class PresentationAdapter(Protocol):
    """Consumer of plain data emitted by the sync engine and command handlers"""

    def render_collections(self, collections: Sequence[CollectionRecord]) -> None: ...

    def render_emis(self, emis: Sequence[EMIRecord]) -> None: ...

    def render_dashboard(self, aggregates: DashboardAggregates) -> None: ...

    def render_charts(self, collections_vs_emi: ChartSeries, profit_split: ChartSeries) -> None: ...

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None: ...


@dataclass(frozen=True)
class Notification:
    message: str
    severity: Severity
    created_at: datetime


@dataclass
class LatestStatePresenter:
    """Keeps the most recent rendered state for polling clients such as the HTTP API"""

    history: int = field(default_factory=lambda: settings.notification_history)
    collections: Sequence[CollectionRecord] = ()
    emis: Sequence[EMIRecord] = ()
    aggregates: Optional[DashboardAggregates] = None
    charts: Optional[tuple] = None
    notifications: Deque[Notification] = field(init=False)
    revision: int = 0

    def __post_init__(self):
        self.notifications = deque(maxlen=self.history)

    def _bump(self) -> None:
        self.revision += 1

    def render_collections(self, collections: Sequence[CollectionRecord]) -> None:
        self.collections = tuple(collections)
        self._bump()

    def render_emis(self, emis: Sequence[EMIRecord]) -> None:
        self.emis = tuple(emis)
        self._bump()

    def render_dashboard(self, aggregates: DashboardAggregates) -> None:
        self.aggregates = aggregates
        self._bump()

    def render_charts(self, collections_vs_emi: ChartSeries, profit_split: ChartSeries) -> None:
        self.charts = (collections_vs_emi, profit_split)
        self._bump()

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        self.notifications.append(Notification(message, severity, datetime.now(timezone.utc)))

    def aggregates_at(self, today: date) -> Optional[DashboardAggregates]:
        """Figures recomputed from the latest lists for the given day; None until synced"""
        if self.aggregates is None:
            return None
        return compute_dashboard(self.collections, self.emis, today)

    def recent_notifications(self) -> List[Notification]:
        return list(self.notifications)

    def reset(self) -> None:
        """Forget rendered records on sign-out; notifications are kept"""
        self.collections = ()
        self.emis = ()
        self.aggregates = None
        self.charts = None
        self._bump()
