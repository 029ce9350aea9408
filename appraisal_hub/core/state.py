"""
Application state store.

Holds a read-through snapshot of the slow-changing collections (employees,
teams, review periods, templates) and notifies subscribers when a service
writes to one of them. One instance lives on ``app.state.store`` and is
injected into routers with ``get_app_state``.
"""
import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from fastapi import Request
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

Subscriber = Callable[[str], None]

COLLECTIONS = ("employees", "teams", "periods", "templates")


class AppState:
    def __init__(self):
        self._lock = threading.RLock()
        self._snapshot: Dict[str, Optional[List[Any]]] = {name: None for name in COLLECTIONS}
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback(collection)``; returns a function that unsubscribes it."""
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe():
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return _unsubscribe

    def publish(self, collection: str) -> None:
        """Drop the cached collection and tell every subscriber it changed."""
        self.invalidate(collection)
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(collection)
            except Exception:
                logger.exception("State subscriber failed", extra={"collection": collection})

    def invalidate(self, collection: Optional[str] = None) -> None:
        with self._lock:
            if collection is None:
                for name in COLLECTIONS:
                    self._snapshot[name] = None
            elif collection in self._snapshot:
                self._snapshot[collection] = None

    def get(self, collection: str, db: Session) -> List[Any]:
        """Cached list for ``collection``, loaded from the database on a miss."""
        if collection not in self._snapshot:
            raise KeyError(collection)
        with self._lock:
            cached = self._snapshot[collection]
        if cached is not None:
            return cached
        rows = self._load(collection, db)
        with self._lock:
            self._snapshot[collection] = rows
        return rows

    def find(self, collection: str, db: Session, item_id: Optional[str]) -> Optional[Any]:
        for row in self.get(collection, db):
            if row.id == item_id:
                return row
        return None

    def refresh(self, db: Session) -> None:
        for name in COLLECTIONS:
            rows = self._load(name, db)
            with self._lock:
                self._snapshot[name] = rows

    @staticmethod
    def _load(collection: str, db: Session) -> List[Any]:
        # Snapshots hold pydantic copies so they outlive the request session
        from appraisal_hub.models.employee import Employee
        from appraisal_hub.models.team import Team
        from appraisal_hub.models.review_period import ReviewPeriod
        from appraisal_hub.schemas.employee import EmployeeResponse
        from appraisal_hub.schemas.team import TeamResponse
        from appraisal_hub.schemas.period import ReviewPeriodResponse

        loaders = {
            "employees": (Employee, EmployeeResponse, Employee.name),
            "teams": (Team, TeamResponse, Team.name),
            "periods": (ReviewPeriod, ReviewPeriodResponse, ReviewPeriod.start_date.desc()),
        }
        if collection == "templates":
            # Goes through the service so legacy rows are migrated before caching
            from appraisal_hub.services.template_service import TemplateService
            service = TemplateService(db)
            return [service.describe(t) for t in service.list_templates()]
        model, schema, order = loaders[collection]
        return [schema.model_validate(row) for row in db.query(model).order_by(order).all()]


def get_app_state(request: Request) -> AppState:
    return request.app.state.store
