import logging
from typing import Optional
from sqlalchemy.orm import Session

from appraisal_hub.core.state import AppState


class BaseService:
    """
    Common plumbing for domain services: session, logger, commit/rollback
    and change notification to the application state store.
    """

    def __init__(self, db: Session, state: Optional[AppState] = None):
        self.db = db
        self.state = state
        self._logger = logging.getLogger(self.__class__.__module__)

    def log_info(self, message: str, **extra):
        self._logger.info(message, extra=extra or None)

    def log_warning(self, message: str, **extra):
        self._logger.warning(message, extra=extra or None)

    def log_error(self, message: str, **extra):
        self._logger.error(message, extra=extra or None)

    def commit(self, *changed: str):
        """Commit the unit of work, then tell the state store which collections changed."""
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        if self.state is not None:
            for collection in changed:
                self.state.publish(collection)
