import logging
from appraisal_hub.core.state import AppState
from appraisal_hub.database import SessionLocal
from appraisal_hub.services.settings_service import SettingsService
from appraisal_hub.services.template_service import TemplateService

logger = logging.getLogger(__name__)


def init_system_data(store: AppState) -> None:
    """
    Startup bootstrap: make sure the company settings row exists, bring any
    schema-v1 templates up to date and warm the state store.
    """
    db = SessionLocal()
    try:
        company = SettingsService(db).get()
        logger.info(f"Company settings loaded for '{company.name}'")

        templates = TemplateService(db, store).list_templates()
        logger.info(f"System initialization check: {len(templates)} template(s) on current schema")

        store.refresh(db)
    except Exception:
        db.rollback()
        logger.error("Error during system initialization", exc_info=True)
        raise
    finally:
        db.close()
