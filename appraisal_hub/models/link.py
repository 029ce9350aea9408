from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from appraisal_hub.core.ids import generate_id
from appraisal_hub.database import Base


class AppraisalLink(Base):
    __tablename__ = "appraisal_links"

    id = Column(String(32), primary_key=True, default=generate_id)
    employee_id = Column(String(32), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    appraiser_id = Column(String(32), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    template_id = Column(String(32), ForeignKey("templates.id"), nullable=False)
    review_period_id = Column(String(32), ForeignKey("review_periods.id", ondelete="CASCADE"), nullable=False)
    review_period_name = Column(String, nullable=False)
    token = Column(String, unique=True, index=True, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    used = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<AppraisalLink {self.token[:6]}… used={self.used}>"
