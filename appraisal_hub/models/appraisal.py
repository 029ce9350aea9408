from sqlalchemy import Column, String, Float, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from appraisal_hub.core.ids import generate_id
from appraisal_hub.database import Base


class Appraisal(Base):
    """A submitted appraisal form. Rows are never updated after insert."""
    __tablename__ = "appraisals"

    id = Column(String(32), primary_key=True, default=generate_id)
    template_id = Column(String(32), ForeignKey("templates.id"), nullable=False, index=True)
    employee_id = Column(String(32), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    appraiser_id = Column(String(32), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    review_period_id = Column(String(32), nullable=False, index=True)
    review_period_name = Column(String, nullable=False)
    relationship_type = Column(String, nullable=True)
    responses = Column(JSON, nullable=False, default=list)  # [{question_id, value, text_feedback}]
    score = Column(Float, nullable=False, default=0.0)
    max_score = Column(Float, nullable=False, default=0.0)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def percentage(self) -> float:
        return (self.score / self.max_score) * 100 if self.max_score else 0.0
