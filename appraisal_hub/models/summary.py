from sqlalchemy import Column, String, Float, DateTime, ForeignKey, JSON, Text
from sqlalchemy.sql import func
from appraisal_hub.database import Base


class PerformanceSummary(Base):
    __tablename__ = "performance_summaries"

    employee_id = Column(String(32), ForeignKey("employees.id", ondelete="CASCADE"), primary_key=True)
    period = Column(String, primary_key=True)  # review period id, or "all"
    total_score = Column(Float, nullable=False, default=0.0)
    max_score = Column(Float, nullable=False, default=0.0)
    percentage = Column(Float, nullable=False, default=0.0)
    strengths = Column(JSON, nullable=False, default=list)
    improvements = Column(JSON, nullable=False, default=list)
    narrative = Column(Text, nullable=False, default="")
    breakdown = Column(JSON, nullable=False, default=list)
    generated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
