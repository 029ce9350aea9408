from sqlalchemy import Column, String, Integer, Date, Text, DateTime
from sqlalchemy.sql import func
import enum
from appraisal_hub.core.ids import generate_id
from appraisal_hub.database import Base


class PeriodType(str, enum.Enum):
    Q1 = "Q1"
    Q2 = "Q2"
    Q3 = "Q3"
    Q4 = "Q4"
    H1 = "H1"
    H2 = "H2"
    ANNUAL = "Annual"
    CUSTOM = "Custom"


class PeriodStatus(str, enum.Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class ReviewPeriod(Base):
    __tablename__ = "review_periods"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)  # "Q1 2025"
    type = Column(String, nullable=False, default=PeriodType.CUSTOM.value)
    year = Column(Integer, nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(String, nullable=False, default=PeriodStatus.PLANNING.value, index=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<ReviewPeriod {self.name} ({self.status})>"
