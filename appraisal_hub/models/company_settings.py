from sqlalchemy import Column, Integer, String, Boolean, JSON
from appraisal_hub.database import Base

SETTINGS_ROW_ID = 1


class CompanySettings(Base):
    __tablename__ = "company_settings"

    id = Column(Integer, primary_key=True, default=SETTINGS_ROW_ID)
    name = Column(String, nullable=False, default="Your Company")
    accent_color = Column(String, nullable=False, default="#3B82F6")
    theme = Column(String, nullable=False, default="system")  # light | dark | system
    hr_score_weight = Column(Integer, nullable=False, default=30)
    require_hr_for_ranking = Column(Boolean, nullable=False, default=False)
    employee_of_period_overrides = Column(JSON, nullable=False, default=dict)  # period id -> employee id
