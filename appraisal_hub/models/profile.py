from sqlalchemy import Column, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from appraisal_hub.database import Base


class EmployeeProfile(Base):
    """Directory data (photo, bio, skills). Not used by scoring."""
    __tablename__ = "employee_profiles"

    employee_id = Column(String(32), ForeignKey("employees.id", ondelete="CASCADE"), primary_key=True)
    photo_url = Column(String, nullable=True)
    cover_url = Column(String, nullable=True)
    position = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    employee = relationship("Employee", back_populates="profile")
