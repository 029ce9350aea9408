from sqlalchemy import Column, String, Text, DateTime, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from appraisal_hub.core.ids import generate_id
from appraisal_hub.database import Base


class Team(Base):
    __tablename__ = "teams"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    leader_ids = Column(JSON, nullable=False, default=list)  # designated leader employee ids
    oversight_executive_id = Column(String(32), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    members = relationship("Employee", back_populates="team")

    def __repr__(self):
        return f"<Team {self.name}>"
