from sqlalchemy import Column, String, Integer, DateTime, JSON
from sqlalchemy.sql import func
import enum
from appraisal_hub.core.ids import generate_id
from appraisal_hub.database import Base

# 1 = flat legacy "questions" list, 2 = categories -> items
CURRENT_SCHEMA_VERSION = 2


class QuestionType(str, enum.Enum):
    RATING = "rating-1-5"
    TEXT = "text"
    MULTIPLE_CHOICE = "multiple-choice"


class Template(Base):
    __tablename__ = "templates"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String, nullable=False, index=True)
    subtitle = Column(String, nullable=True)
    type = Column(String, nullable=False, index=True)  # a RelationshipType value
    categories = Column(JSON, nullable=False, default=list)
    questions = Column(JSON, nullable=True)  # legacy payload, emptied on migration
    version = Column(Integer, nullable=False, default=1)
    schema_version = Column(Integer, nullable=False, default=CURRENT_SCHEMA_VERSION)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Template {self.name} v{self.version}>"
