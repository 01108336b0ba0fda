# survey_api/models/question.py
import uuid
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, JSON, Text
from sqlalchemy.orm import declarative_base

from survey_api.models.enums import QuestionType


Base = declarative_base()


def _new_id() -> str:
    return uuid.uuid4().hex


class Question(Base):
    """A survey question. Answer entries are embedded as a JSON list."""
    __tablename__ = "questions"
    id = Column(String, primary_key=True, index=True, default=_new_id)
    text = Column(Text, nullable=False)
    question_type = Column(String, nullable=False, default=QuestionType.INPUT.value)
    category = Column(String, index=True, default="")
    level = Column(String, index=True, default="")
    position = Column(Integer, default=0, index=True)

    # [{"id", "text", "is_correct", "response_count"}, ...]
    answers = Column(JSON, default=lambda: [])
    times_answered = Column(Integer, default=0)
    times_skipped = Column(Integer, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    last_answered_at = Column(DateTime, nullable=True)
