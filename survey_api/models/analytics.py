# survey_api/models/analytics.py
import uuid
from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AnswerOption(BaseModel):
    """An answer entry embedded in a question.

    For multiple-choice questions this is an authored option; for free-text
    questions it is the running tally of one distinct response text.
    """
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    text: str = ""
    is_correct: bool = False
    response_count: Optional[int] = 0


class QuestionSnapshot(BaseModel):
    """One question as read from the store, used both on the wire and as
    input to the aggregation functions."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    text: str
    question_type: str = "Input"
    category: Optional[str] = ""
    level: Optional[str] = ""
    position: int = 0
    answers: List[AnswerOption] = Field(default_factory=list)
    times_answered: Optional[int] = None
    times_skipped: Optional[int] = None
    created_at: Optional[datetime] = None
    last_answered_at: Optional[datetime] = None


class ResponseRecord(BaseModel):
    """One individual response in the flattened representation."""
    question_id: str
    text: Optional[str] = ""
    id: Optional[str] = None
    created_at: Optional[datetime] = None


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LeaderboardEntry(_CamelModel):
    question: str
    responses: int


class QuestionCount(_CamelModel):
    id: str
    count: int


class Statistics(_CamelModel):
    category_totals: Dict[str, int] = Field(default_factory=dict)
    level_totals: Dict[str, int] = Field(default_factory=dict)
    answer_counts: Dict[str, int] = Field(default_factory=dict)
    skip_counts: Dict[str, int] = Field(default_factory=dict)
    skip_rates: Dict[str, str] = Field(default_factory=dict)
    total_answered: int = 0
    total_skipped: int = 0
    total_responses: int = 0
    overall_skip_rate: str = "0.0"
    leaderboard: List[LeaderboardEntry] = Field(default_factory=list)
    most_answered: Optional[QuestionCount] = None
    most_skipped: Optional[QuestionCount] = None
    recently_answered: List[str] = Field(default_factory=list)


class AnswerSummary(_CamelModel):
    question_id: str
    total_answers: int = 0
    unique_answers: int = 0
    average_length: int = 0
    most_common_answer: str = ""
    longest_answer: str = ""
    shortest_answer: str = ""
    frequencies: Dict[str, int] = Field(default_factory=dict)
