# survey_api/models/schemas.py
# Request/response payloads for the REST layer
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from survey_api.models.analytics import QuestionSnapshot
from survey_api.models.enums import QuestionType, UserRole


def _require_text(value: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValueError("must not be empty")
    return cleaned


class OptionIn(BaseModel):
    id: Optional[str] = None
    text: str
    is_correct: bool = False

    @field_validator("text")
    @classmethod
    def _text_required(cls, v: str) -> str:
        return _require_text(v)


class QuestionCreate(BaseModel):
    text: str
    question_type: QuestionType = QuestionType.INPUT
    category: str
    level: str
    options: List[OptionIn] = Field(default_factory=list)

    @field_validator("text", "category", "level")
    @classmethod
    def _fields_required(cls, v: str) -> str:
        return _require_text(v)


class QuestionUpdate(QuestionCreate):
    id: str
    position: Optional[int] = None
    # None leaves the embedded answers untouched
    options: Optional[List[OptionIn]] = None


class QuestionBatchCreate(BaseModel):
    questions: List[QuestionCreate] = Field(..., min_length=1)


class QuestionBatchUpdate(BaseModel):
    questions: List[QuestionUpdate] = Field(..., min_length=1)


class QuestionBatchDelete(BaseModel):
    question_ids: List[str] = Field(..., min_length=1)


class DeleteResult(BaseModel):
    deleted_count: int


class QuestionPage(BaseModel):
    total: int
    page: int
    page_size: int
    questions: List[QuestionSnapshot]


class AnswerSubmission(BaseModel):
    question_id: str
    # Empty or whitespace-only text encodes a skip
    answer_text: str = ""


class SubmitAnswersRequest(BaseModel):
    answers: List[AnswerSubmission] = Field(..., min_length=1)


class SubmitAnswersResponse(BaseModel):
    submitted: int
    answered: int
    skipped: int


class DeleteAnswerRequest(BaseModel):
    question_id: str
    answer_id: str


class LoginRequest(BaseModel):
    name: str
    password: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_required(cls, v: str) -> str:
        return _require_text(v)


class SessionInfo(BaseModel):
    name: str
    role: UserRole
    is_admin: bool
