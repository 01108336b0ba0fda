# Endpoints for browsing the stored questions
# survey_api/endpoints/questions.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from survey_api.models.analytics import QuestionSnapshot
from survey_api.models.schemas import DeleteResult, QuestionPage
from survey_api.services import question_store
from survey_api.services.auth import require_api_key
from survey_api.utils.config import settings
from survey_api.utils.db import get_db

router = APIRouter()

@router.get("/", response_model=QuestionPage)
async def get_questions(page: int = Query(1, ge=1), db: AsyncSession = Depends(get_db)):
    total, questions = await question_store.list_questions_page(db, page)
    return QuestionPage(
        total=total,
        page=page,
        page_size=settings.questions_page_size,
        questions=[question_store.to_snapshot(q) for q in questions],
    )

@router.get("/{question_id}", response_model=QuestionSnapshot)
async def get_question(question_id: str, db: AsyncSession = Depends(get_db)):
    question = await question_store.get_question(db, question_id)
    return question_store.to_snapshot(question)

@router.delete("/", response_model=DeleteResult, dependencies=[Depends(require_api_key)])
async def delete_all_questions(db: AsyncSession = Depends(get_db)):
    """Removes every question, answers included."""
    deleted = await question_store.delete_all(db)
    return DeleteResult(deleted_count=deleted)
