# survey_api/endpoints/answers.py
from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from survey_api.models.analytics import AnswerOption, QuestionSnapshot
from survey_api.models.schemas import AnswerSubmission, DeleteAnswerRequest
from survey_api.services import question_store
from survey_api.services.auth import require_api_key
from survey_api.utils.db import get_db

router = APIRouter()

@router.put("/answer", response_model=Optional[AnswerOption])
async def add_answer(request: AnswerSubmission, db: AsyncSession = Depends(get_db)):
    """Records one response. Returns the counted entry, or null for a skip."""
    return await question_store.add_answer(db, request.question_id, request.answer_text)

@router.delete("/answer", response_model=QuestionSnapshot, dependencies=[Depends(require_api_key)])
async def delete_answer(request: DeleteAnswerRequest, db: AsyncSession = Depends(get_db)):
    question = await question_store.delete_answer(db, request.question_id, request.answer_id)
    return question_store.to_snapshot(question)

@router.get("/{question_id}", response_model=List[AnswerOption])
async def get_answers(question_id: str, db: AsyncSession = Depends(get_db)):
    return await question_store.list_answers(db, question_id)
