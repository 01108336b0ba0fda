# Participant-facing endpoints: fetch a level's questions, submit a batch of answers
# survey_api/endpoints/survey.py
from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from survey_api.models.analytics import QuestionSnapshot
from survey_api.models.schemas import SubmitAnswersRequest, SubmitAnswersResponse
from survey_api.services import question_store
from survey_api.utils.db import get_db
from survey_api.utils.logger import logger

router = APIRouter()

@router.get("/", response_model=List[QuestionSnapshot])
async def get_survey_questions(level: Optional[str] = None, db: AsyncSession = Depends(get_db)):
    questions = await question_store.list_questions(db, level=level)
    logger.debug(f"Serving {len(questions)} questions for level={level!r}")
    return [question_store.to_snapshot(q) for q in questions]

@router.put("/", response_model=SubmitAnswersResponse)
async def submit_answers(request: SubmitAnswersRequest, db: AsyncSession = Depends(get_db)):
    """Records an ordered batch; blank answer_text counts as a skip."""
    answered, skipped = await question_store.submit_answers(db, request.answers)
    return SubmitAnswersResponse(
        submitted=len(request.answers),
        answered=answered,
        skipped=skipped,
    )
