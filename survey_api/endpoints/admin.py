# Builder endpoints: batch create/update/delete of survey questions
# survey_api/endpoints/admin.py
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from survey_api.models.analytics import QuestionSnapshot
from survey_api.models.schemas import (
    DeleteResult,
    QuestionBatchCreate,
    QuestionBatchDelete,
    QuestionBatchUpdate,
)
from survey_api.services import question_store
from survey_api.services.auth import require_api_key
from survey_api.utils.db import get_db

router = APIRouter(dependencies=[Depends(require_api_key)])

@router.get("/", response_model=List[QuestionSnapshot])
async def get_all_questions(db: AsyncSession = Depends(get_db)):
    """Every question with its embedded answers and counters."""
    return await question_store.fetch_snapshot(db)

@router.post("/", response_model=List[QuestionSnapshot], status_code=201)
async def create_questions(batch: QuestionBatchCreate, db: AsyncSession = Depends(get_db)):
    created = await question_store.create_questions(db, batch.questions)
    return [question_store.to_snapshot(q) for q in created]

@router.put("/", response_model=List[QuestionSnapshot])
async def update_questions(batch: QuestionBatchUpdate, db: AsyncSession = Depends(get_db)):
    updated = await question_store.update_questions(db, batch.questions)
    return [question_store.to_snapshot(q) for q in updated]

@router.delete("/", response_model=DeleteResult)
async def delete_questions(batch: QuestionBatchDelete, db: AsyncSession = Depends(get_db)):
    deleted = await question_store.delete_questions(db, batch.question_ids)
    return DeleteResult(deleted_count=deleted)

@router.delete("/levels/{level}", response_model=DeleteResult)
async def delete_level(level: str, db: AsyncSession = Depends(get_db)):
    deleted = await question_store.delete_level(db, level)
    return DeleteResult(deleted_count=deleted)
