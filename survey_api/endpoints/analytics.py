# Analytics over a fresh snapshot of the question store
# survey_api/endpoints/analytics.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from survey_api.models.analytics import AnswerSummary, Statistics
from survey_api.services import analytics, question_store
from survey_api.services.auth import require_api_key
from survey_api.utils.config import settings
from survey_api.utils.db import get_db
from survey_api.utils.logger import logger

router = APIRouter(dependencies=[Depends(require_api_key)])

@router.get("/", response_model=Statistics)
async def get_statistics(db: AsyncSession = Depends(get_db)):
    snapshot = await question_store.fetch_snapshot(db)
    statistics = analytics.compute_statistics(
        snapshot,
        known_categories=settings.known_categories,
        leaderboard_size=settings.leaderboard_size,
        recent_limit=settings.recent_answers_limit,
    )
    logger.info(
        f"Statistics over {len(snapshot)} questions: answered={statistics.total_answered}, "
        f"skipped={statistics.total_skipped}, skip rate={statistics.overall_skip_rate}%"
    )
    return statistics

@router.get("/questions/{question_id}", response_model=AnswerSummary)
async def get_question_summary(question_id: str, db: AsyncSession = Depends(get_db)):
    question = await question_store.get_question(db, question_id)
    return analytics.summarize_question(question_store.to_snapshot(question))
