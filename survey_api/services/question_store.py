# survey_api/services/question_store.py
# Question/answer store operations over an AsyncSession
import uuid
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from fastapi import HTTPException
from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm.attributes import flag_modified

from survey_api.models.analytics import AnswerOption, QuestionSnapshot
from survey_api.models.enums import QuestionType
from survey_api.models.question import Question
from survey_api.models.schemas import AnswerSubmission, OptionIn, QuestionCreate, QuestionUpdate
from survey_api.services.analytics import is_skipped
from survey_api.utils.config import settings
from survey_api.utils.logger import logger


def to_snapshot(question: Question) -> QuestionSnapshot:
    return QuestionSnapshot.model_validate(question)


def _ordered():
    return select(Question).order_by(Question.position, Question.created_at)


async def list_questions(session: AsyncSession, level: Optional[str] = None) -> List[Question]:
    """All questions in survey order, optionally for one level."""
    query = _ordered()
    if level is not None:
        query = query.filter(Question.level == level)
    result = await session.execute(query)
    return list(result.scalars().all())


async def list_questions_page(session: AsyncSession, page: int) -> Tuple[int, List[Question]]:
    page_size = settings.questions_page_size
    offset = (max(page, 1) - 1) * page_size
    total = (await session.execute(select(func.count(Question.id)))).scalar_one()
    result = await session.execute(_ordered().offset(offset).limit(page_size))
    questions = list(result.scalars().all())
    logger.debug(f"Question page {page}: total={total}, returned={len(questions)}")
    return total, questions


async def get_question(session: AsyncSession, question_id: str) -> Question:
    result = await session.execute(select(Question).filter_by(id=question_id))
    question = result.scalars().first()
    if not question:
        raise HTTPException(status_code=404, detail=f"Question '{question_id}' not found")
    return question


async def _get_many(session: AsyncSession, ids: Sequence[str]) -> Dict[str, Question]:
    """Loads the given ids, failing with 404 before anything is written if one is unknown."""
    result = await session.execute(select(Question).where(Question.id.in_(set(ids))))
    found = {q.id: q for q in result.scalars().all()}
    missing = [question_id for question_id in ids if question_id not in found]
    if missing:
        raise HTTPException(status_code=404, detail=f"Questions not found: {sorted(set(missing))}")
    return found


def _merge_options(existing: List[dict], options: List[OptionIn]) -> List[dict]:
    # Response counts survive edits for options that keep their id.
    counts = {entry.get("id"): entry.get("response_count", 0) for entry in existing}
    merged = []
    for option in options:
        option_id = option.id or uuid.uuid4().hex
        merged.append(AnswerOption(
            id=option_id,
            text=option.text,
            is_correct=option.is_correct,
            response_count=counts.get(option_id, 0),
        ).model_dump())
    return merged


async def create_questions(session: AsyncSession, items: Sequence[QuestionCreate]) -> List[Question]:
    """Inserts a batch, appending after the current last position."""
    max_position = (await session.execute(select(func.max(Question.position)))).scalar()
    next_position = (max_position if max_position is not None else -1) + 1

    created = []
    for offset, item in enumerate(items):
        answers = _merge_options([], item.options) if item.question_type == QuestionType.MCQ else []
        question = Question(
            text=item.text,
            question_type=item.question_type.value,
            category=item.category,
            level=item.level,
            position=next_position + offset,
            answers=answers,
            times_answered=0,
            times_skipped=0,
        )
        session.add(question)
        created.append(question)

    await session.commit()
    logger.info(f"Created {len(created)} questions.")
    return created


async def update_questions(session: AsyncSession, items: Sequence[QuestionUpdate]) -> List[Question]:
    found = await _get_many(session, [item.id for item in items])

    updated = []
    for item in items:
        question = found[item.id]
        question.text = item.text
        question.question_type = item.question_type.value
        question.category = item.category
        question.level = item.level
        if item.position is not None:
            question.position = item.position
        if item.options is not None:
            question.answers = _merge_options(list(question.answers or []), item.options)
            flag_modified(question, "answers")
        updated.append(question)

    await session.commit()
    logger.info(f"Updated {len(updated)} questions.")
    return updated


async def delete_questions(session: AsyncSession, ids: Sequence[str]) -> int:
    result = await session.execute(delete(Question).where(Question.id.in_(set(ids))))
    await session.commit()
    logger.info(f"Deleted {result.rowcount} of {len(set(ids))} requested questions.")
    return result.rowcount


async def delete_level(session: AsyncSession, level: str) -> int:
    result = await session.execute(delete(Question).where(Question.level == level))
    await session.commit()
    logger.info(f"Deleted {result.rowcount} questions for level '{level}'.")
    return result.rowcount


async def delete_all(session: AsyncSession) -> int:
    result = await session.execute(delete(Question))
    await session.commit()
    logger.info(f"All questions deleted. Count: {result.rowcount}")
    return result.rowcount


def _check_choice(question: Question, answer_text: Optional[str]) -> None:
    """Multiple-choice questions only accept one of their own options (or a skip)."""
    if question.question_type != QuestionType.MCQ.value or is_skipped(answer_text):
        return
    normalized = answer_text.strip().lower()
    if not any((entry.get("text") or "").strip().lower() == normalized for entry in question.answers or []):
        raise HTTPException(
            status_code=400,
            detail=f"'{answer_text}' is not an option of question '{question.id}'",
        )


def record_answer(question: Question, answer_text: Optional[str]) -> Optional[dict]:
    """
    Applies one submitted response to a loaded question.
    Returns the answer entry that was counted, or None for a skip.
    The caller commits.
    """
    _check_choice(question, answer_text)
    question.last_answered_at = datetime.utcnow()
    if is_skipped(answer_text):
        question.times_skipped = (question.times_skipped or 0) + 1
        return None

    normalized = answer_text.strip().lower()
    question.times_answered = (question.times_answered or 0) + 1

    answers = [dict(entry) for entry in (question.answers or [])]
    entry = next((e for e in answers if (e.get("text") or "").strip().lower() == normalized), None)
    if entry is None:
        entry = AnswerOption(text=normalized, response_count=1).model_dump()
        answers.append(entry)
    else:
        entry["response_count"] = (entry.get("response_count") or 0) + 1

    question.answers = answers
    flag_modified(question, "answers")
    return entry


async def submit_answers(session: AsyncSession, batch: Sequence[AnswerSubmission]) -> Tuple[int, int]:
    """Records a participant's batch in order. Returns (answered, skipped)."""
    found = await _get_many(session, [item.question_id for item in batch])
    # Nothing is written unless every response is acceptable.
    for item in batch:
        _check_choice(found[item.question_id], item.answer_text)

    answered = skipped = 0
    for item in batch:
        if record_answer(found[item.question_id], item.answer_text) is None:
            skipped += 1
        else:
            answered += 1

    await session.commit()
    logger.info(f"Recorded batch of {len(batch)} responses: answered={answered}, skipped={skipped}")
    return answered, skipped


async def add_answer(session: AsyncSession, question_id: str, answer_text: Optional[str]) -> Optional[dict]:
    question = await get_question(session, question_id)
    entry = record_answer(question, answer_text)
    await session.commit()
    return entry


async def delete_answer(session: AsyncSession, question_id: str, answer_id: str) -> Question:
    question = await get_question(session, question_id)
    answers = list(question.answers or [])
    removed = next((entry for entry in answers if entry.get("id") == answer_id), None)
    if removed is None:
        raise HTTPException(status_code=404, detail=f"Answer '{answer_id}' not found")

    remaining = [entry for entry in answers if entry is not removed]
    question.times_answered = max((question.times_answered or 0) - (removed.get("response_count") or 0), 0)
    question.answers = remaining
    flag_modified(question, "answers")
    await session.commit()
    logger.info(f"Removed answer {answer_id} from question {question_id}")
    return question


async def list_answers(session: AsyncSession, question_id: str) -> List[AnswerOption]:
    question = await get_question(session, question_id)
    return [AnswerOption.model_validate(entry) for entry in question.answers or []]


async def fetch_snapshot(session: AsyncSession) -> List[QuestionSnapshot]:
    """One read of every question, in survey order, for the aggregation functions."""
    return [to_snapshot(q) for q in await list_questions(session)]
