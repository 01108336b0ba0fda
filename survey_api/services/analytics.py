# survey_api/services/analytics.py
"""
Answered/skipped statistics over one snapshot of the question store.

Everything here is a pure function of its arguments: the caller fetches the
snapshot, these functions only reduce it. Questions arrive in store order and
that order decides every tie.
"""
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from survey_api.models.analytics import (
    AnswerSummary,
    LeaderboardEntry,
    QuestionCount,
    QuestionSnapshot,
    ResponseRecord,
    Statistics,
)
from survey_api.utils.logger import logger

DEFAULT_CATEGORIES = ("Grammar", "Vocabulary", "Culture")
DEFAULT_LEADERBOARD_SIZE = 5
DEFAULT_RECENT_LIMIT = 5


def is_skipped(text: Optional[str]) -> bool:
    """A response is a skip when its text is missing or blank once trimmed."""
    return text is None or text.strip() == ""


class ResponseSource(str, Enum):
    """Where a tally came from."""
    EMBEDDED = "embedded"    # answer entry stored inside the question, with a response count
    FLATTENED = "flattened"  # one individual response record keyed by question id


@dataclass(frozen=True)
class TallyRecord:
    question_id: str
    text: str
    count: int
    source: ResponseSource

    @property
    def skipped(self) -> bool:
        return is_skipped(self.text)


def format_rate(part: int, whole: int) -> str:
    """Percentage of `part` in `whole` with one decimal, halves rounded up; "0.0" for an empty whole."""
    if whole <= 0:
        return "0.0"
    rate = Decimal(100 * part) / Decimal(whole)
    return str(rate.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def normalize_responses(
    questions: Sequence[QuestionSnapshot],
    answers: Optional[Iterable[ResponseRecord]] = None,
) -> List[TallyRecord]:
    """
    Turns both answer representations into TallyRecords.

    Embedded entries count as many responses as their response_count (0 when
    absent). Each flattened record counts once; records that point at a
    question outside the snapshot are dropped.
    """
    known_ids = {q.id for q in questions}
    records: List[TallyRecord] = []

    for question in questions:
        for option in question.answers:
            records.append(TallyRecord(
                question_id=question.id,
                text=option.text or "",
                count=option.response_count or 0,
                source=ResponseSource.EMBEDDED,
            ))

    for answer in answers or []:
        if answer.question_id not in known_ids:
            logger.debug(f"Ignoring response for unknown question '{answer.question_id}'")
            continue
        records.append(TallyRecord(
            question_id=answer.question_id,
            text=answer.text or "",
            count=1,
            source=ResponseSource.FLATTENED,
        ))

    return records


def _first_max(questions: Sequence[QuestionSnapshot], counts: Dict[str, int]) -> Optional[QuestionCount]:
    # Strict comparison keeps the earliest question on ties; a zero max yields None.
    best: Optional[QuestionCount] = None
    for question in questions:
        count = counts[question.id]
        if count > (best.count if best else 0):
            best = QuestionCount(id=question.id, count=count)
    return best


def recently_answered(questions: Sequence[QuestionSnapshot], limit: int = DEFAULT_RECENT_LIMIT) -> List[str]:
    """Ids of the questions most recently answered or skipped, newest first."""
    touched = [q for q in questions if q.last_answered_at is not None]
    touched = sorted(touched, key=lambda q: q.last_answered_at, reverse=True)
    return [q.id for q in touched[:limit]]


def compute_statistics(
    questions: Optional[Sequence[QuestionSnapshot]],
    answers: Optional[Iterable[ResponseRecord]] = None,
    *,
    known_categories: Iterable[str] = DEFAULT_CATEGORIES,
    leaderboard_size: int = DEFAULT_LEADERBOARD_SIZE,
    recent_limit: int = DEFAULT_RECENT_LIMIT,
) -> Statistics:
    """
    Aggregates one snapshot into a Statistics bundle.

    A question's skip count is its own times_skipped counter when the store
    keeps one, otherwise the number of blank responses recorded for it.
    Missing category or level values are grouped under "".
    """
    questions = list(questions or [])

    answer_counts: Dict[str, int] = {q.id: 0 for q in questions}
    blank_counts: Dict[str, int] = {q.id: 0 for q in questions}
    for record in normalize_responses(questions, answers):
        if record.skipped:
            blank_counts[record.question_id] += record.count
        else:
            answer_counts[record.question_id] += record.count

    skip_counts: Dict[str, int] = {}
    for question in questions:
        if question.times_skipped is not None:
            skip_counts[question.id] = question.times_skipped
        else:
            skip_counts[question.id] = blank_counts[question.id]

    category_totals: Dict[str, int] = {category: 0 for category in known_categories}
    level_totals: Dict[str, int] = {}
    for question in questions:
        category = question.category if question.category is not None else ""
        level = question.level if question.level is not None else ""
        category_totals[category] = category_totals.get(category, 0) + answer_counts[question.id]
        level_totals[level] = level_totals.get(level, 0) + answer_counts[question.id]

    skip_rates = {
        question_id: format_rate(skip_counts[question_id], answer_counts[question_id] + skip_counts[question_id])
        for question_id in answer_counts
    }

    total_answered = sum(answer_counts.values())
    total_skipped = sum(skip_counts.values())
    total_responses = total_answered + total_skipped

    # sorted() is stable, so equal counts keep their snapshot order
    leaderboard = sorted(
        (LeaderboardEntry(question=q.text, responses=answer_counts[q.id]) for q in questions),
        key=lambda entry: entry.responses,
        reverse=True,
    )[:leaderboard_size]

    return Statistics(
        category_totals=category_totals,
        level_totals=level_totals,
        answer_counts=answer_counts,
        skip_counts=skip_counts,
        skip_rates=skip_rates,
        total_answered=total_answered,
        total_skipped=total_skipped,
        total_responses=total_responses,
        overall_skip_rate=format_rate(total_skipped, total_responses),
        leaderboard=leaderboard,
        most_answered=_first_max(questions, answer_counts),
        most_skipped=_first_max(questions, skip_counts),
        recently_answered=recently_answered(questions, recent_limit),
    )


def summarize_answers(question_id: str, records: Iterable[TallyRecord]) -> AnswerSummary:
    """Text-level summary of the genuine (non-skip) answers to one question."""
    frequencies: Dict[str, int] = {}
    for record in records:
        if record.question_id != question_id or record.skipped or record.count <= 0:
            continue
        frequencies[record.text] = frequencies.get(record.text, 0) + record.count

    if not frequencies:
        return AnswerSummary(question_id=question_id)

    total_answers = sum(frequencies.values())
    total_length = sum(len(text) * count for text, count in frequencies.items())

    most_common = ""
    longest = ""
    shortest = None
    for text, count in frequencies.items():
        if not most_common or count > frequencies[most_common]:
            most_common = text
        if len(text) > len(longest):
            longest = text
        if shortest is None or len(text) < len(shortest):
            shortest = text

    return AnswerSummary(
        question_id=question_id,
        total_answers=total_answers,
        unique_answers=len(frequencies),
        average_length=int(total_length / total_answers + 0.5),
        most_common_answer=most_common,
        longest_answer=longest,
        shortest_answer=shortest,
        frequencies=frequencies,
    )


def summarize_question(
    question: QuestionSnapshot,
    answers: Optional[Iterable[ResponseRecord]] = None,
) -> AnswerSummary:
    return summarize_answers(question.id, normalize_responses([question], answers))
