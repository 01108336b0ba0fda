# survey_api/client/builder.py
# Admin-side editing of survey questions, grouped by level
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from survey_api.client.api import SurveyApiClient, UserSession
from survey_api.client.session import SurveyFlowError
from survey_api.models.analytics import AnswerOption, QuestionSnapshot
from survey_api.models.enums import QuestionType
from survey_api.utils.config import settings
from survey_api.utils.logger import logger

EDITABLE_FIELDS = {"text", "question_type", "category", "level", "options"}


@dataclass
class DraftQuestion:
    """A question being edited. `id` is None until the store has created it."""
    level: str
    id: Optional[str] = None
    text: str = ""
    question_type: str = QuestionType.INPUT.value
    category: str = ""
    options: List[AnswerOption] = field(default_factory=list)

    @classmethod
    def from_snapshot(cls, question: QuestionSnapshot) -> "DraftQuestion":
        options = list(question.answers) if question.question_type == QuestionType.MCQ.value else []
        return cls(
            level=question.level or "",
            id=question.id,
            text=question.text,
            question_type=question.question_type,
            category=question.category or "",
            options=options,
        )

    @property
    def is_complete(self) -> bool:
        return bool(self.text.strip() and self.category and self.level)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "text": self.text,
            "question_type": self.question_type,
            "category": self.category,
            "level": self.level,
        }
        if self.question_type == QuestionType.MCQ.value:
            payload["options"] = [
                {"id": option.id, "text": option.text, "is_correct": option.is_correct}
                for option in self.options
                if option.text.strip()
            ]
        if self.id:
            payload["id"] = self.id
        return payload


class SurveyBuilderController:
    def __init__(self, api: SurveyApiClient, session: UserSession, levels: Optional[Sequence[str]] = None):
        if not session.is_admin:
            raise PermissionError(f"'{session.name}' is not allowed to edit the survey.")
        self.api = api
        self.session = session
        self.levels = list(levels or settings.known_levels)
        self.questions_by_level: Dict[str, List[DraftQuestion]] = {level: [] for level in self.levels}

    def load(self) -> Dict[str, List[DraftQuestion]]:
        """Fetches every question and regroups them by level, keeping store order."""
        grouped: Dict[str, List[DraftQuestion]] = {level: [] for level in self.levels}
        for question in self.api.fetch_all_questions():
            draft = DraftQuestion.from_snapshot(question)
            grouped.setdefault(draft.level, []).append(draft)
        self.questions_by_level = grouped
        logger.info(f"Builder loaded {sum(len(v) for v in grouped.values())} questions")
        return grouped

    def _drafts(self, level: str) -> List[DraftQuestion]:
        if level not in self.questions_by_level:
            raise SurveyFlowError(f"Unknown level '{level}'.")
        return self.questions_by_level[level]

    def _draft_at(self, level: str, index: int) -> DraftQuestion:
        drafts = self._drafts(level)
        if not 0 <= index < len(drafts):
            raise SurveyFlowError(f"No question at position {index} in '{level}'.")
        return drafts[index]

    def add_question(self, level: str) -> DraftQuestion:
        """Appends an empty free-text draft that inherits the level's last category."""
        drafts = self._drafts(level)
        category = drafts[-1].category if drafts else ""
        draft = DraftQuestion(level=level, category=category)
        drafts.append(draft)
        return draft

    def edit_question(self, level: str, index: int, /, **changes) -> DraftQuestion:
        """`level` and `index` locate the draft; a `level` keyword moves it."""
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot edit fields: {sorted(unknown)}")
        draft = self._draft_at(level, index)

        new_level = changes.pop("level", level)
        if new_level != level:
            # Moving to another level puts the draft at the end of that level.
            target = self._drafts(new_level)
            self._drafts(level).pop(index)
            draft.level = new_level
            target.append(draft)

        if "options" in changes:
            changes["options"] = [
                option if isinstance(option, AnswerOption) else AnswerOption.model_validate(option)
                for option in changes["options"]
            ]
        for name, value in changes.items():
            setattr(draft, name, value)
        if draft.question_type == QuestionType.INPUT.value:
            draft.options = []
        return draft

    def move_question(self, level: str, from_index: int, to_index: int) -> None:
        drafts = self._drafts(level)
        draft = self._draft_at(level, from_index)
        if not 0 <= to_index < len(drafts):
            raise SurveyFlowError(f"No question at position {to_index} in '{level}'.")
        drafts.pop(from_index)
        drafts.insert(to_index, draft)

    def delete_question(self, level: str, index: int) -> DraftQuestion:
        draft = self._draft_at(level, index)
        if draft.id:
            self.api.delete_questions([draft.id])
        self._drafts(level).pop(index)
        return draft

    def delete_all(self, level: str) -> int:
        drafts = self._drafts(level)
        ids = [draft.id for draft in drafts if draft.id]
        deleted = self.api.delete_questions(ids) if ids else 0
        self.questions_by_level[level] = []
        logger.info(f"Cleared level '{level}': {deleted} stored questions deleted")
        return deleted

    def all_drafts(self) -> List[DraftQuestion]:
        return [draft for drafts in self.questions_by_level.values() for draft in drafts]

    @property
    def completed_count(self) -> int:
        return sum(1 for draft in self.all_drafts() if draft.is_complete)

    def create_new(self) -> List[QuestionSnapshot]:
        """Sends every complete draft that has no id yet, then reloads."""
        new_drafts = [draft for draft in self.all_drafts() if draft.is_complete and not draft.id]
        if not new_drafts:
            return []
        created = self.api.create_questions([draft.to_payload() for draft in new_drafts])
        self.load()
        return created

    def update_existing(self) -> List[QuestionSnapshot]:
        """Sends every complete stored draft with its position in level order, then reloads."""
        payload = []
        for position, draft in enumerate(self.all_drafts()):
            if draft.is_complete and draft.id:
                payload.append({**draft.to_payload(), "position": position})
        if not payload:
            return []
        updated = self.api.update_questions(payload)
        self.load()
        return updated
