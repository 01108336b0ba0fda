# survey_api/client/session.py
# Walks a participant through one level's questions and submits the batch
from dataclasses import dataclass
from typing import Dict, List, Optional

from survey_api.client.api import SurveyApiClient, UserSession
from survey_api.models.analytics import QuestionSnapshot
from survey_api.services.analytics import is_skipped
from survey_api.utils.logger import logger


class SurveyFlowError(Exception):
    """An action that the current survey state does not allow."""


@dataclass
class ResponseDraft:
    text: str = ""
    skipped: bool = False

    @property
    def answered(self) -> bool:
        return not self.skipped and not is_skipped(self.text)


class SurveySessionController:
    def __init__(self, api: SurveyApiClient, session: UserSession):
        self.api = api
        self.session = session
        self.level: Optional[str] = None
        self.questions: List[QuestionSnapshot] = []
        self.responses: List[ResponseDraft] = []
        self.index = 0
        self.reviewing = False
        self.submitted = False

    def start(self, level: str) -> List[QuestionSnapshot]:
        """Loads the questions for `level` and resets all local state."""
        self.level = level
        self.questions = self.api.fetch_questions_for_level(level)
        self.responses = [ResponseDraft() for _ in self.questions]
        self.index = 0
        self.reviewing = False
        self.submitted = False
        logger.info(f"{self.session.name} started level '{level}' with {len(self.questions)} questions")
        return self.questions

    @property
    def current_question(self) -> Optional[QuestionSnapshot]:
        if not self.questions:
            return None
        return self.questions[self.index]

    @property
    def current_response(self) -> ResponseDraft:
        if not self.responses:
            raise SurveyFlowError("No survey in progress.")
        return self.responses[self.index]

    @property
    def answered_count(self) -> int:
        return sum(1 for response in self.responses if response.answered)

    @property
    def skipped_count(self) -> int:
        return sum(1 for response in self.responses if response.skipped)

    def answer(self, text: str) -> None:
        response = self.current_response
        response.text = text
        response.skipped = False

    def _advance(self) -> bool:
        if self.index < len(self.questions) - 1:
            self.index += 1
            return True
        self.reviewing = True
        return False

    def save_and_next(self) -> bool:
        """
        Moves to the next question. Returns False once the last question is
        done and the survey is ready for review.
        """
        response = self.current_response
        if not response.answered and not response.skipped:
            raise SurveyFlowError("Please answer or Skip.")
        return self._advance()

    def toggle_skip(self) -> bool:
        """Skips the current question (and moves on), or un-skips it."""
        response = self.current_response
        if response.skipped:
            response.skipped = False
            response.text = ""
            return False
        response.skipped = True
        response.text = ""
        self._advance()
        return True

    def select(self, index: int) -> None:
        if not 0 <= index < len(self.questions):
            raise SurveyFlowError(f"No question at position {index}.")
        self.index = index
        self.reviewing = False

    def build_batch(self) -> List[Dict[str, str]]:
        """One entry per question in order; skipped and unanswered questions send ""."""
        return [
            {"question_id": question.id, "answer_text": "" if response.skipped else response.text}
            for question, response in zip(self.questions, self.responses)
        ]

    def submit(self) -> Dict[str, int]:
        if self.submitted:
            raise SurveyFlowError("This survey has already been submitted.")
        if not self.questions:
            raise SurveyFlowError("There are no questions to submit.")
        result = self.api.submit_answers(self.build_batch())
        self.submitted = True
        logger.info(
            f"{self.session.name} submitted level '{self.level}': "
            f"{self.answered_count} answered, {self.skipped_count} skipped"
        )
        return result
