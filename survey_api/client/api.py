# survey_api/client/api.py
# Thin HTTP client over the REST surface, used by the survey controllers
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import requests

from survey_api.models.analytics import AnswerSummary, QuestionSnapshot, Statistics
from survey_api.models.enums import UserRole
from survey_api.utils.config import settings
from survey_api.utils.logger import logger

API_PREFIX = "/api/v1"


class SurveyApiError(Exception):
    """Raised for any non-2xx response from the survey service."""

    def __init__(self, status_code: int, detail: Any):
        super().__init__(f"Survey API error ({status_code}): {detail}")
        self.status_code = status_code
        self.detail = detail


@dataclass(frozen=True)
class UserSession:
    """Who is using the controllers. Built once at login and passed explicitly."""
    name: str
    role: UserRole
    is_admin: bool


class SurveyApiClient:
    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None, http=None):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.http = http if http is not None else requests.Session()
        self.headers = {"Content-Type": "application/json"}
        if api_key:
            self.headers["x-api-key"] = api_key

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{API_PREFIX}{path}"
        logger.debug(f"{method} {url}")
        if isinstance(self.http, requests.Session):
            kwargs.setdefault("timeout", settings.api_timeout_s)
        response = self.http.request(method, url, headers=self.headers, **kwargs)
        if response.status_code >= 400:
            try:
                detail = response.json().get("detail")
            except ValueError:
                detail = response.text
            logger.error(f"{method} {path} failed with {response.status_code}: {detail}")
            raise SurveyApiError(response.status_code, detail)
        return response.json()

    # --- Session ---
    def login(self, name: str, password: Optional[str] = None) -> UserSession:
        data = self._request("POST", "/auth/login", json={"name": name, "password": password})
        return UserSession(name=data["name"], role=UserRole(data["role"]), is_admin=data["is_admin"])

    # --- Participant ---
    def fetch_questions_for_level(self, level: str) -> List[QuestionSnapshot]:
        data = self._request("GET", "/survey/", params={"level": level})
        return [QuestionSnapshot.model_validate(item) for item in data]

    def submit_answers(self, batch: Sequence[Dict[str, str]]) -> Dict[str, int]:
        """`batch` is an ordered list of {"question_id", "answer_text"} pairs."""
        return self._request("PUT", "/survey/", json={"answers": list(batch)})

    # --- Builder ---
    def fetch_all_questions(self) -> List[QuestionSnapshot]:
        data = self._request("GET", "/admin/survey/")
        return [QuestionSnapshot.model_validate(item) for item in data]

    def create_questions(self, questions: Sequence[Dict[str, Any]]) -> List[QuestionSnapshot]:
        data = self._request("POST", "/admin/survey/", json={"questions": list(questions)})
        return [QuestionSnapshot.model_validate(item) for item in data]

    def update_questions(self, questions: Sequence[Dict[str, Any]]) -> List[QuestionSnapshot]:
        data = self._request("PUT", "/admin/survey/", json={"questions": list(questions)})
        return [QuestionSnapshot.model_validate(item) for item in data]

    def delete_questions(self, ids: Sequence[str]) -> int:
        data = self._request("DELETE", "/admin/survey/", json={"question_ids": list(ids)})
        return data["deleted_count"]

    # --- Analytics ---
    def fetch_statistics(self) -> Statistics:
        return Statistics.model_validate(self._request("GET", "/analytics/"))

    def fetch_answer_summary(self, question_id: str) -> AnswerSummary:
        return AnswerSummary.model_validate(self._request("GET", f"/analytics/questions/{question_id}"))
