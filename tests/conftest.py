# tests/conftest.py
import pytest
from fastapi.testclient import TestClient
import os
import sys
import logging
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool

# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Point the app at a throwaway SQLite file before any survey_api module builds its engine
TEST_DB_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "test_survey.db"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from survey_api.utils.config import settings
from survey_api.models.question import Base

# The async engine cannot be driven from plain fixtures, so resets go through a sync one
sync_engine = create_engine(
    settings.database_url.replace("+aiosqlite", ""),
    poolclass=NullPool,
)

SAMPLE_QUESTIONS = [
    {"text": "What does 'hola' mean?", "question_type": "Input", "category": "Vocabulary", "level": "Beginner"},
    {
        "text": "Pick the correct article for 'casa'",
        "question_type": "Mcq",
        "category": "Grammar",
        "level": "Beginner",
        "options": [
            {"text": "la", "is_correct": True},
            {"text": "el", "is_correct": False},
        ],
    },
    {"text": "Describe a Spanish festival", "question_type": "Input", "category": "Culture", "level": "Intermediate"},
    {"text": "Explain the subjunctive mood", "question_type": "Input", "category": "Grammar", "level": "Advanced"},
]


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(sync_engine)
    Base.metadata.create_all(sync_engine)
    yield


@pytest.fixture(autouse=True)
def clear_api_key():
    original = settings.api_key
    settings.api_key = None
    yield
    settings.api_key = original


@pytest.fixture(scope="session")
def client():
    # Import app here, after the database URL has been overridden
    from survey_api.main import app
    logger.info("Creating TestClient instance for the session.")
    with TestClient(app) as c:
        yield c
    sync_engine.dispose()
    if os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)


@pytest.fixture
def seeded_questions(client: TestClient):
    """Creates SAMPLE_QUESTIONS through the admin API and returns the stored rows."""
    response = client.post("/api/v1/admin/survey/", json={"questions": SAMPLE_QUESTIONS})
    assert response.status_code == 201
    return response.json()
