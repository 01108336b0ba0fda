# survey_api/models/enums.py
from enum import Enum

class QuestionType(str, Enum):
    """How a question is answered."""
    MCQ = "Mcq"
    INPUT = "Input"

class QuestionCategory(str, Enum):
    """Conventional categories. Stored categories are free-form strings."""
    VOCABULARY = "Vocabulary"
    GRAMMAR = "Grammar"
    CULTURE = "Culture"

class QuestionLevel(str, Enum):
    """Difficulty tiers used for authoring and taking the survey."""
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"

class UserRole(str, Enum):
    PARTICIPANT = "participant"
    ADMIN = "admin"
