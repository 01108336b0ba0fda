# tests/test_controllers.py
import pytest
from fastapi.testclient import TestClient

from survey_api.client.api import SurveyApiClient, SurveyApiError, UserSession
from survey_api.client.builder import DraftQuestion, SurveyBuilderController
from survey_api.client.session import SurveyFlowError, SurveySessionController
from survey_api.models.analytics import AnswerOption, QuestionSnapshot
from survey_api.models.enums import UserRole
from survey_api.utils.config import settings

PARTICIPANT = UserSession(name="Ana", role=UserRole.PARTICIPANT, is_admin=False)
ADMIN = UserSession(name="Root", role=UserRole.ADMIN, is_admin=True)


class _StubSurveyApi:
    """Records calls instead of talking HTTP."""

    def __init__(self, questions=None):
        self.questions = list(questions or [])
        self.calls = []

    def fetch_questions_for_level(self, level):
        self.calls.append(("fetch_level", level))
        return [q for q in self.questions if q.level == level]

    def fetch_all_questions(self):
        self.calls.append(("fetch_all",))
        return list(self.questions)

    def submit_answers(self, batch):
        self.calls.append(("submit", batch))
        return {"submitted": len(batch)}

    def create_questions(self, payload):
        self.calls.append(("create", payload))
        return []

    def update_questions(self, payload):
        self.calls.append(("update", payload))
        return []

    def delete_questions(self, ids):
        self.calls.append(("delete", list(ids)))
        return len(ids)


def _question(question_id, level="Beginner", category="Grammar", **extra):
    return QuestionSnapshot(id=question_id, text=f"Question {question_id}", level=level, category=category, **extra)


class TestSurveySessionController:
    @pytest.fixture
    def controller(self):
        api = _StubSurveyApi([_question("q1"), _question("q2"), _question("q3"), _question("x", level="Advanced")])
        controller = SurveySessionController(api, PARTICIPANT)
        controller.start("Beginner")
        return controller

    def test_start_loads_level(self, controller):
        assert [q.id for q in controller.questions] == ["q1", "q2", "q3"]
        assert controller.current_question.id == "q1"
        assert controller.answered_count == 0

    def test_cannot_advance_without_answer_or_skip(self, controller):
        with pytest.raises(SurveyFlowError):
            controller.save_and_next()
        controller.answer("   ")
        with pytest.raises(SurveyFlowError):
            controller.save_and_next()

    def test_answer_skip_and_review(self, controller):
        controller.answer("hola")
        assert controller.save_and_next() is True
        assert controller.toggle_skip() is True  # skipping q2 moves on to q3
        assert controller.current_question.id == "q3"
        controller.answer("adios")
        assert controller.save_and_next() is False
        assert controller.reviewing is True
        assert controller.answered_count == 2
        assert controller.skipped_count == 1

    def test_unskip_clears_the_skip(self, controller):
        controller.toggle_skip()
        controller.select(0)
        assert controller.toggle_skip() is False
        assert controller.current_response.skipped is False
        assert controller.current_question.id == "q1"

    def test_batch_encodes_skips_as_blank(self, controller):
        controller.answer("hola")
        controller.save_and_next()
        controller.toggle_skip()
        assert controller.build_batch() == [
            {"question_id": "q1", "answer_text": "hola"},
            {"question_id": "q2", "answer_text": ""},
            {"question_id": "q3", "answer_text": ""},
        ]

    def test_submit_only_once(self, controller):
        controller.answer("hola")
        controller.submit()
        assert controller.api.calls[-1][0] == "submit"
        with pytest.raises(SurveyFlowError):
            controller.submit()

    def test_select_out_of_range(self, controller):
        with pytest.raises(SurveyFlowError):
            controller.select(3)

    def test_empty_level_cannot_submit(self):
        controller = SurveySessionController(_StubSurveyApi(), PARTICIPANT)
        controller.start("Beginner")
        assert controller.current_question is None
        with pytest.raises(SurveyFlowError):
            controller.submit()


class TestSurveyBuilderController:
    @pytest.fixture
    def builder(self):
        api = _StubSurveyApi([
            _question("b1", category="Vocabulary"),
            _question("b2", category="Culture", question_type="Mcq",
                      answers=[AnswerOption(id="o1", text="la", is_correct=True, response_count=3)]),
            _question("a1", level="Advanced"),
        ])
        builder = SurveyBuilderController(api, ADMIN)
        builder.load()
        return builder

    def test_requires_admin(self):
        with pytest.raises(PermissionError):
            SurveyBuilderController(_StubSurveyApi(), PARTICIPANT)

    def test_load_groups_by_level(self, builder):
        grouped = builder.questions_by_level
        assert [d.id for d in grouped["Beginner"]] == ["b1", "b2"]
        assert grouped["Intermediate"] == []
        assert [d.id for d in grouped["Advanced"]] == ["a1"]
        assert grouped["Beginner"][1].options[0].text == "la"

    def test_add_question_inherits_last_category(self, builder):
        draft = builder.add_question("Beginner")
        assert draft.category == "Culture"
        assert draft.id is None
        assert builder.add_question("Intermediate").category == ""

    def test_edit_level_moves_draft_to_end_of_target(self, builder):
        builder.edit_question("Beginner", 0, level="Advanced", text="Moved")
        assert [d.id for d in builder.questions_by_level["Beginner"]] == ["b2"]
        assert [d.id for d in builder.questions_by_level["Advanced"]] == ["a1", "b1"]
        assert builder.questions_by_level["Advanced"][1].text == "Moved"

    def test_switching_to_free_text_drops_options(self, builder):
        draft = builder.edit_question("Beginner", 1, question_type="Input")
        assert draft.options == []

    def test_edit_rejects_unknown_fields(self, builder):
        with pytest.raises(ValueError):
            builder.edit_question("Beginner", 0, times_answered=5)

    def test_move_question(self, builder):
        builder.move_question("Beginner", 1, 0)
        assert [d.id for d in builder.questions_by_level["Beginner"]] == ["b2", "b1"]

    def test_delete_question_hits_store_only_when_stored(self, builder):
        builder.add_question("Beginner")
        builder.delete_question("Beginner", 2)
        assert ("delete", []) not in builder.api.calls
        builder.delete_question("Beginner", 0)
        assert builder.api.calls[-1] == ("delete", ["b1"])

    def test_delete_all_for_level(self, builder):
        builder.add_question("Beginner")
        assert builder.delete_all("Beginner") == 2
        assert builder.api.calls[-1] == ("delete", ["b1", "b2"])
        assert builder.questions_by_level["Beginner"] == []

    def test_unknown_level(self, builder):
        with pytest.raises(SurveyFlowError):
            builder.add_question("Expert")

    def test_create_new_sends_only_complete_unsaved_drafts(self, builder):
        complete = builder.add_question("Intermediate")
        builder.edit_question("Intermediate", 0, text="New one", category="Grammar")
        builder.add_question("Intermediate")  # left blank

        builder.create_new()

        create_calls = [call for call in builder.api.calls if call[0] == "create"]
        assert create_calls == [("create", [{
            "text": "New one", "question_type": "Input", "category": "Grammar", "level": "Intermediate",
        }])]
        assert complete.id is None

    def test_update_existing_sends_positions(self, builder):
        builder.move_question("Beginner", 1, 0)
        builder.update_existing()
        update_payload = [call for call in builder.api.calls if call[0] == "update"][0][1]
        assert [(item["id"], item["position"]) for item in update_payload] == [("b2", 0), ("b1", 1), ("a1", 2)]
        assert update_payload[0]["options"] == [{"id": "o1", "text": "la", "is_correct": True}]

    def test_completed_count(self, builder):
        builder.add_question("Beginner")
        assert builder.completed_count == 3


def test_draft_payload_skips_blank_options():
    draft = DraftQuestion(level="Beginner", text="Pick", question_type="Mcq", category="Grammar",
                          options=[AnswerOption(text="si"), AnswerOption(text="  ")])
    assert [option["text"] for option in draft.to_payload()["options"]] == ["si"]


class TestClientAgainstService:
    """Drives both controllers through SurveyApiClient against the real app."""

    @pytest.fixture
    def api(self, client: TestClient):
        return SurveyApiClient(base_url="http://testserver", http=client)

    def test_author_take_and_analyse(self, api):
        admin = api.login("Root", settings.admin_password)
        assert admin.is_admin

        builder = SurveyBuilderController(api, admin)
        builder.load()
        builder.add_question("Beginner")
        builder.edit_question("Beginner", 0, text="What does 'gato' mean?", category="Vocabulary")
        builder.add_question("Beginner")
        builder.edit_question("Beginner", 1, text="Choose the plural of 'luz'", question_type="Mcq",
                              options=[{"text": "luces", "is_correct": True}, {"text": "luzes"}])
        created = builder.create_new()
        assert len(created) == 2
        assert all(d.id for d in builder.questions_by_level["Beginner"])

        participant = api.login("Ana")
        session = SurveySessionController(api, participant)
        session.start("Beginner")
        session.answer("Cat")
        session.save_and_next()
        session.toggle_skip()
        assert session.submit() == {"submitted": 2, "answered": 1, "skipped": 1}

        stats = api.fetch_statistics()
        assert stats.total_answered == 1
        assert stats.total_skipped == 1
        assert stats.overall_skip_rate == "50.0"
        assert stats.category_totals["Vocabulary"] == 1

        summary = api.fetch_answer_summary(created[0].id)
        assert summary.frequencies == {"cat": 1}

    def test_errors_surface_as_api_errors(self, api):
        with pytest.raises(SurveyApiError) as excinfo:
            api.login("Root", "wrong")
        assert excinfo.value.status_code == 401

        with pytest.raises(SurveyApiError) as excinfo:
            api.submit_answers([{"question_id": "missing", "answer_text": "x"}])
        assert excinfo.value.status_code == 404

    def test_rejected_choice_never_becomes_an_option(self, api, seeded_questions):
        mcq_id = seeded_questions[1]["id"]
        session = SurveySessionController(api, api.login("Ana"))
        session.start("Beginner")
        session.answer("hello")
        session.save_and_next()
        session.answer("Perro")
        session.save_and_next()
        with pytest.raises(SurveyApiError) as excinfo:
            session.submit()
        assert excinfo.value.status_code == 400
        assert not session.submitted

        builder = SurveyBuilderController(api, api.login("Root", settings.admin_password))
        builder.load()
        builder.update_existing()

        stored = next(q for q in api.fetch_all_questions() if q.id == mcq_id)
        assert [(o.text, o.is_correct) for o in stored.answers] == [("la", True), ("el", False)]
