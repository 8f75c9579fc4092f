"""Quiz scoring, attempts and lesson completion."""

import pytest

from conftest import answers_for, login_headers, make_lesson, make_quiz, register
from core.exceptions import ValidationError
from models.progress import UserProgressModel
from models.quiz import QuizQuestionModel
from utils.quiz_manager import QuizManager, is_passing, normalize_answers, score_answers


def _questions(*letters, options="abcd"):
    texts = {c: (c if c in options else None) for c in "abcd"}
    return [
        QuizQuestionModel(
            id=f"q{i}",
            option_a=texts["a"],
            option_b=texts["b"],
            option_c=texts["c"],
            option_d=texts["d"],
            correct_answer=letter,
            order_index=i,
            explanation=None,
        )
        for i, letter in enumerate(letters)
    ]


class TestScoring:
    def test_score_and_percentage(self):
        questions = _questions("A", "B", "C")
        result = score_answers(questions, {"q0": "A", "q1": "B", "q2": "D"})
        assert result.score == 2
        assert result.total == 3
        assert result.percentage == pytest.approx(66.666, rel=1e-3)
        assert [f.is_correct for f in result.feedback] == [True, True, False]

    def test_feedback_follows_question_order(self):
        questions = list(reversed(_questions("A", "B")))
        result = score_answers(questions, {"q0": "A", "q1": "A"})
        assert [f.question_id for f in result.feedback] == ["q0", "q1"]
        assert result.feedback[1].correct_answer == "B"

    def test_zero_questions_is_an_error(self):
        with pytest.raises(ValidationError):
            score_answers([], {})

    def test_answers_are_case_insensitive(self):
        normalized = normalize_answers(_questions("A", "B"), {"q0": "a", "q1": " b "})
        assert normalized == {"q0": "A", "q1": "B"}

    def test_unanswered_question_is_rejected(self):
        with pytest.raises(ValidationError):
            normalize_answers(_questions("A", "B"), {"q0": "A"})

    def test_unknown_question_is_rejected(self):
        with pytest.raises(ValidationError):
            normalize_answers(_questions("A"), {"q0": "A", "zzz": "B"})

    def test_letters_outside_a_to_d_are_rejected(self):
        with pytest.raises(ValidationError):
            normalize_answers(_questions("A"), {"q0": "E"})

    def test_letters_of_missing_options_are_rejected(self):
        questions = _questions("A", "B", options="ab")
        assert normalize_answers(questions, {"q0": "b", "q1": "A"}) == {"q0": "B", "q1": "A"}
        with pytest.raises(ValidationError):
            normalize_answers(questions, {"q0": "A", "q1": "D"})
        with pytest.raises(ValidationError):
            normalize_answers(questions, {"q0": "C", "q1": "A"})

    def test_passing_threshold_is_inclusive(self):
        assert is_passing(70.0, 70)
        assert not is_passing(69.9, 70)
        assert is_passing(100.0, 100)
        assert is_passing(70.0, None)


class TestQuizAttempts:
    def _submit(self, client, headers, quiz_id, answers, **extra):
        payload = {"answers": answers}
        payload.update(extra)
        return client.post(f"/api/quizzes/{quiz_id}/attempts", json=payload, headers=headers)

    def test_perfect_attempt_passes_and_awards_points(self, client, lesson_with_quiz, student_headers):
        quiz_id = lesson_with_quiz["quiz"]["id"]
        answers = answers_for(lesson_with_quiz["question_ids"], "BAC")
        response = self._submit(client, student_headers, quiz_id, answers, time_taken_seconds=42)
        assert response.status_code == 200
        result = response.json()
        assert result["score"] == 3
        assert result["percentage"] == 100.0
        assert result["passed"] is True
        assert result["points_awarded"] == 30
        assert result["total_points"] == 30
        assert len(result["feedback"]) == 3
        assert result["feedback"][0]["explanation"] == "Dropping keeps you from falling."

    def test_failing_attempt_awards_nothing(self, client, lesson_with_quiz, student_headers):
        quiz_id = lesson_with_quiz["quiz"]["id"]
        answers = answers_for(lesson_with_quiz["question_ids"], "BAA")
        result = self._submit(client, student_headers, quiz_id, answers).json()
        assert result["score"] == 2
        assert result["percentage"] == 66.7
        assert result["passed"] is False
        assert result["points_awarded"] == 0
        assert result["total_points"] == 0

        lesson_id = lesson_with_quiz["lesson"]["id"]
        lesson = client.get(f"/api/lessons/{lesson_id}", headers=student_headers).json()
        assert lesson["completed"] is False

    def test_points_are_awarded_once_per_lesson(self, client, lesson_with_quiz, student_headers):
        quiz_id = lesson_with_quiz["quiz"]["id"]
        answers = answers_for(lesson_with_quiz["question_ids"], "BAC")
        first = self._submit(client, student_headers, quiz_id, answers).json()
        second = self._submit(client, student_headers, quiz_id, answers).json()
        assert first["points_awarded"] == 30
        assert second["passed"] is True
        assert second["points_awarded"] == 0
        assert second["total_points"] == 30

    def test_completion_is_sticky(self, client, lesson_with_quiz, student_headers):
        quiz_id = lesson_with_quiz["quiz"]["id"]
        lesson_id = lesson_with_quiz["lesson"]["id"]
        question_ids = lesson_with_quiz["question_ids"]

        self._submit(client, student_headers, quiz_id, answers_for(question_ids, "BAC"))
        self._submit(client, student_headers, quiz_id, answers_for(question_ids, "AAA"))

        lesson = client.get(f"/api/lessons/{lesson_id}", headers=student_headers).json()
        assert lesson["completed"] is True

    def test_points_are_per_user(self, client, lesson_with_quiz, student_headers):
        other_headers = login_headers(client, "student2")
        quiz_id = lesson_with_quiz["quiz"]["id"]
        answers = answers_for(lesson_with_quiz["question_ids"], "BAC")
        self._submit(client, student_headers, quiz_id, answers)
        result = self._submit(client, other_headers, quiz_id, answers).json()
        assert result["points_awarded"] == 30
        assert result["total_points"] == 30

    def test_lowercase_answers_are_accepted(self, client, lesson_with_quiz, student_headers):
        quiz_id = lesson_with_quiz["quiz"]["id"]
        answers = answers_for(lesson_with_quiz["question_ids"], "bac")
        result = self._submit(client, student_headers, quiz_id, answers).json()
        assert result["score"] == 3

    def test_incomplete_answers_are_rejected(self, client, lesson_with_quiz, student_headers):
        quiz_id = lesson_with_quiz["quiz"]["id"]
        answers = answers_for(lesson_with_quiz["question_ids"][:2], "BA")
        response = self._submit(client, student_headers, quiz_id, answers)
        assert response.status_code == 400

    def test_answer_for_missing_option_is_rejected(self, client, lesson_with_quiz, student_headers):
        quiz_id = lesson_with_quiz["quiz"]["id"]
        answers = answers_for(lesson_with_quiz["question_ids"], "BDC")
        response = self._submit(client, student_headers, quiz_id, answers)
        assert response.status_code == 400
        attempts = client.get(f"/api/quizzes/{quiz_id}/attempts", headers=student_headers).json()
        assert attempts == []

    def test_time_spent_accumulates_across_attempts(self, client, lesson_with_quiz, db_session):
        user_id = register(client, "timer").json()["user_id"]
        quiz_id = lesson_with_quiz["quiz"]["id"]
        question_ids = lesson_with_quiz["question_ids"]
        manager = QuizManager(db_session)

        for letters, seconds in (("AAA", 30), ("BAC", 45), ("BAC", None)):
            manager.submit_attempt(
                user_id, quiz_id, answers_for(question_ids, letters), time_taken_seconds=seconds
            )

        progress = (
            db_session.query(UserProgressModel)
            .filter(UserProgressModel.user_id == user_id)
            .one()
        )
        assert progress.lesson_id == lesson_with_quiz["lesson"]["id"]
        assert progress.time_spent_seconds == 75
        assert progress.is_completed is True

    def test_unknown_quiz(self, client, student_headers):
        response = self._submit(client, student_headers, "missing", {"x": "A"})
        assert response.status_code == 404

    def test_unpublished_quiz_cannot_be_attempted(self, client, teacher_headers, student_headers):
        lesson = make_lesson(client, teacher_headers)
        quiz = make_quiz(client, teacher_headers, lesson["id"], is_published=False)
        answers = answers_for([q["id"] for q in quiz["questions"]], "BAC")
        response = self._submit(client, student_headers, quiz["id"], answers)
        assert response.status_code == 404

    def test_custom_passing_score_and_points(self, client, teacher_headers, student_headers):
        lesson = make_lesson(client, teacher_headers, points_reward=5)
        quiz = make_quiz(
            client, teacher_headers, lesson["id"], passing_score=60, points_reward=7
        )
        answers = answers_for([q["id"] for q in quiz["questions"]], "BAA")
        result = self._submit(client, student_headers, quiz["id"], answers).json()
        assert result["passed"] is True
        assert result["points_awarded"] == 12

    def test_attempt_history(self, client, lesson_with_quiz, student_headers):
        quiz_id = lesson_with_quiz["quiz"]["id"]
        question_ids = lesson_with_quiz["question_ids"]
        self._submit(client, student_headers, quiz_id, answers_for(question_ids, "AAA"))
        self._submit(client, student_headers, quiz_id, answers_for(question_ids, "BAC"))

        response = client.get(f"/api/quizzes/{quiz_id}/attempts", headers=student_headers)
        assert response.status_code == 200
        attempts = response.json()
        assert len(attempts) == 2
        assert sorted(a["passed"] for a in attempts) == [False, True]


class TestQuizAdministration:
    def test_staff_can_read_answers(self, client, lesson_with_quiz, teacher_headers, student_headers):
        quiz_id = lesson_with_quiz["quiz"]["id"]
        assert client.get(f"/api/quizzes/{quiz_id}", headers=student_headers).status_code == 403
        detail = client.get(f"/api/quizzes/{quiz_id}", headers=teacher_headers).json()
        assert [q["correct_answer"] for q in detail["questions"]] == ["B", "A", "C"]

    def test_delete_quiz(self, client, lesson_with_quiz, teacher_headers, student_headers):
        quiz_id = lesson_with_quiz["quiz"]["id"]
        lesson_id = lesson_with_quiz["lesson"]["id"]
        assert client.delete(f"/api/quizzes/{quiz_id}", headers=student_headers).status_code == 403
        assert client.delete(f"/api/quizzes/{quiz_id}", headers=teacher_headers).status_code == 200
        lesson = client.get(f"/api/lessons/{lesson_id}", headers=student_headers).json()
        assert lesson["quiz"] is None
