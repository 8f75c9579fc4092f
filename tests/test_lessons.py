"""Lesson browsing and authoring."""

from conftest import make_lesson, make_quiz


class TestLessonAuthoring:
    def test_students_cannot_create_lessons(self, client, student_headers):
        response = client.post(
            "/api/lessons",
            json={"title": "Nope", "disaster_type": "fire"},
            headers=student_headers,
        )
        assert response.status_code == 403

    def test_create_applies_default_points(self, client, teacher_headers):
        lesson = make_lesson(client, teacher_headers)
        assert lesson["points_reward"] == 10
        assert lesson["difficulty_level"] == 1
        assert lesson["is_published"] is True
        assert lesson["quiz"] is None

    def test_unknown_disaster_type_is_rejected(self, client, teacher_headers):
        response = client.post(
            "/api/lessons",
            json={"title": "Volcanoes", "disaster_type": "volcano"},
            headers=teacher_headers,
        )
        assert response.status_code == 422

    def test_update_changes_only_given_fields(self, client, teacher_headers):
        lesson = make_lesson(client, teacher_headers, points_reward=15)
        response = client.patch(
            f"/api/lessons/{lesson['id']}",
            json={"title": "Earthquake Basics II"},
            headers=teacher_headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Earthquake Basics II"
        assert body["points_reward"] == 15
        assert body["content"] == lesson["content"]

    def test_update_rejects_null_for_required_fields(self, client, teacher_headers, student_headers):
        lesson = make_lesson(client, teacher_headers)
        for field in ("title", "disaster_type", "difficulty_level", "points_reward", "is_published"):
            response = client.patch(
                f"/api/lessons/{lesson['id']}", json={field: None}, headers=teacher_headers
            )
            assert response.status_code == 422, field

        listed = client.get("/api/lessons", headers=student_headers).json()
        assert [item["id"] for item in listed] == [lesson["id"]]
        assert listed[0]["title"] == lesson["title"]
        assert listed[0]["is_published"] is True

    def test_update_can_clear_optional_fields(self, client, teacher_headers):
        lesson = make_lesson(client, teacher_headers, description="Shaking ground")
        response = client.patch(
            f"/api/lessons/{lesson['id']}", json={"description": None}, headers=teacher_headers
        )
        assert response.status_code == 200
        assert response.json()["description"] is None

    def test_update_missing_lesson(self, client, teacher_headers):
        response = client.patch(
            "/api/lessons/missing", json={"title": "X"}, headers=teacher_headers
        )
        assert response.status_code == 404

    def test_delete_removes_lesson_and_quiz(self, client, teacher_headers, student_headers):
        lesson = make_lesson(client, teacher_headers)
        quiz = make_quiz(client, teacher_headers, lesson["id"])
        response = client.delete(f"/api/lessons/{lesson['id']}", headers=teacher_headers)
        assert response.status_code == 200
        assert client.get(f"/api/lessons/{lesson['id']}", headers=student_headers).status_code == 404
        assert client.get(f"/api/quizzes/{quiz['id']}", headers=teacher_headers).status_code == 404


class TestQuizAuthoring:
    def test_quiz_defaults(self, client, teacher_headers):
        lesson = make_lesson(client, teacher_headers)
        quiz = make_quiz(client, teacher_headers, lesson["id"])
        assert quiz["passing_score"] == 70
        assert quiz["points_reward"] == 20
        assert [q["order_index"] for q in quiz["questions"]] == [0, 1, 2]
        assert [q["correct_answer"] for q in quiz["questions"]] == ["B", "A", "C"]

    def test_second_quiz_conflicts(self, client, teacher_headers):
        lesson = make_lesson(client, teacher_headers)
        make_quiz(client, teacher_headers, lesson["id"])
        response = client.post(
            f"/api/lessons/{lesson['id']}/quiz",
            json={
                "title": "Again",
                "questions": [
                    {"question_text": "Q", "option_a": "a", "option_b": "b", "correct_answer": "A"}
                ],
            },
            headers=teacher_headers,
        )
        assert response.status_code == 409

    def test_quiz_for_missing_lesson(self, client, teacher_headers):
        response = client.post(
            "/api/lessons/missing/quiz",
            json={
                "title": "Orphan",
                "questions": [
                    {"question_text": "Q", "option_a": "a", "option_b": "b", "correct_answer": "A"}
                ],
            },
            headers=teacher_headers,
        )
        assert response.status_code == 404

    def test_quiz_needs_questions(self, client, teacher_headers):
        lesson = make_lesson(client, teacher_headers)
        response = client.post(
            f"/api/lessons/{lesson['id']}/quiz",
            json={"title": "Empty", "questions": []},
            headers=teacher_headers,
        )
        assert response.status_code == 422

    def test_correct_answer_must_name_an_option(self, client, teacher_headers):
        lesson = make_lesson(client, teacher_headers)
        response = client.post(
            f"/api/lessons/{lesson['id']}/quiz",
            json={
                "title": "Broken",
                "questions": [
                    {"question_text": "Q", "option_a": "a", "option_b": "b", "correct_answer": "D"}
                ],
            },
            headers=teacher_headers,
        )
        assert response.status_code == 422


class TestLessonBrowsing:
    def test_list_hides_unpublished_from_students(self, client, teacher_headers, student_headers):
        make_lesson(client, teacher_headers, title="Published")
        make_lesson(client, teacher_headers, title="Draft", is_published=False)

        titles = [l["title"] for l in client.get("/api/lessons", headers=student_headers).json()]
        assert titles == ["Published"]

        response = client.get(
            "/api/lessons", params={"include_unpublished": True}, headers=student_headers
        )
        assert [l["title"] for l in response.json()] == ["Published"]

        response = client.get(
            "/api/lessons", params={"include_unpublished": True}, headers=teacher_headers
        )
        assert sorted(l["title"] for l in response.json()) == ["Draft", "Published"]

    def test_filter_by_disaster_type(self, client, teacher_headers, student_headers):
        make_lesson(client, teacher_headers, title="Quake")
        make_lesson(client, teacher_headers, title="Flames", disaster_type="fire")
        response = client.get(
            "/api/lessons", params={"disaster_type": "fire"}, headers=student_headers
        )
        assert [l["title"] for l in response.json()] == ["Flames"]

    def test_listing_requires_login(self, client):
        assert client.get("/api/lessons").status_code in (401, 403)

    def test_detail_hides_answers(self, client, lesson_with_quiz, student_headers):
        lesson_id = lesson_with_quiz["lesson"]["id"]
        response = client.get(f"/api/lessons/{lesson_id}", headers=student_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["completed"] is False
        assert len(body["quiz"]["questions"]) == 3
        for question in body["quiz"]["questions"]:
            assert "correct_answer" not in question
            assert "explanation" not in question

    def test_draft_detail_visible_to_staff_only(self, client, teacher_headers, student_headers):
        draft = make_lesson(client, teacher_headers, is_published=False)
        assert client.get(f"/api/lessons/{draft['id']}", headers=student_headers).status_code == 404
        assert client.get(f"/api/lessons/{draft['id']}", headers=teacher_headers).status_code == 200

    def test_missing_lesson(self, client, student_headers):
        assert client.get("/api/lessons/nope", headers=student_headers).status_code == 404

    def test_grouped_follows_disaster_type_order(self, client, teacher_headers, student_headers):
        make_lesson(client, teacher_headers, title="Flames", disaster_type="fire")
        make_lesson(client, teacher_headers, title="Quake 1")
        make_lesson(client, teacher_headers, title="Quake 2")
        groups = client.get("/api/lessons/grouped", headers=student_headers).json()
        assert [g["disaster_type"] for g in groups] == ["earthquake", "fire"]
        assert groups[0]["lesson_count"] == 2
        assert groups[0]["completed_count"] == 0

    def test_disaster_type_catalog(self, client, teacher_headers):
        make_lesson(client, teacher_headers)
        make_lesson(client, teacher_headers, title="Draft", is_published=False)
        catalog = client.get("/api/disaster-types").json()
        assert len(catalog) == 10
        by_type = {entry["disaster_type"]: entry for entry in catalog}
        assert by_type["earthquake"]["lesson_count"] == 1
        assert by_type["fire"]["lesson_count"] == 0
        assert by_type["earthquake"]["has_checklist"] is False
