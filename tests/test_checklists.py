"""Checklists and per-user item completion."""

from conftest import make_checklist
from utils.checklist_manager import completion_percentage


class TestCompletionPercentage:
    def test_rounds_half_up(self):
        assert completion_percentage(1, 3) == 33
        assert completion_percentage(2, 3) == 67
        assert completion_percentage(1, 8) == 13

    def test_bounds(self):
        assert completion_percentage(0, 4) == 0
        assert completion_percentage(4, 4) == 100
        assert completion_percentage(0, 0) == 0


class TestChecklistAuthoring:
    def test_students_cannot_create(self, client, student_headers):
        response = client.post(
            "/api/checklists",
            json={"title": "Mine", "disaster_type": "fire", "items": []},
            headers=student_headers,
        )
        assert response.status_code == 403

    def test_create_orders_items(self, client, teacher_headers):
        checklist = make_checklist(client, teacher_headers)
        assert checklist["total_items"] == 3
        assert checklist["completed_items"] == 0
        assert [item["order_index"] for item in checklist["items"]] == [0, 1, 2]
        assert [item["is_essential"] for item in checklist["items"]] == [True, True, False]

    def test_delete(self, client, teacher_headers, student_headers):
        checklist = make_checklist(client, teacher_headers)
        item_id = checklist["items"][0]["id"]
        client.put(
            f"/api/checklists/items/{item_id}/progress",
            json={"completed": True},
            headers=student_headers,
        )
        response = client.delete(f"/api/checklists/id/{checklist['id']}", headers=teacher_headers)
        assert response.status_code == 200
        assert client.get("/api/checklists/earthquake", headers=student_headers).status_code == 404
        response = client.delete(f"/api/checklists/id/{checklist['id']}", headers=teacher_headers)
        assert response.status_code == 404


class TestChecklistProgress:
    def test_list_and_detail(self, client, teacher_headers, student_headers):
        make_checklist(client, teacher_headers)
        make_checklist(client, teacher_headers, title="Hidden", disaster_type="fire", is_published=False)

        summaries = client.get("/api/checklists", headers=student_headers).json()
        assert [s["title"] for s in summaries] == ["Earthquake Kit"]
        assert "items" not in summaries[0]

        detail = client.get("/api/checklists/earthquake", headers=student_headers).json()
        assert detail["completion_percentage"] == 0
        assert all(item["completed"] is False for item in detail["items"])

    def test_missing_checklist_type(self, client, student_headers):
        assert client.get("/api/checklists/hurricane", headers=student_headers).status_code == 404
        assert client.get("/api/checklists/volcano", headers=student_headers).status_code == 422

    def test_checking_items_updates_percentage(self, client, teacher_headers, student_headers):
        checklist = make_checklist(client, teacher_headers)
        items = checklist["items"]

        first = client.put(
            f"/api/checklists/items/{items[0]['id']}/progress",
            json={"completed": True},
            headers=student_headers,
        ).json()
        assert first["item"]["completed"] is True
        assert first["item"]["completed_at"]
        assert first["completion_percentage"] == 33

        second = client.put(
            f"/api/checklists/items/{items[2]['id']}/progress",
            json={"completed": True},
            headers=student_headers,
        ).json()
        assert second["completion_percentage"] == 67
        assert second["points_awarded"] == 0

        detail = client.get("/api/checklists/earthquake", headers=student_headers).json()
        assert detail["completed_items"] == 2
        assert [item["completed"] for item in detail["items"]] == [True, False, True]

    def test_essential_points_are_awarded_once(self, client, teacher_headers, student_headers):
        checklist = make_checklist(client, teacher_headers)
        url = f"/api/checklists/items/{checklist['items'][0]['id']}/progress"

        checked = client.put(url, json={"completed": True}, headers=student_headers).json()
        assert checked["points_awarded"] == 5
        assert checked["total_points"] == 5

        unchecked = client.put(url, json={"completed": False}, headers=student_headers).json()
        assert unchecked["item"]["completed"] is False
        assert unchecked["item"]["completed_at"] is None
        assert unchecked["points_awarded"] == 0
        assert unchecked["total_points"] == 5

        rechecked = client.put(url, json={"completed": True}, headers=student_headers).json()
        assert rechecked["points_awarded"] == 0
        assert rechecked["total_points"] == 5

    def test_progress_is_per_user(self, client, teacher_headers, student_headers):
        checklist = make_checklist(client, teacher_headers)
        client.put(
            f"/api/checklists/items/{checklist['items'][0]['id']}/progress",
            json={"completed": True},
            headers=student_headers,
        )
        detail = client.get("/api/checklists/earthquake", headers=teacher_headers).json()
        assert detail["completed_items"] == 0

    def test_unknown_item(self, client, student_headers):
        response = client.put(
            "/api/checklists/items/missing/progress",
            json={"completed": True},
            headers=student_headers,
        )
        assert response.status_code == 404

    def test_items_of_unpublished_checklists_are_hidden(self, client, teacher_headers, student_headers):
        checklist = make_checklist(client, teacher_headers, is_published=False)
        response = client.put(
            f"/api/checklists/items/{checklist['items'][0]['id']}/progress",
            json={"completed": True},
            headers=student_headers,
        )
        assert response.status_code == 404

    def test_catalog_reports_checklists(self, client, teacher_headers):
        make_checklist(client, teacher_headers)
        catalog = {e["disaster_type"]: e for e in client.get("/api/disaster-types").json()}
        assert catalog["earthquake"]["has_checklist"] is True
        assert catalog["flood"]["has_checklist"] is False
