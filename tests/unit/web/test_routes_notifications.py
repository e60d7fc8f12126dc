"""Tests for fieldflow.web.routes.notifications."""

from __future__ import annotations

import pytest


@pytest.fixture
def inbox(admin_client, maria_client, demo):
    """Raise two more change orders; with the seeded CO-001 maria has three
    approval notifications."""
    project_id = demo.projects[0].id
    for title in ("CO-002: Pendant lights", "CO-003: Soft-close hinges"):
        admin_client.post(
            f"/api/projects/{project_id}/change-orders",
            json={"title": title, "description": title, "amount": "150"},
        )
    return maria_client.get("/api/notifications").json()


class TestNotifications:
    def test_newest_first(self, inbox):
        assert len(inbox) == 3
        assert inbox[0]["id"] > inbox[1]["id"] > inbox[2]["id"]
        assert all(n["read"] is False for n in inbox)
        assert all(n["relatedType"] == "change_order" for n in inbox)

    def test_mark_one_read(self, maria_client, inbox):
        response = maria_client.put(f"/api/notifications/{inbox[1]['id']}/read")

        assert response.status_code == 200
        assert response.json() == {"message": "Notification marked as read"}
        unread = maria_client.get("/api/notifications/unread").json()
        assert [n["id"] for n in unread] == [inbox[0]["id"], inbox[2]["id"]]

    def test_read_all_reports_count(self, maria_client, inbox):
        first = maria_client.put("/api/notifications/read-all")
        second = maria_client.put("/api/notifications/read-all")

        assert first.json() == {"updated": 3}
        assert second.json() == {"updated": 0}
        assert maria_client.get("/api/notifications/unread").json() == []

    def test_admin_may_mark_any(self, admin_client, inbox):
        response = admin_client.put(f"/api/notifications/{inbox[0]['id']}/read")

        assert response.status_code == 200

    def test_other_client_is_denied(self, login, cast, inbox):
        response = login("otto.client").put(f"/api/notifications/{inbox[0]['id']}/read")

        assert response.status_code == 403

    def test_missing(self, maria_client):
        response = maria_client.put("/api/notifications/9999/read")

        assert response.status_code == 404
        assert response.json() == {"message": "Notification not found"}

    def test_empty_inbox(self, admin_client):
        assert admin_client.get("/api/notifications").json() == []
