"""Tests for the /api/v1/notifications routes."""

from datetime import datetime, timezone

import pytest

BASE = "/api/v1/notifications"


def _create(client, **overrides):
    payload = {
        "recipientId": "user-bob",
        "category": "task",
        "title": "Review requested",
        "body": "Alice asked for your review",
    }
    payload.update(overrides)
    return client.post(BASE, json=payload)


@pytest.mark.unit
class TestCreateNotification:
    def test_stores_and_reports_delivery(self, client):
        response = _create(client, channels=["toast", "push"])

        assert response.status_code == 201
        body = response.json()
        assert body["notification"]["recipient_id"] == "user-bob"
        assert body["report"]["delivered"] == ["in_app", "toast"]
        assert body["report"]["suppressed"] == ["push"]
        assert body["report"]["failed"] == []

    def test_defaults_to_configured_channels(self, client):
        report = _create(client).json()["report"]

        assert report["delivered"] == ["in_app", "toast"]
        assert report["suppressed"] == ["browser", "push", "email"]

    def test_system_notifications_bypass_preferences(self, client):
        report = _create(client, category="system", channels=["push"]).json()["report"]

        assert report["delivered"] == ["in_app", "push"]

    def test_urgent_channels_bypass_quiet_hours(self, client, fake_clock):
        client.put(
            f"{BASE}/preferences/user-bob",
            json={
                "quiet_hours": {"enabled": True},
                "per_category": {"task": {"push": True, "email": True}},
            },
        )
        fake_clock.set(datetime(2024, 1, 15, 23, 0, tzinfo=timezone.utc))

        report = _create(
            client, channels=["push", "email"], urgentChannels=["push"]
        ).json()["report"]

        assert report["delivered"] == ["in_app", "push"]
        assert report["suppressed"] == ["email"]

    def test_blank_title_is_400(self, client):
        response = _create(client, title="   ")

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_NOTIFICATION"

    def test_unknown_category_is_422(self, client):
        assert _create(client, category="gossip").status_code == 422


@pytest.mark.unit
class TestWorkspaceEvents:
    def test_meeting_started_notifies_each_recipient(self, client):
        response = client.post(
            f"{BASE}/events/meeting-started",
            json={
                "recipientIds": ["user-bob", "user-carol", "user-alice"],
                "userName": "alice",
                "meetingType": "video",
                "meetingId": "mtg-1",
                "meetingUrl": "https://meet.example.com/mtg-1",
                "senderId": "user-alice",
                "channels": ["toast"],
            },
        )

        assert response.status_code == 201
        assert len(response.json()["reports"]) == 2
        listed = client.get(BASE, params={"recipientId": "user-carol"}).json()
        assert [n["title"] for n in listed["notifications"]] == ["Meeting Started"]

    def test_task_updated(self, client):
        response = client.post(
            f"{BASE}/events/task-updated",
            json={
                "recipientIds": ["user-bob"],
                "userName": "alice",
                "taskTitle": "Write docs",
                "progress": 75,
                "taskId": "t-1",
            },
        )

        assert response.status_code == 201
        [report] = response.json()["reports"]
        assert report["delivered"] == ["in_app", "toast"]

    def test_task_progress_out_of_range_is_422(self, client):
        response = client.post(
            f"{BASE}/events/task-updated",
            json={
                "recipientIds": ["user-bob"],
                "userName": "alice",
                "taskTitle": "Write docs",
                "progress": 120,
                "taskId": "t-1",
            },
        )

        assert response.status_code == 422

    def test_idea_shared(self, client):
        response = client.post(
            f"{BASE}/events/idea-shared",
            json={
                "recipientIds": ["user-bob"],
                "userName": "alice",
                "ideaTitle": "Dark mode",
                "ideaId": "i-1",
            },
        )

        assert response.status_code == 201
        listed = client.get(BASE, params={"recipientId": "user-bob"}).json()
        assert listed["notifications"][0]["category"] == "idea"

    def test_system_notice_bypasses_preferences(self, client):
        response = client.post(
            f"{BASE}/events/system",
            json={
                "recipientIds": ["user-bob"],
                "title": "Maintenance",
                "body": "Back at 17:00",
                "channels": ["push"],
            },
        )

        [report] = response.json()["reports"]
        assert report["delivered"] == ["in_app", "push"]

    def test_requires_recipients(self, client):
        response = client.post(
            f"{BASE}/events/system",
            json={"recipientIds": [], "title": "Maintenance", "body": "soon"},
        )

        assert response.status_code == 422


@pytest.mark.unit
class TestListNotifications:
    def test_lists_newest_first_with_unread_count(self, client):
        _create(client, title="first")
        _create(client, title="second")

        response = client.get(BASE, params={"recipientId": "user-bob"})

        body = response.json()
        assert [n["title"] for n in body["notifications"]] == ["second", "first"]
        assert body["unreadCount"] == 2

    def test_filters_by_category(self, client):
        _create(client, category="mention", title="mentioned")
        _create(client, category="task", title="task")

        response = client.get(
            BASE, params={"recipientId": "user-bob", "category": "mention"}
        )

        assert [n["title"] for n in response.json()["notifications"]] == ["mentioned"]

    def test_requires_recipient(self, client):
        assert client.get(BASE).status_code == 422


@pytest.mark.unit
class TestMarkRead:
    def test_marks_one_notification(self, client):
        notification_id = _create(client).json()["notification"]["id"]

        response = client.post(
            f"{BASE}/mark-read", json={"notificationId": notification_id}
        )

        assert response.json() == {"success": True, "updated": 1}
        listed = client.get(BASE, params={"recipientId": "user-bob"}).json()
        assert listed["unreadCount"] == 0

    def test_unknown_notification_is_404(self, client):
        response = client.post(f"{BASE}/mark-read", json={"notificationId": "missing"})

        assert response.status_code == 404
        assert response.json() == {
            "error": "Notification missing not found",
            "code": "NOTIFICATION_NOT_FOUND",
        }

    def test_marks_all_for_recipient(self, client):
        _create(client)
        _create(client)

        response = client.post(f"{BASE}/mark-read", json={"recipientId": "user-bob"})

        assert response.json() == {"success": True, "updated": 2}

    def test_requires_an_identifier(self, client):
        response = client.post(f"{BASE}/mark-read", json={})

        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_FIELDS"


@pytest.mark.unit
class TestPreferences:
    def test_defaults_for_unknown_recipient(self, client):
        response = client.get(f"{BASE}/preferences/user-bob")

        body = response.json()
        assert response.status_code == 200
        assert body["timezone"] == "UTC"
        assert body["quiet_hours"]["enabled"] is False

    def test_saved_preferences_change_delivery(self, client):
        response = client.put(
            f"{BASE}/preferences/user-bob",
            json={"per_category": {"task": {"push": True}}},
        )
        assert response.status_code == 200

        report = _create(client, channels=["push"]).json()["report"]

        assert report["delivered"] == ["in_app", "push"]

    def test_rejects_malformed_quiet_hours(self, client):
        response = client.put(
            f"{BASE}/preferences/user-bob",
            json={"quiet_hours": {"enabled": True, "start": "25:00"}},
        )

        assert response.status_code == 422


@pytest.mark.unit
class TestDelete:
    def test_delete_one(self, client):
        notification_id = _create(client).json()["notification"]["id"]

        assert client.delete(f"{BASE}/{notification_id}").json() == {"success": True}
        response = client.delete(f"{BASE}/{notification_id}")
        assert response.status_code == 404
        assert response.json()["code"] == "NOTIFICATION_NOT_FOUND"

    def test_clear_all_for_recipient(self, client):
        _create(client)
        _create(client)
        _create(client, recipientId="user-alice")

        response = client.delete(BASE, params={"recipientId": "user-bob"})

        assert response.json() == {"success": True, "removed": 2}
        remaining = client.get(BASE, params={"recipientId": "user-alice"}).json()
        assert len(remaining["notifications"]) == 1
