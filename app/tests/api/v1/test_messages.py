"""Tests for the /api/v1/messages routes."""

import asyncio

import pytest

from tests.factories import make_message_series


@pytest.fixture
def api_settings(settings_factory):
    return settings_factory(
        rate_limit={"RATE_LIMIT_MAX_REQUESTS": 3, "RATE_LIMIT_WINDOW_SECONDS": 60},
        retry={"RETRY_JITTER": False},
        messaging={"MESSAGE_DEFAULT_PAGE_SIZE": 2},
    )


def _post(client, payload, **headers):
    return client.post("/api/v1/messages", json=payload, headers=headers)


@pytest.mark.unit
class TestSendMessage:
    def test_returns_created_message_in_camel_case(self, client):
        response = _post(
            client,
            {"channelId": "c-general", "content": "hi @bob #launch"},
            **{"X-User-ID": "user-alice"},
        )

        assert response.status_code == 201
        message = response.json()["message"]
        assert message["channelId"] == "c-general"
        assert message["senderId"] == "user-alice"
        assert message["content"] == "hi @bob #launch"
        assert message["mentions"] == ["bob"]
        assert message["hashtags"] == ["launch"]
        assert message["messageType"] == "text"
        assert "createdAt" in message

    def test_anonymous_sender_without_user_header(self, client):
        response = _post(client, {"channelId": "c-general", "content": "hi"})

        assert response.json()["message"]["senderId"] == "anonymous"

    @pytest.mark.parametrize(
        "payload",
        [
            {"content": "hi"},
            {"channelId": "c-general"},
            {"channelId": "", "content": ""},
        ],
    )
    def test_missing_fields_is_400(self, client, payload):
        response = _post(client, payload)

        assert response.status_code == 400
        assert response.json() == {
            "error": "channelId and content are required",
            "code": "MISSING_FIELDS",
        }

    def test_content_sanitized_to_nothing_is_400(self, client):
        response = _post(client, {"channelId": "c-general", "content": "<div> </div>"})

        assert response.status_code == 400
        assert response.json()["code"] == "EMPTY_CONTENT"

    def test_mentioned_user_is_notified(self, client, services):
        _post(
            client,
            {"channelId": "c-general", "content": "ping @bob"},
            **{"X-User-ID": "user-alice"},
        )

        bob = services.notifications.list_notifications("user-bob")
        titles = [n.title for n in bob]
        assert titles == ["You were mentioned in #general"]


@pytest.mark.unit
class TestSendRateLimit:
    def test_over_limit_is_429_with_retry_after(self, client, fake_clock):
        for _ in range(3):
            response = _post(client, {"channelId": "c-general", "content": "hi"})
            assert response.status_code == 201
        fake_clock.advance(15)

        response = _post(client, {"channelId": "c-general", "content": "hi"})

        assert response.status_code == 429
        assert response.json() == {"error": "Rate limit exceeded", "retryAfter": 45}
        assert response.headers["Retry-After"] == "45"

    def test_forwarded_clients_are_limited_separately(self, client):
        for _ in range(3):
            _post(
                client,
                {"channelId": "c-general", "content": "hi"},
                **{"X-Forwarded-For": "10.0.0.1"},
            )

        response = _post(
            client,
            {"channelId": "c-general", "content": "hi"},
            **{"X-Forwarded-For": "10.0.0.2, 172.16.0.1"},
        )

        assert response.status_code == 201

    def test_missing_fields_do_not_spend_allowance(self, client):
        for _ in range(5):
            _post(client, {"channelId": "c-general"})

        response = _post(client, {"channelId": "c-general", "content": "hi"})
        assert response.status_code == 201


@pytest.mark.unit
class TestPersistenceFailures:
    def test_open_persistence_breaker_is_500(self, client, services):
        breaker = services.resilience.get_or_create_circuit_breaker(
            services.settings.messaging.persistence_breaker
        )
        for _ in range(breaker.failure_threshold):
            with pytest.raises(ConnectionError):
                breaker.call(_raise_connection_error)

        response = _post(client, {"channelId": "c-general", "content": "hi"})

        assert response.status_code == 500
        assert response.json()["code"] == "CIRCUIT_OPEN"


@pytest.mark.unit
class TestListMessages:
    @pytest.fixture
    def seeded(self, services):
        for message in make_message_series(5):
            asyncio.run(services.repository.save(message))

    def test_requires_channel_id(self, client):
        response = client.get("/api/v1/messages")

        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_FIELDS"

    @pytest.mark.usefixtures("seeded")
    def test_pages_newest_first_with_cursor(self, client):
        first = client.get("/api/v1/messages", params={"channelId": "c-general"})
        body = first.json()

        assert first.status_code == 200
        assert [m["content"] for m in body["messages"]] == ["message 4", "message 3"]
        assert body["pagination"]["hasMore"] is True

        second = client.get(
            "/api/v1/messages",
            params={
                "channelId": "c-general",
                "cursor": body["pagination"]["nextCursor"],
            },
        )
        assert [m["content"] for m in second.json()["messages"]] == [
            "message 2",
            "message 1",
        ]

    def test_empty_channel(self, client):
        response = client.get("/api/v1/messages", params={"channelId": "c-empty"})

        assert response.json() == {
            "messages": [],
            "pagination": {"hasMore": False, "nextCursor": None},
        }

    @pytest.mark.parametrize(
        "params,code",
        [
            ({"cursor": "yesterday"}, "INVALID_CURSOR"),
            ({"limit": 0}, "INVALID_LIMIT"),
            ({"direction": "sideways"}, "INVALID_DIRECTION"),
        ],
    )
    def test_invalid_paging_parameters(self, client, params, code):
        response = client.get(
            "/api/v1/messages", params={"channelId": "c-general", **params}
        )

        assert response.status_code == 400
        assert response.json()["code"] == code


def _raise_connection_error():
    raise ConnectionError("db down")
