"""
Integration tests for Reality API.

Tests cover:
- Daily event logging and the recent-events cap
- Chat turns (text, image, AI failure)
- Conversation archiving
"""

from fastapi.testclient import TestClient

from app.core.config import settings


class TestDailyEvents:
    def test_create_and_list_newest_first(self, client: TestClient):
        client.post("/api/reality/events", json={"event_text": "Breakfast"})
        response = client.post("/api/reality/events", json={"event_text": "  Meeting  "})

        assert response.status_code == 201
        assert response.json()["event_text"] == "Meeting"

        listed = client.get("/api/reality/events").json()
        assert [e["event_text"] for e in listed] == ["Meeting", "Breakfast"]

    def test_list_is_capped(self, client: TestClient):
        for i in range(settings.DAILY_EVENTS_LIMIT + 2):
            client.post("/api/reality/events", json={"event_text": f"event {i}"})

        listed = client.get("/api/reality/events").json()
        assert len(listed) == settings.DAILY_EVENTS_LIMIT

    def test_blank_event_rejected(self, client: TestClient):
        response = client.post("/api/reality/events", json={"event_text": ""})
        assert response.status_code == 400
        assert response.json()["detail"] == "Please enter some text for your daily event."


class TestChat:
    def test_active_conversation_created_on_demand(self, client: TestClient):
        first = client.get("/api/reality/chat").json()
        second = client.get("/api/reality/chat").json()

        assert first["id"] == second["id"]
        assert first["is_archived"] is False
        assert first["messages"] == []

    def test_text_turn(self, client: TestClient, fake_llm):
        fake_llm.text_reply = "Sounds like a busy day."

        response = client.post("/api/reality/chat/messages", json={"text": "I worked a lot"})

        assert response.status_code == 200
        reply = response.json()
        assert reply["failed"] is False
        assert reply["user_message"]["role"] == "user"
        assert reply["model_message"]["role"] == "model"
        assert reply["model_message"]["text"] == "Sounds like a busy day."

        conversation = client.get("/api/reality/chat").json()
        assert conversation["id"] == reply["conversation_id"]
        assert [m["text"] for m in conversation["messages"]] == ["I worked a lot", "Sounds like a busy day."]

    def test_failed_turn_stores_fallback(self, client: TestClient, fake_llm):
        fake_llm.text_reply = None

        reply = client.post("/api/reality/chat/messages", json={"text": "Hello"}).json()

        assert reply["failed"] is True
        assert reply["model_message"]["text"] == "No response from Gemini API."

    def test_image_turn(self, client: TestClient, fake_llm):
        reply = client.post("/api/reality/chat/messages", json={"text": "image of a red door"}).json()

        assert fake_llm.image_calls == ["a red door"]
        assert reply["image_url"].startswith("data:image/png;base64,")
        assert reply["model_message"]["text"].startswith("Generated an image.")

    def test_blank_message_rejected(self, client: TestClient):
        response = client.post("/api/reality/chat/messages", json={"text": "  "})
        assert response.status_code == 400

    def test_archive_conversation(self, client: TestClient, fake_llm):
        fake_llm.text_reply = "Hi!"
        first = client.post("/api/reality/chat/messages", json={"text": "Hello"}).json()

        archived = client.post("/api/reality/chat/archive")

        assert archived.status_code == 200
        assert archived.json()["is_archived"] is True
        assert len(archived.json()["messages"]) == 2

        fresh = client.get("/api/reality/chat").json()
        assert fresh["id"] != first["conversation_id"]
        assert fresh["messages"] == []

    def test_archive_without_active_conversation(self, client: TestClient):
        response = client.post("/api/reality/chat/archive")
        assert response.status_code == 404
        assert response.json()["detail"] == "No active conversation to archive."
