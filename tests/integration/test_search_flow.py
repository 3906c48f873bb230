"""
Integration tests for Search API.

Tests cover:
- Keyword search with time scope
- Per-session match selection and applying a match
"""

from fastapi.testclient import TestClient


def _event(client: TestClient, text: str) -> dict:
    response = client.post("/api/reality/events", json={"event_text": text})
    assert response.status_code == 201
    return response.json()


class TestSearch:
    def test_search_dreams_and_events(self, client: TestClient, archive_dream):
        archive_dream("Swimming in a lake")
        archive_dream("Nothing here", title="Lake house")
        archive_dream("A desert")
        _event(client, "Walked by the LAKE")

        response = client.get("/api/search", params={"q": "lake", "scope": "last7Days"})

        assert response.status_code == 200
        results = response.json()
        assert [d["dream_title"] for d in results["dreams"]] == ["Lake house", ""]
        assert [e["event_text"] for e in results["events"]] == ["Walked by the LAKE"]

    def test_blank_term_rejected(self, client: TestClient):
        response = client.get("/api/search", params={"q": " "})
        assert response.status_code == 400
        assert response.json()["detail"] == "Please enter a search term."

    def test_results_are_per_user(self, client: TestClient, sign_up, app, archive_dream):
        archive_dream("Secret lake dream")
        other_token = sign_up(email="other@example.com")["access_token"]

        other = TestClient(app, headers={"Authorization": f"Bearer {other_token}"})
        results = other.get("/api/search", params={"q": "lake"}).json()

        assert results["dreams"] == []


class TestSelection:
    def test_select_and_match(self, client: TestClient, archive_dream):
        dream = archive_dream("Flying")
        event = _event(client, "Booked a flight")

        client.post("/api/search/selection", json={"kind": "dream", "id": dream["id"]})
        state = client.post("/api/search/selection", json={"kind": "event", "id": event["id"]}).json()
        assert state["can_match"] is True

        response = client.post("/api/search/selection/match")

        assert response.status_code == 200
        assert response.json()["matched_reality_event"] == 'Matched with daily event: "Booked a flight"'
        assert client.get("/api/search/selection").json() == {
            "dream_id": None,
            "event_id": None,
            "can_match": False,
        }
        assert [d["id"] for d in client.get("/api/dreams/matches").json()] == [dream["id"]]

    def test_second_dream_replaces_first(self, client: TestClient, archive_dream):
        first = archive_dream("One")
        second = archive_dream("Two")

        client.post("/api/search/selection", json={"kind": "dream", "id": first["id"]})
        state = client.post("/api/search/selection", json={"kind": "dream", "id": second["id"]}).json()

        assert state["dream_id"] == second["id"]
        assert state["can_match"] is False

    def test_uncheck(self, client: TestClient, archive_dream):
        dream = archive_dream("One")
        client.post("/api/search/selection", json={"kind": "dream", "id": dream["id"]})

        state = client.post(
            "/api/search/selection", json={"kind": "dream", "id": dream["id"], "checked": False}
        ).json()

        assert state["dream_id"] is None

    def test_match_requires_complete_selection(self, client: TestClient):
        response = client.post("/api/search/selection/match")
        assert response.status_code == 400
        assert response.json()["detail"] == "Please select exactly one dream and one daily event to match."
