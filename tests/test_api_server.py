import pytest
from fastapi.testclient import TestClient

from quiz_taker.core.services.quiz_session import QuizSession
from quiz_taker.core.services.snapshot_store import InMemorySnapshotStore
from quiz_taker.server.api_server import build_state_payload, create_api_app


@pytest.fixture
def client(session):
    return TestClient(create_api_app(session))


def test_page_is_served(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert "/state" in response.text
    assert "__MATHJAX__" not in response.text


def test_state_describes_the_current_question(client, session):
    state = client.get("/state").json()

    assert state["title"] == "Test"
    assert state["progress"] == "Question 1 of 2"
    assert state["total"] == 2
    assert state["clock"] == "01:00"
    assert state["is_finished"] is False
    assert state["question"]["id"] == session.engine.current_question.id
    assert len(state["question"]["options"]) == 2
    assert state["selected_index"] is None
    assert state["navigation"] == {"can_prev": False, "can_next": False, "can_finish": False}
    assert state["summary"] is None


def test_select_and_navigate(client, session):
    state = client.post("/select", json={"option_index": 1}).json()
    assert state["selected_index"] == 1
    assert state["navigation"]["can_next"] is True

    state = client.post("/next").json()
    assert state["current_index"] == 1
    assert state["progress"] == "Question 2 of 2"

    state = client.post("/prev").json()
    assert state["current_index"] == 0

    state = client.post("/goto", json={"index": 1}).json()
    assert state["current_index"] == 1
    assert session.engine.current_index == 1


def test_invalid_requests_are_rejected(client):
    assert client.post("/select", json={"option_index": 5}).status_code == 422
    assert client.post("/goto", json={"index": -1}).status_code == 422
    assert client.post("/prev").status_code == 422
    assert client.post("/select", json={}).status_code == 422
    assert client.post("/review").status_code == 409


def test_finish_then_review(client):
    client.post("/select", json={"option_index": 0})

    state = client.post("/finish").json()

    assert state["is_finished"] is True
    assert state["summary"]["total"] == 2
    assert "/ 2</b>" in state["summary_html"]
    assert state["review_html"] is None
    assert client.post("/select", json={"option_index": 0}).status_code == 409

    state = client.post("/review").json()

    assert state["review_mode"] is True
    assert "(your answer)" in state["review_html"]


def test_restart_resets_the_session(client, store):
    client.post("/select", json={"option_index": 0})
    client.post("/finish")

    state = client.post("/restart").json()

    assert state["is_finished"] is False
    assert state["selected_index"] is None
    assert state["clock"] == "01:00"
    assert store.load() is None


def test_state_payload_matches_endpoint(client, session):
    assert client.get("/state").json() == build_state_payload(session)


def test_resumed_finished_session_shows_result(definition, scheduler):
    store = InMemorySnapshotStore({"is_finished": True, "answers": {"q1": 1}})
    client = TestClient(create_api_app(QuizSession.open(definition, store, scheduler)))

    state = client.get("/state").json()

    assert state["is_finished"] is True
    assert state["summary"]["total"] == 2
    assert "/ 2</b>" in state["summary_html"]
