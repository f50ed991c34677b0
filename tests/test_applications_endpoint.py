"""
Integration tests for the hacker-facing /v1/applications endpoints.
"""
from portal.schemas.settings import ShortAnswerQuestion
from portal.services import settings_service

from helpers import COMPLETE_APPLICATION, auth_headers


def test_requires_session(client):
    response = client.get("/v1/applications/me")
    assert response.status_code == 401
    assert response.json() == {"error": "unauthorized"}


def test_get_creates_draft_with_questions(client, db_session, hacker):
    settings_service.update_short_answer_questions(db_session, [
        ShortAnswerQuestion(id="why", question="Why?", required=True, display_order=0),
    ])

    response = client.get("/v1/applications/me", headers=auth_headers(hacker))
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "draft"
    assert data["user_id"] == hacker.id
    assert data["short_answer_questions"][0]["id"] == "why"

    again = client.get("/v1/applications/me", headers=auth_headers(hacker))
    assert again.json()["id"] == data["id"]


def test_patch_updates_draft(client, hacker):
    headers = auth_headers(hacker)
    client.get("/v1/applications/me", headers=headers)

    response = client.patch("/v1/applications/me", json={"first_name": "Ada", "age": 20}, headers=headers)
    assert response.status_code == 200
    assert response.json()["first_name"] == "Ada"
    assert response.json()["age"] == 20


def test_patch_rejects_bad_values(client, hacker):
    headers = auth_headers(hacker)
    client.get("/v1/applications/me", headers=headers)

    for body in (
        {"phone_e164": "4075551234"},
        {"age": 151},
        {"hackathons_attended_count": -1},
        {"github": "github dot com"},
        {"dietary_restrictions": ["pizza"]},
        {"unknown_field": "x"},
    ):
        response = client.patch("/v1/applications/me", json=body, headers=headers)
        assert response.status_code == 422, body
        assert response.json()["error"] == "invalid request"
        assert response.json()["details"]


def test_submit_reports_missing_fields(client, hacker):
    headers = auth_headers(hacker)
    client.get("/v1/applications/me", headers=headers)

    response = client.post("/v1/applications/me/submit", headers=headers)
    assert response.status_code == 400
    data = response.json()
    assert data["error"].startswith("missing required fields")
    assert "first_name" in data["missing"]


def test_submit_then_locked(client, hacker):
    headers = auth_headers(hacker)
    client.get("/v1/applications/me", headers=headers)
    client.patch("/v1/applications/me", json=COMPLETE_APPLICATION, headers=headers)

    response = client.post("/v1/applications/me/submit", headers=headers)
    assert response.status_code == 200
    assert response.json()["status"] == "submitted"
    assert response.json()["submitted_at"] is not None

    response = client.post("/v1/applications/me/submit", headers=headers)
    assert response.status_code == 409
    assert response.json() == {"error": "application already submitted"}

    response = client.patch("/v1/applications/me", json={"first_name": "Eve"}, headers=headers)
    assert response.status_code == 409


def test_step_validation(client, hacker):
    headers = auth_headers(hacker)

    response = client.post(
        "/v1/applications/me/steps/school/validate",
        json={"university": "UCF", "major": "CS", "level_of_study": "undergraduate"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json() == {"step": "school", "valid": True, "errors": {}}

    response = client.post("/v1/applications/me/steps/review/validate", json={"ack_application": True}, headers=headers)
    data = response.json()
    assert data["valid"] is False
    assert "ack_mlh_coc" in data["errors"]


def test_step_validation_unknown_step(client, hacker):
    response = client.post("/v1/applications/me/steps/payment/validate", json={}, headers=auth_headers(hacker))
    assert response.status_code == 422


def test_form_options(client, hacker):
    response = client.get("/v1/applications/options", headers=auth_headers(hacker))
    assert response.status_code == 200
    values = [o["value"] for o in response.json()["dietary_restrictions"]]
    assert "vegan" in values
