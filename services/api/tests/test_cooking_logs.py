from datetime import datetime, timedelta

import pytest

from app.models import CookingLog, Recipe

from conftest import login


@pytest.fixture
def recipe(db_session, user):
    r = Recipe(user_id=user.user_id, title="Tteokbokki", servings=2)
    db_session.add(r)
    db_session.commit()
    db_session.refresh(r)
    return r


def _log(client, recipe, **overrides):
    payload = {"status": "SUCCESS", "recipe_id": recipe.recipe_id, "lesson_note": "Less sugar next time."}
    payload.update(overrides)
    return client.post("/api/cooking-logs", json=payload)


def test_create_log(auth_client, recipe):
    response = _log(auth_client, recipe, companion="  Mom  ")
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["log_id"] > 0
    assert data["status"] == "SUCCESS"
    assert data["companion"] == "Mom"
    assert data["cooked_at"]


def test_create_log_validation(auth_client, recipe):
    response = auth_client.post(
        "/api/cooking-logs",
        json={"status": "MEH", "recipe_id": -1, "lesson_note": " ", "companion": "x" * 51},
    )
    assert response.status_code == 400
    errors = response.json()["errors"]
    assert "status: status must be one of SUCCESS, REGRET, FAIL." in errors
    assert "recipe_id: recipe_id must be a positive integer." in errors
    assert "lesson_note: lesson_note is required." in errors
    assert "companion: companion must be at most 50 characters." in errors


def test_create_log_unknown_recipe(auth_client):
    response = auth_client.post(
        "/api/cooking-logs", json={"status": "FAIL", "recipe_id": 12345, "lesson_note": "burnt"}
    )
    assert response.status_code == 404


def test_list_logs_newest_first_with_title(auth_client, user, recipe, db_session):
    now = datetime.now()
    db_session.add_all([
        CookingLog(user_id=user.user_id, recipe_id=recipe.recipe_id, status="FAIL", lesson_note="old", cooked_at=now - timedelta(days=1)),
        CookingLog(user_id=user.user_id, recipe_id=recipe.recipe_id, status="SUCCESS", lesson_note="new", cooked_at=now),
    ])
    db_session.commit()

    data = auth_client.get("/api/cooking-logs").json()["data"]
    assert [d["lesson_note"] for d in data] == ["new", "old"]
    assert data[0]["recipe_title"] == "Tteokbokki"


def test_update_log_partial(auth_client, recipe):
    log_id = _log(auth_client, recipe, companion="Friend").json()["data"]["log_id"]

    response = auth_client.put(f"/api/cooking-logs/{log_id}", json={"status": "REGRET", "companion": ""})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "REGRET"
    assert data["companion"] is None
    assert data["lesson_note"] == "Less sugar next time."


def test_update_log_rejects_bad_status(auth_client, recipe):
    log_id = _log(auth_client, recipe).json()["data"]["log_id"]
    assert auth_client.put(f"/api/cooking-logs/{log_id}", json={"status": "GREAT"}).status_code == 400


def test_other_users_log_is_forbidden(client, user, other_user, recipe, db_session):
    login(client, user)
    log_id = _log(client, recipe).json()["data"]["log_id"]

    login(client, other_user)
    response = client.put(f"/api/cooking-logs/{log_id}", json={"lesson_note": "hijacked"})
    assert response.status_code == 403
    assert response.json()["success"] is False
    assert client.delete(f"/api/cooking-logs/{log_id}").status_code == 403

    log = db_session.query(CookingLog).filter_by(log_id=log_id).one()
    assert log.lesson_note == "Less sugar next time."


def test_delete_log(auth_client, recipe, db_session):
    log_id = _log(auth_client, recipe).json()["data"]["log_id"]
    assert auth_client.delete(f"/api/cooking-logs/{log_id}").status_code == 200
    assert auth_client.delete(f"/api/cooking-logs/{log_id}").status_code == 404
    assert auth_client.delete("/api/cooking-logs/abc").status_code == 400
