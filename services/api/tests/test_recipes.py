from datetime import datetime, timedelta

from app.models import CookingLog, Recipe, RecipeIngredient, RecipeStep

from conftest import login


RECIPE_PAYLOAD = {
    "title": "Kimchi fried rice",
    "servings": 2,
    "difficulty": "Easy",
    "ingredients": [
        {"name": "Rice", "amount": 300, "unit": "g"},
        {"name": "Kimchi", "amount": 0.5, "unit": "cup"},
        {"name": "Sesame oil"},
    ],
    "steps": [
        {"step_order": 2, "instruction": "Add rice and stir-fry.", "timer_seconds": 180},
        {"step_order": 1, "instruction": "Fry the kimchi."},
    ],
}


def _create(client, payload=None):
    response = client.post("/api/recipes", json=payload or RECIPE_PAYLOAD)
    assert response.status_code == 201
    return response.json()["data"]["recipe_id"]


def test_create_recipe(auth_client, db_session):
    response = auth_client.post("/api/recipes", json=RECIPE_PAYLOAD)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["title"] == "Kimchi fried rice"

    recipe_id = body["data"]["recipe_id"]
    assert db_session.query(RecipeIngredient).filter_by(recipe_id=recipe_id).count() == 3
    assert db_session.query(RecipeStep).filter_by(recipe_id=recipe_id).count() == 2


def test_create_recipe_defaults_servings(auth_client, db_session):
    payload = {**RECIPE_PAYLOAD}
    payload.pop("servings")
    recipe_id = _create(auth_client, payload)
    assert db_session.query(Recipe).filter_by(recipe_id=recipe_id).one().servings == 1


def test_create_recipe_validation(auth_client, db_session):
    response = auth_client.post(
        "/api/recipes",
        json={"title": " ", "ingredients": [], "steps": [{"step_order": "first", "instruction": ""}]},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Invalid input data."
    assert "title: title is required." in body["errors"]
    assert "ingredients: at least one ingredient is required." in body["errors"]
    assert db_session.query(Recipe).count() == 0


def test_create_recipe_rejects_values_longer_than_columns(auth_client, db_session):
    payload = {
        **RECIPE_PAYLOAD,
        "source_url": "https://example.com/" + "a" * 1000,
        "ingredients": [{"name": "r" * 201, "amount": 1, "unit": "u" * 31}],
        "steps": [{"step_order": 1, "instruction": "Cook.", "step_image_url": "x" * 1001}],
    }
    response = auth_client.post("/api/recipes", json=payload)
    assert response.status_code == 400
    errors = response.json()["errors"]
    assert "source_url: source_url must be at most 1000 characters." in errors
    assert "ingredients.0.name: name must be at most 200 characters." in errors
    assert "ingredients.0.unit: unit must be at most 30 characters." in errors
    assert "steps.0.step_image_url: step_image_url must be at most 1000 characters." in errors
    assert db_session.query(Recipe).count() == 0


def test_create_recipe_requires_session(client):
    assert client.post("/api/recipes", json=RECIPE_PAYLOAD).status_code == 401


def test_list_recipes_with_stats(auth_client, user, db_session):
    first = _create(auth_client)
    second = _create(auth_client, {**RECIPE_PAYLOAD, "title": "Bibimbap"})

    now = datetime.now()
    db_session.add_all([
        CookingLog(user_id=user.user_id, recipe_id=first, status="SUCCESS", lesson_note="a", cooked_at=now - timedelta(days=2)),
        CookingLog(user_id=user.user_id, recipe_id=first, status="FAIL", lesson_note="b", cooked_at=now - timedelta(days=1)),
        CookingLog(user_id=user.user_id, recipe_id=second, status="SUCCESS", lesson_note="c", cooked_at=now),
    ])
    db_session.commit()

    body = auth_client.get("/api/recipes").json()
    assert body["stats"] == {"total_cooking_count": 3, "overall_success_rate": 67}

    by_id = {r["recipe_id"]: r for r in body["data"]}
    assert by_id[first]["latest_log"]["status"] == "FAIL"
    assert by_id[second]["latest_log"]["lesson_note"] == "c"


def test_list_recipes_empty_stats(auth_client):
    body = auth_client.get("/api/recipes").json()
    assert body["data"] == []
    assert body["stats"] == {"total_cooking_count": 0, "overall_success_rate": None}


def test_list_only_own_recipes(auth_client, other_user, db_session):
    db_session.add(Recipe(user_id=other_user.user_id, title="Not mine", servings=1))
    db_session.commit()
    _create(auth_client)

    titles = [r["title"] for r in auth_client.get("/api/recipes").json()["data"]]
    assert titles == ["Kimchi fried rice"]


def test_detail_scales_ingredients(auth_client):
    recipe_id = _create(auth_client)

    data = auth_client.get(f"/api/recipes/{recipe_id}?servings=3").json()["data"]
    assert data["base_servings"] == 2
    assert data["requested_servings"] == 3
    amounts = {i["name"]: i["amount"] for i in data["ingredients"]}
    assert amounts["Rice"] == 450.0
    assert amounts["Kimchi"] == 0.75
    assert amounts["Sesame oil"] is None
    assert [s["step_order"] for s in data["steps"]] == [1, 2]


def test_detail_same_servings_returns_base_amounts(auth_client):
    recipe_id = _create(auth_client)
    data = auth_client.get(f"/api/recipes/{recipe_id}").json()["data"]
    assert data["requested_servings"] == 2
    assert {i["name"]: i["amount"] for i in data["ingredients"]}["Rice"] == 300.0


def test_detail_latest_log_is_personal(auth_client, user, other_user, db_session):
    recipe_id = _create(auth_client)
    db_session.add_all([
        CookingLog(user_id=user.user_id, recipe_id=recipe_id, status="REGRET", lesson_note="mine",
                   cooked_at=datetime.now() - timedelta(hours=2)),
        CookingLog(user_id=other_user.user_id, recipe_id=recipe_id, status="SUCCESS", lesson_note="theirs",
                   cooked_at=datetime.now()),
    ])
    db_session.commit()

    data = auth_client.get(f"/api/recipes/{recipe_id}").json()["data"]
    assert data["latest_log"]["lesson_note"] == "mine"


def test_detail_invalid_and_missing_ids(auth_client):
    response = auth_client.get("/api/recipes/abc")
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid recipe_id."
    assert auth_client.get("/api/recipes/0").status_code == 400
    assert auth_client.get("/api/recipes/999").status_code == 404


def test_steps_endpoint(auth_client):
    recipe_id = _create(auth_client)
    steps = auth_client.get(f"/api/recipes/{recipe_id}/steps").json()["data"]
    assert steps[0] == {"step_id": steps[0]["step_id"], "step_order": 1, "instruction": "Fry the kimchi.", "timer_seconds": 0}
    assert steps[1]["timer_seconds"] == 180


def test_logs_endpoint_newest_first(auth_client, user, other_user, db_session):
    recipe_id = _create(auth_client)
    now = datetime.now()
    db_session.add_all([
        CookingLog(user_id=user.user_id, recipe_id=recipe_id, status="SUCCESS", lesson_note="old", cooked_at=now - timedelta(days=3)),
        CookingLog(user_id=user.user_id, recipe_id=recipe_id, status="FAIL", lesson_note="new", cooked_at=now),
        CookingLog(user_id=other_user.user_id, recipe_id=recipe_id, status="FAIL", lesson_note="other", cooked_at=now),
    ])
    db_session.commit()

    logs = auth_client.get(f"/api/recipes/{recipe_id}/logs").json()["data"]
    assert [log["lesson_note"] for log in logs] == ["new", "old"]
    assert auth_client.get("/api/recipes/999/logs").status_code == 404


def test_delete_recipe_owner_only(client, user, other_user, db_session):
    login(client, user)
    recipe_id = _create(client)

    login(client, other_user)
    assert client.delete(f"/api/recipes/{recipe_id}").status_code == 403
    assert db_session.query(Recipe).filter_by(recipe_id=recipe_id).count() == 1

    login(client, user)
    assert client.delete(f"/api/recipes/{recipe_id}").status_code == 200
    assert db_session.query(Recipe).filter_by(recipe_id=recipe_id).count() == 0
    assert db_session.query(RecipeIngredient).count() == 0
