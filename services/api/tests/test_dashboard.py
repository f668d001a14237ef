from datetime import date, datetime, timedelta

from app.models import CookingLog, FridgeItem, Recipe
from app.services.stats import month_windows


def test_dashboard_empty(auth_client):
    data = auth_client.get("/api/dashboard").json()["data"]
    assert data == {
        "monthly_cooking_count": 0,
        "prev_month_cooking_count": 0,
        "monthly_success_rate": None,
        "expiring_items": [],
        "latest_lesson": None,
    }


def test_dashboard_aggregates(auth_client, user, other_user, green_onion, db_session):
    recipe = Recipe(user_id=user.user_id, title="Japchae", servings=2)
    db_session.add(recipe)
    db_session.commit()

    (month_start, _), (prev_start, _) = month_windows()
    now = datetime.now()
    db_session.add_all([
        CookingLog(user_id=user.user_id, recipe_id=recipe.recipe_id, status="SUCCESS", lesson_note="first", cooked_at=month_start),
        CookingLog(user_id=user.user_id, recipe_id=recipe.recipe_id, status="SUCCESS", lesson_note=None, cooked_at=now),
        CookingLog(user_id=user.user_id, recipe_id=recipe.recipe_id, status="FAIL", lesson_note="latest note", cooked_at=now - timedelta(seconds=1)),
        CookingLog(user_id=user.user_id, recipe_id=recipe.recipe_id, status="FAIL", lesson_note="last month", cooked_at=prev_start + timedelta(days=1)),
        CookingLog(user_id=other_user.user_id, recipe_id=recipe.recipe_id, status="FAIL", lesson_note="other", cooked_at=now),
    ])

    today = date.today()
    db_session.add_all([
        FridgeItem(user_id=user.user_id, master_id=green_onion.master_id, expiry_date=today + timedelta(days=7)),
        FridgeItem(user_id=user.user_id, custom_name="old milk", expiry_date=today - timedelta(days=2)),
        FridgeItem(user_id=user.user_id, custom_name="rice", expiry_date=today + timedelta(days=8)),
        FridgeItem(user_id=user.user_id, custom_name="salt"),
        FridgeItem(user_id=other_user.user_id, custom_name="not mine", expiry_date=today),
    ])
    db_session.commit()

    data = auth_client.get("/api/dashboard").json()["data"]
    assert data["monthly_cooking_count"] == 3
    assert data["prev_month_cooking_count"] == 1
    assert data["monthly_success_rate"] == 67

    assert [(i["name"], i["d_day"]) for i in data["expiring_items"]] == [("old milk", -2), ("대파", 7)]

    lesson = data["latest_lesson"]
    assert lesson["lesson_note"] == "latest note"
    assert lesson["recipe_title"] == "Japchae"


def test_dashboard_requires_session(client):
    assert client.get("/api/dashboard").status_code == 401
