from app.models import CookingLog, FridgeItem, Recipe, User, UserSettings
from app.settings import settings


def test_profile_requires_session(client):
    response = client.get("/api/user/profile")
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Authentication required."}


def test_get_profile_with_settings(auth_client, user):
    response = auth_client.get("/api/user/profile")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user_id"] == user.user_id
    assert data["social_provider"] == "google"
    assert data["settings"] == {
        "alert_timer": True,
        "alert_expiry": True,
        "auto_export_enabled": False,
        "external_link": None,
    }


def test_update_profile(auth_client, user, db_session):
    response = auth_client.put("/api/user/profile", json={"nickname": "New Name", "profile_image": "http://img"})
    assert response.status_code == 200
    assert response.json()["data"]["nickname"] == "New Name"

    db_session.refresh(user)
    assert user.profile_image == "http://img"


def test_update_profile_rejects_blank_nickname(auth_client):
    response = auth_client.put("/api/user/profile", json={"nickname": "   "})
    assert response.status_code == 400
    assert response.json()["errors"] == ["nickname: nickname must not be empty."]


def test_settings_defaults_without_row(auth_client, user, db_session):
    db_session.query(UserSettings).delete()
    db_session.commit()

    response = auth_client.get("/api/user/settings")
    assert response.status_code == 200
    assert response.json()["data"]["alert_expiry"] is True


def test_update_settings_partial(auth_client, user, db_session):
    response = auth_client.put("/api/user/settings", json={"alert_timer": False, "external_link": "https://notion.so/x"})
    assert response.status_code == 200
    settings = response.json()["data"]["settings"]
    assert settings["alert_timer"] is False
    assert settings["alert_expiry"] is True
    assert settings["external_link"] == "https://notion.so/x"


def test_update_settings_upserts_missing_row(auth_client, user, db_session):
    db_session.query(UserSettings).delete()
    db_session.commit()

    response = auth_client.put("/api/user/settings", json={"auto_export_enabled": True})
    assert response.status_code == 200

    row = db_session.query(UserSettings).filter(UserSettings.user_id == user.user_id).one()
    assert row.auto_export_enabled is True
    assert row.alert_timer is True


def test_update_settings_rejects_non_boolean(auth_client):
    response = auth_client.put("/api/user/settings", json={"alert_timer": "no"})
    assert response.status_code == 400


def test_withdrawal_cascades(auth_client, user, db_session):
    recipe = Recipe(user_id=user.user_id, title="Kimchi stew", servings=2)
    db_session.add(recipe)
    db_session.commit()
    db_session.add_all([
        CookingLog(user_id=user.user_id, recipe_id=recipe.recipe_id, status="SUCCESS", lesson_note="good"),
        FridgeItem(user_id=user.user_id, custom_name="tofu"),
    ])
    db_session.commit()

    response = auth_client.delete("/api/user")
    assert response.status_code == 200

    db_session.expire_all()
    assert db_session.query(User).count() == 0
    assert db_session.query(Recipe).count() == 0
    assert db_session.query(CookingLog).count() == 0
    assert db_session.query(FridgeItem).count() == 0
    assert db_session.query(UserSettings).count() == 0


def test_withdrawal_missing_user(auth_client, user, db_session):
    db_session.delete(user)
    db_session.commit()
    assert auth_client.delete("/api/user").status_code == 404


def test_withdrawal_clears_session_cookie(auth_client, user):
    response = auth_client.delete("/api/user")
    assert response.status_code == 200
    set_cookie = response.headers["set-cookie"]
    assert settings.session_cookie_name in set_cookie
    assert "Max-Age=0" in set_cookie
