from datetime import timedelta

from security import create_access_token


def test_register_returns_token(client, admin_user):
    res = client.post("/api/v1/auth/register", json=admin_user)

    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    assert body["user"]["email"] == admin_user["email"]
    assert body["user"]["role"] == "ADMIN"
    assert "password" not in body["user"]
    assert body["token"]["access_token"]


def test_only_one_admin(client, admin_headers, admin_user):
    res = client.post("/api/v1/auth/register", json=dict(admin_user, email="second@sayad-alsamak.com"))

    assert res.status_code == 400
    assert res.json()["error"] == "لا يمكن إنشاء أكثر من مدير واحد للنظام"


def test_login(client, admin_headers, admin_user):
    res = client.post("/api/v1/auth/login", json={"email": admin_user["email"], "password": admin_user["password"]})

    assert res.status_code == 200
    assert res.json()["token"]["access_token"]


def test_login_wrong_password(client, admin_headers, admin_user):
    res = client.post("/api/v1/auth/login", json={"email": admin_user["email"], "password": "wrong-password"})

    assert res.status_code == 401
    assert res.json() == {"success": False, "error": "البريد الإلكتروني أو كلمة المرور غير صحيحة"}


def test_profile(client, admin_headers, admin_user):
    res = client.get("/api/v1/auth/profile", headers=admin_headers)

    assert res.status_code == 200
    assert res.json()["data"]["name"] == admin_user["name"]


def test_invalid_and_expired_tokens(client, admin_headers, admin_user, settings, services):
    assert client.get("/api/v1/auth/profile").json()["error"] == "Access denied. No token provided."

    res = client.get("/api/v1/auth/profile", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401
    assert res.json()["error"] == "Invalid token."

    user = services.auth.db.get_document("user", {"email": admin_user["email"]})
    expired = create_access_token(user["_id"], user["email"], settings.jwt_secret, timedelta(seconds=-10))
    res = client.get("/api/v1/auth/profile", headers={"Authorization": f"Bearer {expired}"})
    assert res.status_code == 401
    assert res.json()["error"] == "Token expired"


def test_deactivated_user_rejected(client, admin_headers, db):
    db["user"].update_many({}, {"$set": {"isActive": False}})

    res = client.get("/api/v1/auth/profile", headers=admin_headers)

    assert res.status_code == 401
    assert res.json()["error"] == "Invalid token or user not found."


def test_non_admin_is_forbidden(client, admin_headers, db):
    db["user"].update_many({}, {"$set": {"role": "CUSTOMER"}})

    res = client.get("/api/v1/orders", headers=admin_headers)

    assert res.status_code == 403
    assert res.json()["error"] == "Access denied. Admin privileges required."
