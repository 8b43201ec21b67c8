"""Auth and role tests."""


def test_register_login_me(client):
    r = client.post("/auth/register", json={"email": "a@test.com", "password": "pass", "full_name": "Alice"})
    assert r.status_code == 200
    assert r.json()["is_moderator"] is False

    token = client.post("/auth/login", json={"email": "a@test.com", "password": "pass"}).json()["access_token"]
    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"}).json()
    assert me["email"] == "a@test.com"
    assert me["blocked_users"] == []
    assert me["is_banned"] is False


def test_duplicate_email_rejected(client):
    body = {"email": "dup@test.com", "password": "pass", "full_name": "Dup"}
    assert client.post("/auth/register", json=body).status_code == 200
    assert client.post("/auth/register", json=body).status_code == 400


def test_bad_password_rejected(client):
    client.post("/auth/register", json={"email": "pw@test.com", "password": "pass", "full_name": "P"})
    r = client.post("/auth/login", json={"email": "pw@test.com", "password": "wrong"})
    assert r.status_code == 401


def test_configured_email_becomes_moderator(client, moderator):
    me = client.get("/auth/me", headers=moderator["headers"]).json()
    assert me["is_moderator"] is True


def test_missing_or_bad_token_is_401(client):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401


def test_update_display_name(client, register):
    user = register()
    r = client.put("/auth/me", headers=user["headers"], json={"full_name": "Renamed"})
    assert r.status_code == 200
    assert r.json()["full_name"] == "Renamed"
