import uuid

from app.core.security import create_refresh_token


def register(client, email=None, username=None, password="password123"):
    unique_id = str(uuid.uuid4())[:8]
    return client.post("/api/auth/register", json={
        "email": email or f"signup_{unique_id}@example.com",
        "username": username or f"user_{unique_id}",
        "password": password
    })


def test_register_success(client):
    """Test : créer un utilisateur avec succès"""
    response = register(client, email="alice@example.com", username="alice")
    assert response.status_code == 201
    body = response.json()
    assert body["success"] == True
    assert body["data"]["email"] == "alice@example.com"
    assert body["data"]["username"] == "alice"
    assert "id" in body["data"]
    assert "password_hash" not in body["data"]  # Le password ne doit pas être retourné


def test_register_duplicate_email(client):
    """Test : impossible de créer 2 users avec le même email"""
    register(client, email="dup@example.com")
    response = register(client, email="dup@example.com")
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Email already in use"}


def test_register_duplicate_username(client):
    register(client, username="bob")
    response = register(client, username="bob")
    assert response.status_code == 400
    assert response.json()["message"] == "Username already in use"


def test_register_invalid_email(client):
    response = register(client, email="pas-un-email")
    assert response.status_code == 400
    assert response.json()["success"] == False


def test_login_success(client):
    """Test : se connecter avec succès"""
    register(client, email="login@example.com")
    response = client.post("/api/auth/login", json={
        "email": "login@example.com",
        "password": "password123"
    })
    assert response.status_code == 200
    data = response.json()
    assert data["success"] == True
    assert "access_token" in data
    assert "refresh_token" in data
    assert data["token_type"] == "bearer"


def test_login_wrong_password(client):
    """Test : impossible de se connecter avec un mauvais password"""
    register(client, email="wrongpass@example.com", password="correctpassword")
    response = client.post("/api/auth/login", json={
        "email": "wrongpass@example.com",
        "password": "wrongpassword"
    })
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid email or password"}


def test_login_unknown_email(client):
    response = client.post("/api/auth/login", json={
        "email": "nobody@example.com",
        "password": "password123"
    })
    assert response.status_code == 401


def test_login_token_gives_access_to_tasks(client):
    register(client, email="flow@example.com")
    token = client.post("/api/auth/login", json={
        "email": "flow@example.com",
        "password": "password123"
    }).json()["access_token"]

    response = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["success"] == True


def test_refresh_success(client, user):
    refresh_token = create_refresh_token(user.id, user.email)
    response = client.post("/api/auth/refresh", json={"refresh_token": refresh_token})
    assert response.status_code == 200
    data = response.json()
    assert data["refresh_token"] == refresh_token
    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200


def test_refresh_rejects_access_token(client, headers):
    access_token = headers["Authorization"].split(" ")[1]
    response = client.post("/api/auth/refresh", json={"refresh_token": access_token})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid refresh token"


def test_refresh_token_rejected_as_access_token(client, user):
    refresh_token = create_refresh_token(user.id, user.email)
    response = client.get("/api/tasks", headers={"Authorization": f"Bearer {refresh_token}"})
    assert response.status_code == 401


def test_me(client, user, headers):
    response = client.get("/api/auth/me", headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["id"] == user.id


def test_me_deleted_user(client, user, headers, db):
    db.delete(user)
    db.commit()
    response = client.get("/api/auth/me", headers=headers)
    assert response.status_code == 401
    assert response.json()["message"] == "Token is not valid"


def test_wrong_auth_scheme(client, headers):
    token = headers["Authorization"].split(" ")[1]
    response = client.get("/api/auth/me", headers={"Authorization": f"Basic {token}"})
    assert response.status_code == 401


def test_health_z(client):
    """Test : l'endpoint health fonctionne"""
    response = client.get("/health/z")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok"}
