import sys
from pathlib import Path

# Ajoute la racine du projet au PYTHONPATH EN PREMIER
sys.path.insert(0, str(Path(__file__).parent.parent))

import uuid

import pytest
from fastapi.testclient import TestClient

from app.core.database import Database
from app.core.security import create_access_token
from app.main import create_app
from app.models.user import User


@pytest.fixture
def database(tmp_path):
    """Base SQLite dédiée à chaque test"""
    return Database(f"sqlite:///{tmp_path / 'test.db'}")


@pytest.fixture
def application(database):
    return create_app(database=database)


@pytest.fixture
def client(application):
    """Client de test FastAPI (le lifespan ouvre/ferme la DB)"""
    with TestClient(application) as c:
        yield c


@pytest.fixture
def db(client, database):
    """Session DB pour les tests"""
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def make_user(db):
    """Crée un utilisateur directement en base"""
    def _make_user(password: str = "password123") -> User:
        unique_id = str(uuid.uuid4())[:8]
        user = User(email=f"user{unique_id}@test.com", username=f"user{unique_id}")
        user.set_password(password)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def other_user(make_user):
    return make_user()


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def headers(user):
    return auth_headers(user)


@pytest.fixture
def other_headers(other_user):
    return auth_headers(other_user)
