# CASHBOOK/backend/tests/conftest.py : configuration pour les tests

import os
import sys
from pathlib import Path

# Ajoute le dossier parent au PYTHONPATH
BASE_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(BASE_DIR))

# Base de données de test (doit être définie avant l'import de cashbook.config)
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

import pytest
from fastapi.testclient import TestClient
from cashbook.main import app
from cashbook.database import SessionLocal, engine, get_db, create_tables, drop_tables

DEFAULT_PASSWORD = "Test123!"

@pytest.fixture
def db_engine():
    """Tables créées avant chaque test et supprimées après"""
    create_tables(bind=engine)
    yield engine
    drop_tables(bind=engine)

@pytest.fixture
def db_session(db_engine):
    """Session de base de données pour chaque test"""
    session = SessionLocal()
    yield session
    session.close()

@pytest.fixture
def client(db_session):
    """Client de test avec la base de données de test"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()

def auth_headers(client, phone, password=DEFAULT_PASSWORD):
    response = client.post("/users/login", json={"phone": phone, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}

@pytest.fixture
def owner(client):
    """Premier utilisateur inscrit: le propriétaire"""
    response = client.post("/users/register", json={
        "full_name": "Owner",
        "phone": "01700000000",
        "password": DEFAULT_PASSWORD
    })
    assert response.status_code == 200, response.text
    user = response.json()
    return {"user": user, "headers": auth_headers(client, user["phone"])}

@pytest.fixture
def make_staff(client, owner):
    """Fabrique d'employés créés par le propriétaire"""
    counter = {"n": 0}

    def _make_staff(**flags):
        counter["n"] += 1
        payload = {
            "full_name": f"Staff {counter['n']}",
            "phone": f"0180000000{counter['n']}",
            "password": DEFAULT_PASSWORD,
            **flags
        }
        response = client.post("/users/", json=payload, headers=owner["headers"])
        assert response.status_code == 200, response.text
        user = response.json()
        return {"user": user, "headers": auth_headers(client, user["phone"])}

    return _make_staff

@pytest.fixture
def category(client, owner):
    response = client.post("/categories/", json={"name": "Boutique"}, headers=owner["headers"])
    assert response.status_code == 200, response.text
    return response.json()

@pytest.fixture
def make_cashbook(client, owner, category):
    """Fabrique de cashbooks créés par le propriétaire"""
    def _make_cashbook(name="Caisse principale", staff_ids=(), headers=None):
        response = client.post("/cashbooks/", json={
            "category_id": category["id"],
            "name": name,
            "staff_ids": list(staff_ids)
        }, headers=headers or owner["headers"])
        assert response.status_code == 200, response.text
        return response.json()

    return _make_cashbook

@pytest.fixture
def post_entry(client, owner):
    def _post_entry(cashbook_id, type="IN", amount=100.0, headers=None, **extra):
        return client.post(f"/cashbooks/{cashbook_id}/entries", json={
            "type": type,
            "amount": amount,
            **extra
        }, headers=headers or owner["headers"])

    return _post_entry
