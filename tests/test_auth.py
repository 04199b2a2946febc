from sqlmodel import Session

from reqtrace.core.security import create_access_token
from reqtrace.models.user import User


def test_me_provisions_user_from_token_claims(client, engine):
    token = create_access_token({"sub": "42", "name": "Nora", "email": "nora@example.com"})

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == 42
    assert data["name"] == "Nora"
    with Session(engine) as session:
        assert session.get(User, 42).email == "nora@example.com"


def test_me_reuses_existing_user(client, engine):
    with Session(engine) as session:
        session.add(User(id=7, name="Existing"))
        session.commit()
    token = create_access_token({"sub": "7", "name": "Renamed in IdP"})

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["name"] == "Existing"


def test_invalid_token_returns_401_with_message(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json() == {"message": "Could not validate credentials"}


def test_missing_token_returns_401(client):
    response = client.get("/api/requirements/project/1")
    assert response.status_code == 401
    assert "message" in response.json()
