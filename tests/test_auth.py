from datetime import datetime, timedelta, timezone

from arkvault.models import AuthToken, MailerConfig
from tests.conftest import login


def test_ping(client):
    assert client.get("/ping").json() == {"status": "running"}


def test_signup_and_me(client):
    response = client.post("/auth/signup", json={"email": "Bob@Example.com", "password": "s3cret-pass"})
    assert response.status_code == 201
    assert response.json()["email"] == "bob@example.com"

    headers = login(client, "bob@example.com", "s3cret-pass")
    me = client.get("/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["email"] == "bob@example.com"


def test_duplicate_signup(client):
    body = {"email": "carol@example.com", "password": "s3cret-pass"}
    assert client.post("/auth/signup", json=body).status_code == 201
    assert client.post("/auth/signup", json=body).status_code == 409


def test_password_hash_is_not_plaintext(client, db_session):
    from arkvault.models import User

    client.post("/auth/signup", json={"email": "dan@example.com", "password": "s3cret-pass"})
    user = db_session.query(User).filter(User.email == "dan@example.com").one()
    assert user.password_hash.startswith("$argon2id$")


def test_bad_login(client):
    client.post("/auth/signup", json={"email": "erin@example.com", "password": "s3cret-pass"})
    response = client.post("/auth/login", json={"email": "erin@example.com", "password": "wrong-pass"})
    assert response.status_code == 401


def test_requires_token(client):
    assert client.get("/passwords").status_code == 401
    assert client.get("/passwords", headers={"Authorization": "Bearer nope"}).status_code == 401


def test_logout_revokes_token(client, auth_headers):
    assert client.post("/auth/logout", headers=auth_headers).status_code == 200
    assert client.get("/auth/me", headers=auth_headers).status_code == 401


def test_expired_token(client, db_session, auth_headers):
    token = db_session.get(AuthToken, auth_headers["Authorization"].split()[1])
    token.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    db_session.commit()

    assert client.get("/auth/me", headers=auth_headers).status_code == 401


def test_update_full_name(client, auth_headers):
    response = client.put("/auth/me", json={"full_name": "Alice Liddell"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["full_name"] == "Alice Liddell"
    assert client.get("/activity", headers=auth_headers).json()[0]["activity_type"] == "profile_updated"


def test_change_password(client, auth_headers):
    other_session = login(client)

    response = client.put("/auth/me", json={
        "current_password": "correct horse battery", "new_password": "new horse battery",
    }, headers=auth_headers)
    assert response.status_code == 200

    assert client.get("/auth/me", headers=auth_headers).status_code == 200
    assert client.get("/auth/me", headers=other_session).status_code == 401

    old = client.post("/auth/login", json={"email": "alice@example.com", "password": "correct horse battery"})
    assert old.status_code == 401
    login(client, password="new horse battery")


def test_change_password_needs_current_password(client, auth_headers):
    response = client.put("/auth/me", json={"current_password": "wrong", "new_password": "new horse battery"},
                          headers=auth_headers)
    assert response.status_code == 400
    assert client.put("/auth/me", json={"new_password": "short"}, headers=auth_headers).status_code == 422


def test_mailer_config_password_is_encrypted(client, auth_headers, db_session, cipher):
    assert client.get("/auth/me/mailer", headers=auth_headers).status_code == 404

    response = client.put("/auth/me/mailer", json={
        "host": "smtp.gmail.com", "username": "alice@example.com", "password": "app-password",
    }, headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["port"] == 465 and body["use_ssl"] is True
    assert body["has_password"] is True
    assert "password" not in body

    row = db_session.query(MailerConfig).one()
    assert row.encrypted_password != "app-password"
    assert cipher.decrypt(row.encrypted_password) == "app-password"

    # omitting the password keeps the stored one
    client.put("/auth/me/mailer", json={"host": "smtp.example.com"}, headers=auth_headers)
    db_session.expire_all()
    assert cipher.decrypt(db_session.query(MailerConfig).one().encrypted_password) == "app-password"

    assert client.delete("/auth/me/mailer", headers=auth_headers).status_code == 200
    assert client.get("/auth/me/mailer", headers=auth_headers).status_code == 404
