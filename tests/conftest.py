import os

# Must be set before arkvault.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "1024")
os.environ.setdefault("ARGON2_PARALLELISM", "1")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from arkvault import models
from arkvault.crypto import Cipher
from arkvault.database import get_db
from arkvault.dependencies import get_cipher, get_mailer
from arkvault.errors import MailerError
from arkvault.main import app

TEST_KEY = "test-vault-key"


class FakeMailer:
    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, to, subject, body):
        if self.fail:
            raise MailerError("SMTP server refused the message")
        self.sent.append((to, subject, body))


@pytest.fixture(scope="session")
def cipher():
    return Cipher(TEST_KEY, iterations=1000)


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    models.base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def client(db_session, cipher, mailer):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cipher] = lambda: cipher
    app.dependency_overrides[get_mailer] = lambda: mailer

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


def login(client, email="alice@example.com", password="correct horse battery"):
    client.post("/auth/signup", json={"email": email, "password": password, "full_name": "Test User"})
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    return login(client)
