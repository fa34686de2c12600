from arkvault.models import Activity, SharedPassword
from tests.test_passwords import ENTRY, create


def test_share_sends_mail_and_records(client, auth_headers, mailer):
    created = create(client, auth_headers)
    response = client.post(f"/passwords/{created['id']}/share",
                           json={"recipient_email": "bob@example.com", "message": "for the deploy"},
                           headers=auth_headers)
    assert response.status_code == 201
    record = response.json()
    assert record["recipient_email"] == "bob@example.com"
    assert record["password_title"] == "GitHub"

    to, subject, body = mailer.sent[0]
    assert to == "bob@example.com"
    assert "GitHub" in subject
    assert ENTRY["password"] in body
    assert "for the deploy" in body

    shared = client.get("/shared", headers=auth_headers).json()
    assert [s["id"] for s in shared] == [record["id"]]

    feed = client.get("/activity", headers=auth_headers).json()
    assert feed[0]["activity_type"] == "shared"
    assert "bob@example.com" in feed[0]["title"]


def test_failed_mail_records_nothing(client, auth_headers, mailer, db_session):
    created = create(client, auth_headers)
    mailer.fail = True

    response = client.post(f"/passwords/{created['id']}/share",
                           json={"recipient_email": "bob@example.com"}, headers=auth_headers)
    assert response.status_code == 502
    assert db_session.query(SharedPassword).count() == 0


def test_share_requires_valid_email(client, auth_headers):
    created = create(client, auth_headers)
    response = client.post(f"/passwords/{created['id']}/share",
                           json={"recipient_email": "not-an-email"}, headers=auth_headers)
    assert response.status_code == 422


def test_share_record_survives_entry_deletion(client, auth_headers):
    created = create(client, auth_headers)
    client.post(f"/passwords/{created['id']}/share", json={"recipient_email": "bob@example.com"},
                headers=auth_headers)
    client.delete(f"/passwords/{created['id']}", headers=auth_headers)

    shared = client.get("/shared", headers=auth_headers).json()
    assert len(shared) == 1
    assert shared[0]["password_title"] == "GitHub"


def test_long_share_activity_title_fits_column(client, auth_headers, db_session):
    created = create(client, auth_headers, title="T" * 200)
    recipient = "r" * 64 + "@" + "d" * 60 + ".example.com"

    response = client.post(f"/passwords/{created['id']}/share", json={"recipient_email": recipient},
                           headers=auth_headers)
    assert response.status_code == 201

    title = db_session.query(Activity).filter(Activity.activity_type == "shared").one().title
    assert len(title) <= Activity.title.type.length
    assert title.endswith("...")
