from tests.api.conftest import login_as


def test_change_email_flow(client, api_users, api_email):
    login_as(client, "alice")

    r = client.post("/api/v2/auth/request-change-email", json={"new_email": "a2@x.com"})
    assert r.status_code == 200
    assert api_email.calls[-1]["template_id"] == 10002

    r = client.post(
        "/api/v2/auth/verify-otp",
        json={"email": "a2@x.com", "username": "alice", "otp": api_email.last_otp},
    )
    token = r.json()["data"]["token"]

    r = client.post(
        "/api/v2/auth/change-email", json={"new_email": "a2@x.com", "token": token}
    )
    assert r.status_code == 200
    assert r.json()["data"] == {"new_email": "a2@x.com", "username": "alice"}
    assert api_users.updates == [(1, {"email": "a2@x.com"})]


def test_change_email_needs_session(client):
    r = client.post("/api/v2/auth/request-change-email", json={"new_email": "a2@x.com"})
    assert r.status_code == 401


def test_change_email_to_taken_address(client):
    login_as(client, "alice")
    r = client.post(
        "/api/v2/auth/request-change-email", json={"new_email": "bob@example.com"}
    )
    assert r.status_code == 409
    assert r.json()["error"] == 22


def test_reset_password_flow(client, api_users, api_email):
    r = client.post(
        "/api/v2/auth/request-reset-password", json={"email": "bob@example.com"}
    )
    assert r.status_code == 200
    assert api_email.calls[-1]["params"]["username"] == "bob"

    r = client.post(
        "/api/v2/auth/verify-otp",
        json={"email": "bob@example.com", "username": None, "otp": api_email.last_otp},
    )
    token = r.json()["data"]["token"]

    r = client.post(
        "/api/v2/auth/reset-password",
        json={"email": "bob@example.com", "new_password": "N3wPassword", "token": token},
    )
    assert r.status_code == 200
    assert r.json()["data"] == {"email": "bob@example.com", "username": "bob"}
    assert api_users.updates == [(2, {"password": "hashed-N3wPassword"})]

    login_as(client, "bob", "N3wPassword")


def test_reset_password_for_unknown_email(client, api_email):
    r = client.post(
        "/api/v2/auth/request-reset-password", json={"email": "ghost@example.com"}
    )
    assert r.status_code == 404
    assert r.json()["error"] == 20
    assert api_email.calls == []
