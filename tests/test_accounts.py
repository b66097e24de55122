from unittest.mock import MagicMock

import pytest

from main import create_app
from teleka.api.repositories import InMemoryAccountRepository
from teleka.api.services.account_service import AccountError, AccountService

ADMIN = {"email": "admin@example.com", "password": "secret"}
DRIVER = {"name": "Okello", "email": "okello@example.com", "password": "pw", "license": "L1", "nationalId": "N1"}


@pytest.fixture
def repository():
    return InMemoryAccountRepository()


@pytest.fixture
def client(repository):
    app, _ = create_app(repository=repository, maps=MagicMock())
    app.testing = True
    return app.test_client()


def test_customer_register_and_login(client):
    data = {"name": "Amina", "email": "amina@example.com", "password": "pw", "phone": "0700"}
    assert client.post("/api/register/customer", json=data).status_code == 200

    dup = client.post("/api/register/customer", json=data)
    assert dup.status_code == 400
    assert dup.get_json()["message"] == "User already exists."

    ok = client.post("/api/login", json={"role": "customer", "email": "amina@example.com", "password": "pw"})
    assert ok.get_json()["message"] == "Welcome Amina"

    bad = client.post("/api/login", json={"role": "customer", "email": "amina@example.com", "password": "no"})
    assert bad.status_code == 401


def test_driver_approval_flow(client):
    assert client.post("/api/register/driver", json=DRIVER).status_code == 200
    assert client.post("/api/register/driver", json=DRIVER).status_code == 400

    pending = client.get("/api/pending-drivers").get_json()
    assert len(pending) == 1
    assert pending[0]["nationalId"] == "N1"
    assert "password" not in pending[0]

    login = {"role": "driver", "email": DRIVER["email"], "password": "pw"}
    assert client.post("/api/login", json=login).status_code == 401

    assert client.post("/api/approve-driver", json={"index": 0}).status_code == 200
    assert client.get("/api/pending-drivers").get_json() == []
    assert client.post("/api/login", json=login).get_json()["message"] == "Driver logged in"


def test_reject_unknown_driver(client):
    resp = client.post("/api/reject-driver", json={"index": 3})
    assert resp.status_code == 404


def test_pending_driver_cannot_log_in(repository):
    service = AccountService(repository, admin_credentials=ADMIN)
    service.register_driver(DRIVER)
    driver = service.approve_driver(0)
    driver.approved = False  # e.g. suspended later

    with pytest.raises(AccountError) as exc:
        service.login("driver", DRIVER["email"], "pw")
    assert exc.value.status == 403


def test_admin_login_and_invalid_role(repository):
    service = AccountService(repository, admin_credentials=ADMIN)
    assert service.login("admin", "admin@example.com", "secret") == "Welcome Admin"
    with pytest.raises(AccountError) as exc:
        service.login("admin", "admin@example.com", "wrong")
    assert exc.value.status == 401
    with pytest.raises(AccountError) as exc:
        service.login("pilot", "x", "y")
    assert exc.value.status == 400


def test_notifications_feed_is_last_five_newest_first(repository):
    service = AccountService(repository, admin_credentials=ADMIN)
    for i in range(7):
        service.register_driver(dict(DRIVER, name=f"Driver {i}", email=f"d{i}@example.com"))

    feed = service.notifications()
    assert len(feed) == 5
    assert feed[0].message == "New driver registration: Driver 6"
    assert feed[-1].message == "New driver registration: Driver 2"


def test_notifier_receives_booking(repository):
    delivered = []
    service = AccountService(repository, notifier=delivered.append, admin_credentials=ADMIN)
    service.create_booking({"name": "Amina", "pickup": "Kampala", "destination": "Entebbe"})

    assert len(delivered) == 1
    assert delivered[0].booking["pickup"] == "Kampala"


def test_notifier_failure_does_not_break_workflow(repository):
    notifier = MagicMock(side_effect=RuntimeError("socket gone"))
    service = AccountService(repository, notifier=notifier, admin_credentials=ADMIN)
    service.register_driver(DRIVER)
    assert len(service.notifications()) == 1


def test_booking_endpoint(client):
    resp = client.post("/api/bookings", json={"name": "Amina", "pickup": "A", "destination": "B"})
    assert resp.status_code == 201
    assert resp.get_json()["booking"]["destination"] == "B"

    missing = client.post("/api/bookings", json={"name": "Amina"})
    assert missing.status_code == 400

    feed = client.get("/api/notifications").get_json()
    assert feed[0]["message"].startswith("New booking from Amina")


def test_fare_settings(client):
    assert client.get("/api/fare-settings").get_json() == {"baseFare": 2.0, "commission": 10}
    assert client.post("/api/fare-settings", json={"baseFare": 3.5, "commission": 12}).status_code == 200
    assert client.get("/api/fare-settings").get_json() == {"baseFare": 3.5, "commission": 12}
    assert client.post("/api/fare-settings", json={"baseFare": "cheap"}).status_code == 400
