import mongomock
import pytest
from fastapi.testclient import TestClient

from votebox import config
from votebox.crud import login_admin, seed_defaults, turnout_percentage
from votebox.hash_existing_admin_passwords import hash_existing_passwords
from votebox.main import create_app
from votebox.security import hash_password, is_hashed, verify_password
from votebox.storage import MemStorage
from votebox.storage_mongo import MongoStorage


def test_plaintext_password_is_direct_comparison():
    assert not is_hashed("UNIQUE123")
    assert verify_password("UNIQUE123", "UNIQUE123")
    assert not verify_password("unique123", "UNIQUE123")


def test_hashed_password():
    hashed = hash_password("s3cret")
    assert hashed != "s3cret"
    assert is_hashed(hashed)
    assert verify_password("s3cret", hashed)
    assert not verify_password("other", hashed)
    # The hash itself is not a valid password
    assert not verify_password(hashed, hashed)


def test_login_admin(storage):
    storage.create_admin("root", "pw")
    admin, error = login_admin(storage, "root", "pw")
    assert error is None
    assert admin.username == "root"
    assert login_admin(storage, "root", "nope") == (None, "Invalid username or password")
    assert login_admin(storage, "ghost", "pw") == (None, "Invalid username or password")


def test_seed_defaults_is_idempotent(storage):
    samples = [{"name": "A", "experience": "x"}, {"name": "B", "experience": "y"}]
    first = seed_defaults(storage, "root", "pw", sample_candidates=samples)
    second = seed_defaults(storage, "root", "changed", sample_candidates=samples)
    assert first == second
    assert second.password == "pw"
    assert [c.name for c in storage.list_candidates()] == ["A", "B"]


def test_seed_skips_candidates_when_store_not_empty(storage):
    storage.create_candidate("Existing", "x")
    seed_defaults(storage, "root", "pw", sample_candidates=[{"name": "A", "experience": "x"}])
    assert [c.name for c in storage.list_candidates()] == ["Existing"]


def test_seed_hashed_admin_can_log_in():
    storage = MemStorage()
    admin = seed_defaults(storage, "root", "pw", hash_admin_password=True)
    assert is_hashed(admin.password)
    with TestClient(create_app(storage=storage, seed=False)) as client:
        resp = client.post("/api/admin/login", json={"username": "root", "password": "pw"})
        assert resp.status_code == 200
        assert resp.json()["admin"] == {"id": admin.id, "username": "root"}


def test_create_app_seeds_configured_defaults(monkeypatch):
    monkeypatch.setattr(config, "ADMIN_USERNAME", "operator")
    monkeypatch.setattr(config, "ADMIN_PASSWORD", "letmein")
    monkeypatch.setattr(config, "HASH_ADMIN_PASSWORDS", False)
    monkeypatch.setattr(config, "SEED_SAMPLE_CANDIDATES", True)
    storage = MemStorage()
    with TestClient(create_app(storage=storage)) as client:
        names = [c["name"] for c in client.get("/api/candidates").json()]
        assert names == [c["name"] for c in config.SAMPLE_CANDIDATES]
        resp = client.post("/api/admin/login", json={"username": "operator", "password": "letmein"})
        assert resp.status_code == 200


@pytest.mark.parametrize("total, eligible, expected", [
    (10, None, None),
    (10, 0, None),
    (0, 40, "0.0"),
    (10, 40, "25.0"),
    (1, 3, "33.3"),
])
def test_turnout_percentage(total, eligible, expected):
    assert turnout_percentage(total, eligible) == expected


def test_hash_existing_admin_passwords():
    db = mongomock.MongoClient()["votebox_test"]
    storage = MongoStorage(db)
    storage.create_admin("plain", "pw1")
    storage.create_admin("already", hash_password("pw2"))

    assert hash_existing_passwords(db) == 1
    assert hash_existing_passwords(db) == 0

    plain = storage.get_admin_by_username("plain")
    assert is_hashed(plain.password)
    assert login_admin(storage, "plain", "pw1")[1] is None
    assert login_admin(storage, "already", "pw2")[1] is None
