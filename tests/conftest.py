import mongomock
import pytest
from fastapi.testclient import TestClient

from votebox.main import create_app
from votebox.storage import MemStorage
from votebox.storage_mongo import MongoStorage

ADMIN_USERNAME = "UNIQUE"
ADMIN_PASSWORD = "UNIQUE123"


def make_mongo_storage():
    return MongoStorage(mongomock.MongoClient()["votebox_test"])


@pytest.fixture(params=["memory", "mongo"])
def storage(request):
    if request.param == "memory":
        return MemStorage()
    return make_mongo_storage()


@pytest.fixture
def mongo_storage():
    return make_mongo_storage()


@pytest.fixture
def client(storage):
    storage.create_admin(ADMIN_USERNAME, ADMIN_PASSWORD)
    app = create_app(storage=storage, seed=False, eligible_voters=None)
    with TestClient(app) as test_client:
        yield test_client
