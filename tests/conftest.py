import pytest

from api.app import create_app
from finance_core.ledger import Ledger
from finance_core.storage import JSONStorage, MemoryStorage


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def ledger(storage):
    return Ledger(storage)


@pytest.fixture
def json_storage(tmp_path):
    return JSONStorage(tmp_path / "data")


@pytest.fixture
def app(ledger):
    flask_app = create_app(ledger=ledger)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()
