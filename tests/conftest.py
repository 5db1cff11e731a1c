from __future__ import annotations

import pytest

from api import create_app
from models import storage
from models.user import User
from utils.security import hash_password, generate_storage_dir

from helpers import ALICE_PASSWORD, BOB_PASSWORD

TEST_SECRET = "test-secret-key-for-testing-only-do-not-use-in-production"


@pytest.fixture
def app(tmp_path):
    app = create_app(
        "testing",
        overrides={
            "JWT_SECRET": TEST_SECRET,
            "DATABASE_URL": f"sqlite:///{tmp_path / 'test.db'}",
            "BLOB_STORAGE_ROOT": str(tmp_path / "blobs"),
        },
    )
    yield app
    storage.close()
    storage.engine.dispose()


def _add_user(app, username: str, password_hash: str) -> dict:
    with app.app_context():
        user = User(
            username=username,
            pass_hash=password_hash,
            storage_dir=generate_storage_dir(),
        )
        user.save()
        return {"id": user.id, "username": user.username, "storage_dir": user.storage_dir}


@pytest.fixture
def alice(app):
    return _add_user(app, "alice", hash_password(ALICE_PASSWORD))


@pytest.fixture
def bob(app):
    return _add_user(app, "bob", hash_password(BOB_PASSWORD))


@pytest.fixture
def legacy_user(app):
    bcrypt_hash = "$2b$12$KIXQJj3Q0x1mZ0z9Qb6mUe6eQb1QnO2mQeY0wY7QJ3p6fXvV3uJ1W"
    return _add_user(app, "legacy", bcrypt_hash)


@pytest.fixture
def client(app):
    # Cookies are sent explicitly so tests control exactly what the server sees
    return app.test_client(use_cookies=False)
