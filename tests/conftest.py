import os
import tempfile

import pytest

# app.py initialises the store at import time; keep that away from the repo.
os.environ.setdefault('KV_DB_PATH', os.path.join(tempfile.mkdtemp(), 'import.db'))
os.environ.pop('DATABASE_URL', None)
os.environ.pop('RESEND_API_KEY', None)

import database  # noqa: E402

VALID_TOKEN = 'valid-token'
USER_ID = 'user-123'


def fake_verifier(token):
    if token == VALID_TOKEN:
        return {'id': USER_ID, 'email': 'faculty@rntu.edu.in'}
    return None


@pytest.fixture
def store(tmp_path, monkeypatch):
    monkeypatch.setattr(database, 'DB_PATH', str(tmp_path / 'kv.db'))
    monkeypatch.delenv('RESEND_API_KEY', raising=False)
    database.init_database()
    return database


@pytest.fixture
def client(store):
    from app import app
    app.config['TESTING'] = True
    app.config['TOKEN_VERIFIER'] = fake_verifier
    with app.test_client() as client:
        yield client


@pytest.fixture
def auth_headers():
    return {'Authorization': f'Bearer {VALID_TOKEN}'}
