"""
Pytest fixtures for Quinzena backend tests.

Provides test database setup, user/auth fixtures, a local JSON repository
and the test client.
"""

import pytest
from quinzena import create_app
from quinzena.extensions import db
from quinzena.models import ROLE_USER
from quinzena.repositories import LocalFinancialRepository
from quinzena.services import auth_service


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'STORAGE_BACKEND': 'sql',
        'GEMINI_API_KEY': None,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def local_repo(tmp_path):
    """Local JSON repository in a per-test directory."""
    return LocalFinancialRepository(tmp_path / "store.json")


@pytest.fixture(scope='function')
def admin_user(db_session):
    """Default administrator (ADM / 123456)."""
    return auth_service.ensure_default_admin()


@pytest.fixture(scope='function')
def regular_user(db_session):
    return auth_service.create_user(
        username="ana",
        password="segredo1",
        name="Ana Silva",
        role=ROLE_USER,
    )


@pytest.fixture(scope='function')
def other_user(db_session):
    return auth_service.create_user(
        username="bruno",
        password="segredo2",
        name="Bruno Costa",
        role=ROLE_USER,
    )


@pytest.fixture(scope='function')
def admin_headers(client, admin_user):
    return auth_headers(get_auth_token(client, "ADM", "123456"))


@pytest.fixture(scope='function')
def user_headers(client, regular_user):
    return auth_headers(get_auth_token(client, "ana", "segredo1"))


@pytest.fixture(scope='function')
def other_headers(client, other_user):
    return auth_headers(get_auth_token(client, "bruno", "segredo2"))


def get_auth_token(client, username: str, password: str) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}
