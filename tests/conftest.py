"""
Donation Hub - Test Configuration and Fixtures
"""
import os

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.pool import StaticPool

# Set testing environment before the app reads its settings
os.environ['ENVIRONMENT'] = 'test'
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['JWT_SECRET'] = 'test-jwt-secret-key-for-testing'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['LOG_LEVEL'] = 'WARNING'

from main import create_app
from database import Database
from models import Account, Role
from auth import get_password_hash, create_access_token

USER_PASSWORD = 'password123'
ADMIN_PASSWORD = 'adminpassword123'


def make_account(database: Database, username: str, password: str, role: Role) -> Account:
    with database.SessionLocal() as db:
        account = Account(
            username=username,
            email=f'{username}@test.com',
            password=get_password_hash(password),
            role=role,
        )
        db.add(account)
        db.commit()
        db.refresh(account)
        return account


def bearer(account) -> dict:
    return {'Authorization': f'Bearer {create_access_token(account)}'}


@pytest.fixture
def database():
    """Fresh in-memory database for each test"""
    database = Database('sqlite://', poolclass=StaticPool)
    database.init()
    yield database
    database.shutdown()


@pytest.fixture
def app(database):
    return create_app(database)


@pytest.fixture
async def client(app):
    """Create test client bound to the per-test app"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac


@pytest.fixture
def user(database) -> Account:
    """Create a regular test user"""
    return make_account(database, 'testuser', USER_PASSWORD, Role.USER)


@pytest.fixture
def admin(database) -> Account:
    """Create an admin test user"""
    return make_account(database, 'admin', ADMIN_PASSWORD, Role.ADMIN)


@pytest.fixture
def user_headers(user) -> dict:
    """Authentication headers for the test user"""
    return bearer(user)


@pytest.fixture
def admin_headers(admin) -> dict:
    """Authentication headers for the admin user"""
    return bearer(admin)
