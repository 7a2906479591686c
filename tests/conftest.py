"""
Shared fixtures for the userhub test suite.
"""
import pytest
from fastapi.testclient import TestClient
from userhub.app import create_app
from userhub.config import Settings
from userhub.modules.users.repositories.user_repository import InMemoryUserRepository
from userhub.modules.users.services.user_service import UserService


@pytest.fixture
def repository():
    """Fresh in-memory user store."""
    return InMemoryUserRepository()


@pytest.fixture
def service(repository):
    return UserService(repository)


@pytest.fixture
def app(repository):
    return create_app(settings=Settings(log_level="DEBUG"), repository=repository)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def valid_user_body():
    return {"firstName": "Ivan", "lastName": "Petrov", "login": "ivan42"}
