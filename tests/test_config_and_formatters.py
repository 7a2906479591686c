"""
Tests for settings loading and content negotiation helpers.
"""
import pytest
from starlette.requests import Request
from userhub.app import create_app
from userhub.config import Settings
from userhub.modules.users.api.formatters import to_xml, wants_xml
from userhub.modules.users.repositories.user_repository import (
    DatabaseUserRepository,
    InMemoryUserRepository,
)


def make_request(accept: str) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/users",
        "headers": [(b"accept", accept.encode())],
        "query_string": b"",
    }
    return Request(scope)


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///./users.db")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.example, http://b.example")

    settings = Settings.from_env()

    assert settings.database_url == "sqlite:///./users.db"
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ["http://a.example", "http://b.example"]


def test_settings_defaults(monkeypatch):
    for name in ("DATABASE_URL", "LOG_LEVEL", "CORS_ORIGINS", "APP_TITLE"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.database_url is None
    assert settings.log_level == "INFO"
    assert settings.cors_origins == ["*"]


def test_create_app_picks_repository_from_settings():
    in_memory = create_app(settings=Settings())
    assert isinstance(in_memory.state.user_service.repository, InMemoryUserRepository)

    sql = create_app(settings=Settings(database_url="sqlite:///./users.db"))
    assert isinstance(sql.state.user_service.repository, DatabaseUserRepository)


@pytest.mark.parametrize("accept, expected", [
    ("", False),
    ("application/json", False),
    ("application/xml", True),
    ("text/xml", True),
    ("application/json;q=0.5, application/xml", True),
    ("application/xml;q=0.2, application/json", False),
    ("*/*", False),
])
def test_wants_xml(accept, expected):
    assert wants_xml(make_request(accept)) is expected


def test_to_xml_list_uses_item_tag():
    xml = to_xml([{"login": "a"}, {"login": "b"}], "ArrayOfUser")
    assert b"<ArrayOfUser><User><login>a</login></User><User><login>b</login></User></ArrayOfUser>" in xml


def test_to_xml_marks_nulls():
    assert b'<lastName nil="true" />' in to_xml({"lastName": None}, "User")
