"""
Tests for CORS configuration.
"""
import pathlib

import pytest

from main import get_cors_origins


@pytest.fixture
def cors_env(monkeypatch):
    def _set(allowed_origins, environment):
        monkeypatch.setenv("ALLOWED_ORIGINS", allowed_origins)
        monkeypatch.setenv("ENVIRONMENT", environment)
    return _set


def test_cors_development_default(cors_env):
    """
    In development mode without ALLOWED_ORIGINS set, wildcard is used by default.
    """
    cors_env("", "development")
    assert get_cors_origins() == ["*"], "Development should default to wildcard"


def test_cors_production_requires_explicit_origins(cors_env):
    cors_env("", "production")

    with pytest.raises(ValueError, match="ALLOWED_ORIGINS must be explicitly set in production"):
        get_cors_origins()


def test_cors_production_rejects_wildcard(cors_env):
    cors_env("https://example.com,*", "production")

    with pytest.raises(ValueError, match="Wildcard '\\*' is not allowed in ALLOWED_ORIGINS for production"):
        get_cors_origins()


def test_cors_multiple_origins(cors_env):
    cors_env("https://example.com, https://app.example.com,https://admin.example.com", "production")

    origins = get_cors_origins()

    assert origins == [
        "https://example.com",
        "https://app.example.com",
        "https://admin.example.com",
    ]


def test_cors_methods_and_headers_configured():
    """
    The middleware only needs GET/POST/OPTIONS and the JSON/auth headers.
    """
    main_path = pathlib.Path(__file__).parent.parent / "main.py"
    content = main_path.read_text(encoding="utf-8")

    assert 'allow_methods=["GET", "POST", "OPTIONS"]' in content, \
        "CORS middleware should allow GET, POST, and OPTIONS methods"
    assert 'allow_headers=["Authorization", "Content-Type"]' in content, \
        "CORS middleware should allow Authorization and Content-Type headers"
