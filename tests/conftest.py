"""Shared pytest fixtures and configuration for dynapi tests."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from dynapi import ServiceContainer, use_exception_handler
from dynapi.api.middleware import RequestIdMiddleware
from dynapi.config.settings import DynamicAPISettings, reset_settings
from sample.authorization import GrantAuthorizationService


@pytest.fixture(autouse=True)
def clean_settings():
    """Ensure every test reads a freshly built settings instance."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings():
    """Settings independent of the process environment."""
    return DynamicAPISettings()


@pytest.fixture
def container():
    return ServiceContainer()


@pytest.fixture
def authorization():
    return GrantAuthorizationService()


@pytest.fixture
def bare_app(settings):
    """FastAPI app with the problem-response handlers and no controllers."""
    app = FastAPI()
    app.add_middleware(RequestIdMiddleware)
    use_exception_handler(app, settings)
    return app


@pytest.fixture
def sample_app(settings):
    from sample.main import create_app

    return create_app(settings)


@pytest.fixture
def client(sample_app):
    """TestClient for the sample application."""
    return TestClient(sample_app)
