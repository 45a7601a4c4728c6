import pytest
from unittest.mock import MagicMock

from backend.caption_service.config import CaptionSettings
from backend.gateway.server import create_app


class RecordingClient:
    """Stands in for OpenRouterClient and records every prompt it receives."""

    def __init__(self, reply="Caption A\nCaption B", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def settings():
    return CaptionSettings(api_key="test-key")


@pytest.fixture
def fake_client():
    return RecordingClient()


@pytest.fixture
def app(settings, fake_client):
    app = create_app(settings=settings, client=fake_client)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def upstream_response():
    """
    Builds a fake requests.Response.
    """
    def _build(body, status_code=200, reason="OK"):
        response = MagicMock()
        response.status_code = status_code
        response.reason = reason
        response.text = body
        return response
    return _build


@pytest.fixture
def make_app(settings):
    """
    Builds an app around a RecordingClient that fails with `error`.
    """
    def _build(error=None, app_settings=None):
        fake = RecordingClient(error=error)
        app = create_app(settings=app_settings or settings, client=fake)
        app.config["TESTING"] = True
        return app, fake
    return _build
