# conftest.py - Configuration for pytest
# Fixtures shared across the test modules.

import datetime
import socket

import pytest
from unittest.mock import MagicMock, AsyncMock

from google.oauth2.credentials import Credentials

import config
from gmail_client import GmailClient
from token_store import TokenStore

@pytest.fixture(autouse=True)
def reset_debug_mode(monkeypatch):
    """Keep --debug from leaking between tests."""
    monkeypatch.setattr(config, 'DEBUG_MODE', False)

@pytest.fixture
def sample_creds():
    """Credentials that are valid until 2099 and carry a refresh token."""
    return Credentials(
        token="access-token",
        refresh_token="refresh-token",
        token_uri="https://oauth2.googleapis.com/token",
        client_id="client-id.apps.googleusercontent.com",
        client_secret="client-secret",
        scopes=config.SCOPES,
        expiry=datetime.datetime(2099, 1, 1, 12, 0, 0),
    )

@pytest.fixture
def token_path(tmp_path):
    return str(tmp_path / "token.json")

@pytest.fixture
def mocked_token_store():
    """Provides a MagicMock for the TokenStore, mocking its interface."""
    mock = MagicMock(spec=TokenStore)
    mock.path = "token.json"
    return mock

@pytest.fixture
def mocked_gmail_interface():
    """Provides a MagicMock for the GmailClient, mocking its interface."""
    mock = MagicMock(spec=GmailClient)
    mock.connect = MagicMock()
    mock.list_page = AsyncMock(return_value=([], None))
    mock.batch_delete = AsyncMock()
    return mock

@pytest.fixture
def free_port():
    """A loopback port that was free a moment ago."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]
