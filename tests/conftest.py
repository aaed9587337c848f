"""Common fixtures for the Growatt portal tests."""

from unittest.mock import patch

import pytest

from growatt_portal import Credentials, GrowattPortal

from . import PASSWORD, USERNAME


@pytest.fixture
def client() -> GrowattPortal:
    """Return a fresh client that has not logged in."""
    return GrowattPortal()


@pytest.fixture
def mock_request(client: GrowattPortal):
    """Patch the transport of the client.

    Tests set ``return_value`` or ``side_effect`` to script the portal's
    answers and inspect ``call_args`` to check what was sent.
    """
    with patch.object(client.session, "request") as mock:
        yield mock


@pytest.fixture
def logged_in_client(client: GrowattPortal, mock_request) -> GrowattPortal:
    """Return a client with a valid session and stored credentials."""
    client.credentials = Credentials(USERNAME, PASSWORD)
    client.state.mark_logged_in("session-token")
    return client
