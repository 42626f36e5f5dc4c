"""Global pytest fixtures and configuration."""

import socket
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from httpharness.models.response import ResponseMetadata  # noqa: E402


def find_free_port() -> int:
    """Ask the OS for a port nobody is listening on right now."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def free_port():
    """A currently unused TCP port on 127.0.0.1."""
    return find_free_port()


@pytest.fixture
def ok_metadata():
    """Metadata of a plain 200 text response."""
    return ResponseMetadata(
        status_code=200,
        reason="OK",
        headers={"Content-Type": "text/plain; charset=utf-8"},
    )


@pytest.fixture
def mock_transport(ok_metadata):
    """Transport whose dispatch() returns a response with body 'Hello world!'."""
    response = MagicMock()
    response.metadata = ok_metadata
    response.read = MagicMock(return_value=b"Hello world!")

    transport = MagicMock()
    transport.dispatch = MagicMock(return_value=response)
    return transport
