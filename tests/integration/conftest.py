"""Pytest configuration for integration tests.

This module provides integration-test-specific fixtures that ensure
proper test isolation and mocking for API endpoint tests.
"""

from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def mock_ollama_client(mock_ollama):
    """Mock OllamaClient for all integration tests.

    This fixture patches the OllamaClient class before the app is created,
    ensuring the lifespan uses our mock instead of creating a real client.
    """
    with patch("conductor_server.app.OllamaClient") as mock_client_class:
        # Return the mock instance when OllamaClient is instantiated
        mock_client_class.return_value = mock_ollama

        yield mock_ollama
