"""Pytest configuration and shared fixtures for azauth tests."""

import pytest

from azauth.settings import EnvironmentSettings
from azauth.testing import StaticTokenCredential


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear Azure and test-related environment variables before each test.

    This prevents a developer's own Azure login or service principal from
    leaking into credential resolution tests.
    """
    import os

    test_prefixes = ("TEST_", "AZURE_", "MSI_", "IDENTITY_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def settings():
    """Public cloud settings with no credentials."""
    return EnvironmentSettings()


@pytest.fixture
def credential():
    return StaticTokenCredential("static-token")


class RecordingCredential(StaticTokenCredential):
    """Stand-in for azure-identity credential classes, keeping constructor kwargs."""

    instances: list["RecordingCredential"] = []

    def __init__(self, *args, **kwargs):
        super().__init__("recorded-token")
        self.args = args
        self.kwargs = kwargs
        RecordingCredential.instances.append(self)


@pytest.fixture
def recording_credential():
    RecordingCredential.instances = []
    yield RecordingCredential
    RecordingCredential.instances = []
