"""
Shared fixtures.

Every test gets its own data directory under tmp_path, so no test
sees another test's collections. Async code is driven with asyncio.run.
"""

import pytest

from finance_tracker.auth import PasswordHasher
from finance_tracker.config import AuthSettings
from finance_tracker.orchestrator import create_app_components
from finance_tracker.services.storage import JsonFileRecordStore


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def store(data_dir):
    return JsonFileRecordStore(data_dir=data_dir, indent=2, retry_attempts=3)


@pytest.fixture
def hasher():
    return PasswordHasher(["pbkdf2_sha256"])


@pytest.fixture
def auth_settings():
    return AuthSettings(jwt_secret="test-secret", token_expires_minutes=60)


@pytest.fixture
def app(store, hasher):
    return create_app_components(store=store, hasher=hasher, configure_logs=False)
