"""
Test Configuration and Fixtures

- Environment is set before any application import (settings are read at import time)
- All tests run against the in-memory stores (STORAGE_BACKEND=memory)
- Container singletons are reset around every test so stores start empty
- PostgreSQL store tests live under integration/ and skip when no database is reachable
- BDD step definitions (imported from bdd_steps_loader.py)
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    os.environ['STORAGE_BACKEND'] = 'memory'
    os.environ['NOTIFICATION_CHANNEL'] = 'log'
    os.environ.setdefault('POSTGRES_DB', 'event_inventory_test_db')
    # No backoff between ledger retries in tests
    os.environ['LEDGER_RETRY_WAIT_MIN'] = '0'
    os.environ['LEDGER_RETRY_WAIT_MAX'] = '0'
    os.environ['ARCHIVE_RECORD_WAIT_SECONDS'] = '0'

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)


_early_setup_test_environment()

from collections.abc import Generator  # noqa: E402

from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402

from src.platform.config.di import container  # noqa: E402
from test.bdd_steps_loader import *  # noqa: E402, F401, F403


@pytest.fixture(autouse=True)
def reset_container() -> Generator[None, None, None]:
    """Fresh in-memory stores, ledger and dispatcher for every test."""
    container.reset_singletons()
    yield
    container.reset_singletons()


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """TestClient running the real lifespan (DI wiring, notification worker)."""
    from src.main import app

    with TestClient(app) as test_client:
        yield test_client
