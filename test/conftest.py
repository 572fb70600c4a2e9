"""
Test Configuration and Fixtures

Architecture:
- Unit tests (test/**/unit/): use cases and domain objects wired to in-memory fakes
- API tests (test/**/api/): FastAPI TestClient with DI providers overridden by the
  same in-memory fakes, so no Postgres is needed
- Integration tests (test/**/integration/): SQL adapters against a real PostgreSQL
  test database; see test/service/ticketing/integration/conftest.py
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings are read once at import time (src.platform.config.core_setting)
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    worker_id = os.environ.get('PYTEST_XDIST_WORKER', 'master')
    if worker_id == 'master':
        os.environ['POSTGRES_DB'] = 'ticket_inventory_test_db'
    else:
        os.environ['POSTGRES_DB'] = f'ticket_inventory_test_db_{worker_id}'

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    # Retry loops must not sleep in tests
    os.environ['RETRY_BASE_DELAY_SECONDS'] = '0'
    os.environ['RETRY_MAX_DELAY_SECONDS'] = '0'
    os.environ.setdefault('DB_POOL_SIZE', '2')
    os.environ.setdefault('DB_POOL_MAX_OVERFLOW', '2')


# Call immediately to set env vars before any imports
_early_setup_test_environment()

import pytest  # noqa: E402

from test.service.ticketing.in_memory_adapters import InMemoryTicketingStore  # noqa: E402


@pytest.fixture
def store() -> InMemoryTicketingStore:
    return InMemoryTicketingStore()
