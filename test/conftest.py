"""
Test Configuration and Fixtures

This module provides:
- Environment setup before any application module reads settings
- A fresh SQLite database per integration test (BEGIN IMMEDIATE serializes writers)
- A controllable clock and ready-made principals

Architecture:
- Unit tests (test/**/unit/): mocks only, marked ``unit``
- Integration tests (test/**/integration/): real repositories on a throwaway SQLite file
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings are read at import time (core_setting.settings, loguru sinks)
# =============================================================================
import os
from pathlib import Path
import tempfile


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    # The API tests boot the real lifespan; point it at a scratch database
    scratch_dir = Path(tempfile.mkdtemp(prefix='venue_access_test_'))
    os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{scratch_dir / "api.db"}'
    os.environ['AUTO_CREATE_TABLES'] = 'true'
    os.environ['ENABLE_BACKGROUND_JOBS'] = 'false'
    os.environ['POS_USE_STUB_FETCHER'] = 'true'
    os.environ['SECRET_KEY'] = 'test_secret_key'
    os.environ['POS_SYNC_BACKOFF_SECONDS'] = '0'
    os.environ['POS_INGEST_RETRY_BASE_DELAY_SECONDS'] = '0'
    os.environ['RESERVE_RETRY_BASE_DELAY_SECONDS'] = '0'


_early_setup_test_environment()

from collections.abc import AsyncGenerator  # noqa: E402
from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402

from src.platform.database.orm_db_setting import Database  # noqa: E402
from src.service.shared_kernel.domain.entity.principal_entity import (  # noqa: E402
    Principal,
    PrincipalRole,
)
from test.fixed_clock import FixedClock  # noqa: E402
from test.test_constants import (  # noqa: E402
    ADMIN_ID,
    CUSTOMER_ID,
    OTHER_VENUE_ID,
    STAFF_ID,
    VENUE_ID,
)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database, None]:
    """Fresh schema for every test; no cross-test cleanup needed."""
    db = Database(url=f'sqlite+aiosqlite:///{tmp_path / "test.db"}')
    await db.create_db_and_tables()
    yield db
    await db.dispose()


@pytest.fixture
def staff() -> Principal:
    return Principal(id=STAFF_ID, role=PrincipalRole.STAFF, venue_ids=[VENUE_ID])


@pytest.fixture
def other_venue_staff() -> Principal:
    return Principal(id=STAFF_ID + 1, role=PrincipalRole.STAFF, venue_ids=[OTHER_VENUE_ID])


@pytest.fixture
def admin() -> Principal:
    return Principal(id=ADMIN_ID, role=PrincipalRole.ADMIN)


@pytest.fixture
def customer() -> Principal:
    return Principal(id=CUSTOMER_ID, role=PrincipalRole.CUSTOMER)
