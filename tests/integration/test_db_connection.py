import os

import pytest

from referrals.api.db_access import DatabaseClient
from referrals.api.ddl import apply_referral_ddl
from tests.api.support import build_test_config

if os.getenv("RUN_DB_INTEGRATION") != "1":
    pytest.skip("Set RUN_DB_INTEGRATION=1 to run database integration tests", allow_module_level=True)


@pytest.mark.integration
def test_schema_applies_on_configured_database() -> None:
    database_url = os.environ["DATABASE_URL"]
    db = DatabaseClient(database_url=database_url)
    if not db.can_connect():
        pytest.skip("Configured database unavailable in local test environment")

    apply_referral_ddl(db.engine, build_test_config(database_url=database_url))
    assert db.table_exists("referrals")
    assert db.table_exists("users")
