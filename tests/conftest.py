from datetime import datetime, timezone

import pytest

from rentops.core.config import Settings
from tests.fakes import FakeObjectStore, FakePaymentRepository

CUTOFF = datetime(2025, 11, 1, tzinfo=timezone.utc)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove variables that would leak into Settings from the host."""
    for name in (
        "SUPABASE_URL",
        "SUPABASE_SERVICE_ROLE",
        "PROOFS_BUCKET",
        "PROOFS_FOLDER",
        "PAYMENTS_TABLE",
        "CLEANUP_CUTOFF_DATE",
        "CLEANUP_BATCH_SIZE",
        "PRUNE_CUTOFF",
        "PRUNE_PAGE_SIZE",
        "R2_ENDPOINT",
        "R2_ACCESS_KEY_ID",
        "R2_SECRET_ACCESS_KEY",
        "R2_BUCKET_NAME",
        "LOG_LEVEL",
        "LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings(clean_env):
    return Settings(
        _env_file=None,
        supabase_url="https://project.supabase.co",
        supabase_service_role="service-role-key",
    )


@pytest.fixture
def store():
    return FakeObjectStore(bucket="proofs")


@pytest.fixture
def payments():
    return FakePaymentRepository()
