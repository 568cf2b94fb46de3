import os
import sys
from pathlib import Path
import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path so 'src' is importable during tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("SUPABASE_DISABLED", "1")
os.environ["USE_LOCAL_DB"] = "0"
# no subscription endpoint: the client serves the in-memory table
os.environ.pop("SUBSCRIPTION_API_URL", None)


@pytest.fixture(scope="session")
def client() -> TestClient:
    # lazy import after env configured
    from src.main import create_app

    app = create_app()
    return TestClient(app)


@pytest.fixture()
def auth_header() -> dict[str, str]:
    # any token is accepted in disabled mode
    return {"Authorization": "Bearer test-token"}


@pytest.fixture(autouse=True)
def reset_in_memory_state():
    from src.infrastructure.billing.subscription_client import _MEM_SUBSCRIPTIONS
    from src.infrastructure.cache.query_cache import get_query_cache
    from src.infrastructure.database.repositories.profile_repository import _MEM_PROFILES
    from src.infrastructure.database.supabase_client import _REVOKED_TOKENS

    yield
    _MEM_PROFILES.clear()
    _MEM_SUBSCRIPTIONS.clear()
    _REVOKED_TOKENS.clear()
    get_query_cache().clear()


@pytest.fixture
def session():
    from src.domain.entities.session import SessionEntity

    return SessionEntity(access_token="tok-123", user_id="user_1", email="ada@x.com")
