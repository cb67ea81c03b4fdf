from collections.abc import Callable, Generator
from typing import Any, Dict, List, Optional

from fastapi.testclient import TestClient
import jwt
import pytest

from src.platform.config.core_setting import settings


@pytest.fixture(scope='session')
def client() -> Generator[TestClient, None, None]:
    from src.main import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture(scope='session')
def bearer() -> Callable[..., Dict[str, str]]:
    """Authorization header for a token the identity service would have issued."""

    def _bearer(
        *, user_id: int, role: str, venue_ids: Optional[List[int]] = None, **claims: Any
    ) -> Dict[str, str]:
        token = jwt.encode(
            {'user_id': user_id, 'role': role, 'venue_ids': venue_ids or [], **claims},
            settings.SECRET_KEY.get_secret_value(),
            algorithm=settings.ALGORITHM,
        )
        return {'Authorization': f'Bearer {token}'}

    return _bearer
