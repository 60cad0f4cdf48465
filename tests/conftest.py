"""
Shared test fixtures and utilities.

Apps are built with ``TestingConfig`` (in-memory storage, oracles pointed at
fake hosts). Nothing here talks to the network: oracle tests inject fake HTTP
sessions and route tests replace the eligibility check.
"""

from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest

from nft_vote import create_app
from nft_vote.config import TestingConfig
from nft_vote.models import EligibilityResult
from nft_vote.models.eligibility import SOURCE_PRIMARY
from nft_vote.services import get_services


class FakeClock:
    """Deterministic stand-in for ``datetime.utcnow``."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def fake_response(status: int = 200, json_data=None, json_error: Exception | None = None) -> MagicMock:
    """Build an object that quacks like ``requests.Response``."""
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 400
    response.reason = "OK" if response.ok else "Error"
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def app():
    return create_app(TestingConfig)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    with app.app_context():
        yield get_services()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def login(app):
    """
    Create (or reuse) an email user and return ``(user, headers)``.

    Usage:
        user, headers = login("voter@example.com")
    """
    def _login(email: str = "voter@example.com"):
        with app.app_context():
            services = get_services()
            user = services.users.get_or_create_by_email(email)
            token = services.tokens.issue(user)
        return user, bearer(token)

    return _login


@pytest.fixture
def eligible_everyone(services, monkeypatch):
    """Make every ownership check report one NFT."""
    monkeypatch.setattr(
        services.eligibility,
        "check",
        lambda user: EligibilityResult(nft_count=1, policy_id="policy123", source=SOURCE_PRIMARY),
    )


@pytest.fixture
def eligible_nobody(services, monkeypatch):
    """Make every ownership check report a confirmed zero."""
    monkeypatch.setattr(
        services.eligibility,
        "check",
        lambda user: EligibilityResult(nft_count=0, policy_id="policy123", source=SOURCE_PRIMARY),
    )
