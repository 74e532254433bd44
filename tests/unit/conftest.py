import pytest
from datetime import date
from unittest.mock import AsyncMock, MagicMock

from src.domain.subscription import Subscription, LineItem


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def mock_subscription_repo():
    """Mock subscription repository"""
    repo = MagicMock()
    repo.update = AsyncMock(side_effect=lambda subscription: subscription)
    repo.get_line_item = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def mock_installment_repo():
    """Mock installment repository"""
    return MagicMock()


@pytest.fixture
def today():
    return date(2024, 1, 15)


@pytest.fixture
def make_subscription():
    """Factory for Subscription entities"""

    def _make(**overrides):
        values = {
            "id": 1,
            "user_id": "user_123",
            "state": "active",
            "actionable_date": date(2024, 1, 20),
            "interval_length": 1,
            "interval_units": "month",
            "end_date": None,
        }
        values.update(overrides)
        return Subscription(**values)

    return _make


@pytest.fixture
def make_line_item():
    def _make(**overrides):
        values = {
            "id": 1,
            "subscription_id": 1,
            "subscribable_id": "variant_42",
            "quantity": 1,
            "max_installments": None,
        }
        values.update(overrides)
        return LineItem(**values)

    return _make
