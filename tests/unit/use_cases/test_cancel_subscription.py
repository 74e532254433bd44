"""Unit tests for CancelSubscription use case

Tests cover:
- Immediate cancellation when the guard holds
- Deferred cancellation (pending_cancellation) when it does not
- Idempotent cancel, invalid transitions, not found
- Store failures propagate after rollback
"""

import pytest
from datetime import date, timedelta
from unittest.mock import AsyncMock

from src.app.use_cases.subscriptions.cancel_subscription import CancelSubscription
from src.domain.subscription_state import SubscriptionState


@pytest.fixture
def cancel_use_case(mock_uow, mock_subscription_repo):
    return CancelSubscription(uow=mock_uow, subscription_repo=mock_subscription_repo)


@pytest.mark.asyncio
class TestCancelSubscription:

    async def test_cancels_subscription(
        self, cancel_use_case, mock_subscription_repo, mock_uow, make_subscription, today
    ):
        """
        Given: Active subscription due in two weeks
        When: cancel is executed
        Then: Subscription is canceled and persisted
        """
        # Arrange
        subscription = make_subscription(actionable_date=today + timedelta(days=14))
        mock_subscription_repo.get_by_id = AsyncMock(return_value=subscription)

        # Act
        result = await cancel_use_case.execute(1, today)

        # Assert
        assert result.is_ok()
        assert result.value.state == SubscriptionState.CANCELED
        assert result.value.applied is True
        assert subscription.state == SubscriptionState.CANCELED
        mock_subscription_repo.get_by_id.assert_called_once_with(1, for_update=True)
        mock_subscription_repo.update.assert_called_once_with(subscription)
        mock_uow.commit.assert_called_once()

    async def test_defers_cancellation_when_cycle_is_imminent(
        self, cancel_use_case, mock_subscription_repo, mock_uow, make_subscription, today
    ):
        """
        Given: Active subscription due today
        When: cancel is executed
        Then: Subscription is pending cancellation and the result is still ok
        """
        # Arrange
        subscription = make_subscription(actionable_date=today)
        mock_subscription_repo.get_by_id = AsyncMock(return_value=subscription)

        # Act
        result = await cancel_use_case.execute(1, today)

        # Assert
        assert result.is_ok()
        assert result.value.state == SubscriptionState.PENDING_CANCELLATION
        assert result.value.applied is False
        assert subscription.state == SubscriptionState.PENDING_CANCELLATION
        mock_uow.commit.assert_called_once()

    async def test_uses_configured_notice(
        self, mock_uow, mock_subscription_repo, make_subscription, today
    ):
        # Arrange
        use_case = CancelSubscription(
            uow=mock_uow,
            subscription_repo=mock_subscription_repo,
            minimum_notice=timedelta(days=7),
        )
        mock_subscription_repo.get_by_id = AsyncMock(
            return_value=make_subscription(actionable_date=today + timedelta(days=5))
        )

        # Act
        result = await use_case.execute(1, today)

        # Assert
        assert result.value.state == SubscriptionState.PENDING_CANCELLATION

    async def test_canceling_canceled_subscription_is_noop(
        self, cancel_use_case, mock_subscription_repo, mock_uow, make_subscription, today
    ):
        # Arrange
        mock_subscription_repo.get_by_id = AsyncMock(
            return_value=make_subscription(state="canceled")
        )

        # Act
        result = await cancel_use_case.execute(1, today)

        # Assert
        assert result.is_ok()
        assert result.value.state == SubscriptionState.CANCELED
        mock_subscription_repo.update.assert_not_called()

    async def test_inactive_subscription_returns_invalid_transition(
        self, cancel_use_case, mock_subscription_repo, mock_uow, make_subscription, today
    ):
        # Arrange
        mock_subscription_repo.get_by_id = AsyncMock(
            return_value=make_subscription(state="inactive")
        )

        # Act
        result = await cancel_use_case.execute(1, today)

        # Assert
        assert result.is_err()
        assert result.error.code == "INVALID_TRANSITION"
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()

    async def test_missing_subscription(
        self, cancel_use_case, mock_subscription_repo, mock_uow, today
    ):
        # Arrange
        mock_subscription_repo.get_by_id = AsyncMock(return_value=None)

        # Act
        result = await cancel_use_case.execute(99, today)

        # Assert
        assert result.is_err()
        assert result.error.code == "SUBSCRIPTION_NOT_FOUND"

    async def test_store_failure_propagates(
        self, cancel_use_case, mock_subscription_repo, mock_uow, make_subscription, today
    ):
        """
        Given: The store fails while persisting
        When: cancel is executed
        Then: The transaction is rolled back and the error is re-raised unchanged
        """
        # Arrange
        mock_subscription_repo.get_by_id = AsyncMock(
            return_value=make_subscription(actionable_date=today + timedelta(days=30))
        )
        mock_subscription_repo.update = AsyncMock(side_effect=RuntimeError("database is locked"))

        # Act & Assert
        with pytest.raises(RuntimeError, match="database is locked"):
            await cancel_use_case.execute(1, today)
        mock_uow.rollback.assert_called_once()
