"""Unit tests for DeactivateSubscription use case"""

import pytest
from unittest.mock import AsyncMock

from src.app.use_cases.subscriptions.deactivate_subscription import DeactivateSubscription
from src.domain.subscription_state import SubscriptionState


@pytest.fixture
def deactivate_use_case(mock_uow, mock_subscription_repo, mock_installment_repo):
    return DeactivateSubscription(
        uow=mock_uow,
        subscription_repo=mock_subscription_repo,
        installment_repo=mock_installment_repo,
    )


@pytest.mark.asyncio
class TestDeactivateSubscription:

    async def test_deactivates_when_allowance_is_zero(
        self,
        deactivate_use_case,
        mock_subscription_repo,
        mock_installment_repo,
        mock_uow,
        make_subscription,
        make_line_item,
    ):
        """
        Given: Line item with max_installments = 0
        When: deactivate is executed
        Then: Subscription is inactive, actionable date cleared, deactivated=True
        """
        # Arrange
        subscription = make_subscription()
        mock_subscription_repo.get_by_id = AsyncMock(return_value=subscription)
        mock_subscription_repo.get_line_item = AsyncMock(return_value=make_line_item(max_installments=0))
        mock_installment_repo.count_by_subscription = AsyncMock(return_value=0)

        # Act
        result = await deactivate_use_case.execute(1)

        # Assert
        assert result.is_ok()
        assert result.value.deactivated is True
        assert result.value.state == SubscriptionState.INACTIVE
        assert subscription.state == SubscriptionState.INACTIVE
        assert subscription.actionable_date is None
        mock_subscription_repo.update.assert_called_once_with(subscription)
        mock_uow.commit.assert_called_once()

    async def test_deactivates_when_installments_exhausted(
        self,
        deactivate_use_case,
        mock_subscription_repo,
        mock_installment_repo,
        make_subscription,
        make_line_item,
    ):
        # Arrange
        mock_subscription_repo.get_by_id = AsyncMock(return_value=make_subscription())
        mock_subscription_repo.get_line_item = AsyncMock(return_value=make_line_item(max_installments=6))
        mock_installment_repo.count_by_subscription = AsyncMock(return_value=6)

        # Act
        result = await deactivate_use_case.execute(1)

        # Assert
        assert result.value.deactivated is True
        mock_installment_repo.count_by_subscription.assert_called_once_with(1)

    async def test_returns_false_when_not_exhausted(
        self,
        deactivate_use_case,
        mock_subscription_repo,
        mock_installment_repo,
        make_subscription,
        make_line_item,
    ):
        """
        Given: Line item without an installment limit
        When: deactivate is executed
        Then: deactivated=False, state unchanged, nothing written
        """
        # Arrange
        subscription = make_subscription()
        mock_subscription_repo.get_by_id = AsyncMock(return_value=subscription)
        mock_subscription_repo.get_line_item = AsyncMock(return_value=make_line_item())
        mock_installment_repo.count_by_subscription = AsyncMock(return_value=12)

        # Act
        result = await deactivate_use_case.execute(1)

        # Assert
        assert result.is_ok()
        assert result.value.deactivated is False
        assert result.value.state == SubscriptionState.ACTIVE
        assert subscription.state == "active"
        mock_subscription_repo.update.assert_not_called()

    async def test_subscription_without_line_item_is_not_deactivated(
        self, deactivate_use_case, mock_subscription_repo, mock_installment_repo, make_subscription
    ):
        # Arrange
        mock_subscription_repo.get_by_id = AsyncMock(return_value=make_subscription())
        mock_installment_repo.count_by_subscription = AsyncMock(return_value=0)

        # Act
        result = await deactivate_use_case.execute(1)

        # Assert
        assert result.value.deactivated is False

    async def test_missing_subscription(
        self, deactivate_use_case, mock_subscription_repo, mock_uow
    ):
        # Arrange
        mock_subscription_repo.get_by_id = AsyncMock(return_value=None)

        # Act
        result = await deactivate_use_case.execute(1)

        # Assert
        assert result.is_err()
        assert result.error.code == "SUBSCRIPTION_NOT_FOUND"
        mock_uow.rollback.assert_called_once()
