"""Unit tests for ProcessSubscription use case

Tests cover:
- Installment recorded and date advanced for an ongoing subscription
- Deactivation once the installment allowance is exhausted
- Subscriptions that changed since selection are skipped
"""

import pytest
from datetime import date
from unittest.mock import AsyncMock

from src.app.use_cases.subscriptions.process_subscription import ProcessSubscription
from src.domain.subscription import Installment
from src.domain.subscription_state import SubscriptionState


@pytest.fixture
def process_use_case(mock_uow, mock_subscription_repo, mock_installment_repo):
    mock_installment_repo.create = AsyncMock(
        side_effect=lambda installment: Installment(
            id=501,
            subscription_id=installment.subscription_id,
            actionable_date=installment.actionable_date,
        )
    )
    return ProcessSubscription(
        uow=mock_uow,
        subscription_repo=mock_subscription_repo,
        installment_repo=mock_installment_repo,
    )


@pytest.mark.asyncio
class TestProcessSubscription:

    async def test_records_installment_and_advances(
        self,
        process_use_case,
        mock_subscription_repo,
        mock_installment_repo,
        mock_uow,
        make_subscription,
        make_line_item,
        today,
    ):
        """
        Given: Active subscription due 2024-01-13 with 12 installments allowed
        When: processed on 2024-01-15
        Then: Installment recorded for 2024-01-13, next date 2024-02-13
        """
        # Arrange
        subscription = make_subscription(actionable_date=date(2024, 1, 13))
        mock_subscription_repo.get_by_id = AsyncMock(return_value=subscription)
        mock_subscription_repo.get_line_item = AsyncMock(return_value=make_line_item(max_installments=12))
        mock_installment_repo.count_by_subscription = AsyncMock(return_value=1)

        # Act
        result = await process_use_case.execute(1, today)

        # Assert
        assert result.is_ok()
        assert result.value.installment_id == 501
        assert result.value.deactivated is False
        assert result.value.actionable_date == date(2024, 2, 13)
        created_installment = mock_installment_repo.create.call_args.args[0]
        assert created_installment.actionable_date == date(2024, 1, 13)
        assert subscription.actionable_date == date(2024, 2, 13)
        mock_uow.commit.assert_called_once()

    async def test_deactivates_on_last_installment(
        self,
        process_use_case,
        mock_subscription_repo,
        mock_installment_repo,
        make_subscription,
        make_line_item,
        today,
    ):
        # Arrange
        subscription = make_subscription(actionable_date=today)
        mock_subscription_repo.get_by_id = AsyncMock(return_value=subscription)
        mock_subscription_repo.get_line_item = AsyncMock(return_value=make_line_item(max_installments=3))
        mock_installment_repo.count_by_subscription = AsyncMock(side_effect=[2, 3])

        # Act
        result = await process_use_case.execute(1, today)

        # Assert
        assert result.value.deactivated is True
        assert result.value.state == SubscriptionState.INACTIVE
        assert subscription.actionable_date is None
        assert result.value.installment_id == 501
        mock_installment_repo.create.assert_called_once()

    @pytest.mark.parametrize("max_installments,recorded", [(0, 0), (2, 2)])
    async def test_exhausted_allowance_is_retired_without_billing(
        self,
        process_use_case,
        mock_subscription_repo,
        mock_installment_repo,
        mock_uow,
        make_subscription,
        make_line_item,
        today,
        max_installments,
        recorded,
    ):
        """
        Given: Actionable subscription whose allowance is already used up
        When: processed
        Then: Deactivated with no new installment
        """
        # Arrange
        subscription = make_subscription(actionable_date=today)
        mock_subscription_repo.get_by_id = AsyncMock(return_value=subscription)
        mock_subscription_repo.get_line_item = AsyncMock(
            return_value=make_line_item(max_installments=max_installments)
        )
        mock_installment_repo.count_by_subscription = AsyncMock(return_value=recorded)

        # Act
        result = await process_use_case.execute(1, today)

        # Assert
        assert result.value.deactivated is True
        assert result.value.installment_id is None
        assert result.value.state == SubscriptionState.INACTIVE
        assert subscription.actionable_date is None
        mock_installment_repo.create.assert_not_called()
        mock_uow.commit.assert_called_once()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"state": "canceled"},
            {"state": "pending_cancellation"},
            {"actionable_date": None},
            {"actionable_date": date(2024, 1, 16)},
        ],
    )
    async def test_skips_subscription_no_longer_actionable(
        self,
        process_use_case,
        mock_subscription_repo,
        mock_installment_repo,
        mock_uow,
        make_subscription,
        today,
        overrides,
    ):
        # Arrange
        mock_subscription_repo.get_by_id = AsyncMock(return_value=make_subscription(**overrides))

        # Act
        result = await process_use_case.execute(1, today)

        # Assert
        assert result.error.code == "NOT_ACTIONABLE"
        mock_installment_repo.create.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_zero_interval_rolls_back_installment(
        self,
        process_use_case,
        mock_subscription_repo,
        mock_installment_repo,
        mock_uow,
        make_subscription,
        today,
    ):
        # Arrange
        mock_subscription_repo.get_by_id = AsyncMock(
            return_value=make_subscription(actionable_date=today, interval_length=0)
        )
        mock_installment_repo.count_by_subscription = AsyncMock(return_value=1)

        # Act
        result = await process_use_case.execute(1, today)

        # Assert
        assert result.error.code == "INVALID_TRANSITION"
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()
