"""Unit tests for actionable date use cases

Tests cover:
- AdvanceActionableDate persists and returns the next date
- PreviewNextActionableDate computes the same date without writing
- UnsetActionableDate clears the date idempotently
- Precondition failures surface as INVALID_TRANSITION
"""

import pytest
from datetime import date
from unittest.mock import AsyncMock

from src.app.use_cases.subscriptions.advance_actionable_date import AdvanceActionableDate
from src.app.use_cases.subscriptions.preview_next_actionable_date import PreviewNextActionableDate
from src.app.use_cases.subscriptions.unset_actionable_date import UnsetActionableDate


@pytest.mark.asyncio
class TestAdvanceActionableDate:

    async def test_advances_and_persists(
        self, mock_uow, mock_subscription_repo, make_subscription, today
    ):
        """
        Given: Monthly subscription actionable today
        When: advance is executed
        Then: New date is today + 1 month, written and committed
        """
        # Arrange
        subscription = make_subscription(actionable_date=today)
        mock_subscription_repo.get_by_id = AsyncMock(return_value=subscription)
        use_case = AdvanceActionableDate(mock_uow, mock_subscription_repo)

        # Act
        result = await use_case.execute(1)

        # Assert
        assert result.is_ok()
        assert result.value.actionable_date == date(2024, 2, 15)
        assert subscription.actionable_date == date(2024, 2, 15)
        mock_subscription_repo.update.assert_called_once_with(subscription)
        mock_uow.commit.assert_called_once()

    async def test_clears_date_past_end_date(
        self, mock_uow, mock_subscription_repo, make_subscription, today
    ):
        # Arrange
        subscription = make_subscription(actionable_date=today, end_date=date(2024, 1, 31))
        mock_subscription_repo.get_by_id = AsyncMock(return_value=subscription)
        use_case = AdvanceActionableDate(mock_uow, mock_subscription_repo)

        # Act
        result = await use_case.execute(1)

        # Assert
        assert result.is_ok()
        assert result.value.actionable_date is None
        assert subscription.actionable_date is None

    async def test_missing_actionable_date_is_invalid(
        self, mock_uow, mock_subscription_repo, make_subscription
    ):
        # Arrange
        mock_subscription_repo.get_by_id = AsyncMock(
            return_value=make_subscription(actionable_date=None)
        )
        use_case = AdvanceActionableDate(mock_uow, mock_subscription_repo)

        # Act
        result = await use_case.execute(1)

        # Assert
        assert result.is_err()
        assert result.error.code == "INVALID_TRANSITION"
        mock_subscription_repo.update.assert_not_called()
        mock_uow.rollback.assert_called_once()

    async def test_zero_interval_is_invalid(
        self, mock_uow, mock_subscription_repo, make_subscription
    ):
        # Arrange
        mock_subscription_repo.get_by_id = AsyncMock(
            return_value=make_subscription(interval_length=0)
        )
        use_case = AdvanceActionableDate(mock_uow, mock_subscription_repo)

        # Act
        result = await use_case.execute(1)

        # Assert
        assert result.error.code == "INVALID_TRANSITION"

    async def test_canceled_subscription_is_invalid(
        self, mock_uow, mock_subscription_repo, make_subscription
    ):
        # Arrange
        mock_subscription_repo.get_by_id = AsyncMock(
            return_value=make_subscription(state="canceled")
        )
        use_case = AdvanceActionableDate(mock_uow, mock_subscription_repo)

        # Act
        result = await use_case.execute(1)

        # Assert
        assert result.error.code == "INVALID_TRANSITION"


@pytest.mark.asyncio
class TestPreviewNextActionableDate:

    async def test_previews_without_writing(
        self, mock_subscription_repo, make_subscription, today
    ):
        """
        Given: Monthly subscription actionable today
        When: preview is executed twice
        Then: Both return today + 1 month and the entity is untouched
        """
        # Arrange
        subscription = make_subscription(actionable_date=today)
        mock_subscription_repo.get_by_id = AsyncMock(return_value=subscription)
        use_case = PreviewNextActionableDate(mock_subscription_repo)

        # Act
        first = await use_case.execute(1)
        second = await use_case.execute(1)

        # Assert
        assert first.value.actionable_date == date(2024, 2, 15)
        assert second.value == first.value
        assert subscription.actionable_date == today
        mock_subscription_repo.get_by_id.assert_called_with(1)
        mock_subscription_repo.update.assert_not_called()

    async def test_preview_missing_subscription(self, mock_subscription_repo):
        # Arrange
        mock_subscription_repo.get_by_id = AsyncMock(return_value=None)

        # Act
        result = await PreviewNextActionableDate(mock_subscription_repo).execute(5)

        # Assert
        assert result.error.code == "SUBSCRIPTION_NOT_FOUND"

    async def test_preview_without_actionable_date(self, mock_subscription_repo, make_subscription):
        # Arrange
        mock_subscription_repo.get_by_id = AsyncMock(
            return_value=make_subscription(actionable_date=None)
        )

        # Act
        result = await PreviewNextActionableDate(mock_subscription_repo).execute(1)

        # Assert
        assert result.error.code == "INVALID_TRANSITION"

    @pytest.mark.parametrize("state", ["canceled", "inactive", "pending_cancellation"])
    async def test_preview_rejects_states_that_cannot_advance(
        self, mock_uow, mock_subscription_repo, make_subscription, state
    ):
        """
        Given: Subscription that keeps its actionable date but cannot be advanced
        When: preview and advance are executed
        Then: Both return INVALID_TRANSITION
        """
        # Arrange
        mock_subscription_repo.get_by_id = AsyncMock(return_value=make_subscription(state=state))

        # Act
        preview = await PreviewNextActionableDate(mock_subscription_repo).execute(1)
        advance = await AdvanceActionableDate(mock_uow, mock_subscription_repo).execute(1)

        # Assert
        assert preview.error.code == "INVALID_TRANSITION"
        assert advance.error.code == "INVALID_TRANSITION"


@pytest.mark.asyncio
class TestUnsetActionableDate:

    async def test_unsets_date(self, mock_uow, mock_subscription_repo, make_subscription):
        # Arrange
        subscription = make_subscription(actionable_date=date(2024, 1, 16))
        mock_subscription_repo.get_by_id = AsyncMock(return_value=subscription)
        use_case = UnsetActionableDate(mock_uow, mock_subscription_repo)

        # Act
        result = await use_case.execute(1)

        # Assert
        assert result.is_ok()
        assert result.value.actionable_date is None
        assert subscription.actionable_date is None
        assert subscription.state == "active"
        mock_subscription_repo.update.assert_called_once()

    async def test_unset_twice_writes_once(self, mock_uow, mock_subscription_repo, make_subscription):
        # Arrange
        subscription = make_subscription(actionable_date=date(2024, 1, 16))
        mock_subscription_repo.get_by_id = AsyncMock(return_value=subscription)
        use_case = UnsetActionableDate(mock_uow, mock_subscription_repo)

        # Act
        await use_case.execute(1)
        result = await use_case.execute(1)

        # Assert
        assert result.is_ok()
        assert subscription.actionable_date is None
        mock_subscription_repo.update.assert_called_once()
