"""Domain errors

Soft guard failures (deferred cancellation, refused deactivation) are not
errors and are never raised; these are for hard precondition violations.
"""


class DomainError(Exception):
    """Base class for subscription domain errors"""

    code = "DOMAIN_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidTransition(DomainError):
    """Requested transition is not allowed from the current state or data"""

    code = "INVALID_TRANSITION"


class SubscriptionNotFound(DomainError):
    code = "SUBSCRIPTION_NOT_FOUND"

    def __init__(self, subscription_id: int):
        super().__init__(f"Subscription {subscription_id} not found")
        self.subscription_id = subscription_id
