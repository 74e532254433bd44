"""Background workers for subscription scheduling"""
from .subscription_processor import SubscriptionProcessorWorker

__all__ = ["SubscriptionProcessorWorker"]
