"""
Error types raised by watchrs operations.

Each error kind names the AWS resource whose call failed. The message is
human readable; the original botocore exception is kept for callers that
need the full response.
"""

from typing import Any, Dict, List, Optional


class WatchError(Exception):
    """Base exception for watchrs errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.original_error = original_error


class SNSTopicError(WatchError):
    """Failure while creating or deleting an SNS topic."""
    pass


class SNSSubscriptionError(WatchError):
    """Failure while subscribing to or unsubscribing from a topic."""
    pass


class EventRuleError(WatchError):
    """Failure while building or putting an event rule."""
    pass


class EventTargetError(WatchError):
    """Failure while putting an event target."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        original_error: Optional[Exception] = None,
        failed_entries: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message, error_code=error_code, original_error=original_error)
        self.failed_entries = failed_entries or []
