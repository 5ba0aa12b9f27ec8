"""
watchrs: alerting for AWS Batch job state changes.

This package creates the SNS topic, email subscription and EventBridge rule
and target needed to email someone when a Batch job changes state.
"""

from watchrs.config import WatcherConfig
from watchrs.errors import (
    EventRuleError,
    EventTargetError,
    SNSSubscriptionError,
    SNSTopicError,
    WatchError,
)
from watchrs.models import JobStatus, RuleFilter, SubscriptionHandles, WatchSetup
from watchrs.patterns import build_event_pattern, build_topic_policy
from watchrs.watcher import JobWatcher

__all__ = [
    "WatcherConfig",
    "JobWatcher",
    "JobStatus",
    "RuleFilter",
    "SubscriptionHandles",
    "WatchSetup",
    "build_event_pattern",
    "build_topic_policy",
    "WatchError",
    "SNSTopicError",
    "SNSSubscriptionError",
    "EventRuleError",
    "EventTargetError",
]
