"""
Event pattern and topic policy builders.

Pure functions that render the two JSON documents a job watcher needs: the
EventBridge rule pattern selecting Batch job state changes, and the SNS
topic policy that lets EventBridge publish to the alert topic. Resource
names derived from the current UTC hour also live here so the orchestrator
and the CDK stack agree on them.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from watchrs.errors import EventRuleError, SNSTopicError
from watchrs.models import RuleFilter


BATCH_EVENT_SOURCE = "aws.batch"
BATCH_DETAIL_TYPE = "Batch Job State Change"
EVENTS_SERVICE_PRINCIPAL = "events.amazonaws.com"

DEFAULT_TOPIC_PREFIX = "watchrs"
DEFAULT_TARGET_PREFIX = "watchrs_sns_target"

# Actions granted to the account on a new topic, same as the SNS console default
TOPIC_OWNER_ACTIONS = [
    "SNS:GetTopicAttributes",
    "SNS:SetTopicAttributes",
    "SNS:AddPermission",
    "SNS:RemovePermission",
    "SNS:DeleteTopic",
    "SNS:Subscribe",
    "SNS:ListSubscriptionsByTopic",
    "SNS:Publish",
]


def event_pattern_dict(rule_filter: Optional[RuleFilter] = None) -> Dict[str, Any]:
    """Return the Batch state change pattern as a dictionary."""
    pattern: Dict[str, Any] = {
        "detail-type": [BATCH_DETAIL_TYPE],
        "source": [BATCH_EVENT_SOURCE],
    }

    # AWS does not allow an empty detail object
    if rule_filter is not None and not rule_filter.is_empty:
        pattern["detail"] = rule_filter.to_detail()

    return pattern


def build_event_pattern(rule_filter: Optional[RuleFilter] = None) -> str:
    """
    Build the EventBridge pattern for Batch job state changes.

    Args:
        rule_filter: Optional filter narrowing the match by status, job name,
            job queue or job id

    Returns:
        Event pattern JSON string

    Raises:
        EventRuleError: If the pattern cannot be serialized
    """
    try:
        return json.dumps(event_pattern_dict(rule_filter))
    except (TypeError, ValueError) as e:
        raise EventRuleError(
            f"failed to serialize batch rule details: {e}",
            error_code="SERIALIZATION_ERROR",
            original_error=e,
        )


def topic_arn_for(region: str, topic_name: str, account_id: str) -> str:
    return f"arn:aws:sns:{region}:{account_id}:{topic_name}"


def build_topic_policy(region: str, topic_name: str, account_id: str) -> str:
    """
    Build the SNS access policy for an alert topic.

    EventBridge cannot publish to a topic without a resource policy naming
    its service principal. The first statement keeps the topic manageable by
    the owning account only.

    Args:
        region: AWS region the topic lives in
        topic_name: Topic name
        account_id: Owning account

    Returns:
        Policy JSON string

    Raises:
        SNSTopicError: If the account is missing or the policy cannot be serialized
    """
    if not account_id:
        raise SNSTopicError(
            "account id is required to build a topic policy",
            error_code="MISSING_ACCOUNT_ID",
        )

    resource = topic_arn_for(region, topic_name, account_id)

    statements: List[Dict[str, Any]] = [
        {
            "Sid": "__default_statement_ID",
            "Effect": "Allow",
            "Principal": {"AWS": "*"},
            "Action": list(TOPIC_OWNER_ACTIONS),
            "Resource": resource,
            "Condition": {
                "StringEquals": {"AWS:SourceOwner": account_id}
            },
        },
        {
            "Sid": "AWSEvents_publish",
            "Effect": "Allow",
            "Principal": {"Service": EVENTS_SERVICE_PRINCIPAL},
            "Action": "sns:Publish",
            "Resource": resource,
        },
    ]

    policy = {
        "Version": "2008-10-17",
        "Id": "__default_policy_ID",
        "Statement": statements,
    }

    try:
        return json.dumps(policy)
    except (TypeError, ValueError) as e:
        raise SNSTopicError(
            f"failed to serialize topic policy: {e}",
            error_code="SERIALIZATION_ERROR",
            original_error=e,
        )


def resource_suffix(now: Optional[datetime] = None) -> str:
    """UTC ``<year>_<month>_<day>_<hour>`` suffix used in generated names."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return f"{now.year}_{now.month}_{now.day}_{now.hour}"


def topic_name(prefix: str = DEFAULT_TOPIC_PREFIX, now: Optional[datetime] = None) -> str:
    # SNS topic names are limited to 256 characters
    return f"{prefix}_{resource_suffix(now)}"[:256]


def target_id(prefix: str = DEFAULT_TARGET_PREFIX, now: Optional[datetime] = None) -> str:
    # Target ids are limited to 64 characters
    return f"{prefix}_{resource_suffix(now)}"[:64]
