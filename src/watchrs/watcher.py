"""
Job watcher orchestration module.

This module provides JobWatcher, which creates the SNS topic, email
subscription, EventBridge rule and rule target that together send an email
whenever a matching AWS Batch job changes state.

Every operation is a single request to AWS. Failures are wrapped in the
matching WatchError and raised immediately; nothing is retried or rolled
back, so a failure midway through a sequence leaves earlier resources in
place for the caller to clean up.
"""

from datetime import datetime
from typing import Callable, Optional

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from watchrs import patterns
from watchrs.config import WatcherConfig
from watchrs.errors import (
    EventRuleError,
    EventTargetError,
    SNSSubscriptionError,
    SNSTopicError,
)
from watchrs.models import RuleFilter, SubscriptionHandles, WatchSetup


logger = Logger(child=True)


def _mask_email(email: str) -> str:
    return email[:3] + "***"


def _error_code(error: Exception) -> Optional[str]:
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code")
    return None


class JobWatcher:
    """
    Provisions alerting for AWS Batch job state changes.

    Example:
        watcher = JobWatcher(WatcherConfig(region="us-west-2"))

        topic_arn, subscription_arn = watcher.subscribe("ops@example.com")
        rule_name = watcher.create_job_watcher_rule(
            "nightly-failures",
            rule_filter=RuleFilter(statuses=["FAILED"], job_names=["nightly-etl"]),
        )
        watcher.create_sns_target(rule_name, topic_arn)

    Callers are responsible for persisting the returned ARNs so that
    ``unsubscribe`` can be called later.
    """

    def __init__(
        self,
        config: Optional[WatcherConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize job watcher.

        Args:
            config: Watcher configuration (defaults to environment)
            clock: Returns the current time, used for generated names
        """
        self.config = config or WatcherConfig.from_environment()
        self._clock = clock

    def _now(self) -> Optional[datetime]:
        return self._clock() if self._clock else None

    def subscribe(self, email: str, topic_arn: Optional[str] = None) -> SubscriptionHandles:
        """
        Subscribe an email address to an alert topic.

        A new topic is created only when ``topic_arn`` is not given.

        Args:
            email: Address receiving the alerts
            topic_arn: Existing topic to subscribe to

        Returns:
            SubscriptionHandles(topic_arn, subscription_arn)

        Raises:
            SNSTopicError: If the account lookup fails or the topic could not
                be created
            SNSSubscriptionError: If the subscription failed
        """
        arn = topic_arn or self.create_topic()
        subscription_arn = self._subscribe_email(arn, email)
        return SubscriptionHandles(arn, subscription_arn)

    def unsubscribe(
        self,
        subscription_arn: str,
        delete_topic: bool = False,
        topic_arn: Optional[str] = None,
    ) -> None:
        """
        Remove an email subscription, or the whole topic.

        When ``delete_topic`` is set the topic is deleted instead, which also
        removes every subscription on it, and ``topic_arn`` is required.

        Raises:
            SNSTopicError: If the topic ARN is missing or the delete failed
            SNSSubscriptionError: If the unsubscribe call failed
        """
        if delete_topic and not topic_arn:
            raise SNSTopicError(
                "topic arn is required when delete_topic is set",
                error_code="MISSING_TOPIC_ARN",
            )

        sns_client = self.config.create_client("sns")

        if delete_topic:
            try:
                sns_client.delete_topic(TopicArn=topic_arn)
            except (ClientError, BotoCoreError) as e:
                logger.error(
                    "Error deleting topic",
                    extra={"topic_arn": topic_arn, "error": str(e)},
                )
                raise SNSTopicError(str(e), error_code=_error_code(e), original_error=e)

            logger.info("Deleted topic", extra={"topic_arn": topic_arn})
            return

        try:
            sns_client.unsubscribe(SubscriptionArn=subscription_arn)
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "Error unsubscribing",
                extra={"subscription_arn": subscription_arn, "error": str(e)},
            )
            raise SNSSubscriptionError(str(e), error_code=_error_code(e), original_error=e)

        logger.info("Unsubscribed", extra={"subscription_arn": subscription_arn})

    def create_job_watcher_rule(
        self,
        rule_name: str,
        enabled: bool = True,
        description: Optional[str] = None,
        rule_filter: Optional[RuleFilter] = None,
    ) -> str:
        """
        Create an EventBridge rule matching Batch job state changes.

        The filter narrows the rule by job status, name, queue or id. An
        example ``detail`` section of a matching rule:

            "detail": {
                "status": ["FAILED"],
                "jobName": ["event-test"],
                "jobQueue": ["arn:aws:batch:us-east-1:123456789012:job-queue/HighPriority"]
            }

        Args:
            rule_name: Rule name, unique within the account and region
            enabled: Whether the rule starts enabled
            description: Optional rule description
            rule_filter: Optional event detail filter

        Returns:
            The rule name, used to attach targets

        Raises:
            EventRuleError: If the pattern could not be built or put_rule failed
        """
        event_pattern = patterns.build_event_pattern(rule_filter)

        request: dict = {
            "Name": rule_name,
            "State": "ENABLED" if enabled else "DISABLED",
            "EventPattern": event_pattern,
        }
        if description is not None:
            request["Description"] = description

        events_client = self.config.create_client("events")
        try:
            events_client.put_rule(**request)
        except (ClientError, BotoCoreError) as e:
            logger.error("Error putting rule", extra={"rule_name": rule_name, "error": str(e)})
            raise EventRuleError(str(e), error_code=_error_code(e), original_error=e)

        logger.info(
            "Put rule",
            extra={"rule_name": rule_name, "state": request["State"], "event_pattern": event_pattern},
        )
        return rule_name

    def create_sns_target(self, rule_name: str, topic_arn: str) -> str:
        """
        Point an existing rule at an SNS topic.

        Any failed entry in the response is treated as a failure of the whole
        call.

        Returns:
            The generated target id

        Raises:
            EventTargetError: If put_targets failed or reported failed entries
        """
        sns_target_id = patterns.target_id(self.config.target_prefix, self._now())

        events_client = self.config.create_client("events")
        try:
            response = events_client.put_targets(
                Rule=rule_name,
                Targets=[{"Id": sns_target_id, "Arn": topic_arn}],
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Error putting targets", extra={"rule_name": rule_name, "error": str(e)})
            raise EventTargetError(str(e), error_code=_error_code(e), original_error=e)

        failed_entries = response.get("FailedEntries") or []
        if failed_entries:
            logger.error(
                "Failed to put targets",
                extra={"rule_name": rule_name, "failed_entries": failed_entries},
            )
            raise EventTargetError(
                f"failed entries: {failed_entries}",
                error_code=failed_entries[0].get("ErrorCode"),
                failed_entries=failed_entries,
            )

        logger.info(
            "Put target",
            extra={"rule_name": rule_name, "topic_arn": topic_arn, "target_id": sns_target_id},
        )
        return sns_target_id

    def watch_jobs(
        self,
        email: str,
        rule_name: str,
        rule_filter: Optional[RuleFilter] = None,
        description: Optional[str] = None,
        enabled: bool = True,
        topic_arn: Optional[str] = None,
    ) -> WatchSetup:
        """
        Subscribe, create the rule and attach the topic in one go.

        Resources created before a failing step are left in place.
        """
        topic, subscription_arn = self.subscribe(email, topic_arn)
        name = self.create_job_watcher_rule(rule_name, enabled, description, rule_filter)
        sns_target_id = self.create_sns_target(name, topic)
        return WatchSetup(topic, subscription_arn, name, sns_target_id)

    def create_topic(self) -> str:
        """
        Create an alert topic that EventBridge may publish to.

        The topic policy is scoped to the configured account, or to the
        caller's account from STS when none is configured.

        Returns:
            The topic ARN

        Raises:
            SNSTopicError: If the account lookup fails or the topic could not
                be created
        """
        name = patterns.topic_name(self.config.topic_prefix, self._now())
        account_id = self.config.account_id or self._caller_account()
        policy = patterns.build_topic_policy(self.config.region, name, account_id)

        sns_client = self.config.create_client("sns")
        try:
            response = sns_client.create_topic(Name=name, Attributes={"Policy": policy})
        except (ClientError, BotoCoreError) as e:
            logger.error("Error creating topic", extra={"topic_name": name, "error": str(e)})
            raise SNSTopicError(str(e), error_code=_error_code(e), original_error=e)

        arn = response.get("TopicArn")
        if not arn:
            raise SNSTopicError(
                "create_topic response is missing TopicArn",
                error_code="MISSING_TOPIC_ARN",
            )

        logger.info("Created topic", extra={"topic_arn": arn})
        return arn

    def _caller_account(self) -> str:
        """Look up the account the configured credentials belong to."""
        sts_client = self.config.create_client("sts")
        try:
            account_id = sts_client.get_caller_identity().get("Account")
        except (ClientError, BotoCoreError) as e:
            logger.error("Error resolving caller account", extra={"error": str(e)})
            raise SNSTopicError(str(e), error_code=_error_code(e), original_error=e)

        if not account_id:
            raise SNSTopicError(
                "get_caller_identity response is missing Account",
                error_code="MISSING_ACCOUNT_ID",
            )
        return account_id

    def _subscribe_email(self, topic_arn: str, email: str) -> str:
        """Subscribe ``email`` to the topic and return the subscription ARN."""
        sns_client = self.config.create_client("sns")
        try:
            response = sns_client.subscribe(
                TopicArn=topic_arn,
                Protocol=self.config.subscription_protocol,
                Endpoint=email,
                ReturnSubscriptionArn=True,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "Error subscribing email",
                extra={"topic_arn": topic_arn, "email": _mask_email(email), "error": str(e)},
            )
            raise SNSSubscriptionError(str(e), error_code=_error_code(e), original_error=e)

        subscription_arn = response.get("SubscriptionArn")
        if not subscription_arn:
            raise SNSSubscriptionError(
                "subscribe response is missing SubscriptionArn",
                error_code="MISSING_SUBSCRIPTION_ARN",
            )

        logger.info(
            "Subscribed email",
            extra={"topic_arn": topic_arn, "email": _mask_email(email)},
        )
        return subscription_arn
