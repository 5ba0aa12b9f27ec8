"""
Job Watcher Construct.

This module provides the CDK equivalent of JobWatcher: an SNS alert topic,
an optional email subscription, and an EventBridge rule that sends AWS Batch
job state changes to the topic.
"""

from aws_cdk import (
    aws_sns as sns,
    aws_sns_subscriptions as sns_subscriptions,
    aws_events as events,
    aws_events_targets as events_targets,
)
from constructs import Construct
from typing import Optional

from watchrs import patterns
from watchrs.models import RuleFilter


class JobWatcherConstruct(Construct):
    """
    CDK Construct for Batch job state change alerts.

    The rule pattern comes from the same builder JobWatcher uses, so a
    deployed rule matches exactly what the library would put.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        env_name: str,
        rule_filter: Optional[RuleFilter] = None,
        alert_email: Optional[str] = None,
        subscription_protocol: str = "email",
        rule_enabled: bool = True,
        topic_prefix: str = patterns.DEFAULT_TOPIC_PREFIX,
        **kwargs
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.env_name = env_name
        self.rule_filter = rule_filter

        self.alert_topic = self._create_alert_topic(
            topic_prefix, alert_email, subscription_protocol
        )
        self.rule = self._create_job_state_rule(rule_enabled)

    def _create_alert_topic(
        self,
        topic_prefix: str,
        alert_email: Optional[str],
        subscription_protocol: str,
    ) -> sns.Topic:
        """Create SNS topic for job alerts."""
        topic = sns.Topic(
            self,
            "AlertTopic",
            topic_name=f"{topic_prefix}-alerts-{self.env_name}",
            display_name=f"Batch job alerts ({self.env_name})"
        )

        if alert_email:
            topic.add_subscription(
                sns_subscriptions.EmailSubscription(
                    alert_email,
                    json=subscription_protocol == "email-json",
                )
            )

        return topic

    def _create_job_state_rule(self, enabled: bool) -> events.Rule:
        """Create the Batch job state change rule targeting the alert topic."""
        pattern = patterns.event_pattern_dict(self.rule_filter)

        rule = events.Rule(
            self,
            "JobStateRule",
            rule_name=f"watchrs-job-state-{self.env_name}",
            description=f"Batch job state changes for {self.env_name}",
            enabled=enabled,
            event_pattern=events.EventPattern(
                source=pattern["source"],
                detail_type=pattern["detail-type"],
                detail=pattern.get("detail"),
            ),
        )

        # SnsTopic also grants events.amazonaws.com sns:Publish on the topic
        rule.add_target(events_targets.SnsTopic(self.alert_topic))

        return rule
