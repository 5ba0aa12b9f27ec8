"""
Main CDK stack for Batch job watchers.

This stack deploys the alert topic and job state rule for one environment
and exports their identifiers.
"""

from aws_cdk import (
    Stack,
    CfnOutput,
)
from constructs import Construct

from infrastructure.config.environment_config import EnvironmentConfig
from infrastructure.monitoring.job_watcher_construct import JobWatcherConstruct


class JobWatcherStack(Stack):
    """CDK stack for Batch job state change alerts."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        config: EnvironmentConfig,
        **kwargs
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.config = config
        self.env_name = config.environment_name

        self.watcher = JobWatcherConstruct(
            self,
            "JobWatcher",
            env_name=self.env_name,
            rule_filter=config.rule_filter(),
            alert_email=config.alert_email,
            subscription_protocol=config.subscription_protocol,
            rule_enabled=config.rule_enabled,
            topic_prefix=config.topic_prefix,
        )

        self._create_outputs()

    def _create_outputs(self) -> None:
        """Export the handles callers need to manage subscriptions."""
        CfnOutput(
            self,
            "AlertTopicArn",
            value=self.watcher.alert_topic.topic_arn,
            description="SNS topic receiving Batch job state changes",
            export_name=f"watchrs-alert-topic-arn-{self.env_name}"
        )

        CfnOutput(
            self,
            "JobStateRuleName",
            value=self.watcher.rule.rule_name,
            description="EventBridge rule matching Batch job state changes",
            export_name=f"watchrs-job-state-rule-{self.env_name}"
        )
