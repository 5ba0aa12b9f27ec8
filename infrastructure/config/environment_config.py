"""
Environment-specific configuration for the job watcher stack.

This module provides configuration classes for different deployment environments
(dev, staging, production): which Batch jobs are watched and where alerts go.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional
import os

from watchrs.models import RuleFilter


@dataclass
class EnvironmentConfig:
    """Environment-specific configuration settings."""

    environment_name: str
    aws_region: str

    # Rule settings
    rule_enabled: bool
    watched_statuses: List[str] = field(default_factory=list)
    watched_job_queues: List[str] = field(default_factory=list)
    watched_job_names: List[str] = field(default_factory=list)

    # Alert settings
    alert_email: Optional[str] = None
    subscription_protocol: str = "email"
    topic_prefix: str = "watchrs"

    @classmethod
    def get_config(cls, environment: str) -> "EnvironmentConfig":
        """Get configuration for the specified environment."""
        configs = {
            "dev": cls._dev_config(),
            "staging": cls._staging_config(),
            "production": cls._production_config()
        }

        if environment not in configs:
            raise ValueError(f"Unknown environment: {environment}")

        return configs[environment]

    @classmethod
    def _dev_config(cls) -> "EnvironmentConfig":
        """Development environment configuration."""
        return cls(
            environment_name="dev",
            aws_region="us-east-1",

            # Dev watches every transition, rule off until someone needs it
            rule_enabled=False,

            alert_email=os.environ.get("WATCHRS_ALERT_EMAIL"),
            subscription_protocol="email-json",
        )

    @classmethod
    def _staging_config(cls) -> "EnvironmentConfig":
        """Staging environment configuration."""
        return cls(
            environment_name="staging",
            aws_region="us-east-1",

            rule_enabled=True,
            watched_statuses=["FAILED", "SUCCEEDED"],

            alert_email=os.environ.get("WATCHRS_ALERT_EMAIL"),
        )

    @classmethod
    def _production_config(cls) -> "EnvironmentConfig":
        """Production environment configuration."""
        return cls(
            environment_name="production",
            aws_region="us-east-1",

            # Failures only
            rule_enabled=True,
            watched_statuses=["FAILED"],

            alert_email=os.environ.get("WATCHRS_ALERT_EMAIL"),
        )

    def rule_filter(self) -> RuleFilter:
        """Build the event filter for the watched jobs."""
        return RuleFilter(
            statuses=self.watched_statuses,
            job_queues=self.watched_job_queues,
            job_names=self.watched_job_names,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary for stack outputs and logging."""
        return {
            "environment_name": self.environment_name,
            "aws_region": self.aws_region,
            "rule_enabled": str(self.rule_enabled),
            "watched_statuses": ",".join(self.watched_statuses),
            "watched_job_queues": ",".join(self.watched_job_queues),
            "watched_job_names": ",".join(self.watched_job_names),
            "alert_email_configured": str(self.alert_email is not None),
            "subscription_protocol": self.subscription_protocol,
            "topic_prefix": self.topic_prefix,
        }
