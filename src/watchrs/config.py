"""
Job watcher configuration module.

This module provides the configuration held by a JobWatcher: target region,
naming prefixes, subscription protocol, and the factory used to build AWS
clients for each call.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import boto3
from botocore.config import Config as BotoConfig

from watchrs.patterns import DEFAULT_TARGET_PREFIX, DEFAULT_TOPIC_PREFIX


SUPPORTED_PROTOCOLS = ("email", "email-json")

ClientFactory = Callable[[str], Any]


@dataclass
class WatcherConfig:
    """
    Configuration for a JobWatcher.

    Each operation builds a fresh client through ``client_factory``. When no
    factory is given, boto3 clients are created for ``region`` with explicit
    timeouts and botocore retries disabled.
    """

    region: str = "us-east-1"

    # Alert delivery
    subscription_protocol: str = "email"

    # Generated resource names
    topic_prefix: str = DEFAULT_TOPIC_PREFIX
    target_prefix: str = DEFAULT_TARGET_PREFIX

    # Restricts the topic policy to this account when set
    account_id: Optional[str] = None

    # Timeout settings
    connection_timeout_seconds: int = 10
    request_timeout_seconds: int = 30

    client_factory: Optional[ClientFactory] = field(default=None, repr=False)

    def __post_init__(self):
        if not self.region:
            raise ValueError("region must not be empty")
        if self.subscription_protocol not in SUPPORTED_PROTOCOLS:
            raise ValueError(
                f"Unsupported subscription protocol: {self.subscription_protocol}"
            )

    @classmethod
    def from_environment(cls) -> "WatcherConfig":
        """
        Create configuration from environment variables.

        Falls back to the defaults above for anything not set.
        """
        region = (
            os.environ.get("AWS_REGION")
            or os.environ.get("AWS_DEFAULT_REGION")
            or "us-east-1"
        )

        return cls(
            region=region,
            subscription_protocol=os.environ.get("WATCHRS_PROTOCOL", "email"),
            topic_prefix=os.environ.get("WATCHRS_TOPIC_PREFIX", DEFAULT_TOPIC_PREFIX),
            target_prefix=os.environ.get("WATCHRS_TARGET_PREFIX", DEFAULT_TARGET_PREFIX),
            account_id=os.environ.get("WATCHRS_ACCOUNT_ID") or None,
            connection_timeout_seconds=int(os.environ.get("WATCHRS_CONNECT_TIMEOUT", "10")),
            request_timeout_seconds=int(os.environ.get("WATCHRS_REQUEST_TIMEOUT", "30")),
        )

    def boto_config(self) -> BotoConfig:
        return BotoConfig(
            connect_timeout=self.connection_timeout_seconds,
            read_timeout=self.request_timeout_seconds,
            retries={"total_max_attempts": 1, "mode": "standard"},
        )

    def create_client(self, service_name: str) -> Any:
        """Build a client for ``service_name`` ("sns" or "events")."""
        if self.client_factory is not None:
            return self.client_factory(service_name)

        return boto3.client(
            service_name,
            region_name=self.region,
            config=self.boto_config(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary for logging."""
        return {
            "region": self.region,
            "subscription_protocol": self.subscription_protocol,
            "topic_prefix": self.topic_prefix,
            "target_prefix": self.target_prefix,
            "account_id": self.account_id,
            "connection_timeout_seconds": self.connection_timeout_seconds,
            "request_timeout_seconds": self.request_timeout_seconds,
            "custom_client_factory": self.client_factory is not None,
        }
