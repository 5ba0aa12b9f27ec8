"""
Pytest configuration and fixtures for watchrs tests.
"""

import pytest
import os
import boto3
from datetime import datetime, timezone
from moto import mock_aws

# Add src to path for imports
import sys
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from watchrs.config import WatcherConfig
from watchrs.watcher import JobWatcher


FIXED_NOW = datetime(2024, 3, 7, 9, 15, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def aws_credentials():
    """Mocked AWS Credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def mock_aws_services(aws_credentials):
    """Mock AWS services for testing."""
    with mock_aws():
        yield


@pytest.fixture
def sns_client(mock_aws_services):
    """SNS client for testing."""
    return boto3.client("sns", region_name="us-east-1")


@pytest.fixture
def events_client(mock_aws_services):
    """EventBridge client for testing."""
    return boto3.client("events", region_name="us-east-1")


@pytest.fixture
def watcher(mock_aws_services):
    """JobWatcher against mocked AWS with a fixed clock."""
    return JobWatcher(WatcherConfig(region="us-east-1"), clock=lambda: FIXED_NOW)
