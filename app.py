#!/usr/bin/env python3
"""
watchrs CDK Application Entry Point

Deploys Batch job state change alerting for a single environment.
"""

import os
import aws_cdk as cdk
from aws_cdk import Environment

from infrastructure.stacks.job_watcher_stack import JobWatcherStack
from infrastructure.config.environment_config import EnvironmentConfig


def main():
    """Main application entry point."""
    app = cdk.App()

    # Get environment from context or default to 'dev'
    env_name = app.node.try_get_context("environment") or "dev"

    # Load environment-specific configuration
    config = EnvironmentConfig.get_config(env_name)

    # Define AWS environment
    aws_env = Environment(
        account=os.environ.get("CDK_DEFAULT_ACCOUNT"),
        region=os.environ.get("CDK_DEFAULT_REGION", config.aws_region)
    )

    JobWatcherStack(
        app,
        f"WatchrsJobWatcherStack-{env_name}",
        config=config,
        env=aws_env,
        description=f"Batch job state change alerts for {env_name} environment"
    )

    app.synth()


if __name__ == "__main__":
    main()
