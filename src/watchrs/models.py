"""
Data models for Batch job watchers.

This module defines the event filter used to narrow a watcher rule down to
particular jobs, and the handles returned when alert resources are created.
The filter fields mirror the ``detail`` section of an AWS Batch
"Job State Change" event:
https://docs.aws.amazon.com/batch/latest/userguide/batch_cwe_events.html
"""

from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class JobStatus(str, Enum):
    """AWS Batch job states reported in state change events."""
    SUBMITTED = "SUBMITTED"
    PENDING = "PENDING"
    RUNNABLE = "RUNNABLE"
    STARTING = "STARTING"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class RuleFilter(BaseModel):
    """
    Optional filter applied to the ``detail`` section of a Batch event.

    Every field is a list of accepted values. A single string is wrapped into
    a one-element list and an empty list is treated as absent, since
    EventBridge rejects empty match arrays.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        use_enum_values=True,
        frozen=True,
    )

    statuses: Optional[List[JobStatus]] = Field(None, alias="status", description="Job states to match")
    job_names: Optional[List[str]] = Field(None, alias="jobName", description="Job names to match")
    job_queues: Optional[List[str]] = Field(None, alias="jobQueue", description="Job queue ARNs to match")
    job_ids: Optional[List[str]] = Field(None, alias="jobId", description="Job ids to match")

    @field_validator("statuses", "job_names", "job_queues", "job_ids", mode="before")
    @classmethod
    def wrap_single_value(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("statuses", "job_names", "job_queues", "job_ids")
    @classmethod
    def drop_empty(cls, value: Optional[List[Any]]) -> Optional[List[Any]]:
        if not value:
            return None
        return value

    @property
    def is_empty(self) -> bool:
        """True when no field narrows the match."""
        return not self.to_detail()

    def to_detail(self) -> Dict[str, List[str]]:
        """Serialize the present fields using the Batch event field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SubscriptionHandles(NamedTuple):
    """Topic and subscription ARNs returned by a subscribe call."""
    topic_arn: str
    subscription_arn: str


class WatchSetup(NamedTuple):
    """Handles for a complete topic, subscription, rule and target setup."""
    topic_arn: str
    subscription_arn: str
    rule_name: str
    target_id: str
