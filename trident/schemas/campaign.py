from datetime import datetime, timedelta
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator, model_validator

from trident.timeutil import duration_nanoseconds, format_rfc3339


class CampaignStatus(str, Enum):
    ACTIVE = "active"


class CampaignRequest(BaseModel):
    """Campaign descriptor submitted to the orchestrator."""

    model_config = ConfigDict(frozen=True)

    not_before: datetime
    not_after: datetime
    status: CampaignStatus = CampaignStatus.ACTIVE
    schedule_interval: timedelta  # sent as integer nanoseconds
    users: List[str]
    passwords: List[str]
    provider: str
    provider_metadata: Optional[Any] = None

    @field_validator("not_before", "not_after")
    def _require_timezone(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            raise ValueError("timestamps must carry a timezone")
        return value

    @model_validator(mode="after")
    def _check_window(self) -> "CampaignRequest":
        if self.not_after < self.not_before:
            raise ValueError("not_after must not be earlier than not_before")
        return self

    @field_serializer("not_before", "not_after", when_used="json")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_rfc3339(value)

    @field_serializer("schedule_interval", when_used="json")
    def _serialize_interval(self, value: timedelta) -> int:
        return duration_nanoseconds(value)

    @classmethod
    def for_window(
        cls,
        *,
        not_before: datetime,
        window: timedelta,
        schedule_interval: timedelta,
        users: List[str],
        passwords: List[str],
        provider: str,
        provider_metadata: Any = None,
    ) -> "CampaignRequest":
        """Build an active campaign running from ``not_before`` for ``window``."""
        return cls(
            not_before=not_before,
            not_after=not_before + window,
            status=CampaignStatus.ACTIVE,
            schedule_interval=schedule_interval,
            users=users,
            passwords=passwords,
            provider=provider,
            provider_metadata=provider_metadata,
        )
