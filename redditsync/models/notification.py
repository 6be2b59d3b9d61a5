"""Notification preference models."""

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class NotificationCategory(str, Enum):
    """Event categories a user can switch on or off."""
    NEW_POSTS = "new_posts"
    NEW_COMMENTS = "new_comments"
    MENTIONS = "mentions"
    DIRECT_MESSAGES = "direct_messages"
    UPVOTES = "upvotes"


class NotificationFrequency(str, Enum):
    IMMEDIATE = "immediate"
    HOURLY = "hourly"
    DAILY = "daily"


class QuietHours(BaseModel):
    """
    Daily window during which notifications are suppressed.

    Times are "HH:MM" strings and are not validated here; stored records
    with malformed times are tolerated and treated as disabled by the gate.
    """

    model_config = ConfigDict(populate_by_name=True)

    enabled: bool = False
    start: str = Field(default="22:00", validation_alias=AliasChoices("start", "startTime"))
    end: str = Field(default="08:00", validation_alias=AliasChoices("end", "endTime"))


class NotificationPreferences(BaseModel):
    """Per-user notification preferences with the service defaults."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )

    new_posts: bool = True
    new_comments: bool = True
    mentions: bool = True
    direct_messages: bool = True
    upvotes: bool = False
    quiet_hours: QuietHours = Field(default_factory=QuietHours)
    frequency: NotificationFrequency = NotificationFrequency.IMMEDIATE

    def is_enabled(self, category: NotificationCategory) -> bool:
        return bool(getattr(self, NotificationCategory(category).value))
