"""
admin_agent/schemas.py

Pydantic parameter models for the admin actions.

Each model doubles as the JSON Schema published to the language model, so
field descriptions are written for the model to read.
"""
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from admin_app.config import cfg


SubscriptionPlan = Literal["WEEKLY", "MONTHLY", "YEARLY", "LIFETIME"]
SubscriptionLevel = Literal["BASIC", "ULTRA"]
UserFilter = Literal["ALL", "PREMIUM", "FREE", "INACTIVE"]
GiftCodeType = Literal["CREDITS", "SUBSCRIPTION"]
ToggleableSetting = Literal[
    "maintenanceMode", "isAiEnabled", "isAutoPilotEnabled", "isChatEnabled", "isGameEnabled"
]


def _not_blank(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("must not be empty")
    return v.strip()


def _whole_number(v: float) -> float:
    # the dashboard stores whole amounts as integers; keep 10.0 as 10
    return int(v) if float(v).is_integer() else v


# ============== User Actions ==============

class UserIdParams(BaseModel):
    user_id: str = Field(..., description="ID of the user record")

    @field_validator("user_id")
    @classmethod
    def validate_user_id(cls, v: str) -> str:
        return _not_blank(v)


class UpdateUserParams(UserIdParams):
    updates: Dict[str, Any] = Field(
        ..., description="Fields to merge onto the user record (credits, name, etc)"
    )


class BanUserParams(UserIdParams):
    reason: Optional[str] = Field(default=None, description="Why the user is banned")


class GrantSubscriptionParams(UserIdParams):
    plan: SubscriptionPlan = Field(..., description="Subscription length")
    level: SubscriptionLevel = Field(..., description="Subscription level")


class InboxMessageParams(UserIdParams):
    text: str = Field(..., description="Message body", min_length=1)


class ScanUsersParams(BaseModel):
    filter: UserFilter = Field(..., description="Which users to list")


# ============== Broadcast / Content ==============

class BroadcastParams(BaseModel):
    message: str = Field(..., description="Banner text shown to every user")


class WeeklyTestParams(BaseModel):
    name: str = Field(..., description="Test title", min_length=1)
    subject: str = Field(..., description="Subject the test covers", min_length=1)
    question_count: int = Field(..., description="Planned number of questions", ge=0)


class RecentLogsParams(BaseModel):
    limit: int = Field(default=cfg.RECENT_LOGS_LIMIT, description="How many records to return", gt=0, le=500)


class SubjectParams(BaseModel):
    name: str = Field(..., description="Subject display name")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _not_blank(v)


class UniversalVideoParams(BaseModel):
    title: str = Field(..., description="Video title", min_length=1)
    url: str = Field(..., description="Video URL", min_length=1)


class BloggerPageParams(BaseModel):
    html: str = Field(..., description="Full HTML of the custom page")


class SoftDeleteParams(BaseModel):
    type: str = Field(..., description="Kind of item to move to the recycle bin")
    id: str = Field(..., description="Item ID")


# ============== Gift Codes ==============

class GiftCodeParams(BaseModel):
    amount: float = Field(..., description="Credits per code (ignored for SUBSCRIPTION codes)", ge=0)
    count: int = Field(..., description="How many codes to create", gt=0, le=500)
    type: GiftCodeType = Field(default="CREDITS", description="What the code grants")

    @field_validator("amount")
    @classmethod
    def whole_amount(cls, v: float) -> float:
        return _whole_number(v)


# ============== Settings ==============

class SettingsUpdateParams(BaseModel):
    updates: Dict[str, Any] = Field(..., description="Fields to merge onto the system settings")


class ToggleSettingParams(BaseModel):
    key: ToggleableSetting = Field(..., description="Boolean setting to change")
    value: bool = Field(..., description="New value")


class AddPackageParams(BaseModel):
    name: str = Field(..., description="Package name", min_length=1)
    price: float = Field(..., description="Price", ge=0)
    credits: int = Field(..., description="Credits granted", ge=0)

    @field_validator("price")
    @classmethod
    def whole_price(cls, v: float) -> float:
        return _whole_number(v)


class RemovePackageParams(BaseModel):
    package_id: str = Field(..., description="ID of the package to remove")


class RecoveryRequestParams(BaseModel):
    request_id: str = Field(..., description="Recovery request ID (same as the user ID)")


class NoParams(BaseModel):
    pass
