from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
from enum import Enum

# Enums
class SubscriptionTier(str, Enum):
    starter = "starter"
    pro = "pro"
    growth = "growth"
    enterprise = "enterprise"

class SubscriptionStatus(str, Enum):
    active = "active"
    trial = "trial"
    expired = "expired"
    cancelled = "cancelled"

class AddOnType(str, Enum):
    featured_boost = "featured_boost"
    marketing_push = "marketing_push"
    branding_customization = "branding_customization"

class AddOnStatus(str, Enum):
    active = "active"
    expired = "expired"

# Capability order, lowest first. Limits are never derived from this;
# it only names the upgrade path.
TIER_ORDER = (
    SubscriptionTier.starter,
    SubscriptionTier.pro,
    SubscriptionTier.growth,
    SubscriptionTier.enterprise,
)

# Models
class Subscription(BaseModel):
    """
    An account's current plan instance, as returned by the platform API.

    Accepts both snake_case names and the API's camelCase keys
    (startDate, endDate, autoRenew).
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(None, alias="_id")
    tier: SubscriptionTier
    status: SubscriptionStatus
    start_date: datetime = Field(..., alias="startDate")
    end_date: datetime = Field(..., alias="endDate")
    auto_renew: bool = Field(False, alias="autoRenew")

class AddOn(BaseModel):
    """Tier-independent purchase (boost, campaign, branding)."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(None, alias="_id")
    type: str  # unknown types are displayed, not rejected
    price: float = 0.0
    status: AddOnStatus = AddOnStatus.active
    end_date: Optional[datetime] = Field(None, alias="endDate")
    project_id: Optional[str] = Field(None, alias="projectId")
