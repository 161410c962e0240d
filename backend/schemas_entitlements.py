"""
backend/schemas_entitlements.py

Pydantic schemas for the entitlement, fee and catalog endpoints.
The backend stores nothing: every request carries the subscription it asks about.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

try:
    from backend.models import Subscription
except ModuleNotFoundError:
    from models import Subscription


# ========================================================================
# ENTITLEMENT SCHEMAS
# ========================================================================

class LimitsRequest(BaseModel):
    """Request schema for resolving feature limits.

    subscription may be null (account never subscribed).
    """
    subscription: Optional[Subscription] = Field(None, description="Current subscription, if any")


class LimitsResponse(BaseModel):
    limits: Dict[str, Any] = Field(..., description="FeatureLimits as a dict")
    tier: Optional[str] = Field(None, description="Subscription tier (null when unsubscribed)")
    status: Optional[str] = Field(None, description="Subscription status (null when unsubscribed)")


class CanCreateProjectRequest(BaseModel):
    subscription: Optional[Subscription] = Field(None, description="Current subscription, if any")
    current_project_count: int = Field(..., ge=0, description="Projects already owned, any status")


class CanCreateProjectResponse(BaseModel):
    allowed: bool
    projects_remaining: Union[int, str] = Field(..., description="Slots left or 'unlimited'")
    message: str = Field("", description="Limit-reached text when not allowed")


class UpgradeMessageResponse(BaseModel):
    tier: Optional[str] = None
    next_tier: Optional[str] = None
    message: str = Field("", description="Empty when no upgrade exists")


# ========================================================================
# FEE / CATALOG SCHEMAS
# ========================================================================

class FeeQuoteResponse(BaseModel):
    gross_amount: float
    fee_percentage: float
    fee: int
    net_amount: float


class PlanListResponse(BaseModel):
    plans: List[Dict[str, Any]] = Field(default_factory=list)


class AddOnListResponse(BaseModel):
    add_ons: List[Dict[str, Any]] = Field(default_factory=list)
