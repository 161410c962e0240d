"""
Plan + add-on catalog for EstateFund.

Display data for the subscriptions and add-on pages. Limits are NOT defined
here: max_projects is read from entitlements.TIER_LIMITS so the catalog and
enforcement stay consistent.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple, Union

try:
    from backend.entitlements import TIER_LIMITS
    from backend.models import AddOn, AddOnStatus, Subscription, SubscriptionStatus, SubscriptionTier, TIER_ORDER
except ModuleNotFoundError:
    from entitlements import TIER_LIMITS
    from models import AddOn, AddOnStatus, Subscription, SubscriptionStatus, SubscriptionTier, TIER_ORDER


# ---- Subscription plans -------------------------------------------------


@dataclass(frozen=True)
class Plan:
    tier: SubscriptionTier
    name: str
    price: int
    duration_days: int
    duration_label: str
    cost_rank: str
    features: Tuple[str, ...]
    popular: bool = False

    @property
    def max_projects(self) -> Union[int, str]:
        return TIER_LIMITS[self.tier].max_projects

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tier": self.tier.value,
            "name": self.name,
            "price": self.price,
            "price_label": format_price(self.price),
            "duration_days": self.duration_days,
            "duration_label": self.duration_label,
            "max_projects": self.max_projects,
            "cost_rank": self.cost_rank,
            "features": list(self.features),
            "popular": self.popular,
        }


PLANS: Dict[SubscriptionTier, Plan] = {
    SubscriptionTier.starter: Plan(
        SubscriptionTier.starter,
        name="Starter",
        price=0,
        duration_days=21,
        duration_label="21 days",
        cost_rank="Free Trial",
        features=(
            "Publish 1 project",
            "Basic project presentation page",
            "Standard marketplace visibility",
            "Access to basic project insights",
            "No featured placement",
        ),
    ),
    SubscriptionTier.pro: Plan(
        SubscriptionTier.pro,
        name="Pro",
        price=199,
        duration_days=90,
        duration_label="3 months",
        cost_rank="Highest monthly rate",
        features=(
            "List up to 5 projects",
            "Enhanced platform visibility",
            "Access to investor inquiries & messaging",
            "Basic performance analytics",
            "Option to activate 7-day featured badge",
        ),
    ),
    SubscriptionTier.growth: Plan(
        SubscriptionTier.growth,
        name="Growth",
        price=299,
        duration_days=180,
        duration_label="6 months",
        cost_rank="Mid-high (best value)",
        features=(
            "List up to 10 projects",
            "Advanced analytics dashboard",
            "Rotating featured placements",
            "Investor engagement insights",
            "Newsletter promotional slots",
        ),
        popular=True,
    ),
    SubscriptionTier.enterprise: Plan(
        SubscriptionTier.enterprise,
        name="Enterprise",
        price=499,
        duration_days=365,
        duration_label="12 months",
        cost_rank="Best long-term value",
        features=(
            "Unlimited project listings",
            "Premium analytics + downloadable reports",
            "Year-long featured placement cycle",
            "Priority investor matching system",
            "Dedicated account support",
            "Brand customization",
        ),
    ),
}


def format_price(price: float) -> str:
    if price == 0:
        return "Free"
    return f"${price:g}"


def get_plan(tier: Union[SubscriptionTier, str]) -> Optional[Plan]:
    try:
        return PLANS.get(SubscriptionTier(tier))
    except ValueError:
        return None


def list_plans() -> List[Plan]:
    """Plans in upgrade order, starter first."""
    return [PLANS[t] for t in TIER_ORDER]


def is_current_plan(subscription: Optional[Subscription], tier: Union[SubscriptionTier, str]) -> bool:
    """Same tier AND active. A trial or cancelled plan is not 'current'."""
    if subscription is None:
        return False
    return subscription.tier == tier and subscription.status == SubscriptionStatus.active


# ---- Add-ons ------------------------------------------------------------


@dataclass(frozen=True)
class AddOnInfo:
    type: str
    name: str
    price: int
    duration: str
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "name": self.name,
            "price": self.price,
            "duration": self.duration,
            "description": self.description,
        }


ADD_ON_TYPES: Dict[str, AddOnInfo] = {
    "featured_boost": AddOnInfo(
        "featured_boost",
        name="Featured Boost",
        price=25,
        duration="week",
        description="High-visibility placement in Trending, Featured, and Top Investments sections.",
    ),
    "marketing_push": AddOnInfo(
        "marketing_push",
        name="Marketing Push",
        price=49,
        duration="campaign",
        description="Targeted promotion via email campaigns and investor dashboards.",
    ),
    "branding_customization": AddOnInfo(
        "branding_customization",
        name="Branding Customization",
        price=99,
        duration="one-time",
        description="Enhanced visual presentation with branded pages, banners, and custom templates.",
    ),
}


def get_add_on_info(add_on_type: str) -> AddOnInfo:
    """
    Catalog entry for an add-on type.

    Unknown types (new backend products) get a placeholder built from the
    type name so the UI can still list them.
    """
    info = ADD_ON_TYPES.get(add_on_type)
    if info is not None:
        return info
    return AddOnInfo(add_on_type, name=add_on_type.replace("_", " "), price=0, duration="")


def is_add_on_active(add_on: AddOn, now: Optional[datetime] = None) -> bool:
    """Active status and, when time-boxed, end date still ahead."""
    if add_on.status != AddOnStatus.active:
        return False
    if add_on.end_date is None:
        return True
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    end = add_on.end_date
    if end.tzinfo is None:
        end = end.replace(tzinfo=timezone.utc)
    return end > current
