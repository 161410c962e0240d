"""
backend/entitlements.py

Subscription-aware entitlements engine for EstateFund.

This module centralizes the logic for:
- Mapping a subscription tier to its feature limits
- Gating project creation against the tier's project cap
- Choosing the upgrade prompt shown for a tier

Key principles:
- Status gates tier: anything other than an active subscription gets zero
  entitlements (trial included, see DESIGN.md)
- Fail closed: missing, unknown or malformed subscription data resolves to
  the most restrictive limits, never to an error
- Pure Python logic - no FastAPI imports, no network, no database access

Source of truth: TIER_LIMITS below. The plan catalog reads max_projects
from here so UI copy and enforcement cannot drift.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

try:
    from backend.config import EXPIRING_SOON_DAYS
    from backend.models import (
        Subscription,
        SubscriptionStatus,
        SubscriptionTier,
        TIER_ORDER,
    )
except ModuleNotFoundError:
    from config import EXPIRING_SOON_DAYS
    from models import Subscription, SubscriptionStatus, SubscriptionTier, TIER_ORDER


UNLIMITED = "unlimited"

ProjectCap = Union[int, str]


# ============================================================================
# Feature Limits
# ============================================================================

@dataclass(frozen=True)
class FeatureLimits:
    """
    Capability set derived from (tier, status). Never persisted.

    max_projects is an int or UNLIMITED.
    """
    max_projects: ProjectCap
    can_feature_project: bool
    has_advanced_analytics: bool
    has_investor_messaging: bool
    has_newsletter_promotion: bool
    has_priority_matching: bool
    has_brand_customization: bool
    has_dedicated_support: bool

    @property
    def is_unlimited(self) -> bool:
        return self.max_projects == UNLIMITED

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


NO_ENTITLEMENTS = FeatureLimits(
    max_projects=0,
    can_feature_project=False,
    has_advanced_analytics=False,
    has_investor_messaging=False,
    has_newsletter_promotion=False,
    has_priority_matching=False,
    has_brand_customization=False,
    has_dedicated_support=False,
)

TIER_LIMITS: Dict[SubscriptionTier, FeatureLimits] = {
    SubscriptionTier.starter: FeatureLimits(
        max_projects=1,
        can_feature_project=False,
        has_advanced_analytics=False,
        has_investor_messaging=False,
        has_newsletter_promotion=False,
        has_priority_matching=False,
        has_brand_customization=False,
        has_dedicated_support=False,
    ),
    SubscriptionTier.pro: FeatureLimits(
        max_projects=5,
        can_feature_project=True,
        has_advanced_analytics=False,
        has_investor_messaging=True,
        has_newsletter_promotion=False,
        has_priority_matching=False,
        has_brand_customization=False,
        has_dedicated_support=False,
    ),
    SubscriptionTier.growth: FeatureLimits(
        max_projects=10,
        can_feature_project=True,
        has_advanced_analytics=True,
        has_investor_messaging=True,
        has_newsletter_promotion=True,
        has_priority_matching=False,
        has_brand_customization=False,
        has_dedicated_support=False,
    ),
    SubscriptionTier.enterprise: FeatureLimits(
        max_projects=UNLIMITED,
        can_feature_project=True,
        has_advanced_analytics=True,
        has_investor_messaging=True,
        has_newsletter_promotion=True,
        has_priority_matching=True,
        has_brand_customization=True,
        has_dedicated_support=True,
    ),
}

# Short names accepted by has_feature() (API query params, UI badges)
FEATURE_ALIASES: Dict[str, str] = {
    "feature": "can_feature_project",
    "boost": "can_feature_project",
    "featured": "can_feature_project",
    "analytics": "has_advanced_analytics",
    "advanced_analytics": "has_advanced_analytics",
    "messaging": "has_investor_messaging",
    "investor_messaging": "has_investor_messaging",
    "newsletter": "has_newsletter_promotion",
    "newsletter_promotion": "has_newsletter_promotion",
    "priority_matching": "has_priority_matching",
    "branding": "has_brand_customization",
    "brand_customization": "has_brand_customization",
    "support": "has_dedicated_support",
    "dedicated_support": "has_dedicated_support",
}

UPGRADE_MESSAGES: Dict[SubscriptionTier, str] = {
    SubscriptionTier.starter: "Upgrade to Pro to list more projects and unlock premium features.",
    SubscriptionTier.pro: "Upgrade to Growth for advanced analytics and more project listings.",
    SubscriptionTier.growth: "Upgrade to Enterprise for unlimited projects and premium features.",
    SubscriptionTier.enterprise: "",
}


def _coerce_tier(tier: Any) -> Optional[SubscriptionTier]:
    """Return a SubscriptionTier for an enum member or its string value, else None."""
    if isinstance(tier, SubscriptionTier):
        return tier
    if isinstance(tier, str):
        try:
            return SubscriptionTier(tier.lower())
        except ValueError:
            return None
    return None


# ============================================================================
# Limits Resolution
# ============================================================================

def resolve_limits(subscription: Optional[Subscription]) -> FeatureLimits:
    """
    Resolve feature limits for a subscription.

    Rules:
    - No subscription, or status other than active: NO_ENTITLEMENTS
    - Active: the tier's row in TIER_LIMITS
    - Unknown tier: NO_ENTITLEMENTS

    Args:
        subscription: Subscription or None

    Returns:
        FeatureLimits (never raises)
    """
    if subscription is None:
        return NO_ENTITLEMENTS

    status = getattr(subscription, "status", None)
    if status != SubscriptionStatus.active:
        return NO_ENTITLEMENTS

    tier = _coerce_tier(getattr(subscription, "tier", None))
    if tier is None:
        return NO_ENTITLEMENTS

    return TIER_LIMITS.get(tier, NO_ENTITLEMENTS)


def can_create_project(subscription: Optional[Subscription], current_project_count: int) -> bool:
    """
    Check whether the account may list one more project.

    At the cap, creation is blocked; the count must be strictly below it.
    With zero entitlements (cap 0) nothing can be listed.

    Args:
        subscription: Subscription or None
        current_project_count: Projects the account already owns, any status

    Returns:
        True if allowed, False otherwise
    """
    limits = resolve_limits(subscription)

    if limits.is_unlimited:
        return True

    return current_project_count < limits.max_projects


def projects_remaining(subscription: Optional[Subscription], current_project_count: int) -> ProjectCap:
    """Slots left under the cap, floored at 0, or UNLIMITED."""
    limits = resolve_limits(subscription)
    if limits.is_unlimited:
        return UNLIMITED
    return max(0, limits.max_projects - current_project_count)


def has_feature(subscription: Optional[Subscription], feature_name: str) -> bool:
    """
    Check a single capability flag by attribute name or short alias.

    Unknown feature names are denied.
    """
    if not feature_name:
        return False
    key = feature_name.lower()
    attr = FEATURE_ALIASES.get(key, key)
    if attr == "max_projects" or attr not in FeatureLimits.__dataclass_fields__:
        return False
    return bool(getattr(resolve_limits(subscription), attr))


def project_cap_value(limits: FeatureLimits) -> float:
    """max_projects as a number, with UNLIMITED as +inf (for comparisons)."""
    if limits.is_unlimited:
        return math.inf
    return float(limits.max_projects)


# ============================================================================
# Upgrade Messaging
# ============================================================================

def upgrade_message(current_tier: Optional[Union[SubscriptionTier, str]]) -> str:
    """
    Upgrade prompt for a tier.

    Looks at the tier only, never the status. An empty string means no
    upgrade exists and the caller should hide the prompt entirely.

    Args:
        current_tier: SubscriptionTier, its string value, or None

    Returns:
        Prompt text ("" for enterprise)
    """
    if current_tier is None:
        return UPGRADE_MESSAGES[SubscriptionTier.starter]

    tier = _coerce_tier(current_tier)
    if tier is None:
        return ""
    return UPGRADE_MESSAGES[tier]


def next_tier(current_tier: Optional[Union[SubscriptionTier, str]]) -> Optional[SubscriptionTier]:
    """The tier an upgrade prompt points to, or None at the top."""
    if current_tier is None:
        return SubscriptionTier.pro

    tier = _coerce_tier(current_tier)
    if tier is None:
        return None

    idx = TIER_ORDER.index(tier)
    if idx + 1 < len(TIER_ORDER):
        return TIER_ORDER[idx + 1]
    return None


def limit_reached_message(subscription: Optional[Subscription]) -> str:
    """Blocking message shown when can_create_project() is False."""
    tier = subscription.tier if subscription is not None else None
    parts = [
        "You've reached your project limit.",
        upgrade_message(tier),
        "Please upgrade your subscription at /subscriptions or contact support.",
    ]
    return " ".join(p for p in parts if p)


# ============================================================================
# Subscription Lifecycle Helpers (display only)
# ============================================================================

def _normalize(dt: Optional[datetime]) -> datetime:
    if dt is None:
        return datetime.now(timezone.utc)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def effective_status(subscription: Subscription, now: Optional[datetime] = None) -> SubscriptionStatus:
    """
    Lifecycle status as the UI should show it.

    A cancelled subscription stays cancelled (and displayed) until end_date;
    after that it, like an active one that ran out, reads as expired.
    resolve_limits() does not use this.
    """
    current = _normalize(now)
    if subscription.status in (SubscriptionStatus.active, SubscriptionStatus.cancelled):
        if _normalize(subscription.end_date) <= current:
            return SubscriptionStatus.expired
    return subscription.status


def days_remaining(subscription: Subscription, now: Optional[datetime] = None) -> int:
    """Whole days until end_date, rounded up (negative once past)."""
    delta = _normalize(subscription.end_date) - _normalize(now)
    return math.ceil(delta.total_seconds() / 86400)


def is_expiring_soon(subscription: Subscription, now: Optional[datetime] = None) -> bool:
    """True when the plan ends within EXPIRING_SOON_DAYS but has not ended."""
    days = days_remaining(subscription, now)
    return 0 < days <= EXPIRING_SOON_DAYS
