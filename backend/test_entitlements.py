"""
backend/test_entitlements.py

Regression tests for the subscription entitlements engine.

Tests verify:
1. Active subscriptions resolve to their tier's exact limits
2. Missing/inactive subscriptions fail closed (zero entitlements)
3. Limits never decrease along starter -> pro -> growth -> enterprise
4. Project-creation gate boundaries and the unlimited bypass
5. Upgrade prompts for every tier
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add repo root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from backend.entitlements import (
    NO_ENTITLEMENTS,
    TIER_LIMITS,
    UNLIMITED,
    FeatureLimits,
    can_create_project,
    days_remaining,
    effective_status,
    has_feature,
    is_expiring_soon,
    limit_reached_message,
    next_tier,
    project_cap_value,
    projects_remaining,
    resolve_limits,
    upgrade_message,
)
from backend.models import Subscription, SubscriptionStatus, SubscriptionTier, TIER_ORDER


FLAGS = [
    "can_feature_project",
    "has_advanced_analytics",
    "has_investor_messaging",
    "has_newsletter_promotion",
    "has_priority_matching",
    "has_brand_customization",
    "has_dedicated_support",
]

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_subscription(tier="pro", status="active", days_left=30, **overrides):
    data = dict(
        tier=tier,
        status=status,
        start_date=NOW - timedelta(days=10),
        end_date=NOW + timedelta(days=days_left),
        auto_renew=False,
    )
    data.update(overrides)
    return Subscription(**data)


# ============================================================================
# Test: resolve_limits
# ============================================================================

def test_resolve_limits_none_is_zero_entitlement():
    limits = resolve_limits(None)

    assert limits == NO_ENTITLEMENTS
    assert limits.max_projects == 0
    for flag in FLAGS:
        assert getattr(limits, flag) is False


@pytest.mark.parametrize("status", ["trial", "expired", "cancelled"])
def test_resolve_limits_inactive_status_is_zero_entitlement(status):
    """Status gates tier: even enterprise gets nothing unless active."""
    sub = make_subscription(tier="enterprise", status=status)

    assert resolve_limits(sub) == NO_ENTITLEMENTS


def test_fail_closed_none_equals_cancelled_enterprise():
    cancelled = make_subscription(tier="enterprise", status="cancelled")

    assert resolve_limits(None) == resolve_limits(cancelled) == NO_ENTITLEMENTS


def test_resolve_limits_starter():
    limits = resolve_limits(make_subscription(tier="starter"))

    assert limits.max_projects == 1
    for flag in FLAGS:
        assert getattr(limits, flag) is False


def test_resolve_limits_pro():
    limits = resolve_limits(make_subscription(tier="pro"))

    assert limits.max_projects == 5
    assert limits.can_feature_project is True
    assert limits.has_investor_messaging is True
    assert limits.has_advanced_analytics is False
    assert limits.has_newsletter_promotion is False
    assert limits.has_priority_matching is False
    assert limits.has_brand_customization is False
    assert limits.has_dedicated_support is False


def test_resolve_limits_growth():
    limits = resolve_limits(make_subscription(tier="growth"))

    assert limits.max_projects == 10
    assert limits.can_feature_project is True
    assert limits.has_advanced_analytics is True
    assert limits.has_investor_messaging is True
    assert limits.has_newsletter_promotion is True
    assert limits.has_priority_matching is False
    assert limits.has_brand_customization is False
    assert limits.has_dedicated_support is False


def test_resolve_limits_enterprise():
    limits = resolve_limits(make_subscription(tier="enterprise"))

    assert limits.max_projects == UNLIMITED
    assert limits.is_unlimited is True
    for flag in FLAGS:
        assert getattr(limits, flag) is True


def test_resolve_limits_unknown_tier_on_duck_typed_object():
    """Raw API objects with an unknown tier degrade to zero, never raise."""

    class RawSubscription:
        tier = "platinum"
        status = "active"

    assert resolve_limits(RawSubscription()) == NO_ENTITLEMENTS


def test_resolve_limits_accepts_plain_string_fields():
    class RawSubscription:
        tier = "growth"
        status = "active"

    assert resolve_limits(RawSubscription()).max_projects == 10


# ============================================================================
# Test: monotonic upgrade path
# ============================================================================

def test_limits_are_monotonic_across_tiers():
    ordered = [TIER_LIMITS[t] for t in TIER_ORDER]

    for lower, higher in zip(ordered, ordered[1:]):
        for flag in FLAGS:
            assert int(getattr(lower, flag)) <= int(getattr(higher, flag)), flag
        assert project_cap_value(lower) <= project_cap_value(higher)


def test_every_tier_has_limits():
    assert set(TIER_LIMITS) == set(SubscriptionTier)


def test_feature_limits_has_seven_flags():
    fields = [f for f in FeatureLimits.__dataclass_fields__ if f != "max_projects"]
    assert sorted(fields) == sorted(FLAGS)


# ============================================================================
# Test: can_create_project
# ============================================================================

def test_creation_gate_boundary_pro():
    sub = make_subscription(tier="pro")

    assert can_create_project(sub, 4) is True
    assert can_create_project(sub, 5) is False
    assert can_create_project(sub, 6) is False


def test_creation_gate_starter_allows_first_project_only():
    sub = make_subscription(tier="starter")

    assert can_create_project(sub, 0) is True
    assert can_create_project(sub, 1) is False


def test_unlimited_bypass_enterprise():
    sub = make_subscription(tier="enterprise")

    assert can_create_project(sub, 1_000_000) is True


def test_no_subscription_cannot_create_anything():
    assert can_create_project(None, 0) is False


def test_trial_cannot_create_projects():
    sub = make_subscription(tier="starter", status="trial")

    assert can_create_project(sub, 0) is False


def test_projects_remaining():
    assert projects_remaining(make_subscription(tier="growth"), 3) == 7
    assert projects_remaining(make_subscription(tier="pro"), 9) == 0
    assert projects_remaining(make_subscription(tier="enterprise"), 50) == UNLIMITED
    assert projects_remaining(None, 0) == 0


# ============================================================================
# Test: has_feature
# ============================================================================

def test_has_feature_by_alias_and_attribute():
    growth = make_subscription(tier="growth")

    assert has_feature(growth, "analytics") is True
    assert has_feature(growth, "has_newsletter_promotion") is True
    assert has_feature(growth, "branding") is False


def test_has_feature_unknown_or_limit_name_is_denied():
    enterprise = make_subscription(tier="enterprise")

    assert has_feature(enterprise, "teleportation") is False
    assert has_feature(enterprise, "max_projects") is False
    assert has_feature(enterprise, "") is False


# ============================================================================
# Test: upgrade_message
# ============================================================================

def test_upgrade_message_enterprise_is_empty():
    assert upgrade_message("enterprise") == ""
    assert upgrade_message(SubscriptionTier.enterprise) == ""


def test_upgrade_message_none_matches_starter():
    assert upgrade_message(None) == upgrade_message("starter")
    assert upgrade_message(None) != ""


def test_upgrade_message_wording():
    starter = upgrade_message("starter")
    assert "Pro" in starter
    assert "list more projects" in starter
    assert "premium features" in starter

    pro = upgrade_message("pro")
    assert "Growth" in pro
    assert "advanced analytics" in pro
    assert "more project listings" in pro

    growth = upgrade_message("growth")
    assert "Enterprise" in growth
    assert "unlimited projects" in growth
    assert "premium features" in growth


@pytest.mark.parametrize("tier", [None, "starter", "pro", "growth", "enterprise"])
def test_upgrade_message_is_total(tier):
    assert isinstance(upgrade_message(tier), str)


def test_upgrade_message_ignores_status():
    """Only the tier matters, so an inactive plan still gets a prompt."""
    cancelled = make_subscription(tier="pro", status="cancelled")

    assert upgrade_message(cancelled.tier) == upgrade_message("pro")


def test_next_tier():
    assert next_tier(None) == SubscriptionTier.pro
    assert next_tier("starter") == SubscriptionTier.pro
    assert next_tier("pro") == SubscriptionTier.growth
    assert next_tier("growth") == SubscriptionTier.enterprise
    assert next_tier("enterprise") is None


def test_limit_reached_message():
    msg = limit_reached_message(make_subscription(tier="pro"))

    assert msg.startswith("You've reached your project limit.")
    assert upgrade_message("pro") in msg
    assert msg.endswith("Please upgrade your subscription at /subscriptions or contact support.")


def test_limit_reached_message_enterprise_has_no_double_space():
    msg = limit_reached_message(make_subscription(tier="enterprise"))

    assert "  " not in msg


# ============================================================================
# Test: lifecycle helpers
# ============================================================================

def test_effective_status_cancelled_before_end_date():
    sub = make_subscription(status="cancelled", days_left=5)

    assert effective_status(sub, now=NOW) == SubscriptionStatus.cancelled


def test_effective_status_cancelled_after_end_date_is_expired():
    sub = make_subscription(status="cancelled", days_left=-1)

    assert effective_status(sub, now=NOW) == SubscriptionStatus.expired


def test_effective_status_trial_is_untouched():
    sub = make_subscription(status="trial", days_left=-1)

    assert effective_status(sub, now=NOW) == SubscriptionStatus.trial


def test_effective_status_handles_naive_datetimes():
    sub = make_subscription(end_date=datetime(2026, 2, 1))

    assert effective_status(sub, now=datetime(2026, 3, 1)) == SubscriptionStatus.expired


def test_days_remaining_and_expiring_soon():
    soon = make_subscription(days_left=3)
    later = make_subscription(days_left=30)
    ended = make_subscription(days_left=-2)

    assert days_remaining(soon, now=NOW) == 3
    assert is_expiring_soon(soon, now=NOW) is True
    assert is_expiring_soon(later, now=NOW) is False
    assert is_expiring_soon(ended, now=NOW) is False


def test_subscription_accepts_api_camel_case():
    sub = Subscription(**{
        "_id": "sub_1",
        "tier": "growth",
        "status": "active",
        "startDate": "2026-01-01T00:00:00Z",
        "endDate": "2026-07-01T00:00:00Z",
        "autoRenew": True,
    })

    assert sub.id == "sub_1"
    assert sub.auto_renew is True
    assert resolve_limits(sub).max_projects == 10


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
