"""
backend/test_plans.py

Regression tests for the plan and add-on catalog.

The catalog is display data; these tests pin prices/durations and make sure
the advertised project limits come from the entitlement table.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add repo root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from backend.entitlements import TIER_LIMITS, UNLIMITED
from backend.models import AddOn, Subscription, SubscriptionTier
from backend.plans import (
    ADD_ON_TYPES,
    PLANS,
    format_price,
    get_add_on_info,
    get_plan,
    is_add_on_active,
    is_current_plan,
    list_plans,
)


NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _sub(tier, status="active"):
    return Subscription(
        tier=tier,
        status=status,
        start_date=NOW - timedelta(days=1),
        end_date=NOW + timedelta(days=30),
    )


def test_plan_prices_and_durations():
    expected = {
        "starter": (0, 21),
        "pro": (199, 90),
        "growth": (299, 180),
        "enterprise": (499, 365),
    }
    for tier, (price, days) in expected.items():
        plan = get_plan(tier)
        assert plan.price == price
        assert plan.duration_days == days


def test_only_growth_is_popular():
    assert [p.tier for p in PLANS.values() if p.popular] == [SubscriptionTier.growth]


def test_list_plans_in_upgrade_order():
    assert [p.tier.value for p in list_plans()] == ["starter", "pro", "growth", "enterprise"]


def test_plan_max_projects_follows_entitlements():
    for tier, plan in PLANS.items():
        assert plan.max_projects == TIER_LIMITS[tier].max_projects
    assert get_plan("enterprise").max_projects == UNLIMITED


def test_get_plan_unknown_tier():
    assert get_plan("platinum") is None


def test_format_price():
    assert format_price(0) == "Free"
    assert format_price(199) == "$199"


def test_plan_to_dict():
    data = get_plan("growth").to_dict()

    assert data["tier"] == "growth"
    assert data["price_label"] == "$299"
    assert data["max_projects"] == 10
    assert data["popular"] is True
    assert isinstance(data["features"], list)


def test_is_current_plan_requires_active_status():
    assert is_current_plan(_sub("pro"), "pro") is True
    assert is_current_plan(_sub("pro"), SubscriptionTier.growth) is False
    assert is_current_plan(_sub("pro", status="cancelled"), "pro") is False
    assert is_current_plan(None, "starter") is False


def test_add_on_catalog():
    assert set(ADD_ON_TYPES) == {"featured_boost", "marketing_push", "branding_customization"}
    assert get_add_on_info("featured_boost").price == 25
    assert get_add_on_info("marketing_push").duration == "campaign"
    assert get_add_on_info("branding_customization").duration == "one-time"


def test_unknown_add_on_gets_placeholder():
    info = get_add_on_info("newsletter_spot")

    assert info.name == "newsletter spot"
    assert info.price == 0
    assert info.duration == ""


def test_is_add_on_active():
    running = AddOn(type="featured_boost", price=25, status="active", end_date=NOW + timedelta(days=3))
    lapsed = AddOn(type="featured_boost", price=25, status="active", end_date=NOW - timedelta(days=1))
    one_time = AddOn(type="branding_customization", price=99, status="active")
    expired = AddOn(type="marketing_push", price=49, status="expired")

    assert is_add_on_active(running, now=NOW) is True
    assert is_add_on_active(lapsed, now=NOW) is False
    assert is_add_on_active(one_time, now=NOW) is True
    assert is_add_on_active(expired, now=NOW) is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
