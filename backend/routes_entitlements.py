"""
backend/routes_entitlements.py

Read-only decision endpoints for the web UI.

Each endpoint is a thin wrapper over the pure functions in
backend.entitlements, backend.fees and backend.plans:
- No persistence, no auth state: the caller sends the subscription
- Input validation via Pydantic schemas (422 on bad input)
- Entitlement answers fail closed exactly like the library
"""

from __future__ import annotations

import math
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

try:
    from backend.config import DEFAULT_FEE_PERCENTAGE, IS_DEV
    from backend.entitlements import (
        can_create_project,
        limit_reached_message,
        next_tier,
        projects_remaining,
        resolve_limits,
        upgrade_message,
    )
    from backend.fees import fee_breakdown
    from backend.models import SubscriptionTier
    from backend.plans import ADD_ON_TYPES, list_plans
    from backend.schemas_entitlements import (
        AddOnListResponse,
        CanCreateProjectRequest,
        CanCreateProjectResponse,
        FeeQuoteResponse,
        LimitsRequest,
        LimitsResponse,
        PlanListResponse,
        UpgradeMessageResponse,
    )
except ModuleNotFoundError:
    from config import DEFAULT_FEE_PERCENTAGE, IS_DEV
    from entitlements import (
        can_create_project,
        limit_reached_message,
        next_tier,
        projects_remaining,
        resolve_limits,
        upgrade_message,
    )
    from fees import fee_breakdown
    from models import SubscriptionTier
    from plans import ADD_ON_TYPES, list_plans
    from schemas_entitlements import (
        AddOnListResponse,
        CanCreateProjectRequest,
        CanCreateProjectResponse,
        FeeQuoteResponse,
        LimitsRequest,
        LimitsResponse,
        PlanListResponse,
        UpgradeMessageResponse,
    )


router = APIRouter(
    prefix="/api",
    tags=["entitlements"],
)


@router.post("/entitlements/limits", response_model=LimitsResponse)
def get_limits(request: LimitsRequest) -> LimitsResponse:
    """
    Resolve feature limits for a subscription.

    Returns zero entitlements for a null or non-active subscription.
    """
    sub = request.subscription
    limits = resolve_limits(sub)

    if IS_DEV:
        print(f"[ENTITLEMENTS] limits tier={sub.tier.value if sub else None}, "
              f"status={sub.status.value if sub else None}, max_projects={limits.max_projects}")

    return LimitsResponse(
        limits=limits.to_dict(),
        tier=sub.tier.value if sub else None,
        status=sub.status.value if sub else None,
    )


@router.post("/entitlements/can-create-project", response_model=CanCreateProjectResponse)
def check_can_create_project(request: CanCreateProjectRequest) -> CanCreateProjectResponse:
    """
    Gate for the list-project flow.

    Args:
        request: subscription (nullable) and the account's current project count

    Returns:
        allowed flag, remaining slots, and the limit-reached message when blocked
    """
    sub = request.subscription
    allowed = can_create_project(sub, request.current_project_count)

    if IS_DEV and not allowed:
        print(f"[ENTITLEMENTS] Project limit reached: count={request.current_project_count}, "
              f"tier={sub.tier.value if sub else None}")

    return CanCreateProjectResponse(
        allowed=allowed,
        projects_remaining=projects_remaining(sub, request.current_project_count),
        message="" if allowed else limit_reached_message(sub),
    )


@router.get("/entitlements/upgrade-message", response_model=UpgradeMessageResponse)
def get_upgrade_message(
    tier: Optional[str] = Query(None, description="Current tier (omit when unsubscribed)"),
) -> UpgradeMessageResponse:
    """Upgrade prompt for a tier. Empty message means hide the prompt."""
    if tier is not None:
        try:
            SubscriptionTier(tier.lower())
        except ValueError:
            raise HTTPException(status_code=422, detail=f"Unknown tier: {tier}")

    target = next_tier(tier)
    return UpgradeMessageResponse(
        tier=tier.lower() if tier else None,
        next_tier=target.value if target else None,
        message=upgrade_message(tier),
    )


@router.get("/fees/quote", response_model=FeeQuoteResponse)
def quote_fee(
    amount: float = Query(..., description="Gross investment amount"),
    fee_percentage: float = Query(DEFAULT_FEE_PERCENTAGE, description="Fee percent (default 2.5)"),
) -> FeeQuoteResponse:
    """Fee and net amount for an investment. Amount sign is not validated."""
    # Fee math is only defined for finite numbers; "nan"/"inf" parse as floats
    for name, value in (("amount", amount), ("fee_percentage", fee_percentage)):
        if not math.isfinite(value):
            raise HTTPException(status_code=422, detail=f"{name} must be a finite number")
    if not math.isfinite(amount * (fee_percentage / 100)):
        raise HTTPException(status_code=422, detail="amount and fee_percentage are too large")

    breakdown = fee_breakdown(amount, fee_percentage)
    return FeeQuoteResponse(
        gross_amount=breakdown.gross_amount,
        fee_percentage=breakdown.fee_percentage,
        fee=breakdown.fee,
        net_amount=breakdown.net_amount,
    )


@router.get("/plans", response_model=PlanListResponse)
def get_plans() -> PlanListResponse:
    return PlanListResponse(plans=[p.to_dict() for p in list_plans()])


@router.get("/add-ons", response_model=AddOnListResponse)
def get_add_ons() -> AddOnListResponse:
    return AddOnListResponse(add_ons=[a.to_dict() for a in ADD_ON_TYPES.values()])
