from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


class _CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire (what the platform API expects)."""

    model_config = ConfigDict(populate_by_name=True)


class ListingLocation(_CamelModel):
    address: str
    city: str
    state: str
    zip_code: str = Field(..., alias="zipCode")
    country: str = "Ghana"


class ListingFinancials(_CamelModel):
    total_project_cost: Optional[float] = Field(None, alias="totalProjectCost")
    projected_return: Optional[float] = Field(None, alias="projectedReturn")
    expected_completion: Optional[str] = Field(None, alias="expectedCompletion")


class RiskAssessment(_CamelModel):
    level: str = "medium"
    factors: List[str] = Field(default_factory=list)
    mitigation_strategies: List[str] = Field(default_factory=list, alias="mitigationStrategies")


class TimelinePhase(_CamelModel):
    phase: str
    description: str
    start_date: Optional[str] = Field(None, alias="startDate")
    end_date: Optional[str] = Field(None, alias="endDate")
    status: str = "pending"


class ListingPayload(_CamelModel):
    """
    Creation payload for a property/project listing.

    This is what the frontend sends to POST /projects. Asset references
    (image URLs) are attached by the submission flow just before the call.
    """

    # Basic identity
    title: str
    short_description: str = Field(..., alias="shortDescription")
    description: str
    category: str
    location: ListingLocation

    # Required financials (validated positive before this model is built)
    target_amount: float = Field(..., alias="targetAmount")
    minimum_investment: float = Field(..., alias="minimumInvestment")
    roi: float
    investment_term: int = Field(..., alias="investmentTerm", description="Term in months")

    # New listings always start in review
    status: str = "pending"

    highlights: List[str] = Field(default_factory=list)
    financials: ListingFinancials = Field(default_factory=ListingFinancials)
    risk_assessment: RiskAssessment = Field(default_factory=RiskAssessment, alias="riskAssessment")

    # Optional extras: omitted from the wire body when None
    maximum_investment: Optional[float] = Field(None, alias="maximumInvestment")
    distribution_schedule: Optional[str] = Field(None, alias="distributionSchedule")
    timeline: Optional[List[TimelinePhase]] = None

    images: List[str] = Field(default_factory=list)

    def to_wire(self) -> Dict[str, Any]:
        """camelCase dict with unset optionals dropped (financials stays, even if empty)."""
        return self.model_dump(by_alias=True, exclude_none=True)
