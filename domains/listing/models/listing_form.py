from __future__ import annotations

import math
from typing import Dict, Generic, List, Optional, Tuple, TypeVar

from pydantic import BaseModel, Field

try:
    from domains.listing.models.listing_payload import (
        ListingFinancials,
        ListingLocation,
        ListingPayload,
        RiskAssessment,
        TimelinePhase,
    )
except ModuleNotFoundError:
    from listing_payload import (
        ListingFinancials,
        ListingLocation,
        ListingPayload,
        RiskAssessment,
        TimelinePhase,
    )


T = TypeVar("T")

TOTAL_STEPS = 4

CATEGORIES = ("residential", "commercial", "luxury", "sustainable", "heritage")
DISTRIBUTION_SCHEDULES = ("monthly", "quarterly", "annually", "at_completion")


class TimelineEntry(BaseModel):
    phase: str = ""
    description: str = ""
    start_date: str = ""
    end_date: str = ""
    status: str = "pending"

    def is_filled(self) -> bool:
        return bool(self.phase.strip() and self.description.strip())


class RepeatableField(BaseModel, Generic[T]):
    """
    Ordered, typed list behind a "+ Add another" form control.

    Index operations outside the list are ignored, the same way a stale
    click on an already-removed row does nothing.
    """

    items: List[T] = Field(default_factory=list)

    def add(self, item: T) -> None:
        self.items.append(item)

    def remove(self, index: int) -> None:
        if 0 <= index < len(self.items):
            del self.items[index]

    def update(self, index: int, item: T) -> None:
        if 0 <= index < len(self.items):
            self.items[index] = item

    def __len__(self) -> int:
        return len(self.items)

    def cleaned(self) -> List[T]:
        """Non-blank entries, strings stripped."""
        out: List[T] = []
        for item in self.items:
            if isinstance(item, str):
                if item.strip():
                    out.append(item.strip())  # type: ignore[arg-type]
            elif getattr(item, "is_filled", None) is None or item.is_filled():
                out.append(item)
        return out


class PendingFile(BaseModel):
    """A picked image that has not been uploaded yet."""

    name: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)


def _blank_strings() -> RepeatableField[str]:
    return RepeatableField[str](items=[""])


def _blank_timeline() -> RepeatableField[TimelineEntry]:
    return RepeatableField[TimelineEntry](items=[TimelineEntry()])


def _parse_number(raw: str) -> Optional[float]:
    """Finite float or None."""
    try:
        value = float(raw.strip())
    except (AttributeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def _parse_positive(raw: str, integer: bool = False) -> Optional[float]:
    value = _parse_number(raw)
    if value is None:
        return None
    if integer:
        value = int(value)
    if value <= 0:
        return None
    return value


class ListingForm(BaseModel):
    """
    Multi-step listing form state (project or property).

    Holds exactly what the user typed. Nothing here is coerced until
    to_payload(); field values survive failed submissions untouched.
    """

    kind: str = Field("project", description="'project' or 'property' (drives error wording)")

    # Step 1: basic information
    title: str = ""
    short_description: str = ""
    description: str = ""
    category: str = ""

    # Step 2: location
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = "Ghana"

    # Step 3: financials
    target_amount: str = ""
    minimum_investment: str = ""
    maximum_investment: str = ""
    roi: str = ""
    investment_term: str = ""
    distribution_schedule: str = ""
    total_project_cost: str = ""
    projected_return: str = ""
    expected_completion: str = ""

    # Step 4: details and media
    highlights: RepeatableField[str] = Field(default_factory=_blank_strings)
    risk_level: str = ""
    risk_factors: RepeatableField[str] = Field(default_factory=_blank_strings)
    mitigation_strategies: RepeatableField[str] = Field(default_factory=_blank_strings)
    timeline: RepeatableField[TimelineEntry] = Field(default_factory=_blank_timeline)
    images: List[PendingFile] = Field(default_factory=list)

    # ---- validation ----------------------------------------------------

    def required_fields(self, step: int) -> Tuple[Tuple[str, str], ...]:
        """(field, message) pairs that must be non-blank on a step."""
        label = self.kind.capitalize() or "Project"
        requirements = {
            1: (
                ("title", f"{label} title is required"),
                ("short_description", "Short description is required"),
                ("description", "Description is required"),
                ("category", "Category is required"),
            ),
            2: (
                ("address", "Address is required"),
                ("city", "City is required"),
                ("state", "State is required"),
                ("zip_code", "ZIP code is required"),
            ),
            3: (
                ("target_amount", "Target amount is required"),
                ("minimum_investment", "Minimum investment is required"),
                ("roi", "ROI is required"),
                ("investment_term", "Investment term is required"),
            ),
        }
        return requirements.get(step, ())

    def validate_step(self, step: int) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        for name, message in self.required_fields(step):
            if not str(getattr(self, name)).strip():
                errors[name] = message

        # Select fields: blank is handled above (or optional), anything else must be an option
        for name, label, options in self.choice_fields(step):
            value = str(getattr(self, name)).strip()
            if value and value not in options:
                errors[name] = f"{label} must be one of: {', '.join(options)}"
        return errors

    @staticmethod
    def choice_fields(step: int) -> Tuple[Tuple[str, str, Tuple[str, ...]], ...]:
        """(field, label, options) for the select inputs on a step."""
        if step == 1:
            return (("category", "Category", CATEGORIES),)
        if step == 3:
            return (("distribution_schedule", "Distribution schedule", DISTRIBUTION_SCHEDULES),)
        return ()

    def validate_all(self) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        for step in range(1, TOTAL_STEPS + 1):
            errors.update(self.validate_step(step))
        return errors

    def validate_financials(self) -> Dict[str, str]:
        """Required money/term fields must be finite and > 0."""
        checks = (
            ("target_amount", "Target amount", False),
            ("minimum_investment", "Minimum investment", False),
            ("roi", "ROI", False),
            ("investment_term", "Investment term", True),
        )
        errors: Dict[str, str] = {}
        for name, label, integer in checks:
            if _parse_positive(getattr(self, name), integer=integer) is None:
                errors[name] = f"{label} must be a valid positive number"
        return errors

    # ---- payload -------------------------------------------------------

    def to_payload(self) -> ListingPayload:
        """
        Build the creation payload.

        Raises:
            ValueError: if a required financial field is not a positive number
        """
        errors = self.validate_financials()
        if errors:
            raise ValueError(next(iter(errors.values())))

        timeline = [
            TimelinePhase(
                phase=t.phase.strip(),
                description=t.description.strip(),
                start_date=t.start_date or None,
                end_date=t.end_date or None,
                status=t.status or "pending",
            )
            for t in self.timeline.cleaned()
        ]

        return ListingPayload(
            title=self.title.strip(),
            short_description=self.short_description.strip(),
            description=self.description.strip(),
            category=self.category.strip(),
            location=ListingLocation(
                address=self.address.strip(),
                city=self.city.strip(),
                state=self.state.strip(),
                zip_code=self.zip_code.strip(),
                country=self.country.strip() or "Ghana",
            ),
            target_amount=_parse_positive(self.target_amount),
            minimum_investment=_parse_positive(self.minimum_investment),
            roi=_parse_positive(self.roi),
            investment_term=int(_parse_positive(self.investment_term, integer=True)),
            highlights=self.highlights.cleaned(),
            financials=ListingFinancials(
                total_project_cost=_parse_positive(self.total_project_cost),
                projected_return=_parse_positive(self.projected_return),
                expected_completion=self.expected_completion.strip() or None,
            ),
            risk_assessment=RiskAssessment(
                level=self.risk_level or "medium",
                factors=self.risk_factors.cleaned(),
                mitigation_strategies=self.mitigation_strategies.cleaned(),
            ),
            maximum_investment=_parse_positive(self.maximum_investment),
            distribution_schedule=self.distribution_schedule.strip() or None,
            timeline=timeline or None,
        )
