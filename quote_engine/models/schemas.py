"""
Pydantic models for the quote estimation engine.

This module defines the three families of data the engine works with:

- Submission inputs: a customer's quote request (selected services plus
  free-form answers). Read-only; loosely structured answers are captured in an
  explicit optional-field record.
- Rules configuration: pricing tables, modifiers, multi-service discount,
  lead-scoring weights, qualification thresholds and conversion factors.
  Cross-field invariants (min <= max, hot > warm > cold) are enforced here so
  an invalid admin edit is rejected before it is persisted.
- Outputs: Estimate, ScoreResult, ChangeRecord and the admin preview models.

All models use Pydantic v2 syntax. Field names are camelCase because they are
also the keys of the JSON document stored in the settings table.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from quote_engine.models.enums import (
    EstimateConfidence,
    Qualification,
    SizeBucket,
)


# [min, max] in currency units
PriceRange = Tuple[float, float]


def _is_populated(value: Any) -> bool:
    """True when a free-form answer carries information."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) > 0
    return True


# =============================================================================
# Submission Models
# =============================================================================


class SubmissionAnswers(BaseModel):
    """
    Free-form answers from the quote request form.

    Every field is optional. Answer keys the engine does not interpret are kept
    (extra="allow") because they still count toward answer completeness,
    which drives estimate confidence.
    """
    model_config = ConfigDict(
        extra='allow',
        coerce_numbers_to_str=True,
        json_schema_extra={
            "example": {
                "propertyType": "Detached house",
                "roughSize": "large",
                "lastCleaned": "Never",
                "specificDetails": "Moss buildup on roof",
                "accessNotes": "Good access from driveway"
            }
        }
    )

    roughSize: Optional[str] = Field(
        default=None,
        description="Explicit size hint (e.g. 'small', 'large 4-bed')"
    )
    propertyType: Optional[str] = Field(
        default=None,
        description="Property type text (e.g. 'Semi-detached', 'Commercial unit')"
    )
    lastCleaned: Optional[str] = Field(
        default=None,
        description="When the surfaces were last cleaned (e.g. 'never', '3 years ago')"
    )
    specificDetails: Optional[str] = Field(
        default=None,
        description="Free-text description of the job"
    )
    accessNotes: Optional[str] = Field(
        default=None,
        description="Free-text notes about site access"
    )

    def populated_field_count(self) -> int:
        """Number of answers, declared or extra, that are neither null nor blank."""
        return sum(1 for value in self.model_dump().values() if _is_populated(value))


class Submission(BaseModel):
    """
    A customer's quote request as consumed by the estimator and scorer.

    `services` is a set: duplicates are collapsed keeping first-seen order,
    and blank identifiers are dropped. `remindersOptIn` and
    `preferredContactMethod` also accept the quote-row names `remindersOk`
    and `preferredContact`.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "services": ["roof", "gutter"],
                "answers": {
                    "propertyType": "Detached house",
                    "roughSize": "large",
                    "lastCleaned": "over a year ago",
                    "specificDetails": "Moss buildup on roof",
                    "accessNotes": "Good access from driveway"
                },
                "remindersOptIn": True,
                "preferredContactMethod": "Phone call"
            }
        }
    )

    services: List[str] = Field(
        default_factory=list,
        description="Requested service identifiers (e.g. 'roof', 'driveway')"
    )
    answers: Optional[SubmissionAnswers] = Field(
        default=None,
        description="Free-form answers from the quote form"
    )
    remindersOptIn: Optional[bool] = Field(
        default=None,
        validation_alias=AliasChoices('remindersOptIn', 'remindersOk'),
        description="Whether the customer opted in to reminders"
    )
    preferredContactMethod: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices('preferredContactMethod', 'preferredContact'),
        description="Preferred contact method as typed or selected by the customer"
    )

    @field_validator('services', mode='before')
    @classmethod
    def _none_means_no_services(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator('services')
    @classmethod
    def _collapse_services(cls, value: List[str]) -> List[str]:
        seen: List[str] = []
        for service in value:
            if service and service not in seen:
                seen.append(service)
        return seen


# =============================================================================
# Rules Configuration Models
# =============================================================================


class ServicePricing(BaseModel):
    """
    Price ranges for one service, per size bucket.

    `default` is used whenever the bucket picked for a submission has no
    explicit range.
    """
    small: Optional[PriceRange] = Field(default=None, description="[min, max] for small properties")
    medium: Optional[PriceRange] = Field(default=None, description="[min, max] for medium properties")
    large: Optional[PriceRange] = Field(default=None, description="[min, max] for large properties")
    default: PriceRange = Field(..., description="[min, max] when size is unknown")

    @model_validator(mode='after')
    def _check_ranges(self) -> 'ServicePricing':
        for bucket in ('small', 'medium', 'large', 'default'):
            price_range = getattr(self, bucket)
            if price_range is None:
                continue
            low, high = price_range
            if low < 0 or high < 0:
                raise ValueError(f"{bucket} price range must be non-negative, got {list(price_range)}")
            if low > high:
                raise ValueError(f"{bucket} price range has min > max: {list(price_range)}")
        return self

    def range_for(self, size: SizeBucket) -> PriceRange:
        """Range for a size bucket, falling back to the default range."""
        price_range = getattr(self, SizeBucket(size).value)
        return price_range if price_range is not None else self.default


class Modifiers(BaseModel):
    """Multipliers applied to both ends of the price range when a signal fires."""
    firstTimeCleaning: float = Field(..., gt=0, description="Never or not recently cleaned")
    heavilySoiled: float = Field(..., gt=0, description="Moss, algae, staining, very dirty")
    difficultAccess: float = Field(..., gt=0, description="Narrow or hard-to-reach site")
    heightWork: float = Field(..., gt=0, description="High-level work needing special equipment")
    urgent: float = Field(..., gt=0, description="Customer asked for urgent work")


class MultiServiceDiscount(BaseModel):
    """Discount applied when at least `threshold` services are requested."""
    threshold: int = Field(..., ge=2, description="Number of services to qualify")
    discount: float = Field(..., gt=0, le=1, description="Multiplier, e.g. 0.9 for 10% off")


class LeadScoring(BaseModel):
    """Base score and additive bonuses for lead scoring."""
    baseScore: float = Field(..., gt=0)

    highValueThreshold: float = Field(..., ge=0)
    highValueBonus: float = Field(..., ge=0)
    veryHighValueThreshold: float = Field(..., ge=0)
    veryHighValueBonus: float = Field(..., ge=0)

    multipleServicesBonus: float = Field(..., ge=0, description="Exactly two services")
    manyServicesBonus: float = Field(..., ge=0, description="Three or more services")

    remindersOptIn: float = Field(..., ge=0)
    phonePreferred: float = Field(..., ge=0)
    emailPreferred: float = Field(..., ge=0)

    commercialProperty: float = Field(..., ge=0)
    urgentLanguage: float = Field(..., ge=0)


class QualificationThresholds(BaseModel):
    """Minimum scores for each tier; below `cold` is unqualified."""
    hot: float = Field(..., ge=0, le=100)
    warm: float = Field(..., ge=0, le=100)
    cold: float = Field(..., ge=0, le=100)

    @model_validator(mode='after')
    def _check_order(self) -> 'QualificationThresholds':
        if not (self.hot > self.warm > self.cold):
            raise ValueError(
                f"Thresholds must satisfy hot > warm > cold, got "
                f"hot={self.hot}, warm={self.warm}, cold={self.cold}"
            )
        return self


class ConversionFactors(BaseModel):
    """Conversion probability per qualification tier."""
    hotLead: float = Field(..., ge=0, le=1)
    warmLead: float = Field(..., ge=0, le=1)
    coldLead: float = Field(..., ge=0, le=1)
    unqualified: float = Field(..., ge=0, le=1)

    def for_tier(self, qualification: Qualification) -> float:
        tier_fields = {
            Qualification.HOT: self.hotLead,
            Qualification.WARM: self.warmLead,
            Qualification.COLD: self.coldLead,
            Qualification.UNQUALIFIED: self.unqualified,
        }
        return tier_fields[Qualification(qualification)]


class RulesConfiguration(BaseModel):
    """
    Complete, validated rules configuration.

    Instances are always built from a document merged against the compiled-in
    defaults, so every section and key is present.
    """
    servicePricing: Dict[str, ServicePricing]
    modifiers: Modifiers
    multiServiceDiscount: MultiServiceDiscount
    leadScoring: LeadScoring
    qualificationThresholds: QualificationThresholds
    conversionFactors: ConversionFactors


# =============================================================================
# Output Models
# =============================================================================


class Estimate(BaseModel):
    """
    Price estimate for a submission.

    `min` and `max` are rounded to the nearest 5 currency units and are both
    null when no services were requested.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "min": 870,
                "max": 1420,
                "confidence": "medium",
                "engineVersion": "v1.1",
                "modifierReasons": ["First time cleaning", "Heavily soiled"]
            }
        }
    )

    min: Optional[int] = Field(default=None, ge=0, description="Lower bound")
    max: Optional[int] = Field(default=None, ge=0, description="Upper bound")
    confidence: EstimateConfidence = Field(..., description="How much signal informed the estimate")
    engineVersion: str = Field(..., description="Estimation logic revision")
    modifierReasons: List[str] = Field(
        default_factory=list,
        description="Price modifiers that fired, in evaluation order"
    )


class ScoreResult(BaseModel):
    """Lead score, qualification tier and the signals that produced them."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "score": 95,
                "qualification": "hot",
                "conversionLikelihood": 0.8,
                "reasons": ["High-value job (£1420)", "Two services selected"]
            }
        }
    )

    score: int = Field(..., ge=0, le=100)
    qualification: Qualification
    conversionLikelihood: float = Field(..., ge=0, le=1)
    reasons: List[str] = Field(default_factory=list)


class SubmissionEvaluation(BaseModel):
    """Estimate and score computed against one rules configuration."""
    estimate: Estimate
    score: ScoreResult
    alertAdmin: bool = Field(..., description="Whether the lead warrants an admin alert")


class ChangeRecord(BaseModel):
    """One append-only entry of the pricing change history."""
    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    section: str = Field(..., description="RulesSection value, or 'all'")
    oldValue: Optional[Any] = Field(default=None, description="Snapshot before the change")
    newValue: Optional[Any] = Field(default=None, description="Snapshot after the change (null on reset)")
    description: Optional[str] = None
    createdAt: Optional[datetime] = None


# =============================================================================
# Admin Preview Models
# =============================================================================


class ModifierSelection(BaseModel):
    """Modifiers an administrator switches on explicitly in a pricing preview."""
    firstTimeCleaning: bool = False
    heavilySoiled: bool = False
    difficultAccess: bool = False
    heightWork: bool = False
    urgent: bool = False


class EstimatePreviewRequest(BaseModel):
    """Mock quote used to try a (possibly unsaved) configuration."""
    services: List[str] = Field(default_factory=list)
    size: SizeBucket = SizeBucket.MEDIUM
    modifiers: ModifierSelection = Field(default_factory=ModifierSelection)


class EstimatePreview(BaseModel):
    """Result of a pricing preview."""
    min: int
    max: int
    modifierReasons: List[str] = Field(default_factory=list)
