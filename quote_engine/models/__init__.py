"""
Package initialization file for quote engine models.

Re-exports all Pydantic schemas and enumerations so other modules can write:

    from quote_engine.models import Submission, Estimate, Qualification
"""

# =============================================================================
# Enums
# =============================================================================

from quote_engine.models.enums import (
    ServiceType,
    SizeBucket,
    EstimateConfidence,
    Qualification,
    PriceModifier,
    RulesSection,
)


# =============================================================================
# Schemas
# =============================================================================

from quote_engine.models.schemas import (
    # Submission inputs
    SubmissionAnswers,
    Submission,
    # Rules configuration
    PriceRange,
    ServicePricing,
    Modifiers,
    MultiServiceDiscount,
    LeadScoring,
    QualificationThresholds,
    ConversionFactors,
    RulesConfiguration,
    # Outputs
    Estimate,
    ScoreResult,
    SubmissionEvaluation,
    ChangeRecord,
    # Admin preview
    ModifierSelection,
    EstimatePreviewRequest,
    EstimatePreview,
)


__all__ = [
    # Enums
    "ServiceType",
    "SizeBucket",
    "EstimateConfidence",
    "Qualification",
    "PriceModifier",
    "RulesSection",
    # Submission inputs
    "SubmissionAnswers",
    "Submission",
    # Rules configuration
    "PriceRange",
    "ServicePricing",
    "Modifiers",
    "MultiServiceDiscount",
    "LeadScoring",
    "QualificationThresholds",
    "ConversionFactors",
    "RulesConfiguration",
    # Outputs
    "Estimate",
    "ScoreResult",
    "SubmissionEvaluation",
    "ChangeRecord",
    # Admin preview
    "ModifierSelection",
    "EstimatePreviewRequest",
    "EstimatePreview",
]
