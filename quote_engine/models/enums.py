"""
Enumeration definitions for the quote estimation engine.

All enums inherit from both `str` and `Enum` so they serialize to plain strings
inside Pydantic models and JSON documents (estimates are persisted by the
caller onto quote rows, whose check constraints expect these exact values).

Contents:
- ServiceType: known service identifiers in the default pricing table
- SizeBucket: property size used to select a price range
- EstimateConfidence: qualitative label on an estimate
- Qualification: lead temperature derived from the numeric score
- PriceModifier: named multiplicative price adjustments
- RulesSection: top-level sections of a rules configuration
"""

from enum import Enum


class ServiceType(str, Enum):
    """
    Service identifiers present in the compiled-in pricing table.

    Submissions are not restricted to these values: an unknown identifier is
    priced with a generic fallback range and lowers the estimate confidence.
    Administrators may also add services to the stored pricing table.
    """
    ROOF = "roof"
    DRIVEWAY = "driveway"
    GUTTER = "gutter"
    SOFTWASH = "softwash"
    RENDER = "render"
    WINDOW = "window"
    SOLAR = "solar"
    OTHER = "other"


class SizeBucket(str, Enum):
    """
    Property size bucket used to pick a service's [min, max] price range.

    Inferred from free text by the size classifier; a service pricing entry
    without a range for the bucket falls back to its `default` range.
    """
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class EstimateConfidence(str, Enum):
    """
    How much signal informed an estimate.

    - NONE: no services selected, no estimate produced
    - LOW: unknown service priced generically, or sparse answers
    - MEDIUM: starting point for any priced submission
    - HIGH: multi-service submission with complete answers
    """
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Qualification(str, Enum):
    """
    Lead temperature.

    Values match the quotes.qualification_status check constraint:
    - HOT: immediate follow-up
    - WARM: follow-up within 24h
    - COLD: follow-up within 3 days
    - UNQUALIFIED: low priority
    """
    HOT = "hot"
    WARM = "warm"
    COLD = "cold"
    UNQUALIFIED = "unqualified"


class PriceModifier(str, Enum):
    """
    Named multiplicative price modifiers.

    Values are the keys of the `modifiers` section of a rules configuration.
    """
    FIRST_TIME_CLEANING = "firstTimeCleaning"
    HEAVILY_SOILED = "heavilySoiled"
    DIFFICULT_ACCESS = "difficultAccess"
    HEIGHT_WORK = "heightWork"
    URGENT = "urgent"


class RulesSection(str, Enum):
    """
    Top-level sections of a rules configuration.

    Used to scope admin edits and to label change-history records. ALL marks a
    whole-configuration save or reset.
    """
    SERVICE_PRICING = "servicePricing"
    MODIFIERS = "modifiers"
    MULTI_SERVICE_DISCOUNT = "multiServiceDiscount"
    LEAD_SCORING = "leadScoring"
    QUALIFICATION_THRESHOLDS = "qualificationThresholds"
    CONVERSION_FACTORS = "conversionFactors"
    ALL = "all"
