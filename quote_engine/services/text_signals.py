"""
Free-Text Signal Detection

Shared helpers that read the customer's free-form answers:

- classify_size(): infer the property size bucket used to pick a price range
- calculate_modifiers(): detect language that triggers price modifiers
- contains_any(): case-insensitive substring matching used throughout

Every check is a case-insensitive substring test against a fixed keyword
list, so "Semi-detached" matches both "semi" and "detached" and the first rule
in evaluation order wins.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from quote_engine.models.enums import PriceModifier, SizeBucket
from quote_engine.models.schemas import Modifiers, SubmissionAnswers


# =============================================================================
# Keyword Lists
# =============================================================================

# Explicit size hint (answers.roughSize)
SMALL_SIZE_KEYWORDS = ("small", "compact")
LARGE_SIZE_KEYWORDS = ("large", "big")

# Property type inference (answers.propertyType), evaluated in this order
COMMERCIAL_KEYWORDS = ("commercial", "business")
SMALL_PROPERTY_KEYWORDS = ("bungalow", "flat", "apartment")
LARGE_PROPERTY_KEYWORDS = ("detached",)
MEDIUM_PROPERTY_KEYWORDS = ("semi", "terrace")

# answers.lastCleaned
FIRST_TIME_KEYWORDS = ("never", "years", "over a year")

# answers.specificDetails
HEAVILY_SOILED_KEYWORDS = ("very dirty", "heavily soiled", "moss", "algae", "stained")

# answers.accessNotes
DIFFICULT_ACCESS_KEYWORDS = ("difficult", "narrow", "limited access", "hard to reach")

# answers.accessNotes ("two stor" covers storey/story/storeys)
HEIGHT_ACCESS_KEYWORDS = ("high", "tall", "two stor", "three stor")
HEIGHT_DETAIL_KEYWORDS = ("high",)

# answers.specificDetails
URGENT_DETAIL_KEYWORDS = ("urgent", "asap", "as soon as", "quickly")

MODIFIER_REASONS = {
    PriceModifier.FIRST_TIME_CLEANING: "First time cleaning",
    PriceModifier.HEAVILY_SOILED: "Heavily soiled",
    PriceModifier.DIFFICULT_ACCESS: "Difficult access",
    PriceModifier.HEIGHT_WORK: "Height work required",
    PriceModifier.URGENT: "Urgent request",
}


# =============================================================================
# Matching Helpers
# =============================================================================


def normalize_text(value: Optional[str]) -> str:
    """Lower-cased text, or an empty string for a missing answer."""
    return value.lower() if value else ""


def contains_any(text: Optional[str], keywords: Iterable[str]) -> bool:
    """Case-insensitive substring match of any keyword in `text`."""
    haystack = normalize_text(text)
    if not haystack:
        return False
    return any(keyword in haystack for keyword in keywords)


# =============================================================================
# Size Classifier
# =============================================================================


def classify_size(service: str, answers: Optional[SubmissionAnswers]) -> SizeBucket:
    """
    Infer the property size bucket for a service.

    An explicit size hint wins when present: small/compact -> small,
    large/big -> large, any other hint -> medium. Without a hint the property
    type decides: commercial/business -> large, bungalow/flat/apartment ->
    small, detached -> large, semi/terrace -> medium. Anything else is medium.

    The same bucket is currently used for every service; `service` is accepted
    so per-service inference can be added without changing callers.

    Args:
        service: Service identifier being priced
        answers: The submission's free-form answers, possibly None

    Returns:
        SizeBucket
    """
    if answers is None:
        return SizeBucket.MEDIUM

    rough_size = normalize_text(answers.roughSize)
    if rough_size:
        if contains_any(rough_size, SMALL_SIZE_KEYWORDS):
            return SizeBucket.SMALL
        if contains_any(rough_size, LARGE_SIZE_KEYWORDS):
            return SizeBucket.LARGE
        return SizeBucket.MEDIUM

    property_type = normalize_text(answers.propertyType)
    if property_type:
        if contains_any(property_type, COMMERCIAL_KEYWORDS):
            return SizeBucket.LARGE
        if contains_any(property_type, SMALL_PROPERTY_KEYWORDS):
            return SizeBucket.SMALL
        if contains_any(property_type, LARGE_PROPERTY_KEYWORDS):
            return SizeBucket.LARGE
        if contains_any(property_type, MEDIUM_PROPERTY_KEYWORDS):
            return SizeBucket.MEDIUM

    return SizeBucket.MEDIUM


# =============================================================================
# Modifier Engine
# =============================================================================


@dataclass
class ModifierResult:
    """Combined multiplier and the modifiers that produced it, in order."""
    multiplier: float = 1.0
    applied: List[PriceModifier] = field(default_factory=list)

    @property
    def reasons(self) -> List[str]:
        return [MODIFIER_REASONS[modifier] for modifier in self.applied]


def detect_modifiers(answers: Optional[SubmissionAnswers]) -> List[PriceModifier]:
    """
    Detect which price modifiers the free-text answers trigger.

    Every modifier is checked independently; a submission can trigger any
    combination. Order: first-time cleaning, heavily soiled, difficult access,
    height work, urgent.
    """
    if answers is None:
        return []

    details = answers.specificDetails
    access = answers.accessNotes
    detected: List[PriceModifier] = []

    if contains_any(answers.lastCleaned, FIRST_TIME_KEYWORDS):
        detected.append(PriceModifier.FIRST_TIME_CLEANING)

    if contains_any(details, HEAVILY_SOILED_KEYWORDS):
        detected.append(PriceModifier.HEAVILY_SOILED)

    if contains_any(access, DIFFICULT_ACCESS_KEYWORDS):
        detected.append(PriceModifier.DIFFICULT_ACCESS)

    if contains_any(access, HEIGHT_ACCESS_KEYWORDS) or contains_any(details, HEIGHT_DETAIL_KEYWORDS):
        detected.append(PriceModifier.HEIGHT_WORK)

    if contains_any(details, URGENT_DETAIL_KEYWORDS):
        detected.append(PriceModifier.URGENT)

    return detected


def apply_modifiers(selected: Iterable[PriceModifier], modifiers: Modifiers) -> ModifierResult:
    """Compose the multipliers of `selected` from the configured modifier table."""
    result = ModifierResult()
    for modifier in selected:
        modifier = PriceModifier(modifier)
        result.multiplier *= getattr(modifiers, modifier.value)
        result.applied.append(modifier)
    return result


def calculate_modifiers(
    answers: Optional[SubmissionAnswers],
    modifiers: Modifiers
) -> ModifierResult:
    """
    Compute the price multiplier for a submission's answers.

    Starts at 1.0 and multiplies in every modifier whose language is present.

    Args:
        answers: The submission's free-form answers, possibly None
        modifiers: Multiplier table from the rules configuration

    Returns:
        ModifierResult with the combined multiplier and applied modifiers
    """
    return apply_modifiers(detect_modifiers(answers), modifiers)


__all__ = [
    "classify_size",
    "calculate_modifiers",
    "detect_modifiers",
    "apply_modifiers",
    "contains_any",
    "normalize_text",
    "ModifierResult",
    "MODIFIER_REASONS",
    "FIRST_TIME_KEYWORDS",
    "HEAVILY_SOILED_KEYWORDS",
    "DIFFICULT_ACCESS_KEYWORDS",
    "HEIGHT_ACCESS_KEYWORDS",
    "URGENT_DETAIL_KEYWORDS",
]
