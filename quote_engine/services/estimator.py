"""
Estimation Engine Service

Converts a quote submission and a rules configuration into a price range with a
confidence label. Pure functions, no I/O: the caller fetches the configuration
(normally through RulesCache) and persists the result.

Algorithm (calculate_estimate):
1. No services -> {min: None, max: None, confidence: none}
2. Sum each service's range for its size bucket; unknown services add the
   generic UNKNOWN_SERVICE_RANGE and drop confidence to low
3. Multiply both totals by the free-text modifier multiplier
4. At or above the multi-service threshold, apply the discount and raise
   confidence to high
5. Round both totals to the nearest 5
6. Answers missing or with fewer than MIN_ANSWERS_FOR_CONFIDENCE populated
   fields force confidence to low, overriding step 4

Confidence is adjusted in that exact order. Step 6 is a final clamp: a
multi-service submission with sparse answers ends up low, not high.
"""

import math
from typing import Tuple

from quote_engine.models.enums import EstimateConfidence, SizeBucket
from quote_engine.models.schemas import (
    Estimate,
    EstimatePreview,
    EstimatePreviewRequest,
    RulesConfiguration,
    Submission,
)
from quote_engine.services.text_signals import (
    apply_modifiers,
    calculate_modifiers,
    classify_size,
)


# Estimation logic revision, independent of the rules data
ENGINE_VERSION = "v1.1"

# Services missing from the pricing table are priced with this range
UNKNOWN_SERVICE_RANGE: Tuple[int, int] = (100, 300)

MIN_ANSWERS_FOR_CONFIDENCE = 5

ROUNDING_STEP = 5


def round_to_step(value: float, step: int = ROUNDING_STEP) -> int:
    """
    Round to the nearest multiple of `step`, halves rounding up.

    Monotonic, so rounding min and max independently never inverts them.
    """
    return int(math.floor(value / step + 0.5)) * step


def calculate_estimate(submission: Submission, config: RulesConfiguration) -> Estimate:
    """
    Calculate the price estimate for a submission.

    Args:
        submission: The customer's quote request
        config: Rules configuration to price against

    Returns:
        Estimate with rounded min/max (None when no services), confidence,
        engine version and the modifiers that fired
    """
    services = submission.services
    answers = submission.answers

    if not services:
        return Estimate(
            min=None,
            max=None,
            confidence=EstimateConfidence.NONE,
            engineVersion=ENGINE_VERSION,
        )

    total_min = 0.0
    total_max = 0.0
    confidence = EstimateConfidence.MEDIUM

    for service in services:
        pricing = config.servicePricing.get(service)

        if pricing is None:
            total_min += UNKNOWN_SERVICE_RANGE[0]
            total_max += UNKNOWN_SERVICE_RANGE[1]
            confidence = EstimateConfidence.LOW
            continue

        size = classify_size(service, answers)
        low, high = pricing.range_for(size)
        total_min += low
        total_max += high

    modifier_result = calculate_modifiers(answers, config.modifiers)
    total_min *= modifier_result.multiplier
    total_max *= modifier_result.multiplier

    discount = config.multiServiceDiscount
    if len(services) >= discount.threshold:
        total_min *= discount.discount
        total_max *= discount.discount
        confidence = EstimateConfidence.HIGH

    rounded_min = round_to_step(total_min)
    rounded_max = round_to_step(total_max)

    # Sparse answers override any earlier upgrade
    if answers is None or answers.populated_field_count() < MIN_ANSWERS_FOR_CONFIDENCE:
        confidence = EstimateConfidence.LOW

    return Estimate(
        min=rounded_min,
        max=rounded_max,
        confidence=confidence,
        engineVersion=ENGINE_VERSION,
        modifierReasons=modifier_result.reasons,
    )


def preview_estimate(
    request: EstimatePreviewRequest,
    config: RulesConfiguration
) -> EstimatePreview:
    """
    Price a mock quote against a configuration, for the admin pricing editor.

    Unlike calculate_estimate, the size bucket and the modifiers are chosen
    explicitly instead of inferred from free text, unknown services are
    skipped rather than priced generically, and no confidence is reported.

    Args:
        request: Services, size bucket and modifier switches to preview
        config: Configuration to preview, typically an unsaved admin draft

    Returns:
        EstimatePreview with rounded min/max and the adjustments applied
    """
    size = SizeBucket(request.size)
    total_min = 0.0
    total_max = 0.0

    for service in request.services:
        pricing = config.servicePricing.get(service)
        if pricing is None:
            continue
        low, high = pricing.range_for(size)
        total_min += low
        total_max += high

    selected = [
        modifier for modifier, enabled in request.modifiers.model_dump().items() if enabled
    ]
    modifier_result = apply_modifiers(selected, config.modifiers)
    total_min *= modifier_result.multiplier
    total_max *= modifier_result.multiplier

    reasons = modifier_result.reasons
    discount = config.multiServiceDiscount
    if len(request.services) >= discount.threshold:
        total_min *= discount.discount
        total_max *= discount.discount
        percent_off = round_to_step((1 - discount.discount) * 100, step=1)
        reasons.append(f"Multi-service discount ({percent_off}% off)")

    return EstimatePreview(
        min=round_to_step(total_min),
        max=round_to_step(total_max),
        modifierReasons=reasons,
    )


__all__ = [
    "calculate_estimate",
    "preview_estimate",
    "round_to_step",
    "ENGINE_VERSION",
    "UNKNOWN_SERVICE_RANGE",
    "MIN_ANSWERS_FOR_CONFIDENCE",
]
