"""
Lead Scoring Engine Service

Scores lead quality from a submission and its estimate, then maps the score to a
qualification tier and a conversion likelihood. Pure functions, no I/O.

Scoring starts at leadScoring.baseScore and adds independent bonuses, in this
order (the order of `reasons` follows it):

1. Financial value: very-high-value bonus, else high-value bonus
2. Service quantity: 3+ services, else exactly two
3. Reminders opt-in
4. Contact preference: phone/call, else email
5. Commercial property
6. Urgency language in specific details or access notes

The total is capped at 100 and rounded; tiers are assigned with >= against
qualificationThresholds, checked hot -> warm -> cold.
"""

import math
from typing import List

from quote_engine.models.enums import Qualification
from quote_engine.models.schemas import (
    Estimate,
    RulesConfiguration,
    ScoreResult,
    Submission,
)
from quote_engine.services.text_signals import contains_any, normalize_text


MAX_SCORE = 100

# Minimum score for an admin alert, in addition to the hot tier
ADMIN_ALERT_MIN_SCORE = 85

CURRENCY_SYMBOL = "£"

PHONE_CONTACT_KEYWORDS = ("phone", "call")
EMAIL_CONTACT_KEYWORDS = ("email",)
COMMERCIAL_KEYWORDS = ("commercial", "business")
URGENCY_KEYWORDS = ("urgent", "asap", "as soon as", "quickly", "immediate")


def determine_qualification(score: float, config: RulesConfiguration) -> Qualification:
    """
    Map a score to a qualification tier.

    Thresholds are compared with >= in descending order; the first match wins.
    """
    thresholds = config.qualificationThresholds

    if score >= thresholds.hot:
        return Qualification.HOT
    elif score >= thresholds.warm:
        return Qualification.WARM
    elif score >= thresholds.cold:
        return Qualification.COLD
    else:
        return Qualification.UNQUALIFIED


def calculate_lead_score(
    submission: Submission,
    estimate: Estimate,
    config: RulesConfiguration
) -> ScoreResult:
    """
    Calculate lead score and qualification.

    Args:
        submission: The customer's quote request
        estimate: Estimate previously computed for the same submission
        config: Rules configuration (the same one used for the estimate)

    Returns:
        ScoreResult with score 0-100, tier, conversion likelihood and the
        reasons behind every bonus applied
    """
    weights = config.leadScoring
    answers = submission.answers
    service_count = len(submission.services)

    score = weights.baseScore
    reasons: List[str] = []

    # Financial value
    if estimate is not None and estimate.max:
        if estimate.max >= weights.veryHighValueThreshold:
            score += weights.veryHighValueBonus
            reasons.append(f"High-value job ({CURRENCY_SYMBOL}{estimate.max})")
        elif estimate.max >= weights.highValueThreshold:
            score += weights.highValueBonus
            reasons.append(f"Good-value job ({CURRENCY_SYMBOL}{estimate.max})")

    # Service quantity
    if service_count >= 3:
        score += weights.manyServicesBonus
        reasons.append(f"Multiple services ({service_count})")
    elif service_count == 2:
        score += weights.multipleServicesBonus
        reasons.append("Two services selected")

    # Customer intent
    if submission.remindersOptIn is True:
        score += weights.remindersOptIn
        reasons.append("Opted in to reminders")

    contact = submission.preferredContactMethod
    if contains_any(contact, PHONE_CONTACT_KEYWORDS):
        score += weights.phonePreferred
        reasons.append("Prefers phone contact")
    elif contains_any(contact, EMAIL_CONTACT_KEYWORDS):
        score += weights.emailPreferred
        reasons.append("Prefers email contact")

    if answers is not None:
        # Property type
        if contains_any(answers.propertyType, COMMERCIAL_KEYWORDS):
            score += weights.commercialProperty
            reasons.append("Commercial property")

        # Urgency
        combined_text = f"{normalize_text(answers.specificDetails)} {normalize_text(answers.accessNotes)}"
        if contains_any(combined_text, URGENCY_KEYWORDS):
            score += weights.urgentLanguage
            reasons.append("Urgent request")

    score = min(score, MAX_SCORE)
    rounded_score = int(math.floor(score + 0.5))

    qualification = determine_qualification(rounded_score, config)

    return ScoreResult(
        score=rounded_score,
        qualification=qualification,
        conversionLikelihood=config.conversionFactors.for_tier(qualification),
        reasons=reasons,
    )


def should_alert_admin(score: int, qualification: Qualification) -> bool:
    """
    Whether a scored lead should trigger an admin alert.

    True only for hot leads that also score at least ADMIN_ALERT_MIN_SCORE.
    """
    return qualification == Qualification.HOT and score >= ADMIN_ALERT_MIN_SCORE


__all__ = [
    "calculate_lead_score",
    "determine_qualification",
    "should_alert_admin",
    "ADMIN_ALERT_MIN_SCORE",
    "MAX_SCORE",
]
