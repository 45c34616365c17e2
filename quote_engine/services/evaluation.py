"""
Submission Evaluation Service

Runs a quote submission through the estimator and the lead scorer against one
rules configuration snapshot, and decides whether the admin should be alerted.

Both calculations use the same configuration fetched once from the cache, so an
admin edit landing mid-evaluation cannot produce an estimate and a score
computed against different rules.

Persisting the results and sending notifications are left to the caller.
"""

import logging
from typing import Any, Mapping, Optional, Union

from quote_engine.models.schemas import Submission, SubmissionEvaluation
from quote_engine.services.estimator import calculate_estimate
from quote_engine.services.rules_cache import RulesCache
from quote_engine.services.scorer import calculate_lead_score, should_alert_admin

logger = logging.getLogger(__name__)


async def evaluate_submission(
    submission: Union[Submission, Mapping[str, Any]],
    rules_cache: RulesCache,
    reference: Optional[str] = None
) -> SubmissionEvaluation:
    """
    Estimate and score a submission.

    Args:
        submission: Submission model, or a raw mapping (e.g. a quote row) that
            validates into one
        rules_cache: Cache supplying the effective rules configuration
        reference: Identifier used in log lines, e.g. the quote id

    Returns:
        SubmissionEvaluation with the estimate, the score and the alert flag
    """
    if not isinstance(submission, Submission):
        submission = Submission.model_validate(submission)

    label = reference or "submission"
    config = await rules_cache.get()

    estimate = calculate_estimate(submission, config)
    logger.info(
        f"Estimate for {label}: {estimate.min}-{estimate.max} "
        f"({estimate.confidence.value} confidence, engine {estimate.engineVersion})"
    )

    score = calculate_lead_score(submission, estimate, config)
    logger.info(f"Lead score for {label}: {score.score}/100 ({score.qualification.value})")
    if score.reasons:
        logger.info(f"Scoring reasons for {label}: {', '.join(score.reasons)}")

    alert_admin = should_alert_admin(score.score, score.qualification)
    if alert_admin:
        logger.info(f"Hot lead detected for {label}: score {score.score}")

    return SubmissionEvaluation(
        estimate=estimate,
        score=score,
        alertAdmin=alert_admin,
    )


__all__ = ["evaluate_submission"]
