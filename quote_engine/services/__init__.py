"""
Quote Engine Services Module

Business logic for pricing quote requests and qualifying leads.

Services:
- text_signals: size classification and price-modifier detection from free text
- estimator: price range and confidence for a submission
- scorer: lead score, qualification tier and admin alert decision
- rules_defaults: compiled-in rules and the deep-merge used for overrides
- rules_store: PostgreSQL-backed override storage and change history
- rules_cache: TTL cache of the effective configuration
- evaluation: estimate + score against one configuration snapshot

The estimator, scorer and text signals are pure and synchronous; only the
store, the cache and evaluation are async.
"""

# =============================================================================
# Text Signals
# =============================================================================

from quote_engine.services.text_signals import (
    classify_size,
    calculate_modifiers,
    detect_modifiers,
    apply_modifiers,
    ModifierResult,
)

# =============================================================================
# Estimator & Scorer
# =============================================================================

from quote_engine.services.estimator import (
    calculate_estimate,
    preview_estimate,
    ENGINE_VERSION,
    UNKNOWN_SERVICE_RANGE,
)

from quote_engine.services.scorer import (
    calculate_lead_score,
    determine_qualification,
    should_alert_admin,
    ADMIN_ALERT_MIN_SCORE,
)

# =============================================================================
# Rules Configuration
# =============================================================================

from quote_engine.services.rules_defaults import (
    DEFAULT_RULES,
    deep_merge,
    merge_with_defaults,
    get_default_rules,
)

from quote_engine.services.rules_store import (
    RulesStore,
    RulesPersistenceError,
)

from quote_engine.services.rules_cache import (
    RulesCache,
    build_rules_cache,
)

# =============================================================================
# Evaluation
# =============================================================================

from quote_engine.services.evaluation import evaluate_submission


__all__ = [
    # Text signals
    "classify_size",
    "calculate_modifiers",
    "detect_modifiers",
    "apply_modifiers",
    "ModifierResult",
    # Estimator
    "calculate_estimate",
    "preview_estimate",
    "ENGINE_VERSION",
    "UNKNOWN_SERVICE_RANGE",
    # Scorer
    "calculate_lead_score",
    "determine_qualification",
    "should_alert_admin",
    "ADMIN_ALERT_MIN_SCORE",
    # Rules configuration
    "DEFAULT_RULES",
    "deep_merge",
    "merge_with_defaults",
    "get_default_rules",
    "RulesStore",
    "RulesPersistenceError",
    "RulesCache",
    "build_rules_cache",
    # Evaluation
    "evaluate_submission",
]
