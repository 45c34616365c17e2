'''
Quote Engine Test Suite

Test Modules:
-------------
- test_text_signals.py: size classification and price-modifier detection
- test_estimator.py: estimation algorithm, confidence ordering, admin preview
- test_scorer.py: lead score bonuses, tiers, conversion, admin alerts
- test_schemas.py: submission parsing, configuration invariants, defaults
- test_rules_store.py: PostgreSQL rules store against a mocked asyncpg pool
- test_rules_cache.py: TTL cache and store-triggered invalidation
- test_evaluation.py: estimate + score against one configuration snapshot
- test_core.py: settings loading and pool lifecycle

Run:
    pytest quote_engine/tests
    pytest -m regression   # worked pricing examples only
'''
