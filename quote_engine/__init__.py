"""
Quote Engine Package.

Estimation and lead-qualification engine for exterior cleaning quote requests,
plus the admin-configurable rules store that drives it.

Subpackages:
    - core: Configuration and database pool
    - models: Pydantic schemas and enums
    - services: Estimator, lead scorer, rules store and cache
    - sql: Parameterized SQL for the rules store
"""

__version__ = "1.1.0"
