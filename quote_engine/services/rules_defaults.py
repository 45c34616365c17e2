"""
Compiled-in Rules Configuration

Default pricing and scoring rules, used whenever no administrator override is
stored or the stored override cannot be read. Stored overrides are always
deep-merged over these defaults, so a partial override (or one written before a
new key existed) never removes a default field.

All prices are in GBP.

Structure: { section: { key: value } }, matching RulesConfiguration.
"""

import copy
from typing import Any, Dict, Mapping, Optional

from quote_engine.models.enums import ServiceType
from quote_engine.models.schemas import RulesConfiguration


# =============================================================================
# Default Rules
# =============================================================================

DEFAULT_RULES: Dict[str, Dict[str, Any]] = {
    # Base pricing per service: { small, medium, large, default } -> [min, max]
    "servicePricing": {
        ServiceType.ROOF.value: {
            "small": [150, 250],      # garage, small bungalow
            "medium": [250, 450],     # 3-bed semi
            "large": [450, 750],      # 4-bed detached, commercial
            "default": [250, 450],
        },
        ServiceType.DRIVEWAY.value: {
            "small": [100, 180],      # single car
            "medium": [180, 300],     # double car
            "large": [300, 500],      # multiple cars, commercial
            "default": [180, 300],
        },
        ServiceType.GUTTER.value: {
            "small": [80, 120],
            "medium": [120, 180],
            "large": [180, 280],      # 4-bed detached, 2-storey
            "default": [120, 180],
        },
        ServiceType.SOFTWASH.value: {
            "small": [200, 350],      # single wall, conservatory
            "medium": [350, 600],     # full house external walls
            "large": [600, 1000],     # full house + outbuildings
            "default": [350, 600],
        },
        ServiceType.RENDER.value: {
            "small": [250, 400],
            "medium": [400, 700],
            "large": [700, 1200],
            "default": [400, 700],
        },
        ServiceType.WINDOW.value: {
            "small": [60, 100],
            "medium": [100, 160],
            "large": [160, 250],
            "default": [100, 160],
        },
        ServiceType.SOLAR.value: {
            "small": [100, 150],      # fewer than 10 panels
            "medium": [150, 250],     # 10-20 panels
            "large": [250, 400],      # 20+ panels
            "default": [150, 250],
        },
        ServiceType.OTHER.value: {
            "small": [100, 200],
            "medium": [200, 400],
            "large": [400, 700],
            "default": [200, 400],
        },
    },
    "modifiers": {
        "firstTimeCleaning": 1.2,
        "heavilySoiled": 1.15,
        "difficultAccess": 1.25,
        "heightWork": 1.3,
        "urgent": 1.15,
    },
    "multiServiceDiscount": {
        "threshold": 3,
        "discount": 0.9,
    },
    "leadScoring": {
        "baseScore": 50,
        "highValueThreshold": 400,
        "highValueBonus": 20,
        "veryHighValueThreshold": 700,
        "veryHighValueBonus": 30,
        "multipleServicesBonus": 15,
        "manyServicesBonus": 25,
        "remindersOptIn": 10,
        "phonePreferred": 10,
        "emailPreferred": 5,
        "commercialProperty": 15,
        "urgentLanguage": 10,
    },
    "qualificationThresholds": {
        "hot": 75,      # immediate follow-up
        "warm": 50,     # follow-up within 24h
        "cold": 30,     # follow-up within 3 days
    },
    "conversionFactors": {
        "hotLead": 0.8,
        "warmLead": 0.5,
        "coldLead": 0.25,
        "unqualified": 0.1,
    },
}


# =============================================================================
# Merge Helpers
# =============================================================================


def deep_merge(defaults: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Merge `override` over `defaults`, recursing into nested mappings.

    Keys missing from `override`, or set to None there, keep their default
    value; non-mapping values (numbers, [min, max] pairs) in `override`
    replace the default wholesale. Neither argument is mutated.

    Args:
        defaults: The baseline document
        override: Values taking precedence

    Returns:
        A new merged dict
    """
    merged: Dict[str, Any] = copy.deepcopy(dict(defaults))
    for key, value in override.items():
        if value is None:
            continue
        base = merged.get(key)
        if isinstance(base, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(base, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def merge_with_defaults(override: Optional[Mapping[str, Any]]) -> RulesConfiguration:
    """
    Build a validated configuration from a (possibly partial) override.

    Raises:
        pydantic.ValidationError: If the merged document violates a model
            invariant (e.g. min > max, hot <= warm).
    """
    document = deep_merge(DEFAULT_RULES, override or {})
    return RulesConfiguration.model_validate(document)


def get_default_rules() -> RulesConfiguration:
    """Fresh copy of the compiled-in configuration."""
    return merge_with_defaults(None)


__all__ = [
    "DEFAULT_RULES",
    "deep_merge",
    "merge_with_defaults",
    "get_default_rules",
]
