"""
Pytest test module for free-text signal detection.

Covers quote_engine/services/text_signals.py:
- classify_size(): explicit size hint first, then property type, else medium
- detect_modifiers() / calculate_modifiers(): independent, multiplicative
  modifiers triggered by case-insensitive substring matches

Test Classes:
- TestClassifySize: Size bucket inference
- TestDetectModifiers: Which modifiers fire for which language
- TestCalculateModifiers: Combined multiplier and reasons
"""

import pytest

from quote_engine.models import PriceModifier, SizeBucket, SubmissionAnswers
from quote_engine.services.text_signals import (
    apply_modifiers,
    calculate_modifiers,
    classify_size,
    contains_any,
    detect_modifiers,
)


def _answers(**fields) -> SubmissionAnswers:
    return SubmissionAnswers(**fields)


# =============================================================================
# Test Class: TestClassifySize
# =============================================================================

class TestClassifySize:
    """Size bucket inference from roughSize and propertyType."""

    def test_no_answers_is_medium(self) -> None:
        assert classify_size('roof', None) == SizeBucket.MEDIUM

    def test_empty_answers_is_medium(self) -> None:
        assert classify_size('roof', _answers()) == SizeBucket.MEDIUM

    @pytest.mark.parametrize('rough_size, expected', [
        ('small', SizeBucket.SMALL),
        ('Compact garden', SizeBucket.SMALL),
        ('LARGE', SizeBucket.LARGE),
        ('quite big', SizeBucket.LARGE),
        ('average', SizeBucket.MEDIUM),
        ('3 bed', SizeBucket.MEDIUM),
    ])
    def test_rough_size_hint(self, rough_size: str, expected: SizeBucket) -> None:
        assert classify_size('roof', _answers(roughSize=rough_size)) == expected

    def test_rough_size_hint_wins_over_property_type(self) -> None:
        # Arrange: a commercial property alone would classify as large
        answers = _answers(roughSize='small', propertyType='Commercial unit')

        # Act / Assert
        assert classify_size('driveway', answers) == SizeBucket.SMALL

    def test_unrecognised_hint_still_blocks_property_type(self) -> None:
        answers = _answers(roughSize='not sure', propertyType='Detached')
        assert classify_size('roof', answers) == SizeBucket.MEDIUM

    @pytest.mark.parametrize('property_type, expected', [
        ('Commercial', SizeBucket.LARGE),
        ('small business premises', SizeBucket.LARGE),
        ('Bungalow', SizeBucket.SMALL),
        ('Ground floor flat', SizeBucket.SMALL),
        ('Apartment', SizeBucket.SMALL),
        ('Detached house', SizeBucket.LARGE),
        ('Terrace', SizeBucket.MEDIUM),
        ('Cottage', SizeBucket.MEDIUM),
    ])
    def test_property_type(self, property_type: str, expected: SizeBucket) -> None:
        assert classify_size('roof', _answers(propertyType=property_type)) == expected

    def test_semi_detached_matches_detached_first(self) -> None:
        # "Semi-detached" contains "detached", which is checked before "semi"
        assert classify_size('roof', _answers(propertyType='Semi-detached')) == SizeBucket.LARGE

    def test_blank_rough_size_falls_through_to_property_type(self) -> None:
        answers = _answers(roughSize='', propertyType='Bungalow')
        assert classify_size('roof', answers) == SizeBucket.SMALL


# =============================================================================
# Test Class: TestDetectModifiers
# =============================================================================

class TestDetectModifiers:
    """Modifier detection from lastCleaned, specificDetails and accessNotes."""

    def test_no_answers_detects_nothing(self) -> None:
        assert detect_modifiers(None) == []

    @pytest.mark.parametrize('last_cleaned', [
        'Never', 'about 3 years ago', 'over a year ago', 'NEVER been done',
    ])
    def test_first_time_cleaning(self, last_cleaned: str) -> None:
        detected = detect_modifiers(_answers(lastCleaned=last_cleaned))
        assert detected == [PriceModifier.FIRST_TIME_CLEANING]

    def test_recent_clean_is_not_first_time(self) -> None:
        assert detect_modifiers(_answers(lastCleaned='6 months ago')) == []

    @pytest.mark.parametrize('details', [
        'Very dirty patio', 'heavily soiled', 'Moss everywhere', 'green algae', 'Stained render',
    ])
    def test_heavily_soiled(self, details: str) -> None:
        assert PriceModifier.HEAVILY_SOILED in detect_modifiers(_answers(specificDetails=details))

    @pytest.mark.parametrize('access', [
        'Difficult to get to', 'narrow side passage', 'Limited access', 'hard to reach',
    ])
    def test_difficult_access(self, access: str) -> None:
        assert PriceModifier.DIFFICULT_ACCESS in detect_modifiers(_answers(accessNotes=access))

    @pytest.mark.parametrize('access', ['High roof', 'tall building', 'Two storey', 'three story'])
    def test_height_from_access_notes(self, access: str) -> None:
        assert PriceModifier.HEIGHT_WORK in detect_modifiers(_answers(accessNotes=access))

    def test_height_from_specific_details(self) -> None:
        detected = detect_modifiers(_answers(specificDetails='high gutters'))
        assert detected == [PriceModifier.HEIGHT_WORK]

    @pytest.mark.parametrize('details', ['URGENT', 'asap please', 'as soon as possible', 'need it done quickly'])
    def test_urgent(self, details: str) -> None:
        assert PriceModifier.URGENT in detect_modifiers(_answers(specificDetails=details))

    def test_urgency_in_access_notes_is_not_a_price_modifier(self) -> None:
        assert detect_modifiers(_answers(accessNotes='urgent')) == []

    def test_all_modifiers_in_evaluation_order(self) -> None:
        # Arrange
        answers = _answers(
            lastCleaned='never',
            specificDetails='moss, urgent',
            accessNotes='narrow and two storey',
        )

        # Act
        detected = detect_modifiers(answers)

        # Assert
        assert detected == [
            PriceModifier.FIRST_TIME_CLEANING,
            PriceModifier.HEAVILY_SOILED,
            PriceModifier.DIFFICULT_ACCESS,
            PriceModifier.HEIGHT_WORK,
            PriceModifier.URGENT,
        ]


# =============================================================================
# Test Class: TestCalculateModifiers
# =============================================================================

class TestCalculateModifiers:
    """Combined multiplier from the configured modifier table."""

    def test_no_signal_is_identity(self, default_rules) -> None:
        result = calculate_modifiers(_answers(specificDetails='Just a routine clean'), default_rules.modifiers)

        assert result.multiplier == 1.0
        assert result.applied == []
        assert result.reasons == []

    def test_multipliers_compose(self, default_rules) -> None:
        answers = _answers(lastCleaned='never', specificDetails='moss')

        result = calculate_modifiers(answers, default_rules.modifiers)

        assert result.multiplier == pytest.approx(1.2 * 1.15)
        assert result.reasons == ['First time cleaning', 'Heavily soiled']

    def test_every_modifier_is_at_least_identity(self, default_rules) -> None:
        answers = _answers(
            lastCleaned='never',
            specificDetails='moss urgent high',
            accessNotes='narrow',
        )

        result = calculate_modifiers(answers, default_rules.modifiers)

        assert result.multiplier >= 1.0
        assert result.multiplier == pytest.approx(1.2 * 1.15 * 1.25 * 1.3 * 1.15)

    def test_apply_modifiers_accepts_plain_names(self, default_rules) -> None:
        result = apply_modifiers(['urgent', 'heightWork'], default_rules.modifiers)

        assert result.multiplier == pytest.approx(1.15 * 1.3)
        assert result.reasons == ['Urgent request', 'Height work required']


def test_contains_any_handles_missing_text() -> None:
    assert contains_any(None, ('x',)) is False
    assert contains_any('', ('x',)) is False
    assert contains_any('MiXeD', ('mixed',)) is True
