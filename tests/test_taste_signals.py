"""Tests for taste and timing interpretation."""

import pytest

from espresso_tracker.domain.recommendations import AdjustmentDirection
from espresso_tracker.domain.shots import TasteDescriptor
from espresso_tracker.services.taste import (
    ExtractionConcern,
    TasteSignalInterpreter,
    suggest_taste,
    time_deviation,
    timing_hint,
)


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (18, AdjustmentDirection.FINER),
        (24, AdjustmentDirection.FINER),
        (25, AdjustmentDirection.NO_CHANGE),
        (30, AdjustmentDirection.NO_CHANGE),
        (31, AdjustmentDirection.COARSER),
    ],
)
def test_timing_hint_uses_target_window(
    seconds: int, expected: AdjustmentDirection
) -> None:
    assert timing_hint(seconds) is expected


def test_time_deviation_is_signed_distance_from_window() -> None:
    assert time_deviation(20) == -5
    assert time_deviation(27) == 0
    assert time_deviation(36) == 6


def test_sour_and_bitter_map_to_grind_directions() -> None:
    interpreter = TasteSignalInterpreter()

    sour = interpreter.interpret(TasteDescriptor.SOUR, 22)
    bitter = interpreter.interpret(TasteDescriptor.BITTER, 34)

    assert sour.taste_hint is AdjustmentDirection.FINER
    assert sour.concern is ExtractionConcern.UNDER_EXTRACTED
    assert sour.taste_issue is TasteDescriptor.SOUR
    assert bitter.taste_hint is AdjustmentDirection.COARSER
    assert bitter.concern is ExtractionConcern.OVER_EXTRACTED


def test_perfect_is_a_positive_no_change_signal() -> None:
    signal = TasteSignalInterpreter().interpret(TasteDescriptor.PERFECT, 27)

    assert signal.taste_hint is AdjustmentDirection.NO_CHANGE
    assert signal.taste_issue is None
    assert signal.concern is None


def test_weak_abstains_instead_of_saying_no_change() -> None:
    signal = TasteSignalInterpreter().interpret(TasteDescriptor.WEAK, 20)

    assert signal.taste_hint is None
    assert signal.concern is ExtractionConcern.DOSE_RATIO
    assert signal.taste_issue is TasteDescriptor.WEAK
    assert signal.timing_hint is AdjustmentDirection.FINER


def test_missing_feedback_abstains() -> None:
    signal = TasteSignalInterpreter().interpret(None, 33)

    assert signal.taste_hint is None
    assert signal.taste_issue is None
    assert signal.timing_hint is AdjustmentDirection.COARSER
    assert signal.time_deviation == 3


def test_suggest_taste_from_extraction_time() -> None:
    assert suggest_taste(None) is None
    assert suggest_taste(0) is None
    assert suggest_taste(20.5) is TasteDescriptor.SOUR
    assert suggest_taste(30.0) is TasteDescriptor.PERFECT
    assert suggest_taste(31) is TasteDescriptor.BITTER
