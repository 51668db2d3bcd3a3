"""Interpretation of taste feedback and extraction timing into grind hints."""

from dataclasses import dataclass
from enum import Enum

from espresso_tracker.domain.recommendations import AdjustmentDirection
from espresso_tracker.domain.shots import (
    OPTIMAL_MAX_TIME,
    OPTIMAL_MIN_TIME,
    TasteDescriptor,
)


class ExtractionConcern(Enum):
    """Problem a taste descriptor points at."""

    UNDER_EXTRACTED = "UNDER_EXTRACTED"
    OVER_EXTRACTED = "OVER_EXTRACTED"
    DOSE_RATIO = "DOSE_RATIO"


@dataclass(frozen=True)
class TasteSignal:
    """Independent timing and taste hints for one shot.

    ``taste_hint`` is ``None`` when taste abstains: either no feedback was given
    or the descriptor is not about grind. That is different from
    ``AdjustmentDirection.NO_CHANGE``, which affirms the grind is right.
    """

    timing_hint: AdjustmentDirection
    taste_hint: AdjustmentDirection | None
    taste_issue: TasteDescriptor | None
    concern: ExtractionConcern | None
    time_deviation: int


def timing_hint(extraction_time_seconds: int) -> AdjustmentDirection:
    """Direction implied by extraction time alone."""
    if extraction_time_seconds < OPTIMAL_MIN_TIME:
        return AdjustmentDirection.FINER
    if extraction_time_seconds > OPTIMAL_MAX_TIME:
        return AdjustmentDirection.COARSER
    return AdjustmentDirection.NO_CHANGE


def time_deviation(extraction_time_seconds: int) -> int:
    """Signed seconds outside the target window, 0 when inside it."""
    if extraction_time_seconds < OPTIMAL_MIN_TIME:
        return extraction_time_seconds - OPTIMAL_MIN_TIME
    if extraction_time_seconds > OPTIMAL_MAX_TIME:
        return extraction_time_seconds - OPTIMAL_MAX_TIME
    return 0


def taste_hint(
    taste: TasteDescriptor | None,
) -> tuple[AdjustmentDirection | None, ExtractionConcern | None]:
    """Direction and concern implied by the taste descriptor alone."""
    match taste:
        case None:
            return None, None
        case TasteDescriptor.SOUR:
            return AdjustmentDirection.FINER, ExtractionConcern.UNDER_EXTRACTED
        case TasteDescriptor.BITTER:
            return AdjustmentDirection.COARSER, ExtractionConcern.OVER_EXTRACTED
        case TasteDescriptor.PERFECT:
            return AdjustmentDirection.NO_CHANGE, None
        case TasteDescriptor.WEAK | TasteDescriptor.STRONG:
            return None, ExtractionConcern.DOSE_RATIO


@dataclass
class TasteSignalInterpreter:
    """Turns a shot's taste outcome and timing into directional hints."""

    def interpret(
        self, taste: TasteDescriptor | None, extraction_time_seconds: int
    ) -> TasteSignal:
        """Return independent timing and taste hints."""
        direction, concern = taste_hint(taste)
        issue = None if taste is TasteDescriptor.PERFECT else taste
        return TasteSignal(
            timing_hint=timing_hint(extraction_time_seconds),
            taste_hint=direction,
            taste_issue=issue,
            concern=concern,
            time_deviation=time_deviation(extraction_time_seconds),
        )


def suggest_taste(extraction_time_seconds: float | None) -> TasteDescriptor | None:
    """Pre-select the taste a shot most likely had, from its time."""
    if extraction_time_seconds is None or extraction_time_seconds <= 0:
        return None
    if extraction_time_seconds < OPTIMAL_MIN_TIME:
        return TasteDescriptor.SOUR
    if extraction_time_seconds <= OPTIMAL_MAX_TIME:
        return TasteDescriptor.PERFECT
    return TasteDescriptor.BITTER
