"""Grind adjustment recommendations from the most recent shot.

The recommender combines two independent hints: one from extraction time and
one from taste. When both agree the advice is given with high confidence. When
only timing has an opinion (no taste feedback, or a taste that is about dose
rather than grind) the advice follows timing with medium confidence. When they
disagree, timing wins because it is the measured signal, and confidence drops
to low.

Magnitude scales with how far the shot ran outside the 25-30s window: one step
up to 3s off, two steps up to 6s, three steps beyond that. At least one step is
suggested whenever a direction is given, even for shots inside the window.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime

from espresso_tracker.domain.recommendations import (
    TARGET_EXTRACTION_WINDOW,
    AdjustmentDirection,
    ConfidenceLevel,
    GrindAdjustmentRecommendation,
    PersistentGrindRecommendation,
)
from espresso_tracker.domain.shots import (
    DEFAULT_CONFIGURATION,
    GRID_TOLERANCE,
    OPTIMAL_MAX_TIME,
    OPTIMAL_MIN_TIME,
    GrinderConfiguration,
    Shot,
    TasteDescriptor,
    format_grind_value,
    parse_grind_setting,
)
from espresso_tracker.services.taste import (
    ExtractionConcern,
    TasteSignal,
    TasteSignalInterpreter,
)

MINOR_DEVIATION_THRESHOLD = 3
MODERATE_DEVIATION_THRESHOLD = 6

MINOR_ADJUSTMENT_STEPS = 1
MODERATE_ADJUSTMENT_STEPS = 2
MAJOR_ADJUSTMENT_STEPS = 3

FALLBACK_STEP_SIZE = DEFAULT_CONFIGURATION.step_size


def resolve_direction(
    signal: TasteSignal,
) -> tuple[AdjustmentDirection, ConfidenceLevel]:
    """Combine the timing and taste hints into one direction and confidence."""
    if signal.taste_hint is None:
        return signal.timing_hint, ConfidenceLevel.MEDIUM
    if signal.taste_hint is signal.timing_hint:
        return signal.timing_hint, ConfidenceLevel.HIGH
    return signal.timing_hint, ConfidenceLevel.LOW


def adjustment_steps(direction: AdjustmentDirection, deviation: int) -> int:
    """Number of grinder steps to move for a given timing deviation."""
    if direction is AdjustmentDirection.NO_CHANGE:
        return 0
    magnitude = abs(deviation)
    if magnitude <= MINOR_DEVIATION_THRESHOLD:
        return MINOR_ADJUSTMENT_STEPS
    if magnitude <= MODERATE_DEVIATION_THRESHOLD:
        return MODERATE_ADJUSTMENT_STEPS
    return MAJOR_ADJUSTMENT_STEPS


def describe_shot(extraction_time_seconds: int, taste: TasteDescriptor | None) -> str:
    """Describe what went wrong (or right) with the shot."""
    seconds = f"({extraction_time_seconds}s)"
    too_fast = extraction_time_seconds < OPTIMAL_MIN_TIME
    too_slow = extraction_time_seconds > OPTIMAL_MAX_TIME
    match taste:
        case TasteDescriptor.SOUR if too_fast:
            return f"Last shot was sour and ran too fast {seconds}"
        case TasteDescriptor.BITTER if too_slow:
            return f"Last shot was bitter and ran too slow {seconds}"
        case TasteDescriptor():
            return f"Last shot was {taste.value.lower()} {seconds}"
        case None if too_fast:
            return f"Last shot ran too fast {seconds}"
        case None if too_slow:
            return f"Last shot ran too slow {seconds}"
        case None:
            return (
                f"Last shot ran inside the {OPTIMAL_MIN_TIME}-{OPTIMAL_MAX_TIME}s "
                f"window {seconds}"
            )


def _action(direction: AdjustmentDirection, steps: int, suggested: str) -> str:
    plural = "step" if steps == 1 else "steps"
    match direction:
        case AdjustmentDirection.NO_CHANGE:
            return f"Keep the grind at {suggested}."
        case _ if steps == 0:
            return f"Stay at {suggested}."
        case AdjustmentDirection.FINER:
            return f"Grind finer by {steps} {plural} to {suggested}."
        case AdjustmentDirection.COARSER:
            return f"Grind coarser by {steps} {plural} to {suggested}."


def _steps_moved(start: float, target: float, step_size: float) -> int:
    distance = abs(target - start) / step_size
    if distance < GRID_TOLERANCE:
        return 0
    return max(math.floor(distance + GRID_TOLERANCE), 1)


def _no_room_note(
    direction: AdjustmentDirection,
    start: float,
    grinder_config: GrinderConfiguration | None,
) -> str:
    finer = direction is AdjustmentDirection.FINER
    edge, way = ("finest", "finer") if finer else ("coarsest", "coarser")
    at_edge = grinder_config is not None and start == (
        grinder_config.scale_min if finer else grinder_config.scale_max
    )
    if at_edge:
        return f"Already at the {edge} setting of your grinder."
    return f"No {way} step is available on your grinder's scale."


@dataclass
class GrindAdjustmentRecommender:
    """Computes the next grind setting for a bean from its latest shot."""

    interpreter: TasteSignalInterpreter = field(default_factory=TasteSignalInterpreter)

    def recommend(
        self,
        shot: Shot,
        grinder_config: GrinderConfiguration | None,
        current_setting: str | None = None,
    ) -> GrindAdjustmentRecommendation:
        """Return grind advice for the next shot.

        ``current_setting`` defaults to the setting the shot was pulled with.
        Without a grinder configuration the suggestion is not clamped and its
        confidence is lowered one level. A setting outside the configured scale
        is moved from the nearest end of the scale, also at lowered confidence.
        """
        label = shot.grinder_setting if current_setting is None else current_setting
        signal = self.interpreter.interpret(
            shot.taste_primary, shot.extraction_time_seconds
        )
        description = describe_shot(shot.extraction_time_seconds, shot.taste_primary)

        current_value = parse_grind_setting(label)
        if current_value is None:
            return GrindAdjustmentRecommendation(
                current_grind_setting=label,
                suggested_grind_setting=label,
                adjustment_direction=AdjustmentDirection.NO_CHANGE,
                adjustment_steps=0,
                explanation=(
                    f"{description}. Could not interpret grinder setting "
                    f"'{label}', so keep your current grind."
                ),
                extraction_time_deviation=signal.time_deviation,
                taste_issue=signal.taste_issue,
                confidence=ConfidenceLevel.LOW,
            )

        direction, confidence = resolve_direction(signal)
        step_size = grinder_config.step_size if grinder_config else FALLBACK_STEP_SIZE
        steps = adjustment_steps(direction, signal.time_deviation)

        out_of_range = grinder_config is not None and not grinder_config.contains(
            current_value
        )
        start = grinder_config.clamp(current_value) if grinder_config else current_value

        if direction is AdjustmentDirection.NO_CHANGE:
            suggested = label
            applied_steps = 0
        else:
            sign = -1 if direction is AdjustmentDirection.FINER else 1
            target = start + sign * steps * step_size
            if grinder_config is not None:
                target = grinder_config.snap_to_step(target, sign)
                # never step against the advised direction
                if (target - start) * sign < 0:
                    target = start
            applied_steps = _steps_moved(start, target, step_size)
            suggested = (
                label
                if target == current_value
                else format_grind_value(target, step_size)
            )

        notes = [f"{description}.", _action(direction, applied_steps, suggested)]
        if confidence is ConfidenceLevel.LOW:
            notes.append("Taste and timing disagree, so the extraction time decides.")
        if signal.concern is ExtractionConcern.DOSE_RATIO and shot.taste_primary:
            notes.append(
                f"A {shot.taste_primary.value.lower()} taste points to dose or "
                "ratio rather than grind."
            )
        if out_of_range and grinder_config is not None:
            confidence = confidence.lowered()
            notes.append(
                f"Setting {label} is outside your grinder's range "
                f"({grinder_config.scale_min}-{grinder_config.scale_max})."
            )
        if direction is not AdjustmentDirection.NO_CHANGE and applied_steps == 0:
            notes.append(_no_room_note(direction, start, grinder_config))
        if grinder_config is None:
            confidence = confidence.lowered()
            notes.append(
                "Grinder range unknown, so the suggestion is not limited to your scale."
            )

        return GrindAdjustmentRecommendation(
            current_grind_setting=label,
            suggested_grind_setting=suggested,
            adjustment_direction=direction,
            adjustment_steps=applied_steps,
            explanation=" ".join(notes),
            extraction_time_deviation=signal.time_deviation,
            taste_issue=signal.taste_issue,
            confidence=confidence,
        )


def to_persistent(
    bean_id: str,
    recommendation: GrindAdjustmentRecommendation,
    shot: Shot,
    recommended_dose: float,
    now: datetime | None = None,
) -> PersistentGrindRecommendation:
    """Package a recommendation with bean context for storage."""
    return PersistentGrindRecommendation(
        bean_id=bean_id,
        suggested_grind_setting=recommendation.suggested_grind_setting,
        adjustment_direction=recommendation.adjustment_direction,
        reason=recommendation.explanation,
        recommended_dose=recommended_dose,
        target_extraction_time=TARGET_EXTRACTION_WINDOW,
        timestamp=now or datetime.now(),
        based_on_taste=shot.taste_primary is not None,
        confidence=recommendation.confidence,
        was_followed=False,
    )
