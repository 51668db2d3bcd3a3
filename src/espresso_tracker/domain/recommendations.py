"""Domain models for grind adjustment recommendations."""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum

from espresso_tracker.domain.shots import (
    OPTIMAL_MAX_TIME,
    OPTIMAL_MIN_TIME,
    TasteDescriptor,
)

RECENT_RECOMMENDATION_DAYS = 7


class AdjustmentDirection(Enum):
    """Which way to move the grinder for the next shot."""

    FINER = "FINER"
    COARSER = "COARSER"
    NO_CHANGE = "NO_CHANGE"


class ConfidenceLevel(Enum):
    """How strongly independent signals back a recommendation."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    def lowered(self) -> "ConfidenceLevel":
        """Return the next lower level; LOW stays LOW."""
        match self:
            case ConfidenceLevel.HIGH:
                return ConfidenceLevel.MEDIUM
            case ConfidenceLevel.MEDIUM | ConfidenceLevel.LOW:
                return ConfidenceLevel.LOW


@dataclass(frozen=True)
class ExtractionWindow:
    """Closed interval of target extraction seconds."""

    minimum: int
    maximum: int

    def __contains__(self, seconds: object) -> bool:
        if not isinstance(seconds, int | float):
            return False
        return self.minimum <= seconds <= self.maximum


TARGET_EXTRACTION_WINDOW = ExtractionWindow(OPTIMAL_MIN_TIME, OPTIMAL_MAX_TIME)


@dataclass(frozen=True)
class GrindAdjustmentRecommendation:
    """Grind advice computed from a single shot."""

    current_grind_setting: str
    suggested_grind_setting: str
    adjustment_direction: AdjustmentDirection
    adjustment_steps: int
    explanation: str
    extraction_time_deviation: int
    taste_issue: TasteDescriptor | None
    confidence: ConfidenceLevel

    def has_adjustment(self) -> bool:
        """Return True unless the advice is to keep the grind."""
        return self.adjustment_direction is not AdjustmentDirection.NO_CHANGE


@dataclass(frozen=True)
class PersistentGrindRecommendation:
    """The active recommendation stored for a bean between sessions."""

    bean_id: str
    suggested_grind_setting: str
    adjustment_direction: AdjustmentDirection
    reason: str
    recommended_dose: float
    target_extraction_time: ExtractionWindow
    timestamp: datetime
    based_on_taste: bool
    confidence: ConfidenceLevel
    was_followed: bool = False

    def has_adjustment(self) -> bool:
        """Return True unless the advice is to keep the grind."""
        return self.adjustment_direction is not AdjustmentDirection.NO_CHANGE

    def adjustment_description(self) -> str:
        """Short label such as "Grind finer"."""
        match self.adjustment_direction:
            case AdjustmentDirection.FINER:
                return "Grind finer"
            case AdjustmentDirection.COARSER:
                return "Grind coarser"
            case AdjustmentDirection.NO_CHANGE:
                return "No change needed"

    def formatted_target_time(self) -> str:
        """Target window as "25-30s"."""
        window = self.target_extraction_time
        return f"{window.minimum}-{window.maximum}s"

    def confidence_description(self) -> str:
        """Human label for the confidence level."""
        match self.confidence:
            case ConfidenceLevel.HIGH:
                return "High confidence"
            case ConfidenceLevel.MEDIUM:
                return "Medium confidence"
            case ConfidenceLevel.LOW:
                return "Low confidence"

    def is_recent(self, now: datetime | None = None) -> bool:
        """Return True when created within the last week."""
        reference = now or datetime.now()
        return self.timestamp > reference - timedelta(days=RECENT_RECOMMENDATION_DAYS)

    def mark_as_followed(self) -> "PersistentGrindRecommendation":
        """Return a copy flagged as followed."""
        return replace(self, was_followed=True)

    def detailed_summary(self) -> str:
        """Compact one-line summary for logs."""
        return (
            f"PersistentGrindRecommendation(bean={self.bean_id}, "
            f"grind={self.suggested_grind_setting}, "
            f"direction={self.adjustment_direction.value}, "
            f"dose={self.recommended_dose}g, "
            f"basedOnTaste={self.based_on_taste}, "
            f"confidence={self.confidence.value}, "
            f"followed={self.was_followed})"
        )
