"""Pydantic models for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, Field

from espresso_tracker.domain.quality import (
    AggregateQualityAnalysis,
    BeanStatus,
    QualityTier,
    TrendDirection,
)
from espresso_tracker.domain.recommendations import (
    AdjustmentDirection,
    ConfidenceLevel,
    PersistentGrindRecommendation,
)
from espresso_tracker.domain.shots import Shot, TasteDescriptor, to_local_naive


class ShotPayload(BaseModel):
    """Shot record posted by a client."""

    id: str
    bean_id: str
    coffee_weight_in: float = Field(gt=0)
    coffee_weight_out: float = Field(gt=0)
    extraction_time_seconds: int = Field(ge=0)
    grinder_setting: str
    timestamp: datetime
    taste_primary: TasteDescriptor | None = None
    taste_secondary: TasteDescriptor | None = None
    notes: str = ""

    def to_domain(self) -> Shot:
        """Convert to the domain shot."""
        return Shot(
            id=self.id,
            bean_id=self.bean_id,
            coffee_weight_in=self.coffee_weight_in,
            coffee_weight_out=self.coffee_weight_out,
            extraction_time_seconds=self.extraction_time_seconds,
            grinder_setting=self.grinder_setting,
            timestamp=to_local_naive(self.timestamp),
            taste_primary=self.taste_primary,
            taste_secondary=self.taste_secondary,
            notes=self.notes,
        )


class ClassifyRequest(BaseModel):
    """Shots to classify as one bean."""

    shots: list[ShotPayload]


class BeanStatusResponse(BaseModel):
    """Dial-in status of a bean."""

    bean_id: str | None = None
    status: BeanStatus


class RecommendationResponse(BaseModel):
    """A stored grind recommendation."""

    bean_id: str
    suggested_grind_setting: str
    adjustment_direction: AdjustmentDirection
    adjustment_description: str
    reason: str
    recommended_dose: float
    target_extraction_time_min: int
    target_extraction_time_max: int
    target_extraction_time: str
    timestamp: datetime
    was_followed: bool
    based_on_taste: bool
    confidence: ConfidenceLevel
    confidence_description: str

    @classmethod
    def from_domain(
        cls, recommendation: PersistentGrindRecommendation
    ) -> "RecommendationResponse":
        """Build the response from a domain recommendation."""
        return cls(
            bean_id=recommendation.bean_id,
            suggested_grind_setting=recommendation.suggested_grind_setting,
            adjustment_direction=recommendation.adjustment_direction,
            adjustment_description=recommendation.adjustment_description(),
            reason=recommendation.reason,
            recommended_dose=recommendation.recommended_dose,
            target_extraction_time_min=recommendation.target_extraction_time.minimum,
            target_extraction_time_max=recommendation.target_extraction_time.maximum,
            target_extraction_time=recommendation.formatted_target_time(),
            timestamp=recommendation.timestamp,
            was_followed=recommendation.was_followed,
            based_on_taste=recommendation.based_on_taste,
            confidence=recommendation.confidence,
            confidence_description=recommendation.confidence_description(),
        )


class RecommendationEnvelope(BaseModel):
    """Wrapper so a missing recommendation is an explicit null."""

    recommendation: RecommendationResponse | None

    @classmethod
    def wrap(
        cls, recommendation: PersistentGrindRecommendation | None
    ) -> "RecommendationEnvelope":
        """Wrap an optional domain recommendation."""
        if recommendation is None:
            return cls(recommendation=None)
        return cls(recommendation=RecommendationResponse.from_domain(recommendation))


class QualityAnalysisResponse(BaseModel):
    """Aggregate quality figures for a bean."""

    total_shots: int
    overall_quality_score: int
    quality_tier: QualityTier
    excellent_count: int
    good_count: int
    needs_work_count: int
    trend_direction: TrendDirection
    recent_average: int
    overall_average: int
    improvement_rate: float
    consistency_score: int

    @classmethod
    def from_domain(
        cls, analysis: AggregateQualityAnalysis
    ) -> "QualityAnalysisResponse":
        """Build the response from a domain analysis."""
        return cls(
            total_shots=analysis.total_shots,
            overall_quality_score=analysis.overall_quality_score,
            quality_tier=analysis.quality_tier,
            excellent_count=analysis.excellent_count,
            good_count=analysis.good_count,
            needs_work_count=analysis.needs_work_count,
            trend_direction=analysis.trend_direction,
            recent_average=analysis.recent_average,
            overall_average=analysis.overall_average,
            improvement_rate=analysis.improvement_rate,
            consistency_score=analysis.consistency_score,
        )


class TastePreselectionResponse(BaseModel):
    """Likely taste for an extraction time."""

    extraction_time_seconds: float | None
    taste: TasteDescriptor | None
