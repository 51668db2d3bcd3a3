"""Domain models for shot quality analysis."""

from dataclasses import dataclass
from enum import Enum


class BeanStatus(Enum):
    """How consistently a bean is being brewed well."""

    FRESH_START = "FRESH_START"
    EXPERIMENTING = "EXPERIMENTING"
    DIALED_IN = "DIALED_IN"
    NEEDS_WORK = "NEEDS_WORK"


class QualityTier(Enum):
    """Headline tier for recent shot quality."""

    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    NEEDS_WORK = "NEEDS_WORK"


class TrendDirection(Enum):
    """Recent quality relative to the overall average."""

    IMPROVING = "IMPROVING"
    STABLE = "STABLE"
    DECLINING = "DECLINING"


@dataclass(frozen=True)
class AggregateQualityAnalysis:
    """Quality summary across a set of shots."""

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
    def empty(cls) -> "AggregateQualityAnalysis":
        """Analysis for a bean without shots."""
        return cls(
            total_shots=0,
            overall_quality_score=0,
            quality_tier=QualityTier.NEEDS_WORK,
            excellent_count=0,
            good_count=0,
            needs_work_count=0,
            trend_direction=TrendDirection.STABLE,
            recent_average=0,
            overall_average=0,
            improvement_rate=0.0,
            consistency_score=0,
        )
