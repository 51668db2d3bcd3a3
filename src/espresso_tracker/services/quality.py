"""Shot quality scoring and aggregate analysis."""

import math
from dataclasses import dataclass
from typing import Protocol

from espresso_tracker.domain.quality import (
    AggregateQualityAnalysis,
    QualityTier,
    TrendDirection,
)
from espresso_tracker.domain.shots import (
    OPTIMAL_MAX_TIME,
    OPTIMAL_MIN_TIME,
    Shot,
    TasteDescriptor,
)

MAX_QUALITY_SCORE = 100

WINDOW_MIDPOINT = (OPTIMAL_MIN_TIME + OPTIMAL_MAX_TIME) / 2
WINDOW_HALF_WIDTH = (OPTIMAL_MAX_TIME - OPTIMAL_MIN_TIME) / 2
EDGE_TIMING_FIT = 0.8
TIMING_DECAY_PER_SECOND = 0.08

TIMING_WEIGHT = 0.7
TASTE_WEIGHT = 0.3
SECONDARY_TASTE_PENALTY = 0.1

EXCELLENT_SCORE_THRESHOLD = 85
GOOD_SCORE_THRESHOLD = 60
TREND_THRESHOLD = 5
RECENT_SHOT_COUNT = 5


class ShotScorer(Protocol):
    """Anything that can score a single shot."""

    def score(self, shot: Shot) -> int:
        """Return a 0-100 quality score."""


def timing_fit(extraction_time_seconds: float) -> float:
    """Fit in [0, 1]: 1.0 at the window midpoint, 0.8 at its edges, then decaying."""
    if OPTIMAL_MIN_TIME <= extraction_time_seconds <= OPTIMAL_MAX_TIME:
        offset = abs(extraction_time_seconds - WINDOW_MIDPOINT) / WINDOW_HALF_WIDTH
        return 1.0 - (1.0 - EDGE_TIMING_FIT) * offset
    if extraction_time_seconds < OPTIMAL_MIN_TIME:
        distance = OPTIMAL_MIN_TIME - extraction_time_seconds
    else:
        distance = extraction_time_seconds - OPTIMAL_MAX_TIME
    return max(EDGE_TIMING_FIT - TIMING_DECAY_PER_SECOND * distance, 0.0)


def taste_fit(
    primary: TasteDescriptor, secondary: TasteDescriptor | None = None
) -> float:
    """Fit in [0, 1] for the reported taste."""
    match primary:
        case TasteDescriptor.PERFECT:
            fit = 1.0
        case TasteDescriptor.WEAK | TasteDescriptor.STRONG:
            fit = 0.6
        case TasteDescriptor.SOUR | TasteDescriptor.BITTER:
            fit = 0.3
    if secondary is not None:
        fit -= SECONDARY_TASTE_PENALTY
    return max(fit, 0.0)


@dataclass
class QualityScorer:
    """Scores shots from their timing and taste outcome."""

    def score(self, shot: Shot) -> int:
        """Return the quality score of one shot."""
        timing = timing_fit(shot.extraction_time_seconds)
        if shot.taste_primary is None:
            raw = timing
        else:
            taste = taste_fit(shot.taste_primary, shot.taste_secondary)
            raw = TIMING_WEIGHT * timing + TASTE_WEIGHT * taste
        return min(max(round(raw * MAX_QUALITY_SCORE), 0), MAX_QUALITY_SCORE)

    def aggregate(self, shots: list[Shot]) -> AggregateQualityAnalysis:
        """Summarize quality, trend and consistency across shots."""
        if not shots:
            return AggregateQualityAnalysis.empty()

        scored = [(shot, self.score(shot)) for shot in shots]
        scores = [score for _, score in scored]

        overall_average = int(sum(scores) / len(scores))
        recent = sorted(scored, key=lambda item: item[0].timestamp, reverse=True)
        recent_scores = [score for _, score in recent[:RECENT_SHOT_COUNT]]
        recent_average = int(sum(recent_scores) / len(recent_scores))

        if recent_average > overall_average + TREND_THRESHOLD:
            trend = TrendDirection.IMPROVING
        elif recent_average < overall_average - TREND_THRESHOLD:
            trend = TrendDirection.DECLINING
        else:
            trend = TrendDirection.STABLE

        improvement_rate = (
            (recent_average - overall_average) / overall_average * 100
            if overall_average > 0
            else 0.0
        )

        consistency = 0
        if overall_average > 0:
            variation = _standard_deviation(scores) / overall_average * 100
            consistency = int(min(max(MAX_QUALITY_SCORE - variation, 0.0), 100.0))

        if recent_average >= EXCELLENT_SCORE_THRESHOLD:
            tier = QualityTier.EXCELLENT
        elif recent_average >= GOOD_SCORE_THRESHOLD:
            tier = QualityTier.GOOD
        else:
            tier = QualityTier.NEEDS_WORK

        return AggregateQualityAnalysis(
            total_shots=len(shots),
            overall_quality_score=recent_average,
            quality_tier=tier,
            excellent_count=sum(1 for s in scores if s >= EXCELLENT_SCORE_THRESHOLD),
            good_count=sum(
                1
                for s in scores
                if GOOD_SCORE_THRESHOLD <= s < EXCELLENT_SCORE_THRESHOLD
            ),
            needs_work_count=sum(1 for s in scores if s < GOOD_SCORE_THRESHOLD),
            trend_direction=trend,
            recent_average=recent_average,
            overall_average=overall_average,
            improvement_rate=improvement_rate,
            consistency_score=consistency,
        )


def _standard_deviation(values: list[int]) -> float:
    mean = sum(values) / len(values)
    variance = sum((value - mean) ** 2 for value in values) / len(values)
    return math.sqrt(variance)
