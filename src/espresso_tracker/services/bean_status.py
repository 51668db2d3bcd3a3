"""Bean dial-in status derived from recent shots."""

from dataclasses import dataclass, field

from espresso_tracker.domain.quality import BeanStatus
from espresso_tracker.domain.shots import Shot
from espresso_tracker.services.quality import QualityScorer, ShotScorer

DIAL_IN_CONSISTENCY_THRESHOLD = 70
DIAL_IN_MIN_SCORE = 60
NEEDS_WORK_THRESHOLD = 40
MIN_SHOTS_FOR_DIAL_IN = 3


@dataclass
class BeanStatusClassifier:
    """Classifies a bean from the quality of its last three shots."""

    scorer: ShotScorer = field(default_factory=QualityScorer)

    def classify(self, shots: list[Shot]) -> BeanStatus:
        """Return the bean status for shots given in any order."""
        if not shots:
            return BeanStatus.FRESH_START
        if len(shots) < MIN_SHOTS_FOR_DIAL_IN:
            return BeanStatus.EXPERIMENTING

        recent = sorted(shots, key=lambda shot: shot.timestamp)[-MIN_SHOTS_FOR_DIAL_IN:]
        scores = [self.scorer.score(shot) for shot in recent]
        average = sum(scores) / len(scores)

        if average >= DIAL_IN_CONSISTENCY_THRESHOLD and all(
            score >= DIAL_IN_MIN_SCORE for score in scores
        ):
            return BeanStatus.DIALED_IN
        if average < NEEDS_WORK_THRESHOLD:
            return BeanStatus.NEEDS_WORK
        return BeanStatus.EXPERIMENTING
