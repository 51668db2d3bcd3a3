"""Application service for next-shot grind guidance."""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Protocol

from espresso_tracker.domain.quality import AggregateQualityAnalysis, BeanStatus
from espresso_tracker.domain.recommendations import PersistentGrindRecommendation
from espresso_tracker.domain.shots import GrinderConfiguration, Shot
from espresso_tracker.services.bean_status import BeanStatusClassifier
from espresso_tracker.services.grind_adjustment import (
    GrindAdjustmentRecommender,
    to_persistent,
)
from espresso_tracker.services.quality import QualityScorer
from espresso_tracker.services.recommendation_store import RecommendationStore

DEFAULT_DOSE_GRAMS = 18.0

_logger = logging.getLogger(__name__)


class ShotRepository(Protocol):
    """Read access to recorded shots."""

    def get_last_shot_for_bean(self, bean_id: str) -> Shot | None:
        """Return the most recent shot for a bean, if any."""

    def list_shots_for_bean(self, bean_id: str) -> list[Shot]:
        """Return all shots recorded for a bean."""


class GrinderConfigRepository(Protocol):
    """Read access to the grinder scale configuration."""

    def get_current_config(self) -> GrinderConfiguration | None:
        """Return the active grinder configuration, if one is set up."""


class BeanRepository(Protocol):
    """Read access to bean settings."""

    def get_recommended_dose(self, bean_id: str) -> float | None:
        """Return the dose configured for a bean, if any."""


@dataclass
class GrindRecommendationService:
    """Computes, stores and tracks grind recommendations per bean."""

    shot_repository: ShotRepository
    grinder_config_repository: GrinderConfigRepository
    bean_repository: BeanRepository
    store: RecommendationStore
    recommender: GrindAdjustmentRecommender = field(
        default_factory=GrindAdjustmentRecommender
    )
    scorer: QualityScorer = field(default_factory=QualityScorer)
    classifier: BeanStatusClassifier = field(default_factory=BeanStatusClassifier)
    default_dose: float = DEFAULT_DOSE_GRAMS

    def compute_and_save(
        self, bean_id: str, now: datetime | None = None
    ) -> PersistentGrindRecommendation | None:
        """Recommend from the bean's latest shot and store it as the active one.

        Returns None when the bean has no shots yet.
        """
        shot = self.shot_repository.get_last_shot_for_bean(bean_id)
        if shot is None:
            _logger.info("No shots to recommend from: bean_id=%s", bean_id)
            return None
        recommendation = self._build(bean_id, shot, now)
        self.store.save(bean_id, recommendation)
        _logger.info("Saved %s", recommendation.detailed_summary())
        return recommendation

    def update_with_taste(
        self, bean_id: str, now: datetime | None = None
    ) -> PersistentGrindRecommendation | None:
        """Recompute after taste feedback, keeping timestamp and follow state."""
        existing = self.store.get(bean_id)
        if existing is None:
            return self.compute_and_save(bean_id, now)
        shot = self.shot_repository.get_last_shot_for_bean(bean_id)
        if shot is None:
            return existing
        fresh = self._build(bean_id, shot, now)
        updated = replace(
            fresh,
            timestamp=existing.timestamp,
            was_followed=existing.was_followed,
            recommended_dose=existing.recommended_dose,
        )
        self.store.save(bean_id, updated)
        return updated

    def get_recommendation(self, bean_id: str) -> PersistentGrindRecommendation | None:
        """Return the active recommendation for a bean."""
        return self.store.get(bean_id)

    def mark_followed(self, bean_id: str) -> PersistentGrindRecommendation | None:
        """Record that the user applied the bean's recommendation."""
        return self.store.mark_followed(bean_id)

    def clear_recommendation(self, bean_id: str) -> None:
        """Dismiss the bean's recommendation."""
        self.store.clear(bean_id)

    def clear_all(self) -> None:
        """Remove every stored recommendation."""
        self.store.clear_all()

    def list_bean_ids(self) -> list[str]:
        """Return beans that currently hold a recommendation."""
        return self.store.list_bean_ids()

    def classify(self, shots: list[Shot]) -> BeanStatus:
        """Classify a bean from a list of its shots."""
        return self.classifier.classify(shots)

    def bean_status(self, bean_id: str) -> BeanStatus:
        """Classify a bean from its recorded shots."""
        return self.classify(self.shot_repository.list_shots_for_bean(bean_id))

    def quality_analysis(self, bean_id: str) -> AggregateQualityAnalysis:
        """Return aggregate quality figures for a bean."""
        return self.scorer.aggregate(self.shot_repository.list_shots_for_bean(bean_id))

    def _build(
        self, bean_id: str, shot: Shot, now: datetime | None
    ) -> PersistentGrindRecommendation:
        config = self.grinder_config_repository.get_current_config()
        dose = self.bean_repository.get_recommended_dose(bean_id) or self.default_dose
        adjustment = self.recommender.recommend(shot, config)
        return to_persistent(bean_id, adjustment, shot, dose, now)
