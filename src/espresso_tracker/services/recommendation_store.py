"""Per-bean persistence of grind recommendations."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, ValidationError

from espresso_tracker.domain.recommendations import (
    AdjustmentDirection,
    ConfidenceLevel,
    ExtractionWindow,
    PersistentGrindRecommendation,
)
from espresso_tracker.services.key_value import KeyValueStore

RECOMMENDATION_KEY_PREFIX = "grind_recommendation_"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"

_logger = logging.getLogger(__name__)


class StoredGrindRecommendation(BaseModel):
    """JSON record kept under the bean's key."""

    model_config = ConfigDict(extra="ignore")

    beanId: str
    suggestedGrindSetting: str
    adjustmentDirection: Literal["FINER", "COARSER", "NO_CHANGE"]
    reason: str
    recommendedDose: float
    targetExtractionTimeMin: int
    targetExtractionTimeMax: int
    timestamp: str
    wasFollowed: bool = False
    basedOnTaste: bool
    confidence: Literal["HIGH", "MEDIUM", "LOW"]

    @classmethod
    def from_domain(
        cls, recommendation: PersistentGrindRecommendation
    ) -> "StoredGrindRecommendation":
        """Build the stored record from a domain recommendation."""
        return cls(
            beanId=recommendation.bean_id,
            suggestedGrindSetting=recommendation.suggested_grind_setting,
            adjustmentDirection=recommendation.adjustment_direction.value,
            reason=recommendation.reason,
            recommendedDose=float(recommendation.recommended_dose),
            targetExtractionTimeMin=recommendation.target_extraction_time.minimum,
            targetExtractionTimeMax=recommendation.target_extraction_time.maximum,
            timestamp=recommendation.timestamp.strftime(TIMESTAMP_FORMAT),
            wasFollowed=recommendation.was_followed,
            basedOnTaste=recommendation.based_on_taste,
            confidence=recommendation.confidence.value,
        )

    def to_domain(self) -> PersistentGrindRecommendation:
        """Convert back to the domain model; raises ValueError on bad fields."""
        if self.targetExtractionTimeMin > self.targetExtractionTimeMax:
            raise ValueError("target extraction window is inverted")
        return PersistentGrindRecommendation(
            bean_id=self.beanId,
            suggested_grind_setting=self.suggestedGrindSetting,
            adjustment_direction=AdjustmentDirection(self.adjustmentDirection),
            reason=self.reason,
            recommended_dose=self.recommendedDose,
            target_extraction_time=ExtractionWindow(
                self.targetExtractionTimeMin, self.targetExtractionTimeMax
            ),
            timestamp=datetime.strptime(self.timestamp, TIMESTAMP_FORMAT),
            was_followed=self.wasFollowed,
            based_on_taste=self.basedOnTaste,
            confidence=ConfidenceLevel(self.confidence),
        )


@dataclass
class RecommendationStore:
    """Keeps exactly one active recommendation per bean."""

    store: KeyValueStore
    key_prefix: str = RECOMMENDATION_KEY_PREFIX

    def save(self, bean_id: str, recommendation: PersistentGrindRecommendation) -> None:
        """Store a recommendation, replacing any previous one for the bean."""
        record = StoredGrindRecommendation.from_domain(recommendation)
        self.store.set(self._key(bean_id), record.model_dump_json())

    def get(self, bean_id: str) -> PersistentGrindRecommendation | None:
        """Return the stored recommendation; unreadable entries are removed."""
        key = self._key(bean_id)
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            recommendation = StoredGrindRecommendation.model_validate_json(
                raw
            ).to_domain()
        except (ValidationError, ValueError):
            _logger.warning("Discarding unreadable recommendation: bean_id=%s", bean_id)
            self.store.delete(key)
            return None
        if recommendation.bean_id != bean_id:
            _logger.warning(
                "Discarding recommendation stored for another bean: "
                "bean_id=%s stored=%s",
                bean_id,
                recommendation.bean_id,
            )
            self.store.delete(key)
            return None
        return recommendation

    def mark_followed(self, bean_id: str) -> PersistentGrindRecommendation | None:
        """Flag the bean's recommendation as followed; no-op without one."""
        current = self.get(bean_id)
        if current is None:
            return None
        updated = current.mark_as_followed()
        self.save(bean_id, updated)
        return updated

    def clear(self, bean_id: str) -> None:
        """Remove the bean's recommendation."""
        self.store.delete(self._key(bean_id))

    def clear_all(self) -> None:
        """Remove every stored recommendation and nothing else."""
        for key in self.store.keys():
            if key.startswith(self.key_prefix):
                self.store.delete(key)

    def list_bean_ids(self) -> list[str]:
        """Return the ids of beans holding a recommendation."""
        return [
            key.removeprefix(self.key_prefix)
            for key in self.store.keys()
            if key.startswith(self.key_prefix)
        ]

    def _key(self, bean_id: str) -> str:
        return f"{self.key_prefix}{bean_id}"
