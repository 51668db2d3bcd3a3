"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from espresso_tracker.config import Settings
from espresso_tracker.containers import AppContainer
from espresso_tracker.domain.shots import (
    DEFAULT_CONFIGURATION,
    GrinderConfiguration,
    Shot,
    TasteDescriptor,
)
from espresso_tracker.services.key_value import InMemoryKeyValueStore
from espresso_tracker.services.recommendation_store import RecommendationStore
from espresso_tracker.services.recommendations import (
    BeanRepository,
    GrinderConfigRepository,
    GrindRecommendationService,
    ShotRepository,
)

BASE_TIME = datetime(2026, 3, 14, 8, 30, 0)


def make_shot(  # noqa: PLR0913
    extraction_time_seconds: int = 27,
    taste_primary: TasteDescriptor | None = None,
    *,
    bean_id: str = "bean-1",
    grinder_setting: str = "5.0",
    minutes_after: int = 0,
    taste_secondary: TasteDescriptor | None = None,
    coffee_weight_in: float = 18.0,
    coffee_weight_out: float = 36.0,
) -> Shot:
    """Build a shot with sensible defaults."""
    return Shot(
        id=str(uuid4()),
        bean_id=bean_id,
        coffee_weight_in=coffee_weight_in,
        coffee_weight_out=coffee_weight_out,
        extraction_time_seconds=extraction_time_seconds,
        grinder_setting=grinder_setting,
        timestamp=BASE_TIME + timedelta(minutes=minutes_after),
        taste_primary=taste_primary,
        taste_secondary=taste_secondary,
    )


@dataclass
class InMemoryShotRepository(ShotRepository):
    """In-memory shot repository for tests."""

    shots: list[Shot] = field(default_factory=list)

    def get_last_shot_for_bean(self, bean_id: str) -> Shot | None:
        matching = [shot for shot in self.shots if shot.bean_id == bean_id]
        if not matching:
            return None
        return max(matching, key=lambda shot: shot.timestamp)

    def list_shots_for_bean(self, bean_id: str) -> list[Shot]:
        return [shot for shot in self.shots if shot.bean_id == bean_id]


@dataclass
class InMemoryGrinderConfigRepository(GrinderConfigRepository):
    """In-memory grinder configuration for tests."""

    config: GrinderConfiguration | None = DEFAULT_CONFIGURATION

    def get_current_config(self) -> GrinderConfiguration | None:
        return self.config


@dataclass
class InMemoryBeanRepository(BeanRepository):
    """In-memory bean doses for tests."""

    doses: dict[str, float] = field(default_factory=dict)

    def get_recommended_dose(self, bean_id: str) -> float | None:
        return self.doses.get(bean_id)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        admin_token="admin-token",
    )


@pytest.fixture
def key_value_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def shot_repository() -> InMemoryShotRepository:
    return InMemoryShotRepository()


@pytest.fixture
def grinder_config_repository() -> InMemoryGrinderConfigRepository:
    return InMemoryGrinderConfigRepository()


@pytest.fixture
def bean_repository() -> InMemoryBeanRepository:
    return InMemoryBeanRepository()


@pytest.fixture
def recommendation_service(
    settings: Settings,
    key_value_store: InMemoryKeyValueStore,
    shot_repository: InMemoryShotRepository,
    grinder_config_repository: InMemoryGrinderConfigRepository,
    bean_repository: InMemoryBeanRepository,
) -> GrindRecommendationService:
    return GrindRecommendationService(
        shot_repository=shot_repository,
        grinder_config_repository=grinder_config_repository,
        bean_repository=bean_repository,
        store=RecommendationStore(
            key_value_store, key_prefix=settings.recommendation_key_prefix
        ),
        default_dose=settings.default_dose,
    )


@pytest.fixture
def container(
    settings: Settings, recommendation_service: GrindRecommendationService
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        grind_recommendation_service=recommendation_service,
        close_resources=close_resources,
    )
