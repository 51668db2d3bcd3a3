"""FastAPI application factory."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from espresso_tracker.api.admin import router as admin_router
from espresso_tracker.api.schemas import (
    BeanStatusResponse,
    ClassifyRequest,
    QualityAnalysisResponse,
    RecommendationEnvelope,
    RecommendationResponse,
    TastePreselectionResponse,
)
from espresso_tracker.app_logging import configure_logging
from espresso_tracker.containers import AppContainer
from espresso_tracker.services.recommendations import GrindRecommendationService
from espresso_tracker.services.taste import suggest_taste


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Starting espresso tracker: environment=%s",
            container.settings.environment,
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/beans/{bean_id}/recommendation")
    async def compute_recommendation(
        bean_id: str, request: Request
    ) -> RecommendationResponse:
        """Compute and store a recommendation from the bean's latest shot."""
        service = _service(request)
        recommendation = await asyncio.to_thread(service.compute_and_save, bean_id)
        if recommendation is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No shots recorded for this bean",
            )
        return RecommendationResponse.from_domain(recommendation)

    @app.get("/beans/{bean_id}/recommendation")
    async def get_recommendation(
        bean_id: str, request: Request
    ) -> RecommendationEnvelope:
        """Return the bean's active recommendation, or null."""
        recommendation = _service(request).get_recommendation(bean_id)
        return RecommendationEnvelope.wrap(recommendation)

    @app.post("/beans/{bean_id}/recommendation/followed")
    async def mark_followed(bean_id: str, request: Request) -> RecommendationEnvelope:
        """Record that the recommendation was applied."""
        return RecommendationEnvelope.wrap(_service(request).mark_followed(bean_id))

    @app.post("/beans/{bean_id}/recommendation/taste")
    async def refresh_with_taste(
        bean_id: str, request: Request
    ) -> RecommendationEnvelope:
        """Recompute after taste feedback was added to the latest shot."""
        service = _service(request)
        recommendation = await asyncio.to_thread(service.update_with_taste, bean_id)
        return RecommendationEnvelope.wrap(recommendation)

    @app.delete("/beans/{bean_id}/recommendation")
    async def clear_recommendation(bean_id: str, request: Request) -> dict[str, str]:
        """Dismiss the bean's recommendation."""
        _service(request).clear_recommendation(bean_id)
        return {"status": "ok"}

    @app.get("/beans/{bean_id}/status")
    async def bean_status(bean_id: str, request: Request) -> BeanStatusResponse:
        """Return the bean's dial-in status."""
        return BeanStatusResponse(
            bean_id=bean_id, status=_service(request).bean_status(bean_id)
        )

    @app.get("/beans/{bean_id}/quality")
    async def quality_analysis(
        bean_id: str, request: Request
    ) -> QualityAnalysisResponse:
        """Return aggregate quality figures for the bean."""
        analysis = _service(request).quality_analysis(bean_id)
        return QualityAnalysisResponse.from_domain(analysis)

    @app.post("/bean-status")
    async def classify_shots(
        payload: ClassifyRequest, request: Request
    ) -> BeanStatusResponse:
        """Classify a posted list of shots."""
        shots = [shot.to_domain() for shot in payload.shots]
        bean_ids = {shot.bean_id for shot in shots}
        return BeanStatusResponse(
            bean_id=bean_ids.pop() if len(bean_ids) == 1 else None,
            status=_service(request).classify(shots),
        )

    @app.get("/taste-preselection")
    async def taste_preselection(
        extraction_time: float | None = None,
    ) -> TastePreselectionResponse:
        """Suggest the likely taste for an extraction time."""
        return TastePreselectionResponse(
            extraction_time_seconds=extraction_time,
            taste=suggest_taste(extraction_time),
        )

    return app


def _service(request: Request) -> GrindRecommendationService:
    container: AppContainer = request.app.state.container
    return container.grind_recommendation_service
