"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from espresso_tracker.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/recommendations", dependencies=[Depends(require_admin)])
async def list_recommendations(request: Request) -> dict[str, object]:
    """Return the beans that currently hold a recommendation."""
    container: AppContainer = request.app.state.container
    return {"bean_ids": container.grind_recommendation_service.list_bean_ids()}


@router.delete("/recommendations", dependencies=[Depends(require_admin)])
async def clear_recommendations(request: Request) -> dict[str, str]:
    """Remove every stored recommendation."""
    container: AppContainer = request.app.state.container
    container.grind_recommendation_service.clear_all()
    return {"status": "ok"}
