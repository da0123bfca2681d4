"""Health check routes for InferDev API."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from inferdev.api.dependencies import get_app_settings, get_recommender_client, get_session_manager
from inferdev.core.config import Settings
from inferdev.schemas.base import HealthCheckResponse
from inferdev.services.session_service import SurveySessionManager
from inferdev.utils.constants import SurveyMode
from inferdev.utils.exceptions import ExternalServiceError
from inferdev.utils.logger import get_api_logger

router = APIRouter(prefix="/health", tags=["Health"])
logger = get_api_logger()


@router.get("", response_model=HealthCheckResponse)
async def health_check(
    settings: Settings = Depends(get_app_settings),
    manager: SurveySessionManager = Depends(get_session_manager),
    client=Depends(get_recommender_client),
) -> HealthCheckResponse:
    """Service health including the recommendation backend.

    The backend is only probed when sessions depend on it; an unreachable
    backend makes the service degraded rather than unhealthy, since local
    state and session reads keep working.
    """
    services: Dict[str, Dict[str, Any]] = {
        "sessions": {"status": "healthy", **manager.stats()},
    }
    overall_status = "healthy"

    if settings.SURVEY_MODE != SurveyMode.LOCAL.value and client is not None:
        try:
            await client.get_health()
            services["recommender"] = {"status": "healthy"}
        except ExternalServiceError as e:
            logger.error(f"Recommender health check failed: {e.message}")
            services["recommender"] = {"status": "unhealthy", "error": e.message}
            overall_status = "degraded"

    return HealthCheckResponse(
        status=overall_status,
        version=settings.APP_VERSION,
        environment=settings.APP_ENV,
        services=services,
    )


@router.get("/live")
async def liveness_probe() -> Dict[str, str]:
    return {"status": "ok"}
