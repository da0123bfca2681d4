"""FastAPI dependencies for InferDev API.

Services are built once in the application lifespan and kept on
``app.state``; these dependencies hand them to the routers, and tests
replace them through ``app.dependency_overrides``.
"""

from uuid import uuid4

from fastapi import Request

from inferdev.core.config import Settings
from inferdev.services.catalog_service import CatalogService
from inferdev.services.session_service import SurveySessionManager
from inferdev.utils.exceptions import ConfigurationError


def get_request_id(request: Request) -> str:
    """Get request ID from request state.

    Args:
        request: FastAPI request object

    Returns:
        str: Request ID
    """
    return getattr(request.state, "request_id", None) or str(uuid4())


def _from_app_state(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        raise ConfigurationError(f"Service '{name}' is not initialised", config_key=name)
    return service


def get_app_settings(request: Request) -> Settings:
    return _from_app_state(request, "settings")


def get_catalog_service(request: Request) -> CatalogService:
    return _from_app_state(request, "catalog_service")


def get_session_manager(request: Request) -> SurveySessionManager:
    return _from_app_state(request, "session_manager")


def get_recommender_client(request: Request):
    """Backend client, or None when the app runs in local mode only."""
    return getattr(request.app.state, "recommender_client", None)
