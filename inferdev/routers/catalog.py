"""Reference data API endpoints.

Jobs, job details and career tracks for the session's default mode: the
bundled catalog in local mode, the recommendation backend otherwise.
"""

from typing import List

from fastapi import APIRouter, Depends

from inferdev.api.dependencies import get_app_settings, get_catalog_service, get_request_id
from inferdev.core.config import Settings
from inferdev.models.catalog import Catalog
from inferdev.schemas.base import ErrorResponse, SuccessResponse, create_success_response
from inferdev.schemas.survey_schemas import CareerTrackView, JobDetailView, JobView
from inferdev.services.catalog_service import CatalogService
from inferdev.utils.constants import SurveyMode

router = APIRouter(
    prefix="/catalog",
    tags=["Catalog"],
    responses={502: {"model": ErrorResponse, "description": "Recommendation backend failed"}},
)


async def _catalog(settings: Settings, catalog_service: CatalogService) -> Catalog:
    return await catalog_service.get_catalog(SurveyMode(settings.SURVEY_MODE))


@router.get("/jobs", response_model=SuccessResponse[List[JobView]], summary="List jobs")
async def list_jobs(
    settings: Settings = Depends(get_app_settings),
    catalog_service: CatalogService = Depends(get_catalog_service),
    request_id: str = Depends(get_request_id),
):
    catalog = await _catalog(settings, catalog_service)
    return create_success_response([JobView.from_job(job) for job in catalog.jobs], request_id=request_id)


@router.get("/job-details", response_model=SuccessResponse[List[JobDetailView]], summary="List job details")
async def list_job_details(
    settings: Settings = Depends(get_app_settings),
    catalog_service: CatalogService = Depends(get_catalog_service),
    request_id: str = Depends(get_request_id),
):
    catalog = await _catalog(settings, catalog_service)
    return create_success_response(
        [JobDetailView.from_detail(detail) for detail in catalog.job_details],
        request_id=request_id,
    )


@router.get("/career-tracks", response_model=SuccessResponse[List[CareerTrackView]], summary="List career tracks")
async def list_career_tracks(
    settings: Settings = Depends(get_app_settings),
    catalog_service: CatalogService = Depends(get_catalog_service),
    request_id: str = Depends(get_request_id),
):
    catalog = await _catalog(settings, catalog_service)
    return create_success_response(
        [CareerTrackView.from_track(track) for track in catalog.career_tracks],
        request_id=request_id,
    )
