"""Survey session API endpoints.

One session is one respondent walking through intro, intake, the question
stages and the result screen. Every endpoint answers with the session view
so a client can render the next screen from a single response.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, status

from inferdev.api.dependencies import get_catalog_service, get_request_id, get_session_manager
from inferdev.models.catalog import Catalog
from inferdev.schemas.base import ErrorResponse, SuccessResponse, create_success_response
from inferdev.schemas.survey_schemas import (
    AnswerRequest,
    CreateSessionRequest,
    IntakeRequest,
    SessionResponse,
)
from inferdev.services.catalog_service import CatalogService
from inferdev.services.session_service import SurveySession, SurveySessionManager
from inferdev.utils.exceptions import ExternalServiceError
from inferdev.utils.logger import get_api_logger

router = APIRouter(
    prefix="/survey",
    tags=["Survey"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        404: {"model": ErrorResponse, "description": "Session not found"},
        409: {"model": ErrorResponse, "description": "Action not allowed in the current step"},
        502: {"model": ErrorResponse, "description": "Recommendation backend failed"},
    },
)
logger = get_api_logger()


async def _result_catalog(session: SurveySession, catalog_service: CatalogService) -> Optional[Catalog]:
    """Reference data for naming jobs on the result screen.

    The result itself is already stored, so a backend hiccup here only
    costs the job names and details.
    """
    if session.state.result is None:
        return None
    try:
        return await catalog_service.get_catalog(session.state.mode)
    except ExternalServiceError as e:
        logger.warning(
            "Result shown without reference data",
            extra={"session_id": session.session_id, "error": e.message}
        )
        return None


async def _respond(
    session: SurveySession,
    catalog_service: CatalogService,
    request_id: str,
    message: Optional[str] = None,
) -> SuccessResponse:
    catalog = await _result_catalog(session, catalog_service)
    return create_success_response(
        data=SessionResponse.from_session(session, catalog),
        message=message,
        request_id=request_id,
    )


@router.post(
    "/sessions",
    response_model=SuccessResponse[SessionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Start a survey session",
)
async def create_session(
    body: Optional[CreateSessionRequest] = Body(None),
    manager: SurveySessionManager = Depends(get_session_manager),
    catalog_service: CatalogService = Depends(get_catalog_service),
    request_id: str = Depends(get_request_id),
):
    """Create a session on the intro screen with every job score at zero."""
    session = await manager.create(body.mode if body else None)
    return await _respond(session, catalog_service, request_id, "Survey session created")


@router.get(
    "/sessions/{session_id}",
    response_model=SuccessResponse[SessionResponse],
    summary="Get a survey session",
)
async def get_session(
    session_id: str = Path(..., description="Survey session ID"),
    manager: SurveySessionManager = Depends(get_session_manager),
    catalog_service: CatalogService = Depends(get_catalog_service),
    request_id: str = Depends(get_request_id),
):
    session = manager.get(session_id)
    return await _respond(session, catalog_service, request_id)


@router.delete(
    "/sessions/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Discard a survey session",
)
async def delete_session(
    session_id: str = Path(..., description="Survey session ID"),
    manager: SurveySessionManager = Depends(get_session_manager),
):
    manager.delete(session_id)


@router.post(
    "/sessions/{session_id}/start",
    response_model=SuccessResponse[SessionResponse],
    summary="Leave the intro screen",
)
async def start_survey(
    session_id: str = Path(..., description="Survey session ID"),
    manager: SurveySessionManager = Depends(get_session_manager),
    catalog_service: CatalogService = Depends(get_catalog_service),
    request_id: str = Depends(get_request_id),
):
    session = await manager.begin(session_id)
    return await _respond(session, catalog_service, request_id)


@router.post(
    "/sessions/{session_id}/intake",
    response_model=SuccessResponse[SessionResponse],
    summary="Submit the intake form",
)
async def submit_intake(
    body: IntakeRequest,
    session_id: str = Path(..., description="Survey session ID"),
    manager: SurveySessionManager = Depends(get_session_manager),
    catalog_service: CatalogService = Depends(get_catalog_service),
    request_id: str = Depends(get_request_id),
):
    """Validate the profile and load the first stage's questions.

    A missing field answers 400 with one message per field; a profile that
    no question applies to answers 409 and the session stays on intake.
    """
    session = await manager.submit_intake(session_id, body.to_profile())
    return await _respond(session, catalog_service, request_id)


@router.post(
    "/sessions/{session_id}/answers",
    response_model=SuccessResponse[SessionResponse],
    summary="Answer the current question",
)
async def answer_question(
    body: AnswerRequest,
    session_id: str = Path(..., description="Survey session ID"),
    manager: SurveySessionManager = Depends(get_session_manager),
    catalog_service: CatalogService = Depends(get_catalog_service),
    request_id: str = Depends(get_request_id),
):
    """Record the chosen option.

    Answering the last question of a stage scores it: locally, or through
    the recommendation backend, which may open the second stage.
    """
    session = await manager.answer(session_id, body.option_id)
    return await _respond(session, catalog_service, request_id)


@router.post(
    "/sessions/{session_id}/back",
    response_model=SuccessResponse[SessionResponse],
    summary="Undo the last step",
)
async def go_back(
    session_id: str = Path(..., description="Survey session ID"),
    manager: SurveySessionManager = Depends(get_session_manager),
    catalog_service: CatalogService = Depends(get_catalog_service),
    request_id: str = Depends(get_request_id),
):
    session = await manager.go_back(session_id)
    return await _respond(session, catalog_service, request_id)


@router.post(
    "/sessions/{session_id}/reset",
    response_model=SuccessResponse[SessionResponse],
    summary="Start over",
)
async def reset_survey(
    session_id: str = Path(..., description="Survey session ID"),
    manager: SurveySessionManager = Depends(get_session_manager),
    catalog_service: CatalogService = Depends(get_catalog_service),
    request_id: str = Depends(get_request_id),
):
    session = await manager.reset(session_id)
    return await _respond(session, catalog_service, request_id, "Survey reset")
