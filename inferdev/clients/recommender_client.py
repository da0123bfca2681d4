"""HTTP client for the external recommendation backend.

The backend serves the reference data (jobs, job details, career tracks,
survey questions) and performs the actual scoring. Every call is made once:
a failed call raises and the caller decides what the respondent sees.
"""

import time
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from inferdev.models.catalog import CareerTrack, Job, JobDetail, Question
from inferdev.models.profile import ProfileFacts
from inferdev.models.survey import AnswerRecord, RecommendationResult, StageOneOutcome
from inferdev.utils.constants import (
    HTML_MARKERS,
    SERVICE_NAME,
    BackendPaths,
    ErrorMessages,
)
from inferdev.utils.exceptions import ExternalServiceError, ResponseShapeError
from inferdev.utils.logger import get_client_logger, log_external_call

logger = get_client_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)


def _looks_like_html(response: httpx.Response) -> bool:
    if "text/html" in response.headers.get("content-type", ""):
        return True
    return response.text.lstrip()[:64].lower().startswith(HTML_MARKERS)


class RecommenderClient:
    """Async client for the recommendation backend."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize recommender client.

        Args:
            base_url: Backend base URL, e.g. ``http://localhost:8080/api``
            token: Optional bearer token sent with every request
            timeout: Request timeout in seconds
            transport: Custom transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "RecommenderClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Perform one request and decode its JSON body.

        Returns:
            Any: Decoded body, or None for 204 responses

        Raises:
            ResponseShapeError: If the body is HTML or not JSON
            ExternalServiceError: On transport failure or non-2xx status
        """
        start_time = time.time()
        try:
            response = await self.client.request(method, path, params=params, json=json)
        except httpx.TimeoutException as e:
            log_external_call(method, path, None, (time.time() - start_time) * 1000, logger=logger)
            raise ExternalServiceError(
                f"Request to {path} timed out after {self.timeout}s",
                service=SERVICE_NAME,
                cause=e,
            ) from e
        except httpx.RequestError as e:
            log_external_call(method, path, None, (time.time() - start_time) * 1000, logger=logger)
            raise ExternalServiceError(
                f"Request to {path} failed: {str(e)}",
                service=SERVICE_NAME,
                cause=e,
            ) from e

        log_external_call(method, path, response.status_code, (time.time() - start_time) * 1000, logger=logger)

        if response.is_success and response.status_code == 204:
            return None

        if _looks_like_html(response):
            raise ResponseShapeError(
                ErrorMessages.HTML_RESPONSE,
                service=SERVICE_NAME,
                status_code=response.status_code,
                details={"path": path},
            )

        if not response.is_success:
            raise ExternalServiceError(
                response.text or f"HTTP {response.status_code}",
                service=SERVICE_NAME,
                status_code=response.status_code,
                details={"path": path},
            )

        try:
            return response.json()
        except ValueError as e:
            raise ResponseShapeError(
                ErrorMessages.NON_JSON_RESPONSE,
                service=SERVICE_NAME,
                status_code=response.status_code,
                details={"path": path},
                cause=e,
            ) from e

    def _parse(self, model: Type[ModelT], data: Any, path: str) -> ModelT:
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise ResponseShapeError(
                f"Unexpected {model.__name__} payload from {path}",
                service=SERVICE_NAME,
                details={"path": path, "errors": e.errors(include_url=False, include_context=False)},
                cause=e,
            ) from e

    def _parse_list(self, model: Type[ModelT], data: Any, path: str) -> List[ModelT]:
        if not isinstance(data, list):
            raise ResponseShapeError(
                f"Expected a list from {path}",
                service=SERVICE_NAME,
                details={"path": path},
            )
        return [self._parse(model, item, path) for item in data]

    # Reference data

    async def get_health(self) -> Any:
        return await self._request("GET", BackendPaths.HEALTH)

    async def get_jobs(self) -> List[Job]:
        data = await self._request("GET", BackendPaths.JOBS)
        return self._parse_list(Job, data, BackendPaths.JOBS)

    async def get_job_details(self) -> List[JobDetail]:
        data = await self._request("GET", BackendPaths.JOB_DETAILS)
        return self._parse_list(JobDetail, data, BackendPaths.JOB_DETAILS)

    async def get_career_tracks(self) -> List[CareerTrack]:
        data = await self._request("GET", BackendPaths.CAREER_TRACKS)
        return self._parse_list(CareerTrack, data, BackendPaths.CAREER_TRACKS)

    async def get_survey_questions(
        self,
        stage: Optional[int] = None,
        track: Optional[str] = None,
    ) -> List[Question]:
        """Fetch survey questions, optionally for one stage and track."""
        params: Dict[str, Any] = {}
        if stage is not None:
            params["stage"] = stage
        if track:
            params["track"] = track

        data = await self._request("GET", BackendPaths.SURVEY_QUESTIONS, params=params or None)
        return self._parse_list(Question, data, BackendPaths.SURVEY_QUESTIONS)

    # Scoring

    async def submit_recommendation(
        self,
        answers: Sequence[AnswerRecord],
        user_id: str,
    ) -> RecommendationResult:
        """Score a single-round survey."""
        payload = {
            "answers": [answer.to_submission() for answer in answers],
            "userId": user_id,
        }
        data = await self._request("POST", BackendPaths.RECOMMENDATION, json=payload)
        return self._parse(RecommendationResult, data, BackendPaths.RECOMMENDATION)

    async def submit_stage1(
        self,
        answers: Sequence[AnswerRecord],
        profile: ProfileFacts,
        user_id: str,
    ) -> StageOneOutcome:
        """Score the trait-inference stage and learn the respondent's track."""
        payload = {
            "answers": [answer.to_submission() for answer in answers],
            "profile": profile.to_wire(),
            "userId": user_id,
        }
        data = await self._request("POST", BackendPaths.RECOMMENDATION_STAGE1, json=payload)
        return self._parse(StageOneOutcome, data, BackendPaths.RECOMMENDATION_STAGE1)

    async def submit_final(
        self,
        stage1_answers: Sequence[AnswerRecord],
        stage2_answers: Sequence[AnswerRecord],
        track: str,
        profile: ProfileFacts,
        user_id: str,
    ) -> RecommendationResult:
        """Score both stages and get the final recommendation."""
        payload = {
            "stage1Answers": [answer.to_submission() for answer in stage1_answers],
            "stage2Answers": [answer.to_submission() for answer in stage2_answers],
            "track": track,
            "profile": profile.to_wire(),
            "userId": user_id,
        }
        data = await self._request("POST", BackendPaths.RECOMMENDATION_FINAL, json=payload)
        return self._parse(RecommendationResult, data, BackendPaths.RECOMMENDATION_FINAL)
