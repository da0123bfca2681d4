"""Reference data service for InferDev.

Loads jobs, job details, career tracks and questions either from the
recommendation backend or from a JSON catalog on disk, and keeps the remote
copy for a configurable time.
"""

import asyncio
import time
from pathlib import Path
from typing import Callable, List, Optional

from cachetools import TTLCache

from inferdev.models.catalog import Catalog, Question
from inferdev.utils.constants import ErrorMessages, SurveyMode
from inferdev.utils.exceptions import ConfigurationError, ExternalServiceError
from inferdev.utils.logger import PerformanceLogger, get_catalog_logger

logger = get_catalog_logger()

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "catalog.json"
REMOTE_CATALOG_KEY = "remote"


class CatalogService:
    """Source of reference data for survey sessions."""

    def __init__(
        self,
        client=None,
        catalog_path: Optional[str] = None,
        cache_ttl_seconds: int = 300,
        timer: Callable[[], float] = time.monotonic,
    ):
        """Initialize catalog service.

        Args:
            client: RecommenderClient for remote data
            catalog_path: JSON catalog used by local-mode sessions
            cache_ttl_seconds: How long fetched reference data is reused
            timer: Clock used for cache expiry
        """
        self.client = client
        self.catalog_path = Path(catalog_path) if catalog_path else DEFAULT_CATALOG_PATH
        self.cache_ttl_seconds = cache_ttl_seconds

        self._local_catalog: Optional[Catalog] = None
        self._remote_cache = TTLCache(maxsize=1, ttl=cache_ttl_seconds, timer=timer)
        self._lock = asyncio.Lock()

    def get_local_catalog(self) -> Catalog:
        """Load (once) and return the on-disk catalog.

        Raises:
            ConfigurationError: If the file is missing or malformed
        """
        if self._local_catalog is None:
            try:
                self._local_catalog = Catalog.from_file(self.catalog_path)
            except (OSError, ValueError) as e:
                raise ConfigurationError(
                    f"Cannot load catalog: {str(e)}",
                    config_key="CATALOG_PATH",
                    config_value=self.catalog_path,
                    cause=e,
                ) from e

            logger.info(
                "Loaded local catalog",
                extra={
                    "path": str(self.catalog_path),
                    "jobs": len(self._local_catalog.jobs),
                    "questions": len(self._local_catalog.questions),
                }
            )
        return self._local_catalog

    async def get_remote_catalog(self, force_refresh: bool = False) -> Catalog:
        """Fetch reference data from the backend, all four lists at once.

        Raises:
            ExternalServiceError: If any of the fetches fails
        """
        if self.client is None:
            raise ConfigurationError("No recommendation backend configured", config_key="RECOMMENDER_API_URL")

        async with self._lock:
            cached = None if force_refresh else self._remote_cache.get(REMOTE_CATALOG_KEY)
            if cached is not None:
                return cached

            with PerformanceLogger("load_reference_data", logger):
                try:
                    jobs, job_details, questions, career_tracks = await asyncio.gather(
                        self.client.get_jobs(),
                        self.client.get_job_details(),
                        self.client.get_survey_questions(),
                        self.client.get_career_tracks(),
                    )
                except ExternalServiceError as e:
                    logger.error(
                        ErrorMessages.INITIAL_DATA_FAILED,
                        extra={"error": e.message, "error_code": e.error_code}
                    )
                    raise

            catalog = Catalog(
                jobs=jobs,
                job_details=job_details,
                questions=questions,
                career_tracks=career_tracks,
            )
            self._remote_cache[REMOTE_CATALOG_KEY] = catalog
            return catalog

    async def get_catalog(self, mode: SurveyMode) -> Catalog:
        """Reference data appropriate for a session's scoring mode."""
        if mode == SurveyMode.LOCAL:
            return self.get_local_catalog()
        return await self.get_remote_catalog()

    async def get_job_ids(self, mode: SurveyMode) -> List[str]:
        catalog = await self.get_catalog(mode)
        return catalog.job_ids()

    async def get_questions(
        self,
        mode: SurveyMode,
        stage: Optional[int] = None,
        track: Optional[str] = None,
    ) -> List[Question]:
        """Unfiltered questions for a stage (and track).

        Local sessions read the on-disk catalog; the others ask the backend,
        which applies the stage and track filter itself.
        """
        if mode == SurveyMode.LOCAL:
            return self.get_local_catalog().questions_for_stage(stage, track)

        if self.client is None:
            raise ConfigurationError("No recommendation backend configured", config_key="RECOMMENDER_API_URL")
        return await self.client.get_survey_questions(stage=stage, track=track)

    def invalidate(self) -> None:
        self._remote_cache.clear()
