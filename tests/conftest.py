"""Shared fixtures for InferDev tests."""

import os

# Settings are read at import time of the application module.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("SURVEY_MODE", "local")

from unittest.mock import AsyncMock, Mock

import pytest

from inferdev.models.catalog import Catalog, Job, Question
from inferdev.models.profile import ProfileFacts
from inferdev.services.catalog_service import DEFAULT_CATALOG_PATH, CatalogService
from inferdev.utils.constants import CodingExperience, ItMajorDetail, Major


def make_question(question_id, options, condition=None, stage=None, track=None, text=None):
    """Build a question from ``(option_id, score, subfield_scores)`` tuples."""
    return Question(
        id=question_id,
        text=text or f"Question {question_id}",
        condition=condition,
        stage=stage,
        track=track,
        options=[
            {"id": option_id, "text": f"Option {option_id}", "score": score, "subfield_scores": subfields}
            for option_id, score, subfields in options
        ],
    )


@pytest.fixture
def bundled_catalog() -> Catalog:
    """The catalog shipped with the package."""
    return Catalog.from_file(DEFAULT_CATALOG_PATH)


@pytest.fixture
def small_catalog() -> Catalog:
    """Three jobs and two unconditional stage-1 questions."""
    return Catalog(
        jobs=[
            Job(id="frontend", name="Frontend Developer", subfields=["web", "mobile"]),
            Job(id="backend", name="Backend Developer", subfields=["api", "infra"]),
            Job(id="ai", name="AI Engineer", subfields=["ml"]),
        ],
        questions=[
            make_question(1, [(1, {"frontend": 5}, {"web": 1}), (2, {"backend": 5}, {"api": 1}), (3, {"ai": 3}, {})]),
            make_question(2, [(1, {"frontend": 5}, {"mobile": 2}), (2, {"backend": 5}, {}), (3, {"ai": 2}, {})]),
        ],
    )


@pytest.fixture
def it_profile() -> ProfileFacts:
    return ProfileFacts(
        major=Major.IT,
        it_major_detail=ItMajorDetail.COMPUTER_SOFTWARE,
        coding_exp=CodingExperience.NO,
    )


@pytest.fixture
def local_catalog_service(small_catalog) -> CatalogService:
    """Catalog service whose local catalog is ``small_catalog``."""
    service = CatalogService()
    service._local_catalog = small_catalog
    return service


@pytest.fixture
def remote_catalog_service(small_catalog) -> Mock:
    """Stand-in for a catalog service backed by the recommendation backend."""
    service = Mock(spec=CatalogService)
    service.get_job_ids = AsyncMock(return_value=small_catalog.job_ids())
    service.get_catalog = AsyncMock(return_value=small_catalog)
    service.get_questions = AsyncMock(return_value=list(small_catalog.questions))
    return service


@pytest.fixture
def mock_client() -> Mock:
    """Recommendation backend client with every call mocked."""
    client = Mock()
    client.submit_recommendation = AsyncMock()
    client.submit_stage1 = AsyncMock()
    client.submit_final = AsyncMock()
    client.get_health = AsyncMock(return_value={"status": "ok"})
    return client
