"""Unit tests for reference data loading."""

import json
from unittest.mock import AsyncMock, Mock

import pytest

from inferdev.models.catalog import CareerTrack, Job, JobDetail
from inferdev.services.catalog_service import CatalogService
from inferdev.utils.constants import SurveyMode
from inferdev.utils.exceptions import ConfigurationError, ExternalServiceError
from tests.conftest import make_question


@pytest.fixture
def backend():
    client = Mock()
    client.get_jobs = AsyncMock(return_value=[Job(id="frontend", name="Frontend Developer")])
    client.get_job_details = AsyncMock(return_value=[JobDetail(job_id="frontend", title="Frontend Developer")])
    client.get_survey_questions = AsyncMock(return_value=[make_question(1, [(1, {"frontend": 1}, {})])])
    client.get_career_tracks = AsyncMock(return_value=[CareerTrack(id="product", name="Product")])
    return client


class TestLocalCatalog:
    """Test the on-disk catalog."""

    def test_bundled_catalog_loads(self):
        catalog = CatalogService().get_local_catalog()

        assert catalog.job_ids() == ["frontend", "backend", "ai"]
        assert catalog.get_job_detail("backend").similar_jobs
        assert [q.id for q in catalog.questions_for_stage(2, "data")] == [301]

    def test_missing_file(self, tmp_path):
        service = CatalogService(catalog_path=str(tmp_path / "missing.json"))

        with pytest.raises(ConfigurationError):
            service.get_local_catalog()

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            CatalogService(catalog_path=str(path)).get_local_catalog()

    def test_custom_file(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({
            "jobs": [{"id": "qa", "name": "QA Engineer"}],
            "questions": [{"id": "q1", "question": "Do you like testing?", "options": [{"text": "Yes", "score": {"qa": 1}}]}],
        }), encoding="utf-8")

        catalog = CatalogService(catalog_path=str(path)).get_local_catalog()

        assert catalog.job_ids() == ["qa"]
        assert catalog.questions[0].text == "Do you like testing?"
        assert catalog.questions[0].options[0].id == 0

    @pytest.mark.asyncio
    async def test_local_mode_never_calls_backend(self, backend):
        service = CatalogService(client=backend)

        questions = await service.get_questions(SurveyMode.LOCAL, stage=1)

        assert [q.id for q in questions] == [1, 2, 3, 4, 5, 6, 7]
        backend.get_survey_questions.assert_not_awaited()


class TestRemoteCatalog:
    """Test reference data fetched from the backend."""

    @pytest.mark.asyncio
    async def test_fetches_all_lists(self, backend):
        catalog = await CatalogService(client=backend).get_catalog(SurveyMode.TWO_STAGE)

        assert catalog.job_ids() == ["frontend"]
        assert catalog.get_track("product").name == "Product"
        assert len(catalog.questions) == 1

    @pytest.mark.asyncio
    async def test_cached_within_ttl(self, backend):
        service = CatalogService(client=backend, cache_ttl_seconds=300)

        await service.get_remote_catalog()
        await service.get_remote_catalog()

        assert backend.get_jobs.await_count == 1

    @pytest.mark.asyncio
    async def test_refetched_after_ttl(self, backend):
        clock = [0.0]
        service = CatalogService(client=backend, cache_ttl_seconds=300, timer=lambda: clock[0])

        await service.get_remote_catalog()
        clock[0] += 301
        await service.get_remote_catalog()

        assert backend.get_jobs.await_count == 2

    @pytest.mark.asyncio
    async def test_refetched_after_invalidate(self, backend):
        service = CatalogService(client=backend, cache_ttl_seconds=300)

        await service.get_remote_catalog()
        service.invalidate()
        await service.get_remote_catalog()

        assert backend.get_jobs.await_count == 2

    @pytest.mark.asyncio
    async def test_any_failure_fails_the_load(self, backend):
        backend.get_career_tracks.side_effect = ExternalServiceError("HTTP 500", status_code=500)

        with pytest.raises(ExternalServiceError):
            await CatalogService(client=backend).get_remote_catalog()

    @pytest.mark.asyncio
    async def test_questions_use_backend_filter(self, backend):
        service = CatalogService(client=backend)

        await service.get_questions(SurveyMode.TWO_STAGE, stage=2, track="product")

        backend.get_survey_questions.assert_awaited_once_with(stage=2, track="product")

    @pytest.mark.asyncio
    async def test_remote_mode_requires_client(self):
        with pytest.raises(ConfigurationError):
            await CatalogService().get_job_ids(SurveyMode.SINGLE)
