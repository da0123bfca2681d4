"""Unit tests for question selection."""

from unittest.mock import AsyncMock, Mock

import pytest

from inferdev.models.profile import ProfileFacts
from inferdev.services.catalog_service import CatalogService
from inferdev.services.question_service import QuestionService, condition_matches, filter_questions
from inferdev.utils.constants import CodingExperience, CodingLevel, Major, SurveyMode
from inferdev.utils.exceptions import NoQuestionsAvailableError
from tests.conftest import make_question


class TestConditionMatches:
    """Test single-condition evaluation."""

    def test_no_condition_always_matches(self):
        assert condition_matches(None, {})
        assert condition_matches({}, {"major": "it"})

    def test_every_key_must_hold(self):
        facts = {"major": "it", "codingExp": "yes"}

        assert condition_matches({"major": "it", "codingExp": "yes"}, facts)
        assert not condition_matches({"major": "it", "codingExp": "no"}, facts)

    def test_unknown_key_never_matches(self):
        assert not condition_matches({"favouriteColour": "blue"}, {"major": "it"})

    def test_or_key_is_ignored(self):
        facts = {"major": "it"}

        assert condition_matches({"major": "it", "or": ["codingExp"]}, facts)
        assert condition_matches({"or": {"major": "non-it"}}, facts)
        assert not condition_matches({"major": "non-it", "or": ["major"]}, facts)

    def test_accepts_profile_facts(self):
        profile = ProfileFacts(major=Major.NON_IT, coding_exp=CodingExperience.NO)

        assert condition_matches({"major": "non-it", "codingExp": "no"}, profile)
        assert not condition_matches({"itMajorDetail": "cs"}, profile)


class TestFilterQuestions:
    """Test filtering a catalog for a respondent."""

    def test_keeps_catalog_order(self):
        questions = [
            make_question(3, [(1, {}, {})]),
            make_question(1, [(1, {}, {})], condition={"major": "it"}),
            make_question(2, [(1, {}, {})], condition={"major": "non-it"}),
            make_question(4, [(1, {}, {})], condition={"codingLevel": "team"}),
        ]
        facts = {"major": "it", "codingLevel": "team"}

        selected = filter_questions(questions, facts)

        assert [q.id for q in selected] == [3, 1, 4]

    def test_profile_selection_on_bundled_catalog(self, bundled_catalog):
        profile = ProfileFacts(
            major=Major.NON_IT,
            coding_exp=CodingExperience.YES,
            coding_level=CodingLevel.TEAM,
        )

        selected = filter_questions(bundled_catalog.questions_for_stage(1), profile)

        assert [q.id for q in selected] == [1, 2, 4, 5, 6, 7]

    def test_empty_catalog(self):
        assert filter_questions([], {"major": "it"}) == []


class TestQuestionService:
    """Test stage question retrieval."""

    @pytest.fixture
    def catalog_service(self):
        service = Mock(spec=CatalogService)
        service.get_questions = AsyncMock(return_value=[
            make_question(1, [(1, {}, {})]),
            make_question(2, [(1, {}, {})], condition={"major": "non-it"}),
        ])
        return service

    @pytest.mark.asyncio
    async def test_filters_fetched_questions(self, catalog_service, it_profile):
        service = QuestionService(catalog_service)

        questions = await service.get_stage_questions(SurveyMode.TWO_STAGE, 1, it_profile)

        assert [q.id for q in questions] == [1]
        catalog_service.get_questions.assert_awaited_once_with(SurveyMode.TWO_STAGE, stage=1, track=None)

    @pytest.mark.asyncio
    async def test_single_mode_requests_whole_catalog(self, catalog_service, it_profile):
        service = QuestionService(catalog_service)

        await service.get_stage_questions(SurveyMode.SINGLE, 1, it_profile)

        catalog_service.get_questions.assert_awaited_once_with(SurveyMode.SINGLE, stage=None, track=None)

    @pytest.mark.asyncio
    async def test_stage_two_passes_track(self, catalog_service, it_profile):
        service = QuestionService(catalog_service)

        await service.get_stage_questions(SurveyMode.TWO_STAGE, 2, it_profile, track="backend")

        catalog_service.get_questions.assert_awaited_once_with(SurveyMode.TWO_STAGE, stage=2, track="backend")

    @pytest.mark.asyncio
    async def test_nothing_applicable_raises(self, catalog_service):
        catalog_service.get_questions.return_value = [
            make_question(1, [(1, {}, {})], condition={"major": "non-it"}),
        ]
        service = QuestionService(catalog_service)

        with pytest.raises(NoQuestionsAvailableError) as exc_info:
            await service.get_stage_questions(SurveyMode.TWO_STAGE, 1, {"major": "it"})

        assert exc_info.value.stage == 1

    @pytest.mark.asyncio
    async def test_empty_stage_two_names_track(self, catalog_service, it_profile):
        catalog_service.get_questions.return_value = []
        service = QuestionService(catalog_service)

        with pytest.raises(NoQuestionsAvailableError) as exc_info:
            await service.get_stage_questions(SurveyMode.TWO_STAGE, 2, it_profile, track="backend")

        assert exc_info.value.track == "backend"
        assert "backend" in exc_info.value.message
        assert exc_info.value.details == {"stage": 2, "track": "backend"}
