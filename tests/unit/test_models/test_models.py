"""Unit tests for domain records."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from inferdev.models.catalog import Question
from inferdev.models.profile import ProfileFacts
from inferdev.models.survey import RecommendationResult, SurveyState
from inferdev.utils.constants import CodingExperience, Major, SurveyStep


class TestProfileFacts:
    """Test intake profile records."""

    def test_blank_strings_are_missing(self):
        profile = ProfileFacts(major="", coding_exp="  ")

        assert profile.major is None
        assert profile.missing_fields() == ["major", "codingExp"]

    def test_it_major_needs_detail(self):
        profile = ProfileFacts(major=Major.IT, coding_exp=CodingExperience.NO)

        assert profile.missing_fields() == ["itMajorDetail"]

    def test_coding_level_only_with_experience(self):
        assert ProfileFacts(major="non-it", coding_exp="no").missing_fields() == []
        assert ProfileFacts(major="non-it", coding_exp="yes").missing_fields() == ["codingLevel"]

    def test_condition_facts_use_wire_keys(self):
        profile = ProfileFacts.model_validate({"major": "it", "itMajorDetail": "ai", "codingExp": "yes", "codingLevel": "team"})

        assert profile.as_condition_facts() == {
            "major": "it",
            "itMajorDetail": "ai",
            "codingExp": "yes",
            "codingLevel": "team",
        }

    def test_unknown_value_rejected(self):
        with pytest.raises(PydanticValidationError):
            ProfileFacts(major="arts")


class TestQuestion:
    """Test question parsing."""

    def test_legacy_text_key_and_option_ids(self):
        question = Question.model_validate({
            "id": 3,
            "question": "Which do you prefer?",
            "options": [{"text": "A"}, {"id": "b", "text": "B", "subfieldScores": {"web": 1}}],
        })

        assert question.text == "Which do you prefer?"
        assert [option.id for option in question.options] == [0, "b"]
        assert question.options[1].subfield_scores == {"web": 1}
        assert question.find_option("0").text == "A"
        assert question.find_option(5) is None

    def test_records_are_immutable(self):
        question = Question(id=1, text="Q")

        with pytest.raises(PydanticValidationError):
            question.text = "changed"


class TestSurveyState:
    """Test derived survey state properties."""

    def test_no_current_question_outside_survey(self):
        state = SurveyState(step=SurveyStep.INTAKE, questions=[Question(id=1, text="Q")])

        assert state.current_question is None
        assert not state.stage_complete

    def test_result_ranking_from_bare_ids(self):
        result = RecommendationResult.model_validate({"scores": {"ai": 2, "backend": 5}, "ranking": ["backend", "ai"]})

        assert [(entry.job_id, entry.score) for entry in result.ranking] == [("backend", 5), ("ai", 2)]
