"""Constants and enums for the InferDev application.

This module defines the enums, condition keys and user-facing messages used
throughout the survey flow.
"""

from enum import Enum
from typing import Dict, Tuple


# ============================================================================
# PROFILE ENUMS
# ============================================================================

class Major(str, Enum):
    """Whether the respondent studied an IT-related major."""

    IT = "it"
    NON_IT = "non-it"


class ItMajorDetail(str, Enum):
    """IT major sub-categories."""

    COMPUTER_SOFTWARE = "cs"
    AI_DATA = "ai"
    NETWORK_SECURITY = "ns"
    GAME_CONTENT = "gc"
    OTHER = "etc"


class CodingExperience(str, Enum):
    """Whether the respondent has written code before."""

    YES = "yes"
    NO = "no"


class CodingLevel(str, Enum):
    """Depth of prior coding experience."""

    BASIC = "basic"
    PROJECT = "project"
    TEAM = "team"
    PRACTICAL = "practical"


# ============================================================================
# SURVEY FLOW ENUMS
# ============================================================================

class SurveyStep(str, Enum):
    """Steps of the survey state machine."""

    INTRO = "intro"
    INTAKE = "intake"
    SURVEY1 = "survey1"
    SURVEY2 = "survey2"
    RESULT = "result"

    @property
    def is_survey(self) -> bool:
        return self in (SurveyStep.SURVEY1, SurveyStep.SURVEY2)

    @property
    def stage(self) -> int:
        """Question stage number of a survey step (0 outside surveys)."""
        return {SurveyStep.SURVEY1: 1, SurveyStep.SURVEY2: 2}.get(self, 0)


class SurveyMode(str, Enum):
    """How a completed pass is scored."""

    LOCAL = "local"
    SINGLE = "single"
    TWO_STAGE = "two_stage"


# ============================================================================
# CONDITION KEYS
# ============================================================================

class ConditionKeys:
    """Profile fact names referenced by question conditions."""

    MAJOR = "major"
    IT_MAJOR_DETAIL = "itMajorDetail"
    CODING_EXP = "codingExp"
    CODING_LEVEL = "codingLevel"

    # Present in some catalogs but never evaluated.
    INERT = ("or",)


# ============================================================================
# MESSAGES
# ============================================================================

class ValidationMessages:
    """User-facing messages for missing intake fields."""

    MAJOR_REQUIRED = "Please tell us whether your major is IT-related."
    IT_MAJOR_DETAIL_REQUIRED = "Please select your IT major."
    CODING_EXP_REQUIRED = "Please tell us whether you have coding experience."
    CODING_LEVEL_REQUIRED = "Please select your coding experience level."

    FIELD_MESSAGES: Dict[str, str] = {
        ConditionKeys.MAJOR: MAJOR_REQUIRED,
        ConditionKeys.IT_MAJOR_DETAIL: IT_MAJOR_DETAIL_REQUIRED,
        ConditionKeys.CODING_EXP: CODING_EXP_REQUIRED,
        ConditionKeys.CODING_LEVEL: CODING_LEVEL_REQUIRED,
    }


class ErrorMessages:
    """Messages for failures surfaced to the respondent."""

    NO_QUESTIONS = "No questions are available for your profile."
    NO_STAGE2_QUESTIONS = "No follow-up questions are available for track '{track}'."
    INITIAL_DATA_FAILED = "Failed to fetch initial survey data"
    RECOMMENDATION_FAILED = "Failed to get recommendation"
    HTML_RESPONSE = (
        "The recommendation service returned an HTML page instead of JSON; "
        "check that RECOMMENDER_API_URL points at the API and not the web front end."
    )
    NON_JSON_RESPONSE = "The recommendation service returned a response that is not valid JSON."


# ============================================================================
# BACKEND PATHS
# ============================================================================

class BackendPaths:
    """Paths on the external recommendation backend."""

    HEALTH = "/health"
    JOBS = "/jobs"
    JOB_DETAILS = "/job-details"
    SURVEY_QUESTIONS = "/survey-questions"
    CAREER_TRACKS = "/career-tracks"
    RECOMMENDATION = "/recommendation"
    RECOMMENDATION_STAGE1 = "/recommendation/stage1"
    RECOMMENDATION_FINAL = "/recommendation/final"


SERVICE_NAME = "recommender"

# Body prefixes that mean the request reached a web server instead of the API.
HTML_MARKERS: Tuple[str, ...] = ("<!doctype", "<html")
