"""Question selection for InferDev surveys.

This service decides which catalog questions a respondent sees. A question
is shown when it has no condition, or when every key of its condition holds
the required value in the respondent's profile facts. Keys the profile does
not know never match, so such questions are left out rather than treated as
errors.
"""

from typing import Any, Iterable, List, Mapping, Optional, Union

from inferdev.models.catalog import Question
from inferdev.models.profile import ProfileFacts
from inferdev.utils.constants import ConditionKeys, ErrorMessages, SurveyMode
from inferdev.utils.exceptions import NoQuestionsAvailableError
from inferdev.utils.logger import get_survey_logger

logger = get_survey_logger()

Facts = Union[ProfileFacts, Mapping[str, Any]]


def _as_fact_map(facts: Facts) -> Mapping[str, Any]:
    if isinstance(facts, ProfileFacts):
        return facts.as_condition_facts()
    return facts


def condition_matches(condition: Optional[Mapping[str, Any]], facts: Facts) -> bool:
    """Check a question condition against profile facts.

    Args:
        condition: Fact name to required value mapping, or None
        facts: Profile facts or a mapping keyed by condition key

    Returns:
        bool: True when every required value is held
    """
    if not condition:
        return True

    fact_map = _as_fact_map(facts)
    for key, required in condition.items():
        if key in ConditionKeys.INERT:
            logger.debug("Ignoring inert condition key", extra={"condition_key": key})
            continue
        if fact_map.get(key) != required:
            return False
    return True


def filter_questions(catalog: Iterable[Question], facts: Facts) -> List[Question]:
    """Select the questions that apply to a respondent, keeping catalog order.

    Args:
        catalog: Candidate questions
        facts: Respondent profile facts

    Returns:
        List[Question]: Applicable questions
    """
    fact_map = _as_fact_map(facts)
    return [question for question in catalog if condition_matches(question.condition, fact_map)]


class QuestionService:
    """Fetches stage question sets and narrows them to the respondent."""

    def __init__(self, catalog_service):
        """Initialize question service.

        Args:
            catalog_service: Source of reference data (CatalogService)
        """
        self.catalog_service = catalog_service

    async def get_stage_questions(
        self,
        mode: SurveyMode,
        stage: int,
        facts: ProfileFacts,
        track: Optional[str] = None,
    ) -> List[Question]:
        """Get the filtered questions for one survey stage.

        Args:
            mode: Scoring mode of the session
            stage: Stage number (1 or 2)
            facts: Respondent profile facts
            track: Track chosen after stage 1, for stage 2

        Returns:
            List[Question]: Non-empty list of applicable questions

        Raises:
            NoQuestionsAvailableError: If nothing applies to the respondent
            ExternalServiceError: If the backend cannot be reached
        """
        # The single-round survey asks the backend for its whole catalog.
        query_stage = None if mode == SurveyMode.SINGLE else stage
        candidates = await self.catalog_service.get_questions(mode, stage=query_stage, track=track)
        questions = filter_questions(candidates, facts)

        logger.info(
            "Selected stage questions",
            extra={
                "stage": stage,
                "track": track,
                "candidates": len(candidates),
                "selected": len(questions),
            }
        )

        if not questions:
            message = (
                ErrorMessages.NO_STAGE2_QUESTIONS.format(track=track)
                if stage == 2 else ErrorMessages.NO_QUESTIONS
            )
            raise NoQuestionsAvailableError(message, stage=stage, track=track)

        return questions
