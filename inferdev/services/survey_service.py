"""Survey orchestration for InferDev.

This service drives a survey state through its steps. Pure transitions come
from ``survey_machine``; this layer adds the I/O around them: fetching the
question set for a stage and, when a stage's last question is answered,
asking the recommendation backend (or the local scorer) for the next step.

A call either returns the next state or raises. The state passed in is
never changed, so a failed backend call leaves the session exactly where it
was before the answer that triggered it.
"""

from typing import Optional

from inferdev.models.base import RecordId
from inferdev.models.profile import ProfileFacts
from inferdev.models.survey import SurveyState
from inferdev.services import survey_machine
from inferdev.services.catalog_service import CatalogService
from inferdev.services.question_service import QuestionService
from inferdev.services.scoring_service import ScoringService
from inferdev.utils.constants import SurveyMode, SurveyStep
from inferdev.utils.exceptions import ConfigurationError
from inferdev.utils.logger import get_survey_logger

logger = get_survey_logger()


class SurveyService:
    """Runs survey transitions that need reference data or scoring."""

    def __init__(
        self,
        catalog_service: CatalogService,
        client=None,
        scoring_service: Optional[ScoringService] = None,
        user_id: str = "anonymous",
    ):
        """Initialize survey service.

        Args:
            catalog_service: Reference data source
            client: RecommenderClient used by remote scoring modes
            scoring_service: Local scorer
            user_id: User ID sent with scoring requests
        """
        self.catalog_service = catalog_service
        self.client = client
        self.question_service = QuestionService(catalog_service)
        self.scoring_service = scoring_service or ScoringService()
        self.user_id = user_id

    async def create(self, mode: SurveyMode) -> SurveyState:
        """New survey at the intro screen, scores zeroed for every known job."""
        job_ids = await self.catalog_service.get_job_ids(mode)
        return survey_machine.new_survey(mode, job_ids)

    def begin(self, state: SurveyState) -> SurveyState:
        return survey_machine.begin(state)

    async def submit_intake(self, state: SurveyState, facts: ProfileFacts) -> SurveyState:
        """Validate the intake form, load stage-1 questions and start the survey.

        Raises:
            ValidationError: If a required profile field is missing
            NoQuestionsAvailableError: If no question applies to the profile
            ExternalServiceError: If the questions cannot be fetched
        """
        survey_machine.validate_profile(facts)
        questions = await self.question_service.get_stage_questions(state.mode, 1, facts)
        new_state = survey_machine.submit_intake(state, facts, questions)

        logger.info(
            "Survey started",
            extra={"mode": state.mode.value, "questions": len(questions), "profile": facts.as_condition_facts()}
        )
        return new_state

    async def answer(self, state: SurveyState, option_id: RecordId) -> SurveyState:
        """Record an answer and, after a stage's last question, advance.

        Raises:
            ValidationError: If the option is not part of the current question
            SurveyStateError: If no question is awaiting an answer
            NoQuestionsAvailableError: If the chosen track has no questions
            ExternalServiceError: If the backend call fails
        """
        answered = survey_machine.record_answer(state, option_id)
        if not answered.stage_complete:
            return answered

        if answered.mode == SurveyMode.LOCAL:
            return await self._finish_locally(answered)
        if answered.mode == SurveyMode.SINGLE:
            return await self._finish_single(answered)
        if answered.step == SurveyStep.SURVEY1:
            return await self._enter_stage2(answered)
        return await self._finish_two_stage(answered)

    def go_back(self, state: SurveyState) -> SurveyState:
        return survey_machine.go_back(state)

    async def reset(self, state: SurveyState) -> SurveyState:
        job_ids = await self.catalog_service.get_job_ids(state.mode)
        return survey_machine.reset(state, job_ids)

    def _require_client(self) -> None:
        if self.client is None:
            raise ConfigurationError("No recommendation backend configured", config_key="RECOMMENDER_API_URL")

    async def _finish_locally(self, state: SurveyState) -> SurveyState:
        catalog = await self.catalog_service.get_catalog(SurveyMode.LOCAL)
        result = self.scoring_service.score_locally(catalog, state.scores, state.subfield_scores)
        return survey_machine.complete(state, result)

    async def _finish_single(self, state: SurveyState) -> SurveyState:
        self._require_client()
        result = await self.client.submit_recommendation(state.stage1_answers, self.user_id)

        logger.info("Recommendation received", extra={"top_job": result.top_job})
        return survey_machine.complete(state, result)

    async def _enter_stage2(self, state: SurveyState) -> SurveyState:
        self._require_client()
        outcome = await self.client.submit_stage1(state.stage1_answers, state.profile, self.user_id)

        logger.info(
            "Stage 1 scored",
            extra={"top_track": outcome.top_track, "confidence": outcome.confidence}
        )

        questions = await self.question_service.get_stage_questions(
            state.mode, 2, state.profile, track=outcome.top_track
        )
        return survey_machine.enter_stage2(state, outcome, questions)

    async def _finish_two_stage(self, state: SurveyState) -> SurveyState:
        self._require_client()
        result = await self.client.submit_final(
            state.stage1_answers,
            state.stage2_answers,
            state.top_track,
            state.profile,
            self.user_id,
        )
        if result.top_track is None:
            result = result.model_copy(update={"top_track": state.top_track})

        logger.info(
            "Final recommendation received",
            extra={"top_track": result.top_track, "top_job": result.top_job, "confidence": result.confidence}
        )
        return survey_machine.complete(state, result)
