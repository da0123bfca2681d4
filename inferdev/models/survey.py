"""Survey state and recommendation result records."""

from typing import Any, Dict, List, Optional

from pydantic import Field, model_validator

from inferdev.models.base import DomainModel, RecordId
from inferdev.models.catalog import Option, Question
from inferdev.models.profile import ProfileFacts
from inferdev.utils.constants import SurveyMode, SurveyStep
from inferdev.utils.formatters import rank_scores


class AnswerRecord(DomainModel):
    """A chosen option together with the points it added."""

    question_id: RecordId
    option_id: RecordId
    score: Dict[str, int] = Field(default_factory=dict)
    subfield_scores: Dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_option(cls, question: Question, option: Option) -> "AnswerRecord":
        return cls(
            question_id=question.id,
            option_id=option.id,
            score=dict(option.score),
            subfield_scores=dict(option.subfield_scores),
        )

    def to_submission(self) -> Dict[str, Any]:
        """The ``{questionId, optionId}`` pair the backend scores from."""
        return {"questionId": self.question_id, "optionId": self.option_id}


class StageOneOutcome(DomainModel):
    """Backend verdict after the trait-inference stage."""

    top_track: str
    trait_scores: Dict[str, float] = Field(default_factory=dict)
    confidence: Optional[float] = None


class RankedJob(DomainModel):
    job_id: str
    score: float
    ratio: Optional[float] = None


class RecommendationResult(DomainModel):
    """Outcome of a completed survey pass."""

    top_job: Optional[str] = None
    top_track: Optional[str] = None
    top_subfield: Optional[str] = None
    scores: Dict[str, float] = Field(default_factory=dict)
    ranking: List[RankedJob] = Field(default_factory=list)
    trait_scores: Dict[str, float] = Field(default_factory=dict)
    skill_scores: Dict[str, float] = Field(default_factory=dict)
    readiness: Optional[float] = None
    confidence: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def normalize_ranking(cls, data: Any) -> Any:
        """Accept rankings given as bare job ids, and derive a missing one from scores."""
        if not isinstance(data, dict):
            return data

        scores = data.get("scores") or {}
        ranking = data.get("ranking")
        if not ranking:
            ranking = rank_scores(scores)
        else:
            ranking = [
                {"job_id": entry, "score": scores.get(entry, 0)} if isinstance(entry, str) else entry
                for entry in ranking
            ]
        return {**data, "ranking": ranking}


class SurveyState(DomainModel):
    """Everything one respondent's survey session knows.

    Instances are never mutated; every transition produces a new record.
    ``question_index`` points at the question on screen and equals the
    number of answers given in the current stage until the stage's last
    question has been answered.
    """

    step: SurveyStep = SurveyStep.INTRO
    mode: SurveyMode = SurveyMode.TWO_STAGE
    profile: Optional[ProfileFacts] = None
    questions: List[Question] = Field(default_factory=list)
    question_index: int = 0
    stage1_answers: List[AnswerRecord] = Field(default_factory=list)
    stage2_answers: List[AnswerRecord] = Field(default_factory=list)
    scores: Dict[str, int] = Field(default_factory=dict)
    subfield_scores: Dict[str, int] = Field(default_factory=dict)
    top_track: Optional[str] = None
    trait_scores: Dict[str, float] = Field(default_factory=dict)
    result: Optional[RecommendationResult] = None
    error: Optional[str] = None

    @property
    def current_question(self) -> Optional[Question]:
        if not self.step.is_survey or self.question_index >= len(self.questions):
            return None
        return self.questions[self.question_index]

    @property
    def current_answers(self) -> List[AnswerRecord]:
        if self.step == SurveyStep.SURVEY2:
            return self.stage2_answers
        return self.stage1_answers

    @property
    def stage_complete(self) -> bool:
        """True once every question of the current stage has an answer."""
        return self.step.is_survey and bool(self.questions) and len(self.current_answers) >= len(self.questions)

    def with_error(self, message: Optional[str]) -> "SurveyState":
        return self.model_copy(update={"error": message})
