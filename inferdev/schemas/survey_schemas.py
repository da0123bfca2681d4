"""Survey schemas for InferDev API.

This module defines the request bodies of the survey endpoints and the
session view returned by all of them. Views never expose option points;
the respondent only sees question and option text.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, Field, field_validator

from inferdev.models.catalog import Catalog, CareerTrack, Job, JobDetail, Question
from inferdev.models.profile import ProfileFacts
from inferdev.models.survey import RecommendationResult
from inferdev.schemas.base import BaseSchema
from inferdev.utils.constants import (
    CodingExperience,
    CodingLevel,
    ItMajorDetail,
    Major,
    SurveyMode,
    SurveyStep,
)
from inferdev.utils.formatters import format_ratio


# Requests

class CreateSessionRequest(BaseSchema):
    """Start a new survey session."""

    mode: Optional[SurveyMode] = Field(None, description="Scoring mode; server default when omitted")


class IntakeRequest(BaseSchema):
    """Intake form answers. Empty strings count as not answered."""

    major: Optional[Major] = Field(None, description="it or non-it")
    it_major_detail: Optional[ItMajorDetail] = Field(
        None,
        validation_alias=AliasChoices("it_major_detail", "itMajorDetail"),
        description="IT major category when major is it",
    )
    coding_exp: Optional[CodingExperience] = Field(
        None,
        validation_alias=AliasChoices("coding_exp", "codingExp"),
        description="yes or no",
    )
    coding_level: Optional[CodingLevel] = Field(
        None,
        validation_alias=AliasChoices("coding_level", "codingLevel"),
        description="Coding level when coding_exp is yes",
    )

    model_config = {
        **BaseSchema.model_config,
        "use_enum_values": False,
        "json_schema_extra": {
            "example": {
                "major": "it",
                "it_major_detail": "cs",
                "coding_exp": "yes",
                "coding_level": "project"
            }
        }
    }

    @field_validator("*", mode="before")
    @classmethod
    def blank_as_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def to_profile(self) -> ProfileFacts:
        return ProfileFacts(
            major=self.major,
            it_major_detail=self.it_major_detail,
            coding_exp=self.coding_exp,
            coding_level=self.coding_level,
        )


class AnswerRequest(BaseSchema):
    """Choose an option of the question on screen."""

    option_id: Union[int, str] = Field(
        ...,
        validation_alias=AliasChoices("option_id", "optionId"),
        description="ID of the chosen option",
    )


# Views

class OptionView(BaseSchema):
    id: Union[int, str]
    text: str


class QuestionView(BaseSchema):
    id: Union[int, str]
    text: str
    options: List[OptionView]

    @classmethod
    def from_question(cls, question: Question) -> "QuestionView":
        return cls(
            id=question.id,
            text=question.text,
            options=[OptionView(id=option.id, text=option.text) for option in question.options],
        )


class ProgressView(BaseSchema):
    """Position within the current stage, 1-based for display."""

    stage: int
    current: int
    total: int
    answered: int


class JobView(BaseSchema):
    id: str
    name: str
    subfields: List[str] = Field(default_factory=list)

    @classmethod
    def from_job(cls, job: Job) -> "JobView":
        return cls(**job.model_dump())


class JobDetailView(BaseSchema):
    job_id: str
    title: str
    img: Optional[str] = None
    description: Optional[str] = None
    strengths: List[str] = Field(default_factory=list)
    similar_jobs: List[str] = Field(default_factory=list)

    @classmethod
    def from_detail(cls, detail: JobDetail) -> "JobDetailView":
        return cls(**detail.model_dump())


class CareerTrackView(BaseSchema):
    id: str
    name: str
    description: Optional[str] = None
    jobs: List[str] = Field(default_factory=list)

    @classmethod
    def from_track(cls, track: CareerTrack) -> "CareerTrackView":
        return cls(**track.model_dump())


class RankedJobView(BaseSchema):
    job_id: str
    name: Optional[str] = None
    score: float
    ratio: Optional[float] = None


class ResultView(BaseSchema):
    """Final recommendation as shown on the result screen."""

    top_job: Optional[str] = None
    top_job_name: Optional[str] = None
    top_track: Optional[str] = None
    top_subfield: Optional[str] = None
    scores: Dict[str, float] = Field(default_factory=dict)
    ranking: List[RankedJobView] = Field(default_factory=list)
    trait_scores: Dict[str, float] = Field(default_factory=dict)
    skill_scores: Dict[str, float] = Field(default_factory=dict)
    readiness: Optional[float] = None
    confidence: Optional[float] = None
    readiness_display: Optional[str] = None
    confidence_display: Optional[str] = None
    job_detail: Optional[JobDetailView] = None

    @classmethod
    def from_result(cls, result: RecommendationResult, catalog: Optional[Catalog] = None) -> "ResultView":
        def job_name(job_id: Optional[str]) -> Optional[str]:
            job = catalog.get_job(job_id) if catalog and job_id else None
            return job.name if job else None

        detail = catalog.get_job_detail(result.top_job) if catalog and result.top_job else None

        return cls(
            top_job=result.top_job,
            top_job_name=job_name(result.top_job),
            top_track=result.top_track,
            top_subfield=result.top_subfield,
            scores=result.scores,
            ranking=[
                RankedJobView(job_id=entry.job_id, name=job_name(entry.job_id), score=entry.score, ratio=entry.ratio)
                for entry in result.ranking
            ],
            trait_scores=result.trait_scores,
            skill_scores=result.skill_scores,
            readiness=result.readiness,
            confidence=result.confidence,
            readiness_display=format_ratio(result.readiness),
            confidence_display=format_ratio(result.confidence),
            job_detail=JobDetailView.from_detail(detail) if detail else None,
        )


class SessionResponse(BaseSchema):
    """Everything a client needs to render the current survey screen."""

    session_id: str
    step: SurveyStep
    mode: SurveyMode
    profile: Optional[Dict[str, str]] = None
    progress: Optional[ProgressView] = None
    current_question: Optional[QuestionView] = None
    top_track: Optional[str] = None
    trait_scores: Dict[str, float] = Field(default_factory=dict)
    result: Optional[ResultView] = None
    error: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_session(cls, session, catalog: Optional[Catalog] = None) -> "SessionResponse":
        """Build the view of a stored survey session.

        Args:
            session: SurveySession
            catalog: Reference data used to name jobs and attach job details
        """
        state = session.state

        progress = None
        current_question = None
        if state.step.is_survey:
            answered = len(state.current_answers)
            progress = ProgressView(
                stage=state.step.stage,
                current=min(state.question_index + 1, len(state.questions)),
                total=len(state.questions),
                answered=answered,
            )
            if state.current_question is not None:
                current_question = QuestionView.from_question(state.current_question)

        return cls(
            session_id=session.session_id,
            step=state.step,
            mode=state.mode,
            profile=state.profile.as_condition_facts() if state.profile else None,
            progress=progress,
            current_question=current_question,
            top_track=state.top_track,
            trait_scores=state.trait_scores,
            result=ResultView.from_result(state.result, catalog) if state.result else None,
            error=state.error,
            created_at=session.created_at,
            updated_at=session.updated_at,
        )
