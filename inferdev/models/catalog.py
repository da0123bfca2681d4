"""Reference data models: questions, options, jobs and career tracks."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, Field, model_validator

from inferdev.models.base import DomainModel, RecordId, same_id


class Option(DomainModel):
    """One selectable answer and the points it contributes."""

    id: Optional[RecordId] = None
    text: str
    score: Dict[str, int] = Field(default_factory=dict)
    subfield_scores: Dict[str, int] = Field(default_factory=dict)


class Question(DomainModel):
    """Catalog question.

    ``condition`` maps profile fact names to the value they must hold for
    the question to be shown. Older catalogs carry the question text under
    ``question`` instead of ``text``.
    """

    id: RecordId
    text: str = Field(validation_alias=AliasChoices("text", "question"))
    options: List[Option] = Field(default_factory=list)
    condition: Optional[Dict[str, Any]] = None
    stage: Optional[int] = None
    track: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def assign_option_ids(cls, data: Any) -> Any:
        """Give options without an id their position as id."""
        if not isinstance(data, dict) or not isinstance(data.get("options"), list):
            return data

        options = []
        for index, option in enumerate(data["options"]):
            if isinstance(option, dict) and option.get("id") is None:
                option = {**option, "id": index}
            options.append(option)
        return {**data, "options": options}

    def find_option(self, option_id: RecordId) -> Optional[Option]:
        for option in self.options:
            if option.id is not None and same_id(option.id, option_id):
                return option
        return None


class Job(DomainModel):
    """A recommendable job and its subfields."""

    id: str
    name: str
    subfields: List[str] = Field(default_factory=list)


class JobDetail(DomainModel):
    """Descriptive content shown with a recommended job."""

    job_id: str
    title: str
    img: Optional[str] = None
    description: Optional[str] = None
    strengths: List[str] = Field(default_factory=list)
    similar_jobs: List[str] = Field(default_factory=list)


class CareerTrack(DomainModel):
    """Coarse career category chosen after the first stage."""

    id: str
    name: str
    description: Optional[str] = None
    jobs: List[str] = Field(default_factory=list)


class Catalog(DomainModel):
    """Bundle of reference data for one survey."""

    jobs: List[Job] = Field(default_factory=list)
    job_details: List[JobDetail] = Field(default_factory=list)
    career_tracks: List[CareerTrack] = Field(default_factory=list)
    questions: List[Question] = Field(default_factory=list)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Catalog":
        """Load a catalog from a JSON document."""
        with open(path, "r", encoding="utf-8") as handle:
            return cls.model_validate(json.load(handle))

    def job_ids(self) -> List[str]:
        return [job.id for job in self.jobs]

    def get_job(self, job_id: str) -> Optional[Job]:
        return next((job for job in self.jobs if job.id == job_id), None)

    def get_job_detail(self, job_id: str) -> Optional[JobDetail]:
        return next((detail for detail in self.job_details if detail.job_id == job_id), None)

    def get_track(self, track_id: str) -> Optional[CareerTrack]:
        return next((track for track in self.career_tracks if track.id == track_id), None)

    def questions_for_stage(self, stage: Optional[int], track: Optional[str] = None) -> List[Question]:
        """Select questions of a stage, mirroring the backend's query filter.

        Questions without a stage belong to stage 1. A stage of None returns
        the whole catalog, as the single-round survey does.
        """
        if stage is None:
            return list(self.questions)

        selected = []
        for question in self.questions:
            if (question.stage or 1) != stage:
                continue
            if track is not None and question.track not in (None, track):
                continue
            selected.append(question)
        return selected
