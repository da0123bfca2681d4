"""Scoring for InferDev surveys.

Score maps are plain ``{key: int}`` dicts whose iteration order is the
catalog order of the jobs. Accumulation is exactly invertible: removing an
option subtracts the very deltas applying it added, so stepping back through
a survey never lets totals drift.

Selection is an argmax in which ties go to the key seen first.
"""

from typing import Dict, Iterable, Mapping, Optional, Union

from inferdev.models.catalog import Catalog, Job, Option
from inferdev.models.survey import AnswerRecord, RecommendationResult
from inferdev.utils.logger import get_scoring_logger

logger = get_scoring_logger()

ScoreMap = Dict[str, int]

# Anything carrying per-job and per-subfield deltas.
Scored = Union[Option, AnswerRecord]


def initial_scores(keys: Iterable[str]) -> ScoreMap:
    """Zeroed score map in the given key order."""
    return {key: 0 for key in keys}


def _shift(scores: Mapping[str, int], deltas: Mapping[str, int], sign: int) -> ScoreMap:
    updated = dict(scores)
    for key, delta in deltas.items():
        updated[key] = updated.get(key, 0) + sign * delta
    return updated


def apply_option(scores: Mapping[str, int], option: Scored) -> ScoreMap:
    """Add an option's per-job points; jobs it does not mention are unchanged."""
    return _shift(scores, option.score, 1)


def remove_option(scores: Mapping[str, int], option: Scored) -> ScoreMap:
    """Exact inverse of ``apply_option``."""
    return _shift(scores, option.score, -1)


def apply_subfield_option(scores: Mapping[str, int], option: Scored) -> ScoreMap:
    return _shift(scores, option.subfield_scores, 1)


def remove_subfield_option(scores: Mapping[str, int], option: Scored) -> ScoreMap:
    return _shift(scores, option.subfield_scores, -1)


def select_top(scores: Mapping[str, float]) -> Optional[str]:
    """Key with the highest score; on ties the first key in iteration order.

    Args:
        scores: Score map

    Returns:
        Optional[str]: Winning key, or None for an empty map
    """
    top_key = None
    top_score = None
    for key, score in scores.items():
        if top_score is None or score > top_score:
            top_key, top_score = key, score
    return top_key


def select_top_subfield(job: Job, subfield_scores: Mapping[str, int]) -> Optional[str]:
    """Best subfield among those listed for a job.

    Only subfields that scored above zero compete, in the job's listed order
    with first-seen tie-break. With no scored subfield the job's first listed
    subfield is returned.

    Args:
        job: The chosen job
        subfield_scores: Accumulated subfield scores

    Returns:
        Optional[str]: Subfield name, or None if the job lists none
    """
    if not job.subfields:
        return None

    best = None
    best_score = 0
    for subfield in job.subfields:
        score = subfield_scores.get(subfield, 0)
        if score > best_score:
            best, best_score = subfield, score

    return best if best is not None else job.subfields[0]


class ScoringService:
    """Turns accumulated score maps into a recommendation."""

    def score_locally(
        self,
        catalog: Catalog,
        scores: Mapping[str, int],
        subfield_scores: Mapping[str, int],
    ) -> RecommendationResult:
        """Build a result from locally accumulated scores.

        Args:
            catalog: Catalog whose jobs define the candidates
            scores: Accumulated job scores
            subfield_scores: Accumulated subfield scores

        Returns:
            RecommendationResult: Result with top job, subfield and ranking
        """
        ordered = initial_scores(catalog.job_ids())
        for job_id, score in scores.items():
            ordered[job_id] = score

        top_job = select_top(ordered)
        job = catalog.get_job(top_job) if top_job else None
        top_subfield = select_top_subfield(job, subfield_scores) if job else None

        logger.info(
            "Local scoring completed",
            extra={"top_job": top_job, "top_subfield": top_subfield, "scores": ordered}
        )

        return RecommendationResult(
            top_job=top_job,
            top_subfield=top_subfield,
            scores=ordered,
        )
