"""Survey state transitions.

Every function here takes a ``SurveyState`` and returns a new one; nothing
is mutated and nothing performs I/O. Preconditions that do not hold raise
``SurveyStateError`` (or ``ValidationError`` for bad input) and leave the
caller's state untouched.

Step order::

    INTRO -> INTAKE -> SURVEY1 [-> SURVEY2] -> RESULT
"""

from typing import Iterable, List

from inferdev.models.base import RecordId
from inferdev.models.catalog import Question
from inferdev.models.profile import ProfileFacts
from inferdev.models.survey import (
    AnswerRecord,
    RecommendationResult,
    StageOneOutcome,
    SurveyState,
)
from inferdev.services.scoring_service import (
    apply_option,
    apply_subfield_option,
    initial_scores,
    remove_option,
    remove_subfield_option,
)
from inferdev.utils.constants import (
    ErrorMessages,
    SurveyMode,
    SurveyStep,
    ValidationMessages,
)
from inferdev.utils.exceptions import (
    NoQuestionsAvailableError,
    SurveyStateError,
    ValidationError,
)


def _require_step(state: SurveyState, *steps: SurveyStep) -> None:
    if state.step not in steps:
        allowed = ", ".join(step.value for step in steps)
        raise SurveyStateError(
            f"Action not allowed in step '{state.step.value}' (expected {allowed})",
            step=state.step.value,
        )


def new_survey(mode: SurveyMode, job_ids: Iterable[str]) -> SurveyState:
    """Fresh state at the intro screen with every job scored zero."""
    return SurveyState(mode=mode, scores=initial_scores(job_ids))


def validate_profile(facts: ProfileFacts) -> None:
    """Raise one ValidationError naming every missing intake field.

    Raises:
        ValidationError: If any required field is empty
    """
    missing = facts.missing_fields()
    if not missing:
        return

    messages = [ValidationMessages.FIELD_MESSAGES[field] for field in missing]
    raise ValidationError(
        messages[0],
        field=missing[0],
        validation_errors=messages,
        details={"missing_fields": missing},
    )


def begin(state: SurveyState) -> SurveyState:
    """Leave the intro screen for the intake form."""
    _require_step(state, SurveyStep.INTRO)
    return state.model_copy(update={"step": SurveyStep.INTAKE, "error": None})


def submit_intake(state: SurveyState, facts: ProfileFacts, questions: List[Question]) -> SurveyState:
    """Accept the intake form and start the first stage.

    Args:
        state: State in the INTAKE step
        facts: Completed profile facts
        questions: Stage-1 questions already filtered for ``facts``

    Raises:
        ValidationError: If a required profile field is missing
        NoQuestionsAvailableError: If ``questions`` is empty
    """
    _require_step(state, SurveyStep.INTAKE)
    validate_profile(facts)
    if not questions:
        raise NoQuestionsAvailableError(ErrorMessages.NO_QUESTIONS, stage=1)

    return state.model_copy(update={
        "step": SurveyStep.SURVEY1,
        "profile": facts,
        "questions": list(questions),
        "question_index": 0,
        "stage1_answers": [],
        "stage2_answers": [],
        "scores": initial_scores(state.scores),
        "subfield_scores": {},
        "top_track": None,
        "trait_scores": {},
        "result": None,
        "error": None,
    })


def record_answer(state: SurveyState, option_id: RecordId) -> SurveyState:
    """Choose an option for the question on screen.

    The answer is logged and its points added. The index moves on unless
    this was the stage's last question, in which case it stays put and
    ``stage_complete`` becomes true.

    Raises:
        SurveyStateError: Outside a survey step or once the stage is complete
        ValidationError: If the option does not belong to the question
    """
    _require_step(state, SurveyStep.SURVEY1, SurveyStep.SURVEY2)
    if state.stage_complete:
        raise SurveyStateError("All questions of this stage are answered", step=state.step.value)

    question = state.current_question
    option = question.find_option(option_id) if question else None
    if option is None:
        raise ValidationError(
            f"Option '{option_id}' does not belong to question '{question.id if question else None}'",
            field="option_id",
            value=option_id,
        )

    answer = AnswerRecord.from_option(question, option)
    answers_key = "stage2_answers" if state.step == SurveyStep.SURVEY2 else "stage1_answers"
    is_last = state.question_index == len(state.questions) - 1

    return state.model_copy(update={
        answers_key: [*state.current_answers, answer],
        "scores": apply_option(state.scores, answer),
        "subfield_scores": apply_subfield_option(state.subfield_scores, answer),
        "question_index": state.question_index if is_last else state.question_index + 1,
        "error": None,
    })


def _back_to_intake(state: SurveyState) -> SurveyState:
    return state.model_copy(update={
        "step": SurveyStep.INTAKE,
        "questions": [],
        "question_index": 0,
        "stage1_answers": [],
        "stage2_answers": [],
        "scores": initial_scores(state.scores),
        "subfield_scores": {},
        "top_track": None,
        "trait_scores": {},
        "error": None,
    })


def go_back(state: SurveyState) -> SurveyState:
    """Step back one screen.

    Within a stage the last answer is dropped and its points subtracted.
    From the first question of either stage the respondent returns to the
    intake form, keeping the profile they entered.

    Raises:
        SurveyStateError: From the intro screen or the result screen
    """
    _require_step(state, SurveyStep.INTAKE, SurveyStep.SURVEY1, SurveyStep.SURVEY2)

    if state.step == SurveyStep.INTAKE:
        return state.model_copy(update={"step": SurveyStep.INTRO, "error": None})

    answers = state.current_answers
    if state.question_index == 0 and not answers:
        return _back_to_intake(state)

    last = answers[-1]
    answers_key = "stage2_answers" if state.step == SurveyStep.SURVEY2 else "stage1_answers"
    return state.model_copy(update={
        answers_key: answers[:-1],
        "scores": remove_option(state.scores, last),
        "subfield_scores": remove_subfield_option(state.subfield_scores, last),
        "question_index": len(answers) - 1,
        "error": None,
    })


def enter_stage2(state: SurveyState, outcome: StageOneOutcome, questions: List[Question]) -> SurveyState:
    """Move from a completed first stage to the track-specific stage.

    Raises:
        SurveyStateError: Unless stage 1 of a two-stage survey is complete
        NoQuestionsAvailableError: If the track has no questions
    """
    _require_step(state, SurveyStep.SURVEY1)
    if state.mode != SurveyMode.TWO_STAGE or not state.stage_complete:
        raise SurveyStateError("Stage 1 is not complete", step=state.step.value)
    if not questions:
        raise NoQuestionsAvailableError(
            ErrorMessages.NO_STAGE2_QUESTIONS.format(track=outcome.top_track),
            stage=2,
            track=outcome.top_track,
        )

    return state.model_copy(update={
        "step": SurveyStep.SURVEY2,
        "questions": list(questions),
        "question_index": 0,
        "stage2_answers": [],
        "top_track": outcome.top_track,
        "trait_scores": dict(outcome.trait_scores),
        "error": None,
    })


def complete(state: SurveyState, result: RecommendationResult) -> SurveyState:
    """Record the final recommendation once the last stage is answered.

    Raises:
        SurveyStateError: If the current stage still has open questions
    """
    _require_step(state, SurveyStep.SURVEY1, SurveyStep.SURVEY2)
    if not state.stage_complete:
        raise SurveyStateError("The survey has unanswered questions", step=state.step.value)

    return state.model_copy(update={
        "step": SurveyStep.RESULT,
        "result": result,
        "error": None,
    })


def reset(state: SurveyState, job_ids: Iterable[str]) -> SurveyState:
    """Discard everything and return to the intro screen."""
    return new_survey(state.mode, job_ids)
