"""Survey session management for InferDev.

Each respondent's survey lives in an in-memory session holding the current
``SurveyState``. Transitions run one at a time per session. When a
transition fails because of a backend problem or an empty question set,
the error message is recorded on the stored state (which is otherwise left
as it was) so that the next read shows it, and the exception is re-raised.
"""

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, Optional, Union
from uuid import uuid4

from cachetools import TTLCache

from inferdev.models.base import RecordId
from inferdev.models.profile import ProfileFacts
from inferdev.models.survey import SurveyState
from inferdev.services.survey_service import SurveyService
from inferdev.utils.constants import SurveyMode
from inferdev.utils.exceptions import (
    ExternalServiceError,
    NoQuestionsAvailableError,
    ResourceNotFoundError,
)
from inferdev.utils.logger import get_survey_logger

logger = get_survey_logger()

Transition = Callable[[SurveyState], Union[SurveyState, Awaitable[SurveyState]]]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SurveySession:
    """A stored survey and its bookkeeping."""

    session_id: str
    state: SurveyState
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)


class EvictingSessionCache(TTLCache):
    """TTL cache that logs sessions pushed out by the size bound."""

    def popitem(self):
        session_id, session = super().popitem()
        logger.warning("Evicted survey session", extra={"session_id": session_id})
        return session_id, session


class SurveySessionStore:
    """In-memory session store with idle expiry and a size bound.

    Sessions live in a ``cachetools.TTLCache``: every save restarts the idle
    clock, and once ``max_sessions`` is reached the least recently used
    session is evicted.
    """

    def __init__(
        self,
        ttl_minutes: int = 60,
        max_sessions: int = 10000,
        timer: Callable[[], float] = time.monotonic,
    ):
        """Initialize session store.

        Args:
            ttl_minutes: Idle time after which a session is dropped
            max_sessions: Upper bound on live sessions
            timer: Clock used for expiry
        """
        self.ttl_minutes = ttl_minutes
        self.max_sessions = max_sessions
        self._sessions = EvictingSessionCache(maxsize=max_sessions, ttl=ttl_minutes * 60, timer=timer)

    def __len__(self) -> int:
        self._sessions.expire()
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def create(self, state: SurveyState) -> SurveySession:
        session = SurveySession(session_id=uuid4().hex, state=state)
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> SurveySession:
        """Look up a live session.

        Raises:
            ResourceNotFoundError: If the session is unknown or expired
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise ResourceNotFoundError(
                f"Survey session '{session_id}' not found",
                resource_type="survey_session",
                resource_id=session_id,
            )
        return session

    def save(self, session: SurveySession, state: SurveyState) -> SurveySession:
        """Store a new state for a live session.

        Raises:
            ResourceNotFoundError: If the session was deleted, evicted or
                expired since it was read
        """
        self.get(session.session_id)
        session.state = state
        session.updated_at = utc_now()
        self._sessions[session.session_id] = session
        return session

    def delete(self, session_id: str) -> None:
        self.get(session_id)
        del self._sessions[session_id]


class SurveySessionManager:
    """Applies survey transitions to stored sessions."""

    # Failures the respondent should see on the survey screen.
    RECORDED_ERRORS = (ExternalServiceError, NoQuestionsAvailableError)

    def __init__(
        self,
        survey_service: SurveyService,
        store: Optional[SurveySessionStore] = None,
        default_mode: SurveyMode = SurveyMode.TWO_STAGE,
    ):
        self.survey_service = survey_service
        self.store = store if store is not None else SurveySessionStore()
        self.default_mode = default_mode

    async def create(self, mode: Optional[SurveyMode] = None) -> SurveySession:
        state = await self.survey_service.create(mode or self.default_mode)
        session = self.store.create(state)
        logger.info("Survey session created", extra={"session_id": session.session_id, "mode": state.mode.value})
        return session

    def get(self, session_id: str) -> SurveySession:
        return self.store.get(session_id)

    def delete(self, session_id: str) -> None:
        self.store.delete(session_id)
        logger.info("Survey session deleted", extra={"session_id": session_id})

    async def _apply(self, session_id: str, transition: Transition) -> SurveySession:
        session = self.store.get(session_id)
        async with session.lock:
            try:
                new_state = transition(session.state)
                if asyncio.iscoroutine(new_state):
                    new_state = await new_state
            except self.RECORDED_ERRORS as e:
                # The session may have been deleted or evicted while the backend call was pending.
                if session_id in self.store:
                    self.store.save(session, session.state.with_error(e.message))
                logger.warning(
                    "Survey transition failed",
                    extra={
                        "session_id": session_id,
                        "step": session.state.step.value,
                        "error": e.message,
                        "error_code": e.error_code,
                    }
                )
                raise
            return self.store.save(session, new_state)

    async def begin(self, session_id: str) -> SurveySession:
        return await self._apply(session_id, self.survey_service.begin)

    async def submit_intake(self, session_id: str, facts: ProfileFacts) -> SurveySession:
        return await self._apply(session_id, lambda state: self.survey_service.submit_intake(state, facts))

    async def answer(self, session_id: str, option_id: RecordId) -> SurveySession:
        return await self._apply(session_id, lambda state: self.survey_service.answer(state, option_id))

    async def go_back(self, session_id: str) -> SurveySession:
        return await self._apply(session_id, self.survey_service.go_back)

    async def reset(self, session_id: str) -> SurveySession:
        return await self._apply(session_id, self.survey_service.reset)

    def stats(self) -> Dict[str, int]:
        return {"active_sessions": len(self.store)}
