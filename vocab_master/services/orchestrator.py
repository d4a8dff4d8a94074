"""Request orchestration: validate, consult the cache, fetch, record.

Each call to :meth:`RequestOrchestrator.define` is one run. Runs are not
mutually exclusive; every run takes a token from a monotonically increasing
counter and only the run holding the latest token may change the displayed
state. A superseded run still finishes its cache write and history update.
"""

from __future__ import annotations

import itertools
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Protocol, Tuple

from vocab_master import logging_manager as log_mgr
from vocab_master.config_manager import MAX_REQUESTED_LENGTH
from vocab_master.ledgers import HistoryItem, HistoryLedger
from vocab_master.lookup_cache import (
    DefinitionCache,
    DefinitionResult,
    RequestParams,
    coerce_length,
    optional_text,
)
from vocab_master.notifications import Notice, NoticeBoard

from .define_client import GENERIC_ERROR_MESSAGE, DefineServiceError
from .schemas import DefineRequest

logger = log_mgr.get_logger().getChild("services.orchestrator")

CACHE_HIT_MESSAGE = "Definition loaded from local cache."
CACHE_WRITE_FAILED_MESSAGE = "Could not save definition locally."
EMPTY_WORD_MESSAGE = "Please enter a word or phrase."

FEATURED_WORD = RequestParams(word="Ephemeral", length=25, tone="formal")


class RequestState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    INVALID = "invalid"
    CACHE_LOOKUP = "cache_lookup"
    FETCHING = "fetching"
    COMPLETED = "completed"
    FAILED = "failed"


class RequestValidationError(ValueError):
    """Raised when a request's word or length is unusable."""


class DefinitionFetcher(Protocol):
    async def define(self, request: DefineRequest) -> DefinitionResult: ...


@dataclass(frozen=True)
class DisplayState:
    """What the presentation layer should currently render."""

    result: Optional[DefinitionResult] = None
    error: Optional[str] = None
    is_loading: bool = False
    state: RequestState = RequestState.IDLE
    token: int = 0


@dataclass(frozen=True)
class DefineOutcome:
    """Terminal result of one orchestration run."""

    token: int
    state: RequestState
    result: Optional[DefinitionResult] = None
    error: Optional[str] = None
    from_cache: bool = False
    cache_saved: Optional[bool] = None
    displayed: bool = False

    @property
    def ok(self) -> bool:
        return self.state is RequestState.COMPLETED


def length_error_message(max_length: int) -> str:
    return f"Please enter a valid length (1-{max_length})."


def validate_request(
    params: RequestParams, *, max_length: int = MAX_REQUESTED_LENGTH
) -> Tuple[str, int]:
    """Return the trimmed word and integer length, or raise.

    Raises:
        RequestValidationError: the word is blank or the length is outside
            ``[1, max_length]``.
    """
    word = (params.word or "").strip()
    if not word:
        raise RequestValidationError(EMPTY_WORD_MESSAGE)
    length = coerce_length(params.length)
    if length < 1 or length > max_length:
        raise RequestValidationError(length_error_message(max_length))
    return word, length


DisplayListener = Callable[[DisplayState], None]


class RequestOrchestrator:
    """Decide between cache and network for each request and keep state coherent."""

    def __init__(
        self,
        cache: DefinitionCache,
        history: HistoryLedger,
        fetcher: DefinitionFetcher,
        *,
        max_requested_length: int = MAX_REQUESTED_LENGTH,
        notices: Optional[NoticeBoard] = None,
        wait_ready: Optional[Callable[[], Awaitable[None]]] = None,
    ) -> None:
        self._cache = cache
        self._history = history
        self._fetcher = fetcher
        self._max_length = max_requested_length
        self._notices = notices
        self._wait_ready = wait_ready
        self._tokens = itertools.count(1)
        self._latest_token = 0
        self._display = DisplayState()
        self._listeners: List[DisplayListener] = []

    @property
    def display(self) -> DisplayState:
        return self._display

    @property
    def latest_token(self) -> int:
        return self._latest_token

    def subscribe(self, listener: DisplayListener) -> Callable[[], None]:
        """Call ``listener`` with every new :class:`DisplayState`."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def clear_display(self) -> None:
        """Drop the displayed result and error; in-flight runs lose the display."""
        self._latest_token = next(self._tokens)
        self._set_display(DisplayState(token=self._latest_token))

    async def define(self, params: RequestParams) -> DefineOutcome:
        token = next(self._tokens)
        self._latest_token = token
        started = time.perf_counter()
        with log_mgr.log_context(request_token=token):
            outcome = await self._run(token, params)
            logger.info(
                "Define run finished",
                extra={
                    "event": "define.run.finished",
                    "status": outcome.state.value,
                    "from_cache": outcome.from_cache,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
        return outcome

    async def replay(self, item: HistoryItem) -> DefineOutcome:
        """Re-run the request a history item describes."""
        return await self.define(item.to_request_params())

    async def define_featured(self) -> DefineOutcome:
        return await self.define(FEATURED_WORD)

    async def _run(self, token: int, params: RequestParams) -> DefineOutcome:
        self._trace(RequestState.VALIDATING)
        try:
            word, length = validate_request(params, max_length=self._max_length)
        except RequestValidationError as exc:
            message = str(exc)
            self._trace(RequestState.INVALID, reason=message)
            if self._is_latest(token):
                self._set_display(replace(self._display, error=message, state=RequestState.IDLE, token=token))
            self._notify(Notice.error(message))
            return DefineOutcome(token=token, state=RequestState.INVALID, error=message)

        request = RequestParams(
            word=word,
            length=length,
            tone=optional_text(params.tone),
            context=optional_text(params.context),
            lang=optional_text(params.lang),
        )
        if self._is_latest(token):
            self._set_display(DisplayState(is_loading=True, state=RequestState.CACHE_LOOKUP, token=token))

        if self._wait_ready is not None:
            await self._wait_ready()

        self._trace(RequestState.CACHE_LOOKUP)
        cached = await self._cache.lookup(request)
        if cached is not None:
            await self._history.record(HistoryItem.from_definition(cached))
            displayed = self._settle(token, RequestState.COMPLETED, result=cached)
            self._notify(Notice.info(CACHE_HIT_MESSAGE))
            self._trace(RequestState.COMPLETED, from_cache=True)
            return DefineOutcome(
                token=token,
                state=RequestState.COMPLETED,
                result=cached,
                from_cache=True,
                displayed=displayed,
            )

        self._trace(RequestState.FETCHING)
        if self._is_latest(token):
            self._set_display(DisplayState(is_loading=True, state=RequestState.FETCHING, token=token))
        try:
            fetched = await self._fetcher.define(DefineRequest.from_params(request))
        except DefineServiceError as exc:
            message = exc.message or GENERIC_ERROR_MESSAGE
            self._settle(token, RequestState.FAILED, error=message)
            self._notify(Notice.error(message))
            self._trace(RequestState.FAILED, reason=message)
            return DefineOutcome(token=token, state=RequestState.FAILED, error=message)
        except Exception as exc:
            logger.error(
                "Definition fetch raised unexpectedly: %s",
                exc,
                exc_info=True,
                extra={"event": "define.request.unexpected_error"},
            )
            self._settle(token, RequestState.FAILED, error=GENERIC_ERROR_MESSAGE)
            self._notify(Notice.error(GENERIC_ERROR_MESSAGE))
            self._trace(RequestState.FAILED, reason=type(exc).__name__)
            return DefineOutcome(token=token, state=RequestState.FAILED, error=GENERIC_ERROR_MESSAGE)

        result = fetched.with_cache_metadata(requested_length=length, cache_hit=False)
        displayed = self._settle(token, RequestState.COMPLETED, result=result)
        await self._history.record(HistoryItem.from_definition(result))
        saved = await self._cache.store(request, result)
        if not saved:
            self._notify(Notice.error(CACHE_WRITE_FAILED_MESSAGE))
        self._trace(RequestState.COMPLETED, from_cache=False)
        return DefineOutcome(
            token=token,
            state=RequestState.COMPLETED,
            result=result,
            cache_saved=saved,
            displayed=displayed,
        )

    def _is_latest(self, token: int) -> bool:
        return token == self._latest_token

    def _settle(
        self,
        token: int,
        state: RequestState,
        *,
        result: Optional[DefinitionResult] = None,
        error: Optional[str] = None,
    ) -> bool:
        if not self._is_latest(token):
            logger.debug(
                "Superseded run settled; display left unchanged",
                extra={"event": "define.run.superseded", "status": state.value},
            )
            return False
        self._set_display(DisplayState(result=result, error=error, state=state, token=token))
        return True

    def _set_display(self, display: DisplayState) -> None:
        self._display = display
        for listener in list(self._listeners):
            listener(display)

    def _trace(self, state: RequestState, **fields: object) -> None:
        logger.debug(
            "Request state -> %s",
            state.value,
            extra={"event": "define.state", "status": state.value, **fields},
        )

    def _notify(self, notice: Notice) -> None:
        if self._notices is not None:
            self._notices.publish(notice)


__all__ = [
    "CACHE_HIT_MESSAGE",
    "CACHE_WRITE_FAILED_MESSAGE",
    "DefineOutcome",
    "DefinitionFetcher",
    "DisplayState",
    "EMPTY_WORD_MESSAGE",
    "FEATURED_WORD",
    "RequestOrchestrator",
    "RequestState",
    "RequestValidationError",
    "length_error_message",
    "validate_request",
]
