"""Public entry point that ties state, rules and presentation together."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from reviewproctor.config import ProctorConfig
from reviewproctor.counters import EventCounters
from reviewproctor.outcomes import Clock, OutcomeRecorder, utc_now
from reviewproctor.presentation import PresentationDispatcher, UserResponse, normalize_app_id
from reviewproctor.rules import Decision, DecisionEngine, EvaluationContext
from reviewproctor.services.scheduler import ImmediateExecutor, MainContextExecutor
from reviewproctor.state import InMemoryStateStore, JsonFileStateStore, NamespacedState, StateStore
from reviewproctor.state.namespace import (
    AFFILIATE_CAMPAIGN_CODE,
    AFFILIATE_CODE,
    APP_ID,
    APP_TITLE,
    REVIEW_TEXT,
)
from reviewproctor.thresholds import ThresholdName, ThresholdSettings

logger = logging.getLogger(__name__)

DecisionCallback = Callable[[Decision], None]


@dataclass(slots=True)
class _Bound:
    """Collaborators bound to the current namespace."""

    state: NamespacedState
    thresholds: ThresholdSettings
    counters: EventCounters
    outcomes: OutcomeRecorder


class ReviewProctor:
    """Decide when to ask for an app review and record what happened.

    Every collaborator is handed in explicitly: the configuration, the state
    store, the presentation dispatcher, the executor standing in for the UI
    thread and the clock.  Nothing is kept in module globals, so several
    proctors can share one store under different namespaces.
    """

    def __init__(
        self,
        config: ProctorConfig,
        store: StateStore,
        dispatcher: PresentationDispatcher,
        executor: Optional[MainContextExecutor] = None,
        clock: Optional[Clock] = None,
        engine: Optional[DecisionEngine] = None,
    ) -> None:
        self._config = config
        self._store = store
        self._dispatcher = dispatcher
        self._executor = executor or ImmediateExecutor()
        self._clock = clock or utc_now
        self._engine = engine or DecisionEngine()
        self._bound = self._bind(config.namespace)

    @classmethod
    def from_config(
        cls,
        config: ProctorConfig,
        dispatcher: PresentationDispatcher,
        executor: Optional[MainContextExecutor] = None,
        clock: Optional[Clock] = None,
    ) -> "ReviewProctor":
        """Build the configured state backend and configure the namespace."""

        store: StateStore
        if config.state.path is not None:
            store = JsonFileStateStore(config.state.path)
        else:
            store = InMemoryStateStore()
        proctor = cls(config, store, dispatcher, executor=executor, clock=clock)
        proctor.configure(config.namespace, config.app_id)
        return proctor

    # ------------------------------------------------------------------
    # Configuration
    @property
    def namespace(self) -> str:
        return self._bound.state.namespace

    def configure(self, app_namespace: str, app_id: Optional[str] = None) -> None:
        """Bind to ``app_namespace``; the first app id also marks the install date."""

        if app_namespace != self.namespace:
            self._bound = self._bind(app_namespace)
        self.set_app_id(app_id)

    def set_app_id(self, app_id: Optional[str]) -> None:
        if app_id is None:
            return
        self._bound.state.set_string(APP_ID, app_id)
        if self._bound.outcomes.record_install():
            logger.info(f"{self.namespace}: install date recorded")

    def set_threshold(self, name: ThresholdName, value: Optional[int]) -> None:
        self._bound.thresholds.set(name, value)

    def get_threshold(self, name: ThresholdName) -> int:
        return self._bound.thresholds.get(name)

    def set_review_text(self, text: Optional[str]) -> None:
        self._set_string(REVIEW_TEXT, text)

    def set_app_title(self, title: Optional[str]) -> None:
        self._set_string(APP_TITLE, title)

    def set_affiliate_code(self, code: Optional[str]) -> None:
        self._set_string(AFFILIATE_CODE, code)

    def set_affiliate_campaign_code(self, code: Optional[str]) -> None:
        self._set_string(AFFILIATE_CAMPAIGN_CODE, code)

    @property
    def app_id(self) -> Optional[str]:
        return self._bound.state.get_string(APP_ID)

    @property
    def review_text(self) -> str:
        return self._string_or(REVIEW_TEXT, self._config.presentation.review_text)

    @property
    def app_title(self) -> Optional[str]:
        return self._bound.state.get_string(APP_TITLE) or self._config.presentation.app_title

    @property
    def affiliate_code(self) -> str:
        return self._string_or(AFFILIATE_CODE, self._config.presentation.affiliate_code)

    @property
    def affiliate_campaign_code(self) -> str:
        return self._string_or(AFFILIATE_CAMPAIGN_CODE, self._config.presentation.affiliate_campaign_code)

    # ------------------------------------------------------------------
    # Usage signals
    def record_use(self, count: int = 1) -> int:
        return self._bound.counters.record_use(count)

    def record_significant_event(self, count: int = 1) -> int:
        return self._bound.counters.record_significant_event(count)

    # ------------------------------------------------------------------
    # Reviews
    def check_review(self) -> Decision:
        """Evaluate the policies without presenting anything or touching state."""

        context = EvaluationContext(
            state=self._bound.state,
            thresholds=self._bound.thresholds,
            now=self._clock(),
            native_review_supported=self._dispatcher.supports_native_review(),
        )
        return self._engine.evaluate(context)

    def evaluate_review(self) -> Decision:
        """Evaluate the policies and present a review when they all pass.

        The review date is recorded before presenting, so a prompt the user
        never answers still starts the days-since-last-review cooldown.
        """

        decision = self.check_review()
        reason = decision.reason
        if reason is not None:
            logger.info(
                f"{self.namespace}: review request denied by {reason.value} "
                f"(check {reason.ordinal})"
            )
            return decision
        self._bound.outcomes.record_review_shown()
        self._present()
        logger.info(f"{self.namespace}: review request granted")
        return decision

    def request_proctored_review(self, callback: DecisionCallback) -> None:
        """Evaluate on the main context and hand the decision to ``callback``."""

        self._executor.submit(lambda: callback(self.evaluate_review()))

    async def proctored_review(self) -> Decision:
        """Awaitable variant of :meth:`request_proctored_review`.

        Failures raised while evaluating or presenting are re-raised here.
        """

        loop = asyncio.get_running_loop()
        future: "asyncio.Future[Decision]" = loop.create_future()

        def _resolve(decision: Decision) -> None:
            if not future.done():
                future.set_result(decision)

        def _fail(error: Exception) -> None:
            if not future.done():
                future.set_exception(error)

        def _task() -> None:
            try:
                decision = self.evaluate_review()
            except Exception as exc:
                loop.call_soon_threadsafe(_fail, exc)
                return
            loop.call_soon_threadsafe(_resolve, decision)

        self._executor.submit(_task)
        return await future

    def request_direct_review(self) -> None:
        """Open the store review page without any checks.

        Does nothing when no usable app id is configured.
        """

        app_id = normalize_app_id(self.app_id)
        if app_id is None:
            logger.debug(f"{self.namespace}: direct review skipped, no usable app id")
            return
        self._bound.outcomes.record_review_shown()
        self._open_store_page(app_id)
        logger.info(f"{self.namespace}: direct review requested")

    def respond(self, response: UserResponse) -> None:
        """Record a user's answer to a review prompt."""

        self._bound.outcomes.handle(UserResponse(response))

    # ------------------------------------------------------------------
    def snapshot(self) -> Dict[str, object]:
        state = self._bound.state
        return {
            "namespace": state.namespace,
            "app_id": self.app_id,
            "dates": {
                name: value.isoformat() if value is not None else None
                for name, value in state.dates().items()
            },
            "counters": state.counters(),
            "thresholds": self._bound.thresholds.as_dict(),
        }

    # ------------------------------------------------------------------
    # Internal helpers
    def _bind(self, namespace: str) -> _Bound:
        state = NamespacedState(self._store, namespace)
        return _Bound(
            state=state,
            thresholds=ThresholdSettings(state, self._config.thresholds),
            counters=EventCounters(state),
            outcomes=OutcomeRecorder(state, self._clock),
        )

    def _present(self) -> None:
        if self._dispatcher.show_native_review_surface_if_available():
            return
        outcomes = self._bound.outcomes

        def _on_accept() -> None:
            outcomes.accept()
            app_id = normalize_app_id(self.app_id)
            if app_id is not None:
                self._open_store_page(app_id)

        self._dispatcher.show_fallback_dialog(
            self.review_text,
            on_accept=_on_accept,
            on_decline=outcomes.decline,
            on_defer=outcomes.defer,
        )

    def _open_store_page(self, app_id: str) -> None:
        self._dispatcher.open_store_review_page(
            app_id, self.affiliate_code, self.affiliate_campaign_code
        )

    def _set_string(self, field: str, value: Optional[str]) -> None:
        if value is None:
            return
        self._bound.state.set_string(field, value)

    def _string_or(self, field: str, default: str) -> str:
        value = self._bound.state.get_string(field)
        return default if value is None else value
