"""DialogueEngine - orchestrates slot-filling turns.

Each turn runs a fixed pipeline:
1. REASON  - optional advisory analysis from the text-generation model
2. PLAN    - pick the focus field (first blank required field)
3. ACT     - extract values, merge them into blank slots, compose the reply
4. REFLECT - decide completion

Only REASON suspends. Turns on the same session are serialized by a
SessionMutex; the session is committed once, after REFLECT.
"""

import asyncio
import json
import time
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError
from structlog.contextvars import bound_contextvars

from formchat.config.models.dialogue import DialogueConfig
from formchat.conversation.models import Message, MessageRole, Session, new_session_id
from formchat.conversation.mutex import InProcessSessionMutex, SessionMutex
from formchat.conversation.store import SessionStore
from formchat.deadlines.service import DeadlineProvider
from formchat.dialogue.composer import ResponseComposer
from formchat.dialogue.extraction import FieldExtractor
from formchat.dialogue.result import PhaseTiming, StartResult, TurnPhase, TurnResult
from formchat.dialogue.template_loader import TemplateLoader
from formchat.errors import InvalidTurnError, SchemaNotFoundError, SessionBusyError
from formchat.forms.fields import is_blank, merge_into_blanks, missing_fields
from formchat.forms.identifiers import FormIdentifier, parse_form_identifier
from formchat.forms.models import FormSchema
from formchat.forms.resolver import FormSchemaResolver
from formchat.observability.logging import get_logger
from formchat.observability.metrics import (
    ERRORS,
    FIELDS_EXTRACTED,
    PHASE_LATENCY,
    REASONING_FALLBACKS,
    TURN_COUNT,
    TURN_LATENCY,
)
from formchat.providers.llm import (
    ExecutionContext,
    LLMExecutor,
    LLMMessage,
    ProviderError,
    clear_execution_context,
    set_execution_context,
)
from formchat.student_data.autofill import AutoFillProvider

logger = get_logger(__name__)

ANALYSIS_PLACEHOLDER = "Unable to analyze message"
REASON_TEMPLATE = "reason.jinja2"


@contextmanager
def _timed(phase: TurnPhase, timings: list[PhaseTiming]) -> Iterator[None]:
    """Record the duration of a phase."""
    started_at = datetime.now(UTC)
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        timings.append(
            PhaseTiming(phase=phase, started_at=started_at, duration_ms=elapsed * 1000)
        )
        PHASE_LATENCY.labels(phase=phase.value).observe(elapsed)


def _count_fields(values: Mapping[str, Any], source: str) -> None:
    for name in values:
        FIELDS_EXTRACTED.labels(field=name, source=source).inc()


class DialogueEngine:
    """Conversational slot-filling engine.

    The only component that reads and commits sessions, and the only one
    that calls the text-generation model.
    """

    def __init__(
        self,
        resolver: FormSchemaResolver,
        session_store: SessionStore,
        executor: LLMExecutor | None = None,
        config: DialogueConfig | None = None,
        session_mutex: SessionMutex | None = None,
        auto_fill: AutoFillProvider | None = None,
        deadlines: DeadlineProvider | None = None,
        extractor: FieldExtractor | None = None,
        composer: ResponseComposer | None = None,
        template_loader: TemplateLoader | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            resolver: Resolves form identifiers to schemas
            session_store: Session persistence
            executor: Text-generation executor for the reason phase
            config: Dialogue configuration
            session_mutex: Per-session lock (in-process by default)
            auto_fill: Source of known student values
            deadlines: Source of form deadlines
            extractor: Field extractor
            composer: Response composer
            template_loader: Prompt template loader
        """
        self._config = config or DialogueConfig()
        self._resolver = resolver
        self._sessions = session_store
        self._executor = executor
        self._mutex = session_mutex or InProcessSessionMutex()
        self._auto_fill = auto_fill
        self._deadlines = deadlines
        self._extractor = extractor or FieldExtractor(self._config.free_text_field)
        self._composer = composer or ResponseComposer()
        self._templates = template_loader or TemplateLoader()

    @property
    def resolver(self) -> FormSchemaResolver:
        """Schema resolver used by this engine."""
        return self._resolver

    def default_form(self) -> FormIdentifier:
        """Form used when none is given."""
        return parse_form_identifier(self._config.default_form)

    # ========================================================================
    # Sessions
    # ========================================================================

    async def start_session(
        self,
        form_identifier: FormIdentifier | None = None,
        session_id: str | None = None,
    ) -> StartResult:
        """Create a session and compose its welcome message.

        Starting with an existing session id replaces that session. A form
        that cannot be resolved gets an apology and no session is saved.
        """
        identifier = form_identifier or self.default_form()
        session_id = session_id or new_session_id()
        try:
            schema = await self._resolver.resolve(identifier)
        except SchemaNotFoundError:
            logger.info("start_schema_not_found", session_id=session_id, form=identifier.value)
            TURN_COUNT.labels(form=identifier.value, outcome="schema_not_found").inc()
            return StartResult(
                session_id=session_id,
                welcome_text=self._composer.compose_schema_not_found(identifier.value),
                form_identifier=identifier,
                form_found=False,
            )

        deadline_status = None
        if self._deadlines is not None:
            deadline_status = self._deadlines.status_message(
                identifier, self._config.deadline_warning_days
            )

        welcome = self._composer.compose_welcome(
            schema,
            deadline_status=deadline_status,
            first_field=schema.required_fields[0] if schema.required_fields else None,
        )

        async with self._mutex.acquire(session_id) as acquired:
            if not acquired:
                raise SessionBusyError(session_id)
            session = Session(
                session_id=session_id,
                form_identifier=identifier,
                history=[Message(role=MessageRole.AGENT, content=welcome)],
            )
            await self._sessions.save(session)

        logger.info("session_started", session_id=session_id, form=identifier.value)
        return StartResult(
            session_id=session_id,
            welcome_text=welcome,
            form_identifier=identifier,
        )

    async def get_session(self, session_id: str) -> Session | None:
        """Get a session and its transcript."""
        return await self._sessions.get(session_id)

    # ========================================================================
    # Turns
    # ========================================================================

    async def process_turn(
        self,
        session_id: str,
        utterance: str,
        client_fields: Mapping[str, Any] | None = None,
        form_identifier: FormIdentifier | None = None,
        use_auto_fill: bool = False,
    ) -> TurnResult:
        """Process one user message.

        Args:
            session_id: Session to continue; created on first use
            utterance: The user's message
            client_fields: Field values already held by the client
            form_identifier: Form to fill; overrides the session's form
            use_auto_fill: Consent to fill blanks from stored student data

        Returns:
            TurnResult with the reply and all collected fields

        Raises:
            InvalidTurnError: Blank session id or utterance, or client
                fields that fail validation
            SessionBusyError: Another turn holds the session too long
        """
        errors = []
        if not session_id or not session_id.strip():
            errors.append({"field": "session_id", "message": "session_id is required"})
        if not utterance or not utterance.strip():
            errors.append({"field": "message", "message": "message is required"})
        if errors:
            ERRORS.labels(error_type="invalid_turn").inc()
            raise InvalidTurnError("session_id and message are required", details=errors)

        async with self._mutex.acquire(session_id) as acquired:
            if not acquired:
                ERRORS.labels(error_type="session_busy").inc()
                raise SessionBusyError(session_id)
            return await self._process_locked(
                session_id, utterance, client_fields, form_identifier, use_auto_fill
            )

    async def _process_locked(
        self,
        session_id: str,
        utterance: str,
        client_fields: Mapping[str, Any] | None,
        form_identifier: FormIdentifier | None,
        use_auto_fill: bool,
    ) -> TurnResult:
        start = time.perf_counter()
        stored = await self._sessions.get(session_id)
        identifier = form_identifier or (
            stored.form_identifier if stored is not None else self.default_form()
        )

        with bound_contextvars(session_id=session_id, form=identifier.value):
            try:
                schema = await self._resolver.resolve(identifier)
            except SchemaNotFoundError:
                logger.info("turn_schema_not_found")
                TURN_COUNT.labels(form=identifier.value, outcome="schema_not_found").inc()
                return TurnResult(
                    session_id=session_id,
                    message=self._composer.compose_schema_not_found(identifier.value),
                    fields=dict(stored.fields) if stored is not None else {},
                    is_complete=False,
                    form_identifier=identifier,
                )

            coerced = self._coerce_client_fields(schema, client_fields)

            if stored is None:
                session = Session(session_id=session_id, form_identifier=identifier)
                logger.info("session_created_lazily")
            else:
                session = stored.model_copy(deep=True)
                if session.form_identifier != identifier:
                    logger.info(
                        "session_form_changed",
                        previous_form=session.form_identifier.value,
                    )
                    session.form_identifier = identifier

            working = await self._prefill(
                schema, identifier, session.fields, coerced, use_auto_fill
            )

            set_execution_context(
                ExecutionContext(
                    session_id=session_id,
                    form=identifier.value,
                    phase=TurnPhase.REASON.value,
                )
            )
            try:
                result = await self._run_pipeline(session_id, identifier, schema, working, utterance)
            finally:
                clear_execution_context()

            await self._commit(session, result, utterance)

            if self._deadlines is not None:
                result.deadline = self._deadlines.deadline(identifier)
                result.deadline_warning = self._deadlines.warning(
                    identifier, self._config.deadline_warning_days
                )

            elapsed = time.perf_counter() - start
            outcome = "complete" if result.is_complete else "in_progress"
            TURN_COUNT.labels(form=identifier.value, outcome=outcome).inc()
            TURN_LATENCY.labels(form=identifier.value).observe(elapsed)
            logger.info(
                "turn_processed",
                turn_count=session.turn_count,
                is_complete=result.is_complete,
                missing_count=len(result.missing_fields),
                latency_ms=round(elapsed * 1000, 2),
            )
            return result

    def _coerce_client_fields(
        self, schema: FormSchema, client_fields: Mapping[str, Any] | None
    ) -> dict[str, Any]:
        if not client_fields:
            return {}
        try:
            return schema.coerce_fields(dict(client_fields))
        except ValidationError as e:
            ERRORS.labels(error_type="invalid_fields").inc()
            details = [
                {
                    "field": ".".join(str(loc) for loc in error["loc"]),
                    "message": error["msg"],
                }
                for error in e.errors()
            ]
            raise InvalidTurnError("Invalid field values", details=details) from e

    async def _prefill(
        self,
        schema: FormSchema,
        identifier: FormIdentifier,
        stored_fields: Mapping[str, Any],
        client_fields: Mapping[str, Any],
        use_auto_fill: bool,
    ) -> dict[str, Any]:
        """Apply client values and auto-fill to blank slots only."""
        allowed = schema.field_names
        working, applied = merge_into_blanks(stored_fields, client_fields, allowed)
        _count_fields(applied, "client")

        if use_auto_fill and self._auto_fill is not None:
            subject_id = working.get("studentId")
            if not is_blank(subject_id):
                filled = await self._auto_fill.auto_fill(
                    identifier, str(subject_id), use_auto_fill, working
                )
                working, applied = merge_into_blanks(working, filled, allowed)
                _count_fields(applied, "auto_fill")
                if applied:
                    logger.info("auto_fill_applied", fields=sorted(applied))
        return working

    async def _run_pipeline(
        self,
        session_id: str,
        identifier: FormIdentifier,
        schema: FormSchema,
        working: dict[str, Any],
        utterance: str,
    ) -> TurnResult:
        timings: list[PhaseTiming] = []

        with _timed(TurnPhase.REASON, timings):
            analysis = await self._reason(schema, working, utterance)
        logger.debug("reason_analysis", analysis=analysis)

        with _timed(TurnPhase.PLAN, timings):
            pending = missing_fields(schema.required_fields, working)
            focus_field = pending[0] if pending else None

        with _timed(TurnPhase.ACT, timings):
            extraction = self._extractor.analyze(utterance, working, focus_field, schema)
            working, applied = merge_into_blanks(working, extraction.values, schema.field_names)
            _count_fields(applied, extraction.source)

            missing = missing_fields(schema.required_fields, working)
            if not missing:
                message = self._composer.compose_completion(working, schema)
            else:
                message = self._composer.compose(utterance, applied, missing[0], schema)

        with _timed(TurnPhase.REFLECT, timings):
            result = TurnResult(
                session_id=session_id,
                message=message,
                fields=working,
                is_complete=not missing,
                form_identifier=identifier,
                missing_fields=missing,
                analysis=analysis,
                phase_timings=timings,
            )

        logger.debug(
            "turn_fields_extracted",
            focus_field=focus_field,
            extracted=sorted(applied),
            source=extraction.source,
        )
        return result

    async def _reason(
        self, schema: FormSchema, fields: Mapping[str, Any], utterance: str
    ) -> str:
        """Advisory analysis of the message; never fails the turn."""
        reasoning = self._config.reasoning
        if not reasoning.enabled or self._executor is None:
            return ANALYSIS_PLACEHOLDER

        prompt = self._templates.render(
            REASON_TEMPLATE,
            form_name=schema.name,
            required_fields=schema.required_fields,
            form_data_json=json.dumps(dict(fields), indent=2, default=str),
            utterance=utterance,
        )

        try:
            response = await asyncio.wait_for(
                self._executor.generate(
                    [LLMMessage(role="user", content=prompt)],
                    max_tokens=reasoning.max_tokens,
                    temperature=reasoning.temperature,
                ),
                timeout=reasoning.timeout_seconds,
            )
        except TimeoutError:
            logger.warning("reasoning_timeout", timeout_seconds=reasoning.timeout_seconds)
            REASONING_FALLBACKS.labels(reason="timeout").inc()
            return ANALYSIS_PLACEHOLDER
        except ProviderError as e:
            logger.warning("reasoning_failed", error=str(e))
            REASONING_FALLBACKS.labels(reason="provider_error").inc()
            return ANALYSIS_PLACEHOLDER

        return response.content

    async def _commit(self, session: Session, result: TurnResult, utterance: str) -> None:
        """Persist the turn: field union, transcript, counters."""
        session.fields = {**session.fields, **result.fields}
        session.history = [
            *session.history,
            Message(role=MessageRole.USER, content=utterance),
            Message(role=MessageRole.AGENT, content=result.message),
        ]
        session.turn_count += 1
        session.is_complete = result.is_complete
        await self._sessions.save(session)
        result.fields = dict(session.fields)
