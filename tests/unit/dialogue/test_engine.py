"""Unit tests for DialogueEngine."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from formchat.config.models.dialogue import DialogueConfig, ReasoningConfig
from formchat.conversation.models import MessageRole
from formchat.conversation.mutex import SessionMutex
from formchat.dialogue.engine import ANALYSIS_PLACEHOLDER, DialogueEngine
from formchat.dialogue.result import TurnPhase
from formchat.errors import InvalidTurnError, SessionBusyError
from formchat.forms.identifiers import HardcodedForm, TemplateForm
from formchat.forms.models import FormType
from formchat.providers.llm import (
    ExecutionContext,
    LLMExecutor,
    LLMResponse,
    ProviderError,
    get_execution_context,
)
from tests.factories import StudentRecordFactory

CHANGE_OF_MAJOR = HardcodedForm(form_type=FormType.CHANGE_OF_MAJOR)
GRADUATION = HardcodedForm(form_type=FormType.GRADUATION_APPLICATION)


class BusySessionMutex(SessionMutex):
    """Mutex that never grants the lock."""

    @asynccontextmanager
    async def acquire(
        self, session_id: str, blocking_timeout: float | None = None
    ) -> AsyncIterator[bool]:
        yield False

    async def is_locked(self, session_id: str) -> bool:
        return True


def reasoning_engine(engine_kwargs: dict, executor, timeout: float = 5.0) -> DialogueEngine:
    config = DialogueConfig(reasoning=ReasoningConfig(enabled=True, timeout_seconds=timeout))
    return DialogueEngine(executor=executor, config=config, **engine_kwargs)


@pytest.fixture
def engine_kwargs(resolver, session_store) -> dict:
    return {"resolver": resolver, "session_store": session_store}


class TestStartSession:
    """Tests for DialogueEngine.start_session."""

    async def test_default_form(self, engine, session_store) -> None:
        """Sessions start on the configured default form."""
        result = await engine.start_session()

        assert result.form_identifier == CHANGE_OF_MAJOR
        assert "Change of Major" in result.welcome_text
        assert result.welcome_text.endswith("What is your full name?")

        session = await session_store.get(result.session_id)
        assert session is not None
        assert session.turn_count == 0
        assert [m.role for m in session.history] == [MessageRole.AGENT]

    async def test_client_session_id(self, engine) -> None:
        result = await engine.start_session(session_id="sess-1")
        assert result.session_id == "sess-1"

    async def test_template_form(self, engine) -> None:
        result = await engine.start_session(TemplateForm(template_id="tpl-major-request"))
        assert "Major Request" in result.welcome_text

    async def test_unknown_form_apologizes(self, engine, session_store) -> None:
        result = await engine.start_session(TemplateForm(template_id="tpl-missing"), session_id="s1")

        assert not result.form_found
        assert result.session_id == "s1"
        assert result.welcome_text.startswith("Sorry, I couldn't find the form 'tpl-missing'.")
        assert await session_store.get("s1") is None

    async def test_welcome_includes_deadline(self, engine, deadlines) -> None:
        deadlines.set_deadline(CHANGE_OF_MAJOR, datetime.now(UTC) + timedelta(days=3))

        result = await engine.start_session()

        assert "⏰ Deadline in 3 days" in result.welcome_text


class TestProcessTurnValidation:
    """Tests for boundary validation of turns."""

    async def test_blank_session_id(self, engine) -> None:
        with pytest.raises(InvalidTurnError) as exc_info:
            await engine.process_turn("  ", "hello")
        assert exc_info.value.details == [
            {"field": "session_id", "message": "session_id is required"}
        ]

    async def test_blank_message(self, engine, session_store) -> None:
        with pytest.raises(InvalidTurnError) as exc_info:
            await engine.process_turn("s1", "")
        assert exc_info.value.details[0]["field"] == "message"
        assert await session_store.get("s1") is None

    async def test_invalid_client_fields(self, engine, session_store) -> None:
        """Values that cannot be coerced reject the turn."""
        with pytest.raises(InvalidTurnError) as exc_info:
            await engine.process_turn(
                "s1", "hello", client_fields={"honorsProgram": "maybe"}, form_identifier=GRADUATION
            )
        assert exc_info.value.details[0]["field"] == "honorsProgram"
        assert await session_store.get("s1") is None

    async def test_session_busy(self, resolver, session_store) -> None:
        engine = DialogueEngine(
            resolver=resolver,
            session_store=session_store,
            config=DialogueConfig(reasoning=ReasoningConfig(enabled=False)),
            session_mutex=BusySessionMutex(),
        )
        with pytest.raises(SessionBusyError):
            await engine.process_turn("s1", "hello")


class TestProcessTurn:
    """Tests for the turn pipeline."""

    async def test_creates_session_lazily(self, engine, session_store) -> None:
        result = await engine.process_turn("s1", "John Smith")

        assert result.fields == {"studentName": "John Smith"}
        assert not result.is_complete
        assert result.message == "Nice to meet you, John Smith! What is your student ID number?"

        session = await session_store.get("s1")
        assert session is not None
        assert session.turn_count == 1
        assert [m.content for m in session.history] == ["John Smith", result.message]

    async def test_turns_accumulate(self, engine, session_store) -> None:
        await engine.start_session(session_id="s1")
        await engine.process_turn("s1", "John Smith")
        result = await engine.process_turn("s1", "Z12345")

        assert result.fields == {"studentName": "John Smith", "studentId": "12345"}
        session = await session_store.get("s1")
        assert session.turn_count == 2
        assert len(session.history) == 5

    async def test_punctuated_thanks_is_not_a_name(self, engine) -> None:
        await engine.start_session(session_id="s1")

        result = await engine.process_turn("s1", "Thanks!")

        assert result.fields == {}
        assert result.missing_fields[0] == "studentName"

    async def test_get_session(self, engine) -> None:
        assert await engine.get_session("s1") is None

        await engine.process_turn("s1", "John Smith")

        session = await engine.get_session("s1")
        assert session.fields == {"studentName": "John Smith"}
        assert [m.role for m in session.history] == [MessageRole.USER, MessageRole.AGENT]

    async def test_client_fields_fill_blanks_only(self, engine) -> None:
        await engine.process_turn("s1", "John Smith")

        result = await engine.process_turn(
            "s1", "Z12345", client_fields={"studentName": "Someone Else", "bogus": "x"}
        )

        assert result.fields["studentName"] == "John Smith"
        assert "bogus" not in result.fields

    async def test_client_fields_move_focus(self, engine) -> None:
        """A client-supplied value is not asked for again."""
        result = await engine.process_turn(
            "s1", "hello", client_fields={"studentName": "John Smith"}
        )
        assert result.message == "Hello! Nice to meet you. What is your student ID number?"

    async def test_phase_timings(self, engine) -> None:
        result = await engine.process_turn("s1", "John Smith")
        assert [t.phase for t in result.phase_timings] == [
            TurnPhase.REASON,
            TurnPhase.PLAN,
            TurnPhase.ACT,
            TurnPhase.REFLECT,
        ]

    async def test_unknown_form_returns_apology(self, engine, session_store) -> None:
        result = await engine.process_turn(
            "s1", "hello", form_identifier=TemplateForm(template_id="tpl-missing")
        )

        assert result.message.startswith("Sorry, I couldn't find the form 'tpl-missing'.")
        assert not result.is_complete
        assert await session_store.get("s1") is None

    async def test_form_override_switches_session_form(self, engine, session_store) -> None:
        await engine.start_session(session_id="s1")

        result = await engine.process_turn(
            "s1", "John Smith", form_identifier=HardcodedForm(form_type=FormType.ADD_DROP_COURSE)
        )

        assert result.form_identifier == HardcodedForm(form_type=FormType.ADD_DROP_COURSE)
        session = await session_store.get("s1")
        assert session.form_identifier == HardcodedForm(form_type=FormType.ADD_DROP_COURSE)

    async def test_deadline_attached(self, engine, deadlines) -> None:
        deadline = datetime.now(UTC) + timedelta(days=2)
        deadlines.set_deadline(CHANGE_OF_MAJOR, deadline)

        result = await engine.process_turn("s1", "John Smith")

        assert result.deadline == deadline
        assert result.deadline_warning


class TestAutoFill:
    """Tests for consented auto-fill."""

    async def test_fills_blanks_with_consent(self, engine, student_data_store) -> None:
        await student_data_store.save(StudentRecordFactory.create(student_id="12345"))

        result = await engine.process_turn(
            "s1", "hello", client_fields={"studentId": "12345"}, use_auto_fill=True
        )

        assert result.fields["studentName"] == "Jane Doe"
        assert result.fields["currentMajor"] == "Biology"
        assert result.fields["advisorName"] == "Dr. Smith"
        assert result.missing_fields == ["desiredMajor"]

    async def test_nothing_filled_without_consent(self, engine, student_data_store) -> None:
        await student_data_store.save(StudentRecordFactory.create(student_id="12345"))

        result = await engine.process_turn("s1", "hello", client_fields={"studentId": "12345"})

        assert result.fields == {"studentId": "12345"}

    async def test_needs_student_id(self, engine, student_data_store) -> None:
        await student_data_store.save(StudentRecordFactory.create(student_id="12345"))

        result = await engine.process_turn("s1", "hello", use_auto_fill=True)

        assert result.fields == {}


class TestReasonPhase:
    """Tests for the advisory reason phase."""

    async def test_disabled_uses_placeholder(self, engine) -> None:
        result = await engine.process_turn("s1", "John Smith")
        assert result.analysis == ANALYSIS_PLACEHOLDER

    async def test_analysis_from_executor(self, engine_kwargs) -> None:
        executor = AsyncMock(spec=LLMExecutor)
        executor.generate.return_value = LLMResponse(content="Student gave a name", model="m")
        engine = reasoning_engine(engine_kwargs, executor)

        result = await engine.process_turn("s1", "John Smith")

        assert result.analysis == "Student gave a name"
        prompt = executor.generate.call_args.args[0][0].content
        assert 'Student\'s message: "John Smith"' in prompt
        assert "Change of Major" in prompt

    async def test_executor_sees_reason_context(self, engine_kwargs) -> None:
        seen: list[ExecutionContext | None] = []

        async def generate(*args, **kwargs):
            seen.append(get_execution_context())
            return LLMResponse(content="ok", model="m")

        executor = AsyncMock(spec=LLMExecutor)
        executor.generate.side_effect = generate
        engine = reasoning_engine(engine_kwargs, executor)

        await engine.process_turn("s1", "John Smith")

        assert seen == [
            ExecutionContext(session_id="s1", form="change-of-major", phase="reason")
        ]
        assert get_execution_context() is None

    async def test_mock_model(self, engine_kwargs) -> None:
        engine = reasoning_engine(engine_kwargs, LLMExecutor(model="mock/test"))
        result = await engine.process_turn("s1", "John Smith")
        assert result.analysis == "Mock response for mock/test"

    async def test_provider_error_falls_back(self, engine_kwargs) -> None:
        executor = AsyncMock(spec=LLMExecutor)
        executor.generate.side_effect = ProviderError("boom")
        engine = reasoning_engine(engine_kwargs, executor)

        result = await engine.process_turn("s1", "John Smith")

        assert result.analysis == ANALYSIS_PLACEHOLDER
        assert result.fields == {"studentName": "John Smith"}

    async def test_timeout_falls_back(self, engine_kwargs) -> None:
        async def slow_generate(*args, **kwargs):
            await asyncio.sleep(1)

        executor = AsyncMock(spec=LLMExecutor)
        executor.generate.side_effect = slow_generate
        engine = reasoning_engine(engine_kwargs, executor, timeout=0.01)

        result = await engine.process_turn("s1", "John Smith")

        assert result.analysis == ANALYSIS_PLACEHOLDER
        assert result.fields == {"studentName": "John Smith"}

