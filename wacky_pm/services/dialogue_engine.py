"""
Brainstorming dialogue engine.

Decides, for one user message, what to say next and how the user's session
moves between idle, brainstorming and awaiting a PRD confirmation.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional, Protocol

from pydantic import ValidationError

from wacky_pm.clients.github_client import CreatedIssue
from wacky_pm.copilot.llm_client import IdeaGenerator
from wacky_pm.copilot.payload import ConfirmationResponse
from wacky_pm.copilot.streaming import StreamEvent, confirmation_event, text_event
from wacky_pm.core.config import settings
from wacky_pm.core.constants import (
    CONFIRMATION_MESSAGE,
    CONFIRMATION_TITLE,
    DECLINE_TEXT,
    DOCUMENT_INTRO_TEXT,
    GREETING_TEXT,
    ISSUE_CREATED_TEXT,
    NEXT_ACTION_TEXT,
    NEXT_TEXT,
    REFINE_TEXT,
    START_TEXT,
    DialogueState,
    Intent,
)
from wacky_pm.core.exceptions import (
    GeneratorError,
    GeneratorTimeoutError,
    ParseFailureError,
    WackyPMError,
)
from wacky_pm.core.logging import get_logger
from wacky_pm.domain.session import (
    AwaitingConfirmSession,
    BrainstormingSession,
    ConfirmationSnapshot,
    Session,
    state_of,
)
from wacky_pm.orchestration.state_machine import StateMachine, create_dialogue_state_machine
from wacky_pm.prompts.brainstorm import next_prompt, refine_prompt, start_prompt
from wacky_pm.services.command_parser import ParsedCommand, parse_issue_target
from wacky_pm.services.document_renderer import (
    issue_title,
    render_snapshot,
    today,
    wrap_markdown,
)
from wacky_pm.services.session_manager import SessionManager

logger = get_logger(__name__)


class IssueTracker(Protocol):
    async def create_issue(
        self,
        token: str,
        owner: str,
        repo: str,
        title: str,
        body: str,
        labels: Optional[list[str]] = None,
    ) -> CreatedIssue:
        ...


@dataclass
class TurnResult:
    """Outcome of one turn: the state it ended in and what to tell the user."""

    state: DialogueState
    events: list[StreamEvent] = field(default_factory=list)
    session: Optional[Session] = None


class DialogueEngine:
    """
    State machine driving per-user brainstorming dialogues.

    A session is only written after every external call of the turn
    succeeded, so a failed turn leaves the user exactly where they were and
    the same message can simply be sent again.
    """

    def __init__(
        self,
        session_manager: SessionManager,
        idea_generator: IdeaGenerator,
        issue_tracker: Optional[IssueTracker] = None,
        state_machine: Optional[StateMachine] = None,
        generator_timeout: Optional[float] = None,
        issue_labels: Optional[list[str]] = None,
        clock: Callable[[], date] = today,
    ) -> None:
        self.session_manager = session_manager
        self.idea_generator = idea_generator
        self.issue_tracker = issue_tracker
        self.state_machine = state_machine or create_dialogue_state_machine()
        self.generator_timeout = generator_timeout or settings.brainstorm.generator_timeout
        self.issue_labels = (
            issue_labels if issue_labels is not None else list(settings.brainstorm.issue_labels)
        )
        self.clock = clock

    async def run_turn(
        self,
        owner_id: str,
        command: ParsedCommand,
        token: str,
        confirmation: Optional[ConfirmationResponse] = None,
    ) -> TurnResult:
        """
        Process one user message.

        Args:
            owner_id: GitHub login of the user
            command: The classified message
            token: The user's GitHub token, passed on to external calls
            confirmation: Confirmation answer carried by the request, if any

        Raises:
            WackyPMError: On generator, issue tracker or parse failures. The
                stored session is untouched in that case.
        """
        async with self.session_manager.exclusive(owner_id):
            session = await self.session_manager.get_session(owner_id)
            logger.info(
                "Dialogue turn",
                owner_id=owner_id,
                state=state_of(session).value,
                intent=command.intent.value,
                has_confirmation=confirmation is not None,
            )

            if isinstance(session, AwaitingConfirmSession):
                return await self._answer_confirmation(session, confirmation)
            if isinstance(session, BrainstormingSession):
                return await self._brainstorm(session, command, token)
            return await self._idle(owner_id, command, token)

    # ------------------------------------------------------------------
    # IDLE
    # ------------------------------------------------------------------

    async def _idle(self, owner_id: str, command: ParsedCommand, token: str) -> TurnResult:
        if command.intent != Intent.START:
            self._move(DialogueState.IDLE, DialogueState.IDLE)
            return TurnResult(
                state=DialogueState.IDLE,
                events=[text_event(GREETING_TEXT.format(owner_id=owner_id))],
            )

        idea = await self._generate(start_prompt(), token)
        self._move(DialogueState.IDLE, DialogueState.BRAINSTORMING)
        session = await self.session_manager.save_session(
            BrainstormingSession(owner_id=owner_id, current_idea=idea, turn_count=1)
        )
        logger.info("Brainstorming started", owner_id=owner_id)
        return TurnResult(
            state=DialogueState.BRAINSTORMING,
            events=[
                text_event(START_TEXT.format(owner_id=owner_id)),
                text_event(idea + "\n"),
                text_event(NEXT_ACTION_TEXT),
            ],
            session=session,
        )

    # ------------------------------------------------------------------
    # BRAINSTORMING
    # ------------------------------------------------------------------

    async def _brainstorm(
        self,
        session: BrainstormingSession,
        command: ParsedCommand,
        token: str,
    ) -> TurnResult:
        if command.intent == Intent.FINALIZE:
            return await self._request_confirmation(session)
        if command.intent == Intent.ISSUE:
            return await self._create_issue(session, command, token)
        if command.intent == Intent.NEXT:
            prompt = next_prompt(session.current_idea, session.pending_suggestion)
            return await self._next_idea(session, prompt, None, NEXT_TEXT, token)

        # START while already brainstorming has nothing to restart; anything
        # else is a suggestion for the current idea.
        suggestion = command.text
        if command.intent == Intent.START or not suggestion:
            self._move(DialogueState.BRAINSTORMING, DialogueState.BRAINSTORMING)
            return TurnResult(
                state=DialogueState.BRAINSTORMING,
                events=[text_event(NEXT_ACTION_TEXT)],
                session=session,
            )
        prompt = refine_prompt(session.current_idea, suggestion)
        return await self._next_idea(session, prompt, suggestion, REFINE_TEXT, token)

    async def _next_idea(
        self,
        session: BrainstormingSession,
        prompt: str,
        suggestion: Optional[str],
        intro: str,
        token: str,
    ) -> TurnResult:
        idea = await self._generate(prompt, token)
        self._move(DialogueState.BRAINSTORMING, DialogueState.BRAINSTORMING)
        updated = await self.session_manager.save_session(session.with_idea(idea, suggestion))
        logger.info(
            "Idea updated",
            owner_id=updated.owner_id,
            turn_count=updated.turn_count,
            refined=suggestion is not None,
        )
        return TurnResult(
            state=DialogueState.BRAINSTORMING,
            events=[text_event(intro), text_event(idea + "\n"), text_event(NEXT_ACTION_TEXT)],
            session=updated,
        )

    async def _request_confirmation(self, session: BrainstormingSession) -> TurnResult:
        self._move(DialogueState.BRAINSTORMING, DialogueState.AWAITING_CONFIRM)
        confirmation_id = f"prd-confirmation-{session.owner_id}-{time.time_ns() // 1_000_000}"
        awaiting = await self.session_manager.save_session(
            session.await_confirmation(confirmation_id)
        )
        logger.info("PRD confirmation requested", owner_id=session.owner_id, confirmation_id=confirmation_id)
        return TurnResult(
            state=DialogueState.AWAITING_CONFIRM,
            events=[
                confirmation_event(
                    confirmation_id,
                    title=CONFIRMATION_TITLE,
                    message=CONFIRMATION_MESSAGE,
                    snapshot=session.snapshot().to_metadata(),
                )
            ],
            session=awaiting,
        )

    async def _create_issue(
        self,
        session: BrainstormingSession,
        command: ParsedCommand,
        token: str,
    ) -> TurnResult:
        owner, repo = parse_issue_target(command.text)
        if self.issue_tracker is None:
            raise WackyPMError("Issue creation is not available.", code="ISSUE_TRACKER_UNAVAILABLE")

        issue = await self.issue_tracker.create_issue(
            token,
            owner,
            repo,
            title=issue_title(session.current_idea),
            body=render_snapshot(session.snapshot(), self.clock()),
            labels=self.issue_labels,
        )
        self._move(DialogueState.BRAINSTORMING, DialogueState.BRAINSTORMING)
        return TurnResult(
            state=DialogueState.BRAINSTORMING,
            events=[
                text_event(
                    ISSUE_CREATED_TEXT.format(
                        number=issue.number, repository=issue.repository, url=issue.html_url
                    )
                ),
                text_event(NEXT_ACTION_TEXT),
            ],
            session=session,
        )

    # ------------------------------------------------------------------
    # AWAITING_CONFIRM
    # ------------------------------------------------------------------

    async def _answer_confirmation(
        self,
        session: AwaitingConfirmSession,
        confirmation: Optional[ConfirmationResponse],
    ) -> TurnResult:
        answered = confirmation is not None and confirmation.id == session.confirmation_id

        if answered and confirmation.accepted:
            snapshot = self._confirmed_snapshot(session, confirmation)
            document = render_snapshot(snapshot, self.clock())
            events = [text_event(DOCUMENT_INTRO_TEXT), text_event(wrap_markdown(document))]
            logger.info("PRD accepted", owner_id=session.owner_id, turn_count=session.turn_count)
        else:
            if not answered:
                logger.info(
                    "Unanswered PRD confirmation treated as declined",
                    owner_id=session.owner_id,
                    confirmation_id=session.confirmation_id,
                )
            events = [text_event(DECLINE_TEXT)]

        self._move(DialogueState.AWAITING_CONFIRM, DialogueState.IDLE)
        await self.session_manager.close_session(session.owner_id)
        return TurnResult(state=DialogueState.IDLE, events=events)

    def _confirmed_snapshot(
        self,
        session: AwaitingConfirmSession,
        confirmation: ConfirmationResponse,
    ) -> ConfirmationSnapshot:
        """Snapshot echoed back by the confirmation, or the session's own."""
        if not confirmation.metadata:
            return session.snapshot()
        try:
            snapshot = ConfirmationSnapshot.from_metadata(confirmation.metadata)
        except ValidationError as e:
            raise ParseFailureError(
                "The confirmation did not carry the idea to document.",
                expected="confirmation metadata with 'user', 'featureIdea' and 'suggestion'",
            ) from e
        if snapshot.owner_id != session.owner_id:
            raise ParseFailureError("The confirmation belongs to a different user.")
        return snapshot

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _move(self, from_state: DialogueState, to_state: DialogueState) -> None:
        self.state_machine.ensure_transition(from_state.value, to_state.value)

    async def _generate(self, prompt: str, token: str) -> str:
        """Call the idea generator with a bounded wait."""
        try:
            result = await asyncio.wait_for(
                self.idea_generator.generate(prompt, token),
                timeout=self.generator_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Idea generation timed out", timeout=self.generator_timeout)
            raise GeneratorTimeoutError(self.generator_timeout) from None
        except WackyPMError:
            raise
        except Exception as e:
            logger.exception("Idea generation failed", error=str(e))
            raise GeneratorError(str(e) or type(e).__name__) from e

        content = (result.content or "").strip()
        if not content:
            raise GeneratorError("Completion contained no text")
        return content
