"""Chat Session - Async conversation loop around the coach responder.

The coach "thinks" for a short, non-blocking delay before replying. Each
reply runs as an asyncio task the caller can cancel (e.g. when the user
navigates away); a cancelled reply never reaches the history.
"""

import asyncio
import logging
import os

from ..core.models import ConversationTurn, MetricsFrame, Role, UserContext
from ..core.responder import WELCOME_MESSAGE, build_response


logger = logging.getLogger(__name__)

DEFAULT_THINKING_DELAY = 0.8


def thinking_delay_from_env() -> float:
    """Read the thinking delay in seconds from WELLNESSFORGE_THINKING_DELAY."""
    return float(os.environ.get("WELLNESSFORGE_THINKING_DELAY", DEFAULT_THINKING_DELAY))


async def generate_response(
    text: str,
    frame: MetricsFrame,
    user: UserContext | None,
    hour_of_day: int,
    delay: float = DEFAULT_THINKING_DELAY,
) -> str:
    """Reply to a message after the thinking delay.

    Raises:
        asyncio.CancelledError: If the caller abandons the request
    """
    await asyncio.sleep(delay)
    return build_response(text, frame, user, hour_of_day)


class ChatSession:
    """Append-only conversation history with the coach.

    History starts with the assistant's welcome turn. Turns are only ever
    appended; classification never looks at earlier turns.
    """

    def __init__(self, delay: float | None = None) -> None:
        self.delay = thinking_delay_from_env() if delay is None else delay
        self._turns: list[ConversationTurn] = [
            ConversationTurn(role=Role.ASSISTANT, content=WELCOME_MESSAGE)
        ]
        self._pending: set[asyncio.Task] = set()

    @property
    def turns(self) -> tuple[ConversationTurn, ...]:
        return tuple(self._turns)

    @property
    def is_thinking(self) -> bool:
        return bool(self._pending)

    def send(
        self,
        text: str,
        frame: MetricsFrame,
        user: UserContext | None,
        hour_of_day: int,
    ) -> asyncio.Task | None:
        """Post a user message and start generating the reply.

        Must be called from a running event loop.

        Args:
            text: Raw input; surrounding whitespace is trimmed
            frame: Current metrics snapshot
            user: User profile, if any
            hour_of_day: Local hour, 0-23

        Returns:
            Cancellable task resolving to the reply, or None for blank input
        """
        text = text.strip()
        if not text:
            return None

        self._turns.append(ConversationTurn(role=Role.USER, content=text))
        task = asyncio.ensure_future(self._reply(text, frame, user, hour_of_day))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _reply(
        self,
        text: str,
        frame: MetricsFrame,
        user: UserContext | None,
        hour_of_day: int,
    ) -> str:
        try:
            reply = await generate_response(text, frame, user, hour_of_day, self.delay)
        except asyncio.CancelledError:
            logger.debug("Reply abandoned for message: %r", text[:40])
            raise

        self._turns.append(ConversationTurn(role=Role.ASSISTANT, content=reply))
        return reply

    def cancel_pending(self) -> int:
        """Cancel every reply still in flight.

        Returns:
            Number of replies cancelled
        """
        pending = [task for task in self._pending if not task.done()]
        for task in pending:
            task.cancel()
        return len(pending)
