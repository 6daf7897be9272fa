"""
Event Handler
Maps gateway events to their handlers
"""

import sys
from typing import Any, Awaitable, Callable, Dict, Optional

from bot.lifecycle import LifecycleManager
from managers.interaction_router import InteractionRouter
from utils.logger import get_logger
from utils.monitoring import Monitoring

EventCallback = Callable[..., Awaitable[None]]

READY = "ready"
INTERACTION = "interaction"
MEMBER_JOIN = "member_join"
ERROR = "error"


class EventHandler:
    """Builds the event -> handler table the client dispatches through."""

    def __init__(
        self,
        lifecycle: LifecycleManager,
        router: InteractionRouter,
        monitoring: Optional[Monitoring] = None,
    ):
        self.logger = get_logger("Events")
        self.lifecycle = lifecycle
        self.router = router
        self.monitoring = monitoring

    def table(self) -> Dict[str, EventCallback]:
        """
        Event table, built once at startup.

        Returns:
            Mapping of event name to coroutine function
        """
        return {
            READY: self.on_ready,
            INTERACTION: self.on_interaction,
            MEMBER_JOIN: self.on_member_join,
            ERROR: self.on_error,
        }

    async def on_ready(self) -> None:
        if not await self.lifecycle.mark_ready():
            self.logger.info("Gateway session re-established")

    async def on_interaction(self, interaction: Any) -> None:
        await self.router.handle_interaction(interaction)

    async def on_member_join(self, member: Any) -> None:
        if self.monitoring:
            self.monitoring.record_member_join()
        self.logger.info(f"New member joined: {member} in {member.guild.name}")

    async def on_error(self, event_method: str, *args: Any, **kwargs: Any) -> None:
        """An event handler raised: treat it as a process-level fault."""
        error = sys.exc_info()[1]
        if error is None:
            self.logger.error(f"Client error in {event_method}")
            return
        self.lifecycle.handle_fault(error, f"Client error in {event_method}")
