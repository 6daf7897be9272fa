"""
Error Handler
Per-interaction error containment and user notification
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from utils.discord import DiscordUtils
from utils.logger import get_logger
from utils.monitoring import Monitoring

ERROR_REPLY = "There was an error while executing this command!"


class ErrorHandler:
    """
    Keeps a failing interaction from escaping the router.

    Every failure is logged with its context and the caller is told,
    best-effort, through an ephemeral reply or follow-up.
    """

    def __init__(self, monitoring: Optional[Monitoring] = None):
        self.logger = get_logger("ErrorHandler")
        self.monitoring = monitoring

    @asynccontextmanager
    async def contain(self, interaction: Any, context: str, caller: str) -> AsyncIterator[None]:
        """
        Wrap one router invocation.

        Args:
            interaction: The interaction being handled
            context: Command name or custom ID, for the log line
            caller: Caller identity, for the log line
        """
        try:
            yield
        except Exception as e:
            await self.handle_exception(interaction, e, context, caller)

    async def handle_exception(self, interaction: Any, error: Exception, context: str, caller: str) -> None:
        """
        Log a failed interaction and notify the caller.

        Args:
            interaction: The interaction that failed
            error: The exception raised
            context: Command name or custom ID
            caller: Caller identity
        """
        self.logger.error(
            f"Error handling interaction [{context}] for {caller}: {error}",
            exc_info=(type(error), error, error.__traceback__),
        )
        if self.monitoring:
            self.monitoring.record_error()

        await self.notify_failure(interaction)

    async def notify_failure(self, interaction: Any) -> None:
        """Tell the caller something went wrong. Never raises."""
        if DiscordUtils.has_responded(interaction):
            try:
                await interaction.followup.send(ERROR_REPLY, ephemeral=True)
            except Exception as e:
                self.logger.error(f"Could not send error followup: {e}")
        else:
            try:
                await interaction.response.send_message(ERROR_REPLY, ephemeral=True)
            except Exception as e:
                self.logger.error(f"Could not send error reply: {e}")
