"""
Interaction Router
Dispatches slash commands and component clicks to their handlers
"""

from typing import Any, Awaitable, Callable, Dict, Optional

from commands.command_registry import CommandRegistry
from managers.cooldown_registry import CooldownRegistry
from utils.discord import ChatInputCommand, ComponentInteraction, DiscordUtils, InteractionEvent
from utils.error_handler import ErrorHandler
from utils.logger import get_logger
from utils.monitoring import Monitoring

# Component delegate type alias: (interaction, client) -> awaitable
ComponentHandler = Callable[[Any, Any], Awaitable[Any]]


class InteractionRouter:
    """Routes each inbound interaction to exactly one handler."""

    def __init__(
        self,
        client: Any,
        registry: CommandRegistry,
        cooldowns: CooldownRegistry,
        error_handler: Optional[ErrorHandler] = None,
        monitoring: Optional[Monitoring] = None,
    ):
        self.logger = get_logger("Router")
        self.client = client
        self.registry = registry
        self.cooldowns = cooldowns
        self.monitoring = monitoring
        self.error_handler = error_handler or ErrorHandler(monitoring)
        self.delegates: Dict[str, ComponentHandler] = {}

    def register_delegate(self, prefix: str, handler: ComponentHandler) -> None:
        """
        Route component interactions whose custom ID starts with prefix.

        Args:
            prefix: custom_id namespace, e.g. "ticket_"
            handler: Async function taking (interaction, client)
        """
        if not prefix:
            raise ValueError("Delegate prefix must not be empty")
        if prefix in self.delegates:
            raise ValueError(f"Delegate already registered for prefix: {prefix}")
        self.delegates[prefix] = handler
        self.logger.debug(f"Registered component delegate: {prefix}")

    def find_delegate(self, custom_id: str) -> Optional[ComponentHandler]:
        for prefix, handler in self.delegates.items():
            if custom_id.startswith(prefix):
                return handler
        return None

    async def handle_interaction(self, interaction: Any) -> None:
        """Entry point for the gateway's interaction event."""
        event = DiscordUtils.classify_interaction(interaction)
        if event is None:
            return
        await self.route(event)

    async def route(self, event: InteractionEvent) -> None:
        """
        Dispatch an event to a command or component handler.

        Args:
            event: Classified interaction event
        """
        if isinstance(event, ChatInputCommand):
            await self._route_command(event)
        elif isinstance(event, ComponentInteraction):
            await self._route_component(event)

    async def _route_command(self, event: ChatInputCommand) -> None:
        command = self.registry.get(event.command_name)
        if command is None:
            self.logger.warning(f"Command not found: {event.command_name}")
            return

        interaction = event.interaction

        # Check and record happen without a suspension point in between
        result = self.cooldowns.check_and_record(command.name, event.caller_id, command.cooldown)

        if result.throttled:
            if self.monitoring:
                self.monitoring.record_throttle()
            async with self.error_handler.contain(interaction, command.name, event.caller_tag):
                await interaction.response.send_message(
                    f"Please wait {result.remaining:.1f} more seconds before using the `{command.name}` command.",
                    ephemeral=True,
                )
            return

        async with self.error_handler.contain(interaction, command.name, event.caller_tag):
            await command.execute(interaction, self.client)
            if self.monitoring:
                self.monitoring.record_command()
            self.logger.info(f"Command executed: {command.name} by {event.caller_tag}")

    async def _route_component(self, event: ComponentInteraction) -> None:
        handler = self.find_delegate(event.custom_id)
        if handler is None:
            self.logger.debug(f"Ignoring component interaction: {event.custom_id}")
            return

        async with self.error_handler.contain(event.interaction, event.custom_id, str(event.caller_id)):
            await handler(event.interaction, self.client)
            if self.monitoring:
                self.monitoring.record_component()
