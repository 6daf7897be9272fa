"""
Discord bot client setup using discord.py.
"""

from typing import Any, Dict, Optional

import discord

from bot.config import Config
from bot.keep_alive import KeepAliveServer
from bot.lifecycle import LifecycleManager
from commands import build_registry, deploy_commands
from managers.cooldown_registry import CooldownRegistry
from managers.event_handler import ERROR, INTERACTION, MEMBER_JOIN, READY, EventCallback, EventHandler
from managers.interaction_router import InteractionRouter
from managers.ticket_manager import TicketManager
from utils.error_handler import ErrorHandler
from utils.logger import get_logger
from utils.monitoring import Monitoring

logger = get_logger("Client")


def default_intents() -> discord.Intents:
    intents = discord.Intents.default()
    # Needed for member join events
    intents.members = True
    return intents


class BotClient(discord.Client):
    """Discord client that forwards gateway events to an event table."""

    def __init__(self, intents: Optional[discord.Intents] = None):
        super().__init__(intents=intents or default_intents())
        self.events: Dict[str, EventCallback] = {}

    def bind_events(self, table: Dict[str, EventCallback]) -> None:
        """Install the event -> handler table."""
        self.events = dict(table)

    async def _emit(self, name: str, *args: Any, **kwargs: Any) -> None:
        handler = self.events.get(name)
        if handler is not None:
            await handler(*args, **kwargs)

    async def on_ready(self):
        """Called when the gateway session is ready."""
        await self._emit(READY)

    async def on_interaction(self, interaction: discord.Interaction):
        await self._emit(INTERACTION, interaction)

    async def on_member_join(self, member: discord.Member):
        await self._emit(MEMBER_JOIN, member)

    async def on_error(self, event_method: str, *args: Any, **kwargs: Any) -> None:
        if ERROR not in self.events:
            await super().on_error(event_method, *args, **kwargs)
            return
        await self._emit(ERROR, event_method, *args, **kwargs)


async def set_presence(client: discord.Client) -> None:
    await client.change_presence(
        activity=discord.Activity(type=discord.ActivityType.listening, name="your commands")
    )


def create_bot(config: Config) -> LifecycleManager:
    """
    Wire the client, router and lifecycle together.

    Args:
        config: Loaded configuration

    Returns:
        Lifecycle manager; await its run() to start the bot
    """
    logger.info("Setting up bot...")

    monitoring = Monitoring()
    client = BotClient()
    monitoring.client = client

    tickets = TicketManager()
    registry = build_registry(tickets)
    cooldowns = CooldownRegistry()

    router = InteractionRouter(client, registry, cooldowns, ErrorHandler(monitoring), monitoring)
    router.register_delegate(tickets.prefix, tickets.handle_button)

    lifecycle = LifecycleManager(config, client)

    if config.KEEP_ALIVE:
        def status() -> Dict[str, Any]:
            return {
                "state": lifecycle.state.value,
                "ready": lifecycle.is_ready,
                "metrics": {**monitoring.get_full_status(), "activeCooldowns": cooldowns.active_count()},
            }

        lifecycle.keep_alive = KeepAliveServer(status, host=config.HOST, port=config.PORT)

    async def register_commands(bot: discord.Client) -> None:
        await deploy_commands(bot, registry, config.CLIENT_ID, config.GUILD_ID or None)

    lifecycle.add_startup_action("presence", set_presence)
    lifecycle.add_startup_action("register commands", register_commands)
    lifecycle.add_startup_action("ticket system", tickets.initialize)

    events = EventHandler(lifecycle, router, monitoring)
    client.bind_events(events.table())

    return lifecycle


async def run_bot(config: Optional[Config] = None) -> int:
    """
    Run the bot.

    Returns:
        Process exit status
    """
    if config is None:
        config = Config.from_env()

    lifecycle = create_bot(config)
    return await lifecycle.run()
