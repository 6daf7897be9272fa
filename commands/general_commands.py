"""
General Commands
Built-in /ping, /help and /ticket slash commands
"""

from typing import Any

from commands.command_registry import CommandRegistry
from managers.ticket_manager import TicketManager


def register_general_commands(registry: CommandRegistry) -> None:
    """Register /ping and /help."""

    async def ping(interaction: Any, client: Any) -> None:
        await interaction.response.send_message(f"🏓 Pong! Latency: {client.latency * 1000:.0f}ms")

    async def help_command(interaction: Any, client: Any) -> None:
        await interaction.response.send_message(registry.generate_help(), ephemeral=True)

    registry.register(
        {
            "name": "ping",
            "description": "Check that the bot is responsive",
            "cooldown": 3,
        },
        ping,
    )
    registry.register(
        {
            "name": "help",
            "description": "List available commands",
            "cooldown": 5,
        },
        help_command,
    )


def register_ticket_commands(registry: CommandRegistry, tickets: TicketManager) -> None:
    """Register /ticket, which posts the ticket panel."""

    async def ticket(interaction: Any, client: Any) -> None:
        await interaction.response.send_message(
            "Need help? Click below to open a private support ticket.",
            view=tickets.build_panel(),
        )

    registry.register(
        {
            "name": "ticket",
            "description": "Post the support ticket panel in this channel",
            "cooldown": 10,
        },
        ticket,
    )
