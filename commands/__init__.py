"""
Command system for the interaction bot.
"""

from typing import Optional

from .command_registry import CommandRegistry, Command, CommandDefinition
from .deploy import deploy_commands
from .general_commands import register_general_commands, register_ticket_commands
from managers.ticket_manager import TicketManager


def build_registry(tickets: Optional[TicketManager] = None) -> CommandRegistry:
    """Create a registry populated with the built-in commands."""
    registry = CommandRegistry()
    register_general_commands(registry)
    if tickets is not None:
        register_ticket_commands(registry, tickets)
    registry.logger.info(f"Registered {len(registry)} commands")
    return registry


__all__ = [
    "CommandRegistry",
    "Command",
    "CommandDefinition",
    "build_registry",
    "deploy_commands",
]
