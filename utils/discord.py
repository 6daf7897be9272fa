"""
Discord Utilities
Interaction classification and reply helpers
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

import discord


@dataclass(frozen=True)
class ChatInputCommand:
    """A slash-command invocation."""

    command_name: str
    caller_id: int
    caller_tag: str
    interaction: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class ComponentInteraction:
    """A message component (button, select) interaction."""

    custom_id: str
    caller_id: int
    interaction: Any = field(default=None, compare=False, repr=False)


InteractionEvent = Union[ChatInputCommand, ComponentInteraction]


class DiscordUtils:
    """Utility class for Discord-related helper functions."""

    @staticmethod
    def classify_interaction(interaction: Any) -> Optional[InteractionEvent]:
        """
        Turn a raw interaction into a routed event.

        Args:
            interaction: discord.Interaction

        Returns:
            ChatInputCommand, ComponentInteraction, or None for anything else
            (autocomplete, modals, context menus)
        """
        data = interaction.data or {}
        user = interaction.user

        if interaction.type == discord.InteractionType.application_command:
            if data.get("type", discord.AppCommandType.chat_input.value) != discord.AppCommandType.chat_input.value:
                return None
            return ChatInputCommand(
                command_name=data.get("name", ""),
                caller_id=user.id,
                caller_tag=str(user),
                interaction=interaction,
            )

        if interaction.type == discord.InteractionType.component:
            return ComponentInteraction(
                custom_id=data.get("custom_id", ""),
                caller_id=user.id,
                interaction=interaction,
            )

        return None

    @staticmethod
    def has_responded(interaction: Any) -> bool:
        """True once the interaction has been replied to or deferred."""
        return interaction.response.is_done()

    @staticmethod
    async def send_ephemeral(interaction: Any, content: str) -> None:
        """
        Send a message only the invoking user can see.

        Uses the initial response if it is still available, otherwise a
        follow-up.

        Args:
            interaction: discord.Interaction
            content: Message content
        """
        if DiscordUtils.has_responded(interaction):
            await interaction.followup.send(content, ephemeral=True)
        else:
            await interaction.response.send_message(content, ephemeral=True)
