"""
Ticket Manager
Support tickets as private threads, driven by ticket_* buttons
"""

from typing import Any, Dict

import discord

from utils.discord import DiscordUtils
from utils.logger import LoggerMixin

TICKET_PREFIX = "ticket_"
OPEN_TICKET_ID = "ticket_open"
CLOSE_TICKET_ID = "ticket_close"


class TicketManager(LoggerMixin):
    """Opens and closes support tickets. Ticket state lives in memory only."""

    prefix = TICKET_PREFIX

    def __init__(self):
        super().__init__("Tickets")
        # user ID -> thread ID
        self.open_tickets: Dict[int, int] = {}

    async def initialize(self, client: Any) -> None:
        """Ready-time setup."""
        self.open_tickets.clear()
        self.info("Ticket system initialized")

    def build_panel(self) -> discord.ui.View:
        """View with the button that opens a ticket."""
        view = discord.ui.View(timeout=None)
        view.add_item(discord.ui.Button(
            label="Open Ticket",
            style=discord.ButtonStyle.primary,
            custom_id=OPEN_TICKET_ID,
        ))
        return view

    def build_close_view(self) -> discord.ui.View:
        view = discord.ui.View(timeout=None)
        view.add_item(discord.ui.Button(
            label="Close Ticket",
            style=discord.ButtonStyle.danger,
            custom_id=CLOSE_TICKET_ID,
        ))
        return view

    async def handle_button(self, interaction: Any, client: Any) -> None:
        """
        Handle a ticket_* component interaction.

        Args:
            interaction: discord.Interaction
            client: Bot client
        """
        custom_id = (interaction.data or {}).get("custom_id", "")

        if custom_id == OPEN_TICKET_ID:
            await self.open_ticket(interaction)
        elif custom_id == CLOSE_TICKET_ID:
            await self.close_ticket(interaction)
        else:
            self.warning(f"Unknown ticket action: {custom_id}")

    async def open_ticket(self, interaction: Any) -> None:
        user = interaction.user
        channel = interaction.channel

        existing = self.open_tickets.get(user.id)
        if existing is not None:
            await DiscordUtils.send_ephemeral(interaction, f"You already have an open ticket: <#{existing}>")
            return

        if not isinstance(channel, discord.TextChannel):
            await DiscordUtils.send_ephemeral(interaction, "Tickets can only be opened from a server text channel.")
            return

        # Thread setup takes several API calls; acknowledge within the reply deadline
        await interaction.response.defer(ephemeral=True, thinking=True)

        thread = await channel.create_thread(
            name=f"ticket-{user.name}",
            type=discord.ChannelType.private_thread,
            invitable=False,
        )
        await thread.add_user(user)
        await thread.send(
            f"{user.mention} Thanks for reaching out! Describe your issue and staff will be with you shortly.",
            view=self.build_close_view(),
        )

        self.open_tickets[user.id] = thread.id
        self.info(f"Ticket opened: {thread.name} ({thread.id}) by {user}")
        await DiscordUtils.send_ephemeral(interaction, f"Ticket created: {thread.mention}")

    async def close_ticket(self, interaction: Any) -> None:
        channel = interaction.channel

        owner_id = next(
            (uid for uid, thread_id in self.open_tickets.items() if channel is not None and thread_id == channel.id),
            None,
        )
        if owner_id is None:
            await DiscordUtils.send_ephemeral(interaction, "This is not an open ticket.")
            return

        await interaction.response.send_message(f"Ticket closed by {interaction.user.mention}.")
        await channel.edit(archived=True, locked=True)
        del self.open_tickets[owner_id]
        self.info(f"Ticket closed: {channel.id} by {interaction.user}")
